from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    database_url: str = "postgresql://localhost:5432/crewledger"
    feature_time_reporting: bool = False
    feature_time_verification: bool = False
    feature_cost_burndown: bool = False
    report_cache_ttl_seconds: float = 45.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def model_post_init(self, __context):
        # Backwards compatibility with the single reporting flag
        if self.feature_time_reporting:
            self.feature_time_verification = True
            self.feature_cost_burndown = True

settings = Settings()
