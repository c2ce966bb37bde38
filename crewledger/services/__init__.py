"""Service layer namespace."""

__all__ = [
    "burndown",
    "costs",
    "export",
    "hours_trend",
    "rates",
    "reconciliation",
    "reporting",
    "snapshot_cache",
]
