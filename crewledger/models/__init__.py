from .burndown import BurndownPoint, BurndownResponse, BurndownStatus
from .costs import (
    CompanyCostRollup,
    CostAggregates,
    CostEntry,
    CostReportResponse,
    ProjectCostRollup,
    WorkerCostRollup,
)
from .export import ExportTable, ExportValue
from .hours_trend import (
    HoursTrend,
    HoursTrendPeak,
    HoursTrendPoint,
    HoursTrendResponse,
    HoursTrendSummary,
    TrendPeriod,
)
from .reconciliation import (
    ReconciliationRecord,
    ReconciliationStatus,
    ReconciliationSummary,
    VerificationResponse,
)
from .records import (
    ApprovalStatus,
    ClockEvent,
    ContractBudget,
    LaborSubmission,
    RateEntry,
    WorkerProfile,
)

__all__ = [
    "ApprovalStatus",
    "BurndownPoint",
    "BurndownResponse",
    "BurndownStatus",
    "ClockEvent",
    "CompanyCostRollup",
    "ContractBudget",
    "CostAggregates",
    "CostEntry",
    "CostReportResponse",
    "ExportTable",
    "ExportValue",
    "HoursTrend",
    "HoursTrendPeak",
    "HoursTrendPoint",
    "HoursTrendResponse",
    "HoursTrendSummary",
    "LaborSubmission",
    "ProjectCostRollup",
    "RateEntry",
    "ReconciliationRecord",
    "ReconciliationStatus",
    "ReconciliationSummary",
    "TrendPeriod",
    "VerificationResponse",
    "WorkerCostRollup",
    "WorkerProfile",
]
