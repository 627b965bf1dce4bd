"""
Pydantic models for ClauseLens.

This module contains all data models used throughout the application:
- Risk flag and clause explanation models with their closed enumerations
- The ContractAnalysis aggregate and its optional sections
- Contract models with the processing lifecycle
- Comparison and portfolio analytics results
"""

from clauselens.models.analysis import (
    AnalysisMetadata,
    ContractAnalysis,
    ContractDates,
    ContractMetadata,
    FinancialDetails,
    KeyParties,
    LegalInfo,
    PaymentAmount,
    PerformanceMetrics,
    StructuredTerms,
)
from clauselens.models.analytics import (
    PortfolioAnalytics,
    PortfolioMetrics,
    RiskDistribution,
    TimePeriod,
)
from clauselens.models.comparison import (
    ComparedContract,
    ComparisonResult,
    RiskDifferences,
    RiskLevelRow,
)
from clauselens.models.contract import Contract, ContractStatus, FileType
from clauselens.models.risk import (
    ClauseExplanation,
    ClauseImportance,
    RiskFlag,
    RiskSeverity,
    RiskType,
)

__all__ = [
    # Risk models
    "ClauseExplanation",
    "ClauseImportance",
    "RiskFlag",
    "RiskSeverity",
    "RiskType",
    # Analysis models
    "AnalysisMetadata",
    "ContractAnalysis",
    "ContractDates",
    "ContractMetadata",
    "FinancialDetails",
    "KeyParties",
    "LegalInfo",
    "PaymentAmount",
    "PerformanceMetrics",
    "StructuredTerms",
    # Contract models
    "Contract",
    "ContractStatus",
    "FileType",
    # Comparison models
    "ComparedContract",
    "ComparisonResult",
    "RiskDifferences",
    "RiskLevelRow",
    # Analytics models
    "PortfolioAnalytics",
    "PortfolioMetrics",
    "RiskDistribution",
    "TimePeriod",
]
