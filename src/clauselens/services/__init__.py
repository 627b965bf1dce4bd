"""
Services for ClauseLens.
"""

from clauselens.services.analytics import AnalyticsAggregator, aggregate
from clauselens.services.comparison import ComparableAnalysis, ComparisonEngine, compare
from clauselens.services.normalizer import AnalysisNormalizer, normalize
from clauselens.services.processor import ContractProcessor

__all__ = [
    "AnalysisNormalizer",
    "AnalyticsAggregator",
    "ComparableAnalysis",
    "ComparisonEngine",
    "ContractProcessor",
    "aggregate",
    "compare",
    "normalize",
]
