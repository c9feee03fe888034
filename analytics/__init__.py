"""
analytics package marker.
"""

from analytics.models import AnalysisResult, AnalysisSummary, DayStats, LocationStats, MonthStats
from analytics.revenue_analyzer import RevenueAnalyzer, analyze_records

__all__ = [
    "AnalysisResult",
    "AnalysisSummary",
    "DayStats",
    "LocationStats",
    "MonthStats",
    "RevenueAnalyzer",
    "analyze_records",
]
