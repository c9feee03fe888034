"""
app/schemas package marker.
"""

from app.schemas.sales_analysis import SalesAnalysisResponse, ValidationIssueResponse, WeatherResponse

__all__ = [
    "SalesAnalysisResponse",
    "ValidationIssueResponse",
    "WeatherResponse",
]
