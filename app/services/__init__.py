"""
app/services package marker.
"""

from app.services.sales_analysis_service import (
    SalesAnalysisReport,
    SalesAnalysisService,
    WeatherReport,
    get_sales_analysis_service,
)

__all__ = [
    "SalesAnalysisReport",
    "SalesAnalysisService",
    "WeatherReport",
    "get_sales_analysis_service",
]
