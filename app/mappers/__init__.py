"""
app/mappers package marker.
"""

from app.mappers.sales_report_mapper import to_sales_analysis_response

__all__ = [
    "to_sales_analysis_response",
]
