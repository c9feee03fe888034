"""
app/api/routers package marker.
"""

from app.api.routers.sales_analysis import router as sales_analysis_router

__all__ = [
    "sales_analysis_router",
]
