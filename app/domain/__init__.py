"""
app/domain package marker.
"""

from app.domain.errors import (
    EmptyDatasetError,
    InvalidDatasetError,
    NoMatchingWeatherDataError,
    SalesAnalysisError,
    UnsupportedUploadError,
)
from app.domain.sales import (
    ColumnMapping,
    ColumnRole,
    DateFormat,
    DetectedFormat,
    ParseError,
    ParseResult,
    SalesRecord,
    Separator,
)

__all__ = [
    "ColumnMapping",
    "ColumnRole",
    "DateFormat",
    "DetectedFormat",
    "EmptyDatasetError",
    "InvalidDatasetError",
    "NoMatchingWeatherDataError",
    "ParseError",
    "ParseResult",
    "SalesAnalysisError",
    "SalesRecord",
    "Separator",
    "UnsupportedUploadError",
]
