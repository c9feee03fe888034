"""
ingestion package marker.
"""

from ingestion.amounts import parse_amount
from ingestion.dates import parse_date
from ingestion.format_detector import FormatDetector, detect_format
from ingestion.row_parser import RowParser, parse_sales_text

__all__ = [
    "FormatDetector",
    "RowParser",
    "detect_format",
    "parse_amount",
    "parse_date",
    "parse_sales_text",
]
