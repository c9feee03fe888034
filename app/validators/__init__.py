"""
app/validators package marker.
"""

from app.validators.sales_dataset_validator import (
    IssueSeverity,
    SalesDatasetValidator,
    ValidationIssue,
    ValidationResult,
    render_validation_report,
)

__all__ = [
    "IssueSeverity",
    "SalesDatasetValidator",
    "ValidationIssue",
    "ValidationResult",
    "render_validation_report",
]
