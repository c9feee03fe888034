"""
app/domain/errors.py

Dataset-level failures surfaced to callers of the analysis pipeline.

Row-level problems never raise; they are collected as ``ParseError`` values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.validators.sales_dataset_validator import ValidationResult


class SalesAnalysisError(ValueError):
    """
    Base class for failures that leave nothing to analyze.
    """

    code = "sales_analysis_error"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": str(self)}


class UnsupportedUploadError(SalesAnalysisError):
    """
    Raised when an upload is binary, too large, or not decodable as text.
    """

    code = "unsupported_upload"


class EmptyDatasetError(SalesAnalysisError):
    """
    Raised when no sales record could be parsed or analyzed.
    """

    code = "empty_dataset"


class InvalidDatasetError(SalesAnalysisError):
    """
    Raised when dataset validation reports a critical issue.
    """

    code = "invalid_dataset"

    def __init__(self, message: str, *, validation: "ValidationResult") -> None:
        super().__init__(message)
        self.validation = validation

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": str(self),
            "issues": [
                {
                    "code": issue.code,
                    "severity": issue.severity.value,
                    "message": issue.message,
                    "count": issue.count,
                }
                for issue in self.validation.issues
            ],
        }


class NoMatchingWeatherDataError(SalesAnalysisError):
    """
    Raised when weather correlation is requested but no sales date has an
    observation.
    """

    code = "no_matching_weather_data"
