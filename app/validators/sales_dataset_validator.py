"""
app/validators/sales_dataset_validator.py

Dataset-level sanity checks run on parsed sales records before analysis.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from app.config import AnalysisSettings, get_analysis_settings
from app.domain.sales import SalesRecord

logger = logging.getLogger(__name__)

EVENT_KEYWORDS: tuple[str, ...] = (
    "festival",
    "parade",
    "koningsdag",
    "pride",
    "uitmarkt",
    "canal parade",
    "kingsday",
)

WEEKDAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

SAMPLE_ROWS = 3
REPORT_MAX_LOCATIONS = 8
VALID_CONCLUSION = "Data ready for analysis"
INVALID_CONCLUSION = "Data has problems that need attention"


class IssueSeverity(str, Enum):
    CRITICAL = "critical"
    ADVISORY = "advisory"


@dataclass(frozen=True)
class ValidationIssue:
    """
    One finding about the dataset.

    ``count`` is the number of affected rows, or 1 for whole-dataset findings.
    """

    code: str
    severity: IssueSeverity
    message: str
    count: int = 1
    details: tuple[str, ...] = ()

    @property
    def is_critical(self) -> bool:
        return self.severity is IssueSeverity.CRITICAL


@dataclass(frozen=True)
class LocationCount:
    name: str
    count: int


@dataclass(frozen=True)
class WeekdayShare:
    weekday: int
    day_name: str
    count: int
    percentage: float


@dataclass(frozen=True)
class SampleRow:
    index: int
    date: str
    location: str
    amount: float


@dataclass(frozen=True)
class ValidationResult:
    """
    Verdict and supporting facts for one dataset.
    """

    is_valid: bool
    row_count: int
    issues: tuple[ValidationIssue, ...]
    location_counts: tuple[LocationCount, ...]
    weekday_distribution: tuple[WeekdayShare, ...]
    sample: tuple[SampleRow, ...]
    conclusion: str
    columns_found: tuple[str, ...] = field(default=("date", "location", "amount"))

    @property
    def critical_issues(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.is_critical)

    @property
    def advisory_issues(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if not issue.is_critical)


class SalesDatasetValidator:
    """
    Read-only quality checks over a list of parsed sales records.
    """

    def __init__(self, settings: AnalysisSettings | None = None) -> None:
        self._settings = settings or get_analysis_settings()

    def validate(self, records: Sequence[SalesRecord]) -> ValidationResult:
        location_counts = self.count_locations(records)
        weekday_distribution = self.weekday_distribution(records)

        issues: list[ValidationIssue] = []
        row_count_issue = self._check_row_count(len(records))
        if row_count_issue is not None:
            issues.append(row_count_issue)
        issues.extend(self._check_event_locations(location_counts))
        skew_issue = self._check_weekday_skew(weekday_distribution)
        if skew_issue is not None:
            issues.append(skew_issue)
        duplicate_issue = self._check_duplicates(records)
        if duplicate_issue is not None:
            issues.append(duplicate_issue)
        outlier_issue = self._check_outliers(records)
        if outlier_issue is not None:
            issues.append(outlier_issue)

        is_valid = len(records) >= self._settings.min_valid_rows and not any(
            issue.is_critical for issue in issues
        )
        result = ValidationResult(
            is_valid=is_valid,
            row_count=len(records),
            issues=tuple(issues),
            location_counts=location_counts,
            weekday_distribution=weekday_distribution,
            sample=tuple(
                SampleRow(
                    index=index,
                    date=record.iso_date,
                    location=record.location,
                    amount=record.amount,
                )
                for index, record in enumerate(records[:SAMPLE_ROWS], start=1)
            ),
            conclusion=VALID_CONCLUSION if is_valid else INVALID_CONCLUSION,
        )
        logger.info(
            "Validated sales dataset rows=%d valid=%s critical=%d advisory=%d",
            result.row_count,
            result.is_valid,
            len(result.critical_issues),
            len(result.advisory_issues),
        )
        return result

    # ------------------------------------------------------------------
    # Facts
    # ------------------------------------------------------------------

    @staticmethod
    def count_locations(records: Sequence[SalesRecord]) -> tuple[LocationCount, ...]:
        counts = Counter(record.location.strip() for record in records)
        # Counter.most_common keeps first-seen order among equal counts.
        return tuple(LocationCount(name=name, count=count) for name, count in counts.most_common())

    @staticmethod
    def weekday_distribution(records: Sequence[SalesRecord]) -> tuple[WeekdayShare, ...]:
        counts = Counter(record.weekday for record in records)
        total = len(records)
        return tuple(
            WeekdayShare(
                weekday=weekday,
                day_name=WEEKDAY_NAMES[weekday],
                count=counts.get(weekday, 0),
                percentage=(counts.get(weekday, 0) / total * 100) if total else 0.0,
            )
            for weekday in range(7)
        )

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_row_count(self, row_count: int) -> ValidationIssue | None:
        if row_count < self._settings.min_valid_rows:
            severity = IssueSeverity.CRITICAL
        elif row_count < self._settings.min_recommended_rows:
            severity = IssueSeverity.ADVISORY
        else:
            return None
        return ValidationIssue(
            code="low_row_count",
            severity=severity,
            message=(
                f"Only {row_count} rows of data "
                f"(minimum {self._settings.min_recommended_rows} recommended)"
            ),
            count=row_count,
        )

    @staticmethod
    def _check_event_locations(location_counts: Sequence[LocationCount]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for location in location_counts:
            lowered = location.name.lower()
            if any(keyword in lowered for keyword in EVENT_KEYWORDS):
                issues.append(
                    ValidationIssue(
                        code="event_location",
                        severity=IssueSeverity.ADVISORY,
                        message=f'Location "{location.name}" looks like an event, not a location',
                        count=location.count,
                    )
                )
        return issues

    def _check_weekday_skew(self, distribution: Sequence[WeekdayShare]) -> ValidationIssue | None:
        if not distribution or all(share.count == 0 for share in distribution):
            return None
        dominant = distribution[0]
        for share in distribution[1:]:
            if share.percentage > dominant.percentage:
                dominant = share
        if dominant.percentage <= self._settings.weekday_skew_percent:
            return None
        return ValidationIssue(
            code="weekday_skew",
            severity=IssueSeverity.ADVISORY,
            message=f"{round(dominant.percentage)}% of data falls on {dominant.day_name} (expected ~14%)",
            count=dominant.count,
        )

    @staticmethod
    def _check_duplicates(records: Sequence[SalesRecord]) -> ValidationIssue | None:
        seen: set[tuple[str, str]] = set()
        duplicates: list[str] = []
        for record in records:
            key = (record.iso_date, record.location.strip())
            if key in seen:
                duplicates.append(f"{key[0]}-{key[1]}")
            else:
                seen.add(key)
        if not duplicates:
            return None
        return ValidationIssue(
            code="duplicate_date_location",
            severity=IssueSeverity.CRITICAL,
            message=f"{len(duplicates)} duplicate date/location combinations found",
            count=len(duplicates),
            details=tuple(duplicates),
        )

    def _check_outliers(self, records: Sequence[SalesRecord]) -> ValidationIssue | None:
        if not records:
            return None
        mean = sum(record.amount for record in records) / len(records)
        high = mean * self._settings.outlier_high_factor
        low = mean * self._settings.outlier_low_factor
        outliers = [record for record in records if record.amount > high or record.amount < low]
        if not outliers:
            return None
        return ValidationIssue(
            code="revenue_outliers",
            severity=IssueSeverity.ADVISORY,
            message=f"{len(outliers)} revenue values look unrealistic",
            count=len(outliers),
        )


def render_validation_report(result: ValidationResult, settings: AnalysisSettings | None = None) -> str:
    """
    Render the plain-text validation report shown to uploaders.
    """

    settings = settings or get_analysis_settings()
    row_mark = "✓" if result.row_count >= settings.min_recommended_rows else "✗"
    lines = [
        "DATA VALIDATION REPORT",
        "======================",
        "",
        "BASIC CHECKS:",
        f"{row_mark} Row count: {result.row_count}",
        f"✓ Columns found: [{', '.join(result.columns_found)}]",
        "",
        f"SAMPLE DATA (first {SAMPLE_ROWS} rows):",
    ]
    lines.extend(
        f"{row.index}. {row.date} | {row.location} | {row.amount:g}" for row in result.sample
    )

    lines.extend(["", "LOCATIONS FOUND:"])
    lines.extend(
        f"- {location.name} ({location.count}x)"
        for location in result.location_counts[:REPORT_MAX_LOCATIONS]
    )
    if len(result.location_counts) > REPORT_MAX_LOCATIONS:
        lines.append(f"... and {len(result.location_counts) - REPORT_MAX_LOCATIONS} more")

    lines.extend(["", "DATA ISSUES:"])
    if result.issues:
        lines.extend(
            f"{'✗' if issue.is_critical else '⚠'} {issue.message}" for issue in result.issues
        )
    else:
        lines.append("✓ No problems found")

    lines.extend(["", "CONCLUSION:", f"{'✓' if result.is_valid else '✗'} {result.conclusion}"])
    return "\n".join(lines)


__all__ = [
    "EVENT_KEYWORDS",
    "IssueSeverity",
    "LocationCount",
    "SalesDatasetValidator",
    "SampleRow",
    "ValidationIssue",
    "ValidationResult",
    "WeekdayShare",
    "render_validation_report",
]
