"""
app/services/sales_analysis_service.py

Service layer orchestrating the sales analysis pipeline:

    1. decode the upload into text
    2. detect the format and parse rows        (ingestion)
    3. validate the dataset                    (app.validators)
    4. aggregate revenue and insights          (analytics)
    5. optionally correlate with the weather   (weather)

Steps 2 to 4 stop the pipeline with a SalesAnalysisError subclass. A weather
join miss in step 5 only downgrades the report to a weather-free one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache

from analytics.models import AnalysisResult
from analytics.revenue_analyzer import RevenueAnalyzer
from app.config import (
    AnalysisSettings,
    UploadSettings,
    WeatherSettings,
    get_analysis_settings,
    get_upload_settings,
    get_weather_settings,
)
from app.domain.errors import (
    EmptyDatasetError,
    InvalidDatasetError,
    NoMatchingWeatherDataError,
    UnsupportedUploadError,
)
from app.domain.sales import ParseResult
from app.logging_utils import log_event, log_parse_summary
from app.validators.sales_dataset_validator import SalesDatasetValidator, ValidationResult
from ingestion.row_parser import parse_sales_text
from weather.correlation import WeatherCorrelationEngine
from weather.insights import generate_weather_insights
from weather.models import LocationWeatherAnalysis, WeatherCorrelation
from weather.providers import (
    CachedWeatherProvider,
    ClimateNormalsProvider,
    WeatherLocation,
    WeatherProvider,
    collect_observations,
)

logger = logging.getLogger(__name__)

# Leading bytes of container formats that are never plain-text sales files.
_BINARY_SIGNATURES: dict[bytes, str] = {
    b"PK\x03\x04": "ZIP/XLSX",
    b"\xd0\xcf\x11\xe0": "OLE2/XLS",
}
_BINARY_SNIFF_BYTES = 1024

NO_WEATHER_MATCH_INSIGHT = "Weather data could not be matched to any of your sales dates."
WEATHER_DISABLED_INSIGHT = "Weather correlation is disabled for this deployment."


@dataclass(frozen=True)
class WeatherReport:
    has_weather_data: bool
    insights: tuple[str, ...]
    correlation: WeatherCorrelation | None = None
    location_analysis: LocationWeatherAnalysis | None = None


@dataclass(frozen=True)
class SalesAnalysisReport:
    """
    Everything produced for one uploaded dataset.
    """

    parse_result: ParseResult
    validation: ValidationResult
    analysis: AnalysisResult
    weather: WeatherReport | None = None
    warnings: tuple[str, ...] = field(default=())


class SalesAnalysisService:
    """
    Runs parse, validate, analyze and weather correlation for one payload.
    """

    def __init__(
        self,
        *,
        analysis_settings: AnalysisSettings | None = None,
        upload_settings: UploadSettings | None = None,
        weather_settings: WeatherSettings | None = None,
        weather_provider: WeatherProvider | None = None,
    ) -> None:
        self._analysis_settings = analysis_settings or get_analysis_settings()
        self._upload_settings = upload_settings or get_upload_settings()
        self._weather_settings = weather_settings or get_weather_settings()
        self._validator = SalesDatasetValidator(self._analysis_settings)
        self._analyzer = RevenueAnalyzer()
        self._engine = WeatherCorrelationEngine()
        self._weather_provider = weather_provider or CachedWeatherProvider(ClimateNormalsProvider())

    def decode_upload(self, raw_bytes: bytes) -> str:
        """
        Decode an uploaded payload into text.

        Raises:
            UnsupportedUploadError: for oversize, binary, or undecodable payloads.
        """

        if len(raw_bytes) > self._upload_settings.max_upload_bytes:
            raise UnsupportedUploadError(
                f"Upload is {len(raw_bytes)} bytes; the limit is "
                f"{self._upload_settings.max_upload_bytes} bytes."
            )
        for signature, kind in _BINARY_SIGNATURES.items():
            if raw_bytes.startswith(signature):
                raise UnsupportedUploadError(
                    f"Upload looks like a {kind} file. Export it as CSV or plain text first."
                )
        if b"\x00" in raw_bytes[:_BINARY_SNIFF_BYTES]:
            raise UnsupportedUploadError("Upload contains binary data, not text.")

        try:
            return raw_bytes.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.info("Upload is not UTF-8; retrying as cp1252 bytes=%d", len(raw_bytes))
        try:
            return raw_bytes.decode("cp1252")
        except UnicodeDecodeError as exc:
            raise UnsupportedUploadError("Upload is not valid UTF-8 or Windows-1252 text.") from exc

    def analyze_upload(
        self,
        raw_bytes: bytes,
        *,
        include_weather: bool = False,
        location: WeatherLocation | None = None,
    ) -> SalesAnalysisReport:
        return self.analyze_text(
            self.decode_upload(raw_bytes),
            include_weather=include_weather,
            location=location,
        )

    def analyze_text(
        self,
        text: str,
        *,
        include_weather: bool = False,
        location: WeatherLocation | None = None,
    ) -> SalesAnalysisReport:
        """
        Run the full pipeline over a decoded payload.

        Raises:
            EmptyDatasetError: when no line could be parsed into a record.
            InvalidDatasetError: when validation reports a critical issue.
        """

        parse_result = parse_sales_text(text, settings=self._analysis_settings)
        log_parse_summary(logger, parse_result)
        if not parse_result.records:
            raise EmptyDatasetError(
                f"No valid sales rows found ({parse_result.error_rows} rows could not be parsed)."
            )

        records = list(parse_result.records)
        validation = self._validator.validate(records)
        if not validation.is_valid:
            log_event(
                logger,
                logging.WARNING,
                "sales_validation_failed",
                rows=validation.row_count,
                critical=[issue.code for issue in validation.critical_issues],
            )
            raise InvalidDatasetError(
                "Dataset failed validation: "
                + "; ".join(issue.message for issue in validation.critical_issues or validation.issues),
                validation=validation,
            )

        analysis = self._analyzer.analyze(records)
        weather = self._weather_report(parse_result, location) if include_weather else None

        warnings = tuple(issue.message for issue in validation.advisory_issues)
        log_event(
            logger,
            logging.INFO,
            "sales_analysis_completed",
            records=len(records),
            locations=len(analysis.locations),
            advisories=len(warnings),
            has_weather_data=weather.has_weather_data if weather else False,
        )
        return SalesAnalysisReport(
            parse_result=parse_result,
            validation=validation,
            analysis=analysis,
            weather=weather,
            warnings=warnings,
        )

    def _weather_report(self, parse_result: ParseResult, location: WeatherLocation | None) -> WeatherReport:
        if not self._weather_settings.enabled:
            logger.info("Weather correlation requested but disabled by settings")
            return WeatherReport(has_weather_data=False, insights=(WEATHER_DISABLED_INSIGHT,))

        records = list(parse_result.records)
        observations = collect_observations(records, self._weather_provider, location)
        try:
            correlation = self._engine.correlate(records, observations)
            location_analysis = self._engine.analyze_locations(records, observations)
        except NoMatchingWeatherDataError as exc:
            logger.warning("Weather correlation skipped reason=%s", exc)
            return WeatherReport(has_weather_data=False, insights=(NO_WEATHER_MATCH_INSIGHT,))

        return WeatherReport(
            has_weather_data=True,
            insights=tuple(generate_weather_insights(correlation)),
            correlation=correlation,
            location_analysis=location_analysis,
        )


@lru_cache(maxsize=1)
def get_sales_analysis_service() -> SalesAnalysisService:
    """
    Return the cached service instance used as a FastAPI dependency.
    """

    return SalesAnalysisService()
