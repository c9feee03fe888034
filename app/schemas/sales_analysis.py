"""
app/schemas/sales_analysis.py

Response schemas for the sales analysis endpoint and CLI output.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class DetectedFormatResponse(BaseModel):
    separator: str
    has_headers: bool
    date_format: str
    column_order: list[str]


class ParseErrorResponse(BaseModel):
    row_index: int = Field(..., ge=1)
    message: str


class ParsingResponse(BaseModel):
    """
    Row accounting for the uploaded payload.
    """

    total_rows: int = Field(..., ge=0)
    successful_rows: int = Field(..., ge=0)
    error_rows: int = Field(..., ge=0)
    detected_format: DetectedFormatResponse
    errors: list[ParseErrorResponse] = Field(default_factory=list)


class ValidationIssueResponse(BaseModel):
    code: str
    severity: Literal["critical", "advisory"]
    message: str
    count: int = Field(..., ge=0)


class LocationCountResponse(BaseModel):
    name: str
    count: int = Field(..., ge=1)


class ValidationResponse(BaseModel):
    is_valid: bool
    row_count: int = Field(..., ge=0)
    conclusion: str
    issues: list[ValidationIssueResponse] = Field(default_factory=list)
    location_counts: list[LocationCountResponse] = Field(default_factory=list)


class SummaryResponse(BaseModel):
    total_revenue: float
    total_transactions: int = Field(..., ge=1)
    average_revenue: float
    best_location: str
    worst_location: str
    start_date: str
    end_date: str


class LocationStatsResponse(BaseModel):
    name: str
    total_revenue: float
    average_revenue: float
    transaction_count: int = Field(..., ge=1)
    best_day: str
    worst_day: str


class DayStatsResponse(BaseModel):
    weekday: int = Field(..., ge=0, le=6)
    day_name: str
    total_revenue: float
    average_revenue: float
    transaction_count: int = Field(..., ge=1)


class MonthStatsResponse(BaseModel):
    month: str
    month_name: str
    total_revenue: float
    average_revenue: float
    transaction_count: int = Field(..., ge=1)


class TemperatureCorrelationResponse(BaseModel):
    correlation: float = Field(..., ge=-1.0, le=1.0)
    optimal_range: tuple[int, int]
    impact: Literal["positive", "negative", "neutral"]


class PrecipitationCorrelationResponse(BaseModel):
    correlation: float
    average_impact: int
    description: str


class ConditionImpactResponse(BaseModel):
    condition: str
    average_revenue: int
    revenue_impact: int
    transaction_count: int = Field(..., ge=2)
    description: str


class WeatherCorrelationResponse(BaseModel):
    temperature: TemperatureCorrelationResponse
    precipitation: PrecipitationCorrelationResponse
    conditions: list[ConditionImpactResponse] = Field(default_factory=list)
    matched_days: int = Field(..., ge=1)


class ScenarioResponse(BaseModel):
    scenario: str
    count: int = Field(..., ge=0)
    average_revenue: float
    total_revenue: float


class LocationInsightResponse(BaseModel):
    kind: Literal["positive", "negative", "neutral"]
    weather: str
    message: str
    impact: int


class LocationWeatherResponse(BaseModel):
    location: str
    total_days: int = Field(..., ge=1)
    baseline_revenue: float
    sensitivity_score: int = Field(..., ge=0, le=100)
    sensitivity_level: Literal["laag", "middel", "hoog"]
    best_scenario: str
    worst_scenario: str
    scenarios: list[ScenarioResponse]
    insights: list[LocationInsightResponse] = Field(default_factory=list)


class OverallSensitivityResponse(BaseModel):
    average_sensitivity: int = Field(..., ge=0, le=100)
    most_sensitive: str | None = None
    least_sensitive: str | None = None


class WeatherResponse(BaseModel):
    has_weather_data: bool
    insights: list[str] = Field(default_factory=list)
    correlation: WeatherCorrelationResponse | None = None
    locations: list[LocationWeatherResponse] = Field(default_factory=list)
    overall_sensitivity: OverallSensitivityResponse | None = None


class SalesAnalysisResponse(BaseModel):
    """
    API response model for one analyzed sales upload.
    """

    model_config = ConfigDict(extra="forbid")

    parsing: ParsingResponse
    validation: ValidationResponse
    summary: SummaryResponse
    locations: list[LocationStatsResponse]
    day_of_week: list[DayStatsResponse]
    monthly: list[MonthStatsResponse]
    insights: list[str]
    warnings: list[str] = Field(default_factory=list)
    weather: WeatherResponse | None = None
