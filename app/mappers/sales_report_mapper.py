"""
app/mappers/sales_report_mapper.py

Maps the service-level SalesAnalysisReport onto response schemas.
"""

from __future__ import annotations

from app.schemas.sales_analysis import (
    ConditionImpactResponse,
    DayStatsResponse,
    DetectedFormatResponse,
    LocationCountResponse,
    LocationInsightResponse,
    LocationStatsResponse,
    LocationWeatherResponse,
    MonthStatsResponse,
    OverallSensitivityResponse,
    ParseErrorResponse,
    ParsingResponse,
    PrecipitationCorrelationResponse,
    SalesAnalysisResponse,
    ScenarioResponse,
    SummaryResponse,
    TemperatureCorrelationResponse,
    ValidationIssueResponse,
    ValidationResponse,
    WeatherCorrelationResponse,
    WeatherResponse,
)
from app.services.sales_analysis_service import SalesAnalysisReport, WeatherReport
from weather.models import LocationWeatherProfile, WeatherCorrelation

# Upper bound on parse errors echoed back in one response.
MAX_REPORTED_PARSE_ERRORS = 100


def _map_correlation(correlation: WeatherCorrelation) -> WeatherCorrelationResponse:
    return WeatherCorrelationResponse(
        temperature=TemperatureCorrelationResponse(
            correlation=correlation.temperature.correlation,
            optimal_range=correlation.temperature.optimal_range,
            impact=correlation.temperature.impact.value,
        ),
        precipitation=PrecipitationCorrelationResponse(
            correlation=correlation.precipitation.correlation,
            average_impact=correlation.precipitation.average_impact,
            description=correlation.precipitation.description,
        ),
        conditions=[
            ConditionImpactResponse(
                condition=impact.condition,
                average_revenue=impact.average_revenue,
                revenue_impact=impact.revenue_impact,
                transaction_count=impact.transaction_count,
                description=impact.description,
            )
            for impact in correlation.conditions
        ],
        matched_days=correlation.matched_days,
    )


def _map_location_profile(profile: LocationWeatherProfile) -> LocationWeatherResponse:
    return LocationWeatherResponse(
        location=profile.location,
        total_days=profile.total_days,
        baseline_revenue=profile.baseline_revenue,
        sensitivity_score=profile.sensitivity_score,
        sensitivity_level=profile.sensitivity_level.value,
        best_scenario=profile.best_scenario,
        worst_scenario=profile.worst_scenario,
        scenarios=[
            ScenarioResponse(
                scenario=stats.scenario,
                count=stats.count,
                average_revenue=stats.average_revenue,
                total_revenue=stats.total_revenue,
            )
            for stats in profile.scenarios
        ],
        insights=[
            LocationInsightResponse(
                kind=insight.kind.value,
                weather=insight.weather,
                message=insight.message,
                impact=insight.impact,
            )
            for insight in profile.insights
        ],
    )


def _map_weather(weather: WeatherReport) -> WeatherResponse:
    location_analysis = weather.location_analysis
    return WeatherResponse(
        has_weather_data=weather.has_weather_data,
        insights=list(weather.insights),
        correlation=_map_correlation(weather.correlation) if weather.correlation else None,
        locations=(
            [_map_location_profile(profile) for profile in location_analysis.locations]
            if location_analysis
            else []
        ),
        overall_sensitivity=(
            OverallSensitivityResponse(
                average_sensitivity=location_analysis.overall.average_sensitivity,
                most_sensitive=location_analysis.overall.most_sensitive,
                least_sensitive=location_analysis.overall.least_sensitive,
            )
            if location_analysis
            else None
        ),
    )


def to_sales_analysis_response(report: SalesAnalysisReport) -> SalesAnalysisResponse:
    parse_result = report.parse_result
    detected = parse_result.detected_format
    validation = report.validation
    analysis = report.analysis
    summary = analysis.summary

    return SalesAnalysisResponse(
        parsing=ParsingResponse(
            total_rows=parse_result.total_rows,
            successful_rows=parse_result.successful_rows,
            error_rows=parse_result.error_rows,
            detected_format=DetectedFormatResponse(
                separator=detected.separator.value,
                has_headers=detected.has_headers,
                date_format=detected.date_format.value,
                column_order=[role.value for role in detected.column_order],
            ),
            errors=[
                ParseErrorResponse(row_index=error.row_index, message=error.message)
                for error in parse_result.errors[:MAX_REPORTED_PARSE_ERRORS]
            ],
        ),
        validation=ValidationResponse(
            is_valid=validation.is_valid,
            row_count=validation.row_count,
            conclusion=validation.conclusion,
            issues=[
                ValidationIssueResponse(
                    code=issue.code,
                    severity=issue.severity.value,
                    message=issue.message,
                    count=issue.count,
                )
                for issue in validation.issues
            ],
            location_counts=[
                LocationCountResponse(name=location.name, count=location.count)
                for location in validation.location_counts
            ],
        ),
        summary=SummaryResponse(
            total_revenue=summary.total_revenue,
            total_transactions=summary.total_transactions,
            average_revenue=summary.average_revenue,
            best_location=summary.best_location,
            worst_location=summary.worst_location,
            start_date=summary.start_date.isoformat(),
            end_date=summary.end_date.isoformat(),
        ),
        locations=[
            LocationStatsResponse(
                name=location.name,
                total_revenue=location.total_revenue,
                average_revenue=location.average_revenue,
                transaction_count=location.transaction_count,
                best_day=location.best_day.isoformat(),
                worst_day=location.worst_day.isoformat(),
            )
            for location in analysis.locations
        ],
        day_of_week=[
            DayStatsResponse(
                weekday=day.weekday,
                day_name=day.day_name,
                total_revenue=day.total_revenue,
                average_revenue=day.average_revenue,
                transaction_count=day.transaction_count,
            )
            for day in analysis.day_of_week
        ],
        monthly=[
            MonthStatsResponse(
                month=month.month,
                month_name=month.month_name,
                total_revenue=month.total_revenue,
                average_revenue=month.average_revenue,
                transaction_count=month.transaction_count,
            )
            for month in analysis.monthly
        ],
        insights=list(analysis.insights),
        warnings=list(report.warnings),
        weather=_map_weather(report.weather) if report.weather else None,
    )
