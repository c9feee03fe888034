"""
tests/test_weather_correlation.py

Pytest unit tests for the weather correlation engine, the per-location
scenario matrix and the numeric helpers behind them.
"""

from __future__ import annotations

import random

import pytest

from app.domain.errors import NoMatchingWeatherDataError
from factories import make_record
from weather.correlation import WeatherCorrelationEngine, describe_condition, join_observations
from weather.insights import FALLBACK_WEATHER_INSIGHT, generate_weather_insights
from weather.models import (
    ImpactDirection,
    JoinedDay,
    PrecipitationBand,
    SensitivityLevel,
    TemperatureBand,
    WeatherObservation,
    scenario_key,
)
from weather.scenarios import (
    analyze_location_matrix,
    build_location_profile,
    precipitation_band,
    sensitivity_level,
    sensitivity_score,
    temperature_band,
)
from weather.statistics import mean, pearson, round_to_hundredths


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def june_records():
    return [
        make_record("2024-06-01", "Dam Square", 300, row=1),
        make_record("2024-06-02", "Dam Square", 320, row=2),
        make_record("2024-06-03", "Dam Square", 500, row=3),
        make_record("2024-06-04", "Dam Square", 520, row=4),
        make_record("2024-06-05", "Dam Square", 200, row=5),
        make_record("2024-06-06", "Dam Square", 180, row=6),
    ]


@pytest.fixture()
def june_weather():
    return [
        WeatherObservation(date="2024-06-01", temperature=12, precipitation=0, weather_main="Clouds"),
        WeatherObservation(date="2024-06-02", temperature=14, precipitation=0, weather_main="Clouds"),
        WeatherObservation(date="2024-06-03", temperature=22, precipitation=0, weather_main="Clear"),
        WeatherObservation(date="2024-06-04", temperature=24, precipitation=0, weather_main="Clear"),
        WeatherObservation(date="2024-06-05", temperature=13, precipitation=6, weather_main="Rain"),
        WeatherObservation(date="2024-06-06", temperature=11, precipitation=8, weather_main="Rain"),
    ]


def _days(location: str, count: int, revenue: float, temperature: float, precipitation: float) -> list[JoinedDay]:
    return [
        JoinedDay(location=location, revenue=revenue, temperature=temperature, precipitation=precipitation)
        for _ in range(count)
    ]


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class TestStatistics:
    def test_perfect_correlations(self) -> None:
        assert pearson([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)
        assert pearson([1, 2, 3], [6, 4, 2]) == pytest.approx(-1.0)

    def test_degenerate_inputs_return_zero(self) -> None:
        assert pearson([1], [2]) == 0.0
        assert pearson([1, 1, 1], [2, 3, 4]) == 0.0
        assert pearson([1, 2], [1, 2, 3]) == 0.0

    def test_mean_default(self) -> None:
        assert mean([]) == 0.0
        assert mean([], default=7.0) == 7.0
        assert mean([1, 2, 3]) == 2.0

    def test_round_to_hundredths_goes_half_up(self) -> None:
        assert round_to_hundredths(0.125) == 0.13
        assert round_to_hundredths(-0.6535) == -0.65


# ---------------------------------------------------------------------------
# Correlation engine
# ---------------------------------------------------------------------------


class TestJoin:
    def test_unmatched_records_are_dropped(self, june_records, june_weather) -> None:
        joined = join_observations(june_records, june_weather[:2])
        assert [day.revenue for day in joined] == [300, 320]

    def test_no_match_raises(self, june_records) -> None:
        other = [WeatherObservation(date="2023-01-01", temperature=5, precipitation=0)]
        with pytest.raises(NoMatchingWeatherDataError):
            join_observations(june_records, other)


class TestCorrelate:
    def test_temperature(self, june_records, june_weather) -> None:
        result = WeatherCorrelationEngine().correlate(june_records, june_weather)
        assert result.matched_days == 6
        assert result.temperature.impact is ImpactDirection.POSITIVE
        assert result.temperature.correlation > 0.3
        assert result.temperature.optimal_range == (20, 25)

    def test_precipitation(self, june_records, june_weather) -> None:
        precipitation = WeatherCorrelationEngine().correlate(june_records, june_weather).precipitation
        assert precipitation.average_impact == -220
        assert precipitation.description == "Rain lowers revenue by €220 on average"
        assert precipitation.correlation == -0.65

    def test_conditions_sorted_by_impact(self, june_records, june_weather) -> None:
        conditions = WeatherCorrelationEngine().correlate(june_records, june_weather).conditions
        assert [(c.condition, c.average_revenue, c.revenue_impact) for c in conditions] == [
            ("Clear", 510, 173),
            ("Clouds", 310, -27),
            ("Rain", 190, -147),
        ]
        assert conditions[0].description == "Clear raises revenue by €173 on average"

    def test_without_rain(self, june_records, june_weather) -> None:
        dry = [
            WeatherObservation(date=obs.date, temperature=obs.temperature, precipitation=0)
            for obs in june_weather
        ]
        precipitation = WeatherCorrelationEngine().correlate(june_records, dry).precipitation
        assert precipitation.description == "No rain data available"
        assert precipitation.average_impact == 0

    def test_single_day_conditions_are_skipped(self, june_records, june_weather) -> None:
        result = WeatherCorrelationEngine().correlate(june_records[:1], june_weather)
        assert result.conditions == ()
        assert result.temperature.impact is ImpactDirection.NEUTRAL

    def test_describe_condition(self) -> None:
        assert describe_condition("Clouds", 10) == "Clouds has a neutral impact on revenue"
        assert describe_condition("Rain", -80) == "Rain lowers revenue by €80 on average"


class TestWeatherInsights:
    def test_insights_for_strong_signal(self, june_records, june_weather) -> None:
        insights = generate_weather_insights(WeatherCorrelationEngine().correlate(june_records, june_weather))
        assert insights[0].startswith("Warmer weather has a positive impact on your revenue")
        assert "Optimal temperature for sales: 20°C - 25°C" in insights
        assert "Rain lowers revenue by €220 on average" in insights
        assert insights[-1] == (
            "Weather conditions have a significant impact: "
            "€320 difference between the best and worst weather"
        )

    def test_fallback(self, june_records) -> None:
        flat = [
            WeatherObservation(date=record.iso_date, temperature=15, precipitation=0)
            for record in june_records
        ]
        same_revenue = [make_record(record.iso_date, record.location, 400) for record in june_records]
        insights = generate_weather_insights(WeatherCorrelationEngine().correlate(same_revenue, flat))
        assert insights == [FALLBACK_WEATHER_INSIGHT]


# ---------------------------------------------------------------------------
# Scenario matrix
# ---------------------------------------------------------------------------


class TestBands:
    @pytest.mark.parametrize(
        ("temperature", "expected"),
        [(9.9, TemperatureBand.KOUD), (10, TemperatureBand.MILD), (17.9, TemperatureBand.MILD), (18, TemperatureBand.WARM)],
    )
    def test_temperature(self, temperature: float, expected: TemperatureBand) -> None:
        assert temperature_band(temperature) is expected

    @pytest.mark.parametrize(
        ("precipitation", "expected"),
        [(0.99, PrecipitationBand.DROOG), (1, PrecipitationBand.LICHT_NAT), (5, PrecipitationBand.NAT)],
    )
    def test_precipitation(self, precipitation: float, expected: PrecipitationBand) -> None:
        assert precipitation_band(precipitation) is expected

    def test_scenario_key(self) -> None:
        assert scenario_key(TemperatureBand.WARM, PrecipitationBand.LICHT_NAT) == "warmLichtNat"
        assert scenario_key(TemperatureBand.KOUD, PrecipitationBand.DROOG) == "koudDroog"


class TestSensitivity:
    def test_score(self) -> None:
        assert sensitivity_score(600, 300, 400) == 75

    def test_score_is_capped_and_never_negative(self) -> None:
        assert sensitivity_score(900, 100, 400) == 100
        assert sensitivity_score(100, 300, 400) == 0
        assert sensitivity_score(600, 300, 0) == 0

    @pytest.mark.parametrize(
        ("score", "expected"),
        [(19, SensitivityLevel.LAAG), (20, SensitivityLevel.MIDDEL), (39, SensitivityLevel.MIDDEL), (40, SensitivityLevel.HOOG)],
    )
    def test_levels(self, score: int, expected: SensitivityLevel) -> None:
        assert sensitivity_level(score) is expected


class TestLocationProfile:
    def test_profile(self) -> None:
        days = _days("Dam Square", 3, 600, 22, 0) + _days("Dam Square", 3, 200, 5, 8)

        profile = build_location_profile("Dam Square", days)

        assert profile is not None
        assert profile.baseline_revenue == 400
        assert profile.sensitivity_score == 100
        assert profile.sensitivity_level is SensitivityLevel.HOOG
        assert profile.best_scenario == "warmDroog"
        assert profile.worst_scenario == "koudNat"
        assert len(profile.scenarios) == 9
        assert profile.scenario("warmDroog").count == 3
        assert profile.scenario("mildNat").count == 0
        assert [insight.message for insight in profile.insights] == [
            "Definitely go here in warm and dry weather (>18°C, <1mm) (+50% revenue)",
            "Avoid this location in cold and wet weather (<10°C, >5mm) (-50% revenue)",
            "Rain has a large impact here (-67% vs dry weather)",
        ]
        assert profile.insights[2].weather == "rain"

    def test_too_few_days(self) -> None:
        days = _days("Dam Square", 2, 600, 22, 0) + _days("Dam Square", 2, 200, 5, 8)
        assert build_location_profile("Dam Square", days) is None

    def test_single_qualifying_scenario(self) -> None:
        days = _days("Dam Square", 6, 600, 22, 0) + _days("Dam Square", 1, 200, 5, 8)
        assert build_location_profile("Dam Square", days) is None

    def test_unknown_scenario_key(self) -> None:
        days = _days("Dam Square", 3, 600, 22, 0) + _days("Dam Square", 3, 200, 5, 8)
        profile = build_location_profile("Dam Square", days)
        with pytest.raises(KeyError):
            profile.scenario("tropisch")


class TestLocationMatrix:
    def test_overall_sensitivity(self) -> None:
        days = (
            _days("Dam Square", 3, 600, 22, 0)
            + _days("Dam Square", 3, 200, 5, 8)
            + _days("Museumplein", 3, 500, 22, 0)
            + _days("Museumplein", 3, 450, 12, 0)
            + _days("Leidseplein", 2, 400, 22, 0)
        )

        analysis = analyze_location_matrix(days)

        assert [profile.location for profile in analysis.locations] == ["Dam Square", "Museumplein"]
        assert analysis.locations[1].sensitivity_score == 11
        assert analysis.overall.average_sensitivity == 56
        assert analysis.overall.most_sensitive == "Dam Square"
        assert analysis.overall.least_sensitive == "Museumplein"

    def test_no_qualifying_location(self) -> None:
        analysis = analyze_location_matrix(_days("Dam Square", 2, 400, 22, 0))
        assert analysis.locations == ()
        assert analysis.overall.average_sensitivity == 0
        assert analysis.overall.most_sensitive is None

    def test_engine_entry_point(self, june_records, june_weather) -> None:
        analysis = WeatherCorrelationEngine().analyze_locations(june_records, june_weather)
        assert [profile.location for profile in analysis.locations] == ["Dam Square"]


class TestProperties:
    @pytest.mark.parametrize("seed", range(20))
    def test_sensitivity_score_stays_in_bounds(self, seed: int) -> None:
        rng = random.Random(seed)
        days = [
            JoinedDay(
                location="Dam Square",
                revenue=rng.uniform(0, 1000),
                temperature=rng.uniform(-5, 35),
                precipitation=rng.choice([0.0, rng.uniform(0, 12)]),
            )
            for _ in range(40)
        ]
        for profile in analyze_location_matrix(days).locations:
            assert 0 <= profile.sensitivity_score <= 100

    def test_january_sales_with_february_weather(self) -> None:
        records = [make_record(f"2024-01-{day:02d}", "Dam Square", 400) for day in range(1, 8)]
        february = [
            WeatherObservation(date=f"2024-02-{day:02d}", temperature=5, precipitation=0) for day in range(1, 8)
        ]
        with pytest.raises(NoMatchingWeatherDataError):
            WeatherCorrelationEngine().correlate(records, february)
