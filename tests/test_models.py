"""Tests for Pydantic models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from solarsight.models.prediction import ModelResult, PredictionMetrics, PredictionResult
from solarsight.models.reading import Reading, ReadingBatch
from solarsight.models.weather import AirQuality, Location, WeatherData


def test_reading_accepts_camel_case_aliases() -> None:
    """Test Reading with the dashboard's camelCase headers."""
    reading = Reading.model_validate(
        {
            "temperature": 21.5,
            "humidity": 40,
            "windSpeed": 4.2,
            "solarIrradiance": 650,
            "cloudCover": 25,
            "actualPower": 98.0,
        }
    )

    assert reading.wind_speed == 4.2
    assert reading.solar_irradiance == 650
    assert reading.cloud_cover == 25
    assert reading.actual_power == 98.0
    assert reading.pm10 is None


def test_reading_is_immutable() -> None:
    """Readings cannot be changed once ingested."""
    reading = Reading(temperature=20, humidity=50, wind_speed=1, solar_irradiance=100)

    with pytest.raises(ValidationError):
        reading.temperature = 30  # type: ignore[misc]


def test_reading_rejects_out_of_range_humidity() -> None:
    with pytest.raises(ValidationError):
        Reading(temperature=20, humidity=130, wind_speed=1, solar_irradiance=100)


def test_reading_requires_core_fields() -> None:
    with pytest.raises(ValidationError):
        Reading.model_validate({"temperature": 20, "humidity": 50, "windSpeed": 2})


def test_reading_batch_rejects_empty() -> None:
    with pytest.raises(ValidationError):
        ReadingBatch(readings=[])


def _result(name: str, predictions: list[float]) -> ModelResult:
    return ModelResult(
        name=name,
        color="#000000",
        predictions=predictions,
        metrics=PredictionMetrics(mse=1.0, mae=1.0, r2=0.5),
        feature_importance={"solar_irradiance": 1.0},
    )


def test_prediction_result_to_frame() -> None:
    """One predicted column per model plus observed power."""
    first = _result("random_forest", [10.0, 20.0])
    second = _result("neural_network", [11.0, 19.0])
    result = PredictionResult(
        predictions=first.predictions,
        metrics=first.metrics,
        feature_importance=first.feature_importance,
        model_results=[first, second],
        actual_power=[10.5, None],
    )

    df = result.to_frame(times=[datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 13)])

    assert df.columns == [
        "row",
        "time",
        "predicted_random_forest",
        "predicted_neural_network",
        "actual_power",
    ]
    assert df["predicted_neural_network"].to_list() == [11.0, 19.0]
    assert result.default_model == "random_forest"
    assert result.get_model("neural_network") is second
    with pytest.raises(KeyError):
        result.get_model("missing")


def test_model_result_fallback_flag() -> None:
    result = _result("support_vector", [1.0])
    assert not result.is_fallback

    fallback = result.model_copy(update={"source": "fallback", "error": "boom"})
    assert fallback.is_fallback


def test_weather_data() -> None:
    """Test WeatherData model."""
    data = WeatherData(
        temperature=22.0,
        feels_like=21.0,
        humidity=55,
        pressure=1012,
        wind_speed=3.5,
        wind_direction=180,
        cloud_cover=30,
        solar_irradiance=540.0,
        uv_index=4,
        air_quality=AirQuality(aqi=42, pm2_5=8.1, pm10=15.3, o3=60, no2=12, so2=4, co=310),
        location=Location(latitude=60.17, longitude=24.94),
    )

    assert data.simulated
    assert data.location.latitude == 60.17
    assert data.air_quality.pm10 == 15.3
