"""Shared fixtures for SolarSight tests."""

import os

# Keep test runs from writing regressor snapshots into the working tree
os.environ.setdefault("SOLARSIGHT_PERSIST_MODELS", "false")

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402

from solarsight.ml.predict import MultiModelPredictor  # noqa: E402
from solarsight.ml.regressor import RegressorCache  # noqa: E402
from solarsight.models.reading import Reading  # noqa: E402


@pytest.fixture
def two_readings() -> list[Reading]:
    """Bright mild hour followed by a dark humid one."""
    return [
        Reading(temperature=25, humidity=50, wind_speed=3, solar_irradiance=800),
        Reading(temperature=10, humidity=90, wind_speed=1, solar_irradiance=0),
    ]


@pytest.fixture
def day_readings() -> list[Reading]:
    """Twelve hourly readings with particulates, clouds and observed power."""
    start = datetime(2024, 6, 1, 6, 0, tzinfo=UTC)
    readings = []
    for i in range(12):
        irradiance = max(0.0, 900 - abs(i - 6) * 140)
        readings.append(
            Reading(
                temperature=18 + i,
                humidity=70 - i * 2,
                wind_speed=2 + (i % 3),
                solar_irradiance=irradiance,
                pm10=20 + i,
                pm25=10 + i / 2,
                cloud_cover=10 + (i * 5) % 40,
                actual_power=irradiance * 0.16,
                time=start + timedelta(hours=i),
            )
        )
    return readings


@pytest.fixture
def formula_predictor() -> MultiModelPredictor:
    return MultiModelPredictor(mode="formula", cache=RegressorCache(model_dir=None), seed=7)


@pytest.fixture
def regressor_predictor(tmp_path) -> MultiModelPredictor:
    cache = RegressorCache(model_dir=tmp_path / "models", persist=True, random_state=3)
    return MultiModelPredictor(mode="regressor", epochs=5, cache=cache, seed=3)
