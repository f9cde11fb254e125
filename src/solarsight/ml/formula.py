"""Closed-form power estimate used by formula mode and as the failure fallback."""

from collections.abc import Sequence

import numpy as np

from solarsight.models.reading import Reading

# Panel efficiency applied to irradiance
BASE_EFFICIENCY = 0.2
# Output drops 1% per °C away from the 25 °C rating point
REFERENCE_TEMPERATURE_C = 25.0
TEMPERATURE_PENALTY = 0.01
HUMIDITY_PENALTY = 0.003
PM10_PENALTY = 0.005
CLOUD_DIVISOR = 200.0

JITTER_LOW = 0.9
JITTER_HIGH = 1.1


def _factor(value: float) -> float:
    return max(0.0, value)


def closed_form_power(reading: Reading) -> float:
    """Irradiance times multiplicative temperature, humidity, dust and cloud attenuation."""
    base = reading.solar_irradiance * BASE_EFFICIENCY
    temp_factor = _factor(
        1 - abs(REFERENCE_TEMPERATURE_C - reading.temperature) * TEMPERATURE_PENALTY
    )
    humidity_factor = _factor(1 - reading.humidity * HUMIDITY_PENALTY)
    dust_factor = _factor(1 - reading.pm10 * PM10_PENALTY) if reading.pm10 else 1.0
    cloud_factor = _factor(1 - (reading.cloud_cover or 0.0) / CLOUD_DIVISOR)
    return base * temp_factor * humidity_factor * dust_factor * cloud_factor


def closed_form_predictions(readings: Sequence[Reading]) -> np.ndarray:
    return np.array([closed_form_power(r) for r in readings], dtype=float)


def jittered(values: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Scale each value by an independent uniform factor in [0.9, 1.1]."""
    return values * rng.uniform(JITTER_LOW, JITTER_HIGH, size=len(values))
