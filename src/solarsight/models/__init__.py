"""Data models for readings, weather snapshots and prediction results."""

from solarsight.models.prediction import ModelResult, PredictionMetrics, PredictionResult
from solarsight.models.reading import Reading, ReadingBatch
from solarsight.models.weather import AirQuality, Location, WeatherData

__all__ = [
    "AirQuality",
    "Location",
    "ModelResult",
    "PredictionMetrics",
    "PredictionResult",
    "Reading",
    "ReadingBatch",
    "WeatherData",
]
