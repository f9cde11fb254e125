"""Pydantic models for meteorological input readings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Reading(BaseModel):
    """Single row of environmental input for the power prediction."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    temperature: float = Field(..., description="Air temperature (°C)")
    humidity: float = Field(..., ge=0, le=100, description="Relative humidity (%)")
    wind_speed: float = Field(..., ge=0, alias="windSpeed", description="Wind speed (m/s)")
    solar_irradiance: float = Field(
        ..., ge=0, alias="solarIrradiance", description="Global horizontal irradiance (W/m²)"
    )
    pm10: float | None = Field(None, ge=0, description="PM10 concentration (µg/m³)")
    pm25: float | None = Field(None, ge=0, description="PM2.5 concentration (µg/m³)")
    cloud_cover: float | None = Field(
        None, ge=0, le=100, alias="cloudCover", description="Cloud cover (%)"
    )
    actual_power: float | None = Field(
        None, alias="actualPower", description="Observed power output, if measured"
    )
    time: datetime | None = Field(None, description="Reading timestamp")


class ReadingBatch(BaseModel):
    """Request body for batch prediction."""

    readings: list[Reading] = Field(..., min_length=1, description="Ordered readings")
    include_training: bool = Field(
        default=True, description="Fit the per-model regressors before predicting"
    )
