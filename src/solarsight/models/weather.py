"""Pydantic models for current-conditions weather snapshots."""

from pydantic import BaseModel, Field


class AirQuality(BaseModel):
    """Pollutant concentrations (µg/m³) and the overall index."""

    aqi: int = Field(..., ge=0, description="Air quality index")
    pm2_5: float = Field(..., ge=0)
    pm10: float = Field(..., ge=0)
    o3: float = Field(..., ge=0)
    no2: float = Field(..., ge=0)
    so2: float = Field(..., ge=0)
    co: float = Field(..., ge=0)


class Location(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class WeatherData(BaseModel):
    """Current weather and air quality at a location."""

    temperature: float = Field(..., description="Temperature (°C)")
    feels_like: float = Field(..., description="Apparent temperature (°C)")
    humidity: float = Field(..., ge=0, le=100, description="Relative humidity (%)")
    pressure: float = Field(..., description="Pressure (hPa)")
    wind_speed: float = Field(..., ge=0, description="Wind speed (m/s)")
    wind_direction: float = Field(..., ge=0, le=360, description="Wind direction (degrees)")
    cloud_cover: float = Field(..., ge=0, le=100, description="Cloud cover (%)")
    solar_irradiance: float = Field(..., ge=0, description="Irradiance (W/m²)")
    uv_index: int = Field(..., ge=0, le=12)
    air_quality: AirQuality
    location: Location
    simulated: bool = Field(default=True, description="Generated by the simulator")
