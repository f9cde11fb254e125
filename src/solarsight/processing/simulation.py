"""Location-based weather simulator.

Produces plausible current conditions and an hourly history of readings for a
coordinate. Irradiance follows a clear-sky model (declination, hour angle,
air mass) damped by a random atmospheric factor; dust levels depend on
latitude/longitude bands that stand in for desert and industrial regions.
"""

import math
from datetime import UTC, datetime, timedelta

import numpy as np

from solarsight.logging import get_logger
from solarsight.models.reading import Reading
from solarsight.models.weather import AirQuality, Location, WeatherData

logger = get_logger(__name__)

SOLAR_CONSTANT = 1361.0  # W/m² at top of atmosphere
DIFFUSE_FRACTION = 0.15
MAX_UV_INDEX = 12


def _check_coordinates(latitude: float, longitude: float) -> None:
    if not -90 <= latitude <= 90:
        raise ValueError(f"Latitude must be within [-90, 90], got {latitude}")
    if not -180 <= longitude <= 180:
        raise ValueError(f"Longitude must be within [-180, 180], got {longitude}")


def _rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def solar_hour(when: datetime, longitude: float) -> float:
    """Local solar time in hours [0, 24) from UTC and longitude."""
    utc = when.astimezone(UTC) if when.tzinfo else when.replace(tzinfo=UTC)
    hours = utc.hour + utc.minute / 60 + longitude / 15
    return hours % 24


def clear_sky_irradiance(latitude: float, longitude: float, when: datetime) -> float:
    """Direct plus diffuse irradiance under a clear sky; 0 when the sun is down."""
    day_of_year = when.timetuple().tm_yday
    declination = 23.45 * math.sin(math.radians((360 / 365) * (day_of_year - 81)))
    hour_angle = (solar_hour(when, longitude) - 12) * 15

    lat_rad = math.radians(latitude)
    dec_rad = math.radians(declination)
    sin_altitude = math.sin(lat_rad) * math.sin(dec_rad) + math.cos(lat_rad) * math.cos(
        dec_rad
    ) * math.cos(math.radians(hour_angle))
    if sin_altitude <= 0:
        return 0.0

    altitude_deg = math.degrees(math.asin(sin_altitude))
    air_mass = 1 / (sin_altitude + 0.50572 * (6.07995 + altitude_deg) ** -1.6364)

    day_angle = 2 * math.pi * day_of_year / 365
    extraterrestrial = SOLAR_CONSTANT * (1 + 0.033 * math.cos(day_angle))
    direct = extraterrestrial * 0.7 ** (air_mass**0.678)
    return direct * (1 + DIFFUSE_FRACTION)


def estimate_solar_irradiance(
    latitude: float,
    longitude: float,
    when: datetime | None = None,
    rng: np.random.Generator | None = None,
) -> float:
    """Clear-sky irradiance scaled by a random atmospheric factor in [0.7, 1.0]."""
    _check_coordinates(latitude, longitude)
    when = when or datetime.now(UTC)
    irradiance = clear_sky_irradiance(latitude, longitude, when)
    return max(0.0, irradiance * float(_rng(rng).uniform(0.7, 1.0)))


def uv_index(solar_irradiance: float, latitude: float) -> int:
    """UV index from irradiance, lowered towards the poles."""
    index = solar_irradiance / 125 * (1 - abs(latitude) / 90 * 0.4)
    return int(min(MAX_UV_INDEX, max(0, round(index))))


def _round1(value: float) -> float:
    return round(value * 10) / 10


def simulate_current_weather(
    latitude: float,
    longitude: float,
    when: datetime | None = None,
    rng: np.random.Generator | None = None,
) -> WeatherData:
    """Simulated current conditions; temperature falls off with latitude."""
    _check_coordinates(latitude, longitude)
    rng = _rng(rng)
    when = when or datetime.now(UTC)
    logger.info(f"Simulating current weather for lat={latitude}, lon={longitude}")

    temperature = 30 - abs(latitude) / 90 * 30 + rng.uniform(-5, 5)
    irradiance = estimate_solar_irradiance(latitude, longitude, when, rng)

    # Longitude bands stand in for industrial regions
    industrial = (math.sin(longitude / 30) + 1) / 2
    air_quality = AirQuality(
        aqi=round(30 + industrial * 70 + rng.uniform(0, 30)),
        pm2_5=_round1(10 + industrial * 40 + rng.uniform(0, 15)),
        pm10=_round1(20 + industrial * 60 + rng.uniform(0, 25)),
        o3=_round1(40 + rng.uniform(0, 40)),
        no2=_round1(10 + industrial * 30 + rng.uniform(0, 20)),
        so2=_round1(5 + industrial * 25 + rng.uniform(0, 15)),
        co=_round1(300 + industrial * 700 + rng.uniform(0, 300)),
    )
    coastal = (math.sin(longitude / 20) + 1) / 2

    return WeatherData(
        temperature=float(temperature),
        feels_like=float(temperature - 2 + rng.uniform(0, 4)),
        humidity=float(round(40 + rng.uniform(0, 40))),
        pressure=float(round(1000 + rng.uniform(0, 30))),
        wind_speed=float(2 + coastal * 10 + rng.uniform(0, 5)),
        wind_direction=float(round(rng.uniform(0, 360))),
        cloud_cover=float(round(10 + rng.uniform(0, 70))),
        solar_irradiance=irradiance,
        uv_index=uv_index(irradiance, latitude),
        air_quality=air_quality,
        location=Location(latitude=latitude, longitude=longitude),
        simulated=True,
    )


def _base_dust(latitude: float, longitude: float) -> tuple[float, float]:
    """Baseline (pm10, pm25) for the region."""
    desert = 15 < abs(latitude) < 35
    industrial = 30 < latitude < 60 and -10 < longitude < 40
    if desert:
        return 50.0, 25.0
    if industrial:
        return 30.0, 20.0
    return 15.0, 8.0


def simulate_historical_readings(
    latitude: float,
    longitude: float,
    hours: int = 24,
    end: datetime | None = None,
    rng: np.random.Generator | None = None,
) -> list[Reading]:
    """Hourly readings for the ``hours`` before ``end`` following a daily cycle."""
    _check_coordinates(latitude, longitude)
    if hours < 1:
        raise ValueError("hours must be positive")

    rng = _rng(rng)
    end = (end or datetime.now(UTC)).replace(minute=0, second=0, microsecond=0)
    base_pm10, base_pm25 = _base_dust(latitude, longitude)
    base_temp = 25 - abs(latitude) / 90 * 20

    logger.info(f"Simulating {hours}h of readings for lat={latitude}, lon={longitude}")

    readings = []
    for offset in range(hours, 0, -1):
        when = end - timedelta(hours=offset)
        hour = int(solar_hour(when, longitude))
        daytime = 8 < hour < 18

        temperature = base_temp + math.sin((hour - 6) * math.pi / 12) * 8
        irradiance = (
            max(0.0, 1000 * (1 - abs(hour - 12) / 12) * (1 - abs(latitude) / 90))
            if 6 <= hour <= 18
            else 0.0
        )
        humidity = 50 + (20 if hour < 6 else -10) + rng.uniform(0, 15)
        wind_speed = 2 + (3 if daytime else -1) + rng.uniform(0, 3)
        dust_factor = 1.2 if daytime else 0.8
        pm10 = base_pm10 * dust_factor + rng.uniform(0, 10)
        pm25 = base_pm25 * dust_factor + rng.uniform(0, 5)
        cloud_cover = 20 + (-10 if hour < 12 else 20) * rng.uniform(0, 1)

        readings.append(
            Reading(
                temperature=_round1(temperature),
                humidity=float(round(min(100, max(0, humidity)))),
                wind_speed=_round1(max(0.0, wind_speed)),
                solar_irradiance=float(round(irradiance)),
                pm10=_round1(pm10),
                pm25=_round1(pm25),
                cloud_cover=float(round(min(100, max(0, cloud_cover)))),
                time=when,
            )
        )

    return readings
