"""Column names and feature constants shared across ingestion, ML and the API.

Keeping the names here avoids hardcoding them in the feature pipeline and the
tabular output.
"""

from __future__ import annotations


class ReadingColumns:
    """Column names for meteorological readings (snake_case, canonical)."""

    TIME = "time"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    WIND_SPEED = "wind_speed"
    SOLAR_IRRADIANCE = "solar_irradiance"
    PM10 = "pm10"
    PM25 = "pm25"
    CLOUD_COVER = "cloud_cover"
    ACTUAL_POWER = "actual_power"


class PredictionColumns:
    """Column names for the tabular prediction output."""

    ROW = "row"
    TIME = ReadingColumns.TIME
    ACTUAL_POWER = ReadingColumns.ACTUAL_POWER

    @staticmethod
    def predicted(model_name: str) -> str:
        """Generate the predicted-power column name for a model."""
        return f"predicted_{model_name}"


# Order matters: this is the column order of the feature matrix.
FEATURE_COLUMNS: list[str] = [
    ReadingColumns.SOLAR_IRRADIANCE,
    ReadingColumns.TEMPERATURE,
    ReadingColumns.HUMIDITY,
    ReadingColumns.WIND_SPEED,
    ReadingColumns.PM10,
    ReadingColumns.PM25,
    ReadingColumns.CLOUD_COVER,
]

# Must be present in the first row of an uploaded dataset
REQUIRED_COLUMNS: list[str] = [
    ReadingColumns.TEMPERATURE,
    ReadingColumns.HUMIDITY,
    ReadingColumns.WIND_SPEED,
    ReadingColumns.SOLAR_IRRADIANCE,
]

OPTIONAL_COLUMNS: list[str] = [
    ReadingColumns.PM10,
    ReadingColumns.PM25,
    ReadingColumns.CLOUD_COVER,
    ReadingColumns.ACTUAL_POWER,
    ReadingColumns.TIME,
]

# Spreadsheets exported from the dashboard use camelCase headers.
COLUMN_ALIASES: dict[str, str] = {
    "windSpeed": ReadingColumns.WIND_SPEED,
    "solarIrradiance": ReadingColumns.SOLAR_IRRADIANCE,
    "cloudCover": ReadingColumns.CLOUD_COVER,
    "actualPower": ReadingColumns.ACTUAL_POWER,
    "pm2_5": ReadingColumns.PM25,
    "timestamp": ReadingColumns.TIME,
}


def canonical_column(name: str) -> str:
    """Map a raw column header to its canonical snake_case name."""
    stripped = name.strip()
    return COLUMN_ALIASES.get(stripped, stripped)
