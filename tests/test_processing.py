"""Tests for feature extraction and spreadsheet ingestion with Polars."""

import numpy as np
import polars as pl
import pytest

from solarsight.exceptions import DatasetValidationError, UnsupportedFileError
from solarsight.models.reading import Reading
from solarsight.processing.features import FeatureEngineer
from solarsight.processing.ingest import (
    load_readings,
    read_spreadsheet,
    rows_to_readings,
    validate_rows,
)
from solarsight.schemas import FEATURE_COLUMNS

CSV_CONTENT = (
    "time,temperature,humidity,windSpeed,solarIrradiance,pm10,pm25,cloudCover,actualPower\n"
    "2024-06-01T10:00:00,24.0,45,3.1,780,22.5,11.0,10,118.0\n"
    "2024-06-01T11:00:00,26.5,40,3.4,860,24.0,12.5,5,131.5\n"
    "2024-06-01T12:00:00,27.0,38,2.9,900,25.1,13.0,,\n"
)


def test_extract_features_defaults_optional_columns(two_readings: list[Reading]) -> None:
    """Absent particulates and cloud cover become zeros in the feature matrix."""
    df = FeatureEngineer.to_frame(two_readings)

    features = FeatureEngineer.extract_features(df)

    assert features.shape == (2, len(FEATURE_COLUMNS))
    assert features[0].tolist() == [800.0, 25.0, 50.0, 3.0, 0.0, 0.0, 0.0]
    assert features[1].tolist() == [0.0, 10.0, 90.0, 1.0, 0.0, 0.0, 0.0]


def test_normalize_maps_constant_columns_to_zero(two_readings: list[Reading]) -> None:
    df = FeatureEngineer.to_frame(two_readings)

    scaled, params = FeatureEngineer.normalize(FeatureEngineer.extract_features(df))

    assert np.isfinite(scaled).all()
    assert scaled[:, FEATURE_COLUMNS.index("pm10")].tolist() == [0.0, 0.0]
    assert scaled[:, FEATURE_COLUMNS.index("cloud_cover")].tolist() == [0.0, 0.0]
    assert scaled[:, 0].tolist() == [1.0, 0.0]
    assert params["solar_irradiance"] == (0.0, 800.0)
    assert params["pm25"] == (0.0, 0.0)


def test_normalize_range(day_readings: list[Reading]) -> None:
    _, scaled, _ = FeatureEngineer.prepare(day_readings)

    assert scaled.min() >= 0.0
    assert scaled.max() <= 1.0


def test_synthetic_target_prefers_observed_power() -> None:
    readings = [
        Reading(temperature=20, humidity=50, wind_speed=2, solar_irradiance=1000, actual_power=140),
        Reading(temperature=20, humidity=50, wind_speed=2, solar_irradiance=1000, cloud_cover=50),
    ]
    df = FeatureEngineer.to_frame(readings)

    target = FeatureEngineer.synthetic_target(df)

    assert target[0] == pytest.approx(140.0)
    assert target[1] == pytest.approx(1000 * 0.15 * (1 - 50 / 200))


def test_nan_observed_power_is_missing() -> None:
    readings = [
        Reading(temperature=20, humidity=50, wind_speed=2, solar_irradiance=1000, actual_power=140),
        Reading(
            temperature=20,
            humidity=50,
            wind_speed=2,
            solar_irradiance=800,
            actual_power=float("nan"),
        ),
    ]
    df = FeatureEngineer.to_frame(readings)

    target = FeatureEngineer.synthetic_target(df)

    assert np.isfinite(target).all()
    assert target[1] == pytest.approx(800 * 0.15)
    assert FeatureEngineer.observed_power(df) == [140.0, None]


def test_synthetic_target_skips_nan_in_raw_frame() -> None:
    df = pl.DataFrame(
        {
            "solar_irradiance": [1000.0, 400.0],
            "cloud_cover": [None, 0.0],
            "actual_power": [float("nan"), 50.0],
        }
    )

    target = FeatureEngineer.synthetic_target(df)

    assert target.tolist() == pytest.approx([150.0, 50.0])


def test_observed_power_absent(two_readings: list[Reading]) -> None:
    df = FeatureEngineer.to_frame(two_readings)
    assert FeatureEngineer.observed_power(df) is None


def test_extract_features_rejects_empty() -> None:
    with pytest.raises(ValueError):
        FeatureEngineer.extract_features(FeatureEngineer.to_frame([]))


def test_read_csv_normalizes_headers(tmp_path) -> None:
    """camelCase headers are renamed to canonical columns."""
    path = tmp_path / "readings.csv"
    path.write_text(CSV_CONTENT)

    df = read_spreadsheet(path)

    assert len(df) == 3
    assert "wind_speed" in df.columns
    assert "solar_irradiance" in df.columns
    assert "actual_power" in df.columns


def test_load_readings_from_bytes() -> None:
    readings = load_readings(CSV_CONTENT.encode(), "upload.csv")

    assert len(readings) == 3
    assert readings[0].solar_irradiance == 780
    assert readings[0].time is not None
    assert readings[2].cloud_cover is None
    assert readings[2].actual_power is None


def test_read_excel_first_sheet(tmp_path) -> None:
    pytest.importorskip("xlsxwriter")
    pytest.importorskip("fastexcel")
    path = tmp_path / "readings.xlsx"
    pl.DataFrame(
        {
            "temperature": [22.0, 23.5],
            "humidity": [48.0, 46.0],
            "windSpeed": [2.0, 2.5],
            "solarIrradiance": [600.0, 720.0],
        }
    ).write_excel(path)

    readings = load_readings(path)

    assert [r.solar_irradiance for r in readings] == [600.0, 720.0]


def test_unsupported_extension() -> None:
    with pytest.raises(UnsupportedFileError):
        read_spreadsheet(b"irrelevant", "readings.json")


def test_validate_rows_rejects_empty() -> None:
    with pytest.raises(DatasetValidationError, match="no data"):
        validate_rows([])


def test_validate_rows_reports_missing_columns() -> None:
    """Only the first row is checked; missing required columns are named."""
    rows = [{"temperature": 20, "humidity": 40}]

    with pytest.raises(DatasetValidationError) as exc_info:
        validate_rows(rows)

    message = str(exc_info.value)
    assert "wind_speed" in message
    assert "solar_irradiance" in message
    assert "temperature" not in message


def test_header_only_csv_rejected() -> None:
    with pytest.raises(DatasetValidationError, match="no data"):
        load_readings(b"temperature,humidity,windSpeed,solarIrradiance\n", "empty.csv")


def test_rows_to_readings_reports_bad_row() -> None:
    rows = [
        {"temperature": 20, "humidity": 40, "windSpeed": 2, "solarIrradiance": 500},
        {"temperature": 21, "humidity": 40, "windSpeed": 2, "solarIrradiance": None},
    ]

    with pytest.raises(DatasetValidationError, match="Row 2"):
        rows_to_readings(rows)
