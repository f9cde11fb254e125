"""Feature extraction and min-max scaling for the power models."""

from collections.abc import Sequence

import numpy as np
import polars as pl

from solarsight.logging import get_logger
from solarsight.models.reading import Reading
from solarsight.schemas import FEATURE_COLUMNS, ReadingColumns

logger = get_logger(__name__)

# Optional dimensions that default to 0 when a reading does not carry them
ZERO_DEFAULT_COLUMNS = [ReadingColumns.PM10, ReadingColumns.PM25, ReadingColumns.CLOUD_COVER]

# Training label used when no observed power is supplied
SYNTHETIC_EFFICIENCY = 0.15
SYNTHETIC_CLOUD_DIVISOR = 200.0

NormalizationParams = dict[str, tuple[float, float]]


class FeatureEngineer:
    """Turn readings into the fixed 7-column feature matrix used by every model."""

    @staticmethod
    def to_frame(readings: Sequence[Reading]) -> pl.DataFrame:
        """Convert readings to a DataFrame with canonical columns."""
        numeric = [*FEATURE_COLUMNS, ReadingColumns.ACTUAL_POWER]
        df = pl.DataFrame(
            {column: [getattr(reading, column) for reading in readings] for column in numeric},
            schema={column: pl.Float64 for column in numeric},
        )
        # Spreadsheet readers yield NaN for blank numeric cells; treat them as missing
        df = df.with_columns(pl.col(numeric).fill_nan(None))
        times = [reading.time for reading in readings]
        if any(t is not None for t in times):
            df = df.with_columns(pl.Series(ReadingColumns.TIME, times))
        logger.debug(f"Built frame of {len(df)} readings")
        return df

    @staticmethod
    def extract_features(df: pl.DataFrame) -> np.ndarray:
        """Select the feature columns in canonical order, defaulting optional ones to 0."""
        if df.is_empty():
            raise ValueError("Cannot extract features from an empty dataset")

        exprs = []
        for column in FEATURE_COLUMNS:
            if column in df.columns:
                exprs.append(pl.col(column).cast(pl.Float64).fill_null(0.0).fill_nan(0.0))
            else:
                exprs.append(pl.lit(0.0, dtype=pl.Float64).alias(column))

        return df.select(exprs).to_numpy()

    @staticmethod
    def normalize(features: np.ndarray) -> tuple[np.ndarray, NormalizationParams]:
        """
        Min-max scale each column into [0, 1].

        A constant column maps to 0 rather than dividing by a zero range.
        Returns the scaled matrix and the per-feature (min, max) it used.
        """
        mins = features.min(axis=0)
        maxs = features.max(axis=0)
        ranges = maxs - mins

        safe_ranges = np.where(ranges > 0, ranges, 1.0)
        scaled = np.where(ranges > 0, (features - mins) / safe_ranges, 0.0)

        params = {
            name: (float(lo), float(hi))
            for name, lo, hi in zip(FEATURE_COLUMNS, mins, maxs, strict=True)
        }
        return scaled, params

    @staticmethod
    def synthetic_target(df: pl.DataFrame) -> np.ndarray:
        """Observed power where present, else a cloud-attenuated irradiance estimate."""
        cloud = pl.col(ReadingColumns.CLOUD_COVER).fill_null(0.0)
        estimate = (
            pl.col(ReadingColumns.SOLAR_IRRADIANCE)
            * SYNTHETIC_EFFICIENCY
            * (1 - cloud / SYNTHETIC_CLOUD_DIVISOR)
        )
        observed = pl.col(ReadingColumns.ACTUAL_POWER)
        target = df.select(
            pl.when(observed.is_not_null() & observed.is_not_nan())
            .then(observed)
            .otherwise(estimate)
            .alias("target")
        )
        return target["target"].to_numpy().astype(float)

    @staticmethod
    def observed_power(df: pl.DataFrame) -> list[float | None] | None:
        """Observed power per row, or None when no row carries one."""
        if ReadingColumns.ACTUAL_POWER not in df.columns:
            return None
        column = df[ReadingColumns.ACTUAL_POWER].cast(pl.Float64).fill_nan(None)
        if column.null_count() == len(column):
            return None
        return column.to_list()

    @staticmethod
    def prepare(readings: Sequence[Reading]) -> tuple[pl.DataFrame, np.ndarray, NormalizationParams]:
        """Frame, scaled feature matrix and normalization parameters for a dataset."""
        df = FeatureEngineer.to_frame(readings)
        scaled, params = FeatureEngineer.normalize(FeatureEngineer.extract_features(df))
        logger.info(f"Prepared {scaled.shape[0]} rows x {scaled.shape[1]} features")
        return df, scaled, params
