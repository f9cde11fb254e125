"""Reading ingestion, feature extraction and weather simulation with Polars."""

from solarsight.processing.features import FeatureEngineer
from solarsight.processing.ingest import read_spreadsheet, rows_to_readings, validate_rows

__all__ = ["FeatureEngineer", "read_spreadsheet", "rows_to_readings", "validate_rows"]
