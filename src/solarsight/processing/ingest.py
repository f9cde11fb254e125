"""Spreadsheet ingestion and validation of raw reading rows."""

import io
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import polars as pl
from pydantic import ValidationError

from solarsight.exceptions import DatasetValidationError, UnsupportedFileError
from solarsight.logging import get_logger
from solarsight.models.reading import Reading
from solarsight.schemas import REQUIRED_COLUMNS, canonical_column

logger = get_logger(__name__)

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx", ".xls")
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS + EXCEL_EXTENSIONS


def _extension(filename: str) -> str:
    return Path(filename).suffix.lower()


def read_spreadsheet(source: Path | str | bytes, filename: str | None = None) -> pl.DataFrame:
    """
    Read the first sheet of a CSV or Excel file into a DataFrame.

    ``source`` is a path or the raw file content. For raw content the
    ``filename`` decides the format.
    """
    if isinstance(source, bytes):
        if filename is None:
            raise UnsupportedFileError("A filename is required to read uploaded content")
        name = filename
        data: Any = io.BytesIO(source)
    else:
        name = filename or str(source)
        data = Path(source)

    extension = _extension(name)
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError("Please upload an Excel (.xlsx, .xls) or CSV file")

    logger.info(f"Reading spreadsheet {name}")
    try:
        if extension in CSV_EXTENSIONS:
            df = pl.read_csv(data, try_parse_dates=True)
        else:
            df = pl.read_excel(data, sheet_id=1)
    except (pl.exceptions.PolarsError, OSError, ValueError) as e:
        raise DatasetValidationError(f"Could not parse {name}: {e}") from e

    df = df.rename({column: canonical_column(column) for column in df.columns})
    # Trailing blank spreadsheet rows come through as all-null
    df = df.filter(~pl.all_horizontal(pl.all().is_null()))
    logger.info(f"Read {len(df)} rows with columns {df.columns}")
    return df


def validate_rows(rows: Sequence[Mapping[str, Any]]) -> None:
    """Reject empty datasets and datasets whose first row lacks a required column."""
    if not rows:
        raise DatasetValidationError("The file contains no data")

    first = {canonical_column(key): value for key, value in rows[0].items()}
    missing = [column for column in REQUIRED_COLUMNS if first.get(column) is None]
    if missing:
        raise DatasetValidationError(f"Missing required columns: {', '.join(missing)}")


def rows_to_readings(rows: Sequence[Mapping[str, Any]]) -> list[Reading]:
    """Validate and convert raw rows (snake_case or camelCase keys) into readings."""
    validate_rows(rows)

    readings = []
    for index, row in enumerate(rows):
        canonical = {canonical_column(key): value for key, value in row.items()}
        try:
            readings.append(Reading.model_validate(canonical))
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise DatasetValidationError(f"Row {index + 1} is invalid ({fields}): {e}") from e

    logger.debug(f"Converted {len(readings)} rows to readings")
    return readings


def load_readings(source: Path | str | bytes, filename: str | None = None) -> list[Reading]:
    """Read a spreadsheet and return validated readings."""
    df = read_spreadsheet(source, filename)
    return rows_to_readings(df.to_dicts())
