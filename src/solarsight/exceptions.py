"""Domain exceptions surfaced to API and CLI callers."""


class SolarSightError(Exception):
    """Base class for all SolarSight errors."""


class DatasetValidationError(SolarSightError, ValueError):
    """Input readings are empty or miss required columns."""


class UnsupportedFileError(SolarSightError, ValueError):
    """Uploaded file is not a CSV or Excel spreadsheet."""
