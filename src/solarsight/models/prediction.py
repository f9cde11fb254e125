"""Pydantic models for multi-model prediction output."""

from typing import Literal

import polars as pl
from pydantic import BaseModel, ConfigDict, Field

from solarsight.schemas import PredictionColumns

ResultSource = Literal["model", "formula", "fallback"]


class PredictionMetrics(BaseModel):
    """Fit statistics for one model's predictions."""

    mse: float = Field(..., ge=0, description="Mean squared error")
    mae: float = Field(..., ge=0, description="Mean absolute error")
    r2: float = Field(..., description="Coefficient of determination (may be negative)")
    dust_impact: float | None = Field(
        None, ge=0, le=100, description="Estimated output loss from particulates (%)"
    )
    estimated: bool = Field(
        default=False,
        description="True when no observed power was available and the values are placeholders",
    )


class ModelResult(BaseModel):
    """Outcome of one model descriptor over the whole dataset."""

    name: str
    color: str
    predictions: list[float]
    metrics: PredictionMetrics
    feature_importance: dict[str, float]
    source: ResultSource = Field(
        default="model", description="Whether predictions come from the network, formula or fallback"
    )
    error: str | None = Field(None, description="Failure message when the fallback was used")

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"


class PredictionResult(BaseModel):
    """Full response: the default (first) model plus every model's outcome."""

    model_config = ConfigDict(protected_namespaces=())

    predictions: list[float]
    metrics: PredictionMetrics
    feature_importance: dict[str, float]
    model_results: list[ModelResult]
    actual_power: list[float | None] | None = None

    @property
    def default_model(self) -> str:
        return self.model_results[0].name

    def get_model(self, name: str) -> ModelResult:
        """Return a model's outcome by name."""
        for result in self.model_results:
            if result.name == name:
                return result
        raise KeyError(f"No result for model {name!r}")

    def to_frame(self, times: list | None = None) -> pl.DataFrame:
        """Render predictions as a table with one column per model."""
        columns: dict[str, list] = {PredictionColumns.ROW: list(range(len(self.predictions)))}
        if times is not None:
            columns[PredictionColumns.TIME] = times
        for result in self.model_results:
            columns[PredictionColumns.predicted(result.name)] = result.predictions
        if self.actual_power is not None:
            columns[PredictionColumns.ACTUAL_POWER] = self.actual_power
        return pl.DataFrame(columns, strict=False)
