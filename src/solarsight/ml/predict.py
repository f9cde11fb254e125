"""Multi-model power prediction over a batch of readings.

Each descriptor is handled independently:

1. Extract the 7 features and min-max scale them across the dataset
2. Predict with the descriptor's regressor (trained for a few epochs) or the
   closed form with jitter, depending on the mode
3. Score against observed power, or fall back to placeholder metrics
4. Derive importance from the descriptor's static weights

A failure inside one descriptor never reaches the caller. Its outcome is
replaced by jittered closed-form predictions with placeholder metrics and
marked ``source="fallback"``.
"""

import threading
from collections.abc import Sequence
from typing import Literal

import numpy as np
import polars as pl

from solarsight.config import settings
from solarsight.exceptions import DatasetValidationError
from solarsight.logging import get_logger, get_tracer
from solarsight.ml.descriptors import DUST_REFERENCE_MODEL, MODEL_DESCRIPTORS, ModelDescriptor
from solarsight.ml.formula import closed_form_predictions, jittered
from solarsight.ml.importance import feature_importance, normalize_weights
from solarsight.ml.metrics import evaluate, placeholder_metrics
from solarsight.ml.regressor import RegressorCache
from solarsight.models.prediction import ModelResult, PredictionMetrics, PredictionResult
from solarsight.models.reading import Reading
from solarsight.processing.features import FeatureEngineer, NormalizationParams
from solarsight.schemas import FEATURE_COLUMNS, ReadingColumns

logger = get_logger(__name__)

PredictionMode = Literal["regressor", "formula"]

# Dust heuristics used when no trained reference network is available
PM10_DUST_WEIGHT = 0.3
PM25_DUST_WEIGHT = 0.7
DUST_CAP = 100.0
DUST_ERROR_CAP = 50.0


class MultiModelPredictor:
    """Run every model descriptor over a dataset and collect their outcomes."""

    def __init__(
        self,
        descriptors: Sequence[ModelDescriptor] = MODEL_DESCRIPTORS,
        mode: PredictionMode | None = None,
        epochs: int | None = None,
        cache: RegressorCache | None = None,
        seed: int | None = None,
    ) -> None:
        if not descriptors:
            raise ValueError("At least one model descriptor is required")
        self.descriptors = tuple(descriptors)
        self.mode: PredictionMode = mode or settings.prediction_mode
        self.epochs = epochs or settings.training_epochs
        seed = settings.random_seed if seed is None else seed
        self.cache = cache or RegressorCache(
            model_dir=settings.model_dir,
            persist=settings.persist_models,
            random_state=seed,
        )
        self.rng = np.random.default_rng(seed)
        # Cached regressors and the rng are shared across calls
        self._lock = threading.Lock()

    def predict(self, readings: Sequence[Reading], include_training: bool = True) -> PredictionResult:
        """
        Produce one outcome per descriptor; the first is also surfaced as the default.

        Calls are serialized, so one predictor can be shared between worker threads.
        """
        if not readings:
            raise DatasetValidationError("The dataset contains no readings")

        with self._lock:
            return self._predict_all(readings, include_training)

    def _predict_all(self, readings: Sequence[Reading], include_training: bool) -> PredictionResult:
        logger.info(
            f"Predicting {len(readings)} readings with {len(self.descriptors)} models "
            f"(mode={self.mode}, training={include_training})"
        )

        df, scaled, normalization = FeatureEngineer.prepare(readings)
        actual_power = FeatureEngineer.observed_power(df)
        target = FeatureEngineer.synthetic_target(df) if self.mode == "regressor" else None

        tracer = get_tracer(__name__)
        model_results: list[ModelResult] = []
        for descriptor in self.descriptors:
            with tracer.start_as_current_span(f"predict.{descriptor.name}") as span:
                try:
                    result = self._predict_descriptor(
                        descriptor,
                        readings,
                        scaled,
                        normalization,
                        actual_power,
                        target,
                        include_training,
                    )
                except Exception as e:
                    logger.error(f"Error generating predictions for {descriptor.name}: {e}")
                    result = self._fallback_result(descriptor, readings, e)
                span.set_attribute("solarsight.source", result.source)
            model_results.append(result)

        dust_impact = self.dust_impact(df)
        for result in model_results:
            result.metrics.dust_impact = dust_impact

        default = model_results[0]
        fallbacks = sum(1 for r in model_results if r.is_fallback)
        if fallbacks:
            logger.warning(f"{fallbacks}/{len(model_results)} models used fallback predictions")

        return PredictionResult(
            predictions=default.predictions,
            metrics=default.metrics.model_copy(),
            feature_importance=default.feature_importance,
            model_results=model_results,
            actual_power=actual_power,
        )

    def _predict_descriptor(
        self,
        descriptor: ModelDescriptor,
        readings: Sequence[Reading],
        scaled: np.ndarray,
        normalization: NormalizationParams,
        actual_power: list[float | None] | None,
        target: np.ndarray | None,
        include_training: bool,
    ) -> ModelResult:
        if self.mode == "regressor":
            regressor = self.cache.get_or_create(descriptor)
            if include_training:
                if target is None:
                    raise ValueError("Training requested without a target")
                regressor.train(scaled, target, self.epochs)
                self.cache.save(descriptor.name)
            predictions = regressor.predict(scaled)
            source = "model"
        else:
            predictions = jittered(closed_form_predictions(readings), self.rng)
            source = "formula"

        if len(predictions) != len(readings):
            raise ValueError(
                f"{descriptor.name} returned {len(predictions)} predictions for {len(readings)} rows"
            )
        if not np.all(np.isfinite(predictions)):
            raise ValueError(f"{descriptor.name} produced non-finite predictions")

        values = [float(v) for v in predictions]
        metrics = self._score(actual_power, values)

        return ModelResult(
            name=descriptor.name,
            color=descriptor.color,
            predictions=values,
            metrics=metrics,
            feature_importance=feature_importance(descriptor.feature_weights, normalization),
            source=source,
        )

    def _score(
        self, actual_power: list[float | None] | None, predictions: list[float]
    ) -> PredictionMetrics:
        if actual_power is None:
            return placeholder_metrics(self.rng)
        return evaluate(actual_power, predictions)

    def _fallback_result(
        self, descriptor: ModelDescriptor, readings: Sequence[Reading], error: Exception
    ) -> ModelResult:
        predictions = jittered(closed_form_predictions(readings), self.rng)
        return ModelResult(
            name=descriptor.name,
            color=descriptor.color,
            predictions=[float(v) for v in predictions],
            metrics=placeholder_metrics(self.rng),
            feature_importance=normalize_weights(descriptor.feature_weights),
            source="fallback",
            error=f"{type(error).__name__}: {error}",
        )

    def dust_impact(self, df: pl.DataFrame) -> float:
        """Estimated percentage of output lost to particulates, in [0, 100]."""
        pm10 = df[ReadingColumns.PM10].fill_null(0.0)
        pm25 = df[ReadingColumns.PM25].fill_null(0.0)
        if not ((pm10 > 0).any() or (pm25 > 0).any()):
            return 0.0

        try:
            reference = self.cache.get(DUST_REFERENCE_MODEL)
            if reference is None or not reference.is_trained:
                impact = pm10.max() * PM10_DUST_WEIGHT + pm25.max() * PM25_DUST_WEIGHT
                return float(min(DUST_CAP, impact))

            features = FeatureEngineer.extract_features(df)
            baseline = features.copy()
            for column in (ReadingColumns.PM10, ReadingColumns.PM25):
                baseline[:, FEATURE_COLUMNS.index(column)] = 0.0

            # Both scenarios share one scaling so the zeroed rows stay comparable
            stacked, _ = FeatureEngineer.normalize(np.vstack([features, baseline]))
            with_dust = reference.predict(stacked[: len(features)]).mean()
            without_dust = reference.predict(stacked[len(features) :]).mean()

            if without_dust <= 0:
                return 0.0
            impact = (without_dust - with_dust) / without_dust * 100
            return float(min(max(0.0, impact), DUST_CAP))
        except Exception as e:
            logger.error(f"Error calculating dust impact: {e}")
            impact = pm10.mean() * PM10_DUST_WEIGHT + pm25.mean() * PM25_DUST_WEIGHT
            return float(min(DUST_ERROR_CAP, impact))


def generate_predictions(
    readings: Sequence[Reading],
    include_training: bool = True,
    predictor: MultiModelPredictor | None = None,
) -> PredictionResult:
    """Convenience wrapper running the default predictor."""
    return (predictor or MultiModelPredictor()).predict(readings, include_training)
