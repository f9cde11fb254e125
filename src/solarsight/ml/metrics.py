"""Regression fit statistics against observed power.

Rows without an observed value are skipped. When no observations exist at all
the caller gets placeholder metrics flagged ``estimated=True``.
"""

from collections.abc import Sequence

import numpy as np
from sklearn import metrics as skm

from solarsight.models.prediction import PredictionMetrics

# Bands for placeholder metrics when there is nothing to compare against
PLACEHOLDER_MSE = (15.0, 25.0)
PLACEHOLDER_MAE = (3.0, 5.5)
PLACEHOLDER_R2 = (0.75, 0.9)


def _observed_pairs(
    actual: Sequence[float | None], predicted: Sequence[float]
) -> tuple[np.ndarray, np.ndarray]:
    if len(actual) != len(predicted):
        raise ValueError(
            f"Length mismatch: {len(actual)} observations vs {len(predicted)} predictions"
        )
    y_true = np.array([np.nan if a is None else a for a in actual], dtype=float)
    y_pred = np.asarray(predicted, dtype=float)
    mask = ~np.isnan(y_true)
    return y_true[mask], y_pred[mask]


def mean_squared_error(actual: Sequence[float | None], predicted: Sequence[float]) -> float:
    y_true, y_pred = _observed_pairs(actual, predicted)
    if y_true.size == 0:
        return 0.0
    return float(skm.mean_squared_error(y_true, y_pred))


def mean_absolute_error(actual: Sequence[float | None], predicted: Sequence[float]) -> float:
    y_true, y_pred = _observed_pairs(actual, predicted)
    if y_true.size == 0:
        return 0.0
    return float(skm.mean_absolute_error(y_true, y_pred))


def r2_score(actual: Sequence[float | None], predicted: Sequence[float]) -> float:
    """Coefficient of determination; a constant target scores 1 if matched exactly, else 0."""
    y_true, y_pred = _observed_pairs(actual, predicted)
    if y_true.size == 0:
        return 0.0
    if y_true.size < 2 or np.ptp(y_true) == 0:
        return 1.0 if np.allclose(y_true, y_pred) else 0.0
    return float(skm.r2_score(y_true, y_pred))


def evaluate(actual: Sequence[float | None], predicted: Sequence[float]) -> PredictionMetrics:
    """MSE, MAE and R² over the observed rows."""
    return PredictionMetrics(
        mse=mean_squared_error(actual, predicted),
        mae=mean_absolute_error(actual, predicted),
        r2=r2_score(actual, predicted),
    )


def placeholder_metrics(rng: np.random.Generator) -> PredictionMetrics:
    """Plausible values drawn from fixed bands; never a real evaluation."""
    return PredictionMetrics(
        mse=float(rng.uniform(*PLACEHOLDER_MSE)),
        mae=float(rng.uniform(*PLACEHOLDER_MAE)),
        r2=float(rng.uniform(*PLACEHOLDER_R2)),
        estimated=True,
    )
