"""Feature importance from static weights, nudged by each feature's observed range."""

from collections.abc import Mapping

from solarsight.processing.features import NormalizationParams

MAX_RANGE_BOOST = 1.2
RANGE_SCALE = 1000.0


def range_influence(low: float, high: float) -> float:
    """Multiplier in [1, 1.2] that grows with the feature's spread."""
    spread = high - low
    if spread <= 0:
        return 1.0
    return min(MAX_RANGE_BOOST, 1 + spread / RANGE_SCALE)


def normalize_weights(weights: Mapping[str, float]) -> dict[str, float]:
    total = sum(weights.values())
    if total <= 0:
        # Degenerate weights: spread evenly
        return {feature: 1.0 / len(weights) for feature in weights}
    return {feature: weight / total for feature, weight in weights.items()}


def feature_importance(
    weights: Mapping[str, float], normalization: NormalizationParams | None = None
) -> dict[str, float]:
    """Boost each static weight by its range influence and rescale so the mapping sums to 1."""
    normalization = normalization or {}
    adjusted = {}
    for feature, weight in weights.items():
        if feature in normalization:
            low, high = normalization[feature]
            adjusted[feature] = weight * range_influence(low, high)
        else:
            adjusted[feature] = weight
    return normalize_weights(adjusted)
