"""Power prediction models: descriptors, regressors and the multi-model predictor."""

from solarsight.ml.descriptors import MODEL_DESCRIPTORS, ModelDescriptor, get_descriptor
from solarsight.ml.predict import MultiModelPredictor, generate_predictions
from solarsight.ml.regressor import RegressorCache, SolarRegressor

__all__ = [
    "MODEL_DESCRIPTORS",
    "ModelDescriptor",
    "MultiModelPredictor",
    "RegressorCache",
    "SolarRegressor",
    "generate_predictions",
    "get_descriptor",
]
