"""Small feed-forward regressor per model descriptor, with an opportunistic cache."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import joblib
import numpy as np
from sklearn.exceptions import NotFittedError
from sklearn.neural_network import MLPRegressor

from solarsight.logging import get_logger
from solarsight.ml.descriptors import ModelDescriptor

logger = get_logger(__name__)

LEARNING_RATE = 0.01


class SolarRegressor:
    """Dense ReLU network with a linear output, trained with Adam on squared error."""

    def __init__(
        self,
        name: str,
        hidden_layers: tuple[int, ...] = (10,),
        random_state: int | None = None,
    ) -> None:
        self.name = name
        self.hidden_layers = hidden_layers
        self.model = MLPRegressor(
            hidden_layer_sizes=hidden_layers,
            activation="relu",
            solver="adam",
            learning_rate_init=LEARNING_RATE,
            random_state=random_state,
        )
        self.epochs_trained = 0
        self.model_version: str = "untrained"
        self.trained_at: datetime | None = None

    @classmethod
    def for_descriptor(
        cls, descriptor: ModelDescriptor, random_state: int | None = None
    ) -> "SolarRegressor":
        return cls(descriptor.name, descriptor.hidden_layers, random_state)

    @property
    def is_trained(self) -> bool:
        return self.epochs_trained > 0

    def train(self, X: np.ndarray, y: np.ndarray, epochs: int) -> dict[str, float]:
        """Run ``epochs`` passes of Adam over the full batch and return final-fit metrics."""
        if epochs < 1:
            raise ValueError("epochs must be at least 1")
        if len(X) != len(y):
            raise ValueError(f"Feature/target length mismatch: {len(X)} vs {len(y)}")

        logger.info(f"Training {self.name} on {len(X)} rows for {epochs} epochs")

        for epoch in range(epochs):
            self.model.partial_fit(X, y)
            logger.debug(f"[{self.name}] Epoch {epoch}: loss = {self.model.loss_:.4f}")

        self.epochs_trained += epochs
        self.trained_at = datetime.now(UTC)
        self.model_version = self.trained_at.strftime("%Y%m%d_%H%M%S")

        predictions = self.model.predict(X)
        mse = float(((predictions - y) ** 2).mean())
        mae = float(abs(predictions - y).mean())
        logger.info(f"Training {self.name} complete: loss={self.model.loss_:.4f}, MAE={mae:.2f}")

        return {"loss": float(self.model.loss_), "mse": mse, "mae": mae}

    def predict(self, X: np.ndarray) -> np.ndarray:
        if not self.is_trained:
            raise NotFittedError(f"Regressor {self.name} has not been trained")
        return np.asarray(self.model.predict(X), dtype=float).ravel()

    def save(self, path: Path) -> None:
        if not self.is_trained:
            raise ValueError("No trained model to save")

        path.parent.mkdir(parents=True, exist_ok=True)
        metadata: dict[str, Any] = {
            "name": self.name,
            "hidden_layers": self.hidden_layers,
            "model": self.model,
            "epochs_trained": self.epochs_trained,
            "model_version": self.model_version,
            "trained_at": self.trained_at,
        }
        joblib.dump(metadata, path)
        logger.info(f"Model {self.name} saved to {path}")

    @classmethod
    def load(cls, path: Path) -> "SolarRegressor":
        metadata = joblib.load(path)
        regressor = cls(metadata["name"], tuple(metadata["hidden_layers"]))
        regressor.model = metadata["model"]
        regressor.epochs_trained = metadata["epochs_trained"]
        regressor.model_version = metadata["model_version"]
        regressor.trained_at = metadata["trained_at"]
        logger.info(f"Model loaded from {path} (version: {regressor.model_version})")
        return regressor


class RegressorCache:
    """
    In-memory regressors keyed by descriptor name, backed by best-effort snapshots.

    Loading a snapshot is allowed to fail: the cache logs it and starts from a
    fresh network. Saving failures are logged and ignored.
    """

    def __init__(
        self,
        model_dir: Path | None = None,
        persist: bool = True,
        random_state: int | None = None,
    ) -> None:
        self.model_dir = model_dir
        self.persist = persist and model_dir is not None
        self.random_state = random_state
        self._models: dict[str, SolarRegressor] = {}

    def snapshot_path(self, name: str) -> Path | None:
        if self.model_dir is None:
            return None
        return self.model_dir / f"{name}.joblib"

    def get(self, name: str) -> SolarRegressor | None:
        return self._models.get(name)

    def get_or_create(self, descriptor: ModelDescriptor) -> SolarRegressor:
        cached = self._models.get(descriptor.name)
        if cached is not None:
            return cached

        regressor = self._load_snapshot(descriptor)
        if regressor is None:
            logger.info(f"Creating new model: {descriptor.name}")
            regressor = SolarRegressor.for_descriptor(descriptor, self.random_state)

        self._models[descriptor.name] = regressor
        return regressor

    def _load_snapshot(self, descriptor: ModelDescriptor) -> SolarRegressor | None:
        path = self.snapshot_path(descriptor.name)
        if path is None or not path.exists():
            return None
        try:
            regressor = SolarRegressor.load(path)
        except Exception as e:
            logger.warning(f"Could not load snapshot for {descriptor.name} from {path}: {e}")
            return None
        if regressor.hidden_layers != descriptor.hidden_layers:
            logger.warning(
                f"Snapshot for {descriptor.name} has layers {regressor.hidden_layers}, "
                f"expected {descriptor.hidden_layers}; discarding"
            )
            return None
        return regressor

    def save(self, name: str) -> None:
        """Snapshot a trained regressor to disk if persistence is enabled."""
        regressor = self._models.get(name)
        path = self.snapshot_path(name)
        if not self.persist or regressor is None or path is None:
            return
        try:
            regressor.save(path)
        except Exception as e:
            logger.warning(f"Could not save snapshot for {name} to {path}: {e}")

    def clear(self) -> None:
        self._models.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)
