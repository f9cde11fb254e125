"""Static descriptors for the four model variants shown side by side."""

from dataclasses import dataclass, field

from solarsight.schemas import FEATURE_COLUMNS


@dataclass(frozen=True)
class ModelDescriptor:
    """Name, chart color and hand-chosen feature weights of one model variant."""

    name: str
    color: str
    feature_weights: dict[str, float]
    hidden_layers: tuple[int, ...] = field(default=(10,))

    def __post_init__(self) -> None:
        unknown = set(self.feature_weights) - set(FEATURE_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown features in weights for {self.name}: {sorted(unknown)}")


MODEL_DESCRIPTORS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        name="random_forest",
        color="#0ea5e9",
        feature_weights={
            "solar_irradiance": 0.65,
            "temperature": 0.15,
            "humidity": 0.08,
            "wind_speed": 0.03,
            "pm10": 0.04,
            "pm25": 0.05,
            "cloud_cover": 0.09,
        },
    ),
    ModelDescriptor(
        name="gradient_boosting",
        color="#10b981",
        feature_weights={
            "solar_irradiance": 0.55,
            "temperature": 0.25,
            "humidity": 0.06,
            "wind_speed": 0.03,
            "pm10": 0.07,
            "pm25": 0.08,
            "cloud_cover": 0.12,
        },
    ),
    ModelDescriptor(
        name="neural_network",
        color="#8b5cf6",
        feature_weights={
            "solar_irradiance": 0.60,
            "temperature": 0.20,
            "humidity": 0.07,
            "wind_speed": 0.04,
            "pm10": 0.03,
            "pm25": 0.05,
            "cloud_cover": 0.10,
        },
        hidden_layers=(16, 8),
    ),
    ModelDescriptor(
        name="support_vector",
        color="#f97316",
        feature_weights={
            "solar_irradiance": 0.58,
            "temperature": 0.18,
            "humidity": 0.09,
            "wind_speed": 0.05,
            "pm10": 0.06,
            "pm25": 0.06,
            "cloud_cover": 0.08,
        },
    ),
)

# Used for the counterfactual dust-impact estimate
DUST_REFERENCE_MODEL = "neural_network"


def get_descriptor(name: str) -> ModelDescriptor:
    """Look up a descriptor by name."""
    for descriptor in MODEL_DESCRIPTORS:
        if descriptor.name == name:
            return descriptor
    raise KeyError(f"Unknown model: {name}")
