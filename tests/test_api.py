"""Tests for the FastAPI application."""

import pytest
from fastapi.testclient import TestClient

from solarsight.api.main import app, get_predictor
from solarsight.ml.predict import MultiModelPredictor
from solarsight.ml.regressor import RegressorCache

CSV_CONTENT = (
    "temperature,humidity,windSpeed,solarIrradiance,pm10,actualPower\n"
    "24.0,45,3.1,780,22.5,118.0\n"
    "26.5,40,3.4,860,24.0,131.5\n"
    "18.0,70,1.2,150,30.0,20.0\n"
)


@pytest.fixture
def client():
    predictor = MultiModelPredictor(mode="formula", cache=RegressorCache(model_dir=None), seed=11)
    app.dependency_overrides[get_predictor] = lambda: predictor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _reading(**overrides):
    reading = {"temperature": 25, "humidity": 50, "wind_speed": 3, "solar_irradiance": 800}
    reading.update(overrides)
    return reading


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["models"] == [
        "random_forest",
        "gradient_boosting",
        "neural_network",
        "support_vector",
    ]


def test_models(client: TestClient) -> None:
    response = client.get("/models")

    assert response.status_code == 200
    models = {m["name"]: m for m in response.json()}
    assert models["neural_network"]["hidden_layers"] == [16, 8]
    assert models["random_forest"]["color"] == "#0ea5e9"


def test_predict_json(client: TestClient) -> None:
    payload = {
        "readings": [
            _reading(),
            {"temperature": 10, "humidity": 90, "windSpeed": 1, "solarIrradiance": 0},
        ]
    }

    response = client.post("/predict", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert len(body["predictions"]) == 2
    assert len(body["model_results"]) == 4
    assert body["predictions"][0] > body["predictions"][1]
    assert body["actual_power"] is None
    assert body["metrics"]["estimated"] is True
    for model_result in body["model_results"]:
        assert sum(model_result["feature_importance"].values()) == pytest.approx(1.0)


def test_predict_json_missing_field(client: TestClient) -> None:
    payload = {"readings": [{"temperature": 20, "humidity": 50, "wind_speed": 2}]}

    response = client.post("/predict", json=payload)

    assert response.status_code == 422


def test_predict_upload_csv(client: TestClient) -> None:
    response = client.post(
        "/predict/upload",
        files={"file": ("readings.csv", CSV_CONTENT.encode(), "text/csv")},
        data={"include_training": "false"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["actual_power"] == [118.0, 131.5, 20.0]
    assert body["metrics"]["estimated"] is False
    assert body["metrics"]["dust_impact"] > 0


def test_predict_upload_missing_columns(client: TestClient) -> None:
    content = b"temperature,humidity\n20,50\n"

    response = client.post(
        "/predict/upload", files={"file": ("readings.csv", content, "text/csv")}
    )

    assert response.status_code == 422
    assert "Missing required columns" in response.json()["detail"]


def test_predict_upload_rejects_other_formats(client: TestClient) -> None:
    response = client.post(
        "/predict/upload", files={"file": ("readings.json", b"[]", "application/json")}
    )

    assert response.status_code == 422
    assert "CSV" in response.json()["detail"]


def test_simulated_weather(client: TestClient) -> None:
    response = client.get("/weather/simulated", params={"latitude": 60.17, "longitude": 24.94})

    assert response.status_code == 200
    body = response.json()
    assert body["simulated"] is True
    assert body["location"] == {"latitude": 60.17, "longitude": 24.94}


def test_simulated_weather_validates_coordinates(client: TestClient) -> None:
    response = client.get("/weather/simulated", params={"latitude": 120, "longitude": 0})
    assert response.status_code == 422


def test_simulated_readings(client: TestClient) -> None:
    response = client.get(
        "/readings/simulated", params={"latitude": 30, "longitude": 10, "hours": 6}
    )

    assert response.status_code == 200
    readings = response.json()
    assert len(readings) == 6
    assert "solar_irradiance" in readings[0]


def test_predict_simulated(client: TestClient) -> None:
    response = client.post("/predict/simulated", params={"latitude": 30, "longitude": 10})

    assert response.status_code == 200
    body = response.json()
    assert len(body["predictions"]) == 24
    assert all(r["source"] == "formula" for r in body["model_results"])


def test_metrics_endpoint(client: TestClient) -> None:
    client.get("/health")
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "solarsight_api_requests_total" in response.text
