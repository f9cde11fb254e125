"""FastAPI application exposing multi-model solar power predictions."""

import asyncio
import time
from collections.abc import Sequence
from functools import lru_cache

from fastapi import Depends, FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from solarsight.config import settings
from solarsight.exceptions import SolarSightError
from solarsight.logging import configure_observability, get_logger, instrument_fastapi
from solarsight.ml.descriptors import MODEL_DESCRIPTORS
from solarsight.ml.predict import MultiModelPredictor
from solarsight.models.prediction import PredictionResult
from solarsight.models.reading import Reading, ReadingBatch
from solarsight.models.weather import WeatherData
from solarsight.processing.ingest import load_readings
from solarsight.processing.simulation import (
    simulate_current_weather,
    simulate_historical_readings,
)

from .metrics import (
    api_request_duration_seconds,
    api_requests_total,
    model_results_total,
    prediction_batches_total,
    prediction_duration_seconds,
    readings_predicted_total,
    validation_errors_total,
)

configure_observability()
logger = get_logger(__name__)

app = FastAPI(
    title="SolarSight - Solar Power Prediction",
    description="Compare four power models over uploaded or simulated meteorological readings.",
    version="0.1.0",
)

instrument_fastapi(app)


class ModelInfo(BaseModel):
    """Static description of one model variant."""

    name: str
    color: str
    feature_weights: dict[str, float]
    hidden_layers: list[int]


class HealthCheck(BaseModel):
    """Health check response."""

    status: str
    prediction_mode: str
    models: list[str]


@lru_cache(maxsize=1)
def get_predictor() -> MultiModelPredictor:
    """Process-wide predictor so the regressor cache survives between requests."""
    return MultiModelPredictor()


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore
    """Record metrics for all requests."""
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time
    api_request_duration_seconds.labels(
        method=request.method,
        endpoint=request.url.path,
    ).observe(duration)

    api_requests_total.labels(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code,
    ).inc()

    return response


async def _run_prediction(
    predictor: MultiModelPredictor,
    readings: Sequence[Reading],
    include_training: bool,
    input_kind: str,
) -> PredictionResult:
    """Run the CPU-bound predictor off the event loop and record metrics."""
    start_time = time.time()
    result = await asyncio.to_thread(predictor.predict, readings, include_training)
    prediction_duration_seconds.observe(time.time() - start_time)

    prediction_batches_total.labels(input=input_kind).inc()
    readings_predicted_total.inc(len(readings))
    for model_result in result.model_results:
        model_results_total.labels(model=model_result.name, source=model_result.source).inc()

    logger.info(
        f"Served {input_kind} prediction for {len(readings)} readings "
        f"(default model {result.default_model}, R²={result.metrics.r2:.3f})"
    )
    return result


@app.get("/health", response_model=HealthCheck)
async def health() -> HealthCheck:
    """Health check endpoint."""
    return HealthCheck(
        status="healthy",
        prediction_mode=settings.prediction_mode,
        models=[d.name for d in MODEL_DESCRIPTORS],
    )


@app.get("/models", response_model=list[ModelInfo])
async def list_models() -> list[ModelInfo]:
    """The statically configured model variants, in result order."""
    return [
        ModelInfo(
            name=d.name,
            color=d.color,
            feature_weights=d.feature_weights,
            hidden_layers=list(d.hidden_layers),
        )
        for d in MODEL_DESCRIPTORS
    ]


@app.post("/predict", response_model=PredictionResult)
async def predict(
    batch: ReadingBatch,
    predictor: MultiModelPredictor = Depends(get_predictor),
) -> PredictionResult:
    """Predict power for a JSON batch of readings with every model."""
    return await _run_prediction(predictor, batch.readings, batch.include_training, "json")


@app.post("/predict/upload", response_model=PredictionResult)
async def predict_upload(
    file: UploadFile = File(..., description="CSV or Excel spreadsheet of readings"),
    include_training: bool = Form(default=True),
    predictor: MultiModelPredictor = Depends(get_predictor),
) -> PredictionResult:
    """
    Predict power for an uploaded spreadsheet.

    The first sheet must contain temperature, humidity, wind speed and solar
    irradiance columns; snake_case or camelCase headers are accepted.
    """
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Uploaded file is too large")

    try:
        readings = load_readings(content, file.filename or "")
    except SolarSightError as e:
        validation_errors_total.labels(input="upload").inc()
        logger.warning(f"Rejected upload {file.filename}: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e

    return await _run_prediction(predictor, readings, include_training, "upload")


@app.get("/weather/simulated", response_model=WeatherData)
async def simulated_weather(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
) -> WeatherData:
    """Simulated current weather and air quality for a location."""
    return simulate_current_weather(latitude, longitude)


@app.get(
    "/readings/simulated", response_model=list[Reading], response_model_by_alias=False
)
async def simulated_readings(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    hours: int = Query(default=settings.simulation_hours, ge=1, le=168),
) -> list[Reading]:
    """Simulated hourly readings for the past ``hours`` at a location."""
    return simulate_historical_readings(latitude, longitude, hours=hours)


@app.post("/predict/simulated", response_model=PredictionResult)
async def predict_simulated(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    include_training: bool = Query(default=True),
    predictor: MultiModelPredictor = Depends(get_predictor),
) -> PredictionResult:
    """Simulate the last day of readings at a location and predict over them."""
    readings = simulate_historical_readings(latitude, longitude, hours=settings.simulation_hours)
    return await _run_prediction(predictor, readings, include_training, "simulated")


@app.get("/metrics")
async def metrics() -> PlainTextResponse:
    """Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def main() -> None:
    import uvicorn

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
