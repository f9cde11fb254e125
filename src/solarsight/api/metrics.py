"""Prometheus metrics for API monitoring."""

from prometheus_client import Counter, Histogram

# Request metrics
api_requests_total = Counter(
    "solarsight_api_requests_total",
    "Total API requests",
    ["method", "endpoint", "status"],
)

api_request_duration_seconds = Histogram(
    "solarsight_api_request_duration_seconds",
    "API request latency",
    ["method", "endpoint"],
)

# Prediction metrics
prediction_batches_total = Counter(
    "solarsight_prediction_batches_total",
    "Prediction batches served",
    ["input"],
)

readings_predicted_total = Counter(
    "solarsight_readings_predicted_total",
    "Readings run through the multi-model predictor",
)

model_results_total = Counter(
    "solarsight_model_results_total",
    "Per-model outcomes by source (model, formula, fallback)",
    ["model", "source"],
)

prediction_duration_seconds = Histogram(
    "solarsight_prediction_duration_seconds",
    "Wall time of a multi-model prediction batch (training included)",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30),
)

validation_errors_total = Counter(
    "solarsight_validation_errors_total",
    "Rejected inputs",
    ["input"],
)
