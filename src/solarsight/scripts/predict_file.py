"""Run the multi-model predictor over a spreadsheet from the command line.

Usage:
    solarsight-predict readings.xlsx --output predictions.csv
    solarsight-predict readings.csv --mode formula

Without ``--output`` a JSON summary (metrics and importance per model) is
printed to stdout.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from solarsight.config import settings
from solarsight.exceptions import SolarSightError
from solarsight.ml.predict import MultiModelPredictor
from solarsight.ml.regressor import RegressorCache
from solarsight.models.prediction import PredictionResult
from solarsight.processing.ingest import load_readings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Predict solar power for a CSV/Excel file of readings with every model."
    )
    parser.add_argument("file", type=Path, help="Spreadsheet with one reading per row.")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write per-model predictions as CSV to this path.",
    )
    parser.add_argument(
        "--mode",
        choices=("regressor", "formula"),
        default=settings.prediction_mode,
        help=f"Prediction mode (default: {settings.prediction_mode}).",
    )
    parser.add_argument(
        "--epochs",
        type=int,
        default=settings.training_epochs,
        help=f"Training epochs per model (default: {settings.training_epochs}).",
    )
    parser.add_argument(
        "--no-training",
        action="store_true",
        help="Predict with cached snapshots only; models without one fall back.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.random_seed,
        help="Seed for jitter and placeholder metrics.",
    )
    return parser.parse_args(argv)


def summarize(result: PredictionResult) -> dict:
    """Per-model metrics and importance without the prediction arrays."""
    return {
        "default_model": result.default_model,
        "rows": len(result.predictions),
        "has_actual_power": result.actual_power is not None,
        "models": [
            {
                "name": r.name,
                "source": r.source,
                "error": r.error,
                "metrics": r.metrics.model_dump(),
                "feature_importance": r.feature_importance,
            }
            for r in result.model_results
        ],
    }


def run(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.epochs <= 0:
        logger.error("epochs must be positive")
        return 2

    try:
        readings = load_readings(args.file)
    except (SolarSightError, FileNotFoundError) as e:
        logger.error(f"Could not load {args.file}: {e}")
        return 1

    predictor = MultiModelPredictor(
        mode=args.mode,
        epochs=args.epochs,
        cache=RegressorCache(
            model_dir=settings.model_dir,
            persist=settings.persist_models,
            random_state=args.seed,
        ),
        seed=args.seed,
    )
    result = predictor.predict(readings, include_training=not args.no_training)

    for model_result in result.model_results:
        m = model_result.metrics
        logger.info(
            f"{model_result.name:<18} source={model_result.source:<8} "
            f"MSE={m.mse:.2f} MAE={m.mae:.2f} R²={m.r2:.3f}"
            f"{' (estimated)' if m.estimated else ''}"
        )

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        times = [r.time for r in readings]
        frame = result.to_frame(times=times if any(t is not None for t in times) else None)
        frame.write_csv(args.output)
        logger.info(f"Wrote {len(readings)} rows to {args.output}")
    else:
        print(json.dumps(summarize(result), indent=2))

    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
