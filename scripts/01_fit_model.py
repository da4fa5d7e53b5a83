"""USL fitting runner.

Fits the Universal Scalability Law to a measurement CSV and writes:
- fit_summary.json (parameters, N_max/X_max, constraint flags, diagnostics)
- fit_table.csv (measured vs. predicted values per measurement)
- predictions.csv (throughput/latency over a concurrency grid)
- usl_fit.png (if enabled in config)
- config_snapshot.yaml

The CSV needs any two of the columns concurrency, throughput, latency.

Usage:
  python scripts/01_fit_model.py --measurements data/load_test.csv --out_dir reports/load_test

With a YAML config (sections: fit, report, run_name):
  python scripts/01_fit_model.py --measurements data/load_test.csv --config configs/base.yaml
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from usl.errors import USLError
from usl.fit import fit
from usl.reporting import concurrency_grid, fit_table, model_summary, plot_model_fit, prediction_table
from usl.utils import (
    USLConfig,
    config_from_dict,
    deep_update,
    ensure_dir,
    load_measurements_csv,
    load_yaml,
    save_json,
    save_yaml,
    setup_logging,
    validate_config,
)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fit the Universal Scalability Law to measurements")
    p.add_argument("--measurements", type=str, required=True, help="Measurement CSV path")
    p.add_argument("--config", type=str, default=None, help="YAML config (fit/report/run_name sections)")
    p.add_argument("--out_dir", type=str, default=None, help="Output directory (default: ./reports/<run_name>)")
    p.add_argument("--run_name", type=str, default=None, help="Override run_name from config")
    p.add_argument(
        "--max_concurrency",
        type=float,
        default=None,
        help="Override report.max_concurrency for the prediction grid",
    )
    p.add_argument("--no_figure", action="store_true", help="Skip the PNG figure")
    p.add_argument("--verbose", action="store_true", help="Log fitting details at DEBUG level")
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    logger = setup_logging("usl.fit_model", level=logging.DEBUG if args.verbose else logging.INFO)

    cfg_dict = USLConfig().to_dict()
    if args.config is not None:
        cfg_dict = deep_update(cfg_dict, load_yaml(args.config))
    overrides = {}
    if args.run_name is not None:
        overrides["run_name"] = args.run_name
    if args.max_concurrency is not None:
        overrides["report"] = {"max_concurrency": args.max_concurrency}
    if args.no_figure:
        overrides = deep_update(overrides, {"report": {"figure": False}})
    cfg = config_from_dict(deep_update(cfg_dict, overrides))
    validate_config(cfg)

    out_dir = ensure_dir(Path(args.out_dir) if args.out_dir else Path("reports") / cfg.run_name)

    measurements = load_measurements_csv(args.measurements)
    logger.info("Loaded %d measurements from %s", len(measurements), args.measurements)

    try:
        result = fit(measurements, config=cfg.fit)
    except USLError as e:
        logger.error("Fit failed: %s", e)
        raise SystemExit(1) from e

    model = result.model
    logger.info(
        "Fitted sigma=%.6g kappa=%.6g lambda=%.6g (r2=%.4f)",
        model.sigma,
        model.kappa,
        model.lambda_,
        result.r2,
    )
    if model.is_limitless():
        logger.info("Model is limitless (kappa=0); no finite max concurrency")
    else:
        logger.info("N_max=%g X_max=%.6g", model.max_concurrency(), model.max_throughput())

    save_yaml(cfg.to_dict(), out_dir / "config_snapshot.yaml")
    save_json(model_summary(model, result), out_dir / "fit_summary.json")
    fit_table(result, measurements).to_csv(out_dir / "fit_table.csv", index=False)

    grid = concurrency_grid(
        model,
        measurements,
        max_concurrency=cfg.report.max_concurrency,
        grid_points=cfg.report.grid_points,
    )
    prediction_table(model, grid).to_csv(out_dir / "predictions.csv")

    if cfg.report.figure:
        plot_model_fit(
            model,
            measurements,
            out_path=str(out_dir / "usl_fit.png"),
            max_concurrency=cfg.report.max_concurrency,
            grid_points=cfg.report.grid_points,
        )

    logger.info("Wrote outputs to %s", out_dir)


if __name__ == "__main__":
    main()
