"""
Command line entry: build the QB passing report.

    python -m qb_passing_analysis --min-season 2020 --ranked-season 2023
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from qb_passing_analysis.config import config
from qb_passing_analysis.data.loader import DataLoader
from qb_passing_analysis.pipeline import run_full_analysis

logger = logging.getLogger("qb_passing_analysis")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qb-passing-report",
        description="Aggregate QB passing stats, fit an OLS model of yards per game and write the report artifacts.",
    )
    parser.add_argument("--min-season", type=int, default=config.MIN_SEASON)
    parser.add_argument("--max-season", type=int, default=config.MAX_SEASON)
    parser.add_argument("--ranked-season", type=int, default=None,
                        help="Season for the leaders bar chart (default: latest loaded)")
    parser.add_argument("--top-n", type=int, default=config.TOP_N_LEADERS)
    parser.add_argument("--position", default=config.TARGET_POSITION)
    parser.add_argument("--train-fraction", type=float, default=config.TRAIN_FRACTION)
    parser.add_argument("--seed", type=int, default=config.RANDOM_SEED,
                        help="Split seed; pass -1 for an unseeded split")
    parser.add_argument("--input-csv", type=Path, default=None,
                        help="Read player-game rows from CSV instead of nflverse")
    parser.add_argument("--output-dir", type=Path, default=config.OUTPUT_DIR)
    parser.add_argument("--save-model", action="store_true",
                        help=f"Persist the fitted model to {config.MODEL_FILE}")
    parser.add_argument("--track", action="store_true", help="Log the run to MLflow")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s │ %(levelname)s │ %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    seed = None if args.seed < 0 else args.seed
    if seed is None:
        logger.warning("Unseeded split: metrics will vary between runs")

    loader = DataLoader()
    try:
        if args.input_csv is not None:
            raw = loader.load_csv(args.input_csv)
        else:
            raw = loader.load_weekly_stats(range(args.min_season, args.max_season + 1))
        logger.debug("Loaded data summary: %s", loader.get_data_summary())

        result = run_full_analysis(
            raw,
            position=args.position,
            min_season=args.min_season,
            max_season=args.max_season,
            ranked_season=args.ranked_season,
            top_n=args.top_n,
            train_fraction=args.train_fraction,
            random_state=seed,
            output_dir=args.output_dir,
        )
    # QBAnalysisError subclasses ValueError; bad settings raise plain ValueError
    except (ValueError, FileNotFoundError) as exc:
        logger.error("Report failed: %s", exc)
        return 1

    print(result.metrics_table.to_string(index=False))

    if args.save_model:
        from qb_passing_analysis.utils.model_utils import save_model
        save_model(result.model, metrics=result.evaluation.as_dict())

    if args.track:
        from qb_passing_analysis.utils.tracking import log_pipeline_run, setup_mlflow_experiment
        setup_mlflow_experiment()
        log_pipeline_run(result, {
            "position": args.position,
            "min_season": args.min_season,
            "max_season": args.max_season,
            "train_fraction": args.train_fraction,
            "seed": seed,
            "predictors": ",".join(result.model.predictors),
        })

    result.close_figures()
    return 0


if __name__ == "__main__":
    sys.exit(main())
