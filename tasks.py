# tasks.py  ── invoke ≥2.2
from invoke import task, Context  # type: ignore
from typing import Optional

import os
import sys
import pathlib


BASE_ENV = pathlib.Path(__file__).parent


def _use_pty() -> bool:
    return os.name != "nt" and sys.stdin.isatty()


@task(
    help={
        "min_season": "First season to include (default: config.MIN_SEASON)",
        "max_season": "Last season to include (default: config.MAX_SEASON)",
        "ranked_season": "Season for the leaders chart (default: latest loaded)",
        "seed": "Split seed; -1 for an unseeded split",
        "input_csv": "Read player-game rows from this CSV instead of nflverse",
        "output_dir": "Where to write figures and tables",
        "save_model": "Persist the fitted model with joblib",
        "track": "Log the run to MLflow",
    }
)
def report(
    c: Context,
    min_season: Optional[int] = None,
    max_season: Optional[int] = None,
    ranked_season: Optional[int] = None,
    seed: Optional[int] = None,
    input_csv: Optional[str] = None,
    output_dir: Optional[str] = None,
    save_model: bool = False,
    track: bool = False,
) -> None:
    """Build the QB passing report."""
    args = []
    if min_season is not None:
        args.append(f"--min-season {min_season}")
    if max_season is not None:
        args.append(f"--max-season {max_season}")
    if ranked_season is not None:
        args.append(f"--ranked-season {ranked_season}")
    if seed is not None:
        args.append(f"--seed {seed}")
    if input_csv:
        args.append(f"--input-csv {input_csv}")
    if output_dir:
        args.append(f"--output-dir {output_dir}")
    if save_model:
        args.append("--save-model")
    if track:
        args.append("--track")
    c.run(f"{sys.executable} -m qb_passing_analysis {' '.join(args)}", pty=_use_pty())


@task(help={"k": "Only run tests matching this expression"})
def test(c: Context, k: Optional[str] = None) -> None:
    """Run the pytest suite."""
    expr = f' -k "{k}"' if k else ""
    c.run(f"{sys.executable} -m pytest{expr}", pty=_use_pty())


@task(help={"port": "Port for the MLflow UI (default: 5000)"})
def mlflow_ui(c: Context, port: int = 5000) -> None:
    """Serve the local MLflow tracking UI for logged report runs."""
    c.run(f"mlflow ui --backend-store-uri {BASE_ENV / 'mlruns'} --port {port}", pty=_use_pty())


@task
def clean(c: Context) -> None:
    """Remove generated report artifacts."""
    for d in ("output", "mlruns"):
        path = BASE_ENV / d
        if path.exists():
            c.run(f"rm -rf {path}")
