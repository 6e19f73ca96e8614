"""
QB passing report figures.

The view helpers shape pipeline output for plotting; the plot helpers render
them with matplotlib/seaborn and return ``(view, figure)``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from numpy.typing import ArrayLike

from qb_passing_analysis.config import config
from qb_passing_analysis.exceptions import EmptyEvaluationSetError, require_columns

logger = logging.getLogger(__name__)

plt.rcParams.update({
    "figure.figsize": config.FIGURE_SIZE,
    "axes.spines.top": False,
    "axes.spines.right": False,
})

# ──────────────────────── shaped views ──────────────────────────

def season_leaders_view(
    aggregates: pd.DataFrame,
    season: int,
    *,
    top_n: int | None = None,
) -> pd.DataFrame:
    """Player-seasons for one season ranked by avg_yds, best first."""
    require_columns(aggregates, ["player_name", "season", "avg_yds"], where="aggregates")
    view = (
        aggregates[aggregates["season"] == season]
        .sort_values("avg_yds", ascending=False, kind="mergesort")
        .reset_index(drop=True)
    )
    if top_n is not None:
        view = view.head(top_n).copy()
    view.insert(0, "rank", np.arange(1, len(view) + 1))
    return view


def prediction_view(actual: ArrayLike, predicted: ArrayLike) -> pd.DataFrame:
    """Paired actual/predicted values with residuals."""
    act = np.asarray(actual, dtype=float).ravel()
    pred = np.asarray(predicted, dtype=float).ravel()
    if act.size != pred.size:
        raise EmptyEvaluationSetError(
            f"Predicted and actual differ in length: {pred.size} vs {act.size}"
        )
    return pd.DataFrame({"actual": act, "predicted": pred, "residual": pred - act})


# ──────────────────────── rendering ──────────────────────────

def plot_season_leaders(
    aggregates: pd.DataFrame,
    season: int,
    *,
    top_n: int | None = None,
    savefig: Path | None = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Ranked horizontal bar chart of passing yards per game for one season."""
    view = season_leaders_view(aggregates, season, top_n=top_n)

    height = max(4.0, 0.35 * len(view) + 1.5)
    fig, ax = plt.subplots(figsize=(config.FIGURE_SIZE[0], height))

    if view.empty:
        logger.warning("No player-seasons for %s; bar chart left empty", season)
        ax.text(0.5, 0.5, f"No data for {season}", ha="center", va="center",
                transform=ax.transAxes)
    else:
        # one bar per view row; names are not unique across player_ids
        pos = np.arange(len(view))
        ax.barh(pos, view["avg_yds"], color=sns.color_palette()[0])
        ax.set_yticks(pos)
        ax.set_yticklabels(view["player_name"])
        ax.invert_yaxis()
        for i, v in zip(pos, view["avg_yds"]):
            ax.text(v + 1, i, f"{v:.1f}", va="center", fontsize=8)

    ax.set_title(f"Passing Yards per Game, {season} Regular Season")
    ax.set_xlabel("Average Passing Yards per Game")
    ax.set_ylabel("")

    plt.tight_layout()
    if savefig:
        fig.savefig(savefig, dpi=config.DPI, bbox_inches="tight")
    return view, fig


def plot_predicted_vs_actual(
    actual: ArrayLike,
    predicted: ArrayLike,
    *,
    savefig: Path | None = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Scatter of held-out predictions with identity and fitted trend lines."""
    view = prediction_view(actual, predicted)

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.scatter(view["actual"], view["predicted"], alpha=0.7, color="darkblue")

    if not view.empty:
        ax.axline((0, 0), slope=1, color="gray", linestyle="--", label="Perfect prediction")
        if len(view) >= 2 and view["actual"].nunique() > 1:
            z = np.polyfit(view["actual"], view["predicted"], 1)
            xs = np.linspace(view["actual"].min(), view["actual"].max(), 50)
            ax.plot(xs, np.poly1d(z)(xs), "r-", linewidth=2, label="Fitted trend")
        lo = float(min(view["actual"].min(), view["predicted"].min()))
        hi = float(max(view["actual"].max(), view["predicted"].max()))
        pad = 0.05 * (hi - lo) if hi > lo else 1.0
        ax.set_xlim(lo - pad, hi + pad)
        ax.set_ylim(lo - pad, hi + pad)
        ax.legend()

    ax.set_title("Predicted vs Actual Passing Yards per Game (test set)")
    ax.set_xlabel("Actual")
    ax.set_ylabel("Predicted")

    plt.tight_layout()
    if savefig:
        fig.savefig(savefig, dpi=config.DPI, bbox_inches="tight")
    return view, fig
