"""Shared fixtures for the QB passing analysis tests."""
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest


def make_game_rows(n_players=12, seasons=(2022, 2023), games=(10, 17), seed=7):
    """Synthetic player-game rows: QBs plus a few non-QB and off-season rows."""
    rng = np.random.default_rng(seed)
    rows = []
    for p in range(n_players):
        skill = rng.uniform(170, 300)
        for season in seasons:
            for week in range(1, int(rng.integers(games[0], games[1] + 1)) + 1):
                yds = max(0.0, rng.normal(skill, 60))
                rows.append({
                    "player_id": f"00-{p:04d}",
                    "player_name": f"QB {p}",
                    "position": "QB",
                    "season": season,
                    "season_type": "REG",
                    "week": week,
                    "passing_yards": round(yds),
                    "passing_tds": int(rng.poisson(yds / 140)),
                    "interceptions": int(rng.poisson(0.8)),
                })
    # rows the filter must drop
    rows.append({**rows[0], "season_type": "POST", "week": 19, "passing_yards": 999})
    rows.append({**rows[0], "position": "WR", "player_id": "00-9999",
                 "player_name": "WR 1", "passing_yards": 40})
    rows.append({**rows[0], "season": 2015, "passing_yards": 500})
    return pd.DataFrame(rows)


@pytest.fixture
def game_rows():
    return make_game_rows()


@pytest.fixture
def literal_aggregates():
    """Hand-written player-season aggregates (8 rows, two seasons)."""
    return pd.DataFrame({
        "player_id":   ["A", "B", "C", "D", "E", "F", "G", "H"],
        "player_name": ["A", "B", "C", "D", "E", "F", "G", "H"],
        "season":      [2023, 2023, 2023, 2023, 2022, 2022, 2022, 2022],
        "tot_yds":     [4000, 3000, 4500, 2500, 3800, 4200, 3300, 2000],
        "tot_td":      [30, 20, 35, 14, 26, 31, 22, 10],
        "tot_int":     [10, 12, 8, 9, 11, 14, 7, 6],
        "avg_yds":     [235.3, 200.1, 264.7, 178.6, 223.5, 247.1, 206.3, 166.7],
        "games":       [17, 15, 17, 14, 17, 17, 16, 12],
    })


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")
