"""
Tests for the filter and aggregation stages.
"""
import unittest

import numpy as np
import pandas as pd
import pytest

from qb_passing_analysis.config import AGGREGATE_COLUMNS
from qb_passing_analysis.data.preprocessor import (
    DataPreprocessor,
    aggregate_player_seasons,
    filter_stat_records,
)
from qb_passing_analysis.exceptions import SchemaMismatchError


def _known_rows():
    """3 players x 2 seasons with hand-picked yards/TDs/INTs."""
    rows = []
    yards = {
        ("p1", 2022): [300, 250, 200],
        ("p1", 2023): [310, 290],
        ("p2", 2022): [180, 220],
        ("p2", 2023): [260, 240, 230, 270],
        ("p3", 2022): [150],
        ("p3", 2023): [205, 195],
    }
    for (pid, season), games in yards.items():
        for week, yds in enumerate(games, start=1):
            rows.append({
                "player_id": pid, "player_name": pid.upper(), "position": "QB",
                "season": season, "season_type": "REG", "week": week,
                "passing_yards": yds, "passing_tds": week % 3, "interceptions": week % 2,
            })
    return pd.DataFrame(rows), yards


class TestFilterStage(unittest.TestCase):

    def setUp(self):
        self.df = pd.DataFrame({
            "player_id":     ["a", "a", "b", "c", "d", "e"],
            "player_name":   ["A", "A", "B", "C", "D", "E"],
            "position":      ["QB", "QB", "QB", "WR", "QB", "QB"],
            "season":        [2021, 2022, 2022, 2022, 2019, 2023],
            "season_type":   ["REG", "REG", "POST", "REG", "REG", "REG"],
            "passing_yards": [200, 250, 300, 10, 220, 275],
            "passing_tds":   [1, 2, 3, 0, 1, 2],
            "interceptions": [0, 1, 0, 0, 2, 1],
        })

    def test_predicates_hold(self):
        out = filter_stat_records(self.df, position="QB", min_season=2020)
        self.assertEqual(list(out["player_id"]), ["a", "a", "e"])
        self.assertTrue((out["position"] == "QB").all())
        self.assertTrue((out["season_type"] == "REG").all())
        self.assertTrue((out["season"] >= 2020).all())

    def test_output_is_subset_of_input(self):
        out = filter_stat_records(self.df, position="QB", min_season=2020)
        self.assertTrue(set(out.index).issubset(self.df.index))
        pd.testing.assert_frame_equal(out, self.df.loc[out.index])

    def test_idempotent(self):
        once = filter_stat_records(self.df, position="QB", min_season=2020)
        twice = filter_stat_records(once, position="QB", min_season=2020)
        pd.testing.assert_frame_equal(once, twice)

    def test_max_season(self):
        out = filter_stat_records(self.df, position="QB", min_season=2020, max_season=2022)
        self.assertEqual(sorted(out["season"].unique()), [2021, 2022])

    def test_no_matches_is_empty_not_error(self):
        out = filter_stat_records(self.df, position="K", min_season=2020)
        self.assertTrue(out.empty)
        self.assertListEqual(list(out.columns), list(self.df.columns))

    def test_empty_input(self):
        out = filter_stat_records(self.df.iloc[0:0], position="QB", min_season=2020)
        self.assertTrue(out.empty)

    def test_input_not_mutated(self):
        before = self.df.copy()
        filter_stat_records(self.df, position="QB", min_season=2020)
        pd.testing.assert_frame_equal(self.df, before)

    def test_missing_column(self):
        with self.assertRaises(SchemaMismatchError):
            filter_stat_records(self.df.drop(columns=["position"]), position="QB", min_season=2020)


class TestAggregationStage(unittest.TestCase):

    def setUp(self):
        self.df, self.yards = _known_rows()

    def test_keys_unique(self):
        agg = aggregate_player_seasons(self.df)
        self.assertEqual(len(agg), 6)
        self.assertFalse(agg.duplicated(["player_id", "season"]).any())

    def test_totals_and_rate(self):
        agg = aggregate_player_seasons(self.df).set_index(["player_id", "season"])
        for key, games in self.yards.items():
            self.assertEqual(agg.loc[key, "tot_yds"], sum(games))
            self.assertAlmostEqual(agg.loc[key, "avg_yds"], np.mean(games))
            self.assertEqual(agg.loc[key, "games"], len(games))

        rows = self.df[(self.df.player_id == "p2") & (self.df.season == 2023)]
        self.assertEqual(agg.loc[("p2", 2023), "tot_td"], rows["passing_tds"].sum())
        self.assertEqual(agg.loc[("p2", 2023), "tot_int"], rows["interceptions"].sum())

    def test_schema_and_order(self):
        agg = aggregate_player_seasons(self.df)
        self.assertListEqual(list(agg.columns), AGGREGATE_COLUMNS)
        first_seen = list(dict.fromkeys(zip(self.df.player_id, self.df.season)))
        self.assertListEqual(list(zip(agg.player_id, agg.season)), first_seen)
        self.assertEqual(agg.loc[0, "player_name"], "P1")

    def test_duplicates_count_independently(self):
        dup = pd.concat([self.df, self.df.iloc[[0]]], ignore_index=True)
        agg = aggregate_player_seasons(dup).set_index(["player_id", "season"])
        self.assertEqual(agg.loc[("p1", 2022), "tot_yds"], 300 + 250 + 200 + 300)
        self.assertEqual(agg.loc[("p1", 2022), "games"], 4)
        self.assertAlmostEqual(agg.loc[("p1", 2022), "avg_yds"], 1050 / 4)

    def test_missing_stats_count_as_zero(self):
        df = self.df.copy()
        df.loc[0, "passing_yards"] = np.nan
        agg = aggregate_player_seasons(df).set_index(["player_id", "season"])
        self.assertEqual(agg.loc[("p1", 2022), "tot_yds"], 450)
        self.assertAlmostEqual(agg.loc[("p1", 2022), "avg_yds"], 150.0)

    def test_empty_input(self):
        agg = aggregate_player_seasons(self.df.iloc[0:0])
        self.assertTrue(agg.empty)
        self.assertListEqual(list(agg.columns), AGGREGATE_COLUMNS)

    def test_missing_column(self):
        with self.assertRaises(SchemaMismatchError):
            aggregate_player_seasons(self.df.drop(columns=["interceptions"]))


class TestDataPreprocessor:

    def test_preprocess_complete(self, game_rows):
        pre = DataPreprocessor()
        pre.update_config(min_season=2020, max_season=2023)
        agg = pre.preprocess_complete(game_rows)

        assert len(agg) == 24  # 12 QBs x 2 seasons
        assert "WR 1" not in set(agg["player_name"])
        assert agg["avg_yds"].max() < 999
        summary = pre.get_preprocessing_summary()
        assert summary["original_size"] == len(game_rows)
        assert summary["filtered_size"] == len(game_rows) - 3
        assert summary["seasons"] == [2022, 2023]

    def test_invalid_season_range(self, game_rows):
        pre = DataPreprocessor()
        pre.update_config(min_season=2023, max_season=2021)
        with pytest.raises(ValueError):
            pre.preprocess_complete(game_rows)

    def test_summary_before_run(self):
        with pytest.raises(ValueError):
            DataPreprocessor().get_preprocessing_summary()

    def test_clear_max_season_keeps_later_seasons(self, game_rows):
        late = game_rows[game_rows["season"] == 2023].copy()
        late["season"] = 2030
        rows = pd.concat([game_rows, late], ignore_index=True)

        pre = DataPreprocessor()
        pre.update_config(min_season=2020, max_season=2023)
        pre.clear_max_season()
        agg = pre.preprocess_complete(rows)

        assert pre.MAX_SEASON is None
        assert set(agg["season"]) == {2022, 2023, 2030}
