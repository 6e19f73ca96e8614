"""
Tests for model persistence.
"""
import numpy as np
import pytest

from qb_passing_analysis.models.linear import PassingYardsModel
from qb_passing_analysis.utils.model_utils import get_model_metadata, load_model, save_model


def test_save_and_load_round_trip(tmp_path, literal_aggregates):
    model = PassingYardsModel().fit(literal_aggregates)
    path = save_model(model, tmp_path / "ols.joblib", metrics={"rmse": 3.2})

    loaded = load_model(path)
    np.testing.assert_allclose(loaded.predict(literal_aggregates), model.predict(literal_aggregates))

    meta = get_model_metadata(path)
    assert meta["predictors"] == ["tot_yds", "tot_td", "tot_int"]
    assert meta["target"] == "avg_yds"
    assert meta["n_train"] == len(literal_aggregates)
    assert meta["metrics"] == {"rmse": 3.2}
    assert meta["intercept"] == pytest.approx(model.artifact_.intercept)


def test_save_unfitted_model(tmp_path):
    with pytest.raises(ValueError):
        save_model(PassingYardsModel(), tmp_path / "ols.joblib")


def test_load_missing_model(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_model(tmp_path / "missing.joblib")
    assert get_model_metadata(tmp_path / "missing.joblib") == {}
