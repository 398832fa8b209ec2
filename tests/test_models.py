import numpy as np
import pytest
from sklearn.ensemble import RandomForestClassifier
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import GridSearchCV, RandomizedSearchCV

from pima_eda.config import PipelineConfig
from pima_eda.models import ModelSpec, build_cv, build_search, model_space, train_all, train_model


@pytest.fixture(scope="module")
def trained(partition, small_config):
    return train_all(partition.train, small_config)


def test_one_model_per_family(trained):
    assert list(trained) == ["LogReg", "RF", "SVC-RBF"]
    for model in trained.values():
        assert 0.0 <= model.cv_score <= 1.0
        assert model.n_failed == 0


def test_search_widths(trained, small_config):
    assert trained["LogReg"].n_candidates == 1
    assert trained["LogReg"].best_params == {}
    assert trained["RF"].n_candidates == len(small_config.rf_max_features)
    assert trained["RF"].best_params["max_features"] in small_config.rf_max_features
    assert trained["SVC-RBF"].n_candidates == small_config.svm_tune_length
    assert set(trained["SVC-RBF"].best_params) == {"C", "gamma"}


def test_transformer_is_nested_in_each_model(trained):
    for model in trained.values():
        assert model.estimator.steps[0][0] == "transform"
        assert [n for n, _ in model.estimator.named_steps["transform"].steps] == ["scale", "power", "pca"]


def test_predictions_shape(trained, partition):
    for model in trained.values():
        proba = model.predict_proba(partition.test)
        assert proba.shape == (partition.test.n_rows,)
        assert ((proba >= 0) & (proba <= 1)).all()
        assert set(model.predict(partition.test)) <= {0, 1}


def test_training_is_reproducible(partition, small_config):
    spec = model_space(small_config)[2]
    a = train_model(spec, partition.train, small_config)
    b = train_model(model_space(small_config)[2], partition.train, small_config)
    assert a.best_params == b.best_params
    assert a.cv_score == b.cv_score


def test_cv_repeats_default_to_fold_count():
    cfg = PipelineConfig(cv_folds=4)
    cv = build_cv(cfg)
    assert cv.get_n_splits() == 16


def test_search_kinds(small_config):
    kinds = [type(build_search(s, small_config)) for s in model_space(small_config)]
    assert kinds == [GridSearchCV, GridSearchCV, RandomizedSearchCV]


def test_failing_candidate_is_excluded(partition, small_config):
    spec = ModelSpec(
        "RF",
        RandomForestClassifier(n_estimators=10, random_state=0),
        search="grid",
        params={"clf__max_features": [0.5, -1.0]},
    )
    with pytest.warns(Warning):
        model = train_model(spec, partition.train, small_config)
    assert model.n_failed == 1
    assert model.best_params == {"max_features": 0.5}
    assert not np.isnan(model.cv_score)


def test_all_candidates_failing_is_fatal(partition, small_config):
    spec = ModelSpec(
        "RF",
        RandomForestClassifier(n_estimators=10, random_state=0),
        search="grid",
        params={"clf__max_features": [-1.0]},
    )
    with pytest.raises(ValueError):
        train_model(spec, partition.train, small_config)


def test_unknown_search_rejected():
    with pytest.raises(ValueError):
        ModelSpec("x", None, search="bayes")


def test_unconverged_candidate_is_excluded(partition, small_config):
    spec = ModelSpec(
        "LogReg",
        LogisticRegression(),
        search="grid",
        params={"clf__max_iter": [1, 1000]},
    )
    with pytest.warns(Warning):
        model = train_model(spec, partition.train, small_config)
    assert model.n_failed == 1
    assert model.best_params == {"max_iter": 1000}
    assert not np.isnan(model.cv_score)


def test_never_converging_model_is_fatal(partition, small_config):
    with pytest.raises((ValueError, ConvergenceWarning)):
        train_model(ModelSpec("LogReg", LogisticRegression(max_iter=1)), partition.train, small_config)
