"""Three classifier families tuned under repeated stratified k-fold CV.

Each candidate is a ``Pipeline`` whose first step is the feature transformer,
so scaling, Yeo-Johnson and PCA are refit on every training fold. Candidates
that fail to fit, or fit without converging, score NaN and drop out of
selection.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np
from scipy.stats import loguniform
from sklearn.ensemble import RandomForestClassifier
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import GridSearchCV, RandomizedSearchCV, RepeatedStratifiedKFold
from sklearn.pipeline import Pipeline
from sklearn.svm import SVC

from .config import PipelineConfig
from .data import Dataset
from .transform import build_transformer

logger = logging.getLogger(__name__)

SEARCHES = ("none", "grid", "random")


@dataclass
class ModelSpec:
    name: str
    estimator: Any
    search: str = "none"
    params: Dict[str, Any] = field(default_factory=dict)
    n_iter: int = 10

    def __post_init__(self):
        if self.search not in SEARCHES:
            raise ValueError(f"unknown search {self.search!r}, expected one of {SEARCHES}")


@dataclass(frozen=True)
class TrainedModel:
    name: str
    estimator: Pipeline
    best_params: Dict[str, Any]
    cv_score: float
    n_candidates: int
    n_failed: int

    def predict(self, data) -> np.ndarray:
        return self.estimator.predict(_features(data))

    def predict_proba(self, data) -> np.ndarray:
        """Probability of the positive (second) class."""
        return self.estimator.predict_proba(_features(data))[:, 1]


def _features(data):
    return data.features if isinstance(data, Dataset) else data


def model_space(config: PipelineConfig) -> List[ModelSpec]:
    seed = config.seed
    return [
        ModelSpec(
            "LogReg",
            LogisticRegression(max_iter=1000),
        ),
        ModelSpec(
            "RF",
            RandomForestClassifier(n_estimators=config.rf_n_estimators, random_state=seed),
            search="grid",
            params={"clf__max_features": list(config.rf_max_features)},
        ),
        ModelSpec(
            "SVC-RBF",
            SVC(kernel="rbf", probability=True, random_state=seed),
            search="random",
            params={
                "clf__C": loguniform(2 ** -2, 2 ** 7),
                "clf__gamma": loguniform(1e-3, 1e0),
            },
            n_iter=config.svm_tune_length,
        ),
    ]


def build_cv(config: PipelineConfig) -> RepeatedStratifiedKFold:
    return RepeatedStratifiedKFold(
        n_splits=config.cv_folds, n_repeats=config.n_repeats, random_state=config.seed
    )


def build_search(spec: ModelSpec, config: PipelineConfig):
    pipe = Pipeline([
        ("transform", build_transformer(config.variance_retained)),
        ("clf", spec.estimator),
    ])
    common = dict(scoring="accuracy", cv=build_cv(config), error_score=np.nan, refit=True)
    if spec.search == "random":
        return RandomizedSearchCV(
            pipe, param_distributions=spec.params, n_iter=spec.n_iter,
            random_state=config.seed, **common,
        )
    # a single configuration is a grid with one (empty) point
    grid = spec.params if spec.search == "grid" else {}
    return GridSearchCV(pipe, param_grid=grid, **common)


def train_model(spec: ModelSpec, train: Dataset, config: PipelineConfig) -> TrainedModel:
    """Cross-validate every candidate of ``spec`` and refit the best on ``train``.

    A fit that stops short of convergence counts as a failed candidate. If
    every candidate fails, scikit-learn raises and the error propagates.
    """
    logger.info("Training %s (%s search, %d-fold x %d)",
                spec.name, spec.search, config.cv_folds, config.n_repeats)
    search = build_search(spec, config)
    with warnings.catch_warnings():
        # folds run in this thread (n_jobs unset), so the filter reaches them
        warnings.simplefilter("error", ConvergenceWarning)
        search.fit(train.features, train.y)

    scores = np.asarray(search.cv_results_["mean_test_score"], dtype=float)
    n_failed = int(np.isnan(scores).sum())
    if n_failed:
        logger.warning("%s: %d of %d candidates failed and were excluded",
                       spec.name, n_failed, len(scores))

    model = TrainedModel(
        name=spec.name,
        estimator=search.best_estimator_,
        best_params={k.replace("clf__", ""): v for k, v in search.best_params_.items()},
        cv_score=float(search.best_score_),
        n_candidates=len(scores),
        n_failed=n_failed,
    )
    logger.info("%s: CV accuracy %.4f with %s", model.name, model.cv_score, model.best_params)
    return model


def train_all(train: Dataset, config: PipelineConfig) -> Dict[str, TrainedModel]:
    return {spec.name: train_model(spec, train, config) for spec in model_space(config)}
