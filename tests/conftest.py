import numpy as np
import pandas as pd
import pytest

from pima_eda.config import PipelineConfig
from pima_eda.data import from_frame, mark_missing, prune_missing
from pima_eda.impute import impute
from pima_eda.split import stratified_split

GLUCOSE_ZERO_ROWS = [1, 4, 9, 13, 17]


def make_frame(n=20, n_pos=7, seed=0, insulin_zeros=0):
    """Pima-shaped table with five Glucose zeros and no other sentinel zeros."""
    rng = np.random.RandomState(seed)
    outcome = np.array([1] * n_pos + [0] * (n - n_pos))
    rng.shuffle(outcome)
    glucose = np.where(outcome == 1, rng.randint(140, 200, n), rng.randint(75, 130, n)).astype(float)
    glucose[GLUCOSE_ZERO_ROWS] = 0
    insulin = rng.randint(15, 300, n).astype(float)
    insulin[:insulin_zeros] = 0
    return pd.DataFrame({
        "Pregnancies": rng.randint(0, 10, n),
        "Glucose": glucose,
        "BloodPressure": rng.randint(50, 100, n),
        "SkinThickness": rng.randint(10, 50, n),
        "Insulin": insulin,
        "BMI": np.round(rng.uniform(19, 45, n) + 4 * outcome, 1),
        "DiabetesPedigreeFunction": np.round(rng.uniform(0.1, 2.0, n), 3),
        "Age": rng.randint(21, 70, n),
        "Outcome": outcome,
    })


@pytest.fixture
def raw_frame():
    return make_frame()


@pytest.fixture
def raw_dataset(raw_frame):
    return from_frame(raw_frame)


@pytest.fixture(scope="session")
def small_config():
    return PipelineConfig(
        n_imputations=2,
        imputation_iterations=5,
        cv_folds=3,
        rf_n_estimators=25,
        rf_max_features=(0.5, 1.0),
        svm_tune_length=2,
    )


@pytest.fixture(scope="session")
def partition(small_config):
    dataset = mark_missing(from_frame(make_frame()), small_config.sentinel_columns)
    dataset, _ = prune_missing(dataset, small_config.missing_threshold)
    completed = impute(dataset, n_imputations=2, n_iterations=5, seed=small_config.seed).select(0)
    return stratified_split(completed, small_config.train_fraction, seed=small_config.seed)


@pytest.fixture(scope="session")
def frame_factory():
    return make_frame
