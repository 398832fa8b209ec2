"""Loading, zero-as-missing repair and missingness pruning."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from .config import FEATURE_COLUMNS, RENAMED_COLUMNS, TARGET

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dataset:
    """Feature table plus the categorical label, aligned on the same index."""

    features: pd.DataFrame
    labels: pd.Series

    def __post_init__(self):
        if not self.features.index.equals(self.labels.index):
            raise ValueError("features and labels must share the same index")

    @property
    def n_rows(self) -> int:
        return len(self.features)

    @property
    def y(self) -> np.ndarray:
        # estimators get plain integer labels, not the categorical
        return np.asarray(self.labels.astype(int))

    def frame(self) -> pd.DataFrame:
        return self.features.join(self.labels)

    def take(self, index) -> "Dataset":
        return Dataset(self.features.loc[index].copy(), self.labels.loc[index].copy())

    def replace(self, features: pd.DataFrame) -> "Dataset":
        return Dataset(features, self.labels.copy())


def from_frame(df: pd.DataFrame, target=TARGET) -> Dataset:
    """Split a raw table into a Dataset, applying the loader's renames."""
    missing = [c for c in FEATURE_COLUMNS + [target] if c not in df.columns]
    if missing:
        raise ValueError(f"input is missing required columns: {missing}")
    df = df.rename(columns=RENAMED_COLUMNS)
    X = df.drop(columns=[target]).astype(float)
    y = df[target].astype(int).astype("category")
    return Dataset(X, y)


def load_data(csv_path, target=TARGET) -> Dataset:
    path = Path(csv_path)
    logger.info("Loading dataset from %s", path)
    df = pd.read_csv(path)
    dataset = from_frame(df, target=target)
    logger.info("Loaded %d rows x %d features", dataset.n_rows, dataset.features.shape[1])
    return dataset


def mark_missing(dataset: Dataset, columns) -> Dataset:
    """Replace implausible zeros with NaN in ``columns``."""
    X = dataset.features.copy()
    for c in columns:
        if c not in X.columns:
            continue
        zeros = X[c] == 0
        if zeros.any():
            logger.info("%s: %d zeros marked missing", c, int(zeros.sum()))
        X.loc[zeros, c] = np.nan
    return dataset.replace(X)


def missing_summary(dataset: Dataset) -> pd.DataFrame:
    frame = dataset.frame()
    counts = frame.isna().sum()
    summary = pd.DataFrame({
        "Missing": counts,
        "Proportion": counts / len(frame),
    })
    return summary.sort_values("Proportion", ascending=False, kind="mergesort")


def prune_missing(dataset: Dataset, threshold: float):
    """Drop feature columns whose missing proportion is above ``threshold``.

    Returns the pruned Dataset and the list of dropped column names. Heavily
    missing columns are dropped rather than imputed.
    """
    proportion = dataset.features.isna().mean()
    dropped = proportion[proportion > threshold].index.tolist()
    for c in dropped:
        logger.info("Dropping %s (%.1f%% missing > %.1f%%)",
                    c, proportion[c] * 100, threshold * 100)
    return dataset.replace(dataset.features.drop(columns=dropped)), dropped
