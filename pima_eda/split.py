"""Stratified train/test partition."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sklearn.model_selection import train_test_split

from .data import Dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Partition:
    train: Dataset
    test: Dataset


def stratified_split(dataset: Dataset, train_fraction=0.7, seed=42) -> Partition:
    """Split rows so each part keeps the label proportions of ``dataset``."""
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")
    n_train = int(round(train_fraction * dataset.n_rows))
    if not 0 < n_train < dataset.n_rows:
        raise ValueError(
            f"train_fraction={train_fraction} of {dataset.n_rows} rows leaves "
            f"{n_train} train and {dataset.n_rows - n_train} test rows"
        )
    train_idx, test_idx = train_test_split(
        dataset.features.index,
        train_size=n_train,
        stratify=dataset.y,
        random_state=seed,
    )
    part = Partition(dataset.take(train_idx), dataset.take(test_idx))
    logger.info("Split %d rows -> train %d / test %d (seed=%d)",
                dataset.n_rows, part.train.n_rows, part.test.n_rows, seed)
    return part
