"""Multiple imputation by chained equations with predictive mean matching."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np
import pandas as pd
from statsmodels.imputation.mice import MICEData

from .data import Dataset

logger = logging.getLogger(__name__)

LABEL_PREDICTOR = "Outcome"


@dataclass(frozen=True)
class ImputationResult:
    """All completed datasets from one imputation run.

    Only one of them is carried downstream (see ``select``); the others are
    kept so the between-pass spread can still be inspected.
    """

    datasets: List[Dataset]
    imputed_columns: List[str]

    def select(self, i: int = 0) -> Dataset:
        return self.datasets[i]

    def spread(self) -> pd.DataFrame:
        """Per-cell standard deviation across passes, for imputed columns."""
        stacked = np.stack([d.features[self.imputed_columns].to_numpy() for d in self.datasets])
        ref = self.datasets[0].features
        return pd.DataFrame(stacked.std(axis=0), index=ref.index, columns=self.imputed_columns)


def _mice_frame(dataset: Dataset) -> pd.DataFrame:
    frame = dataset.features.copy()
    # the outcome informs the conditional models but is never imputed
    frame[LABEL_PREDICTOR] = dataset.y.astype(float)
    frame = frame.reset_index(drop=True)
    frame.columns = pd.Index([str(c) for c in frame.columns], dtype=object)
    return frame


def impute(dataset: Dataset, n_imputations=5, n_iterations=50, donors=5, seed=42) -> ImputationResult:
    """Run ``n_imputations`` independent MICE passes of ``n_iterations`` cycles each."""
    missing = dataset.features.isna().sum()
    imputed_columns = missing[missing > 0].index.tolist()
    if not imputed_columns:
        logger.info("No missing values; imputation skipped")
        return ImputationResult([dataset.replace(dataset.features.copy())
                                 for _ in range(n_imputations)], [])

    logger.info("Imputing %s with %d passes x %d iterations (pmm donors=%d, seed=%d)",
                imputed_columns, n_imputations, n_iterations, donors, seed)

    # MICEData draws from numpy's global generator
    np.random.seed(seed)

    base = _mice_frame(dataset)
    completed = []
    for m in range(n_imputations):
        mice_data = MICEData(base.copy(), k_pmm=donors)
        mice_data.update_all(n_iterations)
        filled = mice_data.data.drop(columns=[LABEL_PREDICTOR])
        filled.index = dataset.features.index
        filled = filled[dataset.features.columns]
        completed.append(dataset.replace(filled))
        logger.debug("Imputation pass %d/%d done", m + 1, n_imputations)

    return ImputationResult(completed, imputed_columns)
