"""Constants and run configuration for the Pima diabetes analysis."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional, Tuple

FEATURE_COLUMNS = [
    "Pregnancies",
    "Glucose",
    "BloodPressure",
    "SkinThickness",
    "Insulin",
    "BMI",
    "DiabetesPedigreeFunction",
    "Age",
]
TARGET = "Outcome"
RENAMED_COLUMNS = {"DiabetesPedigreeFunction": "DPF"}

# Zero is not a physiological value for these measurements
BAD_ZERO_COLS = ("Glucose", "BloodPressure", "SkinThickness", "Insulin", "BMI")


@dataclass(frozen=True)
class PipelineConfig:
    """Every tunable value of one analysis run.

    ``seed`` is handed to each stage that draws random numbers (imputation,
    splitting and the three trainers), each of which reseeds from it.
    """

    csv_path: str = "diabetes.csv"
    target: str = TARGET
    out_dir: str = "reports"
    seed: int = 42

    sentinel_columns: Tuple[str, ...] = BAD_ZERO_COLS
    missing_threshold: float = 0.25

    n_imputations: int = 5
    imputation_iterations: int = 50
    pmm_donors: int = 5
    imputation_pick: int = 0

    train_fraction: float = 0.7
    cv_folds: int = 10
    cv_repeats: Optional[int] = None
    variance_retained: float = 0.95

    rf_n_estimators: int = 500
    rf_max_features: Tuple[float, ...] = (0.25, 0.5, 0.75, 1.0)
    svm_tune_length: int = 10
    positive_label: int = 1

    def __post_init__(self):
        if not 0.0 < self.train_fraction < 1.0:
            raise ValueError(f"train_fraction must be in (0, 1), got {self.train_fraction}")
        if not 0.0 <= self.missing_threshold <= 1.0:
            raise ValueError(f"missing_threshold must be in [0, 1], got {self.missing_threshold}")
        if not 0.0 < self.variance_retained < 1.0:
            raise ValueError(f"variance_retained must be in (0, 1), got {self.variance_retained}")
        if self.cv_folds < 2:
            raise ValueError(f"cv_folds must be at least 2, got {self.cv_folds}")
        if self.cv_repeats is not None and self.cv_repeats < 1:
            raise ValueError(f"cv_repeats must be positive, got {self.cv_repeats}")
        if self.n_imputations < 1 or self.imputation_iterations < 1:
            raise ValueError("imputation needs at least one pass and one iteration")
        if not 0 <= self.imputation_pick < self.n_imputations:
            raise ValueError(
                f"imputation_pick={self.imputation_pick} outside 0..{self.n_imputations - 1}"
            )

    @property
    def n_repeats(self) -> int:
        # repeated k-fold without an explicit multiplier repeats k times
        return self.cv_folds if self.cv_repeats is None else self.cv_repeats

    @classmethod
    def from_args(cls, args) -> "PipelineConfig":
        """Build a config from an argparse namespace, ignoring unset options."""
        names = {f.name for f in fields(cls)}
        given = {k: v for k, v in vars(args).items() if k in names and v is not None}
        return cls(**given)
