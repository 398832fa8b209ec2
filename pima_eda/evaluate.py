"""Held-out scoring: confusion-matrix metrics, AUC and ROC curves."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

import numpy as np
import pandas as pd
from sklearn.metrics import cohen_kappa_score, confusion_matrix, roc_auc_score, roc_curve

from .data import Dataset
from .models import TrainedModel

METRIC_COLUMNS = ["AUC", "Sensitivity", "Specificity", "Accuracy", "Kappa"]


@dataclass(frozen=True)
class RocCurve:
    fpr: np.ndarray
    tpr: np.ndarray
    thresholds: np.ndarray


@dataclass(frozen=True)
class Evaluation:
    name: str
    metrics: Dict[str, float]
    confusion: np.ndarray
    roc: RocCurve


def _ratio(num, den):
    return float(num) / den if den else float("nan")


def confusion_metrics(y_true, y_pred, positive=1):
    """Sensitivity, specificity, accuracy and kappa with ``positive`` as the event.

    Returns the metrics dict and the confusion matrix (rows observed, columns
    predicted, negative label first).
    """
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    negative = 1 - positive
    cm = confusion_matrix(y_true, y_pred, labels=[negative, positive])
    tn, fp, fn, tp = cm.ravel()
    if len(np.unique(np.concatenate([y_true, y_pred]))) < 2:
        # kappa is undefined when only one label appears anywhere
        kappa = float("nan")
    else:
        kappa = float(cohen_kappa_score(y_true, y_pred, labels=[negative, positive]))
    metrics = {
        "Sensitivity": _ratio(tp, tp + fn),
        "Specificity": _ratio(tn, tn + fp),
        "Accuracy": _ratio(tp + tn, cm.sum()),
        "Kappa": kappa,
    }
    return metrics, cm


def evaluate_model(model: TrainedModel, test: Dataset, positive=1) -> Evaluation:
    y = test.y
    y_hat = model.predict(test)
    proba = model.predict_proba(test)
    if positive != 1:
        proba = 1.0 - proba
    fpr, tpr, thr = roc_curve(y, proba, pos_label=positive)
    metrics = {"AUC": float(roc_auc_score(y == positive, proba))}
    counts, cm = confusion_metrics(y, y_hat, positive=positive)
    metrics.update(counts)
    return Evaluation(model.name, metrics, cm, RocCurve(fpr, tpr, thr))


def evaluate_all(models: Dict[str, TrainedModel], test: Dataset, positive=1) -> Dict[str, Evaluation]:
    return {name: evaluate_model(m, test, positive) for name, m in models.items()}


def compare(evaluations: Iterable[Evaluation]) -> pd.DataFrame:
    rows = [{"Model": e.name, **e.metrics} for e in evaluations]
    table = pd.DataFrame(rows, columns=["Model"] + METRIC_COLUMNS)
    return table.set_index("Model")


def roc_table(evaluations: Iterable[Evaluation]) -> pd.DataFrame:
    """ROC points of every model in long form, one row per threshold."""
    parts = [
        pd.DataFrame({"Model": e.name, "FPR": e.roc.fpr, "TPR": e.roc.tpr,
                      "Threshold": e.roc.thresholds})
        for e in evaluations
    ]
    if not parts:
        return pd.DataFrame(columns=["Model", "FPR", "TPR", "Threshold"])
    return pd.concat(parts, ignore_index=True)
