"""End-to-end analysis: load, clean, impute, split, train, evaluate."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import pandas as pd

from .config import PipelineConfig
from .data import Dataset, load_data, mark_missing, missing_summary, prune_missing
from .evaluate import Evaluation, compare, evaluate_all, roc_table
from .impute import ImputationResult, impute
from .models import TrainedModel, train_all
from .split import Partition, stratified_split
from .transform import apply_transformer, correlation_matrix, fit_transformer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisReport:
    missing: pd.DataFrame
    dropped: List[str]
    imputation: ImputationResult
    partition: Partition
    correlation_before: pd.DataFrame
    correlation_after: pd.DataFrame
    models: Dict[str, TrainedModel]
    evaluations: Dict[str, Evaluation]
    comparison: pd.DataFrame
    roc: pd.DataFrame


def run_analysis(raw: Dataset, config: PipelineConfig) -> AnalysisReport:
    marked = mark_missing(raw, config.sentinel_columns)
    missing = missing_summary(marked)
    pruned, dropped = prune_missing(marked, config.missing_threshold)

    imputation = impute(
        pruned,
        n_imputations=config.n_imputations,
        n_iterations=config.imputation_iterations,
        donors=config.pmm_donors,
        seed=config.seed,
    )
    completed = imputation.select(config.imputation_pick)

    partition = stratified_split(completed, config.train_fraction, seed=config.seed)

    # fit on train only; the test partition never informs the transform
    transformer = fit_transformer(partition.train.features, config.variance_retained)
    corr_before = correlation_matrix(partition.train.features)
    corr_after = correlation_matrix(apply_transformer(transformer, partition.train.features))

    models = train_all(partition.train, config)
    evaluations = evaluate_all(models, partition.test, positive=config.positive_label)

    return AnalysisReport(
        missing=missing,
        dropped=dropped,
        imputation=imputation,
        partition=partition,
        correlation_before=corr_before,
        correlation_after=corr_after,
        models=models,
        evaluations=evaluations,
        comparison=compare(evaluations.values()),
        roc=roc_table(evaluations.values()),
    )


def run_pipeline(config: PipelineConfig) -> AnalysisReport:
    return run_analysis(load_data(config.csv_path, config.target), config)


def write_report(report: AnalysisReport, out_dir) -> List[Path]:
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    tables = {
        "missing_summary.csv": report.missing,
        "model_comparison.csv": report.comparison,
        "correlation_before.csv": report.correlation_before,
        "correlation_after.csv": report.correlation_after,
        "imputation_spread.csv": report.imputation.spread(),
    }
    written = []
    for name, table in tables.items():
        path = out / name
        table.to_csv(path)
        written.append(path)
    path = out / "roc_curves.csv"
    report.roc.to_csv(path, index=False)
    written.append(path)
    for p in written:
        logger.info("Saved %s", p)
    return written
