"""Exploratory analysis and model comparison for the Pima diabetes data."""
from .config import PipelineConfig
from .pipeline import AnalysisReport, run_analysis, run_pipeline, write_report

__all__ = ["AnalysisReport", "PipelineConfig", "run_analysis", "run_pipeline", "write_report"]
__version__ = "0.1.0"
