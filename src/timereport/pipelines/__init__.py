"""Pipelines orchestrating report generation."""

from .report_pipeline import ReportPipeline, ReportPipelineConfig, ReportPipelineResult, create_report_pipeline

__all__ = [
    "ReportPipeline",
    "ReportPipelineConfig",
    "ReportPipelineResult",
    "create_report_pipeline",
]
