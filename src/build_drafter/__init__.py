"""Draft portfolio build entries from links and text files."""

from build_drafter.use_cases import (
    AnalysisPipeline,
    combine_drafts,
    run_analysis_pipeline,
)

__all__ = ["AnalysisPipeline", "combine_drafts", "run_analysis_pipeline"]
