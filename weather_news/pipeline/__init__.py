"""
Pipeline orchestration.

This package owns the single pipeline state, its transition function and
the orchestrator that sequences location, weather, forecast, news and
classification.
"""

from .orchestrator import PipelineOrchestrator
from .state import PipelineState, PipelineStatus, reduce

__all__ = ["PipelineOrchestrator", "PipelineState", "PipelineStatus", "reduce"]
