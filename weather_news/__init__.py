"""
Weather News - weather-conditioned headline briefing.

This package fetches the current weather and a short forecast for the
user's location, pulls a batch of news headlines and picks the ones that
fit the weather using a temperature-bucketed keyword classifier.

Main entry point is the CLI via `weather-news run` command.

Example:
    $ weather-news run --unit celsius --category technology
"""

__all__ = ["__version__", "PipelineOrchestrator", "classify"]
__version__ = "0.1.0"

from .core.classifier import classify
from .pipeline.orchestrator import PipelineOrchestrator
