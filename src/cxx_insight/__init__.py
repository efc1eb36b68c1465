"""
CXX Insight - complexity, size and documentation metrics for C++

Scores every function for cyclomatic and cognitive complexity and body
size, classifies them against thresholds and aggregates the results per
file and per module, together with documentation coverage of the public
API declared in headers.
"""

__version__ = "0.1.0"

from .config import AnalysisConfig, load_config
from .context import AnalysisRunContext
from .engine import AnalysisEngine, analyze
from .reporting import AnalysisReport, Measurement, Metric, ReportingFacade

__all__ = [
    "analyze",  # Main entry point
    "AnalysisConfig",
    "AnalysisEngine",  # Advanced usage (explicit contexts)
    "AnalysisReport",
    "AnalysisRunContext",
    "Measurement",
    "Metric",
    "ReportingFacade",
    "load_config",
]
