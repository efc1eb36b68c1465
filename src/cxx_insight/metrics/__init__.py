"""Per-function metric calculators."""

from .cognitive import cognitive_complexity
from .counts import Bucket, CountBucket
from .cyclomatic import cyclomatic_complexity
from .functions import analyze_function, analyze_functions, iter_functions
from .models import CognitiveScore, ComplexityIncrement, FunctionUnit, IncrementReason
from .size import function_body_lines

__all__ = [
    "Bucket",
    "CountBucket",
    "CognitiveScore",
    "ComplexityIncrement",
    "FunctionUnit",
    "IncrementReason",
    "analyze_function",
    "analyze_functions",
    "cognitive_complexity",
    "cyclomatic_complexity",
    "function_body_lines",
    "iter_functions",
]
