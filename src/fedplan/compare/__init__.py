from .comparison_types import ComparisonError, ComparisonResult, ComparisonSet
from .comparison_engine import ComparisonEngine, generate_recommendations

__all__ = [
    "ComparisonError",
    "ComparisonResult",
    "ComparisonSet",
    "ComparisonEngine",
    "generate_recommendations",
]
