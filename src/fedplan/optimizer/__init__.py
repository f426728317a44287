from .types import (
    OptimizationTarget,
    OptimizationGoal,
    Constraints,
    SolverOptions,
    OptimizationRequest,
    OptimizationResult,
    MultiDimensionalResult,
    BreakEvenError,
    NotImplementedTargetError,
)
from .goal_comparator import is_better, income_distance
from .multi_dimensional import reduce_results, generate_recommendations
from .break_even_solver import BreakEvenSolver

__all__ = [
    "OptimizationTarget",
    "OptimizationGoal",
    "Constraints",
    "SolverOptions",
    "OptimizationRequest",
    "OptimizationResult",
    "MultiDimensionalResult",
    "BreakEvenError",
    "NotImplementedTargetError",
    "is_better",
    "income_distance",
    "reduce_results",
    "generate_recommendations",
    "BreakEvenSolver",
]
