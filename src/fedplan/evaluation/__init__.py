from .cancellation import CancellationToken, OperationCancelledError
from .evaluator_base import EvaluatorBase, FunctionEvaluator

__all__ = [
    "CancellationToken",
    "OperationCancelledError",
    "EvaluatorBase",
    "FunctionEvaluator",
]
