import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from tqdm import tqdm

from fedplan.evaluation.cancellation import CancellationToken, OperationCancelledError
from fedplan.evaluation.evaluator_base import EvaluatorBase
from fedplan.optimizer.goal_comparator import is_better
from fedplan.optimizer.types import (
    BreakEvenError,
    OptimizationRequest,
    OptimizationResult,
    SolverOptions,
)
from fedplan.scenario.generic_scenario import GenericScenario
from fedplan.scenario.summary import ScenarioSummary
from fedplan.transform.pipeline import apply_transforms
from fedplan.transform.transform_base import ScenarioTransform, TransformError

logger = logging.getLogger(__name__)


# ---------------------------
# Base search (common API)
# ---------------------------
class TargetSearchBase(ABC):
    """
    Base class that stores the problem data of one optimization run and
    provides the evaluation plumbing shared by all target searches.

    Subclasses must implement `search()` returning an OptimizationResult.
    Every evaluation goes through `_evaluate`, which checks the
    cancellation token first.
    """

    OPERATION: str = "optimize"

    def __init__(
        self,
        evaluator: EvaluatorBase,
        request: OptimizationRequest,
        options: SolverOptions,
        cancellation: Optional[CancellationToken] = None,
    ) -> None:
        """
        Args:
            evaluator: scenario evaluator.
            request: request with defaults already filled in.
            options: solver options.
            cancellation: optional token checked before each evaluation.
        """
        self.evaluator: EvaluatorBase = evaluator
        self.request: OptimizationRequest = request
        self.options: SolverOptions = options
        self.cancellation: Optional[CancellationToken] = cancellation

        self.participant: str = request.constraints.participant
        self.base: GenericScenario = request.base_scenario
        self.goal = request.goal

        self.n_evaluations: int = 0

    @abstractmethod
    def search(self) -> OptimizationResult:
        pass

    # ----- evaluation helpers -----
    def _checkpoint(self) -> None:
        if self.cancellation is not None:
            self.cancellation.raise_if_cancelled(self.OPERATION)

    def _apply(self, transforms: List[ScenarioTransform]) -> GenericScenario:
        """Apply transforms to the base; transform failures are fatal."""
        try:
            return apply_transforms(self.base, transforms)
        except TransformError as err:
            raise BreakEvenError(self.OPERATION, "failed to apply transforms", cause=err) from err

    def _evaluate(self, scenario: GenericScenario) -> ScenarioSummary:
        self._checkpoint()
        self.n_evaluations += 1
        return self.evaluator.evaluate(self.request.config, scenario, self.cancellation)

    def _evaluate_or_raise(self, scenario: GenericScenario) -> ScenarioSummary:
        try:
            return self._evaluate(scenario)
        except OperationCancelledError:
            raise
        except Exception as err:
            raise BreakEvenError(self.OPERATION, "failed to calculate scenario", cause=err) from err

    def _evaluate_or_skip(self, scenario: GenericScenario, label: str) -> Optional[ScenarioSummary]:
        """Evaluate a grid point; failures are logged and the point is skipped."""
        try:
            return self._evaluate(scenario)
        except OperationCancelledError:
            raise
        except Exception as err:
            logger.warning("%s: skipping %s, evaluation failed: %s", self.OPERATION, label, err)
            return None

    def _build_result(self, summary: ScenarioSummary, iterations: int, **optimum: Any) -> OptimizationResult:
        return OptimizationResult(
            request=self.request,
            success=True,
            iterations=iterations,
            scenario_summary=summary,
            first_year_net_income=summary.first_year_net_income,
            lifetime_income=summary.total_lifetime_income,
            tsp_longevity=summary.tsp_longevity,
            lifetime_taxes=summary.lifetime_taxes(),
            **optimum,
        )

    def _keep_best(self, candidate: OptimizationResult, best: Optional[OptimizationResult]) -> OptimizationResult:
        if best is None or is_better(candidate, best, self.goal):
            return candidate
        return best

    def _progress(self, points: Iterable[Any], total: int, desc: str) -> Iterable[Any]:
        if not self.options.show_progress:
            return points
        return tqdm(points, total=total, desc=desc)
