import dataclasses
import logging
from typing import Any, Dict, List, Optional, Type

from fedplan.evaluation.cancellation import CancellationToken
from fedplan.evaluation.evaluator_base import EvaluatorBase
from fedplan.optimizer.multi_dimensional import MULTI_DIMENSIONAL_TARGETS, reduce_results
from fedplan.optimizer.search.retirement_date_search import RetirementDateSearch
from fedplan.optimizer.search.search_base import TargetSearchBase
from fedplan.optimizer.search.ss_age_search import SSAgeSearch
from fedplan.optimizer.search.tsp_rate_search import TSPRateSearch
from fedplan.optimizer.types import (
    BreakEvenError,
    Constraints,
    MultiDimensionalResult,
    NotImplementedTargetError,
    OptimizationGoal,
    OptimizationRequest,
    OptimizationResult,
    OptimizationTarget,
    SolverOptions,
)
from fedplan.scenario.generic_scenario import GenericScenario

logger = logging.getLogger(__name__)

OP_OPTIMIZE: str = "optimize"
OP_OPTIMIZE_MULTI: str = "optimize_multi_dimensional"
OP_OPTIMIZE_TSP_BALANCE: str = "optimize_tsp_balance"

SEARCHES: Dict[OptimizationTarget, Type[TargetSearchBase]] = {
    OptimizationTarget.TSP_RATE: TSPRateSearch,
    OptimizationTarget.SS_AGE: SSAgeSearch,
    OptimizationTarget.RETIREMENT_DATE: RetirementDateSearch,
}


class BreakEvenSolver:
    """
    Searches scenario parameters for the value that best satisfies a goal.

    The solver never computes projections itself: every candidate scenario
    is built from the base through transforms and handed to the evaluator.

    Parameters
    ----------
    evaluator : EvaluatorBase
        Calculation engine adapter.
    options : SolverOptions, optional
        Defaults to ``SolverOptions()``.
    """

    def __init__(self, evaluator: EvaluatorBase, options: Optional[SolverOptions] = None) -> None:
        self.evaluator = evaluator
        self.options = options or SolverOptions()
        if self.options.parallel:
            logger.debug("parallel evaluation requested; candidates are evaluated sequentially")

    # ---------------------------
    # Single target
    # ---------------------------
    def optimize(
        self,
        request: OptimizationRequest,
        cancellation: Optional[CancellationToken] = None,
    ) -> OptimizationResult:
        """
        Run one optimization.

        Args:
            request: target, goal, constraints and base scenario.
            cancellation: optional token checked before every evaluation.

        Returns:
            OptimizationResult: the best candidate found. ``success`` is
            False when a continuous search stopped without converging.

        Raises:
            BreakEvenError: invalid request, unsupported target, or a
                fatal transform/evaluation failure.
            OperationCancelledError: the token was cancelled.
        """
        self._validate_request(request)
        request = self._with_defaults(request)
        result = self._dispatch(request, cancellation)

        if self.options.compare_to_base:
            self._attach_base_comparison(result, cancellation)

        logger.info(
            "Optimized %s for %s: %s after %d iterations (success=%s)",
            request.target.value,
            request.goal.value,
            result.describe_optimum() or "no optimum",
            result.iterations,
            result.success,
        )
        return result

    def _validate_request(self, request: OptimizationRequest) -> None:
        if request.base_scenario is None:
            raise BreakEvenError(OP_OPTIMIZE, "base scenario is required")
        request.constraints.validate()
        if not request.base_scenario.has_participant(request.constraints.participant):
            raise BreakEvenError(
                OP_OPTIMIZE, f"participant {request.constraints.participant} not found in scenario"
            )

    def _with_defaults(self, request: OptimizationRequest) -> OptimizationRequest:
        return dataclasses.replace(
            request,
            max_iterations=request.max_iterations if request.max_iterations > 0 else self.options.max_iterations,
            tolerance=request.tolerance if request.tolerance > 0 else self.options.tolerance,
        )

    def _dispatch(
        self,
        request: OptimizationRequest,
        cancellation: Optional[CancellationToken],
    ) -> OptimizationResult:
        target = request.target
        if target == OptimizationTarget.TSP_BALANCE:
            raise NotImplementedTargetError(OP_OPTIMIZE_TSP_BALANCE, "TSP balance optimization not yet implemented")
        if target == OptimizationTarget.ALL:
            raise BreakEvenError(OP_OPTIMIZE, "use optimize_multi_dimensional for target 'all'")

        search_cls = SEARCHES.get(target)
        if search_cls is None:
            raise BreakEvenError(OP_OPTIMIZE, f"unknown optimization target: {target}")

        logger.info(
            "Optimizing %s for %s (participant %s)",
            target.value, request.goal.value, request.constraints.participant,
        )
        return search_cls(self.evaluator, request, self.options, cancellation).search()

    def _attach_base_comparison(
        self,
        result: OptimizationResult,
        cancellation: Optional[CancellationToken],
    ) -> None:
        if cancellation is not None:
            cancellation.raise_if_cancelled(OP_OPTIMIZE)
        request = result.request
        try:
            base_summary = self.evaluator.evaluate(request.config, request.base_scenario.deep_copy(), cancellation)
        except Exception as err:
            raise BreakEvenError(OP_OPTIMIZE, "failed to calculate base scenario", cause=err) from err

        result.base_scenario_summary = base_summary
        result.income_diff_from_base = result.lifetime_income - base_summary.total_lifetime_income
        result.tax_diff_from_base = result.lifetime_taxes - base_summary.lifetime_taxes()

    # ---------------------------
    # Multiple targets
    # ---------------------------
    def optimize_multi_dimensional(
        self,
        base: GenericScenario,
        config: Any,
        constraints: Constraints,
        goals: List[OptimizationGoal],
        cancellation: Optional[CancellationToken] = None,
    ) -> MultiDimensionalResult:
        """
        Optimize retirement date, TSP rate and SS age for every goal and
        reduce the successful results.

        Individual solver failures are logged and skipped; cancellation
        propagates. Raises BreakEvenError if no run succeeds.
        """
        if base is None:
            raise BreakEvenError(OP_OPTIMIZE_MULTI, "base scenario is required")
        constraints.validate()

        results: List[OptimizationResult] = []
        for target in MULTI_DIMENSIONAL_TARGETS:
            for goal in goals:
                request = OptimizationRequest(
                    base_scenario=base,
                    config=config,
                    target=target,
                    goal=goal,
                    constraints=constraints,
                )
                try:
                    result = self.optimize(request, cancellation)
                except BreakEvenError as err:
                    logger.warning("Skipping %s / %s: %s", target.value, goal.value, err)
                    continue
                if result.success:
                    results.append(result)
                else:
                    logger.warning(
                        "Skipping %s / %s: %s", target.value, goal.value, result.convergence_info
                    )

        if not results:
            raise BreakEvenError(OP_OPTIMIZE_MULTI, "no successful optimizations")

        return reduce_results(results)

    def optimize_all_targets(
        self,
        base: GenericScenario,
        config: Any,
        constraints: Constraints,
        goal: OptimizationGoal,
        cancellation: Optional[CancellationToken] = None,
    ) -> MultiDimensionalResult:
        """Single-goal shorthand for `optimize_multi_dimensional`."""
        return self.optimize_multi_dimensional(base, config, constraints, [goal], cancellation)
