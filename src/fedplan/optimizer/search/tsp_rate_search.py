import logging
from typing import Dict, List, Optional

import numpy as np

from fedplan.optimizer.goal_comparator import is_better
from fedplan.optimizer.search.search_base import TargetSearchBase
from fedplan.optimizer.types import BreakEvenError, OptimizationGoal, OptimizationResult
from fedplan.scenario.generic_scenario import STRATEGY_VARIABLE_PERCENTAGE
from fedplan.transform.tsp import AdjustTSPRate, ModifyTSPStrategy

logger = logging.getLogger(__name__)

DEFAULT_MIN_RATE: float = 0.01
DEFAULT_MAX_RATE: float = 0.15
RATE_CONVERGENCE_WIDTH: float = 0.0001
RATE_KEY_DECIMALS: int = 10
# fewer intervals can narrow to the same interval again
MIN_GRID_RESOLUTION: int = 3


class TSPRateSearch(TargetSearchBase):
    """
    Search over the TSP withdrawal rate.

    Every candidate switches the participant to the variable-percentage
    strategy at the candidate rate.

    ``match_income`` bisects on first-year net income, which is assumed to
    increase with the rate. The other goals use zooming grid refinement:
    a ``grid_resolution``-interval grid over the bounds, then a finer grid
    between the neighbours of the best point, until the interval is
    narrower than ``RATE_CONVERGENCE_WIDTH``. Refinement finds the global
    optimum only if the objective is unimodal in the rate.
    """

    OPERATION = "optimize_tsp_rate"

    def search(self) -> OptimizationResult:
        constraints = self.request.constraints
        min_rate = constraints.min_tsp_rate if constraints.min_tsp_rate is not None else DEFAULT_MIN_RATE
        max_rate = constraints.max_tsp_rate if constraints.max_tsp_rate is not None else DEFAULT_MAX_RATE
        if min_rate > max_rate:
            raise BreakEvenError(
                self.OPERATION,
                f"empty rate range: min_tsp_rate {min_rate:.4f} is above max_tsp_rate {max_rate:.4f}",
            )

        if self.goal == OptimizationGoal.MATCH_INCOME:
            if constraints.target_income is None:
                raise BreakEvenError(self.OPERATION, "target_income is required for match_income goal")
            return self._bisect(min_rate, max_rate, constraints.target_income)
        return self._refine_grid(min_rate, max_rate)

    def _evaluate_rate(self, rate: float, iteration: int) -> OptimizationResult:
        scenario = self._apply(
            [
                ModifyTSPStrategy(self.participant, STRATEGY_VARIABLE_PERCENTAGE),
                AdjustTSPRate(self.participant, rate),
            ]
        )
        summary = self._evaluate_or_raise(scenario)
        return self._build_result(summary, iteration, optimal_tsp_rate=rate)

    # ----- match_income -----
    def _bisect(self, low: float, high: float, target_income: float) -> OptimizationResult:
        tolerance = self.request.tolerance
        max_iterations = self.request.max_iterations
        best: Optional[OptimizationResult] = None

        for iteration in range(1, max_iterations + 1):
            rate = (low + high) / 2.0
            candidate = self._evaluate_rate(rate, iteration)
            best = self._keep_best(candidate, best)

            diff = candidate.first_year_net_income - target_income
            logger.debug(
                "%s: iteration %d rate=%.5f income=%.2f diff=%.2f",
                self.OPERATION, iteration, rate, candidate.first_year_net_income, diff,
            )

            if abs(diff) < tolerance:
                candidate.convergence_info = f"Converged to target income within ${tolerance:,.0f}"
                return candidate

            if diff < 0:
                low = rate
            else:
                high = rate

            if high - low < RATE_CONVERGENCE_WIDTH:
                best.iterations = iteration
                best.success = False
                best.convergence_info = (
                    f"Rate interval collapsed after {iteration} iterations; closest income "
                    f"${best.first_year_net_income:,.2f} is not within ${tolerance:,.0f} of the target, "
                    f"target is unreachable within rate bounds"
                )
                return best

        if best is None:
            raise BreakEvenError(self.OPERATION, "no iterations were performed")

        best.iterations = max_iterations
        best.success = False
        best.convergence_info = f"Max iterations ({max_iterations}) reached without converging"
        return best

    # ----- maximize / minimize -----
    def _refine_grid(self, low: float, high: float) -> OptimizationResult:
        max_iterations = self.request.max_iterations
        resolution = max(MIN_GRID_RESOLUTION, self.options.grid_resolution)

        evaluated: Dict[float, OptimizationResult] = {}
        best: Optional[OptimizationResult] = None
        iteration = 0
        n_pass = 0

        while True:
            n_pass += 1
            grid: List[float] = [round(float(r), RATE_KEY_DECIMALS) for r in np.linspace(low, high, resolution + 1)]
            new_points = 0

            for rate in grid:
                if rate in evaluated:
                    continue
                new_points += 1
                if iteration >= max_iterations:
                    return self._stop_at_cap(best, iteration)
                iteration += 1
                evaluated[rate] = self._evaluate_rate(rate, iteration)
                best = self._keep_best(evaluated[rate], best)

            # narrow to the neighbours of the best point of this pass
            best_idx = 0
            for idx in range(1, len(grid)):
                if is_better(evaluated[grid[idx]], evaluated[grid[best_idx]], self.goal):
                    best_idx = idx
            low = grid[max(best_idx - 1, 0)]
            high = grid[min(best_idx + 1, len(grid) - 1)]

            logger.debug(
                "%s: pass %d best rate=%.5f, next interval [%.5f, %.5f]",
                self.OPERATION, n_pass, grid[best_idx], low, high,
            )

            if high - low < RATE_CONVERGENCE_WIDTH or new_points == 0:
                best.iterations = iteration
                best.convergence_info = f"Grid refinement converged after {n_pass} passes ({iteration} evaluations)"
                return best

    def _stop_at_cap(self, best: Optional[OptimizationResult], iteration: int) -> OptimizationResult:
        if best is None:
            raise BreakEvenError(self.OPERATION, "no iterations were performed")
        best.iterations = iteration
        best.success = False
        best.convergence_info = f"Max iterations ({iteration}) reached before grid refinement converged"
        return best
