from typing import Optional

from fedplan.optimizer.search.search_base import TargetSearchBase
from fedplan.optimizer.types import BreakEvenError, OptimizationResult
from fedplan.scenario.generic_scenario import MAX_SS_AGE, MIN_SS_AGE
from fedplan.transform.social_security import DelaySSClaim


class SSAgeSearch(TargetSearchBase):
    """Exhaustive search over integer Social Security claiming ages."""

    OPERATION = "optimize_ss_age"

    def search(self) -> OptimizationResult:
        constraints = self.request.constraints
        min_age = max(constraints.min_ss_age if constraints.min_ss_age is not None else MIN_SS_AGE, MIN_SS_AGE)
        max_age = min(constraints.max_ss_age if constraints.max_ss_age is not None else MAX_SS_AGE, MAX_SS_AGE)
        ages = range(min_age, max_age + 1)

        best: Optional[OptimizationResult] = None
        iteration = 0
        for age in self._progress(ages, total=len(ages), desc="SS claiming age"):
            iteration += 1
            self._checkpoint()
            scenario = self._apply([DelaySSClaim(self.participant, age)])
            summary = self._evaluate_or_skip(scenario, label=f"age {age}")
            if summary is None:
                continue
            best = self._keep_best(self._build_result(summary, iteration, optimal_ss_age=age), best)

        if best is None:
            raise BreakEvenError(self.OPERATION, "no valid SS age found")

        best.iterations = iteration
        best.convergence_info = f"Tested {iteration} SS ages ({min_age}-{max_age})"
        return best
