import datetime as dt
from typing import List, Optional

from fedplan.optimizer.search.search_base import TargetSearchBase
from fedplan.optimizer.types import BreakEvenError, OptimizationResult
from fedplan.scenario.generic_scenario import GenericScenario
from fedplan.transform.retirement import PostponeRetirement, SetRetirementDate, add_months

DEFAULT_MONTHS_BEFORE: int = 24
DEFAULT_MONTHS_AFTER: int = 36


def months_between(start: dt.date, end: dt.date) -> int:
    """Whole calendar months from ``start`` to ``end`` (day of month ignored)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


class RetirementDateSearch(TargetSearchBase):
    """
    Monthly grid search over the retirement date.

    Later dates are reached by postponing the base date, earlier ones by
    setting the date directly.
    """

    OPERATION = "optimize_retirement_date"

    def search(self) -> OptimizationResult:
        base_date = self._base_retirement_date()
        constraints = self.request.constraints
        min_date = constraints.min_retirement_date or add_months(base_date, -DEFAULT_MONTHS_BEFORE)
        max_date = constraints.max_retirement_date or add_months(base_date, DEFAULT_MONTHS_AFTER)

        grid = self._date_grid(min_date, max_date)
        if not grid:
            raise BreakEvenError(
                self.OPERATION,
                f"empty retirement date range: {min_date.isoformat()} is after {max_date.isoformat()}",
            )

        best: Optional[OptimizationResult] = None
        iteration = 0
        for date in self._progress(grid, total=len(grid), desc="Retirement date"):
            iteration += 1
            self._checkpoint()
            scenario = self._scenario_for(base_date, date)
            summary = self._evaluate_or_skip(scenario, label=date.isoformat())
            if summary is None:
                continue
            actual = scenario.participant_scenarios[self.participant].retirement_date
            best = self._keep_best(self._build_result(summary, iteration, optimal_retirement_date=actual), best)

        if best is None:
            raise BreakEvenError(self.OPERATION, "no valid retirement date found")

        best.iterations = iteration
        best.convergence_info = f"Tested {iteration} monthly retirement dates"
        return best

    def _base_retirement_date(self) -> dt.date:
        participant_scenario = self.base.participant_scenarios.get(self.participant)
        if participant_scenario is None:
            raise BreakEvenError(self.OPERATION, f"participant {self.participant} not found in scenario")
        if participant_scenario.retirement_date is None:
            raise BreakEvenError(self.OPERATION, f"participant {self.participant} has no retirement date")
        return participant_scenario.retirement_date

    @staticmethod
    def _date_grid(min_date: dt.date, max_date: dt.date) -> List[dt.date]:
        grid = []
        step = 0
        date = min_date
        while date <= max_date:
            grid.append(date)
            step += 1
            date = add_months(min_date, step)
        return grid

    def _scenario_for(self, base_date: dt.date, date: dt.date) -> GenericScenario:
        offset = months_between(base_date, date)
        if offset == 0:
            return self.base.deep_copy()
        if offset > 0:
            return self._apply([PostponeRetirement(self.participant, offset)])
        return self._apply([SetRetirementDate(self.participant, add_months(base_date, offset))])
