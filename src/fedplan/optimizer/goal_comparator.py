from typing import Optional

from fedplan.optimizer.types import OptimizationGoal, OptimizationResult


def income_distance(result: OptimizationResult) -> Optional[float]:
    """Absolute distance of first-year income from the request's target income."""
    target = result.request.constraints.target_income
    if target is None:
        return None
    return abs(result.first_year_net_income - target)


def is_better(a: OptimizationResult, b: OptimizationResult, goal: OptimizationGoal) -> bool:
    """
    True if ``a`` strictly beats ``b`` for ``goal``.

    Strict comparisons only, so on ties the earlier candidate is kept.
    """
    if goal == OptimizationGoal.MAXIMIZE_INCOME:
        return a.lifetime_income > b.lifetime_income
    if goal == OptimizationGoal.MAXIMIZE_LONGEVITY:
        return a.tsp_longevity > b.tsp_longevity
    if goal == OptimizationGoal.MINIMIZE_TAXES:
        return a.lifetime_taxes < b.lifetime_taxes
    if goal == OptimizationGoal.MATCH_INCOME:
        a_dist, b_dist = income_distance(a), income_distance(b)
        if a_dist is None or b_dist is None:
            return False
        return a_dist < b_dist
    return False
