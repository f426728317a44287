"""
Reduction of many single-target optimization results into per-metric
winners and human-readable recommendations.
"""

from typing import List, Optional

from fedplan.optimizer.types import MultiDimensionalResult, OptimizationResult, OptimizationTarget

MULTI_DIMENSIONAL_TARGETS: List[OptimizationTarget] = [
    OptimizationTarget.TSP_RATE,
    OptimizationTarget.RETIREMENT_DATE,
    OptimizationTarget.SS_AGE,
]


def reduce_results(results: List[OptimizationResult]) -> MultiDimensionalResult:
    """
    Pick the best result per metric and build recommendations.

    Only strict improvements replace the current best, so the
    first-found result wins ties.
    """
    md_result = MultiDimensionalResult(results=list(results))

    for result in results:
        if md_result.best_by_income is None or result.lifetime_income > md_result.best_by_income.lifetime_income:
            md_result.best_by_income = result
        if md_result.best_by_longevity is None or result.tsp_longevity > md_result.best_by_longevity.tsp_longevity:
            md_result.best_by_longevity = result
        if md_result.best_by_taxes is None or result.lifetime_taxes < md_result.best_by_taxes.lifetime_taxes:
            md_result.best_by_taxes = result

    md_result.recommendations = generate_recommendations(md_result)
    return md_result


def _optimum_suffix(result: OptimizationResult) -> str:
    described = result.describe_optimum()
    return f" ({described})" if described else ""


def generate_recommendations(md_result: MultiDimensionalResult) -> List[str]:
    recommendations: List[str] = []

    best_income: Optional[OptimizationResult] = md_result.best_by_income
    best_longevity: Optional[OptimizationResult] = md_result.best_by_longevity
    best_taxes: Optional[OptimizationResult] = md_result.best_by_taxes

    if best_income is not None:
        recommendations.append(
            f"To maximize lifetime income: Optimize {best_income.target.value}{_optimum_suffix(best_income)}"
        )

    if best_longevity is not None:
        recommendations.append(
            f"To maximize TSP longevity ({best_longevity.tsp_longevity} years): "
            f"Optimize {best_longevity.target.value}"
        )

    if best_taxes is not None:
        # savings relative to the most tax-heavy successful result
        worst_taxes = max(r.lifetime_taxes for r in md_result.results)
        recommendations.append(
            f"To minimize taxes: Optimize {best_taxes.target.value} "
            f"(saves ${worst_taxes - best_taxes.lifetime_taxes:,.0f})"
        )

    if best_income is not None and best_longevity is not None and best_income.target == best_longevity.target:
        recommendations.append(
            f"Optimizing {best_income.target.value} provides both high income AND longevity"
        )

    return recommendations
