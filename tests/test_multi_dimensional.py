import datetime as dt

import pytest

from conftest import build_summary
from fedplan.evaluation import CancellationToken, FunctionEvaluator, OperationCancelledError
from fedplan.optimizer import (
    BreakEvenError,
    BreakEvenSolver,
    Constraints,
    OptimizationGoal,
    OptimizationRequest,
    OptimizationResult,
    OptimizationTarget,
    reduce_results,
)


def make_result(target, lifetime_income=0.0, tsp_longevity=0, lifetime_taxes=0.0, **optimum):
    request = OptimizationRequest(base_scenario=None, target=target, goal=OptimizationGoal.MAXIMIZE_INCOME)
    return OptimizationResult(
        request=request,
        success=True,
        lifetime_income=lifetime_income,
        tsp_longevity=tsp_longevity,
        lifetime_taxes=lifetime_taxes,
        **optimum,
    )


def household_evaluator(config, scenario):
    """SS delay pays off; the rate term peaks at 5%."""
    alice = scenario.participant_scenarios["Alice"]
    rate = alice.tsp_withdrawal_rate if alice.tsp_withdrawal_rate is not None else 0.04
    return build_summary(
        scenario.name,
        lifetime_income=1000000.0 + 10000.0 * (alice.ss_start_age - 62) - 1.0e8 * (rate - 0.05) ** 2,
        tsp_longevity=20 + (alice.ss_start_age - 62),
        lifetime_taxes=100000.0,
    )


class TestReduceResults:
    """Per-metric winners with first-found tie breaking."""

    def test_best_by_income(self):
        a = make_result(OptimizationTarget.TSP_RATE, lifetime_income=3.0e6, optimal_tsp_rate=0.045)
        b = make_result(OptimizationTarget.SS_AGE, lifetime_income=3.2e6, optimal_ss_age=70)
        c = make_result(OptimizationTarget.RETIREMENT_DATE, lifetime_income=3.1e6,
                        optimal_retirement_date=dt.date(2028, 1, 31))

        md_result = reduce_results([a, b, c])

        assert md_result.best_by_income is b
        assert md_result.recommendations[0] == "To maximize lifetime income: Optimize ss_age (claim SS at 70)"

    def test_ties_favour_earlier_result(self):
        a = make_result(OptimizationTarget.TSP_RATE, lifetime_income=3.0e6, tsp_longevity=25, lifetime_taxes=5.0e5)
        b = make_result(OptimizationTarget.SS_AGE, lifetime_income=3.0e6, tsp_longevity=25, lifetime_taxes=5.0e5)

        md_result = reduce_results([a, b])

        assert md_result.best_by_income is a
        assert md_result.best_by_longevity is a
        assert md_result.best_by_taxes is a

    def test_recommendation_texts(self):
        a = make_result(OptimizationTarget.TSP_RATE, lifetime_income=3.0e6, tsp_longevity=30,
                        lifetime_taxes=4.0e5, optimal_tsp_rate=0.045)
        b = make_result(OptimizationTarget.RETIREMENT_DATE, lifetime_income=3.1e6, tsp_longevity=22,
                        lifetime_taxes=4.5e5, optimal_retirement_date=dt.date(2028, 1, 31))

        md_result = reduce_results([a, b])

        assert md_result.recommendations == [
            "To maximize lifetime income: Optimize retirement_date (retire Jan 2028)",
            "To maximize TSP longevity (30 years): Optimize tsp_rate",
            "To minimize taxes: Optimize tsp_rate (saves $50,000)",
        ]

    def test_shared_winner_bonus_line(self):
        a = make_result(OptimizationTarget.TSP_RATE, lifetime_income=3.0e6, tsp_longevity=30, optimal_tsp_rate=0.045)

        md_result = reduce_results([a])

        assert md_result.recommendations[0] == "To maximize lifetime income: Optimize tsp_rate (4.50% withdrawal rate)"
        assert md_result.recommendations[-1] == "Optimizing tsp_rate provides both high income AND longevity"

    def test_to_frame(self):
        a = make_result(OptimizationTarget.TSP_RATE, lifetime_income=3.0e6, optimal_tsp_rate=0.045)
        b = make_result(OptimizationTarget.SS_AGE, lifetime_income=3.2e6, optimal_ss_age=70)

        frame = reduce_results([a, b]).to_frame()

        assert list(frame["target"]) == ["tsp_rate", "ss_age"]
        assert list(frame["optimal_value"]) == [0.045, 70]


class TestOptimizeMultiDimensional:
    """Sequential runs over all targets with per-run failure isolation."""

    def setup_method(self):
        self.solver = BreakEvenSolver(FunctionEvaluator(household_evaluator))

    def test_all_targets_single_goal(self, base_scenario):
        md_result = self.solver.optimize_all_targets(
            base_scenario, None, Constraints(participant="Alice"), OptimizationGoal.MAXIMIZE_INCOME
        )

        assert [r.target for r in md_result.results] == [
            OptimizationTarget.TSP_RATE,
            OptimizationTarget.RETIREMENT_DATE,
            OptimizationTarget.SS_AGE,
        ]
        assert md_result.best_by_income.target == OptimizationTarget.SS_AGE
        assert md_result.best_by_longevity.target == OptimizationTarget.SS_AGE
        assert md_result.best_by_taxes.target == OptimizationTarget.TSP_RATE
        assert md_result.recommendations == [
            "To maximize lifetime income: Optimize ss_age (claim SS at 70)",
            "To maximize TSP longevity (28 years): Optimize ss_age",
            "To minimize taxes: Optimize tsp_rate (saves $0)",
            "Optimizing ss_age provides both high income AND longevity",
        ]

    def test_several_goals(self, base_scenario):
        md_result = self.solver.optimize_multi_dimensional(
            base_scenario,
            None,
            Constraints(participant="Alice"),
            [OptimizationGoal.MAXIMIZE_INCOME, OptimizationGoal.MAXIMIZE_LONGEVITY],
        )

        assert len(md_result.results) == 6
        assert [(r.target, r.goal) for r in md_result.results] == [
            (OptimizationTarget.TSP_RATE, OptimizationGoal.MAXIMIZE_INCOME),
            (OptimizationTarget.TSP_RATE, OptimizationGoal.MAXIMIZE_LONGEVITY),
            (OptimizationTarget.RETIREMENT_DATE, OptimizationGoal.MAXIMIZE_INCOME),
            (OptimizationTarget.RETIREMENT_DATE, OptimizationGoal.MAXIMIZE_LONGEVITY),
            (OptimizationTarget.SS_AGE, OptimizationGoal.MAXIMIZE_INCOME),
            (OptimizationTarget.SS_AGE, OptimizationGoal.MAXIMIZE_LONGEVITY),
        ]

    def test_failing_target_is_skipped(self, base_scenario):
        base_scenario.participant_scenarios["Alice"].retirement_date = None

        md_result = self.solver.optimize_all_targets(
            base_scenario, None, Constraints(participant="Alice"), OptimizationGoal.MAXIMIZE_INCOME
        )

        assert [r.target for r in md_result.results] == [OptimizationTarget.TSP_RATE, OptimizationTarget.SS_AGE]

    def test_no_success_raises(self, base_scenario):
        def failing(config, scenario):
            raise RuntimeError("engine down")

        solver = BreakEvenSolver(FunctionEvaluator(failing))
        with pytest.raises(BreakEvenError, match="no successful optimizations"):
            solver.optimize_all_targets(
                base_scenario, None, Constraints(participant="Alice"), OptimizationGoal.MAXIMIZE_INCOME
            )

    def test_invalid_constraints_are_fatal(self, base_scenario):
        with pytest.raises(BreakEvenError, match="participant name is required"):
            self.solver.optimize_all_targets(base_scenario, None, Constraints(), OptimizationGoal.MAXIMIZE_INCOME)

    def test_cancellation_propagates(self, base_scenario):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            self.solver.optimize_all_targets(
                base_scenario, None, Constraints(participant="Alice"), OptimizationGoal.MAXIMIZE_INCOME, token
            )
