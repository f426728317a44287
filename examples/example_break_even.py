"""
Example: break-even analysis with a toy projection engine.

This example demonstrates:
- Optimizing a single target (SS claiming age) for TSP longevity
- Running all targets for several goals from a YAML configuration
- Comparing built-in templates against the base scenario

The toy engine below stands in for a real FERS/SS/TSP calculation engine.
"""

import datetime as dt
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from fedplan.compare import ComparisonEngine
from fedplan.evaluation import FunctionEvaluator
from fedplan.io_handler import LocalIOHandler
from fedplan.optimizer import (
    BreakEvenSolver,
    Constraints,
    OptimizationGoal,
    OptimizationRequest,
    OptimizationTarget,
)
from fedplan.run_break_even import main as run_break_even
from fedplan.scenario import AnnualCashFlow, GenericScenario, ParticipantScenario, ScenarioSummary

YEARS = 30
TSP_GROWTH = 0.05


def toy_projection(config, scenario: GenericScenario) -> ScenarioSummary:
    """Very rough household projection driven by Alice's settings."""
    alice = scenario.participant_scenarios["Alice"]
    initial = float(config["tsp_balance"])
    tsp = initial
    rate = alice.tsp_withdrawal_rate if alice.tsp_withdrawal_rate is not None else 0.04
    start_year = alice.retirement_date.year
    ss_benefit = 24000.0 * (1 + 0.08 * (alice.ss_start_age - 62))

    projection = []
    longevity = YEARS
    lifetime_income = 0.0
    for i in range(YEARS):
        withdrawal = min(tsp, initial * rate)
        tsp = (tsp - withdrawal) * (1 + TSP_GROWTH)
        age = 60 + (start_year - 2027) + i
        income = float(config["pension"]) + withdrawal + (ss_benefit if age >= alice.ss_start_age else 0.0)
        federal = 0.12 * income
        projection.append(
            AnnualCashFlow(
                year=start_year + i,
                date=dt.date(start_year + i, 1, 1),
                net_income=income - federal,
                federal_tax=federal,
                state_tax=0.04 * income,
                tsp_balance=tsp,
            )
        )
        lifetime_income += (income - federal) / (1.03 ** i)
        if tsp <= 1.0 and longevity == YEARS:
            longevity = i

    return ScenarioSummary(
        name=scenario.name,
        first_year_net_income=projection[0].net_income,
        total_lifetime_income=lifetime_income,
        tsp_longevity=longevity,
        initial_tsp_balance=initial,
        final_tsp_balance=tsp,
        projection=projection,
    )


def main():
    """Run the break-even example."""
    print("=" * 60)
    print("Break-Even Example")
    print("=" * 60)

    config = {"tsp_balance": 800000, "pension": 42000}
    base = GenericScenario(
        name="Base",
        participant_scenarios={
            "Alice": ParticipantScenario(
                participant_name="Alice",
                retirement_date=dt.date(2027, 6, 30),
                ss_start_age=62,
                tsp_withdrawal_strategy="4_percent_rule",
                tsp_withdrawal_rate=0.04,
            )
        },
    )
    evaluator = FunctionEvaluator(toy_projection)

    # Single target
    solver = BreakEvenSolver(evaluator)
    result = solver.optimize(
        OptimizationRequest(
            base_scenario=base,
            config=config,
            target=OptimizationTarget.SS_AGE,
            goal=OptimizationGoal.MAXIMIZE_INCOME,
            constraints=Constraints.default("Alice"),
        )
    )
    print(f"\nBest SS claiming age: {result.optimal_ss_age} ({result.convergence_info})")

    # All targets from YAML
    folder = os.path.dirname(os.path.abspath(__file__))
    table = run_break_even(
        "break_even_params.yaml",
        evaluator,
        io_handler=LocalIOHandler("break_even_params.yaml", config_folder=folder),
    )
    print("\nMulti-dimensional results:")
    print(table.to_string(index=False))

    # Template comparison
    comparison = ComparisonEngine(evaluator).compare(
        config, base, ["postpone_1yr", "delay_ss_70", "conservative"], "Alice"
    )
    print("\nTemplate comparison:")
    print(comparison.to_frame()[["lifetime_income", "tsp_longevity", "lifetime_taxes"]].to_string())
    for recommendation in comparison.recommendations:
        print(f"  - {recommendation}")


if __name__ == "__main__":
    main()
