import textwrap

from conftest import build_summary
from fedplan.evaluation import FunctionEvaluator
from fedplan.io_handler import LocalIOHandler
from fedplan.run_break_even import main

CONFIG_TEMPLATE = textwrap.dedent(
    """
    scenarios:
      - name: Base
        participants:
          Alice:
            retirement_date: 2027-06-30
            ss_start_age: 62
            tsp_withdrawal_strategy: 4_percent_rule
            tsp_withdrawal_rate: 0.04
    constraints:
      participant: Alice
    breakeven:
      base_scenario: Base
      target: {target}
      goals: [{goals}]
    """
)


def ss_evaluator(config, scenario):
    age = scenario.participant_scenarios["Alice"].ss_start_age
    return build_summary(
        scenario.name,
        lifetime_income=1000000.0 + 10000.0 * (age - 62),
        tsp_longevity=20 + (age - 62),
        lifetime_taxes=100000.0,
    )


def write_config(tmp_path, target, goals):
    (tmp_path / "plan.yaml").write_text(CONFIG_TEMPLATE.format(target=target, goals=goals))
    return LocalIOHandler("plan.yaml", config_folder=str(tmp_path), output_folder=str(tmp_path / "out"))


class TestRunBreakEven:
    """End-to-end run from a YAML file."""

    def test_all_targets(self, tmp_path):
        handler = write_config(tmp_path, "all", "maximize_income")

        table = main("plan.yaml", FunctionEvaluator(ss_evaluator), io_handler=handler, run_id="run1")

        assert list(table["target"]) == ["tsp_rate", "retirement_date", "ss_age"]
        assert (tmp_path / "out" / "run1" / "results.csv").exists()

    def test_single_target_per_goal(self, tmp_path):
        handler = write_config(tmp_path, "ss_age", "maximize_income, minimize_taxes")

        table = main("plan.yaml", FunctionEvaluator(ss_evaluator), io_handler=handler)

        assert list(table["goal"]) == ["maximize_income", "minimize_taxes"]
        assert list(table["optimal_value"]) == [70, 62]
        assert not (tmp_path / "out").exists()
