import datetime as dt
import os
import tempfile
import textwrap
import unittest
from pathlib import Path

import pandas as pd
import yaml

from fedplan.config.config_mapper import (
    ConfigMapper,
    KEY_BREAKEVEN,
    KEY_CONSTRAINTS,
    KEY_ENGINE,
    KEY_GOALS,
    KEY_SCENARIOS,
    KEY_SOLVER,
    KEY_TARGET,
)
from fedplan.io_handler.local_io_handler import CONFIG_FOLDER_ENV, LocalIOHandler
from fedplan.optimizer import OptimizationGoal, OptimizationTarget, SolverOptions

CONFIG_YAML = textwrap.dedent(
    """
    engine:
      cola: 0.02
    scenarios:
      - name: Base
        participants:
          Alice:
            retirement_date: 2027-06-30
            ss_start_age: 62
            tsp_withdrawal_strategy: 4_percent_rule
            tsp_withdrawal_rate: 0.04
            roth_conversions:
              - year: 2028
                amount: 50000
          Bob:
            retirement_date: "2028-01-31"
            ss_start_age: 67
            tsp_withdrawal_strategy: need_based
            tsp_withdrawal_target_monthly: 3000
        mortality:
          participants:
            Bob:
              death_age: 85
          assumptions:
            survivor_spending_factor: 0.8
        withdrawal_sequencing:
          strategy: bracket_fill
          target_bracket: 22
      - name: Early
        participants:
          Alice:
            retirement_date: 2026-06-30
    constraints:
      participant: Alice
      min_tsp_rate: 0.02
      max_tsp_rate: 0.08
      target_income: 90000
    solver:
      grid_resolution: 20
      compare_to_base: true
    breakeven:
      base_scenario: Base
      target: ss_age
      goals: [maximize_longevity, minimize_taxes]
      max_iterations: 30
    """
)


class TestConfigMapper(unittest.TestCase):
    """Mapping of a parsed YAML document into domain objects."""

    def setUp(self) -> None:
        self.params = ConfigMapper.map_yaml_to_params(yaml.safe_load(CONFIG_YAML))

    def test_scenarios(self) -> None:
        scenarios = self.params[KEY_SCENARIOS]
        self.assertEqual(list(scenarios), ["Base", "Early"])

        base = scenarios["Base"]
        alice = base.participant_scenarios["Alice"]
        bob = base.participant_scenarios["Bob"]
        self.assertEqual(alice.retirement_date, dt.date(2027, 6, 30))
        self.assertEqual(bob.retirement_date, dt.date(2028, 1, 31))
        self.assertEqual(alice.roth_conversions.years(), [2028])
        self.assertEqual(alice.roth_conversions.conversions[0].source, "traditional_tsp")
        self.assertEqual(bob.tsp_withdrawal_target_monthly, 3000.0)
        self.assertEqual(base.mortality.participants["Bob"].death_age, 85)
        self.assertEqual(base.mortality.assumptions.survivor_spending_factor, 0.8)
        self.assertEqual(base.mortality.assumptions.tsp_spousal_transfer, "merge")
        self.assertEqual(base.withdrawal_sequencing.target_bracket, 22)

        early_alice = scenarios["Early"].participant_scenarios["Alice"]
        self.assertEqual(early_alice.tsp_withdrawal_strategy, "4_percent_rule")
        self.assertIsNone(scenarios["Early"].mortality)

    def test_constraints_and_solver(self) -> None:
        constraints = self.params[KEY_CONSTRAINTS]
        self.assertEqual(constraints.participant, "Alice")
        self.assertEqual(constraints.max_tsp_rate, 0.08)
        self.assertEqual(constraints.target_income, 90000.0)
        self.assertIsNone(constraints.min_ss_age)

        options = self.params[KEY_SOLVER]
        self.assertEqual(options.grid_resolution, 20)
        self.assertTrue(options.compare_to_base)
        self.assertEqual(options.max_iterations, 50)

    def test_breakeven_and_request(self) -> None:
        breakeven = self.params[KEY_BREAKEVEN]
        self.assertEqual(breakeven[KEY_TARGET], OptimizationTarget.SS_AGE)
        self.assertEqual(
            breakeven[KEY_GOALS], [OptimizationGoal.MAXIMIZE_LONGEVITY, OptimizationGoal.MINIMIZE_TAXES]
        )

        request = ConfigMapper.build_request(self.params)
        self.assertEqual(request.base_scenario.name, "Base")
        self.assertEqual(request.goal, OptimizationGoal.MAXIMIZE_LONGEVITY)
        self.assertEqual(request.max_iterations, 30)
        self.assertEqual(request.config, self.params[KEY_ENGINE])

        override = ConfigMapper.build_request(self.params, goal=OptimizationGoal.MINIMIZE_TAXES)
        self.assertEqual(override.goal, OptimizationGoal.MINIMIZE_TAXES)

    def test_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            ConfigMapper.map_yaml_to_params({"breakeven": {"target": "pension"}})
        with self.assertRaises(ValueError):
            ConfigMapper.map_yaml_to_params({"solver": {"speed": "fast"}})
        with self.assertRaises(ValueError):
            ConfigMapper.map_yaml_to_params(
                {"scenarios": [{"name": "X", "participants": {"A": {"tsp_withdrawal_strategy": "yolo"}}}]}
            )

    def test_empty_sections(self) -> None:
        params = ConfigMapper.map_yaml_to_params(yaml.safe_load("scenarios:\nsolver:\nbreakeven:\n"))
        self.assertEqual(params[KEY_SCENARIOS], {})
        self.assertEqual(params[KEY_SOLVER], SolverOptions())
        self.assertEqual(params[KEY_BREAKEVEN][KEY_GOALS], [OptimizationGoal.MAXIMIZE_INCOME])

    def test_missing_base_scenario(self) -> None:
        self.params[KEY_BREAKEVEN]["base_scenario"] = "Nope"
        with self.assertRaises(ValueError):
            ConfigMapper.build_request(self.params)


class TestLocalIOHandler(unittest.TestCase):
    """YAML loading and CSV output on the local filesystem."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.folder = Path(self._tmp.name)
        (self.folder / "plan.yaml").write_text(CONFIG_YAML)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_load_from_env_folder(self) -> None:
        previous = os.environ.get(CONFIG_FOLDER_ENV)
        os.environ[CONFIG_FOLDER_ENV] = str(self.folder)
        try:
            data = LocalIOHandler("plan.yaml").load_config()
        finally:
            if previous is None:
                del os.environ[CONFIG_FOLDER_ENV]
            else:
                os.environ[CONFIG_FOLDER_ENV] = previous

        self.assertEqual(data["breakeven"]["base_scenario"], "Base")

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            LocalIOHandler("other.yaml", config_folder=str(self.folder)).load_config()

    def test_save_results(self) -> None:
        handler = LocalIOHandler("plan.yaml", config_folder=str(self.folder), output_folder=str(self.folder / "out"))
        handler.save_results(pd.DataFrame({"a": [1, 2]}), run_id="run1")

        saved = pd.read_csv(self.folder / "out" / "run1" / "results.csv", index_col=0)
        self.assertEqual(list(saved["a"]), [1, 2])


if __name__ == "__main__":
    unittest.main()
