import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

from fedplan.optimizer.types import (
    Constraints,
    OptimizationGoal,
    OptimizationRequest,
    OptimizationTarget,
    SolverOptions,
)
from fedplan.scenario.generic_scenario import (
    GenericScenario,
    ParticipantScenario,
    STRATEGY_4_PERCENT_RULE,
    VALID_TSP_STRATEGIES,
    WithdrawalSequencingConfig,
)
from fedplan.scenario.mortality import GenericScenarioMortality, MortalityAssumptions, MortalitySpec
from fedplan.scenario.roth_conversion import RothConversion, RothConversionSchedule, SOURCE_TRADITIONAL_TSP

logger = logging.getLogger(__name__)

# ----------------------
# Top-level YAML sections
# ----------------------
KEY_SCENARIOS: str = "scenarios"
KEY_CONSTRAINTS: str = "constraints"
KEY_SOLVER: str = "solver"
KEY_BREAKEVEN: str = "breakeven"
KEY_ENGINE: str = "engine"

# ----------------------
# Scenario keys
# ----------------------
KEY_NAME: str = "name"
KEY_PARTICIPANTS: str = "participants"
KEY_RETIREMENT_DATE: str = "retirement_date"
KEY_SS_START_AGE: str = "ss_start_age"
KEY_TSP_STRATEGY: str = "tsp_withdrawal_strategy"
KEY_TSP_RATE: str = "tsp_withdrawal_rate"
KEY_TSP_TARGET_MONTHLY: str = "tsp_withdrawal_target_monthly"
KEY_ROTH_CONVERSIONS: str = "roth_conversions"
KEY_YEAR: str = "year"
KEY_AMOUNT: str = "amount"
KEY_SOURCE: str = "source"

KEY_MORTALITY: str = "mortality"
KEY_DEATH_DATE: str = "death_date"
KEY_DEATH_AGE: str = "death_age"
KEY_ASSUMPTIONS: str = "assumptions"
KEY_SURVIVOR_SPENDING_FACTOR: str = "survivor_spending_factor"
KEY_TSP_SPOUSAL_TRANSFER: str = "tsp_spousal_transfer"

KEY_WITHDRAWAL_SEQUENCING: str = "withdrawal_sequencing"
KEY_STRATEGY: str = "strategy"
KEY_TARGET_BRACKET: str = "target_bracket"
KEY_BRACKET_BUFFER: str = "bracket_buffer"
KEY_CUSTOM_SEQUENCE: str = "custom_sequence"

# ----------------------
# Constraint keys
# ----------------------
KEY_PARTICIPANT: str = "participant"
KEY_MIN_RETIREMENT_DATE: str = "min_retirement_date"
KEY_MAX_RETIREMENT_DATE: str = "max_retirement_date"
KEY_MIN_TSP_RATE: str = "min_tsp_rate"
KEY_MAX_TSP_RATE: str = "max_tsp_rate"
KEY_MIN_TSP_BALANCE: str = "min_tsp_balance"
KEY_MAX_TSP_BALANCE: str = "max_tsp_balance"
KEY_MIN_SS_AGE: str = "min_ss_age"
KEY_MAX_SS_AGE: str = "max_ss_age"
KEY_TARGET_INCOME: str = "target_income"

# ----------------------
# Break-even keys
# ----------------------
KEY_BASE_SCENARIO: str = "base_scenario"
KEY_TARGET: str = "target"
KEY_GOALS: str = "goals"
KEY_MAX_ITERATIONS: str = "max_iterations"
KEY_TOLERANCE: str = "tolerance"

SOLVER_OPTION_KEYS: List[str] = [
    "algorithm",
    "grid_resolution",
    "tolerance",
    "max_iterations",
    "parallel",
    "compare_to_base",
    "show_progress",
]


def _to_date(value: Any) -> Optional[dt.date]:
    """YAML gives ``date`` for unquoted ISO dates; quoted ones arrive as strings."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return date_parser.isoparse(str(value)).date()


def _opt_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _opt_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


class ConfigMapper:
    """
    Maps a parsed YAML document into planning-domain objects.

    Sections:
    - ``scenarios``: list of GenericScenario definitions
    - ``constraints``: optimization Constraints
    - ``solver``: SolverOptions
    - ``breakeven``: base scenario name, target and goals

    The ``engine`` section is passed through untouched as the opaque
    configuration handed to the evaluator.
    """

    @classmethod
    def map_yaml_to_params(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        scenarios: Dict[str, GenericScenario] = {
            s.name: s for s in (cls._load_scenario(cfg) for cfg in data.get(KEY_SCENARIOS) or [])
        }

        params: Dict[str, Any] = {
            KEY_SCENARIOS: scenarios,
            KEY_CONSTRAINTS: cls._load_constraints(data.get(KEY_CONSTRAINTS)),
            KEY_SOLVER: cls._load_solver_options(data.get(KEY_SOLVER) or {}),
            KEY_BREAKEVEN: cls._load_breakeven(data.get(KEY_BREAKEVEN) or {}),
            KEY_ENGINE: data.get(KEY_ENGINE),
        }

        logger.info("Mapped %d scenarios: %s", len(scenarios), ", ".join(scenarios))
        return params

    @classmethod
    def build_request(cls, params: Dict[str, Any], goal: Optional[OptimizationGoal] = None) -> OptimizationRequest:
        """
        Build the optimization request described by the ``breakeven`` section.

        Args:
            params: Output of `map_yaml_to_params`.
            goal: Overrides the first configured goal.

        Raises:
            ValueError: missing or unknown base scenario, or no goal.
        """
        breakeven: Dict[str, Any] = params[KEY_BREAKEVEN]
        base_name: Optional[str] = breakeven.get(KEY_BASE_SCENARIO)
        if not base_name:
            raise ValueError(f"'{KEY_BREAKEVEN}.{KEY_BASE_SCENARIO}' not set")

        scenarios: Dict[str, GenericScenario] = params[KEY_SCENARIOS]
        if base_name not in scenarios:
            raise ValueError(f"base scenario {base_name} not found in configuration")

        goals: List[OptimizationGoal] = breakeven[KEY_GOALS]
        if goal is None:
            if not goals:
                raise ValueError(f"'{KEY_BREAKEVEN}.{KEY_GOALS}' is empty")
            goal = goals[0]

        constraints: Optional[Constraints] = params[KEY_CONSTRAINTS]
        if constraints is None:
            raise ValueError(f"'{KEY_CONSTRAINTS}' section is required")

        return OptimizationRequest(
            base_scenario=scenarios[base_name],
            config=params[KEY_ENGINE],
            target=breakeven[KEY_TARGET],
            goal=goal,
            constraints=constraints,
            max_iterations=breakeven.get(KEY_MAX_ITERATIONS, 0),
            tolerance=breakeven.get(KEY_TOLERANCE, 0.0),
        )

    # ----------------------
    # Scenarios
    # ----------------------
    @classmethod
    def _load_scenario(cls, cfg: Dict[str, Any]) -> GenericScenario:
        participants: Dict[str, ParticipantScenario] = {}
        for name, p_cfg in (cfg.get(KEY_PARTICIPANTS) or {}).items():
            participants[name] = cls._load_participant(name, p_cfg or {})

        return GenericScenario(
            name=cfg[KEY_NAME],
            participant_scenarios=participants,
            mortality=cls._load_mortality(cfg.get(KEY_MORTALITY)),
            withdrawal_sequencing=cls._load_withdrawal_sequencing(cfg.get(KEY_WITHDRAWAL_SEQUENCING)),
        )

    @classmethod
    def _load_participant(cls, name: str, cfg: Dict[str, Any]) -> ParticipantScenario:
        strategy: str = cfg.get(KEY_TSP_STRATEGY, STRATEGY_4_PERCENT_RULE)
        if strategy not in VALID_TSP_STRATEGIES:
            raise ValueError(f"participant {name}: invalid TSP strategy '{strategy}'")

        return ParticipantScenario(
            participant_name=name,
            retirement_date=_to_date(cfg.get(KEY_RETIREMENT_DATE)),
            ss_start_age=int(cfg.get(KEY_SS_START_AGE, 62)),
            tsp_withdrawal_strategy=strategy,
            tsp_withdrawal_rate=_opt_float(cfg.get(KEY_TSP_RATE)),
            tsp_withdrawal_target_monthly=_opt_float(cfg.get(KEY_TSP_TARGET_MONTHLY)),
            roth_conversions=cls._load_roth_conversions(cfg.get(KEY_ROTH_CONVERSIONS)),
        )

    @staticmethod
    def _load_roth_conversions(cfg: Optional[List[Dict[str, Any]]]) -> Optional[RothConversionSchedule]:
        """
        Args:
            cfg: list of ``{year, amount, source}`` entries.

        Returns:
            Schedule, or None if no conversions are configured.
        """
        if not cfg:
            return None
        return RothConversionSchedule(
            conversions=[
                RothConversion(
                    year=int(c[KEY_YEAR]),
                    amount=float(c[KEY_AMOUNT]),
                    source=c.get(KEY_SOURCE, SOURCE_TRADITIONAL_TSP),
                )
                for c in cfg
            ]
        )

    @staticmethod
    def _load_mortality(cfg: Optional[Dict[str, Any]]) -> Optional[GenericScenarioMortality]:
        if not cfg:
            return None

        participants: Dict[str, MortalitySpec] = {
            name: MortalitySpec(
                death_date=_to_date(spec.get(KEY_DEATH_DATE)),
                death_age=_opt_int(spec.get(KEY_DEATH_AGE)),
            )
            for name, spec in (cfg.get(KEY_PARTICIPANTS) or {}).items()
        }

        assumptions: Optional[MortalityAssumptions] = None
        a_cfg: Optional[Dict[str, Any]] = cfg.get(KEY_ASSUMPTIONS)
        if a_cfg:
            defaults = MortalityAssumptions()
            assumptions = MortalityAssumptions(
                survivor_spending_factor=float(
                    a_cfg.get(KEY_SURVIVOR_SPENDING_FACTOR, defaults.survivor_spending_factor)
                ),
                tsp_spousal_transfer=a_cfg.get(KEY_TSP_SPOUSAL_TRANSFER, defaults.tsp_spousal_transfer),
            )

        return GenericScenarioMortality(participants=participants, assumptions=assumptions)

    @staticmethod
    def _load_withdrawal_sequencing(cfg: Optional[Dict[str, Any]]) -> Optional[WithdrawalSequencingConfig]:
        if not cfg:
            return None
        return WithdrawalSequencingConfig(
            strategy=cfg.get(KEY_STRATEGY, "standard"),
            target_bracket=_opt_int(cfg.get(KEY_TARGET_BRACKET)),
            bracket_buffer=_opt_int(cfg.get(KEY_BRACKET_BUFFER)),
            custom_sequence=list(cfg.get(KEY_CUSTOM_SEQUENCE, [])),
        )

    # ----------------------
    # Optimization settings
    # ----------------------
    @staticmethod
    def _load_constraints(cfg: Optional[Dict[str, Any]]) -> Optional[Constraints]:
        if cfg is None:
            return None
        return Constraints(
            participant=cfg.get(KEY_PARTICIPANT, ""),
            min_retirement_date=_to_date(cfg.get(KEY_MIN_RETIREMENT_DATE)),
            max_retirement_date=_to_date(cfg.get(KEY_MAX_RETIREMENT_DATE)),
            min_tsp_rate=_opt_float(cfg.get(KEY_MIN_TSP_RATE)),
            max_tsp_rate=_opt_float(cfg.get(KEY_MAX_TSP_RATE)),
            min_tsp_balance=_opt_float(cfg.get(KEY_MIN_TSP_BALANCE)),
            max_tsp_balance=_opt_float(cfg.get(KEY_MAX_TSP_BALANCE)),
            min_ss_age=_opt_int(cfg.get(KEY_MIN_SS_AGE)),
            max_ss_age=_opt_int(cfg.get(KEY_MAX_SS_AGE)),
            target_income=_opt_float(cfg.get(KEY_TARGET_INCOME)),
        )

    @staticmethod
    def _load_solver_options(cfg: Dict[str, Any]) -> SolverOptions:
        unknown = set(cfg) - set(SOLVER_OPTION_KEYS)
        if unknown:
            raise ValueError(f"unknown solver options: {', '.join(sorted(unknown))}")
        return SolverOptions(**cfg)

    @staticmethod
    def _load_breakeven(cfg: Dict[str, Any]) -> Dict[str, Any]:
        """
        Returns:
            Dict with base scenario name, OptimizationTarget, list of
            OptimizationGoal and optional iteration/tolerance overrides.
        """
        goals_cfg = cfg.get(KEY_GOALS, [OptimizationGoal.MAXIMIZE_INCOME.value])
        if isinstance(goals_cfg, str):
            goals_cfg = [goals_cfg]

        settings: Dict[str, Any] = {
            KEY_BASE_SCENARIO: cfg.get(KEY_BASE_SCENARIO),
            KEY_TARGET: OptimizationTarget(cfg.get(KEY_TARGET, OptimizationTarget.TSP_RATE.value)),
            KEY_GOALS: [OptimizationGoal(g) for g in goals_cfg],
        }
        if KEY_MAX_ITERATIONS in cfg:
            settings[KEY_MAX_ITERATIONS] = int(cfg[KEY_MAX_ITERATIONS])
        if KEY_TOLERANCE in cfg:
            settings[KEY_TOLERANCE] = float(cfg[KEY_TOLERANCE])
        return settings
