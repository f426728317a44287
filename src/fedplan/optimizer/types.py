"""
Optimization request/result types, constraints and solver options.
"""

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

import pandas as pd

from fedplan.scenario.generic_scenario import GenericScenario, MAX_SS_AGE, MIN_SS_AGE
from fedplan.scenario.summary import ScenarioSummary
from fedplan.transform.tsp import MAX_TSP_RATE

OP_VALIDATE_CONSTRAINTS: str = "validate_constraints"


class OptimizationTarget(str, Enum):
    """Parameter being searched."""
    RETIREMENT_DATE = "retirement_date"
    TSP_RATE = "tsp_rate"
    TSP_BALANCE = "tsp_balance"
    SS_AGE = "ss_age"
    ALL = "all"


class OptimizationGoal(str, Enum):
    """Outcome the search is driven by."""
    MATCH_INCOME = "match_income"
    MAXIMIZE_INCOME = "maximize_income"
    MAXIMIZE_LONGEVITY = "maximize_longevity"
    MINIMIZE_TAXES = "minimize_taxes"


class BreakEvenError(Exception):
    """
    Solver failure.

    Attributes
    ----------
    operation : str
        Solver operation that failed (e.g. ``optimize_ss_age``).
    message : str
        Human-readable message.
    cause : Exception, optional
        Wrapped underlying error.
    """

    def __init__(self, operation: str, message: str, cause: Optional[BaseException] = None) -> None:
        self.operation = operation
        self.message = message
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.operation}: {self.message}: {self.cause}"
        return f"{self.operation}: {self.message}"


class NotImplementedTargetError(BreakEvenError):
    """Raised for targets the solver knows about but cannot search yet."""


@dataclass
class Constraints:
    """
    Per-optimization bounds. Only ``participant`` is required; unset
    bounds fall back to the defaults of the respective search.
    """
    participant: str = ""

    min_retirement_date: Optional[dt.date] = None
    max_retirement_date: Optional[dt.date] = None

    # decimal rates, 0.04 for 4%
    min_tsp_rate: Optional[float] = None
    max_tsp_rate: Optional[float] = None

    min_tsp_balance: Optional[float] = None
    max_tsp_balance: Optional[float] = None

    min_ss_age: Optional[int] = None
    max_ss_age: Optional[int] = None

    # required by the match_income goal
    target_income: Optional[float] = None

    @classmethod
    def default(cls, participant: str) -> "Constraints":
        return cls(
            participant=participant,
            min_tsp_rate=0.02,
            max_tsp_rate=0.10,
            min_ss_age=MIN_SS_AGE,
            max_ss_age=MAX_SS_AGE,
        )

    def validate(self) -> None:
        """
        Check internal consistency.

        Raises:
            BreakEvenError: empty participant, any min > max, an SS age
            bound outside 62-70, or a rate bound outside (0, 0.20].
        """
        if not self.participant:
            raise BreakEvenError(OP_VALIDATE_CONSTRAINTS, "participant name is required")

        self._check_pair("retirement_date", self.min_retirement_date, self.max_retirement_date)
        self._check_pair("tsp_rate", self.min_tsp_rate, self.max_tsp_rate)
        self._check_pair("tsp_balance", self.min_tsp_balance, self.max_tsp_balance)
        self._check_pair("ss_age", self.min_ss_age, self.max_ss_age)

        for age in (self.min_ss_age, self.max_ss_age):
            if age is not None and (age < MIN_SS_AGE or age > MAX_SS_AGE):
                raise BreakEvenError(
                    OP_VALIDATE_CONSTRAINTS, f"ss_age must be between {MIN_SS_AGE} and {MAX_SS_AGE}, got {age}"
                )

        for rate in (self.min_tsp_rate, self.max_tsp_rate):
            if rate is not None and (rate <= 0 or rate > MAX_TSP_RATE):
                raise BreakEvenError(
                    OP_VALIDATE_CONSTRAINTS, f"tsp_rate must be in (0, {MAX_TSP_RATE:.2f}], got {rate}"
                )

        for balance in (self.min_tsp_balance, self.max_tsp_balance):
            if balance is not None and balance < 0:
                raise BreakEvenError(OP_VALIDATE_CONSTRAINTS, f"tsp_balance cannot be negative, got {balance}")

    @staticmethod
    def _check_pair(label: str, lower: Any, upper: Any) -> None:
        if lower is not None and upper is not None and lower > upper:
            raise BreakEvenError(OP_VALIDATE_CONSTRAINTS, f"min_{label} cannot be greater than max_{label}")


@dataclass
class SolverOptions:
    """
    Solver configuration.

    Attributes
    ----------
    algorithm : str
        Informational label of the continuous search.
    grid_resolution : int
        Intervals per pass of the continuous grid refinement.
    tolerance : float
        Convergence tolerance in currency units for ``match_income``.
    max_iterations : int
        Evaluation cap of the continuous searches.
    parallel : bool
        Reserved; evaluation is always sequential.
    compare_to_base : bool
        Evaluate the untransformed base and attach deltas to results.
    show_progress : bool
        Show tqdm progress bars during grid searches.
    """
    algorithm: str = "binary_search"
    grid_resolution: int = 10
    tolerance: float = 1000.0
    max_iterations: int = 50
    parallel: bool = False
    compare_to_base: bool = False
    show_progress: bool = False


@dataclass
class OptimizationRequest:
    """One single-target optimization run."""
    base_scenario: Optional[GenericScenario]
    config: Any = None
    target: OptimizationTarget = OptimizationTarget.TSP_RATE
    goal: OptimizationGoal = OptimizationGoal.MAXIMIZE_INCOME
    constraints: Constraints = field(default_factory=Constraints)
    max_iterations: int = 0
    tolerance: float = 0.0


@dataclass
class OptimizationResult:
    """
    Outcome of one optimization run.

    Exactly one of the ``optimal_*`` fields is set, matching the
    request's target.
    """
    request: OptimizationRequest
    success: bool = False
    iterations: int = 0
    convergence_info: str = ""

    optimal_retirement_date: Optional[dt.date] = None
    optimal_tsp_rate: Optional[float] = None
    optimal_tsp_balance: Optional[float] = None
    optimal_ss_age: Optional[int] = None

    scenario_summary: Optional[ScenarioSummary] = None
    first_year_net_income: float = 0.0
    lifetime_income: float = 0.0
    tsp_longevity: int = 0
    lifetime_taxes: float = 0.0

    base_scenario_summary: Optional[ScenarioSummary] = None
    income_diff_from_base: Optional[float] = None
    tax_diff_from_base: Optional[float] = None

    @property
    def target(self) -> OptimizationTarget:
        return self.request.target

    @property
    def goal(self) -> OptimizationGoal:
        return self.request.goal

    @property
    def optimal_value(self) -> Any:
        for value in (
            self.optimal_retirement_date,
            self.optimal_tsp_rate,
            self.optimal_tsp_balance,
            self.optimal_ss_age,
        ):
            if value is not None:
                return value
        return None

    def describe_optimum(self) -> str:
        """Short human-readable form of the optimal value."""
        if self.optimal_tsp_rate is not None:
            return f"{self.optimal_tsp_rate * 100:.2f}% withdrawal rate"
        if self.optimal_retirement_date is not None:
            return f"retire {self.optimal_retirement_date.strftime('%b %Y')}"
        if self.optimal_ss_age is not None:
            return f"claim SS at {self.optimal_ss_age}"
        if self.optimal_tsp_balance is not None:
            return f"TSP balance ${self.optimal_tsp_balance:,.0f}"
        return ""


@dataclass
class MultiDimensionalResult:
    """Successful results across targets and goals plus per-metric winners."""
    results: List[OptimizationResult] = field(default_factory=list)
    best_by_income: Optional[OptimizationResult] = None
    best_by_longevity: Optional[OptimizationResult] = None
    best_by_taxes: Optional[OptimizationResult] = None
    recommendations: List[str] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        """One row per result, in evaluation order."""
        return pd.DataFrame(
            [
                {
                    "target": r.target.value,
                    "goal": r.goal.value,
                    "optimal_value": r.optimal_value,
                    "iterations": r.iterations,
                    "first_year_net_income": r.first_year_net_income,
                    "lifetime_income": r.lifetime_income,
                    "tsp_longevity": r.tsp_longevity,
                    "lifetime_taxes": r.lifetime_taxes,
                }
                for r in self.results
            ]
        )
