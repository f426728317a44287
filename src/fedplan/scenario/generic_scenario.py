"""
Planning scenario value types.

A GenericScenario is keyed by participant name and carries the per-person
retirement parameters the calculation engine consumes. Library code treats
scenarios as values: every modification works on a ``deep_copy()``.
"""

import copy
import datetime as dt
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fedplan.scenario.mortality import GenericScenarioMortality
from fedplan.scenario.roth_conversion import RothConversionSchedule

# ----------------------
# TSP withdrawal strategies
# ----------------------
STRATEGY_4_PERCENT_RULE: str = "4_percent_rule"
STRATEGY_VARIABLE_PERCENTAGE: str = "variable_percentage"
STRATEGY_NEED_BASED: str = "need_based"
STRATEGY_FIXED_AMOUNT: str = "fixed_amount"

VALID_TSP_STRATEGIES: tuple[str, ...] = (
    STRATEGY_4_PERCENT_RULE,
    STRATEGY_VARIABLE_PERCENTAGE,
    STRATEGY_NEED_BASED,
    STRATEGY_FIXED_AMOUNT,
)

RATE_BASED_STRATEGIES: tuple[str, ...] = (
    STRATEGY_VARIABLE_PERCENTAGE,
    STRATEGY_4_PERCENT_RULE,
)

MIN_SS_AGE: int = 62
MAX_SS_AGE: int = 70


@dataclass
class ParticipantScenario:
    """
    Retirement parameters of a single participant within a scenario.

    Attributes
    ----------
    participant_name : str
        Name used as key in ``GenericScenario.participant_scenarios``.
    retirement_date : dt.date, optional
        Planned separation date.
    ss_start_age : int
        Social Security claiming age (62-70).
    tsp_withdrawal_strategy : str
        One of ``VALID_TSP_STRATEGIES``.
    tsp_withdrawal_rate : float, optional
        Annual withdrawal rate for rate-based strategies (0.04 for 4%).
    tsp_withdrawal_target_monthly : float, optional
        Monthly target income for the need-based strategy.
    roth_conversions : RothConversionSchedule, optional
        Planned Roth conversions.
    """
    participant_name: str
    retirement_date: Optional[dt.date] = None
    ss_start_age: int = 62
    tsp_withdrawal_strategy: str = STRATEGY_4_PERCENT_RULE
    tsp_withdrawal_rate: Optional[float] = None
    tsp_withdrawal_target_monthly: Optional[float] = None
    roth_conversions: Optional[RothConversionSchedule] = None


@dataclass
class WithdrawalSequencingConfig:
    """Account sequencing settings, passed through to the calculation engine."""
    strategy: str = "standard"
    target_bracket: Optional[int] = None
    bracket_buffer: Optional[int] = None
    custom_sequence: List[str] = field(default_factory=list)


@dataclass
class GenericScenario:
    """Household planning scenario keyed by participant name."""
    name: str
    participant_scenarios: Dict[str, ParticipantScenario] = field(default_factory=dict)
    mortality: Optional[GenericScenarioMortality] = None
    withdrawal_sequencing: Optional[WithdrawalSequencingConfig] = None

    def deep_copy(self) -> "GenericScenario":
        """
        Return a full structural copy.

        Participant map, mortality substructure and Roth schedules are
        copied too, so mutating the copy never affects this instance.
        """
        return copy.deepcopy(self)

    def has_participant(self, name: str) -> bool:
        return name in self.participant_scenarios

    def participant_names(self) -> List[str]:
        return list(self.participant_scenarios.keys())
