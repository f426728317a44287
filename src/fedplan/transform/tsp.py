from typing import Optional

from fedplan.scenario.generic_scenario import (
    GenericScenario,
    RATE_BASED_STRATEGIES,
    STRATEGY_NEED_BASED,
    VALID_TSP_STRATEGIES,
)
from fedplan.transform.transform_base import ParticipantTransform

MAX_TSP_RATE: float = 0.20


class ModifyTSPStrategy(ParticipantTransform):
    """
    Switch a participant's TSP withdrawal strategy.

    The existing rate and monthly target are cleared unless
    ``preserve_rate`` is set, so the engine falls back to its defaults
    for the new strategy.
    """

    NAME = "modify_tsp_strategy"

    def __init__(self, participant: str, new_strategy: str, preserve_rate: bool = False) -> None:
        super().__init__(participant)
        self.new_strategy = new_strategy
        self.preserve_rate = preserve_rate

    def description(self) -> str:
        return f"Change {self.participant}'s TSP withdrawal strategy to {self.new_strategy}"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if not self.participant:
            raise self._error("participant name cannot be empty")
        if self.new_strategy not in VALID_TSP_STRATEGIES:
            raise self._error(f"invalid TSP strategy: {self.new_strategy}")
        self._require_participant(base)

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        ps.tsp_withdrawal_strategy = self.new_strategy
        if not self.preserve_rate:
            ps.tsp_withdrawal_rate = None
            ps.tsp_withdrawal_target_monthly = None
        return modified


class AdjustTSPRate(ParticipantTransform):
    """Set the annual withdrawal rate of a percentage-based strategy."""

    NAME = "adjust_tsp_rate"

    def __init__(self, participant: str, new_rate: float) -> None:
        super().__init__(participant)
        self.new_rate = new_rate

    def description(self) -> str:
        return f"Change {self.participant}'s TSP withdrawal rate to {self.new_rate * 100:.1f}%"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if not self.participant:
            raise self._error("participant name cannot be empty")
        if self.new_rate <= 0 or self.new_rate > MAX_TSP_RATE:
            raise self._error(f"TSP rate must be between 0 and {MAX_TSP_RATE:.2f}, got {self.new_rate}")

        ps = self._require_participant(base)
        if ps.tsp_withdrawal_strategy not in RATE_BASED_STRATEGIES:
            raise self._error(
                "TSP rate only applicable to percentage-based strategies, "
                f"current strategy is {ps.tsp_withdrawal_strategy}"
            )

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        ps.tsp_withdrawal_rate = self.new_rate
        return modified


class SetTSPTargetIncome(ParticipantTransform):
    """Set the monthly TSP target for need-based withdrawals."""

    NAME = "set_tsp_target_income"

    def __init__(self, participant: str, monthly_target: float) -> None:
        super().__init__(participant)
        self.monthly_target = monthly_target

    def description(self) -> str:
        return f"Set {self.participant}'s TSP monthly target to ${self.monthly_target:,.0f}"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if not self.participant:
            raise self._error("participant name cannot be empty")
        if self.monthly_target <= 0:
            raise self._error(f"monthly target must be positive, got {self.monthly_target}")

        ps = self._require_participant(base)
        if ps.tsp_withdrawal_strategy != STRATEGY_NEED_BASED:
            raise self._error(
                "monthly target only applicable to need_based strategy, "
                f"current strategy is {ps.tsp_withdrawal_strategy}"
            )

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        ps.tsp_withdrawal_target_monthly = self.monthly_target
        return modified
