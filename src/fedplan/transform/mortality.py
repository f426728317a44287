import datetime as dt
from typing import Optional

from fedplan.scenario.generic_scenario import GenericScenario
from fedplan.scenario.mortality import (
    GenericScenarioMortality,
    MortalityAssumptions,
    MortalitySpec,
    VALID_TSP_TRANSFER_MODES,
)
from fedplan.transform.transform_base import ParticipantTransform, ScenarioTransform


def _ensure_assumptions(scenario: GenericScenario) -> MortalityAssumptions:
    """Lazily create the mortality section and its assumptions on a copy."""
    if scenario.mortality is None:
        scenario.mortality = GenericScenarioMortality()
    if scenario.mortality.assumptions is None:
        scenario.mortality.assumptions = MortalityAssumptions()
    return scenario.mortality.assumptions


class SetMortalityDate(ParticipantTransform):
    """Set a participant's death date for survivor analysis."""

    NAME = "set_mortality_date"

    def __init__(self, participant: str, death_date: Optional[dt.date]) -> None:
        super().__init__(participant)
        self.death_date = death_date

    def description(self) -> str:
        date_str = self.death_date.isoformat() if self.death_date else "<unset>"
        return f"Set {self.participant}'s death date to {date_str} for mortality analysis"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if not self.participant:
            raise self._error("participant name cannot be empty")
        if self.death_date is None:
            raise self._error("death date cannot be empty")
        self._require_participant(base)

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified = base.deep_copy()
        if modified.mortality is None:
            modified.mortality = GenericScenarioMortality()
        modified.mortality.participants[self.participant] = MortalitySpec(death_date=self.death_date)
        return modified


class SetSurvivorSpendingFactor(ScenarioTransform):
    """
    Set the survivor's spending as a share of the couple's spending.
    Typical values lie between 0.75 and 0.85.
    """

    NAME = "set_survivor_spending"

    def __init__(self, factor: float) -> None:
        self.factor = factor

    def description(self) -> str:
        return f"Set survivor spending to {self.factor * 100:.0f}% of couple's spending"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if self.factor <= 0 or self.factor > 1:
            raise self._error(f"survivor spending factor must be between 0 and 1, got {self.factor}")
        self._require_base(base)

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified = base.deep_copy()
        _ensure_assumptions(modified).survivor_spending_factor = self.factor
        return modified


class SetTSPTransferMode(ScenarioTransform):
    """Set how TSP balances are handled after a spouse's death."""

    NAME = "set_tsp_transfer"

    def __init__(self, mode: str) -> None:
        self.mode = mode

    def description(self) -> str:
        return f"Set TSP spousal transfer mode to {self.mode}"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if self.mode not in VALID_TSP_TRANSFER_MODES:
            raise self._error(f"invalid TSP transfer mode: {self.mode}")
        self._require_base(base)

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified = base.deep_copy()
        _ensure_assumptions(modified).tsp_spousal_transfer = self.mode
        return modified
