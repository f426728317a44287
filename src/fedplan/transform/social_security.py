from typing import Optional

from fedplan.scenario.generic_scenario import GenericScenario, MAX_SS_AGE, MIN_SS_AGE
from fedplan.transform.transform_base import ParticipantTransform


class DelaySSClaim(ParticipantTransform):
    """
    Change the Social Security claiming age.

    Each year of delay past full retirement age adds 8% to the benefit,
    up to age 70.
    """

    NAME = "delay_ss_claim"

    def __init__(self, participant: str, new_age: int) -> None:
        super().__init__(participant)
        self.new_age = new_age

    def description(self) -> str:
        return f"Change {self.participant}'s Social Security start age to {self.new_age}"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if not self.participant:
            raise self._error("participant name cannot be empty")
        if self.new_age < MIN_SS_AGE or self.new_age > MAX_SS_AGE:
            raise self._error(
                f"SS start age must be between {MIN_SS_AGE} and {MAX_SS_AGE}, got {self.new_age}"
            )
        self._require_participant(base)

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        ps.ss_start_age = self.new_age
        return modified
