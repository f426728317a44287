import datetime as dt
from typing import Optional

from dateutil.relativedelta import relativedelta

from fedplan.scenario.generic_scenario import GenericScenario
from fedplan.transform.transform_base import ParticipantTransform


def add_months(date: dt.date, months: int) -> dt.date:
    """Calendar-month arithmetic; day is clamped to the target month's end."""
    return date + relativedelta(months=months)


class PostponeRetirement(ParticipantTransform):
    """Delay a participant's retirement date by a number of months."""

    NAME = "postpone_retirement"

    def __init__(self, participant: str, months: int) -> None:
        super().__init__(participant)
        self.months = months

    def description(self) -> str:
        return f"Postpone {self.participant}'s retirement by {self.months} months"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if not self.participant:
            raise self._error("participant name cannot be empty")
        if self.months < 0:
            raise self._error(f"months must be non-negative, got {self.months}")

        ps = self._require_participant(base)
        if ps.retirement_date is None:
            raise self._error(f"participant {self.participant} has no retirement date")

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        ps.retirement_date = add_months(ps.retirement_date, self.months)
        return modified


class SetRetirementDate(ParticipantTransform):
    """Set a participant's retirement date to an absolute date."""

    NAME = "set_retirement_date"

    def __init__(self, participant: str, date: Optional[dt.date]) -> None:
        super().__init__(participant)
        self.date = date

    def description(self) -> str:
        date_str = self.date.isoformat() if self.date else "<unset>"
        return f"Set {self.participant}'s retirement date to {date_str}"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if not self.participant:
            raise self._error("participant name cannot be empty")
        if self.date is None:
            raise self._error("date cannot be empty")
        self._require_participant(base)

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        ps.retirement_date = self.date
        return modified
