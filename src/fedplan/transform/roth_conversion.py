import copy
from typing import List, Optional

from fedplan.scenario.generic_scenario import GenericScenario, ParticipantScenario
from fedplan.scenario.roth_conversion import (
    MAX_CONVERSION_YEAR,
    MIN_CONVERSION_YEAR,
    RothConversion,
    RothConversionSchedule,
    VALID_CONVERSION_SOURCES,
)
from fedplan.transform.transform_base import ParticipantTransform


class EnableRothConversion(ParticipantTransform):
    """Append Roth conversions to a participant's schedule, creating it if needed."""

    NAME = "enable_roth_conversion"

    def __init__(self, participant: str, conversions: List[RothConversion]) -> None:
        super().__init__(participant)
        self.conversions = list(conversions)

    def description(self) -> str:
        if not self.conversions:
            return f"Enable Roth conversions for {self.participant} (no conversions specified)"
        return f"Enable {len(self.conversions)} Roth conversions for {self.participant}"

    def validate(self, base: Optional[GenericScenario]) -> None:
        self._require_participant(base)

        for i, conversion in enumerate(self.conversions):
            if conversion.amount <= 0:
                raise self._error(f"conversion {i}: amount must be positive, got {conversion.amount}")
            if conversion.year < MIN_CONVERSION_YEAR or conversion.year > MAX_CONVERSION_YEAR:
                raise self._error(
                    f"conversion {i}: year must be between {MIN_CONVERSION_YEAR}-{MAX_CONVERSION_YEAR}, "
                    f"got {conversion.year}"
                )
            if conversion.source not in VALID_CONVERSION_SOURCES:
                raise self._error(f"conversion {i}: invalid source {conversion.source}")

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        if ps.roth_conversions is None:
            ps.roth_conversions = RothConversionSchedule()
        # the transform may be reused in other chains
        ps.roth_conversions.conversions.extend(copy.deepcopy(self.conversions))
        return modified


class _ExistingConversionTransform(ParticipantTransform):
    """Shared checks for transforms addressing an existing conversion year."""

    def __init__(self, participant: str, year: int) -> None:
        super().__init__(participant)
        self.year = year

    def _require_conversion_year(self, base: Optional[GenericScenario]) -> ParticipantScenario:
        ps = self._require_participant(base)
        if ps.roth_conversions is None or not ps.roth_conversions.conversions:
            raise self._error(f"participant {self.participant} has no Roth conversions")
        if self.year not in ps.roth_conversions.years():
            raise self._error(f"no Roth conversion found for year {self.year}")
        return ps


class ModifyRothConversion(_ExistingConversionTransform):
    """Change the amount of an existing Roth conversion."""

    NAME = "modify_roth_conversion"

    def __init__(self, participant: str, year: int, new_amount: float) -> None:
        super().__init__(participant, year)
        self.new_amount = new_amount

    def description(self) -> str:
        return f"Modify {self.participant}'s Roth conversion in {self.year} to ${self.new_amount:,.0f}"

    def validate(self, base: Optional[GenericScenario]) -> None:
        if not self.participant:
            raise self._error("participant name cannot be empty")
        if self.new_amount <= 0:
            raise self._error(f"conversion amount must be positive, got {self.new_amount}")
        self._require_conversion_year(base)

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        for conversion in ps.roth_conversions.conversions:
            if conversion.year == self.year:
                conversion.amount = self.new_amount
                break
        return modified


class RemoveRothConversion(_ExistingConversionTransform):
    """Remove the conversion(s) of one year; an emptied schedule is dropped."""

    NAME = "remove_roth_conversion"

    def description(self) -> str:
        return f"Remove {self.participant}'s Roth conversion in {self.year}"

    def validate(self, base: Optional[GenericScenario]) -> None:
        self._require_conversion_year(base)

    def apply(self, base: GenericScenario) -> GenericScenario:
        modified, ps = self._copy_with_participant(base)
        remaining = [c for c in ps.roth_conversions.conversions if c.year != self.year]
        ps.roth_conversions = RothConversionSchedule(conversions=remaining) if remaining else None
        return modified
