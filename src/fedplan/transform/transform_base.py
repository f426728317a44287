"""
Scenario transforms.

A transform is a small, named, validated operation producing a modified
copy of a GenericScenario. Transforms compose through
``fedplan.transform.pipeline.apply_transforms``.
"""

from abc import ABC, abstractmethod
from typing import Optional

from fedplan.scenario.generic_scenario import GenericScenario, ParticipantScenario

OP_VALIDATE: str = "validate"
OP_APPLY: str = "apply"
OP_PARSE: str = "parse"


class TransformError(Exception):
    """
    Validation or application failure of a transform.

    Attributes
    ----------
    transform_name : str
        Name of the transform that failed.
    operation : str
        ``validate``, ``apply`` or ``parse``.
    reason : str
        Human-readable reason.
    cause : Exception, optional
        Wrapped underlying error.
    """

    def __init__(
        self,
        transform_name: str,
        operation: str,
        reason: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.transform_name = transform_name
        self.operation = operation
        self.reason = reason
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is not None:
            return f"transform {self.transform_name} ({self.operation}): {self.reason}: {self.cause}"
        return f"transform {self.transform_name} ({self.operation}): {self.reason}"


class ScenarioTransform(ABC):
    """
    Base class for all scenario transforms.

    Subclasses set ``NAME`` and implement ``description``, ``validate``
    and ``apply``. ``apply`` must never modify its input; it works on a
    deep copy and returns it.
    """

    NAME: str = ""

    @property
    def name(self) -> str:
        return self.NAME

    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the change."""
        pass

    @abstractmethod
    def validate(self, base: Optional[GenericScenario]) -> None:
        """
        Check the transform against ``base`` without applying it.

        Raises:
            TransformError: if the transform cannot be applied to ``base``.
        """
        pass

    @abstractmethod
    def apply(self, base: GenericScenario) -> GenericScenario:
        """Return a new scenario with the transform applied."""
        pass

    def _error(self, reason: str, operation: str = OP_VALIDATE) -> TransformError:
        return TransformError(self.name, operation, reason)

    def _require_base(self, base: Optional[GenericScenario]) -> GenericScenario:
        if base is None:
            raise self._error("base scenario cannot be None")
        return base

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description()!r})"


class ParticipantTransform(ScenarioTransform):
    """Transform scoped to one named participant."""

    def __init__(self, participant: str) -> None:
        self.participant = participant

    def _require_participant(self, base: Optional[GenericScenario]) -> ParticipantScenario:
        """
        Shared participant checks, run against the scenario state at this
        point of the chain.
        """
        if not self.participant:
            raise self._error("participant name cannot be empty")
        base = self._require_base(base)
        if not base.has_participant(self.participant):
            raise self._error(f"participant {self.participant} not found in scenario")
        return base.participant_scenarios[self.participant]

    def _copy_with_participant(self, base: GenericScenario) -> tuple[GenericScenario, ParticipantScenario]:
        modified = base.deep_copy()
        return modified, modified.participant_scenarios[self.participant]
