from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from fedplan.evaluation.cancellation import CancellationToken
from fedplan.scenario.generic_scenario import GenericScenario
from fedplan.scenario.summary import ScenarioSummary


class EvaluatorBase(ABC):
    """
    Abstract scenario evaluator.

    Wraps the external calculation engine (FERS pension, Social Security,
    TSP growth, RMD, IRMAA, taxes). The solver only ever calls
    ``evaluate``; it never inspects engine internals.

    Implementations must not mutate the scenario or configuration they
    receive.
    """

    @abstractmethod
    def evaluate(
        self,
        config: Any,
        scenario: GenericScenario,
        cancellation: Optional[CancellationToken] = None,
    ) -> ScenarioSummary:
        """
        Run a full projection for one scenario.

        Args:
            config: Engine configuration (opaque to the solver).
            scenario: Scenario to project.
            cancellation: Optional token the engine may poll.

        Returns:
            ScenarioSummary: first-year income, lifetime income, TSP
            longevity and the year-by-year projection.

        Raises:
            Exception: any engine failure for this scenario.
        """
        pass


class FunctionEvaluator(EvaluatorBase):
    """Adapter turning a plain ``fn(config, scenario)`` into an evaluator."""

    def __init__(self, fn: Callable[[Any, GenericScenario], ScenarioSummary]) -> None:
        self.fn = fn

    def evaluate(
        self,
        config: Any,
        scenario: GenericScenario,
        cancellation: Optional[CancellationToken] = None,
    ) -> ScenarioSummary:
        if cancellation is not None:
            cancellation.raise_if_cancelled("evaluate")
        return self.fn(config, scenario)
