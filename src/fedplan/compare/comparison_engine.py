import logging
from typing import Any, List, Optional

from fedplan.compare.comparison_types import ComparisonError, ComparisonResult, ComparisonSet
from fedplan.evaluation.cancellation import CancellationToken, OperationCancelledError
from fedplan.evaluation.evaluator_base import EvaluatorBase
from fedplan.scenario.generic_scenario import GenericScenario
from fedplan.transform.pipeline import apply_transforms
from fedplan.transform.registry import TransformRegistry
from fedplan.transform.templates import TemplateRegistry, apply_template, create_built_in_templates

logger = logging.getLogger(__name__)


def generate_recommendations(comparison: ComparisonSet) -> List[str]:
    """
    Best income, best longevity and lowest taxes, each reported only when
    an alternative strictly beats the base.
    """
    base = comparison.base_result
    recommendations: List[str] = []
    if not comparison.alternative_results:
        return recommendations

    best_income = base
    best_longevity = base
    lowest_tax = base
    for alt in comparison.alternative_results:
        if alt.lifetime_income > best_income.lifetime_income:
            best_income = alt
        if alt.tsp_longevity > best_longevity.tsp_longevity:
            best_longevity = alt
        if alt.lifetime_taxes < lowest_tax.lifetime_taxes:
            lowest_tax = alt

    if best_income is not base:
        recommendations.append(
            f"Best Income: {best_income.scenario_name} provides "
            f"${best_income.lifetime_income - base.lifetime_income:,.0f} more lifetime income than base scenario"
        )
    if best_longevity is not base:
        recommendations.append(
            f"Best Longevity: {best_longevity.scenario_name} extends TSP by "
            f"{best_longevity.tsp_longevity - base.tsp_longevity} years"
        )
    if lowest_tax is not base:
        recommendations.append(
            f"Lowest Taxes: {lowest_tax.scenario_name} saves "
            f"${base.lifetime_taxes - lowest_tax.lifetime_taxes:,.0f} in lifetime taxes"
        )
    return recommendations


class ComparisonEngine:
    """
    Evaluates a base scenario next to alternatives derived from it by
    templates or ad-hoc transform specs.

    Unlike the solver's grid searches, every failure here is fatal: the
    user asked for each alternative explicitly.
    """

    def __init__(self, evaluator: EvaluatorBase, transform_registry: Optional[TransformRegistry] = None) -> None:
        self.evaluator = evaluator
        self.transform_registry = transform_registry or TransformRegistry.default()

    def compare(
        self,
        config: Any,
        base: GenericScenario,
        templates: List[str],
        participant: str,
        template_registry: Optional[TemplateRegistry] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> ComparisonSet:
        """
        Compare ``base`` against each named template.

        Args:
            config: engine configuration passed through to the evaluator.
            base: scenario the templates are applied to.
            templates: template names, case-insensitive.
            participant: participant the built-in templates target.
            template_registry: overrides the built-in templates.
            cancellation: optional token checked before each evaluation.
        """
        registry = template_registry or create_built_in_templates(participant)
        base_result = self._evaluate(config, base, "", cancellation)

        alternatives = []
        for template_name in templates:
            template = registry.get(template_name)
            if template is None:
                raise ComparisonError(f"template {template_name} not found")

            modified = apply_template(base, template)
            modified.name = f"{base.name}_{template_name}"
            result = self._evaluate(config, modified, template.description, cancellation)
            alternatives.append(result.with_deltas(base_result))

        return self._build_set(base, base_result, alternatives)

    def compare_transforms(
        self,
        config: Any,
        base: GenericScenario,
        specs: List[str],
        name: str = "custom",
        cancellation: Optional[CancellationToken] = None,
    ) -> ComparisonSet:
        """Compare ``base`` against one alternative built by chaining transform specs in order."""
        transforms = self.transform_registry.parse_transform_specs(specs)
        modified = apply_transforms(base, transforms)
        modified.name = f"{base.name}_{name}"

        base_result = self._evaluate(config, base, "", cancellation)
        description = "; ".join(t.description() for t in transforms)
        result = self._evaluate(config, modified, description, cancellation)
        return self._build_set(base, base_result, [result.with_deltas(base_result)])

    def _evaluate(
        self,
        config: Any,
        scenario: GenericScenario,
        description: str,
        cancellation: Optional[CancellationToken],
    ) -> ComparisonResult:
        if cancellation is not None:
            cancellation.raise_if_cancelled("compare")
        try:
            summary = self.evaluator.evaluate(config, scenario, cancellation)
        except OperationCancelledError:
            raise
        except Exception as err:
            raise ComparisonError(f"failed to calculate scenario {scenario.name}: {err}") from err
        return ComparisonResult.from_summary(summary, description)

    @staticmethod
    def _build_set(
        base: GenericScenario,
        base_result: ComparisonResult,
        alternatives: List[ComparisonResult],
    ) -> ComparisonSet:
        comparison = ComparisonSet(
            base_scenario_name=base.name,
            base_result=base_result,
            alternative_results=alternatives,
        )
        comparison.recommendations = generate_recommendations(comparison)
        logger.info(
            "Compared %s against %d alternatives", base.name, len(alternatives)
        )
        return comparison
