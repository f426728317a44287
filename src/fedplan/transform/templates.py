from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fedplan.scenario.generic_scenario import (
    GenericScenario,
    STRATEGY_4_PERCENT_RULE,
    STRATEGY_NEED_BASED,
    STRATEGY_VARIABLE_PERCENTAGE,
)
from fedplan.transform.pipeline import apply_transforms
from fedplan.transform.retirement import PostponeRetirement
from fedplan.transform.social_security import DelaySSClaim
from fedplan.transform.transform_base import ScenarioTransform
from fedplan.transform.tsp import AdjustTSPRate, ModifyTSPStrategy

CATEGORY_TIMING: str = "Retirement Timing"
CATEGORY_SOCIAL_SECURITY: str = "Social Security"
CATEGORY_TSP: str = "TSP Strategies"
CATEGORY_COMBINATION: str = "Combination Strategies"

CATEGORY_ORDER: List[str] = [
    CATEGORY_TIMING,
    CATEGORY_SOCIAL_SECURITY,
    CATEGORY_TSP,
    CATEGORY_COMBINATION,
]


@dataclass
class Template:
    """Named, reusable bundle of transforms."""
    name: str
    description: str
    transforms: List[ScenarioTransform] = field(default_factory=list)

    @property
    def category(self) -> str:
        if self.name.startswith("postpone_") and "delay_ss" not in self.name:
            return CATEGORY_TIMING
        if self.name.startswith("delay_ss_") and "tsp" not in self.name:
            return CATEGORY_SOCIAL_SECURITY
        if self.name.startswith("tsp_"):
            return CATEGORY_TSP
        return CATEGORY_COMBINATION


class TemplateRegistry:
    """Case-insensitive lookup of templates by name."""

    def __init__(self) -> None:
        self._templates: Dict[str, Template] = {}

    def register(self, template: Template) -> None:
        self._templates[template.name.lower()] = template

    def get(self, name: str) -> Optional[Template]:
        return self._templates.get(name.lower())

    def names(self) -> List[str]:
        return sorted(self._templates)

    def templates(self) -> List[Template]:
        return [self._templates[name] for name in self.names()]

    def __len__(self) -> int:
        return len(self._templates)


def _rate_strategy(participant: str, strategy: str, rate: float) -> List[ScenarioTransform]:
    return [
        ModifyTSPStrategy(participant=participant, new_strategy=strategy),
        AdjustTSPRate(participant=participant, new_rate=rate),
    ]


def create_built_in_templates(participant: str) -> TemplateRegistry:
    """Build the common retirement what-if templates for one participant."""
    registry = TemplateRegistry()

    for years in (1, 2, 3):
        registry.register(
            Template(
                name=f"postpone_{years}yr",
                description=f"Postpone retirement by {years} year{'s' if years > 1 else ''} ({years * 12} months)",
                transforms=[PostponeRetirement(participant=participant, months=years * 12)],
            )
        )

    registry.register(
        Template(
            name="delay_ss_67",
            description="Delay Social Security claiming to age 67 (Full Retirement Age)",
            transforms=[DelaySSClaim(participant=participant, new_age=67)],
        )
    )
    registry.register(
        Template(
            name="delay_ss_70",
            description="Delay Social Security claiming to age 70 (Maximum benefit)",
            transforms=[DelaySSClaim(participant=participant, new_age=70)],
        )
    )

    registry.register(
        Template(
            name="tsp_need_based",
            description="Switch to need-based TSP withdrawals",
            transforms=[ModifyTSPStrategy(participant=participant, new_strategy=STRATEGY_NEED_BASED)],
        )
    )
    for pct in (2, 3):
        registry.register(
            Template(
                name=f"tsp_fixed_{pct}pct",
                description=f"Switch to fixed percentage TSP withdrawals at {pct}%",
                transforms=_rate_strategy(participant, STRATEGY_VARIABLE_PERCENTAGE, pct / 100),
            )
        )
    registry.register(
        Template(
            name="tsp_fixed_4pct",
            description="Switch to fixed percentage TSP withdrawals at 4% (traditional safe withdrawal rate)",
            transforms=_rate_strategy(participant, STRATEGY_4_PERCENT_RULE, 0.04),
        )
    )

    # Combinations
    for years in (1, 2):
        registry.register(
            Template(
                name=f"postpone_{years}yr_delay_ss_70",
                description=f"Postpone retirement {years} year{'s' if years > 1 else ''} + delay SS to 70",
                transforms=[
                    PostponeRetirement(participant=participant, months=years * 12),
                    DelaySSClaim(participant=participant, new_age=70),
                ],
            )
        )
    registry.register(
        Template(
            name="delay_ss_70_tsp_4pct",
            description="Delay SS to 70 + 4% TSP withdrawal rate",
            transforms=[DelaySSClaim(participant=participant, new_age=70)]
            + _rate_strategy(participant, STRATEGY_4_PERCENT_RULE, 0.04),
        )
    )
    registry.register(
        Template(
            name="conservative",
            description="Conservative strategy: Postpone 2 years, delay SS to 70, 3% TSP",
            transforms=[
                PostponeRetirement(participant=participant, months=24),
                DelaySSClaim(participant=participant, new_age=70),
            ]
            + _rate_strategy(participant, STRATEGY_VARIABLE_PERCENTAGE, 0.03),
        )
    )
    registry.register(
        Template(
            name="aggressive",
            description="Aggressive strategy: Delay SS to 70, 4% TSP withdrawal",
            transforms=[DelaySSClaim(participant=participant, new_age=70)]
            + _rate_strategy(participant, STRATEGY_4_PERCENT_RULE, 0.04),
        )
    )

    return registry


def apply_template(base: GenericScenario, template: Template) -> GenericScenario:
    """Apply a template's transforms; an empty template yields a plain copy."""
    return apply_transforms(base, template.transforms)


def parse_template_list(template_list: str) -> List[str]:
    """Split ``"a, b,,c"`` into ``["a", "b", "c"]``."""
    if not template_list:
        return []
    return [part.strip() for part in template_list.split(",") if part.strip()]


def template_help(registry: TemplateRegistry) -> str:
    """Help text listing templates grouped by category."""
    if not len(registry):
        return "No templates registered"

    by_category: Dict[str, List[Template]] = {c: [] for c in CATEGORY_ORDER}
    for template in registry.templates():
        by_category[template.category].append(template)

    lines: List[str] = ["Available Templates:", ""]
    for category in CATEGORY_ORDER:
        if not by_category[category]:
            continue
        lines.append(f"{category}:")
        lines.extend(f"  {t.name:<30} {t.description}" for t in by_category[category])
        lines.append("")

    return "\n".join(lines)
