"""
Composable scenario transforms.

Typical use::

    registry = TransformRegistry.default()
    transforms = registry.parse_transform_specs(["postpone_retirement:participant=Alice,months=12"])
    modified = apply_transforms(base, transforms)
"""

from .transform_base import ScenarioTransform, ParticipantTransform, TransformError
from .pipeline import apply_transforms
from .retirement import PostponeRetirement, SetRetirementDate, add_months
from .social_security import DelaySSClaim
from .tsp import ModifyTSPStrategy, AdjustTSPRate, SetTSPTargetIncome
from .roth_conversion import EnableRothConversion, ModifyRothConversion, RemoveRothConversion
from .mortality import SetMortalityDate, SetSurvivorSpendingFactor, SetTSPTransferMode
from .registry import TransformRegistry
from .templates import (
    Template,
    TemplateRegistry,
    create_built_in_templates,
    apply_template,
    parse_template_list,
    template_help,
)

__all__ = [
    "ScenarioTransform",
    "ParticipantTransform",
    "TransformError",
    "apply_transforms",
    "add_months",
    "PostponeRetirement",
    "SetRetirementDate",
    "DelaySSClaim",
    "ModifyTSPStrategy",
    "AdjustTSPRate",
    "SetTSPTargetIncome",
    "EnableRothConversion",
    "ModifyRothConversion",
    "RemoveRothConversion",
    "SetMortalityDate",
    "SetSurvivorSpendingFactor",
    "SetTSPTransferMode",
    "TransformRegistry",
    "Template",
    "TemplateRegistry",
    "create_built_in_templates",
    "apply_template",
    "parse_template_list",
    "template_help",
]
