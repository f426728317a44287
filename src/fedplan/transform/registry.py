"""
Registry of transform factories.

Transforms can be created by name from flat string parameters, which is
how command-line style specs such as
``postpone_retirement:participant=Alice,months=12`` are turned into
transform objects.
"""

import datetime as dt
from typing import Callable, Dict, List, Mapping, Optional

from fedplan.scenario.roth_conversion import RothConversion, SOURCE_TRADITIONAL_TSP
from fedplan.transform.mortality import (
    SetMortalityDate,
    SetSurvivorSpendingFactor,
    SetTSPTransferMode,
)
from fedplan.transform.retirement import PostponeRetirement, SetRetirementDate
from fedplan.transform.roth_conversion import (
    EnableRothConversion,
    ModifyRothConversion,
    RemoveRothConversion,
)
from fedplan.transform.social_security import DelaySSClaim
from fedplan.transform.transform_base import OP_PARSE, ScenarioTransform, TransformError
from fedplan.transform.tsp import AdjustTSPRate, ModifyTSPStrategy, SetTSPTargetIncome

TransformFactory = Callable[[Mapping[str, str]], ScenarioTransform]

REGISTRY_NAME: str = "registry"
DATE_FORMAT: str = "%Y-%m-%d"
TRUE_VALUES: tuple[str, ...] = ("true", "yes", "1")

# ----------------------
# Spec string separators
# ----------------------
NAME_SEPARATOR: str = ":"
PARAM_SEPARATOR: str = ","
KEY_VALUE_SEPARATOR: str = "="
CONVERSION_SEPARATOR: str = ";"
CONVERSION_YEAR_SEPARATOR: str = ":"


# ----------------------
# Parameter helpers
# ----------------------
def _required(params: Mapping[str, str], key: str, spec_name: str) -> str:
    if key not in params:
        raise TransformError(spec_name, OP_PARSE, f"requires '{key}' parameter")
    return params[key]


def _parse_int(value: str, key: str, spec_name: str) -> int:
    try:
        return int(value)
    except ValueError as err:
        raise TransformError(spec_name, OP_PARSE, f"invalid {key} value: {value}", cause=err) from err


def _parse_float(value: str, key: str, spec_name: str) -> float:
    try:
        return float(value)
    except ValueError as err:
        raise TransformError(spec_name, OP_PARSE, f"invalid {key} value: {value}", cause=err) from err


def _parse_date(value: str, spec_name: str) -> dt.date:
    try:
        return dt.datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as err:
        raise TransformError(
            spec_name, OP_PARSE, f"invalid date format, expected YYYY-MM-DD: {value}", cause=err
        ) from err


# ----------------------
# Factories
# ----------------------
def create_postpone_retirement(params: Mapping[str, str]) -> ScenarioTransform:
    name = "postpone_retirement"
    return PostponeRetirement(
        participant=_required(params, "participant", name),
        months=_parse_int(_required(params, "months", name), "months", name),
    )


def create_set_retirement_date(params: Mapping[str, str]) -> ScenarioTransform:
    name = "set_retirement_date"
    return SetRetirementDate(
        participant=_required(params, "participant", name),
        date=_parse_date(_required(params, "date", name), name),
    )


def create_delay_ss_claim(params: Mapping[str, str]) -> ScenarioTransform:
    name = "delay_ss"
    return DelaySSClaim(
        participant=_required(params, "participant", name),
        new_age=_parse_int(_required(params, "age", name), "age", name),
    )


def create_modify_tsp_strategy(params: Mapping[str, str]) -> ScenarioTransform:
    name = "modify_tsp_strategy"
    preserve = params.get("preserve_rate", "").lower() in TRUE_VALUES
    return ModifyTSPStrategy(
        participant=_required(params, "participant", name),
        new_strategy=_required(params, "strategy", name),
        preserve_rate=preserve,
    )


def create_adjust_tsp_rate(params: Mapping[str, str]) -> ScenarioTransform:
    name = "adjust_tsp_rate"
    return AdjustTSPRate(
        participant=_required(params, "participant", name),
        new_rate=_parse_float(_required(params, "rate", name), "rate", name),
    )


def create_set_tsp_target_income(params: Mapping[str, str]) -> ScenarioTransform:
    name = "set_tsp_target"
    return SetTSPTargetIncome(
        participant=_required(params, "participant", name),
        monthly_target=_parse_float(_required(params, "target", name), "target", name),
    )


def create_set_mortality_date(params: Mapping[str, str]) -> ScenarioTransform:
    name = "set_mortality"
    return SetMortalityDate(
        participant=_required(params, "participant", name),
        death_date=_parse_date(_required(params, "date", name), name),
    )


def create_set_survivor_spending(params: Mapping[str, str]) -> ScenarioTransform:
    name = "set_survivor_spending"
    return SetSurvivorSpendingFactor(
        factor=_parse_float(_required(params, "factor", name), "factor", name),
    )


def create_set_tsp_transfer(params: Mapping[str, str]) -> ScenarioTransform:
    return SetTSPTransferMode(mode=_required(params, "mode", "set_tsp_transfer"))


def create_enable_roth_conversion(params: Mapping[str, str]) -> ScenarioTransform:
    """
    ``conversions`` is a ``YEAR:AMOUNT`` list separated by semicolons,
    e.g. ``conversions=2026:50000;2027:50000``. ``source`` is optional.
    """
    name = "enable_roth_conversion"
    participant = _required(params, "participant", name)
    raw = _required(params, "conversions", name)
    source = params.get("source", SOURCE_TRADITIONAL_TSP)

    conversions: List[RothConversion] = []
    for pair in filter(None, (p.strip() for p in raw.split(CONVERSION_SEPARATOR))):
        parts = pair.split(CONVERSION_YEAR_SEPARATOR, 1)
        if len(parts) != 2:
            raise TransformError(name, OP_PARSE, f"invalid conversion format, expected 'year:amount', got: {pair}")
        conversions.append(
            RothConversion(
                year=_parse_int(parts[0].strip(), "year", name),
                amount=_parse_float(parts[1].strip(), "amount", name),
                source=source,
            )
        )

    return EnableRothConversion(participant=participant, conversions=conversions)


def create_modify_roth_conversion(params: Mapping[str, str]) -> ScenarioTransform:
    name = "modify_roth_conversion"
    return ModifyRothConversion(
        participant=_required(params, "participant", name),
        year=_parse_int(_required(params, "year", name), "year", name),
        new_amount=_parse_float(_required(params, "amount", name), "amount", name),
    )


def create_remove_roth_conversion(params: Mapping[str, str]) -> ScenarioTransform:
    name = "remove_roth_conversion"
    return RemoveRothConversion(
        participant=_required(params, "participant", name),
        year=_parse_int(_required(params, "year", name), "year", name),
    )


BUILT_IN_FACTORIES: Dict[str, TransformFactory] = {
    "postpone_retirement": create_postpone_retirement,
    "set_retirement_date": create_set_retirement_date,
    "delay_ss": create_delay_ss_claim,
    "modify_tsp_strategy": create_modify_tsp_strategy,
    "adjust_tsp_rate": create_adjust_tsp_rate,
    "set_tsp_target": create_set_tsp_target_income,
    "set_mortality": create_set_mortality_date,
    "set_survivor_spending": create_set_survivor_spending,
    "set_tsp_transfer": create_set_tsp_transfer,
    "enable_roth_conversion": create_enable_roth_conversion,
    "modify_roth_conversion": create_modify_roth_conversion,
    "remove_roth_conversion": create_remove_roth_conversion,
}


class TransformRegistry:
    """
    Lookup table from spec names to transform factories.

    Registries are built explicitly and handed to whoever needs them.
    After ``freeze()`` no further factories can be registered.
    """

    def __init__(self, factories: Optional[Mapping[str, TransformFactory]] = None) -> None:
        self._factories: Dict[str, TransformFactory] = dict(factories or {})
        self._frozen: bool = False

    @classmethod
    def default(cls) -> "TransformRegistry":
        """Frozen registry holding all built-in transforms."""
        registry = cls(BUILT_IN_FACTORIES)
        registry.freeze()
        return registry

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, name: str, factory: TransformFactory) -> None:
        if self._frozen:
            raise RuntimeError(f"cannot register '{name}': registry is frozen")
        self._factories[name] = factory

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def create(self, name: str, params: Mapping[str, str]) -> ScenarioTransform:
        """Create a transform by registry name from string parameters."""
        factory = self._factories.get(name)
        if factory is None:
            raise TransformError(REGISTRY_NAME, OP_PARSE, f"unknown transform: {name}")
        return factory(params)

    def parse_transform_spec(self, spec: str) -> ScenarioTransform:
        """
        Parse ``name:key1=value1,key2=value2`` into a transform.

        Keys and values are whitespace-trimmed; an empty parameter list
        (``name:``) is allowed.
        """
        if NAME_SEPARATOR not in spec:
            raise TransformError(
                REGISTRY_NAME, OP_PARSE, f"invalid transform spec format, expected 'name:params', got: {spec}"
            )

        name, params_str = (part.strip() for part in spec.split(NAME_SEPARATOR, 1))

        params: Dict[str, str] = {}
        if params_str:
            for pair in params_str.split(PARAM_SEPARATOR):
                kv = pair.split(KEY_VALUE_SEPARATOR, 1)
                if len(kv) != 2:
                    raise TransformError(
                        REGISTRY_NAME, OP_PARSE, f"invalid parameter format, expected 'key=value', got: {pair}"
                    )
                params[kv[0].strip()] = kv[1].strip()

        return self.create(name, params)

    def parse_transform_specs(self, specs: List[str]) -> List[ScenarioTransform]:
        """Parse several specs, keeping their order."""
        return [self.parse_transform_spec(spec) for spec in specs]
