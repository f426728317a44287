from .generic_scenario import (
    GenericScenario,
    ParticipantScenario,
    WithdrawalSequencingConfig,
    STRATEGY_4_PERCENT_RULE,
    STRATEGY_VARIABLE_PERCENTAGE,
    STRATEGY_NEED_BASED,
    STRATEGY_FIXED_AMOUNT,
    VALID_TSP_STRATEGIES,
    RATE_BASED_STRATEGIES,
    MIN_SS_AGE,
    MAX_SS_AGE,
)
from .mortality import (
    GenericScenarioMortality,
    MortalityAssumptions,
    MortalitySpec,
    VALID_TSP_TRANSFER_MODES,
)
from .roth_conversion import (
    RothConversion,
    RothConversionSchedule,
    VALID_CONVERSION_SOURCES,
)
from .summary import AnnualCashFlow, ScenarioSummary

__all__ = [
    "GenericScenario",
    "ParticipantScenario",
    "WithdrawalSequencingConfig",
    "GenericScenarioMortality",
    "MortalityAssumptions",
    "MortalitySpec",
    "RothConversion",
    "RothConversionSchedule",
    "AnnualCashFlow",
    "ScenarioSummary",
    "STRATEGY_4_PERCENT_RULE",
    "STRATEGY_VARIABLE_PERCENTAGE",
    "STRATEGY_NEED_BASED",
    "STRATEGY_FIXED_AMOUNT",
    "VALID_TSP_STRATEGIES",
    "RATE_BASED_STRATEGIES",
    "VALID_TSP_TRANSFER_MODES",
    "VALID_CONVERSION_SOURCES",
    "MIN_SS_AGE",
    "MAX_SS_AGE",
]
