import datetime as dt
from dataclasses import dataclass, field
from typing import Dict, Optional

TRANSFER_MERGE: str = "merge"
TRANSFER_KEEP_SEPARATE: str = "keep_separate"
TRANSFER_SURVIVOR_INHERITS: str = "survivor_inherits"

VALID_TSP_TRANSFER_MODES: tuple[str, ...] = (
    TRANSFER_MERGE,
    TRANSFER_KEEP_SEPARATE,
    TRANSFER_SURVIVOR_INHERITS,
)


@dataclass
class MortalitySpec:
    """Death date or death age override for one participant."""
    death_date: Optional[dt.date] = None
    death_age: Optional[int] = None


@dataclass
class MortalityAssumptions:
    """
    Household assumptions applied after the first death.

    Attributes
    ----------
    survivor_spending_factor : float
        Share of the couple's spending the survivor still needs (0, 1].
    tsp_spousal_transfer : str
        How TSP balances are handled: ``merge``, ``keep_separate`` or
        ``survivor_inherits``.
    """
    survivor_spending_factor: float = 1.0
    tsp_spousal_transfer: str = TRANSFER_MERGE


@dataclass
class GenericScenarioMortality:
    """Mortality section of a scenario."""
    participants: Dict[str, MortalitySpec] = field(default_factory=dict)
    assumptions: Optional[MortalityAssumptions] = None
