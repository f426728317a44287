from dataclasses import dataclass, field
from typing import List

SOURCE_TRADITIONAL_TSP: str = "traditional_tsp"
SOURCE_TRADITIONAL_IRA: str = "traditional_ira"

VALID_CONVERSION_SOURCES: tuple[str, ...] = (
    SOURCE_TRADITIONAL_TSP,
    SOURCE_TRADITIONAL_IRA,
)

MIN_CONVERSION_YEAR: int = 2020
MAX_CONVERSION_YEAR: int = 2100


@dataclass
class RothConversion:
    """
    A single Roth conversion event.

    Attributes
    ----------
    year : int
        Calendar year of the conversion.
    amount : float
        Amount moved from the traditional account to Roth.
    source : str
        Source account, ``traditional_tsp`` or ``traditional_ira``.
    """
    year: int
    amount: float
    source: str = SOURCE_TRADITIONAL_TSP


@dataclass
class RothConversionSchedule:
    """Ordered list of Roth conversions for one participant."""
    conversions: List[RothConversion] = field(default_factory=list)

    def years(self) -> List[int]:
        return [c.year for c in self.conversions]
