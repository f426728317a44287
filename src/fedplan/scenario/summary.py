import datetime as dt
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd


@dataclass
class AnnualCashFlow:
    """One projected year as reported by the calculation engine."""
    year: int
    date: Optional[dt.date] = None
    net_income: float = 0.0
    federal_tax: float = 0.0
    state_tax: float = 0.0
    local_tax: float = 0.0
    fica_tax: float = 0.0
    tsp_balance: float = 0.0

    @property
    def total_tax(self) -> float:
        return self.federal_tax + self.state_tax + self.local_tax + self.fica_tax


@dataclass
class ScenarioSummary:
    """
    Evaluation output for one scenario.

    Attributes
    ----------
    name : str
        Scenario name.
    first_year_net_income : float
        Net household income in the first retirement year.
    total_lifetime_income : float
        Present-valued income over the whole projection.
    tsp_longevity : int
        Years until the TSP is depleted (projection length if never).
    initial_tsp_balance, final_tsp_balance : float
        TSP balance at the start and end of the projection.
    projection : List[AnnualCashFlow]
        Year-by-year rows.
    """
    name: str
    first_year_net_income: float = 0.0
    total_lifetime_income: float = 0.0
    tsp_longevity: int = 0
    initial_tsp_balance: float = 0.0
    final_tsp_balance: float = 0.0
    projection: List[AnnualCashFlow] = field(default_factory=list)

    def lifetime_taxes(self) -> float:
        """Sum federal, state, local and FICA tax over every projected year."""
        return sum(year.total_tax for year in self.projection)

    def to_frame(self) -> pd.DataFrame:
        """Projection as a DataFrame indexed by year."""
        rows = [
            {
                "year": y.year,
                "date": y.date,
                "net_income": y.net_income,
                "federal_tax": y.federal_tax,
                "state_tax": y.state_tax,
                "local_tax": y.local_tax,
                "fica_tax": y.fica_tax,
                "total_tax": y.total_tax,
                "tsp_balance": y.tsp_balance,
            }
            for y in self.projection
        ]
        return pd.DataFrame(rows).set_index("year") if rows else pd.DataFrame()
