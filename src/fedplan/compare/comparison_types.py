from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from fedplan.scenario.summary import ScenarioSummary


class ComparisonError(Exception):
    """Raised when a comparison cannot be completed."""


@dataclass
class ComparisonResult:
    """
    Headline metrics of one evaluated scenario and its deltas versus the
    base. Deltas stay zero on the base result itself.
    """
    scenario_name: str
    description: str = ""
    summary: Optional[ScenarioSummary] = None

    first_year_net_income: float = 0.0
    lifetime_income: float = 0.0
    tsp_longevity: int = 0
    final_tsp_balance: float = 0.0
    lifetime_taxes: float = 0.0

    income_diff_from_base: float = 0.0
    income_pct_from_base: float = 0.0
    tsp_longevity_diff: int = 0
    tax_diff_from_base: float = 0.0

    @classmethod
    def from_summary(cls, summary: ScenarioSummary, description: str = "") -> "ComparisonResult":
        return cls(
            scenario_name=summary.name,
            description=description,
            summary=summary,
            first_year_net_income=summary.first_year_net_income,
            lifetime_income=summary.total_lifetime_income,
            tsp_longevity=summary.tsp_longevity,
            final_tsp_balance=summary.final_tsp_balance,
            lifetime_taxes=summary.lifetime_taxes(),
        )

    def with_deltas(self, base: "ComparisonResult") -> "ComparisonResult":
        """Fill the deltas against ``base``; percent stays 0 for a zero base income."""
        self.income_diff_from_base = self.lifetime_income - base.lifetime_income
        if base.lifetime_income != 0:
            self.income_pct_from_base = self.income_diff_from_base / base.lifetime_income * 100.0
        self.tsp_longevity_diff = self.tsp_longevity - base.tsp_longevity
        self.tax_diff_from_base = self.lifetime_taxes - base.lifetime_taxes
        return self


@dataclass
class ComparisonSet:
    base_scenario_name: str
    base_result: ComparisonResult
    alternative_results: List[ComparisonResult] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        """Base first, then alternatives in request order, indexed by scenario name."""
        rows = []
        for result in [self.base_result] + self.alternative_results:
            rows.append(
                {
                    "scenario": result.scenario_name,
                    "description": result.description,
                    "first_year_net_income": result.first_year_net_income,
                    "lifetime_income": result.lifetime_income,
                    "tsp_longevity": result.tsp_longevity,
                    "final_tsp_balance": result.final_tsp_balance,
                    "lifetime_taxes": result.lifetime_taxes,
                    "income_diff_from_base": result.income_diff_from_base,
                    "income_pct_from_base": result.income_pct_from_base,
                    "tsp_longevity_diff": result.tsp_longevity_diff,
                    "tax_diff_from_base": result.tax_diff_from_base,
                }
            )
        return pd.DataFrame(rows).set_index("scenario")
