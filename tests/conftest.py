import datetime as dt
from typing import Callable

import pytest

from fedplan.scenario import (
    AnnualCashFlow,
    GenericScenario,
    ParticipantScenario,
    ScenarioSummary,
)


def build_summary(
    name: str,
    first_year_net_income: float = 0.0,
    lifetime_income: float = 0.0,
    tsp_longevity: int = 0,
    lifetime_taxes: float = 0.0,
    final_tsp_balance: float = 0.0,
) -> ScenarioSummary:
    """Summary with a two-year projection whose taxes add up to ``lifetime_taxes``."""
    half = lifetime_taxes / 2.0
    projection = [
        AnnualCashFlow(year=2028, net_income=first_year_net_income, federal_tax=half * 0.7, state_tax=half * 0.3),
        AnnualCashFlow(year=2029, net_income=first_year_net_income, federal_tax=half * 0.5, local_tax=half * 0.2,
                       fica_tax=half * 0.3, tsp_balance=final_tsp_balance),
    ]
    return ScenarioSummary(
        name=name,
        first_year_net_income=first_year_net_income,
        total_lifetime_income=lifetime_income,
        tsp_longevity=tsp_longevity,
        final_tsp_balance=final_tsp_balance,
        projection=projection,
    )


@pytest.fixture
def summary_factory() -> Callable[..., ScenarioSummary]:
    return build_summary


@pytest.fixture
def base_scenario() -> GenericScenario:
    """Two-person household; Alice on the 4% rule, Bob need-based."""
    return GenericScenario(
        name="Base",
        participant_scenarios={
            "Alice": ParticipantScenario(
                participant_name="Alice",
                retirement_date=dt.date(2027, 6, 30),
                ss_start_age=62,
                tsp_withdrawal_strategy="4_percent_rule",
                tsp_withdrawal_rate=0.04,
            ),
            "Bob": ParticipantScenario(
                participant_name="Bob",
                retirement_date=dt.date(2028, 1, 31),
                ss_start_age=67,
                tsp_withdrawal_strategy="need_based",
                tsp_withdrawal_target_monthly=3000.0,
            ),
        },
    )
