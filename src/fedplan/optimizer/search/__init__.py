from .search_base import TargetSearchBase
from .tsp_rate_search import TSPRateSearch
from .ss_age_search import SSAgeSearch
from .retirement_date_search import RetirementDateSearch, months_between

__all__ = [
    "TargetSearchBase",
    "TSPRateSearch",
    "SSAgeSearch",
    "RetirementDateSearch",
    "months_between",
]
