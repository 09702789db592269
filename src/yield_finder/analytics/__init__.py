"""Analytics subpackage bundling search, allocation and comparison helpers."""

from . import allocation, comparison, ranking
from .allocation import allocate, optimize_portfolio, reconcile_percentages
from .comparison import compare_protocols, protocol_overview
from .ranking import FilterCriteria, filter_and_rank, find_yields

__all__ = [
    "FilterCriteria",
    "allocate",
    "allocation",
    "compare_protocols",
    "comparison",
    "filter_and_rank",
    "find_yields",
    "optimize_portfolio",
    "protocol_overview",
    "ranking",
    "reconcile_percentages",
]
