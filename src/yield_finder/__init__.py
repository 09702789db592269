"""
YieldFinderLab: risk-scored yield search, protocol comparison and allocation.

Design goals:
- Immutable data model (RawPool -> annotated Pool) + light repository
- Deterministic risk rubric, trend labels and allocation rules
- Pure engine functions over an in-memory snapshot; failures are result values
- Adapters (DefiLlama, CSV) and reporting/charts live at the edges
"""

from __future__ import annotations

from . import analytics, commentary, normalize, risk_scoring, trend
from .analytics import (
    FilterCriteria,
    allocate,
    compare_protocols,
    filter_and_rank,
    find_yields,
    optimize_portfolio,
    protocol_overview,
    reconcile_percentages,
)
from .commentary import CommentarySelector, comment_category
from .core import (
    Allocation,
    AllocationResult,
    ComparisonResult,
    Pool,
    PoolRepository,
    ProtocolOverview,
    ProtocolStats,
    RawPool,
    YieldSearchResult,
)
from .normalize import annotate_pool, build_pools, format_tvl, normalize_pool, normalize_pools
from .pipeline import Pipeline
from .risk_scoring import RiskAssessment, RiskRubric, assess_risk
from .sources import CSVSource, DataSource, DefiLlamaSource
from .trend import classify_trend

__all__ = [
    "Allocation",
    "AllocationResult",
    "CSVSource",
    "CommentarySelector",
    "ComparisonResult",
    "DataSource",
    "DefiLlamaSource",
    "FilterCriteria",
    "Pipeline",
    "Pool",
    "PoolRepository",
    "ProtocolOverview",
    "ProtocolStats",
    "RawPool",
    "RiskAssessment",
    "RiskRubric",
    "YieldSearchResult",
    "allocate",
    "analytics",
    "annotate_pool",
    "assess_risk",
    "build_pools",
    "classify_trend",
    "comment_category",
    "commentary",
    "compare_protocols",
    "filter_and_rank",
    "find_yields",
    "format_tvl",
    "normalize",
    "normalize_pool",
    "normalize_pools",
    "optimize_portfolio",
    "protocol_overview",
    "reconcile_percentages",
    "risk_scoring",
    "trend",
]
