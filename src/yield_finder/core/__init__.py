"""Core data structures for :mod:`yield_finder`.

This subpackage groups the data models, the immutable configuration tables
and the in-memory repository so they can be shared without importing the
entire public interface exposed in :mod:`yield_finder.__init__`.
"""

from __future__ import annotations

from .constants import CHAIN_ALIASES, RISK_MULTIPLIER, RISK_ORDER, RISK_TOLERANCES, ToleranceTier
from .models import (
    Allocation,
    AllocationResult,
    AllocationSummary,
    ComparisonResult,
    EngineResult,
    Pool,
    ProtocolOverview,
    ProtocolStats,
    RawPool,
    STATUS_INVALID_INPUT,
    STATUS_NO_DATA,
    STATUS_NO_MATCH,
    STATUS_OK,
    YieldSearchResult,
    YieldSummary,
)
from .repositories import PoolRepository

__all__ = [
    "Allocation",
    "AllocationResult",
    "AllocationSummary",
    "CHAIN_ALIASES",
    "ComparisonResult",
    "EngineResult",
    "Pool",
    "PoolRepository",
    "ProtocolOverview",
    "ProtocolStats",
    "RISK_MULTIPLIER",
    "RISK_ORDER",
    "RISK_TOLERANCES",
    "RawPool",
    "STATUS_INVALID_INPUT",
    "STATUS_NO_DATA",
    "STATUS_NO_MATCH",
    "STATUS_OK",
    "ToleranceTier",
    "YieldSearchResult",
    "YieldSummary",
]
