"""Immutable data models used throughout YieldFinderLab."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

STATUS_OK = "ok"
STATUS_NO_DATA = "no_data"
STATUS_NO_MATCH = "no_match"
STATUS_INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class RawPool:
    """Snapshot of a yield pool as reported by an aggregator.

    APY fields are percentages (``12.5`` means 12.5%), exactly as published
    by DefiLlama.
    """

    chain: str
    protocol: str
    asset: str
    tvl_usd: float
    apy: float | None = None
    apy_base: float | None = None
    apy_reward: float | None = None
    stablecoin: bool = False
    il_risk: str = "no"
    exposure: str = "single"
    apy_pct_7d: float | None = None  # 7-day APY change in percent
    pool_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Pool(RawPool):
    """Raw pool annotated with risk, trend and commentary."""

    risk_score: int = 0
    risk_level: str = "low"
    risk_factors: tuple[str, ...] = ()
    trend: str = "stable"
    tvl_display: str = ""
    comment: str = ""

    @property
    def apy_display(self) -> float | None:
        return None if self.apy is None else round(self.apy, 2)

    @property
    def has_yield(self) -> bool:
        """True when the pool reports a positive APY."""
        return self.apy is not None and self.apy > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialise the pool to a dictionary suitable for DataFrame creation."""

        data = asdict(self)
        # for readability in CSV outputs
        data["risk_factors"] = "; ".join(self.risk_factors)
        data["apy_display"] = self.apy_display
        return data


@dataclass(frozen=True)
class EngineResult:
    """Base for every engine result; failures are values, not exceptions."""

    status: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


@dataclass(frozen=True)
class YieldSummary:
    total_found: int
    average_apy: float
    risk_distribution: Mapping[str, int]
    overall_comment: str


@dataclass(frozen=True)
class YieldSearchResult(EngineResult):
    pools: tuple[Pool, ...] = ()
    summary: YieldSummary | None = None


@dataclass(frozen=True)
class Allocation:
    """One position of a portfolio allocation."""

    protocol: str
    asset: str
    chain: str
    apy: float
    risk_level: str
    percentage: int
    amount: int  # USD, rounded
    comment: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AllocationSummary:
    total_amount: float
    positions: int
    weighted_apy: float
    expected_yearly_return: float
    risk_profile: str
    overall_comment: str
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class AllocationResult(EngineResult):
    risk_tolerance: str = ""
    positions: tuple[Allocation, ...] = ()
    summary: AllocationSummary | None = None

    @property
    def total_percentage(self) -> int:
        return sum(a.percentage for a in self.positions)


@dataclass(frozen=True)
class ProtocolStats:
    """Aggregate view of all pools matching one protocol query."""

    protocol: str
    average_apy: float
    total_tvl: float
    pool_count: int
    risk_profile: str
    tvl_display: str = ""
    top_pools: tuple[Pool, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "protocol": self.protocol,
            "average_apy": self.average_apy,
            "total_tvl": self.total_tvl,
            "tvl_display": self.tvl_display,
            "pool_count": self.pool_count,
            "risk_profile": self.risk_profile,
        }


@dataclass(frozen=True)
class ComparisonResult(EngineResult):
    rankings: tuple[ProtocolStats, ...] = ()
    winner: ProtocolStats | None = None
    verdict: str = ""


@dataclass(frozen=True)
class ProtocolOverview(EngineResult):
    protocol: str = ""
    total_tvl: float = 0.0
    average_apy: float = 0.0
    pool_count: int = 0
    chains: tuple[str, ...] = ()
    top_pools: tuple[Pool, ...] = ()
    note: str = ""


__all__ = [
    "Allocation",
    "AllocationResult",
    "AllocationSummary",
    "ComparisonResult",
    "EngineResult",
    "Pool",
    "ProtocolOverview",
    "ProtocolStats",
    "RawPool",
    "STATUS_INVALID_INPUT",
    "STATUS_NO_DATA",
    "STATUS_NO_MATCH",
    "STATUS_OK",
    "YieldSearchResult",
    "YieldSummary",
]
