"""Core constants shared across YieldFinderLab modules."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

# Chain filter aliases.
#
# Keys are the lower-case chain names accepted by the filters; values are the
# substrings matched (case-insensitively) against the ``chain`` field reported
# by aggregators such as DefiLlama.  Unknown keys alias to themselves.
CHAIN_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "base": ("Base",),
        "ethereum": ("Ethereum",),
        "solana": ("Solana",),
        "arbitrum": ("Arbitrum",),
        "optimism": ("Optimism",),
        "polygon": ("Polygon",),
        "avalanche": ("Avalanche",),
        "bsc": ("BSC", "Binance"),
    }
)

RISK_LEVELS: tuple[str, ...] = ("low", "medium", "high")
RISK_ORDER: Mapping[str, int] = MappingProxyType({"low": 1, "medium": 2, "high": 3})

# Risk-adjusted ranking weights used by the allocator.
RISK_MULTIPLIER: Mapping[str, float] = MappingProxyType(
    {"low": 1.0, "medium": 0.7, "high": 0.4}
)

TRENDS: tuple[str, ...] = ("up", "down", "stable")

NO_RISK_FACTORS = "No major risk factors identified"

# Search result limit bounds
DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 50

MAX_POSITION_PCT = 30.0
MIN_ALLOCATION_AMOUNT = 100.0

MIN_COMPARE_PROTOCOLS = 2
MAX_COMPARE_PROTOCOLS = 10
COMPARE_TOP_POOLS = 5
OVERVIEW_TOP_POOLS = 15


@dataclass(frozen=True)
class ToleranceTier:
    """Eligibility rule and position cap for one risk tolerance."""

    name: str
    min_tvl: float  # exclusive lower bound in USD
    allowed_levels: tuple[str, ...]
    max_positions: int
    description: str


RISK_TOLERANCES: Mapping[str, ToleranceTier] = MappingProxyType(
    {
        "conservative": ToleranceTier(
            name="conservative",
            min_tvl=10_000_000.0,
            allowed_levels=("low",),
            max_positions=5,
            description="Mainly blue-chip protocols with >$10M TVL",
        ),
        "moderate": ToleranceTier(
            name="moderate",
            min_tvl=1_000_000.0,
            allowed_levels=("low", "medium"),
            max_positions=7,
            description="Mix of established and emerging protocols, no high-risk",
        ),
        "aggressive": ToleranceTier(
            name="aggressive",
            min_tvl=100_000.0,
            allowed_levels=RISK_LEVELS,
            max_positions=10,
            description="Includes high-risk, high-reward opportunities",
        ),
    }
)

__all__ = [
    "CHAIN_ALIASES",
    "COMPARE_TOP_POOLS",
    "DEFAULT_LIMIT",
    "MAX_COMPARE_PROTOCOLS",
    "MAX_LIMIT",
    "MAX_POSITION_PCT",
    "MIN_ALLOCATION_AMOUNT",
    "MIN_COMPARE_PROTOCOLS",
    "MIN_LIMIT",
    "NO_RISK_FACTORS",
    "OVERVIEW_TOP_POOLS",
    "RISK_LEVELS",
    "RISK_MULTIPLIER",
    "RISK_ORDER",
    "RISK_TOLERANCES",
    "TRENDS",
    "ToleranceTier",
]
