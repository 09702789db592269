"""Yield search: predicate filtering and APY ranking."""

from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .. import commentary
from ..commentary import CommentarySelector
from ..core import Pool, RawPool, STATUS_INVALID_INPUT, STATUS_NO_DATA, STATUS_NO_MATCH, STATUS_OK
from ..core import YieldSearchResult, YieldSummary
from ..core.constants import CHAIN_ALIASES, DEFAULT_LIMIT, MAX_LIMIT, MIN_LIMIT, RISK_LEVELS, RISK_ORDER
from ..normalize import build_pools


@dataclass(frozen=True)
class FilterCriteria:
    """Optional search predicates; unset fields do not filter."""

    chain: str | None = None  # alias key such as "bsc", or "all"
    asset: str | None = None
    min_apy: float | None = None
    max_apy: float | None = None
    min_tvl: float | None = None
    max_risk: str | None = None
    stablecoin_only: bool = False
    limit: int = DEFAULT_LIMIT

    @property
    def bounded_limit(self) -> int:
        return max(MIN_LIMIT, min(int(self.limit), MAX_LIMIT))


def chain_matches(
    pool_chain: str,
    chain: str,
    aliases: Mapping[str, tuple[str, ...]] = CHAIN_ALIASES,
) -> bool:
    """Case-insensitive substring match of ``pool_chain`` against ``chain``'s aliases."""

    names = aliases.get(chain.lower(), (chain,))
    target = pool_chain.lower()
    return any(name.lower() in target for name in names)


def matches(
    pool: Pool,
    criteria: FilterCriteria,
    aliases: Mapping[str, tuple[str, ...]] = CHAIN_ALIASES,
) -> bool:
    if not pool.has_yield:
        return False
    if criteria.chain and criteria.chain.lower() != "all":
        if not chain_matches(pool.chain, criteria.chain, aliases):
            return False
    if criteria.asset and criteria.asset.lower() not in pool.asset.lower():
        return False
    if criteria.min_apy is not None and pool.apy < criteria.min_apy:
        return False
    if criteria.max_apy is not None and pool.apy > criteria.max_apy:
        return False
    if criteria.min_tvl is not None and pool.tvl_usd < criteria.min_tvl:
        return False
    # unknown ceilings do not filter; find_yields rejects them up front
    ceiling = RISK_ORDER.get(criteria.max_risk or "high", RISK_ORDER["high"])
    if RISK_ORDER[pool.risk_level] > ceiling:
        return False
    if criteria.stablecoin_only and not pool.stablecoin:
        return False
    return True


def rank_by_apy(pools: Iterable[Pool]) -> list[Pool]:
    """Sort by raw APY, highest first; equal APYs keep their input order."""
    return sorted(pools, key=lambda p: p.apy or 0.0, reverse=True)


def filter_and_rank(
    pools: Iterable[Pool],
    criteria: FilterCriteria,
    *,
    chain_aliases: Mapping[str, tuple[str, ...]] = CHAIN_ALIASES,
) -> list[Pool]:
    """Apply ``criteria``, sort by APY descending and truncate to the limit.

    Pools without a positive APY are always dropped.  Applying the same
    criteria to the output returns it unchanged.
    """

    kept = [pool for pool in pools if matches(pool, criteria, chain_aliases)]
    return rank_by_apy(kept)[: criteria.bounded_limit]


def summarize(pools: list[Pool]) -> YieldSummary:
    distribution = {level: sum(1 for p in pools if p.risk_level == level) for level in RISK_LEVELS}
    average = sum(p.apy for p in pools) / len(pools) if pools else 0.0
    return YieldSummary(
        total_found=len(pools),
        average_apy=average,
        risk_distribution=distribution,
        overall_comment=commentary.search_comment(len(pools), average, distribution),
    )


def find_yields(
    snapshot: Iterable[Mapping[str, Any] | RawPool] | None,
    criteria: FilterCriteria | None = None,
    *,
    selector: CommentarySelector | None = None,
    chain_aliases: Mapping[str, tuple[str, ...]] = CHAIN_ALIASES,
) -> YieldSearchResult:
    """Search a raw snapshot and summarise the matches.

    An empty or missing snapshot yields ``status="no_data"``; criteria that match
    nothing yield ``status="no_match"``.
    """

    criteria = criteria or FilterCriteria()
    if criteria.max_risk is not None and criteria.max_risk not in RISK_ORDER:
        return YieldSearchResult(
            status=STATUS_INVALID_INPUT, message=f"Unknown risk level: {criteria.max_risk!r}"
        )
    limit = criteria.limit
    if isinstance(limit, bool) or not isinstance(limit, numbers.Real) or not math.isfinite(limit):
        return YieldSearchResult(
            status=STATUS_INVALID_INPUT, message=f"Invalid result limit: {limit!r}"
        )

    pools = build_pools(snapshot, selector=selector)
    if not pools:
        return YieldSearchResult(status=STATUS_NO_DATA, message=commentary.NO_DATA_MESSAGE)

    ranked = filter_and_rank(pools, criteria, chain_aliases=chain_aliases)
    summary = summarize(ranked)
    if not ranked:
        return YieldSearchResult(
            status=STATUS_NO_MATCH, message=summary.overall_comment, summary=summary
        )
    return YieldSearchResult(status=STATUS_OK, pools=tuple(ranked), summary=summary)


__all__ = ["FilterCriteria", "chain_matches", "filter_and_rank", "find_yields", "rank_by_apy"]
