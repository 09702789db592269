"""Protocol comparison and single-protocol overview."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .. import commentary
from ..commentary import CommentarySelector
from ..core import (
    ComparisonResult,
    Pool,
    ProtocolOverview,
    ProtocolStats,
    RawPool,
    STATUS_INVALID_INPUT,
    STATUS_NO_DATA,
    STATUS_NO_MATCH,
    STATUS_OK,
)
from ..core.constants import (
    CHAIN_ALIASES,
    COMPARE_TOP_POOLS,
    MAX_COMPARE_PROTOCOLS,
    MIN_COMPARE_PROTOCOLS,
    OVERVIEW_TOP_POOLS,
)
from ..normalize import build_pools, format_tvl
from .ranking import chain_matches, rank_by_apy

LARGE_TVL = 100_000_000.0


def risk_profile(pools: Sequence[Pool]) -> str:
    """Classify the aggregate risk of a protocol's positive-APY pools."""

    if not pools:
        return "No data"
    high = sum(1 for p in pools if p.risk_level == "high")
    low = sum(1 for p in pools if p.risk_level == "low")
    if high > low:
        return "Aggressive"
    if low > len(pools) / 2:
        return "Conservative"
    return "Balanced"


def protocol_stats(
    pools: Iterable[Pool],
    protocol: str,
    chain: str | None = None,
    *,
    chain_aliases: Mapping[str, tuple[str, ...]] = CHAIN_ALIASES,
) -> ProtocolStats:
    """Aggregate the pools whose protocol name contains ``protocol``.

    Total TVL covers every matching pool; the average APY and risk profile
    only consider pools with a positive APY.
    """

    query = protocol.lower()
    matching = [p for p in pools if query in p.protocol.lower()]
    if chain:
        matching = [p for p in matching if chain_matches(p.chain, chain, chain_aliases)]
    valid = [p for p in matching if p.has_yield]
    total_tvl = sum(p.tvl_usd for p in matching)
    return ProtocolStats(
        protocol=protocol,
        average_apy=sum(p.apy for p in valid) / len(valid) if valid else 0.0,
        total_tvl=total_tvl,
        tvl_display=format_tvl(total_tvl),
        pool_count=len(valid),
        risk_profile=risk_profile(valid),
        top_pools=tuple(rank_by_apy(valid)[:COMPARE_TOP_POOLS]),
    )


def compare_protocols(
    snapshot: Iterable[Mapping[str, Any] | RawPool] | None,
    protocols: Sequence[str],
    chain: str | None = None,
    *,
    selector: CommentarySelector | None = None,
    chain_aliases: Mapping[str, tuple[str, ...]] = CHAIN_ALIASES,
) -> ComparisonResult:
    """Rank ``protocols`` by the average APY of their pools.

    The leader is reported as ``winner`` only when its average APY is not
    zero.  Repeated names count once; between 2 and 10 distinct protocol
    names are accepted.
    """

    protocols = list(dict.fromkeys(protocols))
    if not MIN_COMPARE_PROTOCOLS <= len(protocols) <= MAX_COMPARE_PROTOCOLS:
        return ComparisonResult(
            status=STATUS_INVALID_INPUT,
            message=(
                f"Compare between {MIN_COMPARE_PROTOCOLS} and {MAX_COMPARE_PROTOCOLS} protocols, "
                f"got {len(protocols)}"
            ),
        )
    pool_list = build_pools(snapshot, selector=selector)
    if not pool_list:
        return ComparisonResult(status=STATUS_NO_DATA, message=commentary.NO_DATA_MESSAGE)

    stats = [
        protocol_stats(pool_list, name, chain, chain_aliases=chain_aliases) for name in protocols
    ]
    rankings = tuple(sorted(stats, key=lambda s: s.average_apy, reverse=True))
    leader = rankings[0]
    runner_up = rankings[1].average_apy if len(rankings) > 1 else None
    winner = leader if leader.average_apy != 0 else None
    verdict = commentary.comparison_verdict(
        winner.protocol if winner else None, leader.average_apy, runner_up
    )
    return ComparisonResult(
        status=STATUS_OK if winner else STATUS_NO_MATCH,
        message=commentary.COMPARISON_COMMENT,
        rankings=rankings,
        winner=winner,
        verdict=verdict,
    )


def protocol_overview(
    snapshot: Iterable[Mapping[str, Any] | RawPool] | None,
    protocol: str,
    chain: str = "all",
    *,
    selector: CommentarySelector | None = None,
) -> ProtocolOverview:
    """Summarise every pool of one protocol, optionally on a single chain.

    ``chain`` must equal the pool's chain (case-insensitively) unless it is
    ``"all"``.  The average APY counts pools without an APY as zero.
    """

    pool_list = build_pools(snapshot, selector=selector)
    if not pool_list:
        return ProtocolOverview(
            status=STATUS_NO_DATA, message=commentary.NO_DATA_MESSAGE, protocol=protocol
        )

    query = protocol.lower()
    matching = [
        p
        for p in pool_list
        if query in p.protocol.lower() and (chain == "all" or p.chain.lower() == chain.lower())
    ]
    if not matching:
        return ProtocolOverview(
            status=STATUS_NO_MATCH,
            message=f"No pools found for {protocol}. {commentary.NOT_FOUND_COMMENT}",
            protocol=protocol,
        )

    total_tvl = sum(p.tvl_usd for p in matching)
    return ProtocolOverview(
        status=STATUS_OK,
        protocol=protocol,
        total_tvl=total_tvl,
        average_apy=sum(p.apy or 0.0 for p in matching) / len(matching),
        pool_count=len(matching),
        chains=tuple(dict.fromkeys(p.chain for p in matching)),
        top_pools=tuple(rank_by_apy(matching)[:OVERVIEW_TOP_POOLS]),
        note=commentary.LARGE_TVL_NOTE if total_tvl > LARGE_TVL else commentary.SMALL_TVL_NOTE,
    )


__all__ = ["compare_protocols", "protocol_overview", "protocol_stats", "risk_profile"]
