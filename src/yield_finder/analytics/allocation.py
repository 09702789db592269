"""Risk-tolerance driven capital allocation across yield pools."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .. import commentary
from ..commentary import CommentarySelector
from ..core import (
    Allocation,
    AllocationResult,
    AllocationSummary,
    Pool,
    RawPool,
    STATUS_INVALID_INPUT,
    STATUS_NO_DATA,
    STATUS_NO_MATCH,
    STATUS_OK,
    ToleranceTier,
)
from ..core.constants import (
    CHAIN_ALIASES,
    MAX_POSITION_PCT,
    MIN_ALLOCATION_AMOUNT,
    RISK_MULTIPLIER,
    RISK_TOLERANCES,
)
from ..normalize import build_pools
from .ranking import chain_matches

NO_SUITABLE_POOLS = "No suitable pools found for your criteria"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (``2.5 -> 3``)."""
    return int(math.floor(value + 0.5))


def eligible_pools(pools: Iterable[Pool], tier: ToleranceTier) -> list[Pool]:
    return [
        pool
        for pool in pools
        if pool.has_yield and pool.risk_level in tier.allowed_levels and pool.tvl_usd > tier.min_tvl
    ]


def rank_risk_adjusted(
    pools: Iterable[Pool], multipliers: Mapping[str, float] = RISK_MULTIPLIER
) -> list[Pool]:
    """Sort by ``apy * multiplier[risk_level]`` descending; ties keep input order."""
    return sorted(pools, key=lambda p: p.apy * multipliers[p.risk_level], reverse=True)


def reconcile_percentages(weights: Sequence[float], cap: float = MAX_POSITION_PCT) -> list[int]:
    """Turn positive weights into integer percentages summing to exactly 100.

    Each share is capped at ``cap`` without redistributing the excess, then
    rounded.  A shortfall or surplus is spread evenly over all positions and
    re-rounded; whatever unit points that second rounding leaves over are
    handed out one per position in input order.

    Reconciliation may lift a position above ``cap``: a final percentage
    differs from its rounded capped share by at most
    ``abs(100 - sum(rounded)) / len(weights) + 1.5`` points.

    Non-positive or non-finite weights raise ``ValueError``.
    """

    if not weights:
        return []
    if any(not (math.isfinite(w) and w > 0) for w in weights):
        raise ValueError("weights must be positive and finite")
    total = float(sum(weights))
    shares = [min(w / total * 100.0, cap) for w in weights]
    pct = [round_half_up(s) for s in shares]

    count = len(pct)
    if sum(pct) != 100:
        adjustment = (100 - sum(pct)) / count
        pct = [round_half_up(p + adjustment) for p in pct]

    residual = 100 - sum(pct)
    step = 1 if residual > 0 else -1
    i = 0
    while residual:
        if step > 0 or pct[i] > 0:
            pct[i] += step
            residual -= step
        i = (i + 1) % count
    return pct


def summarize_allocation(
    positions: Sequence[Allocation], amount: float, tier: ToleranceTier
) -> AllocationSummary:
    weighted_apy = sum(a.apy * a.percentage / 100.0 for a in positions)
    return AllocationSummary(
        total_amount=amount,
        positions=len(positions),
        weighted_apy=weighted_apy,
        expected_yearly_return=amount * weighted_apy / 100.0,
        risk_profile=tier.description,
        overall_comment=commentary.ALLOCATION_COMMENTS.get(tier.name, ""),
        warnings=commentary.ALLOCATION_WARNINGS,
    )


def allocate(
    pools: Iterable[Pool],
    risk_tolerance: str,
    amount: float,
    max_positions: int | None = None,
    *,
    tiers: Mapping[str, ToleranceTier] = RISK_TOLERANCES,
    multipliers: Mapping[str, float] = RISK_MULTIPLIER,
) -> AllocationResult:
    """Split ``amount`` over the best risk-adjusted pools for ``risk_tolerance``.

    Parameters
    ----------
    pools:
        Annotated pools; pools without a positive APY are never eligible.
    risk_tolerance:
        ``conservative``, ``moderate`` or ``aggressive`` (keys of ``tiers``).
    amount:
        Capital in USD, must be positive.
    max_positions:
        Optional position count, bounded by the tier's own cap. Defaults to
        the tier cap.

    Returns
    -------
    AllocationResult
        ``status="ok"`` with integer percentages summing to 100, or
        ``no_match`` when no pool is eligible, or ``invalid_input``.
    """

    tier = tiers.get(risk_tolerance)
    if tier is None:
        return AllocationResult(
            status=STATUS_INVALID_INPUT,
            message=f"Unknown risk tolerance: {risk_tolerance!r}",
            risk_tolerance=risk_tolerance,
        )
    if not (math.isfinite(amount) and amount > 0):
        return AllocationResult(
            status=STATUS_INVALID_INPUT,
            message="Allocation amount must be positive and finite",
            risk_tolerance=risk_tolerance,
        )

    ranked = rank_risk_adjusted(eligible_pools(pools, tier), multipliers)
    if not ranked:
        return AllocationResult(
            status=STATUS_NO_MATCH, message=NO_SUITABLE_POOLS, risk_tolerance=risk_tolerance
        )

    cap = tier.max_positions if max_positions is None else max(1, min(max_positions, tier.max_positions))
    selected = ranked[:cap]
    percentages = reconcile_percentages([p.apy for p in selected])
    positions = tuple(
        Allocation(
            protocol=pool.protocol,
            asset=pool.asset,
            chain=pool.chain,
            apy=pool.apy,
            risk_level=pool.risk_level,
            percentage=pct,
            amount=round_half_up(pct / 100.0 * amount),
            comment=pool.comment,
        )
        for pool, pct in zip(selected, percentages)
    )
    return AllocationResult(
        status=STATUS_OK,
        risk_tolerance=risk_tolerance,
        positions=positions,
        summary=summarize_allocation(positions, amount, tier),
    )


def optimize_portfolio(
    snapshot: Iterable[Mapping[str, Any] | RawPool] | None,
    *,
    amount: float,
    risk_tolerance: str,
    chains: Sequence[str] = ("ethereum",),
    stablecoin_only: bool = False,
    selector: CommentarySelector | None = None,
    chain_aliases: Mapping[str, tuple[str, ...]] = CHAIN_ALIASES,
) -> AllocationResult:
    """Allocate ``amount`` across pools of a raw snapshot restricted to ``chains``."""

    if risk_tolerance not in RISK_TOLERANCES:
        return AllocationResult(
            status=STATUS_INVALID_INPUT,
            message=f"Unknown risk tolerance: {risk_tolerance!r}",
            risk_tolerance=risk_tolerance,
        )
    if not (math.isfinite(amount) and amount >= MIN_ALLOCATION_AMOUNT):
        return AllocationResult(
            status=STATUS_INVALID_INPUT,
            message=f"Amount must be at least ${MIN_ALLOCATION_AMOUNT:,.0f}",
            risk_tolerance=risk_tolerance,
        )

    pools = build_pools(snapshot, selector=selector)
    if not pools:
        return AllocationResult(
            status=STATUS_NO_DATA, message=commentary.NO_DATA_MESSAGE, risk_tolerance=risk_tolerance
        )

    candidates = [
        pool
        for pool in pools
        if any(chain_matches(pool.chain, chain, chain_aliases) for chain in chains)
        and (pool.stablecoin or not stablecoin_only)
    ]
    result = allocate(candidates, risk_tolerance, amount)
    if result.status == STATUS_NO_MATCH:
        return AllocationResult(
            status=STATUS_NO_MATCH,
            message=f"{NO_SUITABLE_POOLS}. {commentary.NO_ALLOCATION_COMMENT}",
            risk_tolerance=risk_tolerance,
        )
    return result


__all__ = [
    "allocate",
    "eligible_pools",
    "optimize_portfolio",
    "rank_risk_adjusted",
    "reconcile_percentages",
    "round_half_up",
]
