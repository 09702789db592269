"""Convert aggregator records into :class:`~yield_finder.core.Pool` objects."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import fields
from typing import Any

from .commentary import CommentarySelector
from .core import Pool, RawPool
from .risk_scoring import DEFAULT_RUBRIC, RiskRubric, assess_risk
from .trend import classify_trend

logger = logging.getLogger(__name__)

_DEFAULT_SELECTOR = CommentarySelector()


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def _text(value: Any) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    return str(value).strip()


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def normalize_pool(record: Mapping[str, Any]) -> RawPool | None:
    """Build a :class:`RawPool` from a DefiLlama-style record.

    Returns ``None`` when the record lacks a chain, project, symbol or a
    finite non-negative ``tvlUsd``.  Optional numbers that are missing, NaN
    or non-numeric become ``None``.
    """

    chain = _text(record.get("chain"))
    protocol = _text(record.get("project"))
    asset = _text(record.get("symbol"))
    tvl = _optional_float(record.get("tvlUsd"))
    if not chain or not protocol or not asset or tvl is None or tvl < 0:
        logger.debug("Skipping malformed pool record: %r", record.get("pool", record))
        return None

    return RawPool(
        chain=chain,
        protocol=protocol,
        asset=asset,
        tvl_usd=tvl,
        apy=_optional_float(record.get("apy")),
        apy_base=_optional_float(record.get("apyBase")),
        apy_reward=_optional_float(record.get("apyReward")),
        stablecoin=_flag(record.get("stablecoin", False)),
        il_risk=_text(record.get("ilRisk")).lower() or "no",
        exposure=_text(record.get("exposure")).lower() or "single",
        apy_pct_7d=_optional_float(record.get("apyPct7D")),
        pool_id=_text(record.get("pool")),
    )


def normalize_pools(records: Iterable[Mapping[str, Any]]) -> list[RawPool]:
    """Normalise a batch, dropping malformed records instead of failing."""

    pools: list[RawPool] = []
    skipped = 0
    for record in records:
        raw = normalize_pool(record) if isinstance(record, Mapping) else None
        if raw is None:
            skipped += 1
            continue
        pools.append(raw)
    if skipped:
        logger.info("Dropped %d malformed pool records", skipped)
    return pools


def format_tvl(tvl: float) -> str:
    """Render a USD amount as ``$1.23B`` / ``$4.56M`` / ``$7.89K`` / ``$12.34``."""

    if tvl >= 1e9:
        return f"${tvl / 1e9:.2f}B"
    if tvl >= 1e6:
        return f"${tvl / 1e6:.2f}M"
    if tvl >= 1e3:
        return f"${tvl / 1e3:.2f}K"
    return f"${tvl:.2f}"


def round_apy(value: float | None) -> float | None:
    return None if value is None else round(value, 2)


def annotate_pool(
    raw: RawPool,
    *,
    selector: CommentarySelector | None = None,
    rubric: RiskRubric = DEFAULT_RUBRIC,
) -> Pool:
    """Attach risk assessment, trend, TVL display and a comment to ``raw``."""

    selector = selector or _DEFAULT_SELECTOR
    risk = assess_risk(raw, rubric)
    trend = classify_trend(raw.apy_pct_7d)
    return Pool(
        **{f.name: getattr(raw, f.name) for f in fields(RawPool)},
        risk_score=risk.score,
        risk_level=risk.level,
        risk_factors=risk.factors,
        trend=trend,
        tvl_display=format_tvl(raw.tvl_usd),
        comment=selector.comment_for(raw.apy, risk.level, raw.stablecoin, raw.il_risk, trend),
    )


def annotate_pools(
    raws: Iterable[RawPool],
    *,
    selector: CommentarySelector | None = None,
    rubric: RiskRubric = DEFAULT_RUBRIC,
) -> list[Pool]:
    return [annotate_pool(raw, selector=selector, rubric=rubric) for raw in raws]


def build_pools(
    snapshot: Iterable[Mapping[str, Any] | RawPool] | None,
    *,
    selector: CommentarySelector | None = None,
    rubric: RiskRubric = DEFAULT_RUBRIC,
) -> list[Pool]:
    """Normalise and annotate a snapshot of records and/or :class:`RawPool` objects.

    A missing snapshot (``None``) is treated as an empty one.
    """

    raws: list[RawPool] = []
    if snapshot is None:
        return []
    for item in snapshot:
        if isinstance(item, RawPool):
            raws.append(item)
        else:
            raws.extend(normalize_pools([item]))
    return annotate_pools(raws, selector=selector, rubric=rubric)


__all__ = [
    "annotate_pool",
    "annotate_pools",
    "build_pools",
    "format_tvl",
    "normalize_pool",
    "normalize_pools",
    "round_apy",
]
