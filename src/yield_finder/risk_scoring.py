from __future__ import annotations

"""Heuristic risk scoring for yield pools.

The rubric is additive: every rule that fires adds integer points and a
human-readable factor.  The total score maps to a categorical level.
"""

from dataclasses import dataclass
from typing import NamedTuple, TYPE_CHECKING

from .core.constants import NO_RISK_FACTORS

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from .core import RawPool


@dataclass(frozen=True)
class RiskRubric:
    """Thresholds and weights of the additive risk rubric."""

    low_tvl: float = 1_000_000.0
    low_tvl_points: int = 3
    moderate_tvl: float = 10_000_000.0
    moderate_tvl_points: int = 1
    # (threshold, points, factor), highest tier first
    apy_tiers: tuple[tuple[float, int, str], ...] = (
        (100.0, 3, "Extremely high APY (>100%)"),
        (50.0, 2, "Very high APY (>50%)"),
        (20.0, 1, "High APY (>20%)"),
    )
    il_points: int = 1
    multi_exposure_points: int = 1
    reward_heavy_ratio: float = 0.8
    reward_heavy_points: int = 2
    reward_dependent_ratio: float = 0.5
    reward_dependent_points: int = 1
    apy_drop_pct: float = -20.0
    apy_drop_points: int = 1
    high_score: int = 5
    medium_score: int = 2


DEFAULT_RUBRIC = RiskRubric()


class RiskAssessment(NamedTuple):
    score: int
    level: str
    factors: tuple[str, ...]


def risk_level_for_score(score: int, rubric: RiskRubric = DEFAULT_RUBRIC) -> str:
    """Map an additive risk score to ``low``, ``medium`` or ``high``."""

    if score >= rubric.high_score:
        return "high"
    if score >= rubric.medium_score:
        return "medium"
    return "low"


def assess_risk(pool: "RawPool", rubric: RiskRubric = DEFAULT_RUBRIC) -> RiskAssessment:
    """Score ``pool`` against the rubric.

    Rules are evaluated in a fixed order (TVL, APY, impermanent loss,
    exposure, reward dependency, 7-day trend) so the factor list is stable.
    An absent APY counts as zero.

    Returns
    -------
    RiskAssessment
        ``(score, level, factors)`` where ``factors`` is never empty.
    """

    factors: list[str] = []
    score = 0

    if pool.tvl_usd < rubric.low_tvl:
        factors.append("Low TVL (<$1M)")
        score += rubric.low_tvl_points
    elif pool.tvl_usd < rubric.moderate_tvl:
        factors.append("Moderate TVL (<$10M)")
        score += rubric.moderate_tvl_points

    apy = pool.apy or 0.0
    for threshold, points, factor in rubric.apy_tiers:
        if apy > threshold:
            factors.append(factor)
            score += points
            break

    if pool.il_risk == "yes":
        factors.append("Impermanent loss exposure")
        score += rubric.il_points

    if pool.exposure == "multi":
        factors.append("Multi-asset exposure")
        score += rubric.multi_exposure_points

    base, reward = pool.apy_base, pool.apy_reward
    if base is not None and reward is not None and base > 0 and reward > 0:
        ratio = reward / (base + reward)
        if ratio > rubric.reward_heavy_ratio:
            factors.append("Yield mostly from reward tokens")
            score += rubric.reward_heavy_points
        elif ratio > rubric.reward_dependent_ratio:
            factors.append("Significant reward token dependency")
            score += rubric.reward_dependent_points

    if pool.apy_pct_7d is not None and pool.apy_pct_7d < rubric.apy_drop_pct:
        factors.append("APY dropped >20% in 7 days")
        score += rubric.apy_drop_points

    if not factors:
        factors.append(NO_RISK_FACTORS)

    return RiskAssessment(score, risk_level_for_score(score, rubric), tuple(factors))


__all__ = ["DEFAULT_RUBRIC", "RiskAssessment", "RiskRubric", "assess_risk", "risk_level_for_score"]
