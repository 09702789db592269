"""Flavor text attached to pools and result summaries.

Only :class:`CommentarySelector` draws on randomness, and it does so through
a single injectable ``choose`` callable.  Category selection and every
summary verdict below are deterministic.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType

COMMENTS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "highApy": (
            "APY this high usually means you're the yield. Proceed with caution.",
            "Numbers like these are either a goldmine or a rug in progress. Probably the latter.",
            "When yield is too good to be true, you're not the farmer - you're the crop.",
            "This APY is giving 'please provide exit liquidity' energy.",
        ),
        "lowRisk": (
            "Boring and reliable. The Honda Civic of DeFi.",
            "Safe enough that you might actually sleep at night.",
            "Conservative choice. Your portfolio won't be exciting, but it'll probably exist tomorrow.",
            "This is what 'sustainable yield' looks like. Not sexy, but real.",
        ),
        "mediumRisk": (
            "Middle of the road. Some risk, some reward. Standard DeFi stuff.",
            "Not quite degen, not quite boomer. A balanced position.",
            "Reasonable risk for reasonable returns. How novel.",
        ),
        "highRisk": (
            "Full degen mode. May the odds be ever in your favor.",
            "This is the financial equivalent of free soloing. Exciting until it isn't.",
            "High risk, high reward, high chance of becoming a cautionary tale.",
            "Only put in what you can watch go to zero while maintaining inner peace.",
        ),
        "stablecoin": (
            "Stablecoin yield - the closest thing to 'safe' in DeFi, which isn't saying much.",
            "At least you're not exposed to price volatility. Just smart contract risk, oracle risk, depegging risk...",
        ),
        "ilPool": (
            "LP position with impermanent loss risk. Math will punish you if assets diverge.",
            "Impermanent loss is permanent if you panic sell. Just saying.",
        ),
        "trendingUp": ("APY trending up. Either more rewards or less TVL. Figure out which.",),
        "trendingDown": (
            "APY falling. The early farmers have harvested. You're arriving for the scraps.",
        ),
    }
)

HIGH_APY_COMMENT_THRESHOLD = 50.0


def comment_category(
    apy: float | None,
    risk_level: str,
    stablecoin: bool,
    il_risk: str,
    trend: str,
) -> str:
    """Return the comment category for a pool; first matching rule wins."""

    if apy is not None and apy > HIGH_APY_COMMENT_THRESHOLD:
        return "highApy"
    if risk_level == "low":
        return "lowRisk"
    if risk_level == "high":
        return "highRisk"
    if stablecoin:
        return "stablecoin"
    if il_risk == "yes":
        return "ilPool"
    if trend == "up":
        return "trendingUp"
    if trend == "down":
        return "trendingDown"
    return "mediumRisk"


class CommentarySelector:
    """Pick one comment from a category.

    Parameters
    ----------
    comments:
        Mapping of category to a non-empty sequence of comments.
    choose:
        Selection function applied to the category's sequence. Defaults to
        :func:`random.choice`; tests pass a fixed picker.
    """

    def __init__(
        self,
        comments: Mapping[str, Sequence[str]] = COMMENTS,
        choose: Callable[[Sequence[str]], str] = random.choice,
    ) -> None:
        empty = [name for name, texts in comments.items() if not texts]
        if empty:
            raise ValueError(f"comment categories without text: {empty}")
        self.comments = comments
        self.choose = choose

    def pick(self, category: str) -> str:
        return self.choose(self.comments[category])

    def comment_for(
        self,
        apy: float | None,
        risk_level: str,
        stablecoin: bool,
        il_risk: str,
        trend: str,
    ) -> str:
        return self.pick(comment_category(apy, risk_level, stablecoin, il_risk, trend))


def first_comment(texts: Sequence[str]) -> str:
    """Deterministic picker returning the first comment of a category."""
    return texts[0]


# -----------------
# Summary verdicts
# -----------------

NO_DATA_MESSAGE = "Failed to fetch yield data. Try again in a moment."
NO_DATA_COMMENT = (
    "DeFiLlama is taking a llama break. The APIs that power DeFi are themselves "
    "centralized services. Ironic, isn't it?"
)
DATA_SOURCE = "DeFiLlama (yields.llama.fi)"
DISCLAIMER = (
    "APYs are historical and not guaranteed. DeFi protocols can be exploited. "
    "Only invest what you can afford to lose. This is not financial advice - "
    "it's a search engine with opinions."
)


def search_comment(total: int, average_apy: float, distribution: Mapping[str, int]) -> str:
    """Overall comment for a yield search result."""

    if total == 0:
        return (
            "No pools match your criteria. Either your standards are too high or "
            "the market is too boring right now."
        )
    if average_apy > 30:
        return (
            "These yields look great on paper. Remember: in DeFi, when something looks "
            "too good to be true, you're usually the product, not the customer."
        )
    if distribution.get("high", 0) > distribution.get("low", 0):
        return (
            "Most of these are high-risk plays. You're not yield farming, you're yield "
            "gambling. Know the difference."
        )
    if distribution.get("low", 0) > total / 2:
        return (
            "Relatively conservative options. Won't make you rich, probably won't make "
            "you poor either."
        )
    return "Mixed bag of opportunities. Do your own research on each protocol before aping in."


COMPARISON_COMMENT = (
    "Comparing protocols is like comparing casinos. Some have better odds, but they're "
    "all designed to take your money. At least DeFi lets you see the code that's taking it."
)
LANDSLIDE_FACTOR = 1.5


def comparison_verdict(leader: str | None, leader_apy: float, runner_up_apy: float | None) -> str:
    if leader is None or leader_apy == 0:
        return (
            "No clear winner - either the protocols aren't on DeFiLlama or they have "
            "no active yield pools."
        )
    if runner_up_apy is not None and leader_apy > runner_up_apy * LANDSLIDE_FACTOR:
        return (
            f"{leader} wins by a landslide, but ask yourself why the APY is so much higher. "
            "Usually it's either more risk or more inflation."
        )
    return (
        f"{leader} leads on raw APY, but consider TVL and risk profile before deciding. "
        "Higher yield often means higher risk of getting rekt."
    )


ALLOCATION_COMMENTS: Mapping[str, str] = MappingProxyType(
    {
        "conservative": (
            "Conservative allocation focusing on battle-tested protocols. You won't get "
            "rich quick, but you probably won't get rekt either."
        ),
        "moderate": (
            "Balanced approach - some safe harbors, some moonshots. A reasonable strategy "
            "if you can resist the urge to go full degen."
        ),
        "aggressive": (
            "Aggressive allocation with higher yield potential. Also higher potential for "
            "watching your portfolio go to zero. You've been warned."
        ),
    }
)
ALLOCATION_WARNINGS: tuple[str, ...] = (
    "This is algorithmic allocation, not financial advice",
    "APYs change constantly - rebalance regularly",
    "Smart contract risk exists for all protocols",
    "Past yields don't guarantee future returns",
)
NO_ALLOCATION_COMMENT = (
    "Your filters are too restrictive, or the chains you selected don't have "
    "qualifying yields. Try broader criteria."
)

NOT_FOUND_COMMENT = (
    "Either this protocol doesn't exist on DeFiLlama, or you spelled it wrong. "
    "Both are red flags."
)
LARGE_TVL_NOTE = "Size provides some security, but remember TVL can exit fast."
SMALL_TVL_NOTE = "Low TVL = higher risk. You're early or you're wrong."


__all__ = [
    "ALLOCATION_COMMENTS",
    "ALLOCATION_WARNINGS",
    "COMMENTS",
    "COMPARISON_COMMENT",
    "CommentarySelector",
    "DATA_SOURCE",
    "DISCLAIMER",
    "comment_category",
    "comparison_verdict",
    "first_comment",
    "search_comment",
]
