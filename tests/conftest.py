import sys
from pathlib import Path
from typing import Any, Callable

import pytest


# Ensure the package is importable without installation when running tests locally
pkg_src = Path(__file__).resolve().parents[1] / "src"
if str(pkg_src) not in sys.path:
    sys.path.insert(0, str(pkg_src))

from yield_finder.commentary import CommentarySelector, first_comment  # noqa: E402
from yield_finder.core import RawPool  # noqa: E402


@pytest.fixture
def selector() -> CommentarySelector:
    """Commentary selector that always picks the first comment."""

    return CommentarySelector(choose=first_comment)


@pytest.fixture
def make_raw() -> Callable[..., RawPool]:
    """Factory for raw pools with quiet defaults (low risk, 5% APY)."""

    def _make(**overrides: Any) -> RawPool:
        fields: dict[str, Any] = {
            "chain": "Ethereum",
            "protocol": "aave-v3",
            "asset": "USDC",
            "tvl_usd": 50_000_000.0,
            "apy": 5.0,
            "il_risk": "no",
            "exposure": "single",
        }
        fields.update(overrides)
        return RawPool(**fields)

    return _make


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    """Factory for DefiLlama-style JSON records."""

    def _make(**overrides: Any) -> dict[str, Any]:
        record: dict[str, Any] = {
            "pool": "p-1",
            "chain": "Ethereum",
            "project": "aave-v3",
            "symbol": "USDC",
            "tvlUsd": 50_000_000.0,
            "apy": 5.0,
            "apyBase": 5.0,
            "apyReward": None,
            "stablecoin": True,
            "ilRisk": "no",
            "exposure": "single",
            "apyPct7D": 0.5,
        }
        record.update(overrides)
        return record

    return _make
