import pytest

from yield_finder.analytics.ranking import (
    FilterCriteria,
    chain_matches,
    filter_and_rank,
    find_yields,
)
from yield_finder.normalize import annotate_pool


@pytest.fixture
def pools(make_raw, selector):
    raws = [
        make_raw(pool_id="eth-usdc", chain="Ethereum", asset="USDC", apy=6.0, stablecoin=True),
        make_raw(pool_id="bsc-cake", chain="BSC", asset="CAKE-WBNB", apy=45.0, tvl_usd=2e6, il_risk="yes"),
        make_raw(pool_id="bnb-usdt", chain="Binance", asset="USDT", apy=6.0, stablecoin=True),
        make_raw(pool_id="arb-eth", chain="Arbitrum", asset="WETH", apy=3.0, tvl_usd=5e5),
        make_raw(pool_id="eth-zero", chain="Ethereum", asset="DAI", apy=0.0),
        make_raw(pool_id="eth-none", chain="Ethereum", asset="DAI", apy=None),
        make_raw(pool_id="eth-neg", chain="Ethereum", asset="DAI", apy=-2.0),
        make_raw(pool_id="base-usdc", chain="Base", asset="USDC", apy=120.0, tvl_usd=8e5),
    ]
    return [annotate_pool(raw, selector=selector) for raw in raws]


def _ids(pools) -> list[str]:
    return [p.pool_id for p in pools]


def test_default_criteria_rank_by_apy_and_drop_non_yielding(pools) -> None:
    ranked = filter_and_rank(pools, FilterCriteria())
    assert _ids(ranked) == ["base-usdc", "bsc-cake", "eth-usdc", "bnb-usdt", "arb-eth"]


def test_equal_apy_keeps_input_order(pools) -> None:
    ranked = filter_and_rank(list(reversed(pools)), FilterCriteria())
    assert _ids(ranked)[2:4] == ["bnb-usdt", "eth-usdc"]


@pytest.mark.parametrize(
    ("criteria", "expected"),
    [
        (FilterCriteria(chain="bsc"), ["bsc-cake", "bnb-usdt"]),
        (FilterCriteria(chain="BSC"), ["bsc-cake", "bnb-usdt"]),
        (FilterCriteria(chain="all"), ["base-usdc", "bsc-cake", "eth-usdc", "bnb-usdt", "arb-eth"]),
        (FilterCriteria(chain="arb"), ["arb-eth"]),
        (FilterCriteria(asset="usd"), ["base-usdc", "eth-usdc", "bnb-usdt"]),
        (FilterCriteria(min_apy=6.0, max_apy=45.0), ["bsc-cake", "eth-usdc", "bnb-usdt"]),
        (FilterCriteria(min_tvl=1e6), ["bsc-cake", "eth-usdc", "bnb-usdt"]),
        (FilterCriteria(max_risk="low"), ["eth-usdc", "bnb-usdt"]),
        (FilterCriteria(max_risk="medium"), ["bsc-cake", "eth-usdc", "bnb-usdt", "arb-eth"]),
        (FilterCriteria(stablecoin_only=True), ["eth-usdc", "bnb-usdt"]),
        (FilterCriteria(chain="ethereum", stablecoin_only=True, min_apy=1.0), ["eth-usdc"]),
        (FilterCriteria(chain="solana"), []),
    ],
)
def test_criteria_are_anded(pools, criteria: FilterCriteria, expected: list[str]) -> None:
    assert _ids(filter_and_rank(pools, criteria)) == expected


def test_limit_applies_after_sorting(pools) -> None:
    assert _ids(filter_and_rank(pools, FilterCriteria(limit=2))) == ["base-usdc", "bsc-cake"]


@pytest.mark.parametrize(("limit", "bounded"), [(0, 1), (-3, 1), (20, 20), (50, 50), (500, 50)])
def test_limit_is_bounded(limit: int, bounded: int) -> None:
    assert FilterCriteria(limit=limit).bounded_limit == bounded


@pytest.mark.parametrize(
    "criteria",
    [FilterCriteria(), FilterCriteria(chain="bsc"), FilterCriteria(max_risk="medium", limit=3)],
)
def test_filtering_is_idempotent(pools, criteria: FilterCriteria) -> None:
    once = filter_and_rank(pools, criteria)
    assert filter_and_rank(once, criteria) == once


def test_chain_matches_uses_alias_table() -> None:
    assert chain_matches("Binance", "bsc")
    assert chain_matches("Arbitrum Nova", "arbitrum")
    assert not chain_matches("Ethereum", "bsc")
    assert chain_matches("Sui", "SUI")
    assert chain_matches("Mode", "mo", {"mo": ("Mode",)})


def test_find_yields_min_apy_example(make_record, selector) -> None:
    snapshot = [
        make_record(project="A", apy=0, tvlUsd=5e6),
        make_record(project="B", apy=12.3, tvlUsd=2e7, ilRisk="no", exposure="single"),
    ]
    result = find_yields(snapshot, FilterCriteria(min_apy=1), selector=selector)

    assert result.ok
    assert [p.protocol for p in result.pools] == ["B"]
    assert result.pools[0].risk_score == 0
    assert result.pools[0].risk_level == "low"
    assert result.summary is not None
    assert result.summary.total_found == 1
    assert result.summary.average_apy == pytest.approx(12.3)
    assert result.summary.risk_distribution == {"low": 1, "medium": 0, "high": 0}


def test_find_yields_distinguishes_no_data_and_no_match(make_record) -> None:
    assert find_yields([]).status == "no_data"
    assert find_yields(None).status == "no_data"
    assert find_yields([{"chain": None}]).status == "no_data"

    result = find_yields([make_record()], FilterCriteria(min_apy=99.0))
    assert result.status == "no_match"
    assert result.pools == ()
    assert result.message.startswith("No pools match your criteria")


def test_find_yields_rejects_unknown_risk_level(make_record) -> None:
    result = find_yields([make_record()], FilterCriteria(max_risk="extreme"))
    assert result.status == "invalid_input"
    assert not result.ok


@pytest.mark.parametrize("limit", [None, "15", float("inf"), float("nan")])
def test_find_yields_rejects_bad_limit(make_record, limit) -> None:
    result = find_yields([make_record()], FilterCriteria(limit=limit))
    assert result.status == "invalid_input"
    assert "limit" in result.message
