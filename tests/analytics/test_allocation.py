import random

import pytest

from yield_finder.analytics.allocation import (
    allocate,
    optimize_portfolio,
    rank_risk_adjusted,
    reconcile_percentages,
    round_half_up,
)
from yield_finder.normalize import annotate_pool


@pytest.fixture
def pools(make_raw, selector):
    raws = [
        make_raw(pool_id="p1", apy=10.0, tvl_usd=50e6),  # low
        make_raw(pool_id="p2", apy=25.0, tvl_usd=5e6),  # medium
        make_raw(pool_id="p3", apy=60.0, tvl_usd=5e6, il_risk="yes", exposure="multi"),  # high
        make_raw(pool_id="p4", apy=8.0, tvl_usd=2e6),  # low
        make_raw(pool_id="p5", apy=0.0, tvl_usd=80e6),  # no yield
        make_raw(pool_id="p6", apy=5.0, tvl_usd=900e3),  # medium, small
    ]
    return [annotate_pool(raw, selector=selector) for raw in raws]


def _ids(items) -> list[str]:
    return [p.pool_id for p in items]


def test_round_half_up() -> None:
    assert [round_half_up(v) for v in (0.5, 1.5, 2.5, 2.49, -0.5, -1.6)] == [1, 2, 3, 2, 0, -2]


@pytest.mark.parametrize(
    ("weights", "expected"),
    [
        ([10.0] * 10, [10] * 10),
        ([10.0, 10.0, 10.0], [34, 33, 33]),
        ([1.0] * 7, [15, 15, 14, 14, 14, 14, 14]),
        ([50.0, 30.0, 20.0], [36, 37, 27]),
        ([25.0, 10.0, 8.0], [40, 32, 28]),
        ([5.0, 5.0, 90.0], [25, 25, 50]),
        ([7.0], [100]),
        ([], []),
    ],
)
def test_reconcile_percentages(weights: list[float], expected: list[int]) -> None:
    assert reconcile_percentages(weights) == expected


def test_reconcile_percentages_bounds() -> None:
    rng = random.Random(42)
    for _ in range(500):
        count = rng.randint(1, 10)
        weights = [rng.uniform(5.0, 60.0) for _ in range(count)]
        pct = reconcile_percentages(weights)

        assert sum(pct) == 100
        total = sum(weights)
        rounded = [round_half_up(min(w / total * 100.0, 30.0)) for w in weights]
        bound = abs(100 - sum(rounded)) / count + 1.5
        assert all(abs(p - r) <= bound for p, r in zip(pct, rounded))


@pytest.mark.parametrize("weights", [[10.0, 0.0], [5.0, -1.0], [float("inf"), 2.0]])
def test_reconcile_percentages_rejects_non_positive_weights(weights: list[float]) -> None:
    with pytest.raises(ValueError, match="positive"):
        reconcile_percentages(weights)


def test_risk_adjusted_ranking(pools) -> None:
    assert _ids(rank_risk_adjusted(pools)) == ["p3", "p2", "p1", "p4", "p6", "p5"]


def test_moderate_allocation(pools) -> None:
    result = allocate(pools, "moderate", 10_000.0)

    assert result.ok
    assert [(a.apy, a.risk_level, a.percentage, a.amount) for a in result.positions] == [
        (25.0, "medium", 40, 4_000),
        (10.0, "low", 32, 3_200),
        (8.0, "low", 28, 2_800),
    ]
    assert result.total_percentage == 100
    summary = result.summary
    assert summary is not None
    assert summary.positions == 3
    assert summary.weighted_apy == pytest.approx(15.44)
    assert summary.expected_yearly_return == pytest.approx(1_544.0)
    assert summary.risk_profile == "Mix of established and emerging protocols, no high-risk"
    assert summary.overall_comment.startswith("Balanced approach")
    assert len(summary.warnings) == 4


def test_conservative_allocation_single_position(pools) -> None:
    result = allocate(pools, "conservative", 1_000.0)
    assert [(a.percentage, a.amount) for a in result.positions] == [(100, 1_000)]


def test_aggressive_respects_position_cap(pools) -> None:
    everything = allocate(pools, "aggressive", 5_000.0)
    assert [a.apy for a in everything.positions] == [60.0, 25.0, 10.0, 8.0, 5.0]

    capped = allocate(pools, "aggressive", 5_000.0, max_positions=2)
    assert [a.apy for a in capped.positions] == [60.0, 25.0]
    assert capped.total_percentage == 100


def test_caller_cannot_exceed_tier_cap(make_raw, selector) -> None:
    many = [annotate_pool(make_raw(apy=5.0 + i), selector=selector) for i in range(12)]
    result = allocate(many, "conservative", 10_000.0, max_positions=9)
    assert len(result.positions) == 5
    assert [a.apy for a in result.positions] == [16.0, 15.0, 14.0, 13.0, 12.0]


def test_dollar_amounts_track_amount(make_raw, selector) -> None:
    rng = random.Random(3)
    pools = [
        annotate_pool(make_raw(apy=rng.uniform(1.0, 19.0)), selector=selector) for _ in range(10)
    ]
    amount = 12_345.0
    result = allocate(pools, "aggressive", amount)
    assert result.total_percentage == 100
    assert abs(sum(a.amount for a in result.positions) - amount) <= len(result.positions)


def test_conservative_without_eligible_pools_is_explicit(make_raw, selector) -> None:
    small = [annotate_pool(make_raw(tvl_usd=9e6, apy=4.0), selector=selector) for _ in range(3)]
    result = allocate(small, "conservative", 10_000.0)

    assert result.status == "no_match"
    assert result.positions == ()
    assert result.summary is None
    assert result.message == "No suitable pools found for your criteria"


@pytest.mark.parametrize(("tolerance", "amount"), [
        ("yolo", 1_000.0),
        ("moderate", 0.0),
        ("moderate", float("inf")),
        ("moderate", float("nan")),
    ])
def test_invalid_allocation_input(pools, tolerance: str, amount: float) -> None:
    assert allocate(pools, tolerance, amount).status == "invalid_input"


def test_optimize_filters_chains_and_stablecoins(make_record, selector) -> None:
    snapshot = [
        make_record(pool="eth-1", chain="Ethereum", apy=6.0, stablecoin=True),
        make_record(pool="eth-2", chain="Ethereum", apy=9.0, stablecoin=False),
        make_record(pool="bsc-1", chain="BSC", apy=7.0, stablecoin=True),
        make_record(pool="sol-1", chain="Solana", apy=12.0, stablecoin=True),
    ]

    result = optimize_portfolio(
        snapshot, amount=1_000.0, risk_tolerance="conservative", selector=selector
    )
    assert [(a.apy, a.chain) for a in result.positions] == [(9.0, "Ethereum"), (6.0, "Ethereum")]

    stable = optimize_portfolio(
        snapshot,
        amount=1_000.0,
        risk_tolerance="conservative",
        chains=["ethereum", "bsc"],
        stablecoin_only=True,
        selector=selector,
    )
    assert [(a.apy, a.chain) for a in stable.positions] == [(7.0, "BSC"), (6.0, "Ethereum")]
    assert stable.total_percentage == 100


def test_optimize_error_results(make_record) -> None:
    assert optimize_portfolio([], amount=1_000.0, risk_tolerance="moderate").status == "no_data"
    assert optimize_portfolio(None, amount=1_000.0, risk_tolerance="moderate").status == "no_data"
    assert (
        optimize_portfolio([make_record()], amount=float("inf"), risk_tolerance="moderate").status
        == "invalid_input"
    )
    assert (
        optimize_portfolio([make_record()], amount=99.0, risk_tolerance="moderate").status
        == "invalid_input"
    )
    assert (
        optimize_portfolio([make_record()], amount=500.0, risk_tolerance="reckless").status
        == "invalid_input"
    )

    none_left = optimize_portfolio(
        [make_record(chain="Solana")], amount=500.0, risk_tolerance="moderate"
    )
    assert none_left.status == "no_match"
    assert none_left.message.startswith("No suitable pools found for your criteria.")
