import pytest

from yield_finder.core import Pool, PoolRepository
from yield_finder.normalize import annotate_pool


@pytest.fixture
def sample_pools(make_raw, selector) -> list[Pool]:
    """Synthetic pool universe covering assorted filter attributes."""

    raws = [
        make_raw(protocol="aave-v3", chain="Ethereum", tvl_usd=200_000_000.0, apy=4.0, stablecoin=True),
        make_raw(protocol="pancake", chain="BSC", tvl_usd=500_000.0, apy=80.0, il_risk="yes"),
        make_raw(protocol="compound-v3", chain="Base", tvl_usd=3_000_000.0, apy=7.0, stablecoin=True),
        make_raw(protocol="curve", chain="Ethereum", tvl_usd=40_000_000.0, apy=None),
    ]
    return [annotate_pool(raw, selector=selector) for raw in raws]


@pytest.fixture
def repository(sample_pools: list[Pool]) -> PoolRepository:
    return PoolRepository(sample_pools)


@pytest.mark.parametrize(
    ("kwargs", "expected"),
    [
        ({"min_tvl": 1_000_000.0}, ["aave-v3", "compound-v3", "curve"]),
        ({"min_apy": 5.0}, ["pancake", "compound-v3"]),
        ({"chains": ["ethereum"]}, ["aave-v3", "curve"]),
        ({"protocols": ["Curve", "aave-v3"]}, ["aave-v3", "curve"]),
        ({"max_risk": "medium"}, ["aave-v3", "compound-v3", "curve"]),
        ({"stablecoin_only": True}, ["aave-v3", "compound-v3"]),
    ],
)
def test_filter_respects_criteria(
    repository: PoolRepository,
    sample_pools: list[Pool],
    kwargs: dict[str, object],
    expected: list[str],
) -> None:
    filtered = repository.filter(**kwargs)

    assert isinstance(filtered, PoolRepository)
    assert [pool.protocol for pool in filtered] == expected

    # Original repository order remains unchanged and deterministic ordering is preserved.
    assert [pool.protocol for pool in repository] == [pool.protocol for pool in sample_pools]


def test_filter_returns_new_repository_instance(repository: PoolRepository, make_raw, selector) -> None:
    filtered = repository.filter(min_tvl=0.0)

    assert filtered is not repository
    assert list(filtered) == list(repository)

    filtered.add(annotate_pool(make_raw(protocol="new"), selector=selector))

    assert len(filtered) == len(repository) + 1
    assert len(repository) == 4


def test_to_dataframe_flattens_factors(repository: PoolRepository) -> None:
    df = repository.to_dataframe()
    assert len(df) == 4
    assert {"protocol", "risk_level", "risk_factors", "tvl_display", "apy_display"} <= set(df.columns)
    assert df.loc[1, "risk_factors"] == "Low TVL (<$1M); Very high APY (>50%); Impermanent loss exposure"
    assert df.loc[1, "risk_level"] == "high"


def test_empty_repository_exports_empty_frame() -> None:
    assert PoolRepository().to_dataframe().empty
