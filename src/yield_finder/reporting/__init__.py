from __future__ import annotations

from pathlib import Path

import pandas as pd

from yield_finder.core import (
    AllocationResult,
    ComparisonResult,
    PoolRepository,
    YieldSearchResult,
)

_CHAIN_COLUMNS = ["chain", "pools", "tvl", "apy_avg", "apy_wavg", "high_risk_pools"]


def _ensure_outdir(outdir: str | Path) -> Path:
    p = Path(outdir)
    p.mkdir(parents=True, exist_ok=True)
    return p


def groupby_chain(df: pd.DataFrame) -> pd.DataFrame:
    """Per-chain pool count, TVL, average and TVL-weighted APY of yielding pools."""

    if df.empty:
        return pd.DataFrame(columns=_CHAIN_COLUMNS)
    yielding = df[df["apy"].fillna(0.0) > 0.0]
    if yielding.empty:
        return pd.DataFrame(columns=_CHAIN_COLUMNS)
    g = (
        yielding.groupby("chain")
        .agg(
            pools=("protocol", "count"),
            tvl=("tvl_usd", "sum"),
            apy_avg=("apy", "mean"),
            apy_wavg=(
                "apy",
                lambda x: (x * yielding.loc[x.index, "tvl_usd"]).sum()
                / yielding.loc[x.index, "tvl_usd"].sum()
                if yielding.loc[x.index, "tvl_usd"].sum()
                else float("nan"),
            ),
            high_risk_pools=("risk_level", lambda x: int((x == "high").sum())),
        )
        .reset_index()
    )
    return g.sort_values("tvl", ascending=False).reset_index(drop=True)


def search_frame(result: YieldSearchResult) -> pd.DataFrame:
    return pd.DataFrame([pool.to_dict() for pool in result.pools])


def allocation_frame(result: AllocationResult) -> pd.DataFrame:
    df = pd.DataFrame([position.to_dict() for position in result.positions])
    if not df.empty:
        df["apy"] = df["apy"].round(2)
    return df


def comparison_frame(result: ComparisonResult) -> pd.DataFrame:
    df = pd.DataFrame([stats.to_dict() for stats in result.rankings])
    if not df.empty:
        df.insert(0, "rank", range(1, len(df) + 1))
    return df


def yield_report(
    repo: PoolRepository,
    outdir: str | Path,
    *,
    top_n: int = 10,
    search: YieldSearchResult | None = None,
    allocation: AllocationResult | None = None,
    comparison: ComparisonResult | None = None,
) -> dict[str, Path]:
    """Write CSV reports for an annotated snapshot and optional engine results.

    Parameters
    ----------
    repo:
        Annotated pools, usually the output of :class:`~yield_finder.Pipeline`.
    outdir:
        Target directory, created when missing.
    top_n:
        Number of highest-APY yielding pools written to ``topN.csv``.
    search, allocation, comparison:
        Engine results; each is written only when supplied and successful.

    Returns
    -------
    dict[str, Path]
        Mapping of report name to written file.
    """

    out = _ensure_outdir(outdir)
    paths: dict[str, Path] = {}

    df = repo.to_dataframe()
    paths["pools"] = out / "pools.csv"
    df.to_csv(paths["pools"], index=False)

    paths["by_chain"] = out / "by_chain.csv"
    groupby_chain(df).to_csv(paths["by_chain"], index=False)

    top = df
    if not df.empty:
        top = df[df["apy"].fillna(0.0) > 0.0].sort_values("apy", ascending=False, kind="stable")
    paths["topN"] = out / "topN.csv"
    top.head(top_n).to_csv(paths["topN"], index=False)

    if search is not None and search.ok:
        paths["yields"] = out / "yields.csv"
        search_frame(search).to_csv(paths["yields"], index=False)
    if allocation is not None and allocation.ok:
        paths["allocation"] = out / "allocation.csv"
        allocation_frame(allocation).to_csv(paths["allocation"], index=False)
    if comparison is not None and comparison.rankings:
        paths["comparison"] = out / "comparison.csv"
        comparison_frame(comparison).to_csv(paths["comparison"], index=False)

    return paths


__all__ = ["allocation_frame", "comparison_frame", "groupby_chain", "search_frame", "yield_report"]
