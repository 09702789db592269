"""In-memory repository for annotated pools."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import pandas as pd

from .constants import RISK_ORDER
from .models import Pool


class PoolRepository:
    """Lightweight in-memory collection with pandas export."""

    def __init__(self, pools: Iterable[Pool] | None = None) -> None:
        self._pools: list[Pool] = list(pools) if pools else []

    def add(self, pool: Pool) -> None:
        self._pools.append(pool)

    def extend(self, items: Iterable[Pool]) -> None:
        self._pools.extend(items)

    def filter(
        self,
        *,
        min_tvl: float = 0.0,
        min_apy: float | None = None,
        chains: list[str] | None = None,
        protocols: list[str] | None = None,
        max_risk: str | None = None,
        stablecoin_only: bool = False,
    ) -> "PoolRepository":
        """Return a new repository with the pools passing every criterion.

        ``chains`` and ``protocols`` are exact (case-insensitive) name lists;
        the alias-aware search lives in :mod:`yield_finder.analytics.ranking`.
        """
        chain_set = {c.lower() for c in chains} if chains else None
        protocol_set = {p.lower() for p in protocols} if protocols else None
        ceiling = RISK_ORDER[max_risk] if max_risk else None
        res: list[Pool] = []
        for pool in self._pools:
            if pool.tvl_usd < min_tvl:
                continue
            if min_apy is not None and (pool.apy is None or pool.apy < min_apy):
                continue
            if stablecoin_only and not pool.stablecoin:
                continue
            if chain_set and pool.chain.lower() not in chain_set:
                continue
            if protocol_set and pool.protocol.lower() not in protocol_set:
                continue
            if ceiling is not None and RISK_ORDER[pool.risk_level] > ceiling:
                continue
            res.append(pool)
        return PoolRepository(res)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([pool.to_dict() for pool in self._pools])

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[Pool]:
        return iter(self._pools)


__all__ = ["PoolRepository"]
