"""CSV-backed data source implementations."""

from __future__ import annotations

import pandas as pd

from ..core import RawPool
from ..normalize import normalize_pools

# DefiLlama column names, as written by ``pd.DataFrame(response["data"])``
REQUIRED_COLUMNS = {"chain", "project", "symbol", "tvlUsd"}


class CSVSource:
    """Load a pool snapshot from a CSV using DefiLlama column names."""

    def __init__(self, path: str) -> None:
        self.path = path

    def fetch(self) -> list[RawPool]:
        df = pd.read_csv(self.path)
        missing = REQUIRED_COLUMNS.difference(df.columns)
        if missing:
            raise ValueError(f"CSV missing columns: {sorted(missing)}")
        records = df.astype(object).where(df.notna(), None).to_dict(orient="records")
        return normalize_pools(records)


__all__ = ["CSVSource"]
