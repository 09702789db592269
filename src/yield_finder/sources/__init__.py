"""Data source adapters used by :mod:`yield_finder`."""

from __future__ import annotations

from typing import Protocol

from ..core import RawPool
from .csv import CSVSource
from .defillama import DefiLlamaSource


class DataSource(Protocol):
    """Adapter protocol returning raw pools for the engine."""

    def fetch(self) -> list[RawPool]: ...


__all__ = [
    "CSVSource",
    "DataSource",
    "DefiLlamaSource",
]
