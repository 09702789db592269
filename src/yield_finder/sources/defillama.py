"""DefiLlama adapter returning :class:`~yield_finder.core.RawPool` instances."""

from __future__ import annotations

import json
import logging
import urllib.request
from pathlib import Path
from typing import Any

from ..core import RawPool
from ..normalize import normalize_pools

logger = logging.getLogger(__name__)


class DefiLlamaSource:
    """HTTP client for https://yields.llama.fi/pools."""

    URL = "https://yields.llama.fi/pools"

    def __init__(
        self,
        stable_only: bool = False,
        cache_path: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.stable_only = stable_only
        self.cache_path = Path(cache_path) if cache_path else None
        self.timeout = timeout

    def _load(self) -> dict[str, Any]:
        if self.cache_path and self.cache_path.exists():
            with self.cache_path.open() as f:
                return json.load(f)
        with urllib.request.urlopen(self.URL, timeout=self.timeout) as resp:  # pragma: no cover - network path
            data = json.load(resp)
        if self.cache_path:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with self.cache_path.open("w") as f:
                json.dump(data, f)
        return data

    def fetch(self) -> list[RawPool]:
        try:
            raw = self._load()
        except Exception as exc:  # pragma: no cover - network errors
            logger.warning("DefiLlama request failed: %s", exc)
            return []
        items = raw.get("data") or []
        if self.stable_only:
            items = [item for item in items if item.get("stablecoin")]
        pools = normalize_pools(items)
        logger.debug("DefiLlama returned %d pools (%d usable)", len(items), len(pools))
        return pools


__all__ = ["DefiLlamaSource"]
