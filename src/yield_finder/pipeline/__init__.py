from __future__ import annotations

"""Data orchestration pipeline for YieldFinderLab adapters."""

from collections.abc import Iterable, Iterator, Sequence
import logging
from typing import TypeVar

from ..commentary import CommentarySelector
from ..core import PoolRepository, RawPool
from ..normalize import annotate_pool
from ..risk_scoring import DEFAULT_RUBRIC, RiskRubric
from ..sources import DataSource

logger = logging.getLogger(__name__)


T = TypeVar("T")


def _iter_instances(items: Iterable[object], cls: type[T]) -> Iterator[T]:
    for item in items:
        if isinstance(item, cls):
            yield item


class Pipeline:
    """Fetch raw pools from every source and annotate them into a repository."""

    def __init__(
        self,
        sources: Sequence[DataSource],
        *,
        selector: CommentarySelector | None = None,
        rubric: RiskRubric = DEFAULT_RUBRIC,
    ) -> None:
        self._sources: list[DataSource] = list(sources)
        self.selector = selector
        self.rubric = rubric

    def fetch_raw(self) -> list[RawPool]:
        """Collect raw pools; a failing source is logged and skipped."""
        raws: list[RawPool] = []
        for source in self._sources:
            try:
                items = source.fetch()
            except Exception as exc:
                logger.warning("Source %s failed: %s", source.__class__.__name__, exc)
                continue
            raws.extend(_iter_instances(items, RawPool))
        return raws

    def run(self) -> PoolRepository:
        repo = PoolRepository()
        for raw in self.fetch_raw():
            repo.add(annotate_pool(raw, selector=self.selector, rubric=self.rubric))
        return repo


__all__ = ["Pipeline"]
