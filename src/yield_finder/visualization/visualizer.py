"""Matplotlib-based chart helpers for YieldFinderLab."""

from __future__ import annotations

import pandas as pd

from ..core import AllocationResult, ComparisonResult

_RISK_COLORS = {"low": "tab:green", "medium": "tab:orange", "high": "tab:red"}


class Visualizer:
    """Collection of static helpers that turn engine outputs into charts."""

    @staticmethod
    def _plt():
        try:
            import matplotlib.pyplot as plt
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(
                "matplotlib is required for visualization. Install via pip."
            ) from exc
        return plt

    @staticmethod
    def _finish(plt, save_path: str | None, show: bool) -> None:
        plt.tight_layout()
        if save_path:
            plt.savefig(save_path, bbox_inches="tight")
        if show:
            plt.show()

    @staticmethod
    def bar_apy(
        df: pd.DataFrame,
        title: str = "APY per pool",
        *,
        save_path: str | None = None,
        show: bool = True,
    ) -> None:
        """Bar chart of pool APY (already in percent), coloured by risk level."""
        if df.empty:
            return
        plt = Visualizer._plt()
        labels = df["protocol"].astype(str) + ":" + df["asset"].astype(str)
        colors = [_RISK_COLORS.get(level, "tab:gray") for level in df.get("risk_level", [])]
        plt.figure(figsize=(10, 6))
        plt.bar(labels, df["apy"], color=colors or None)
        plt.title(title)
        plt.ylabel("APY (%)")
        plt.xticks(rotation=45, ha="right")
        Visualizer._finish(plt, save_path, show)

    @staticmethod
    def scatter_tvl_apy(
        df: pd.DataFrame,
        title: str = "TVL vs. APY",
        annotate: bool = True,
        *,
        save_path: str | None = None,
        show: bool = True,
    ) -> None:
        if df.empty:
            return
        sizes = None
        if "risk_score" in df.columns:
            # scale bubble sizes
            sizes = ((df["risk_score"].fillna(0) + 1) * 30).tolist()
        plt = Visualizer._plt()
        plt.figure(figsize=(10, 6))
        plt.scatter(df["tvl_usd"], df["apy"], s=sizes)
        if annotate:
            for _, row in df.iterrows():
                plt.annotate(
                    f"{row.get('protocol', '')}:{row.get('asset', '')}",
                    (row["tvl_usd"], row["apy"]),
                    textcoords="offset points",
                    xytext=(5, 5),
                )
        plt.xscale("log")
        plt.xlabel("TVL (USD, log-scale)")
        plt.ylabel("APY (%)")
        plt.title(title)
        Visualizer._finish(plt, save_path, show)

    @staticmethod
    def bar_allocation(
        result: AllocationResult,
        title: str | None = None,
        *,
        save_path: str | None = None,
        show: bool = True,
    ) -> None:
        if not result.positions:
            return
        plt = Visualizer._plt()
        labels = [f"{a.protocol}:{a.asset}" for a in result.positions]
        plt.figure(figsize=(10, 6))
        plt.bar(
            labels,
            [a.percentage for a in result.positions],
            color=[_RISK_COLORS.get(a.risk_level, "tab:gray") for a in result.positions],
        )
        plt.title(title or f"Allocation ({result.risk_tolerance})")
        plt.ylabel("Share of capital (%)")
        plt.xticks(rotation=45, ha="right")
        Visualizer._finish(plt, save_path, show)

    @staticmethod
    def bar_protocol_apy(
        result: ComparisonResult,
        title: str = "Average APY per protocol",
        *,
        save_path: str | None = None,
        show: bool = True,
    ) -> None:
        if not result.rankings:
            return
        plt = Visualizer._plt()
        plt.figure(figsize=(8, 5))
        plt.bar(
            [s.protocol for s in result.rankings],
            [s.average_apy for s in result.rankings],
        )
        plt.title(title)
        plt.ylabel("Average APY (%)")
        Visualizer._finish(plt, save_path, show)


__all__ = ["Visualizer"]
