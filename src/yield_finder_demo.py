from __future__ import annotations

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any, cast

from yield_finder import (
    CSVSource,
    DefiLlamaSource,
    FilterCriteria,
    Pipeline,
    PoolRepository,
    build_pools,
    compare_protocols,
    find_yields,
    optimize_portfolio,
)
from yield_finder.reporting import search_frame, yield_report
from yield_finder.visualization import Visualizer


logger = logging.getLogger(__name__)


def load_config(path: str | Path | None) -> dict[str, Any]:
    """Load configuration from a TOML file and merge with defaults.

    Parameters
    ----------
    path:
        Optional path to a configuration file. When ``None`` or missing, the
        built-in defaults are used.

    Returns
    -------
    dict[str, Any]
        Configuration dictionary with any file overrides applied.
    """

    default = {
        "data": {
            "source": "csv",
            "csv_path": str(Path(__file__).with_name("sample_pools.csv")),
            "cache_path": None,
            "stable_only": False,
        },
        "search": {
            "chain": "all",
            "min_apy": 1.0,
            "limit": 20,
            # "asset": "USDC",
            # "max_risk": "medium",
        },
        "optimize": {
            "amount": 10_000.0,
            "risk_tolerance": "moderate",
            "chains": ["ethereum"],
            "stablecoin_only": False,
        },
        "compare": {"protocols": ["aave", "compound"], "chain": None},
        "output": {"outdir": None, "show": True, "charts": ["apy", "allocation", "compare"]},
        "reporting": {"top_n": 10},
    }

    cfg_path = Path(path) if path else None

    if cfg_path and cfg_path.is_file():
        with open(cfg_path, "rb") as f:
            file_cfg = tomllib.load(f)

        for k, v in file_cfg.items():
            if isinstance(v, dict) and k in default and isinstance(default[k], dict):
                cast(dict, default[k]).update(v)
            else:
                default[k] = v
    elif cfg_path:
        logger.warning("Config file not found at %s. Using defaults.", cfg_path)

    return default


def _criteria(search_cfg: dict[str, Any]) -> FilterCriteria:
    fields = set(FilterCriteria.__dataclass_fields__)
    return FilterCriteria(**{k: v for k, v in search_cfg.items() if k in fields})


def main() -> None:
    """Run the demo using configuration from file or environment variables."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    cfg_file = os.getenv("YIELD_FINDER_CONFIG") or (sys.argv[1] if len(sys.argv) > 1 else None)
    cfg = load_config(cfg_file)

    if csv_env := os.getenv("YIELD_FINDER_CSV"):
        cfg.setdefault("data", {})["csv_path"] = csv_env
        cfg["data"]["source"] = "csv"
    if outdir_env := os.getenv("YIELD_FINDER_OUTDIR"):
        cfg.setdefault("output", {})["outdir"] = outdir_env
    if amount_env := os.getenv("YIELD_FINDER_AMOUNT"):
        try:
            cfg.setdefault("optimize", {})["amount"] = float(amount_env)
        except ValueError:
            logger.warning("Ignoring non-numeric YIELD_FINDER_AMOUNT=%r", amount_env)

    data_cfg = cfg.get("data", {})
    if data_cfg.get("source") == "defillama":
        src = DefiLlamaSource(
            stable_only=bool(data_cfg.get("stable_only", False)),
            cache_path=data_cfg.get("cache_path"),
        )
    else:
        src = CSVSource(str(data_cfg.get("csv_path")))

    pipeline = Pipeline([src])
    snapshot = pipeline.fetch_raw()
    repo = PoolRepository(build_pools(snapshot))
    print(f"Pools loaded: {len(repo)}")

    search = find_yields(snapshot, _criteria(cfg.get("search", {})))
    if search.summary is not None:
        print(f"Search: {search.summary.total_found} pools, avg APY {search.summary.average_apy:.2f}%")
        print(search.summary.overall_comment)
    else:
        print(f"Search failed: {search.message}")

    opt = cfg.get("optimize", {})
    allocation = optimize_portfolio(
        snapshot,
        amount=float(opt.get("amount", 10_000.0)),
        risk_tolerance=str(opt.get("risk_tolerance", "moderate")),
        chains=list(opt.get("chains", ["ethereum"])),
        stablecoin_only=bool(opt.get("stablecoin_only", False)),
    )
    if allocation.ok and allocation.summary is not None:
        for position in allocation.positions:
            print(
                f"  {position.percentage:>3d}%  ${position.amount:>10,d}  "
                f"{position.protocol} {position.asset} ({position.chain}, {position.risk_level})"
            )
        print(f"Weighted APY: {allocation.summary.weighted_apy:.2f}%")
    else:
        print(f"Allocation unavailable: {allocation.message}")

    cmp_cfg = cfg.get("compare", {})
    comparison = compare_protocols(
        snapshot, list(cmp_cfg.get("protocols", [])), cmp_cfg.get("chain") or None
    )
    print(comparison.verdict or comparison.message)

    out = cfg.get("output", {})
    outdir = Path(out["outdir"]) if out.get("outdir") else None
    show = bool(out.get("show", True)) if not outdir else False
    charts = out.get("charts", [])

    if outdir:
        paths = yield_report(
            repo,
            outdir,
            top_n=int(cfg.get("reporting", {}).get("top_n", 10)),
            search=search,
            allocation=allocation,
            comparison=comparison,
        )
        print(f"Reports written: {', '.join(sorted(paths))}")

    if "apy" in charts and search.ok:
        Visualizer.bar_apy(
            search_frame(search),
            save_path=str(outdir / "bar_apy.png") if outdir else None,
            show=show,
        )
    if "allocation" in charts:
        Visualizer.bar_allocation(
            allocation,
            save_path=str(outdir / "allocation.png") if outdir else None,
            show=show,
        )
    if "compare" in charts:
        Visualizer.bar_protocol_apy(
            comparison,
            save_path=str(outdir / "compare.png") if outdir else None,
            show=show,
        )


if __name__ == "__main__":
    main()
