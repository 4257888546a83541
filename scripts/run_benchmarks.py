#!/usr/bin/env python3
from __future__ import annotations

import math
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from tttengine.arena import run_match
from tttengine.game_basics import new_board
from tttengine.solver import Difficulty, clear_search_cache, select_move
from tttengine.tracking import log_metrics, log_params, maybe_mlflow_run


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    repeats: int = 10
    games: int = 50
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def main() -> int:
    cfg = Config()
    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir):
        log_params({"repeats": cfg.repeats, "games": cfg.games})
        cold_times: List[float] = []
        match_times: List[float] = []
        for s in range(cfg.repeats):
            clear_search_cache()
            t0 = time.perf_counter()
            select_move(new_board(), Difficulty.OPTIMAL)
            t1 = time.perf_counter()
            cold_times.append(t1 - t0)
            t2 = time.perf_counter()
            run_match("random", "optimal", cfg.games, seed=s)
            t3 = time.perf_counter()
            match_times.append(t3 - t2)
        m_cold, h_cold = ci95(cold_times)
        m_match, h_match = ci95(match_times)
        log_metrics({
            "cold_first_move_mean_s": m_cold,
            "cold_first_move_ci95_half_s": h_cold,
            "match_mean_s": m_match,
            "match_ci95_half_s": h_match,
        })
    print(f"cold optimal first move: mean={m_cold:.4f}s ± {h_cold:.4f}s (95% CI)")
    print(f"random-vs-optimal match ({cfg.games} games): mean={m_match:.4f}s ± {h_match:.4f}s (95% CI)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
