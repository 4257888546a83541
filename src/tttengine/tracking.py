"""
Run tracking helpers (optional MLflow backend).

MLflow is only imported when requested so it stays an optional dependency.
"""
from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[None]:
    if not enabled:
        yield None
        return
    try:
        import mlflow  # type: ignore

        if log_dir is not None:
            mlflow.set_tracking_uri((log_dir / "mlruns").as_uri())
        run = mlflow.start_run(run_name=run_name)
    except Exception:
        # Soft-fail: continue without tracking
        yield None
        return
    with run:
        yield None


def log_params(params: Dict[str, object]) -> None:
    """Record arena or benchmark settings on the active run; no-op without mlflow."""
    try:
        import mlflow  # type: ignore

        mlflow.log_params(params)
    except Exception:
        pass


def log_metrics(metrics: Dict[str, float]) -> None:
    """Record match rates or timing stats (e.g. ``MatchResult.metrics()``)."""
    try:
        import mlflow  # type: ignore

        mlflow.log_metrics(metrics)
    except Exception:
        pass
