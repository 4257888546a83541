"""Runtime settings for the terminal front end.

Environment-first: TTT_MODE, TTT_DIFFICULTY, TTT_AI_DELAY, TTT_DEPTH_DISCOUNT
and TTT_SEED provide defaults; command-line flags override them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .session import Mode
from .solver import Difficulty

DEFAULT_AI_DELAY = 0.5

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class GameConfig:
    mode: Mode = Mode.AI
    difficulty: Difficulty = Difficulty.RANDOM
    ai_delay: float = DEFAULT_AI_DELAY
    depth_discount: bool = False
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self.mode = Mode.parse(self.mode)
        self.difficulty = Difficulty.parse(self.difficulty)
        if self.ai_delay < 0:
            raise ValueError(f"ai_delay must be >= 0, got {self.ai_delay}")

    @classmethod
    def from_env(cls) -> "GameConfig":
        seed = os.getenv("TTT_SEED")
        return cls(
            mode=os.getenv("TTT_MODE") or Mode.AI,
            difficulty=os.getenv("TTT_DIFFICULTY") or Difficulty.RANDOM,
            ai_delay=float(os.getenv("TTT_AI_DELAY") or DEFAULT_AI_DELAY),
            depth_discount=_env_bool("TTT_DEPTH_DISCOUNT", False),
            seed=int(seed) if seed else None,
        )
