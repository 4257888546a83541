from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import TextIO

import numpy as np

from .arena import run_match
from .config import GameConfig
from .errors import GameError
from .evaluator import Outcome, evaluate, winning_line
from .game_basics import Cell, format_board, is_valid_state, parse_board, serialize_board
from .session import GameSession, Mode
from .solver import Difficulty, move_values, select_move
from .tracking import log_metrics, log_params, maybe_mlflow_run

_DIFFICULTY_CHOICES = ["random", "optimal", "easy", "hard"]
DETERMINISTIC_SEED = 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe engine CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Global seed for reproducibility")
    p.add_argument(
        "--deterministic",
        action="store_true",
        help="Enable deterministic mode (seed 0 unless --seed or TTT_SEED is given)",
    )

    p_eval = sub.add_parser("evaluate", help="Report the outcome of a board (9 chars, 0=empty,1=X,2=O)")
    p_eval.add_argument("--board", required=True, help="Board string, e.g., 112220000")

    p_move = sub.add_parser("move", help="Choose the computer's move for a board")
    p_move.add_argument("--board", required=True, help="Board string, e.g., 110220000")
    p_move.add_argument("--difficulty", choices=_DIFFICULTY_CHOICES, default=None,
                        help="Opponent policy (default: TTT_DIFFICULTY or random)")
    p_move.add_argument("--as", dest="mark", choices=["x", "o"], default="o",
                        help="Mark the computer plays (default: o)")
    p_move.add_argument("--depth-discount", action="store_true", default=None,
                        help="Prefer faster wins and slower losses")

    p_play = sub.add_parser("play", help="Play an interactive game in the terminal")
    p_play.add_argument("--mode", choices=["ai", "pvp"], default=None,
                        help="ai: you (X) vs the computer (O); pvp: two humans")
    p_play.add_argument("--difficulty", choices=_DIFFICULTY_CHOICES, default=None)
    p_play.add_argument("--ai-delay", type=float, default=None,
                        help="Seconds the computer waits before moving (default: 0.5)")
    p_play.add_argument("--depth-discount", action="store_true", default=None)

    p_arena = sub.add_parser("arena", help="Play computer-vs-computer games and report rates")
    p_arena.add_argument("--x", dest="x_difficulty", choices=_DIFFICULTY_CHOICES, default="optimal")
    p_arena.add_argument("--o", dest="o_difficulty", choices=_DIFFICULTY_CHOICES, default="optimal")
    p_arena.add_argument("--games", type=int, default=100)
    p_arena.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_arena.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs (for mlflow local backend)",
    )

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    print(f"numpy={np.__version__}")
    for pkg in ["mlflow"]:
        if importlib.util.find_spec(pkg) is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            print(f"{pkg}={getattr(mod, '__version__', '?')}")


def _load_board(raw: str):
    """Parse and validate a board argument; returns None after logging on error."""
    try:
        b = parse_board(raw)
    except ValueError as e:
        logging.error("%s", e)
        return None
    if not is_valid_state(b):
        logging.error("Board is not a valid reachable state.")
        return None
    return b


def _render(session: GameSession, out: TextIO) -> None:
    out.write(format_board(session.board) + "\n")
    if session.finished:
        out.write(session.outcome.describe() + "\n")
    else:
        out.write(f"{session.turn.symbol} to move\n")
    out.write(str(session.scores) + "\n")


def run_interactive(cfg: GameConfig, inp: TextIO = sys.stdin, out: TextIO = sys.stdout) -> int:
    """Terminal front end: cell numbers 0-8 to play, 'r' to reset, 'q' to quit."""
    session = GameSession(
        mode=cfg.mode,
        difficulty=cfg.difficulty,
        rng=np.random.default_rng(cfg.seed),
        depth_discount=cfg.depth_discount,
    )
    session.subscribe(lambda outcome: out.write(f"*** {outcome.describe()} ***\n"))
    out.write(f"Mode: {session.mode.value}  Difficulty: {session.difficulty.value}\n")
    out.write(" 0 | 1 | 2 \n---+---+---\n 3 | 4 | 5 \n---+---+---\n 6 | 7 | 8 \n")
    _render(session, out)
    for line in inp:
        cmd = line.strip().lower()
        if not cmd:
            continue
        if cmd in ("q", "quit"):
            break
        if cmd in ("r", "reset"):
            session.reset()
            _render(session, out)
            continue
        try:
            session.play(int(cmd))
        except ValueError:
            out.write("Enter a cell number 0-8, 'r' to reset or 'q' to quit\n")
            continue
        except GameError as e:
            out.write(f"{e}\n")
            continue
        if session.ai_pending:
            if cfg.ai_delay:
                time.sleep(cfg.ai_delay)
            mv = session.play_ai()
            out.write(f"Computer plays {mv}\n")
        _render(session, out)
    out.write(str(session.scores) + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("tttengine"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    try:
        cfg = GameConfig.from_env()
    except ValueError as e:
        logging.error("Bad environment configuration: %s", e)
        return 2
    if ns.seed is not None:
        cfg.seed = ns.seed
    if getattr(ns, "deterministic", False) and cfg.seed is None:
        cfg.seed = DETERMINISTIC_SEED

    if ns.cmd == "evaluate":
        b = _load_board(ns.board)
        if b is None:
            return 2
        logging.info("board=%s outcome=%s winning_line=%s",
                     serialize_board(b), evaluate(b).value, winning_line(b))
        return 0

    if ns.cmd == "move":
        b = _load_board(ns.board)
        if b is None:
            return 2
        difficulty = Difficulty.parse(ns.difficulty) if ns.difficulty else cfg.difficulty
        depth_discount = cfg.depth_discount if ns.depth_discount is None else ns.depth_discount
        perspective = Cell.X if ns.mark == "x" else Cell.O
        try:
            mv = select_move(b, difficulty, perspective=perspective,
                             rng=np.random.default_rng(cfg.seed), depth_discount=depth_discount)
        except GameError as e:
            logging.error("%s", e)
            return 2
        if difficulty is Difficulty.OPTIMAL:
            values = move_values(b, perspective, depth_discount)
            logging.info("move=%d values=%s", mv, list(values))
        else:
            logging.info("move=%d", mv)
        return 0

    if ns.cmd == "play":
        if ns.mode is not None:
            cfg.mode = Mode.parse(ns.mode)
        if ns.difficulty is not None:
            cfg.difficulty = Difficulty.parse(ns.difficulty)
        if ns.ai_delay is not None:
            if ns.ai_delay < 0:
                logging.error("--ai-delay must be >= 0: %s", ns.ai_delay)
                return 2
            cfg.ai_delay = ns.ai_delay
        if ns.depth_discount is not None:
            cfg.depth_discount = ns.depth_discount
        return run_interactive(cfg)

    if ns.cmd == "arena":
        if ns.games < 1:
            logging.error("--games must be >= 1: %s", ns.games)
            return 2
        with maybe_mlflow_run(ns.tracking == "mlflow", run_name="arena", log_dir=ns.log_dir):
            log_params({"x": ns.x_difficulty, "o": ns.o_difficulty, "games": ns.games, "seed": cfg.seed})
            res = run_match(ns.x_difficulty, ns.o_difficulty, ns.games, seed=cfg.seed,
                            depth_discount=cfg.depth_discount)
            metrics = res.metrics()
            log_metrics(metrics)
        logging.info(
            "x=%s o=%s games=%d x_wins=%d o_wins=%d draws=%d draw_rate=%.3f",
            res.x_difficulty.value,
            res.o_difficulty.value,
            res.games,
            res.counts[Outcome.X_WINS],
            res.counts[Outcome.O_WINS],
            res.counts[Outcome.DRAW],
            metrics["draw_rate"],
        )
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
