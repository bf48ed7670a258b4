from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import Settings, load_settings
from .datasets import FORMATS, GenerateArgs, run_generate
from .errors import MancalaError
from .paths import data_raw
from .play import PlaySession
from .position import Position
from .render import render
from .strategies import StrategyKind, create_strategy
from .tracking import maybe_mlflow_run


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"{value} must be a positive integer")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mancala", description="Mancala position engine and generator")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for the random strategy")

    board = argparse.ArgumentParser(add_help=False)
    board.add_argument("--config", type=Path, default=None, help="YAML settings file (default: ~/.mancala.yaml)")
    board.add_argument("--width", "-w", type=_positive_int, default=None, help="Holes per side (default: 6)")
    board.add_argument("--stones", "-s", type=_positive_int, default=None, help="Initial stones per hole (default: 4)")

    # generate
    p_gen = sub.add_parser("generate", parents=[board], help="Enumerate every reachable position and move")
    p_gen.add_argument("--out", type=Path, default=None, help="Output directory (default: data_raw)")
    p_gen.add_argument("--filename", "-f", default=None, help="Record file name (default: positions.txt)")
    p_gen.add_argument(
        "--format",
        choices=list(FORMATS),
        default="text",
        help="Export format: text (default), parquet, both",
    )
    p_gen.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_gen.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs/artifacts (for mlflow local backend)",
    )

    # play
    p_play = sub.add_parser("play", parents=[board], help="Play from the start position")
    p_play.add_argument("moves", nargs="*", help="Holes to play first, e.g. 3 6 1")
    p_play.add_argument(
        "--strategy",
        "--type",
        "-t",
        dest="strategy",
        default=None,
        help=f"Strategy for remaining turns: {', '.join(k.value for k in StrategyKind)}",
    )
    p_play.add_argument("--name", "-n", default=None, help="Player name shown at the prompt")
    p_play.add_argument("--delta", action="store_true", default=None, help="Show the sowing delta of each move")
    p_play.add_argument("--repl", "-r", action="store_true", help="Read moves from stdin after the scripted ones")

    # show
    p_show = sub.add_parser("show", parents=[board], help="Render a position")
    src = p_show.add_mutually_exclusive_group()
    src.add_argument("--key", help="Position key, e.g. 0,4,4,4,4,4,4,0,4,4,4,4,4,4")
    src.add_argument("--diagnostic", action="store_true", help="Hole i holds i stones")

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "yaml", "pandas", "pyarrow", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _settings(ns: argparse.Namespace) -> Settings:
    return load_settings(
        path=ns.config,
        overrides={
            "width": ns.width,
            "stones": ns.stones,
            "filename": getattr(ns, "filename", None),
            "out": str(ns.out) if getattr(ns, "out", None) is not None else None,
            "strategy": getattr(ns, "strategy", None),
            "name": getattr(ns, "name", None),
            "show_delta": getattr(ns, "delta", None),
        },
    )


def _cmd_generate(ns: argparse.Namespace, settings: Settings, argv: Optional[list[str]]) -> int:
    out = Path(settings.out) if settings.out else data_raw()
    with maybe_mlflow_run(ns.tracking == "mlflow", run_name="generate", log_dir=ns.log_dir) as tracking:
        res = run_generate(GenerateArgs(
            out=out,
            board=settings.board(),
            filename=settings.filename,
            format=ns.format,
            cli_argv=list(argv) if argv is not None else None,
            track=tracking,
        ))
    logging.info("Exported records to: %s", res / settings.filename)
    return 0


def _cmd_play(ns: argparse.Namespace, settings: Settings) -> int:
    session = PlaySession(Position.start(settings.board()), show_delta=settings.show_delta)
    session.show()
    session.apply_all(ns.moves, label="args")
    if session.game_over:
        return 0

    if ns.repl:
        for line in sys.stdin:
            token = line.rstrip("\r\n")
            if not token:
                continue
            session.apply(token, label="repl")
            if session.game_over:
                break
        return 0

    strategy = create_strategy(settings.strategy, name=settings.name, seed=ns.seed)
    session.play_out(strategy)
    return 0


def _cmd_show(ns: argparse.Namespace, settings: Settings) -> int:
    board = settings.board()
    if ns.key:
        pos = Position.from_key(board, ns.key)
    elif ns.diagnostic:
        pos = Position.diagnostic(board)
    else:
        pos = Position.start(board)
    sys.stdout.write(render(pos))
    ok, deficit = pos.is_valid()
    if not ok:
        logging.warning("stone count off by %d (expected %d)", deficit, board.total_stones)
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

            print(_ver("mancala"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd is None:
        parser.print_help()
        return 0

    try:
        settings = _settings(ns)
        if ns.cmd == "generate":
            return _cmd_generate(ns, settings, argv)
        if ns.cmd == "play":
            return _cmd_play(ns, settings)
        if ns.cmd == "show":
            return _cmd_show(ns, settings)
    except (MancalaError, ValueError) as exc:
        logging.error("%s", exc)
        return 2
    except RuntimeError as exc:
        logging.error("%s", exc)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
