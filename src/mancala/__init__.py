"""mancala package.

Position engine, move strategies, the reachable-position generator and a
small CLI for a two-player Mancala-family sowing game.

Convenience imports are exposed for common workflows.
"""

from .board import BoardConfig
from .datasets import GenerateArgs, run_generate
from .engine import MoveOutcome, MoveResult, move, try_move
from .errors import (
    EmptyHole,
    GeneratorError,
    IllegalMove,
    MancalaError,
    OutOfRangeHole,
    ParseError,
    UnknownStrategy,
)
from .generator import GenerateStats, GeneratorRecord, generate_records, read_records, write_records
from .position import Position
from .strategies import ExternalStrategy, RandomStrategy, ScriptedStrategy, Strategy, StrategyKind, create_strategy

__all__ = [
    "BoardConfig",
    "Position",
    "MoveOutcome",
    "MoveResult",
    "move",
    "try_move",
    "Strategy",
    "StrategyKind",
    "RandomStrategy",
    "ExternalStrategy",
    "ScriptedStrategy",
    "create_strategy",
    "GeneratorRecord",
    "GenerateStats",
    "generate_records",
    "write_records",
    "read_records",
    "GenerateArgs",
    "run_generate",
    "MancalaError",
    "IllegalMove",
    "OutOfRangeHole",
    "EmptyHole",
    "ParseError",
    "UnknownStrategy",
    "GeneratorError",
]
