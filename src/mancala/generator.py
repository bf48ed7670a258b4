"""
Exhaustive enumeration of every (position, move) pair reachable from a start.

Each pair is evaluated exactly once and produces one record:

    <positionKey>;<move>;<validMovesCsv>;<outcomeCode>;<resultKey>

validMovesCsv lists the legal moves of the source position and resultKey is
the engine result before any change of perspective. Work proceeds in rounds:
pairs discovered while a round runs are deferred to the next round.
"""
from __future__ import annotations

import logging
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, Iterator, List, Optional, Set, TextIO, Tuple

from .board import BoardConfig
from .engine import MoveResult, move
from .errors import GeneratorError, MancalaError, ParseError
from .position import Position

logger = logging.getLogger(__name__)

Entry = Tuple[str, int]


@dataclass(frozen=True)
class GeneratorRecord:
    position_key: str
    move: int
    valid_moves: Tuple[int, ...]
    result: MoveResult
    result_key: str

    def to_line(self) -> str:
        moves = ",".join(str(m) for m in self.valid_moves)
        return f"{self.position_key};{self.move};{moves};{int(self.result)};{self.result_key}\n"

    @staticmethod
    def from_line(line: str) -> "GeneratorRecord":
        parts = line.rstrip("\r\n").split(";")
        if len(parts) != 5:
            raise ParseError(f"expected 5 fields, got {len(parts)}: {line!r}")
        key, mv, moves, code, result_key = parts
        try:
            valid = tuple(int(m) for m in moves.split(",")) if moves else tuple()
            return GeneratorRecord(key, int(mv), valid, MoveResult(int(code)), result_key)
        except ValueError as exc:
            raise ParseError(f"malformed record {line!r}: {exc}") from None


@dataclass
class GenerateStats:
    records: int = 0
    rounds: int = 0
    positions: int = 0
    results: Counter = field(default_factory=Counter)


def _evaluate(config: BoardConfig, entry: Entry) -> Tuple[GeneratorRecord, Position]:
    key, mv = entry
    try:
        p = Position.from_key(config, key)
        outcome = move(p, mv)
    except MancalaError as exc:
        raise GeneratorError(f"cannot evaluate {key};{mv}: {exc}") from exc
    record = GeneratorRecord(key, mv, tuple(p.valid_moves()), outcome.result, outcome.position.as_key())
    nxt = outcome.position
    if outcome.result == MoveResult.END_OF_TURN:
        nxt = nxt.change_player()
    return record, nxt


def generate_records(start: Position, stats: Optional[GenerateStats] = None) -> Iterator[GeneratorRecord]:
    """Yield one record per reachable (position, move) pair, round by round."""
    if stats is None:
        stats = GenerateStats()
    config = start.config
    start_key = start.as_key()
    pending: Deque[Entry] = deque((start_key, m) for m in start.valid_moves())
    visited: Set[Entry] = set(pending)
    sources: Set[str] = set()

    while pending:
        worklist: List[Entry] = list(pending)
        pending.clear()
        stats.rounds += 1
        logger.debug("round %d: %d pending (%d visited)", stats.rounds, len(worklist), len(visited))
        for entry in worklist:
            record, nxt = _evaluate(config, entry)
            stats.records += 1
            stats.results[record.result.name] += 1
            sources.add(record.position_key)
            stats.positions = len(sources)
            yield record
            nxt_key = nxt.as_key()
            for m in nxt.valid_moves():
                candidate = (nxt_key, m)
                if candidate not in visited:
                    visited.add(candidate)
                    pending.append(candidate)

    logger.info(
        "Generated %d records over %d rounds from %d positions",
        stats.records,
        stats.rounds,
        stats.positions,
    )


def write_records(start: Position, stream: TextIO) -> GenerateStats:
    stats = GenerateStats()
    for record in generate_records(start, stats):
        stream.write(record.to_line())
    return stats


def read_records(lines: Iterable[str]) -> Iterator[GeneratorRecord]:
    for line in lines:
        if not line.strip():
            continue
        yield GeneratorRecord.from_line(line)
