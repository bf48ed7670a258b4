"""
Export of the reachable move graph.

Runs the generator for one board configuration and writes:
- <out>/<filename>: one record line per reachable (position, move) pair
- <out>/<stem>.parquet: the same records as a table (optional, pandas+pyarrow)
- <out>/manifest.json: provenance, counts and checksums
"""
from __future__ import annotations

import hashlib
import importlib.util
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from .board import BoardConfig
from .generator import GenerateStats, read_records, write_records
from .paths import get_git_commit, get_git_is_dirty
from .position import Position
from .tracking import log_artifact, log_metrics, log_params

logger = logging.getLogger(__name__)

DATASET_VERSION = "1.0.0"
FORMATS = ("text", "parquet", "both")


@dataclass
class GenerateArgs:
    out: Path
    board: BoardConfig = field(default_factory=BoardConfig)
    filename: str = "positions.txt"
    format: str = "text"  # one of: "text", "parquet", "both"
    cli_argv: List[str] | None = None
    track: bool = False  # log params/artifacts to the active MLflow run


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def _have_parquet_deps() -> bool:
    return importlib.util.find_spec("pandas") is not None and importlib.util.find_spec("pyarrow") is not None


def _package_versions() -> Dict[str, str]:
    versions: Dict[str, str] = {}
    for pkg in ["numpy", "pandas", "pyarrow"]:
        if importlib.util.find_spec(pkg) is None:
            continue
        mod = __import__(pkg)
        ver = getattr(mod, "__version__", None)
        if ver:
            versions[pkg] = ver
    return versions


def write_parquet(records_path: Path, parquet_path: Path) -> int:
    import pandas as pd  # type: ignore

    with records_path.open("r", encoding="utf-8") as f:
        rows = [
            {
                "position": r.position_key,
                "move": r.move,
                "valid_moves": ",".join(str(m) for m in r.valid_moves),
                "result": int(r.result),
                "result_name": r.result.name,
                "result_position": r.result_key,
            }
            for r in read_records(f)
        ]
    pd.DataFrame(rows).to_parquet(parquet_path)
    return len(rows)


def run_generate(args: GenerateArgs) -> Path:
    """Generate all reachable records for args.board and write them under args.out."""
    fmt = (args.format or "text").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {args.format}")
    have_parquet = _have_parquet_deps()
    if fmt == "parquet" and not have_parquet:
        # Strict: fail before writing anything
        raise RuntimeError(
            "Parquet dependencies not available (install pandas and pyarrow). "
            "Use pip install .[parquet] to enable parquet support."
        )

    args.out.mkdir(parents=True, exist_ok=True)
    records_path = args.out / args.filename
    parquet_path = records_path.with_suffix(".parquet")

    start = Position.start(args.board)
    logger.info(
        "Generating reachable positions for width=%d stones=%d…", args.board.width, args.board.stones
    )
    partial = records_path.with_name(records_path.name + ".partial")
    try:
        with partial.open("w", encoding="utf-8", newline="\n") as f:
            stats: GenerateStats = write_records(start, f)
    except BaseException:
        partial.unlink(missing_ok=True)
        raise
    partial.replace(records_path)
    logger.info("Wrote %s (%d records)", records_path, stats.records)

    wrote_parquet = False
    if fmt in {"parquet", "both"}:
        if have_parquet:
            write_parquet(records_path, parquet_path)
            wrote_parquet = True
            logger.info("Wrote Parquet file %s", parquet_path)
        else:
            logger.warning(
                "Parquet dependencies not available; proceeding with text only, "
                "manifest will record parquet_written=false."
            )

    files: Dict[str, Any] = {
        "records": str(records_path),
        "parquet": str(parquet_path) if wrote_parquet else None,
    }
    checksums = {label: sha256_file(Path(p)) for label, p in files.items() if p is not None}

    manifest = {
        "dataset_version": DATASET_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {
            "width": args.board.width,
            "stones": args.board.stones,
            "filename": args.filename,
            "format": fmt,
        },
        "git_commit": get_git_commit(),
        "git_is_dirty": get_git_is_dirty(),
        "python": {
            "python_version": sys.version.split(" ")[0],
            "packages": _package_versions(),
        },
        "cli_argv": args.cli_argv,
        "start_position": start.as_key(),
        "row_counts": {
            "records": stats.records,
            "positions": stats.positions,
        },
        "rounds": stats.rounds,
        "result_split": dict(sorted(stats.results.items())),
        "files": files,
        "checksums": checksums,
        "parquet_written": wrote_parquet,
    }
    manifest_path = args.out / "manifest.json"
    manifest_path.write_text(json.dumps(manifest, indent=2))
    logger.info("Wrote manifest.json")

    if args.track:
        _track(args, stats, manifest_path, records_path, parquet_path if wrote_parquet else None)

    return args.out


def _track(args: GenerateArgs, stats: GenerateStats, manifest_path: Path, records_path: Path, parquet_path: Path | None) -> None:
    log_params({
        "width": args.board.width,
        "stones": args.board.stones,
        "format": args.format,
    })
    log_metrics({
        "records": float(stats.records),
        "positions": float(stats.positions),
        "rounds": float(stats.rounds),
    })
    log_artifact(manifest_path)
    log_artifact(records_path)
    if parquet_path is not None:
        log_artifact(parquet_path)
