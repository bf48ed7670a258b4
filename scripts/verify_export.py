#!/usr/bin/env python3
"""
Verify a Mancala generator output directory.

Checks performed:
- manifest.json exists and is parseable
- Row counts in manifest are positive (>0)
- Files listed in manifest exist (if not None)
- SHA256 checksums of files match manifest.checksums
- Record and position counts in the record file match manifest.row_counts
- result_split matches the outcome codes in the record file
- Every record parses, conserves stones and is listed at most once

Exit codes:
 0 on success, 1 on a validation failure, 2 when the manifest is unusable.
"""
from __future__ import annotations

import argparse
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Set, Tuple

from mancala.board import BoardConfig
from mancala.datasets import sha256_file
from mancala.errors import MancalaError
from mancala.generator import read_records
from mancala.position import Position


def check_records(path: Path, config: BoardConfig, rc: Dict[str, Any], split: Dict[str, Any]) -> bool:
    ok = True
    seen: Set[Tuple[str, int]] = set()
    sources: Set[str] = set()
    results: Counter = Counter()
    with path.open("r", encoding="utf-8") as f:
        try:
            for r in read_records(f):
                pair = (r.position_key, r.move)
                if pair in seen:
                    print(f"ERROR: duplicate record {r.position_key};{r.move}", file=sys.stderr)
                    ok = False
                seen.add(pair)
                sources.add(r.position_key)
                results[r.result.name] += 1
                for key in (r.position_key, r.result_key):
                    valid, deficit = Position.from_key(config, key).is_valid()
                    if not valid:
                        print(f"ERROR: {key} is off by {deficit} stones", file=sys.stderr)
                        ok = False
        except MancalaError as e:
            print(f"ERROR: bad record in {path}: {e}", file=sys.stderr)
            return False

    if rc.get("records") != len(seen):
        print(f"ERROR: records count mismatch: manifest={rc.get('records')} actual={len(seen)}", file=sys.stderr)
        ok = False
    if rc.get("positions") != len(sources):
        print(f"ERROR: positions count mismatch: manifest={rc.get('positions')} actual={len(sources)}", file=sys.stderr)
        ok = False
    if dict(results) != split:
        print(f"ERROR: result_split mismatch: manifest={split} actual={dict(results)}", file=sys.stderr)
        ok = False
    return ok


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Verify Mancala generator output")
    ap.add_argument("out", type=Path, help="Output directory (contains manifest.json)")
    ns = ap.parse_args(argv)
    out = ns.out
    manifest_path = out / "manifest.json"
    if not manifest_path.exists():
        print(f"ERROR: manifest not found: {manifest_path}", file=sys.stderr)
        return 2
    try:
        manifest = json.loads(manifest_path.read_text())
        args = manifest["args"]
        config = BoardConfig(width=args["width"], stones=args["stones"])
    except (ValueError, KeyError, TypeError) as e:
        print(f"ERROR: failed to parse manifest: {e}", file=sys.stderr)
        return 2

    ok = True
    files: Dict[str, Any] = manifest.get("files", {}) or {}
    checksums: Dict[str, Any] = manifest.get("checksums", {}) or {}

    # Manifest row counts must be positive
    rc = manifest.get("row_counts", {}) or {}
    for label in ("records", "positions"):
        if not isinstance(rc.get(label, None), int) or rc.get(label, 0) <= 0:
            print(f"ERROR: manifest.row_counts.{label} must be a positive integer", file=sys.stderr)
            ok = False

    # Validate file existence and checksums
    for label, p in files.items():
        if p is None:
            continue
        fp = Path(p)
        if not fp.exists():
            print(f"ERROR: missing file listed in manifest: {label} -> {fp}", file=sys.stderr)
            ok = False
            continue
        want = checksums.get(label)
        have = sha256_file(fp)
        if want and want != have:
            print(f"ERROR: checksum mismatch for {label}: manifest={want} computed={have}", file=sys.stderr)
            ok = False

    records = files.get("records")
    if records and Path(records).exists():
        if not check_records(Path(records), config, rc, manifest.get("result_split", {}) or {}):
            ok = False

    if not ok:
        return 1
    print("OK: export verified", file=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
