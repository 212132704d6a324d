"""JSON and JSONL helpers for symbol artifacts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from pydantic import BaseModel


def _write_jsonl(path: Path, records: Iterable[BaseModel]) -> None:
    """Write one sorted-key JSON object per record."""
    path.write_bytes(
        b"".join(
            orjson.dumps(record.model_dump(mode="json"), option=orjson.OPT_SORT_KEYS)
            + b"\n"
            for record in records
        )
    )


def _dump_json(model: BaseModel) -> bytes:
    return orjson.dumps(
        model.model_dump(mode="json"),
        option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2,
    )


def _load_jsonl(path: Path) -> list[dict[str, Any]]:
    """Read the object rows of a JSONL artifact, skipping blank lines."""
    rows = (orjson.loads(line) for line in path.read_bytes().splitlines() if line)
    return [row for row in rows if isinstance(row, dict)]


def _relative_output_dir(out_dir: Path, root: Path) -> str:
    """Root-relative POSIX path of ``out_dir``, or ``""`` when it lies outside."""
    try:
        relative = out_dir.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return ""
    posix = relative.as_posix()
    return "" if posix == "." else posix
