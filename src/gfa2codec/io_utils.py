"""I/O utilities for JSON persistence.

orjson-backed JSON load/save used by NameMap persistence and parser
configuration files.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(Path(path).read_bytes())


def dumps_json(obj: Any, *, pretty: bool = False) -> bytes:
    """Serialize ``obj`` with sorted keys (indented when ``pretty``)."""
    opts = orjson.OPT_SORT_KEYS
    if pretty:
        opts |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, option=opts)


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_json(obj, pretty=pretty))
