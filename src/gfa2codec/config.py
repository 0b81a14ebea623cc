"""Parser configuration: error policy and optional-field mode.

Loaded from JSON (orjson) so a pipeline can pin its tolerance settings
next to its inputs::

    {"on_error": "skip", "tag_mode": "permissive"}
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Literal

from gfa2codec.io_utils import load_json
from gfa2codec.tags import TAG_MODES, TagMode


type ErrorPolicy = Literal["raise", "skip"]

ERROR_POLICIES: frozenset[str] = frozenset({"raise", "skip"})


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """How the record assembler reacts to bad input.

    on_error:
        ``"raise"`` aborts the document on the first local-record failure;
        ``"skip"`` records a diagnostic, drops the line and continues.
    tag_mode:
        ``"strict"`` fails the whole record on a bad optional field;
        ``"permissive"`` drops the field and records a diagnostic.
    """

    on_error: ErrorPolicy = "raise"
    tag_mode: TagMode = "strict"
    record_line_order: bool = True
    report_custom_records: bool = False
    skip_blank_lines: bool = True

    def __post_init__(self) -> None:
        if self.on_error not in ERROR_POLICIES:
            raise ValueError(f"on_error must be 'raise' or 'skip', got {self.on_error!r}")
        if self.tag_mode not in TAG_MODES:
            raise ValueError(
                f"tag_mode must be 'strict' or 'permissive', got {self.tag_mode!r}",
            )
        for name in ("record_line_order", "report_custom_records", "skip_blank_lines"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a bool")

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ParserConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ValueError(f"Unknown parser config keys: {', '.join(unknown)}")
        return cls(**payload)

    @property
    def is_strict(self) -> bool:
        return self.on_error == "raise" and self.tag_mode == "strict"


STRICT = ParserConfig()
LENIENT = ParserConfig(on_error="skip", tag_mode="permissive")


def config_to_dict(config: ParserConfig) -> dict[str, Any]:
    return asdict(config)


def load_parser_config(path: Path) -> ParserConfig:
    """Load a ParserConfig from a JSON object file."""
    payload = load_json(path)
    if not isinstance(payload, dict):
        raise ValueError(f"Parser config must be a JSON object: {path}")
    return ParserConfig.from_dict(payload)
