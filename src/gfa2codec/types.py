"""Primitive field values shared by every GFA2 record kind."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal


type Orientation = Literal["+", "-"]
type AlignmentKind = Literal["none", "cigar", "trace"]

FORWARD: Orientation = "+"
REVERSE: Orientation = "-"

_CIGAR_OP_RE = re.compile(r"([0-9]+)([MIDNSHPX=])")
_INT_TEXT_RE = re.compile(r"-?[0-9]+")


@dataclass(frozen=True, slots=True)
class Reference[N]:
    """An identifier plus a mandatory orientation suffix."""

    name: N
    orientation: Orientation

    def __post_init__(self) -> None:
        if self.orientation not in (FORWARD, REVERSE):
            raise ValueError(f"orientation must be '+' or '-', got {self.orientation!r}")

    @property
    def is_forward(self) -> bool:
        return self.orientation == FORWARD

    def flipped(self) -> Reference[N]:
        return Reference(self.name, REVERSE if self.is_forward else FORWARD)

    def to_gfa(self) -> str:
        return f"{self.name}{self.orientation}"


@dataclass(frozen=True, slots=True)
class Position:
    """Coordinate token, ``$``-terminated when it marks the segment end.

    ``value`` never includes the sentinel.
    """

    value: str
    is_end: bool = False

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("position value cannot be empty")

    def as_int(self) -> int:
        """Numeric value of the position; raises ValueError if not an integer."""
        return int(self.value)

    def to_gfa(self) -> str:
        return f"{self.value}$" if self.is_end else self.value


@dataclass(frozen=True, slots=True)
class IntField:
    """Signed integer field that keeps its wire spelling (``010``, ``-0``)."""

    value: int
    text: str

    def __post_init__(self) -> None:
        if not _INT_TEXT_RE.fullmatch(self.text):
            raise ValueError(f"integer text must match -?[0-9]+, got {self.text!r}")
        if int(self.text) != self.value:
            raise ValueError(f"integer text {self.text!r} does not spell {self.value}")

    @classmethod
    def of(cls, value: int) -> IntField:
        """Canonical spelling of ``value``."""
        return cls(value, str(value))

    @classmethod
    def parse(cls, text: str) -> IntField:
        return cls(int(text), text)

    def __int__(self) -> int:
        return self.value

    def to_gfa(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Alignment:
    """``*``, a CIGAR string, or a trace-point list."""

    kind: AlignmentKind
    text: str

    def __post_init__(self) -> None:
        if self.kind == "none" and self.text != "*":
            raise ValueError(f"absent alignment must be '*', got {self.text!r}")
        if self.kind != "none" and not self.text:
            raise ValueError(f"{self.kind} alignment text cannot be empty")

    @classmethod
    def absent(cls) -> Alignment:
        return cls("none", "*")

    @property
    def is_absent(self) -> bool:
        return self.kind == "none"

    def cigar_operations(self) -> list[tuple[int, str]]:
        """Decode a CIGAR alignment into ``(length, op)`` pairs."""
        if self.kind != "cigar":
            raise ValueError(f"not a CIGAR alignment: {self.text!r}")
        return [(int(length), op) for length, op in _CIGAR_OP_RE.findall(self.text)]

    def trace_points(self) -> list[int]:
        """Decode a trace alignment into its signed integer list."""
        if self.kind != "trace":
            raise ValueError(f"not a trace alignment: {self.text!r}")
        return [int(part) for part in self.text.split(",")]

    def to_gfa(self) -> str:
        return self.text
