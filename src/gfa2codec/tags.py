"""Optional-field codec: trailing ``TAG:TYPE:VALUE`` tuples.

Wire grammar (one field, tab-separated from its neighbours)::

    field := TAG ':' TYPE ':' VALUE
    TAG   := [A-Za-z0-9][A-Za-z0-9]
    TYPE  := 'A' | 'i' | 'f' | 'Z' | 'J' | 'H' | 'B'

Per-type VALUE grammar:

    A  single printable character           [!-~]
    i  signed integer                       [-+]?[0-9]+
    f  float                                [-+]?[0-9]*\\.?[0-9]+([eE][-+]?[0-9]+)?
    Z  printable string, spaces allowed     [ !-~]*
    J  opaque printable text (JSON)         [ !-~]*
    H  even-length hex string               ([0-9A-Fa-f]{2})*
    B  numeric array                        [cCsSiI](,int)* | f(,float)*

Values are kept as wire text so that format(parse(x)) == x byte for byte;
``OptionalField.typed_value()`` decodes on demand.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

import orjson

from gfa2codec.errors import (
    OptionalFieldSyntaxError,
    ParseDiagnostic,
    StructuralError,
)


type TagType = Literal["A", "i", "f", "Z", "J", "H", "B"]
type TagMode = Literal["strict", "permissive"]

TAG_TYPES: frozenset[str] = frozenset({"A", "i", "f", "Z", "J", "H", "B"})
TAG_MODES: frozenset[str] = frozenset({"strict", "permissive"})

_INT = r"[-+]?[0-9]+"
_FLOAT = r"[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?"

_TAG_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9]")

VALUE_GRAMMARS: dict[str, str] = {
    "A": r"[!-~]",
    "i": _INT,
    "f": _FLOAT,
    "Z": r"[ !-~]*",
    "J": r"[ !-~]*",
    "H": r"(?:[0-9A-Fa-f]{2})*",
    "B": rf"[cCsSiI](?:,{_INT})*|f(?:,{_FLOAT})*",
}
_VALUE_RES: dict[str, re.Pattern[str]] = {
    type_code: re.compile(pattern) for type_code, pattern in VALUE_GRAMMARS.items()
}

_FIELD_GRAMMAR = "TAG:TYPE:VALUE with TAG=[A-Za-z0-9]{2}, TYPE in AifZJHB"


# ---------------------------------------------------------------------------
# OptionalField
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OptionalField:
    """One ``TAG:TYPE:VALUE`` field. ``value`` is the exact wire text."""

    tag: str
    type: TagType
    value: str

    def __post_init__(self) -> None:
        if not _TAG_RE.fullmatch(self.tag):
            raise ValueError(f"tag must be two alphanumerics, got {self.tag!r}")
        if self.type not in TAG_TYPES:
            raise ValueError(f"unknown optional field type {self.type!r}")
        if not _VALUE_RES[self.type].fullmatch(self.value):
            raise ValueError(
                f"value {self.value!r} does not match type {self.type} "
                f"({VALUE_GRAMMARS[self.type]})",
            )

    @classmethod
    def from_value(cls, tag: str, type_code: TagType, value: Any) -> OptionalField:
        """Build a field from a Python value, encoding it to wire text."""
        return cls(tag, type_code, encode_value(type_code, value))

    def typed_value(self) -> Any:
        """Decode the wire text according to the field type.

        A/Z -> str, i -> int, f -> float, J -> parsed JSON, H -> bytes,
        B -> (subtype, list of numbers).
        """
        match self.type:
            case "i":
                return int(self.value)
            case "f":
                return float(self.value)
            case "J":
                return orjson.loads(self.value)
            case "H":
                return bytes.fromhex(self.value)
            case "B":
                subtype, _, rest = self.value.partition(",")
                convert = float if subtype == "f" else int
                numbers = [convert(item) for item in rest.split(",")] if rest else []
                return subtype, numbers
            case _:
                return self.value

    def to_gfa(self) -> str:
        return f"{self.tag}:{self.type}:{self.value}"


def encode_value(type_code: TagType, value: Any) -> str:
    """Encode a Python value into the wire text of ``type_code``."""
    match type_code:
        case "i":
            return str(int(value))
        case "f":
            return repr(float(value))
        case "J":
            return orjson.dumps(value).decode()
        case "H":
            return bytes(value).hex().upper()
        case "B":
            subtype, numbers = value
            return ",".join([str(subtype), *(str(n) for n in numbers)])
        case "A" | "Z":
            return str(value)
    raise ValueError(f"unknown optional field type {type_code!r}")


def find_tag(tags: Iterable[OptionalField], tag: str) -> OptionalField | None:
    """First field carrying ``tag``, or None."""
    for field in tags:
        if field.tag == tag:
            return field
    return None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _syntax_error(
    message: str,
    text: str,
    *,
    offset: int,
    field_index: int,
    record_kind: str,
    expected: str = _FIELD_GRAMMAR,
) -> OptionalFieldSyntaxError:
    return OptionalFieldSyntaxError(
        ParseDiagnostic(
            error_kind="optional_field_syntax",
            message=message,
            record_kind=record_kind,
            byte_start=offset,
            byte_end=offset + len(text),
            field_index=field_index,
            expected=expected,
        ),
    )


def parse_one(
    text: str,
    *,
    offset: int = 0,
    field_index: int = -1,
    record_kind: str = "",
) -> OptionalField:
    """Parse one field (no surrounding tabs).

    ``offset`` is the field's character offset within its line and only
    affects the location reported on failure.
    """
    location = {"offset": offset, "field_index": field_index, "record_kind": record_kind}
    if len(text) < 5 or text[2] != ":" or text[4] != ":":
        raise _syntax_error(f"malformed optional field {text!r}", text, **location)
    tag, type_code, value = text[:2], text[3], text[5:]
    if not _TAG_RE.fullmatch(tag):
        raise _syntax_error(
            f"tag {tag!r} is not two alphanumerics",
            text,
            expected="[A-Za-z0-9][A-Za-z0-9]",
            **location,
        )
    if type_code not in TAG_TYPES:
        raise _syntax_error(
            f"unknown optional field type {type_code!r} in {text!r}",
            text,
            expected="one of A, i, f, Z, J, H, B",
            **location,
        )
    if not _VALUE_RES[type_code].fullmatch(value):
        raise _syntax_error(
            f"value {value!r} is not a valid {type_code!r} value",
            text,
            expected=VALUE_GRAMMARS[type_code],
            **location,
        )
    return OptionalField(tag, type_code, value)  # type: ignore[arg-type]


def parse_all(
    tail: str,
    *,
    mode: TagMode = "strict",
    offset: int = 0,
    first_field_index: int = 1,
    record_kind: str = "",
) -> tuple[tuple[OptionalField, ...], list[ParseDiagnostic]]:
    """Parse the tail of a record: ``""`` or ``"\\tF1\\tF2..."``.

    Returns the parsed fields in wire order plus the diagnostics for fields
    dropped in permissive mode. In strict mode the first bad field raises.
    """
    if not tail:
        return (), []
    if tail[0] != "\t":
        raise StructuralError(
            ParseDiagnostic(
                error_kind="structural",
                message=f"trailing bytes {tail!r} are not tab-separated optional fields",
                record_kind=record_kind,
                byte_start=offset,
                byte_end=offset + len(tail),
                expected="\\t" + _FIELD_GRAMMAR,
            ),
        )

    fields: list[OptionalField] = []
    dropped: list[ParseDiagnostic] = []
    cursor = offset + 1
    for index, text in enumerate(tail[1:].split("\t")):
        field_index = first_field_index + index
        try:
            if not text:
                raise StructuralError(
                    ParseDiagnostic(
                        error_kind="structural",
                        message="empty optional field (stray or repeated tab)",
                        record_kind=record_kind,
                        byte_start=max(offset, cursor - 1),
                        byte_end=cursor,
                        field_index=field_index,
                        expected="exactly one tab between optional fields",
                    ),
                )
            fields.append(
                parse_one(
                    text,
                    offset=cursor,
                    field_index=field_index,
                    record_kind=record_kind,
                ),
            )
        except (OptionalFieldSyntaxError, StructuralError) as exc:
            if mode == "strict":
                raise
            dropped.append(exc.diagnostic)
        cursor += len(text) + 1
    return tuple(fields), dropped


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_one(field: OptionalField) -> str:
    return field.to_gfa()


def format_all(tags: Iterable[OptionalField]) -> str:
    """Tab-prefixed tail for a record; empty string when there are no tags."""
    return "".join(f"\t{field.to_gfa()}" for field in tags)
