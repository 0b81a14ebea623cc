"""GFA2 codec: line grammar, optional fields, record assembly, name interning."""

from gfa2codec.config import LENIENT, STRICT, ParserConfig, load_parser_config
from gfa2codec.errors import (
    Err,
    Gfa2Error,
    HashMismatch,
    MalformedField,
    Ok,
    OptionalFieldSyntaxError,
    ParseDiagnostic,
    ParseError,
    Result,
    StructuralError,
    TranslationMiss,
    diagnostic_to_dict,
)
from gfa2codec.name_map import NameMap, compute_content_hash
from gfa2codec.parser import (
    ParseResult,
    parse_document,
    parse_line,
    parse_line_result,
    parse_lines,
    parse_text,
)
from gfa2codec.records import (
    Comment,
    CustomRecord,
    Document,
    Edge,
    Fragment,
    Gap,
    GroupOrdered,
    GroupUnordered,
    Header,
    Record,
    Segment,
    record_kind,
)
from gfa2codec.tags import OptionalField, find_tag
from gfa2codec.types import Alignment, IntField, Position, Reference
from gfa2codec.writer import document_to_text, format_document, format_record

__all__ = [
    "Alignment",
    "Comment",
    "CustomRecord",
    "Document",
    "Edge",
    "Err",
    "Fragment",
    "Gap",
    "Gfa2Error",
    "GroupOrdered",
    "GroupUnordered",
    "HashMismatch",
    "Header",
    "IntField",
    "LENIENT",
    "MalformedField",
    "NameMap",
    "Ok",
    "OptionalField",
    "OptionalFieldSyntaxError",
    "ParseDiagnostic",
    "ParseError",
    "ParseResult",
    "ParserConfig",
    "Position",
    "Record",
    "Reference",
    "Result",
    "STRICT",
    "Segment",
    "StructuralError",
    "TranslationMiss",
    "compute_content_hash",
    "diagnostic_to_dict",
    "document_to_text",
    "find_tag",
    "format_document",
    "format_record",
    "load_parser_config",
    "parse_document",
    "parse_line",
    "parse_line_result",
    "parse_lines",
    "parse_text",
    "record_kind",
]
