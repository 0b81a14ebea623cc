"""Tests for the optional-field (TAG:TYPE:VALUE) codec."""
import pytest

from gfa2codec.errors import OptionalFieldSyntaxError, StructuralError
from gfa2codec.tags import (
    OptionalField,
    find_tag,
    format_all,
    format_one,
    parse_all,
    parse_one,
)


class TestParseOne:
    def test_integer_field(self) -> None:
        field = parse_one("TS:i:2")
        assert field == OptionalField("TS", "i", "2")
        assert field.typed_value() == 2

    def test_string_with_spaces(self) -> None:
        assert parse_one("xx:Z:hello world").value == "hello world"

    def test_empty_string_value(self) -> None:
        assert parse_one("CO:Z:").value == ""

    def test_tag_case_preserved(self) -> None:
        field = parse_one("ab:A:*")
        assert field.tag == "ab"
        assert format_one(field) == "ab:A:*"

    def test_float(self) -> None:
        assert parse_one("ID:f:-1.5e3").typed_value() == -1500.0

    def test_json_is_opaque_until_decoded(self) -> None:
        field = parse_one('JS:J:{"a": [1, 2]}')
        assert field.value == '{"a": [1, 2]}'
        assert field.typed_value() == {"a": [1, 2]}

    def test_hex(self) -> None:
        assert parse_one("HX:H:01ab").typed_value() == b"\x01\xab"

    def test_int_array(self) -> None:
        assert parse_one("BA:B:c,1,-2").typed_value() == ("c", [1, -2])

    def test_float_array(self) -> None:
        assert parse_one("BF:B:f,1.5,2").typed_value() == ("f", [1.5, 2.0])

    @pytest.mark.parametrize(
        "text",
        [
            "TS:q:2",      # unknown type
            "T:i:2",       # one-char tag
            "T_:i:2",      # non-alphanumeric tag
            "TS:i:abc",    # bad integer
            "TS:H:ABC",    # odd-length hex
            "TS:A:ab",     # multi-char A
            "TS:B:x,1",    # bad array subtype
            "TSi2",
        ],
    )
    def test_rejects(self, text: str) -> None:
        with pytest.raises(OptionalFieldSyntaxError):
            parse_one(text)

    def test_error_location(self) -> None:
        with pytest.raises(OptionalFieldSyntaxError) as exc_info:
            parse_one("TS:i:x", offset=12, field_index=4, record_kind="S")
        diag = exc_info.value.diagnostic
        assert diag.error_kind == "optional_field_syntax"
        assert (diag.byte_start, diag.byte_end) == (12, 18)
        assert diag.field_index == 4


class TestParseAll:
    def test_empty_tail(self) -> None:
        assert parse_all("") == ((), [])

    def test_fields_in_wire_order(self) -> None:
        fields, dropped = parse_all("\tTS:i:2\tZZ:Z:x")
        assert [f.tag for f in fields] == ["TS", "ZZ"]
        assert dropped == []

    def test_tail_must_start_with_tab(self) -> None:
        with pytest.raises(StructuralError):
            parse_all("TS:i:2")

    def test_strict_mode_raises(self) -> None:
        with pytest.raises(OptionalFieldSyntaxError):
            parse_all("\tTS:i:2\tbad\tZZ:Z:x")

    def test_permissive_mode_drops(self) -> None:
        fields, dropped = parse_all("\tTS:i:2\tbad\tZZ:Z:x", mode="permissive")
        assert [f.tag for f in fields] == ["TS", "ZZ"]
        assert len(dropped) == 1
        assert dropped[0].error_kind == "optional_field_syntax"

    def test_stray_tab_strict(self) -> None:
        with pytest.raises(StructuralError):
            parse_all("\tTS:i:2\t")

    def test_stray_tab_permissive(self) -> None:
        fields, dropped = parse_all("\tTS:i:2\t", mode="permissive")
        assert len(fields) == 1
        assert dropped[0].error_kind == "structural"

    def test_format_reproduces_tail(self) -> None:
        tail = "\tTS:i:+2\tRC:f:.5\tCO:Z:two words\tBA:B:C,1,2"
        fields, _ = parse_all(tail)
        assert format_all(fields) == tail


class TestConstruction:
    def test_from_value_hex(self) -> None:
        assert OptionalField.from_value("XX", "H", b"\x01\xab").value == "01AB"

    def test_from_value_json(self) -> None:
        assert OptionalField.from_value("JS", "J", {"a": [1, 2]}).value == '{"a":[1,2]}'

    def test_from_value_array(self) -> None:
        assert OptionalField.from_value("BA", "B", ("i", [1, -2])).value == "i,1,-2"

    def test_invalid_value_rejected(self) -> None:
        with pytest.raises(ValueError):
            OptionalField("TS", "i", "two")

    def test_find_tag(self) -> None:
        fields = (OptionalField("TS", "i", "2"), OptionalField("CO", "Z", "x"))
        assert find_tag(fields, "CO") == OptionalField("CO", "Z", "x")
        assert find_tag(fields, "NO") is None


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        ["AA:A:+", "NM:i:-3", "RC:f:2.5e-3", "CO:Z:a b", 'JS:J:[1,"x"]', "HX:H:FF00", "BB:B:S,1,2"],
    )
    def test_every_type(self, text: str) -> None:
        field = parse_one(text)
        assert format_one(field) == text
        assert parse_one(format_one(field)) == field
