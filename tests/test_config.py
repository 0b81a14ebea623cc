"""Tests for parser configuration loading and validation."""
from pathlib import Path

import orjson
import pytest

from gfa2codec.config import (
    LENIENT,
    STRICT,
    ParserConfig,
    config_to_dict,
    load_parser_config,
)


class TestParserConfig:
    def test_defaults_are_strict(self) -> None:
        assert ParserConfig() == STRICT
        assert STRICT.is_strict
        assert not LENIENT.is_strict

    def test_invalid_policy(self) -> None:
        with pytest.raises(ValueError, match="on_error"):
            ParserConfig(on_error="ignore")  # type: ignore[arg-type]

    def test_invalid_tag_mode(self) -> None:
        with pytest.raises(ValueError, match="tag_mode"):
            ParserConfig(tag_mode="loose")  # type: ignore[arg-type]

    def test_non_bool_flag(self) -> None:
        with pytest.raises(ValueError):
            ParserConfig(skip_blank_lines="yes")  # type: ignore[arg-type]

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValueError, match="Unknown parser config keys"):
            ParserConfig.from_dict({"on_error": "skip", "verbose": True})

    def test_dict_round_trip(self) -> None:
        assert ParserConfig.from_dict(config_to_dict(LENIENT)) == LENIENT


class TestLoadParserConfig:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "parser.json"
        path.write_bytes(orjson.dumps({"on_error": "skip", "tag_mode": "permissive"}))
        assert load_parser_config(path) == LENIENT

    def test_load_rejects_array(self, tmp_path: Path) -> None:
        path = tmp_path / "parser.json"
        path.write_bytes(b'["skip"]')
        with pytest.raises(ValueError, match="JSON object"):
            load_parser_config(path)
