"""Tests for the gfa2_inspect command-line script."""
from pathlib import Path

import orjson
import pytest

from gfa2codec.name_map import NameMap
from scripts.gfa2_inspect import main

GOOD = "H\tVN:Z:2.0\nS\tA\t10\tAAAAAAACGT\nE\t1\tA+\tB+\t6\t10$\t0\t4\t4M\tTS:i:2\n"
BAD = "S\tA\t10\tAAAAAAACGT\nS\tB\tten\tACGT\nE\t1\tA+\tB+\t6\t10$\t0\t4\t4M\n"


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def _summary(capsys: pytest.CaptureFixture[str]) -> dict[str, object]:
    return orjson.loads(capsys.readouterr().out)


class TestGfa2Inspect:
    def test_summary_and_outputs(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        gfa = _write(tmp_path, "toy.gfa2", GOOD)
        map_path = tmp_path / "out" / "names.json"
        translated = tmp_path / "out" / "toy.idx.gfa2"
        code = main([
            "--input", str(gfa),
            "--name-map-out", str(map_path),
            "--translated-out", str(translated),
        ])
        assert code == 0
        summary = _summary(capsys)
        assert summary["status"] == "ok"
        assert summary["names"] == 3
        assert summary["record_counts"]["S"] == 1  # type: ignore[index]
        assert NameMap.load_json(map_path).forward == {"A": 0, "B": 1, "1": 2}
        assert translated.read_text(encoding="utf-8") == (
            "H\tVN:Z:2.0\nS\t0\t10\tAAAAAAACGT\nE\t2\t0+\t1+\t6\t10$\t0\t4\t4M\tTS:i:2\n"
        )

    def test_parse_failure_exits_nonzero(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        gfa = _write(tmp_path, "bad.gfa2", BAD)
        assert main(["--input", str(gfa)]) == 1
        summary = _summary(capsys)
        assert summary["status"] == "parse_error"
        assert summary["error"]["line_number"] == 2  # type: ignore[index]

    def test_skip_errors(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        gfa = _write(tmp_path, "bad.gfa2", BAD)
        assert main(["--input", str(gfa), "--skip-errors"]) == 0
        summary = _summary(capsys)
        assert summary["status"] == "ok_with_diagnostics"
        assert summary["skipped_lines"] == [2]

    def test_config_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        gfa = _write(tmp_path, "bad.gfa2", BAD)
        config = tmp_path / "parser.json"
        config.write_bytes(orjson.dumps({"on_error": "skip"}))
        assert main(["--input", str(gfa), "--config", str(config)]) == 0
        assert _summary(capsys)["config"]["on_error"] == "skip"  # type: ignore[index]

    def test_stale_name_map(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        gfa = _write(tmp_path, "toy.gfa2", GOOD)
        other = _write(tmp_path, "other.gfa2", "S\tZ\t1\tA\n")
        map_path = tmp_path / "names.json"
        assert main(["--input", str(other), "--name-map-out", str(map_path)]) == 0
        capsys.readouterr()
        assert main(["--input", str(gfa), "--name-map-in", str(map_path)]) == 1
        assert _summary(capsys)["status"] == "translation_error"

    def test_missing_input(self, tmp_path: Path) -> None:
        assert main(["--input", str(tmp_path / "absent.gfa2")]) == 1
