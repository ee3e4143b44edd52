"""Tests for the single-file analysis CLI."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json
from pathlib import Path

import pytest

from scripts import analyze_file


def _write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_prompt_only_prints_both_prompts(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    data_file = _write_json(tmp_path / "flock.json", {"eggs": [1200, 1185]})
    requirements_file = _write_json(
        tmp_path / "requirements.json", {"context": "New feed supplier since May"}
    )

    exit_code = analyze_file.main(
        [
            str(data_file),
            "--type",
            "poultry_feeding",
            "--requirements",
            str(requirements_file),
            "--prompt-only",
        ]
    )

    out = capsys.readouterr().out
    assert exit_code == analyze_file.EXIT_OK
    assert "Poultry Feeding Operations Focus:" in out
    assert "**Analysis Type:** Poultry Feeding" in out
    assert "New feed supplier since May" in out


def test_missing_data_file_is_input_error(tmp_path: Path) -> None:
    exit_code = analyze_file.main([str(tmp_path / "absent.json"), "--prompt-only"])

    assert exit_code == analyze_file.EXIT_INPUT_ERROR


def test_non_object_data_is_input_error(tmp_path: Path) -> None:
    data_file = _write_json(tmp_path / "list.json", [1, 2, 3])

    exit_code = analyze_file.main([str(data_file), "--prompt-only"])

    assert exit_code == analyze_file.EXIT_INPUT_ERROR
