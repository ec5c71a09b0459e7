"""Tests for the ``python -m jsonize`` command line."""

import json
import sys
from dataclasses import dataclass
from typing import Annotated

import pytest

from jsonize import Jsonize, jsonize
from jsonize.__main__ import load_type, main


@dataclass
class Pixel:
    x: int
    y: int
    colour: Annotated[str, jsonize(Jsonize.OPT)] = "black"


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["jsonize", *map(str, argv)])
    main()


@pytest.fixture
def pixel_file(tmp_path):
    path = tmp_path / "pixel.json"
    path.write_text('{"x": "1", "y": 2, "colour": "black", "alpha": 0.5}', encoding="utf-8")
    return path


class TestLoadType:
    """``module:Class`` references."""

    def test_resolves_class(self):
        assert load_type(f"{__name__}:Pixel") is Pixel
        assert load_type("json:JSONDecoder") is json.JSONDecoder

    @pytest.mark.parametrize(
        "spec", ["Pixel", ":Pixel", "json:", "no_such_module_xyz:A", "json:Missing", "json:dumps"]
    )
    def test_invalid(self, spec):
        with pytest.raises(ValueError):
            load_type(spec)


class TestMain:
    """Reading, decoding and printing files."""

    def test_reformat_raw(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "raw.json"
        path.write_text('{ "a" : [1,  2] }', encoding="utf-8")
        run_cli(monkeypatch, path, "--compact")
        assert capsys.readouterr().out == '{"a":[1,2]}\n'

    def test_decode_and_re_encode(self, monkeypatch, capsys, pixel_file):
        run_cli(monkeypatch, pixel_file, "--type", f"{__name__}:Pixel")
        assert json.loads(capsys.readouterr().out) == {"x": 1, "y": 2}

    def test_list(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "pixels.json"
        path.write_text('[{"x": 1, "y": 2, "colour": "red"}]', encoding="utf-8")
        run_cli(monkeypatch, path, "-t", f"{__name__}:Pixel", "--list", "--compact")
        assert capsys.readouterr().out == '[{"x":1,"y":2,"colour":"red"}]\n'

    def test_decode_failure_exits(self, monkeypatch, tmp_path):
        path = tmp_path / "pixel.json"
        path.write_text('{"x": 1}', encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, path, "--type", f"{__name__}:Pixel")
        assert exc_info.value.code == 1

    def test_missing_file_exits(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, tmp_path / "missing.json")
        assert exc_info.value.code == 1

    def test_invalid_type_exits(self, monkeypatch, pixel_file):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, pixel_file, "--type", "not-a-reference")
        assert exc_info.value.code == 1

    def test_list_requires_type(self, monkeypatch, pixel_file):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, pixel_file, "--list")
        assert exc_info.value.code == 1

    def test_no_class_key(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "pixel.json"
        path.write_text('{"class": "Unknown", "x": 3, "y": 4}', encoding="utf-8")
        run_cli(monkeypatch, path, "--type", f"{__name__}:Pixel", "--no-class-key", "--compact")
        assert capsys.readouterr().out == '{"x":3,"y":4}\n'

    def test_unknown_class_tag_exits(self, monkeypatch, tmp_path):
        path = tmp_path / "pixel.json"
        path.write_text('{"class": "Unknown", "x": 3, "y": 4}', encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, path, "--type", f"{__name__}:Pixel")
        assert exc_info.value.code == 1
