import sys

import pytest
from loguru import logger
from PIL import Image

from asciicam.cli import main
from tests.conftest import FONT_PATH, needs_font


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["asciicam", *argv])
    main()


@pytest.fixture
def black_png(tmp_path):
    path = tmp_path / "black.png"
    Image.new("RGB", (20, 20), (0, 0, 0)).save(path)
    return path


def test_prints_text(monkeypatch, capsys, black_png):
    _run(monkeypatch, str(black_png), "-s", "10")
    assert capsys.readouterr().out == "\n".join(["$" * 10] * 6) + "\n"


def test_colour_mode_prints_ansi(monkeypatch, capsys, black_png):
    _run(monkeypatch, str(black_png), "-s", "4", "-m", "rainbow")
    assert "\033[38;2;" in capsys.readouterr().out


def test_config_file_with_override(monkeypatch, capsys, tmp_path, black_png):
    config = tmp_path / "options.yaml"
    config.write_text("ascii_width: 40\ncharset: blocks\n", encoding="utf-8")
    _run(monkeypatch, str(black_png), "--config", str(config), "-s", "5")
    lines = capsys.readouterr().out.rstrip("\n").split("\n")
    assert lines[0] == "█" * 5


def test_missing_file_exits(monkeypatch, capsys, tmp_path):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, str(tmp_path / "missing.png"))
    assert exc.value.code == 1
    assert "File not found" in capsys.readouterr().err


def test_invalid_options_exit(monkeypatch, capsys, black_png):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, str(black_png), "-c", "259")
    assert exc.value.code == 2
    assert "Invalid options" in capsys.readouterr().err


@needs_font
def test_writes_png(monkeypatch, tmp_path, black_png):
    out = tmp_path / "out.png"
    _run(monkeypatch, str(black_png), "-s", "10", "-o", str(out), "--font", FONT_PATH)
    with Image.open(out) as image:
        assert image.size == (70, 72)
