"""
test_main.py
------------
Command-line entry point.
"""

import pytest
from PIL import Image

from photoframe.main import main


def test_list_prints_catalogs(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "kodak_portra" in out
    assert "polaroid" in out
    assert "instax_square" in out


def test_unknown_filter_exits_2(gray_png, tmp_path, capsys):
    code = main(["-i", str(gray_png), "-o", str(tmp_path / "o.png"), "--filter", "nope"])
    assert code == 2
    assert "nope" in capsys.readouterr().out


def test_unknown_date_format_exits_2(gray_png, tmp_path):
    assert main(["-i", str(gray_png), "-o", str(tmp_path / "o.png"), "--date-stamp", "--date-format", "xx"]) == 2


def test_missing_input_exits_2(tmp_path):
    assert main(["-i", str(tmp_path / "missing.png"), "-o", str(tmp_path / "o.png")]) == 2


def test_input_and_output_are_required():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_full_run_writes_framed_image(gray_png, tmp_path):
    out_path = tmp_path / "framed.jpg"
    code = main([
        "-i", str(gray_png),
        "-o", str(out_path),
        "--filter", "kodak_gold",
        "--frame", "thick_white",
        "--brightness", "0.1",
        "--shot-on", "--make", "Canon", "--model", "Canon EOS R5",
        "--date-stamp", "--date-format", "yyyy/MM/dd",
    ])
    assert code == 0
    with Image.open(out_path) as saved:
        # border int(40 * 0.06) = 2 on each side
        assert saved.size == (44, 34)
        assert saved.mode == "RGB"
