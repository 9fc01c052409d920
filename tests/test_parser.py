import io

import pytest

from shapecraft.codes import MAX_HEIGHT, QUAD_SIZE, create_value, save_map_binary
from shapecraft.parser import explain, main, parse_shape
from shapecraft.shape import Shape

TARGET = "Cu------:CuCuCuCu"
BASE = "Cu------"


def _recorded_map():
    base = Shape.from_string(BASE, MAX_HEIGHT).rotate_to_least()
    key = Shape.from_string(TARGET, MAX_HEIGHT).rotate_to_least().index()
    return {key: create_value(base.index(), 8)}


def test_parse_plain_text():
    assert parse_shape("CuCuCuCu") == Shape.from_string("CuCuCuCu", MAX_HEIGHT)


def test_parse_hex_matches_index():
    shape = Shape.from_string(TARGET, MAX_HEIGHT)
    parsed = parse_shape(hex(shape.index()))
    assert parsed == Shape.from_index(shape.index(), QUAD_SIZE, MAX_HEIGHT)
    assert parsed.index() == shape.index()


def test_parse_hex_keeps_max_height():
    assert parse_shape("0x3").max_height == MAX_HEIGHT


def test_parse_invalid_hex():
    with pytest.raises(ValueError):
        parse_shape("0xzz")


def test_parse_hex_out_of_range():
    with pytest.raises(ValueError):
        parse_shape("0x" + "f" * 17)


def test_explain_invalid_quadrant():
    shape = Shape.from_string("--------:P-------", MAX_HEIGHT)
    assert explain(shape, {}) == "Shape is not creatable due to an invalid quadrant."


def test_explain_separable():
    shape = Shape.from_string("CuCuCuCu", MAX_HEIGHT)
    assert explain(shape, {}) == "Shape is creatable due to separable."


def test_explain_recorded_method():
    shape = Shape.from_string(TARGET, MAX_HEIGHT)
    expected = (
        "Shape is creatable. Method:\n"
        f"\t{TARGET} from:\n"
        f"\t{BASE} stack: CuCuCuCu"
    )
    assert explain(shape, _recorded_map()) == expected


def test_explain_recorded_method_rotated():
    shape = Shape.from_string(TARGET, MAX_HEIGHT).rotate()
    text = explain(shape, _recorded_map())
    rotated_base = Shape.from_string(BASE, MAX_HEIGHT).rotate()
    assert text.endswith(f"\t{rotated_base} stack: CuCuCuCu")
    assert text.startswith(f"Shape is creatable. Method:\n\t{shape} from:\n")


def test_explain_leaves_shape_unchanged():
    shape = Shape.from_string(TARGET, MAX_HEIGHT).rotate()
    before = str(shape)
    explain(shape, _recorded_map())
    assert str(shape) == before


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.bin")]) == 1
    assert "Error opening file" in capsys.readouterr().err


def test_main_session(tmp_path, capsys, monkeypatch):
    path = tmp_path / "map.bin"
    save_map_binary(path, _recorded_map())
    monkeypatch.setattr("sys.stdin", io.StringIO(f"CuCuCuCu {TARGET}\n0xzz\nexit\nCuCuCuCu\n"))
    assert main([str(path)]) == 0
    captured = capsys.readouterr()
    assert captured.out.count("Enter a shape to parse") == 4
    assert "Shape is creatable due to separable." in captured.out
    assert f"\t{BASE} stack: CuCuCuCu" in captured.out
    assert "Invalid hex number." in captured.err


def test_main_hex_input(tmp_path, capsys, monkeypatch):
    path = tmp_path / "map.bin"
    save_map_binary(path, {})
    index = Shape.from_string("CuCuCuCu").index()
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{hex(index)}\n"))
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "Shape created from hex: CuCuCuCu" in out
    assert "Shape is creatable due to separable." in out