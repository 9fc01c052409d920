import struct

import pytest

from shapecraft.codes import (
    CODE_SHIFT,
    MAX_INDEX,
    MAX_MTD_MAIN,
    PIN_CODE,
    create_value,
    format_duration,
    get_idx,
    get_mtd,
    load_map,
    load_map_binary,
    save_map,
    save_map_binary,
    stack_shapes,
)


@pytest.mark.parametrize("idx, mtd", [(0, 0), (12345, 3), (MAX_INDEX, PIN_CODE), (1, 8)])
def test_value_round_trip(idx, mtd):
    value = create_value(idx, mtd)
    assert get_idx(value) == idx
    assert get_mtd(value) == mtd


def test_value_layout():
    assert create_value(0, 1) == 1 << CODE_SHIFT
    assert create_value(0xFF, PIN_CODE) >> CODE_SHIFT == PIN_CODE


def test_stack_shapes_pinned_entries():
    shapes = stack_shapes()
    assert str(shapes[0]) == "CuCu----"
    assert str(shapes[MAX_MTD_MAIN - 1]) == "CuCuCuCu"
    assert str(shapes[-1]) == "P-P-P-P-"
    assert all(s.width == 4 and s.height == 1 for s in shapes)


def test_stack_shapes_main_are_distinct():
    indices = [s.index() for s in stack_shapes()[:MAX_MTD_MAIN]]
    assert len(set(indices)) == MAX_MTD_MAIN


def test_stack_shapes_are_fresh():
    first = stack_shapes()
    first[0].rotate()
    assert str(stack_shapes()[0]) == "CuCu----"


def test_format_duration():
    assert format_duration(0) == "0h 0m 0s"
    assert format_duration(3725.9) == "1h 2m 5s"


def test_text_map_round_trip(tmp_path):
    path = tmp_path / "map.txt"
    data = {3: create_value(5, 2), 1: 0xABCDEF, MAX_INDEX: 0}
    save_map(path, data)
    loaded = load_map(path)
    assert loaded == data
    assert list(loaded) == sorted(data)


def test_text_map_format(tmp_path):
    path = tmp_path / "map.txt"
    save_map(path, {255: 10})
    assert path.read_text() == "ff a\n"


def test_text_map_stops_at_bad_token(tmp_path):
    path = tmp_path / "map.txt"
    path.write_text("1 2\n3 4\nzz 5\n6 7\n")
    assert load_map(path) == {1: 2, 3: 4}


def test_binary_map_round_trip(tmp_path):
    path = tmp_path / "map.bin"
    data = {7: create_value(9, PIN_CODE), 2: 4}
    save_map_binary(path, data)
    assert path.stat().st_size == 16 * len(data)
    assert path.read_bytes()[:16] == struct.pack("<QQ", 2, 4)
    assert load_map_binary(path) == data


def test_binary_map_ignores_partial_record(tmp_path):
    path = tmp_path / "map.bin"
    path.write_bytes(struct.pack("<QQ", 1, 2) + b"\x01\x02\x03")
    assert load_map_binary(path) == {1: 2}


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_map(tmp_path / "absent.txt")
    with pytest.raises(FileNotFoundError):
        load_map_binary(tmp_path / "absent.bin")