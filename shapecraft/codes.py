"""Packed shape/method values, the standard stacking shapes, and map files."""

from __future__ import annotations

import math
import os
import re
import struct
import sys
from collections.abc import Mapping

from .shape import Shape

QUAD_SIZE = 4
MAX_HEIGHT = 5
THREADS = 79
TEST_POINTS = 100000
TEST_POINTS_SMALL = 100

CODE_SHIFT = MAX_HEIGHT * QUAD_SIZE * 2
MAX_INDEX = (1 << CODE_SHIFT) - 1
MAX_QUAD_INDEX = (1 << (MAX_HEIGHT * 2)) - 1
PIN_CODE = 0xFF
MAX_MTD_MAIN = 9

_U64 = (1 << 64) - 1
_RECORD = struct.Struct("<QQ")

_STACK_PATTERNS = (
    "CuCu----", "--CuCu--", "----CuCu", "Cu----Cu",
    "CuCuCu--", "--CuCuCu", "Cu--CuCu", "CuCu--Cu",
    "CuCuCuCu",
    # not used by the main search from here on
    "Cu------", "--Cu----", "----Cu--", "------Cu",
    "P-------", "--P-----", "----P---", "------P-",
    # not needed from here on
    "Cu--Cu--", "--Cu--Cu",
    "CuP-----", "--CuP---", "----CuP-", "P-----Cu",
    "Cu--P---", "--Cu--P-", "P---Cu--", "--P---Cu",
    "Cu----P-", "P-Cu----", "--P-Cu--", "----P-Cu",
    "P-P-----", "--P-P---", "----P-P-", "P-----P-",
    "P---P---", "--P---P-",
    "CuCuP---", "--CuCuP-", "P---CuCu", "CuP---Cu",
    "CuCu--P-", "P-CuCu--", "--P-CuCu", "Cu--P-Cu",
    "CuP-Cu--", "--CuP-Cu", "Cu--CuP-", "P-Cu--Cu",
    "CuP-P---", "--CuP-P-", "P---CuP-", "P-P---Cu",
    "CuP---P-", "P-CuP---", "--P-CuP-", "P---P-Cu",
    "Cu--P-P-", "P-Cu--P-", "P-P-Cu--", "--P-P-Cu",
    "P-P-P---", "--P-P-P-", "P---P-P-", "P-P---P-",
    "CuCuCuP-", "P-CuCuCu", "CuP-CuCu", "CuCuP-Cu",
    "CuCuP-P-", "P-CuCuP-", "P-P-CuCu", "CuP-P-Cu",
    "CuP-CuP-", "P-CuP-Cu",
    "CuP-P-P-", "P-CuP-P-", "P-P-CuP-", "P-P-P-Cu",
    "P-P-P-P-",
)

_HEX_NUMBER = re.compile(r"[+-]?(0[xX])?[0-9a-fA-F]+")


def get_idx(value: int) -> int:
    """The shape index part of a packed value."""
    return value & MAX_INDEX


def get_mtd(value: int) -> int:
    """The method part of a packed value."""
    return (value & _U64) >> CODE_SHIFT


def create_value(idx: int, mtd: int) -> int:
    """Pack a shape index and a method code into one 64-bit value."""
    return (idx | (mtd << CODE_SHIFT)) & _U64


def stack_shapes() -> list[Shape]:
    """Fresh copies of the standard single-layer shapes used for stacking."""
    return [Shape.from_string(text, MAX_HEIGHT) for text in _STACK_PATTERNS]


def format_duration(seconds: float) -> str:
    """Render a duration as 'Hh Mm Ss', truncating each part."""
    hours = math.trunc(seconds / 3600)
    seconds -= hours * 3600
    minutes = math.trunc(seconds / 60)
    seconds -= minutes * 60
    return f"{hours}h {minutes}m {math.trunc(seconds)}s"


def save_map(path: str | os.PathLike[str], mapping: Mapping[int, int]) -> None:
    """Write the mapping as lines of two hex numbers, ordered by key."""
    with open(path, "w", encoding="ascii") as file:
        for idx, value in sorted(mapping.items()):
            file.write(f"{idx:x} {value:x}\n")
    print(f"Saved {len(mapping)} shapes to {os.fspath(path)}.", file=sys.stderr)


def save_map_binary(path: str | os.PathLike[str], mapping: Mapping[int, int]) -> None:
    """Write the mapping as little-endian 64-bit key/value pairs, ordered by key."""
    with open(path, "wb") as file:
        for idx, value in sorted(mapping.items()):
            file.write(_RECORD.pack(idx, value))
    print(f"Saved {len(mapping)} shapes to {os.fspath(path)}.", file=sys.stderr)


def load_map(path: str | os.PathLike[str]) -> dict[int, int]:
    """Read pairs of hex numbers until the end of file or the first bad entry."""
    with open(path, encoding="ascii", errors="replace") as file:
        words = file.read().split()
    result: dict[int, int] = {}
    for key_text, value_text in zip(words[::2], words[1::2]):
        if not (_HEX_NUMBER.fullmatch(key_text) and _HEX_NUMBER.fullmatch(value_text)):
            break
        result[int(key_text, 16) & _U64] = int(value_text, 16) & _U64
    print(f"Loaded {len(result)} shapes from {os.fspath(path)}.", file=sys.stderr)
    return dict(sorted(result.items()))


def load_map_binary(path: str | os.PathLike[str]) -> dict[int, int]:
    """Read little-endian 64-bit key/value pairs; a trailing partial record is ignored."""
    with open(path, "rb") as file:
        data = file.read()
    usable = len(data) - len(data) % _RECORD.size
    result = dict(_RECORD.iter_unpack(data[:usable]))
    print(f"Loaded {len(result)} shapes from {os.fspath(path)}.", file=sys.stderr)
    return dict(sorted(result.items()))