"""Interactive explanation of how a shape can be built."""

from __future__ import annotations

import re
import sys
from collections.abc import Iterator, Mapping, Sequence
from typing import Protocol

from .codes import MAX_HEIGHT, PIN_CODE, QUAD_SIZE, get_idx, get_mtd, stack_shapes
from .creatable import creatable_no_pin_to_stack, is_all_quadrant_creatable, separable_axis
from .filemap import FileMap
from .shape import Shape

_HEX_PREFIX = re.compile(r"[0-9a-fA-F]+")
_U64_LIMIT = 1 << 64


class _Lookup(Protocol):
    def __contains__(self, idx: object) -> bool: ...

    def __getitem__(self, idx: int) -> int: ...


def parse_shape(text: str) -> Shape:
    """Parse a shape from its text form, or from its index written as '0x<hex>'."""
    if text.startswith("0x"):
        match = _HEX_PREFIX.match(text, 2)
        if match is None:
            raise ValueError("Invalid hex number.")
        value = int(match.group(), 16)
        if value >= _U64_LIMIT:
            raise ValueError("Hex number out of range.")
        return Shape.from_index(value, QUAD_SIZE, MAX_HEIGHT)
    return Shape.from_string(text, MAX_HEIGHT)


def _trace_recorded(shape: Shape, creatable: _Lookup | Mapping[int, int]) -> list[str]:
    methods = stack_shapes()
    parts = ["Shape is creatable. Method:\n", f"\t{shape}"]
    current = shape
    rotated = current.copy().rotate_to_least()
    while rotated.index() in creatable:
        parts.append(" from:\n")
        value = creatable[rotated.index()]
        source = Shape.from_index(get_idx(value), QUAD_SIZE, MAX_HEIGHT)
        mtd = get_mtd(value)

        rotated = source.copy()
        if mtd == PIN_CODE:
            rotated.pin()
        else:
            rotated.stack_base(methods[mtd])
        target = current.index()
        turns = 0
        while rotated.index() != target:
            if turns >= QUAD_SIZE:
                raise ValueError(f"recorded method does not produce {current}")
            rotated.rotate()
            turns += 1

        source.rotate(turns)
        how = " pin" if mtd == PIN_CODE else f" stack: {methods[mtd].copy().rotate(turns)}"
        parts.append(f"\t{source}{how}")
        current = source.copy()
        rotated = source.rotate_to_least()
    return parts


def _trace_no_pin(shape: Shape, to_stack: set[tuple[int, int]]) -> list[str]:
    layers = shape.get_items_by_layer(to_stack)
    work = shape.copy()
    stages = [work.break_items(to_stack).remove_empty_layers().copy()]
    for layer in layers:
        stages.append(work.stack_base(layer).copy())

    parts = ["Shape is creatable without pin. Method:\n", f"\t{stages[-1]}"]
    for stage, layer in reversed(list(zip(stages, layers))):
        parts.append(" from: \n")
        parts.append(f"\t{stage} stack: {layer}")
    return parts


def explain(shape: Shape, creatable: _Lookup | Mapping[int, int]) -> str:
    """Describe whether and how ``shape`` is built, using the recorded methods.

    ``creatable`` maps least-rotation shape indices to packed (source, method)
    values. The given shape is left unchanged.
    """
    shape = shape.copy()
    if not is_all_quadrant_creatable(shape):
        return "Shape is not creatable due to an invalid quadrant."
    if separable_axis(shape) != -1:
        return "Shape is creatable due to separable."
    if shape.copy().rotate_to_least().index() in creatable:
        return "".join(_trace_recorded(shape, creatable))
    to_stack = creatable_no_pin_to_stack(shape)
    if to_stack:
        return "".join(_trace_no_pin(shape, to_stack))
    return "Shape is not creatable."


def _tokens() -> Iterator[str]:
    for line in sys.stdin:
        yield from line.split()


def main(argv: Sequence[str] | None = None) -> int:
    """Answer shape queries read from standard input until 'exit' or end of input."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Usage: parser <shape_file>", file=sys.stderr)
        return 1
    try:
        creatable = FileMap(args[0])
    except OSError as error:
        print(f"Error opening file: {args[0]} ({error})", file=sys.stderr)
        return 1

    with creatable:
        tokens = _tokens()
        while True:
            print("Enter a shape to parse (or 'exit' to quit): ")
            text = next(tokens, None)
            if text is None or text == "exit":
                break
            try:
                shape = parse_shape(text)
            except ValueError as error:
                message = "Invalid hex number." if text.startswith("0x") else str(error)
                print(message, file=sys.stderr)
                continue
            if text.startswith("0x"):
                print(f"Shape created from hex: {shape}")
            print(explain(shape, creatable))
    return 0