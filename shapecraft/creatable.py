"""Analyses that decide whether, and how, a shape can be built."""

from __future__ import annotations

from .item import CRYSTAL, EMPTY, PIN
from .shape import Cell, Shape

_GROUND = "G"


def _halves(shape: Shape, axis: int) -> tuple[Shape, Shape]:
    """Split the shape into two half-width shapes starting at ``axis``."""
    height, width = shape.height, shape.width
    left = Shape.blank(width, height)
    right = Shape.blank(width, height)
    start = axis % width
    half = width // 2
    for i, layer in enumerate(shape.layers):
        for j in range(start, start + half):
            left.layers[i][j % width] = layer[j % width]
        for j in range(start + half, start + width):
            right.layers[i][j % width] = layer[j % width]
    return left, right


def is_separable(shape: Shape, axis: int) -> bool:
    """True if both halves split at ``axis`` are stable on their own."""
    if shape.is_empty():
        return True
    left, right = _halves(shape, axis)
    return left.remove_empty_layers().is_stable() and right.remove_empty_layers().is_stable()


def not_separable_items(shape: Shape, axis: int) -> set[Cell]:
    """Cells that become unstable once the shape is split at ``axis``."""
    if shape.is_empty():
        return set()
    left, right = _halves(shape, axis)
    left_map = left.stability_map()
    right_map = right.stability_map()
    return {
        (i, j)
        for i in range(shape.height)
        for j in range(shape.width)
        if left_map[i][j] == 0 or right_map[i][j] == 0
    }


def separable_axis(shape: Shape) -> int:
    """The first axis the shape separates along, or -1 if there is none."""
    if shape.is_empty():
        return 0
    for axis in range(shape.width // 2):
        if is_separable(shape, axis):
            return axis
    return -1


def is_quadrant_creatable(
    shape: Shape, y: int, total_width: int = 0, only_use_weak_fall: bool = False
) -> bool:
    """True if quadrant ``y`` can be produced.

    ``total_width`` of 0 uses the shape's own width; ``only_use_weak_fall``
    restricts the check to weak falls.
    """
    if shape.is_empty():
        return True
    column = [layer[y].type for layer in shape.layers]
    height = len(column)
    more_six = (shape.width if total_width == 0 else total_width) >= 6

    cry_layer = next((x for x in range(height - 1, -1, -1) if column[x] == CRYSTAL), -1)
    for layer in range(cry_layer + 2, height):
        if column[layer] == PIN and column[layer - 1] == EMPTY:
            return False
    if cry_layer == -1:
        return True

    pin_layer = next((x for x in range(cry_layer) if column[x] != PIN), cry_layer)
    if any(column[x] == PIN for x in range(pin_layer + 1, cry_layer)):
        return False

    empty_num = 0
    for x in range(pin_layer, cry_layer):
        if column[x] == EMPTY:
            empty_num += 1
        elif column[x] == CRYSTAL:
            break

    weak = only_use_weak_fall or not (more_six or pin_layer > 0 or empty_num >= 2)
    need_up = False
    layer = cry_layer
    while layer >= pin_layer:
        this = column[layer]
        down = column[layer - 1] if layer > pin_layer else _GROUND
        if need_up:
            if this == CRYSTAL:
                return False
            if this != EMPTY:
                if down == CRYSTAL:
                    return False
                if weak and down == EMPTY:
                    layer -= 1
                else:
                    need_up = False
        else:
            if this == EMPTY and down == CRYSTAL:
                return False
            if this == CRYSTAL and down == EMPTY:
                need_up = True
                layer -= 1
        layer -= 1
    return not need_up


def is_all_quadrant_creatable(
    shape: Shape, total_width: int = 0, only_use_weak_fall: bool = False
) -> bool:
    """True if every quadrant of the shape is creatable."""
    return all(
        is_quadrant_creatable(shape, y, total_width, only_use_weak_fall)
        for y in range(shape.width)
    )


def _spread(
    shape: Shape,
    i: int,
    j: int,
    step: int,
    cry_layer: list[int],
    lowest: list[int],
    to_stack: set[Cell],
) -> tuple[int, bool]:
    """Walk round layer ``i`` from ``j`` in direction ``step`` over joined entities.

    Returns the quadrant the walk stopped at and whether any visited cell
    rests on something below.
    """
    layers = shape.layers
    width = shape.width
    supported = False
    y = (j + step) % width
    while y != j:
        if cry_layer[y] >= i or not layers[i][y].is_entity():
            break
        lowest[y] = min(lowest[y], i)
        if layers[i - 1][y].type != EMPTY:
            supported = True
        to_stack.add((i, y))
        y = (y + step) % width
    return y, supported


def creatable_no_pin_to_stack(shape: Shape) -> set[Cell]:
    """Items to stack on a separable base to build this non-separable shape.

    Returns an empty set when the shape cannot be built this way.
    """
    if shape.is_empty():
        return set()
    width, height = shape.width, shape.height
    layers = shape.layers
    cry_layer = [
        next((x for x in range(height - 1, -1, -1) if layers[x][y].type == CRYSTAL), -1)
        for y in range(width)
    ]

    for axis in range(width // 2):
        not_separable = not_separable_items(shape, axis)
        if any(layers[x][y].type == CRYSTAL for x, y in not_separable):
            continue
        lowest = [height] * width
        for x, y in not_separable:
            lowest[y] = min(lowest[y], x)

        to_stack: set[Cell] = set()
        ok = True
        for i in range(1, height):
            for j in range(width):
                if i < lowest[j] or (i, j) in to_stack:
                    continue
                if layers[i][j].type == EMPTY:
                    continue
                if cry_layer[j] >= i:
                    ok = False
                    break
                supported = layers[i - 1][j].type != EMPTY
                to_stack.add((i, j))
                if layers[i][j].is_entity():
                    stop, forward = _spread(shape, i, j, 1, cry_layer, lowest, to_stack)
                    supported = supported or forward
                    if stop != j:
                        _, backward = _spread(shape, i, j, -1, cry_layer, lowest, to_stack)
                        supported = supported or backward
                if not supported:
                    ok = False
                    break
            if not ok:
                break
        if not ok:
            continue
        rest = shape.copy().break_items(to_stack).remove_empty_layers()
        if not is_separable(rest, axis):
            continue
        return to_stack
    return set()


def is_creatable_no_pin(shape: Shape) -> bool:
    """True if the shape is built by stacking onto a separable base without pins."""
    if shape.is_empty():
        return False
    return bool(creatable_no_pin_to_stack(shape))