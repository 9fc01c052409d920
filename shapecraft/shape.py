"""Layered, quadrant-based shapes and the operations that transform them."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Iterator

from .item import CRYSTAL, EMPTY, PIN, Item

Cell = tuple[int, int]

_EMPTY_ITEM = Item()
_PIN_ITEM = Item(PIN, EMPTY)

# Stability markers used while walking the shape.
_UNKNOWN = -1
_VISITING = -2
_UNSTABLE = 0
_STABLE = 1


def _code(item: Item) -> int:
    if item.type == EMPTY:
        return 0
    if item.type == CRYSTAL:
        return 1
    if item.type == PIN:
        return 2
    return 3


class Shape:
    """Layers run from bottom to top; quadrants within a layer run clockwise.

    Mutating operations change the shape in place and return it, so calls chain.
    A ``max_height`` of 0 means the height is unlimited.
    """

    def __init__(self, layers: Iterable[Iterable[Item]] | None = None, max_height: int = 0) -> None:
        self.max_height = max_height
        self.layers: list[list[Item]] = [list(layer) for layer in (layers or [])]

    @classmethod
    def blank(cls, width: int, height: int, max_height: int = 0) -> Shape:
        """A shape of the given size filled with empty items."""
        return cls([[_EMPTY_ITEM] * width for _ in range(height)], max_height)

    @classmethod
    def from_string(cls, text: str, max_height: int = 0) -> Shape:
        """Parse layers separated by ':' where each item is two characters."""
        if not text:
            return cls([], max_height)
        layers = []
        for part in text.split(":"):
            if len(part) % 2:
                raise ValueError(f"incomplete item in layer {part!r}")
            layers.append([Item(part[k], part[k + 1]) for k in range(0, len(part), 2)])
        return cls(layers, max_height)

    @classmethod
    def from_index(
        cls, index: int, width: int, max_height: int = 0, cry: str = "cu", sp: str = "Cu"
    ) -> Shape:
        """Decode a shape from its packed two-bits-per-item index."""
        kinds = (_EMPTY_ITEM, Item(cry[0], cry[1]), _PIN_ITEM, Item(sp[0], sp[1]))
        layers = []
        while index > 0:
            layer = []
            for _ in range(width):
                layer.append(kinds[index & 0b11])
                index >>= 2
            layers.append(layer)
        return cls(layers, max_height)

    def __str__(self) -> str:
        return ":".join("".join(str(item) for item in layer) for layer in self.layers)

    def __repr__(self) -> str:
        return f"Shape({str(self)!r}, max_height={self.max_height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self.layers == other.layers

    __hash__ = None  # type: ignore[assignment]

    def is_empty(self) -> bool:
        return not self.layers

    @property
    def width(self) -> int:
        return len(self.layers[0]) if self.layers else 0

    @property
    def height(self) -> int:
        return len(self.layers)

    def copy(self) -> Shape:
        return Shape(self.layers, self.max_height)

    def index(self) -> int:
        """Pack the shape into an integer, two bits per item, bottom-left first."""
        value = 0
        for layer in reversed(self.layers):
            for item in reversed(layer):
                value = (value << 2) | _code(item)
        return value

    def rotate_to_least(self) -> Shape:
        """Replace the shape by its rotation with the smallest index, normalising colours."""
        if self.is_empty():
            return self
        width = self.width
        least = self.index()
        for _ in range(1, width):
            least = min(least, self.rotate().index())
        self.layers = Shape.from_index(least, width, self.max_height).layers
        return self

    def get_quadrant(self, y: int) -> Shape:
        """A width-1 shape holding quadrant ``y`` of every layer."""
        return Shape([[layer[y]] for layer in self.layers], self.max_height)

    def get_quadrant_index(self, y: int) -> int:
        value = 0
        for layer in reversed(self.layers):
            value = (value << 2) | _code(layer[y])
        return value

    def get_items_by_layer(self, items: Iterable[Cell]) -> list[Shape]:
        """One single-layer shape per distinct layer of ``items``, bottom first."""
        result: list[Shape] = []
        if self.is_empty():
            return result
        current = -1
        for x, y in sorted(set(items)):
            if current < x:
                current = x
                result.append(Shape.blank(self.width, 1, self.max_height))
            result[-1].layers[0][y] = self.layers[x][y]
        return result

    def _stability_at(
        self, x: int, y: int, stable: list[list[int]], circle_as_stable: bool, first: bool = False
    ) -> int:
        if stable[x][y] != _UNKNOWN:
            return stable[x][y]
        if self.layers[x][y].type == EMPTY:
            stable[x][y] = _STABLE
            return _STABLE

        block = sorted(self.find_block(x, y))
        members = set(block)
        for bx, by in block:
            stable[bx][by] = _VISITING

        outcome = _UNSTABLE
        for bx, by in block:
            if bx == 0:
                outcome = _STABLE
                break
            if (bx - 1, by) in members or self.layers[bx - 1][by].type == EMPTY:
                continue
            support = self._stability_at(bx - 1, by, stable, circle_as_stable)
            if support == _STABLE or (circle_as_stable and support == _VISITING):
                outcome = _STABLE
                break
            if support == _VISITING and not first:
                outcome = _VISITING

        mark = _UNKNOWN if outcome == _VISITING else outcome
        for bx, by in block:
            stable[bx][by] = mark
        return outcome

    def stability_map(self, circle_as_stable: bool = True) -> list[list[int]]:
        """Per-cell stability: 1 stable, 0 unstable. Empty cells count as stable."""
        if self.is_empty():
            return []
        stable = [[_UNKNOWN] * self.width for _ in range(self.height)]
        for i in range(self.height):
            for j in range(self.width):
                if stable[i][j] < 0:
                    self._stability_at(i, j, stable, circle_as_stable, True)
        return stable

    def is_stable(self, circle_as_stable: bool = True) -> bool:
        return all(
            cell != _UNSTABLE for row in self.stability_map(circle_as_stable) for cell in row
        )

    def is_compact(self) -> bool:
        """True when no quadrant has an item above an empty cell."""
        for quadrant in zip(*self.layers):
            seen_void = False
            for item in quadrant:
                if item.type == EMPTY:
                    seen_void = True
                elif seen_void:
                    return False
        return True

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.height and 0 <= y < self.width

    def _flood(self, x: int, y: int, links: Callable[[int, int], Iterator[Cell]]) -> set[Cell]:
        block = {(x, y)}
        queue = deque([(x, y)])
        while queue:
            cx, cy = queue.popleft()
            for cell in links(cx, cy):
                if cell not in block:
                    block.add(cell)
                    queue.append(cell)
        return block

    def _sideways(self, cx: int, cy: int) -> Iterator[Cell]:
        yield cx, (cy + 1) % self.width
        yield cx, (cy - 1) % self.width

    def _vertical(self, cx: int, cy: int) -> Iterator[Cell]:
        if cx + 1 < self.height:
            yield cx + 1, cy
        if cx - 1 >= 0:
            yield cx - 1, cy

    def find_cblock(self, x: int, y: int) -> set[Cell]:
        """The connected group of crystals containing (x, y)."""
        if not self._in_bounds(x, y) or self.layers[x][y].type != CRYSTAL:
            return set()

        def links(cx: int, cy: int) -> Iterator[Cell]:
            for nx, ny in (*self._vertical(cx, cy), *self._sideways(cx, cy)):
                if self.layers[nx][ny].type == CRYSTAL:
                    yield nx, ny

        return self._flood(x, y, links)

    def find_block(self, x: int, y: int) -> set[Cell]:
        """The group of items that moves together with (x, y)."""
        if not self._in_bounds(x, y) or self.layers[x][y].type == EMPTY:
            return set()

        def joins(item: Item) -> bool:
            return item.type == CRYSTAL or item.is_entity()

        def links(cx: int, cy: int) -> Iterator[Cell]:
            current = self.layers[cx][cy]
            if current.type == CRYSTAL:
                for nx, ny in self._vertical(cx, cy):
                    if self.layers[nx][ny].type == CRYSTAL:
                        yield nx, ny
            if joins(current):
                for nx, ny in self._sideways(cx, cy):
                    if joins(self.layers[nx][ny]):
                        yield nx, ny

        return self._flood(x, y, links)

    def find_eblock(self, x: int, y: int) -> set[Cell]:
        """Like ``find_block`` but ignoring crystals entirely."""
        if not self._in_bounds(x, y) or self.layers[x][y].type in (EMPTY, CRYSTAL):
            return set()

        def links(cx: int, cy: int) -> Iterator[Cell]:
            if self.layers[cx][cy].is_entity():
                for nx, ny in self._sideways(cx, cy):
                    if self.layers[nx][ny].is_entity():
                        yield nx, ny

        return self._flood(x, y, links)

    def break_item(self, x: int, y: int) -> Shape:
        """Empty one cell; breaking a crystal shatters its whole crystal group."""
        if self.layers[x][y].type != CRYSTAL:
            self.layers[x][y] = _EMPTY_ITEM
        else:
            for bx, by in self.find_cblock(x, y):
                self.layers[bx][by] = _EMPTY_ITEM
        return self

    def break_layer(self, x: int) -> Shape:
        for j in range(self.width):
            self.break_item(x, j)
        return self

    def break_quadrant(self, y: int) -> Shape:
        if self.is_empty():
            return self
        y %= self.width
        for i in range(self.height):
            self.break_item(i, y)
        return self

    def break_items(self, items: Iterable[Cell]) -> Shape:
        for x, y in sorted(set(items)):
            self.break_item(x, y)
        return self

    def remove_empty_layers(self) -> Shape:
        """Drop empty layers from the top."""
        while self.layers and all(item.type == EMPTY for item in self.layers[-1]):
            self.layers.pop()
        return self

    def add_empty_layers_up(self, count: int = 1) -> Shape:
        width = self.width
        self.layers.extend([_EMPTY_ITEM] * width for _ in range(count))
        return self

    def add_empty_layers_down(self, count: int = 1) -> Shape:
        width = self.width
        self.layers[:0] = [[_EMPTY_ITEM] * width for _ in range(count)]
        return self

    def cut_height(self, max_height: int, use_fall: bool = True) -> Shape:
        """Break every layer from ``max_height`` up, then settle the rest."""
        if max_height <= 0:
            return self.remove_empty_layers()
        if self.is_empty():
            return self
        for i in range(max_height, self.height):
            self.break_layer(i)
        return self.fall() if use_fall else self.remove_empty_layers()

    def combine(self, other: Shape) -> Shape:
        """Fill every empty cell of this shape with the matching cell of ``other``."""
        if self.is_empty() or other.is_empty() or other.width != self.width:
            return self
        if self.height < other.height:
            self.add_empty_layers_up(other.height - self.height)
        for mine, theirs in zip(self.layers, other.layers):
            for j, item in enumerate(mine):
                if item.type == EMPTY:
                    mine[j] = theirs[j]
        return self

    def _drop_block(self, x: int, y: int) -> None:
        block = sorted(self.find_block(x, y))
        target = x - 2
        while target >= 0 and all(self.layers[target][by].type == EMPTY for _, by in block):
            target -= 1
        target = max(target + 1, 0)
        for bx, by in block:
            self.layers[target][by] = self.layers[bx][by]
            self.layers[bx][by] = _EMPTY_ITEM

    def fall(self) -> Shape:
        """Shatter unsupported crystals and drop other unsupported groups."""
        if self.is_empty():
            return self
        stable = self.stability_map()
        for i, layer in enumerate(self.layers):
            for j, item in enumerate(layer):
                if stable[i][j] == _UNSTABLE and item.type == CRYSTAL:
                    layer[j] = _EMPTY_ITEM
        for i in range(self.height):
            for j in range(self.width):
                if stable[i][j] == _UNSTABLE and self.layers[i][j].type != EMPTY:
                    self._drop_block(i, j)
        return self.remove_empty_layers()

    def rotate(self, times: int = 1) -> Shape:
        """Rotate clockwise by ``times`` quadrants."""
        if self.is_empty():
            return self
        shift = times % self.width
        if shift:
            self.layers = [layer[-shift:] + layer[:-shift] for layer in self.layers]
        return self

    def cry(self, color: str) -> Shape:
        """Fill every empty cell and every pin with crystal of ``color``."""
        crystal = Item(CRYSTAL, color)
        for layer in self.layers:
            for j, item in enumerate(layer):
                if item.type in (EMPTY, PIN):
                    layer[j] = crystal
        return self

    def pin(self) -> Shape:
        """Push the shape up one layer and put pins under occupied bottom cells."""
        if self.is_empty():
            return self
        self.add_empty_layers_down()
        for j, item in enumerate(self.layers[1]):
            if item.type != EMPTY:
                self.layers[0][j] = _PIN_ITEM
        return self.cut_height(self.max_height)

    def stack(self, other: Shape) -> Shape:
        """Drop ``other`` on top; its crystals shatter on the way."""
        if self.is_empty() or other.is_empty() or other.width != self.width:
            return self
        for layer in other.layers:
            self.layers.append(
                [_EMPTY_ITEM if item.type == CRYSTAL else item for item in layer]
            )
        self.fall()
        return self.cut_height(self.max_height, False)

    def stack_base(self, other: Shape) -> Shape:
        """Drop every group of ``other`` straight down onto this shape.

        ``other`` is expected to hold no crystals; nothing else falls.
        """
        if self.is_empty() or other.is_empty() or other.width != self.width:
            return self
        base = self.height
        self.add_empty_layers_up()
        self.layers.extend(list(layer) for layer in other.layers)
        for i in range(base + 1, self.height):
            for j in range(self.width):
                if self.layers[i][j].type != EMPTY:
                    self._drop_block(i, j)
        return self.cut_height(self.max_height, False)

    def half_break(self, axis: int = 0) -> Shape:
        """Break the half of the quadrants just before ``axis``, then settle."""
        if self.is_empty():
            return self
        for j in range(axis - self.width // 2, axis):
            self.break_quadrant(j)
        return self.fall()

    def cut(self, axis: int = 0) -> Shape:
        """Split in half along ``axis``: keep one half and return the other."""
        if self.is_empty():
            return self.copy()
        other_half = self.copy()
        other_half.half_break(axis + self.width // 2)
        self.half_break(axis)
        return other_half

    def exchange(self, other: Shape, axis: int = 0) -> Shape:
        """Swap the halves on one side of ``axis`` between this shape and ``other``."""
        if self.is_empty() or other.is_empty() or other.width != self.width:
            return self
        to_other = self.cut(axis)
        to_this = other.cut(axis)
        self.combine(to_this)
        other.combine(to_other)
        return self