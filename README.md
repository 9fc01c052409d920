# shapecraft

shapecraft works with shapes that are built from layers of quadrants. It can
parse shapes and encode them as integers. It can rotate, stack, pin, cut and
break them, and it can check whether a shape is stable. It can also decide
whether a shape can be built and explain the steps that build it.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Shape notation

A shape is written one layer at a time, from the bottom up, with `:` between
layers. Each quadrant takes two characters: the type, then the colour.
Quadrants go clockwise. The types are:

- `--` is an empty quadrant.
- `P-` is a pin.
- `c` followed by a colour, such as `cu`, is a crystal.
- Any other type, such as `Cu`, is a solid piece.

An example shape:

```
CuCuCuCu:P-P-----:cucu----
```

`Shape.index()` packs a shape into an integer with two bits per quadrant,
starting at the bottom layer and the first quadrant. `Shape.from_index()`
unpacks such an index. Colours are not kept in an index: crystals come back
as `cu` and solids as `Cu`, unless you pass other pairs as `cry` and `sp`.

## Library use

```python
from shapecraft.shape import Shape
from shapecraft.creatable import separable_axis, is_all_quadrant_creatable

shape = Shape.from_string("CuCuCuCu:Cu------", 5)
print(shape.index(), shape.is_stable(True))
print(separable_axis(shape), is_all_quadrant_creatable(shape, 0, False))

rotated = shape.copy().rotate(1)
print(rotated)
```

The `second argument` of `Shape.from_string` is the maximum height, and 0
means no limit. Methods that change a shape, such as `rotate`, `fall`, `pin`,
`stack`, `stack_base` and `break_items`, change it in place and return it, so
calls can be chained. Use `copy()` to keep the original.

### Modules

- `shapecraft.item`: the `Item` dataclass for one quadrant.
- `shapecraft.shape`: `Shape` and its operations, including stability
  (`stability_map`, `is_stable`), connected groups (`find_block`,
  `find_cblock`, `find_eblock`) and the building operations.
- `shapecraft.creatable`: checks for whether a shape can be built.
  - `is_separable`, `not_separable_items` and `separable_axis` deal with
    splitting a shape into two halves.
  - `is_quadrant_creatable` and `is_all_quadrant_creatable` check each
    quadrant.
  - `creatable_no_pin_to_stack` and `is_creatable_no_pin` find the items to
    stack onto a separable base.
- `shapecraft.codes`: packs a shape index and a method number into one 64-bit
  value (`create_value`, `get_idx`, `get_mtd`). It also provides:
  - `stack_shapes()`, the table of standard stacking shapes;
  - `format_duration`;
  - functions that save and load index maps, as hex text (`save_map`,
    `load_map`) or as little-endian 64-bit binary records (`save_map_binary`,
    `load_map_binary`).
- `shapecraft.filemap`: `FileMap` looks up entries in a sorted binary map file
  without reading the whole file. It supports `in`, indexing (which returns 0
  for a missing key), iteration, `len` and use as a context manager.
- `shapecraft.parser`:
  - `parse_shape(text)` accepts the notation above or a `0x` index.
  - `explain(shape, creatable)` returns a text that says whether the shape
    can be built and how.

## Command line

```
shapecraft-parser creatable.bin
```

The argument is a binary map file of buildable shapes. Its keys are the
indices of shapes at their least rotation. Its values are packed
(source index, method) values, and method `0xff` means a pin. The file must be
sorted by key.

The command reads whitespace-separated words from standard input. Each word
is one shape, in the notation above or as a `0x` index. For each shape the
command prints whether it can be built and, if it can, the steps that build
it. The command stops at `exit` or at the end of the input.

## What it does not do

shapecraft does not search for buildable shapes, so it cannot produce the map
file that `shapecraft-parser` and `explain` need. You must make that map
yourself, for example with `save_map_binary`. Without a map entry,
`explain` can only report these cases:

- shapes that fail the quadrant check;
- shapes that are separable;
- shapes that can be built by stacking onto a separable base without pins.