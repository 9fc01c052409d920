import pytest

from shapecraft.creatable import (
    creatable_no_pin_to_stack,
    is_all_quadrant_creatable,
    is_creatable_no_pin,
    is_quadrant_creatable,
    is_separable,
    not_separable_items,
    separable_axis,
)
from shapecraft.shape import Shape


def test_full_layer_is_separable():
    shape = Shape.from_string("CuCuCuCu")
    assert is_separable(shape, 0)
    assert separable_axis(shape) == 0


def test_empty_shape():
    shape = Shape()
    assert is_separable(shape, 1)
    assert separable_axis(shape) == 0
    assert is_all_quadrant_creatable(shape)
    assert creatable_no_pin_to_stack(shape) == set()
    assert is_creatable_no_pin(shape) is False


def test_overhang_is_not_separable():
    shape = Shape.from_string("Cu------:CuCuCuCu")
    assert not is_separable(shape, 0)
    assert not is_separable(shape, 1)
    assert separable_axis(shape) == -1


@pytest.mark.parametrize("text", ["Cu------:CuCuCuCu", "CuCu----", "--CuCu--:CuCuCuCu"])
def test_axis_wraps(text):
    shape = Shape.from_string(text)
    assert is_separable(shape, -4) == is_separable(shape, 0)
    assert is_separable(shape, 5) == is_separable(shape, 1)


def test_not_separable_items_lists_unsupported_half():
    shape = Shape.from_string("Cu------:CuCuCuCu")
    assert not_separable_items(shape, 0) == {(1, 2), (1, 3)}
    assert not_separable_items(Shape.from_string("CuCuCuCu"), 0) == set()


def test_creatable_no_pin_stack_is_top_layer():
    shape = Shape.from_string("Cu------:CuCuCuCu")
    items = creatable_no_pin_to_stack(shape)
    assert items == {(1, 0), (1, 1), (1, 2), (1, 3)}
    assert is_creatable_no_pin(shape)


def test_stacking_items_leave_separable_rest():
    shape = Shape.from_string("Cu------:CuCuCuCu")
    items = creatable_no_pin_to_stack(shape)
    rest = shape.copy().break_items(items).remove_empty_layers()
    assert separable_axis(rest) != -1
    assert str(shape) == "Cu------:CuCuCuCu"


def test_quadrant_pin_over_void_is_not_creatable():
    assert is_quadrant_creatable(Shape.from_string("Cu:--:P-"), 0) is False
    assert is_quadrant_creatable(Shape.from_string("P-:Cu"), 0) is True


def test_single_crystal_creatable():
    assert is_quadrant_creatable(Shape.from_string("cu"), 0) is True


def test_hanging_crystal_not_creatable():
    shape = Shape.from_string("--:cu")
    assert is_quadrant_creatable(shape, 0) is False
    assert is_quadrant_creatable(shape, 0, 6) is False


def test_weak_fall_restriction():
    shape = Shape.from_string("--:Cu:--:cu")
    assert is_quadrant_creatable(shape, 0) is True
    assert is_quadrant_creatable(shape, 0, 0, True) is False


def test_all_quadrants():
    shape = Shape.from_string("CuCu:----:P-Cu")
    assert is_quadrant_creatable(shape, 0) is False
    assert is_quadrant_creatable(shape, 1) is True
    assert is_all_quadrant_creatable(shape) is False
    assert is_all_quadrant_creatable(Shape.from_string("CuCuCuCu")) is True