import runtime_path  # isort:skip

import pytest

from ndview.errors import ShapeError
from ndview.layout import (Layout, as_shape, calculate_contiguity, classify, contiguous_strides, has_overlap,
                           offset_extent, size_of, validate)


def test_contiguous_strides():
  assert contiguous_strides((3, 2, 4)) == (8, 4, 1)
  assert contiguous_strides((3, 2, 4), order="F") == (1, 3, 6)
  assert contiguous_strides((5,)) == (1,)
  assert contiguous_strides(()) == ()
  with pytest.raises(ValueError):
    contiguous_strides((2, 2), order="K")

def test_as_shape():
  assert as_shape(4) == (4,)
  assert as_shape([2, 0, 3]) == (2, 0, 3)
  for bad in ((2, -1), (2.5,), (True, 2)):
    with pytest.raises(ShapeError):
      as_shape(bad)

def test_size_of():
  assert size_of((3, 2, 4)) == 24
  assert size_of(()) == 1
  assert size_of((3, 0)) == 0
  with pytest.raises(ShapeError):
    size_of((2 ** 40, 2 ** 40))

def test_classify():
  assert classify((2, 3), (3, 1)) == Layout.C
  assert classify((2, 3), (1, 2)) == Layout.F
  assert classify((3,), (1,)) == Layout.CF
  assert classify((), ()) == Layout.CF
  assert classify((1, 1), (7, 3)) == Layout.CF
  assert classify((0, 3), (5, 5)) == Layout.CF
  assert classify((2, 3), (6, 2)) == Layout.CUSTOM
  assert classify((3,), (-1,)) == Layout.CUSTOM
  assert Layout.C.flag == "C" and Layout.CUSTOM.flag == "custom"

def test_contiguity_ignores_unit_axes():
  assert calculate_contiguity((2, 1, 3), (3, 100, 1)) == (True, False)
  assert calculate_contiguity((2, 1, 3), (1, 0, 2)) == (False, True)

def test_offset_extent():
  assert offset_extent((2, 3), (3, 1), 0) == (0, 5)
  assert offset_extent((2, 3), (-3, -1), 5) == (0, 5)
  assert offset_extent((4,), (0,), 2) == (2, 2)
  assert offset_extent((0, 2), (2, 1), 0) is None

def test_has_overlap():
  assert not has_overlap((2, 2), (2, 1))
  assert not has_overlap((2, 2), (-1, -2))
  assert not has_overlap((1, 3), (0, 1))
  assert has_overlap((2, 2), (1, 1))
  assert has_overlap((3,), (0,))

def test_validate():
  assert validate((2, 3), (3, 1), 6) == 6
  assert validate((2, 3), (-3, -1), 6, offset=5) == 6
  assert validate((0, 3), (3, 1), 0) == 0
  # broadcast strides are fine unless overlap is refused
  assert validate((2, 3), (0, 1), 3) == 6
  with pytest.raises(ShapeError):
    validate((2, 3), (0, 1), 3, allow_overlap=False)
  with pytest.raises(ShapeError):
    validate((2, 3), (1, 1), 4, allow_overlap=False)
  with pytest.raises(ShapeError):
    validate((2, 3), (3, 1), 5)
  with pytest.raises(ShapeError):
    validate((2, 3), (3, 1), 6, offset=1)
  with pytest.raises(ShapeError):
    validate((2, 3), (-3, 1), 6)
  with pytest.raises(ShapeError):
    validate((2, 3), (3,), 6)
  with pytest.raises(ShapeError):
    validate((2, -1), (1, 1), 6)
