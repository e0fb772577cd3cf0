import numbers
import sys
from enum import Enum

from ndview.errors import ShapeError
from ndview.utils.math import prod


class Layout(Enum):
  C = "row-major"
  F = "column-major"
  CF = "row-major and column-major"
  CUSTOM = "custom"

  @property
  def flag(self):
    return {Layout.C: "C", Layout.F: "F", Layout.CF: "CF", Layout.CUSTOM: "custom"}[self]

def as_shape(shape):
  if isinstance(shape, numbers.Integral):
    shape = (shape,)
  shape = tuple(shape)
  for d in shape:
    if not isinstance(d, numbers.Integral) or isinstance(d, bool) or d < 0:
      raise ShapeError(f"Invalid shape {shape}, extents must be non-negative integers")
  return tuple(int(d) for d in shape)

def size_of(shape):
  for d in shape:
    if not isinstance(d, numbers.Integral) or d < 0:
      raise ShapeError(f"Invalid shape {tuple(shape)}, extents must be non-negative integers")
  size = prod(shape)
  if size > sys.maxsize:
    raise ShapeError(f"Shape {tuple(shape)} would hold more than {sys.maxsize} elements")
  return size

def contiguous_strides(shape, order="C"):
  shape = tuple(shape)
  if order == "C":
    return tuple(prod(shape[i+1:]) for i in range(len(shape)))
  if order == "F":
    return tuple(prod(shape[:i]) for i in range(len(shape)))
  raise ValueError(f"Invalid order {order!r}, expected 'C' or 'F'")

def calculate_contiguity(shape, strides):
  # https://github.com/numpy/numpy/blob/93a97649aa0aefc0ee8ee5fc7cb78063bfe67255/numpy/core/src/multiarray/flagsobject.c#L115
  assert len(shape) == len(strides)
  ndim = len(shape)
  c_contiguous = f_contiguous = True
  if ndim:
    nitems = 1
    for i in range(ndim-1, -1, -1):
      if shape[i] == 0:
        return True, True
      if shape[i] != 1:
        if strides[i] != nitems:
          c_contiguous = False
        nitems *= shape[i]
    nitems = 1
    for i in range(ndim):
      if shape[i] != 1:
        if strides[i] != nitems:
          f_contiguous = False
        nitems *= shape[i]
  return c_contiguous, f_contiguous

def classify(shape, strides):
  c_contiguous, f_contiguous = calculate_contiguity(shape, strides)
  if c_contiguous and f_contiguous: return Layout.CF
  if c_contiguous: return Layout.C
  if f_contiguous: return Layout.F
  return Layout.CUSTOM

def offset_extent(shape, strides, offset=0):
  """Inclusive range (lo, hi) of the buffer offsets a view can reach, None when empty."""
  if any(d == 0 for d in shape):
    return None
  lo = hi = offset
  for d, s in zip(shape, strides):
    if s < 0: lo += (d - 1) * s
    else: hi += (d - 1) * s
  return lo, hi

def has_overlap(shape, strides):
  """Whether two distinct index tuples can map to the same offset."""
  axes = sorted((abs(s), d) for d, s in zip(shape, strides) if d > 1)
  reach = 0
  for s, d in axes:
    if s <= reach:
      return True
    reach += (d - 1) * s
  return False

def validate(shape, strides, buffer_len, offset=0, allow_overlap=True):
  shape, strides = tuple(shape), tuple(strides)
  if len(shape) != len(strides):
    raise ShapeError(f"Shape {shape} and strides {strides} have different ranks")
  size = size_of(shape)
  extent = offset_extent(shape, strides, offset)
  if extent is None:
    return size
  lo, hi = extent
  if lo < 0 or hi >= buffer_len:
    raise ShapeError(f"Shape {shape} with strides {strides} at offset {offset} reaches "
                     f"offsets [{lo}, {hi}] outside buffer of length {buffer_len}")
  if not allow_overlap and has_overlap(shape, strides):
    raise ShapeError(f"Strides {strides} map several indices of shape {shape} to one element")
  return size
