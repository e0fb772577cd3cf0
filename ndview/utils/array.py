import numbers

from ndview.errors import ShapeError
from ndview.layout import as_shape


def normalize_axis(axis, ndim):
  if not isinstance(axis, numbers.Integral) or isinstance(axis, bool):
    raise TypeError(f"Axis must be an integer, got {axis!r}")
  if not -ndim <= axis < ndim:
    raise IndexError(f"Axis {axis} is out of bounds for array of dimension {ndim}")
  return axis + ndim if axis < 0 else axis

def normalize_index(index, length, axis=0):
  if not -length <= index < length:
    raise IndexError(f"Index {index} is out of bounds for axis {axis} with size {length}")
  return index + length if index < 0 else index

def calculate_slices(start, stop, step, length):
  # https://github.com/python/cpython/blob/d034590294d4618880375a6db513c30bce3e126b/Objects/sliceobject.c#L264
  if step is None: step = 1
  if step == 0:
    raise IndexError("Slice step cannot be zero")
  # explicit bounds must address the axis, they are never clipped silently
  for bound in (start, stop):
    if bound is not None and not -length <= bound <= length:
      raise IndexError(f"Slice bound {bound} is out of range for axis with size {length}")
  if start is None: start = length+1 if step < 0 else 0
  if stop is None: stop = -length-1 if step < 0 else length+1

  if start < 0:
    start += length
    if start < 0: start = -1 if step < 0 else 0
  elif start >= length:
    start = length-1 if step < 0 else length
  if stop < 0:
    stop += length
    if stop < 0: stop = -1 if step < 0 else 0
  elif stop >= length:
    stop = length-1 if step < 0 else length

  if step < 0 and stop < start:
    size = (start - stop - 1) // (-step) + 1
  elif step > 0 and start < stop:
    size = (stop - start - 1) // (step) + 1
  else:
    size = 0
  return start, stop, step, size

def broadcast_shapes(*shapes):
  # https://numpy.org/doc/stable/user/basics.broadcasting.html
  shapes = [tuple(s) for s in shapes]
  if len(set(shapes)) == 1:
    return shapes[0]
  ndim = max(len(s) for s in shapes)
  padded = [(1,) * (ndim - len(s)) + s for s in shapes]
  ret = []
  for dims in zip(*padded):
    unique = set(dims) - {1}
    if len(unique) > 1:
      raise ShapeError(f"Could not broadcast shapes {shapes} together")
    ret.append(unique.pop() if unique else 1)
  return tuple(ret)

def infer_shape(shape, size):
  shape = (shape,) if isinstance(shape, numbers.Integral) else tuple(shape)
  if shape.count(-1) > 1:
    raise ShapeError("Only one dimension can be inferred")
  if -1 in shape:
    axis = shape.index(-1)
    infer = 1
    for s in shape:
      if s != -1: infer *= s
    if infer == 0 or size % infer != 0:
      raise ShapeError(f"Shape {shape} invalid for size {size}")
    shape = (*shape[:axis], size // infer, *shape[axis+1:])
  return as_shape(shape)

def is_index(k):
  return isinstance(k, numbers.Integral) and not isinstance(k, bool)

def slice_layout(shape, strides, offset, key):
  """Shape, strides and offset of the view selected by `key`.

  `key` holds one entry per addressed axis: a `slice`, an integer (the axis is
  kept with length 1), `None` to insert a new length-1 axis, or a single
  `Ellipsis` standing for as many full slices as needed.
  """
  key = tuple(key)
  if sum(k is Ellipsis for k in key) > 1:
    raise IndexError("An index can only have a single ellipsis ('...')")
  used = sum(1 for k in key if k is not None and k is not Ellipsis)
  if used > len(shape):
    raise IndexError(f"Too many indices for array: array is {len(shape)}-dimensional, but {used} were indexed")
  if Ellipsis in key:
    i = key.index(Ellipsis)
    key = key[:i] + (slice(None),) * (len(shape) - used) + key[i+1:]

  new_shape, new_strides = [], []
  axis = 0
  for k in key:
    if k is None:
      new_shape.append(1)
      new_strides.append(0)
      continue
    length, stride = shape[axis], strides[axis]
    if isinstance(k, slice):
      start, _, step, size = calculate_slices(k.start, k.stop, k.step, length)
      if size: offset += start * stride
      new_shape.append(size)
      new_strides.append(stride * step)
    elif is_index(k):
      offset += normalize_index(int(k), length, axis) * stride
      new_shape.append(1)
      new_strides.append(stride)
    else:
      raise TypeError(f"Invalid index {k!r}, only integers, slices, None and ... are supported")
    axis += 1
  new_shape.extend(shape[axis:])
  new_strides.extend(strides[axis:])
  return tuple(new_shape), tuple(new_strides), offset


class SliceSpec:
  """`s[1, :, ::2]` builds the key tuple taken by `slice()`."""
  def __getitem__(self, key):
    return key if isinstance(key, tuple) else (key,)

s = SliceSpec()
newaxis = None
