import numpy as np

from ndview.backend.cpu import CPUArray
from ndview.dtype import DEFAULT_FLOAT
from ndview.errors import ShapeError
from ndview.layout import as_shape, size_of
from ndview.storage import Buffer
from ndview.utils.array import normalize_axis


def zeros(shape, dtype=DEFAULT_FLOAT):
  return CPUArray.full(as_shape(shape), 0, dtype=dtype)

def ones(shape, dtype=DEFAULT_FLOAT):
  return CPUArray.full(as_shape(shape), 1, dtype=dtype)

def empty(shape, dtype=DEFAULT_FLOAT):
  return CPUArray.empty(as_shape(shape), dtype=dtype)

def full(shape, value, dtype=None):
  return CPUArray.full(as_shape(shape), value, dtype=dtype)

def from_elem(shape, value, dtype=None):
  return full(shape, value, dtype=dtype)

def arange(start, stop=None, step=1, dtype=None):
  """Half-open range [start, stop) with increment `step`; `arange(n)` counts from zero."""
  if stop is None:
    start, stop = 0, start
  if step == 0:
    raise ValueError("arange step cannot be zero")
  return CPUArray(np.arange(start, stop, step, dtype=dtype))

def linspace(start, stop, n, dtype=DEFAULT_FLOAT):
  """`n` evenly spaced values from `start` to `stop`, both included."""
  if n < 0:
    raise ShapeError(f"Number of samples must be non-negative, got {n}")
  return CPUArray(np.linspace(start, stop, n, dtype=dtype))

def from_literal(data, dtype=None):
  return CPUArray(data, dtype=dtype)

array = from_literal

def from_shape_vec(shape, data, order="C", dtype=None):
  shape = as_shape(shape)
  data = np.asarray(list(data) if not isinstance(data, np.ndarray) else data, dtype=dtype).reshape(-1)
  if len(data) != size_of(shape):
    raise ShapeError(f"Sequence of length {len(data)} does not match shape {shape}")
  if order not in ("C", "F"):
    raise ValueError(f"Invalid order {order!r}, expected 'C' or 'F'")
  return CPUArray(data.reshape(shape, order=order))

def from_shape_strides(shape, strides, data, offset=0, dtype=None):
  """Array over a copy of flat `data` laid out with explicit element strides."""
  data = np.asarray(data, dtype=dtype).reshape(-1)
  buffer = Buffer.from_numpy(data)
  return CPUArray.from_buffer(buffer, shape, strides, offset)

def eye(n, dtype=DEFAULT_FLOAT):
  ret = zeros((n, n), dtype=dtype)
  for i in range(n):
    ret[i, i] = 1
  return ret

def uniform(a, b, shape, dtype=DEFAULT_FLOAT, seed=None):
  return CPUArray.uniform(a, b, as_shape(shape), dtype=dtype, seed=seed)

def normal(loc, scale, shape, dtype=DEFAULT_FLOAT, seed=None):
  return CPUArray.normal(loc, scale, as_shape(shape), dtype=dtype, seed=seed)

def _check_arrays(arrays):
  arrays = [a if isinstance(a, CPUArray) else CPUArray(a) for a in arrays]
  if not arrays:
    raise ShapeError("Need at least one array to stack or concatenate")
  return arrays

def concatenate(axis, arrays):
  arrays = _check_arrays(arrays)
  ndim = arrays[0].ndim
  if ndim == 0:
    raise ShapeError("Can not concatenate rank-0 arrays")
  axis = normalize_axis(axis, ndim)
  first = arrays[0].shape
  for a in arrays[1:]:
    if a.ndim != ndim or any(d1 != d2 for i, (d1, d2) in enumerate(zip(first, a.shape)) if i != axis):
      raise ShapeError(f"Can not concatenate {first} and {a.shape} along axis {axis}")
  shape = list(first)
  shape[axis] = sum(a.shape[axis] for a in arrays)
  dtype = np.result_type(*(a.dtype for a in arrays))
  ret = CPUArray(shape=tuple(shape), dtype=dtype)
  start = 0
  for a in arrays:
    key = tuple(slice(start, start + a.shape[axis]) if i == axis else slice(None) for i in range(ndim))
    ret.slice(key, borrow=False).assign(a)
    start += a.shape[axis]
  return ret

def stack(axis, arrays):
  arrays = _check_arrays(arrays)
  first = arrays[0].shape
  for a in arrays[1:]:
    if a.shape != first:
      raise ShapeError(f"Can not stack arrays of shape {first} and {a.shape}")
  axis = normalize_axis(axis, len(first) + 1)
  return concatenate(axis, [a.insert_axis(axis) for a in arrays])
