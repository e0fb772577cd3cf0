import itertools

from ndview.errors import BorrowError, ShapeError
from ndview.layout import as_shape
from ndview.utils.array import normalize_axis


def offsets(shape, strides, offset):
  """Buffer offsets of every index tuple, in row-major logical order."""
  for index in itertools.product(*(range(d) for d in shape)):
    yield index, offset + sum(i * s for i, s in zip(index, strides))


class ElemRef:
  __slots__ = ("arr", "offset")

  def __init__(self, arr, offset):
    self.arr, self.offset = arr, offset

  def get(self):
    self.arr.buffer.check_access((self.offset, self.offset), write=False, token=self.arr.borrow)
    return self.arr.buffer.read(self.offset)

  def set(self, value):
    if not self.arr.writeable:
      raise BorrowError("Can not write through a read-only view")
    self.arr.buffer.check_access((self.offset, self.offset), write=True, token=self.arr.borrow)
    self.arr.buffer.write(self.offset, value)

  def __repr__(self):
    return f"<ElemRef offset={self.offset}>"


class Iter:
  """Element values in logical row-major order; every `iter()` call starts over."""
  def __init__(self, arr):
    self.arr = arr

  def __len__(self):
    return self.arr.size

  def __iter__(self):
    arr = self.arr
    if arr.c_contiguous:
      # walks the buffer sequentially, the numpy view stays live
      yield from arr._read().reshape(-1)
      return
    arr.buffer.check_access(arr._extent(), write=False, token=arr.borrow)
    for _, offset in offsets(arr.shape, arr.strides, arr.offset):
      yield arr.buffer.read(offset)


class IterMut(Iter):
  def __iter__(self):
    arr = self.arr
    arr._check_writeable()
    for _, offset in offsets(arr.shape, arr.strides, arr.offset):
      yield ElemRef(arr, offset)


class IndexedIter(Iter):
  def __iter__(self):
    arr = self.arr
    arr.buffer.check_access(arr._extent(), write=False, token=arr.borrow)
    for index, offset in offsets(arr.shape, arr.strides, arr.offset):
      yield index, arr.buffer.read(offset)


class AxisIter:
  """Sub-views along `axis`, with that axis removed."""
  def __init__(self, arr, axis):
    self.arr, self.axis = arr, normalize_axis(axis, arr.ndim)

  def __len__(self):
    return self.arr.shape[self.axis]

  def __iter__(self):
    for i in range(len(self)):
      yield self.arr.index_axis(self.axis, i)


class AxisChunksIter:
  """Views of at most `size` along `axis`; the last chunk may be shorter."""
  def __init__(self, arr, axis, size):
    if size <= 0:
      raise ValueError(f"Chunk size must be positive, got {size}")
    self.arr, self.axis, self.size = arr, normalize_axis(axis, arr.ndim), size

  def __len__(self):
    return -(-self.arr.shape[self.axis] // self.size)

  def __iter__(self):
    length = self.arr.shape[self.axis]
    sizes = [min(self.size, length - start) for start in range(0, length, self.size)]
    yield from self.arr.split(self.axis, sizes)


class Windows:
  """Every window of shape `window`, placed `stride` elements apart along each axis."""
  def __init__(self, arr, window, stride=None):
    window = as_shape(window)
    stride = (1,) * len(window) if stride is None else as_shape(stride)
    if len(window) != arr.ndim or len(stride) != arr.ndim:
      raise ShapeError(f"Window {window} and stride {stride} must match array dimension {arr.ndim}")
    if 0 in window:
      raise ValueError(f"Window size must be positive on every axis, got {window}")
    if 0 in stride:
      raise ValueError(f"Window stride must be positive on every axis, got {stride}")
    self.arr, self.window, self.stride = arr, window, stride

  def _starts(self):
    return [range(0, d - w + 1, st) for d, w, st in zip(self.arr.shape, self.window, self.stride)]

  def __len__(self):
    n = 1
    for r in self._starts():
      n *= len(r)
    return n

  def __iter__(self):
    for start in itertools.product(*self._starts()):
      yield self.arr.slice(tuple(slice(i, i + w) for i, w in zip(start, self.window)))
