import weakref

import numpy as np

from ndview.dtype import canonical
from ndview.env import BORROW_CHECK, BOUNDS_CHECK, DEBUG
from ndview.errors import BorrowError, OutOfMemoryError
from ndview.utils.misc import kernelstat


class Borrow:
  """A shared or mutable loan over the inclusive offset range `extent` of a buffer.

  The buffer only keeps a weak reference, so the loan ends as soon as the last
  view holding it is collected, or earlier through `release()`.
  """
  __slots__ = ("buffer", "extent", "mutable", "active", "__weakref__")

  def __init__(self, buffer, extent, mutable):
    self.buffer, self.extent, self.mutable = buffer, extent, mutable
    self.active = True

  def overlaps(self, extent):
    if extent is None or self.extent is None:
      return False
    return self.extent[0] <= extent[1] and extent[0] <= self.extent[1]

  def release(self):
    if self.active:
      self.active = False
      self.buffer._borrows.discard(self)
      if DEBUG: print(f"[DEBUG] release {self!r}")

  def __repr__(self):
    return f"<Borrow {'mut' if self.mutable else 'shared'} extent={self.extent} active={self.active}>"


class Buffer:
  def __init__(self, length, dtype, data=None):
    self.dtype = canonical(dtype)
    if data is None:
      try:
        data = np.empty(length, dtype=self.dtype)
      except (MemoryError, ValueError) as e:
        # numpy rejects byte sizes past the address space with ValueError
        raise OutOfMemoryError(f"Failed to allocate {length} elements of {self.dtype.__name__}") from e
    self.data = data
    self._borrows = weakref.WeakSet()
    self._owner = None
    kernelstat.log_alloc(self.data.nbytes)
    if DEBUG > 1: print(f"[DEBUG] alloc buffer len={len(self)} dtype={self.dtype.__name__}")

  @classmethod
  def from_numpy(cls, data, dtype=None):
    dtype = data.dtype if dtype is None else dtype
    try:
      flat = np.array(data, dtype=dtype, order="C", copy=True).reshape(-1)
    except MemoryError as e:
      raise OutOfMemoryError(f"Failed to copy {np.size(data)} elements") from e
    return cls(len(flat), flat.dtype, data=flat)

  def __len__(self):
    return len(self.data)

  @property
  def nbytes(self):
    return self.data.nbytes

  def read(self, offset):
    if BOUNDS_CHECK and not 0 <= offset < len(self.data):
      raise IndexError(f"Offset {offset} out of bounds for buffer of length {len(self.data)}")
    return self.data[offset]

  def write(self, offset, value):
    if BOUNDS_CHECK and not 0 <= offset < len(self.data):
      raise IndexError(f"Offset {offset} out of bounds for buffer of length {len(self.data)}")
    self.data[offset] = value

  # ##### Ownership #####
  def claim(self, arr, force=False):
    """Make `arr` the owner handle unless another live handle already owns the buffer."""
    if force or self._owner is None or self._owner() is None:
      self._owner = weakref.ref(arr)
      return True
    return False

  def owned_by(self, arr):
    return self._owner is not None and self._owner() is arr

  # ##### Borrow discipline #####
  @property
  def borrows(self):
    return [b for b in self._borrows if b.active]

  def borrow(self, extent, mutable=False):
    if BORROW_CHECK:
      for b in self.borrows:
        if b.overlaps(extent) and (mutable or b.mutable):
          raise BorrowError(f"Cannot borrow offsets {extent} as {'mutable' if mutable else 'shared'}: "
                            f"conflicts with {b!r}")
    token = Borrow(self, extent, mutable)
    self._borrows.add(token)
    if DEBUG: print(f"[DEBUG] borrow {token!r}")
    return token

  def check_access(self, extent, write, token=None):
    """Access through a handle holding `token` (None for the owner) over `extent`."""
    if not BORROW_CHECK:
      return
    if token is not None:
      if write and not token.mutable:
        raise BorrowError("Cannot write through a shared view")
      if not token.active:
        raise BorrowError(f"Use of released borrow {token!r}")
      return
    # owner reads only conflict with mutable borrows, owner writes with any borrow
    for b in self.borrows:
      if b.overlaps(extent) and (write or b.mutable):
        raise BorrowError(f"Cannot {'write' if write else 'read'} offsets {extent} through the owner "
                          f"while {b!r} is alive")
