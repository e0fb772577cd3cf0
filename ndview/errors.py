class ShapeError(ValueError):
  """Incompatible shape or strides: reshape, broadcast, dot, construction."""


class BorrowError(RuntimeError):
  """A view conflicts with an existing borrow of the same buffer region."""


class OutOfMemoryError(MemoryError):
  pass
