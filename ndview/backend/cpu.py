from types import SimpleNamespace

import numpy as np

from ndview.backend.base import Array, ElemwiseOps, ProcessingOps, ReduceOps, ViewOps
from ndview.dtype import DEFAULT_FLOAT, DEFAULT_INT, bool_, canonical, is_integer
from ndview.env import DEBUG, GRAPH
from ndview.errors import BorrowError, ShapeError
from ndview.layout import (as_shape, calculate_contiguity, classify, contiguous_strides, offset_extent,
                           size_of, validate)
from ndview.storage import Buffer
from ndview.utils.array import (broadcast_shapes, infer_shape, is_index, normalize_axis, normalize_index,
                                slice_layout)
from ndview.utils.misc import kernelstat

ELEMWISE_MAPPING = {
  ElemwiseOps.NOOP: np.copy, ElemwiseOps.NEG: np.negative, ElemwiseOps.EXP: np.exp,
  ElemwiseOps.LOG: np.log, ElemwiseOps.SQRT: np.sqrt, ElemwiseOps.ABS: np.abs,
  ElemwiseOps.ADD: np.add, ElemwiseOps.SUB: np.subtract, ElemwiseOps.MUL: np.multiply,
  ElemwiseOps.DIV: np.true_divide, ElemwiseOps.FLOORDIV: np.floor_divide, ElemwiseOps.POW: np.power,
  ElemwiseOps.MAXIMUM: np.maximum, ElemwiseOps.MINIMUM: np.minimum,
  ElemwiseOps.EQ: np.equal, ElemwiseOps.NE: np.not_equal, ElemwiseOps.GE: np.greater_equal,
  ElemwiseOps.GT: np.greater, ElemwiseOps.LE: np.less_equal, ElemwiseOps.LT: np.less
}
COMPARISON_OPS = (ElemwiseOps.EQ, ElemwiseOps.NE, ElemwiseOps.GE, ElemwiseOps.GT, ElemwiseOps.LE, ElemwiseOps.LT)
FLOAT_OPS = (ElemwiseOps.DIV, ElemwiseOps.EXP, ElemwiseOps.LOG, ElemwiseOps.SQRT)
REDUCE_FN = {ReduceOps.SUM: np.sum, ReduceOps.PROD: np.prod, ReduceOps.MAX: np.max, ReduceOps.MIN: np.min,
             ReduceOps.MEAN: np.mean, ReduceOps.ALL: np.all, ReduceOps.ANY: np.any}
# reductions without an identity element
REDUCE_NO_IDENTITY = (ReduceOps.MAX, ReduceOps.MIN, ReduceOps.MEAN)


def elemwise_op(op_info):
  shape, dtype = op_info.args["shape"], op_info.args["dtype"]
  out, consume = op_info.args.get("out"), op_info.args.get("consume", False)
  inp = [x if x.shape == shape else x.broadcast(shape, borrow=False) for x in op_info.operands.values()]
  values = [x._read() for x in inp]
  if op_info.operator == ElemwiseOps.FLOORDIV and is_integer(np.result_type(*values)) and not np.all(values[1]):
    raise ZeroDivisionError("integer division by zero")
  with np.errstate(all="ignore"):
    ret_values = ELEMWISE_MAPPING[op_info.operator](*values)

  ret, reused = out, False
  if out is None:
    a = next(iter(op_info.operands.values()))
    ret = a._reuse(shape, dtype) if consume else None
    reused = ret is not None
    if ret is None:
      ret = CPUArray(shape=shape, dtype=dtype)
    if consume: a._consumed = True
  if DEBUG: print(f"[DEBUG] {op_info.operator.name} shape={shape} dtype={canonical(dtype).__name__} "
                  f"out={out is not None} reuse={reused}")
  ret._write(ret_values)
  kernelstat.log(op_info.operator)
  return ret

def reduce_op(op_info):
  x = next(iter(op_info.operands.values()))
  axis, keepdims = op_info.args["axis"], op_info.args["keepdims"]
  op = op_info.operator
  size = x.size if axis is None else x.shape[axis]
  if size == 0 and op in REDUCE_NO_IDENTITY:
    raise ShapeError(f"Can not {op.name.lower()} over an empty sequence (shape={x.shape}, axis={axis})")
  kwargs = {}
  if op in (ReduceOps.SUM, ReduceOps.PROD):
    kwargs["dtype"] = DEFAULT_INT if x.dtype is bool_ else x.dtype
  with np.errstate(all="ignore"):
    ret = REDUCE_FN[op](x._read(), axis=axis, keepdims=keepdims, **kwargs)
  if DEBUG: print(f"[DEBUG] {op.name} x_shp={x.shape} axis={axis} keepdims={keepdims}")
  kernelstat.log(op)
  if axis is None and not keepdims:
    return ret
  return CPUArray(ret)

def matmul_op(op_info):
  a, b = op_info.operands.values()
  ret = np.dot(a._read(), b._read())
  kernelstat.log(op_info.operator)
  if a.ndim == 1 and b.ndim == 1:
    return ret
  return CPUArray(ret)

def view_op(op_info):
  x = next(iter(op_info.operands.values()))
  args, op = op_info.args, op_info.operator
  shape, strides, offset = list(x.shape), list(x.strides), x.offset
  writeable = True
  if op == ViewOps.SLICE:
    shape, strides, offset = slice_layout(x.shape, x.strides, x.offset, args["key"])
  elif op == ViewOps.RESHAPE:
    shape = args["shape"]
    strides = contiguous_strides(shape, args["order"])
  elif op == ViewOps.PERMUTE:
    shape = [x.shape[a] for a in args["axes"]]
    strides = [x.strides[a] for a in args["axes"]]
  elif op == ViewOps.EXPAND:
    shape = args["shape"]
    pad = len(shape) - x.ndim
    src_shape, src_strides = (1,) * pad + x.shape, (0,) * pad + x.strides
    strides = [st if s1 == s2 else 0 for s1, s2, st in zip(src_shape, shape, src_strides)]
    writeable = False
  elif op == ViewOps.SPLIT:
    axis, start, size = args["axis"], args["start"], args["size"]
    shape[axis] = size
    if size: offset += start * strides[axis]
  elif op == ViewOps.INVERT:
    axis = args["axis"]
    if shape[axis]: offset += (shape[axis] - 1) * strides[axis]
    strides[axis] = -strides[axis]
  elif op == ViewOps.INSERT:
    shape.insert(args["axis"], 1)
    strides.insert(args["axis"], 0)
  elif op == ViewOps.INDEX:
    axis = args["axis"]
    offset += args["index"] * strides[axis]
    shape.pop(axis)
    strides.pop(axis)
  elif op == ViewOps.SQUEEZE:
    shape = [s for i, s in enumerate(x.shape) if i not in args["axes"]]
    strides = [s for i, s in enumerate(x.strides) if i not in args["axes"]]
  else:
    raise ValueError(f"Invoke invalid operator {op}")
  kernelstat.log(op)
  return x._derive(tuple(shape), tuple(strides), offset, writeable=writeable, borrow=args.get("borrow", True))

def register_elemwise_op(func):
  def wrapper(*inputs, out=None, consume=False):
    inputs = [inputs[0]] + [inputs[0].asarray(x) for x in inputs[1:]]
    op = func(*inputs)
    shape = broadcast_shapes(*(x.shape for x in inputs))
    if op in COMPARISON_OPS:
      dtype = bool_
    else:
      dtype = canonical(np.result_type(*(x.dtype for x in inputs)))
      if op in FLOAT_OPS and is_integer(dtype):
        dtype = DEFAULT_FLOAT
    if out is not None:
      if consume:
        raise ValueError("`out` and `consume` are mutually exclusive")
      if shape != out.shape:
        raise ShapeError(f"Operands of shape {[x.shape for x in inputs]} can not be written to {out.shape}")
      out._check_writeable()
      dtype = out.dtype
    op_info = SimpleNamespace(operator=op, operands=dict(zip("AB", inputs)),
                              args={"shape": shape, "dtype": dtype, "out": out, "consume": consume})
    return invoke(op_info)
  return wrapper

def register_reduce_op(func):
  def wrapper(x, axis=None, keepdims=False):
    op = func(x, axis=axis, keepdims=keepdims)
    if axis is not None:
      axis = normalize_axis(axis, x.ndim)
    op_info = SimpleNamespace(operator=op, operands={"A": x}, args={"axis": axis, "keepdims": keepdims})
    return invoke(op_info)
  return wrapper

def invoke(op_info):
  optype = type(op_info.operator)
  if optype is ElemwiseOps: return elemwise_op(op_info)
  if optype is ReduceOps: return reduce_op(op_info)
  if optype is ProcessingOps: return matmul_op(op_info)
  if optype is ViewOps: return view_op(op_info)
  raise ValueError(f"Invoke invalid operator {op_info.operator}")


class CPUArray(Array):
  def __init__(self, data=None, shape=None, dtype=None):
    super().__init__(shape, dtype)
    if isinstance(data, Buffer):
      assert self.shape is not None, "Must specify shape when initializing array with raw buffer"
      self.shape = as_shape(self.shape)
      validate(self.shape, contiguous_strides(self.shape), len(data))
      buffer = data
    elif data is not None:
      if isinstance(data, Array):
        data = data.numpy()
      try:
        data = np.asarray(data, dtype=dtype)
      except ValueError as e:
        raise ShapeError(f"Can not build an array from {type(data).__name__}: {e}") from e
      if data.dtype == object:
        raise ShapeError("Nested sequences must be rectangular and hold numbers")
      self.shape = data.shape
      buffer = Buffer.from_numpy(data)
    else:
      assert self.shape is not None, "Array shape is None!"
      self.shape = as_shape(self.shape)
      buffer = Buffer(size_of(self.shape), DEFAULT_FLOAT if dtype is None else dtype)
    self.__buffer = buffer
    buffer.claim(self)
    self.dtype = buffer.dtype
    # meta infos (https://numpy.org/doc/stable/dev/internals.html#numpy-internals)
    self.strides = contiguous_strides(self.shape)
    self.c_contiguous, self.f_contiguous = calculate_contiguity(self.shape, self.strides)
    self.offset = 0  # offset relative to the beginning of the buffer
    self.base = None  # array this one was derived from, None for the owner
    self.writeable = True
    self._borrow = None
    self._consumed = False

  @classmethod
  def _make(cls, buffer, shape, strides, offset, base=None, borrow=None, writeable=True):
    inst = cls.__new__(cls)
    inst.__buffer = buffer
    inst.shape, inst.strides, inst.offset = shape, strides, offset
    inst.dtype = buffer.dtype
    inst.c_contiguous, inst.f_contiguous = calculate_contiguity(shape, strides)
    inst.base, inst.writeable = base, writeable
    inst._borrow, inst._consumed = borrow, False
    return inst

  @property
  def buffer(self):
    if self._consumed:
      raise BorrowError("Use of an array after it was consumed by an operation")
    return self.__buffer

  @property
  def size(self):
    return size_of(self.shape)

  def len(self):
    return self.size

  def __len__(self):
    return self.size

  def is_empty(self):
    return self.size == 0

  @property
  def layout(self):
    return classify(self.shape, self.strides)

  @property
  def is_view(self):
    return self.base is not None

  @property
  def borrow(self):
    return self._borrow

  def numpy(self):
    return np.array(self._read(), copy=True)

  def __repr__(self):
    if self._consumed:
      values = "<consumed>"
    else:
      try:
        values = str(self)
      except BorrowError:
        values = "<mutably borrowed>"
    return (f"{values}, shape={self.shape}, strides={self.strides}, layout={self.layout.flag}, "
            f"dtype={self.dtype.__name__}")

  def __str__(self):
    return np.array2string(self._read(), separator=", ")

  def __bool__(self):
    if self.size != 1:
      raise ValueError("The truth value of an array with more than one element is ambiguous")
    return bool(self._read().reshape(-1)[0])

  def __iter__(self):
    return iter(self.iter())

  def __enter__(self):
    return self

  def __exit__(self, *exc):
    self.release()

  # ##### Memory access #####
  def _extent(self):
    return offset_extent(self.shape, self.strides, self.offset)

  def _offsets(self):
    idx = np.array(self.offset, dtype=np.intp)
    for d, s in zip(self.shape, self.strides):
      idx = idx[..., None] + np.arange(d, dtype=np.intp) * s
    return idx

  def _read(self):
    """Logical elements as a numpy array, sharing memory with the buffer when contiguous."""
    buffer = self.buffer
    buffer.check_access(self._extent(), write=False, token=self._borrow)
    if self.c_contiguous:
      return buffer.data[self.offset:self.offset+self.size].reshape(self.shape)
    if self.f_contiguous:
      return buffer.data[self.offset:self.offset+self.size].reshape(self.shape, order="F")
    return buffer.data[self._offsets()]

  def _check_writeable(self):
    if not self.writeable:
      raise BorrowError("Can not write through a read-only view")
    self.buffer.check_access(self._extent(), write=True, token=self._borrow)

  def _write(self, values):
    self._check_writeable()
    data = self.buffer.data
    values = np.broadcast_to(np.asarray(values), self.shape)
    if self.c_contiguous:
      data[self.offset:self.offset+self.size] = values.reshape(-1)
    else:
      data[self._offsets()] = values

  def _element_offset(self, index):
    if len(index) != self.ndim:
      raise IndexError(f"Index {index} does not match array dimension {self.ndim}")
    offset = self.offset
    for axis, (i, d, s) in enumerate(zip(index, self.shape, self.strides)):
      offset += normalize_index(int(i), d, axis) * s
    return offset

  def _derive(self, shape, strides, offset, writeable=True, borrow=True):
    token = self._borrow
    if token is None and borrow:
      token = self.buffer.borrow(offset_extent(shape, strides, offset), mutable=False)
    writeable = writeable and self.writeable and (token is None or token.mutable)
    return CPUArray._make(self.buffer, shape, strides, offset, base=self, borrow=token, writeable=writeable)

  def _reuse(self, shape, dtype):
    """Handle over this array's buffer for the result of a consuming op, None if it can not be reused."""
    buffer = self.buffer
    if self.base is not None or not buffer.owned_by(self):
      return None
    if self.shape != shape or self.dtype != canonical(dtype):
      return None
    if self.offset != 0 or self.size != len(buffer) or not (self.c_contiguous or self.f_contiguous):
      return None
    if buffer.borrows:
      raise BorrowError(f"Can not consume an array while it is borrowed by {buffer.borrows}")
    ret = CPUArray._make(buffer, self.shape, self.strides, 0)
    buffer.claim(ret, force=True)
    return ret

  def release(self):
    if self._borrow is not None:
      self._borrow.release()

  # ##### Element access #####
  def _is_element_key(self, key):
    return len(key) == self.ndim and all(is_index(k) for k in key)

  def __getitem__(self, key):
    key = key if isinstance(key, tuple) else (key,)
    if self._is_element_key(key):
      offset = self._element_offset(key)
      self.buffer.check_access((offset, offset), write=False, token=self._borrow)
      return self.buffer.read(offset)
    return self.slice(key)

  def __setitem__(self, key, value):
    key = key if isinstance(key, tuple) else (key,)
    if self._is_element_key(key):
      offset = self._element_offset(key)
      if not self.writeable:
        raise BorrowError("Can not write through a read-only view")
      self.buffer.check_access((offset, offset), write=True, token=self._borrow)
      self.buffer.write(offset, value)
    else:
      self._view(ViewOps.SLICE, key=key, borrow=False).assign(value)

  def get(self, index):
    """Element at `index`, or None when the index is out of bounds or does not address one element."""
    index = tuple(index)
    if not self._is_element_key(index):
      return None
    try:
      return self[index]
    except IndexError:
      return None

  def assign(self, value):
    value = self.asarray(value)
    src = value if value.shape == self.shape else value.broadcast(self.shape, borrow=False)
    self._check_writeable()
    # the source may alias the destination region
    self._write(np.array(src._read()))

  def fill(self, value):
    self._check_writeable()
    self._write(np.asarray(value, dtype=self.dtype))

  # ##### Elemwise Ops #####
  for op in ("neg", "exp", "log", "sqrt", "abs"):
    exec(f"@register_elemwise_op\ndef {op}(self, out=None, consume=False): return ElemwiseOps.{op.upper()}")
  for op in ("add", "sub", "mul", "div", "floordiv", "pow", "maximum", "minimum", "eq", "ne", "ge", "gt", "le", "lt"):
    exec(f"@register_elemwise_op\ndef {op}(self, other, out=None, consume=False): return ElemwiseOps.{op.upper()}")
  exec("@register_elemwise_op\ndef contiguous(self): return ElemwiseOps.NOOP")

  def equals(self, other):
    other = self.asarray(other)
    return self.shape == other.shape and bool(np.array_equal(self._read(), other._read()))

  def all_close(self, other, rtol=1e-05, atol=1e-08):
    other = self.asarray(other)
    return self.shape == other.shape and bool(np.allclose(self._read(), other._read(), rtol=rtol, atol=atol))

  def astype(self, dtype):
    ret = CPUArray(shape=self.shape, dtype=dtype)
    ret._write(self._read())
    return ret

  # ##### Reduce Ops #####
  for op in ("sum", "prod", "max", "min", "mean", "all", "any"):
    exec(f"@register_reduce_op\ndef {op}(self, axis=None, keepdims=False): return ReduceOps.{op.upper()}")

  # ##### Processing Ops #####
  def dot(self, other):
    a, b = self, self.asarray(other)
    if not (1 <= a.ndim <= 2 and 1 <= b.ndim <= 2):
      raise ShapeError(f"dot supports 1-d and 2-d operands, got {a.shape} and {b.shape}")
    k1 = a.shape[-1]
    k2 = b.shape[0]
    if k1 != k2:
      raise ShapeError(f"invalid shape for dot {a.shape} @ {b.shape}")
    op_info = SimpleNamespace(operator=ProcessingOps.DOT, operands={"A": a, "B": b}, args={})
    return invoke(op_info)

  # ##### View Ops #####
  def _view(self, op, **args):
    op_info = SimpleNamespace(operator=op, operands={"A": self}, args=args)
    arr = invoke(op_info)
    if GRAPH > 1: print(f"[GRAPH] {op.name} {self.shape} -> {arr.shape}")
    return arr

  def view(self):
    return self._derive(self.shape, self.strides, self.offset)

  def view_mut(self):
    if self._borrow is not None:
      if not self._borrow.mutable:
        raise BorrowError("Can not borrow a shared view as mutable")
      token = self._borrow
    else:
      if not self.writeable:
        raise BorrowError("Can not borrow a read-only view as mutable")
      token = self.buffer.borrow(self._extent(), mutable=True)
    return CPUArray._make(self.buffer, self.shape, self.strides, self.offset, base=self, borrow=token)

  def to_owned(self):
    return self.contiguous()

  def clone(self):
    if self.base is None:
      return self.to_owned()
    if self._borrow is not None and self._borrow.mutable:
      raise BorrowError("Can not clone a mutable view while it is still borrowed")
    return CPUArray._make(self.buffer, self.shape, self.strides, self.offset, base=self.base,
                          borrow=self._borrow, writeable=self.writeable)

  def slice(self, key, borrow=True):
    key = key if isinstance(key, tuple) else (key,)
    return self._view(ViewOps.SLICE, key=key, borrow=borrow)

  def into_shape(self, shape, order="C"):
    shape = infer_shape(shape, self.size)
    if size_of(shape) != self.size:
      raise ShapeError(f"Can not reshape {self.shape} to {shape}")
    contiguous = {"C": self.c_contiguous, "F": self.f_contiguous}
    if order not in contiguous:
      raise ValueError(f"Invalid order {order!r}, expected 'C' or 'F'")
    if not contiguous[order]:
      raise ShapeError(f"Array with strides {self.strides} is not {order}-contiguous, "
                       f"use to_shape() or to_owned() before reshaping")
    return self._view(ViewOps.RESHAPE, shape=shape, order=order)

  def to_shape(self, shape, order="C"):
    shape = infer_shape(shape, self.size)
    if size_of(shape) != self.size:
      raise ShapeError(f"Can not reshape {self.shape} to {shape}")
    if (self.c_contiguous if order == "C" else self.f_contiguous):
      return self.into_shape(shape, order=order)
    return CPUArray(np.reshape(self._read(), shape, order=order))

  def flatten(self):
    if self.c_contiguous:
      return self.into_shape((self.size,))
    return self.to_owned().into_shape((self.size,))

  def as_standard_layout(self):
    return self if self.c_contiguous else self.to_owned()

  def broadcast(self, shape, borrow=True):
    shape = as_shape(shape)
    if len(shape) < self.ndim:
      raise ShapeError(f"Can not broadcast {self.shape} to lower rank shape {shape}")
    size_of(shape)
    src_shape = (1,) * (len(shape) - self.ndim) + self.shape
    for s1, s2 in zip(src_shape, shape):
      if s1 != s2 and s1 != 1:
        raise ShapeError(f"Can not broadcast {self.shape} to {shape}")
    return self._view(ViewOps.EXPAND, shape=shape, borrow=borrow)

  def expand(self, shape):
    if len(shape) != self.ndim:
      raise ShapeError(f"expand keeps the rank of {self.shape}, got {tuple(shape)}")
    return self.broadcast(shape)

  def permute(self, axes):
    axes = tuple(axes)
    if sorted(axes) != list(range(self.ndim)):
      raise IndexError(f"Invalid axes {axes} for array of dimension {self.ndim}")
    return self._view(ViewOps.PERMUTE, axes=axes)

  def swap_axes(self, a, b):
    axes = list(range(self.ndim))
    a, b = normalize_axis(a, self.ndim), normalize_axis(b, self.ndim)
    axes[a], axes[b] = axes[b], axes[a]
    return self.permute(axes)

  def invert_axis(self, axis):
    return self._view(ViewOps.INVERT, axis=normalize_axis(axis, self.ndim))

  def insert_axis(self, axis):
    return self._view(ViewOps.INSERT, axis=normalize_axis(axis, self.ndim + 1))

  def index_axis(self, axis, index, borrow=True):
    axis = normalize_axis(axis, self.ndim)
    index = normalize_index(index, self.shape[axis], axis)
    return self._view(ViewOps.INDEX, axis=axis, index=index, borrow=borrow)

  def squeeze(self, axis=None):
    if axis is None:
      axes = tuple(i for i, s in enumerate(self.shape) if s == 1)
    else:
      axes = (axis,) if isinstance(axis, int) else tuple(axis)
      axes = tuple(normalize_axis(a, self.ndim) for a in axes)
      for a in axes:
        if self.shape[a] != 1:
          raise ShapeError(f"Can not squeeze axis {a} with length {self.shape[a]}")
    if not axes:
      return self.view()
    return self._view(ViewOps.SQUEEZE, axes=axes)

  def split_at(self, axis, index):
    axis = normalize_axis(axis, self.ndim)
    length = self.shape[axis]
    if not 0 <= index <= length:
      raise IndexError(f"Split index {index} out of range for axis {axis} with length {length}")
    return (self._view(ViewOps.SPLIT, axis=axis, start=0, size=index),
            self._view(ViewOps.SPLIT, axis=axis, start=index, size=length - index))

  def split(self, axis, sizes):
    axis = normalize_axis(axis, self.ndim)
    sizes = tuple(sizes)
    if any(s < 0 for s in sizes) or sum(sizes) != self.shape[axis]:
      raise ShapeError(f"Sizes {sizes} do not partition axis {axis} with length {self.shape[axis]}")
    views, start = [], 0
    for size in sizes:
      views.append(self._view(ViewOps.SPLIT, axis=axis, start=start, size=size))
      start += size
    return tuple(views)

  # ##### Iteration #####
  def iter(self):
    from ndview.iterators import Iter
    return Iter(self)

  def iter_mut(self):
    from ndview.iterators import IterMut
    return IterMut(self)

  def indexed_iter(self):
    from ndview.iterators import IndexedIter
    return IndexedIter(self)

  def axis_iter(self, axis):
    from ndview.iterators import AxisIter
    return AxisIter(self, axis)

  def outer_iter(self):
    return self.axis_iter(0)

  def axis_chunks_iter(self, axis, size):
    from ndview.iterators import AxisChunksIter
    return AxisChunksIter(self, axis, size)

  def windows(self, window, stride=None):
    from ndview.iterators import Windows
    return Windows(self, window, stride)

  def fold(self, init, fn):
    acc = init
    for value in self.iter():
      acc = fn(acc, value)
    return acc

  def map(self, fn, dtype=None):
    values = [fn(v) for v in self.iter()]
    return CPUArray(np.array(values, dtype=dtype).reshape(self.shape))

  mapv = map

  def map_inplace(self, fn):
    for ref in self.iter_mut():
      ref.set(fn(ref.get()))

  def zip_mut_with(self, other, fn):
    other = self.asarray(other)
    if broadcast_shapes(self.shape, other.shape) != self.shape:
      raise ShapeError(f"Can not broadcast {other.shape} to {self.shape}")
    src = other if other.shape == self.shape else other.broadcast(self.shape, borrow=False)
    self._check_writeable()
    for ref, value in zip(self.iter_mut(), src.iter()):
      ref.set(fn(ref.get(), value))

  def lineage(self):
    from ndview.graph import LineageGraph
    graph = LineageGraph(self)
    if GRAPH: print(f"[GRAPH] {graph.count()} nodes, depth={graph.depth(self)}")
    return graph

  # ##### Creation Ops #####
  @classmethod
  def empty(cls, shape, dtype=DEFAULT_FLOAT):
    return cls(shape=shape, dtype=dtype)

  @classmethod
  def full(cls, shape, value, dtype=None):
    dtype = canonical(np.asarray(value).dtype) if dtype is None else dtype
    inst = cls(shape=shape, dtype=dtype)
    inst.buffer.data.fill(value)
    return inst

  @classmethod
  def uniform(cls, a, b, shape, dtype=DEFAULT_FLOAT, seed=None):
    rng = np.random.default_rng(seed)
    return cls(rng.uniform(a, b, size=shape).astype(dtype))

  @classmethod
  def normal(cls, loc, scale, shape, dtype=DEFAULT_FLOAT, seed=None):
    rng = np.random.default_rng(seed)
    return cls(rng.normal(loc, scale, size=shape).astype(dtype))

  @classmethod
  def from_buffer(cls, buffer, shape, strides=None, offset=0, allow_overlap=False):
    shape = as_shape(shape)
    strides = contiguous_strides(shape) if strides is None else tuple(strides)
    validate(shape, strides, len(buffer), offset, allow_overlap=allow_overlap)
    inst = cls._make(buffer, shape, strides, offset)
    # a handle over a buffer another array owns never takes it over
    buffer.claim(inst)
    return inst
