from enum import Enum

import numpy as np

from ndview.dtype import DEFAULT_FLOAT

ElemwiseOps = Enum("ElemwiseOps",
  ["NOOP", "NEG", "EXP", "LOG", "SQRT", "ABS", "ADD", "SUB", "MUL", "DIV", "FLOORDIV", "POW",
   "MAXIMUM", "MINIMUM", "EQ", "NE", "GE", "GT", "LE", "LT"])
ReduceOps = Enum("ReduceOps", ["SUM", "PROD", "MAX", "MIN", "MEAN", "ALL", "ANY"])
ProcessingOps = Enum("ProcessingOps", ["DOT"])
ViewOps = Enum("ViewOps", ["SLICE", "RESHAPE", "PERMUTE", "EXPAND", "SPLIT", "INVERT", "INSERT", "INDEX", "SQUEEZE"])

class Array:
  for op in ("add", "sub", "mul", "div", "floordiv", "pow"):
    op_ = "truediv" if op == "div" else op
    exec(f"def __{op_}__(self, other): return self.{op}(self.asarray(other))")
    exec(f"def __i{op_}__(self, other): return self.{op}(self.asarray(other), out=self)")
    exec(f"def __r{op_}__(self, other): return self.asarray(other).{op}(self)")
  for op in ("eq", "ne", "ge", "gt", "le", "lt"):
    exec(f"def __{op}__(self, other): return self.{op}(self.asarray(other))")
  exec("def __neg__(self): return self.neg()")
  exec("def __abs__(self): return self.abs()")

  def __init__(self, shape=None, dtype=DEFAULT_FLOAT):
    self.shape, self.dtype = shape, dtype

  def __matmul__(self, other):
    return self.dot(self.asarray(other))

  @property
  def size(self):
    raise NotImplementedError

  @property
  def ndim(self):
    return len(self.shape)

  def asarray(self, obj):
    if isinstance(obj, self.__class__):
      return obj
    if issubclass(obj.__class__, Array):
      return self.__class__(obj.numpy())
    if isinstance(obj, (bool, int, float, complex)):
      # python scalars take the array's precision, like numpy's weak scalars
      return self.__class__(obj, dtype=np.result_type(self.dtype, obj))
    return self.__class__(obj)

  def numpy(self):
    raise NotImplementedError

  # ##### Elemwise Ops #####
  for op in ("neg", "exp", "log", "sqrt", "abs"):
    exec(f"def {op}(self, out=None, consume=False): raise NotImplementedError")
  for op in ("add", "sub", "mul", "div", "floordiv", "pow", "maximum", "minimum", "eq", "ne", "ge", "gt", "le", "lt"):
    exec(f"def {op}(self, other, out=None, consume=False): raise NotImplementedError")

  # ##### Reduce Ops #####
  for op in ("sum", "prod", "max", "min", "mean", "all", "any"):
    exec(f"def {op}(self, axis=None, keepdims=False): raise NotImplementedError")
  for op, name in (("sum", "sum"), ("prod", "product"), ("max", "max"), ("min", "min"), ("mean", "mean")):
    exec(f"def {name}_axis(self, axis): return self.{op}(axis=axis)")

  # ##### Processing Ops #####
  def dot(self, other): raise NotImplementedError

  # ##### View Ops #####
  def slice(self, key): raise NotImplementedError
  def into_shape(self, shape, order="C"): raise NotImplementedError
  def broadcast(self, shape): raise NotImplementedError
  def expand(self, shape): raise NotImplementedError
  def squeeze(self, axis=None): raise NotImplementedError
  def permute(self, axes): raise NotImplementedError
  def split_at(self, axis, index): raise NotImplementedError

  def reshape(self, shape, order="C"):
    return self.into_shape(shape, order=order)

  def transpose(self, axes=None):
    return self.permute(tuple(range(self.ndim))[::-1] if axes is None else axes)

  @property
  def T(self):
    return self.transpose()

  # ##### Slice Ops #####
  def __getitem__(self, key): raise NotImplementedError
  def __setitem__(self, key, value): raise NotImplementedError

  # #### Creation Ops #####
  @classmethod
  def uniform(cls, a, b, shape, dtype=DEFAULT_FLOAT): raise NotImplementedError
  @classmethod
  def normal(cls, loc, scale, shape, dtype=DEFAULT_FLOAT): raise NotImplementedError
  @classmethod
  def empty(cls, shape, dtype=DEFAULT_FLOAT): raise NotImplementedError
  @classmethod
  def full(cls, shape, value, dtype=None): raise NotImplementedError
