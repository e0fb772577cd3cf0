import numpy as np

bool_ = np.bool_
int32, int64 = np.int32, np.int64
float32, float64 = np.float32, np.float64

DEFAULT_FLOAT = float64
DEFAULT_INT = int64

def canonical(dtype):
  # np.dtype objects and scalar types both map to the scalar type
  return np.dtype(dtype).type

def is_integer(dtype):
  return np.issubdtype(dtype, np.integer) or np.issubdtype(dtype, np.bool_)
