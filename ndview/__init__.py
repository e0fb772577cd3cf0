from ndview.backend.cpu import CPUArray
from ndview.creation import (arange, array, concatenate, empty, eye, from_elem, from_literal, from_shape_strides,
                             from_shape_vec, full, linspace, normal, ones, stack, uniform, zeros)
from ndview.dtype import bool_, float32, float64, int32, int64
from ndview.errors import BorrowError, OutOfMemoryError, ShapeError
from ndview.layout import Layout, classify, contiguous_strides, validate
from ndview.utils.array import broadcast_shapes, newaxis, s

Array = CPUArray

__version__ = "0.1.0"
