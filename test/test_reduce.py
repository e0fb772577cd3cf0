import runtime_path  # isort:skip

import numpy as np
import pytest

import ndview as nv
from ndview.errors import ShapeError
from ndview.utils.array import s

np.random.seed(0)

rnd = lambda shape: np.random.normal(0, 1, shape)

def check_array(myarr, nparr, rtol=1e-6):
  assert myarr.shape == nparr.shape
  assert np.allclose(myarr.numpy(), nparr, rtol=rtol)

def test_sum_axis():
  a = nv.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
  assert a.sum_axis(0).equals([5.0, 7.0, 9.0])
  assert a.sum_axis(1).equals([6.0, 15.0])
  assert a.sum_axis(0).sum_axis(0).equals(nv.array(21.0))
  assert a.sum_axis(0).sum_axis(0).shape == ()
  assert a.sum() == 21.0
  assert a.product_axis(1).equals([6.0, 120.0])
  assert a.mean_axis(0).equals([2.5, 3.5, 4.5])
  assert a.max_axis(1).equals([3.0, 6.0])
  assert a.min_axis(-1).equals([1.0, 4.0])

def test_reduce_matches_numpy():
  shape = (2, 3, 4)
  nparr = rnd(shape)
  arr = nv.array(nparr)
  views = [(arr, nparr), (arr.T, nparr.T), (arr.slice(s[:, ::-2, 1:]), nparr[:, ::-2, 1:])]
  for op in ("sum", "prod", "max", "min", "mean"):
    for myarr, ref in views:
      fn = getattr(np, op)
      assert np.allclose(getattr(myarr, op)(), fn(ref))
      for axis in range(-3, 3):
        check_array(getattr(myarr, op)(axis=axis), fn(ref, axis=axis))
        check_array(getattr(myarr, op)(axis=axis, keepdims=True), fn(ref, axis=axis, keepdims=True))
      check_array(getattr(myarr, op)(keepdims=True), fn(ref, keepdims=True))

def test_reduce_dtype():
  ints = nv.array([[1, 2], [3, 4]])
  assert ints.sum().dtype == np.int64
  assert ints.mean() == 2.5
  flags = nv.array([True, True, False])
  assert flags.sum() == 2
  assert not flags.all() and flags.any()
  assert nv.array([[True, False], [True, True]]).all(axis=0).equals([True, False])

def test_reduce_bad_axis():
  a = nv.zeros((2, 3))
  with pytest.raises(IndexError):
    a.sum_axis(2)
  with pytest.raises(IndexError):
    a.max(axis=-3)
  with pytest.raises(TypeError):
    a.sum(axis=0.5)

def test_reduce_empty():
  a = nv.zeros((0, 3))
  assert a.sum() == 0.0
  assert a.prod() == 1.0
  assert a.sum_axis(0).equals([0.0, 0.0, 0.0])
  assert a.max_axis(1).shape == (0,)
  with pytest.raises(ShapeError):
    a.max()
  with pytest.raises(ShapeError):
    a.min_axis(0)
  with pytest.raises(ShapeError):
    a.mean()
