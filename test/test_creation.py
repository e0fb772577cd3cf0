import runtime_path  # isort:skip

import numpy as np
import pytest

import ndview as nv
from ndview.errors import ShapeError
from ndview.layout import Layout


def test_zeros():
  a = nv.zeros((3, 2, 4))
  assert len(a) == 24 and a.len() == 24
  assert a.ndim == 3 and a.shape == (3, 2, 4)
  assert a.strides == (8, 4, 1) and a.layout == Layout.C
  assert a.dtype is np.float64
  assert all(x == 0.0 for x in a)
  assert not a.is_empty() and nv.zeros((3, 0)).is_empty()
  assert nv.zeros(5).shape == (5,)
  with pytest.raises(ShapeError):
    nv.zeros((2, -1))

def test_fill_constructors():
  assert nv.ones((2, 2), dtype=nv.int32).equals([[1, 1], [1, 1]])
  assert nv.ones((2, 2), dtype=nv.int32).dtype is np.int32
  a = nv.from_elem((2, 3), 7)
  assert a.dtype is np.int64 and a.equals(np.full((2, 3), 7))
  assert nv.full((2,), True).dtype is np.bool_
  assert nv.empty((4, 5)).shape == (4, 5)
  e = nv.eye(3)
  assert e.equals(np.eye(3))
  e.fill(2.5)
  assert e.sum() == 22.5

def test_arange_linspace():
  assert nv.arange(5).equals([0, 1, 2, 3, 4])
  assert nv.arange(0.0, 4.0, 1.0).equals([0.0, 1.0, 2.0, 3.0])
  assert nv.arange(5, 0, -2).equals([5, 3, 1])
  assert nv.arange(3, 3).shape == (0,)
  with pytest.raises(ValueError):
    nv.arange(0, 5, 0)
  assert nv.linspace(0.0, 1.0, 5).all_close([0.0, 0.25, 0.5, 0.75, 1.0])
  assert nv.linspace(2.0, 3.0, 1).equals([2.0])
  assert nv.linspace(0.0, 1.0, 0).shape == (0,)

def test_from_literal():
  a = nv.array([[[0, 2, 4], [1, 3, 5]], [[10, 12, 14], [11, 13, 15]]])
  assert a.shape == (2, 2, 3)
  assert a[1, 0, 2] == 14
  assert nv.from_literal(3.5).shape == ()
  with pytest.raises(ShapeError):
    nv.array([[1, 2], [3]])
  with pytest.raises(ShapeError):
    nv.array([["a", None]])

def test_from_shape_vec():
  a = nv.from_shape_vec((2, 3), range(6))
  assert a.equals([[0, 1, 2], [3, 4, 5]])
  f = nv.from_shape_vec((2, 3), range(6), order="F")
  assert f.equals([[0, 2, 4], [1, 3, 5]])
  with pytest.raises(ShapeError):
    nv.from_shape_vec((2, 3), range(5))
  with pytest.raises(ValueError):
    nv.from_shape_vec((2, 3), range(6), order="X")

def test_from_shape_strides():
  a = nv.from_shape_strides((2, 2), (1, 2), [0, 1, 2, 3])
  assert a.equals([[0, 2], [1, 3]])
  assert a.layout == Layout.F
  rev = nv.from_shape_strides((3,), (-1,), [1, 2, 3], offset=2)
  assert rev.equals([3, 2, 1])
  with pytest.raises(ShapeError):
    nv.from_shape_strides((2, 2), (2, 1), [0, 1, 2])
  with pytest.raises(ShapeError):
    nv.from_shape_strides((2, 2), (1, 1), [0, 1, 2, 3])

def test_random():
  u = nv.uniform(-1.0, 1.0, (100, 10), seed=0)
  assert u.shape == (100, 10)
  assert u.min() >= -1.0 and u.max() < 1.0
  n = nv.normal(0.0, 1.0, (1000,), seed=0)
  assert abs(n.mean()) < 0.2
  assert nv.normal(0.0, 1.0, (3,), seed=1).equals(nv.normal(0.0, 1.0, (3,), seed=1))

def test_concatenate_and_stack():
  a = nv.array([[2.0, 2.0], [3.0, 3.0]])
  b = nv.array([[3.0, 3.0]])
  c = nv.concatenate(0, [a, b])
  assert c.equals([[2.0, 2.0], [3.0, 3.0], [3.0, 3.0]])
  assert nv.concatenate(1, [a, a.T]).equals([[2.0, 2.0, 2.0, 3.0], [3.0, 3.0, 2.0, 3.0]])
  st = nv.stack(1, [a, a])
  assert st.shape == (2, 2, 2)
  assert st.equals(np.stack([a.numpy(), a.numpy()], axis=1))
  assert nv.stack(0, [nv.arange(3), nv.arange(3)]).shape == (2, 3)
  assert nv.concatenate(0, [nv.array([1, 2]), nv.array([0.5])]).dtype is np.float64
  with pytest.raises(ShapeError):
    nv.concatenate(1, [a, b])
  with pytest.raises(ShapeError):
    nv.stack(0, [a, b])
  with pytest.raises(ShapeError):
    nv.concatenate(0, [])
  with pytest.raises(ShapeError):
    nv.concatenate(0, [nv.array(1.0)])

def test_repr():
  a = nv.arange(6).into_shape((2, 3))
  text = repr(a.T)
  assert "shape=(3, 2)" in text and "strides=(1, 3)" in text and "layout=F" in text
  assert "[[0, 3]" in str(a.T)
