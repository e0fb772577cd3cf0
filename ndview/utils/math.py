import functools
import operator


def prod(data):
  return functools.reduce(operator.mul, data, 1)
