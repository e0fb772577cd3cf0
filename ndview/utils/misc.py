from collections import defaultdict

from ndview.env import DEBUG


class KernelStat:
  """Counts dispatched operators and buffer allocations, keyed by operator type."""
  def __init__(self):
    self.reset()

  def reset(self):
    self._counter = defaultdict(lambda: defaultdict(int))

  def log(self, operator):
    kerneltype = type(operator)
    self._counter[kerneltype][operator.name] += 1
    if DEBUG > 1: print(f"[DEBUG] kernel {kerneltype.__name__}.{operator.name}")

  def log_alloc(self, nbytes):
    self._counter["alloc"]["count"] += 1
    self._counter["alloc"]["bytes"] += nbytes

  def get(self, kernel_type):
    return self._counter[kernel_type]

  @property
  def allocs(self):
    return self._counter["alloc"]["count"]

  def total(self):
    return sum(sum(v.values()) for k, v in self._counter.items() if k != "alloc")

  @property
  def info(self):
    info = {}
    for k, v in self._counter.items():
      info[k] = dict(v)
    return info

kernelstat = KernelStat()
