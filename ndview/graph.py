import os

import networkx as nx

from ndview.env import GRAPH


class LineageGraph:
  """Derivation graph of arrays: an edge runs from each array to the views derived from it."""
  colors = {"owner": "#f37748", "shared": "#84bcda", "mut": "#ecc30b", "internal": "#e5e5e5"}

  def __init__(self, *arrays):
    self.G = nx.DiGraph()
    self.arrays = {}
    for arr in arrays:
      self.add(arr)

  @staticmethod
  def kind(arr):
    if arr.base is None: return "owner"
    if arr.borrow is None: return "internal"
    return "mut" if arr.borrow.mutable else "shared"

  def add(self, arr):
    node = arr
    while node is not None and id(node) not in self.arrays:
      self.arrays[id(node)] = node
      label = f"{node.shape}\n{node.strides}\nofst={node.offset} {node.layout.flag}"
      self.G.add_node(id(node), label=label, kind=self.kind(node),
                      style="filled", fillcolor=self.colors[self.kind(node)])
      if node.base is not None:
        self.G.add_edge(id(node.base), id(node))
      node = node.base
    return self

  def count(self):
    return self.G.number_of_nodes()

  def owners(self):
    return [self.arrays[n] for n in self.G.nodes if self.G.in_degree(n) == 0]

  def views_of(self, arr):
    return [self.arrays[n] for n in nx.descendants(self.G, id(arr))]

  def depth(self, arr):
    root = next(n for n in nx.ancestors(self.G, id(arr)) | {id(arr)} if self.G.in_degree(n) == 0)
    return nx.shortest_path_length(self.G, root, id(arr))

  def visualize(self, graph_name):
    nx.drawing.nx_pydot.write_dot(self.G, f"/tmp/{graph_name}.dot")
    os.system(f"dot -Tsvg /tmp/{graph_name}.dot -o /tmp/{graph_name}.svg")
    if GRAPH: print(f"[GRAPH] save to /tmp/{graph_name}.svg")
