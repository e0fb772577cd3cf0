import runtime_path  # isort:skip

import ndview as nv
from ndview.graph import LineageGraph
from ndview.utils.array import s


def test_lineage():
  a = nv.zeros((4, 4))
  v = a.slice(s[1:, :])
  t = v.T
  g = LineageGraph(t)
  assert g.count() == 3
  owners = g.owners()
  assert len(owners) == 1 and owners[0] is a
  assert g.depth(t) == 2 and g.depth(a) == 0
  assert {id(x) for x in g.views_of(a)} == {id(v), id(t)}
  assert g.G.nodes[id(a)]["kind"] == "owner"
  assert g.G.nodes[id(v)]["kind"] == "shared"

def test_lineage_kinds():
  a = nv.zeros((2, 2))
  m = a.view_mut()
  row = m.slice(s[0, :])
  g = row.lineage()
  assert g.G.nodes[id(row)]["kind"] == "mut"
  b = nv.ones(3).broadcast((2, 3))
  g.add(b)
  assert g.count() == 5
  assert g.G.nodes[id(b)]["kind"] == "shared"
  assert len(g.owners()) == 2
  m.release()
