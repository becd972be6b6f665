"""Shared lattice fixtures."""

from typing import Dict, Iterable, Optional, Sequence, Tuple

import pytest

from lattice_app.lattice import Lattice
from lattice_app.lattice_io import parse_lattice
from lattice_app.schemas import LatticeEdge, LatticeHeader

U1_TEXT = (
    "id U1\n"
    "start 0\n"
    "end 2\n"
    "numNodes 3\n"
    "numEdges 2\n"
    "node 0 0.00\n"
    "node 1 0.50\n"
    "node 2 1.00\n"
    "edge 0 1 hello 10 2\n"
    "edge 1 2 -silence- 0 0\n"
)

# Six nodes, eight edges, edge records deliberately out of (src, dst) order.
BRANCHY_TEXT = (
    "id utt42\n"
    "start 0\n"
    "end 5\n"
    "numNodes 6\n"
    "numEdges 8\n"
    "node 0 0.00\n"
    "node 1 0.20\n"
    "node 2 0.50\n"
    "node 3 0.50\n"
    "node 4 0.80\n"
    "node 5 1.00\n"
    "edge 2 5 yes 30 1\n"
    "edge 0 1 -silence- 5 0\n"
    "edge 0 2 the 10 3\n"
    "edge 1 2 the 4 3\n"
    "edge 1 3 a 6 1\n"
    "edge 2 4 new_york 8 2\n"
    "edge 3 4 newark 7 6\n"
    "edge 4 5 -silence- 1 0\n"
)

EdgeSpec = Tuple[int, int, str, int, int]


def make_lattice(
    edges: Iterable[EdgeSpec],
    num_nodes: int,
    *,
    start: int = 0,
    end: Optional[int] = None,
    times: Optional[Sequence[float]] = None,
    utterance_id: str = "test",
) -> Lattice:
    """Build a Lattice directly from (src, dst, label, am, lm) tuples."""
    edge_map: Dict[Tuple[int, int], LatticeEdge] = {}
    for u, v, label, am, lm in edges:
        edge_map[(u, v)] = LatticeEdge(label=label, am_score=am, lm_score=lm)
    if times is None:
        times = [i / max(1, num_nodes - 1) for i in range(num_nodes)]
    header = LatticeHeader(
        utterance_id=utterance_id,
        start=start,
        end=num_nodes - 1 if end is None else end,
        num_nodes=num_nodes,
        num_edges=len(edge_map),
    )
    return Lattice(header, times, edge_map)


@pytest.fixture
def u1():
    return parse_lattice(U1_TEXT, source="U1.lattice")


@pytest.fixture
def branchy():
    return parse_lattice(BRANCHY_TEXT, source="utt42.lattice")
