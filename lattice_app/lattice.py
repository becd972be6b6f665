# lattice_app/lattice.py
"""
In-memory lattice: a frozen networkx.DiGraph of timestamped nodes and
word-labelled, dually-scored edges.

Public API
----------
Lattice(header, times, edges)      -> immutable lattice
Lattice.edges()                    -> [(src, dst, LatticeEdge)] in row-major order
Lattice.successors(i) / predecessors(i)

Notes
-----
• Node ids are the dense integers 0..num_nodes-1, assigned by file order.
• At most one edge per ordered pair; an absent pair is not the same as a
  zero-scored edge (edge(i, j) returns None).
• The graph is frozen after construction; any add/remove raises
  networkx.NetworkXError.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from .errors import ParseError
from .schemas import LatticeEdge, LatticeHeader

SILENCE = "-silence-"
WORD_SEPARATOR = "_"

EdgeKey = Tuple[int, int]


class Lattice:
    def __init__(
        self,
        header: LatticeHeader,
        times: Sequence[float],
        edges: Mapping[EdgeKey, LatticeEdge],
        *,
        source: str = "<memory>",
    ) -> None:
        n = int(header.num_nodes)
        if len(times) != n:
            raise ParseError(f"expected {n} node times, got {len(times)}", source=source)
        for name, idx in (("start", header.start), ("end", header.end)):
            if not 0 <= idx < n:
                raise ParseError(f"{name} index {idx} outside [0, {n})", source=source)

        G = nx.DiGraph(utterance_id=header.utterance_id)
        for i, t in enumerate(times):
            G.add_node(i, time=float(t))
        for (u, v), e in edges.items():
            if not (0 <= u < n and 0 <= v < n):
                raise ParseError(f"edge {u} -> {v} references a node outside [0, {n})", source=source)
            G.add_edge(u, v, label=e.label, am_score=e.am_score, lm_score=e.lm_score, edge=e)

        self._header = header
        self._times: Tuple[float, ...] = tuple(float(t) for t in times)
        self._edge_list: List[Tuple[int, int, LatticeEdge]] = [
            (u, v, G.edges[u, v]["edge"]) for (u, v) in sorted(G.edges)
        ]
        self._succ: Dict[int, Tuple[int, ...]] = {i: tuple(sorted(G.successors(i))) for i in G.nodes}
        self._pred: Dict[int, Tuple[int, ...]] = {i: tuple(sorted(G.predecessors(i))) for i in G.nodes}
        self._G = nx.freeze(G)

    # ---- Accessors -----------------------------------------------------------

    @property
    def utterance_id(self) -> str:
        return self._header.utterance_id

    @property
    def start_index(self) -> int:
        return self._header.start

    @property
    def end_index(self) -> int:
        return self._header.end

    @property
    def num_nodes(self) -> int:
        return len(self._times)

    @property
    def num_edges(self) -> int:
        return len(self._edge_list)

    @property
    def header(self) -> LatticeHeader:
        """Header as stored; num_edges reflects the edges actually kept."""
        return self._header.model_copy(update={"num_edges": self.num_edges})

    @property
    def node_times(self) -> Tuple[float, ...]:
        return self._times

    @property
    def graph(self) -> nx.DiGraph:
        """Frozen view of the underlying graph."""
        return self._G

    def node_time(self, i: int) -> float:
        return self._times[i]

    def edge(self, u: int, v: int) -> Optional[LatticeEdge]:
        if not self._G.has_edge(u, v):
            return None
        return self._G.edges[u, v]["edge"]

    def has_edge(self, u: int, v: int) -> bool:
        return self._G.has_edge(u, v)

    def edges(self) -> Iterator[Tuple[int, int, LatticeEdge]]:
        """All edges in ascending (src, dst) order."""
        return iter(self._edge_list)

    def successors(self, i: int) -> Tuple[int, ...]:
        return self._succ[i]

    def predecessors(self, i: int) -> Tuple[int, ...]:
        return self._pred[i]

    def in_degree(self, i: int) -> int:
        return len(self._pred[i])

    # ---- Dunder --------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lattice):
            return NotImplemented
        return (
            self.utterance_id == other.utterance_id
            and self.start_index == other.start_index
            and self.end_index == other.end_index
            and self._times == other._times
            and self._edge_list == other._edge_list
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Lattice(id={self.utterance_id!r}, start={self.start_index}, end={self.end_index}, "
            f"nodes={self.num_nodes}, edges={self.num_edges})"
        )

    def __str__(self) -> str:
        from .lattice_io import lattice_to_text

        return lattice_to_text(self)
