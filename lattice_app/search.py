# lattice_app/search.py
"""
Ordering and search over a Lattice.

Public API
----------
topological_sort(lat) -> list[int]
shortest_costs(lat, lm_scale) -> (costs, parents)
decode(lat, lm_scale, *, cumulative_scores=False, silence=..., separator=...) -> Hypothesis
count_all_paths(lat, *, sink=None) -> int

Acceptance notes
----------------
• Kahn traversal with a FIFO queue: seeds in ascending index order, newly
  freed nodes enqueued in ascending destination order. Stable across runs.
• Relaxation strictly follows that order; ties keep the lowest-index parent.
• Path counts use Python int (unbounded).
"""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import Dict, List, Optional, Tuple

import networkx as nx

from .errors import CycleError, UnreachableTargetError
from .hypothesis import Hypothesis
from .lattice import SILENCE, WORD_SEPARATOR, Lattice

_LOG = logging.getLogger(__name__)

INF = math.inf


# ---- Topological order -------------------------------------------------------

def _cycle_hint(lat: Lattice) -> str:
    try:
        cyc = nx.find_cycle(lat.graph, orientation="original")
    except nx.NetworkXNoCycle:
        return ""
    return " -> ".join([str(a) for (a, _b, _d) in cyc] + [str(cyc[0][0])])


def topological_sort(lat: Lattice) -> List[int]:
    """
    Deterministic Kahn order. For every edge (u, v), u precedes v.
    Raises CycleError if some nodes never reach in-degree zero.
    """
    n = lat.num_nodes
    in_deg = [lat.in_degree(i) for i in range(n)]
    q = deque(i for i in range(n) if in_deg[i] == 0)
    order: List[int] = []
    while q:
        u = q.popleft()
        order.append(u)
        for v in lat.successors(u):
            in_deg[v] -= 1
            if in_deg[v] == 0:
                q.append(v)

    if len(order) < n:
        hint = _cycle_hint(lat)
        msg = f"Lattice {lat.utterance_id} is not acyclic: ordered {len(order)} of {n} nodes"
        if hint:
            msg += f" (cycle: {hint})"
        raise CycleError(msg, ordered=len(order), total=n)
    return order


# ---- Shortest path -----------------------------------------------------------

def shortest_costs(
    lat: Lattice,
    lm_scale: float,
    *,
    order: Optional[List[int]] = None,
) -> Tuple[List[float], List[int]]:
    """
    Minimum weighted cost from the start node to every node.
    Edge weight is am_score + lm_scale * lm_score. Unreached nodes keep +inf
    and parent -1.
    """
    if not (math.isfinite(lm_scale) and lm_scale >= 0):
        raise ValueError(f"lm_scale must be a finite non-negative number, got {lm_scale}")
    topo = order if order is not None else topological_sort(lat)

    cost = [INF] * lat.num_nodes
    parent = [-1] * lat.num_nodes
    cost[lat.start_index] = 0.0

    for v in topo:
        for u in lat.predecessors(v):
            cu = cost[u]
            if cu == INF:
                continue
            w = cu + lat.edge(u, v).combined_score(lm_scale)
            if w < cost[v]:
                cost[v] = w
                parent[v] = u
    return cost, parent


def best_path(lat: Lattice, lm_scale: float) -> Tuple[List[int], List[float]]:
    """Node sequence start..end of the cheapest path, plus per-node costs."""
    cost, parent = shortest_costs(lat, lm_scale)
    start, end = lat.start_index, lat.end_index
    if cost[end] == INF:
        raise UnreachableTargetError(start, end)

    path = [end]
    node = end
    while node != start:
        node = parent[node]
        path.append(node)
    path.reverse()
    return path, cost


def decode(
    lat: Lattice,
    lm_scale: float,
    *,
    cumulative_scores: bool = False,
    silence: str = SILENCE,
    separator: str = WORD_SEPARATOR,
) -> Hypothesis:
    """
    Cheapest start->end path as a Hypothesis.

    Each edge adds its own weighted cost, so path_score equals the optimal
    path cost. cumulative_scores=True adds each node's running cost instead
    (the legacy tool's accounting, which double counts earlier edges).
    """
    path, cost = best_path(lat, lm_scale)
    hyp = Hypothesis(silence=silence, separator=separator)
    for u, v in zip(path, path[1:]):
        e = lat.edge(u, v)
        hyp.add_word(e.label, cost[v] if cumulative_scores else e.combined_score(lm_scale))

    _LOG.debug(
        "decode %s lm_scale=%s words=%d score=%.3f",
        lat.utterance_id, lm_scale, len(hyp), hyp.path_score,
    )
    return hyp


# ---- Path counting -----------------------------------------------------------

def count_all_paths(lat: Lattice, *, sink: Optional[int] = None) -> int:
    """
    Exact number of distinct start->sink paths (sink defaults to end_index).
    Pass sink=lat.num_nodes - 1 to count toward the highest-indexed node.
    """
    target = lat.end_index if sink is None else int(sink)
    if not 0 <= target < lat.num_nodes:
        raise ValueError(f"sink {target} outside [0, {lat.num_nodes})")

    counts: Dict[int, int] = {target: 1}
    for u in reversed(topological_sort(lat)):
        if u == target:
            continue
        counts[u] = sum(counts.get(v, 0) for v in lat.successors(u))
    return counts.get(lat.start_index, 0)
