# lattice_app/export.py
"""
Lattice exporters: Graphviz dot, GraphML, and PyVis HTML.

Public API
----------
lattice_to_dot(lat) -> str
write_dot(lat, path) -> str
lattice_to_nx(lat, *, with_order=True) -> nx.DiGraph
export_graphml(lat, path) -> str
export_pyvis(lat, path, *, best_path=None, silence=SILENCE) -> str

The dot layout is fixed (downstream tooling parses it):

    digraph g {
    <TAB>rankdir="LR"
        0 -> 1 [label = "word"]
    }
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

import networkx as nx

from .errors import CycleError, OutputWriteError
from .lattice import SILENCE, Lattice
from .schemas import LatticeEdge
from .search import topological_sort

# Optional dependency; only needed for export_pyvis
try:
    from pyvis.network import Network
    _HAS_PYVIS = True
except ImportError:
    _HAS_PYVIS = False

DOT_HEADER = 'digraph g {\n\trankdir="LR"\n'
DOT_FOOTER = "}"

BEST_PATH_COLOR = "#E74C3C"
EDGE_COLOR = "#95A5A6"
SILENCE_COLOR = "#BDC3C7"
NODE_COLOR = "#0984E3"
TERMINAL_COLOR = "#00B894"


# ---- Dot ---------------------------------------------------------------------

def lattice_to_dot(lat: Lattice) -> str:
    body = "".join(f'    {u} -> {v} [label = "{e.label}"]\n' for u, v, e in lat.edges())
    return DOT_HEADER + body + DOT_FOOTER


def _write_text(text: str, path: Union[str, Path]) -> str:
    P = str(Path(path))
    try:
        Path(P).write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(P, e.strerror or "") from e
    return P


def write_dot(lat: Lattice, path: Union[str, Path]) -> str:
    return _write_text(lattice_to_dot(lat), path)


# ---- networkx / GraphML ------------------------------------------------------

def lattice_to_nx(lat: Lattice, *, with_order: bool = True) -> nx.DiGraph:
    """
    Mutable, attribute-only copy of the lattice graph (no pydantic objects),
    suitable for networkx writers. Adds a 'topo_order' node attribute when the
    lattice is acyclic and with_order is set.
    """
    H = nx.DiGraph()
    for i, t in enumerate(lat.node_times):
        H.add_node(
            i,
            time=float(t),
            is_start=(i == lat.start_index),
            is_end=(i == lat.end_index),
        )
    for u, v, e in lat.edges():
        H.add_edge(u, v, label=e.label, am_score=e.am_score, lm_score=e.lm_score)
    H.graph["utterance_id"] = lat.utterance_id

    if with_order:
        try:
            order = topological_sort(lat)
        except CycleError:
            order = []
        nx.set_node_attributes(H, {n: i for i, n in enumerate(order)}, "topo_order")
    return H


def export_graphml(lat: Lattice, path: Union[str, Path]) -> str:
    P = str(Path(path).absolute())
    H = lattice_to_nx(lat)
    try:
        nx.write_graphml(H, P)
    except OSError as e:
        raise OutputWriteError(P, e.strerror or "") from e
    return P


# ---- PyVis export ------------------------------------------------------------

def _path_edges(best_path: Optional[Sequence[int]]) -> Set[Tuple[int, int]]:
    if not best_path:
        return set()
    return set(zip(best_path, best_path[1:]))


def edge_style(e: LatticeEdge, *, on_path: bool, silence: str = SILENCE) -> Dict[str, Any]:
    """vis.js edge styling: best-path edges highlighted, silence edges dashed."""
    is_silence = e.label == silence
    if on_path:
        color, width = BEST_PATH_COLOR, 3
    else:
        color, width = (SILENCE_COLOR if is_silence else EDGE_COLOR), 1
    return {"color": color, "width": width, "dashes": is_silence}


def export_pyvis(
    lat: Lattice,
    path: Union[str, Path],
    *,
    best_path: Optional[List[int]] = None,
    silence: str = SILENCE,
    physics: bool = False,
) -> str:
    """
    Interactive HTML view (pyvis/vis.js), left-to-right by topological order.
    Edges on best_path are highlighted; edges labelled `silence` are dashed.
    """
    if not _HAS_PYVIS:
        raise RuntimeError("pyvis is not installed. `pip install pyvis`")

    P = str(Path(path).absolute())
    net = Network(height="820px", width="100%", directed=True, notebook=False)

    try:
        level = {n: i for i, n in enumerate(topological_sort(lat))}
    except CycleError:
        level = {}

    for i, t in enumerate(lat.node_times):
        terminal = i in (lat.start_index, lat.end_index)
        net.add_node(
            i,
            label=str(i),
            title=f"node {i} @ {t:.2f}s",
            color=TERMINAL_COLOR if terminal else NODE_COLOR,
            shape="dot",
            size=16 if terminal else 10,
            level=int(level.get(i, 0)),
        )

    on_path = _path_edges(best_path)
    for u, v, e in lat.edges():
        net.add_edge(
            u, v,
            label=e.label,
            title=f"am={e.am_score} lm={e.lm_score}",
            arrows="to",
            **edge_style(e, on_path=(u, v) in on_path, silence=silence),
        )

    net.set_options(f"""
    {{
      "layout": {{
        "hierarchical": {{
          "enabled": true,
          "direction": "LR",
          "sortMethod": "directed",
          "nodeSpacing": 120,
          "levelSeparation": 140
        }}
      }},
      "physics": {{ "enabled": {str(physics).lower()} }},
      "interaction": {{ "hover": true, "navigationButtons": true }}
    }}
    """)

    try:
        net.write_html(P, open_browser=False, notebook=False)
    except OSError as e:
        raise OutputWriteError(P, e.strerror or "") from e
    return P
