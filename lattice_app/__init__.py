"""
Speech-recognition lattice analysis.

Exports:
- Lattice, LatticeEdge: immutable lattice graph and its edge record
- load_lattice / parse_lattice / save_lattice / lattice_to_text: text format I/O
- topological_sort, decode, count_all_paths: ordering and search
- lattice_density, unique_words_at_time, sorted_hits: edge-set queries
- lattice_to_dot / write_dot: Graphviz export
"""

from .errors import (
    ConfigConflictError,
    CycleError,
    LatticeError,
    NotFoundError,
    OutputWriteError,
    ParseError,
    UnreachableTargetError,
    ZeroDurationError,
)
from .export import export_graphml, export_pyvis, lattice_to_dot, write_dot
from .hypothesis import Hypothesis
from .lattice import SILENCE, Lattice
from .lattice_io import lattice_to_text, load_lattice, parse_lattice, save_lattice
from .queries import format_sorted_hits, lattice_density, sorted_hits, unique_words_at_time
from .schemas import LatticeEdge, LatticeHeader, LatticeReport, ManifestEntry
from .search import count_all_paths, decode, topological_sort

__all__ = [
    "Lattice", "LatticeEdge", "LatticeHeader", "LatticeReport", "ManifestEntry", "Hypothesis", "SILENCE",
    "load_lattice", "parse_lattice", "save_lattice", "lattice_to_text",
    "topological_sort", "decode", "count_all_paths",
    "lattice_density", "unique_words_at_time", "sorted_hits", "format_sorted_hits",
    "lattice_to_dot", "write_dot", "export_graphml", "export_pyvis",
    "LatticeError", "NotFoundError", "OutputWriteError", "ParseError", "CycleError",
    "UnreachableTargetError", "ConfigConflictError", "ZeroDurationError",
]
