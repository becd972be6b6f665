# lattice_app/lattice_io.py
"""
Text lattice format <-> Lattice.

Format (fixed line order):

    id <utteranceID>
    start <startIndex>
    end <endIndex>
    numNodes <N>
    numEdges <M>
    node <idx> <timestamp>                       (N lines, idx = 0..N-1)
    edge <src> <dst> <label> <amScore> <lmScore> (M lines, any order)

Serialization is rebuilt from the Lattice fields (never from cached text):
node times with two decimals, edges in ascending (src, dst) order.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union

from pydantic import ValidationError

from .errors import NotFoundError, OutputWriteError, ParseError
from .lattice import EdgeKey, Lattice
from .schemas import LatticeEdge, LatticeHeader

_LOG = logging.getLogger(__name__)

HEADER_KEYS: Tuple[str, ...] = ("id", "start", "end", "numNodes", "numEdges")


# ---- Token helpers -----------------------------------------------------------

def _records(text: str) -> Iterator[Tuple[int, List[str]]]:
    for line_no, line in enumerate(text.splitlines(), start=1):
        toks = line.split()
        if toks:
            yield line_no, toks


def _as_int(tok: str, what: str, *, source: str, line_no: int) -> int:
    try:
        return int(tok)
    except ValueError:
        raise ParseError(f"{what} must be an integer, got '{tok}'", source=source, line_no=line_no) from None


def _as_float(tok: str, what: str, *, source: str, line_no: int) -> float:
    try:
        return float(tok)
    except ValueError:
        raise ParseError(f"{what} must be a number, got '{tok}'", source=source, line_no=line_no) from None


def _expect(toks: List[str], keyword: str, arity: int, *, source: str, line_no: int) -> None:
    if toks[0] != keyword:
        raise ParseError(f"expected '{keyword}' record, got '{toks[0]}'", source=source, line_no=line_no)
    if len(toks) != arity + 1:
        raise ParseError(
            f"'{keyword}' record needs {arity} field(s), got {len(toks) - 1}",
            source=source,
            line_no=line_no,
        )


# ---- Parsing -----------------------------------------------------------------

def parse_lattice(text: str, *, source: str = "<string>") -> Lattice:
    """Parse lattice text. Raises ParseError on any missing or malformed field."""
    records = _records(text)

    def _next(what: str) -> Tuple[int, List[str]]:
        try:
            return next(records)
        except StopIteration:
            raise ParseError(f"unexpected end of input, expected {what}", source=source) from None

    header_vals: Dict[str, str] = {}
    for key in HEADER_KEYS:
        line_no, toks = _next(f"'{key}'")
        _expect(toks, key, 1, source=source, line_no=line_no)
        header_vals[key] = toks[1]
        if key != "id":
            _as_int(toks[1], key, source=source, line_no=line_no)

    try:
        header = LatticeHeader(
            utterance_id=header_vals["id"],
            start=int(header_vals["start"]),
            end=int(header_vals["end"]),
            num_nodes=int(header_vals["numNodes"]),
            num_edges=int(header_vals["numEdges"]),
        )
    except ValidationError as e:
        raise ParseError(f"invalid header: {e.errors()[0]['msg']}", source=source) from e

    times: List[float] = []
    for i in range(header.num_nodes):
        line_no, toks = _next(f"node {i}")
        _expect(toks, "node", 2, source=source, line_no=line_no)
        idx = _as_int(toks[1], "node index", source=source, line_no=line_no)
        if idx != i:
            raise ParseError(f"node records must be in order: expected {i}, got {idx}", source=source, line_no=line_no)
        times.append(_as_float(toks[2], "node time", source=source, line_no=line_no))

    edges: Dict[EdgeKey, LatticeEdge] = {}
    n_records = 0
    for line_no, toks in records:
        _expect(toks, "edge", 5, source=source, line_no=line_no)
        u = _as_int(toks[1], "edge source", source=source, line_no=line_no)
        v = _as_int(toks[2], "edge destination", source=source, line_no=line_no)
        if not (0 <= u < header.num_nodes and 0 <= v < header.num_nodes):
            raise ParseError(
                f"edge {u} -> {v} references a node outside [0, {header.num_nodes})",
                source=source,
                line_no=line_no,
            )
        am = _as_int(toks[4], "amScore", source=source, line_no=line_no)
        lm = _as_int(toks[5], "lmScore", source=source, line_no=line_no)
        if (u, v) in edges:
            _LOG.warning("%s:%d duplicate edge %d -> %d overwrites earlier record", source, line_no, u, v)
        edges[(u, v)] = LatticeEdge(label=toks[3], am_score=am, lm_score=lm)
        n_records += 1

    if n_records != header.num_edges:
        raise ParseError(f"numEdges is {header.num_edges} but {n_records} edge record(s) found", source=source)

    lattice = Lattice(header, times, edges, source=source)
    _LOG.debug("parsed %r from %s", lattice, source)
    return lattice


def load_lattice(path: Union[str, Path]) -> Lattice:
    """Read and parse a lattice file."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, PermissionError) as e:
        raise NotFoundError(str(path), e.strerror or "") from e
    except UnicodeDecodeError as e:
        raise ParseError("file is not valid UTF-8 text", source=str(path)) from e
    return parse_lattice(text, source=str(path))


# ---- Serialization -----------------------------------------------------------

def lattice_to_text(lattice: Lattice) -> str:
    lines = [
        f"id {lattice.utterance_id}",
        f"start {lattice.start_index}",
        f"end {lattice.end_index}",
        f"numNodes {lattice.num_nodes}",
        f"numEdges {lattice.num_edges}",
    ]
    lines.extend(f"node {i} {t:.2f}" for i, t in enumerate(lattice.node_times))
    lines.extend(f"edge {u} {v} {e.label} {e.am_score} {e.lm_score}" for u, v, e in lattice.edges())
    return "\n".join(lines) + "\n"


def save_lattice(lattice: Lattice, path: Union[str, Path]) -> str:
    P = str(Path(path))
    try:
        Path(P).write_text(lattice_to_text(lattice), encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(P, e.strerror or "") from e
    return P
