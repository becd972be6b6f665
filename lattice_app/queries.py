# lattice_app/queries.py
"""Density and time-indexed lookups over the lattice edge set."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Set, Union

from .errors import OutputWriteError, ZeroDurationError
from .lattice import SILENCE, Lattice


def word_count(lat: Lattice, *, silence: str = SILENCE) -> int:
    return sum(1 for _u, _v, e in lat.edges() if e.label != silence)


def lattice_density(lat: Lattice, *, silence: str = SILENCE) -> float:
    """Non-silence edges per second between the start and end nodes."""
    duration = lat.node_time(lat.end_index) - lat.node_time(lat.start_index)
    if duration == 0:
        raise ZeroDurationError(
            f"Lattice {lat.utterance_id}: start and end share timestamp "
            f"{lat.node_time(lat.start_index):.2f}; density is undefined"
        )
    return word_count(lat, silence=silence) / duration


def unique_words_at_time(lat: Lattice, t: float) -> Set[str]:
    """Labels of every edge whose [t_src, t_dst] span contains t (inclusive)."""
    times = lat.node_times
    return {e.label for u, v, e in lat.edges() if times[u] <= t <= times[v]}


def sorted_hits(lat: Lattice, word: str) -> List[float]:
    """Midpoint times of every edge labelled `word`, ascending."""
    times = lat.node_times
    return sorted((times[u] + times[v]) / 2 for u, v, e in lat.edges() if e.label == word)


def format_sorted_hits(hits: Iterable[float]) -> str:
    # each value is followed by one space; no hits -> ""
    return "".join(f"{h:.2f} " for h in hits)


def write_word_set(words: Iterable[str], path: Union[str, Path]) -> str:
    P = str(Path(path))
    try:
        with open(P, "w", encoding="utf-8") as f:
            for w in sorted(words):
                f.write(w + "\n")
    except OSError as e:
        raise OutputWriteError(P, e.strerror or "") from e
    return P
