# service_adapter.py
"""
One-call analysis of a loaded lattice, plus the per-utterance output files.

Used by the batch driver; kept free of printing so other front ends can
reuse it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from ._perf import PerfLog, timed
from .errors import ConfigConflictError, ZeroDurationError
from .export import export_graphml, export_pyvis, write_dot
from .lattice import Lattice
from .lattice_io import save_lattice
from .queries import lattice_density, sorted_hits, unique_words_at_time, write_word_set
from .schemas import LatticeReport
from .search import best_path, count_all_paths, decode
from .settings import LatticeSettings

_LOG = logging.getLogger(__name__)


def output_paths(out_dir: Union[str, Path], utterance_id: str) -> Dict[str, Path]:
    base = Path(out_dir)
    return {
        "dot": base / f"{utterance_id}.dot",
        "lattice": base / f"{utterance_id}.lattice",
        "graphml": base / f"{utterance_id}.graphml",
        "html": base / f"{utterance_id}.html",
        "words_at_time": base / f"{utterance_id}.wordsAtTime",
    }


def check_output_conflict(lattice_path: Union[str, Path], out_dir: Union[str, Path], utterance_id: str) -> None:
    """
    Refuse to write into the directory a lattice was read from, or over the
    input file itself.
    """
    src = Path(lattice_path).resolve()
    out = Path(out_dir).resolve()
    target = output_paths(out, utterance_id)["lattice"]
    if target == src or out == src.parent:
        raise ConfigConflictError(
            f"Output directory must not be the same as the input directory ({out})"
        )


def analyze_lattice(
    lat: Lattice,
    settings: LatticeSettings,
    *,
    reference: str = "",
    words_at_time: Optional[float] = None,
    perf: Optional[PerfLog] = None,
) -> LatticeReport:
    ctx = {"utterance_id": lat.utterance_id}

    with timed(_LOG, "lattice.decode", perf=perf, **ctx):
        hyp = decode(
            lat,
            settings.lm_scale,
            silence=settings.silence_token,
            separator=settings.word_separator,
        )

    with timed(_LOG, "lattice.count_paths", perf=perf, **ctx):
        n_paths = count_all_paths(lat)

    try:
        density: Optional[float] = lattice_density(lat, silence=settings.silence_token)
    except ZeroDurationError as e:
        _LOG.warning("%s", e)
        density = None

    words: Optional[List[str]] = None
    if words_at_time is not None:
        words = sorted(unique_words_at_time(lat, words_at_time))

    return LatticeReport(
        utterance_id=lat.utterance_id,
        reference=reference,
        hypothesis=hyp.text,
        hypothesis_words=list(hyp.words),
        path_score=hyp.path_score,
        num_paths=n_paths,
        density=density,
        silence_hits=sorted_hits(lat, settings.silence_token),
        words_at_time=words,
    )


def write_outputs(
    lat: Lattice,
    out_dir: Union[str, Path],
    settings: LatticeSettings,
    *,
    report: Optional[LatticeReport] = None,
) -> Dict[str, str]:
    """Write <id>.dot and <id>.lattice (plus optional GraphML/HTML/word dump)."""
    paths = output_paths(out_dir, lat.utterance_id)
    written: Dict[str, str] = {
        "dot": write_dot(lat, paths["dot"]),
        "lattice": save_lattice(lat, paths["lattice"]),
    }
    if settings.write_graphml:
        written["graphml"] = export_graphml(lat, paths["graphml"])
    if settings.write_html:
        path, _cost = best_path(lat, settings.lm_scale)
        written["html"] = export_pyvis(lat, paths["html"], best_path=path, silence=settings.silence_token)
    if report is not None and report.words_at_time is not None:
        written["words_at_time"] = write_word_set(report.words_at_time, paths["words_at_time"])
    for kind, p in written.items():
        _LOG.debug("wrote %s %s", kind, p)
    return written
