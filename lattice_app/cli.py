"""lattice_app.cli

Batch driver: decode every lattice listed in a manifest and write dot and
lattice copies to an output directory.

Usage:
    lattice-driver MANIFEST LM_SCALE OUTPUT_DIR [options]
    python -m lattice_app MANIFEST LM_SCALE OUTPUT_DIR [options]

MANIFEST holds whitespace-separated `<latticeFile> <referenceFile>` pairs.

Exit codes:
    0  all lattices processed
    1  an input file could not be opened or an output file could not be written
    2  a file could not be parsed, or the arguments are wrong
    3  a lattice contains a cycle
    4  the end node is unreachable from the start node
    5  the output directory is the input directory
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from ._perf import PerfLog, RunStats, timed
from .errors import LatticeError, OutputWriteError
from .lattice_io import load_lattice
from .manifest import read_manifest, read_reference
from .queries import format_sorted_hits
from .schemas import LatticeReport, ManifestEntry
from .service_adapter import analyze_lattice, check_output_conflict, write_outputs
from .settings import LatticeSettings, load_env

_LOG = logging.getLogger("lattice_app")
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level_name: str, log_file: Optional[str] = None) -> logging.Logger:
    """Send the lattice_app logger tree to stderr, and to log_file when given."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level '{level_name}'")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as e:
            raise OutputWriteError(log_file, e.strerror or "") from e

    _LOG.handlers.clear()
    _LOG.setLevel(level)
    _LOG.propagate = False
    fmt = logging.Formatter(LOG_FORMAT)
    for h in handlers:
        h.setFormatter(fmt)
        _LOG.addHandler(h)
    return _LOG


def _lm_scale_arg(raw: str) -> float:
    try:
        v = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{raw}' is not a number") from None
    if not (math.isfinite(v) and v >= 0):
        raise argparse.ArgumentTypeError(f"lmScale must be a finite non-negative number, got {raw}")
    return v


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lattice-driver",
        description="Decode speech lattices listed in a manifest and write dot/lattice outputs.",
    )
    parser.add_argument("manifest", help="File of whitespace-separated <lattice> <reference> pairs.")
    parser.add_argument("lm_scale", type=_lm_scale_arg, help="Language-model weight (>= 0).")
    parser.add_argument("output_dir", help="Directory for <id>.dot and <id>.lattice (must differ from input).")
    parser.add_argument("--words-at-time", type=float, default=None, metavar="T",
                        help="Also write <id>.wordsAtTime with the words overlapping time T.")
    parser.add_argument("--graphml", action="store_true", help="Also write <id>.graphml.")
    parser.add_argument("--html", action="store_true", help="Also write <id>.html (requires pyvis).")
    parser.add_argument("--keep-going", action="store_true",
                        help="Log a failing lattice and continue with the next one.")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LATTICE_LOG_LEVEL or INFO).")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")
    parser.add_argument("--perf-jsonl", default=None, help="Append timing events (JSON lines) to this file.")
    parser.add_argument("--no-dotenv", action="store_true", help="Do not load .env from the working directory.")
    return parser


def print_report(report: LatticeReport, *, silence: str) -> None:
    print(f"\nUtterance {report.utterance_id}")
    print(f"Reference: {report.reference}")
    print(f"Hypothesis: {report.hypothesis}")
    print(f"Number of unique paths: {report.num_paths}")
    if report.density is None:
        print("Lattice density: undefined")
    else:
        print(f"Lattice density: {report.density:.3f}")
    print(f"Locations of {silence}: {format_sorted_hits(report.silence_hits)}")


def process_entry(
    entry: ManifestEntry,
    out_dir: Path,
    settings: LatticeSettings,
    *,
    words_at_time: Optional[float] = None,
    perf: Optional[PerfLog] = None,
) -> LatticeReport:
    lat = load_lattice(entry.lattice_path)
    check_output_conflict(entry.lattice_path, out_dir, lat.utterance_id)
    reference = read_reference(entry.reference_path)

    report = analyze_lattice(lat, settings, reference=reference, words_at_time=words_at_time, perf=perf)
    print_report(report, silence=settings.silence_token)
    write_outputs(lat, out_dir, settings, report=report)
    return report


def run(args: argparse.Namespace) -> int:
    # flags only switch extra outputs on; an unset flag leaves the env value
    settings = LatticeSettings.from_env(
        lm_scale=args.lm_scale,
        log_level=args.log_level,
        write_graphml=args.graphml or None,
        write_html=args.html or None,
    )

    configure_logging(settings.log_level, args.log_file)
    perf = PerfLog(path=args.perf_jsonl) if args.perf_jsonl else None

    entries: List[ManifestEntry] = read_manifest(args.manifest)
    _LOG.info("Loaded %d manifest entries from %s", len(entries), args.manifest)

    out_dir = Path(args.output_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(str(out_dir), e.strerror or "") from e

    stats = RunStats()
    first_failure = 0
    for idx, entry in enumerate(entries, start=1):
        with timed(_LOG, "lattice.total", perf=perf, entry=idx, lattice=entry.lattice_path):
            try:
                process_entry(entry, out_dir, settings, words_at_time=args.words_at_time, perf=perf)
                stats.record_ok()
            except LatticeError as e:
                stats.record_failure(e)
                if not args.keep_going:
                    raise
                _LOG.error("[%d/%d] %s: %s", idx, len(entries), entry.lattice_path, e)
                first_failure = first_failure or e.exit_code

    _LOG.info("run finished: %s", stats.summary())
    return first_failure


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.no_dotenv:
        load_env(Path.cwd())

    try:
        return run(args)
    except LatticeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
