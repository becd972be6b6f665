# lattice_app/errors.py
"""
Exception taxonomy for lattice analysis.

Core code raises these; only the command-line driver turns them into
process exit codes (see ``exit_code`` on each class).
"""

from __future__ import annotations

from typing import Optional


class LatticeError(Exception):
    """Base class for every failure raised by lattice_app."""

    exit_code: int = 1


class NotFoundError(LatticeError, FileNotFoundError):
    """A named input file is missing or cannot be opened."""

    exit_code = 1

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = str(path)
        msg = f"Unable to open file {self.path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class OutputWriteError(LatticeError, OSError):
    """An output file could not be written."""

    exit_code = 1

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = str(path)
        msg = f"Unable to write to file {self.path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ParseError(LatticeError, ValueError):
    """Malformed or missing field while reading lattice/manifest/reference text."""

    exit_code = 2

    def __init__(self, message: str, *, source: str = "<string>", line_no: Optional[int] = None) -> None:
        self.source = source
        self.line_no = line_no
        where = source if line_no is None else f"{source}:{line_no}"
        super().__init__(f"Not able to parse file {where}: {message}")


class CycleError(LatticeError):
    """Topological sort could not order every node: the edge set has a cycle."""

    exit_code = 3

    def __init__(self, message: str, *, ordered: int = 0, total: int = 0) -> None:
        self.ordered = ordered
        self.total = total
        super().__init__(message)


class UnreachableTargetError(LatticeError):
    """No path exists from the start node to the end node."""

    exit_code = 4

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(f"End node {end} is unreachable from start node {start}")


class ConfigConflictError(LatticeError):
    """Output location collides with an input location."""

    exit_code = 5


class ZeroDurationError(LatticeError, ValueError):
    """Lattice density is undefined because start and end share a timestamp."""

    exit_code = 2
