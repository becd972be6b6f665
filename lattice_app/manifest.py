"""lattice_app.manifest

Batch manifest and reference transcript readers.

A manifest is plain text holding whitespace-separated pairs
`<latticeFile> <referenceFile>`, conventionally one pair per line. Relative
paths are kept as written (resolved against the current directory by the
caller), matching how the batch driver has always been invoked.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from .errors import NotFoundError, ParseError
from .schemas import ManifestEntry


def _read_text(path: Union[str, Path]) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, PermissionError) as e:
        raise NotFoundError(str(path), e.strerror or "") from e
    except UnicodeDecodeError as e:
        raise ParseError("file is not valid UTF-8 text", source=str(path)) from e


def parse_manifest(text: str, *, source: str = "<string>") -> List[ManifestEntry]:
    toks = text.split()
    if len(toks) % 2:
        raise ParseError(
            f"expected lattice/reference pairs, got an odd number of paths ({len(toks)})",
            source=source,
        )
    return [
        ManifestEntry(lattice_path=toks[i], reference_path=toks[i + 1])
        for i in range(0, len(toks), 2)
    ]


def read_manifest(path: Union[str, Path]) -> List[ManifestEntry]:
    return parse_manifest(_read_text(path), source=str(path))


def read_reference(path: Union[str, Path]) -> str:
    """First line of the reference transcript, or "" for an empty file."""
    text = _read_text(path)
    if not text.strip():
        return ""
    return text.splitlines()[0]
