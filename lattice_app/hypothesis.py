# lattice_app/hypothesis.py
"""
Hypothesis: one transcription extracted as a path through a lattice.

Words are appended first-to-last. The silence marker adds to the score but
never to the word list; multiword tokens ("new_york") are split on the
separator and emitted in sequence; empty pieces from stray separators are
dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

import editdistance

from .lattice import SILENCE, WORD_SEPARATOR


@dataclass
class Hypothesis:
    words: List[str] = field(default_factory=list)
    path_score: float = 0.0
    silence: str = SILENCE
    separator: str = WORD_SEPARATOR

    def add_word(self, label: str, score: float) -> None:
        self.path_score += score
        if label == self.silence:
            return
        self.words.extend(w for w in label.split(self.separator) if w)

    @property
    def text(self) -> str:
        """Words each followed by one space (the form the driver prints)."""
        return "".join(w + " " for w in self.words)

    def __len__(self) -> int:
        return len(self.words)

    def __str__(self) -> str:
        return self.text

    def word_error_rate(self, reference: Sequence[str]) -> float:
        """
        Word-level Levenshtein distance to `reference`, divided by its length.
        Raises ValueError for an empty reference.
        """
        ref = list(reference)
        if not ref:
            raise ValueError("word_error_rate needs a non-empty reference")
        return editdistance.eval(self.words, ref) / len(ref)
