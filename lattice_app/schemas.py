# lattice_app/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class LatticeEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str = Field(min_length=1)
    am_score: int
    lm_score: int

    def combined_score(self, lm_scale: float) -> float:
        """Weighted edge cost: am_score + lm_scale * lm_score, kept in float."""
        return self.am_score + lm_scale * self.lm_score


class LatticeHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    utterance_id: str = Field(min_length=1)
    start: int
    end: int
    num_nodes: int = Field(ge=0)
    num_edges: int = Field(ge=0)


class ManifestEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    lattice_path: str
    reference_path: str


class LatticeReport(BaseModel):
    utterance_id: str
    reference: str = ""
    hypothesis: str = ""
    hypothesis_words: List[str] = []
    path_score: float = 0.0
    num_paths: int = 0
    density: Optional[float] = None
    silence_hits: List[float] = []
    words_at_time: Optional[List[str]] = None
