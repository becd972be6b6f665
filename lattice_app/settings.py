# lattice_app/settings.py
"""
Runtime settings for the lattice driver.

Values come from the environment (a `.env` file is loaded by the CLI through
python-dotenv) and explicit command-line values override them.

    LATTICE_LM_SCALE        default language-model scale (float, >= 0)
    LATTICE_SILENCE_TOKEN   silence label (default "-silence-")
    LATTICE_LOG_LEVEL       logging level name (default INFO)
    LATTICE_WRITE_GRAPHML   "1"/"true" to also write <id>.graphml
    LATTICE_WRITE_HTML      "1"/"true" to also write <id>.html (needs pyvis)
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv

from .lattice import SILENCE, WORD_SEPARATOR

_TRUE = {"1", "true", "yes", "on"}


def _env_flag(env: Mapping[str, str], key: str, default: bool = False) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


@dataclass
class LatticeSettings:
    lm_scale: float = 1.0
    silence_token: str = SILENCE
    word_separator: str = WORD_SEPARATOR
    log_level: str = "INFO"
    write_graphml: bool = False
    write_html: bool = False

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lm_scale) and self.lm_scale >= 0):
            raise ValueError(f"lm_scale must be a finite non-negative number, got {self.lm_scale}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides: Any) -> "LatticeSettings":
        """
        Settings from LATTICE_* variables. Non-None keyword overrides (e.g.
        command-line values) replace the environment before validation, so a
        stale variable never blocks an explicit value.
        """
        env = os.environ if env is None else env
        overrides = {k: v for k, v in overrides.items() if v is not None}

        values: dict = {
            "silence_token": env.get("LATTICE_SILENCE_TOKEN") or SILENCE,
            "log_level": env.get("LATTICE_LOG_LEVEL") or "INFO",
            "write_graphml": _env_flag(env, "LATTICE_WRITE_GRAPHML"),
            "write_html": _env_flag(env, "LATTICE_WRITE_HTML"),
        }
        if "lm_scale" not in overrides:
            raw_scale = env.get("LATTICE_LM_SCALE")
            if raw_scale not in (None, ""):
                try:
                    values["lm_scale"] = float(raw_scale)
                except ValueError as e:
                    raise ValueError(f"LATTICE_LM_SCALE must be a number, got '{raw_scale}'") from e
        values.update(overrides)
        return cls(**values)


def load_env(project_root: Union[str, Path], *, override: bool = False) -> None:
    """Load <project_root>/.env without clobbering already-exported variables."""
    load_dotenv(Path(project_root) / ".env", override=override)
