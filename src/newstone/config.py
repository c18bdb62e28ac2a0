"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# ── Studies ────────────────────────────────────────────────────────────────
DEFAULT_STUDY: str = os.getenv("NEWSTONE_STUDY", "refugees")
STUDIES_DIR: Path = Path(
    os.getenv("NEWSTONE_STUDIES_DIR", str(PROJECT_ROOT / "config" / "studies"))
)

# ── Pipeline ───────────────────────────────────────────────────────────────
NEGATION_WINDOW: int = int(os.getenv("NEWSTONE_NEGATION_WINDOW", "1"))

# ── Logging ────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("NEWSTONE_LOG_LEVEL", "INFO").upper()


def study_paths(study: str) -> dict[str, Path]:
    """Return resolved paths for a given study name.

    Keys: ``study_dir``, ``study``.
    """
    study_dir = STUDIES_DIR / study
    return {
        "study_dir": study_dir,
        "study": study_dir / "study.yml",
    }


def available_studies() -> list[str]:
    """Names of the study directories that contain a ``study.yml``."""
    if not STUDIES_DIR.exists():
        return []
    return sorted(p.parent.name for p in STUDIES_DIR.glob("*/study.yml"))
