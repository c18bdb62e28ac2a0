"""Load study definitions (research question, keywords, lexicon) from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from newstone import config
from newstone.aggregate import DOCUMENT_MEASURES

logger = logging.getLogger(__name__)


class StudyError(Exception):
    """Raised when a study file is missing or invalid."""


class Study(BaseModel):
    name: str
    description: str = ""
    keywords: list[str]
    group_key: str = "country"
    lexicon: Path
    stopwords: Path | None = None
    negation_window: int = Field(default_factory=lambda: config.NEGATION_WINDOW, ge=0)
    measure: str = "mean_score"
    # Relabel raw group values, e.g. {"left": "1", "right": "0"}
    group_labels: dict[str, str] = Field(default_factory=dict)
    id_field: str = "doc_id"
    text_field: str = "text"

    @field_validator("keywords")
    @classmethod
    def _keywords_not_empty(cls, value: list[str]) -> list[str]:
        cleaned = [kw.strip() for kw in value if kw and kw.strip()]
        if not cleaned:
            raise ValueError("at least one keyword is required")
        return cleaned

    @field_validator("measure")
    @classmethod
    def _known_measure(cls, value: str) -> str:
        if value not in DOCUMENT_MEASURES:
            raise ValueError(f"measure must be one of {DOCUMENT_MEASURES}")
        return value

    @field_validator("group_labels", mode="before")
    @classmethod
    def _labels_as_strings(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value


def load_study(study_path: Path) -> Study:
    """Parse ``study.yml`` into a :class:`Study`.

    ``lexicon`` and ``stopwords`` paths are relative to the study file's
    directory. The study name defaults to that directory's name.
    """
    if not study_path.exists():
        raise StudyError(f"Study file not found: {study_path}")
    try:
        with open(study_path, encoding="utf-8") as fh:
            cfg: dict[str, Any] = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise StudyError(f"Could not parse {study_path}: {exc}") from exc

    base_dir = study_path.resolve().parent
    cfg.setdefault("name", base_dir.name)
    for key in ("lexicon", "stopwords"):
        if cfg.get(key):
            cfg[key] = base_dir / cfg[key]

    try:
        study = Study.model_validate(cfg)
    except ValidationError as exc:
        raise StudyError(f"Invalid study {study_path}: {exc}") from exc

    logger.debug(
        "Study [%s]: keywords=%s group_key=%s lexicon=%s",
        study.name, study.keywords, study.group_key, study.lexicon,
    )
    return study


def load_named_study(name: str) -> Study:
    """Load ``<STUDIES_DIR>/<name>/study.yml``."""
    return load_study(config.study_paths(name)["study"])
