"""Domain models used across the pipeline."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Document(BaseModel):
    model_config = ConfigDict(frozen=True)

    doc_id: str
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)  # date, source, country, …

    @field_validator("doc_id")
    @classmethod
    def _doc_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("doc_id must not be blank")
        return value


class Sentence(BaseModel):
    model_config = ConfigDict(frozen=True)

    doc_id: str
    position: int  # 1-based, numbered before keyword filtering
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def sentence_id(self) -> str:
        return f"{self.doc_id}_{self.position}"


class PolarityCounts(BaseModel):
    positive: float = 0.0
    negative: float = 0.0
    neg_positive: float = 0.0
    neg_negative: float = 0.0

    @property
    def effective_positive(self) -> float:
        """Positive terms plus negated negative terms ("not bad")."""
        return self.positive + self.neg_negative

    @property
    def effective_negative(self) -> float:
        """Negative terms plus negated positive terms ("not good")."""
        return self.negative + self.neg_positive

    def __add__(self, other: PolarityCounts) -> PolarityCounts:
        return PolarityCounts(
            positive=self.positive + other.positive,
            negative=self.negative + other.negative,
            neg_positive=self.neg_positive + other.neg_positive,
            neg_negative=self.neg_negative + other.neg_negative,
        )


class ScoredSentence(BaseModel):
    sentence: Sentence
    normalized: str
    counts: PolarityCounts = Field(default_factory=PolarityCounts)
    total_words: int = 0
    score: float = 0.0

    @property
    def doc_id(self) -> str:
        return self.sentence.doc_id


class ScoredDocument(BaseModel):
    doc_id: str
    group: str
    mean_score: float
    n_sentences: int
    counts: PolarityCounts = Field(default_factory=PolarityCounts)
    total_words: int = 0
    tone_index: float | None = None  # None when no polarity terms matched
    proportion_positive: float | None = None
    proportion_negative: float | None = None


class GroupAggregate(BaseModel):
    group: str
    measure: str  # e.g. "mean_score", "tone_index"
    mean: float | None = None
    std_error: float | None = None  # None for n < 2
    n: int = 0


class SkippedDocument(BaseModel):
    doc_id: str
    reason: str


class PipelineResult(BaseModel):
    sentences: list[ScoredSentence] = Field(default_factory=list)
    documents: list[ScoredDocument] = Field(default_factory=list)
    groups: list[GroupAggregate] = Field(default_factory=list)
    skipped: list[SkippedDocument] = Field(default_factory=list)

    @property
    def skipped_ids(self) -> list[str]:
        return [s.doc_id for s in self.skipped]
