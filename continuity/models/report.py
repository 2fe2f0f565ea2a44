"""
continuity/models/report.py -- Result types produced by the engine.

``Issue``, ``ConsistencyReport`` and ``ProgressionValidation`` are created
fresh for every run and never persisted by the engine.  ``to_dict()`` gives
the camelCase JSON shape the REST and UI layers serialise.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

Severity = Literal["error", "warning", "info"]
Category = Literal["character", "timeline", "world", "plot"]


class _ResultModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise with camelCase keys, ready for ``json.dumps``."""
        return self.model_dump(mode="json", by_alias=True)


class Issue(_ResultModel):
    """One structural contradiction found by an evaluator.

    ``severity`` is serialised as ``type`` to match the payloads the UI
    already understands.  ``books`` holds the book numbers the issue spans,
    when it spans any.
    """

    severity: Severity = Field(alias="type")
    category: Category
    message: str
    related_ids: tuple[str, ...] = ()
    books: tuple[int, ...] = ()
    suggestions: tuple[str, ...] = ()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConsistencyReport(_ResultModel):
    series_id: str
    issues: tuple[Issue, ...] = ()
    score: int = 100
    suggestions: tuple[str, ...] = ()
    timestamp: str = Field(default_factory=_utc_now)

    @computed_field
    @property
    def issues_count(self) -> int:
        return len(self.issues)

    def count(self, severity: Severity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)


class LevelPoint(_ResultModel):
    book_number: int
    level: int


class ProgressionValidation(_ResultModel):
    """Outcome of the single-character progression check."""

    valid: bool
    issues: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    level_progression: tuple[LevelPoint, ...] = ()
