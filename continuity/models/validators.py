"""
continuity/models/validators.py -- Structural validation of incoming snapshots.

Malformed *content* (duplicate names, broken rules) is reported as Issues by
the evaluators.  Malformed *structure* (a snapshot without ``books``, a
level that is not a number) is a caller bug and fails fast here, before any
evaluator runs.

Usage::

    from continuity.models.validators import load_snapshot

    series = load_snapshot(payload)      # raises InvalidSnapshotError
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from continuity.models.snapshot import Series

logger = logging.getLogger(__name__)


class InvalidSnapshotError(ValueError):
    """The snapshot is structurally unusable.

    Attributes
    ----------
    errors : list[str]
        One human-readable message per structural problem.
    """

    def __init__(self, errors: list[str]):
        self.errors = errors
        summary = errors[0] if len(errors) == 1 else f"{len(errors)} structural problems found"
        super().__init__(f"Invalid series snapshot: {summary}")


def load_snapshot(data: Series | dict[str, Any]) -> Series:
    """Return a validated, frozen ``Series`` for *data*.

    Parameters
    ----------
    data : Series or dict
        An already-validated snapshot (returned unchanged) or the plain
        aggregate dict supplied by the persistence layer.

    Raises
    ------
    InvalidSnapshotError
        If *data* is not a mapping, or is missing required top-level
        collections, or has fields of the wrong type.
    """
    if isinstance(data, Series):
        return data
    if not isinstance(data, dict):
        raise InvalidSnapshotError([
            f"Expected the series snapshot to be a mapping, got {type(data).__name__}."
        ])

    try:
        return Series.model_validate(data)
    except ValidationError as exc:
        errors = [_humanize_pydantic_error(err, data) for err in exc.errors()]
        logger.warning("Rejected series snapshot %r: %s", data.get("id"), "; ".join(errors))
        raise InvalidSnapshotError(errors) from exc


def _humanize_pydantic_error(err: dict, data: dict) -> str:
    """Convert a single Pydantic error dict to a human-friendly message."""
    loc = err.get("loc", ())
    msg = err.get("msg", "Validation error")
    err_type = err.get("type", "")

    field_path = " -> ".join(str(part) for part in loc if part != "__root__")
    if not field_path:
        field_path = "(root)"

    series_name = data.get("name") or data.get("id") or "this series"

    if err_type == "missing":
        return (
            f"The field '{field_path}' is required for '{series_name}' "
            f"but was not provided."
        )
    elif err_type == "literal_error":
        return f"The field '{field_path}' has an invalid value. {msg}."
    elif "type" in err_type or err_type.endswith("_parsing"):
        return f"The field '{field_path}' has the wrong type. {msg}."
    else:
        return f"Field '{field_path}': {msg}."
