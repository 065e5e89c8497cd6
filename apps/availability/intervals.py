"""Half-open interval arithmetic and its ORM counterpart."""

from __future__ import annotations

from typing import Any

from django.db.models import Q  # type: ignore

from shared.domain.value_objects import overlaps

__all__ = ["overlaps", "overlap_q"]


def overlap_q(start: Any, end: Any, *, start_field: str = "start_time", end_field: str = "end_time") -> Q:
    """Filter for rows whose [start_field, end_field) overlaps [start, end)."""
    return Q(**{f"{start_field}__lt": end}) & Q(**{f"{end_field}__gt": start})
