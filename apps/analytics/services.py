"""Fire-and-forget analytics sink."""

from __future__ import annotations

import logging
from typing import Any, Optional

from django.db import transaction  # type: ignore

from .models import AnalyticsEvent

logger = logging.getLogger(__name__)

SESSION_HEADER = "HTTP_X_SESSION_ID"


def session_id_for(request) -> str:
    """Visitor id: the X-Session-Id header, else the Django session key."""
    header = request.META.get(SESSION_HEADER, "")
    if header:
        return header[:64]
    session = getattr(request, "session", None)
    return (getattr(session, "session_key", None) or "")[:64]


def record_event(
    host,
    event: str,
    session_id: str = "",
    metadata: Optional[dict[str, Any]] = None,
) -> Optional[AnalyticsEvent]:
    """Store a funnel event. Never raises; returns None when the write failed."""
    try:
        with transaction.atomic():
            return AnalyticsEvent.objects.create(
                host=host,
                event=event,
                session_id=session_id or "",
                metadata=metadata or {},
            )
    except Exception as exc:
        logger.error("Analytics event %s for host %s not recorded: %s", event, getattr(host, "pk", None), exc, exc_info=True)
        return None
