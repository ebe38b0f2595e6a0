#!/usr/bin/env python3
"""
Ripple - Server-Sent Event Output Module
Transcodes progress events into `data:` frames for an event-stream response.
"""

import json
from typing import Any, Dict, List

from ..engine.events import (
    Discovered,
    Error,
    ProgressEvent,
    ResolversInitialized,
    TargetPropagated,
)
from ..engine.models import AUTHORITATIVE, Endpoint
from ..utils import format_duration


def _server(endpoint: Endpoint, **extra: Any) -> Dict[str, Any]:
    server: Dict[str, Any] = {
        "name": endpoint.name,
        "address": endpoint.display_address,
        "propagated": False,
    }
    server.update(extra)
    return server


def event_payloads(event: ProgressEvent) -> List[Dict[str, Any]]:
    """
    Converts one event into the JSON payloads of its frames. Discovery events
    produce one payload per server.
    """
    if isinstance(event, Discovered):
        return [{"type": "discovered", "server": _server(ep)} for ep in event.endpoints]
    if isinstance(event, ResolversInitialized):
        return [{"type": "resolver", "server": _server(ep)} for ep in event.endpoints]
    if isinstance(event, TargetPropagated):
        prefix = "auth" if event.role == AUTHORITATIVE else "resolver"
        server = _server(
            event.endpoint,
            propagated=True,
            found_after=format_duration(event.found_after),
            record=event.matched_record,
        )
        return [{"type": f"{prefix}_propagated", "server": server}]
    if isinstance(event, Error):
        return [{"type": "error", "error": event.message}]
    payload: Dict[str, Any] = {"type": event.kind}
    if hasattr(event, "elapsed"):
        payload["elapsed"] = format_duration(event.elapsed)
    return [payload]


def format_sse(event: ProgressEvent) -> str:
    """Renders an event as one or more server-sent-event frames."""
    return "".join(f"data: {json.dumps(p)}\n\n" for p in event_payloads(event))
