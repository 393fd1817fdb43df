"""
Server-Sent Events stream for change notifications.

Each event is sent as ``event: <action>`` with a per-connection increasing
``id`` and a JSON body ``{entity_kind, id, action}``. Clients refetch the
entity named by the event; a ``resync`` event means events were dropped
and everything should be refetched. Comment lines are sent as keepalives
while nothing happens.
"""

import json
import logging
from collections.abc import Iterator

from django.conf import settings
from django.http import HttpRequest, HttpResponse, StreamingHttpResponse
from django.views.decorators.http import require_GET

from dinein.web.core.http import error_response
from dinein.web.realtime.notifier import (
    ChangeEvent,
    EntityKind,
    Subscription,
    get_notifier,
)

logger = logging.getLogger(__name__)

RETRY_MS = 3000


def format_event(event: ChangeEvent, seq: int) -> str:
    data = json.dumps(event.as_dict())
    return f"event: {event.action}\nid: {seq}\ndata: {data}\n\n"


class EventStream:
    """
    Iterable SSE body bound to one subscription.

    Django calls close() when the response is finished or the client goes
    away, which releases the subscription even if iteration never started.
    """

    def __init__(self, subscription: Subscription, keepalive: float) -> None:
        self.subscription = subscription
        self.keepalive = keepalive

    def __iter__(self) -> Iterator[str]:
        seq = 1
        yield f"retry: {RETRY_MS}\n\n"
        while not self.subscription.closed:
            event = self.subscription.get(timeout=self.keepalive)
            if event is None:
                yield ":keepalive\n\n"
                continue
            yield format_event(event, seq)
            seq += 1

    def close(self) -> None:
        self.subscription.close()
        logger.debug("SSE stream for %s closed", self.subscription.entity_kind)


@require_GET
def event_stream(_request: HttpRequest, entity_kind: str) -> HttpResponse:
    """
    GET /api/events/{entity_kind}/stream

    Stream change events for one entity kind ("order" or "menu_item").
    """
    try:
        kind = EntityKind(entity_kind)
    except ValueError:
        return error_response(
            "not_found", f"Unknown entity kind '{entity_kind}'", status=404
        )

    subscription = get_notifier().subscribe(kind)
    response = StreamingHttpResponse(
        EventStream(subscription, settings.SSE_KEEPALIVE_SECONDS),
        content_type="text/event-stream",
    )
    response["Cache-Control"] = "no-cache"
    response["X-Accel-Buffering"] = "no"
    return response
