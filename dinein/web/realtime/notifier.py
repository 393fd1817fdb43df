"""
Change notifier - in-process publish/subscribe for order and menu changes.

Events carry identity only ({entity_kind, id, action}). Subscribers always
refetch the stored record; an event is a hint that something changed, never
the new value. Delivery is best-effort and unordered:

- publish_on_commit() defers the broadcast until the write is committed, so a
  rolled-back write never produces an event.
- Each subscriber owns a bounded queue. When a slow subscriber overflows, its
  backlog is replaced with a single "resync" event telling it to refetch
  everything.

This broker lives in one process. Views in other processes must be fed by
their own broker (or poll the status endpoint).
"""

import logging
import queue
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from django.conf import settings
from django.db import transaction

logger = logging.getLogger(__name__)


class EntityKind(StrEnum):
    """Entities the notifier reports on."""

    ORDER = "order"
    MENU_ITEM = "menu_item"


class ChangeAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    RESYNC = "resync"


@dataclass(frozen=True)
class ChangeEvent:
    """Notification that an entity changed."""

    entity_kind: EntityKind
    id: str | None
    action: ChangeAction = ChangeAction.UPDATED

    def as_dict(self) -> dict[str, str | None]:
        return {
            "entity_kind": self.entity_kind.value,
            "id": self.id,
            "action": self.action.value,
        }


class Subscription:
    """
    A subscriber's view of the event stream for one entity kind.

    Iterate it (blocking) or call get() with a timeout. Always close() it,
    or use it as a context manager.
    """

    def __init__(
        self,
        notifier: "ChangeNotifier",
        entity_kind: EntityKind,
        maxsize: int,
    ) -> None:
        self.entity_kind = entity_kind
        self._notifier = notifier
        self._queue: queue.Queue[ChangeEvent] = queue.Queue(maxsize=maxsize)
        self._deliver_lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, timeout: float | None = None) -> ChangeEvent | None:
        """
        Wait for the next event.

        Returns:
            The next event, or None if nothing arrived before timeout
        """
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def get_nowait(self) -> ChangeEvent | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def pending(self) -> int:
        return self._queue.qsize()

    def deliver(self, event: ChangeEvent) -> None:
        """Queue an event; on overflow collapse the backlog into one resync."""
        # Publishers serialize here so a drained queue cannot refill before
        # the resync lands.
        with self._deliver_lock:
            try:
                self._queue.put_nowait(event)
            except queue.Full:
                logger.warning(
                    "Subscriber for %s overflowed, sending resync",
                    self.entity_kind,
                )
                self._drain()
                self._queue.put_nowait(
                    ChangeEvent(self.entity_kind, None, ChangeAction.RESYNC)
                )

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._notifier.unsubscribe(self)

    def _drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return

    def __iter__(self) -> Iterator[ChangeEvent]:
        while not self._closed:
            event = self.get(timeout=1.0)
            if event is not None:
                yield event

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


class ChangeNotifier:
    """
    Thread-safe broker fanning events out to subscriptions by entity kind.
    """

    def __init__(self, queue_size: int | None = None) -> None:
        self._queue_size = queue_size or settings.NOTIFIER_QUEUE_SIZE
        self._lock = threading.Lock()
        self._subscriptions: dict[EntityKind, set[Subscription]] = {
            kind: set() for kind in EntityKind
        }

    def subscribe(self, entity_kind: EntityKind | str) -> Subscription:
        """
        Register interest in one entity kind.

        Raises:
            ValueError: If entity_kind is not a known kind
        """
        kind = EntityKind(entity_kind)
        subscription = Subscription(self, kind, self._queue_size)
        with self._lock:
            self._subscriptions[kind].add(subscription)
        logger.debug("Subscribed to %s (%d total)", kind, self.subscriber_count(kind))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions[subscription.entity_kind].discard(subscription)

    def subscriber_count(self, entity_kind: EntityKind | str) -> int:
        with self._lock:
            return len(self._subscriptions[EntityKind(entity_kind)])

    def publish(self, event: ChangeEvent) -> None:
        """
        Broadcast an event to every current subscriber of its kind.

        A failing subscriber never stops delivery to the others.
        """
        with self._lock:
            targets = list(self._subscriptions[event.entity_kind])

        for subscription in targets:
            try:
                subscription.deliver(event)
            except Exception:
                logger.exception("Dropping %s event for a subscriber", event)

        logger.debug(
            "Published %s %s %s to %d subscribers",
            event.entity_kind,
            event.action,
            event.id,
            len(targets),
        )


_notifier: ChangeNotifier | None = None
_notifier_lock = threading.Lock()


def get_notifier() -> ChangeNotifier:
    """Process-wide notifier, created on first use."""
    global _notifier  # noqa: PLW0603
    with _notifier_lock:
        if _notifier is None:
            _notifier = ChangeNotifier()
        return _notifier


def publish_on_commit(
    entity_kind: EntityKind,
    entity_id: object,
    action: ChangeAction = ChangeAction.UPDATED,
) -> None:
    """
    Publish a change once the surrounding transaction commits.

    Outside a transaction the event goes out immediately.
    """
    event = ChangeEvent(entity_kind, str(entity_id), action)
    transaction.on_commit(lambda: get_notifier().publish(event))
