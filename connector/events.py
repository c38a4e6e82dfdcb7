"""Notification bus for swap and configuration events."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from connector.models.swap import Notification

logger = structlog.get_logger()

Subscriber = Callable[[Notification], None]


class EventBus:
    """Synchronous publish/subscribe for connector notifications.

    Every published notification is also kept in `history` so tests and
    audit tooling can inspect what a connector emitted.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self.history: list[Notification] = []

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.remove(subscriber)

    def publish(self, notification: Notification) -> None:
        """Record and deliver a notification.

        Notifications describe state that has already changed, so a failing
        subscriber is logged and skipped rather than propagated.
        """
        self.history.append(notification)
        logger.info("notification_emitted", **notification.model_dump())
        for subscriber in list(self._subscribers):
            try:
                subscriber(notification)
            except Exception:
                logger.exception(
                    "subscriber_failed",
                    kind=notification.kind,
                    subscriber=getattr(subscriber, "__qualname__", repr(subscriber)),
                )

    def of_kind(self, kind: str) -> list[Notification]:
        """Published notifications with the given kind tag."""
        return [n for n in self.history if n.kind == kind]
