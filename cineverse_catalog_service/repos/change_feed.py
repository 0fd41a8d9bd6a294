"""In-process change notifications for document collections."""
import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


class Subscription:
    """
    Handle returned by ``ChangeFeed.subscribe``.

    Once ``unsubscribe`` returns, the listener is never called again.
    """

    def __init__(self, feed: "ChangeFeed", collection: str, listener: Listener):
        self._feed = feed
        self.collection = collection
        self.listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._feed._remove(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.unsubscribe()


class ChangeFeed:
    """
    Collection-keyed publish/subscribe registry.

    Listeners are invoked synchronously in the publishing thread, outside the
    registry lock. A listener removed while a publish is in progress is
    skipped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(self, collection: str, listener: Listener) -> Subscription:
        subscription = Subscription(self, collection, listener)
        with self._lock:
            self._subscriptions.setdefault(collection, []).append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(subscription.collection, [])
            if subscription in subs:
                subs.remove(subscription)
            if not subs:
                self._subscriptions.pop(subscription.collection, None)

    def subscriber_count(self, collection: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(collection, []))

    def publish(self, collection: str) -> int:
        """
        Notify listeners of ``collection``.

        Returns:
            Number of listeners notified
        """
        with self._lock:
            targets = list(self._subscriptions.get(collection, []))

        notified = 0
        for subscription in targets:
            if not subscription.active:
                continue
            subscription.listener(collection)
            notified += 1

        if notified:
            logger.debug(f"Notified {notified} subscriber(s) of change to '{collection}'")
        return notified


# Process-wide feed shared by repositories that are not given their own
default_change_feed = ChangeFeed()
