"""Push of newly created messages to websocket subscribers.

Subscriptions are keyed by conversation pair. The hub listens to the
messaging core's "message created" event and never takes part in the write
itself; polling clients are unaffected by whether anyone is subscribed.
"""

from __future__ import annotations

import asyncio
import logging
from threading import Lock
from typing import Any

from pulse_chat.models import Message
from pulse_chat.schemas.message import MessageRead

logger = logging.getLogger(__name__)

ConversationKey = tuple[str, str]

DEFAULT_QUEUE_SIZE = 100


def conversation_key(user_a: str, user_b: str) -> ConversationKey:
    """Return the order-independent key of a conversation pair."""
    first, second = sorted((user_a, user_b))
    return first, second


class Subscription:
    """Bounded queue of payloads delivered to one websocket connection.

    When the queue overflows, pending payloads are discarded and ``get``
    yields None once; the subscriber is expected to disconnect.
    """

    def __init__(
        self,
        key: ConversationKey,
        loop: asyncio.AbstractEventLoop,
        maxsize: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self.key = key
        self.loop = loop
        self.queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(maxsize=maxsize)
        self.dropped = False

    async def get(self) -> dict[str, Any] | None:
        return await self.queue.get()

    def offer(self, payload: dict[str, Any]) -> bool:
        """Enqueue ``payload``; on overflow mark the subscription dropped.

        Must run on ``loop``.
        """
        if self.dropped:
            return False
        try:
            self.queue.put_nowait(payload)
        except asyncio.QueueFull:
            self.dropped = True
            while not self.queue.empty():
                self.queue.get_nowait()
            self.queue.put_nowait(None)
            return False
        return True


class ConversationHub:
    """Process-local publish/subscribe registry for conversation pairs."""

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self.queue_size = queue_size
        self._subscriptions: dict[ConversationKey, set[Subscription]] = {}
        self._lock = Lock()

    def subscribe(self, user_a: str, user_b: str) -> Subscription:
        """Register a subscription bound to the running event loop."""
        subscription = Subscription(
            conversation_key(user_a, user_b),
            asyncio.get_running_loop(),
            maxsize=self.queue_size,
        )
        with self._lock:
            self._subscriptions.setdefault(subscription.key, set()).add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            bucket = self._subscriptions.get(subscription.key)
            if bucket is None:
                return
            bucket.discard(subscription)
            if not bucket:
                del self._subscriptions[subscription.key]

    def subscriber_count(self, user_a: str, user_b: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(conversation_key(user_a, user_b), ()))

    def publish(self, user_a: str, user_b: str, payload: dict[str, Any]) -> int:
        """Deliver ``payload`` to every subscriber of the pair.

        Safe to call from any thread. Returns the number of subscribers the
        payload was handed to.
        """
        with self._lock:
            targets = list(self._subscriptions.get(conversation_key(user_a, user_b), ()))

        delivered = 0
        for subscription in targets:
            try:
                subscription.loop.call_soon_threadsafe(self._deliver, subscription, payload)
            except RuntimeError:
                # Event loop already closed; the connection is gone.
                self.unsubscribe(subscription)
                continue
            delivered += 1
        return delivered

    def _deliver(self, subscription: Subscription, payload: dict[str, Any]) -> None:
        if not subscription.offer(payload):
            logger.warning("Dropping slow subscriber of conversation %s", subscription.key)
            self.unsubscribe(subscription)

    def on_message_created(self, message: Message) -> None:
        """Listener for the messaging core's message-created event."""
        if message.receiver_id is None:
            return
        payload = {
            "type": "message",
            "message": MessageRead.model_validate(message).model_dump(mode="json", by_alias=True),
        }
        delivered = self.publish(message.sender_id, message.receiver_id, payload)
        if delivered:
            logger.debug("Pushed message %s to %d subscribers", message.id, delivered)


hub = ConversationHub()


def get_conversation_hub() -> ConversationHub:
    """Return the process-wide conversation hub."""
    return hub
