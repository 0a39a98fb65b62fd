# storefront/services/event_bus.py
from typing import Callable, List

import redis
from redis.exceptions import RedisError

from storefront.domain.events import CartChanged
from storefront.utils.retry import redis_retry
from storefront.utils.settings import EVENTS_CHANNEL, EVENTS_REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Subscriber = Callable[[CartChanged], None]


class EventBus:
    """
    Kanal publish-subscribe dla zdarzen CartChanged.

    -lokalni subskrybenci wolani w kolejnosci subskrypcji
    -opcjonalnie redis pub/sub, zeby inne procesy/widoki dostaly to samo zdarzenie
    """

    def __init__(self, url: str | None = None, channel: str | None = None, client: redis.Redis | None = None):
        self.channel = channel or EVENTS_CHANNEL
        self._subscribers: List[Subscriber] = []

        if client is not None:
            self.redis = client
        else:
            url = EVENTS_REDIS_URL if url is None else url
            self.redis = redis.Redis.from_url(url, decode_responses=True) if url else None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: CartChanged) -> None:
        # wolane po commicie - blad subskrybenta nie moze zmienic wyniku operacji
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    f"Subscriber {getattr(callback, '__name__', callback)!r} failed on "
                    f"{event.action.value} event for customer {event.customer_id}"
                )

        if self.redis is None:
            return

        try:
            self._publish_remote(event.to_json())
        except RedisError as e:
            # mutacja jest juz zacommitowana, zdarzenie tylko powiadamia
            logger.warning(f"Failed to publish {event.action.value} event for customer {event.customer_id}: {e}")

    @redis_retry()
    def _publish_remote(self, payload: str) -> int:
        return self.redis.publish(self.channel, payload)


_default_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    global _default_bus
    if _default_bus is None:
        _default_bus = EventBus()
    return _default_bus
