from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Optional

from ..models.subscription import (
    MessageHandler,
    Subscription,
    SubscriptionDescriptor,
    SubscriptionOptions,
)

log = logging.getLogger("daprsvc.registry")


class Source:
    """
    A named pub/sub component and the topics subscribed on it.

    Subscribing the same topic twice replaces the earlier subscription.
    """
    def __init__(self, name: str) -> None:
        self.name = name
        self._subscriptions: Dict[str, Subscription] = {}

    def subscribe(
        self,
        topic: str,
        callback: MessageHandler,
        options: Optional[SubscriptionOptions] = None,
    ) -> Subscription:
        sub = Subscription(
            source_name=self.name,
            topic=topic,
            options=options or SubscriptionOptions(),
            callback=callback,
        )
        if topic in self._subscriptions:
            log.warning("Replacing subscription pubsub=%s topic=%s", self.name, topic)
        self._subscriptions[topic] = sub
        return sub

    def topic(self, topic: str, *, raw_payload: bool = False, skip_envelope: bool = False) -> Callable[[MessageHandler], MessageHandler]:
        """
        Decorator form of `subscribe`:

            @orders.topic("created", skip_envelope=True)
            async def on_created(request, message): ...
        """
        options = SubscriptionOptions(raw_payload=raw_payload, skip_envelope=skip_envelope)

        def register(callback: MessageHandler) -> MessageHandler:
            self.subscribe(topic, callback, options)
            return callback

        return register

    def get(self, topic: str) -> Optional[Subscription]:
        return self._subscriptions.get(topic)

    @property
    def subscriptions(self) -> List[Subscription]:
        return list(self._subscriptions.values())


class SubscriptionRegistry:
    """
    Sources keyed by name.

    Not locked: all `create_source` / `subscribe` calls must happen before the
    HTTP app starts serving. Listing order follows registration order, but
    callers must not rely on it.
    """
    def __init__(self) -> None:
        self._sources: Dict[str, Source] = {}

    def create_source(self, name: str) -> Source:
        if name in self._sources:
            log.warning("Replacing pubsub source %s; its subscriptions are dropped", name)
        source = Source(name)
        self._sources[name] = source
        return source

    def get_source(self, name: str) -> Optional[Source]:
        return self._sources.get(name)

    def resolve(self, source_name: str, topic: str) -> Optional[Subscription]:
        source = self._sources.get(source_name)
        if source is None:
            return None
        return source.get(topic)

    def __iter__(self) -> Iterator[Subscription]:
        for source in self._sources.values():
            yield from source.subscriptions

    def __len__(self) -> int:
        return sum(len(s.subscriptions) for s in self._sources.values())

    def list_descriptors(self, route_prefix: str = "/message") -> List[SubscriptionDescriptor]:
        return [SubscriptionDescriptor.from_subscription(sub, route_prefix) for sub in self]
