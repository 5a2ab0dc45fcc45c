"""
Runtime objects handed to plugin hook handlers.
"""

import inspect
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from src.app.services.cache import TTLCache
from src.app.services.dtos import TenantResponse
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Any]


class EventBus:
    """In-process publish/subscribe shared by all plugins of an app instance"""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)

    def on(self, event: str, handler: EventHandler) -> None:
        self._handlers[event].append(handler)

    def off(self, event: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    async def emit(self, event: str, data: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            try:
                result = handler(data)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # One failing subscriber must not hide the event from the others
                logger.exception("Event handler failed for %s", event)


class PluginCache:
    """View over the shared TTL cache, namespaced per tenant and plugin"""

    def __init__(self, cache: TTLCache, namespace: str):
        self._cache = cache
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> Any:
        return self._cache.get(self._key(key))

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self._cache.set(self._key(key), value, ttl)

    def delete(self, key: str) -> None:
        self._cache.delete(self._key(key))


@dataclass
class PluginInfo:
    id: str
    slug: str
    name: str
    version: str
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class HookContext:
    """
    What a hook handler can reach.

    db is the caller's unit of work, it is already inside its transaction
    for before_* hooks and after the commit for after_* hooks.
    """

    tenant: TenantResponse
    plugin: PluginInfo
    db: UnitOfWork
    events: EventBus
    logger: logging.Logger
    cache: PluginCache

    @property
    def tenant_id(self):
        return self.tenant.id

    @property
    def config(self) -> Dict[str, Any]:
        return self.plugin.config
