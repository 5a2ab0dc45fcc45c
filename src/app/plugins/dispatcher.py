"""
Hook dispatcher.

For a tenant and a hook point, runs the handlers of the tenant's enabled
plugins in installation order and threads the payload through them.
"""

import inspect
import logging
from typing import Optional

from pydantic import BaseModel, ValidationError

from src.app.services.cache import TTLCache
from src.app.services.dtos import TenantResponse
from src.app.services.unit_of_work import UnitOfWork
from .context import EventBus, HookContext, PluginCache, PluginInfo
from .hooks import HOOK_PAYLOADS, HookName
from .registry import HookRegistry, PluginLoadError

logger = logging.getLogger(__name__)


class HookRejectedError(Exception):
    """A before_* handler refused the operation"""

    def __init__(self, hook: HookName, plugin_slug: str, message: str):
        self.hook = hook
        self.plugin_slug = plugin_slug
        self.message = message
        super().__init__(f"{hook.value} rejected by {plugin_slug}: {message}")


class HookDispatcher:
    def __init__(
        self,
        registry: HookRegistry,
        events: Optional[EventBus] = None,
        cache: Optional[TTLCache] = None,
    ):
        self.registry = registry
        self.events = events or EventBus()
        self.cache = cache or TTLCache(ttl_seconds=300)

    async def dispatch(
        self, uow: UnitOfWork, tenant: TenantResponse, hook: HookName, payload: BaseModel
    ) -> BaseModel:
        """
        Run every handler for `hook` and return the final payload.

        Raises:
            TypeError: payload is not the model declared for the hook
            HookRejectedError: a before_* handler raised
        """
        payload_type = HOOK_PAYLOADS[hook]
        if not isinstance(payload, payload_type):
            raise TypeError(
                f"{hook.value} expects {payload_type.__name__}, got {type(payload).__name__}"
            )

        if hook.aborts_on_error:
            return await self._run(uow, tenant, hook, payload)

        try:
            return await self._run(uow, tenant, hook, payload)
        except Exception:
            logger.exception("Dispatch of %s failed for tenant %s", hook.value, tenant.slug)
            return payload

    async def _run(self, uow, tenant, hook, payload):
        payload_type = type(payload)
        installations = await uow.tenant_plugins.list_with_plugins(tenant.id, active_only=True)

        for installation, plugin in installations:
            try:
                handlers = self.registry.handlers_for(plugin.slug, plugin.manifest, hook)
            except PluginLoadError as exc:
                self._handle_failure(hook, plugin.slug, exc)
                continue
            if not handlers:
                continue

            context = HookContext(
                tenant=tenant,
                plugin=PluginInfo(
                    id=str(plugin.id),
                    slug=plugin.slug,
                    name=plugin.name,
                    version=plugin.version,
                    config=dict(installation.config or {}),
                ),
                db=uow,
                events=self.events,
                logger=logging.getLogger(f"plugins.{plugin.slug}"),
                cache=PluginCache(self.cache, f"{tenant.id}:{plugin.slug}"),
            )

            for registered in handlers:
                try:
                    result = registered.handler(context, payload)
                    if inspect.isawaitable(result):
                        result = await result
                    if result is not None:
                        payload = self._coerce(payload_type, result)
                except Exception as exc:
                    self._handle_failure(hook, plugin.slug, exc)

        return payload

    @staticmethod
    def _coerce(payload_type, result):
        if isinstance(result, payload_type):
            return result
        if isinstance(result, BaseModel):
            result = result.model_dump()
        if not isinstance(result, dict):
            raise TypeError(f"Hook handler returned {type(result).__name__}")
        return payload_type.model_validate(result)

    @staticmethod
    def _handle_failure(hook: HookName, plugin_slug: str, exc: Exception) -> None:
        if hook.aborts_on_error:
            message = str(exc) or type(exc).__name__
            if isinstance(exc, ValidationError):
                message = f"invalid {hook.value} payload returned"
            logger.warning("%s rejected by plugin %s: %s", hook.value, plugin_slug, message)
            raise HookRejectedError(hook, plugin_slug, message) from exc
        logger.exception("%s handler of plugin %s failed", hook.value, plugin_slug)
