"""
Hook handler registry and manifest handler loading.

Handlers come from two places: programmatic registration (register() or
the hook() decorator) and the `hooks` list of a plugin manifest, whose
`handler` strings are resolved on first use:

    "package.module:function"      importable module
    "hooks/payment.py:function"    file under PLUGIN_DIR/<slug>/
"""

import importlib
import importlib.util
import logging
import os
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .hooks import HookName
from .manifest import HookDefinition

logger = logging.getLogger(__name__)

HookHandler = Callable[..., Any]


class PluginLoadError(Exception):
    """A manifest handler reference could not be resolved"""


@dataclass(frozen=True)
class RegisteredHook:
    plugin_slug: str
    hook: HookName
    handler: HookHandler
    priority: int = 100


class HookRegistry:
    def __init__(self, plugin_dir: Optional[str] = None):
        self.plugin_dir = plugin_dir
        self._registered: Dict[str, List[RegisteredHook]] = defaultdict(list)
        self._loaded: Dict[Tuple[str, str], HookHandler] = {}
        self._lock = threading.Lock()

    def register(
        self, plugin_slug: str, hook: HookName, handler: HookHandler, priority: int = 100
    ) -> RegisteredHook:
        registered = RegisteredHook(plugin_slug, HookName(hook), handler, priority)
        with self._lock:
            self._registered[plugin_slug].append(registered)
        logger.debug("Registered %s handler for plugin %s", registered.hook.value, plugin_slug)
        return registered

    def hook(self, plugin_slug: str, hook: HookName, priority: int = 100):
        """Decorator form of register()"""

        def decorator(handler: HookHandler) -> HookHandler:
            self.register(plugin_slug, hook, handler, priority)
            return handler

        return decorator

    def unregister(self, plugin_slug: str, hook: Optional[HookName] = None) -> None:
        with self._lock:
            if hook is None:
                self._registered.pop(plugin_slug, None)
                return
            self._registered[plugin_slug] = [
                r for r in self._registered[plugin_slug] if r.hook != hook
            ]

    def clear(self) -> None:
        with self._lock:
            self._registered.clear()
            self._loaded.clear()

    def handlers_for(
        self, plugin_slug: str, manifest: Optional[dict], hook: HookName
    ) -> List[RegisteredHook]:
        """
        Handlers of one plugin for one hook point, lowest priority first.

        Raises:
            PluginLoadError: a manifest handler cannot be imported
        """
        with self._lock:
            handlers = [r for r in self._registered.get(plugin_slug, []) if r.hook == hook]

        for raw in (manifest or {}).get("hooks") or []:
            definition = HookDefinition.model_validate(raw)
            if definition.name != hook:
                continue
            handler = self.load_handler(plugin_slug, definition.handler)
            handlers.append(
                RegisteredHook(plugin_slug, hook, handler, definition.priority)
            )

        # sorted() is stable, equal priorities keep registration order
        return sorted(handlers, key=lambda r: r.priority)

    def load_handler(self, plugin_slug: str, reference: str) -> HookHandler:
        cache_key = (plugin_slug, reference)
        with self._lock:
            cached = self._loaded.get(cache_key)
        if cached is not None:
            return cached

        target, _, attribute = reference.rpartition(":")
        if not target or not attribute:
            raise PluginLoadError(f"Invalid handler reference '{reference}'")

        if target.endswith(".py"):
            module = self._load_file(plugin_slug, target)
        else:
            try:
                module = importlib.import_module(target)
            except ImportError as exc:
                raise PluginLoadError(f"Cannot import '{target}': {exc}") from exc

        handler = getattr(module, attribute, None)
        if not callable(handler):
            raise PluginLoadError(f"'{reference}' is not a callable")

        with self._lock:
            self._loaded[cache_key] = handler
        return handler

    def _load_file(self, plugin_slug: str, relative_path: str):
        if not self.plugin_dir:
            raise PluginLoadError("PLUGIN_DIR is not configured")

        root = os.path.realpath(os.path.join(self.plugin_dir, plugin_slug))
        path = os.path.realpath(os.path.join(root, relative_path))
        if os.path.commonpath([root, path]) != root:
            raise PluginLoadError(f"Handler path escapes plugin directory: {relative_path}")
        if not os.path.isfile(path):
            raise PluginLoadError(f"Handler file not found: {relative_path}")

        module_name = f"plugins_{plugin_slug.replace('-', '_')}_{abs(hash(path))}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise PluginLoadError(f"Cannot load handler file: {relative_path}")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise PluginLoadError(f"Error while loading {relative_path}: {exc}") from exc
        return module
