"""
Plugin hook system.

Tenant-installed plugins extend order and payment processing through
named hook points.
"""

from .context import EventBus, HookContext, PluginCache, PluginInfo
from .dispatcher import HookDispatcher, HookRejectedError
from .hooks import HOOK_PAYLOADS, HookName, OrderHookPayload, PaymentHookPayload
from .dependencies import required_by, satisfies, unmet_dependencies
from .manifest import PluginCategory, PluginDependency, PluginManifest
from .registry import HookRegistry, PluginLoadError, RegisteredHook

__all__ = [
    "EventBus",
    "HookContext",
    "PluginCache",
    "PluginInfo",
    "HookDispatcher",
    "HookRejectedError",
    "HOOK_PAYLOADS",
    "HookName",
    "OrderHookPayload",
    "PaymentHookPayload",
    "PluginCategory",
    "PluginManifest",
    "PluginDependency",
    "required_by",
    "satisfies",
    "unmet_dependencies",
    "HookRegistry",
    "PluginLoadError",
    "RegisteredHook",
]
