"""
Plugin Service

Global plugin catalog plus per-tenant installations.
"""

import logging
from typing import List, Optional
from uuid import UUID

from pydantic import ValidationError

from src.app.plugins import PluginManifest, required_by, unmet_dependencies
from src.app.repositories.errors import ConstraintViolationError
from src.app.services.base import DEFAULT_PAGE_SIZE
from src.app.services.dtos import (
    PageResponse,
    PluginCreate,
    PluginResponse,
    PluginUpdate,
    TenantPluginResponse,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Plugin, PluginStatus, TenantPlugin, TenantPluginStatus
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

PLUGIN_NOT_FOUND = Error("PLUGIN_NOT_FOUND", "Plugin not found")
PLUGIN_NOT_INSTALLED = Error("PLUGIN_NOT_INSTALLED", "Plugin not installed")


def parse_manifest(raw: dict) -> Result[PluginManifest]:
    try:
        return Return.ok(PluginManifest.model_validate(raw))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        return Return.err(Error("INVALID_MANIFEST", f"Invalid plugin manifest: {problems}"))


def manifest_of(plugin: Optional[Plugin]) -> Optional[PluginManifest]:
    if plugin is None or not plugin.manifest:
        return None
    return PluginManifest.model_validate(plugin.manifest)


def incomplete_config(manifest: Optional[PluginManifest], config: dict) -> Optional[Error]:
    missing = manifest.missing_settings(config) if manifest else []
    if missing:
        return Error(
            "PLUGIN_CONFIG_INCOMPLETE", f"Missing required settings: {', '.join(missing)}"
        )
    return None


def installation_response(installation: TenantPlugin, plugin: Plugin) -> TenantPluginResponse:
    response = TenantPluginResponse.model_validate(installation)
    response.plugin = PluginResponse.model_validate(plugin)
    return response


class PluginService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    # Catalog

    async def register(self, command: PluginCreate) -> Result[PluginResponse]:
        parsed = parse_manifest(command.manifest)
        if parsed.is_err():
            return Return.err(parsed.error)
        manifest = parsed.value

        plugin = Plugin(
            name=manifest.name,
            slug=manifest.slug,
            version=manifest.version,
            author=manifest.author,
            description=manifest.description,
            manifest=manifest.model_dump(mode="json"),
            status=command.status,
            is_official=command.is_official,
        )
        async with self.uow:
            try:
                plugin = await self.uow.plugins.create(plugin)
            except ConstraintViolationError:
                return Return.err(
                    Error("PLUGIN_SLUG_EXISTS", "A plugin with this name or slug already exists")
                )
            await self.uow.commit()
            logger.info("Plugin registered: %s@%s", plugin.slug, plugin.version)
            return Return.ok(PluginResponse.model_validate(plugin))

    async def get(self, plugin_id: UUID) -> Result[PluginResponse]:
        async with self.uow:
            plugin = await self.uow.plugins.get_by_id(plugin_id)
            if plugin is None:
                return Return.err(PLUGIN_NOT_FOUND)
            return Return.ok(PluginResponse.model_validate(plugin))

    async def list(
        self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0
    ) -> Result[PageResponse[PluginResponse]]:
        async with self.uow:
            plugins, total = await self.uow.plugins.list(limit, offset)
            data = [PluginResponse.model_validate(p) for p in plugins]
            return Return.ok(PageResponse[PluginResponse].build(data, total, limit, offset))

    async def update(self, plugin_id: UUID, command: PluginUpdate) -> Result[PluginResponse]:
        manifest: Optional[PluginManifest] = None
        if command.manifest is not None:
            parsed = parse_manifest(command.manifest)
            if parsed.is_err():
                return Return.err(parsed.error)
            manifest = parsed.value

        async with self.uow:
            plugin = await self.uow.plugins.get_by_id(plugin_id)
            if plugin is None:
                return Return.err(PLUGIN_NOT_FOUND)

            if manifest is not None:
                if manifest.slug != plugin.slug:
                    return Return.err(
                        Error("VALIDATION_ERROR", "Manifest slug cannot change")
                    )
                plugin.name = manifest.name
                plugin.version = manifest.version
                plugin.author = manifest.author
                plugin.description = manifest.description
                plugin.manifest = manifest.model_dump(mode="json")
            if command.status is not None:
                plugin.status = command.status
            if command.is_official is not None:
                plugin.is_official = command.is_official

            try:
                plugin = await self.uow.plugins.update(plugin)
            except ConstraintViolationError:
                return Return.err(
                    Error("PLUGIN_SLUG_EXISTS", "A plugin with this name already exists")
                )
            await self.uow.commit()
            return Return.ok(PluginResponse.model_validate(plugin))

    async def delete(self, plugin_id: UUID) -> Result[None]:
        async with self.uow:
            plugin = await self.uow.plugins.get_by_id(plugin_id)
            if plugin is None:
                return Return.err(PLUGIN_NOT_FOUND)
            try:
                await self.uow.plugins.delete(plugin)
            except ConstraintViolationError:
                return Return.err(
                    Error("PLUGIN_IN_USE", "Plugin is installed by at least one tenant")
                )
            await self.uow.commit()
            return Return.ok(None)

    # Tenant installations

    async def install(
        self, tenant_id: UUID, plugin_id: UUID, config: Optional[dict] = None, enabled: bool = False
    ) -> Result[TenantPluginResponse]:
        """
        Install a catalog plugin for a tenant.

        Business Rules:
        - Deprecated catalog plugins cannot be newly installed
        - Required dependencies must already be installed at a matching version
        - Installing enabled needs every required setting
        """
        async with self.uow:
            plugin = await self.uow.plugins.get_by_id(plugin_id)
            if plugin is None:
                return Return.err(PLUGIN_NOT_FOUND)
            if plugin.status == PluginStatus.deprecated:
                return Return.err(
                    Error("PLUGIN_DEPRECATED", "Deprecated plugins cannot be installed")
                )

            manifest = manifest_of(plugin)
            merged = {**(manifest.default_config() if manifest else {}), **(config or {})}
            if enabled:
                error = incomplete_config(manifest, merged)
                if error:
                    return Return.err(error)

            if manifest is not None and (manifest.dependencies or manifest.peer_dependencies):
                rows = await self.uow.tenant_plugins.list_with_plugins(tenant_id)
                installed = {p.slug: p.version for _, p in rows}
                problems = unmet_dependencies(manifest, installed)
                if problems:
                    return Return.err(
                        Error(
                            "PLUGIN_DEPENDENCY_UNMET",
                            f"Unmet plugin dependencies: {'; '.join(problems)}",
                        )
                    )

            try:
                installation = await self.uow.tenant_plugins.create(
                    TenantPlugin(
                        tenant_id=tenant_id,
                        plugin_id=plugin.id,
                        status=TenantPluginStatus.active if enabled else TenantPluginStatus.inactive,
                        config=merged,
                    )
                )
            except ConstraintViolationError:
                return Return.err(
                    Error("PLUGIN_ALREADY_INSTALLED", "Plugin already installed")
                )
            await self.uow.commit()
            logger.info("Plugin %s installed for tenant %s", plugin.slug, tenant_id)
            return Return.ok(installation_response(installation, plugin))

    async def get_installation(
        self, tenant_id: UUID, plugin_id: UUID
    ) -> Result[TenantPluginResponse]:
        async with self.uow:
            installation = await self.uow.tenant_plugins.get_by_plugin(tenant_id, plugin_id)
            if installation is None:
                return Return.err(PLUGIN_NOT_INSTALLED)
            plugin = await self.uow.plugins.get_by_id(plugin_id)
            return Return.ok(installation_response(installation, plugin))

    async def list_installations(self, tenant_id: UUID) -> Result[List[TenantPluginResponse]]:
        async with self.uow:
            rows = await self.uow.tenant_plugins.list_with_plugins(tenant_id)
            return Return.ok([installation_response(i, p) for i, p in rows])

    async def update_config(
        self, tenant_id: UUID, plugin_id: UUID, config: dict
    ) -> Result[TenantPluginResponse]:
        return await self._change(tenant_id, plugin_id, config=config)

    async def enable(self, tenant_id: UUID, plugin_id: UUID) -> Result[TenantPluginResponse]:
        return await self._change(tenant_id, plugin_id, status=TenantPluginStatus.active)

    async def disable(self, tenant_id: UUID, plugin_id: UUID) -> Result[TenantPluginResponse]:
        return await self._change(tenant_id, plugin_id, status=TenantPluginStatus.inactive)

    async def uninstall(self, tenant_id: UUID, plugin_id: UUID) -> Result[None]:
        async with self.uow:
            installation = await self.uow.tenant_plugins.get_by_plugin(tenant_id, plugin_id)
            if installation is None:
                return Return.err(PLUGIN_NOT_INSTALLED)

            rows = await self.uow.tenant_plugins.list_with_plugins(tenant_id)
            plugin = next((p for i, p in rows if i.id == installation.id), None)
            others = [manifest_of(p) for i, p in rows if i.id != installation.id]
            dependents = (
                required_by(plugin.slug, [m for m in others if m is not None]) if plugin else []
            )
            if dependents:
                return Return.err(
                    Error("PLUGIN_IN_USE", f"Required by installed plugins: {', '.join(dependents)}")
                )

            await self.uow.tenant_plugins.delete(installation)
            await self.uow.commit()
            logger.info("Plugin %s uninstalled for tenant %s", plugin_id, tenant_id)
            return Return.ok(None)

    async def _change(
        self,
        tenant_id: UUID,
        plugin_id: UUID,
        status: Optional[TenantPluginStatus] = None,
        config: Optional[dict] = None,
    ) -> Result[TenantPluginResponse]:
        async with self.uow:
            installation = await self.uow.tenant_plugins.get_by_plugin(tenant_id, plugin_id)
            if installation is None:
                return Return.err(PLUGIN_NOT_INSTALLED)
            plugin = await self.uow.plugins.get_by_id(plugin_id)

            # An active installation must always carry every required setting
            new_status = status if status is not None else installation.status
            new_config = config if config is not None else installation.config or {}
            if new_status == TenantPluginStatus.active:
                error = incomplete_config(manifest_of(plugin), new_config)
                if error:
                    return Return.err(error)

            installation.config = new_config
            installation.status = new_status
            installation = await self.uow.tenant_plugins.update(installation)
            await self.uow.commit()
            return Return.ok(installation_response(installation, plugin))
