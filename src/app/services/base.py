"""
Generic CRUD service for tenant-owned entities.

Every method takes the resolved tenant id and goes through the tenant-scoped
repository, so an id belonging to another tenant is simply NOT_FOUND.
Response DTOs are built inside the unit of work.
"""

import logging
from typing import Any, Dict, Generic, Optional, Type, TypeVar, get_args
from uuid import UUID

from pydantic import BaseModel

from src.app.repositories.base import ITenantScopedRepository
from src.app.repositories.errors import ConstraintViolationError
from src.app.services.dtos import PageResponse
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

E = TypeVar("E")
R = TypeVar("R", bound=BaseModel)

DEFAULT_PAGE_SIZE = 50


def changes_from(command: BaseModel) -> Dict[str, Any]:
    """Fields explicitly sent in a partial update, an explicit null included"""
    return command.model_dump(exclude_unset=True)


def null_violation(entity: Type[BaseModel], fields: Dict[str, Any]) -> Optional[Error]:
    """VALIDATION_ERROR when an update nulls a column the entity does not allow to be null"""
    rejected = sorted(
        key
        for key, value in fields.items()
        if value is None
        and key in entity.model_fields
        and type(None) not in get_args(entity.model_fields[key].annotation)
    )
    if rejected:
        return Error("VALIDATION_ERROR", f"Fields cannot be null: {', '.join(rejected)}")
    return None


class TenantScopedService(Generic[E, R]):
    entity: Type[E]
    response: Type[R]
    repository_name: str
    error_prefix: str
    label: str
    conflict_code: Optional[str] = None
    in_use_code: Optional[str] = None

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def repository(self) -> ITenantScopedRepository:
        return getattr(self.uow, self.repository_name)

    def not_found(self) -> Error:
        return Error(f"{self.error_prefix}_NOT_FOUND", f"{self.label} not found")

    def conflict(self) -> Error:
        return Error(
            self.conflict_code or f"{self.error_prefix}_EXISTS",
            f"{self.label} already exists",
        )

    def in_use(self) -> Error:
        return Error(
            self.in_use_code or f"{self.error_prefix}_IN_USE",
            f"{self.label} is still referenced and cannot be deleted",
        )

    def to_response(self, entity: E) -> R:
        return self.response.model_validate(entity)

    async def validate(self, tenant_id: UUID, fields: Dict[str, Any]) -> Optional[Error]:
        """Hook for cross-entity checks before create/update"""
        return None

    async def create(self, tenant_id: UUID, command: BaseModel) -> Result[R]:
        fields = command.model_dump()
        async with self.uow:
            error = await self.validate(tenant_id, fields)
            if error:
                return Return.err(error)

            try:
                entity = await self.repository.create(self.entity(tenant_id=tenant_id, **fields))
            except ConstraintViolationError as exc:
                logger.info("%s create conflict: %s", self.label, exc.message)
                return Return.err(self.conflict())

            await self.uow.commit()
            return Return.ok(self.to_response(entity))

    async def get(self, tenant_id: UUID, entity_id: UUID) -> Result[R]:
        async with self.uow:
            entity = await self.repository.get(tenant_id, entity_id)
            if entity is None:
                return Return.err(self.not_found())
            return Return.ok(self.to_response(entity))

    async def list(
        self,
        tenant_id: UUID,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Result[PageResponse[R]]:
        async with self.uow:
            entities, total = await self.repository.list(tenant_id, filters, limit, offset)
            data = [self.to_response(entity) for entity in entities]
            return Return.ok(PageResponse[self.response].build(data, total, limit, offset))

    async def update(self, tenant_id: UUID, entity_id: UUID, command: BaseModel) -> Result[R]:
        fields = changes_from(command)
        error = null_violation(self.entity, fields)
        if error:
            return Return.err(error)
        async with self.uow:
            entity = await self.repository.get(tenant_id, entity_id)
            if entity is None:
                return Return.err(self.not_found())

            error = await self.validate(tenant_id, fields)
            if error:
                return Return.err(error)

            for key, value in fields.items():
                setattr(entity, key, value)
            try:
                entity = await self.repository.update(entity)
            except ConstraintViolationError as exc:
                logger.info("%s update conflict: %s", self.label, exc.message)
                return Return.err(self.conflict())

            await self.uow.commit()
            return Return.ok(self.to_response(entity))

    async def delete(self, tenant_id: UUID, entity_id: UUID) -> Result[None]:
        async with self.uow:
            entity = await self.repository.get(tenant_id, entity_id)
            if entity is None:
                return Return.err(self.not_found())

            try:
                await self.delete_dependents(tenant_id, entity)
                await self.repository.delete(entity)
            except ConstraintViolationError as exc:
                logger.info("%s delete blocked: %s", self.label, exc.message)
                return Return.err(self.in_use())

            await self.uow.commit()
            return Return.ok(None)

    async def delete_dependents(self, tenant_id: UUID, entity: E) -> None:
        """Remove rows owned by the entity before it is deleted"""
        return None
