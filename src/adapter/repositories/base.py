"""
Tenant-scoped query helpers and the generic SQLModel repository.

Every read and write on a tenant-owned table goes through tenant_filter(),
so the tenant predicate lives in exactly one place for both database
backends.
"""

from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar
from uuid import UUID

from sqlalchemy import and_, delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.base import ITenantScopedRepository
from src.app.repositories.errors import ConstraintViolationError
from src.domain.base import utc_now

T = TypeVar("T")


def tenant_filter(model: Type[T], tenant_id: UUID, *criteria):
    """
    Return a filter clause that always ANDs in model.tenant_id == tenant_id.

    Usage:
        stmt = select(Product).where(tenant_filter(Product, tenant_id, Product.status == "active"))
    """
    return and_(model.tenant_id == tenant_id, *criteria)


def scoped_select(model: Type[T], tenant_id: UUID, *criteria):
    """SELECT statement pre-filtered by tenant_id"""
    return select(model).where(tenant_filter(model, tenant_id, *criteria))


async def flush_or_conflict(session: AsyncSession) -> None:
    """Flush pending writes, translating constraint failures"""
    try:
        await session.flush()
    except IntegrityError as exc:
        raise ConstraintViolationError(str(exc.orig)) from exc


class TenantScopedRepository(ITenantScopedRepository[T], Generic[T]):
    """
    SQLModel implementation shared by all tenant-owned entities.

    Subclasses set `model` and the whitelist of columns accepted as
    equality filters by list().
    """

    model: Type[T]
    filterable: Tuple[str, ...] = ()

    def __init__(self, session: AsyncSession):
        self.session = session

    def _criteria(self, filters: Optional[Dict[str, Any]]) -> list:
        criteria = []
        for key, value in (filters or {}).items():
            if value is None or key not in self.filterable:
                continue
            criteria.append(getattr(self.model, key) == value)
        return criteria

    async def get(self, tenant_id: UUID, entity_id: UUID) -> Optional[T]:
        stmt = scoped_select(self.model, tenant_id, self.model.id == entity_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list(
        self,
        tenant_id: UUID,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[T], int]:
        where = tenant_filter(self.model, tenant_id, *self._criteria(filters))

        count_stmt = select(func.count()).select_from(self.model).where(where)
        total = (await self.session.exec(count_stmt)).one()

        stmt = (
            select(self.model)
            .where(where)
            .order_by(self.model.created_at.desc(), self.model.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total

    async def create(self, entity: T) -> T:
        self.session.add(entity)
        await flush_or_conflict(self.session)
        await self.session.refresh(entity)
        return entity

    async def update(self, entity: T) -> T:
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        self.session.add(entity)
        await flush_or_conflict(self.session)
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: T) -> None:
        await self.session.delete(entity)
        await flush_or_conflict(self.session)

    async def delete_all_for_tenant(self, tenant_id: UUID) -> None:
        stmt = delete(self.model).where(tenant_filter(self.model, tenant_id))
        await self.session.execute(stmt)
