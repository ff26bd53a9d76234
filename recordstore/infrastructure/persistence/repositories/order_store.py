"""SQLAlchemy-backed persistence for placed orders."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from recordstore.domain.entities import Order
from recordstore.infrastructure.persistence.database.db_connection import get_session
from recordstore.infrastructure.persistence.database.db_models import DBOrder
from recordstore.infrastructure.persistence.repositories.mapper import OrderMapper
from recordstore.infrastructure.persistence.repositories.repo_decorator import (
    db_operation,
)


class SQLOrderStore:
    """Order collection over an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory
        self.mapper = OrderMapper

    @db_operation("insert_order")
    async def insert(self, order: Order) -> Order:
        async with get_session(self._session_factory) as session:
            db_order = self.mapper.to_db(order)
            session.add(db_order)
            await session.flush()
            return self.mapper.to_domain(db_order)

    @db_operation("find_orders")
    async def find_all(self) -> list[Order]:
        async with get_session(self._session_factory) as session:
            rows = (await session.scalars(select(DBOrder).order_by(DBOrder.id))).all()
            return [self.mapper.to_domain(row) for row in rows]

    @db_operation("find_order_by_id")
    async def find_by_id(self, order_id: int) -> Order | None:
        async with get_session(self._session_factory) as session:
            row = await session.get(DBOrder, order_id)
            return self.mapper.to_domain(row) if row else None
