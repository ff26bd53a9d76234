"""Order placement against catalog stock."""

from recordstore.application.utilities.cache_keys import (
    QUERY_PREFIX,
    record_key,
    record_mbid_key,
)
from recordstore.config import get_logger
from recordstore.domain.entities import Order
from recordstore.domain.exceptions import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from recordstore.domain.repositories import (
    CacheProtocol,
    OrderStoreProtocol,
    RecordStoreProtocol,
)

logger = get_logger(__name__)


class OrderService:
    """Places orders by atomically taking copies out of stock."""

    def __init__(
        self,
        orders: OrderStoreProtocol,
        records: RecordStoreProtocol,
        cache: CacheProtocol,
    ) -> None:
        self.orders = orders
        self.records = records
        self.cache = cache

    async def place_order(self, record_id: int, quantity: int) -> Order:
        """Order ``quantity`` copies of a record.

        The stock check and the decrement happen in one conditional update,
        so two concurrent orders can never take stock below zero.

        Raises:
            ValidationError: quantity is below 1
            NotFoundError: the record does not exist
            InsufficientStockError: fewer than ``quantity`` copies in stock
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        record = await self.records.find_by_id(record_id)
        if record is None:
            raise NotFoundError("Record not found")

        updated = await self.records.decrement_field(record_id, "qty", quantity)
        if updated is None:
            raise InsufficientStockError("Not enough records in stock")

        order = await self.orders.insert(Order(record_id=record_id, quantity=quantity))

        await self.cache.delete(record_key(record_id))
        if updated.mbid:
            await self.cache.delete(record_mbid_key(updated.mbid))
        await self.cache.delete_prefix(QUERY_PREFIX)

        logger.info(
            "Order placed",
            order_id=order.id,
            record_id=record_id,
            quantity=quantity,
            remaining=updated.qty,
        )
        return order

    async def list_orders(self) -> list[Order]:
        return await self.orders.find_all()

    async def get_order(self, order_id: int) -> Order | None:
        return await self.orders.find_by_id(order_id)
