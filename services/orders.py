from __future__ import annotations

from datetime import datetime, timezone
from itertools import count
from typing import Optional

from models.order import OrderCreate, OrderLineRead, OrderRead


# -----------------------------------------------------------------------------
# In-memory order store
# -----------------------------------------------------------------------------
class OrderStore:
    """
    Process-local order storage backing the demo orders API.
    Order numbers are assigned sequentially starting at `first_order_no`.
    """

    def __init__(self, first_order_no: int = 1):
        self._first_order_no = first_order_no
        self._orders: dict[int, OrderRead] = {}
        self._numbers = count(first_order_no)

    def create(self, order_data: OrderCreate) -> OrderRead:
        order_no = next(self._numbers)
        order = OrderRead(
            order_no=order_no,
            customer=order_data.customer,
            created_at=datetime.now(timezone.utc),
            lines=[
                OrderLineRead(order_no=order_no, line_no=i, sku=line.sku, quantity=line.quantity)
                for i, line in enumerate(order_data.lines, start=1)
            ],
        )
        self._orders[order_no] = order
        return order

    def get(self, order_no: int) -> Optional[OrderRead]:
        return self._orders.get(order_no)

    def find(self, customer: Optional[str] = None, skip: int = 0, limit: int = 100) -> tuple[list[OrderRead], int]:
        orders = [o for o in self._orders.values() if customer is None or o.customer == customer]
        return orders[skip:skip + limit], len(orders)

    def clear(self) -> None:
        self._orders.clear()
        self._numbers = count(self._first_order_no)


order_store = OrderStore()

def get_order_store() -> OrderStore:
    """FastAPI dependency providing the order store."""
    return order_store
