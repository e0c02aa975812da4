from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from models.hateoas import LinkSpec
from models.order import OrderCreate, OrderLineRead, OrderPage, OrderRead
from services.orders import OrderStore, get_order_store
from utils.link_injection import LinkingRoute


router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    route_class=LinkingRoute,
)

# -----------------------------------------------------------------------------
# Links injected into responses, keyed by route name
# -----------------------------------------------------------------------------
links: dict[str, list[LinkSpec]] = {
    "list_orders": [
        LinkSpec.of("self", "/orders/{order_no}", "results", "[]"),
        LinkSpec.of("orderLineDetail", "/orders/{order_no}/lines/{line_no}", "results", "[]", "lines", "[]"),
    ],
    "get_order": [
        LinkSpec.of("self", "/orders/{order_no}"),
        LinkSpec.of("collection", "/orders"),
        LinkSpec.of("orderLineDetail", "/orders/{order_no}/lines/{line_no}", "lines", "[]"),
    ],
    "create_order": [
        LinkSpec.of("created", "/orders/{order_no}", status_code=201),
        LinkSpec.of("orderLineDetail", "/orders/{order_no}/lines/{line_no}", "lines", "[]", status_code=201),
    ],
    "get_order_line": [
        LinkSpec.of("self", "/orders/{order_no}/lines/{line_no}"),
        LinkSpec.of("order", "/orders/{order_no}"),
    ],
}


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------
@router.get("/", response_model=OrderPage, status_code=200, name="list_orders")
async def list_orders(
    store: OrderStore = Depends(get_order_store),
    customer: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """List orders, optionally filtered by customer."""
    orders, total = store.find(customer=customer, skip=skip, limit=limit)
    return OrderPage(results=orders, total=total)


@router.get("/{order_no}", response_model=OrderRead, status_code=200, name="get_order")
async def get_order(order_no: int, store: OrderStore = Depends(get_order_store)):
    order = store.get(order_no)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/{order_no}/lines/{line_no}", response_model=OrderLineRead, status_code=200, name="get_order_line")
async def get_order_line(order_no: int, line_no: int, store: OrderStore = Depends(get_order_store)):
    order = store.get(order_no)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    for line in order.lines:
        if line.line_no == line_no:
            return line
    raise HTTPException(status_code=404, detail="Order line not found")


# -----------------------------------------------------------------------------
# POST Endpoints
# -----------------------------------------------------------------------------
@router.post("/", response_model=OrderRead, status_code=201, name="create_order")
async def create_order(order_data: OrderCreate, store: OrderStore = Depends(get_order_store)):
    """Create a new order; links are only injected when creation succeeds (201)."""
    return store.create(order_data)
