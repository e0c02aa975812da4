from __future__ import annotations
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from models.hateoas import HATEOASLink

# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class OrderLineBase(BaseModel):
    sku: str = Field(
        ...,
        min_length=1,
        description="Stock keeping unit of the ordered item"
    )
    quantity: int = Field(
        1,
        ge=1,
        description="Number of units ordered"
    )

class OrderLineRead(OrderLineBase):
    order_no: int = Field(
        ...,
        description="Order this line belongs to"
    )
    line_no: int = Field(
        ...,
        ge=1,
        description="Position of the line within its order (1-based)"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )

    model_config = ConfigDict(from_attributes=True)

class OrderCreate(BaseModel):
    customer: str = Field(
        ...,
        min_length=1,
        description="Name of the ordering customer"
    )
    lines: List[OrderLineBase] = Field(
        default_factory=list,
        description="Items ordered"
    )

class OrderRead(BaseModel):
    order_no: int = Field(
        ...,
        description="Order number"
    )
    customer: str = Field(
        ...,
        description="Name of the ordering customer"
    )
    created_at: datetime = Field(
        ...,
        description="Timestamp when the order was placed"
    )
    lines: List[OrderLineRead] = Field(
        default_factory=list,
        description="Order lines"
    )
    links: Optional[List[HATEOASLink]] = Field(
        None,
        description="HATEOAS links."
    )

    model_config = ConfigDict(from_attributes=True)

class OrderPage(BaseModel):
    results: List[OrderRead] = Field(
        default_factory=list,
        description="Orders on this page"
    )
    total: int = Field(
        ...,
        ge=0,
        description="Number of orders matching the query"
    )
