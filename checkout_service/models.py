from pydantic import BaseModel, ConfigDict, Field
from decimal import Decimal
from typing import List

from .units import MeasurementUnit


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    sku: int
    name: str
    unit_price: Decimal # Price per sale unit
    measurement_unit: MeasurementUnit # Sale unit


class DiscountRule(BaseModel):
    id: int
    description: str
    quantity: Decimal # Number of units the bundle price covers
    price: Decimal = Decimal(0) # Bundle price, derived from the product when attached


class CheckoutItem(BaseModel):
    id: int
    product: Product # Snapshot at add time
    quantity: Decimal # In the product's sale unit
    requested_quantity: Decimal # As entered, in buy_unit
    buy_unit: MeasurementUnit
    discount_rule: DiscountRule | None = None
    line_price: Decimal # unit_price * quantity, before any discount


class Checkout(BaseModel):
    items: List[CheckoutItem] = Field(default_factory=list)
    total_price: Decimal = Decimal(0)
