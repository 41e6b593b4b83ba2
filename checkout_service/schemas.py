from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Dict, List

from .models import CheckoutItem, DiscountRule, Product
from .units import MeasurementUnit

# Request body for adding an item. Quantity and price checks happen in the
# pricing engine so they surface with their own error codes.
class AddItemRequest(BaseModel):
    sku: int
    quantity: Decimal
    buy_unit: MeasurementUnit | None = None # Defaults to the product's sale unit
    discount_rule_id: int | None = None

# Response bodies
class CheckoutResponse(BaseModel):
    items: List[CheckoutItem]
    total_price: Decimal

class ProductListResponse(BaseModel):
    products: List[Product]

class DiscountRuleListResponse(BaseModel):
    discount_rules: List[DiscountRule]

class MeasurementUnitsResponse(BaseModel):
    units: Dict[str, List[str]] # Unit family -> unit names

class DeleteItemResponse(BaseModel):
    id: int
    deleted: bool

class ErrorResponse(BaseModel):
    error_code: str
    detail: str = Field(..., description="Human readable reason")
