from decimal import Decimal
from itertools import count
from typing import Iterable, List, Protocol
import logging

from .discounts import DEFAULT_DISCOUNT_RULES
from .models import CheckoutItem, DiscountRule, Product
from .units import MeasurementUnit

logger = logging.getLogger(__name__)

# Predefined products used as an example; any key-value store or database
# implementing the protocols below can replace them
DEFAULT_PRODUCTS: List[Product] = [
    Product(sku=1, name="Bread", unit_price=Decimal("0.4"), measurement_unit=MeasurementUnit.PIECE),
    Product(sku=2, name="Eggs", unit_price=Decimal("1"), measurement_unit=MeasurementUnit.PIECE),
    Product(sku=3, name="Apples", unit_price=Decimal("1.99"), measurement_unit=MeasurementUnit.POUND),
    Product(sku=4, name="Milk", unit_price=Decimal("1.25"), measurement_unit=MeasurementUnit.LITRE),
    Product(sku=5, name="Bananas", unit_price=Decimal("3.8"), measurement_unit=MeasurementUnit.POUND),
]


# --- Repository interfaces ---

class ProductsRepository(Protocol):
    def get_product(self, sku: int) -> Product | None: ...

    def list_products(self) -> List[Product]: ...


class DiscountsRepository(Protocol):
    def get_discount_rule(self, rule_id: int) -> DiscountRule | None: ...

    def list_discount_rules(self) -> List[DiscountRule]: ...


class CheckoutRepository(Protocol):
    def add_checkout_item(
        self,
        product: Product,
        quantity: Decimal,
        buy_unit: MeasurementUnit,
        discount_rule: DiscountRule | None,
        requested_quantity: Decimal | None = None,
    ) -> CheckoutItem: ...

    def get_checkout_item(self, item_id: int) -> CheckoutItem | None: ...

    def delete_checkout_item(self, item: CheckoutItem) -> bool: ...

    def list_checkout_items(self) -> List[CheckoutItem]: ...


# --- In-memory implementations ---

class InMemoryProductsRepository:
    def __init__(self, products: Iterable[Product] | None = None):
        source = DEFAULT_PRODUCTS if products is None else products
        self._products = {product.sku: product for product in source}

    def get_product(self, sku: int) -> Product | None:
        return self._products.get(sku)

    def list_products(self) -> List[Product]:
        return list(self._products.values())


class InMemoryDiscountsRepository:
    def __init__(self, rules: Iterable[DiscountRule] | None = None):
        source = DEFAULT_DISCOUNT_RULES if rules is None else rules
        self._rules = {rule.id: rule for rule in source}

    def get_discount_rule(self, rule_id: int) -> DiscountRule | None:
        return self._rules.get(rule_id)

    def list_discount_rules(self) -> List[DiscountRule]:
        return list(self._rules.values())


class InMemoryCheckoutRepository:
    """Checkout items for the lifetime of the instance. Ids start at 0."""

    def __init__(self):
        self._items: List[CheckoutItem] = []
        self._ids = count()

    def add_checkout_item(
        self,
        product: Product,
        quantity: Decimal,
        buy_unit: MeasurementUnit,
        discount_rule: DiscountRule | None,
        requested_quantity: Decimal | None = None,
    ) -> CheckoutItem:
        item = CheckoutItem(
            id=next(self._ids),
            product=product,
            quantity=quantity,
            requested_quantity=quantity if requested_quantity is None else requested_quantity,
            buy_unit=buy_unit,
            discount_rule=discount_rule,
            line_price=product.unit_price * quantity,
        )
        self._items.append(item)
        logger.debug(f"Stored checkout item {item.id} for product {product.sku}")
        return item

    def get_checkout_item(self, item_id: int) -> CheckoutItem | None:
        return next((item for item in self._items if item.id == item_id), None)

    def delete_checkout_item(self, item: CheckoutItem) -> bool:
        for index, stored in enumerate(self._items):
            if stored.id == item.id:
                del self._items[index]
                logger.debug(f"Removed checkout item {item.id}")
                return True
        return False

    def list_checkout_items(self) -> List[CheckoutItem]:
        return list(self._items)
