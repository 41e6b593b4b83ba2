from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Dict, List
import logging

from . import config, units
from .crud import CheckoutRepository, DiscountsRepository, ProductsRepository
from .discounts import derive_rule
from .errors import (
    DiscountRuleNotFoundError,
    FractionalCountError,
    IncompatibleUnitsError,
    InvalidDiscountPriceError,
    InvalidDiscountQuantityError,
    InvalidPriceError,
    InvalidQuantityError,
    ProductNotFoundError,
)
from .models import Checkout, CheckoutItem, DiscountRule, Product
from .units import MeasurementUnit, UnitFamily

logger = logging.getLogger(__name__)


def _places(decimal_places: int) -> Decimal:
    return Decimal(1).scaleb(-decimal_places)


def discounted_price(quantity: Decimal, unit_price: Decimal, rule: DiscountRule) -> Decimal:
    """
    Price `quantity` units under a discount rule.

    A rule with quantity 1 is a flat per-unit price. Otherwise every full
    bundle of `rule.quantity` units costs `rule.price` and the remainder is
    charged at `unit_price`.
    """
    if rule.quantity <= 0:
        raise InvalidDiscountQuantityError(rule.id, rule.quantity)
    if rule.price < 0:
        raise InvalidDiscountPriceError(rule.id, rule.price)

    if rule.quantity == 1:
        return quantity * rule.price

    bundles = (quantity / rule.quantity).to_integral_value(rounding=ROUND_FLOOR)
    remaining = quantity - bundles * rule.quantity
    return bundles * rule.price + remaining * unit_price


class CheckoutService:
    """
    Adds and removes checkout items and prices the checkout.

    Holds no state of its own; everything lives in the injected repositories.
    """

    def __init__(
        self,
        checkout_repo: CheckoutRepository,
        products_repo: ProductsRepository,
        discounts_repo: DiscountsRepository,
        unit_conversion_enabled: bool = config.UNIT_CONVERSION_ENABLED,
        quantity_decimal_places: int = config.QUANTITY_DECIMAL_PLACES,
        total_decimal_places: int = config.TOTAL_DECIMAL_PLACES,
    ):
        self._checkout_repo = checkout_repo
        self._products_repo = products_repo
        self._discounts_repo = discounts_repo
        self.unit_conversion_enabled = unit_conversion_enabled
        self._quantity_step = _places(quantity_decimal_places)
        self._total_step = _places(total_decimal_places)

    def get_checkout_items(self) -> List[CheckoutItem]:
        return self._checkout_repo.list_checkout_items()

    def get_discount_rules(self) -> List[DiscountRule]:
        return self._discounts_repo.list_discount_rules()

    def get_discount_rule(self, rule_id: int) -> DiscountRule:
        rule = self._discounts_repo.get_discount_rule(rule_id)
        if rule is None:
            raise DiscountRuleNotFoundError(rule_id)
        return rule

    def add_item_to_checkout(
        self,
        sku: int,
        quantity: Decimal,
        buy_unit: MeasurementUnit | None = None,
        discount_rule_ref: int | None = None,
    ) -> CheckoutItem:
        """
        Validate an add request and store the resulting checkout item.

        `quantity` is expressed in `buy_unit` (the product's sale unit when
        omitted) and is converted to the sale unit before pricing. The
        discount rule, when given by id, is priced for this product.
        Discount rules are not validated here; `calculate_total` does it.
        """
        if not isinstance(quantity, Decimal):
            quantity = Decimal(str(quantity))
        product = self._products_repo.get_product(sku)
        if product is None:
            logger.warning(f"Add rejected: unknown SKU {sku}")
            raise ProductNotFoundError(sku)

        if product.unit_price <= 0:
            logger.warning(f"Add rejected: product {sku} has unit price {product.unit_price}")
            raise InvalidPriceError(sku, product.unit_price)

        if quantity <= 0:
            logger.warning(f"Add rejected: quantity {quantity} for product {sku}")
            raise InvalidQuantityError(quantity)

        if units.family_of(product.measurement_unit) == UnitFamily.COUNT and quantity != quantity.to_integral_value():
            logger.warning(f"Add rejected: fractional quantity {quantity} for product {sku} sold by {product.measurement_unit.value}")
            raise FractionalCountError(sku, quantity)

        buy_unit = product.measurement_unit if buy_unit is None else units.parse_unit(buy_unit)
        stored_quantity = self._to_sale_unit(product, quantity, buy_unit)

        discount_rule = None
        if discount_rule_ref is not None:
            discount_rule = derive_rule(self.get_discount_rule(discount_rule_ref), product.unit_price)

        item = self._checkout_repo.add_checkout_item(
            product, stored_quantity, buy_unit, discount_rule, requested_quantity=quantity
        )
        logger.info(
            f"Added item {item.id}: {stored_quantity} {product.measurement_unit.value} of '{product.name}'"
            f" (discount rule: {discount_rule.id if discount_rule else None})"
        )
        return item

    def _to_sale_unit(self, product: Product, quantity: Decimal, buy_unit: MeasurementUnit) -> Decimal:
        if buy_unit == product.measurement_unit:
            return quantity
        # The family check holds even when conversion is switched off
        if not units.same_family(buy_unit, product.measurement_unit):
            logger.warning(
                f"Add rejected: product {product.sku} is sold by {product.measurement_unit.value}, cannot buy by {buy_unit.value}"
            )
            raise IncompatibleUnitsError(buy_unit, product.measurement_unit)
        if not self.unit_conversion_enabled:
            return quantity
        converted = units.convert(quantity, buy_unit, product.measurement_unit)
        return converted.quantize(self._quantity_step, rounding=ROUND_HALF_UP)

    def delete_item_from_checkout(self, item_id: int) -> bool:
        item = self._checkout_repo.get_checkout_item(item_id)
        if item is None:
            logger.warning(f"Attempted to delete non-existent checkout item {item_id}")
            return False
        deleted = self._checkout_repo.delete_checkout_item(item)
        logger.info(f"Deleted checkout item {item_id}: {deleted}")
        return deleted

    def item_total(self, item: CheckoutItem) -> Decimal:
        """Contribution of one item to the total, before rounding."""
        if item.discount_rule is None:
            return item.line_price
        return discounted_price(item.quantity, item.product.unit_price, item.discount_rule)

    def calculate_total(self) -> Decimal:
        """Sum every item's contribution and round to cents (half up)."""
        total = Decimal(0)
        for item in self._checkout_repo.list_checkout_items():
            contribution = self.item_total(item)
            logger.debug(f"Item {item.id} contributes {contribution}")
            total += contribution
        total = total.quantize(self._total_step, rounding=ROUND_HALF_UP)
        logger.info(f"Checkout total calculated: {total}")
        return total

    def get_checkout(self) -> Checkout:
        items = self.get_checkout_items()
        return Checkout(items=items, total_price=self.calculate_total())


class ProductsService:
    def __init__(self, products_repo: ProductsRepository):
        self._products_repo = products_repo

    def get_all_products(self) -> List[Product]:
        return self._products_repo.list_products()

    def get_product(self, sku: int) -> Product:
        product = self._products_repo.get_product(sku)
        if product is None:
            raise ProductNotFoundError(sku)
        return product

    def get_measurement_units(self) -> Dict[str, List[str]]:
        return {family.value: [unit.value for unit in units.units_in(family)] for family in UnitFamily}
