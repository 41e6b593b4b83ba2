from decimal import Decimal

from checkout_service.crud import (
    DEFAULT_PRODUCTS,
    InMemoryCheckoutRepository,
    InMemoryDiscountsRepository,
    InMemoryProductsRepository,
)
from checkout_service.units import MeasurementUnit


def test_default_catalog():
    products = InMemoryProductsRepository()
    assert [product.name for product in products.list_products()] == ["Bread", "Eggs", "Apples", "Milk", "Bananas"]
    assert products.get_product(3).measurement_unit == MeasurementUnit.POUND
    assert products.get_product(99) is None

    rules = InMemoryDiscountsRepository()
    assert [rule.id for rule in rules.list_discount_rules()] == [1, 2, 3, 4]
    assert rules.get_discount_rule(5) is None


def test_checkout_ids_are_sequential_from_zero():
    repo = InMemoryCheckoutRepository()
    bread = DEFAULT_PRODUCTS[0]
    first = repo.add_checkout_item(bread, Decimal(2), MeasurementUnit.PIECE, None)
    second = repo.add_checkout_item(bread, Decimal(1), MeasurementUnit.PIECE, None)
    assert (first.id, second.id) == (0, 1)
    assert first.line_price == Decimal("0.8")
    assert first.requested_quantity == Decimal(2)


def test_ids_are_not_reused_after_delete():
    repo = InMemoryCheckoutRepository()
    bread = DEFAULT_PRODUCTS[0]
    first = repo.add_checkout_item(bread, Decimal(1), MeasurementUnit.PIECE, None)
    assert repo.delete_checkout_item(first)
    assert repo.get_checkout_item(first.id) is None
    assert repo.add_checkout_item(bread, Decimal(1), MeasurementUnit.PIECE, None).id == 1


def test_delete_twice():
    repo = InMemoryCheckoutRepository()
    item = repo.add_checkout_item(DEFAULT_PRODUCTS[3], Decimal("1.5"), MeasurementUnit.LITRE, None)
    assert repo.delete_checkout_item(item) is True
    assert repo.delete_checkout_item(item) is False


def test_repositories_do_not_share_state():
    first, second = InMemoryCheckoutRepository(), InMemoryCheckoutRepository()
    first.add_checkout_item(DEFAULT_PRODUCTS[0], Decimal(1), MeasurementUnit.PIECE, None)
    assert second.list_checkout_items() == []


def test_listing_returns_a_copy():
    repo = InMemoryCheckoutRepository()
    repo.add_checkout_item(DEFAULT_PRODUCTS[0], Decimal(1), MeasurementUnit.PIECE, None)
    repo.list_checkout_items().clear()
    assert len(repo.list_checkout_items()) == 1
