from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from checkout_service.crud import (
    InMemoryCheckoutRepository,
    InMemoryDiscountsRepository,
    InMemoryProductsRepository,
)
from checkout_service.logic import CheckoutService, ProductsService
from checkout_service.main import create_app
from checkout_service.models import DiscountRule, Product
from checkout_service.units import MeasurementUnit


@pytest.fixture
def products_repo():
    """Kata catalog plus a few products for edge cases"""
    return InMemoryProductsRepository([
        Product(sku=1, name="Bread", unit_price=Decimal("0.4"), measurement_unit=MeasurementUnit.PIECE),
        Product(sku=3, name="Apples", unit_price=Decimal("1.99"), measurement_unit=MeasurementUnit.POUND),
        Product(sku=4, name="Milk", unit_price=Decimal("1.25"), measurement_unit=MeasurementUnit.LITRE),
        Product(sku=10, name="Free Sample", unit_price=Decimal("0"), measurement_unit=MeasurementUnit.PIECE),
        Product(sku=11, name="Rope", unit_price=Decimal("2.5"), measurement_unit=MeasurementUnit.METRE),
        Product(sku=12, name="Flour", unit_price=Decimal("2"), measurement_unit=MeasurementUnit.KILOGRAM),
    ])


@pytest.fixture
def discounts_repo():
    """Default catalog plus malformed rules that only fail when totalling"""
    return InMemoryDiscountsRepository([
        DiscountRule(id=1, description="Buy three for a dollar", quantity=Decimal(3)),
        DiscountRule(id=2, description="Buy two, get one free", quantity=Decimal(3)),
        DiscountRule(id=3, description="80% off", quantity=Decimal(1)),
        DiscountRule(id=4, description="50% off", quantity=Decimal(1)),
        DiscountRule(id=90, description="Zero quantity", quantity=Decimal(0), price=Decimal(1)),
        DiscountRule(id=91, description="Negative price", quantity=Decimal(2), price=Decimal("-1")),
        DiscountRule(id=92, description="Five for four dollars", quantity=Decimal(5), price=Decimal(4)),
    ])


@pytest.fixture
def checkout_repo():
    return InMemoryCheckoutRepository()


@pytest.fixture
def service(checkout_repo, products_repo, discounts_repo):
    return CheckoutService(checkout_repo, products_repo, discounts_repo, unit_conversion_enabled=True)


@pytest.fixture
def products_service(products_repo):
    return ProductsService(products_repo)


@pytest.fixture
def client(products_repo, discounts_repo, checkout_repo):
    app = create_app(products_repo, discounts_repo, checkout_repo, unit_conversion_enabled=True)
    with TestClient(app) as test_client:
        yield test_client
