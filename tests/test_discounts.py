from decimal import Decimal

from checkout_service import discounts
from checkout_service.discounts import DEFAULT_DISCOUNT_RULES, derive_rule, register_price_formula
from checkout_service.models import DiscountRule


def _rule(rule_id):
    return next(rule for rule in DEFAULT_DISCOUNT_RULES if rule.id == rule_id)


def test_catalog_formulas():
    unit_price = Decimal("0.4")
    assert derive_rule(_rule(1), unit_price).price == Decimal(1)
    assert derive_rule(_rule(2), unit_price).price == Decimal("0.8")
    assert derive_rule(_rule(3), unit_price).price == Decimal("0.08")
    assert derive_rule(_rule(4), unit_price).price == Decimal("0.2")


def test_derive_rule_leaves_catalog_untouched():
    derived = derive_rule(_rule(2), Decimal(5))
    assert derived.price == Decimal(10)
    assert derived.quantity == Decimal(3)
    assert _rule(2).price == Decimal(0)


def test_registered_formula_prices_new_rule(monkeypatch):
    monkeypatch.setattr(discounts, "PRICE_FORMULAS", dict(discounts.PRICE_FORMULAS))
    rule = DiscountRule(id=5, description="Four for the price of three", quantity=Decimal(4))
    register_price_formula(5, lambda unit_price: unit_price * 3)
    assert derive_rule(rule, Decimal("1.5")).price == Decimal("4.5")


def test_unregistered_rule_keeps_its_price():
    rule = DiscountRule(id=77, description="Fixed bundle", quantity=Decimal(2), price=Decimal("3.5"))
    derived = derive_rule(rule, Decimal(100))
    assert derived == rule
    assert derived is not rule
