"""
Discount rule catalog and price formulas.

A rule's bundle price depends on the product it is attached to, so the
catalog stores rules without a meaningful price and a formula keyed by rule
id derives it from the product's unit price. New rules need a catalog entry
and, when their price is not fixed, a formula registered here. The total
calculation never changes.
"""

from decimal import Decimal
from typing import Callable, Dict, List
import logging

from .models import DiscountRule

logger = logging.getLogger(__name__)

PriceFormula = Callable[[Decimal], Decimal]

# --- Seed catalog (replaceable through the discounts repository) ---
DEFAULT_DISCOUNT_RULES: List[DiscountRule] = [
    DiscountRule(id=1, description="Buy three for a dollar", quantity=Decimal(3)),
    DiscountRule(id=2, description="Buy two, get one free", quantity=Decimal(3)),
    DiscountRule(id=3, description="80% off", quantity=Decimal(1)),
    DiscountRule(id=4, description="50% off", quantity=Decimal(1)),
]

PRICE_FORMULAS: Dict[int, PriceFormula] = {
    1: lambda unit_price: Decimal(1),
    2: lambda unit_price: unit_price * 2,
    3: lambda unit_price: unit_price / 5,
    4: lambda unit_price: unit_price / 2,
}


def register_price_formula(rule_id: int, formula: PriceFormula) -> None:
    """Register (or replace) the price formula for a discount rule id."""
    if rule_id in PRICE_FORMULAS:
        logger.warning(f"Replacing price formula for discount rule {rule_id}")
    PRICE_FORMULAS[rule_id] = formula


def derive_rule(rule: DiscountRule, unit_price: Decimal) -> DiscountRule:
    """
    Return a copy of `rule` priced for a product with `unit_price`.

    Rules without a registered formula keep their catalog price. The
    catalog instance is never modified.
    """
    formula = PRICE_FORMULAS.get(rule.id)
    if formula is None:
        logger.debug(f"No price formula for discount rule {rule.id}, keeping price {rule.price}")
        return rule.model_copy()
    price = formula(unit_price)
    logger.debug(f"Discount rule {rule.id} priced at {price} for unit price {unit_price}")
    return rule.model_copy(update={"price": price})
