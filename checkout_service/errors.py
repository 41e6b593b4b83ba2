"""
Errors raised by the unit converter and the pricing engine.

Every error is terminal for the call that raised it. Nothing is retried and
nothing is written to a repository before the error is raised.
"""


class CheckoutError(Exception):
    """Base checkout error"""
    error_code = "CHECKOUT_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ProductNotFoundError(CheckoutError):
    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, sku: int):
        self.sku = sku
        super().__init__(f"Cannot find product with SKU: {sku}")


class DiscountRuleNotFoundError(CheckoutError):
    error_code = "DISCOUNT_RULE_NOT_FOUND"

    def __init__(self, rule_id: int):
        self.rule_id = rule_id
        super().__init__(f"Cannot find discount rule with id: {rule_id}")


class InvalidPriceError(CheckoutError):
    error_code = "INVALID_PRICE"

    def __init__(self, sku: int, unit_price):
        self.sku = sku
        self.unit_price = unit_price
        super().__init__(f"Cannot add product {sku} with invalid price {unit_price}")


class InvalidQuantityError(CheckoutError):
    error_code = "INVALID_QUANTITY"

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Cannot add a product with negative or zero quantity. Received: {quantity}")


class FractionalCountError(CheckoutError):
    """Products sold by the piece only accept whole quantities"""
    error_code = "FRACTIONAL_COUNT"

    def __init__(self, sku: int, quantity):
        self.sku = sku
        self.quantity = quantity
        super().__init__(
            f"Cannot add product {sku} sold by number with a fractional quantity {quantity}"
        )


class UnknownUnitError(CheckoutError):
    error_code = "UNKNOWN_UNIT"

    def __init__(self, unit, allowed_units):
        self.unit = unit
        super().__init__(f"Unit '{unit}' is not recognized. Allowed units: {', '.join(allowed_units)}")


class IncompatibleUnitsError(CheckoutError):
    error_code = "INCOMPATIBLE_UNITS"

    def __init__(self, from_unit, to_unit):
        self.from_unit = from_unit
        self.to_unit = to_unit
        super().__init__(f"Cannot convert quantity from '{_name(from_unit)}' to '{_name(to_unit)}'")


class InvalidDiscountQuantityError(CheckoutError):
    error_code = "INVALID_DISCOUNT_QUANTITY"

    def __init__(self, rule_id: int, quantity):
        self.rule_id = rule_id
        self.quantity = quantity
        super().__init__(
            f"Discount rule {rule_id} has negative or zero quantity {quantity}"
        )


class InvalidDiscountPriceError(CheckoutError):
    error_code = "INVALID_DISCOUNT_PRICE"

    def __init__(self, rule_id: int, price):
        self.rule_id = rule_id
        self.price = price
        super().__init__(f"Discount rule {rule_id} has negative price {price}")


def _name(unit) -> str:
    return getattr(unit, "value", unit)
