"""
Measurement units and quantity conversion.

Units are grouped into families. Only units of the same family convert into
each other, using the fixed decimal factors below. Count (piece) and length
(metre) have a single unit each, so the only conversion they allow is the
identity.

Factors are exact literals for each ordered pair. The reverse of a pair is
its own literal, never a computed inverse, so rounding stays predictable.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Tuple
import logging

from .errors import IncompatibleUnitsError, UnknownUnitError

logger = logging.getLogger(__name__)


class MeasurementUnit(str, Enum):
    PIECE = "piece"
    POUND = "pound"
    OUNCE = "ounce"
    LITRE = "litre"
    MILLILITRE = "millilitre"
    GALLON = "gallon"
    METRE = "metre"
    KILOGRAM = "kilogram"
    GRAM = "gram"


class UnitFamily(str, Enum):
    COUNT = "count"
    MASS = "mass"
    VOLUME = "volume"
    LENGTH = "length"


UNIT_FAMILIES: Dict[MeasurementUnit, UnitFamily] = {
    MeasurementUnit.PIECE: UnitFamily.COUNT,
    MeasurementUnit.GRAM: UnitFamily.MASS,
    MeasurementUnit.KILOGRAM: UnitFamily.MASS,
    MeasurementUnit.POUND: UnitFamily.MASS,
    MeasurementUnit.OUNCE: UnitFamily.MASS,
    MeasurementUnit.MILLILITRE: UnitFamily.VOLUME,
    MeasurementUnit.LITRE: UnitFamily.VOLUME,
    MeasurementUnit.GALLON: UnitFamily.VOLUME,
    MeasurementUnit.METRE: UnitFamily.LENGTH,
}

# ==================== CONVERSION FACTORS ====================

MASS_FACTORS: Dict[Tuple[MeasurementUnit, MeasurementUnit], Decimal] = {
    (MeasurementUnit.GRAM, MeasurementUnit.KILOGRAM): Decimal(".001"),
    (MeasurementUnit.GRAM, MeasurementUnit.POUND): Decimal(".00220462"),
    (MeasurementUnit.GRAM, MeasurementUnit.OUNCE): Decimal(".035274"),
    (MeasurementUnit.KILOGRAM, MeasurementUnit.GRAM): Decimal("1000"),
    (MeasurementUnit.KILOGRAM, MeasurementUnit.POUND): Decimal("2.20462"),
    (MeasurementUnit.KILOGRAM, MeasurementUnit.OUNCE): Decimal("35.274"),
    (MeasurementUnit.POUND, MeasurementUnit.GRAM): Decimal("453.592"),
    (MeasurementUnit.POUND, MeasurementUnit.KILOGRAM): Decimal(".453592"),
    (MeasurementUnit.POUND, MeasurementUnit.OUNCE): Decimal("16"),
    (MeasurementUnit.OUNCE, MeasurementUnit.GRAM): Decimal("28.3495"),
    (MeasurementUnit.OUNCE, MeasurementUnit.KILOGRAM): Decimal(".0283495"),
    (MeasurementUnit.OUNCE, MeasurementUnit.POUND): Decimal(".0625"),
}

VOLUME_FACTORS: Dict[Tuple[MeasurementUnit, MeasurementUnit], Decimal] = {
    (MeasurementUnit.LITRE, MeasurementUnit.MILLILITRE): Decimal("1000"),
    (MeasurementUnit.LITRE, MeasurementUnit.GALLON): Decimal(".264172"),
    (MeasurementUnit.MILLILITRE, MeasurementUnit.LITRE): Decimal(".001"),
    (MeasurementUnit.MILLILITRE, MeasurementUnit.GALLON): Decimal(".000264172"),
    (MeasurementUnit.GALLON, MeasurementUnit.LITRE): Decimal("3.78541"),
    (MeasurementUnit.GALLON, MeasurementUnit.MILLILITRE): Decimal("3785.41"),
}

CONVERSION_FACTORS: Dict[Tuple[MeasurementUnit, MeasurementUnit], Decimal] = {
    **MASS_FACTORS,
    **VOLUME_FACTORS,
}


def parse_unit(unit) -> MeasurementUnit:
    """Return `unit` as a MeasurementUnit, accepting unit names."""
    try:
        return MeasurementUnit(unit)
    except ValueError:
        raise UnknownUnitError(unit, [member.value for member in MeasurementUnit]) from None


def family_of(unit: MeasurementUnit) -> UnitFamily:
    return UNIT_FAMILIES[parse_unit(unit)]


def same_family(first: MeasurementUnit, second: MeasurementUnit) -> bool:
    return family_of(first) == family_of(second)


def units_in(family: UnitFamily) -> List[MeasurementUnit]:
    """Units of a family, in declaration order."""
    return [unit for unit, unit_family in UNIT_FAMILIES.items() if unit_family == family]


def conversion_factor(from_unit: MeasurementUnit, to_unit: MeasurementUnit) -> Decimal:
    """
    Return the multiplicative factor turning a quantity in `from_unit` into
    `to_unit`.

    Raises:
        UnknownUnitError: either unit name is not a MeasurementUnit.
        IncompatibleUnitsError: units are in different families, or the
            family has no conversion for this pair.
    """
    from_unit, to_unit = parse_unit(from_unit), parse_unit(to_unit)
    if from_unit == to_unit:
        return Decimal(1)
    if not same_family(from_unit, to_unit):
        raise IncompatibleUnitsError(from_unit, to_unit)
    factor = CONVERSION_FACTORS.get((from_unit, to_unit))
    if factor is None:
        raise IncompatibleUnitsError(from_unit, to_unit)
    return factor


def convert(quantity: Decimal, from_unit: MeasurementUnit, to_unit: MeasurementUnit) -> Decimal:
    """
    Convert `quantity` from `from_unit` into `to_unit`.

    The result is not rounded; callers quantize it to the precision they
    store.
    """
    from_unit, to_unit = parse_unit(from_unit), parse_unit(to_unit)
    if from_unit == to_unit:
        return quantity
    factor = conversion_factor(from_unit, to_unit)
    result = Decimal(quantity) * factor
    logger.debug(f"Converted {quantity} {from_unit.value} -> {result} {to_unit.value} (factor {factor})")
    return result
