"""
ClearLabel - package size parsing and comparison
Handles formats like "500g", "1.5L", "12 oz", "6-pack", "500 ml", "4 x 125g"
"""

import math
import re
from typing import Optional

from .config import Config
from .models import ParsedQuantity, QuantityComparison, QuantityUnit, ValueBadge

# Conversion factors to grams
WEIGHT_TO_GRAMS = {
    'g': 1, 'gram': 1, 'grams': 1, 'gr': 1,
    'kg': 1000, 'kilo': 1000, 'kilos': 1000, 'kilogram': 1000, 'kilograms': 1000,
    'mg': 0.001, 'milligram': 0.001, 'milligrams': 0.001,
    'oz': 28.3495, 'ounce': 28.3495, 'ounces': 28.3495,
    'lb': 453.592, 'lbs': 453.592, 'pound': 453.592, 'pounds': 453.592,
}

# Conversion factors to millilitres
VOLUME_TO_ML = {
    'ml': 1, 'milliliter': 1, 'milliliters': 1, 'millilitre': 1, 'millilitres': 1,
    'l': 1000, 'liter': 1000, 'liters': 1000, 'litre': 1000, 'litres': 1000,
    'cl': 10, 'centiliter': 10, 'centiliters': 10, 'centilitre': 10, 'centilitres': 10,
    'dl': 100, 'deciliter': 100, 'deciliters': 100, 'decilitre': 100, 'decilitres': 100,
    'fl oz': 29.5735, 'fl. oz': 29.5735, 'fl.oz': 29.5735, 'floz': 29.5735,
    'fluid oz': 29.5735, 'fluid ounce': 29.5735, 'fluid ounces': 29.5735,
    'gal': 3785.41, 'gallon': 3785.41, 'gallons': 3785.41,
    'pt': 473.176, 'pint': 473.176, 'pints': 473.176,
    'qt': 946.353, 'quart': 946.353, 'quarts': 946.353,
}

OUNCE_UNITS = {'oz', 'ounce', 'ounces'}
POUND_UNITS = {'lb', 'lbs', 'pound', 'pounds'}

COUNT_PATTERNS = [
    re.compile(r"(\d+)\s*-?\s*(?:pack|pk|count|ct|pcs?|pieces?|servings?|bars?|bags?|bottles?"
               r"|cans?|boxes?|units?|tablets?|capsules?|sachets?)\b", re.IGNORECASE),
    re.compile(r"(\d+)\s*x\s*\d+(?:[.,]\d+)?", re.IGNORECASE),
]

NUMBER_UNIT_PATTERN = re.compile(r"^\s*(\d+(?:[.,]\d+)?)\s*([a-z.\s]+?)\s*$", re.IGNORECASE)
NUMBER_ONLY_PATTERN = re.compile(r"^\s*(\d+(?:[.,]\d+)?)\s*$")


def _to_number(text: str) -> float:
    return float(text.replace(',', '.'))


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero"""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _format_amount(amount: float, large_suffix: str, small_suffix: str) -> str:
    if amount >= 1000:
        large = amount / 1000
        if large == int(large):
            return f"{int(large)}{large_suffix}"
        return f"{_round_half_up(large * 10) / 10:.1f}{large_suffix}"
    if amount == int(amount):
        return f"{int(amount)}{small_suffix}"
    return f"{_round_half_up(amount)}{small_suffix}"


def format_weight(grams: float) -> str:
    return _format_amount(grams, 'kg', 'g')


def format_volume(ml: float) -> str:
    return _format_amount(ml, 'L', 'ml')


def _standard_weight_unit(unit: str) -> QuantityUnit:
    if unit in OUNCE_UNITS:
        return QuantityUnit.OUNCE
    if unit in POUND_UNITS:
        return QuantityUnit.POUND
    return QuantityUnit.GRAM


def _from_unit(value: float, unit: str) -> Optional[ParsedQuantity]:
    if unit in WEIGHT_TO_GRAMS:
        grams = value * WEIGHT_TO_GRAMS[unit]
        return ParsedQuantity(
            value=value,
            unit=_standard_weight_unit(unit),
            normalized=grams,
            display=format_weight(grams),
            is_volume=False
        )

    if unit in VOLUME_TO_ML:
        ml = value * VOLUME_TO_ML[unit]
        return ParsedQuantity(
            value=value,
            unit=QuantityUnit.MILLILITRE,
            normalized=ml,
            display=format_volume(ml),
            is_volume=True
        )

    return None


def parse_quantity(quantity: Optional[str]) -> Optional[ParsedQuantity]:
    """
    Parse a free-text package size

    Args:
        quantity: text such as "500 g" or "6 pack"

    Returns:
        ParsedQuantity, or None when the text is not recognized
    """
    if not quantity or not isinstance(quantity, str):
        return None

    cleaned = quantity.strip().lower()

    for pattern in COUNT_PATTERNS:
        match = pattern.search(cleaned)
        if match:
            count = int(match.group(1))
            if count > 0:
                return ParsedQuantity(
                    value=count,
                    unit=QuantityUnit.COUNT,
                    normalized=count,
                    display=f"{count} ct",
                    is_volume=False
                )

    match = NUMBER_UNIT_PATTERN.match(cleaned)
    if match:
        value = _to_number(match.group(1))
        unit = re.sub(r'\s+', ' ', match.group(2).strip())
        if value <= 0:
            return None
        return _from_unit(value, unit)

    match = NUMBER_ONLY_PATTERN.match(cleaned)
    if match:
        value = _to_number(match.group(1))
        if value > 0:
            return ParsedQuantity(
                value=value,
                unit=QuantityUnit.GRAM,
                normalized=value,
                display=format_weight(value),
                is_volume=False
            )

    return None


def extract_quantity(quantity: Optional[str] = None,
                     product_quantity: Optional[float] = None,
                     product_quantity_unit: Optional[str] = None) -> Optional[ParsedQuantity]:
    """Quantity text first, then the catalog's structured quantity fields"""
    parsed = parse_quantity(quantity)
    if parsed:
        return parsed

    if product_quantity and product_quantity > 0:
        unit = (product_quantity_unit or 'g').strip().lower()
        return _from_unit(float(product_quantity), unit)

    return None


def _same_class(a: ParsedQuantity, b: ParsedQuantity) -> bool:
    a_count = a.unit == QuantityUnit.COUNT
    b_count = b.unit == QuantityUnit.COUNT
    if a_count or b_count:
        return a_count and b_count
    return a.is_volume == b.is_volume


def compare_quantities(original: Optional[ParsedQuantity],
                       alternative: Optional[ParsedQuantity],
                       tolerance: float = None) -> Optional[QuantityComparison]:
    """
    Percent difference of the alternative relative to the original

    Weight, volume and count only compare within their own class; any other
    pairing returns None.
    """
    if original is None or alternative is None:
        return None
    if not _same_class(original, alternative) or original.normalized <= 0:
        return None
    if tolerance is None:
        tolerance = Config.QUANTITY_TOLERANCE_PERCENT

    raw = (alternative.normalized - original.normalized) / original.normalized * 100
    diff = _round_half_up(raw)

    if abs(diff) < tolerance:
        description = "Same size"
    elif diff > 0:
        description = f"{diff}% more"
    else:
        description = f"{abs(diff)}% less"

    return QuantityComparison(diff=diff, description=description)


def get_value_badge(alternative_score: int,
                    original_score: int,
                    comparison: Optional[QuantityComparison],
                    is_top_score: bool) -> Optional[ValueBadge]:
    """At most one value badge, in priority order"""
    if is_top_score and alternative_score >= original_score + 10:
        return ValueBadge.BEST_QUALITY

    if comparison and comparison.diff >= 20 and alternative_score >= original_score - 5:
        return ValueBadge.BETTER_VALUE

    if comparison and comparison.diff >= 30 and alternative_score >= original_score - 15:
        return ValueBadge.BUDGET_PICK

    return None
