"""
Parcel validation rules.

Applied on creation and again on every update, against the merged record.
"""

import math
from typing import Mapping

from sendit.app.core.exceptions import InvalidInputError

MAX_WEIGHT_KG = 100.0
MAX_DIMENSION_CM = 150.0
MAX_DESCRIPTION_LENGTH = 500


def is_positive_number(number) -> bool:
    """True only for a finite number above zero."""
    return number is not None and math.isfinite(number) and number > 0


def volume(dimensions: Mapping[str, float]) -> float:
    return dimensions["length"] * dimensions["width"] * dimensions["height"]


def is_oversized(dimensions: Mapping[str, float], max_dimension_cm: float = MAX_DIMENSION_CM) -> bool:
    """
    A parcel is oversized when its longest side exceeds the limit, or when it
    fills the entire limit cube (every side at the limit).
    """
    longest = max(dimensions["length"], dimensions["width"], dimensions["height"])
    if longest > max_dimension_cm:
        return True
    return volume(dimensions) >= max_dimension_cm ** 3


def validate_parcel(
    description: str,
    weight: float,
    dimensions: Mapping[str, float],
    value: float,
    max_weight_kg: float = MAX_WEIGHT_KG,
    max_dimension_cm: float = MAX_DIMENSION_CM,
    max_description_length: int = MAX_DESCRIPTION_LENGTH,
) -> None:
    """Raise InvalidInputError naming the first offending field."""
    if not is_positive_number(weight):
        raise InvalidInputError("weight", "Weight must be greater than 0")
    if weight > max_weight_kg:
        raise InvalidInputError("weight", f"Weight cannot exceed {max_weight_kg:g}kg")

    for side in ("length", "width", "height"):
        if not is_positive_number(dimensions.get(side)):
            raise InvalidInputError(f"dimensions.{side}", "All dimensions must be greater than 0")

    if is_oversized(dimensions, max_dimension_cm):
        raise InvalidInputError("dimensions", "Parcel dimensions exceed maximum allowed size")

    if value is None or not math.isfinite(value) or value < 0:
        raise InvalidInputError("value", "Parcel value cannot be negative")

    if not description or not description.strip():
        raise InvalidInputError("description", "Description is required")
    if len(description) > max_description_length:
        raise InvalidInputError(
            "description", f"Description cannot exceed {max_description_length} characters"
        )
