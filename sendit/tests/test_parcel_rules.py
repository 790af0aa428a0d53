"""
Tests for parcel validation.
"""

import pytest

from sendit.app.core.exceptions import InvalidInputError
from sendit.app.domain.parcels import is_oversized, validate_parcel, volume


def dims(length, width, height):
    return {"length": length, "width": width, "height": height}


def test_valid_parcel_passes():
    validate_parcel("Books", 2.0, dims(30, 20, 10), 45.0)


def test_full_limit_cube_is_oversized():
    with pytest.raises(InvalidInputError) as exc_info:
        validate_parcel("Crate", 10.0, dims(150, 150, 150), 0)
    assert exc_info.value.field == "dimensions"


def test_just_under_limit_cube_is_accepted():
    validate_parcel("Crate", 10.0, dims(150, 150, 149), 0)


def test_side_over_limit_is_oversized():
    assert is_oversized(dims(151, 10, 10))
    assert not is_oversized(dims(150, 10, 10))


def test_volume():
    assert volume(dims(2, 3, 4)) == 24


@pytest.mark.parametrize("weight", [0, -1, 100.01])
def test_weight_out_of_range(weight):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_parcel("Books", weight, dims(10, 10, 10), 0)
    assert exc_info.value.field == "weight"


def test_weight_at_limit_is_accepted():
    validate_parcel("Books", 100, dims(10, 10, 10), 0)


def test_non_positive_dimension_names_the_side():
    with pytest.raises(InvalidInputError) as exc_info:
        validate_parcel("Books", 1, dims(10, 0, 10), 0)
    assert exc_info.value.field == "dimensions.width"


def test_negative_value():
    with pytest.raises(InvalidInputError) as exc_info:
        validate_parcel("Books", 1, dims(10, 10, 10), -0.01)
    assert exc_info.value.field == "value"


@pytest.mark.parametrize("description", ["", "   ", "x" * 501])
def test_bad_description(description):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_parcel(description, 1, dims(10, 10, 10), 0)
    assert exc_info.value.field == "description"


def test_limits_are_configurable():
    with pytest.raises(InvalidInputError):
        validate_parcel("Books", 6, dims(10, 10, 10), 0, max_weight_kg=5)
    validate_parcel("Long pole", 1, dims(190, 5, 5), 0, max_dimension_cm=200)


@pytest.mark.parametrize("weight", [float("nan"), float("inf")])
def test_non_finite_weight_is_rejected(weight):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_parcel("Books", weight, dims(10, 10, 10), 0)
    assert exc_info.value.field == "weight"


@pytest.mark.parametrize("side", ["length", "width", "height"])
def test_nan_dimension_names_the_side(side):
    dimensions = dims(10, 10, 10)
    dimensions[side] = float("nan")
    with pytest.raises(InvalidInputError) as exc_info:
        validate_parcel("Books", 1, dimensions, 0)
    assert exc_info.value.field == f"dimensions.{side}"


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_value_is_rejected(value):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_parcel("Books", 1, dims(10, 10, 10), value)
    assert exc_info.value.field == "value"
