import math

import pytest

from physquant.core.exceptions import UnitConversionError, UnknownUnitError
from physquant.core.operations import convert, convert_to_base
from physquant.core.quantity import Quantity, RelativeError, make_quantity
from physquant.core.unit import DIMENSIONLESS, Unit, make_unit

# -------------------------------
# convert()
# -------------------------------

def test_convert_scales_value_and_absolute_error():
    q = convert(make_quantity(1.5, 0.25, "kilometre"), "metre")
    assert isinstance(q, Quantity)
    assert q.value == 1500.0
    assert q.absolute_error == 250.0
    assert q.unit == Unit("metre")

def test_convert_keeps_relative_error():
    q = convert(make_quantity(2, 0.05, "hour", relative=True), "second")
    assert q.value == 7200.0
    assert isinstance(q.error, RelativeError)
    assert q.relative_error == 0.05

def test_convert_composite_units():
    q = convert(make_quantity(36, 0, make_unit("kilometre", ("hour", -1))), make_unit("m", ("s", -1)))
    assert math.isclose(q.value, 10.0)
    assert q.unit == make_unit("m", ("s", -1))

def test_convert_between_derived_units():
    q = convert(make_quantity(1, 0, "kilowatt"), make_unit("joule", ("second", -1)))
    assert q.value == 1000.0
    q = convert(make_quantity(1, 0, "atmosphere"), "kPa")
    assert math.isclose(q.value, 101.325)

def test_convert_composes():
    q = make_quantity(3, 0.1, "mile")
    direct = convert(q, "metre")
    via = convert(convert(q, "foot"), "metre")
    assert math.isclose(direct.value, via.value)
    assert math.isclose(direct.absolute_error, via.absolute_error)

def test_convert_to_own_unit_is_identity():
    q = make_quantity(4, 0.2, "metre")
    assert convert(q, "metre") == q

def test_convert_dimensionless_units():
    q = convert(make_quantity(180, 0, "degree"), "radian")
    assert math.isclose(q.value, math.pi)
    assert convert(make_quantity(1, 0, "radian"), DIMENSIONLESS).value == 1.0

def test_convert_plain_number():
    assert convert(2, DIMENSIONLESS) == 2.0
    assert math.isclose(convert(1, "radian"), 1.0)

def test_convert_mismatched_dimensions_raises():
    with pytest.raises(UnitConversionError):
        convert(make_quantity(1, 0, "metre"), "second")
    with pytest.raises(UnitConversionError):
        convert(3, "metre")

def test_convert_unknown_unit_raises():
    with pytest.raises(UnknownUnitError):
        convert(make_quantity(1, 0, "furlong"), "metre")

def test_quantity_to_delegates_to_convert():
    q = make_quantity(250, 5, "centimetre")
    assert q.to("metre") == convert(q, "metre")

def test_convert_on_private_catalog(fresh_catalog):
    fresh_catalog.register_unit("furlong", (201.168, "metre"))
    q = convert(make_quantity(1, 0, "furlong"), "metre", catalog=fresh_catalog)
    assert math.isclose(q.value, 201.168)

# -------------------------------
# convert_to_base()
# -------------------------------

def test_convert_to_base_expands_fully():
    q = convert_to_base(make_quantity(2, 0.1, "kilonewton"))
    assert q.value == 2000.0
    assert math.isclose(q.absolute_error, 100.0)
    assert q.unit == make_unit("kilogram", "metre", ("second", -2))

def test_convert_to_base_of_base_units_is_identity():
    q = make_quantity(1, 0.1, make_unit("metre", ("second", -1)))
    assert convert_to_base(q) == q

def test_convert_to_base_of_number():
    q = convert_to_base(5)
    assert q.value == 5.0 and q.unit == DIMENSIONLESS

def test_convert_to_base_of_gram():
    q = convert_to_base(make_quantity(500, 0, "gram"))
    assert q.value == 0.5
    assert q.unit == Unit("kilogram")

def test_public_conversions_are_documented():
    assert convert.__doc__ and convert_to_base.__doc__
