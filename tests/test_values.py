import pytest

from axml2xml.constants import (
    TYPE_ATTR_REF,
    TYPE_BOOL,
    TYPE_COLOR,
    TYPE_COLOR2,
    TYPE_DIMEN,
    TYPE_FLAGS,
    TYPE_FLOAT,
    TYPE_FRACTION,
    TYPE_ID_REF,
    TYPE_INT,
    TYPE_STRING,
)
from axml2xml.strings import StringPool
from axml2xml.values import decode_value, format_value

POOL = StringPool(["zero", "one"])


class TestDecodeValue:

    @pytest.mark.parametrize("data, expected", [
        (0x00000101, "1dp"),
        (0x00000800, "8px"),
        (0x00001002, "16sp"),
        (0x00000103, "1pt"),
        (0x00000104, "1in"),
        (0x00000105, "1mm"),
        (0xFFFFFF01, "-1dp"),
    ])
    def test_dimension(self, data, expected):
        assert decode_value(TYPE_DIMEN, data, POOL) == expected

    def test_dimension_unit_out_of_range(self, log_messages):
        assert decode_value(TYPE_DIMEN, 0x00000106, POOL) == "05000008/0x00000106"
        assert any(r["level"].name == "WARNING" for r in log_messages)

    def test_bool(self):
        assert decode_value(TYPE_BOOL, 0, POOL) is False
        assert decode_value(TYPE_BOOL, 1, POOL) is True
        assert decode_value(TYPE_BOOL, 0xFFFFFFFF, POOL) is True

    @pytest.mark.parametrize("_type", [TYPE_COLOR, TYPE_COLOR2])
    def test_color(self, _type):
        assert decode_value(_type, 0xFF00FF00, POOL) == "#FF00FF00"
        assert decode_value(_type, 0x0000000A, POOL) == "#0000000A"

    def test_string(self):
        assert decode_value(TYPE_STRING, 1, POOL) == "one"
        assert decode_value(TYPE_STRING, 5, POOL) is None

    @pytest.mark.parametrize("_type", [TYPE_INT, TYPE_FLAGS])
    def test_int_and_flags(self, _type):
        assert decode_value(_type, 21, POOL) == 21
        assert decode_value(_type, 0xFFFFFFFF, POOL) == 0xFFFFFFFF

    def test_fraction(self):
        assert decode_value(TYPE_FRACTION, 0x7FFFFFFF, POOL) == "1.00"
        assert decode_value(TYPE_FRACTION, 0, POOL) == "0.00"
        assert decode_value(TYPE_FRACTION, 0x3FFFFFFF, POOL) == "0.50"

    def test_float_bits_of_converted_payload(self):
        # the payload is converted to float, not reinterpreted
        assert decode_value(TYPE_FLOAT, 1, POOL) == 0x3F800000
        assert decode_value(TYPE_FLOAT, 0, POOL) == 0
        assert decode_value(TYPE_FLOAT, 0x3F800000, POOL) == 0x4E7E0000

    def test_references(self):
        assert decode_value(TYPE_ID_REF, 0x7F010001, POOL) == "@id/0x7F010001"
        assert decode_value(TYPE_ATTR_REF, 0x01010000, POOL) == "?id/0x01010000"

    def test_unknown_type(self):
        assert decode_value(0x07000008, 5, POOL) == "07000008/0x00000005"


class TestFormatValue:

    @pytest.mark.parametrize("value, expected", [
        (True, "true"),
        (False, "false"),
        (None, ""),
        (21, "21"),
        ("1dp", "1dp"),
    ])
    def test_format(self, value, expected):
        assert format_value(value) == expected
