from struct import pack, unpack
from typing import Union

from loguru import logger

from .constants import (
    DIMENSION_UNITS,
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
from .strings import StringPool

Value = Union[str, int, bool, None]


def _fmt_signed(x: int) -> int:
    return (0x7FFFFFFF & x) - 0x80000000 if x > 0x7FFFFFFF else x


def _fmt_unknown(_type: int, _data: int) -> str:
    return "%08X/0x%08X" % (_type, _data)


def decode_value(_type: int, _data: int, strings: StringPool) -> Value:
    """
    Decode a typed attribute value.

    The result keeps its Python type (bool, int or str) so that it can
    be rendered later by [format_value][axml2xml.values.format_value].
    Unknown types never raise, they produce a `TYPE/0xDATA` placeholder.

    :param _type: the full 32-bit type word of the attribute
    :param _data: the 32-bit payload
    :param strings: the string pool, used for string typed values
    :returns: the decoded value
    """
    logger.debug(f"_type: 0x{_type:08X}, _data: 0x{_data:08X}")

    if _type == TYPE_STRING:
        return strings.get(_data)

    elif _type == TYPE_DIMEN:
        unit = _data & 0xFF
        if unit >= len(DIMENSION_UNITS):
            logger.warning(
                "Dimension unit index {} is out of range, keeping the raw value".format(unit)
            )
            return _fmt_unknown(_type, _data)
        return "{}{}".format(_fmt_signed(_data) >> 8, DIMENSION_UNITS[unit])

    elif _type == TYPE_FRACTION:
        return "%.2f" % (_data / 0x7FFFFFFF)

    elif _type == TYPE_FLOAT:
        # The payload is converted to a single precision float and the bits
        # of that float are read back as an unsigned int.
        return unpack("<L", pack("<f", float(_data)))[0]

    elif _type in (TYPE_INT, TYPE_FLAGS):
        return _data

    elif _type == TYPE_BOOL:
        return _data != 0

    elif _type in (TYPE_COLOR, TYPE_COLOR2):
        return "#%08X" % _data

    elif _type == TYPE_ID_REF:
        return "@id/0x%08X" % _data

    elif _type == TYPE_ATTR_REF:
        return "?id/0x%08X" % _data

    return _fmt_unknown(_type, _data)


def format_value(value: Value) -> str:
    """
    Render a decoded value as attribute text.

    :returns: `true`/`false` for booleans, decimal for ints, an empty string for absent values
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
