"""Attribute extraction from fixed-width DBF records."""

from __future__ import annotations

import re
from typing import Iterator

from shpdat.common.constants import (
    POINT_DESCRIPTION_FIELD,
    POINT_DESCRIPTION_PREFIX,
    POINT_NAME_FIELD,
    POLYGON_NAME_FIELDS,
    POLYGON_TYPE_FIELD,
)
from shpdat.common.errors import FormatError
from shpdat.common.models import DbfField

_LEADING_DIGITS = re.compile(rb"([+-]?)(\d+)")


def record_slice(dbf_data: bytes, record_length: int, index: int) -> bytes:
    start = index * record_length
    end = start + record_length
    if end > len(dbf_data):
        raise FormatError(f"DBF record {index} lies beyond the attribute data")
    return dbf_data[start:end]


def iter_field_values(record: bytes, fields: list[DbfField]) -> Iterator[tuple[bytes, bytes]]:
    """Yield ``(field name, space-trimmed value)`` in descriptor order."""
    for dbf_field in fields:
        end = dbf_field.offset + dbf_field.length
        if end > len(record):
            raise FormatError(f"DBF field {dbf_field.name!r} ends past the record length {len(record)}")
        yield dbf_field.name, record[dbf_field.offset : end].strip(b" ")


def parse_decimal(value: bytes) -> int:
    match = _LEADING_DIGITS.match(value)
    if match is None:
        return 0
    sign, digits = match.groups()
    if sign == b"-":
        raise FormatError(f"Polygon type must not be negative, got {value!r}")
    return int(digits)


def decode_point_name(record: bytes, fields: list[DbfField]) -> bytes:
    # Later fields overwrite earlier ones: a description that is not a
    # land-unit name blanks the point even after its text was read.
    name = b""
    for field_name, value in iter_field_values(record, fields):
        if field_name == POINT_NAME_FIELD:
            name = value
        elif field_name == POINT_DESCRIPTION_FIELD and not value.startswith(POINT_DESCRIPTION_PREFIX):
            name = b""
    return name


def decode_polygon_attributes(record: bytes, fields: list[DbfField]) -> tuple[int, tuple[bytes, bytes, bytes]]:
    type_code = 0
    names = [b"", b"", b""]
    for field_name, value in iter_field_values(record, fields):
        if field_name == POLYGON_TYPE_FIELD:
            type_code = parse_decimal(value)
        elif field_name in POLYGON_NAME_FIELDS:
            names[POLYGON_NAME_FIELDS.index(field_name)] = value
    return type_code, (names[0], names[1], names[2])
