"""Reader for the SHP/SHX/DBF shapefile triad.

Only point and polygon shapefiles are accepted. The three files are read
completely into memory, then records are extracted by offset:

* ``.shx`` gives the record count and each record's word offset,
* ``.shp`` holds the record contents (little-endian doubles),
* ``.dbf`` holds the fixed-width attribute records.

Coordinates are stored as ``XY(northing, easting)``; the shapefile keeps
easting first, so every coordinate pair is swapped on read.
"""

from __future__ import annotations

import math
from contextlib import ExitStack
from pathlib import Path

from shpdat.common.binary import read_exact, read_struct
from shpdat.common.constants import (
    DBF_FIELD_DESCRIPTOR_LENGTH,
    DBF_FIELD_TERMINATOR,
    DBF_HEADER_LENGTH,
    SHAPE_TYPE_NULL,
    SHAPE_TYPE_POINT,
    SHAPE_TYPE_POLYGON,
    SHP_HEADER_LENGTH,
    SHP_RECORD_HEADER_LENGTH,
    SHX_ENTRY_LENGTH,
    SUPPORTED_SHAPE_TYPES,
)
from shpdat.common.errors import FormatError, InputFileError
from shpdat.common.models import XY, DbfField, PointFeature, PolygonFeature, ShapeDataset
from shpdat.ingest.attributes import decode_point_name, decode_polygon_attributes, record_slice


def _open_input(stack: ExitStack, base: Path, suffix: str):
    path = base.with_name(base.name + suffix)
    try:
        return stack.enter_context(path.open("rb"))
    except OSError as exc:
        raise InputFileError(f"{base} {suffix[1:].upper()} not found or unreadable: {exc}") from exc


def _shx_header(header: bytes) -> tuple[int, int]:
    (file_length_words,) = read_struct(header, 24, ">i", "SHX file length")
    (shape_type,) = read_struct(header, 32, "<i", "SHX shape type")
    record_count = (file_length_words - SHP_HEADER_LENGTH // 2) // 4
    if record_count < 0:
        raise FormatError(f"SHX file length {file_length_words} words is shorter than its header")
    return record_count, shape_type


def _shp_content_length(header: bytes) -> int:
    (file_length_words,) = read_struct(header, 24, ">i", "SHP file length")
    length = file_length_words * 2 - SHP_HEADER_LENGTH
    if length < 0:
        raise FormatError(f"SHP file length {file_length_words} words is shorter than its header")
    return length


def _dbf_header(header: bytes) -> tuple[int, int, int]:
    record_count, header_length, record_length = read_struct(header, 4, "<IHH", "DBF header")
    fields_length = header_length - DBF_HEADER_LENGTH
    if fields_length < 0:
        raise FormatError(f"DBF header length {header_length} is shorter than {DBF_HEADER_LENGTH} bytes")
    return record_count, fields_length, record_length


def _record_offsets(index: bytes, record_count: int) -> list[int]:
    offsets = []
    for i in range(record_count):
        (word_offset,) = read_struct(index, i * SHX_ENTRY_LENGTH, ">i", f"SHX entry {i}")
        offsets.append(word_offset * 2 - SHP_HEADER_LENGTH + SHP_RECORD_HEADER_LENGTH)
    return offsets


def parse_field_descriptors(block: bytes, record_length: int) -> list[DbfField]:
    fields: list[DbfField] = []
    offset = 1  # deletion marker
    for start in range(0, len(block) - DBF_FIELD_DESCRIPTOR_LENGTH + 1, DBF_FIELD_DESCRIPTOR_LENGTH):
        descriptor = block[start : start + DBF_FIELD_DESCRIPTOR_LENGTH]
        if descriptor[0] == DBF_FIELD_TERMINATOR:
            break
        name = descriptor[:11].split(b"\x00", 1)[0]
        length = descriptor[16]
        fields.append(DbfField(name=name, offset=offset, length=length))
        offset += length
    if offset > record_length:
        raise FormatError(f"DBF fields span {offset} bytes but records are {record_length} bytes")
    return fields


def _check_finite(values, what: str) -> None:
    if not all(map(math.isfinite, values)):
        raise FormatError(f"{what}: coordinates must be finite numbers")


def _point_xy(shp_data: bytes, offset: int, record: int) -> XY:
    easting, northing = read_struct(shp_data, offset + 4, "<2d", f"point record {record}")
    _check_finite((easting, northing), f"point record {record}")
    return XY(northing=northing, easting=easting)


def _polygon_rings(shp_data: bytes, offset: int, record: int) -> list[list[XY]]:
    what = f"polygon record {record}"
    part_count, point_count = read_struct(shp_data, offset + 36, "<2i", what)
    if part_count < 0 or point_count < 0:
        raise FormatError(f"{what}: negative part or point count")
    starts = list(read_struct(shp_data, offset + 44, f"<{part_count}i", what)) if part_count else []
    points_offset = offset + 44 + part_count * 4
    coords = read_struct(shp_data, points_offset, f"<{point_count * 2}d", what) if point_count else ()
    _check_finite(coords, what)

    rings = []
    for j, start in enumerate(starts):
        end = point_count if j == part_count - 1 else starts[j + 1]
        if not 0 <= start <= end <= point_count:
            raise FormatError(f"{what}: ring {j} spans invalid point range [{start}, {end})")
        rings.append([XY(northing=coords[k * 2 + 1], easting=coords[k * 2]) for k in range(start, end)])
    return rings


def _record_shape_type(shp_data: bytes, offset: int, record: int) -> int:
    (shape_type,) = read_struct(shp_data, offset, "<i", f"record {record} shape type")
    return shape_type


def read_shapefile(base: Path) -> ShapeDataset:
    """Read the ``base``.shp/.shx/.dbf triad into points or polygons."""
    with ExitStack() as stack:
        shp = _open_input(stack, base, ".shp")
        shx = _open_input(stack, base, ".shx")
        dbf = _open_input(stack, base, ".dbf")

        record_count, shape_type = _shx_header(read_exact(shx, SHP_HEADER_LENGTH, "SHX header"))
        if shape_type not in SUPPORTED_SHAPE_TYPES:
            raise FormatError(f"Unsupported shape type: {shape_type}")

        shp_length = _shp_content_length(read_exact(shp, SHP_HEADER_LENGTH, "SHP header"))
        dbf_record_count, fields_length, record_length = _dbf_header(read_exact(dbf, DBF_HEADER_LENGTH, "DBF header"))
        if record_count != dbf_record_count:
            raise FormatError(f"SHP/DBF record count mismatch: {record_count} != {dbf_record_count}")

        offsets = _record_offsets(read_exact(shx, record_count * SHX_ENTRY_LENGTH, "SHX index"), record_count)
        shp_data = read_exact(shp, shp_length, "SHP records")
        fields = parse_field_descriptors(read_exact(dbf, fields_length, "DBF field descriptors"), record_length)
        dbf_data = read_exact(dbf, record_count * record_length, "DBF records")

    dataset = ShapeDataset(name=base.name, shape_type=shape_type, record_count=record_count)
    for i, offset in enumerate(offsets):
        if _record_shape_type(shp_data, offset, i) == SHAPE_TYPE_NULL:
            continue
        record = record_slice(dbf_data, record_length, i)
        if shape_type == SHAPE_TYPE_POINT:
            name = decode_point_name(record, fields)
            if name:
                dataset.points.append(PointFeature(xy=_point_xy(shp_data, offset, i), name=name))
        elif shape_type == SHAPE_TYPE_POLYGON:
            type_code, names = decode_polygon_attributes(record, fields)
            rings = _polygon_rings(shp_data, offset, i)
            dataset.polygons.append(PolygonFeature(rings=rings, type_code=type_code, names=names))
    return dataset
