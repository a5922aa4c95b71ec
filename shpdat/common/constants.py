"""Application constants."""

USER_AGENT = "shpdat/0.3 (+map data packer)"

SHAPE_TYPE_NULL = 0
SHAPE_TYPE_POINT = 1
SHAPE_TYPE_POLYGON = 5
SUPPORTED_SHAPE_TYPES = (SHAPE_TYPE_POINT, SHAPE_TYPE_POLYGON)

SHP_HEADER_LENGTH = 100
SHP_RECORD_HEADER_LENGTH = 8
SHX_ENTRY_LENGTH = 8
DBF_HEADER_LENGTH = 32
DBF_FIELD_DESCRIPTOR_LENGTH = 32
DBF_FIELD_TERMINATOR = 0x0D

POINT_NAME_FIELD = b"TextString"
POINT_DESCRIPTION_FIELD = b"KIRJELDUS"
POINT_DESCRIPTION_PREFIX = b"Ma"
POLYGON_TYPE_FIELD = b"TYYP"
POLYGON_NAME_FIELDS = (b"MNIMI", b"ONIMI", b"ANIMI")

POLYGON_TYPE_LABELS = {
    0: "county",
    1: "rural_municipality",
    3: "town",
    4: "city",
    5: "city_without_municipal_status",
    6: "city_district",
    7: "small_town",
    8: "village",
}

# Byte widths of the output formats.
POINT_NAMES_COUNT_WIDTH = 2
POINT_COUNT_WIDTH = 4
POINT_NAME_INDEX_WIDTH = 2
POLYGON_NAME_COUNT_WIDTHS = (1, 1, 2)
POLYGON_COUNT_WIDTH = 2
POLYGON_TYPE_WIDTH = 1
RING_COUNT_WIDTH = 1
RING_POINT_COUNT_WIDTH = 2
COORDINATE_WIDTH = 3
NAME_LENGTH_WIDTH = 1

DEFAULT_CONFIG_PATH = "config/converter.yml"
OVERFLOW_POLICIES = ("error", "wrap")

EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "dataset",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
