"""Database type to Go type mapping."""

import re
from types import MappingProxyType
from typing import List, Mapping, NamedTuple, Optional

TIME_IMPORT = "time"
DATATYPES_IMPORT = "gorm.io/datatypes"
UUID_IMPORT = "github.com/google/uuid"

FALLBACK_GO_TYPE = "interface{}"


class TypeMapping(NamedTuple):
    """A Go type with its import requirement."""
    go_type: str
    import_path: str = ""
    is_slice: bool = False  # raw byte sequences, never pointer-wrapped


class TypeResolution(NamedTuple):
    """Result of mapping one raw database type."""
    go_type: str
    import_path: str = ""
    note: str = ""  # diagnostic comment for unresolved types


def _build_type_map() -> Mapping[str, TypeMapping]:
    time_type = TypeMapping("time.Time", TIME_IMPORT)
    json_type = TypeMapping("datatypes.JSON", DATATYPES_IMPORT)
    bytes_type = TypeMapping("[]byte", is_slice=True)
    string_type = TypeMapping("string")

    types = {
        # Integer types
        "int": TypeMapping("int32"),
        "integer": TypeMapping("int32"),
        "smallint": TypeMapping("int16"),
        "mediumint": TypeMapping("int32"),
        "bigint": TypeMapping("int64"),
        "tinyint": TypeMapping("int8"),
        "serial": TypeMapping("int32"),
        "bigserial": TypeMapping("int64"),
        "smallserial": TypeMapping("int16"),

        # Unsigned integer types (MySQL)
        "int unsigned": TypeMapping("uint32"),
        "integer unsigned": TypeMapping("uint32"),
        "smallint unsigned": TypeMapping("uint16"),
        "mediumint unsigned": TypeMapping("uint32"),
        "bigint unsigned": TypeMapping("uint64"),
        "tinyint unsigned": TypeMapping("uint8"),

        # Float/Decimal types
        "decimal": TypeMapping("float64"),
        "numeric": TypeMapping("float64"),
        "float": TypeMapping("float32"),
        "double": TypeMapping("float64"),
        "double precision": TypeMapping("float64"),
        "real": TypeMapping("float32"),
        "money": TypeMapping("float64"),

        # String types
        "varchar": string_type,
        "char": string_type,
        "character": string_type,
        "character varying": string_type,
        "text": string_type,
        "longtext": string_type,
        "mediumtext": string_type,
        "tinytext": string_type,
        "citext": string_type,

        # Date/Time types; time of day without a date stays a string
        "timestamp": time_type,
        "timestamptz": time_type,
        "timestamp with time zone": time_type,
        "timestamp without time zone": time_type,
        "datetime": time_type,
        "date": time_type,
        "time": string_type,
        "time with time zone": string_type,
        "time without time zone": string_type,
        "year": TypeMapping("int16"),
        "interval": string_type,

        # Boolean types
        "bool": TypeMapping("bool"),
        "boolean": TypeMapping("bool"),
        "tinyint(1)": TypeMapping("bool"),  # MySQL boolean

        # JSON and UUID
        "json": json_type,
        "jsonb": json_type,
        "uuid": TypeMapping("uuid.UUID", UUID_IMPORT),

        # Binary types
        "bytea": bytes_type,
        "blob": bytes_type,
        "tinyblob": bytes_type,
        "mediumblob": bytes_type,
        "longblob": bytes_type,
        "binary": bytes_type,
        "varbinary": bytes_type,
        "bit": bytes_type,

        # Enum values are kept on the column, the type itself is a string
        "enum": string_type,
        "set": string_type,

        # PostgreSQL specific types
        "inet": string_type,
        "cidr": string_type,
        "macaddr": string_type,
        "macaddr8": string_type,
        "xml": string_type,
        "point": string_type,
        "line": string_type,
        "lseg": string_type,
        "box": string_type,
        "path": string_type,
        "polygon": string_type,
        "circle": string_type,
    }
    return MappingProxyType(types)


TYPE_MAP: Mapping[str, TypeMapping] = _build_type_map()


def extract_base_type(db_type: str) -> str:
    """Strip the size/precision suffix: ``varchar(255)`` -> ``varchar``."""
    idx = db_type.find("(")
    if idx != -1:
        return db_type[:idx].strip()
    return db_type


class GoTypeMapper:
    """Maps raw engine type strings to Go types.

    Nullable columns keep the plain Go type: GORM scans NULL into the zero
    value, so no pointer wrapping is applied.
    """

    def __init__(self, type_map: Optional[Mapping[str, TypeMapping]] = None):
        self._type_map = type_map if type_map is not None else TYPE_MAP

    def map(self, db_type: str, is_nullable: bool = False) -> TypeResolution:
        """Resolve ``db_type`` to a Go type, import path and diagnostic note."""
        normalized = db_type.strip().lower()
        base_type = extract_base_type(normalized)
        is_unsigned = "unsigned" in normalized

        if is_unsigned:
            mapping = self._type_map.get(f"{base_type} unsigned")
            if mapping:
                return self._resolve(mapping, is_nullable)

        if normalized.startswith("tinyint(1)") and not is_unsigned:
            mapping = self._type_map.get("tinyint(1)")
            if mapping:
                return self._resolve(mapping, is_nullable)

        mapping = self._type_map.get(normalized)
        if mapping:
            return self._resolve(mapping, is_nullable)

        mapping = self._type_map.get(base_type)
        if mapping:
            return self._resolve(mapping, is_nullable)

        return TypeResolution(
            self._apply_nullable(FALLBACK_GO_TYPE, is_nullable, False),
            "",
            f"// unknown type: {db_type}",
        )

    def go_type(self, db_type: str, is_nullable: bool = False) -> str:
        """Return only the Go type for ``db_type``."""
        return self.map(db_type, is_nullable).go_type

    def _resolve(self, mapping: TypeMapping, is_nullable: bool) -> TypeResolution:
        go_type = self._apply_nullable(mapping.go_type, is_nullable, mapping.is_slice)
        return TypeResolution(go_type, mapping.import_path, "")

    @staticmethod
    def _apply_nullable(go_type: str, is_nullable: bool, is_slice: bool) -> str:
        # Zero-value policy: NULL reads back as the zero value of go_type
        return go_type


ENUM_PATTERN = re.compile(r"enum\s*\(\s*(.+)\s*\)", re.IGNORECASE)
ENUM_VALUE_PATTERN = re.compile(r"'([^']*)'")


def parse_enum_values(column_type: str) -> List[str]:
    """Extract enum values from a MySQL column type.

    ``enum('active','inactive')`` -> ``['active', 'inactive']``. Non-enum
    types return an empty list.
    """
    match = ENUM_PATTERN.search(column_type)
    if not match:
        return []
    return ENUM_VALUE_PATTERN.findall(match.group(1))
