"""GORM struct tag generation."""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..database.models import ColumnMetadata
from ..database.type_mappers import GoTypeMapper
from .naming import to_field_name

PRIMARY_KEY = "primaryKey"
AUTO_INCREMENT = "autoIncrement"
NOT_NULL = "not null"

# Defaults the database fills in on its own; GORM should not send them
MANAGED_DEFAULT_MARKERS = ("current_timestamp", "now()", "current_date")
SEQUENCE_MARKER = "nextval"


@dataclass
class StructField:
    """A Go struct field built from one column."""
    name: str
    type: str
    tags: str
    comment: str = ""
    import_path: str = ""


def format_enum_comment(values: Sequence[str]) -> str:
    """``['a', 'b']`` -> ``// enum('a','b')``."""
    if not values:
        return ""
    return "// enum(" + ",".join(f"'{v}'" for v in values) + ")"


def clean_default_value(default: Optional[str]) -> str:
    """Reduce a catalog default to what belongs in the ``default:`` attribute.

    Returns an empty string when the default should be omitted.
    """
    if default is None:
        return ""

    # Sequences are expressed through autoIncrement
    if SEQUENCE_MARKER in default:
        return ""

    lower = default.lower()
    if any(marker in lower for marker in MANAGED_DEFAULT_MARKERS):
        return ""

    # PostgreSQL wraps expression defaults in parentheses
    if default.startswith("(") and default.endswith(")"):
        default = default[1:-1]

    if default.upper() == "NULL":
        return ""

    return default


class TagBuilder:
    """Builds ``gorm`` and ``json`` struct tags for columns."""

    def build_gorm_attributes(self, col: ColumnMetadata) -> str:
        """Semicolon-joined GORM attributes in fixed order.

        primaryKey, autoIncrement, column, type, default, not null. Primary
        keys are implicitly non-null and never carry ``not null``.
        """
        parts = []
        if col.is_primary_key:
            parts.append(PRIMARY_KEY)
        if col.is_auto_increment:
            parts.append(AUTO_INCREMENT)

        parts.append(f"column:{col.name}")
        # Raw type is always included so schema sync keeps sizes
        parts.append(f"type:{col.raw_type}")

        default = clean_default_value(col.default_value)
        if default:
            parts.append(f"default:{default}")

        if not col.is_nullable and not col.is_primary_key:
            parts.append(NOT_NULL)

        return ";".join(parts)

    def build_gorm_tag(self, col: ColumnMetadata) -> str:
        return f'gorm:"{self.build_gorm_attributes(col)}"'

    def build_json_tag(self, col: ColumnMetadata) -> str:
        """JSON tag carrying the column name unchanged."""
        return f'json:"{col.name}"'

    def build_all_tags(self, col: ColumnMetadata) -> str:
        return " ".join([self.build_gorm_tag(col), self.build_json_tag(col)])

    def build_struct_field(self, col: ColumnMetadata, type_mapper: GoTypeMapper) -> StructField:
        """Create a complete struct field from column metadata.

        The field comment is the enum listing for enum columns, else the
        unknown-type note, else the catalog comment.
        """
        resolution = type_mapper.map(col.raw_type, col.is_nullable)

        if col.enum_values:
            comment = format_enum_comment(col.enum_values)
        elif resolution.note:
            comment = resolution.note
        elif col.comment:
            comment = "// " + " ".join(col.comment.split())
        else:
            comment = ""

        return StructField(
            name=to_field_name(col.name),
            type=resolution.go_type,
            tags=self.build_all_tags(col),
            comment=comment,
            import_path=resolution.import_path,
        )
