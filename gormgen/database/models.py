"""Database data models for schema introspection."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..errors import QueryError


@dataclass(frozen=True)
class ColumnMetadata:
    """Represents one column as reported by the engine catalog."""
    name: str
    data_type: str  # normalized category, e.g. varchar, int
    raw_type: str  # declared type with size, e.g. varchar(255), int unsigned
    is_nullable: bool = True
    is_primary_key: bool = False
    is_auto_increment: bool = False
    default_value: Optional[str] = None
    enum_values: Tuple[str, ...] = ()
    is_unsigned: bool = False
    char_max_length: Optional[int] = None
    numeric_precision: Optional[int] = None
    numeric_scale: Optional[int] = None
    comment: str = ""
    ordinal_position: int = 0


@dataclass(frozen=True)
class TableMetadata:
    """Represents a table and its columns in ordinal order."""
    schema: str
    name: str
    columns: Tuple[ColumnMetadata, ...] = field(default_factory=tuple)
    comment: str = ""

    def __post_init__(self):
        # Accept any iterable of columns but store an immutable tuple
        object.__setattr__(self, "columns", tuple(self.columns))
        positions = [col.ordinal_position for col in self.columns]
        if any(b <= a for a, b in zip(positions, positions[1:])):
            raise QueryError(
                f"Columns of {self.name} are not in strictly increasing ordinal order: {positions}",
                details={"operation": "fetch columns", "table": self.name, "positions": positions},
            )

    def get_column(self, name: str) -> Optional[ColumnMetadata]:
        """Find a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    @property
    def primary_key_columns(self) -> Tuple[str, ...]:
        """Names of the primary key columns, in ordinal order."""
        return tuple(col.name for col in self.columns if col.is_primary_key)
