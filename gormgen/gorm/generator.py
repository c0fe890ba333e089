"""GORM model generator: table metadata in, Go source out."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..database.base import DatabaseIntrospector
from ..database.models import TableMetadata
from ..database.type_mappers import DATATYPES_IMPORT, TIME_IMPORT, UUID_IMPORT, GoTypeMapper
from ..errors import BatchGenerationError, FileWriteError, FormatError, GormGenError
from .formatter import format_go_source
from .imports import detect_required_imports
from .naming import to_file_name, to_struct_name
from .tags import StructField, TagBuilder
from .templates import TemplateData, TemplateRenderer

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_NAME = "models"


@dataclass
class GeneratedFile:
    """One generated Go file.

    ``format_error`` is set when pretty-printing failed; ``content`` then
    holds the unformatted template output.
    """
    file_name: str
    package_name: str
    struct_name: str
    table_name: str
    imports: str
    fields: List[StructField] = field(default_factory=list)
    content: str = ""
    format_error: Optional[FormatError] = None

    @property
    def is_formatted(self) -> bool:
        return self.format_error is None


class ModelGenerator:
    """Generates GORM model structs for the tables of an introspected database."""

    def __init__(
        self,
        introspector: DatabaseIntrospector,
        package_name: str = DEFAULT_PACKAGE_NAME,
        type_mapper: Optional[GoTypeMapper] = None,
        tag_builder: Optional[TagBuilder] = None,
        renderer: Optional[TemplateRenderer] = None,
    ):
        self.introspector = introspector
        self.package_name = package_name or DEFAULT_PACKAGE_NAME
        self.type_mapper = type_mapper or GoTypeMapper()
        self.tag_builder = tag_builder or TagBuilder()
        self.renderer = renderer or TemplateRenderer()

    def build_fields(self, meta: TableMetadata) -> List[StructField]:
        return [
            self.tag_builder.build_struct_field(col, self.type_mapper)
            for col in meta.columns
        ]

    def render(self, meta: TableMetadata) -> GeneratedFile:
        """Render already-fetched table metadata into a GeneratedFile."""
        fields = self.build_fields(meta)
        imports = detect_required_imports(fields)

        data = TemplateData(
            package_name=self.package_name,
            imports=imports.generate_import_block(),
            struct_name=to_struct_name(meta.name),
            table_name=meta.name,
            fields=fields,
            table_comment=" ".join(meta.comment.split()),
            has_time=imports.has(TIME_IMPORT),
            has_json=imports.has(DATATYPES_IMPORT),
            has_uuid=imports.has(UUID_IMPORT),
        )
        rendered = self.renderer.render(data)

        generated = GeneratedFile(
            file_name=to_file_name(meta.name),
            package_name=data.package_name,
            struct_name=data.struct_name,
            table_name=meta.name,
            imports=data.imports,
            fields=fields,
        )
        try:
            generated.content = format_go_source(rendered)
        except FormatError as e:
            logger.warning(
                "Formatting %s failed, keeping unformatted output: %s",
                meta.name, e.get_user_friendly_message(),
            )
            e.details["table"] = meta.name
            generated.content = rendered
            generated.format_error = e
        return generated

    def generate(self, table: str) -> GeneratedFile:
        """Fetch metadata for ``table`` and render its model."""
        logger.debug("Generating model for %s", table)
        meta = self.introspector.get_table_metadata(table)
        return self.render(meta)

    def generate_string(self, table: str) -> str:
        return self.generate(table).content

    def generate_many(self, tables: Iterable[str]) -> Dict[str, str]:
        """Generate previews for several tables, stopping at the first failure."""
        return {table: self.generate_string(table) for table in tables}

    def write_file(self, table: str, destination: str) -> str:
        """Generate ``table`` and write it to the exact ``destination`` path."""
        generated = self.generate(table)
        return self._write(generated, Path(destination))

    def generate_to_file(self, table: str, output_dir: str) -> str:
        """Generate ``table`` into ``output_dir`` under its snake_case file name."""
        generated = self.generate(table)
        return self._write(generated, Path(output_dir) / generated.file_name)

    def generate_all(self, output_dir: str) -> List[str]:
        """Generate every table of the database into ``output_dir``.

        Raises:
            BatchGenerationError: on the first failing table; its ``paths``
                lists the files written before the failure.
        """
        tables = self.introspector.get_tables()
        return self.generate_selected(tables, output_dir)

    def generate_selected(self, tables: Iterable[str], output_dir: str) -> List[str]:
        """Generate the given tables in order, aborting on the first failure."""
        paths = []
        for table in tables:
            try:
                paths.append(self.generate_to_file(table, output_dir))
            except GormGenError as e:
                logger.error("Generation stopped at %s after %d file(s): %s", table, len(paths), e)
                raise BatchGenerationError(table, paths=paths, cause=e) from e
        logger.info("Generated %d model file(s) in %s", len(paths), output_dir)
        return paths

    def _write(self, generated: GeneratedFile, path: Path) -> str:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(generated.content, encoding="utf-8")
        except OSError as e:
            raise FileWriteError(str(path), str(e)) from e
        logger.debug("Wrote %s", path)
        return str(path)
