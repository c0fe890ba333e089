"""GORM model code generation for gormgen.

This module turns introspected table metadata into Go structs carrying
GORM and JSON struct tags.
"""

from .generator import GeneratedFile, ModelGenerator
from .imports import ImportManager, detect_required_imports
from .naming import singularize, to_field_name, to_file_name, to_struct_name
from .tags import StructField, TagBuilder
from .templates import TemplateData, TemplateRenderer
from .formatter import format_go_source

__all__ = [
    "GeneratedFile",
    "ModelGenerator",
    "ImportManager",
    "detect_required_imports",
    "singularize",
    "to_field_name",
    "to_file_name",
    "to_struct_name",
    "StructField",
    "TagBuilder",
    "TemplateData",
    "TemplateRenderer",
    "format_go_source",
]
