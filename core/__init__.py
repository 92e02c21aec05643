"""Core configuration, errors and helpers for md-delta."""

from core.config import DEFAULT_TABLE_COLUMN_WIDTH, ConverterOptions
from core.errors import (
    ConfigurationError,
    DeltaConversionError,
    NestingDepthError,
    TableIdGeneratorError,
    ValidationError,
)
from core.utils import (
    default_table_id_generator,
    tree_depth,
    validate_markdown_text,
    validate_positive_int,
)

__all__ = [
    "ConfigurationError",
    "ConverterOptions",
    "DEFAULT_TABLE_COLUMN_WIDTH",
    "default_table_id_generator",
    "DeltaConversionError",
    "NestingDepthError",
    "TableIdGeneratorError",
    "tree_depth",
    "validate_markdown_text",
    "validate_positive_int",
    "ValidationError",
]
