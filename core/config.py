"""
Converter configuration for md-delta.

Options are built once per converter and reused across ``convert()`` calls.
They can be passed explicitly or loaded from the environment:

- ``MD_DELTA_DEBUG``: verbose per-node tracing ("true"/"1")
- ``MD_DELTA_TABLE_COLUMN_WIDTH``: width declared by table column placeholders
- ``MD_DELTA_MAX_DEPTH``: optional nesting depth guard
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
from typing import Any

from core.errors import ConfigurationError
from core.utils import default_table_id_generator, parse_env_bool, parse_env_int, validate_positive_int

logger = logging.getLogger(__name__)

DEFAULT_TABLE_COLUMN_WIDTH = 150


@dataclass
class ConverterOptions:
    """
    Conversion settings.

    Attributes:
        debug: Emit per-node traces at DEBUG level. Never changes the output.
        table_id_generator: Called once per table row; must return a fresh string id.
        table_column_width: Width carried by each ``table-col`` placeholder op.
        max_depth: When set, documents nested deeper than this are rejected before conversion.
    """

    debug: bool = False
    table_id_generator: Callable[[], str] = field(default=default_table_id_generator)
    table_column_width: int = DEFAULT_TABLE_COLUMN_WIDTH
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if not callable(self.table_id_generator):
            raise ConfigurationError("table_id_generator must be callable")
        validate_positive_int(self.table_column_width, "table_column_width")
        if self.max_depth is not None:
            validate_positive_int(self.max_depth, "max_depth")

    @classmethod
    def from_env(cls, **overrides: Any) -> "ConverterOptions":
        """Build options from ``MD_DELTA_*`` environment variables; keyword overrides win."""
        values: dict[str, Any] = {"debug": parse_env_bool(os.getenv("MD_DELTA_DEBUG"))}

        width = parse_env_int(os.getenv("MD_DELTA_TABLE_COLUMN_WIDTH"), "MD_DELTA_TABLE_COLUMN_WIDTH")
        if width is not None:
            values["table_column_width"] = width

        max_depth = parse_env_int(os.getenv("MD_DELTA_MAX_DEPTH"), "MD_DELTA_MAX_DEPTH")
        if max_depth is not None:
            values["max_depth"] = max_depth

        logger.debug(f"Loaded converter options from environment: {sorted(values)}")
        return cls(**values).with_overrides(**overrides)

    def with_overrides(self, **overrides: Any) -> "ConverterOptions":
        """Return a copy with the given fields replaced."""
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigurationError(f"Unknown converter option(s): {', '.join(sorted(unknown))}")
        return replace(self, **overrides)
