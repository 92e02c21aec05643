import logging
import random
import string
from typing import Any

from core.errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

TABLE_ID_PREFIX = "row-"
TABLE_ID_ALPHABET = string.ascii_lowercase + string.digits
TABLE_ID_LENGTH = 4


def default_table_id_generator() -> str:
    """Return a short random row id such as ``row-k3x9``."""
    suffix = "".join(random.choices(TABLE_ID_ALPHABET, k=TABLE_ID_LENGTH))
    return f"{TABLE_ID_PREFIX}{suffix}"


def validate_markdown_text(markdown_text: Any, param_name: str = "markdown_text") -> str:
    """Validate that conversion input is a string."""
    if not isinstance(markdown_text, str):
        raise ValidationError(f"{param_name} must be a string, got {type(markdown_text).__name__}")

    return markdown_text


def validate_positive_int(value: int, param_name: str, max_value: int | None = None) -> int:
    """Validate a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"{param_name} must be a positive integer")

    if max_value is not None and value > max_value:
        raise ConfigurationError(f"{param_name} cannot exceed {max_value}")

    return value


def parse_env_bool(raw: str | None, default: bool = False) -> bool:
    """Interpret an environment flag ("1", "true", "yes", "on")."""
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def parse_env_int(raw: str | None, param_name: str) -> int | None:
    """Parse an optional positive integer from an environment value."""
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{param_name} must be an integer, got {raw!r}") from e
    return validate_positive_int(value, param_name)


def tree_depth(node: Any) -> int:
    """
    Measure the nesting depth of a node tree without recursion.

    A lone root counts as depth 1. Nodes expose ``children`` as a sequence or ``None``.
    """
    deepest = 0
    stack = [(node, 1)]
    while stack:
        current, depth = stack.pop()
        deepest = max(deepest, depth)
        for child in current.children or ():
            stack.append((child, depth + 1))
    return deepest
