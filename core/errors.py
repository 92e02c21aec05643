"""
Custom error types for Markdown to delta conversion.

Soft failures (unknown node types, ragged tables) are logged and never raised;
everything in this module is a hard stop for the current conversion.
"""

# =============================================================================
# Base Exception Hierarchy
# =============================================================================


class DeltaConversionError(Exception):
    """Base exception for all conversion errors."""

    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DeltaConversionError):
    """Raised when converter options or environment values are invalid."""

    pass


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DeltaConversionError):
    """Raised when input validation fails."""

    pass


# =============================================================================
# Conversion Errors
# =============================================================================


class TableIdGeneratorError(DeltaConversionError):
    """Raised when the table id generator fails to produce a row identifier."""

    def __init__(self, reason: str):
        super().__init__(f"Table id generator failed: {reason}. Table rows cannot be addressed without an id.")
        self.reason = reason


class NestingDepthError(DeltaConversionError):
    """Raised when a document is nested deeper than the configured limit."""

    def __init__(self, depth: int, max_depth: int):
        super().__init__(f"Document nesting depth {depth} exceeds the configured maximum of {max_depth}")
        self.depth = depth
        self.max_depth = max_depth
