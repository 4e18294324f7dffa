"""
Exception classes for reference chain discovery and resolution.

This module defines specific exception types for the error conditions that
can occur while discovering schema paths, parsing path identifiers and
resolving configured chains against records.
"""

from enum import Enum


class ReferenceKind(Enum):
    """Kinds of configured references that can go stale."""

    RELATIONSHIP = "relationship"
    FIELD = "field"
    FORMATTER = "formatter"


class RefChainError(Exception):
    """Base exception for all refchain errors."""

    pass


class PathFormatError(RefChainError):
    """Raised when a path identifier or one of its hops is malformed."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: The malformed path or hop string
            reason: Why the path cannot be used
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path '{path}': {reason}")


class InvalidPathReferenceError(RefChainError):
    """Raised when a configured relationship, field or formatter is not in the catalog."""

    def __init__(self, kind: ReferenceKind, key: str):
        """
        Initialize the exception.

        Params:
            kind: Which part of the configuration is stale
            key: The configured value that could not be found
        """
        self.kind = kind
        self.key = key
        super().__init__(f"Invalid {kind.value} '{key}'")

    @property
    def summary(self) -> str:
        """Human readable summary line, e.g. 'Invalid field'."""
        return f"Invalid {self.kind.value}"


class SchemaAnomalyError(RefChainError):
    """Raised when the host schema registry returns inconsistent metadata."""

    def __init__(self, type_id: str, reason: str):
        """
        Initialize the exception.

        Params:
            type_id: The entity type whose metadata is inconsistent
            reason: The underlying failure
        """
        self.type_id = type_id
        self.reason = reason
        super().__init__(f"Schema anomaly in '{type_id}': {reason}")


class ConfigurationIncompleteError(RefChainError):
    """Raised when settings lack a relationship or a way to present leaf records."""

    def __init__(self, missing: list[str]):
        """
        Initialize the exception.

        Params:
            missing: Names of the settings that are empty
        """
        self.missing = missing
        super().__init__(f"Configuration incomplete, missing: {', '.join(missing)}")
