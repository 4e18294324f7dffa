"""
refchain exception classes.

This package provides all exception types used throughout refchain for
consistent error handling and reporting.
"""

from refchain.exceptions.core import (
    ConfigurationIncompleteError,
    InvalidPathReferenceError,
    PathFormatError,
    RefChainError,
    ReferenceKind,
    SchemaAnomalyError,
)

__all__ = [
    "RefChainError",
    "ConfigurationIncompleteError",
    "InvalidPathReferenceError",
    "PathFormatError",
    "ReferenceKind",
    "SchemaAnomalyError",
]
