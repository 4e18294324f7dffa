"""
Core refchain components.

This package provides the structured path identifiers and shared type
aliases used by discovery, selection and resolution.
"""

from refchain.core.path_utils import (
    HOP_DELIMITER,
    PATH_DELIMITER,
    FieldRef,
    PathId,
)
from refchain.core.types import OptionMap, RenderedElements, SettingsDict

__all__ = [
    "FieldRef",
    "PathId",
    "HOP_DELIMITER",
    "PATH_DELIMITER",
    "OptionMap",
    "RenderedElements",
    "SettingsDict",
]
