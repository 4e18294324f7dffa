"""
Core type definitions for refchain.

Type aliases shared by the walker, the catalog and the execution context.
"""

from typing import Any

SettingsDict = dict[str, Any]

OptionMap = dict[str, str]

RenderedElements = dict[int, Any]
