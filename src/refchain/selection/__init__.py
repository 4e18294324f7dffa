"""
Selection rules applied at each hop of a reference chain.
"""

from refchain.selection.rule import (
    SELECTION_MODE_LABELS,
    HopSelectionOptions,
    SelectionMode,
    SelectionRule,
    select,
    selection_modes,
)

__all__ = [
    "SelectionMode",
    "SelectionRule",
    "HopSelectionOptions",
    "SELECTION_MODE_LABELS",
    "select",
    "selection_modes",
]
