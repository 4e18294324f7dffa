"""
Flat catalog of configurable reference chains.
"""

from refchain.catalog.flattener import (
    LABEL_SEPARATOR,
    CardinalityEntry,
    Catalog,
    CatalogEntry,
    flatten,
    hop_label,
)

__all__ = [
    "Catalog",
    "CatalogEntry",
    "CardinalityEntry",
    "LABEL_SEPARATOR",
    "flatten",
    "hop_label",
]
