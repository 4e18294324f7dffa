"""
Schema discovery for reference chains.

This package defines the host capability interfaces, the discovery tree and
the walker that builds it.
"""

from refchain.schema.interfaces import (
    FieldDescriptor,
    FieldItems,
    FormatterInstance,
    PresentationDescriptor,
    PresentationRegistry,
    Record,
    Renderer,
    SchemaRegistry,
)
from refchain.schema.nodes import (
    BundleNode,
    Discovery,
    DiscoveryNode,
    FieldOption,
    max_depth,
)
from refchain.schema.presentations import PresentationCatalog
from refchain.schema.walker import SchemaWalker

__all__ = [
    "SchemaWalker",
    "PresentationCatalog",
    "BundleNode",
    "Discovery",
    "DiscoveryNode",
    "FieldOption",
    "max_depth",
    "FieldDescriptor",
    "FieldItems",
    "FormatterInstance",
    "PresentationDescriptor",
    "PresentationRegistry",
    "Record",
    "Renderer",
    "SchemaRegistry",
]
