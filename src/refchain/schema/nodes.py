"""
Immutable discovery tree produced by the schema walker.

The tree alternates between entity types and bundles:

    {entity_type: DiscoveryNode}
        DiscoveryNode.bundles -> {bundle: BundleNode}
            BundleNode.fields -> {field_name: FieldOption}
            BundleNode.relationships -> {field_name: {entity_type: DiscoveryNode}}
"""

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field

from refchain.schema.interfaces import (
    EntityTypeDefinition,
    FieldDescriptor,
    PresentationDescriptor,
)


@dataclass(frozen=True)
class FieldOption:
    """A field that can be presented, with its compatible formatters."""

    field: FieldDescriptor
    formatters: Mapping[str, PresentationDescriptor]

    @property
    def label(self) -> str:
        return self.field.label


@dataclass(frozen=True)
class BundleNode:
    """Fields and nested relationships found on one bundle."""

    bundle: str
    label: str | None = None
    fields: Mapping[str, FieldOption] = dataclass_field(default_factory=dict)
    relationships: Mapping[str, "Discovery"] = dataclass_field(default_factory=dict)


@dataclass(frozen=True)
class DiscoveryNode:
    """An entity type reached through a reference field."""

    entity_type: EntityTypeDefinition
    field: FieldDescriptor
    cardinality: int
    bundles: Mapping[str, BundleNode] = dataclass_field(default_factory=dict)

    @property
    def is_unbounded(self) -> bool:
        return self.cardinality <= 0


Discovery = Mapping[str, DiscoveryNode]


def max_depth(discovery: Discovery) -> int:
    """Number of hops on the longest chain in a discovery tree."""
    deepest = 0
    for node in discovery.values():
        for bundle in node.bundles.values():
            for nested in bundle.relationships.values():
                deepest = max(deepest, max_depth(nested))
    return deepest + 1 if discovery else 0
