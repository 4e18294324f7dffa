"""
Flattening of the discovery tree into a catalog of path keys.

Each (entity type, bundle) node of the discovery tree becomes one catalog
entry keyed by the full hop sequence that reaches it. The catalog is the
set of relationships the configuration surface may offer.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from refchain.core.path_utils import FieldRef, PathId
from refchain.exceptions import PathFormatError
from refchain.schema.interfaces import PresentationDescriptor
from refchain.schema.nodes import Discovery, FieldOption

logger = logging.getLogger(__name__)

LABEL_SEPARATOR = " > "


@dataclass(frozen=True)
class CardinalityEntry:
    """Declared cardinality of one hop; 0 or less means unbounded."""

    label: str
    cardinality: int


@dataclass(frozen=True)
class CatalogEntry:
    """A relationship chain that can be configured."""

    path: PathId
    label: str
    cardinality: tuple[CardinalityEntry, ...]
    fields: Mapping[str, FieldOption] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return self.path.to_key()

    def presentations(self, field_name: str) -> Mapping[str, PresentationDescriptor]:
        """Formatters available for one field of the leaf bundle."""
        option = self.fields.get(field_name)
        return option.formatters if option else {}


Catalog = dict[str, CatalogEntry]


def hop_label(type_label: str, field_name: str, bundle_label: str | None) -> str:
    """
    Build the label of one hop.

    Examples:
        ("Paragraph", "field_items", "Text") -> "Paragraph (field_items): Text"
        ("User", "uid", None) -> "User (uid)"
    """
    name = f"{type_label} ({field_name})"
    if bundle_label:
        name += f": {bundle_label}"
    return name


def flatten(
    discovery: Discovery,
    parent: PathId | None = None,
    parent_label: str = "",
    parent_chain: tuple[CardinalityEntry, ...] = (),
) -> Catalog:
    """
    Flatten a discovery tree depth-first, in pre-order.

    Params:
        discovery: Discovery nodes keyed by entity type
        parent: Path of the hop that reached `discovery`, None at the root
        parent_label: Label of the parent path
        parent_chain: Cardinality entries of the parent path

    Returns:
        Catalog entries keyed by path key, parents before their children
    """
    parent = parent or PathId()
    catalog: Catalog = {}
    for entity_type_id, node in discovery.items():
        for bundle_id, bundle in node.bundles.items():
            try:
                path = parent.append(FieldRef(node.field.name, entity_type_id, bundle_id))
            except PathFormatError as e:
                logger.warning("Skipping relationship that cannot be keyed: %s", e)
                continue

            name = hop_label(node.entity_type.label, node.field.name, bundle.label)
            label = f"{parent_label}{LABEL_SEPARATOR}{name}" if parent_label else name
            chain = parent_chain + (CardinalityEntry(label, node.cardinality),)

            entry = CatalogEntry(
                path=path, label=label, cardinality=chain, fields=dict(bundle.fields)
            )
            _merge(catalog, {entry.key: entry})

            for nested in bundle.relationships.values():
                _merge(catalog, flatten(nested, path, label, chain))
    return catalog


def _merge(catalog: Catalog, entries: Catalog) -> None:
    for key, entry in entries.items():
        if key in catalog:
            logger.warning("Duplicate relationship '%s' ignored", key)
            continue
        catalog[key] = entry
