"""
Capability interfaces supplied by the host application.

refchain never owns schema metadata, records or presentation plugins. The
host passes objects satisfying these protocols; the walker, resolver and
context only read from them.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class PresentationDescriptor:
    """A formatter definition as advertised by the presentation registry."""

    id: str
    label: str
    field_types: tuple[str, ...] = ()

    def supports(self, field_type: str) -> bool:
        return field_type in self.field_types


@dataclass
class FieldItems:
    """A single-field item list bound to the record it was read from."""

    record: "Record"
    field_name: str
    values: Any = field(default_factory=list)


class FieldDescriptor(Protocol):
    """Metadata for one field on an entity type/bundle."""

    name: str
    label: str
    field_type: str
    cardinality: int
    settings: Mapping[str, Any]

    def is_display_configurable(self) -> bool: ...


class EntityTypeDefinition(Protocol):
    """Metadata for one entity type."""

    id: str
    label: str
    is_fieldable: bool
    bundle_entity_type: str | None


class BundleDefinition(Protocol):
    label: str


class SchemaRegistry(Protocol):
    """Type/schema registry of the host."""

    def get_definition(self, entity_type: str) -> EntityTypeDefinition: ...

    def bundle_info(self, entity_type: str) -> Mapping[str, Any]: ...

    def load_bundle(self, bundle_entity_type: str, bundle: str) -> BundleDefinition | None: ...

    def field_definitions(
        self, entity_type: str, bundle: str
    ) -> Mapping[str, FieldDescriptor]: ...

    def view_mode_options(self, entity_type: str) -> Mapping[str, str]: ...


class Record(Protocol):
    """A loaded record and its outgoing references."""

    id: Any
    entity_type: str
    bundle: str
    langcode: str

    def has_field(self, field_name: str) -> bool: ...

    def referenced(self, field_name: str) -> Sequence["Record"]: ...

    def field_value(self, field_name: str) -> Any: ...


class FormatterInstance(Protocol):
    """A configured formatter, reusable across many field item lists."""

    def settings_summary(self) -> list[str]: ...

    def prepare_view(self, items_by_id: Mapping[Any, FieldItems]) -> None: ...

    def view_elements(self, items: FieldItems, langcode: str) -> Any: ...


class PresentationRegistry(Protocol):
    """Formatter plugin registry of the host."""

    def definitions(self) -> Mapping[str, PresentationDescriptor]: ...

    def create_instance(
        self,
        field: FieldDescriptor,
        view_mode: str,
        formatter_id: str,
        settings: Mapping[str, Any],
    ) -> FormatterInstance | None: ...


class Renderer(Protocol):
    """Renders whole records in a view mode."""

    def render(self, record: Record, view_mode: str, langcode: str) -> Any: ...
