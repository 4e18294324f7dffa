"""
Request-scoped context tying discovery, the catalog and resolution together.

A `ReferenceContext` is built for one configuration or render request of one
reference field. It memoizes the discovery tree, the flattened catalog and
the formatter definitions for its own lifetime only; build a new context to
see schema changes.
"""

import logging
from collections.abc import Mapping, Sequence
from functools import cached_property
from typing import Any

from pydantic import ValidationError

from refchain.catalog import Catalog, CatalogEntry, flatten
from refchain.config import DiscoveryConfig, ReferenceSettings
from refchain.core.types import OptionMap, RenderedElements
from refchain.exceptions import (
    InvalidPathReferenceError,
    PathFormatError,
    ReferenceKind,
)
from refchain.execution.resolver import PathResolver, ResolvedPath
from refchain.schema import (
    Discovery,
    FieldDescriptor,
    FieldItems,
    FormatterInstance,
    PresentationCatalog,
    PresentationRegistry,
    Record,
    Renderer,
    SchemaRegistry,
    SchemaWalker,
)
from refchain.selection import HopSelectionOptions, selection_modes

logger = logging.getLogger(__name__)

INDIVIDUAL_FIELD_LABEL = "Individual Field"
NOT_CONFIGURED = "No reference chain configured"


class ReferenceContext:
    """Everything one reference field display needs for a single request.

    Params:
        field: Reference field owning the configuration
        settings: Saved settings, as a model or a plain mapping
        registry: Host schema registry
        presentations: Host formatter registry
        renderer: Host record renderer
        view_mode: View mode of the display hosting this field
        config: Discovery tunables
    """

    def __init__(
        self,
        field: FieldDescriptor,
        settings: ReferenceSettings | Mapping[str, Any] | None,
        registry: SchemaRegistry,
        presentations: PresentationRegistry,
        renderer: Renderer,
        view_mode: str = "default",
        config: DiscoveryConfig | None = None,
    ):
        self.field = field
        if not isinstance(settings, ReferenceSettings):
            try:
                settings = ReferenceSettings.from_dict(settings)
            except ValidationError as e:
                logger.warning("Ignoring invalid reference settings: %s", e)
                settings = ReferenceSettings()
        self.settings = settings
        self.registry = registry
        self.presentations = PresentationCatalog(presentations)
        self.renderer = renderer
        self.view_mode = view_mode
        self.config = config or DiscoveryConfig()
        self.resolver = PathResolver()

    @cached_property
    def discovery(self) -> Discovery:
        walker = SchemaWalker(
            self.registry, self.presentations, view_mode=self.view_mode, config=self.config
        )
        return walker.discover(self.field)

    @cached_property
    def catalog(self) -> Catalog:
        return flatten(self.discovery)

    # Configuration options

    def relationship_options(self) -> OptionMap:
        return {key: entry.label for key, entry in self.catalog.items()}

    def field_options(self, relationship: str) -> OptionMap:
        entry = self.catalog.get(relationship)
        if entry is None:
            return {}
        return {name: option.label for name, option in entry.fields.items()}

    def formatter_options(self, relationship: str, field_name: str) -> OptionMap:
        entry = self.catalog.get(relationship)
        if entry is None:
            return {}
        return {
            formatter_id: definition.label
            for formatter_id, definition in entry.presentations(field_name).items()
        }

    def view_mode_options(self, relationship: str) -> OptionMap:
        """
        View modes of the leaf entity type, preceded by the individual field choice.

        Params:
            relationship: Path key

        Returns:
            Options with "" mapped to the individual field branch
        """
        options = {"": INDIVIDUAL_FIELD_LABEL}
        entry = self.catalog.get(relationship)
        if entry is not None:
            options.update(self.registry.view_mode_options(entry.path.last.entity_type))
        return options

    def selection_modes(self) -> OptionMap:
        return selection_modes()

    def cardinality_options(self, relationship: str) -> list[HopSelectionOptions]:
        """Selection options per hop, defaulting to the saved rules."""
        entry = self.catalog.get(relationship)
        if entry is None:
            return []
        saved = self.settings.cardinality
        return [
            HopSelectionOptions.for_hop(
                hop.label,
                hop.cardinality,
                saved[delta] if delta < len(saved) else None,
            )
            for delta, hop in enumerate(entry.cardinality)
        ]

    def formatter_instance(
        self,
        relationship: str,
        field_name: str,
        formatter_id: str,
        settings: Mapping[str, Any] | None = None,
    ) -> FormatterInstance | None:
        """
        Create a formatter instance for a leaf field of a relationship.

        Returns:
            Configured formatter, or None when the relationship, field or
            formatter is not in the catalog
        """
        try:
            option = self._field_option(relationship, field_name, formatter_id)
        except InvalidPathReferenceError as e:
            logger.debug("No formatter instance: %s", e)
            return None
        return self.presentations.registry.create_instance(
            option.field, self.view_mode, formatter_id, dict(settings or {})
        )

    def settings_summary(self) -> list[str]:
        """
        Human readable summary of the saved settings.

        Returns:
            Summary lines; stale references are reported as "Invalid ..." and
            incomplete settings as a single "no configuration" line
        """
        settings = self.settings
        if not settings.is_complete():
            return [NOT_CONFIGURED]

        entry = self.catalog.get(settings.relationship)
        if entry is None:
            stale = InvalidPathReferenceError(
                ReferenceKind.RELATIONSHIP, settings.relationship
            )
            return [stale.summary]

        summary = [f"Relationship: {entry.label}"]
        if settings.view_mode:
            view_modes = self.view_mode_options(settings.relationship)
            mode_label = view_modes.get(settings.view_mode, settings.view_mode)
            summary.append(f"Rendered as {mode_label}")
            return summary

        option = entry.fields.get(settings.field)
        if option is None:
            stale = InvalidPathReferenceError(ReferenceKind.FIELD, settings.field)
            summary.append(stale.summary)
            return summary
        summary.append(f"Field: {option.label}")

        formatter = option.formatters.get(settings.formatter)
        if formatter is None:
            stale = InvalidPathReferenceError(ReferenceKind.FORMATTER, settings.formatter)
            summary.append(stale.summary)
            return summary
        summary.append(f"Formatter: {formatter.label}")

        instance = self.formatter_instance(
            settings.relationship, settings.field, settings.formatter, settings.settings
        )
        if instance is not None:
            summary.extend(instance.settings_summary())
        return summary

    # Rendering

    def resolved_path(self) -> ResolvedPath | None:
        """
        The saved relationship as a resolved path, if it is in the catalog.

        Returns:
            ResolvedPath, or None for incomplete settings or stale relationships
        """
        settings = self.settings
        if not settings.is_complete():
            return None
        if settings.relationship not in self.catalog:
            logger.warning(
                "Relationship '%s' is no longer available", settings.relationship
            )
            return None
        try:
            return ResolvedPath.from_settings(settings)
        except PathFormatError as e:
            logger.warning("Cannot resolve relationship: %s", e)
            return None

    def resolve(self, roots: Sequence[Record]) -> list[Record]:
        path = self.resolved_path()
        if path is None:
            return []
        return self.resolver.resolve(roots, path)

    def view_elements(self, root: Record, langcode: str) -> RenderedElements:
        """
        Render the leaf records reached from a root record.

        Params:
            root: Record owning the reference field
            langcode: Language of the display

        Returns:
            Rendered artifacts keyed by leaf position
        """
        path = self.resolved_path()
        if path is None:
            return {}
        leaves = self.resolver.resolve([root], path)

        if path.renders_records:
            return {
                delta: self.renderer.render(leaf, path.view_mode, leaf.langcode)
                for delta, leaf in enumerate(leaves)
            }

        instance = self.formatter_instance(
            self.settings.relationship, path.field, path.formatter, path.settings
        )
        if instance is None:
            logger.warning(
                "Formatter '%s' is not available for field '%s'", path.formatter, path.field
            )
            return {}

        elements = {}
        for delta, leaf in enumerate(leaves):
            items = FieldItems(leaf, path.field, leaf.field_value(path.field))
            instance.prepare_view({leaf.id: items})
            elements[delta] = instance.view_elements(items, langcode)
        return elements

    def _field_option(self, relationship: str, field_name: str, formatter_id: str):
        entry: CatalogEntry | None = self.catalog.get(relationship)
        if entry is None:
            raise InvalidPathReferenceError(ReferenceKind.RELATIONSHIP, relationship)
        option = entry.fields.get(field_name)
        if option is None:
            raise InvalidPathReferenceError(ReferenceKind.FIELD, field_name)
        if formatter_id not in option.formatters:
            raise InvalidPathReferenceError(ReferenceKind.FORMATTER, formatter_id)
        return option
