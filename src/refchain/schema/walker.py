"""
Schema walker discovering chains of reference fields.

Starting from the reference field that owns a configuration, the walker
visits every target entity type and bundle, records the fields that have at
least one compatible formatter and recurses into reference fields until the
depth bound is reached. Cycles in the schema are cut by the same bound.
"""

import logging
from collections.abc import Iterable, Mapping

from refchain.config import DiscoveryConfig
from refchain.exceptions import SchemaAnomalyError
from refchain.schema.interfaces import (
    EntityTypeDefinition,
    FieldDescriptor,
    SchemaRegistry,
)
from refchain.schema.nodes import BundleNode, Discovery, DiscoveryNode, FieldOption
from refchain.schema.presentations import PresentationCatalog

logger = logging.getLogger(__name__)


class SchemaWalker:
    """Depth-bounded discovery over a host schema registry.

    Params:
        registry: Host schema registry
        presentations: Formatter lookup scoped to the current request
        view_mode: View mode the owning display is configured for
        config: Discovery tunables
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        presentations: PresentationCatalog,
        view_mode: str = "",
        config: DiscoveryConfig | None = None,
    ):
        self.registry = registry
        self.presentations = presentations
        self.view_mode = view_mode
        self.config = config or DiscoveryConfig()

    def discover(self, field: FieldDescriptor, level: int = 0) -> Discovery:
        """
        Discover the entity types reachable through a reference field.

        A malformed branch of the schema is logged and skipped; discovery of
        the remaining branches continues.

        Params:
            field: Reference field to follow
            level: Current nesting level, 0 for the field owning the configuration

        Returns:
            Discovery nodes keyed by target entity type, empty when the field
            cannot be followed
        """
        try:
            if not self.is_traversable(field, level):
                return {}
            return self._discover_target(field, level)
        except SchemaAnomalyError as e:
            logger.warning("Skipping discovery branch at level %d: %s", level, e)
            return {}

    def is_traversable(self, field: FieldDescriptor, level: int) -> bool:
        """Check whether a field is a reference that may be followed at this level."""
        if level >= self.config.max_depth:
            return False
        field_type = self._guard(lambda: field.field_type, "?", "field has no type")
        if field_type not in self.config.reference_field_types:
            return False
        if level == 0:
            return True
        return bool(
            self._guard(
                lambda: field.is_display_configurable(),
                field_type,
                "cannot read display settings",
            )
        )

    def target_bundles(
        self, field: FieldDescriptor, entity_type: str, level: int
    ) -> list[str]:
        """
        Bundles a reference field may point to.

        Params:
            field: Reference field
            entity_type: Target entity type of the field
            level: Current nesting level

        Returns:
            Bundle ids: the field's allow-list when set, otherwise every bundle
            of the target type. A custom view mode at the root always
            enumerates every bundle.
        """
        if not (self.view_mode == self.config.custom_view_mode and level == 0):
            handler_settings = self._settings(field).get("handler_settings") or {}
            if not isinstance(handler_settings, Mapping):
                raise SchemaAnomalyError(entity_type, "handler settings are not a mapping")
            allowed = handler_settings.get("target_bundles")
            if allowed:
                return list(allowed)
        return list(
            self._guard(
                lambda: self.registry.bundle_info(entity_type),
                entity_type,
                "cannot list bundles",
            )
        )

    def _discover_target(self, field: FieldDescriptor, level: int) -> Discovery:
        entity_type = self._settings(field).get("target_type")
        if not entity_type:
            raise SchemaAnomalyError(
                getattr(field, "name", "?"), "reference field has no target type"
            )

        definition = self._guard(
            lambda: self.registry.get_definition(entity_type),
            entity_type,
            "unknown entity type",
        )
        is_fieldable = self._guard(
            lambda: definition.is_fieldable, entity_type, "invalid entity type definition"
        )
        if not is_fieldable:
            logger.debug("Entity type '%s' holds no fields, skipping", entity_type)
            return {}

        bundles = {}
        for bundle in self.target_bundles(field, entity_type, level):
            try:
                bundles[bundle] = self._discover_bundle(
                    definition, entity_type, bundle, level
                )
            except SchemaAnomalyError as e:
                logger.warning("Skipping bundle '%s' of '%s': %s", bundle, entity_type, e)

        cardinality = self._guard(
            lambda: int(field.cardinality), entity_type, "invalid cardinality"
        )
        return {
            entity_type: DiscoveryNode(
                entity_type=definition,
                field=field,
                cardinality=cardinality,
                bundles=bundles,
            )
        }

    def _discover_bundle(
        self, definition: EntityTypeDefinition, entity_type: str, bundle: str, level: int
    ) -> BundleNode:
        fields = {}
        relationships = {}
        for field_name, field_definition in self._field_definitions(entity_type, bundle):
            try:
                formatters = self._guard(
                    lambda: self.presentations.formatters_for(field_definition.field_type),
                    entity_type,
                    f"field '{field_name}' has no type",
                )
            except SchemaAnomalyError as e:
                logger.warning(
                    "Skipping field '%s' of bundle '%s': %s", field_name, bundle, e
                )
                continue
            if not formatters:
                continue
            fields[field_name] = FieldOption(field=field_definition, formatters=formatters)
            nested = self.discover(field_definition, level + 1)
            if nested:
                relationships[field_name] = nested

        return BundleNode(
            bundle=bundle,
            label=self._bundle_label(definition, entity_type, bundle),
            fields=fields,
            relationships=relationships,
        )

    def _field_definitions(
        self, entity_type: str, bundle: str
    ) -> Iterable[tuple[str, FieldDescriptor]]:
        definitions = self._guard(
            lambda: self.registry.field_definitions(entity_type, bundle),
            entity_type,
            f"cannot list fields of bundle '{bundle}'",
        )
        return list(definitions.items())

    def _bundle_label(
        self, definition: EntityTypeDefinition, entity_type: str, bundle: str
    ) -> str | None:
        def load() -> str | None:
            if not definition.bundle_entity_type:
                return None
            loaded = self.registry.load_bundle(definition.bundle_entity_type, bundle)
            return loaded.label if loaded is not None else None

        return self._guard(load, entity_type, f"cannot load bundle '{bundle}'")

    def _settings(self, field: FieldDescriptor):
        return self._guard(lambda: dict(field.settings), "?", "field has no settings")

    @staticmethod
    def _guard(call, type_id: str, reason: str):
        try:
            return call()
        except SchemaAnomalyError:
            raise
        except Exception as e:
            raise SchemaAnomalyError(type_id, f"{reason} ({e})") from e
