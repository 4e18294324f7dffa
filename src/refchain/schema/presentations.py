"""
Request-scoped view of the host presentation registry.
"""

from collections.abc import Mapping

from refchain.schema.interfaces import PresentationDescriptor, PresentationRegistry


class PresentationCatalog:
    """Caches formatter definitions and answers compatibility lookups.

    Definitions are read from the registry once, on first use. Build a new
    catalog for each configuration or render request.
    """

    def __init__(self, registry: PresentationRegistry):
        self.registry = registry
        self._definitions: Mapping[str, PresentationDescriptor] | None = None

    @property
    def definitions(self) -> Mapping[str, PresentationDescriptor]:
        if self._definitions is None:
            self._definitions = dict(self.registry.definitions())
        return self._definitions

    def formatters_for(self, field_type: str) -> dict[str, PresentationDescriptor]:
        """
        Get formatters compatible with a field type.

        Params:
            field_type: Field type id, e.g. "string"

        Returns:
            Compatible formatter definitions keyed by formatter id, in registry order
        """
        return {
            formatter_id: definition
            for formatter_id, definition in self.definitions.items()
            if definition.supports(field_type)
        }
