"""
Resolution of configured reference chains against live records.

The resolver walks the record graph one hop at a time. At every hop each
parent record contributes its own selected slice of children, so a `first`
rule yields one child per parent rather than one child overall.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from refchain.config import ReferenceSettings
from refchain.core.path_utils import FieldRef, PathId
from refchain.core.types import SettingsDict
from refchain.schema.interfaces import Record
from refchain.selection.rule import SelectionRule, select

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedPath:
    """
    A path decomposed into hops, with one selection rule per hop and the
    presentation applied to the leaf records.

    Params:
        path: Hops from the root record to the leaf records
        rules: Selection rule per hop; missing rules select everything
        view_mode: View mode for whole leaf records, empty for the field branch
        field: Leaf field rendered with `formatter` when view_mode is empty
        formatter: Formatter id for the leaf field
        settings: Formatter settings
    """

    path: PathId
    rules: tuple[SelectionRule, ...] = ()
    view_mode: str = ""
    field: str = ""
    formatter: str = ""
    settings: SettingsDict = dataclass_field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: ReferenceSettings) -> "ResolvedPath":
        """
        Build from saved settings.

        Raises:
            PathFormatError: If the saved relationship is not a valid path key
        """
        path = PathId.parse(settings.relationship)
        return cls(
            path=path,
            rules=settings.rules_for(len(path)),
            view_mode=settings.view_mode,
            field=settings.field,
            formatter=settings.formatter,
            settings=dict(settings.settings),
        )

    @property
    def renders_records(self) -> bool:
        """Whether leaf records are rendered whole rather than through one field."""
        return bool(self.view_mode)

    def rule_for(self, delta: int) -> SelectionRule:
        if delta < len(self.rules):
            return self.rules[delta]
        return SelectionRule()

    def hops(self) -> list[tuple[FieldRef, SelectionRule]]:
        return [(hop, self.rule_for(delta)) for delta, hop in enumerate(self.path)]


class PathResolver:
    """Walks a resolved path from root records to leaf records."""

    def resolve(self, roots: Sequence[Record], path: ResolvedPath) -> list[Record]:
        """
        Resolve a path against root records.

        Params:
            roots: Ordered root records
            path: Path with per-hop selection rules

        Returns:
            Leaf records ordered by parent, then by child position. Empty when
            any hop finds no children.
        """
        current = list(roots)
        for delta, (hop, rule) in enumerate(path.hops()):
            if not current:
                logger.debug("No records left before hop %d (%s)", delta, hop)
                break
            next_level = []
            for record in current:
                next_level.extend(select(self.children(record, hop), rule))
            current = next_level
        return current

    @staticmethod
    def children(record: Record, hop: FieldRef) -> list[Record]:
        """
        Referenced records of one parent that match the hop's type and bundle.

        Params:
            record: Parent record
            hop: Field to follow and the entity type/bundle to keep

        Returns:
            Matching children in field order, empty when the record lacks the field
        """
        if not record.has_field(hop.field_name):
            return []
        # The full child list is materialized so that `last` sees the real count
        return [
            child
            for child in record.referenced(hop.field_name)
            if child.entity_type == hop.entity_type and child.bundle == hop.bundle
        ]
