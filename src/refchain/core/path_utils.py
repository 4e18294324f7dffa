"""
Structured path identifiers for reference chains.

A hop is identified by the reference field that was followed plus the
entity type and bundle found at its far end. A path is the ordered sequence
of hops from the root record. Both are value objects internally and only
turn into delimited strings at the configuration boundary:

    field_items:paragraph:text|field_media:media:image
"""

from collections.abc import Iterator

from attrs import field, frozen

from refchain.exceptions import PathFormatError

HOP_DELIMITER = ":"
PATH_DELIMITER = "|"


def _no_delimiters(instance, attribute, value: str) -> None:
    if not isinstance(value, str) or not value:
        raise PathFormatError(str(value), f"{attribute.name} must be a non-empty string")
    # TODO: escape delimiters instead of rejecting names that contain them
    for delimiter in (HOP_DELIMITER, PATH_DELIMITER):
        if delimiter in value:
            raise PathFormatError(
                value, f"{attribute.name} must not contain '{delimiter}'"
            )


@frozen
class FieldRef:
    """One traversable hop: field name, target entity type and target bundle."""

    field_name: str = field(validator=_no_delimiters)
    entity_type: str = field(validator=_no_delimiters)
    bundle: str = field(validator=_no_delimiters)

    @classmethod
    def parse(cls, key: str) -> "FieldRef":
        """
        Parse a `field:entity_type:bundle` hop key.

        Params:
            key: Hop key as stored in configuration

        Returns:
            FieldRef with the three components

        Raises:
            PathFormatError: If the key does not have exactly three parts
        """
        parts = key.split(HOP_DELIMITER) if key else []
        if len(parts) != 3:
            raise PathFormatError(key, "expected 'field:entity_type:bundle'")
        return cls(*parts)

    def to_key(self) -> str:
        return HOP_DELIMITER.join((self.field_name, self.entity_type, self.bundle))

    def __str__(self) -> str:
        return self.to_key()


@frozen
class PathId:
    """Ordered chain of hops from the root record to some depth."""

    hops: tuple[FieldRef, ...] = field(converter=tuple, factory=tuple)

    @classmethod
    def parse(cls, key: str) -> "PathId":
        """
        Parse a `|` separated path key into its hops.

        Params:
            key: Path key as stored in configuration

        Returns:
            PathId with one FieldRef per hop

        Raises:
            PathFormatError: If the key is empty or any hop is malformed

        Examples:
            "items:paragraph:text" -> PathId((FieldRef("items", "paragraph", "text"),))
        """
        if not key:
            raise PathFormatError(key, "must be a non-empty string")
        return cls(FieldRef.parse(part) for part in key.split(PATH_DELIMITER))

    def append(self, hop: FieldRef) -> "PathId":
        """Return a new path extended by one hop."""
        return PathId(self.hops + (hop,))

    def to_key(self) -> str:
        return PATH_DELIMITER.join(hop.to_key() for hop in self.hops)

    @property
    def first(self) -> FieldRef | None:
        return self.hops[0] if self.hops else None

    @property
    def last(self) -> FieldRef | None:
        return self.hops[-1] if self.hops else None

    def __len__(self) -> int:
        return len(self.hops)

    def __iter__(self) -> Iterator[FieldRef]:
        return iter(self.hops)

    def __str__(self) -> str:
        return self.to_key()
