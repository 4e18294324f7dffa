"""
Configuration for reference chain discovery and rendering.

`ReferenceSettings` is the persisted shape saved by the configuration
surface. `DiscoveryConfig` holds the tunables of the schema walker.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from refchain.exceptions import ConfigurationIncompleteError
from refchain.selection.rule import SelectionRule

REFERENCE_FIELD_TYPES = ("entity_reference", "entity_reference_revisions")

CUSTOM_VIEW_MODE = "_custom"


@dataclass(frozen=True)
class DiscoveryConfig:
    """Tunables for the schema walker.

    Examples:
        # Defaults: five hops, entity reference field types
        config = DiscoveryConfig()

        # Shallower discovery for large schemas
        config = DiscoveryConfig(max_depth=3)
    """

    max_depth: int = 5
    reference_field_types: tuple[str, ...] = REFERENCE_FIELD_TYPES
    custom_view_mode: str = CUSTOM_VIEW_MODE


class ReferenceSettings(BaseModel):
    """Saved configuration of one reference chain display.

    Params:
        relationship: Path key of the configured chain
        view_mode: View mode for whole leaf records; empty selects the field branch
        field: Leaf field name, used when view_mode is empty
        cardinality: One selection rule per hop
        formatter: Formatter id for the leaf field
        settings: Formatter specific settings
    """

    model_config = ConfigDict(extra="ignore")

    relationship: str = ""
    view_mode: str = ""
    field: str = ""
    cardinality: list[SelectionRule] = Field(default_factory=list)
    formatter: str = ""
    settings: dict[str, Any] = Field(default_factory=dict)

    @field_validator("relationship", "view_mode", "field", "formatter", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("settings", mode="before")
    @classmethod
    def _none_as_empty_settings(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("cardinality", mode="before")
    @classmethod
    def _cardinality_by_delta(cls, value: Any) -> Any:
        # Form submissions key hop rules by delta ({"0": {...}, "1": {...}})
        if value is None:
            return []
        if isinstance(value, Mapping):
            return [value[key] for key in sorted(value, key=int)]
        return value

    @classmethod
    def from_dict(cls, config: Mapping[str, Any] | None = None) -> ReferenceSettings:
        """Create from a mapping, falling back to defaults for missing keys."""
        return cls.model_validate(dict(config or {}))

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> ReferenceSettings:
        """Create from a YAML file.

        Example YAML:
            relationship: "field_items:paragraph:text"
            field: "field_body"
            formatter: "text_default"
            cardinality:
              - mode: first
        """
        import yaml

        path = Path(yaml_path)
        with path.open() as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config)

    def missing(self) -> list[str]:
        """Names of the settings that keep this configuration from rendering."""
        missing = []
        if not self.relationship:
            missing.append("relationship")
        if not self.view_mode and not (self.field and self.formatter):
            if not self.field:
                missing.append("field")
            if not self.formatter:
                missing.append("formatter")
        return missing

    def is_complete(self) -> bool:
        return not self.missing()

    def require_complete(self) -> None:
        """
        Raises:
            ConfigurationIncompleteError: If the configuration cannot render
        """
        missing = self.missing()
        if missing:
            raise ConfigurationIncompleteError(missing)

    def rule_for(self, delta: int) -> SelectionRule:
        """Selection rule of one hop, `all` when none was saved."""
        if 0 <= delta < len(self.cardinality):
            return self.cardinality[delta]
        return SelectionRule()

    def rules_for(self, depth: int) -> tuple[SelectionRule, ...]:
        return tuple(self.rule_for(delta) for delta in range(depth))
