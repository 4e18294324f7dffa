"""
Per-hop selection rules.

A selection rule maps the ordered children found under one parent record
into the subset that is descended into. Counts are only known at traversal
time, so `last` is computed from the actual candidate list.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class SelectionMode(str, Enum):
    """How many records are taken at one hop."""

    ALL = "all"
    FIRST = "first"
    LAST = "last"
    ADVANCED = "advanced"


SELECTION_MODE_LABELS = {
    SelectionMode.ALL: "All",
    SelectionMode.FIRST: "First entity",
    SelectionMode.LAST: "Last entity",
    SelectionMode.ADVANCED: "Advanced",
}


def selection_modes() -> dict[str, str]:
    """Selection mode options keyed by their stored value."""
    return {mode.value: label for mode, label in SELECTION_MODE_LABELS.items()}


class SelectionRule(BaseModel):
    """Selection configuration of one hop.

    `amount` and `offset` only apply in advanced mode; first and last use a
    fixed window. `reverse` is stored but does not change selection.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    mode: SelectionMode = SelectionMode.ALL
    amount: int = Field(default=1, ge=1)
    offset: int = Field(default=0, ge=0)
    reverse: bool = False

    @model_validator(mode="before")
    @classmethod
    def _blank_as_default(cls, values: Any) -> Any:
        # Hidden form inputs outside advanced mode are saved as "" or None
        if isinstance(values, dict):
            defaults = {"amount": 1, "offset": 0, "reverse": False}
            values = {
                key: defaults[key] if key in defaults and value in ("", None) else value
                for key, value in values.items()
            }
        return values

    def window(self, count: int) -> tuple[int, int] | None:
        """
        Effective (amount, offset) for a hop with `count` candidates.

        Params:
            count: Number of candidates found under one parent

        Returns:
            (amount, offset) pair, or None when nothing is filtered
        """
        if self.mode is SelectionMode.FIRST:
            return 1, 0
        if self.mode is SelectionMode.LAST:
            return 1, count - 1
        if self.mode is SelectionMode.ADVANCED:
            return self.amount, self.offset
        return None


def select(candidates: Sequence[T], rule: SelectionRule) -> list[T]:
    """
    Apply a selection rule to the ordered candidates of one parent.

    Candidates at index >= offset are taken in their original order until
    `amount` of them have been collected. Fewer candidates than requested
    simply yield fewer results.

    Params:
        candidates: Ordered child records of one parent
        rule: Selection rule of the hop

    Returns:
        Selected candidates in original order

    Examples:
        [A, B, C, D, E], first -> [A]
        [A, B, C, D, E], last -> [E]
        [A, B, C, D, E], advanced amount=2 offset=1 -> [B, C]
    """
    window = rule.window(len(candidates))
    if window is None:
        return list(candidates)

    amount, offset = window
    selected = []
    for delta, candidate in enumerate(candidates):
        if len(selected) >= amount:
            break
        if delta >= offset:
            selected.append(candidate)
    return selected


@dataclass(frozen=True)
class HopSelectionOptions:
    """Bounds and defaults offered for the selection rule of one hop."""

    label: str
    default: SelectionRule
    amount_min: int = 1
    amount_max: int | None = None
    offset_min: int = 0

    @classmethod
    def for_hop(
        cls, label: str, cardinality: int, saved: SelectionRule | None = None
    ) -> "HopSelectionOptions":
        """Build options for one hop, capping amount by declared cardinality."""
        return cls(
            label=label,
            default=saved or SelectionRule(),
            amount_max=cardinality if cardinality > 0 else None,
        )
