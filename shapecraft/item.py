"""A single cell of a shape: a type character and a colour character."""

from __future__ import annotations

from dataclasses import dataclass

EMPTY = "-"
CRYSTAL = "c"
PIN = "P"


@dataclass(frozen=True)
class Item:
    """One quadrant of one layer. Types: '-' empty, 'c' crystal, 'P' pin, others solid."""

    type: str = EMPTY
    color: str = EMPTY

    def is_entity(self) -> bool:
        """True for solid parts, i.e. anything that is not empty, crystal or pin."""
        return self.type not in (EMPTY, CRYSTAL, PIN)

    def __str__(self) -> str:
        return self.type + self.color