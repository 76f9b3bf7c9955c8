from __future__ import annotations

from dataclasses import dataclass

POINTS = "points"


@dataclass
class ResourceDef:
    """Static definition of a tier resource (a crafted intermediate good)."""

    id: str
    display_name: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.id
