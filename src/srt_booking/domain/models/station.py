"""Station domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Station:
    """Represents an SRT station."""

    code: str
    name: str
