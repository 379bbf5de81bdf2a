from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List


class ConfigurationError(ValueError):
    pass


@dataclass(eq=False)
class Participant:
    name: str
    address: str
    candidates: List[Participant] = field(default_factory=list, repr=False)

    def __str__(self) -> str:
        return self.name


class ParticipantRegistry:
    """Participants keyed by their exact, case-sensitive name.

    Insertion order is kept for display only. The domain builder fixes the
    canonical order by sorting on name.
    """

    def __init__(self) -> None:
        self._by_name: Dict[str, Participant] = {}

    def add(self, name: str, address: str) -> Participant:
        if not name:
            raise ConfigurationError("Participant name must not be empty.")
        if name in self._by_name:
            raise ConfigurationError(f"Duplicate participant name: {name}")
        participant = Participant(name=name, address=address)
        self._by_name[name] = participant
        return participant

    def get(self, name: str) -> Participant:
        try:
            return self._by_name[name]
        except KeyError:
            raise ConfigurationError(f"Unknown participant: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Participant]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)
