from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Set

from santa.services.registry import Participant

ExclusionGroup = FrozenSet[Participant]


def exclusion_group(members: Iterable[Participant]) -> ExclusionGroup:
    return frozenset(members)


def resolve(groups: Iterable[ExclusionGroup]) -> Dict[Participant, Set[Participant]]:
    """Return, for every participant named in a group, everyone it may not draw.

    Overlapping groups are unioned. Participants that appear in no group are
    left out of the mapping; callers treat a missing entry as an empty set.
    """
    forbidden: Dict[Participant, Set[Participant]] = {}
    for group in groups:
        for member in group:
            forbidden.setdefault(member, set()).update(group - {member})
    return forbidden
