from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Sequence, Set

from santa.services.registry import Participant

Matching = Dict[Participant, Participant]


class AssignmentError(RuntimeError):
    pass


def solve(ordered: Sequence[Participant]) -> Optional[Matching]:
    """Find a giver -> receiver matching using each participant's candidate order.

    Returns ``None`` when no matching exists. The search is deterministic for a
    given participant order and candidate order.
    """
    return _backtrack(ordered, 0, set())


def _backtrack(ordered: Sequence[Participant], cur: int, assigned: Set[Participant]) -> Optional[Matching]:
    if cur == len(ordered):
        return {}

    giver = ordered[cur]
    for receiver in giver.candidates:
        if receiver in assigned:
            continue

        assigned.add(receiver)
        matching = _backtrack(ordered, cur + 1, assigned)
        if matching is not None:
            matching[giver] = receiver
            return matching
        assigned.discard(receiver)

    return None


def verify_matching(
    matching: Mapping[Participant, Participant],
    participants: Iterable[Participant],
    forbidden: Mapping[Participant, Set[Participant]],
) -> None:
    everyone = set(participants)
    if set(matching.keys()) != everyone:
        raise AssignmentError("Matching does not cover every participant as a giver.")
    if set(matching.values()) != everyone:
        raise AssignmentError("Matching does not give every participant exactly one gift.")

    for giver, receiver in matching.items():
        if giver is receiver:
            raise AssignmentError(f"{giver} was matched to themselves.")
        if receiver in forbidden.get(giver, set()):
            raise AssignmentError(f"{giver} was matched to excluded participant {receiver}.")
