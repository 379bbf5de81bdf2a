from __future__ import annotations

import random
from typing import Iterable, List, Mapping, Set

from loguru import logger

from santa.services.registry import ConfigurationError, Participant

SEED_MIN = -(2**63)
SEED_MAX = 2**63 - 1
SEED_MASK = 2**64 - 1


def check_seed(seed: int) -> int:
    if not SEED_MIN <= seed <= SEED_MAX:
        raise ConfigurationError(f"Seed {seed} does not fit into a signed 64-bit integer.")
    return seed


def _by_name(participants: Iterable[Participant]) -> List[Participant]:
    return sorted(participants, key=lambda p: p.name)


def make_domain(
    participant: Participant,
    everyone: Iterable[Participant],
    forbidden: Set[Participant],
) -> List[Participant]:
    return _by_name(p for p in everyone if p is not participant and p not in forbidden)


def build_domains(
    participants: Iterable[Participant],
    forbidden: Mapping[Participant, Set[Participant]],
    seed: int,
) -> List[Participant]:
    """Fill ``candidates`` for every participant and return them in canonical order.

    A single generator is advanced across participants in name order, so the
    same seed and the same set of names always yields the same domains no
    matter how the participants were loaded. The seed is taken as its
    unsigned 64-bit value because ``random.Random`` ignores the sign.
    """
    rng = random.Random(check_seed(seed) & SEED_MASK)
    ordered = _by_name(participants)
    for participant in ordered:
        domain = make_domain(participant, ordered, forbidden.get(participant, set()))
        rng.shuffle(domain)
        participant.candidates = domain
        logger.debug(
            "Domain for {name}: {domain}",
            name=participant.name,
            domain=[candidate.name for candidate in domain],
        )
    return ordered
