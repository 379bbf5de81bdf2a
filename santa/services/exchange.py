from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from loguru import logger

from santa.notify.base import Notifier
from santa.services.assignment import AssignmentError, Matching, solve, verify_matching
from santa.services.dispatch import DEFAULT_CONCURRENCY, DispatchReport, deliver_all
from santa.services.domains import build_domains
from santa.services.exclusions import ExclusionGroup, resolve
from santa.services.journal import DeliveryJournal
from santa.services.registry import Participant
from santa.services.santa_file import SantaConfig


@dataclass(frozen=True)
class ExchangePlan:
    participants: List[Participant]
    forbidden: Dict[Participant, Set[Participant]]
    matching: Matching
    seed: int


def plan_exchange(
    participants: Iterable[Participant],
    groups: Iterable[ExclusionGroup],
    seed: int,
) -> ExchangePlan:
    participants = list(participants)
    if len(participants) < 2:
        raise AssignmentError("At least 2 participants are required.")

    forbidden = resolve(groups)
    ordered = build_domains(participants, forbidden, seed)

    stranded = [p.name for p in ordered if not p.candidates]
    if stranded:
        logger.bind(seed=seed).warning(
            "No possible receivers for: {names}", names=", ".join(stranded)
        )

    matching = solve(ordered)
    if matching is None:
        raise AssignmentError("Could not find a solution with the given parameters!")

    verify_matching(matching, ordered, forbidden)
    logger.bind(seed=seed).info("Assignments generated for {count} participants", count=len(ordered))
    return ExchangePlan(participants=ordered, forbidden=forbidden, matching=matching, seed=seed)


def plan_from_config(config: SantaConfig) -> ExchangePlan:
    return plan_exchange(config.registry, config.groups, config.seed)


async def deliver_exchange(
    plan: ExchangePlan,
    notifier: Notifier,
    concurrency: int = DEFAULT_CONCURRENCY,
    retry_delay: float = 1.0,
    max_attempts: Optional[int] = None,
    journal: Optional[DeliveryJournal] = None,
) -> DispatchReport:
    report = await deliver_all(
        plan.matching,
        notifier,
        concurrency=concurrency,
        retry_delay=retry_delay,
        max_attempts=max_attempts,
        listener=journal,
    )
    if journal is not None:
        journal.finish()
    if report.dead_letters:
        logger.error(
            "Undelivered assignments for: {names}",
            names=", ".join(a.source.name for a in report.dead_letters),
        )
    return report
