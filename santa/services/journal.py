from __future__ import annotations

from typing import Optional

from loguru import logger

from santa.db import get_session
from santa.db import repo
from santa.services.dispatch import Assignment


def describe_error(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class DeliveryJournal:
    """Writes every delivery attempt of one run to the database."""

    def __init__(self, run_id: int) -> None:
        self.run_id = run_id

    @classmethod
    def start(cls, seed: int, participant_count: int, dry_run: bool = False) -> DeliveryJournal:
        with get_session() as session:
            run = repo.create_run(session, seed, participant_count, dry_run=dry_run)
            run_id = run.id
        logger.bind(run_id=run_id, seed=seed).info("Delivery run {run_id} started", run_id=run_id)
        return cls(run_id)

    def record(self, assignment: Assignment, attempt: int, error: Optional[BaseException]) -> None:
        with get_session() as session:
            repo.record_attempt(
                session,
                self.run_id,
                assignment.source.name,
                assignment.destination.name,
                attempt,
                None if error is None else describe_error(error),
            )

    def finish(self) -> int:
        with get_session() as session:
            run = repo.get_run(session, self.run_id)
            if run is None:
                raise RuntimeError(f"Delivery run {self.run_id} disappeared from the journal.")
            repo.complete_run(session, run)
            delivered = len(repo.delivered_givers(session, self.run_id))
        logger.bind(run_id=self.run_id).info(
            "Delivery run {run_id} completed with {delivered} deliveries",
            run_id=self.run_id,
            delivered=delivered,
        )
        return delivered
