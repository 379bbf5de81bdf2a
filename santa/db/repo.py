from __future__ import annotations

import datetime
from typing import List, Optional

from sqlalchemy import select

from santa.db.models import DeliveryAttempt, DeliveryRun, RunStatus


def create_run(session, seed: int, participant_count: int, dry_run: bool = False) -> DeliveryRun:
    run = DeliveryRun(seed=seed, participant_count=participant_count, dry_run=dry_run)
    session.add(run)
    session.flush()
    return run


def get_run(session, run_id: int) -> Optional[DeliveryRun]:
    return session.scalar(select(DeliveryRun).where(DeliveryRun.id == run_id))


def complete_run(session, run: DeliveryRun) -> None:
    run.status = RunStatus.COMPLETED
    run.completed_at = datetime.datetime.now(datetime.timezone.utc)


def record_attempt(
    session,
    run_id: int,
    giver_name: str,
    receiver_name: str,
    attempt: int,
    error: Optional[str],
) -> DeliveryAttempt:
    row = DeliveryAttempt(
        run_id=run_id,
        giver_name=giver_name,
        receiver_name=receiver_name,
        attempt=attempt,
        succeeded=error is None,
        error=error,
    )
    session.add(row)
    session.flush()
    return row


def list_attempts(session, run_id: int) -> List[DeliveryAttempt]:
    return list(
        session.scalars(
            select(DeliveryAttempt)
            .where(DeliveryAttempt.run_id == run_id)
            .order_by(DeliveryAttempt.id)
        ).all()
    )


def delivered_givers(session, run_id: int) -> List[str]:
    return list(
        session.scalars(
            select(DeliveryAttempt.giver_name).where(
                DeliveryAttempt.run_id == run_id,
                DeliveryAttempt.succeeded.is_(True),
            )
        ).all()
    )
