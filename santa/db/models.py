from __future__ import annotations

import enum

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class RunStatus(str, enum.Enum):
    DISPATCHING = "dispatching"
    COMPLETED = "completed"


class DeliveryRun(Base):
    __tablename__ = "delivery_runs"

    id = Column(Integer, primary_key=True)
    seed = Column(BigInteger, nullable=False)
    participant_count = Column(Integer, nullable=False)
    dry_run = Column(Boolean, default=False, nullable=False)
    status = Column(
        Enum(RunStatus, name="run_status"),
        nullable=False,
        default=RunStatus.DISPATCHING,
        server_default=RunStatus.DISPATCHING.value,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    attempts = relationship("DeliveryAttempt", back_populates="run", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<DeliveryRun(id={self.id}, seed={self.seed}, status={self.status})>"


class DeliveryAttempt(Base):
    __tablename__ = "delivery_attempts"

    id = Column(Integer, primary_key=True)
    run_id = Column(Integer, ForeignKey("delivery_runs.id", ondelete="CASCADE"), nullable=False, index=True)
    giver_name = Column(String, nullable=False)
    receiver_name = Column(String, nullable=False)
    attempt = Column(Integer, nullable=False)
    succeeded = Column(Boolean, nullable=False)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    run = relationship("DeliveryRun", back_populates="attempts")

    def __repr__(self) -> str:
        return (
            "<DeliveryAttempt(run_id={0}, giver={1}, attempt={2}, succeeded={3})>"
        ).format(self.run_id, self.giver_name, self.attempt, self.succeeded)
