"""Evaluation model."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from peer360.database import Base


class EvaluationRecord(Base):
    """Evaluations - creator email hashed, title and token encrypted under the token."""

    __tablename__ = "evaluations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    creator_email: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    creator_token: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="draft"
    )  # draft|active|completed
    activated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
