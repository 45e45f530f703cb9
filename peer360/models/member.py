"""Team member model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from peer360.database import Base


class MemberRecord(Base):
    """Team members - name/email encrypted, email and access code hashed."""

    __tablename__ = "team_members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    evaluation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("evaluations.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    email_hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    access_code: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True, unique=True
    )
    completed_evaluations: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_evaluations: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_access_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
