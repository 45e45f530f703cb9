"""Response model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from peer360.database import Base


class ResponseRecord(Base):
    """Responses - one per (evaluation, evaluator, evaluated); comments encrypted."""

    __tablename__ = "responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    evaluation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("evaluations.id"), nullable=False, index=True
    )
    evaluator_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("team_members.id"), nullable=False
    )
    evaluated_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("team_members.id"), nullable=False
    )
    question_1: Mapped[int] = mapped_column(Integer, nullable=False)
    question_2: Mapped[int] = mapped_column(Integer, nullable=False)
    question_3: Mapped[int] = mapped_column(Integer, nullable=False)
    question_4: Mapped[int] = mapped_column(Integer, nullable=False)
    positive_comments: Mapped[str] = mapped_column(Text, nullable=False, default="")
    improvement_comments: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "evaluation_id",
            "evaluator_id",
            "evaluated_id",
            name="uq_responses_evaluation_pair",
        ),
    )
