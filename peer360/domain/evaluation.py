"""Evaluation entity - one 360° review campaign."""

import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from peer360.domain.errors import DomainValidationError, InvalidTransitionError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


class EvaluationStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass
class Evaluation:
    """
    Evaluation campaign.

    A ``sealed`` evaluation was loaded from storage and skips field
    validation. The creator email is only stored hashed, so it is always an
    empty placeholder; title and token are placeholders too unless the
    evaluation was unlocked with its manager token.
    """

    id: str | None
    creator_email: str
    title: str
    manager_token: str
    created_at: datetime
    status: EvaluationStatus = EvaluationStatus.DRAFT
    sealed: bool = False

    def __post_init__(self) -> None:
        try:
            self.status = EvaluationStatus(self.status)
        except ValueError:
            raise DomainValidationError(f"Invalid evaluation status: {self.status}") from None
        if self.sealed:
            return
        if not self.creator_email or not EMAIL_RE.match(self.creator_email):
            raise DomainValidationError("Valid creator email is required")
        if not self.title or not self.title.strip():
            raise DomainValidationError("Evaluation title is required")
        if not self.manager_token or not UUID_RE.match(self.manager_token):
            raise DomainValidationError("Valid manager token (UUID) is required")

    @classmethod
    def sealed_copy(
        cls,
        id: str,
        created_at: datetime | None,
        status: EvaluationStatus | str,
    ) -> "Evaluation":
        return cls(
            id=id,
            creator_email="",
            title="",
            manager_token="",
            created_at=created_at or datetime.now(timezone.utc),
            status=status,
            sealed=True,
        )

    def with_id(self, id: str) -> "Evaluation":
        return replace(self, id=id)

    def activate(self) -> None:
        if self.status is not EvaluationStatus.DRAFT:
            raise InvalidTransitionError("Only draft evaluations can be activated")
        self.status = EvaluationStatus.ACTIVE

    def complete(self) -> None:
        if self.status is not EvaluationStatus.ACTIVE:
            raise InvalidTransitionError("Only active evaluations can be completed")
        self.status = EvaluationStatus.COMPLETED

    def is_draft(self) -> bool:
        return self.status is EvaluationStatus.DRAFT

    def is_active(self) -> bool:
        return self.status is EvaluationStatus.ACTIVE

    def is_completed(self) -> bool:
        return self.status is EvaluationStatus.COMPLETED
