"""Member entity - a team member taking part in an evaluation."""

import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from peer360.domain.errors import DomainValidationError

ACCESS_CODE_RE = re.compile(r"^\d{6}$")


@dataclass
class Member:
    """
    Team member.

    ``access_code`` is the plaintext code and only set right after creation;
    members loaded from storage carry ``None``. When ``sealed`` is true,
    ``name`` and ``email`` hold ciphertext.
    """

    id: str | None
    evaluation_id: str
    name: str
    email: str
    access_code: str | None
    completed_evaluations: int
    total_evaluations: int
    last_access_date: datetime | None = None
    sealed: bool = False

    def __post_init__(self) -> None:
        if not self.evaluation_id or not self.evaluation_id.strip():
            raise DomainValidationError("Evaluation ID is required")
        if not self.name or not self.name.strip():
            raise DomainValidationError("Member name is required")
        if not self.email or not self.email.strip():
            raise DomainValidationError("Email is required")
        if self.access_code is not None and not ACCESS_CODE_RE.match(self.access_code):
            raise DomainValidationError("Access code must be 6 digits")
        if self.total_evaluations < 0:
            raise DomainValidationError("Total evaluations cannot be negative")
        if self.completed_evaluations < 0:
            raise DomainValidationError("Completed evaluations cannot be negative")
        if self.completed_evaluations > self.total_evaluations:
            raise DomainValidationError("Completed evaluations cannot exceed total evaluations")

    def with_id(self, id: str) -> "Member":
        return replace(self, id=id)

    def increment_completed(self) -> None:
        if self.completed_evaluations >= self.total_evaluations:
            raise DomainValidationError("All evaluations already completed")
        self.completed_evaluations += 1

    def update_last_access(self, now: datetime | None = None) -> None:
        self.last_access_date = now or datetime.now(timezone.utc)

    def has_completed_all(self) -> bool:
        return self.completed_evaluations == self.total_evaluations

    def progress_percentage(self) -> int:
        if self.total_evaluations == 0:
            return 0
        return round(self.completed_evaluations / self.total_evaluations * 100)
