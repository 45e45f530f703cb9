"""Response entity - one member's rating of another."""

from dataclasses import dataclass, field, replace
from datetime import datetime

from peer360.domain.errors import DomainValidationError

QUESTION_FIELDS = ("question_1", "question_2", "question_3", "question_4")
MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class Ratings:
    question_1: int
    question_2: int
    question_3: int
    question_4: int

    def __post_init__(self) -> None:
        for name in QUESTION_FIELDS:
            value = getattr(self, name)
            # bool is an int subclass; True must not pass as a rating of 1
            if isinstance(value, bool) or not isinstance(value, int):
                raise DomainValidationError("All ratings must be integers between 1 and 5")
            if value < MIN_RATING or value > MAX_RATING:
                raise DomainValidationError("All ratings must be integers between 1 and 5")

    def values(self) -> list[int]:
        return [getattr(self, name) for name in QUESTION_FIELDS]

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in QUESTION_FIELDS}


@dataclass(frozen=True)
class Comments:
    positive: str = ""
    improvement: str = ""


@dataclass
class Response:
    """Sealed responses carry comments as stored (ciphertext or empty)."""

    id: str | None
    evaluation_id: str
    evaluator_id: str
    evaluated_id: str
    ratings: Ratings
    comments: Comments = field(default_factory=Comments)
    created_at: datetime | None = None
    sealed: bool = False

    def __post_init__(self) -> None:
        if not self.evaluation_id or not self.evaluation_id.strip():
            raise DomainValidationError("Evaluation ID is required")
        if not self.evaluator_id or not self.evaluator_id.strip():
            raise DomainValidationError("Evaluator ID is required")
        if not self.evaluated_id or not self.evaluated_id.strip():
            raise DomainValidationError("Evaluated ID is required")
        if self.evaluator_id == self.evaluated_id:
            raise DomainValidationError("Cannot evaluate yourself")

    def with_id(self, id: str) -> "Response":
        return replace(self, id=id)

    def average_rating(self) -> float:
        values = self.ratings.values()
        return sum(values) / len(values)

    def has_positive_comment(self) -> bool:
        return bool(self.comments.positive and self.comments.positive.strip())

    def has_improvement_comment(self) -> bool:
        return bool(self.comments.improvement and self.comments.improvement.strip())
