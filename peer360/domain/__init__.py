"""Domain entities."""

from peer360.domain.evaluation import Evaluation, EvaluationStatus
from peer360.domain.member import Member
from peer360.domain.response import Comments, Ratings, Response

__all__ = ["Evaluation", "EvaluationStatus", "Member", "Response", "Ratings", "Comments"]
