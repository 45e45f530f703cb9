"""Database models."""

from peer360.models.evaluation import EvaluationRecord
from peer360.models.member import MemberRecord
from peer360.models.response import ResponseRecord

__all__ = ["EvaluationRecord", "MemberRecord", "ResponseRecord"]
