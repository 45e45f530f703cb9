"""Consolidated results - per-member rating averages and comments."""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from peer360.domain.member import Member
from peer360.domain.response import QUESTION_FIELDS, Response
from peer360.storage.members import list_members_by_evaluation
from peer360.storage.responses import list_responses_by_evaluated


@dataclass
class Averages:
    question_1: float = 0.0
    question_2: float = 0.0
    question_3: float = 0.0
    question_4: float = 0.0
    overall: float = 0.0


@dataclass
class AggregatedComments:
    positive: list[str] = field(default_factory=list)
    improvement: list[str] = field(default_factory=list)


@dataclass
class MemberResult:
    member: Member
    averages: Averages
    comments: AggregatedComments
    response_count: int


def calculate_averages(responses: list[Response]) -> Averages:
    """Mean of each question (2 decimals) and of the four means. Empty input gives zeros."""
    if not responses:
        return Averages()
    count = len(responses)
    means = [sum(getattr(r.ratings, q) for r in responses) / count for q in QUESTION_FIELDS]
    return Averages(
        *(round(m, 2) for m in means),
        overall=round(sum(means) / len(means), 2),
    )


def aggregate_comments(responses: list[Response]) -> AggregatedComments:
    """Collect non-blank comments, trimmed."""
    comments = AggregatedComments()
    for response in responses:
        if response.has_positive_comment():
            comments.positive.append(response.comments.positive.strip())
        if response.has_improvement_comment():
            comments.improvement.append(response.comments.improvement.strip())
    return comments


async def get_results(db: AsyncSession, evaluation_id: str) -> list[MemberResult]:
    """
    Consolidated result for every member of an evaluation.

    Members and comments come back sealed; decrypting them is up to the caller.
    """
    members = await list_members_by_evaluation(db, evaluation_id)
    results = []
    for member in members:
        responses = await list_responses_by_evaluated(db, evaluation_id, member.id)
        results.append(
            MemberResult(
                member=member,
                averages=calculate_averages(responses),
                comments=aggregate_comments(responses),
                response_count=len(responses),
            )
        )
    return results
