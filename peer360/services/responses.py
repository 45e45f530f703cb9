"""Response use cases."""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from peer360.domain.errors import (
    DomainValidationError,
    NotFoundError,
    ResponseAlreadySubmittedError,
)
from peer360.domain.response import Comments, Ratings, Response
from peer360.storage.members import get_member_by_id, increment_completed
from peer360.storage.responses import count_responses as store_count_responses
from peer360.storage.responses import response_exists, save_response

logger = logging.getLogger(__name__)


async def submit_response(
    db: AsyncSession,
    evaluation_id: str,
    evaluator_id: str,
    evaluated_id: str,
    ratings: Ratings,
    comments: Comments,
    secret: str,
) -> Response:
    """
    Record one member's rating of another and bump the evaluator's counter.

    The existence check only short-circuits the common case. Two racing
    submissions can both pass it; the unique constraint rejects the loser
    inside ``save_response`` before its counter is touched.
    """
    response = Response(
        id=None,
        evaluation_id=evaluation_id,
        evaluator_id=evaluator_id,
        evaluated_id=evaluated_id,
        ratings=ratings,
        comments=comments,
        created_at=datetime.now(timezone.utc),
    )

    for member_id in (evaluator_id, evaluated_id):
        member = await get_member_by_id(db, member_id)
        if member is None:
            raise NotFoundError("Member not found")
        if member.evaluation_id != evaluation_id:
            raise DomainValidationError("Member does not belong to this evaluation")

    if await response_exists(db, evaluation_id, evaluator_id, evaluated_id):
        raise ResponseAlreadySubmittedError()

    saved = await save_response(db, response, secret)

    if not await increment_completed(db, evaluator_id):
        logger.warning(
            "Completed counter for member %s not incremented (missing or already complete)",
            evaluator_id,
        )
    return saved


async def count_responses(db: AsyncSession, evaluation_id: str) -> int:
    return await store_count_responses(db, evaluation_id)
