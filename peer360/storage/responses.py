"""Repository functions for responses."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from peer360.domain.errors import ResponseAlreadySubmittedError
from peer360.domain.response import Comments, Ratings, Response
from peer360.models import ResponseRecord
from peer360.security.crypto import encrypt, member_key


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encrypt_comment(text: str, key: bytes) -> str:
    text = (text or "").strip()
    return encrypt(text, key) if text else ""


def _from_record(record: ResponseRecord) -> Response:
    return Response(
        id=record.id,
        evaluation_id=record.evaluation_id,
        evaluator_id=record.evaluator_id,
        evaluated_id=record.evaluated_id,
        ratings=Ratings(
            question_1=record.question_1,
            question_2=record.question_2,
            question_3=record.question_3,
            question_4=record.question_4,
        ),
        comments=Comments(
            positive=record.positive_comments or "",
            improvement=record.improvement_comments or "",
        ),
        created_at=record.created_at,
        sealed=True,
    )


async def save_response(db: AsyncSession, response: Response, secret: str) -> Response:
    """
    Insert a response with its comments encrypted.

    The unique constraint on (evaluation_id, evaluator_id, evaluated_id)
    turns a duplicate into ResponseAlreadySubmittedError; the session must
    then be rolled back by the caller.
    """
    key = member_key(response.evaluation_id, secret)
    record = ResponseRecord(
        id=str(uuid4()),
        evaluation_id=response.evaluation_id,
        evaluator_id=response.evaluator_id,
        evaluated_id=response.evaluated_id,
        question_1=response.ratings.question_1,
        question_2=response.ratings.question_2,
        question_3=response.ratings.question_3,
        question_4=response.ratings.question_4,
        positive_comments=_encrypt_comment(response.comments.positive, key),
        improvement_comments=_encrypt_comment(response.comments.improvement, key),
        created_at=response.created_at or _now(),
    )
    db.add(record)
    try:
        await db.flush()
    except IntegrityError as exc:
        if "uq_responses_evaluation_pair" in str(exc.orig) or "UNIQUE" in str(exc.orig):
            raise ResponseAlreadySubmittedError() from exc
        raise
    return response.with_id(record.id)


async def get_response_by_id(db: AsyncSession, response_id: str) -> Response | None:
    result = await db.execute(select(ResponseRecord).where(ResponseRecord.id == response_id))
    record = result.scalar_one_or_none()
    return _from_record(record) if record else None


async def list_responses_by_evaluation(db: AsyncSession, evaluation_id: str) -> list[Response]:
    result = await db.execute(
        select(ResponseRecord).where(ResponseRecord.evaluation_id == evaluation_id)
    )
    return [_from_record(r) for r in result.scalars().all()]


async def list_responses_by_evaluator(
    db: AsyncSession, evaluation_id: str, evaluator_id: str
) -> list[Response]:
    """Responses written by one member."""
    result = await db.execute(
        select(ResponseRecord).where(
            ResponseRecord.evaluation_id == evaluation_id,
            ResponseRecord.evaluator_id == evaluator_id,
        )
    )
    return [_from_record(r) for r in result.scalars().all()]


async def list_responses_by_evaluated(
    db: AsyncSession, evaluation_id: str, evaluated_id: str
) -> list[Response]:
    """Responses naming one member as the evaluated party."""
    result = await db.execute(
        select(ResponseRecord)
        .where(
            ResponseRecord.evaluation_id == evaluation_id,
            ResponseRecord.evaluated_id == evaluated_id,
        )
        .order_by(ResponseRecord.created_at)
    )
    return [_from_record(r) for r in result.scalars().all()]


async def count_responses(db: AsyncSession, evaluation_id: str) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(ResponseRecord)
        .where(ResponseRecord.evaluation_id == evaluation_id)
    )
    return result.scalar_one()


async def response_exists(
    db: AsyncSession, evaluation_id: str, evaluator_id: str, evaluated_id: str
) -> bool:
    result = await db.execute(
        select(ResponseRecord.id)
        .where(
            ResponseRecord.evaluation_id == evaluation_id,
            ResponseRecord.evaluator_id == evaluator_id,
            ResponseRecord.evaluated_id == evaluated_id,
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None
