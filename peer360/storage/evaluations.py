"""Repository functions for evaluations."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from peer360.domain.evaluation import Evaluation, EvaluationStatus
from peer360.models import EvaluationRecord
from peer360.security.crypto import DecryptionError, decrypt, encrypt, evaluation_key
from peer360.security.hashing import compare_hashes, hash_email


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _sealed(record: EvaluationRecord) -> Evaluation:
    return Evaluation.sealed_copy(record.id, record.created_at, record.status)


async def save_evaluation(db: AsyncSession, evaluation: Evaluation) -> Evaluation:
    """Persist evaluation with title and token encrypted under the token-derived key."""
    key = evaluation_key(evaluation.manager_token)
    record = EvaluationRecord(
        id=str(uuid4()),
        creator_email=hash_email(evaluation.creator_email),
        creator_token=encrypt(evaluation.manager_token, key),
        title=encrypt(evaluation.title, key),
        created_at=evaluation.created_at or _now(),
        status=evaluation.status.value,
    )
    db.add(record)
    await db.flush()
    return evaluation.with_id(record.id)


async def _get_record(db: AsyncSession, evaluation_id: str) -> EvaluationRecord | None:
    result = await db.execute(
        select(EvaluationRecord).where(EvaluationRecord.id == evaluation_id)
    )
    return result.scalar_one_or_none()


async def get_evaluation_by_id(db: AsyncSession, evaluation_id: str) -> Evaluation | None:
    """Load evaluation without its key - encrypted fields come back empty."""
    record = await _get_record(db, evaluation_id)
    if record is None:
        return None
    return _sealed(record)


async def unlock_evaluation(
    db: AsyncSession, evaluation_id: str, manager_token: str
) -> Evaluation | None:
    """
    Load and decrypt an evaluation with its manager token.

    Raises DecryptionError when the token does not open this evaluation.
    The creator email is only stored hashed, so it stays empty.
    """
    record = await _get_record(db, evaluation_id)
    if record is None:
        return None
    key = evaluation_key(manager_token)
    stored_token = decrypt(record.creator_token, key)
    title = decrypt(record.title, key)
    if stored_token != manager_token:
        raise DecryptionError()
    return Evaluation(
        id=record.id,
        creator_email="",
        title=title,
        manager_token=stored_token,
        created_at=record.created_at,
        status=record.status,
        sealed=True,
    )


async def list_evaluations_by_creator(db: AsyncSession, email_hash: str) -> list[Evaluation]:
    """Find evaluations created by the owner of ``email_hash``."""
    result = await db.execute(
        select(EvaluationRecord)
        .where(EvaluationRecord.creator_email == email_hash)
        .order_by(EvaluationRecord.created_at.desc())
    )
    return [_sealed(r) for r in result.scalars().all()]


async def creator_matches(db: AsyncSession, evaluation_id: str, email: str) -> bool:
    """Check whether ``email`` is the creator of the evaluation."""
    record = await _get_record(db, evaluation_id)
    if record is None:
        return False
    return compare_hashes(record.creator_email, hash_email(email))


async def update_evaluation_status(
    db: AsyncSession, evaluation_id: str, status: EvaluationStatus
) -> None:
    values = {"status": EvaluationStatus(status).value}
    if status is EvaluationStatus.ACTIVE:
        values["activated_at"] = _now()
    await db.execute(
        update(EvaluationRecord).where(EvaluationRecord.id == evaluation_id).values(**values)
    )


async def delete_evaluation(db: AsyncSession, evaluation_id: str) -> None:
    await db.execute(delete(EvaluationRecord).where(EvaluationRecord.id == evaluation_id))
