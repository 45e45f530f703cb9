"""Repository functions for team members."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from peer360.domain.errors import AccessCodeConflictError, DomainValidationError
from peer360.domain.member import Member
from peer360.models import MemberRecord
from peer360.security.crypto import encrypt, member_key
from peer360.security.hashing import hash_access_code, hash_email


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_record(member: Member, secret: str) -> MemberRecord:
    if member.access_code is None:
        raise DomainValidationError("Access code is required to store a new member")
    key = member_key(member.evaluation_id, secret)
    return MemberRecord(
        id=str(uuid4()),
        evaluation_id=member.evaluation_id,
        name=encrypt(member.name, key),
        email=encrypt(member.email, key),
        email_hash=hash_email(member.email),
        access_code=hash_access_code(member.access_code),
        completed_evaluations=member.completed_evaluations,
        total_evaluations=member.total_evaluations,
        created_at=_now(),
        last_access_date=member.last_access_date,
    )


def _from_record(record: MemberRecord) -> Member:
    """Rebuild a sealed member - name/email stay encrypted, access code is not recoverable."""
    return Member(
        id=record.id,
        evaluation_id=record.evaluation_id,
        name=record.name,
        email=record.email,
        access_code=None,
        completed_evaluations=record.completed_evaluations or 0,
        total_evaluations=record.total_evaluations or 0,
        last_access_date=record.last_access_date,
        sealed=True,
    )


async def save_member(db: AsyncSession, member: Member, secret: str) -> Member:
    """Persist one member; returns the plaintext member with its new id."""
    record = _to_record(member, secret)
    db.add(record)
    await db.flush()
    return member.with_id(record.id)


async def save_members(db: AsyncSession, members: list[Member], secret: str) -> list[Member]:
    """
    Persist members in a single flush.

    Rows are only written when the surrounding transaction commits, so a
    failure leaves no partial member set behind. The insert runs in a
    savepoint; an access code taken by a concurrent insert rolls back just
    this batch and raises AccessCodeConflictError so the caller can retry.
    """
    records = [_to_record(m, secret) for m in members]
    try:
        async with db.begin_nested():
            db.add_all(records)
            await db.flush()
    except IntegrityError as exc:
        if "access_code" in str(exc.orig):
            raise AccessCodeConflictError() from exc
        raise
    return [m.with_id(r.id) for m, r in zip(members, records)]


async def get_member_by_id(db: AsyncSession, member_id: str) -> Member | None:
    result = await db.execute(select(MemberRecord).where(MemberRecord.id == member_id))
    record = result.scalar_one_or_none()
    return _from_record(record) if record else None


async def get_member_by_access_code(db: AsyncSession, access_code_hash: str) -> Member | None:
    """Find the member holding an access code, by hash."""
    result = await db.execute(
        select(MemberRecord).where(MemberRecord.access_code == access_code_hash).limit(1)
    )
    record = result.scalar_one_or_none()
    return _from_record(record) if record else None


async def access_code_in_use(db: AsyncSession, access_code_hash: str) -> bool:
    """Access codes log in across all evaluations, so uniqueness is global."""
    result = await db.execute(
        select(MemberRecord.id).where(MemberRecord.access_code == access_code_hash).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def list_members_by_evaluation(db: AsyncSession, evaluation_id: str) -> list[Member]:
    result = await db.execute(
        select(MemberRecord)
        .where(MemberRecord.evaluation_id == evaluation_id)
        .order_by(MemberRecord.created_at, MemberRecord.id)
    )
    return [_from_record(r) for r in result.scalars().all()]


async def increment_completed(db: AsyncSession, member_id: str) -> bool:
    """
    Atomically add one to the member's completed counter.

    The guard in the WHERE clause keeps completed <= total at the storage
    level. Returns False when nothing was updated.
    """
    result = await db.execute(
        update(MemberRecord)
        .where(
            MemberRecord.id == member_id,
            MemberRecord.completed_evaluations < MemberRecord.total_evaluations,
        )
        .values(completed_evaluations=MemberRecord.completed_evaluations + 1)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount > 0


async def update_last_access(db: AsyncSession, member_id: str, when: datetime) -> bool:
    result = await db.execute(
        update(MemberRecord)
        .where(MemberRecord.id == member_id)
        .values(last_access_date=when)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount > 0


async def delete_member(db: AsyncSession, member_id: str) -> None:
    await db.execute(delete(MemberRecord).where(MemberRecord.id == member_id))
