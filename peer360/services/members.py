"""Member use cases - onboarding, access-code login, progress."""

import logging
import secrets
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from peer360.domain.errors import AccessCodeConflictError, DomainValidationError, NotFoundError
from peer360.domain.member import Member
from peer360.security.crypto import decrypt, member_key
from peer360.security.hashing import hash_access_code
from peer360.storage.evaluations import get_evaluation_by_id
from peer360.storage.members import (
    access_code_in_use,
    get_member_by_access_code,
    get_member_by_id,
    list_members_by_evaluation,
    save_members,
)
from peer360.storage.members import update_last_access as store_last_access
from peer360.storage.responses import list_responses_by_evaluator

logger = logging.getLogger(__name__)

MIN_MEMBERS = 2
MAX_CODE_ATTEMPTS = 20
MAX_SAVE_ATTEMPTS = 3


@dataclass
class NewMember:
    name: str
    email: str


@dataclass
class MemberDirectory:
    """What a member sees after logging in with an access code."""

    evaluation_id: str
    current_member_id: str
    members: list[Member]


def generate_access_code() -> str:
    """Six-digit numeric code from a CSPRNG."""
    return str(100000 + secrets.randbelow(900000))


async def _unique_access_codes(db: AsyncSession, count: int) -> list[str]:
    codes: list[str] = []
    for _ in range(count):
        for _attempt in range(MAX_CODE_ATTEMPTS):
            code = generate_access_code()
            if code in codes:
                continue
            if await access_code_in_use(db, hash_access_code(code)):
                continue
            codes.append(code)
            break
        else:
            raise DomainValidationError("Could not allocate a unique access code")
    return codes


async def add_members(
    db: AsyncSession, evaluation_id: str, members: list[NewMember], secret: str
) -> list[Member]:
    """
    Add the team to an evaluation.

    Every member evaluates everyone else, so each gets
    ``total_evaluations = len(members) - 1``. The returned members carry the
    plaintext access codes; this is the only time they are available.
    """
    if not evaluation_id or not members or len(members) < MIN_MEMBERS:
        raise DomainValidationError("At least 2 members are required")
    if await get_evaluation_by_id(db, evaluation_id) is None:
        raise NotFoundError("Evaluation not found")

    total = len(members) - 1
    for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
        codes = await _unique_access_codes(db, len(members))
        entities = [
            Member(
                id=None,
                evaluation_id=evaluation_id,
                name=m.name.strip() if m.name else "",
                email=m.email.strip() if m.email else "",
                access_code=code,
                completed_evaluations=0,
                total_evaluations=total,
            )
            for m, code in zip(members, codes)
        ]
        try:
            saved = await save_members(db, entities, secret)
        except AccessCodeConflictError:
            logger.warning(
                "Access code taken concurrently for evaluation %s (attempt %d)",
                evaluation_id,
                attempt,
            )
            continue
        break
    else:
        raise DomainValidationError("Could not allocate unique access codes")
    logger.info("Added %d members to evaluation %s", len(saved), evaluation_id)
    return saved


def reveal_member(member: Member, secret: str) -> Member:
    """Decrypt a sealed member's name and email. Raises DecryptionError on failure."""
    if not member.sealed:
        return member
    key = member_key(member.evaluation_id, secret)
    return replace(
        member,
        name=decrypt(member.name, key),
        email=decrypt(member.email, key),
        sealed=False,
    )


async def list_members(db: AsyncSession, evaluation_id: str, secret: str) -> list[Member]:
    """All members of an evaluation, decrypted."""
    members = await list_members_by_evaluation(db, evaluation_id)
    return [reveal_member(m, secret) for m in members]


async def login_with_access_code(
    db: AsyncSession, access_code: str, secret: str
) -> MemberDirectory:
    """Resolve an access code to its member and the decrypted team."""
    member = await get_member_by_access_code(db, hash_access_code(access_code))
    if member is None:
        raise NotFoundError("Access code not found")
    members = await list_members(db, member.evaluation_id, secret)
    return MemberDirectory(
        evaluation_id=member.evaluation_id,
        current_member_id=member.id,
        members=members,
    )


async def members_with_progress(db: AsyncSession, evaluation_id: str) -> list[Member]:
    """Sealed members - enough for counters and dates, no key needed."""
    return await list_members_by_evaluation(db, evaluation_id)


async def pending_evaluations(db: AsyncSession, evaluation_id: str, member_id: str) -> list[str]:
    """Ids of teammates ``member_id`` has not rated yet."""
    members = await list_members_by_evaluation(db, evaluation_id)
    done = {
        r.evaluated_id for r in await list_responses_by_evaluator(db, evaluation_id, member_id)
    }
    return [m.id for m in members if m.id != member_id and m.id not in done]


async def update_last_access(db: AsyncSession, member_id: str) -> datetime:
    if await get_member_by_id(db, member_id) is None:
        raise NotFoundError("Member not found")
    now = datetime.now(timezone.utc)
    await store_last_access(db, member_id, now)
    return now
