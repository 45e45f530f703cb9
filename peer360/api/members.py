"""Member callables - onboarding, access-code login, progress."""

import logging

from fastapi import APIRouter, Request

from peer360.api.deps import DbDep, RateLimiterDep, SettingsDep
from peer360.api.errors import CallableError, to_callable_error
from peer360.domain.errors import NotFoundError
from peer360.domain.member import Member
from peer360.schemas.base import SuccessResponse
from peer360.schemas.evaluation import EvaluationIdRequest
from peer360.schemas.member import (
    AccessCodeLoginResponse,
    AccessCodeRequest,
    AddMembersEncryptedResponse,
    AddMembersRequest,
    AddMembersResponse,
    CreatedMemberDetailOut,
    CreatedMemberOut,
    MemberIdRequest,
    MemberOut,
    MemberProgressOut,
    MembersProgressResponse,
    MembersResponse,
    PendingEvaluationsRequest,
    PendingEvaluationsResponse,
)
from peer360.services.members import (
    NewMember,
    add_members,
    list_members,
    login_with_access_code,
    members_with_progress,
    pending_evaluations,
    update_last_access,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ACCESS_CODE_LENGTH = 6


def _member_out(m: Member) -> MemberOut:
    return MemberOut(
        id=m.id,
        evaluation_id=m.evaluation_id,
        name=m.name,
        email=m.email,
        completed_evaluations=m.completed_evaluations,
        total_evaluations=m.total_evaluations,
        last_access_date=m.last_access_date,
    )


async def _add(body: AddMembersRequest, db, secret: str, function_name: str) -> list[Member]:
    try:
        return await add_members(
            db,
            body.evaluation_id,
            [NewMember(name=m.name, email=m.email) for m in body.members],
            secret,
        )
    except Exception as exc:
        raise to_callable_error(function_name, exc, "Error adding members") from exc


@router.post("/addMembers", response_model=AddMembersResponse)
async def add_members_callable(body: AddMembersRequest, db: DbDep, config: SettingsDep):
    """Add members; access codes are returned in plaintext this one time."""
    members = await _add(body, db, config.encryption_key, "addMembers")
    return AddMembersResponse(
        members=[
            CreatedMemberOut(id=m.id, name=m.name, email=m.email, access_code=m.access_code)
            for m in members
        ]
    )


@router.post("/addMembersEncrypted", response_model=AddMembersEncryptedResponse)
async def add_members_encrypted_callable(body: AddMembersRequest, db: DbDep, config: SettingsDep):
    members = await _add(body, db, config.encryption_key, "addMembersEncrypted")
    return AddMembersEncryptedResponse(
        members=[
            CreatedMemberDetailOut(
                id=m.id,
                evaluation_id=m.evaluation_id,
                name=m.name,
                email=m.email,
                access_code=m.access_code,
                completed_evaluations=m.completed_evaluations,
                total_evaluations=m.total_evaluations,
            )
            for m in members
        ]
    )


@router.post("/getMembersEncrypted", response_model=MembersResponse)
async def get_members_encrypted_callable(body: EvaluationIdRequest, db: DbDep, config: SettingsDep):
    """Members of an evaluation, decrypted. Any decryption failure fails the call."""
    try:
        members = await list_members(db, body.evaluation_id, config.encryption_key)
    except Exception as exc:
        raise to_callable_error("getMembersEncrypted", exc, "Error loading members") from exc
    return MembersResponse(members=[_member_out(m) for m in members])


@router.post("/getMembersByAccessCodeEncrypted", response_model=AccessCodeLoginResponse)
async def get_members_by_access_code_callable(
    body: AccessCodeRequest,
    request: Request,
    db: DbDep,
    config: SettingsDep,
    limiter: RateLimiterDep,
):
    """Member login: resolve an access code to the caller and their team."""
    if len(body.access_code) != ACCESS_CODE_LENGTH:
        raise CallableError("invalid-argument", "Invalid access code")

    client = request.client.host if request.client else "unknown"
    # Counted before the lookup so in-flight requests cannot outrun the limit
    status = limiter.hit(client)
    if not status.allowed:
        raise CallableError(
            "resource-exhausted",
            f"Too many attempts. Try again in {int(status.retry_after_seconds or 0)} seconds",
        )

    try:
        directory = await login_with_access_code(db, body.access_code, config.encryption_key)
    except NotFoundError:
        raise CallableError("not-found", "Invalid access code") from None
    except Exception as exc:
        raise to_callable_error(
            "getMembersByAccessCodeEncrypted", exc, "Error loading members"
        ) from exc

    limiter.reset(client)
    return AccessCodeLoginResponse(
        evaluation_id=directory.evaluation_id,
        current_member_id=directory.current_member_id,
        members=[_member_out(m) for m in directory.members],
    )


@router.post("/getMembersWithProgress", response_model=MembersProgressResponse)
async def get_members_with_progress_callable(body: EvaluationIdRequest, db: DbDep):
    try:
        members = await members_with_progress(db, body.evaluation_id)
    except Exception as exc:
        raise to_callable_error("getMembersWithProgress", exc, "Error loading members") from exc
    return MembersProgressResponse(
        members=[
            MemberProgressOut(
                id=m.id,
                completed_evaluations=m.completed_evaluations,
                total_evaluations=m.total_evaluations,
                progress=m.progress_percentage(),
                last_access_date=m.last_access_date,
            )
            for m in members
        ]
    )


@router.post("/getPendingEvaluations", response_model=PendingEvaluationsResponse)
async def get_pending_evaluations_callable(body: PendingEvaluationsRequest, db: DbDep):
    try:
        pending = await pending_evaluations(db, body.evaluation_id, body.member_id)
    except Exception as exc:
        raise to_callable_error("getPendingEvaluations", exc, "Error loading pending") from exc
    return PendingEvaluationsResponse(pending_ids=pending)


@router.post("/updateLastAccess", response_model=SuccessResponse)
async def update_last_access_callable(body: MemberIdRequest, db: DbDep):
    try:
        await update_last_access(db, body.member_id)
    except Exception as exc:
        raise to_callable_error("updateLastAccess", exc, "Error updating access") from exc
    return SuccessResponse()
