"""Evaluation callables - manager side."""

import logging

from fastapi import APIRouter

from peer360.api.deps import DbDep, SettingsDep
from peer360.api.errors import to_callable_error
from peer360.schemas.evaluation import (
    Averages,
    CommentsOut,
    CreateEvaluationRequest,
    CreateEvaluationResponse,
    EvaluationIdRequest,
    EvaluationOut,
    GetEvaluationRequest,
    GetManagerEvaluationRequest,
    GetResultsResponse,
    MemberResultOut,
    StatusChangeResponse,
    ValidateManagerAccessRequest,
    ValidateManagerAccessResponse,
)
from peer360.schemas.member import MemberOut
from peer360.security.crypto import DecryptionError, decrypt, member_key
from peer360.services.evaluations import (
    activate_evaluation,
    complete_evaluation,
    create_evaluation,
    find_manager_evaluation,
    get_evaluation,
    validate_manager_access,
)
from peer360.services.results import get_results

logger = logging.getLogger(__name__)

router = APIRouter()


def _decrypt_or_raw(value: str, key: bytes, what: str, owner_id: str) -> str:
    """Decrypt one field; on failure log and hand back the stored ciphertext."""
    if not value:
        return value
    try:
        return decrypt(value, key)
    except DecryptionError:
        logger.warning("Could not decrypt %s for %s; returning stored value", what, owner_id)
        return value


@router.post("/createEvaluation", response_model=CreateEvaluationResponse)
async def create_evaluation_callable(body: CreateEvaluationRequest, db: DbDep):
    """Create a draft evaluation and return its manager token (shown only once)."""
    try:
        created = await create_evaluation(db, body.creator_email, body.title)
    except Exception as exc:
        raise to_callable_error("createEvaluation", exc, "Error creating evaluation") from exc
    return CreateEvaluationResponse(
        evaluation_id=created.evaluation.id,
        manager_token=created.manager_token,
        title=created.evaluation.title,
    )


@router.post("/getEvaluation", response_model=EvaluationOut)
async def get_evaluation_callable(body: GetEvaluationRequest, db: DbDep):
    """Decrypted evaluation for the holder of its manager token."""
    try:
        evaluation = await get_evaluation(db, body.evaluation_id, body.manager_token)
    except Exception as exc:
        raise to_callable_error("getEvaluation", exc, "Error loading evaluation") from exc
    return EvaluationOut(
        id=evaluation.id,
        title=evaluation.title,
        created_at=evaluation.created_at,
        status=evaluation.status.value,
    )


@router.post("/getManagerEvaluation", response_model=EvaluationOut)
async def get_manager_evaluation_callable(body: GetManagerEvaluationRequest, db: DbDep):
    """Manager login by creator email and manager token."""
    try:
        evaluation = await find_manager_evaluation(db, body.email, body.manager_token)
    except Exception as exc:
        raise to_callable_error("getManagerEvaluation", exc, "Error loading evaluation") from exc
    return EvaluationOut(
        id=evaluation.id,
        title=evaluation.title,
        created_at=evaluation.created_at,
        status=evaluation.status.value,
    )


@router.post("/activateEvaluation", response_model=StatusChangeResponse)
async def activate_evaluation_callable(body: EvaluationIdRequest, db: DbDep):
    try:
        evaluation = await activate_evaluation(db, body.evaluation_id)
    except Exception as exc:
        raise to_callable_error("activateEvaluation", exc, "Error activating evaluation") from exc
    return StatusChangeResponse(status=evaluation.status.value)


@router.post("/completeEvaluation", response_model=StatusChangeResponse)
async def complete_evaluation_callable(body: EvaluationIdRequest, db: DbDep):
    try:
        evaluation = await complete_evaluation(db, body.evaluation_id)
    except Exception as exc:
        raise to_callable_error("completeEvaluation", exc, "Error completing evaluation") from exc
    return StatusChangeResponse(status=evaluation.status.value)


@router.post("/validateManagerAccess", response_model=ValidateManagerAccessResponse)
async def validate_manager_access_callable(body: ValidateManagerAccessRequest, db: DbDep):
    try:
        has_access = await validate_manager_access(db, body.evaluation_id, body.email)
    except Exception as exc:
        raise to_callable_error("validateManagerAccess", exc, "Error validating access") from exc
    return ValidateManagerAccessResponse(has_access=has_access)


@router.post("/getResults", response_model=GetResultsResponse)
async def get_results_callable(body: EvaluationIdRequest, db: DbDep, config: SettingsDep):
    """
    Consolidated results with names, emails and comments decrypted.

    Each field is decrypted on its own; a failure is logged and the stored
    ciphertext is returned in its place so the rest of the report survives.
    """
    try:
        results = await get_results(db, body.evaluation_id)
    except Exception as exc:
        raise to_callable_error("getResults", exc, "Error loading results") from exc

    key = member_key(body.evaluation_id, config.encryption_key)
    out = []
    for r in results:
        m = r.member
        out.append(
            MemberResultOut(
                member=MemberOut(
                    id=m.id,
                    evaluation_id=m.evaluation_id,
                    name=_decrypt_or_raw(m.name, key, "name", m.id),
                    email=_decrypt_or_raw(m.email, key, "email", m.id),
                    completed_evaluations=m.completed_evaluations,
                    total_evaluations=m.total_evaluations,
                    last_access_date=m.last_access_date,
                ),
                averages=Averages(
                    question_1=r.averages.question_1,
                    question_2=r.averages.question_2,
                    question_3=r.averages.question_3,
                    question_4=r.averages.question_4,
                    overall=r.averages.overall,
                ),
                comments=CommentsOut(
                    positive=[
                        _decrypt_or_raw(c, key, "positive comment", m.id)
                        for c in r.comments.positive
                    ],
                    improvement=[
                        _decrypt_or_raw(c, key, "improvement comment", m.id)
                        for c in r.comments.improvement
                    ],
                ),
                total_responses=r.response_count,
            )
        )
    return GetResultsResponse(results=out)
