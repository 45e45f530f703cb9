"""Evaluation use cases - create, unlock, status transitions, manager checks."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from peer360.domain.errors import DomainValidationError, NotFoundError
from peer360.domain.evaluation import Evaluation, EvaluationStatus
from peer360.security.crypto import DecryptionError
from peer360.security.hashing import hash_email
from peer360.storage.evaluations import (
    creator_matches,
    get_evaluation_by_id,
    list_evaluations_by_creator,
    save_evaluation,
    unlock_evaluation,
    update_evaluation_status,
)

logger = logging.getLogger(__name__)


@dataclass
class CreatedEvaluation:
    evaluation: Evaluation
    manager_token: str


async def create_evaluation(db: AsyncSession, creator_email: str, title: str) -> CreatedEvaluation:
    """
    Create a draft evaluation and issue its manager token.

    The returned token is the only copy the manager ever gets; storage
    keeps it encrypted under a key derived from itself.
    """
    if not creator_email or not creator_email.strip() or not title or not title.strip():
        raise DomainValidationError("Creator email and title are required")

    manager_token = str(uuid4())
    evaluation = Evaluation(
        id=None,
        creator_email=creator_email.strip().lower(),
        title=title.strip(),
        manager_token=manager_token,
        created_at=datetime.now(timezone.utc),
        status=EvaluationStatus.DRAFT,
    )
    saved = await save_evaluation(db, evaluation)
    logger.info("Created evaluation %s", saved.id)
    return CreatedEvaluation(evaluation=saved, manager_token=manager_token)


async def get_evaluation(db: AsyncSession, evaluation_id: str, manager_token: str) -> Evaluation:
    """Decrypt an evaluation for its manager. A wrong token raises DecryptionError."""
    evaluation = await unlock_evaluation(db, evaluation_id, manager_token)
    if evaluation is None:
        raise NotFoundError("Evaluation not found")
    return evaluation


async def _transition(db: AsyncSession, evaluation_id: str, action: str) -> Evaluation:
    evaluation = await get_evaluation_by_id(db, evaluation_id)
    if evaluation is None:
        raise NotFoundError("Evaluation not found")
    getattr(evaluation, action)()
    await update_evaluation_status(db, evaluation_id, evaluation.status)
    logger.info("Evaluation %s is now %s", evaluation_id, evaluation.status.value)
    return evaluation


async def activate_evaluation(db: AsyncSession, evaluation_id: str) -> Evaluation:
    return await _transition(db, evaluation_id, "activate")


async def complete_evaluation(db: AsyncSession, evaluation_id: str) -> Evaluation:
    return await _transition(db, evaluation_id, "complete")


async def validate_manager_access(db: AsyncSession, evaluation_id: str, email: str) -> bool:
    if not evaluation_id or not email:
        return False
    return await creator_matches(db, evaluation_id, email)


async def find_manager_evaluation(db: AsyncSession, email: str, manager_token: str) -> Evaluation:
    """
    Manager login: the evaluation created by ``email`` that ``manager_token`` opens.

    The token only decrypts its own evaluation, so the creator's other
    evaluations are skipped rather than reported.
    """
    if not email or not email.strip() or not manager_token:
        raise DomainValidationError("Email and manager token are required")
    for candidate in await list_evaluations_by_creator(db, hash_email(email)):
        try:
            evaluation = await unlock_evaluation(db, candidate.id, manager_token)
        except DecryptionError:
            continue
        if evaluation is not None:
            logger.info("Manager opened evaluation %s", evaluation.id)
            return evaluation
    raise NotFoundError("Evaluation not found")
