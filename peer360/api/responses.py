"""Response callables - member side."""

from fastapi import APIRouter

from peer360.api.deps import DbDep, SettingsDep
from peer360.api.errors import to_callable_error
from peer360.domain.response import Comments, Ratings
from peer360.schemas.base import SuccessResponse
from peer360.schemas.evaluation import EvaluationIdRequest
from peer360.schemas.response import CountResponsesResponse, SubmitResponseRequest
from peer360.services.responses import count_responses, submit_response

router = APIRouter()


@router.post("/submitResponse", response_model=SuccessResponse)
async def submit_response_callable(body: SubmitResponseRequest, db: DbDep, config: SettingsDep):
    """Store one rating; a second rating of the same pair is rejected."""
    try:
        await submit_response(
            db,
            evaluation_id=body.evaluation_id,
            evaluator_id=body.evaluator_id,
            evaluated_id=body.evaluated_id,
            ratings=Ratings(**body.ratings.model_dump()),
            comments=Comments(**body.comments.model_dump()),
            secret=config.encryption_key,
        )
    except Exception as exc:
        raise to_callable_error("submitResponse", exc, "Error submitting response") from exc
    return SuccessResponse()


@router.post("/countResponses", response_model=CountResponsesResponse)
async def count_responses_callable(body: EvaluationIdRequest, db: DbDep):
    try:
        count = await count_responses(db, body.evaluation_id)
    except Exception as exc:
        raise to_callable_error("countResponses", exc, "Error counting responses") from exc
    return CountResponsesResponse(count=count)
