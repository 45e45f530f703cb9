"""Response (peer rating) request/response schemas."""

from pydantic import BaseModel, Field

from peer360.schemas.base import CamelModel


class RatingsIn(BaseModel):
    """Four questions, 1-5; range is enforced by the domain entity."""

    question_1: int
    question_2: int
    question_3: int
    question_4: int


class CommentsIn(BaseModel):
    positive: str = ""
    improvement: str = ""


class SubmitResponseRequest(CamelModel):
    """submitResponse request."""

    evaluation_id: str = Field(min_length=1)
    evaluator_id: str = Field(min_length=1)
    evaluated_id: str = Field(min_length=1)
    ratings: RatingsIn
    comments: CommentsIn = Field(default_factory=CommentsIn)


class CountResponsesResponse(CamelModel):
    count: int
