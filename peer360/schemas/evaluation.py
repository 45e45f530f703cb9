"""Evaluation and results request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from peer360.schemas.base import CamelModel
from peer360.schemas.member import MemberOut


class CreateEvaluationRequest(CamelModel):
    """createEvaluation request."""

    creator_email: str
    title: str


class CreateEvaluationResponse(CamelModel):
    """createEvaluation response - the only time the manager token is returned."""

    evaluation_id: str
    manager_token: str
    title: str


class EvaluationIdRequest(CamelModel):
    evaluation_id: str = Field(min_length=1)


class GetEvaluationRequest(CamelModel):
    evaluation_id: str = Field(min_length=1)
    manager_token: str = Field(min_length=1)


class GetManagerEvaluationRequest(CamelModel):
    """getManagerEvaluation request - manager login without the evaluation id."""

    email: str = Field(min_length=1)
    manager_token: str = Field(min_length=1)


class EvaluationOut(CamelModel):
    id: str
    title: str
    created_at: datetime
    status: str


class StatusChangeResponse(CamelModel):
    success: bool = True
    status: str


class ValidateManagerAccessRequest(CamelModel):
    evaluation_id: str
    email: str


class ValidateManagerAccessResponse(CamelModel):
    has_access: bool


class Averages(BaseModel):
    """Per-question means; keys keep their storage names."""

    question_1: float
    question_2: float
    question_3: float
    question_4: float
    overall: float


class CommentsOut(BaseModel):
    positive: list[str] = Field(default_factory=list)
    improvement: list[str] = Field(default_factory=list)


class MemberResultOut(CamelModel):
    member: MemberOut
    averages: Averages
    comments: CommentsOut
    total_responses: int


class GetResultsResponse(CamelModel):
    results: list[MemberResultOut] = Field(default_factory=list)
