"""Member request/response schemas."""

from datetime import datetime

from pydantic import Field

from peer360.schemas.base import CamelModel


class MemberIn(CamelModel):
    name: str
    email: str


class AddMembersRequest(CamelModel):
    """addMembers / addMembersEncrypted request."""

    evaluation_id: str = Field(min_length=1)
    members: list[MemberIn] = Field(min_length=1)


class CreatedMemberOut(CamelModel):
    """Member as returned once at creation, with its plaintext access code."""

    id: str
    name: str
    email: str
    access_code: str


class CreatedMemberDetailOut(CreatedMemberOut):
    evaluation_id: str
    completed_evaluations: int
    total_evaluations: int


class AddMembersResponse(CamelModel):
    members: list[CreatedMemberOut]


class AddMembersEncryptedResponse(CamelModel):
    success: bool = True
    members: list[CreatedMemberDetailOut]


class MemberOut(CamelModel):
    id: str
    evaluation_id: str
    name: str
    email: str
    completed_evaluations: int
    total_evaluations: int
    last_access_date: datetime | None = None


class MembersResponse(CamelModel):
    success: bool = True
    members: list[MemberOut]


class AccessCodeRequest(CamelModel):
    access_code: str


class AccessCodeLoginResponse(CamelModel):
    success: bool = True
    evaluation_id: str
    current_member_id: str
    members: list[MemberOut]


class MemberProgressOut(CamelModel):
    id: str
    completed_evaluations: int
    total_evaluations: int
    progress: int
    last_access_date: datetime | None = None


class MembersProgressResponse(CamelModel):
    members: list[MemberProgressOut]


class MemberIdRequest(CamelModel):
    member_id: str = Field(min_length=1)


class PendingEvaluationsRequest(CamelModel):
    evaluation_id: str = Field(min_length=1)
    member_id: str = Field(min_length=1)


class PendingEvaluationsResponse(CamelModel):
    pending_ids: list[str]
