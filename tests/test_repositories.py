"""Repository tests against an in-memory SQLite database."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy import select

from peer360.domain.errors import AccessCodeConflictError, ResponseAlreadySubmittedError
from peer360.domain.evaluation import Evaluation, EvaluationStatus
from peer360.domain.member import Member
from peer360.domain.response import Comments, Ratings, Response
from peer360.models import EvaluationRecord, MemberRecord, ResponseRecord
from peer360.security.crypto import DecryptionError, decrypt, member_key
from peer360.security.hashing import hash_access_code, hash_email
from peer360.storage.evaluations import (
    creator_matches,
    delete_evaluation,
    get_evaluation_by_id,
    list_evaluations_by_creator,
    save_evaluation,
    unlock_evaluation,
    update_evaluation_status,
)
from peer360.storage.members import (
    access_code_in_use,
    delete_member,
    get_member_by_access_code,
    get_member_by_id,
    increment_completed,
    list_members_by_evaluation,
    save_member,
    save_members,
)
from peer360.storage.responses import (
    count_responses,
    get_response_by_id,
    list_responses_by_evaluation,
    list_responses_by_evaluator,
    list_responses_by_evaluated,
    response_exists,
    save_response,
)
from support import SECRET, make_session_maker


def _new_evaluation(token: str) -> Evaluation:
    return Evaluation(
        id=None,
        creator_email="a@b.com",
        title="Q1 Review",
        manager_token=token,
        created_at=datetime.now(timezone.utc),
    )


def _new_member(evaluation_id: str, name: str, code: str, total: int = 1) -> Member:
    return Member(
        id=None,
        evaluation_id=evaluation_id,
        name=name,
        email=f"{name.lower()}@example.com",
        access_code=code,
        completed_evaluations=0,
        total_evaluations=total,
    )


@pytest.mark.asyncio
async def test_evaluation_is_stored_hashed_and_encrypted():
    session_maker = await make_session_maker()
    token = str(uuid4())
    async with session_maker() as session:
        saved = await save_evaluation(session, _new_evaluation(token))
        await session.commit()

        record = (
            await session.execute(select(EvaluationRecord).where(EvaluationRecord.id == saved.id))
        ).scalar_one()
        assert record.creator_email == hash_email("A@B.com")
        assert record.title != "Q1 Review"
        assert token not in record.creator_token
        assert record.status == "draft"


@pytest.mark.asyncio
async def test_evaluation_read_without_token_is_sealed():
    session_maker = await make_session_maker()
    async with session_maker() as session:
        saved = await save_evaluation(session, _new_evaluation(str(uuid4())))
        loaded = await get_evaluation_by_id(session, saved.id)

    assert loaded.id == saved.id
    assert loaded.sealed is True
    assert loaded.title == ""
    assert loaded.manager_token == ""
    assert loaded.status is EvaluationStatus.DRAFT


@pytest.mark.asyncio
async def test_unlock_evaluation_with_token():
    session_maker = await make_session_maker()
    token = str(uuid4())
    async with session_maker() as session:
        saved = await save_evaluation(session, _new_evaluation(token))

        unlocked = await unlock_evaluation(session, saved.id, token)
        assert unlocked.title == "Q1 Review"
        assert unlocked.manager_token == token

        with pytest.raises(DecryptionError):
            await unlock_evaluation(session, saved.id, str(uuid4()))

        assert await unlock_evaluation(session, "missing", token) is None
        assert await get_evaluation_by_id(session, "missing") is None


@pytest.mark.asyncio
async def test_find_by_creator_and_status_update():
    session_maker = await make_session_maker()
    async with session_maker() as session:
        saved = await save_evaluation(session, _new_evaluation(str(uuid4())))
        found = await list_evaluations_by_creator(session, hash_email("a@b.com"))
        assert [e.id for e in found] == [saved.id]
        assert await creator_matches(session, saved.id, " A@b.com")
        assert not await creator_matches(session, saved.id, "other@b.com")

        await update_evaluation_status(session, saved.id, EvaluationStatus.ACTIVE)
        await session.commit()

    async with session_maker() as session:
        loaded = await get_evaluation_by_id(session, saved.id)
        assert loaded.status is EvaluationStatus.ACTIVE
        record = await session.get(EvaluationRecord, saved.id)
        assert record.activated_at is not None


@pytest.mark.asyncio
async def test_members_are_encrypted_and_read_back_sealed():
    session_maker = await make_session_maker()
    async with session_maker() as session:
        ev = await save_evaluation(session, _new_evaluation(str(uuid4())))
        saved = await save_members(
            session,
            [_new_member(ev.id, "Ana", "111111"), _new_member(ev.id, "Bruno", "222222")],
            SECRET,
        )
        await session.commit()

        assert all(m.id for m in saved)
        assert saved[0].access_code == "111111"

        record = (
            await session.execute(select(MemberRecord).where(MemberRecord.id == saved[0].id))
        ).scalar_one()
        assert record.name != "Ana"
        assert record.access_code == hash_access_code("111111")
        assert record.email_hash == hash_email("ana@example.com")

        members = await list_members_by_evaluation(session, ev.id)
        assert len(members) == 2
        assert all(m.sealed and m.access_code is None for m in members)
        key = member_key(ev.id, SECRET)
        assert sorted(decrypt(m.name, key) for m in members) == ["Ana", "Bruno"]

        by_code = await get_member_by_access_code(session, hash_access_code("222222"))
        assert by_code.id == saved[1].id
        assert await get_member_by_access_code(session, hash_access_code("999999")) is None
        assert await access_code_in_use(session, hash_access_code("111111"))
        assert not await access_code_in_use(session, hash_access_code("999999"))


@pytest.mark.asyncio
async def test_increment_completed_never_exceeds_total():
    session_maker = await make_session_maker()
    async with session_maker() as session:
        ev = await save_evaluation(session, _new_evaluation(str(uuid4())))
        [member] = await save_members(session, [_new_member(ev.id, "Ana", "111111")], SECRET)
        await session.commit()

        assert await increment_completed(session, member.id) is True
        assert await increment_completed(session, member.id) is False
        assert await increment_completed(session, "missing") is False
        await session.commit()

    async with session_maker() as session:
        [loaded] = await list_members_by_evaluation(session, ev.id)
        assert loaded.completed_evaluations == 1


@pytest.mark.asyncio
async def test_response_pair_is_unique():
    session_maker = await make_session_maker()
    async with session_maker() as session:
        ev = await save_evaluation(session, _new_evaluation(str(uuid4())))
        a, b = await save_members(
            session,
            [_new_member(ev.id, "Ana", "111111"), _new_member(ev.id, "Bruno", "222222")],
            SECRET,
        )
        response = Response(
            id=None,
            evaluation_id=ev.id,
            evaluator_id=a.id,
            evaluated_id=b.id,
            ratings=Ratings(4, 4, 5, 3),
            comments=Comments(positive="Great mentor", improvement=""),
        )
        await save_response(session, response, SECRET)
        await session.commit()

        assert await response_exists(session, ev.id, a.id, b.id)
        assert not await response_exists(session, ev.id, b.id, a.id)

        record = (await session.execute(select(ResponseRecord))).scalar_one()
        assert record.positive_comments != "Great mentor"
        assert record.improvement_comments == ""

        with pytest.raises(ResponseAlreadySubmittedError):
            await save_response(session, response, SECRET)
        await session.rollback()

        assert await count_responses(session, ev.id) == 1
        [stored] = await list_responses_by_evaluated(session, ev.id, b.id)
        assert stored.sealed is True
        assert decrypt(stored.comments.positive, member_key(ev.id, SECRET)) == "Great mentor"


@pytest.mark.asyncio
async def test_single_member_lookup_and_deletes():
    session_maker = await make_session_maker()
    async with session_maker() as session:
        ev = await save_evaluation(session, _new_evaluation(str(uuid4())))
        ana = await save_member(session, _new_member(ev.id, "Ana", "111111"), SECRET)
        bruno = await save_member(session, _new_member(ev.id, "Bruno", "222222"), SECRET)
        saved = await save_response(
            session,
            Response(
                id=None,
                evaluation_id=ev.id,
                evaluator_id=ana.id,
                evaluated_id=bruno.id,
                ratings=Ratings(5, 5, 5, 5),
            ),
            SECRET,
        )
        await session.commit()

        loaded = await get_member_by_id(session, ana.id)
        assert loaded.sealed and loaded.total_evaluations == 1
        assert (await get_response_by_id(session, saved.id)).evaluated_id == bruno.id
        assert len(await list_responses_by_evaluation(session, ev.id)) == 1
        assert len(await list_responses_by_evaluator(session, ev.id, ana.id)) == 1
        assert await list_responses_by_evaluator(session, ev.id, bruno.id) == []

        await delete_member(session, bruno.id)
        await session.commit()
        assert await get_member_by_id(session, bruno.id) is None

        await delete_evaluation(session, ev.id)
        await session.commit()
        assert await get_evaluation_by_id(session, ev.id) is None


@pytest.mark.asyncio
async def test_access_codes_are_unique_across_evaluations():
    session_maker = await make_session_maker()
    async with session_maker() as session:
        first = await save_evaluation(session, _new_evaluation(str(uuid4())))
        second = await save_evaluation(session, _new_evaluation(str(uuid4())))
        await save_members(session, [_new_member(first.id, "Ana", "111111")], SECRET)

        with pytest.raises(AccessCodeConflictError):
            await save_members(
                session,
                [
                    _new_member(second.id, "Bruno", "222222"),
                    _new_member(second.id, "Carla", "111111"),
                ],
                SECRET,
            )

        # Only the conflicting batch is rolled back
        await session.commit()
        assert len(await list_members_by_evaluation(session, first.id)) == 1
        assert await list_members_by_evaluation(session, second.id) == []
