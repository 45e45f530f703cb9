#!/usr/bin/env python3
"""
Seed script: creates a demo evaluation with a three-person team and a full
round of ratings, then prints the manager token and access codes.
Run after migrations: python scripts/seed.py
"""

import asyncio
import os
import random
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from peer360.config import settings
from peer360.database import async_session_maker
from peer360.domain.response import Comments, Ratings
from peer360.services.evaluations import activate_evaluation, create_evaluation
from peer360.services.members import NewMember, add_members
from peer360.services.responses import submit_response

MANAGER_EMAIL = "manager@example.com"
TEAM = [
    NewMember(name="Ana Souza", email="ana@example.com"),
    NewMember(name="Bruno Lima", email="bruno@example.com"),
    NewMember(name="Carla Dias", email="carla@example.com"),
]


async def seed():
    secret = settings.encryption_key
    async with async_session_maker() as session:
        created = await create_evaluation(session, MANAGER_EMAIL, "Demo Q1 Review")
        evaluation_id = created.evaluation.id
        members = await add_members(session, evaluation_id, TEAM, secret)
        await activate_evaluation(session, evaluation_id)

        for evaluator in members:
            for evaluated in members:
                if evaluator.id == evaluated.id:
                    continue
                await submit_response(
                    session,
                    evaluation_id=evaluation_id,
                    evaluator_id=evaluator.id,
                    evaluated_id=evaluated.id,
                    ratings=Ratings(*(random.randint(3, 5) for _ in range(4))),
                    comments=Comments(
                        positive=f"{evaluated.name} is great to work with.",
                        improvement="Share status updates more often.",
                    ),
                    secret=secret,
                )
        await session.commit()

    print("Seed complete!")
    print(f"Evaluation: {evaluation_id}")
    print(f"Manager token (shown once): {created.manager_token}")
    for m in members:
        print(f"  {m.name:<12} access code {m.access_code}")
    print("Example: curl -X POST http://localhost:8000/v1/getResults \\")
    print('  -H "Content-Type: application/json" \\')
    print(f"  -d '{{\"evaluationId\":\"{evaluation_id}\"}}'")


if __name__ == "__main__":
    asyncio.run(seed())
