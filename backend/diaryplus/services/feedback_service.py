"""
DiaryPlus Backend — Feedback Service
======================================

What:  Public feedback board: submissions (signed in or anonymous) and
       up/down votes.

Voting toggles:
    no vote yet          → created
    same vote again      → removed
    the opposite vote    → updated
    votes_count = up votes - down votes
"""

import logging
import secrets
import uuid
from collections import defaultdict
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.exceptions import NotFoundError
from diaryplus.models.feedback import Feedback, FeedbackVote
from diaryplus.schemas.feedback import (
    FeedbackCreate,
    FeedbackListResponse,
    FeedbackResponse,
    VoteRequest,
    VoteResponse,
)
from diaryplus.services.project_service import require_membership

logger = logging.getLogger(__name__)


def new_tracking_id() -> str:
    return f"FB-{secrets.token_hex(4).upper()}"


class FeedbackService:
    async def _tallies(
        self, db: AsyncSession, feedback_ids, user_id: Optional[uuid.UUID]
    ) -> tuple[Dict[uuid.UUID, int], Dict[uuid.UUID, str]]:
        counts: Dict[uuid.UUID, int] = defaultdict(int)
        mine: Dict[uuid.UUID, str] = {}
        ids = list(feedback_ids)
        if not ids:
            return counts, mine
        result = await db.execute(
            select(FeedbackVote.feedback_id, FeedbackVote.user_id, FeedbackVote.vote_type).where(
                FeedbackVote.feedback_id.in_(ids)
            )
        )
        for feedback_id, voter_id, vote_type in result.all():
            counts[feedback_id] += 1 if vote_type == "up" else -1
            if user_id is not None and voter_id == user_id:
                mine[feedback_id] = vote_type
        return counts, mine

    async def submit(
        self,
        db: AsyncSession,
        body: FeedbackCreate,
        user_id: Optional[uuid.UUID],
        user_agent: Optional[str],
        ip_address: Optional[str],
    ) -> FeedbackResponse:
        project_id = body.project_id
        if project_id is not None and user_id is not None:
            await require_membership(db, project_id, user_id)
        elif user_id is None:
            project_id = None

        feedback = Feedback(
            user_id=user_id,
            project_id=project_id,
            feedback_type=body.feedback_type,
            title=body.title.strip(),
            description=body.description.strip(),
            category=body.category,
            priority="medium",
            status="submitted",
            tracking_id=new_tracking_id(),
            user_agent=(user_agent or "")[:500] or None,
            ip_address=ip_address,
        )
        db.add(feedback)
        await db.flush()
        logger.info("Feedback %s submitted (%s)", feedback.tracking_id, feedback.feedback_type)
        return FeedbackResponse.model_validate(feedback)

    async def list_feedback(
        self,
        db: AsyncSession,
        user_id: Optional[uuid.UUID],
        feedback_type: Optional[str] = None,
        sort: str = "newest",
        limit: int = 50,
    ) -> FeedbackListResponse:
        query = select(Feedback)
        if feedback_type:
            query = query.where(Feedback.feedback_type == feedback_type)
        if sort == "oldest":
            query = query.order_by(Feedback.created_at)
        elif sort == "status":
            query = query.order_by(Feedback.status, Feedback.created_at.desc())
        else:
            query = query.order_by(Feedback.created_at.desc())
        if sort != "most_voted":
            query = query.limit(limit)

        result = await db.execute(query)
        items = list(result.scalars().all())
        counts, mine = await self._tallies(db, (f.id for f in items), user_id)

        responses = []
        for item in items:
            response = FeedbackResponse.model_validate(item)
            response.votes_count = counts.get(item.id, 0)
            response.user_vote = mine.get(item.id)
            responses.append(response)
        if sort == "most_voted":
            # Stable sort keeps newest first among equal counts
            responses.sort(key=lambda r: r.votes_count, reverse=True)
            responses = responses[:limit]
        return FeedbackListResponse(feedback=responses)

    async def vote(
        self, db: AsyncSession, feedback_id: uuid.UUID, user_id: uuid.UUID, body: VoteRequest
    ) -> VoteResponse:
        if await db.get(Feedback, feedback_id) is None:
            raise NotFoundError(resource="feedback", resource_id=str(feedback_id))

        result = await db.execute(
            select(FeedbackVote).where(
                FeedbackVote.feedback_id == feedback_id, FeedbackVote.user_id == user_id
            )
        )
        existing = result.scalar_one_or_none()
        if existing is None:
            db.add(FeedbackVote(feedback_id=feedback_id, user_id=user_id, vote_type=body.vote_type))
            action = "created"
        elif existing.vote_type == body.vote_type:
            await db.delete(existing)
            action = "removed"
        else:
            existing.vote_type = body.vote_type
            action = "updated"
        await db.flush()

        counts, _ = await self._tallies(db, [feedback_id], None)
        return VoteResponse(action=action, votes_count=counts.get(feedback_id, 0))


feedback_service = FeedbackService()
