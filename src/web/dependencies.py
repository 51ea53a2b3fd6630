import uuid
from typing import AsyncIterator

from fastapi import HTTPException, Request

from src.db.repo_holder import RepoHolder
from src.services.goal_sync import GoalSyncManager
from src.web.validation import is_valid_uuid


async def get_repo(request: Request) -> AsyncIterator[RepoHolder]:
    """Opens one session per request and hands the handler its repositories."""
    async with request.app.state.session_pool() as session:
        yield RepoHolder(session)


def get_goal_sync(request: Request) -> GoalSyncManager:
    return request.app.state.goal_sync


def get_current_user_id(request: Request) -> uuid.UUID:
    """User id resolved by the auth middleware; 401 when there is no session."""
    user_id = getattr(request.state, "user_id", None)

    # A session holding something other than a UUID is as good as no session.
    if not user_id or not is_valid_uuid(str(user_id)):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return uuid.UUID(str(user_id))


def get_current_user_email(request: Request) -> str:
    """Email of the session user; invitations are addressed by email."""
    get_current_user_id(request)
    email = getattr(request.state, "user_email", None)

    if not email or not isinstance(email, str):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return email.strip().lower()


async def require_member(repo: RepoHolder, organization_id: uuid.UUID, user_id: uuid.UUID) -> None:
    membership = await repo.member.get_membership(organization_id, user_id)

    if membership is None:
        raise HTTPException(status_code=403, detail="Forbidden")
