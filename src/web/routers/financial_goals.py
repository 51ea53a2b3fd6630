import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.db.models import GOAL_PRIORITIES, GOAL_STATUSES
from src.db.repo_holder import RepoHolder
from src.services.goal_sync import GoalSyncError, GoalSyncManager, achievement_rate
from src.web.dependencies import get_current_user_id, get_goal_sync, get_repo, require_member
from src.web.schemas import FinancialGoalOut, GoalStatsOut
from src.web.validation import (
    not_found,
    parse_amount,
    parse_choice,
    parse_optional_date,
    parse_optional_text,
    parse_text,
    parse_uuid,
    read_json,
    require_fields,
    require_organization_id,
)

router = APIRouter(prefix="/financial-goals", tags=["financial-goals"])


async def get_goal_for_user(repo: RepoHolder, goal_id: str, user_id: uuid.UUID):
    """Loads the goal if the user belongs to its organization; 404 otherwise."""
    goal = await repo.goal.get_by_id(parse_uuid(goal_id, "goal ID"))

    if goal is None or await repo.member.get_membership(goal.organization_id, user_id) is None:
        raise not_found("Goal")

    return goal


@router.get("", response_model=list[FinancialGoalOut])
async def list_goals(
    organization_id: str | None = Query(None, alias="organizationId"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
):
    organization_id = require_organization_id(organization_id)
    await require_member(repo, organization_id, user_id)

    goals = await repo.goal.list_for_organization(organization_id)

    return [FinancialGoalOut.model_validate(goal) for goal in goals]


@router.post("", response_model=FinancialGoalOut, status_code=201)
async def create_goal(
    request: Request,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
):
    data = await read_json(request)
    require_fields(
        data,
        ("name", "targetAmount", "organizationId"),
        "Name, target amount, and organization ID are required",
    )

    organization_id = require_organization_id(data["organizationId"])
    await require_member(repo, organization_id, user_id)

    goal = await repo.goal.create(
        organization_id=organization_id,
        name=parse_text(data["name"], "name"),
        category=parse_optional_text(data.get("category"), "category"),
        description=parse_optional_text(data.get("description"), "description"),
        target_amount=parse_amount(data["targetAmount"], "target amount"),
        target_date=parse_optional_date(data.get("targetDate"), "target date"),
        priority=parse_choice(data.get("priority") or "medium", GOAL_PRIORITIES, "priority"),
        created_by=user_id,
    )
    logging.info(f"Goal created: {goal.name} ({goal.id})")

    return FinancialGoalOut.model_validate(goal)


@router.get("/stats", response_model=GoalStatsOut)
async def goal_stats(
    organization_id: str | None = Query(None, alias="organizationId"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
    goal_sync: GoalSyncManager = Depends(get_goal_sync),
):
    organization_id = require_organization_id(organization_id)
    await require_member(repo, organization_id, user_id)

    stats = await goal_sync.get_goal_stats(organization_id)

    return GoalStatsOut.model_validate(stats)


@router.post("/sync")
async def sync_goals(
    organization_id: str | None = Query(None, alias="organizationId"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
    goal_sync: GoalSyncManager = Depends(get_goal_sync),
):
    """Forces a full recompute of the organization's goals."""
    organization_id = require_organization_id(organization_id)
    await require_member(repo, organization_id, user_id)

    try:
        updated = await goal_sync.sync_all_goals(organization_id)
    except GoalSyncError:
        raise HTTPException(status_code=500, detail="Failed to synchronize goals")

    return {"message": "Goals synchronized", "updatedGoals": updated}


@router.put("/{goal_id}", response_model=FinancialGoalOut)
async def update_goal(
    goal_id: str,
    request: Request,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
):
    data = await read_json(request)
    goal = await get_goal_for_user(repo, goal_id, user_id)

    require_fields(data, ("name", "targetAmount"), "Name and target amount are required")

    changes = {
        "name": parse_text(data["name"], "name"),
        "target_amount": parse_amount(data["targetAmount"], "target amount"),
    }

    if "category" in data:
        changes["category"] = parse_optional_text(data["category"], "category")
    if "description" in data:
        changes["description"] = parse_optional_text(data["description"], "description")
    if "targetDate" in data:
        changes["target_date"] = parse_optional_date(data["targetDate"], "target date")
    if data.get("priority"):
        changes["priority"] = parse_choice(data["priority"], GOAL_PRIORITIES, "priority")
    if data.get("status"):
        changes["status"] = parse_choice(data["status"], GOAL_STATUSES, "status")

    goal = await repo.goal.update(goal, **changes)

    # A lowered target can complete the goal without any asset change.
    if goal.status == "active" and achievement_rate(goal.current_amount, goal.target_amount) >= 100:
        goal = await repo.goal.update(goal, status="completed")
        logging.info(f"Goal '{goal.name}' completed after target update")

    return FinancialGoalOut.model_validate(goal)


@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
):
    goal = await get_goal_for_user(repo, goal_id, user_id)
    await repo.goal.delete(goal)

    return {"message": "Goal deleted successfully"}
