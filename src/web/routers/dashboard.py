import datetime as dt
import uuid

from fastapi import APIRouter, Depends, Query

from src.db.repo_holder import RepoHolder
from src.services.dashboard import build_dashboard
from src.web.dependencies import get_current_user_id, get_repo, require_member
from src.web.schemas import DashboardCounts, DashboardOut
from src.web.validation import require_organization_id

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard-simple", response_model=DashboardOut)
async def simple_dashboard(
    organization_id: str | None = Query(None, alias="organizationId"),
    repo: RepoHolder = Depends(get_repo),
):
    """Entity counts for the organization's landing page."""
    organization_id = require_organization_id(organization_id)

    counts = DashboardCounts(
        assets=await repo.asset.count_for_organization(organization_id),
        transactions=await repo.transaction.count_for_organization(organization_id),
        categories=await repo.category.count_for_organization(organization_id),
    )

    return DashboardOut(counts=counts, organization_id=organization_id, timestamp=dt.datetime.now(dt.timezone.utc))


@router.get("/dashboard")
async def financial_dashboard(
    organization_id: str | None = Query(None, alias="organizationId"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
):
    """Net worth, this month's cash flow against last month, recent activity and spending by category."""
    organization_id = require_organization_id(organization_id)
    await require_member(repo, organization_id, user_id)

    return await build_dashboard(repo, organization_id)
