import asyncio
import enum
import logging
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.settings import settings
from src.db.models import FinancialGoal
from src.db.repo_holder import RepoHolder


class AssetChangeType(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SYNC_ALL = "SYNC_ALL"


@dataclass(frozen=True)
class AssetChangeEvent:
    """Describes the asset change that triggered a sync.

    The fields are informational: the sync always recomputes from the full
    asset totals, never from the difference between previous and current value.
    """

    type: AssetChangeType
    asset_id: uuid.UUID | None
    current_value: Decimal
    asset_type: str
    previous_value: Decimal | None = None

    @classmethod
    def sync_all(cls) -> "AssetChangeEvent":
        """Synthetic event for a forced full recompute. It never refers to an asset."""
        return cls(type=AssetChangeType.SYNC_ALL, asset_id=None, current_value=Decimal(0), asset_type="sync")


def create_asset_change_event(
    change_type: AssetChangeType,
    asset_id: uuid.UUID,
    current_value: Decimal,
    asset_type: str,
    previous_value: Decimal | None = None,
) -> AssetChangeEvent:
    return AssetChangeEvent(
        type=change_type,
        asset_id=asset_id,
        current_value=current_value,
        asset_type=asset_type,
        previous_value=previous_value,
    )


@dataclass(frozen=True)
class GoalStats:
    total_goals: int
    active_goals: int
    completed_goals: int
    average_achievement: float


class GoalSyncError(Exception):
    def __init__(self, organization_id: uuid.UUID, cause: BaseException) -> None:
        self.organization_id = organization_id
        self.cause = cause
        reason = str(cause) or type(cause).__name__
        super().__init__(f"Goal sync failed for organization {organization_id}: {reason}")


class GoalNotFoundError(Exception):
    def __init__(self, goal_id: uuid.UUID) -> None:
        self.goal_id = goal_id
        super().__init__(f"Goal not found: {goal_id}")


def calculate_goal_amount(goal: FinancialGoal, total_assets: Decimal) -> Decimal:
    """Current amount counted towards a goal.

    Every goal category (asset_growth, savings, debt_reduction, expense_reduction
    or none) is measured against the organization's total active assets.
    `goal.category` is accepted so category-specific formulas can be added here
    later; today it does not change the result.
    """
    return total_assets


def achievement_rate(current_amount: Decimal, target_amount: Decimal) -> Decimal:
    """Percentage of the target reached; 0 for a zero (or negative) target."""
    if target_amount is None or target_amount <= 0:
        return Decimal(0)

    return Decimal(current_amount) / Decimal(target_amount) * 100


def advisory_lock_key(organization_id: uuid.UUID) -> int:
    """Signed 64-bit key for pg_advisory_xact_lock derived from the organization id."""
    return int.from_bytes(organization_id.bytes[:8], "big", signed=True)


class GoalSyncManager:
    """Recomputes an organization's goal amounts whenever its assets change."""

    def __init__(
        self,
        session_pool: async_sessionmaker,
        timeout: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.session_pool = session_pool
        self.timeout = timeout if timeout is not None else settings.goal_sync_timeout
        self.logger = logger or logging.getLogger(__name__)

    async def trigger_sync(self, organization_id: uuid.UUID, event: AssetChangeEvent) -> int:
        """Recomputes every active or paused goal of the organization in one transaction.

        Returns the number of goals updated. Any failure, including the timeout,
        rolls back the whole unit of work and is raised as GoalSyncError.
        """
        self.logger.info(f"Goal sync started: organization={organization_id}, event={event.type.value}")

        try:
            updated = await asyncio.wait_for(self._sync(organization_id), timeout=self.timeout)
        except Exception as e:
            self.logger.error(f"Goal sync failed for organization {organization_id}: {e!r}")
            raise GoalSyncError(organization_id, e) from e

        self.logger.info(f"Goal sync finished: organization={organization_id}, goals={updated}")

        return updated

    async def _sync(self, organization_id: uuid.UUID) -> int:
        async with self.session_pool() as session:
            async with session.begin():
                await self._lock_organization(session, organization_id)
                repo = RepoHolder(session)

                total_assets = await repo.asset.get_total_active_value(organization_id)
                self.logger.info(f"Total active assets for {organization_id}: {total_assets:.2f}")

                goals = await repo.goal.get_syncable(organization_id)
                self.logger.info(f"Goals to update: {len(goals)}")

                for goal in goals:
                    current_amount = calculate_goal_amount(goal, total_assets)
                    rate = achievement_rate(current_amount, goal.target_amount)
                    previous_status = goal.status

                    goal.current_amount = current_amount
                    if rate >= 100:
                        goal.status = "completed"

                    self.logger.info(f"Goal '{goal.name}' ({goal.id}): {rate:.1f}% ({current_amount:.2f})")

                    if goal.status == "completed" and previous_status != "completed":
                        self.logger.info(f"Goal '{goal.name}' reached its target of {goal.target_amount:.2f}")

                return len(goals)

    async def _lock_organization(self, session: AsyncSession, organization_id: uuid.UUID) -> None:
        """Serializes concurrent syncs of one organization on PostgreSQL."""
        if session.get_bind().dialect.name != "postgresql":
            return

        await session.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": advisory_lock_key(organization_id)},
        )

    async def sync_all_goals(self, organization_id: uuid.UUID) -> int:
        """Forces a full recompute, e.g. to repair drifted amounts or after seeding."""
        self.logger.info(f"Full goal sync requested: organization={organization_id}")

        return await self.trigger_sync(organization_id, AssetChangeEvent.sync_all())

    async def calculate_current_amount(self, goal_id: uuid.UUID) -> Decimal:
        """Current amount for a single goal, read-only and outside a transaction."""
        async with self.session_pool() as session:
            repo = RepoHolder(session)
            goal = await repo.goal.get_by_id(goal_id)

            if goal is None:
                raise GoalNotFoundError(goal_id)

            total_assets = await repo.asset.get_total_active_value(goal.organization_id)

            return calculate_goal_amount(goal, total_assets)

    async def get_goal_stats(self, organization_id: uuid.UUID) -> GoalStats:
        async with self.session_pool() as session:
            goals = await RepoHolder(session).goal.list_for_organization(organization_id)

        if not goals:
            return GoalStats(total_goals=0, active_goals=0, completed_goals=0, average_achievement=0.0)

        total_rate = sum(
            (max(Decimal(0), achievement_rate(goal.current_amount, goal.target_amount)) for goal in goals),
            Decimal(0),
        )
        average = (total_rate / len(goals)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

        return GoalStats(
            total_goals=len(goals),
            active_goals=sum(1 for goal in goals if goal.status == "active"),
            completed_goals=sum(1 for goal in goals if goal.status == "completed"),
            average_achievement=float(average),
        )
