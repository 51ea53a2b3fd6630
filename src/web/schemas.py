import datetime as dt
import uuid

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel

from src.services.goal_sync import achievement_rate


class ApiModel(BaseModel):
    """Response model read from ORM rows and rendered with camelCase keys."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class OrganizationOut(ApiModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    created_at: dt.datetime | None = None


class OrganizationSummaryOut(OrganizationOut):
    role: str
    member_count: int
    transaction_count: int
    asset_count: int


class AssetCategoryOut(ApiModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    type: str
    icon: str | None = None
    color: str | None = None
    is_default: bool | None = None


class AssetOut(ApiModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    category_id: uuid.UUID | None = None
    name: str
    type: str
    description: str | None = None
    current_value: float
    target_value: float | None = None
    is_active: bool | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class LiabilityOut(ApiModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    type: str
    description: str | None = None
    current_amount: float
    original_amount: float | None = None
    interest_rate: float | None = None
    monthly_payment: float | None = None
    due_date: dt.date | None = None
    created_by: uuid.UUID | None = None
    created_at: dt.datetime | None = None


class CategoryOut(ApiModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    transaction_type: str
    level: int
    parent_id: uuid.UUID | None = None
    icon: str | None = None
    color: str | None = None
    is_default: bool | None = None


class PaymentMethodOut(ApiModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    type: str
    bank_name: str | None = None
    card_company: str | None = None
    last_four_digits: str | None = None
    is_active: bool | None = None


class TransactionOut(ApiModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    user_id: uuid.UUID
    category_id: uuid.UUID | None = None
    payment_method_id: uuid.UUID | None = None
    amount: float
    description: str | None = None
    transaction_date: dt.date
    transaction_type: str
    created_at: dt.datetime | None = None


class FinancialGoalOut(ApiModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    category: str | None = None
    description: str | None = None
    target_amount: float
    current_amount: float
    target_date: dt.date | None = None
    priority: str
    status: str
    created_by: uuid.UUID | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @computed_field(alias="achievementRate")
    @property
    def achievement_rate(self) -> float:
        rate = achievement_rate(self.current_amount, self.target_amount)
        return round(float(rate), 2)


class GoalStatsOut(ApiModel):
    total_goals: int
    active_goals: int
    completed_goals: int
    average_achievement: float


class DashboardCounts(BaseModel):
    assets: int
    transactions: int
    categories: int


class DashboardOut(ApiModel):
    counts: DashboardCounts
    organization_id: uuid.UUID
    timestamp: dt.datetime


class InvitationOut(ApiModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    email: str
    role: str
    status: str
    created_at: dt.datetime | None = None
    expires_at: dt.datetime


class ReceivedInvitationOut(InvitationOut):
    """Carries the token so the invitee can accept or reject from their inbox."""

    organization: OrganizationOut
    token: str
