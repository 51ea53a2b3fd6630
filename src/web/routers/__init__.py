from fastapi import APIRouter

from . import (
    asset_categories,
    assets,
    categories,
    dashboard,
    financial_goals,
    invitations,
    liabilities,
    organizations,
    payment_methods,
    transactions,
)

api_router = APIRouter(prefix="/api")
api_router.include_router(organizations.router)
api_router.include_router(invitations.router)
api_router.include_router(dashboard.router)
api_router.include_router(asset_categories.router)
api_router.include_router(assets.router)
api_router.include_router(liabilities.router)
api_router.include_router(categories.router)
api_router.include_router(payment_methods.router)
api_router.include_router(transactions.router)
api_router.include_router(financial_goals.router)

__all__ = [
    "api_router",
]
