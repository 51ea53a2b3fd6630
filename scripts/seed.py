import asyncio
import logging
import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from src.core.settings import settings
from src.db.models import Organization
from src.db.repo_holder import RepoHolder
from src.db.utils import create_db_tables
from src.services.goal_sync import GoalSyncManager
from src.services.initial_data import check_and_create_initial_data

logging.basicConfig(level=logging.INFO)

# --- SEED DATA ---
DEFAULT_ORGANIZATION = {"name": "Household", "description": "Shared household finances"}

DEFAULT_ASSET_CATEGORIES = [
    {"name": "Cash", "type": "cash"},
    {"name": "Deposits", "type": "financial"},
    {"name": "Brokerage", "type": "investment"},
    {"name": "Pension", "type": "retirement"},
]

DEFAULT_ASSETS = [
    {"name": "Emergency fund", "category_name": "Deposits", "current_value": 12000},
    {"name": "Index funds", "category_name": "Brokerage", "current_value": 25000},
    {"name": "Pension plan", "category_name": "Pension", "current_value": 40000},
]

DEFAULT_GOALS = [
    {"name": "Emergency cushion", "category": "savings", "target_amount": 30000, "priority": "high"},
    {"name": "House deposit", "category": "asset_growth", "target_amount": 150000, "priority": "medium"},
    {"name": "Early retirement", "category": "asset_growth", "target_amount": 1000000, "priority": "low"},
]


async def get_or_create_organization(repo: RepoHolder, user_id: uuid.UUID) -> Organization:
    """Returns the seed user's organization, creating it with an admin membership if needed."""
    for organization, _ in await repo.organization.get_for_user(user_id):
        if organization.name == DEFAULT_ORGANIZATION["name"]:
            return organization

    organization = await repo.organization.create_with_admin(created_by=user_id, **DEFAULT_ORGANIZATION)
    logging.info(f"Created Organization: {organization.name} ({organization.id})")

    return organization


async def create_asset_categories(repo: RepoHolder, organization_id: uuid.UUID) -> dict:
    """Creates asset categories and returns a 'name -> id' mapping."""
    existing_items = {item.name: item.id for item in await repo.asset_category.list_for_organization(organization_id)}

    for data in DEFAULT_ASSET_CATEGORIES:
        if data["name"] not in existing_items:
            new_item = await repo.asset_category.create(organization_id=organization_id, is_default=True, **data)
            existing_items[new_item.name] = new_item.id
            logging.info(f"Created Asset Category: {data['name']}")

    return existing_items


async def create_assets(repo: RepoHolder, organization_id: uuid.UUID, categories_map: dict):
    existing_items = {item.name for item in await repo.asset.list_for_organization(organization_id)}

    for data in DEFAULT_ASSETS:
        category_id = categories_map.get(data["category_name"])

        if data["name"] in existing_items or not category_id:
            continue

        await repo.asset.create(
            organization_id=organization_id,
            category_id=category_id,
            name=data["name"],
            current_value=Decimal(data["current_value"]),
        )
        logging.info(f"Created Asset: {data['name']}")


async def create_goals(repo: RepoHolder, organization_id: uuid.UUID, user_id: uuid.UUID):
    existing_items = {item.name for item in await repo.goal.list_for_organization(organization_id)}

    for data in DEFAULT_GOALS:
        if data["name"] not in existing_items:
            await repo.goal.create(
                organization_id=organization_id,
                name=data["name"],
                category=data["category"],
                target_amount=Decimal(data["target_amount"]),
                priority=data["priority"],
                created_by=user_id,
            )
            logging.info(f"Created Goal: {data['name']}")


async def seed_data():
    logging.info("Starting data seeding...")
    engine = create_async_engine(str(settings.database_url))
    session_pool = async_sessionmaker(engine, expire_on_commit=False)
    user_id = uuid.UUID(settings.seed_user_id)

    await create_db_tables(engine)

    async with session_pool() as session:
        repo = RepoHolder(session)

        organization = await get_or_create_organization(repo, user_id)
        categories_map = await create_asset_categories(repo, organization.id)
        await check_and_create_initial_data(repo, organization.id)
        await create_assets(repo, organization.id, categories_map)
        await create_goals(repo, organization.id, user_id)

    await GoalSyncManager(session_pool).sync_all_goals(organization.id)

    await engine.dispose()
    logging.info("Data seeding finished.")


if __name__ == "__main__":
    asyncio.run(seed_data())
