import logging
import uuid

from src.db.repo_holder import RepoHolder

# (name, transaction_type, parent name); parents are listed before their children
DEFAULT_CATEGORIES = [
    ("Salary", "income", None),
    ("Side income", "income", None),
    ("Investment income", "income", None),
    ("Other income", "income", None),
    ("Food", "expense", None),
    ("Groceries", "expense", "Food"),
    ("Dining out", "expense", "Food"),
    ("Transport", "expense", None),
    ("Housing", "expense", None),
    ("Utilities", "expense", "Housing"),
    ("Health", "expense", None),
    ("Education", "expense", None),
    ("Leisure", "expense", None),
    ("Shopping", "expense", None),
    ("Insurance", "expense", None),
    ("Other expenses", "expense", None),
    ("Savings transfer", "transfer", None),
]

DEFAULT_PAYMENT_METHODS = [
    {"name": "Cash", "type": "cash"},
    {"name": "Credit card", "type": "card"},
    {"name": "Debit card", "type": "card"},
    {"name": "Bank transfer", "type": "account"},
    {"name": "Mobile wallet", "type": "other"},
]


async def create_initial_data(repo: RepoHolder, organization_id: uuid.UUID) -> dict:
    """Copies the default category tree and payment methods into the organization."""
    created_ids = {}
    levels = {}

    for name, transaction_type, parent_name in DEFAULT_CATEGORIES:
        parent_id = created_ids.get(parent_name)
        level = levels[parent_name] + 1 if parent_id else 1

        category = await repo.category.create(
            organization_id=organization_id,
            name=name,
            transaction_type=transaction_type,
            level=level,
            parent_id=parent_id,
            is_default=True,
        )
        created_ids[name] = category.id
        levels[name] = level

    for data in DEFAULT_PAYMENT_METHODS:
        await repo.payment_method.create(organization_id=organization_id, **data)

    logging.info(
        f"Initial data for organization {organization_id}: "
        f"{len(DEFAULT_CATEGORIES)} categories, {len(DEFAULT_PAYMENT_METHODS)} payment methods"
    )

    return {"categories": len(DEFAULT_CATEGORIES), "payment_methods": len(DEFAULT_PAYMENT_METHODS)}


async def check_and_create_initial_data(repo: RepoHolder, organization_id: uuid.UUID) -> dict | None:
    """Creates the defaults only for an organization with no categories and no payment methods."""
    has_categories = await repo.category.count_for_organization(organization_id) > 0
    has_payment_methods = await repo.payment_method.count_for_organization(organization_id) > 0

    if has_categories or has_payment_methods:
        logging.info(f"Organization {organization_id} already has its initial data")
        return None

    return await create_initial_data(repo, organization_id)
