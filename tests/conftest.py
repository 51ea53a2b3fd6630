import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from src.core.settings import Settings
from src.db.repo_holder import RepoHolder
from src.db.utils import create_db_tables
from src.web.app import create_app

USER_HEADER = "X-User-Id"
EMAIL_HEADER = "X-User-Email"


async def header_user(request) -> str | None:
    return request.headers.get(USER_HEADER)


async def header_email(request) -> str | None:
    return request.headers.get(EMAIL_HEADER)


def as_user(user_id: uuid.UUID, email: str | None = None) -> dict:
    headers = {USER_HEADER: str(user_id)}
    if email:
        headers[EMAIL_HEADER] = email
    return headers


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'finance.db'}",
        create_tables=False,
        session_secret="test-secret",
        goal_sync_timeout=5.0,
    )


@pytest.fixture
async def session_pool(settings):
    engine = create_async_engine(settings.database_url)
    await create_db_tables(engine)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def app(settings):
    app = create_app(settings, resolve_user=header_user, resolve_email=header_email)
    await create_db_tables(app.state.engine)

    yield app

    await app.state.engine.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def repo(app):
    async with app.state.session_pool() as session:
        yield RepoHolder(session)


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
async def organization(repo, user_id):
    return await repo.organization.create_with_admin(name="Household", description=None, created_by=user_id)


@pytest.fixture
async def asset_category(repo, organization):
    return await repo.asset_category.create(organization_id=organization.id, name="Deposits", type="financial")
