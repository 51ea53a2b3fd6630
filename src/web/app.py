import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from starlette.middleware.sessions import SessionMiddleware

from src.core.settings import Settings, settings as default_settings
from src.db.utils import create_db_tables
from src.services.goal_sync import GoalSyncManager
from src.web.errors import register_error_handlers
from src.web.middlewares.auth import AuthRedirectMiddleware, UserResolver
from src.web.routers import api_router


def create_app(
    settings: Settings | None = None,
    resolve_user: UserResolver | None = None,
    resolve_email: UserResolver | None = None,
) -> FastAPI:
    """Builds the application: engine, session pool, goal sync manager, middleware and routes."""
    settings = settings or default_settings

    engine = create_async_engine(str(settings.database_url), echo=settings.sql_echo)
    session_pool = async_sessionmaker(engine, expire_on_commit=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_tables:
            await create_db_tables(engine=engine)
        logging.info("Application started.")
        yield
        await engine.dispose()

    app = FastAPI(title="Finance Tracker", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_pool = session_pool
    app.state.goal_sync = GoalSyncManager(session_pool, timeout=settings.goal_sync_timeout)

    # The session middleware is added last so it wraps the auth middleware.
    app.add_middleware(AuthRedirectMiddleware, resolve_user=resolve_user, resolve_email=resolve_email)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        same_site="lax",
    )

    register_error_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app
