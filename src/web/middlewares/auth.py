import logging
import re
from typing import Awaitable, Callable
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

PROTECTED_PREFIXES = ("/org", "/organizations", "/dashboard")
AUTH_PREFIXES = ("/login", "/signup")
# Landing pages that are not worth remembering as a post-login destination.
CANONICAL_LANDING_PATHS = ("/organizations", "/dashboard")
LOGIN_PATH = "/login"
HOME_PATH = "/organizations"

STATIC_PATH = re.compile(r"^/(static/|favicon\.ico$)|\.(svg|png|jpe?g|gif|webp)$", re.IGNORECASE)

UserResolver = Callable[[Request], Awaitable[str | None]]


async def session_user(request: Request) -> str | None:
    """Reads the user id the auth provider stored in the signed session cookie."""
    return request.session.get("user_id")


async def session_email(request: Request) -> str | None:
    return request.session.get("email")


def is_safe_redirect(target: str | None) -> bool:
    """Only same-site absolute paths are accepted as post-login destinations."""
    return bool(target) and target.startswith("/") and not target.startswith("//") and "\\" not in target


def resolve_redirect(pathname: str, redirect_param: str | None, is_authenticated: bool) -> str | None:
    """Returns the location to redirect to, or None to let the request through."""
    is_protected = pathname.startswith(PROTECTED_PREFIXES)
    is_auth_route = pathname.startswith(AUTH_PREFIXES)

    if not is_authenticated and is_protected:
        if pathname in CANONICAL_LANDING_PATHS:
            return LOGIN_PATH
        return f"{LOGIN_PATH}?{urlencode({'redirect': pathname})}"

    if is_authenticated and is_auth_route:
        if is_safe_redirect(redirect_param):
            return redirect_param
        return HOME_PATH

    if pathname == "/":
        return HOME_PATH if is_authenticated else LOGIN_PATH

    if pathname == "/dashboard":
        return HOME_PATH

    return None


class AuthRedirectMiddleware(BaseHTTPMiddleware):
    """Resolves the session user for every non-static request and gates page routes."""

    def __init__(
        self,
        app: ASGIApp,
        resolve_user: UserResolver | None = None,
        resolve_email: UserResolver | None = None,
    ) -> None:
        super().__init__(app)
        self.resolve_user = resolve_user or session_user
        self.resolve_email = resolve_email or session_email

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if STATIC_PATH.search(request.url.path):
            return await call_next(request)

        user_id = await self.resolve_user(request)
        request.state.user_id = user_id
        request.state.user_email = await self.resolve_email(request) if user_id else None

        location = resolve_redirect(request.url.path, request.query_params.get("redirect"), bool(user_id))

        if location is not None:
            logging.info(f"Redirecting {request.url.path} -> {location}")
            return RedirectResponse(location, status_code=307)

        return await call_next(request)
