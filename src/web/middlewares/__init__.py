from .auth import AuthRedirectMiddleware, resolve_redirect

__all__ = [
    "AuthRedirectMiddleware",
    "resolve_redirect",
]
