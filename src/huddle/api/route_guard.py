"""Redirect rules for page routes based on sign-in and onboarding state."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from huddle.core.security import InvalidSessionError, SessionClaims, decode_session_token
from huddle.core.settings import settings

logger = logging.getLogger(__name__)

PROTECTED_ROUTES = ("/discover",)
AUTH_ROUTES = ("/sign-in", "/sign-up")
ONBOARDING_ROUTES = ("/onboarding",)
LANDING_ROUTE = "/"

SIGN_IN_PATH = "/sign-in"
ONBOARDING_PATH = "/onboarding"
DISCOVER_PATH = "/discover"


def _matches(path: str, routes: tuple[str, ...]) -> bool:
    # Whole-path match; a trailing slash is ignored but sub-paths are not covered.
    return (path.rstrip("/") or "/") in routes


def is_guarded_path(path: str) -> bool:
    """Return False for static assets and API routes, which are never redirected."""
    last_segment = path.rsplit("/", 1)[-1]
    if "." in last_segment or path.startswith("/_next"):
        return False
    return not (path.startswith("/api/") or path.startswith("/trpc/"))


def resolve_redirect(
    path: str,
    *,
    signed_in: bool,
    onboarding_complete: bool,
    return_url: str | None = None,
) -> str | None:
    """Return the location to redirect to, or None to let the request through."""
    after_sign_in = ONBOARDING_PATH if not onboarding_complete else DISCOVER_PATH

    if not signed_in:
        if _matches(path, PROTECTED_ROUTES):
            query = urlencode({"redirect_url": return_url or path})
            return f"{SIGN_IN_PATH}?{query}"
        return None

    if _matches(path, PROTECTED_ROUTES) and not onboarding_complete:
        return ONBOARDING_PATH
    if _matches(path, AUTH_ROUTES):
        return after_sign_in
    if _matches(path, ONBOARDING_ROUTES) and onboarding_complete:
        return DISCOVER_PATH
    if path == LANDING_ROUTE:
        return after_sign_in
    return None


def claims_from_request(request: Request) -> SessionClaims | None:
    """Read session claims from the bearer header or the session cookie."""
    token: str | None = None
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        token = request.cookies.get(settings.auth_session_cookie)
    if not token:
        return None
    try:
        return decode_session_token(token)
    except InvalidSessionError:
        logger.debug("Ignoring invalid session token on %s", request.url.path)
        return None


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Apply :func:`resolve_redirect` to page routes."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if request.method in ("GET", "HEAD") and is_guarded_path(path):
            claims = claims_from_request(request)
            location = resolve_redirect(
                path,
                signed_in=claims is not None,
                onboarding_complete=bool(claims and claims.onboarding_complete),
                return_url=str(request.url),
            )
            if location is not None:
                return RedirectResponse(location, status_code=307)
        return await call_next(request)
