"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication and
role-based authorization.

require_session() validates the bearer token through the SessionValidator on
the AppContext, stores the resulting Identity on request.state.identity (per-
request metadata, never global state) and returns it.

require_role(*roles) wraps require_session() and checks the caller's Role
against a closed, explicit set. Role sets are spelled out per route through
the named gates below -- they are never computed at request time.

Failures raise core.errors exceptions; api/main.py renders them as 401/403.

Ownership (does this user own this business / event / booking?) is NOT
decided here. Routes pass identity.user_id to the store, which enforces it.

Layer rule: no imports from directory/. auth/dependencies.py may import from
fastapi because this module is part of the FastAPI dependency injection
system.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Request

from auth.models import Identity, Role
from core.errors import AuthorizationError

_ROLE_LABELS: dict[Role, str] = {
    Role.MEMBER: "member",
    Role.BUSINESS_OWNER: "business owner",
    Role.EVENT_OWNER: "event owner",
}


def require_session(request: Request) -> Identity:
    """Require a live session. Raises AuthenticationError (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: Identity = Depends(require_session)): ...
    """
    validator = request.app.state.ctx.session_validator
    identity = validator.validate(request.headers.get("Authorization"))
    request.state.identity = identity
    return identity


def require_role(*roles: Role) -> Callable[[Request], Identity]:
    """Build a dependency that admits only the given roles.

    Raises AuthenticationError (401) if there is no live session and
    AuthorizationError (403) if the caller's role is not in roles.
    """
    allowed = frozenset(roles)
    if not allowed:
        raise ValueError("require_role() needs at least one role.")
    label = " or ".join(_ROLE_LABELS[r] for r in sorted(allowed, key=lambda r: r.value))

    def dependency(request: Request) -> Identity:
        identity = require_session(request)
        if identity.role not in allowed:
            raise AuthorizationError(f"{label.capitalize()} access required.")
        return identity

    return dependency


# Closed role sets used by the routes.
require_business_owner = require_role(Role.BUSINESS_OWNER)
require_event_manager = require_role(Role.EVENT_OWNER, Role.BUSINESS_OWNER)
