"""
auth/models.py -- Domain types for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in directory/models.py -- dataclasses own domain shape; stores and routes do
the work.

Role is a closed enum. Every authorization decision compares Role members,
never raw strings; a token whose role claim does not parse into Role is
rejected by the validator.

Layer rule: no imports from api/ or directory/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    MEMBER = "member"
    BUSINESS_OWNER = "business_owner"
    EVENT_OWNER = "event_owner"


@dataclass
class User:
    """A registered account.

    role is fixed at registration; there is no role-change path.
    company and phone are owner-profile fields (business_owners /
    event_owners table) and stay None for members.
    """

    name: str
    email: str
    role: Role
    id: int | None = None
    hashed_password: str | None = None
    company: str | None = None
    phone: str | None = None
    created_at: str | None = None


@dataclass
class Session:
    """A persisted, revocable binding of a bearer token to a user.

    expires_at is unix seconds -- the same unit as the JWT exp claim, so the
    row and the token expire together.
    """

    user_id: int
    token: str
    expires_at: int
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, injected into each request by the auth gate.

    Downstream handlers read user_id for ownership checks and role for
    coarse gating; they never re-parse the token.
    """

    user_id: int
    role: Role
    email: str
    session_id: int


@dataclass(frozen=True)
class IssuedSession:
    """Result of SessionIssuer.issue(): the bearer token and its expiry."""

    token: str
    expires_at: int
