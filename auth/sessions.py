"""
auth/sessions.py -- Session issuance and per-request session validation.

Hybrid stateless/stateful scheme: every session is BOTH a signed JWT (the
bearer token the client holds) AND a row in the sessions table. Both checks
run on every protected request, and both must pass:

  - The row check is the revocation mechanism. Logout deletes the row, and
    the token stops working immediately even though its signature and exp
    are still valid. Dropping it would leave logout ineffective until the
    token expired naturally.
  - The signature check binds the row to a token this process actually
    signed. Dropping it would let anyone able to insert a row mint sessions.

Validation order is fixed: header -> row lookup -> signature -> claims.
The row lookup is an indexed equality query and rejects unknown, revoked and
expired tokens before any HMAC work, which bounds the cost of floods of
junk tokens.

Issuance couples signing and persisting: the token is returned only after the
row insert commits. If the insert fails the token is discarded and the caller
gets InternalError, so a signed-but-unpersisted token never leaves the process.

Layer rule: no imports from api/ or directory/.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from auth.models import Identity, IssuedSession, Role, User
from auth.store import UserStore
from auth.tokens import TokenSigner
from core.errors import AuthenticationError, InternalError

logger = logging.getLogger("bizdir.auth")

_BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an "Authorization: Bearer <token>" value, or None if absent/malformed."""
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :].strip()
    return token or None


class SessionIssuer:
    """Mint a signed token and persist its revocable session row.

    clock returns unix seconds; tests inject a fixed clock to control expiry.
    """

    def __init__(
        self,
        store: UserStore,
        signer: TokenSigner,
        ttl_seconds: int = 86400,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._signer = signer
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def issue(self, user: User) -> IssuedSession:
        """Return a new session for user. Raises InternalError if signing or persisting fails."""
        if user.id is None:
            raise InternalError("Cannot issue a session for an unsaved user.")
        now = int(self._clock())
        expires_at = now + self.ttl_seconds
        try:
            token = self._signer.encode(
                user_id=user.id,
                email=user.email,
                role=user.role.value,
                expires_at=expires_at,
                issued_at=now,
            )
        except Exception as exc:
            logger.error("Token signing failed for user_id=%s: %s", user.id, type(exc).__name__)
            raise InternalError("Failed to generate token.") from exc

        try:
            self._store.create_session(user.id, token, expires_at)
        except SQLAlchemyError as exc:
            logger.error("Storing session failed for user_id=%s: %s", user.id, type(exc).__name__)
            raise InternalError("Failed to generate token.") from exc

        logger.info("Session issued for user_id=%s (expires_at=%d)", user.id, expires_at)
        return IssuedSession(token=token, expires_at=expires_at)


class SessionValidator:
    """Turn an Authorization header into an Identity, or raise AuthenticationError.

    Expired and revoked sessions are reported identically -- callers cannot
    tell the two apart.
    """

    def __init__(
        self,
        store: UserStore,
        signer: TokenSigner,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._signer = signer
        self._clock = clock

    def validate(self, authorization: str | None) -> Identity:
        token = extract_bearer_token(authorization)
        if token is None:
            raise AuthenticationError("Authorization header required.")

        now = int(self._clock())

        # 1. Row must exist and be unexpired. Cheapest check, and the one
        #    that makes revocation immediate.
        session = self._store.get_live_session(token, now)
        if session is None:
            raise AuthenticationError("Invalid or expired session.")

        # 2. Signature, algorithm and claim shape.
        claims = self._signer.decode(token)
        if claims["exp"] <= now:
            raise AuthenticationError("Invalid or expired session.")

        # 3. Claims must describe the same user the row belongs to.
        if claims["user_id"] != session.user_id:
            logger.warning("Token claims do not match session row (session_id=%s)", session.id)
            raise AuthenticationError("Invalid or expired session.")
        try:
            role = Role(claims["role"])
        except ValueError as exc:
            raise AuthenticationError("Invalid or expired session.") from exc

        return Identity(
            user_id=session.user_id,
            role=role,
            email=str(claims["email"]),
            session_id=session.id,
        )
