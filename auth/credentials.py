"""
auth/credentials.py -- Password hashing and credential verification.

Security design decisions:
  bcrypt directly (no passlib wrapper). Its cost factor makes brute force
  expensive for low-entropy secrets. The cost is configurable
  (Settings.bcrypt_rounds) so tests can run at the minimum of 4.

  bcrypt only looks at the first 72 bytes of input; newer releases refuse
  longer input outright. hash() rejects over-long passwords with a 400 rather
  than letting two different passwords collide on the same digest.

  verify() fails closed: any exception from bcrypt (malformed digest, wrong
  type) is a failed match, never an error that escapes to the caller.

  authenticate() runs exactly one bcrypt comparison whether or not the email
  exists. Unknown emails are checked against a dummy digest computed once
  in __init__, so response time does not reveal which emails are registered.

Layer rule: no imports from api/ or directory/.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import bcrypt

from core.errors import InternalError, ValidationError

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("bizdir.auth")

_MAX_PASSWORD_BYTES = 72


class CredentialStore:
    """One-way password digests plus timing-equalized login checks.

    Usage:
        credentials = CredentialStore(rounds=12)
        digest = credentials.hash("pw123456")
        credentials.verify("pw123456", digest)   # True
        user = credentials.authenticate(user_store, "alice@example.com", "pw123456")
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash = self.hash("bizdir_timing_dummy")

    def hash(self, password: str) -> str:
        """Return a salted bcrypt digest of password.

        Raises ValidationError for passwords over 72 bytes and InternalError
        if bcrypt itself fails.
        """
        raw = password.encode("utf-8")
        if len(raw) > _MAX_PASSWORD_BYTES:
            raise ValidationError("Password must be at most 72 bytes.")
        try:
            return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")
        except (ValueError, TypeError) as exc:
            logger.error("Password hashing failed: %s", type(exc).__name__)
            raise InternalError("Could not process password.") from exc

    def verify(self, password: str, digest: str) -> bool:
        """Return True if password matches digest. Any error counts as a mismatch."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), digest.encode("utf-8"))
        except Exception:
            return False

    def authenticate(self, store: UserStore, email: str, password: str) -> User | None:
        """Return the User for a correct email/password pair, None otherwise.

        Always runs bcrypt -- do NOT return early before the comparison:
        - Unknown email: bcrypt runs against the dummy digest
        - Wrong password: bcrypt runs against the real digest
        """
        user = store.get_by_email(email)
        if user is None or not user.hashed_password:
            self.verify(password, self._dummy_hash)
            return None
        if not self.verify(password, user.hashed_password):
            return None
        return user
