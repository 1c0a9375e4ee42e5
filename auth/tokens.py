"""
auth/tokens.py -- JWT signing and verification.

Security design decisions:
  python-jose with HS256. Tokens carry user_id, email, role, exp, plus iat
  and a random jti. The jti guarantees two logins in the same second still
  produce distinct tokens -- the sessions table has a UNIQUE token column and
  each login must own its own revocable row.

  Algorithm pinning: decode() inspects the unverified header first and
  rejects any alg other than the configured one (including "none") before
  touching the signature. jwt.decode() is then called with algorithms=[alg]
  so the library enforces the same rule a second time.

  The signing key is held by the TokenSigner instance that the AppContext
  builds at startup. There is no module-level key: every component that
  signs or verifies receives the signer explicitly.

Layer rule: no imports from api/ or directory/.
"""

from __future__ import annotations

import secrets
from typing import Any

from jose import JWTError, jwt

from core.errors import AuthenticationError

_ALGORITHM = "HS256"

# Claims every session token must carry.
_REQUIRED_CLAIMS = ("user_id", "email", "role", "exp")


class TokenSigner:
    """Encode and verify HS256 JWTs with a key fixed at construction.

    The key is read-only after __init__, so one instance can be shared by all
    request threads without locking.
    """

    def __init__(self, secret_key: str, algorithm: str = _ALGORITHM) -> None:
        if not secret_key:
            raise ValueError("TokenSigner requires a non-empty secret key.")
        self._secret_key = secret_key
        self.algorithm = algorithm

    def encode(self, user_id: int, email: str, role: str, expires_at: int, issued_at: int) -> str:
        """Return a signed token for the given identity and absolute expiry (unix seconds)."""
        payload = {
            "user_id": user_id,
            "email": email,
            "role": role,
            "exp": expires_at,
            "iat": issued_at,
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """Verify signature, algorithm and claim shape; return the claims.

        Raises AuthenticationError on any failure. Expiry is checked here by
        jose against wall-clock time; SessionValidator checks it again against
        its own clock.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise AuthenticationError("Malformed token.") from exc
        if header.get("alg") != self.algorithm:
            raise AuthenticationError("Unexpected token signing algorithm.")

        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise AuthenticationError("Invalid or expired token.") from exc

        if any(name not in claims for name in _REQUIRED_CLAIMS):
            raise AuthenticationError("Token is missing required claims.")
        if not isinstance(claims["user_id"], int) or isinstance(claims["user_id"], bool):
            raise AuthenticationError("Token user_id claim must be an integer.")
        return claims
