"""
api/routes/auth.py -- Registration, login, logout and account endpoints.

Routes:
  POST   /register   -- create account + first session; 201
  POST   /login      -- password login; returns a fresh bearer token
  POST   /logout     -- revoke the presented token's session row
  GET    /me         -- current user (requires session)
  DELETE /me         -- delete account, sessions and directory content

Security:
  authenticate() provides timing equalization -- use it, never inline
  get_by_email() + verify().
  Login returns the same "bad_credentials" error for unknown email and wrong
  password.
  Cache-Control: no-store on every response that carries a token.
  Logout has no session gate: a token that already expired can still be
  presented to remove its row, and a row that is already gone is a no-op.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.context import AppContext
from api.models import (
    AuthResponse,
    ErrorDetail,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserResponse,
)
from auth.dependencies import require_session
from auth.models import Identity, User
from auth.sessions import extract_bearer_token
from core.errors import ConflictError, InternalError, NotFoundError, ValidationError

logger = logging.getLogger("bizdir.api")

# Auth policy:
# - POST   /register:  public
# - POST   /login:     public
# - POST   /logout:    bearer token read directly, no session gate
# - GET    /me:        requires session (require_session)
# - DELETE /me:        requires session (require_session)
router = APIRouter()


def _no_store(status_code: int, content: dict) -> JSONResponse:
    resp = JSONResponse(status_code=status_code, content=content)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account and log it in.

    The user row and its owner profile are written in one transaction. A
    duplicate email rolls both back and returns 409 before any session is
    issued. If the session cannot be issued the new user is deleted again
    and the request fails with 500.
    """
    ctx: AppContext = request.app.state.ctx
    digest = ctx.credentials.hash(body.password)
    try:
        user_id = ctx.user_store.create_user(
            User(
                name=body.name,
                email=body.email,
                role=body.role,
                hashed_password=digest,
                company=body.company,
                phone=body.phone,
            )
        )
    except IntegrityError as exc:
        raise ConflictError("Email already registered.") from exc

    user = ctx.user_store.get_by_id(user_id)
    try:
        issued = ctx.session_issuer.issue(user)
    except InternalError:
        # No session means no account: the client can retry with the same email.
        ctx.user_store.delete_user(user_id)
        raise
    ctx.activity.log_event(
        "user_registered",
        f"New {user.role.value} registered",
        {"user_id": user.id, "role": user.role.value},
    )
    logger.info("Registered user_id=%s role=%s", user.id, user.role.value)
    return _no_store(
        201,
        AuthResponse(
            user=UserResponse.from_domain(user),
            token=issued.token,
            expires_at=issued.expires_at,
            message="Registration successful.",
        ).model_dump(mode="json"),
    )


@router.post("/login", response_model=AuthResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Exchange email + password for a new bearer token.

    Every successful login creates its own session row; earlier sessions for
    the same user stay valid until they expire or are logged out.
    """
    ctx: AppContext = request.app.state.ctx
    user = ctx.credentials.authenticate(ctx.user_store, body.email, body.password)
    if user is None:
        return _no_store(
            401,
            ErrorResponse(
                error=ErrorDetail(code="bad_credentials", message="Invalid email or password.")
            ).model_dump(),
        )

    issued = ctx.session_issuer.issue(user)
    return _no_store(
        200,
        AuthResponse(
            user=UserResponse.from_domain(user),
            token=issued.token,
            expires_at=issued.expires_at,
        ).model_dump(mode="json"),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request) -> MessageResponse:
    """Delete the session row for exactly the presented token."""
    ctx: AppContext = request.app.state.ctx
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise ValidationError("Authorization header required.")
    try:
        removed = ctx.user_store.delete_session(token)
    except SQLAlchemyError as exc:
        logger.error("Logout failed: %s", type(exc).__name__)
        raise InternalError("Failed to logout.") from exc
    if not removed:
        logger.info("Logout for unknown or already revoked session")
    return MessageResponse(message="Logged out successfully.")


@router.get("/me", response_model=UserResponse)
def me(request: Request, identity: Identity = Depends(require_session)) -> UserResponse:
    ctx: AppContext = request.app.state.ctx
    user = ctx.user_store.get_by_id(identity.user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return UserResponse.from_domain(user)


@router.delete("/me", response_model=MessageResponse)
def delete_me(request: Request, identity: Identity = Depends(require_session)) -> MessageResponse:
    """Delete the caller's account.

    Directory content goes first, then the user row together with every
    session row, so all of the caller's tokens stop validating at once.
    """
    ctx: AppContext = request.app.state.ctx
    removed = ctx.directory.purge_owner(identity.user_id)
    if not ctx.user_store.delete_user(identity.user_id):
        raise NotFoundError("User not found.")
    ctx.activity.log_event("user_deleted", "Account deleted", {"user_id": identity.user_id, **removed})
    logger.info("Deleted user_id=%s", identity.user_id)
    return MessageResponse(message="Account deleted.")
