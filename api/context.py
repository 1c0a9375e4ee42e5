"""
api/context.py -- Explicit application context.

Every long-lived collaborator (stores, signer, issuer, validator, activity
monitor) is constructed once in build_context() and hung off
app.state.ctx by the lifespan. Routes and dependencies reach them through
request.app.state.ctx -- there are no package-level singletons holding keys
or connections, so tests can build an isolated context per module.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from auth.credentials import CredentialStore
from auth.sessions import SessionIssuer, SessionValidator
from auth.store import UserStore
from auth.tokens import TokenSigner
from core.activity import ActivityMonitor
from core.config import Settings
from directory.store import DirectoryStore

logger = logging.getLogger("bizdir.api")


@dataclass
class AppContext:
    settings: Settings
    signer: TokenSigner
    credentials: CredentialStore
    user_store: UserStore
    directory: DirectoryStore
    session_issuer: SessionIssuer
    session_validator: SessionValidator
    activity: ActivityMonitor

    def close(self) -> None:
        self.user_store.close()
        self.directory.close()


def build_context(settings: Settings, clock: Callable[[], float] = time.time) -> AppContext:
    """Wire every collaborator from settings. clock is injectable for tests."""
    signer = TokenSigner(settings.secret_key)
    user_store = UserStore(settings.auth_database_url)
    directory = DirectoryStore(settings.directory_database_url)
    ctx = AppContext(
        settings=settings,
        signer=signer,
        credentials=CredentialStore(rounds=settings.bcrypt_rounds),
        user_store=user_store,
        directory=directory,
        session_issuer=SessionIssuer(user_store, signer, ttl_seconds=settings.token_expire_seconds, clock=clock),
        session_validator=SessionValidator(user_store, signer, clock=clock),
        activity=ActivityMonitor(max_events=settings.event_log_size),
    )
    logger.info(
        "Context built (token_ttl=%ds, bcrypt_rounds=%d)",
        settings.token_expire_seconds,
        settings.bcrypt_rounds,
    )
    return ctx
