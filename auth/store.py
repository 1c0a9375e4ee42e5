"""
auth/store.py -- SQLAlchemy Core persistence layer for auth entities.

Pattern: Repository + Data Mapper (same as directory/store.py).
UserStore is the repository; _row_to_user / _row_to_session are the mappers.
Route and dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  The sessions table is the sole source of truth for revocation. A session is
  live iff its row exists AND expires_at > now. Each auth-path operation is a
  single statement (insert / lookup / delete), so per-statement atomicity is
  all the session lifecycle needs.

  User creation (user row + owner profile row) and user deletion (sessions +
  profile + user) each run in one transaction. The FOREIGN KEY ... ON DELETE
  CASCADE clauses back this up on databases that enforce them; SQLite only
  does so with PRAGMA foreign_keys=ON, set per connection below.

DB path: auth/bizdir_auth.db by default (Settings.auth_database_url).

Layer rule: no imports from api/ or directory/.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    event,
    func,
    select,
    text,
)
from sqlalchemy.engine import Engine

from auth.models import Role, Session, User

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).parent / 'bizdir_auth.db'}"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", String(255), nullable=False),
    Column("role", String(30), nullable=False, server_default=Role.MEMBER.value),
    Column("created_at", String(32), nullable=False),
)

_business_owners = Table(
    "business_owners",
    _metadata,
    Column("id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("company", String(255)),
    Column("phone", String(50)),
)

_event_owners = Table(
    "event_owners",
    _metadata,
    Column("id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("organization", String(255)),
    Column("phone", String(50)),
)

_sessions = Table(
    "sessions",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("token", String(500), nullable=False, unique=True),
    Column("created_at", String(32), nullable=False),
    Column("expires_at", Integer, nullable=False, index=True),  # unix seconds
)


# ---------------------------------------------------------------------------
# SQLite connection pragmas
# ---------------------------------------------------------------------------


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode and foreign key enforcement.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User and Session entities.

    Usage:
        store = UserStore()
        user_id = store.create_user(User(name="Alice", email="alice@example.com",
                                         role=Role.BUSINESS_OWNER, hashed_password=digest))
        store.create_session(user_id, token, expires_at)
        session = store.get_live_session(token, now=int(time.time()))
        store.delete_session(token)
        store.close()
    """

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_sqlite_pragmas)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> int:
        """Insert a user (and its owner profile, if any) and return the new ID.

        Raises sqlalchemy.exc.IntegrityError if the email already exists. The
        transaction rolls back as a whole, so a duplicate leaves no partial
        profile row behind.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _users.insert().values(
                    name=user.name,
                    email=user.email,
                    hashed_password=user.hashed_password,
                    role=user.role.value,
                    created_at=_now_iso(),
                )
            )
            user_id = result.inserted_primary_key[0]
            if user.role is Role.BUSINESS_OWNER:
                conn.execute(_business_owners.insert().values(id=user_id, company=user.company, phone=user.phone))
            elif user.role is Role.EVENT_OWNER:
                conn.execute(_event_owners.insert().values(id=user_id, organization=user.company, phone=user.phone))
        return user_id

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(self._user_select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(self._user_select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def count_users(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(_users)).scalar() or 0

    def delete_user(self, user_id: int) -> bool:
        """Delete a user together with every session and profile row it owns.

        Returns True if the user existed. All outstanding tokens for the user
        stop validating as soon as this commits.
        """
        with self.engine.begin() as conn:
            conn.execute(_sessions.delete().where(_sessions.c.user_id == user_id))
            conn.execute(_business_owners.delete().where(_business_owners.c.id == user_id))
            conn.execute(_event_owners.delete().where(_event_owners.c.id == user_id))
            result = conn.execute(_users.delete().where(_users.c.id == user_id))
            deleted = result.rowcount > 0
        return deleted

    @staticmethod
    def _user_select():
        """users LEFT JOIN both profile tables; company/phone come from whichever matches."""
        return select(
            _users,
            func.coalesce(_business_owners.c.company, _event_owners.c.organization).label("company"),
            func.coalesce(_business_owners.c.phone, _event_owners.c.phone).label("phone"),
        ).select_from(
            _users.outerjoin(_business_owners, _business_owners.c.id == _users.c.id).outerjoin(
                _event_owners, _event_owners.c.id == _users.c.id
            )
        )

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self, user_id: int, token: str, expires_at: int) -> int:
        """Persist a session row and return its ID. Raises on any DB failure."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _sessions.insert().values(
                    user_id=user_id,
                    token=token,
                    created_at=_now_iso(),
                    expires_at=expires_at,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_live_session(self, token: str, now: int) -> Session | None:
        """Return the session for token if its row exists and expires_at > now.

        Never-issued, revoked and expired tokens all come back as None.
        """
        with self.engine.connect() as conn:
            row = conn.execute(
                _sessions.select().where((_sessions.c.token == token) & (_sessions.c.expires_at > now))
            ).fetchone()
        return _row_to_session(row) if row is not None else None

    def list_sessions(self, user_id: int) -> list[Session]:
        """Return every stored session for a user, live or not, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _sessions.select().where(_sessions.c.user_id == user_id).order_by(_sessions.c.id)
            ).fetchall()
        return [_row_to_session(r) for r in rows]

    def delete_session(self, token: str) -> bool:
        """Delete exactly the row matching token. Returns False if it was already gone."""
        with self.engine.connect() as conn:
            result = conn.execute(_sessions.delete().where(_sessions.c.token == token))
            conn.commit()
            return result.rowcount > 0

    def purge_expired_sessions(self, now: int) -> int:
        """Delete every session with expires_at <= now. Returns the number removed."""
        with self.engine.connect() as conn:
            result = conn.execute(_sessions.delete().where(_sessions.c.expires_at <= now))
            conn.commit()
            return result.rowcount

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        role=Role(row.role),
        company=row.company,
        phone=row.phone,
        created_at=row.created_at,
    )


def _row_to_session(row) -> Session:
    return Session(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        created_at=row.created_at,
        expires_at=row.expires_at,
    )
