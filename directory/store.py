"""
directory/store.py -- SQLAlchemy Core persistence for the business directory.

Pattern: Repository + Data Mapper, same as auth/store.py. DirectoryStore is
the repository; the _row_to_* functions are the mappers.

Ownership:
  Every owner-scoped update or delete is ONE conditional statement,
  `... WHERE id = :id AND owner_id = :owner`. There is no separate
  "read owner, compare, then write" window for a concurrent request to slip
  through. When the statement matches nothing, a follow-up existence lookup
  only decides which error to raise: NotFoundError (404) if the row does not
  exist, AuthorizationError (403) if it belongs to someone else.

Users live in a separate database (auth/store.py), so owner_id / uploaded_by
are plain integers here. Removing a user's content is purge_owner(), called
by the account deletion route.

Security: all queries use bound parameters. No f-strings in SQL.

DB path: directory/bizdir_directory.db by default (Settings.directory_database_url).
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    event,
    func,
    select,
    text,
)
from sqlalchemy.engine import Connection, Engine

from core.errors import AuthorizationError, NotFoundError, ValidationError
from directory.models import (
    BOOKING_STATUSES,
    IMAGE_ENTITY_TYPES,
    Booking,
    Business,
    Event,
    Image,
)

logger = logging.getLogger("bizdir.directory")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).parent / 'bizdir_directory.db'}"

# Columns callers may change through update_*(). Anything else is rejected.
_BUSINESS_FIELDS = frozenset({"name", "category", "description", "phone", "email", "address", "rating"})
_EVENT_FIELDS = frozenset({"title", "description", "event_date", "location", "price", "category"})
_IMAGE_FIELDS = frozenset({"caption", "display_order", "is_primary"})

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_businesses = Table(
    "businesses",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("category", String(100), nullable=False),
    Column("description", Text),
    Column("phone", String(50)),
    Column("email", String(255)),
    Column("address", Text),
    Column("rating", Float, nullable=False, server_default="0"),
    Column("owner_id", Integer, nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
)

_business_views = Table(
    "business_views",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "business_id",
        Integer,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("user_ip", String(45)),
    Column("user_agent", Text),
    Column("viewed_at", String(32), nullable=False),
)

_events = Table(
    "events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner_id", Integer, nullable=False, index=True),
    Column("business_id", Integer, ForeignKey("businesses.id", ondelete="SET NULL"), index=True),
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("event_date", DateTime, nullable=False, index=True),  # naive UTC
    Column("location", String(255)),
    Column("price", Float, nullable=False, server_default="0"),
    Column("category", String(100)),
    Column("created_at", String(32), nullable=False),
)

_bookings = Table(
    "bookings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(50)),
    Column("tickets", Integer, nullable=False, server_default="1"),
    Column("notes", Text),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("created_at", String(32), nullable=False),
)

_images = Table(
    "images",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("entity_type", String(50), nullable=False),
    Column("entity_id", Integer, nullable=False),
    Column("image_url", String(500), nullable=False),
    Column("caption", String(255)),
    Column("display_order", Integer, nullable=False, server_default="0"),
    Column("is_primary", Boolean, nullable=False, server_default="0"),
    Column("uploaded_by", Integer),
    Column("created_at", String(32), nullable=False),
    Index("idx_images_entity", "entity_type", "entity_id"),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode and foreign key enforcement on each new connection."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def utc_now() -> datetime:
    """Current time as a naive UTC datetime, the form event_date is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _primary_image_url(entity_type: str, id_column):
    """Correlated subquery: URL of the entity's first image by (is_primary desc, display_order, created_at)."""
    return (
        select(_images.c.image_url)
        .where((_images.c.entity_type == entity_type) & (_images.c.entity_id == id_column))
        .order_by(
            _images.c.is_primary.desc(),
            _images.c.display_order,
            _images.c.created_at,
            _images.c.id,
        )
        .limit(1)
        .scalar_subquery()
        .label("image_url")
    )


def _business_select():
    return select(_businesses, _primary_image_url("business", _businesses.c.id))


def _event_select():
    return select(_events, _primary_image_url("event", _events.c.id))


def _check_fields(fields: dict, allowed: frozenset) -> None:
    if not fields:
        raise ValidationError("No fields to update.")
    unknown = set(fields) - allowed
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}.")


def _raise_missing_or_forbidden(conn: Connection, table: Table, row_id: int, label: str) -> None:
    """Called after a conditional write matched no row: pick 404 or 403."""
    exists = conn.execute(select(table.c.id).where(table.c.id == row_id)).first()
    if exists is None:
        raise NotFoundError(f"{label} not found.")
    raise AuthorizationError(f"You do not own this {label.lower()}.")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class DirectoryStore:
    """Repository for businesses, views, events, bookings and images.

    Usage:
        store = DirectoryStore()
        business_id = store.create_business(Business(name="Bella Pizza", category="Restaurant", owner_id=7))
        store.record_view(business_id, "203.0.113.9", "curl/8.0")
        store.update_business(business_id, 7, rating=4.8)
        store.close()
    """

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_sqlite_pragmas)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Businesses
    # ------------------------------------------------------------------

    def create_business(self, business: Business) -> int:
        """Insert a business and return its assigned ID."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _businesses.insert().values(
                    name=business.name,
                    category=business.category,
                    description=business.description,
                    phone=business.phone,
                    email=business.email,
                    address=business.address,
                    rating=business.rating,
                    owner_id=business.owner_id,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_business(self, business_id: int) -> Optional[Business]:
        with self.engine.connect() as conn:
            row = conn.execute(_business_select().where(_businesses.c.id == business_id)).fetchone()
        return _row_to_business(row) if row is not None else None

    def list_businesses(self, owner_id: Optional[int] = None) -> list[Business]:
        """Return businesses newest first, optionally only those owned by owner_id."""
        stmt = _business_select()
        if owner_id is not None:
            stmt = stmt.where(_businesses.c.owner_id == owner_id)
        stmt = stmt.order_by(_businesses.c.created_at.desc(), _businesses.c.id.desc())
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_business(r) for r in rows]

    def count_businesses(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(_businesses)).scalar() or 0

    def update_business(self, business_id: int, owner_id: int, /, **fields) -> Business:
        """Update fields on a business owned by owner_id and return the new state.

        Raises ValidationError (no/unknown fields), NotFoundError or AuthorizationError.
        """
        _check_fields(fields, _BUSINESS_FIELDS)
        with self.engine.begin() as conn:
            result = conn.execute(
                _businesses.update()
                .where((_businesses.c.id == business_id) & (_businesses.c.owner_id == owner_id))
                .values(**fields)
            )
            if result.rowcount == 0:
                _raise_missing_or_forbidden(conn, _businesses, business_id, "Business")
            row = conn.execute(_business_select().where(_businesses.c.id == business_id)).one()
        return _row_to_business(row)

    def delete_business(self, business_id: int, owner_id: int) -> None:
        """Delete a business owned by owner_id, with its views and images.

        Events linked to the business survive with business_id cleared.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _businesses.delete().where((_businesses.c.id == business_id) & (_businesses.c.owner_id == owner_id))
            )
            if result.rowcount == 0:
                _raise_missing_or_forbidden(conn, _businesses, business_id, "Business")
            # Children go explicitly as well, for engines without FK enforcement.
            conn.execute(_business_views.delete().where(_business_views.c.business_id == business_id))
            conn.execute(
                _images.delete().where(
                    (_images.c.entity_type == "business") & (_images.c.entity_id == business_id)
                )
            )
            conn.execute(_events.update().where(_events.c.business_id == business_id).values(business_id=None))

    def business_owner_id(self, business_id: int) -> Optional[int]:
        with self.engine.connect() as conn:
            return conn.execute(select(_businesses.c.owner_id).where(_businesses.c.id == business_id)).scalar()

    # ------------------------------------------------------------------
    # Views and owner statistics
    # ------------------------------------------------------------------

    def record_view(self, business_id: int, user_ip: Optional[str], user_agent: Optional[str]) -> None:
        with self.engine.connect() as conn:
            conn.execute(
                _business_views.insert().values(
                    business_id=business_id,
                    user_ip=user_ip,
                    user_agent=user_agent,
                    viewed_at=_now_iso(),
                )
            )
            conn.commit()

    def owner_stats(self, owner_id: int) -> dict:
        """Aggregate counts for an owner's dashboard.

        average_rating ignores unrated (0) businesses and is 0.0 when none are rated.
        business_views lists every owned business, most viewed first.
        """
        owned_ids = select(_businesses.c.id).where(_businesses.c.owner_id == owner_id)
        view_count = func.count(_business_views.c.id).label("view_count")
        with self.engine.connect() as conn:
            business_count = conn.execute(
                select(func.count()).select_from(_businesses).where(_businesses.c.owner_id == owner_id)
            ).scalar()
            total_views = conn.execute(
                select(func.count())
                .select_from(_business_views)
                .where(_business_views.c.business_id.in_(owned_ids))
            ).scalar()
            average_rating = conn.execute(
                select(func.avg(_businesses.c.rating)).where(
                    (_businesses.c.owner_id == owner_id) & (_businesses.c.rating > 0)
                )
            ).scalar()
            rows = conn.execute(
                select(_businesses.c.id, _businesses.c.name, view_count)
                .select_from(
                    _businesses.outerjoin(_business_views, _business_views.c.business_id == _businesses.c.id)
                )
                .where(_businesses.c.owner_id == owner_id)
                .group_by(_businesses.c.id, _businesses.c.name)
                .order_by(view_count.desc(), _businesses.c.id)
            ).fetchall()
        return {
            "business_count": business_count or 0,
            "total_views": total_views or 0,
            "average_rating": round(float(average_rating), 2) if average_rating is not None else 0.0,
            "business_views": [{"id": r.id, "name": r.name, "view_count": r.view_count} for r in rows],
        }

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def create_event(self, ev: Event) -> int:
        """Insert an event and return its ID.

        If ev.business_id is set, the business must exist (NotFoundError) and
        belong to ev.owner_id (AuthorizationError). Checked in the same
        transaction as the insert.
        """
        with self.engine.begin() as conn:
            if ev.business_id is not None:
                business_owner = conn.execute(
                    select(_businesses.c.owner_id).where(_businesses.c.id == ev.business_id)
                ).scalar()
                if business_owner is None:
                    raise NotFoundError("Business not found.")
                if business_owner != ev.owner_id:
                    raise AuthorizationError("You can only create events for your own businesses.")
            result = conn.execute(
                _events.insert().values(
                    owner_id=ev.owner_id,
                    business_id=ev.business_id,
                    title=ev.title,
                    description=ev.description,
                    event_date=ev.event_date,
                    location=ev.location,
                    price=ev.price,
                    category=ev.category,
                    created_at=_now_iso(),
                )
            )
            return result.inserted_primary_key[0]

    def get_event(self, event_id: int) -> Optional[Event]:
        with self.engine.connect() as conn:
            row = conn.execute(_event_select().where(_events.c.id == event_id)).fetchone()
        return _row_to_event(row) if row is not None else None

    def list_upcoming_events(
        self,
        business_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> list[Event]:
        """Return events dated now or later, soonest first."""
        cutoff = now if now is not None else utc_now()
        stmt = _event_select().where(_events.c.event_date >= cutoff)
        if business_id is not None:
            stmt = stmt.where(_events.c.business_id == business_id)
        stmt = stmt.order_by(_events.c.event_date, _events.c.id)
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_event(r) for r in rows]

    def list_events_by_owner(self, owner_id: int) -> list[Event]:
        """All of an owner's events, past ones included, soonest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _event_select().where(_events.c.owner_id == owner_id).order_by(_events.c.event_date, _events.c.id)
            ).fetchall()
        return [_row_to_event(r) for r in rows]

    def update_event(self, event_id: int, owner_id: int, /, **fields) -> Event:
        _check_fields(fields, _EVENT_FIELDS)
        with self.engine.begin() as conn:
            result = conn.execute(
                _events.update()
                .where((_events.c.id == event_id) & (_events.c.owner_id == owner_id))
                .values(**fields)
            )
            if result.rowcount == 0:
                _raise_missing_or_forbidden(conn, _events, event_id, "Event")
            row = conn.execute(_event_select().where(_events.c.id == event_id)).one()
        return _row_to_event(row)

    def delete_event(self, event_id: int, owner_id: int) -> None:
        """Delete an event owned by owner_id together with its bookings and images."""
        with self.engine.begin() as conn:
            result = conn.execute(
                _events.delete().where((_events.c.id == event_id) & (_events.c.owner_id == owner_id))
            )
            if result.rowcount == 0:
                _raise_missing_or_forbidden(conn, _events, event_id, "Event")
            conn.execute(_bookings.delete().where(_bookings.c.event_id == event_id))
            conn.execute(
                _images.delete().where((_images.c.entity_type == "event") & (_images.c.entity_id == event_id))
            )

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    def create_booking(self, booking: Booking) -> int:
        """Insert a booking for an existing event. Raises NotFoundError if the event is gone."""
        if booking.tickets < 1:
            raise ValidationError("tickets must be at least 1.")
        with self.engine.begin() as conn:
            if conn.execute(select(_events.c.id).where(_events.c.id == booking.event_id)).first() is None:
                raise NotFoundError("Event not found.")
            result = conn.execute(
                _bookings.insert().values(
                    event_id=booking.event_id,
                    name=booking.name,
                    email=booking.email,
                    phone=booking.phone,
                    tickets=booking.tickets,
                    notes=booking.notes,
                    status=booking.status,
                    created_at=_now_iso(),
                )
            )
            return result.inserted_primary_key[0]

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        with self.engine.connect() as conn:
            row = conn.execute(_bookings.select().where(_bookings.c.id == booking_id)).fetchone()
        return _row_to_booking(row) if row is not None else None

    def list_bookings_for_owner(self, owner_id: int) -> list[Booking]:
        """Bookings on every event owner_id owns, newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _bookings.select()
                .where(_bookings.c.event_id.in_(select(_events.c.id).where(_events.c.owner_id == owner_id)))
                .order_by(_bookings.c.created_at.desc(), _bookings.c.id.desc())
            ).fetchall()
        return [_row_to_booking(r) for r in rows]

    def update_booking_status(self, booking_id: int, owner_id: int, status: str) -> None:
        """Set a booking's status. Only the owner of the booked event may do this."""
        if status not in BOOKING_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(BOOKING_STATUSES)}.")
        owned_events = select(_events.c.id).where(_events.c.owner_id == owner_id)
        with self.engine.begin() as conn:
            result = conn.execute(
                _bookings.update()
                .where((_bookings.c.id == booking_id) & (_bookings.c.event_id.in_(owned_events)))
                .values(status=status)
            )
            if result.rowcount == 0:
                _raise_missing_or_forbidden(conn, _bookings, booking_id, "Booking")

    def delete_booking(self, booking_id: int, owner_id: int) -> None:
        owned_events = select(_events.c.id).where(_events.c.owner_id == owner_id)
        with self.engine.begin() as conn:
            result = conn.execute(
                _bookings.delete().where((_bookings.c.id == booking_id) & (_bookings.c.event_id.in_(owned_events)))
            )
            if result.rowcount == 0:
                _raise_missing_or_forbidden(conn, _bookings, booking_id, "Booking")

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def list_images(self, entity_type: str, entity_id: int) -> list[Image]:
        """Images for one entity, primary first, then by display_order."""
        _check_entity_type(entity_type)
        with self.engine.connect() as conn:
            rows = conn.execute(
                _images.select()
                .where((_images.c.entity_type == entity_type) & (_images.c.entity_id == entity_id))
                .order_by(
                    _images.c.is_primary.desc(),
                    _images.c.display_order,
                    _images.c.created_at,
                    _images.c.id,
                )
            ).fetchall()
        return [_row_to_image(r) for r in rows]

    def get_image(self, image_id: int) -> Optional[Image]:
        with self.engine.connect() as conn:
            row = conn.execute(_images.select().where(_images.c.id == image_id)).fetchone()
        return _row_to_image(row) if row is not None else None

    def add_image(self, image: Image) -> int:
        """Attach an image URL to a business or event owned by image.uploaded_by.

        The image is appended after the entity's existing images. If it is
        marked primary, the previous primary loses the flag in the same
        transaction.
        """
        table = _entity_table(image.entity_type)
        with self.engine.begin() as conn:
            entity_owner = conn.execute(select(table.c.owner_id).where(table.c.id == image.entity_id)).scalar()
            if entity_owner is None:
                raise NotFoundError(f"{image.entity_type.capitalize()} not found.")
            if entity_owner != image.uploaded_by:
                raise AuthorizationError("You can only add images to your own listings.")
            same_entity = (_images.c.entity_type == image.entity_type) & (_images.c.entity_id == image.entity_id)
            if image.is_primary:
                conn.execute(_images.update().where(same_entity).values(is_primary=False))
            max_order = conn.execute(select(func.max(_images.c.display_order)).where(same_entity)).scalar()
            result = conn.execute(
                _images.insert().values(
                    entity_type=image.entity_type,
                    entity_id=image.entity_id,
                    image_url=image.image_url,
                    caption=image.caption,
                    display_order=0 if max_order is None else max_order + 1,
                    is_primary=image.is_primary,
                    uploaded_by=image.uploaded_by,
                    created_at=_now_iso(),
                )
            )
            return result.inserted_primary_key[0]

    def update_image(self, image_id: int, user_id: int, /, **fields) -> Image:
        """Update caption / display_order / is_primary on an image user_id uploaded."""
        _check_fields(fields, _IMAGE_FIELDS)
        with self.engine.begin() as conn:
            result = conn.execute(
                _images.update()
                .where((_images.c.id == image_id) & (_images.c.uploaded_by == user_id))
                .values(**fields)
            )
            if result.rowcount == 0:
                _raise_missing_or_forbidden(conn, _images, image_id, "Image")
            if fields.get("is_primary"):
                row = conn.execute(
                    select(_images.c.entity_type, _images.c.entity_id).where(_images.c.id == image_id)
                ).one()
                conn.execute(
                    _images.update()
                    .where(
                        (_images.c.entity_type == row.entity_type)
                        & (_images.c.entity_id == row.entity_id)
                        & (_images.c.id != image_id)
                    )
                    .values(is_primary=False)
                )
            row = conn.execute(_images.select().where(_images.c.id == image_id)).one()
        return _row_to_image(row)

    def delete_image(self, image_id: int, user_id: int) -> None:
        with self.engine.begin() as conn:
            result = conn.execute(
                _images.delete().where((_images.c.id == image_id) & (_images.c.uploaded_by == user_id))
            )
            if result.rowcount == 0:
                _raise_missing_or_forbidden(conn, _images, image_id, "Image")

    # ------------------------------------------------------------------
    # Account removal
    # ------------------------------------------------------------------

    def purge_owner(self, owner_id: int) -> dict[str, int]:
        """Delete everything owner_id owns: businesses, events, their bookings, views and images.

        Other users' events that pointed at a removed business keep existing
        with business_id cleared. Images the owner uploaded to other entities
        stay, with uploaded_by cleared. Returns the number of businesses and
        events removed.
        """
        owned_businesses = select(_businesses.c.id).where(_businesses.c.owner_id == owner_id)
        owned_events = select(_events.c.id).where(_events.c.owner_id == owner_id)
        with self.engine.begin() as conn:
            conn.execute(_bookings.delete().where(_bookings.c.event_id.in_(owned_events)))
            conn.execute(
                _images.delete().where(
                    ((_images.c.entity_type == "event") & _images.c.entity_id.in_(owned_events))
                    | ((_images.c.entity_type == "business") & _images.c.entity_id.in_(owned_businesses))
                )
            )
            conn.execute(_images.update().where(_images.c.uploaded_by == owner_id).values(uploaded_by=None))
            conn.execute(_business_views.delete().where(_business_views.c.business_id.in_(owned_businesses)))
            conn.execute(
                _events.update().where(_events.c.business_id.in_(owned_businesses)).values(business_id=None)
            )
            events_removed = conn.execute(_events.delete().where(_events.c.owner_id == owner_id)).rowcount
            businesses_removed = conn.execute(
                _businesses.delete().where(_businesses.c.owner_id == owner_id)
            ).rowcount
        logger.info(
            "Purged content for owner_id=%s (%d businesses, %d events)",
            owner_id,
            businesses_removed,
            events_removed,
        )
        return {"businesses": businesses_removed, "events": events_removed}

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    def close(self) -> None:
        self.engine.dispose()


def _check_entity_type(entity_type: str) -> None:
    if entity_type not in IMAGE_ENTITY_TYPES:
        raise ValidationError(f"entity_type must be one of: {', '.join(IMAGE_ENTITY_TYPES)}.")


def _entity_table(entity_type: str) -> Table:
    _check_entity_type(entity_type)
    return _businesses if entity_type == "business" else _events


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_business(row) -> Business:
    return Business(
        id=row.id,
        name=row.name,
        category=row.category,
        description=row.description,
        phone=row.phone,
        email=row.email,
        address=row.address,
        rating=float(row.rating or 0),
        owner_id=row.owner_id,
        created_at=row.created_at,
        image_url=row.image_url,
    )


def _row_to_event(row) -> Event:
    return Event(
        id=row.id,
        owner_id=row.owner_id,
        business_id=row.business_id,
        title=row.title,
        description=row.description,
        event_date=row.event_date,
        location=row.location,
        price=float(row.price or 0),
        category=row.category,
        created_at=row.created_at,
        image_url=row.image_url,
    )


def _row_to_booking(row) -> Booking:
    return Booking(
        id=row.id,
        event_id=row.event_id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        tickets=row.tickets,
        notes=row.notes,
        status=row.status,
        created_at=row.created_at,
    )


def _row_to_image(row) -> Image:
    return Image(
        id=row.id,
        entity_type=row.entity_type,
        entity_id=row.entity_id,
        image_url=row.image_url,
        caption=row.caption,
        display_order=row.display_order,
        is_primary=bool(row.is_primary),
        uploaded_by=row.uploaded_by,
        created_at=row.created_at,
    )
