"""Unit tests for directory/store.py -- listings, ownership and cascades.

Covers:
- conditional update/delete: owner succeeds, stranger gets AuthorizationError,
  missing id gets NotFoundError
- business deletion removes views and images, unlinks events
- event creation linked to an owned / foreign / missing business
- upcoming events filter and ordering
- owner statistics aggregation
- booking status changes restricted to the event owner
- primary image derivation and single-primary rule
- purge_owner() removes everything an account owns
"""

from datetime import datetime, timedelta

import pytest

from core.errors import AuthorizationError, NotFoundError, ValidationError
from directory.models import Booking, Business, Event, Image
from directory.store import DirectoryStore, _events, utc_now

OWNER = 1
STRANGER = 2


@pytest.fixture
def store():
    s = DirectoryStore("sqlite:///:memory:")
    yield s
    s.close()


def _business(store: DirectoryStore, owner_id: int = OWNER, name: str = "Bella Pizza", rating: float = 4.5) -> int:
    return store.create_business(Business(name=name, category="Restaurant", owner_id=owner_id, rating=rating))


def _event(store: DirectoryStore, owner_id: int = OWNER, days: int = 7, **kwargs) -> int:
    return store.create_event(
        Event(owner_id=owner_id, title=kwargs.pop("title", "Launch"), event_date=utc_now() + timedelta(days=days), **kwargs)
    )


class TestBusinesses:
    def test_create_and_get(self, store) -> None:
        business_id = _business(store)
        business = store.get_business(business_id)
        assert business.name == "Bella Pizza"
        assert business.owner_id == OWNER
        assert business.image_url is None

    def test_list_newest_first(self, store) -> None:
        first = _business(store, name="First")
        second = _business(store, name="Second")
        assert [b.id for b in store.list_businesses()] == [second, first]

    def test_list_by_owner(self, store) -> None:
        mine = _business(store)
        _business(store, owner_id=STRANGER)
        assert [b.id for b in store.list_businesses(owner_id=OWNER)] == [mine]

    def test_owner_can_update(self, store) -> None:
        business_id = _business(store)
        updated = store.update_business(business_id, OWNER, name="Bella Pizzeria", rating=4.9)
        assert updated.name == "Bella Pizzeria"
        assert updated.rating == 4.9

    def test_stranger_cannot_update(self, store) -> None:
        business_id = _business(store)
        with pytest.raises(AuthorizationError):
            store.update_business(business_id, STRANGER, name="Hijacked")
        assert store.get_business(business_id).name == "Bella Pizza"

    def test_update_missing_business(self, store) -> None:
        with pytest.raises(NotFoundError):
            store.update_business(999, OWNER, name="Nothing")

    def test_update_requires_fields(self, store) -> None:
        business_id = _business(store)
        with pytest.raises(ValidationError):
            store.update_business(business_id, OWNER)

    def test_update_rejects_owner_change(self, store) -> None:
        business_id = _business(store)
        with pytest.raises(ValidationError):
            store.update_business(business_id, OWNER, owner_id=STRANGER)
        assert store.get_business(business_id).owner_id == OWNER

    def test_stray_owner_field_rejected_on_events_and_images(self, store) -> None:
        business_id = _business(store)
        event_id = _event(store)
        image_id = store.add_image(
            Image(entity_type="business", entity_id=business_id, image_url="https://img/a.jpg", uploaded_by=OWNER)
        )
        with pytest.raises(ValidationError):
            store.update_event(event_id, OWNER, owner_id=STRANGER)
        with pytest.raises(ValidationError):
            store.update_image(image_id, OWNER, user_id=STRANGER)

    def test_update_returns_row_from_its_own_transaction(self, store, monkeypatch) -> None:
        business_id = _business(store)
        event_id = _event(store)
        # Simulates the row vanishing between commit and a follow-up read.
        monkeypatch.setattr(store, "get_business", lambda _id: None)
        monkeypatch.setattr(store, "get_event", lambda _id: None)
        assert store.update_business(business_id, OWNER, name="Still Here").name == "Still Here"
        assert store.update_event(event_id, OWNER, title="Still On").title == "Still On"

    def test_stranger_cannot_delete(self, store) -> None:
        business_id = _business(store)
        with pytest.raises(AuthorizationError):
            store.delete_business(business_id, STRANGER)
        assert store.get_business(business_id) is not None

    def test_delete_missing_business(self, store) -> None:
        with pytest.raises(NotFoundError):
            store.delete_business(999, OWNER)

    def test_delete_cascades(self, store) -> None:
        business_id = _business(store)
        store.record_view(business_id, "203.0.113.1", "pytest")
        store.add_image(Image(entity_type="business", entity_id=business_id, image_url="https://img/1.jpg", uploaded_by=OWNER))
        event_id = _event(store, business_id=business_id)

        store.delete_business(business_id, OWNER)

        assert store.get_business(business_id) is None
        assert store.list_images("business", business_id) == []
        assert store.get_event(event_id).business_id is None
        assert store.owner_stats(OWNER)["total_views"] == 0


class TestOwnerStats:
    def test_stats_aggregate(self, store) -> None:
        popular = _business(store, name="Popular", rating=4.0)
        quiet = _business(store, name="Quiet", rating=5.0)
        _business(store, name="Unrated", rating=0.0)
        _business(store, owner_id=STRANGER, name="Elsewhere", rating=1.0)
        for _ in range(3):
            store.record_view(popular, "198.51.100.7", "pytest")
        store.record_view(quiet, None, None)

        stats = store.owner_stats(OWNER)

        assert stats["business_count"] == 3
        assert stats["total_views"] == 4
        assert stats["average_rating"] == 4.5
        assert stats["business_views"][0] == {"id": popular, "name": "Popular", "view_count": 3}
        assert len(stats["business_views"]) == 3

    def test_stats_for_owner_without_businesses(self, store) -> None:
        stats = store.owner_stats(OWNER)
        assert stats == {"business_count": 0, "total_views": 0, "average_rating": 0.0, "business_views": []}


class TestEvents:
    def test_link_to_own_business(self, store) -> None:
        business_id = _business(store)
        event_id = _event(store, business_id=business_id)
        assert store.get_event(event_id).business_id == business_id

    def test_link_to_foreign_business_forbidden(self, store) -> None:
        business_id = _business(store, owner_id=STRANGER)
        with pytest.raises(AuthorizationError):
            _event(store, business_id=business_id)

    def test_link_to_missing_business(self, store) -> None:
        with pytest.raises(NotFoundError):
            _event(store, business_id=999)

    def test_upcoming_excludes_past_and_orders_by_date(self, store) -> None:
        _event(store, days=-1, title="Yesterday")
        later = _event(store, days=10, title="Later")
        sooner = _event(store, days=2, title="Sooner")
        assert [e.id for e in store.list_upcoming_events()] == [sooner, later]

    def test_upcoming_filtered_by_business(self, store) -> None:
        business_id = _business(store)
        linked = _event(store, business_id=business_id)
        _event(store)
        assert [e.id for e in store.list_upcoming_events(business_id=business_id)] == [linked]

    def test_upcoming_uses_given_cutoff(self, store) -> None:
        event_id = _event(store, days=1)
        assert store.list_upcoming_events(now=utc_now() + timedelta(days=2)) == []
        assert [e.id for e in store.list_upcoming_events(now=utc_now())] == [event_id]

    def test_my_events_include_past(self, store) -> None:
        past = _event(store, days=-3)
        assert [e.id for e in store.list_events_by_owner(OWNER)] == [past]

    def test_update_and_ownership(self, store) -> None:
        event_id = _event(store)
        new_date = datetime(2031, 5, 1, 18, 30)
        updated = store.update_event(event_id, OWNER, title="Renamed", event_date=new_date)
        assert updated.title == "Renamed"
        assert updated.event_date == new_date
        with pytest.raises(AuthorizationError):
            store.update_event(event_id, STRANGER, title="Nope")
        with pytest.raises(NotFoundError):
            store.update_event(999, OWNER, title="Nope")

    def test_delete_removes_bookings(self, store) -> None:
        event_id = _event(store)
        booking_id = store.create_booking(Booking(event_id=event_id, name="Bo", email="bo@example.com"))
        with pytest.raises(AuthorizationError):
            store.delete_event(event_id, STRANGER)
        store.delete_event(event_id, OWNER)
        assert store.get_event(event_id) is None
        assert store.get_booking(booking_id) is None


class TestBookings:
    @pytest.fixture
    def event_id(self, store) -> int:
        return _event(store)

    def test_booking_defaults(self, store, event_id) -> None:
        booking = store.get_booking(store.create_booking(Booking(event_id=event_id, name="Bo", email="bo@example.com")))
        assert booking.status == "pending"
        assert booking.tickets == 1

    def test_booking_for_missing_event(self, store) -> None:
        with pytest.raises(NotFoundError):
            store.create_booking(Booking(event_id=999, name="Bo", email="bo@example.com"))

    def test_booking_needs_a_ticket(self, store, event_id) -> None:
        with pytest.raises(ValidationError):
            store.create_booking(Booking(event_id=event_id, name="Bo", email="bo@example.com", tickets=0))

    def test_owner_sees_bookings_for_own_events_only(self, store, event_id) -> None:
        other_event = _event(store, owner_id=STRANGER)
        mine = store.create_booking(Booking(event_id=event_id, name="A", email="a@example.com"))
        store.create_booking(Booking(event_id=other_event, name="B", email="b@example.com"))
        assert [b.id for b in store.list_bookings_for_owner(OWNER)] == [mine]

    def test_status_change_by_event_owner(self, store, event_id) -> None:
        booking_id = store.create_booking(Booking(event_id=event_id, name="A", email="a@example.com"))
        store.update_booking_status(booking_id, OWNER, "confirmed")
        assert store.get_booking(booking_id).status == "confirmed"

    def test_status_change_by_stranger_forbidden(self, store, event_id) -> None:
        booking_id = store.create_booking(Booking(event_id=event_id, name="A", email="a@example.com"))
        with pytest.raises(AuthorizationError):
            store.update_booking_status(booking_id, STRANGER, "cancelled")
        assert store.get_booking(booking_id).status == "pending"

    def test_unknown_status_rejected(self, store, event_id) -> None:
        booking_id = store.create_booking(Booking(event_id=event_id, name="A", email="a@example.com"))
        with pytest.raises(ValidationError):
            store.update_booking_status(booking_id, OWNER, "refunded")

    def test_delete_booking(self, store, event_id) -> None:
        booking_id = store.create_booking(Booking(event_id=event_id, name="A", email="a@example.com"))
        with pytest.raises(NotFoundError):
            store.delete_booking(999, OWNER)
        store.delete_booking(booking_id, OWNER)
        assert store.get_booking(booking_id) is None


class TestImages:
    @pytest.fixture
    def business_id(self, store) -> int:
        return _business(store)

    def _add(self, store, business_id, url, primary=False, user=OWNER) -> int:
        return store.add_image(
            Image(entity_type="business", entity_id=business_id, image_url=url, is_primary=primary, uploaded_by=user)
        )

    def test_first_image_becomes_listing_image(self, store, business_id) -> None:
        self._add(store, business_id, "https://img/a.jpg")
        self._add(store, business_id, "https://img/b.jpg")
        assert store.get_business(business_id).image_url == "https://img/a.jpg"

    def test_primary_image_wins(self, store, business_id) -> None:
        self._add(store, business_id, "https://img/a.jpg")
        self._add(store, business_id, "https://img/b.jpg", primary=True)
        assert store.get_business(business_id).image_url == "https://img/b.jpg"

    def test_only_one_primary(self, store, business_id) -> None:
        first = self._add(store, business_id, "https://img/a.jpg", primary=True)
        second = self._add(store, business_id, "https://img/b.jpg", primary=True)
        flags = {i.id: i.is_primary for i in store.list_images("business", business_id)}
        assert flags == {first: False, second: True}

        store.update_image(first, OWNER, is_primary=True)
        flags = {i.id: i.is_primary for i in store.list_images("business", business_id)}
        assert flags == {first: True, second: False}

    def test_display_order_appends(self, store, business_id) -> None:
        a = self._add(store, business_id, "https://img/a.jpg")
        b = self._add(store, business_id, "https://img/b.jpg")
        assert store.get_image(a).display_order == 0
        assert store.get_image(b).display_order == 1

    def test_add_to_foreign_entity_forbidden(self, store, business_id) -> None:
        with pytest.raises(AuthorizationError):
            self._add(store, business_id, "https://img/x.jpg", user=STRANGER)

    def test_add_to_missing_entity(self, store) -> None:
        with pytest.raises(NotFoundError):
            store.add_image(Image(entity_type="event", entity_id=999, image_url="https://img/x.jpg", uploaded_by=OWNER))

    def test_unknown_entity_type(self, store) -> None:
        with pytest.raises(ValidationError):
            store.list_images("venue", 1)

    def test_only_uploader_may_edit_or_delete(self, store, business_id) -> None:
        image_id = self._add(store, business_id, "https://img/a.jpg")
        with pytest.raises(AuthorizationError):
            store.update_image(image_id, STRANGER, caption="mine now")
        with pytest.raises(AuthorizationError):
            store.delete_image(image_id, STRANGER)
        assert store.update_image(image_id, OWNER, caption="Front door").caption == "Front door"
        store.delete_image(image_id, OWNER)
        assert store.get_image(image_id) is None


class TestPurgeOwner:
    def test_purge_removes_owned_content(self, store) -> None:
        business_id = _business(store)
        event_id = _event(store, business_id=business_id)
        booking_id = store.create_booking(Booking(event_id=event_id, name="A", email="a@example.com"))
        store.record_view(business_id, None, None)
        store.add_image(Image(entity_type="event", entity_id=event_id, image_url="https://img/e.jpg", uploaded_by=OWNER))
        survivor = _business(store, owner_id=STRANGER, name="Survivor")

        removed = store.purge_owner(OWNER)

        assert removed == {"businesses": 1, "events": 1}
        assert store.get_business(business_id) is None
        assert store.get_event(event_id) is None
        assert store.get_booking(booking_id) is None
        assert store.list_images("event", event_id) == []
        assert store.get_business(survivor) is not None

    def test_purge_unlinks_other_owners_events(self, store) -> None:
        business_id = _business(store)
        # Written directly: the store only lets owners link their own businesses.
        foreign_event = store.create_event(
            Event(owner_id=STRANGER, title="Pop-up", event_date=utc_now() + timedelta(days=1))
        )
        with store.engine.begin() as conn:
            conn.execute(_events.update().where(_events.c.id == foreign_event).values(business_id=business_id))

        store.purge_owner(OWNER)

        assert store.get_event(foreign_event).business_id is None
