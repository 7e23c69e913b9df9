from datetime import date

import pytest

import store
from models import db, Trip, Destination, RidingDate, Vote
from store import StoreError


def test_create_trip_with_options(app):
    trip = store.create_trip("Coast Ride", None, "sea", ["Beach", "Cliff"], [date(2025, 3, 15)])

    assert trip.status == "planning"
    assert [d.name for d in store.get_trip_destinations(trip.id)] == ["Beach", "Cliff"]
    assert [d.date for d in store.get_trip_dates(trip.id)] == [date(2025, 3, 15)]


def test_create_trip_is_all_or_nothing(app):
    RidingDate.__table__.drop(db.engine)

    with pytest.raises(StoreError):
        store.create_trip("Broken", None, "x", ["Beach"], [date(2025, 3, 15)])

    assert Trip.query.count() == 0
    assert Destination.query.count() == 0


def test_list_trips_newest_first(app):
    first = store.create_trip("First", None, "a", [], [])
    second = store.create_trip("Second", None, "b", [], [])

    assert [t.id for t in store.list_trips()] == [second.id, first.id]


def test_repeat_votes_are_allowed(app, trip):
    beach = store.get_trip_destinations(trip.id)[0]
    store.cast_vote(trip.id, "Ana", beach.id, None)
    store.cast_vote(trip.id, "Ana", beach.id, None)

    assert Vote.query.filter_by(trip_id=trip.id).count() == 2
    summary = store.load_trip_summary(trip.id)
    assert summary["destinations"][0]["count"] == 2
    assert summary["participant_count"] == 1


def test_load_trip_summary(app, trip, add_votes):
    add_votes(trip,
              ("Ana", "Beach", date(2025, 3, 15)),
              ("Budi", "Mountain", None),
              ("Citra", "Beach", None))

    summary = store.load_trip_summary(trip.id)

    assert [r["label"] for r in summary["destinations"]] == ["Beach", "Mountain"]
    assert summary["destinations"][0]["is_leading"]
    assert summary["dates"][0]["label"] == "Sat, Mar 15"
    assert summary["dates"][0]["percentage"] == pytest.approx(100)
    assert summary["participant_count"] == 3


def test_votes_of_other_trips_are_not_counted(app, trip, add_votes):
    other = store.create_trip("Other", None, "o", ["Beach"], [])
    add_votes(trip, ("Ana", "Beach", None))
    store.cast_vote(other.id, "Zed", store.get_trip_destinations(other.id)[0].id)

    assert store.load_trip_summary(trip.id)["participant_count"] == 1


def test_ad_hoc_options(app, trip):
    store.add_destination(trip.id, "Lake", "quiet")
    store.add_riding_date(trip.id, date(2025, 4, 1))

    assert [d.name for d in store.get_trip_destinations(trip.id)][-1] == "Lake"
    assert len(store.get_trip_dates(trip.id)) == 2


def test_read_failure_yields_empty_results(app, trip):
    trip_id = trip.id
    db.session.commit()
    db.drop_all()

    assert store.list_trips() == []
    assert store.get_trip_votes(trip_id) == []
    assert store.load_trip_summary(trip_id)["destinations"] == []


def test_write_failure_raises_store_error(app, trip):
    trip_id = trip.id
    db.session.commit()
    Vote.__table__.drop(db.engine)

    with pytest.raises(StoreError):
        store.cast_vote(trip_id, "Ana", None, None)
