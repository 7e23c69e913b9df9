import pytest

from app import create_app
from models import db, Trip, Destination, RidingDate, Vote
from datetime import date


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SQLALCHEMY_ENGINE_OPTIONS": {},
        "RESULTS_REFRESH_INTERVAL": 30,
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def trip(app):
    """Trip "Weekend Ride" (passcode "ride") with two destinations and one date."""
    trip = Trip(title="Weekend Ride", passcode="ride")
    db.session.add(trip)
    db.session.flush()
    db.session.add_all([
        Destination(trip_id=trip.id, name="Beach"),
        Destination(trip_id=trip.id, name="Mountain"),
        RidingDate(trip_id=trip.id, date=date(2025, 3, 15)),
    ])
    db.session.commit()
    return trip


@pytest.fixture
def add_votes():
    """add_votes(trip, (voter_name, destination_name or None, date or None), ...)"""
    return _add_votes


def _add_votes(trip, *rows):
    dests = {d.name: d.id for d in Destination.query.filter_by(trip_id=trip.id)}
    dates = {d.date: d.id for d in RidingDate.query.filter_by(trip_id=trip.id)}
    for voter, dest, when in rows:
        db.session.add(Vote(
            trip_id=trip.id,
            voter_name=voter,
            destination_id=dests[dest] if dest else None,
            date_id=dates[when] if when else None,
        ))
    db.session.commit()
