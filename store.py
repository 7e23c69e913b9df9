# store.py
# -*- coding: utf-8 -*-
"""
Data access for trips, options and votes.

Reads never raise: a database error is logged and the caller gets an empty
result, so pages degrade to a zero state. Writes roll back, log, and raise
StoreError for the view to turn into a flash message.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db, Trip, Destination, RidingDate, Vote
from tally import summarize_trip


class StoreError(Exception):
    """A write against the database failed and was rolled back."""


def _read_failed(what: str, exc: Exception):
    db.session.rollback()
    current_app.logger.error(f"❌ Error fetching {what}: {exc}")


def _write_failed(what: str, exc: Exception):
    db.session.rollback()
    current_app.logger.error(f"❌ Error {what}: {exc}")
    raise StoreError(what) from exc


# --------------------------------------------------
# Reads
# --------------------------------------------------
def list_trips() -> List[Trip]:
    try:
        return Trip.query.order_by(Trip.created_at.desc(), Trip.id.desc()).all()
    except SQLAlchemyError as e:
        _read_failed("trips", e)
        return []


def get_trip(trip_id: int) -> Optional[Trip]:
    try:
        return db.session.get(Trip, trip_id)
    except SQLAlchemyError as e:
        _read_failed(f"trip {trip_id}", e)
        return None


def get_trip_votes(trip_id: int) -> List[Vote]:
    try:
        return Vote.query.filter_by(trip_id=trip_id).order_by(Vote.created_at, Vote.id).all()
    except SQLAlchemyError as e:
        _read_failed(f"votes for trip {trip_id}", e)
        return []


def get_trip_destinations(trip_id: int) -> List[Destination]:
    try:
        return Destination.query.filter_by(trip_id=trip_id) \
            .order_by(Destination.created_at, Destination.id).all()
    except SQLAlchemyError as e:
        _read_failed(f"destinations for trip {trip_id}", e)
        return []


def get_trip_dates(trip_id: int) -> List[RidingDate]:
    try:
        return RidingDate.query.filter_by(trip_id=trip_id) \
            .order_by(RidingDate.created_at, RidingDate.id).all()
    except SQLAlchemyError as e:
        _read_failed(f"dates for trip {trip_id}", e)
        return []


def load_trip_summary(trip_id: int) -> Dict[str, Any]:
    return summarize_trip(
        get_trip_votes(trip_id),
        get_trip_destinations(trip_id),
        get_trip_dates(trip_id),
    )


# --------------------------------------------------
# Writes
# --------------------------------------------------
def create_trip(title: str, description: Optional[str], passcode: str,
                destinations: List[str], dates: List[date]) -> Trip:
    """
    Trip plus both option batches in a single transaction; nothing is left
    behind if any insert fails.
    """
    try:
        trip = Trip(title=title, description=description, passcode=passcode, status='planning')
        db.session.add(trip)
        db.session.flush()  # trip.id for the options

        db.session.add_all([Destination(trip_id=trip.id, name=name) for name in destinations])
        db.session.add_all([RidingDate(trip_id=trip.id, date=d) for d in dates])
        db.session.commit()
    except SQLAlchemyError as e:
        _write_failed("creating trip", e)

    current_app.logger.info(
        f"✅ Trip {trip.id} created with {len(destinations)} destinations and {len(dates)} dates"
    )
    return trip


def add_destination(trip_id: int, name: str, description: Optional[str] = None) -> Destination:
    try:
        dest = Destination(trip_id=trip_id, name=name, description=description)
        db.session.add(dest)
        db.session.commit()
    except SQLAlchemyError as e:
        _write_failed("adding destination", e)
    return dest


def add_riding_date(trip_id: int, when: date, description: Optional[str] = None) -> RidingDate:
    try:
        riding_date = RidingDate(trip_id=trip_id, date=when, description=description)
        db.session.add(riding_date)
        db.session.commit()
    except SQLAlchemyError as e:
        _write_failed("adding date", e)
    return riding_date


def cast_vote(trip_id: int, voter_name: str,
              destination_id: Optional[int] = None, date_id: Optional[int] = None) -> Vote:
    """Plain insert; the same name may vote again."""
    try:
        vote = Vote(
            trip_id=trip_id,
            voter_name=voter_name,
            destination_id=destination_id,
            date_id=date_id,
        )
        db.session.add(vote)
        db.session.commit()
    except SQLAlchemyError as e:
        _write_failed("submitting vote", e)

    current_app.logger.info(f"🗳️ Vote recorded for trip {trip_id} by {voter_name!r}")
    return vote
