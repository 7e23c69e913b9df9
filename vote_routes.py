from flask import Blueprint, render_template, redirect, url_for, request, session, flash, abort

import store
import view_state
from models import Vote
from store import StoreError
from utils.helpers import too_long

vote_bp = Blueprint('vote', __name__)


def _render_vote_form(trip, status=200):
    summary = store.load_trip_summary(trip.id)
    return render_template(
        "vote.html",
        trip=trip,
        destination_counts=summary['destination_counts'],
        date_counts=summary['date_counts'],
        voter_name=request.form.get('voter_name', session.get('voter_name', '')),
        selected_destination=request.form.get('destination_id', type=int),
        selected_date=request.form.get('date_id', type=int),
    ), status


@vote_bp.route('/trips/<int:trip_id>/vote', methods=['GET', 'POST'])
def vote(trip_id):
    trip = store.get_trip(trip_id)
    if trip is None:
        abort(404)

    # passcode first
    if not view_state.load(session).unlocks(trip.id, view_state.ACTION_VOTE):
        view_state.dispatch(session, view_state.REQUEST_VOTE, trip.id)
        return redirect(url_for('trips.passcode', trip_id=trip.id))

    if request.method == 'GET':
        return _render_vote_form(trip)

    voter_name = request.form.get('voter_name', '').strip()
    destination_id = request.form.get('destination_id', type=int)
    date_id = request.form.get('date_id', type=int)

    if not voter_name:
        flash("Please enter your name", "danger")
        return _render_vote_form(trip, 400)

    if too_long(voter_name, Vote.voter_name):
        flash("Name is too long", "danger")
        return _render_vote_form(trip, 400)

    if destination_id is None and date_id is None:
        flash("Pick a destination or a date to vote for", "danger")
        return _render_vote_form(trip, 400)

    valid_destinations = {d.id for d in store.get_trip_destinations(trip.id)}
    valid_dates = {d.id for d in store.get_trip_dates(trip.id)}
    if (destination_id is not None and destination_id not in valid_destinations) or \
            (date_id is not None and date_id not in valid_dates):
        flash("Please choose from the listed options", "danger")
        return _render_vote_form(trip, 400)

    try:
        store.cast_vote(trip.id, voter_name, destination_id, date_id)
    except StoreError:
        flash("Error submitting vote. Please try again.", "danger")
        return _render_vote_form(trip, 500)

    session['voter_name'] = voter_name
    view_state.dispatch(session, view_state.CLOSE)
    flash("✅ Vote submitted, thank you!", "success")
    return redirect(url_for('trips.index'))
