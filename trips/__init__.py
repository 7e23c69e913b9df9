from flask import Blueprint, render_template, request, redirect, url_for, session, flash, abort

import store
import view_state
from store import StoreError
from models import Trip, Destination
from utils.helpers import clean_entries, optional_text, parse_date_entries, too_long, verify_passcode

trips_bp = Blueprint('trips', __name__)


def _entered(form):
    # what the user typed, for re-rendering the form; the passcode is not echoed back
    return {
        'title': form.get('title', ''),
        'description': form.get('description', ''),
        'destinations': form.getlist('destinations') or [''],
        'dates': form.getlist('dates') or [''],
    }


def get_trip_or_404(trip_id):
    trip = store.get_trip(trip_id)
    if trip is None:
        abort(404)
    return trip


# ----------------------
# Trip list
# ----------------------
@trips_bp.route('/', endpoint='index')
def index():
    trips = []
    for trip in store.list_trips():
        trips.append({
            'trip': trip,
            'summary': store.load_trip_summary(trip.id),
        })
    return render_template('index.html', trips=trips, state=view_state.load(session))


# ----------------------
# New trip
# ----------------------
@trips_bp.route('/trips/new', methods=['GET', 'POST'], endpoint='create_trip')
def create_trip():
    if request.method == 'GET':
        view_state.dispatch(session, view_state.OPEN_CREATE)
        return render_template('create_trip.html', form=_entered(request.form))

    form = request.form
    title = form.get('title', '').strip()
    passcode = form.get('passcode', '').strip()
    destinations = clean_entries(form.getlist('destinations'))

    if not title:
        flash('Trip title is required', 'danger')
        return render_template('create_trip.html', form=_entered(form)), 400
    if not passcode:
        flash('Passcode is required', 'danger')
        return render_template('create_trip.html', form=_entered(form)), 400
    if too_long(title, Trip.title) or too_long(passcode, Trip.passcode) or \
            any(too_long(name, Destination.name) for name in destinations):
        flash('Title, passcode or a destination name is too long', 'danger')
        return render_template('create_trip.html', form=_entered(form)), 400
    try:
        dates = parse_date_entries(form.getlist('dates'))
    except ValueError as e:
        flash(str(e), 'danger')
        return render_template('create_trip.html', form=_entered(form)), 400

    try:
        trip = store.create_trip(
            title=title,
            description=optional_text(form.get('description')),
            passcode=passcode,
            destinations=destinations,
            dates=dates,
        )
    except StoreError:
        flash('Error creating trip. Please try again.', 'danger')
        return render_template('create_trip.html', form=_entered(form)), 500

    view_state.dispatch(session, view_state.CLOSE)
    flash(f'✅ Trip "{trip.title}" created', 'success')
    return redirect(url_for('trips.index'))


# ----------------------
# Passcode prompt
# ----------------------
@trips_bp.route('/trips/<int:trip_id>/passcode', methods=['GET', 'POST'], endpoint='passcode')
def passcode(trip_id):
    trip = get_trip_or_404(trip_id)
    state = view_state.load(session)

    if state.kind != view_state.AWAITING_PASSCODE or state.trip_id != trip.id:
        flash('Choose "Vote" or "Results" on a trip first', 'info')
        return redirect(url_for('trips.index'))

    if request.method == 'POST':
        if verify_passcode(request.form.get('passcode'), trip.passcode):
            state = view_state.dispatch(session, view_state.PASSCODE_ACCEPTED)
            if state.kind == view_state.VOTING:
                return redirect(url_for('vote.vote', trip_id=trip.id))
            return redirect(url_for('public_votes.results', trip_id=trip.id))

        view_state.dispatch(session, view_state.PASSCODE_REJECTED)
        flash('Invalid passcode. Please try again.', 'danger')
        return render_template('passcode.html', trip=trip, action=state.pending), 401

    return render_template('passcode.html', trip=trip, action=state.pending)


# ----------------------
# Ad hoc options (only while voting on the trip)
# ----------------------
@trips_bp.route('/trips/<int:trip_id>/destinations', methods=['POST'], endpoint='add_destination')
def add_destination(trip_id):
    trip = get_trip_or_404(trip_id)
    if not view_state.load(session).unlocks(trip.id, view_state.ACTION_VOTE):
        view_state.dispatch(session, view_state.REQUEST_VOTE, trip.id)
        return redirect(url_for('trips.passcode', trip_id=trip.id))

    name = request.form.get('name', '').strip()
    if not name:
        flash('Destination name is required', 'danger')
        return redirect(url_for('vote.vote', trip_id=trip.id))
    if too_long(name, Destination.name):
        flash('Destination name is too long', 'danger')
        return redirect(url_for('vote.vote', trip_id=trip.id))

    try:
        store.add_destination(trip.id, name, optional_text(request.form.get('description')))
        flash(f'✅ Destination "{name}" added', 'success')
    except StoreError:
        flash('Error adding destination. Please try again.', 'danger')
    return redirect(url_for('vote.vote', trip_id=trip.id))


@trips_bp.route('/trips/<int:trip_id>/dates', methods=['POST'], endpoint='add_date')
def add_date(trip_id):
    trip = get_trip_or_404(trip_id)
    if not view_state.load(session).unlocks(trip.id, view_state.ACTION_VOTE):
        view_state.dispatch(session, view_state.REQUEST_VOTE, trip.id)
        return redirect(url_for('trips.passcode', trip_id=trip.id))

    try:
        dates = parse_date_entries([request.form.get('date')])
    except ValueError as e:
        flash(str(e), 'danger')
        return redirect(url_for('vote.vote', trip_id=trip.id))
    if not dates:
        flash('Date is required', 'danger')
        return redirect(url_for('vote.vote', trip_id=trip.id))

    try:
        store.add_riding_date(trip.id, dates[0], optional_text(request.form.get('description')))
        flash('✅ Date added', 'success')
    except StoreError:
        flash('Error adding date. Please try again.', 'danger')
    return redirect(url_for('vote.vote', trip_id=trip.id))


# ----------------------
# Close whatever is open
# ----------------------
@trips_bp.route('/close', methods=['GET', 'POST'], endpoint='close')
def close():
    view_state.dispatch(session, view_state.CLOSE)
    return redirect(url_for('trips.index'))
