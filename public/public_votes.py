from flask import Blueprint, render_template, jsonify, redirect, url_for, session, send_file, current_app, abort
import pandas as pd
import io

import store
import view_state

public_votes_bp = Blueprint('public_votes', __name__)


def _results_unlocked(trip):
    return view_state.load(session).unlocks(trip.id, view_state.ACTION_RESULTS)


def _get_trip_or_404(trip_id):
    trip = store.get_trip(trip_id)
    if trip is None:
        abort(404)
    return trip


# ✅ Results page
@public_votes_bp.route('/trips/<int:trip_id>/results', endpoint='results')
def results(trip_id):
    trip = _get_trip_or_404(trip_id)
    if not _results_unlocked(trip):
        view_state.dispatch(session, view_state.REQUEST_RESULTS, trip.id)
        return redirect(url_for('trips.passcode', trip_id=trip.id))

    summary = store.load_trip_summary(trip.id)
    return render_template('results.html',
                           trip=trip,
                           summary=summary,
                           refresh_interval=current_app.config['RESULTS_REFRESH_INTERVAL'])


# ✅ JSON API (same passcode gate as the page)
@public_votes_bp.route('/api/trips/<int:trip_id>/results', endpoint='results_api')
def results_api(trip_id):
    trip = store.get_trip(trip_id)
    if trip is None:
        return jsonify({"error": "not found"}), 404
    if not _results_unlocked(trip):
        return jsonify({"error": "passcode required"}), 403

    summary = store.load_trip_summary(trip.id)
    return jsonify({
        'trip': {
            'id': trip.id,
            'title': trip.title,
            'description': trip.description,
            'status': trip.status,
            'created_at': trip.created_at.isoformat() if trip.created_at else None,
        },
        **summary,
    })


# ✅ Excel export of both tallies
@public_votes_bp.route('/trips/<int:trip_id>/results/export', endpoint='export_results')
def export_results(trip_id):
    trip = _get_trip_or_404(trip_id)
    if not _results_unlocked(trip):
        view_state.dispatch(session, view_state.REQUEST_RESULTS, trip.id)
        return redirect(url_for('trips.passcode', trip_id=trip.id))

    summary = store.load_trip_summary(trip.id)

    def to_frame(rows):
        data = [(idx, r['label'], r['count'], round(r['percentage'], 1), ", ".join(str(v) for v in r['voters']))
                for idx, r in enumerate(rows, start=1)]
        return pd.DataFrame(data, columns=["Rank", "Option", "Votes", "Percent", "Voters"])

    output = io.BytesIO()
    # names and labels are free text; keep "=..." as plain strings, not formulas
    with pd.ExcelWriter(output, engine='xlsxwriter',
                        engine_kwargs={"options": {"strings_to_formulas": False}}) as writer:
        to_frame(summary['destinations']).to_excel(writer, index=False, sheet_name='Destinations')
        to_frame(summary['dates']).to_excel(writer, index=False, sheet_name='Dates')
    output.seek(0)

    return send_file(output,
                     mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
                     as_attachment=True,
                     download_name=f"trip_{trip.id}_results.xlsx")
