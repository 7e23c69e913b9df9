import os
import logging
from datetime import date, timedelta

from flask import Flask, request, session, current_app
from flask_migrate import Migrate

from config import Config, instance_dir
from models import db, Trip, Destination, RidingDate, Vote
from utils.helpers import (
    add_log,
    describe_request,
    get_request_actor,
    should_log_request
)

migrate = Migrate()


# -------------------------------------------------
# Silence werkzeug request logs for noisy paths
# -------------------------------------------------
def silence_werkzeug(noisy_paths=None):
    if noisy_paths is None:
        noisy_paths = ("/static/", "/favicon.ico", "/healthz")

    class EndpointFilter(logging.Filter):
        def __init__(self, paths):
            super().__init__()
            self.paths = paths

        def filter(self, record: logging.LogRecord) -> bool:
            try:
                msg = record.getMessage()
            except Exception:
                return True
            return not any(p in msg for p in self.paths)

    wlog = logging.getLogger("werkzeug")
    wlog.addFilter(EndpointFilter(noisy_paths))
    for h in wlog.handlers:
        h.addFilter(EndpointFilter(noisy_paths))


# -------------------------------------------------
# Operation log for mutating requests
# -------------------------------------------------
EXCLUDE_PREFIXES = ("/static",)
EXCLUDE_ENDPOINTS = set()


def auto_log_post_requests():
    if not should_log_request(request, exclude_prefixes=EXCLUDE_PREFIXES, exclude_endpoints=EXCLUDE_ENDPOINTS):
        return
    actor, trip_id = get_request_actor(session)
    action = describe_request(request)
    try:
        add_log(actor, trip_id, action)
    except Exception as e:
        db.session.rollback()
        current_app.logger.warning(f"⚠️ Could not write operation log: {e}")


def create_app(overrides=None):
    os.makedirs(instance_dir, exist_ok=True)

    app = Flask(__name__, instance_path=instance_dir)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    db.init_app(app)
    migrate.init_app(app, db)

    # -------------------------------------------------
    # Blueprints
    # -------------------------------------------------
    from trips import trips_bp
    from vote_routes import vote_bp
    from public.public_votes import public_votes_bp

    app.register_blueprint(trips_bp)
    app.register_blueprint(vote_bp)
    app.register_blueprint(public_votes_bp)

    app.before_request(auto_log_post_requests)

    # health check (Render)
    @app.route("/healthz")
    def healthz():
        return "OK", 200

    register_cli(app)
    return app


# -------------------------------------------------
# CLI commands
# -------------------------------------------------
def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables"""
        db.create_all()
        print(f"✅ Database ready: {db.engine.url}")

    @app.cli.command("seed-demo")
    def seed_demo():
        """Create a demo trip with a few options and votes"""
        if Trip.query.count() > 0:
            print("⚠️ Trips already exist, not seeding")
            return

        trip = Trip(title="Weekend Ride", description="Demo trip", passcode="ride", status="planning")
        db.session.add(trip)
        db.session.flush()

        beach = Destination(trip_id=trip.id, name="Beach")
        mountain = Destination(trip_id=trip.id, name="Mountain")
        saturday = RidingDate(trip_id=trip.id, date=date.today() + timedelta(days=7))
        db.session.add_all([beach, mountain, saturday])
        db.session.flush()

        db.session.add_all([
            Vote(trip_id=trip.id, voter_name="Ana", destination_id=beach.id, date_id=saturday.id),
            Vote(trip_id=trip.id, voter_name="Budi", destination_id=mountain.id),
            Vote(trip_id=trip.id, voter_name="Citra", destination_id=beach.id),
        ])
        db.session.commit()
        print(f'✅ Demo trip "{trip.title}" created (passcode: {trip.passcode})')


app = create_app()

# -------------------------------------------------
# Start
# -------------------------------------------------
if __name__ == '__main__':
    silence_werkzeug()
    app.run(host="0.0.0.0", port=app.config['PORT'], debug=False)
