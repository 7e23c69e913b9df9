from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()

TRIP_STATUSES = ('planning', 'active', 'completed')


# ----------------------
# Trip: one voting session
# ----------------------
class Trip(db.Model):
    __tablename__ = 'trips'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)
    # plaintext on purpose, compared by string equality
    passcode = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='planning')
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    __table_args__ = (
        db.CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in TRIP_STATUSES) + ")", name='ck_trip_status'
        ),
    )

    def __repr__(self):
        return f"<Trip {self.id}: {self.title}>"


# ----------------------
# Candidate destination
# ----------------------
class Destination(db.Model):
    __tablename__ = 'destinations'

    id = db.Column(db.Integer, primary_key=True)
    trip_id = db.Column(db.Integer, db.ForeignKey('trips.id'), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)


# ----------------------
# Candidate riding date
# ----------------------
class RidingDate(db.Model):
    __tablename__ = 'riding_dates'

    id = db.Column(db.Integer, primary_key=True)
    trip_id = db.Column(db.Integer, db.ForeignKey('trips.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)


# ----------------------
# Vote: no uniqueness constraint, repeat voting is allowed
# ----------------------
class Vote(db.Model):
    __tablename__ = 'votes'

    id = db.Column(db.Integer, primary_key=True)
    voter_name = db.Column(db.String(100), nullable=False)
    trip_id = db.Column(db.Integer, db.ForeignKey('trips.id'), nullable=False, index=True)
    destination_id = db.Column(db.Integer, db.ForeignKey('destinations.id'), nullable=True)
    date_id = db.Column(db.Integer, db.ForeignKey('riding_dates.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now, nullable=False)


# ----------------------
# Operation log
# ----------------------
class OperationLog(db.Model):
    __tablename__ = 'operation_logs'

    id = db.Column(db.Integer, primary_key=True)
    actor = db.Column(db.String(100))  # voter name or "guest"
    trip_id = db.Column(db.Integer, nullable=True)
    action = db.Column(db.String(255))
    timestamp = db.Column(db.DateTime, default=datetime.now)  # local time
    ip_address = db.Column(db.String(50))

    def __repr__(self):
        return f"<Log {self.actor}-{self.trip_id}: {self.action}>"
