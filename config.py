import os
import sys
import secrets


# -------------------------------------------------
# Paths: works both from source and from a PyInstaller bundle
# -------------------------------------------------
def get_basedir():
    if getattr(sys, "frozen", False):
        return os.path.dirname(sys.executable)
    return os.path.abspath(os.path.dirname(__file__))

basedir = get_basedir()
instance_dir = os.path.join(basedir, "instance")


def normalize_database_url(db_url):
    """Render / Heroku hand out postgres:// URLs; SQLAlchemy wants the psycopg3 driver."""
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql+psycopg://", 1)
    elif db_url.startswith("postgresql://") and not db_url.startswith("postgresql+psycopg://"):
        db_url = db_url.replace("postgresql://", "postgresql+psycopg://", 1)

    # Neon appends channel_binding, which psycopg drops the connection on
    if "channel_binding" in db_url:
        db_url = db_url.replace("&channel_binding=require", "")
        db_url = db_url.replace("?channel_binding=require&", "?")
        db_url = db_url.replace("?channel_binding=require", "")

    return db_url


def _int_env(name, default, minimum=1):
    value = os.getenv(name, "")
    if not value.isdigit() or int(value) < minimum:
        return default
    return int(value)


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_hex(32)

    SQLALCHEMY_DATABASE_URI = normalize_database_url(
        os.getenv("DATABASE_URL", 'sqlite:///' + os.path.join(instance_dir, 'trip_vote.db'))
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # keep idle connections from being dropped by hosted databases
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 1800,
    }

    # seconds between auto refreshes of the results page
    RESULTS_REFRESH_INTERVAL = _int_env("RESULTS_REFRESH_INTERVAL", 10)

    PORT = _int_env("PORT", 5000)
