# run_server.py
import os
import socket

# -------------------------------------------------
# Local IP (for the startup hint)
# -------------------------------------------------
def get_local_ip():
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return "127.0.0.1"

# -------------------------------------------------
# Environment read by config.py
# -------------------------------------------------
os.environ.setdefault("SECRET_KEY", "change-me-in-production")

from app import app
from models import db
from waitress import serve


def bootstrap_first_run():
    """Create tables on first start"""
    with app.app_context():
        db.create_all()
        app.logger.info(f"📂 Database: {db.engine.url}")


def run():
    port = app.config['PORT']
    ip = get_local_ip()
    print("🚀 Starting server...")
    print(f"   Open in a browser → http://127.0.0.1:{port}")
    print(f"   Or on the local network → http://{ip}:{port}")
    serve(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    bootstrap_first_run()
    run()
