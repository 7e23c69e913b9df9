# utils/helpers.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from flask import request
from models import db, OperationLog

import view_state


# --------------------------------------------------
# 🔑 Passcode gate
# --------------------------------------------------
def verify_passcode(entered: Optional[str], stored: Optional[str]) -> bool:
    """
    Trimmed input must equal the stored passcode exactly (case sensitive).
    Plain string comparison: no hashing, no lockout, retries are unlimited.
    """
    if entered is None or stored is None:
        return False
    return entered.strip() == stored


# --------------------------------------------------
# 🧹 Form input sanitation
# --------------------------------------------------
def clean_entries(values: Iterable[Optional[str]]) -> List[str]:
    """
    Trim every entry and drop the blank ones; order and duplicates are kept.
    """
    cleaned = []
    for v in values or ():
        if v is None:
            continue
        v = str(v).strip()
        if v:
            cleaned.append(v)
    return cleaned


def parse_date_entries(values: Iterable[Optional[str]]) -> List[date]:
    """
    clean_entries, then parse each as YYYY-MM-DD.
    Raises ValueError naming the first bad entry.
    """
    parsed = []
    for v in clean_entries(values):
        try:
            parsed.append(datetime.strptime(v, "%Y-%m-%d").date())
        except ValueError:
            raise ValueError(f"Invalid date: {v}")
    return parsed


def too_long(value: Optional[str], column) -> bool:
    """True when value does not fit a String(n) column."""
    limit = getattr(column.type, "length", None)
    return bool(value) and limit is not None and len(value) > limit


def optional_text(value: Optional[str]) -> Optional[str]:
    """Blank description becomes NULL."""
    value = (value or "").strip()
    return value or None


# --------------------------------------------------
# 📝 Operation log
# --------------------------------------------------
METHOD_LABELS = {
    "GET": "view",
    "POST": "submit",
    "PUT": "update",
    "DELETE": "delete",
    "PATCH": "modify",
}

ENDPOINT_LABELS = {
    "trips.create_trip": "Create trip",
    "trips.passcode": "Enter passcode",
    "trips.add_destination": "Add destination",
    "trips.add_date": "Add date",
    "trips.close": "Close",
    "vote.vote": "Cast vote",
}

SENSITIVE_KEYS = {"passcode", "csrf_token"}


def _sanitize_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    if not d:
        return {}
    return {k: ("***" if k.lower() in SENSITIVE_KEYS else v) for k, v in d.items()}


def describe_request(req) -> str:
    """
    Readable one-line description of a request, sensitive fields masked.
    """
    method_label = METHOD_LABELS.get(req.method, req.method)
    endpoint = (req.endpoint or "").strip()

    base = ENDPOINT_LABELS.get(endpoint)
    if base:
        action = f"{base} ({method_label})"
    else:
        action = f"{method_label} {req.path}"

    if req.method in ("POST", "PUT", "PATCH", "DELETE"):
        form_data = _sanitize_dict(req.form.to_dict())
        json_data = _sanitize_dict((req.get_json(silent=True) or {}))
        if form_data:
            action += f" | form: {form_data}"
        if json_data:
            action += f" | json: {json_data}"

    # column is 255 wide
    return action[:255]


def add_log(actor: str, trip_id: int | None, action: str) -> None:
    log = OperationLog(
        actor=actor,
        trip_id=trip_id,
        action=action,
        ip_address=request.remote_addr if request else None,
        timestamp=datetime.now()
    )
    db.session.add(log)
    db.session.commit()


def get_request_actor(session) -> Tuple[str, int | None]:
    """
    Who is acting (last voter name used in this session, else "guest")
    and on which trip the session currently is.
    """
    state = view_state.load(session)
    return session.get("voter_name") or "guest", state.trip_id


def should_log_request(req, exclude_prefixes=("/static",), exclude_endpoints: set[str] | None = None) -> bool:
    """
    Only mutating requests are logged, minus excluded paths and endpoints.
    """
    if req.method not in ("POST", "PUT", "DELETE", "PATCH"):
        return False
    if any(req.path.startswith(p) for p in exclude_prefixes):
        return False
    if exclude_endpoints and req.endpoint in exclude_endpoints:
        return False
    return True
