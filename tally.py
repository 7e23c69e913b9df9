# tally.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List

# category -> field read from each vote record
CATEGORY_FIELDS = {
    "destination": "destination_id",
    "date": "date_id",
}

_MISSING = object()


def _field(record: Any, name: str, default: Any = None) -> Any:
    """
    Read a field from a dict-like row or an ORM object; missing means default.
    """
    if record is None:
        return default
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def _vote_field(category_key: str) -> str:
    # accepts "destination" / "date" or the raw column names
    return CATEGORY_FIELDS.get(category_key, category_key)


def format_date_label(value: Any) -> str:
    """
    Short display label for a date option, e.g. "Sat, Mar 15".
    Strings are parsed as ISO dates; anything unparsable is returned as-is.
    """
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return value
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return f"{value.strftime('%a, %b')} {value.day}"
    return str(value)


def option_label(option: Any) -> str:
    label = _field(option, "label")
    if label:
        return str(label)
    name = _field(option, "name")
    if name:
        return str(name)
    when = _field(option, "date")
    if when:
        return format_date_label(when)
    return str(_field(option, "id"))


def _index_options(options: Iterable[Any]) -> "Dict[Any, Any]":
    """
    option id -> option record, keeping option order; records without a usable id are dropped.
    """
    indexed: Dict[Any, Any] = {}
    for opt in options or ():
        oid = _field(opt, "id")
        if oid is None:
            continue
        try:
            indexed.setdefault(oid, opt)
        except TypeError:
            continue
    return indexed


def compute_tally(votes: Iterable[Any], options: Iterable[Any], category_key: str) -> List[Dict[str, Any]]:
    """
    Count votes per option of one category and rank them.

    Only options with at least one vote get a row. Rows are created in the
    order their first vote is seen, then sorted by count (highest first); the
    sort is stable so ties keep first-seen order. Votes pointing at a null or
    unknown option are skipped and do not count toward the total.

    Each row: option_id, label, count, voters, percentage, is_leading.
    """
    known = _index_options(options)
    field = _vote_field(category_key)

    buckets: Dict[Any, Dict[str, Any]] = {}
    for vote in votes or ():
        oid = _field(vote, field)
        if oid is None:
            continue
        try:
            option = known.get(oid, _MISSING)
        except TypeError:
            continue
        if option is _MISSING:
            continue

        bucket = buckets.get(oid)
        if bucket is None:
            bucket = buckets[oid] = {
                "option_id": oid,
                "label": option_label(option),
                "count": 0,
                "voters": [],
            }
        bucket["count"] += 1
        bucket["voters"].append(_field(vote, "voter_name"))

    rows = sorted(buckets.values(), key=lambda r: -r["count"])

    total = sum(r["count"] for r in rows)
    for idx, row in enumerate(rows):
        row["percentage"] = row["count"] / total * 100 if total > 0 else 0
        row["is_leading"] = idx == 0 and total > 0 and row["count"] > 0

    return rows


def option_vote_counts(votes: Iterable[Any], options: Iterable[Any], category_key: str) -> List[Dict[str, Any]]:
    """
    Every option in option order with its vote count, zero-vote options included.
    """
    known = _index_options(options)
    field = _vote_field(category_key)

    counts = {oid: 0 for oid in known}
    for vote in votes or ():
        oid = _field(vote, field)
        try:
            if oid in counts:
                counts[oid] += 1
        except TypeError:
            continue

    return [
        {"option_id": oid, "label": option_label(opt), "vote_count": counts[oid]}
        for oid, opt in known.items()
    ]


def count_distinct_participants(votes: Iterable[Any]) -> int:
    """
    Distinct voter names, compared exactly ("Bob" and "bob " are two people).
    """
    names = set()
    for vote in votes or ():
        name = _field(vote, "voter_name")
        if name is not None:
            names.add(name)
    return len(names)


def summarize_trip(votes: Iterable[Any], destinations: Iterable[Any], dates: Iterable[Any]) -> Dict[str, Any]:
    votes = list(votes or ())
    destinations = list(destinations or ())
    dates = list(dates or ())

    destination_tally = compute_tally(votes, destinations, "destination")
    date_tally = compute_tally(votes, dates, "date")

    return {
        "destinations": destination_tally,
        "dates": date_tally,
        "destination_counts": option_vote_counts(votes, destinations, "destination"),
        "date_counts": option_vote_counts(votes, dates, "date"),
        "leading_destination": next((r for r in destination_tally if r["is_leading"]), None),
        "leading_date": next((r for r in date_tally if r["is_leading"]), None),
        "participant_count": count_distinct_participants(votes),
        "vote_count": len(votes),
    }
