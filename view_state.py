# view_state.py
# -*- coding: utf-8 -*-
"""
Which screen a session is on, as one tagged value kept in the Flask session.

    idle                         trip list
    creating                     new-trip form
    awaiting_passcode(trip, a)   passcode prompt, a = "vote" | "results"
    voting(trip)                 vote form unlocked for trip
    viewing_results(trip)        results unlocked for trip
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

IDLE = "idle"
CREATING = "creating"
AWAITING_PASSCODE = "awaiting_passcode"
VOTING = "voting"
VIEWING_RESULTS = "viewing_results"

KINDS = (IDLE, CREATING, AWAITING_PASSCODE, VOTING, VIEWING_RESULTS)
TRIP_KINDS = (AWAITING_PASSCODE, VOTING, VIEWING_RESULTS)

ACTION_VOTE = "vote"
ACTION_RESULTS = "results"
ACTIONS = (ACTION_VOTE, ACTION_RESULTS)

SESSION_KEY = "view_state"


@dataclass(frozen=True)
class ViewState:
    kind: str = IDLE
    trip_id: Optional[int] = None
    pending: Optional[str] = None

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"unknown view state: {self.kind!r}")
        if self.kind in TRIP_KINDS and self.trip_id is None:
            raise ValueError(f"{self.kind} needs a trip")
        if self.kind not in TRIP_KINDS and self.trip_id is not None:
            raise ValueError(f"{self.kind} cannot carry a trip")
        if (self.kind == AWAITING_PASSCODE) != (self.pending in ACTIONS):
            raise ValueError("pending action only belongs to awaiting_passcode")

    def unlocks(self, trip_id: int, action: str) -> bool:
        """True when the session already passed the passcode for this trip and action."""
        wanted = VOTING if action == ACTION_VOTE else VIEWING_RESULTS
        return self.kind == wanted and self.trip_id == trip_id

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "trip_id": self.trip_id, "pending": self.pending}

    @classmethod
    def from_dict(cls, data: Any) -> "ViewState":
        """Corrupt or missing session data falls back to idle."""
        if not isinstance(data, dict):
            return IDLE_STATE
        try:
            trip_id = data.get("trip_id")
            return cls(
                kind=data.get("kind", IDLE),
                trip_id=int(trip_id) if trip_id is not None else None,
                pending=data.get("pending"),
            )
        except (TypeError, ValueError):
            return IDLE_STATE


IDLE_STATE = ViewState()


def idle() -> ViewState:
    return IDLE_STATE


def creating() -> ViewState:
    return ViewState(kind=CREATING)


def awaiting_passcode(trip_id: int, action: str) -> ViewState:
    return ViewState(kind=AWAITING_PASSCODE, trip_id=trip_id, pending=action)


def voting(trip_id: int) -> ViewState:
    return ViewState(kind=VOTING, trip_id=trip_id)


def viewing_results(trip_id: int) -> ViewState:
    return ViewState(kind=VIEWING_RESULTS, trip_id=trip_id)


# --------------------------------------------------
# Events
# --------------------------------------------------
OPEN_CREATE = "open_create"
REQUEST_VOTE = "request_vote"
REQUEST_RESULTS = "request_results"
PASSCODE_ACCEPTED = "passcode_accepted"
PASSCODE_REJECTED = "passcode_rejected"
CLOSE = "close"


def reduce(state: ViewState, event: str, trip_id: Optional[int] = None) -> ViewState:
    """
    Next state for an event. Events that make no sense in the current state
    leave it unchanged.
    """
    if event == CLOSE:
        return IDLE_STATE

    if event == OPEN_CREATE:
        return creating()

    if event in (REQUEST_VOTE, REQUEST_RESULTS):
        if trip_id is None:
            return state
        action = ACTION_VOTE if event == REQUEST_VOTE else ACTION_RESULTS
        return awaiting_passcode(trip_id, action)

    if event == PASSCODE_ACCEPTED:
        if state.kind != AWAITING_PASSCODE:
            return state
        if state.pending == ACTION_VOTE:
            return voting(state.trip_id)
        return viewing_results(state.trip_id)

    if event == PASSCODE_REJECTED:
        # stays on the prompt so the user can retry
        return state

    return state


# --------------------------------------------------
# Flask session glue
# --------------------------------------------------
def load(session) -> ViewState:
    return ViewState.from_dict(session.get(SESSION_KEY))


def dispatch(session, event: str, trip_id: Optional[int] = None) -> ViewState:
    new_state = reduce(load(session), event, trip_id)
    session[SESSION_KEY] = new_state.to_dict()
    return new_state
