import pytest

import view_state
from view_state import (
    ViewState,
    reduce,
    IDLE_STATE,
    OPEN_CREATE,
    REQUEST_VOTE,
    REQUEST_RESULTS,
    PASSCODE_ACCEPTED,
    PASSCODE_REJECTED,
    CLOSE,
)


def test_vote_flow():
    state = reduce(IDLE_STATE, REQUEST_VOTE, 3)
    assert state == view_state.awaiting_passcode(3, "vote")

    state = reduce(state, PASSCODE_REJECTED)
    assert state == view_state.awaiting_passcode(3, "vote")

    state = reduce(state, PASSCODE_ACCEPTED)
    assert state == view_state.voting(3)
    assert state.unlocks(3, "vote")
    assert not state.unlocks(3, "results")
    assert not state.unlocks(4, "vote")

    assert reduce(state, CLOSE) == IDLE_STATE


def test_results_flow():
    state = reduce(reduce(IDLE_STATE, REQUEST_RESULTS, 5), PASSCODE_ACCEPTED)
    assert state == view_state.viewing_results(5)
    assert state.unlocks(5, "results")


def test_requesting_another_trip_replaces_current_one():
    state = reduce(view_state.voting(1), REQUEST_RESULTS, 2)
    assert state == view_state.awaiting_passcode(2, "results")


def test_open_create_from_anywhere():
    assert reduce(view_state.voting(1), OPEN_CREATE) == view_state.creating()


def test_irrelevant_events_keep_state():
    assert reduce(IDLE_STATE, PASSCODE_ACCEPTED) == IDLE_STATE
    assert reduce(view_state.voting(1), PASSCODE_ACCEPTED) == view_state.voting(1)
    assert reduce(IDLE_STATE, REQUEST_VOTE) == IDLE_STATE
    assert reduce(IDLE_STATE, "bogus") == IDLE_STATE


@pytest.mark.parametrize("kwargs", [
    {"kind": "voting"},
    {"kind": "idle", "trip_id": 1},
    {"kind": "awaiting_passcode", "trip_id": 1},
    {"kind": "voting", "trip_id": 1, "pending": "vote"},
    {"kind": "two_modals"},
])
def test_illegal_states_cannot_be_built(kwargs):
    with pytest.raises(ValueError):
        ViewState(**kwargs)


def test_dict_round_trip_and_corrupt_data():
    state = view_state.awaiting_passcode(9, "results")
    assert ViewState.from_dict(state.to_dict()) == state

    assert ViewState.from_dict(None) == IDLE_STATE
    assert ViewState.from_dict("voting") == IDLE_STATE
    assert ViewState.from_dict({"kind": "voting"}) == IDLE_STATE
    assert ViewState.from_dict({"kind": "voting", "trip_id": "abc"}) == IDLE_STATE


def test_dispatch_writes_session():
    session = {}
    view_state.dispatch(session, REQUEST_VOTE, 2)
    view_state.dispatch(session, PASSCODE_ACCEPTED)
    assert session[view_state.SESSION_KEY] == {"kind": "voting", "trip_id": 2, "pending": None}
    assert view_state.load(session) == view_state.voting(2)
