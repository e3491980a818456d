import pytest

from access import AccessState, SESSION_KEY, PURCHASE_CREDITS, NO_ACCESS_MESSAGE, NO_CREDITS_MESSAGE


def test_load_empty_session():
    state = AccessState.load({})
    assert (state.has_access, state.credits) == (False, 0)


def test_load_valid_record():
    session = {SESSION_KEY: {"hasAccess": True, "credits": 2}}
    state = AccessState.load(session)
    assert (state.has_access, state.credits) == (True, 2)
    assert SESSION_KEY in session


def test_load_keeps_paid_access_without_credits():
    session = {SESSION_KEY: {"hasAccess": True, "credits": 0}}
    state = AccessState.load(session)
    assert (state.has_access, state.credits) == (True, 0)
    assert state.can_ask() == (False, NO_CREDITS_MESSAGE)


@pytest.mark.parametrize("stored", [
    {"hasAccess": True, "credits": -1},
    {"hasAccess": False, "credits": 3},
    {"hasAccess": True, "credits": "3"},
    {"hasAccess": True, "credits": True},
    {"hasAccess": "yes", "credits": 3},
    {"credits": 3},
    "garbage",
    [1, 2, 3],
])
def test_load_discards_invalid_record(stored):
    session = {SESSION_KEY: stored}
    state = AccessState.load(session)
    assert (state.has_access, state.credits) == (False, 0)
    assert SESSION_KEY not in session


def test_save_round_trip():
    session = {}
    AccessState(True, 3).save(session)
    assert session[SESSION_KEY] == {"hasAccess": True, "credits": 3}


def test_grant_stacks_credits():
    state = AccessState(True, 1)
    state.grant()
    assert state.has_access is True
    assert state.credits == 1 + PURCHASE_CREDITS


def test_consume_never_goes_negative():
    state = AccessState(True, 1)
    state.consume()
    state.consume()
    assert state.credits == 0


def test_can_ask():
    assert AccessState(False, 0).can_ask() == (False, NO_ACCESS_MESSAGE)
    assert AccessState(True, 0).can_ask() == (False, NO_CREDITS_MESSAGE)
    assert AccessState(True, 2).can_ask() == (True, None)


def test_reset_clears_session():
    session = {SESSION_KEY: {"hasAccess": True, "credits": 2}}
    state = AccessState.load(session)
    state.reset(session)
    assert (state.has_access, state.credits) == (False, 0)
    assert SESSION_KEY not in session


def test_simulate_purchase_sets_credits():
    state = AccessState(True, 5)
    state.simulate_purchase()
    assert (state.has_access, state.credits) == (True, PURCHASE_CREDITS)
