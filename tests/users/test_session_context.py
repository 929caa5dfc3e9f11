from __future__ import annotations

from src.timeclock.timeclock.core.enums import Role
from src.timeclock.timeclock.users import session
from tests.helpers import make_user


def test_login_logout_transitions():
    ctx = session.login(session.ANONYMOUS, make_user("u1", full_name="Carla"))

    assert ctx.is_authenticated and not ctx.is_admin
    assert ctx.require_user().full_name == "Carla"
    assert session.logout(ctx) is session.ANONYMOUS


def test_save_and_load_round_trip_through_cookie_store():
    store = {}
    session.save(store, session.login(session.ANONYMOUS, make_user("a1", role=Role.ADMIN)))

    loaded = session.load(store)

    assert loaded.is_admin
    assert loaded.user.user_id == "a1"

    session.save(store, session.ANONYMOUS)
    assert store == {}


def test_tampered_cookie_is_anonymous():
    assert session.load({"timeclock_session": {"user_id": "x", "role": "ROOT"}}) is session.ANONYMOUS
    assert session.load({"timeclock_session": "garbage"}) is session.ANONYMOUS
