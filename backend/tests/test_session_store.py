import pytest

from treinai.services.workout import (
    PlannedExercise,
    SessionNotFoundError,
    WorkoutSession,
    WorkoutSessionStore,
)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def new_session(workout_id="w1"):
    return WorkoutSession(workout_id, "Push day", [
        PlannedExercise(id="we-1", exercise_id="ex-1", sets=3, reps="10", rest_seconds=60),
    ])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return WorkoutSessionStore(ttl_seconds=60, clock=clock)


def test_get_replays_whole_elapsed_seconds(store, clock):
    session = store.add(new_session(), owner_id="u1")

    clock.now += 2.7
    assert store.get(session.id, "u1").elapsed_seconds == 2

    clock.now += 0.4
    assert store.get(session.id, "u1").elapsed_seconds == 3


def test_rest_countdown_advances_between_requests(store, clock):
    session = store.add(new_session(), owner_id="u1")
    session.open_exercise("we-1")
    session.complete_set()

    clock.now += 15
    assert store.get(session.id, "u1").rest.remaining == 45


def test_sessions_are_private_to_their_owner(store):
    session = store.add(new_session(), owner_id="u1")

    with pytest.raises(SessionNotFoundError):
        store.get(session.id, "u2")
    with pytest.raises(SessionNotFoundError):
        store.get("missing", "u1")


def test_idle_sessions_expire(store, clock):
    session = store.add(new_session(), owner_id="u1")
    clock.now += 61

    with pytest.raises(SessionNotFoundError):
        store.get(session.id, "u1")
    assert len(store) == 0


def test_access_keeps_session_alive(store, clock):
    session = store.add(new_session(), owner_id="u1")
    for _ in range(3):
        clock.now += 50
        store.get(session.id, "u1")

    assert store.get(session.id, "u1").elapsed_seconds == 150


def test_find_active_skips_terminal_sessions(store):
    session = store.add(new_session("w1"), owner_id="u1")

    assert store.find_active("u1", "w1") is session
    assert store.find_active("u2", "w1") is None
    assert store.find_active("u1", "w2") is None

    session.abandon()
    assert store.find_active("u1", "w1") is None


def test_purge_expired(store, clock):
    store.add(new_session("w1"), owner_id="u1")
    clock.now += 30
    fresh = store.add(new_session("w2"), owner_id="u1")
    clock.now += 40

    assert store.purge_expired() == 1
    assert store.get(fresh.id, "u1") is fresh


def test_discard(store):
    session = store.add(new_session(), owner_id="u1")
    store.discard(session.id)
    with pytest.raises(SessionNotFoundError):
        store.get(session.id, "u1")
