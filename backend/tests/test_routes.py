import pytest

from treinai.main import app
from treinai.routes.coach import get_coach_service
from treinai.services.catalog import WorkoutCatalog
from treinai.services.coach import CoachError


@pytest.fixture
def student_headers(headers_for, student):
    return headers_for(student.user_id)


@pytest.fixture
def coach_headers(headers_for, professional):
    return headers_for(professional.user_id)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_signup_login_and_me(client):
    resp = client.post("/auth/signup", json={
        "email": "new@example.com",
        "password": "secret123",
        "full_name": "New Coach",
        "role": "professional",
        "cref_number": "998877",
        "cref_state": "RJ",
    })
    assert resp.status_code == 200
    assert resp.json()["role"] == "professional"

    resp = client.post("/auth/login", json={"email": "new@example.com", "password": "secret123"})
    assert resp.status_code == 200
    assert "access_token" in resp.cookies

    token = resp.cookies["access_token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["email"] == "new@example.com"
    assert me["professional_id"] is not None


def test_signup_rejects_admin_role(client):
    resp = client.post("/auth/signup", json={
        "email": "root@example.com", "password": "secret123", "full_name": "Root", "role": "admin",
    })
    assert resp.status_code == 422


def test_login_with_wrong_password(client, student):
    resp = client.post("/auth/login", json={"email": "student@example.com", "password": "nope"})
    assert resp.status_code == 401


def test_requires_authentication(client):
    assert client.get("/workouts/").status_code == 401


def test_professional_sees_linked_students_and_invite_code(client, coach_headers, professional, student):
    students = client.get("/students/", headers=coach_headers).json()
    assert [s["id"] for s in students] == [student.id]
    assert students[0]["full_name"] == "Sam Student"

    code = client.get("/students/invite-code", headers=coach_headers).json()["invite_code"]
    assert code == professional.invite_code


def test_student_cannot_list_students(client, student_headers):
    assert client.get("/students/", headers=student_headers).status_code == 403


def test_professional_builds_workout_for_student(client, coach_headers, student, exercises):
    squat, row = exercises
    resp = client.post("/workouts/", headers=coach_headers, json={
        "name": "Pull day",
        "student_id": student.id,
        "day_of_week": 3,
        "exercises": [
            {"exercise_id": row.id, "sets": 4, "reps": "8", "rest_seconds": 90},
            {"exercise_id": squat.id, "sets": 2, "reps": "12"},
        ],
    })
    assert resp.status_code == 201
    body = resp.json()
    assert [e["exercise_id"] for e in body["exercises"]] == [row.id, squat.id]
    assert body["exercises"][1]["rest_seconds"] == 60


def test_student_lists_own_workouts(client, student_headers, workout):
    workouts = client.get("/workouts/", headers=student_headers).json()
    assert [w["id"] for w in workouts] == [workout.id]
    assert workouts[0]["exercises"][0]["name"] == "Back Squat"


def test_workout_hidden_from_other_students(client, headers_for, workout):
    resp = client.post("/auth/signup", json={
        "email": "other@example.com", "password": "secret123", "full_name": "Other", "role": "student",
    })
    other = headers_for(resp.json()["id"])
    assert client.get(f"/workouts/{workout.id}", headers=other).status_code == 404


def test_exercise_library(client, student_headers, exercises):
    legs = client.get("/exercises/", headers=student_headers, params={"muscle_group": "legs"}).json()
    assert [e["name"] for e in legs] == ["Back Squat"]
    assert client.get("/exercises/missing", headers=student_headers).status_code == 404


def test_student_cannot_create_exercises(client, student_headers):
    resp = client.post("/exercises/", headers=student_headers, json={"name": "Curl", "muscle_group": "arms"})
    assert resp.status_code == 403


def test_full_workout_session(client, student_headers, workout):
    resp = client.post("/sessions/", headers=student_headers, json={"workout_id": workout.id})
    assert resp.status_code == 201
    session = resp.json()
    sid = session["id"]
    squat_id, row_id = [e["id"] for e in session["exercises"]]
    assert session["state"] == "browsing"
    assert session["total_sets"] == 3

    opened = client.post(f"/sessions/{sid}/exercises/{squat_id}/open", headers=student_headers).json()
    assert opened["state"] == "exercise_open"
    assert opened["detail"]["media"]["kind"] == "image"

    result = client.post(f"/sessions/{sid}/sets", headers=student_headers).json()
    assert result["rest_seconds"] == 30
    assert result["session"]["state"] == "resting"

    assert client.post(f"/sessions/{sid}/sets", headers=student_headers).status_code == 409

    skipped = client.post(f"/sessions/{sid}/rest/skip", headers=student_headers).json()
    assert skipped["state"] == "exercise_open"

    result = client.post(f"/sessions/{sid}/sets", headers=student_headers).json()
    assert result["exercise_complete"]
    client.post(f"/sessions/{sid}/exercise/close", headers=student_headers)

    assert client.post(f"/sessions/{sid}/finish", headers=student_headers, json={}).status_code == 409

    client.post(f"/sessions/{sid}/exercises/{row_id}/open", headers=student_headers)
    client.post(f"/sessions/{sid}/sets", headers=student_headers)
    browsing = client.post(f"/sessions/{sid}/exercise/close", headers=student_headers).json()
    assert browsing["can_finish"]

    resp = client.post(f"/sessions/{sid}/finish", headers=student_headers, json={"notes": "Great"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["gamification"]["xp_gained"] == 50
    assert body["session"]["state"] == "finished"
    assert body["session"]["summary"]["total_sets_completed"] == 3

    # finished sessions leave the store, so a repeated finish can't record again
    assert client.get(f"/sessions/{sid}", headers=student_headers).status_code == 404
    assert client.post(f"/sessions/{sid}/finish", headers=student_headers, json={}).status_code == 404

    history = client.get("/history/", headers=student_headers).json()
    assert len(history) == 1
    assert history[0]["workout_name"] == "Leg day"
    assert history[0]["notes"] == "Great"

    streak = client.get("/streak/", headers=student_headers).json()
    assert streak["streak_days"] == 1
    assert streak["status"]["status"] == "current"


def test_starting_twice_resumes_the_same_session(client, student_headers, workout):
    first = client.post("/sessions/", headers=student_headers, json={"workout_id": workout.id}).json()
    second = client.post("/sessions/", headers=student_headers, json={"workout_id": workout.id}).json()
    assert first["id"] == second["id"]


def test_empty_workout_cannot_be_started(client, db, student_headers, professional, student):
    empty = WorkoutCatalog(db).create_workout(professional.id, student.id, "Rest day", [])
    resp = client.post("/sessions/", headers=student_headers, json={"workout_id": empty.id})
    assert resp.status_code == 409


def test_unknown_workout_cannot_be_started(client, student_headers, student):
    resp = client.post("/sessions/", headers=student_headers, json={"workout_id": "missing"})
    assert resp.status_code == 404


def test_sessions_are_student_only(client, coach_headers, workout):
    resp = client.post("/sessions/", headers=coach_headers, json={"workout_id": workout.id})
    assert resp.status_code == 403


def test_abandon_session(client, student_headers, workout):
    sid = client.post("/sessions/", headers=student_headers, json={"workout_id": workout.id}).json()["id"]

    assert client.delete(f"/sessions/{sid}", headers=student_headers).json() == {"status": "abandoned"}
    assert client.get(f"/sessions/{sid}", headers=student_headers).status_code == 404


def test_pause_toggle(client, student_headers, workout):
    sid = client.post("/sessions/", headers=student_headers, json={"workout_id": workout.id}).json()["id"]

    assert client.post(f"/sessions/{sid}/pause", headers=student_headers).json()["paused"] is True
    assert client.post(f"/sessions/{sid}/pause", headers=student_headers).json()["paused"] is False


def test_check_in(client, student_headers, student):
    first = client.post("/streak/check-in", headers=student_headers).json()
    second = client.post("/streak/check-in", headers=student_headers).json()

    assert first["xp_gained"] == 50
    assert second["xp_gained"] == 0
    assert second["message"] == "You already checked in today!"


class FakeCoach:
    def __init__(self, reply=None, error=None):
        self._reply = reply
        self._error = error

    async def reply(self, messages):
        if self._error:
            raise self._error
        return self._reply


@pytest.fixture
def override_coach():
    def _install(coach):
        app.dependency_overrides[get_coach_service] = lambda: coach

    yield _install
    app.dependency_overrides.pop(get_coach_service, None)


def test_coach_chat(client, student_headers, override_coach):
    override_coach(FakeCoach(reply="Keep going! 💪"))
    resp = client.post("/coach/chat", headers=student_headers, json={
        "messages": [{"role": "user", "content": "Motivate me"}],
    })
    assert resp.json() == {"response": "Keep going! 💪"}


def test_coach_chat_upstream_failure(client, student_headers, override_coach):
    override_coach(FakeCoach(error=CoachError("AI API error: 500")))
    resp = client.post("/coach/chat", headers=student_headers, json={
        "messages": [{"role": "user", "content": "hi"}],
    })
    assert resp.status_code == 502
