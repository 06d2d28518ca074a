import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AI_API_KEY"] = "test-key"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from treinai.core.auth import create_access_token
from treinai.db.base import Base, SessionLocal, engine
from treinai.main import app
from treinai.models.coaching import Professional, Student
from treinai.models.user import UserRole
from treinai.services.accounts import AccountService, Registration
from treinai.services.catalog import ExerciseInput, WorkoutCatalog


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def headers_for():
    def _headers(user_id: str) -> dict:
        token = create_access_token(data={"sub": user_id})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def professional(db):
    user = AccountService(db).register(Registration(
        email="coach@example.com",
        password="secret123",
        full_name="Carla Coach",
        role=UserRole.professional,
        cref_number="012345",
        cref_state="sp",
    ))
    return db.query(Professional).filter(Professional.user_id == user.id).one()


@pytest.fixture
def student(db, professional):
    user = AccountService(db).register(Registration(
        email="student@example.com",
        password="secret123",
        full_name="Sam Student",
        role=UserRole.student,
        invite_code=professional.invite_code.lower(),
        age=29,
    ))
    return db.query(Student).filter(Student.user_id == user.id).one()


@pytest.fixture
def exercises(db):
    catalog = WorkoutCatalog(db)
    squat = catalog.create_exercise(
        name="Back Squat",
        muscle_group="legs",
        equipment="barbell",
        instructions=["Brace your core", "Sit back and down", "Drive up through the heels"],
        gif_url="https://cdn.example.com/squat.gif",
    )
    row = catalog.create_exercise(name="Cable Row", muscle_group="back", equipment="cable")
    return squat, row


@pytest.fixture
def workout(db, professional, student, exercises):
    squat, row = exercises
    return WorkoutCatalog(db).create_workout(
        professional_id=professional.id,
        student_id=student.id,
        name="Leg day",
        day_of_week=1,
        exercises=[
            ExerciseInput(exercise_id=squat.id, sets=2, reps="10", rest_seconds=30),
            ExerciseInput(exercise_id=row.id, sets=1, reps="12", rest_seconds=0),
        ],
    )
