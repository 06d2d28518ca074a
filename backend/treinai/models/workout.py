from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from treinai.db.base import Base
import uuid


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    muscle_group = Column(String, nullable=False, index=True)
    equipment = Column(String, nullable=True)
    difficulty = Column(String, nullable=False, default="intermediate")
    instructions = Column(JSON, nullable=True)  # ordered list of steps
    gif_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)
    thumbnail_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    student_id = Column(String, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    professional_id = Column(String, ForeignKey("professionals.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=True)  # 0=Sun .. 6=Sat
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order_index",
    )


class WorkoutExercise(Base):
    __tablename__ = "workout_exercises"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    workout_id = Column(String, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False)
    exercise_id = Column(String, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False)
    sets = Column(Integer, nullable=False, default=3)
    reps = Column(String, nullable=False, default="10-12")
    rest_seconds = Column(Integer, nullable=False, default=60)
    order_index = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    workout = relationship("Workout", back_populates="exercises")
    exercise = relationship("Exercise")

    __table_args__ = (
        Index('ix_workout_exercises_workout_order', 'workout_id', 'order_index'),
    )


class WorkoutHistory(Base):
    __tablename__ = "workout_history"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    workout_id = Column(String, ForeignKey("workouts.id", ondelete="SET NULL"), nullable=True)
    session_id = Column(String, nullable=True, unique=True)  # workout session that recorded it
    completed_at = Column(DateTime(timezone=True), server_default=func.now())
    duration_minutes = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    workout = relationship("Workout")

    __table_args__ = (
        Index('ix_workout_history_student_completed', 'student_id', 'completed_at'),
    )
