"""
Workout catalog: exercise library, workout authoring, and the read-only
workout definition a session is started from.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence
import logging

from sqlalchemy.orm import Session, selectinload

from treinai.models.coaching import Student
from treinai.models.workout import Exercise, Workout, WorkoutExercise
from treinai.services.workout.types import ExerciseInfo, PlannedExercise

logger = logging.getLogger(__name__)

DEFAULT_REST_SECONDS = 60


class CatalogError(Exception):
    pass


class WorkoutNotFoundError(CatalogError):
    pass


@dataclass
class ExerciseInput:
    exercise_id: str
    sets: int
    reps: str
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None


def js_weekday(day: date) -> int:
    """Weekday numbered 0=Sunday .. 6=Saturday, as stored on workouts"""
    return (day.weekday() + 1) % 7


def to_exercise_info(exercise: Exercise) -> ExerciseInfo:
    return ExerciseInfo(
        id=exercise.id,
        name=exercise.name,
        muscle_group=exercise.muscle_group,
        equipment=exercise.equipment,
        description=exercise.description or "",
        instructions=tuple(exercise.instructions or ()),
        gif_url=exercise.gif_url,
        video_url=exercise.video_url,
        thumbnail_url=exercise.thumbnail_url,
    )


def to_planned_exercise(row: WorkoutExercise) -> PlannedExercise:
    return PlannedExercise(
        id=row.id,
        exercise_id=row.exercise_id,
        sets=row.sets,
        reps=row.reps,
        rest_seconds=row.rest_seconds,
        order_index=row.order_index,
        notes=row.notes,
        exercise=to_exercise_info(row.exercise) if row.exercise else None,
    )


class WorkoutCatalog:
    def __init__(self, db: Session):
        self.db = db

    # ----- Exercise library -----

    def list_exercises(self, muscle_group: Optional[str] = None) -> List[Exercise]:
        query = self.db.query(Exercise)
        if muscle_group:
            query = query.filter(Exercise.muscle_group == muscle_group)
        return query.order_by(Exercise.name.asc()).all()

    def get_exercise(self, exercise_id: str) -> Optional[Exercise]:
        return self.db.query(Exercise).filter(Exercise.id == exercise_id).first()

    def create_exercise(self, **fields) -> Exercise:
        exercise = Exercise(**fields)
        self.db.add(exercise)
        self.db.commit()
        self.db.refresh(exercise)
        return exercise

    # ----- Workouts -----

    def _workout_query(self):
        return self.db.query(Workout).options(
            selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise)
        )

    def create_workout(
        self,
        professional_id: str,
        student_id: str,
        name: str,
        exercises: Sequence[ExerciseInput],
        description: Optional[str] = None,
        day_of_week: Optional[int] = None,
    ) -> Workout:
        student = self.db.query(Student).filter(Student.id == student_id).first()
        if not student or student.professional_id != professional_id:
            raise CatalogError("Student is not linked to this professional")

        known = {
            row.id
            for row in self.db.query(Exercise.id).filter(Exercise.id.in_([ex.exercise_id for ex in exercises])).all()
        }
        missing = [ex.exercise_id for ex in exercises if ex.exercise_id not in known]
        if missing:
            raise CatalogError(f"Unknown exercises: {', '.join(missing)}")

        workout = Workout(
            name=name,
            description=description or None,
            student_id=student_id,
            professional_id=professional_id,
            day_of_week=day_of_week,
        )
        for index, ex in enumerate(exercises):
            workout.exercises.append(WorkoutExercise(
                exercise_id=ex.exercise_id,
                sets=ex.sets,
                reps=ex.reps,
                rest_seconds=ex.rest_seconds if ex.rest_seconds is not None else DEFAULT_REST_SECONDS,
                notes=ex.notes or None,
                order_index=index,
            ))

        self.db.add(workout)
        self.db.commit()
        self.db.refresh(workout)
        logger.info(f"Workout {workout.id} '{name}' created for student {student_id}")
        return workout

    def list_for_student(self, student_id: str) -> List[Workout]:
        return (
            self._workout_query()
            .filter(Workout.student_id == student_id)
            .order_by(Workout.day_of_week.asc())
            .all()
        )

    def list_for_professional(self, professional_id: str, student_id: Optional[str] = None) -> List[Workout]:
        query = self._workout_query().filter(Workout.professional_id == professional_id)
        if student_id:
            query = query.filter(Workout.student_id == student_id)
        return query.order_by(Workout.day_of_week.asc()).all()

    def get_workout(self, workout_id: str) -> Optional[Workout]:
        return self._workout_query().filter(Workout.id == workout_id).first()

    def delete_workout(self, workout_id: str, professional_id: str) -> None:
        workout = self.db.query(Workout).filter(
            Workout.id == workout_id, Workout.professional_id == professional_id
        ).first()
        if not workout:
            raise WorkoutNotFoundError(workout_id)
        self.db.delete(workout)
        self.db.commit()
        logger.info(f"Workout {workout_id} deleted")

    def todays_workout(self, student_id: str, today: Optional[date] = None) -> Optional[Workout]:
        dow = js_weekday(today or date.today())
        return (
            self._workout_query()
            .filter(
                Workout.student_id == student_id,
                Workout.day_of_week == dow,
                Workout.is_active.is_(True),
            )
            .first()
        )

    # ----- Session definition -----

    def load_workout_exercises(self, workout_id: str) -> List[PlannedExercise]:
        """Ordered, immutable exercise prescriptions for a session"""
        workout = self.get_workout(workout_id)
        if not workout:
            raise WorkoutNotFoundError(workout_id)
        return [to_planned_exercise(row) for row in sorted(workout.exercises, key=lambda r: r.order_index)]
