from .types import ExerciseInfo, PlannedExercise, MediaKind, MediaRef, format_clock
from .rest_timer import RestTimer, RestAlert
from .progress import SessionProgress
from .exercise_detail import ExerciseDetailController, DetailView, PrimaryAction, SetOutcome
from .session import (
    WorkoutSession,
    SessionState,
    SessionStateError,
    FinalizeInProgressError,
    SessionFinalizeError,
    EmptyWorkoutError,
    UnknownExerciseError,
)
from .session_store import WorkoutSessionStore, SessionNotFoundError, session_store
