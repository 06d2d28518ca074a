from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class ExerciseInfo:
    """Denormalised snapshot of an exercise's descriptive fields."""
    id: str
    name: str
    muscle_group: str
    equipment: Optional[str] = None
    description: str = ""
    instructions: Tuple[str, ...] = ()
    gif_url: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None


@dataclass(frozen=True)
class PlannedExercise:
    """One exercise of a workout as prescribed by the trainer.

    ``id`` is the workout-exercise identifier the session progress is keyed
    by; ``exercise_id`` references the library exercise.
    """
    id: str
    exercise_id: str
    sets: int
    reps: str
    rest_seconds: int = 60
    order_index: int = 0
    notes: Optional[str] = None
    exercise: Optional[ExerciseInfo] = field(default=None, compare=False)

    def __post_init__(self):
        if self.sets < 1:
            raise ValueError(f"sets must be a positive integer, got {self.sets}")
        if self.rest_seconds < 0:
            raise ValueError(f"rest_seconds must not be negative, got {self.rest_seconds}")

    @property
    def name(self) -> str:
        return self.exercise.name if self.exercise else "Exercise"


class MediaKind(str, Enum):
    image = "image"
    video = "video"
    placeholder = "placeholder"


@dataclass(frozen=True)
class MediaRef:
    kind: MediaKind
    url: Optional[str] = None


def format_clock(seconds: int) -> str:
    """Render seconds as m:ss"""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
