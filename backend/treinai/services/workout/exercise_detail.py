"""
In-session view of a single exercise.

The controller never owns the completed-set count: it reads it from the
parent through ``current_set`` and asks the parent to record a set through
``on_complete_set``. After a recorded set it either asks for a rest period
(sets remain) or switches its primary action to finishing the exercise.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from treinai.services.workout.types import MediaKind, MediaRef, PlannedExercise

DEMO_UNAVAILABLE = "Demonstration not available"
INSTRUCTIONS_UNAVAILABLE = "Instructions not available"
ALL_SETS_DONE = "All sets done!"


class DetailView(str, Enum):
    execution = "execution"
    instructions = "instructions"


class PrimaryAction(str, Enum):
    complete_set = "complete_set"
    finish_exercise = "finish_exercise"


@dataclass(frozen=True)
class SetOutcome:
    recorded: bool
    completed: int
    prescribed: int
    rest_seconds: Optional[int] = None

    @property
    def exercise_complete(self) -> bool:
        return self.completed >= self.prescribed


class ExerciseDetailController:
    def __init__(
        self,
        exercise: PlannedExercise,
        current_set: Callable[[], int],
        on_complete_set: Callable[[], None],
        on_start_rest: Callable[[int], None],
        on_close: Callable[[], None],
    ):
        self.exercise = exercise
        self._current_set = current_set
        self._on_complete_set = on_complete_set
        self._on_start_rest = on_start_rest
        self._on_close = on_close
        self.view = DetailView.execution

    @property
    def completed(self) -> int:
        return max(0, min(self._current_set(), self.exercise.sets))

    @property
    def is_complete(self) -> bool:
        return self.completed >= self.exercise.sets

    def show(self, view: DetailView) -> None:
        self.view = DetailView(view)

    def set_indicator(self) -> List[bool]:
        """One flag per prescribed set, filled for completed ones"""
        return [i < self.completed for i in range(self.exercise.sets)]

    @property
    def primary_action(self) -> PrimaryAction:
        return PrimaryAction.finish_exercise if self.is_complete else PrimaryAction.complete_set

    @property
    def primary_label(self) -> str:
        if self.is_complete:
            return "Finish exercise"
        return f"Complete set {self.completed + 1}"

    @property
    def status_text(self) -> str:
        if self.is_complete:
            return ALL_SETS_DONE
        return f"Perform {self.exercise.reps} reps"

    def complete_set(self) -> SetOutcome:
        sets = self.exercise.sets
        if self.is_complete:
            return SetOutcome(recorded=False, completed=self.completed, prescribed=sets)

        before = self.completed
        self._on_complete_set()
        after = self.completed
        if after <= before:
            return SetOutcome(recorded=False, completed=after, prescribed=sets)

        rest_seconds = None
        if after < sets:
            rest_seconds = self.exercise.rest_seconds
            self._on_start_rest(rest_seconds)
        return SetOutcome(recorded=True, completed=after, prescribed=sets, rest_seconds=rest_seconds)

    def close(self) -> None:
        self._on_close()

    def demo_media(self) -> MediaRef:
        info = self.exercise.exercise
        if info and info.gif_url:
            return MediaRef(MediaKind.image, info.gif_url)
        if info and info.video_url:
            return MediaRef(MediaKind.video, info.video_url)
        return MediaRef(MediaKind.placeholder)

    @property
    def instructions(self) -> List[str]:
        info = self.exercise.exercise
        return list(info.instructions) if info and info.instructions else []
