from typing import Dict, Mapping, Sequence

from treinai.services.workout.types import PlannedExercise


class SessionProgress:
    """Completed-set counts per workout exercise for one session.

    Counts only ever move through ``record_set``, which refuses to go past
    the prescribed number of sets.
    """

    def __init__(self, exercises: Sequence[PlannedExercise]):
        self._prescribed: Dict[str, int] = {ex.id: ex.sets for ex in exercises}
        self._completed: Dict[str, int] = {}

    def completed(self, exercise_id: str) -> int:
        return self._completed.get(exercise_id, 0)

    def prescribed(self, exercise_id: str) -> int:
        return self._prescribed.get(exercise_id, 0)

    def is_complete(self, exercise_id: str) -> bool:
        return self.completed(exercise_id) >= self.prescribed(exercise_id)

    def record_set(self, exercise_id: str) -> bool:
        """Add one completed set; returns False when nothing was recorded"""
        if exercise_id not in self._prescribed or self.is_complete(exercise_id):
            return False
        self._completed[exercise_id] = self.completed(exercise_id) + 1
        return True

    def as_dict(self) -> Dict[str, int]:
        return dict(self._completed)

    def clear(self) -> None:
        self._completed.clear()


def completed_exercises_count(exercises: Sequence[PlannedExercise], progress: Mapping[str, int]) -> int:
    return sum(1 for ex in exercises if progress.get(ex.id, 0) >= ex.sets)


def total_sets_completed(exercises: Sequence[PlannedExercise], progress: Mapping[str, int]) -> int:
    return sum(min(progress.get(ex.id, 0), ex.sets) for ex in exercises)


def total_sets(exercises: Sequence[PlannedExercise]) -> int:
    return sum(ex.sets for ex in exercises)


def progress_percent(exercises: Sequence[PlannedExercise], progress: Mapping[str, int]) -> float:
    total = total_sets(exercises)
    if total == 0:
        return 0.0
    return total_sets_completed(exercises, progress) / total * 100


def all_exercises_complete(exercises: Sequence[PlannedExercise], progress: Mapping[str, int]) -> bool:
    return completed_exercises_count(exercises, progress) == len(exercises)
