from treinai.services.workout.exercise_detail import (
    ALL_SETS_DONE,
    DetailView,
    ExerciseDetailController,
    PrimaryAction,
)
from treinai.services.workout.types import ExerciseInfo, MediaKind, PlannedExercise


class Harness:
    """Stands in for the session: owns the count and records callbacks"""

    def __init__(self, sets=3, rest_seconds=45, info=None, accept_sets=True):
        self.count = 0
        self.rests = []
        self.closed = False
        self.accept_sets = accept_sets
        exercise = PlannedExercise(
            id="we-1", exercise_id="ex-1", sets=sets, reps="8-10", rest_seconds=rest_seconds, exercise=info,
        )
        self.controller = ExerciseDetailController(
            exercise,
            current_set=lambda: self.count,
            on_complete_set=self._record,
            on_start_rest=self.rests.append,
            on_close=self._close,
        )

    def _record(self):
        if self.accept_sets:
            self.count += 1

    def _close(self):
        self.closed = True


def test_fresh_exercise_offers_first_set():
    ctrl = Harness().controller

    assert ctrl.view == DetailView.execution
    assert ctrl.primary_action == PrimaryAction.complete_set
    assert ctrl.primary_label == "Complete set 1"
    assert ctrl.status_text == "Perform 8-10 reps"
    assert ctrl.set_indicator() == [False, False, False]


def test_completed_set_requests_rest_while_sets_remain():
    h = Harness()
    outcome = h.controller.complete_set()

    assert outcome.recorded
    assert outcome.completed == 1
    assert outcome.rest_seconds == 45
    assert h.rests == [45]
    assert h.controller.primary_label == "Complete set 2"
    assert h.controller.set_indicator() == [True, False, False]


def test_last_set_finishes_exercise_without_rest():
    h = Harness(sets=2)
    h.controller.complete_set()
    outcome = h.controller.complete_set()

    assert h.rests == [45]
    assert outcome.rest_seconds is None
    assert outcome.exercise_complete
    assert h.controller.primary_action == PrimaryAction.finish_exercise
    assert h.controller.primary_label == "Finish exercise"
    assert h.controller.status_text == ALL_SETS_DONE


def test_complete_set_on_finished_exercise_is_a_no_op():
    h = Harness(sets=1)
    h.controller.complete_set()
    outcome = h.controller.complete_set()

    assert not outcome.recorded
    assert h.count == 1
    assert h.rests == []


def test_no_rest_when_parent_does_not_record_the_set():
    h = Harness(accept_sets=False)
    outcome = h.controller.complete_set()

    assert not outcome.recorded
    assert h.rests == []


def test_show_accepts_view_names():
    ctrl = Harness().controller
    ctrl.show("instructions")
    assert ctrl.view == DetailView.instructions


def test_close_delegates_to_parent():
    h = Harness()
    h.controller.close()
    assert h.closed


def test_demo_media_prefers_gif_then_video():
    gif_and_video = ExerciseInfo(id="ex-1", name="Squat", muscle_group="legs", gif_url="a.gif", video_url="a.mp4")
    video_only = ExerciseInfo(id="ex-1", name="Squat", muscle_group="legs", video_url="a.mp4")

    assert Harness(info=gif_and_video).controller.demo_media().kind == MediaKind.image
    media = Harness(info=video_only).controller.demo_media()
    assert media.kind == MediaKind.video
    assert media.url == "a.mp4"
    assert Harness().controller.demo_media().kind == MediaKind.placeholder


def test_instructions():
    info = ExerciseInfo(id="ex-1", name="Squat", muscle_group="legs", instructions=("Brace", "Squat"))
    assert Harness(info=info).controller.instructions == ["Brace", "Squat"]
    assert Harness().controller.instructions == []
