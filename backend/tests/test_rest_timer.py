import logging

from treinai.services.workout.rest_timer import RestAlert, RestTimer


def test_countdown_reports_each_second_and_completes_once():
    ticks, done = [], []
    timer = RestTimer(on_complete=lambda: done.append(True))
    timer.subscribe(ticks.append)

    timer.start(3)
    for _ in range(5):
        timer.tick()

    assert ticks == [3, 2, 1, 0]
    assert done == [True]
    assert timer.completed
    assert not timer.running
    assert timer.remaining == 0


def test_zero_duration_completes_immediately():
    done = []
    timer = RestTimer(on_complete=lambda: done.append(True))
    timer.start(0)

    assert done == [True]
    assert timer.progress_percent == 100.0


def test_negative_duration_is_clamped_to_zero(caplog):
    done = []
    timer = RestTimer(on_complete=lambda: done.append(True))
    with caplog.at_level(logging.WARNING):
        timer.start(-5)

    assert timer.duration == 0
    assert done == [True]
    assert "clamped" in caplog.text


def test_toggle_pauses_and_resumes_without_losing_time():
    timer = RestTimer()
    timer.start(5)
    timer.toggle()
    timer.tick()
    timer.tick()
    assert timer.remaining == 5
    assert not timer.running

    timer.toggle()
    timer.tick()
    assert timer.remaining == 4


def test_reset_restarts_from_full_duration():
    timer = RestTimer()
    timer.start(5)
    timer.tick()
    timer.tick()
    timer.toggle()

    timer.reset()

    assert timer.remaining == 5
    assert timer.running
    assert not timer.completed


def test_skip_completes_exactly_once():
    done = []
    timer = RestTimer(on_complete=lambda: done.append(True))
    timer.start(10)

    timer.skip()
    timer.skip()
    timer.tick()

    assert done == [True]
    assert timer.remaining == 10


def test_progress_percent():
    timer = RestTimer()
    timer.start(4)
    timer.tick()
    assert timer.progress_percent == 25.0


def test_alert_plays_on_last_three_seconds_and_zero():
    played = []
    timer = RestTimer()
    timer.subscribe(RestAlert(played.append))
    timer.start(5)
    for _ in range(5):
        timer.tick()

    assert played == [3, 2, 1, 0]


def test_disabled_alert_is_silent():
    played = []
    alert = RestAlert(played.append)
    assert alert.toggle() is False

    timer = RestTimer()
    timer.subscribe(alert)
    timer.start(3)
    for _ in range(3):
        timer.tick()

    assert played == []


def test_failing_player_does_not_stop_the_countdown(caplog):
    def broken_player(remaining):
        raise RuntimeError("no audio device")

    done = []
    timer = RestTimer(on_complete=lambda: done.append(True))
    timer.subscribe(RestAlert(broken_player))
    with caplog.at_level(logging.WARNING):
        timer.start(2)
        timer.tick()
        timer.tick()

    assert done == [True]
    assert "no audio device" in caplog.text


def test_skip_at_four_seconds_remaining_does_not_wait():
    done = []
    timer = RestTimer(on_complete=lambda: done.append(True))
    timer.start(6)
    timer.tick()
    timer.tick()
    assert timer.remaining == 4

    timer.skip()

    assert done == [True]
    assert not timer.running
