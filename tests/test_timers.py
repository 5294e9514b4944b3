from __future__ import annotations

import threading

import pytest

from colortrainer.timers import QtScheduler


@pytest.fixture
def qt_scheduler(qtbot):
    s = QtScheduler()
    yield s
    s.shutdown()


def test_call_later_fires_once(qtbot, qt_scheduler):
    called = []
    handle = qt_scheduler.call_later(20, lambda: called.append(1))
    assert handle.active
    qtbot.waitUntil(lambda: called == [1], timeout=2000)
    qtbot.wait(50)
    assert called == [1]
    assert not handle.active


def test_cancelled_timer_does_not_fire(qtbot, qt_scheduler):
    called = []
    handle = qt_scheduler.call_later(20, lambda: called.append(1))
    handle.cancel()
    handle.cancel()
    qtbot.wait(100)
    assert called == []


def test_background_result_arrives_on_qt_thread(qtbot, qt_scheduler):
    main_thread = threading.current_thread()
    results = []

    def work():
        results.append(threading.current_thread() is main_thread)
        return "done"

    qt_scheduler.run_in_background(work, lambda r: results.append((r, threading.current_thread() is main_thread)))
    qtbot.waitUntil(lambda: len(results) == 2, timeout=2000)
    assert results == [False, ("done", True)]


def test_cancelled_background_result_is_dropped(qtbot, qt_scheduler):
    gate = threading.Event()
    results = []

    def work():
        gate.wait(2)
        return "late"

    handle = qt_scheduler.run_in_background(work, results.append)
    handle.cancel()
    gate.set()
    qtbot.wait(200)
    assert results == []


def test_background_error_is_logged(qtbot, qt_scheduler, caplog):
    results = []

    def work():
        raise RuntimeError("boom")

    qt_scheduler.run_in_background(work, results.append)
    qtbot.waitUntil(lambda: "boom" in caplog.text, timeout=2000)
    assert results == []
