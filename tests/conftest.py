from __future__ import annotations

import os
import random
import tempfile

import pytest

# Must be set before Qt or the preferences module are imported
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("COLORTRAINER_HOME", tempfile.mkdtemp(prefix="colortrainer-test-"))


class _FakeTimer:
    def __init__(self, scheduler, due, callback):
        self.scheduler = scheduler
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class _FakeTask:
    def __init__(self, fn, on_done):
        self.fn = fn
        self.on_done = on_done
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Scheduler driven by hand: timers fire on advance(), tasks on finish_tasks()"""

    def __init__(self):
        self.now = 0
        self.timers: list[_FakeTimer] = []
        self.tasks: list[_FakeTask] = []

    def call_later(self, delay_ms, callback):
        timer = _FakeTimer(self, self.now + delay_ms, callback)
        self.timers.append(timer)
        return timer

    def run_in_background(self, fn, on_done):
        task = _FakeTask(fn, on_done)
        self.tasks.append(task)
        return task

    def pending(self):
        return [t for t in self.timers if not t.cancelled]

    def advance(self, ms):
        target = self.now + ms
        while True:
            due = [t for t in self.timers if not t.cancelled and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.now = timer.due
            timer.callback()
        self.now = target

    def finish_tasks(self):
        tasks, self.tasks = self.tasks, []
        for task in tasks:
            result = task.fn()
            if not task.cancelled:
                task.on_done(result)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def rng():
    return random.Random(1234)
