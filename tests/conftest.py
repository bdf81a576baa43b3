import pytest


class FakeTimer:
    def __init__(self, due, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Manual clock: callbacks only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def call_later(self, delay, callback):
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds):
        self.now += seconds
        for timer in list(self.timers):
            if not timer.cancelled and not timer.fired and timer.due <= self.now:
                timer.fired = True
                timer.callback()

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]


class BrokenClipboard:
    def write(self, text):
        raise OSError("clipboard unavailable")


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def broken_clipboard():
    return BrokenClipboard()
