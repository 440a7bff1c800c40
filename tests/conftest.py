import math
from types import SimpleNamespace

import pytest

from neuralstride.bridge.background import BackgroundContext
from neuralstride.monitoring.timer_manager import ManualClock, TickScheduler


def point(x, y):
    return SimpleNamespace(x=x, y=y, z=0.0)


def make_landmarks(ear, shoulder, hip, count=33):
    """Full landmark list with left/right anchors placed symmetrically around the given midpoints."""
    landmarks = [point(0.0, 0.0) for _ in range(count)]
    for (left, right), (x, y) in (((7, 8), ear), ((11, 12), shoulder), ((23, 24), hip)):
        landmarks[left] = point(x - 0.05, y)
        landmarks[right] = point(x + 0.05, y)
    return landmarks


def landmarks_at_angle(angle_deg):
    """Landmarks whose ear-shoulder-hip angle is angle_deg."""
    shoulder = (0.5, 0.5)
    hip = (0.5, 0.9)
    theta = math.radians(angle_deg)
    ear = (0.5 + 0.3 * math.sin(theta), 0.5 + 0.3 * math.cos(theta))
    return make_landmarks(ear, shoulder, hip)


class FakeSpeechBackend:
    def __init__(self, fail_cancel=False, fail_speak=False):
        self.calls = []
        self.fail_cancel = fail_cancel
        self.fail_speak = fail_speak

    def cancel(self):
        self.calls.append(("cancel", None))
        if self.fail_cancel:
            raise RuntimeError("interrupted")

    def speak(self, text):
        self.calls.append(("speak", text))
        if self.fail_speak:
            raise RuntimeError("synthesis failed")

    @property
    def spoken(self):
        return [text for kind, text in self.calls if kind == "speak"]


class FakeNotifier:
    def __init__(self, delivered=True):
        self.sent = []
        self.delivered = delivered

    def notify(self, title, message, urgency="normal"):
        self.sent.append((title, message, urgency))
        return self.delivered


class FixedStepRng:
    """Stands in for random.Random: uniform() always returns the configured step."""

    def __init__(self, step):
        self.step = step

    def uniform(self, a, b):
        return max(a, min(b, self.step))


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return TickScheduler(clock)


@pytest.fixture
def background(scheduler):
    context = BackgroundContext(scheduler=scheduler, rng=FixedStepRng(3.0))
    context.on_install()
    return context
