from __future__ import annotations

import threading

from pydwmblocks.kinds import SegmentKind
from pydwmblocks.signals import SignalRange
from pydwmblocks.sinks import Sink


# Linux glibc values, fixed so the tests do not depend on the host
SIGNAL_RANGE = SignalRange(34, 64)


class RecordingSink(Sink):
    def __init__(self):
        self.lines: list[str] = []

    def publish(self, text: str):
        self.lines.append(text)


class Counter(SegmentKind):
    """
    Returns how many times it has been computed.
    """
    def __init__(self):
        self.calls = 0
        self._lock = threading.Lock()

    def compute(self) -> str:
        with self._lock:
            self.calls += 1
            return str(self.calls)


class Gate(SegmentKind):
    """
    Blocks inside compute() until released, once `closed` is set.
    """
    def __init__(self):
        self.calls = 0
        self.closed = False
        self.release = threading.Event()

    def compute(self) -> str:
        self.calls += 1
        if self.closed:
            self.release.wait(5)
        return str(self.calls)


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeLoop:
    """
    Just enough of an event loop for SignalRouter.install().
    """
    def __init__(self, refuse: set[int] = frozenset()):
        self.handlers: dict[int, tuple] = {}
        self.refuse = refuse

    def add_signal_handler(self, signum, callback, *args):
        if signum in self.refuse:
            raise ValueError(f"invalid signal number {signum}")
        self.handlers[signum] = (callback, args)

    def remove_signal_handler(self, signum):
        return self.handlers.pop(signum, None) is not None

    def fire(self, signum):
        callback, args = self.handlers[signum]
        callback(*args)
