#
# A dwm status bar driver in Python.
# Copyright (C) 2025 Marcin Słowik
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
#

from __future__ import annotations

import asyncio
import enum
import logging
import math
import time

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from .compositor import Compositor
from .kinds import ERROR
from .segment import Segment
from .signals import SignalRange, SignalRouter
from .sinks import RootWindowSink, Sink


logger = logging.getLogger(__name__)


class SchedulingPolicy(enum.Enum):
    # Every polled segment sleeps on its own timer
    Timers = 'timers'
    # One shared tick (GCD of all intervals), stale segments recompute on it
    Tick = 'tick'


class Trigger(enum.Enum):
    Timer = enum.auto()
    Signal = enum.auto()


## Events flowing into the coordinating loop
@dataclass(frozen=True)
class Refresh:
    segment_id: int
    trigger: Trigger
    # Tick instant the segment was found stale at, stamped as its last update
    at: Optional[float] = None


@dataclass(frozen=True)
class Computed:
    segment_id: int
    text: str
    started: float
    finished: float


Event = Refresh | Computed


## Shared tick
def shared_tick(intervals: Iterable[Optional[float]]) -> Optional[float]:
    """
    GCD of all intervals in whole milliseconds, in seconds. None when no
    segment is polled at all.
    """
    millis = [max(1, round(interval * 1000)) for interval in intervals if interval is not None]
    if not millis:
        return None
    return math.gcd(*millis) / 1000


class TickSchedule:
    # Absorbs float error so a segment due exactly on a tick is not pushed to the next one
    SLACK = 0.001

    def __init__(self, segments: Iterable[Segment]):
        self.segments = [segment for segment in segments if segment.update_interval is not None]
        self.tick = shared_tick(segment.update_interval for segment in self.segments)

    def due(self, now: float) -> list[int]:
        return [
            segment.id
            for segment in self.segments
            if segment.last_update is None
            or now - segment.last_update + self.SLACK >= segment.update_interval
        ]


## Main loop
class Scheduler:
    segments: list[Segment]
    events: asyncio.Queue[Event]
    in_flight: set[int]
    pending: set[int]

    def __init__(
        self,
        segments: Sequence[Segment],
        compositor: Compositor,
        *,
        policy: SchedulingPolicy = SchedulingPolicy.Timers,
        router: Optional[SignalRouter] = None,
        signal_range: Optional[SignalRange] = None,
        executor: Optional[Executor] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.segments = list(segments)
        for index, segment in enumerate(self.segments):
            if segment.id != index:
                raise ValueError(f"segment at position {index} has id {segment.id}")
        self.compositor = compositor
        self.policy = policy
        self.router = router if router is not None else SignalRouter(self.segments, signal_range)
        self.executor = executor if executor is not None else ThreadPoolExecutor(thread_name_prefix='segment')
        self.clock = clock
        self.events = asyncio.Queue()
        self.in_flight = set()
        # Signalled while computing, run again once the current computation lands
        self.pending = set()
        self._tasks: set[asyncio.Task] = set()

    def initialize(self):
        """
        Compute every segment once, synchronously, then publish the first line.
        """
        now = self.clock()
        for segment in self.segments:
            segment.refresh(now)
        self.compositor.refresh(self.segments)

    def request(self, segment_id: int, trigger: Trigger = Trigger.Signal, at: Optional[float] = None):
        self.events.put_nowait(Refresh(segment_id, trigger, at))

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _compute(self, segment: Segment, started: float):
        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(self.executor, segment.render)
        except Exception:
            logger.exception(f"computing segment {segment.id} failed")
            text = ERROR
        self.events.put_nowait(Computed(segment.id, text, started, self.clock()))

    def _start(self, segment_id: int, trigger: Trigger, at: Optional[float] = None):
        if segment_id in self.in_flight:
            if trigger is Trigger.Signal:
                self.pending.add(segment_id)
                logger.debug(f"segment {segment_id} still computing, signal deferred")
            else:
                logger.debug(f"segment {segment_id} still computing, timer request dropped")
            return
        segment = self.segments[segment_id]
        self.in_flight.add(segment_id)
        started = self.clock()
        segment.last_update = at if at is not None else started
        self._spawn(self._compute(segment, started))

    def _finish(self, result: Computed):
        segment_id = result.segment_id
        segment = self.segments[segment_id]
        self.in_flight.discard(segment_id)
        segment.last_value = result.text

        took = result.finished - result.started
        if segment.update_interval is not None and took > segment.update_interval:
            logger.warning(
                f"segment {segment_id} took {took:.3f}s, longer than its update interval of {segment.update_interval}s"
            )

        self.compositor.refresh(self.segments)

        if segment_id in self.pending:
            self.pending.discard(segment_id)
            self._start(segment_id, Trigger.Signal)

    def dispatch(self, event: Event):
        match event:
            case Refresh(segment_id, trigger, at):
                self._start(segment_id, trigger, at)
            case Computed():
                self._finish(event)

    async def step(self):
        self.dispatch(await self.events.get())

    ## Timer sources
    async def _poll(self, segment: Segment):
        loop = asyncio.get_running_loop()
        interval = segment.update_interval
        assert interval is not None
        deadline = loop.time()
        while True:
            # On a fixed grid so the polls do not drift; after falling behind fire once and go on
            deadline = max(deadline + interval, loop.time())
            await asyncio.sleep(deadline - loop.time())
            self.request(segment.id, Trigger.Timer)

    async def _tick(self, schedule: TickSchedule):
        loop = asyncio.get_running_loop()
        tick = schedule.tick
        assert tick is not None
        deadline = loop.time()
        while True:
            deadline = max(deadline + tick, loop.time())
            await asyncio.sleep(deadline - loop.time())
            now = self.clock()
            for segment_id in schedule.due(now):
                self.request(segment_id, Trigger.Timer, now)

    def start_timers(self):
        if self.policy is SchedulingPolicy.Tick:
            schedule = TickSchedule(self.segments)
            if schedule.tick is None:
                logger.info("no segment has an update interval, updating on signals only")
                return
            logger.info(f"shared tick of {schedule.tick}s over {len(schedule.segments)} segment(s)")
            self._spawn(self._tick(schedule))
        else:
            polled = [segment for segment in self.segments if segment.update_interval is not None]
            logger.info(f"{len(polled)} segment(s) on their own timers")
            for segment in polled:
                self._spawn(self._poll(segment))

    async def run(self):
        loop = asyncio.get_running_loop()
        for segment in self.segments:
            if segment.is_static:
                logger.debug(f"segment {segment.id} has no interval and no signals, it will never update")

        # Fails before anything gets published
        self.router.install(loop, self.request)
        try:
            self.initialize()
            self.start_timers()
            while True:
                try:
                    await self.step()
                except Exception as e:
                    logger.exception(f"in main loop: {e!r}")
        finally:
            for task in list(self._tasks):
                task.cancel()
            self.router.uninstall()
            self.executor.shutdown(wait=False, cancel_futures=True)


async def run(
    segments: Sequence[Segment],
    sink: Optional[Sink] = None,
    policy: SchedulingPolicy = SchedulingPolicy.Timers,
    signal_range: Optional[SignalRange] = None,
):
    """
    Drive the status bar with the given segments until cancelled.
    """
    compositor = Compositor(sink if sink is not None else RootWindowSink())
    scheduler = Scheduler(segments, compositor, policy=policy, signal_range=signal_range)
    await scheduler.run()
