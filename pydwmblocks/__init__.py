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

from .color import SegmentColoring
from .compositor import Compositor
from .errors import ConfigError
from .kinds import ERROR, CommandOutput, Constant, SegmentKind
from .scheduler import Scheduler, SchedulingPolicy, run
from .segment import Defaults, Segment
from .signals import SignalRange, SignalRouter
from .sinks import RootWindowSink, Sink, StdoutSink

__version__ = '0.1.0'

__all__ = [
    'ERROR',
    'CommandOutput',
    'Compositor',
    'ConfigError',
    'Constant',
    'Defaults',
    'RootWindowSink',
    'Scheduler',
    'SchedulingPolicy',
    'Segment',
    'SegmentColoring',
    'SegmentKind',
    'SignalRange',
    'SignalRouter',
    'Sink',
    'StdoutSink',
    'run',
]
