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
import logging
import signal

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Self

from .errors import ConfigError

if TYPE_CHECKING:
    from .segment import Segment


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalRange:
    """
    The host's real-time signal range, resolved once at startup and passed
    around explicitly.
    """
    rtmin: int
    rtmax: int

    @classmethod
    def from_host(cls) -> Self:
        rtmin = getattr(signal, 'SIGRTMIN', None)
        rtmax = getattr(signal, 'SIGRTMAX', None)
        if rtmin is None or rtmax is None:
            # No real-time signals on this platform, every signal is out of range
            return cls(0, -1)
        return cls(int(rtmin), int(rtmax))

    def __contains__(self, signum: int) -> bool:
        return self.rtmin <= signum <= self.rtmax

    def resolve(self, offset: int) -> int:
        """
        SIGRTMIN+offset, or ConfigError when that is not a real-time signal.
        """
        signum = self.rtmin + offset
        if offset < 0 or signum not in self:
            raise ConfigError(
                f"signal offset {offset} resolves to {signum}, outside of SIGRTMIN..SIGRTMAX ({self.rtmin}..{self.rtmax})"
            )
        return signum


class SignalRouter:
    table: dict[int, list[int]]

    def __init__(self, segments: Iterable[Segment], signal_range: Optional[SignalRange] = None):
        self.signal_range = signal_range if signal_range is not None else SignalRange.from_host()
        self.table = {}
        for segment in segments:
            for signum in segment.signals:
                ids = self.table.setdefault(signum, [])
                if segment.id not in ids:
                    ids.append(segment.id)
        self._request: Optional[Callable[[int], Any]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._installed: list[int] = []

    @property
    def signals(self) -> list[int]:
        return sorted(self.table)

    def route(self, signum: int) -> list[int]:
        return list(self.table.get(signum, ()))

    def dispatch(self, signum: int):
        logger.debug(f"signal {signum} arrived")
        assert self._request is not None
        for segment_id in self.route(signum):
            self._request(segment_id)

    def install(self, loop: asyncio.AbstractEventLoop, request: Callable[[int], Any]):
        """
        Route every used signal into `request`. All signals share the loop's
        single wakeup descriptor and the single `dispatch` callback.
        """
        outside = [signum for signum in self.table if signum not in self.signal_range]
        if outside:
            raise ConfigError(
                f"signal(s) {outside} outside of SIGRTMIN..SIGRTMAX ({self.signal_range.rtmin}..{self.signal_range.rtmax})"
            )
        self._request = request
        self._loop = loop
        for signum in self.table:
            try:
                loop.add_signal_handler(signum, self.dispatch, signum)
                self._installed.append(signum)
            except (ValueError, RuntimeError, OSError) as e:
                self.uninstall()
                raise ConfigError(f"cannot listen for signal {signum}: {e}") from e

    def uninstall(self):
        if self._loop is None:
            return
        for signum in self._installed:
            self._loop.remove_signal_handler(signum)
        self._installed.clear()
        self._loop = None
