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

from dataclasses import dataclass, field
from typing import Iterable, Optional, Self

from .color import SegmentColoring, colored
from .errors import ConfigError
from .kinds import SegmentKind
from .signals import SignalRange


@dataclass(frozen=True)
class Defaults:
    """
    Configuration-level fallbacks shared by every segment.
    """
    left_separator: str = ''
    right_separator: str = ''
    coloring: SegmentColoring = field(default_factory=SegmentColoring)
    # Offset added to every segment, so a single signal refreshes the whole bar
    update_all_signal: Optional[int] = None


@dataclass(eq=False)
class Segment:
    id: int
    kind: SegmentKind
    update_interval: Optional[float] = None
    signals: tuple[int, ...] = ()

    left_separator: str = ''
    right_separator: str = ''
    icon: str = ''
    hide_if_empty: bool = False
    coloring: SegmentColoring = field(default_factory=SegmentColoring)

    # Owned by the scheduler
    last_value: str = ''
    last_update: Optional[float] = None

    @classmethod
    def from_config(
        cls,
        id: int,
        kind: SegmentKind,
        signal_range: SignalRange,
        *,
        update_interval: Optional[float] = None,
        signal_offsets: Iterable[int] = (),
        left_separator: Optional[str] = None,
        right_separator: Optional[str] = None,
        icon: Optional[str] = None,
        hide_if_empty: bool = False,
        coloring: Optional[SegmentColoring] = None,
        defaults: Defaults = Defaults(),
    ) -> Self:
        if update_interval is not None and update_interval <= 0:
            raise ConfigError(f"segment {id}: update_interval must be positive, got {update_interval}")

        offsets = list(signal_offsets)
        if defaults.update_all_signal is not None:
            offsets.append(defaults.update_all_signal)
        # dict keeps the first occurrence order
        signals = tuple(dict.fromkeys(signal_range.resolve(offset) for offset in offsets))

        return cls(
            id=id,
            kind=kind,
            update_interval=update_interval,
            signals=signals,
            left_separator=left_separator if left_separator is not None else defaults.left_separator,
            right_separator=right_separator if right_separator is not None else defaults.right_separator,
            icon=icon if icon is not None else '',
            hide_if_empty=hide_if_empty,
            coloring=(coloring or SegmentColoring()).or_default(defaults.coloring),
        )

    @property
    def is_static(self) -> bool:
        return self.update_interval is None and not self.signals

    def render(self) -> str:
        value = self.kind.compute()
        if self.hide_if_empty and value == '':
            return ''
        c = self.coloring
        return (
            colored(self.left_separator, c.left_separator)
            + colored(self.icon, c.icon)
            + colored(value, c.text)
            + colored(self.right_separator, c.right_separator)
        )

    def refresh(self, now: float) -> str:
        self.last_value = self.render()
        self.last_update = now
        return self.last_value
