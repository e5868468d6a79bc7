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

from dataclasses import dataclass, fields
from typing import Optional, Self


## Color escapes
# dwm statuscolors: a control byte selects the scheme, \x01 goes back to the
# normal one. None leaves the text untouched.
Color = Optional[int]

COLOR_RESET = '\x01'


def colored(text: str, color: Color) -> str:
    if color is None:
        return text
    return f"{chr(color)}{text}{COLOR_RESET}"


@dataclass(frozen=True)
class SegmentColoring:
    text: Color = None
    left_separator: Color = None
    right_separator: Color = None
    icon: Color = None

    def or_default(self, default: SegmentColoring) -> Self:
        """
        Fill every unset slot from `default`, explicit values win.
        """
        return self.__class__(**{
            field.name: own if own is not None else getattr(default, field.name)
            for field in fields(self)
            for own in (getattr(self, field.name),)
        })
