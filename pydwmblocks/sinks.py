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

import abc
import sys

from typing import Optional, TextIO

import Xlib.display
import Xlib.error

from .errors import ConfigError


class Sink(abc.ABC):
    @abc.abstractmethod
    def publish(self, text: str):
        ...


class RootWindowSink(Sink):
    """
    dwm shows the root window name as its status text.
    """
    def __init__(self, display_name: Optional[str] = None):
        try:
            self.display = Xlib.display.Display(display_name)
        except Xlib.error.DisplayError as e:
            raise ConfigError(f"cannot open X display: {e}") from e
        self.root = self.display.screen().root
        self.wm_name = self.display.intern_atom('WM_NAME')
        self.utf8_string = self.display.intern_atom('UTF8_STRING')

    def publish(self, text: str):
        self.root.change_property(self.wm_name, self.utf8_string, 8, text.encode())
        self.display.flush()


class StdoutSink(Sink):
    def __init__(self, file: Optional[TextIO] = None):
        self.file = file

    def publish(self, text: str):
        print(text, file=self.file if self.file is not None else sys.stdout, flush=True)
