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
import logging
import subprocess

from dataclasses import dataclass


logger = logging.getLogger(__name__)

# Shown in place of the value when the program could not be started at all
ERROR = "ERROR"


class SegmentKind(abc.ABC):
    @abc.abstractmethod
    def compute(self) -> str:
        """
        Produce a fresh value. Must not raise: failures are logged and turned
        into the ERROR sentinel or whatever partial output there is.
        """
        ...


@dataclass(frozen=True)
class Constant(SegmentKind):
    text: str

    def compute(self) -> str:
        return self.text


@dataclass(frozen=True)
class CommandOutput(SegmentKind):
    program: str
    args: tuple[str, ...] = ()
    trim: bool = True

    @property
    def command(self) -> list[str]:
        return [self.program, *self.args]

    def _decode(self, data: bytes, stream: str) -> str:
        try:
            return data.decode()
        except UnicodeDecodeError as e:
            logger.warning(f"program {self.program} {list(self.args)} wrote non-UTF-8 {stream}: {e}")
            return data.decode(errors='replace')

    def compute(self) -> str:
        try:
            proc = subprocess.run(self.command, stdin=subprocess.DEVNULL, capture_output=True)
        except (OSError, ValueError) as e:
            logger.warning(f"error running program {self.program} {list(self.args)}: {e}")
            return ERROR

        stdout = self._decode(proc.stdout, 'stdout')
        if proc.returncode != 0:
            stderr = self._decode(proc.stderr, 'stderr').strip()
            logger.warning(
                f"program {self.program} {list(self.args)} exited with non-zero code ({proc.returncode}): {stderr}"
            )

        if self.trim:
            stdout = stdout.strip()
        return stdout
