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

import logging

from typing import Iterable, Optional

from .segment import Segment
from .sinks import Sink


logger = logging.getLogger(__name__)


class Compositor:
    published: Optional[str]

    def __init__(self, sink: Sink):
        self.sink = sink
        # None so that the very first line is always published, even if empty
        self.published = None

    @staticmethod
    def compose(segments: Iterable[Segment]) -> str:
        return ''.join(segment.last_value for segment in segments)

    def publish_if_changed(self, text: str) -> bool:
        if text == self.published:
            return False
        self.sink.publish(text)
        self.published = text
        logger.debug(f"published {text!r}")
        return True

    def refresh(self, segments: Iterable[Segment]) -> bool:
        return self.publish_if_changed(self.compose(segments))
