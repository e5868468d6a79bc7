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

import os

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .color import Color, SegmentColoring
from .errors import ConfigError
from .kinds import CommandOutput, Constant, SegmentKind
from .segment import Defaults, Segment
from .signals import SignalRange


## Configuration
SHELL = '/bin/sh'

KIND_KEYS = ('constant', 'program', 'script')
# config key -> SegmentColoring field
COLOR_KEYS = {
    'text_color': 'text',
    'left_separator_color': 'left_separator',
    'right_separator_color': 'right_separator',
    'icon_color': 'icon',
}
TOP_LEVEL_KEYS = {
    'segments', 'left_separator', 'right_separator', 'update_all_signal', 'script_dir', 'colors',
    *COLOR_KEYS,
}
SEGMENT_KEYS = {
    *KIND_KEYS, 'args', 'update_interval', 'signals', 'left_separator', 'right_separator', 'icon',
    'hide_if_empty', 'trim',
    *COLOR_KEYS,
}


@dataclass
class Configuration:
    defaults: Defaults
    script_dir: Path
    segments: list[Segment]


def default_config_path() -> Path:
    config_home = os.environ.get('XDG_CONFIG_HOME') or os.path.expanduser('~/.config')
    return Path(config_home) / 'pydwmblocks' / 'pydwmblocks.yaml'


def expand_path(path: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(path)))


## Value checks
def _check(value: Any, types: type | tuple[type, ...], what: str) -> Any:
    allowed = types if isinstance(types, tuple) else (types,)
    # bool is an int, but `signals: [true]` is never what anyone meant
    if not isinstance(value, allowed) or (isinstance(value, bool) and bool not in allowed):
        raise ConfigError(f"{what} has the wrong type: {value!r}")
    return value


def _check_keys(mapping: dict, allowed: set[str], what: str):
    unknown = sorted(set(mapping) - allowed, key=str)
    if unknown:
        raise ConfigError(f"unknown key(s) in {what}: {', '.join(map(str, unknown))}")


def _optional_str(mapping: dict, key: str, what: str) -> Optional[str]:
    value = mapping.get(key)
    if value is None:
        return None
    return str(_check(value, (str, int, float), f"{what} '{key}'"))


def _parse_colors(raw: Any) -> dict[str, int]:
    if raw is None:
        return {}
    _check(raw, dict, "'colors'")
    colors = {}
    for name, value in raw.items():
        _check(value, int, f"color '{name}'")
        if not 1 <= value <= 255:
            raise ConfigError(f"color '{name}' must be within 1..255, got {value}")
        colors[str(name)] = value
    return colors


def _parse_coloring(mapping: dict, colors: dict[str, int], what: str) -> SegmentColoring:
    resolved: dict[str, Color] = {}
    for key, field_name in COLOR_KEYS.items():
        name = mapping.get(key)
        if name is None:
            continue
        try:
            resolved[field_name] = colors[name]
        except (KeyError, TypeError):
            raise ConfigError(f"{what}: undefined color: {name}") from None
    return SegmentColoring(**resolved)


def _parse_kind(raw: dict, script_dir: Path) -> SegmentKind:
    present = [key for key in KIND_KEYS if key in raw]
    if len(present) != 1:
        raise ConfigError(f"exactly one of {', '.join(KIND_KEYS)} is required, got {present or 'none'}")

    args = raw.get('args') or []
    _check(args, list, "'args'")
    args = tuple(str(_check(arg, (str, int, float), "argument")) for arg in args)
    trim = _check(raw.get('trim', True), bool, "'trim'")

    match present[0]:
        case 'constant':
            if 'args' in raw:
                raise ConfigError("a constant segment takes no 'args'")
            return Constant(str(_check(raw['constant'], (str, int, float), "'constant'")))
        case 'program':
            program = expand_path(_check(raw['program'], str, "'program'"))
            return CommandOutput(str(program), args, trim)
        case 'script':
            script = script_dir / expand_path(_check(raw['script'], str, "'script'"))
            return CommandOutput(SHELL, (str(script), *args), trim)
    raise AssertionError(present)


def _parse_segment(
    index: int,
    raw: Any,
    defaults: Defaults,
    colors: dict[str, int],
    script_dir: Path,
    signal_range: SignalRange,
) -> Segment:
    _check(raw, dict, "segment")
    _check_keys(raw, SEGMENT_KEYS, "segment")

    update_interval = raw.get('update_interval')
    if update_interval is not None:
        update_interval = float(_check(update_interval, (int, float), "'update_interval'"))

    signal_offsets = raw.get('signals') or []
    _check(signal_offsets, list, "'signals'")
    for offset in signal_offsets:
        _check(offset, int, "signal offset")

    return Segment.from_config(
        index,
        _parse_kind(raw, script_dir),
        signal_range,
        update_interval=update_interval,
        signal_offsets=signal_offsets,
        left_separator=_optional_str(raw, 'left_separator', "segment"),
        right_separator=_optional_str(raw, 'right_separator', "segment"),
        icon=_optional_str(raw, 'icon', "segment"),
        hide_if_empty=_check(raw.get('hide_if_empty', False), bool, "'hide_if_empty'"),
        coloring=_parse_coloring(raw, colors, "segment"),
        defaults=defaults,
    )


def parse_config(
    data: Any,
    signal_range: SignalRange,
    base_dir: Path = Path('.'),
    source: str = '<config>',
) -> Configuration:
    try:
        _check(data, dict, "configuration")
        _check_keys(data, TOP_LEVEL_KEYS, "configuration")

        raw_segments = data.get('segments')
        if raw_segments is None:
            raise ConfigError("'segments' is required")
        _check(raw_segments, list, "'segments'")

        script_dir = data.get('script_dir')
        script_dir = base_dir / expand_path(_check(script_dir, str, "'script_dir'")) if script_dir is not None else base_dir
        if not script_dir.is_dir():
            raise ConfigError(f"script directory '{script_dir}' does not exist")

        update_all_signal = data.get('update_all_signal')
        if update_all_signal is not None:
            _check(update_all_signal, int, "'update_all_signal'")
            signal_range.resolve(update_all_signal)

        colors = _parse_colors(data.get('colors'))
        defaults = Defaults(
            left_separator=_optional_str(data, 'left_separator', "configuration") or '',
            right_separator=_optional_str(data, 'right_separator', "configuration") or '',
            coloring=_parse_coloring(data, colors, "configuration"),
            update_all_signal=update_all_signal,
        )
    except ConfigError as e:
        raise ConfigError(f"{source}: {e}") from e

    segments = []
    for index, raw in enumerate(raw_segments):
        try:
            segments.append(_parse_segment(index, raw, defaults, colors, script_dir, signal_range))
        except ConfigError as e:
            raise ConfigError(f"{source}: segment {index}: {e}") from e

    return Configuration(defaults, script_dir, segments)


def load_config(path: Path, signal_range: Optional[SignalRange] = None) -> Configuration:
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigError(f"error reading config file '{path}': {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: {e}") from e
    if signal_range is None:
        signal_range = SignalRange.from_host()
    return parse_config(data, signal_range, base_dir=path.parent, source=str(path))
