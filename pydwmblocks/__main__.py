#!/usr/bin/env -S python3 -u
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

import argparse
import asyncio
import logging
import sys

from pathlib import Path
from typing import Optional, Sequence

from .config import default_config_path, load_config
from .errors import ConfigError
from .scheduler import SchedulingPolicy, run
from .sinks import RootWindowSink, Sink, StdoutSink


logger = logging.getLogger('pydwmblocks')


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='pydwmblocks', description="Status text for the dwm bar.")
    parser.add_argument(
        '-c', '--config', type=Path, default=None, metavar='config_path',
        help=f"the path to the configuration file (default: {default_config_path()})",
    )
    parser.add_argument(
        '--policy', choices=[policy.value for policy in SchedulingPolicy], default=SchedulingPolicy.Timers.value,
        help="per-segment timers, or one shared tick at the GCD of all intervals",
    )
    parser.add_argument('--stdout', action='store_true', help="print the status lines instead of setting the root window name")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true')
    verbosity.add_argument('-q', '--quiet', action='store_true')
    return parser.parse_args(argv)


def setup_logging(args: argparse.Namespace):
    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format='[{asctime}] ({levelname}:{name}) {message}',
        style='{',
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args)

    config_path = args.config if args.config is not None else default_config_path()
    logger.info(f"loading config file '{config_path}'")

    try:
        config = load_config(config_path)
        sink: Sink = StdoutSink() if args.stdout else RootWindowSink()
        asyncio.run(run(config.segments, sink, SchedulingPolicy(args.policy)))
    except ConfigError as e:
        logger.error(f"{e}")
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == '__main__':
    sys.exit(main())
