import textwrap

import pytest

from pydwmblocks.color import SegmentColoring
from pydwmblocks.config import default_config_path, load_config
from pydwmblocks.errors import ConfigError
from pydwmblocks.kinds import CommandOutput, Constant

from helpers import SIGNAL_RANGE


@pytest.fixture
def write_config(tmp_path):
    def write(text: str):
        path = tmp_path / "pydwmblocks.yaml"
        path.write_text(textwrap.dedent(text))
        return path
    return write


def status_text(config) -> str:
    return ''.join(segment.render() for segment in config.segments)


def test_sample_config(write_config):
    path = write_config("""
        right_separator: " | "
        segments:
          - constant: Segment1
          - constant: Segment2
          - program: echo
            args: [hello, world]
          - constant: ""
          - constant: "%%%"
            hide_if_empty: true
          - constant: ""
            icon: "$"
            left_separator: ">>>"
            right_separator: "<<<"
    """)
    config = load_config(path, SIGNAL_RANGE)
    assert status_text(config) == "Segment1 | Segment2 | hello world |  | %%% | >>>$<<<"
    assert [s.id for s in config.segments] == list(range(6))


def test_segment_kinds(write_config, tmp_path):
    (tmp_path / "scripts").mkdir()
    path = write_config("""
        script_dir: scripts
        segments:
          - constant: hi
          - program: /usr/bin/date
            args: ["+%s", 1]
            trim: false
          - script: battery.sh
            args: [BAT0]
    """)
    config = load_config(path, SIGNAL_RANGE)
    constant, program, script = (s.kind for s in config.segments)
    assert constant == Constant("hi")
    assert program == CommandOutput("/usr/bin/date", ("+%s", "1"), trim=False)
    assert script == CommandOutput("/bin/sh", (str(tmp_path / "scripts" / "battery.sh"), "BAT0"))
    assert config.script_dir == tmp_path / "scripts"


def test_script_runs_through_shell(write_config, tmp_path):
    (tmp_path / "hello.sh").write_text('echo "hello $1"\n')
    path = write_config("""
        segments:
          - script: hello.sh
            args: [there]
    """)
    config = load_config(path, SIGNAL_RANGE)
    assert status_text(config) == "hello there"


def test_home_is_expanded(write_config, tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("TOOL", "tool")
    path = write_config("""
        segments:
          - program: ~/bin/$TOOL
    """)
    config = load_config(path, SIGNAL_RANGE)
    assert config.segments[0].kind.program == str(tmp_path / "bin" / "tool")


def test_intervals_and_signals(write_config):
    path = write_config("""
        update_all_signal: 10
        segments:
          - constant: a
            update_interval: 5
            signals: [1, 2]
          - constant: b
    """)
    a, b = load_config(path, SIGNAL_RANGE).segments
    assert a.update_interval == 5.0
    assert a.signals == (35, 36, 44)
    assert b.update_interval is None
    assert b.signals == (44,)


def test_colors(write_config):
    path = write_config("""
        left_separator: ">"
        right_separator: "<"
        colors:
          green: 2
          blue: 3
        text_color: green
        right_separator_color: blue
        segments:
          - constant: test
            icon: "$"
            icon_color: green
            left_separator_color: green
          - constant: segment
            left_separator_color: blue
    """)
    config = load_config(path, SIGNAL_RANGE)
    assert config.defaults.coloring == SegmentColoring(text=2, right_separator=3)
    assert status_text(config) == (
        "\x02>\x01\x02$\x01\x02test\x01\x03<\x01"
        "\x03>\x01\x02segment\x01\x03<\x01"
    )


@pytest.mark.parametrize('text, message', [
    ("segments: [{constant: a, colour: red}]", "unknown key"),
    ("segments: [{constant: a, text_color: red}]", "undefined color"),
    ("colors: {red: 300}\nsegments: []", "1..255"),
    ("segments: [{constant: a, signals: [31]}]", "SIGRTMAX"),
    ("update_all_signal: 40\nsegments: [{constant: a}]", "SIGRTMAX"),
    ("segments: [{constant: a, update_interval: 0}]", "positive"),
    ("segments: [{constant: a, update_interval: fast}]", "wrong type"),
    ("segments: [{args: [x]}]", "exactly one of"),
    ("segments: [{constant: a, program: b}]", "exactly one of"),
    ("segments: [{constant: a, args: [b]}]", "no 'args'"),
    ("script_dir: does/not/exist\nsegments: []", "does not exist"),
    ("left_separator: x", "'segments' is required"),
    ("segments: {constant: a}", "wrong type"),
    ("segments: [constant: a\n", ""),
    ("- just a list", "wrong type"),
])
def test_invalid_config(write_config, text, message):
    path = write_config(text)
    with pytest.raises(ConfigError, match=message) as excinfo:
        load_config(path, SIGNAL_RANGE)
    assert str(path) in str(excinfo.value)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="error reading config file"):
        load_config(tmp_path / "missing.yaml", SIGNAL_RANGE)


def test_default_config_path(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_path() == tmp_path / "pydwmblocks" / "pydwmblocks.yaml"
