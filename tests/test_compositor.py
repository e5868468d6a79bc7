from pydwmblocks.compositor import Compositor
from pydwmblocks.kinds import Constant
from pydwmblocks.segment import Segment
from pydwmblocks.sinks import StdoutSink

from helpers import RecordingSink


def test_compose_joins_in_order_without_separator():
    segments = [Segment(i, Constant(text)) for i, text in enumerate("abc")]
    for s in segments:
        s.refresh(0.0)
    assert Compositor.compose(segments) == "abc"


def test_equal_text_is_published_once():
    sink = RecordingSink()
    compositor = Compositor(sink)
    assert compositor.publish_if_changed("x")
    assert not compositor.publish_if_changed("x")
    assert not compositor.publish_if_changed("x")
    assert compositor.publish_if_changed("y")
    assert compositor.publish_if_changed("x")
    assert sink.lines == ["x", "y", "x"]


def test_first_empty_line_is_published():
    sink = RecordingSink()
    compositor = Compositor(sink)
    assert compositor.publish_if_changed("")
    assert sink.lines == [""]
    assert compositor.published == ""


def test_stdout_sink_prints_each_line(capsys):
    compositor = Compositor(StdoutSink())
    compositor.publish_if_changed("a")
    compositor.publish_if_changed("a")
    compositor.publish_if_changed("b")
    assert capsys.readouterr().out == "a\nb\n"
