from spurt_stream.models import Spurt, Stream, StreamSummary, ViewMode
from spurt_stream.reporting import StreamPrinter, format_seconds, render_listing, render_wall
from spurt_stream.views import project_ordered, project_wall


def spurt(text, created_at, duration, paragraph):
    return Spurt(
        id=text,
        text=text,
        created_at=created_at,
        duration=duration,
        is_paragraph_start=paragraph,
    )


SPURTS = (
    spurt("one", 0, 2.0, True),
    spurt("two", 2500, 1.0, False),
    spurt("three", 10_000, 1.0, True),
)


def test_format_seconds():
    assert format_seconds(2) == "2.0s"
    assert format_seconds(0.06) == "0.1s"


def test_render_wall_separates_paragraphs():
    assert render_wall(project_wall(SPURTS)) == "one two\n\nthree"


def test_render_list_draws_pause_bar_and_divider():
    printer = StreamPrinter(paragraph_threshold_ms=1000, width=40)
    lines = printer.render(project_ordered(SPURTS, 1000)).splitlines()

    assert lines[0].startswith("one")
    assert lines[0].endswith("2.0s")
    assert lines[1].strip() == "-" * 20
    assert lines[2].startswith("two")
    assert lines[3].startswith("=" * 40)
    assert lines[3].endswith("6.5s")
    assert lines[4].startswith("three")
    assert len(lines) == 5


def test_render_stream_header_and_empty_stream():
    printer = StreamPrinter(paragraph_threshold_ms=1000)
    empty = printer.render_stream(Stream(id="s", title=""))
    assert empty.splitlines()[0] == "Untitled [Wall View] 0 spurts, 0.0s"
    assert empty.endswith("(no spurts recorded)")

    full = printer.render_stream(
        Stream(id="s", title="Draft", spurts=SPURTS, view_mode=ViewMode.REVERSED)
    )
    lines = full.splitlines()
    assert lines[0] == "Draft [Reversed] 3 spurts, 4.0s"
    assert lines[2].startswith("three")


def test_render_listing_marks_active_and_docked():
    summaries = [
        StreamSummary("a", "Alpha", ViewMode.WALL, False, 2, 3.0, True),
        StreamSummary("b", "", ViewMode.ORDERED, True, 0, 0.0, False),
    ]
    lines = render_listing(summaries).splitlines()

    assert lines[0].startswith("* Alpha")
    assert lines[1].startswith("  Untitled")
    assert lines[1].endswith("(docked)")
