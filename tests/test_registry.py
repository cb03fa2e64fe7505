"""
Unit tests for the stream registry.

Tests:
- Routing of finished spurts to the active stream
- Paragraph flag assigned once at append time
- Stream lifecycle commands and their no-op failure policy
- Active stream reassignment on deletion
"""

import pytest

from spurt_stream.models import SpurtCandidate, ViewMode
from spurt_stream.registry import INITIAL_STREAM_TITLE, StreamRegistry


def candidate(created_at, duration=1.0, text="words"):
    return SpurtCandidate(text=text, created_at=created_at, duration=duration)


def test_registry_starts_with_one_active_stream(registry):
    streams = registry.list_streams()
    assert len(streams) == 1
    assert streams[0].title == INITIAL_STREAM_TITLE
    assert streams[0].is_active
    assert registry.active_stream_id == streams[0].id


def test_first_spurt_in_stream_is_paragraph_start(registry):
    spurt = registry.append_spurt(candidate(0))
    assert spurt.is_paragraph_start is True


def test_paragraph_flag_follows_end_to_start_gap(registry):
    registry.settings.update(paragraph_ms=1000)
    registry.append_spurt(candidate(0, duration=2.0, text="A"))
    b = registry.append_spurt(candidate(5000, duration=1.0, text="B"))
    assert b.is_paragraph_start is True

    registry.settings.update(paragraph_ms=5000)
    c = registry.append_spurt(candidate(9000, duration=1.0, text="C"))
    # gap from B's end (6000) to 9000 is 3000 <= 5000
    assert c.is_paragraph_start is False


def test_threshold_change_is_not_retroactive(registry):
    registry.append_spurt(candidate(0, duration=1.0))
    registry.append_spurt(candidate(1500, duration=1.0))
    before = registry.get_stream(registry.active_stream_id).spurts

    registry.settings.update(paragraph_ms=100_000)
    after = registry.get_stream(registry.active_stream_id).spurts

    assert [s.is_paragraph_start for s in after] == [True, False]
    assert before == after


def test_spurts_get_unique_ids(registry):
    first = registry.append_spurt(candidate(0))
    second = registry.append_spurt(candidate(10))
    assert first.id != second.id


def test_append_routes_only_to_active_stream(registry):
    original = registry.active_stream_id
    second = registry.create_stream()

    registry.append_spurt(candidate(0))

    assert len(registry.get_stream(second).spurts) == 1
    assert registry.get_stream(original).spurts == ()


def test_create_stream_defaults_and_activation(registry):
    stream_id = registry.create_stream()
    stream = registry.get_stream(stream_id)

    assert registry.active_stream_id == stream_id
    assert stream.title == "New Stream"
    assert stream.view_mode is ViewMode.WALL
    assert stream.minimized is False
    assert stream.spurts == ()


def test_rename_allows_empty_title(registry):
    stream_id = registry.active_stream_id
    registry.rename_stream(stream_id, "Morning pages")
    assert registry.get_stream(stream_id).title == "Morning pages"

    registry.rename_stream(stream_id, "")
    stream = registry.get_stream(stream_id)
    assert stream.title == ""
    assert stream.display_title == "Untitled"


def test_clear_only_empties_spurts(registry):
    keep = registry.active_stream_id
    registry.append_spurt(candidate(0))
    target = registry.create_stream()
    registry.append_spurt(candidate(10))
    registry.rename_stream(target, "scratch")
    registry.cycle_view_mode(target)
    registry.toggle_minimize(target)

    registry.clear_stream(target)

    cleared = registry.get_stream(target)
    assert cleared.spurts == ()
    assert cleared.title == "scratch"
    assert cleared.view_mode is ViewMode.ORDERED
    assert cleared.minimized is True
    assert len(registry.get_stream(keep).spurts) == 1


def test_first_spurt_after_clear_starts_paragraph(registry):
    registry.append_spurt(candidate(0))
    registry.clear_stream(registry.active_stream_id)
    spurt = registry.append_spurt(candidate(100))
    assert spurt.is_paragraph_start is True


def test_deleting_last_stream_is_noop(registry):
    only = registry.active_stream_id
    registry.delete_stream(only)

    assert len(registry) == 1
    assert only in registry
    assert registry.active_stream_id == only


def test_deleting_active_stream_activates_first_remaining(registry):
    first = registry.active_stream_id
    middle = registry.create_stream()
    last = registry.create_stream()

    registry.set_active(middle)
    registry.delete_stream(middle)
    assert registry.active_stream_id == first

    registry.delete_stream(first)
    assert registry.active_stream_id == last


def test_deleting_inactive_stream_keeps_active(registry):
    first = registry.active_stream_id
    second = registry.create_stream()

    registry.delete_stream(first)

    assert registry.active_stream_id == second
    assert [s.id for s in registry.list_streams()] == [second]


def test_cycle_view_mode_ring(registry):
    stream_id = registry.active_stream_id
    seen = []
    for _ in range(4):
        registry.cycle_view_mode(stream_id)
        seen.append(registry.get_stream(stream_id).view_mode)
    assert seen == [ViewMode.ORDERED, ViewMode.REVERSED, ViewMode.WALL, ViewMode.ORDERED]


def test_minimized_stream_still_receives_input(registry):
    stream_id = registry.active_stream_id
    registry.cycle_view_mode(stream_id)
    registry.toggle_minimize(stream_id)

    registry.append_spurt(candidate(0))

    stream = registry.get_stream(stream_id)
    assert stream.minimized is True
    assert stream.view_mode is ViewMode.ORDERED
    assert registry.active_stream_id == stream_id
    assert len(stream.spurts) == 1
    assert [s.id for s in registry.dock()] == [stream_id]
    assert registry.visible_streams() == []

    registry.toggle_minimize(stream_id)
    assert registry.dock() == []


def test_set_active_switches_routing(registry):
    first = registry.active_stream_id
    second = registry.create_stream()

    registry.set_active(first)
    registry.append_spurt(candidate(0))

    assert len(registry.get_stream(first).spurts) == 1
    assert registry.get_stream(second).spurts == ()


@pytest.mark.parametrize(
    "command",
    [
        lambda r: r.rename_stream("missing", "x"),
        lambda r: r.clear_stream("missing"),
        lambda r: r.delete_stream("missing"),
        lambda r: r.cycle_view_mode("missing"),
        lambda r: r.toggle_minimize("missing"),
        lambda r: r.set_active("missing"),
    ],
)
def test_unknown_ids_are_ignored(registry, command):
    before = registry.list_streams()
    command(registry)
    assert registry.list_streams() == before
    assert registry.get_stream("missing") is None


def test_get_stream_returns_detached_copy(registry):
    stream_id = registry.active_stream_id
    copy = registry.get_stream(stream_id)
    copy.title = "changed"
    copy.spurts = ()
    registry.append_spurt(candidate(0))

    assert registry.get_stream(stream_id).title == INITIAL_STREAM_TITLE
    assert len(registry.get_stream(stream_id).spurts) == 1


def test_snapshot_is_unaffected_by_later_appends(registry):
    registry.append_spurt(candidate(0))
    snapshot = registry.get_stream(registry.active_stream_id).spurts
    registry.append_spurt(candidate(100))

    assert len(snapshot) == 1
    assert isinstance(snapshot, tuple)


def test_summary_reports_count_and_total_duration(registry):
    registry.append_spurt(candidate(0, duration=1.5))
    registry.append_spurt(candidate(4000, duration=2.0))

    summary = registry.list_streams()[0]
    assert summary.spurt_count == 2
    assert summary.total_duration == pytest.approx(3.5)


def test_custom_initial_title(sequential_ids):
    registry = StreamRegistry(initial_title="Inbox", id_factory=sequential_ids)
    assert registry.list_streams()[0].title == "Inbox"
