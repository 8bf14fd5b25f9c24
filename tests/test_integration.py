"""End-to-end: document -> builder -> schedule -> virtual clock."""
import json

from fakes import RecordingAudio, RecordingDisplay, StubResolver, group_row, interval_row

from practempo import (
    FeatureRegistry,
    Schedule,
    ScheduleBuilder,
    Settings,
    Status,
    VirtualTickSource,
    parse_document,
)


def run_document(text, settings, resolver=None):
    result = ScheduleBuilder(settings, resolver or StubResolver()).build(parse_document(text))
    display = RecordingDisplay()
    audio = RecordingAudio()
    ticks = VirtualTickSource()
    schedule = Schedule(result.intervals, display, audio, ticks, settings=settings)
    return result, schedule, display, audio, ticks


def test_warmup_scenario():
    """5:00 then 3:00 with a 10s warmup plays through to DONE."""
    items = [interval_row("5:00", "Scales"), interval_row("3:00", "Chords")]
    text = json.dumps({"name": "Demo", "items": items})
    result, schedule, display, audio, ticks = run_document(text, Settings(warmup_period=10))

    first, second = result.intervals
    assert (first.duration, first.intro_duration) == (300, 10)
    assert (second.duration, second.intro_duration) == (180, 0)

    schedule.prepare()
    schedule.start()
    ticks.advance(9)
    assert schedule.is_intro_active()
    ticks.advance(1)
    assert not schedule.is_intro_active()

    ticks.advance(290)
    assert schedule.current_index == 1
    assert schedule.elapsed == 0
    assert audio.events.count("interval_end") == 1

    ticks.advance(180)
    assert schedule.is_finished()
    assert ticks.active() == []
    ticks.advance(60)
    assert schedule.total_elapsed == 480
    assert display.of("complete") == [("complete",)]

def test_warmup_scenario_at_fine_tick_cadence():
    """With 100ms ticks the intro and interval boundaries still land exactly."""
    items = [interval_row("5:00", "Scales"), interval_row("3:00", "Chords")]
    text = json.dumps({"items": items})
    settings = Settings(warmup_period=10, tick_interval_ms=100)
    _, schedule, _, audio, ticks = run_document(text, settings)

    schedule.prepare()
    schedule.start()
    ticks.advance(9.9)
    assert schedule.is_intro_active()
    ticks.advance(0.1)
    assert not schedule.is_intro_active()
    assert schedule.elapsed == 10
    assert audio.events == ["intro_end"]

    ticks.advance(290)
    assert schedule.current_index == 1
    assert schedule.elapsed == 0
    assert schedule.total_elapsed == 300

    ticks.advance(180)
    assert schedule.is_finished()
    assert schedule.total_elapsed == 480



def test_format_error_scenario_shows_error_placeholder():
    """A document whose only row fails shows the error placeholder."""
    text = json.dumps({"items": [interval_row("abc", "Broken")]})
    result, schedule, display, _, _ = run_document(text, Settings())
    assert result.intervals == ()
    assert [d.kind for d in result.diagnostics] == ["FormatError"]
    assert result.placeholder() == "error"

    schedule.prepare()
    assert schedule.status is Status.STOPPED
    assert display.events == []


def test_multi_hour_schedule_runs_deterministically():
    """A three-hour schedule runs on the virtual clock in one call."""
    items = []
    for block in range(3):
        items.append(group_row(f"Block {block}"))
        items.extend(interval_row("20:00", f"b{block}-t{i}") for i in range(3))
    text = json.dumps({"items": items})
    settings = Settings(warmup_period=30, warmup_applies_to="each")
    result, schedule, _, audio, ticks = run_document(text, settings)

    assert len(result.intervals) == 9
    assert result.total_duration == 3 * 60 * 60

    schedule.prepare()
    schedule.start()
    ticks.advance(3 * 60 * 60)
    assert schedule.is_finished()
    assert audio.events.count("intro_end") == 9
    assert audio.events.count("interval_end") == 9


def test_pause_skip_resume_session():
    """Pause, skip and resume across a resolved feature."""
    registry = FeatureRegistry()
    registry.register("Guitar", "Scale", lambda args, height: f"scale:{'-'.join(args)}")
    text = json.dumps(
        {
            "items": [
                interval_row("1:00", "Scales", "Scale", "C", "major"),
                interval_row("1:00", "Chords", "Chord"),
                interval_row("1:00", "Free"),
            ]
        }
    )
    result, schedule, display, _, ticks = run_document(text, Settings(), resolver=registry)
    assert [d.kind for d in result.diagnostics] == ["ResolutionError"]

    schedule.prepare()
    assert display.last("feature") == ("feature", "scale:C-major")
    schedule.start()
    ticks.advance(30)
    schedule.pause()
    ticks.advance(600)
    assert schedule.elapsed == 30

    schedule.skip()
    assert schedule.get_current_interval().task == "Chords"
    assert display.events[-5:-3] == [("interval", "Chords", "#aad9cd", False), ("clear",)]
    schedule.start()
    ticks.advance(60)
    assert schedule.get_current_interval().task == "Free"
    schedule.skip()
    assert schedule.is_finished()
    assert schedule.total_elapsed == 90
