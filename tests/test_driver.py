import pytest

from smplmap import (
    SAMPLER_RS5K,
    SAMPLER_TX16WX,
    InvalidUserInput,
    MappingStats,
    MissingHostCapability,
    NoAudioItems,
    build_trigger_notes,
    collect_settings,
    format_result_message,
    make_settings,
    resolve_bpm,
    run_mapping,
)

from .fakes import FakeHost, make_item


def three_items(**kwargs):
    return [
        make_item("Pad C3", position=0.0, **kwargs),
        make_item("Pad D3", position=2.0, **kwargs),
        make_item("Pad", path="/samples/pad-take.wav", position=4.0, **kwargs),
    ]


# --- Settings ---


def test_make_settings_defaults():
    settings = make_settings()
    assert settings.sampler == SAMPLER_TX16WX
    assert settings.base_pitch == 60
    assert settings.adsr.release_ms == 150.0
    assert not settings.loop.enabled


def test_make_settings_accepts_strings_and_commas():
    settings = make_settings(base_pitch="48", attack="12,5", loop=True, loop_length="2")
    assert settings.base_pitch == 48
    assert settings.adsr.attack_ms == 12.5
    assert settings.loop.length_beats == 2.0


def test_make_settings_clamps_negative_times():
    settings = make_settings(attack=-10, release="-1", loop_start=-2, bpm=-5)
    assert settings.adsr.attack_ms == 0.0
    assert settings.adsr.release_ms == 0.0
    assert settings.loop.start_beats == 0.0
    assert settings.loop.bpm == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"attack": "abc"},
        {"base_pitch": "sixty"},
        {"base_pitch": 200},
        {"base_pitch": -1},
        {"sampler": "kontakt"},
        {"bpm": "nan"},
    ],
)
def test_make_settings_rejects_invalid(kwargs):
    with pytest.raises(InvalidUserInput):
        make_settings(**kwargs)


def test_resolve_bpm():
    host = FakeHost(tempo=90.0)
    assert resolve_bpm(140.0, host, 0.0) == 140.0
    assert resolve_bpm(0.0, host, 0.0) == 90.0
    assert resolve_bpm(0.0, FakeHost(tempo=0.0), 0.0) == 120.0


# --- Dialog flow ---


def test_collect_settings_rs5k_without_loop():
    host = FakeHost(
        answers=["yes", "no"],
        inputs=[["48"], ["1", "2", "300", "-3"]],
    )
    settings = collect_settings(host)
    assert settings.sampler == SAMPLER_RS5K
    assert settings.base_pitch == 48
    assert settings.adsr.release_ms == 300.0
    assert settings.adsr.sustain_db == -3.0
    assert not settings.loop.enabled


def test_collect_settings_tx16wx_with_loop():
    host = FakeHost(
        answers=["no", "yes"],
        inputs=[["60"], ["0", "0", "150", "0", "100", "1", "2", "0.5"]],
    )
    settings = collect_settings(host)
    assert settings.sampler == SAMPLER_TX16WX
    assert settings.loop.enabled
    assert settings.loop.bpm == 100.0
    assert settings.loop.xfade_beats == 0.5


@pytest.mark.parametrize(
    "answers, inputs",
    [
        (["cancel"], []),
        (["yes"], [None]),
        (["yes", "cancel"], [["60"]]),
        (["yes", "no"], [["60"], None]),
    ],
)
def test_collect_settings_cancel(answers, inputs):
    host = FakeHost(answers=answers, inputs=inputs)
    assert collect_settings(host) is None


def test_collect_settings_invalid_input():
    host = FakeHost(answers=["no", "no"], inputs=[["60"], ["fast", "0", "150", "0"]])
    with pytest.raises(InvalidUserInput):
        collect_settings(host)


# --- Trigger notes ---


def test_trigger_notes_are_sequential_from_base_pitch():
    pitched = [
        (make_item("a", pitch=48, position=0.0), 0),
        (make_item("b", pitch=50, position=2.0), 1),
    ]
    notes = build_trigger_notes(pitched, 60)
    assert [(n.start, n.end, n.pitch, n.velocity) for n in notes] == [
        (0.0, 2.0, 60, 100),
        (2.0, 4.0, 61, 100),
    ]


def test_trigger_notes_follow_selection_index():
    # Index 1 was a skipped MIDI item
    pitched = [(make_item("a", pitch=48), 0), (make_item("b", pitch=50), 2)]
    assert [n.pitch for n in build_trigger_notes(pitched, 60)] == [60, 62]


def test_trigger_notes_clamped():
    pitched = [(make_item("a"), 0), (make_item("b"), 1)]
    assert [n.pitch for n in build_trigger_notes(pitched, 127)] == [127, 127]


def test_trigger_notes_same_pitch():
    pitched = [(make_item("a", pitch=48), 0), (make_item("b", pitch=50), 1)]
    notes = build_trigger_notes(pitched, 60, do_not_increment=True)
    assert [n.pitch for n in notes] == [60, 60]


# --- Full runs ---


def test_tx16wx_run(tmp_path):
    host = FakeHost(items=three_items(), project_dir=str(tmp_path))
    stats = MappingStats()
    result = run_mapping(host, make_settings(base_pitch=60), stats)

    assert sorted(w.pitch for w in result.document.waves) == [48, 50, 62]
    assert result.preset_path == str(tmp_path / "Synth Pad.txprog")
    assert (tmp_path / "Synth Pad.txprog").exists()
    assert result.pitch_range == ("C3", "D4")
    assert stats.pitch_from_name == 2
    assert stats.pitch_fallback == 1

    track, start, end, notes, name = host.midi_items[0]
    assert name == "sliced loop"
    assert (start, end) == (0.0, 6.0)
    assert [n.pitch for n in notes] == [60, 61, 62]
    assert "TX16Wx preset created successfully!" in format_result_message(result)


def test_rs5k_run():
    host = FakeHost(items=three_items())
    result = run_mapping(host, make_settings(sampler=SAMPLER_RS5K, release=100))
    assert len(host.plugins) == 3
    assert [m.pitch for m in result.mappings] == [48, 50, 62]
    assert result.document is None
    assert len(host.midi_items) == 1
    assert [n.pitch for n in result.trigger_notes] == [60, 61, 62]
    assert format_result_message(result).startswith("Created 3 RS5k instance(s)")


def test_loop_tempo_resolved_from_host(tmp_path):
    host = FakeHost(items=three_items(), tempo=120.0, project_dir=str(tmp_path))
    settings = make_settings(loop=True, bpm=0, loop_start=1, loop_length=2)
    result = run_mapping(host, settings)
    assert result.settings.loop.bpm == 120.0
    assert result.settings.loop.start_ms == pytest.approx(500.0)
    assert result.settings.loop.length_ms == pytest.approx(1000.0)
    # Caller's settings are left untouched
    assert settings.loop.bpm == 0.0


def test_midi_items_are_skipped(tmp_path):
    items = [make_item("C4"), make_item("clip", is_midi=True), make_item("take")]
    host = FakeHost(items=items, project_dir=str(tmp_path))
    stats = MappingStats()
    result = run_mapping(host, make_settings(base_pitch=60), stats)
    # Fallback index counts the skipped MIDI item
    assert sorted(w.pitch for w in result.document.waves) == [60, 62]
    assert stats.samples_skipped == 1


def test_no_audio_items():
    host = FakeHost(items=[make_item("clip", is_midi=True)])
    with pytest.raises(NoAudioItems):
        run_mapping(host, make_settings())


def test_items_on_several_tracks_get_no_trigger(tmp_path):
    items = [make_item("C4", track="a"), make_item("D4", track="b")]
    host = FakeHost(items=items, project_dir=str(tmp_path))
    stats = MappingStats()
    result = run_mapping(host, make_settings(), stats)
    assert host.midi_items == []
    assert result.trigger_notes == []
    assert stats.warnings


def test_rs5k_requires_plugin_host():
    host = FakeHost(items=three_items(), hosts_plugins=False)
    with pytest.raises(MissingHostCapability):
        run_mapping(host, make_settings(sampler=SAMPLER_RS5K))
    assert host.plugins == []
