import os
import xml.etree.ElementTree as ET

import pytest

from smplmap import (
    DEFAULT_LENGTH_SAMPLES,
    DEFAULT_SAMPLE_RATE,
    FileWriteFailure,
    LoopSpec,
    MappingStats,
    PresetSerializer,
    make_settings,
    render_txprog,
    sanitize_name,
    to_file_uri,
    write_preset,
)

from .fakes import FakeHost, make_item

TX = "{http://www.tx16wx.com/3.0/program}"


def build(host, items, **settings):
    stats = MappingStats()
    serializer = PresetSerializer(host, stats)
    document = serializer.build_document("Synth Pad", items, make_settings(**settings))
    return document, stats


def looped(**kwargs):
    settings = make_settings(loop=True, **kwargs)
    # run_mapping resolves BPM before serializing
    settings.loop = LoopSpec(
        enabled=True,
        start_beats=settings.loop.start_beats,
        length_beats=settings.loop.length_beats,
        xfade_beats=settings.loop.xfade_beats,
        bpm=settings.loop.bpm or 120,
    )
    return settings


def test_waves_sorted_by_pitch():
    host = FakeHost()
    items = [
        make_item("E4", pitch=64),
        make_item("C4", pitch=60),
        make_item("D4", pitch=62),
    ]
    document, stats = build(host, items)
    assert [w.pitch for w in document.waves] == [60, 62, 64]
    assert [w.id for w in document.waves] == [0, 1, 2]
    assert [r.low_key for r in document.regions] == ["C4", "D4", "E4"]
    assert document.pitch_range() == ("C4", "E4")
    assert stats.samples_mapped == 3


def test_probe_failure_uses_defaults():
    host = FakeHost()
    document, stats = build(host, [make_item("C4", pitch=60)])
    wave = document.waves[0]
    assert wave.sample_rate == DEFAULT_SAMPLE_RATE
    assert wave.length_samples == DEFAULT_LENGTH_SAMPLES
    assert len(stats.warnings) == 1


def test_probed_metadata():
    item = make_item("C4", pitch=60)
    host = FakeHost(sources={item.path: (48000, 2.5)})
    document, _ = build(host, [item])
    assert document.waves[0].sample_rate == 48000
    assert document.waves[0].length_samples == 120000


def test_loop_points_in_samples():
    item = make_item("C4", pitch=60)
    host = FakeHost(sources={item.path: (44100, 2.0)})
    document = PresetSerializer(host).build_document(
        "Pad", [item], looped(bpm=120, loop_start=1, loop_length=2)
    )
    wave = document.waves[0]
    assert wave.loop_start == 22050
    assert wave.loop_end == 66150


def test_loop_end_capped_at_wave_length():
    loop = LoopSpec(enabled=True, start_beats=0, length_beats=8, bpm=120)
    assert PresetSerializer.loop_samples(loop, 44100, 88200) == (0, 88200)


def test_loop_start_past_end_resets():
    loop = LoopSpec(enabled=True, start_beats=8, length_beats=4, bpm=120)
    assert PresetSerializer.loop_samples(loop, 44100, 88200) == (0, 88200)


def test_render_txprog_structure():
    host = FakeHost()
    items = [
        make_item("C4", path="/my samples/pad #1 C4.wav", pitch=60),
        make_item("D4", pitch=62),
    ]
    document, _ = build(host, items, attack=5, decay=20, release=300, sustain=-3)
    xml = render_txprog(document)
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8" standalone="no"?>')

    root = ET.fromstring(xml.split("\n", 1)[1])
    assert root.tag == f"{TX}program"
    assert root.get(f"{TX}name") == "Synth Pad"

    waves = root.findall(f"{TX}wave")
    assert [w.get(f"{TX}path") for w in waves] == [
        "file:///my%20samples/pad%20%231%20C4.wav",
        "file:///samples/D4.wav",
    ]
    assert all(w.get(f"{TX}root") == "C-1" for w in waves)
    assert waves[0].find(f"{TX}loop") is None

    bounds = root.find(f"{TX}bounds")
    assert bounds.get(f"{TX}low-key") == "C-1"
    assert bounds.get(f"{TX}high-key") == "G9"

    aeg = root.find(f"{TX}soundshape/{TX}aeg")
    assert aeg.get(f"{TX}attack") == "5.0ms"
    assert aeg.get(f"{TX}decay1") == "20.0ms"
    assert aeg.get(f"{TX}release") == "300.0ms"
    assert aeg.get(f"{TX}sustain") == "-3.0 dB"
    assert len(root.findall(f"{TX}soundshape/{TX}send")) == 3

    regions = root.findall(f"{TX}group/{TX}region")
    assert [r.get(f"{TX}wave") for r in regions] == ["0", "1"]
    assert [r.get(f"{TX}root") for r in regions] == ["C4", "D4"]
    for region in regions:
        region_bounds = region.find(f"{TX}bounds")
        assert region_bounds.get(f"{TX}low-key") == region.get(f"{TX}root")
        assert region_bounds.get(f"{TX}high-key") == region.get(f"{TX}root")


def test_render_loop_element():
    item = make_item("C4", pitch=60)
    host = FakeHost(sources={item.path: (44100, 4.0)})
    document = PresetSerializer(host).build_document(
        "Pad", [item], looped(bpm=120, loop_start=0, loop_length=4)
    )
    root = ET.fromstring(render_txprog(document).split("\n", 1)[1])
    loop = root.find(f"{TX}wave/{TX}loop")
    assert loop.get(f"{TX}start") == "0"
    assert loop.get(f"{TX}end") == "88200"
    assert loop.get(f"{TX}mode") == "Forward"


def test_write_preset(tmp_path):
    host = FakeHost()
    document, _ = build(host, [make_item("C4", pitch=60)])
    document.name = "Pad: v2/test"
    path = write_preset(document, str(tmp_path))
    assert path == str(tmp_path / "Pad_ v2_test.txprog")
    assert (tmp_path / "Pad_ v2_test.txprog").read_text(encoding="utf-8") == render_txprog(
        document
    )
    assert [p.name for p in tmp_path.iterdir()] == ["Pad_ v2_test.txprog"]


def test_write_preset_uses_umask_mode(tmp_path):
    host = FakeHost()
    document, _ = build(host, [make_item("C4", pitch=60)])
    umask = os.umask(0o022)
    try:
        path = write_preset(document, str(tmp_path))
    finally:
        os.umask(umask)
    assert os.stat(path).st_mode & 0o777 == 0o644


def test_write_preset_failure(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    host = FakeHost()
    document, _ = build(host, [make_item("C4", pitch=60)])
    with pytest.raises(FileWriteFailure):
        write_preset(document, str(blocker))


def test_serialize_instantiates_plugin(tmp_path):
    host = FakeHost(project_dir=str(tmp_path))
    serializer = PresetSerializer(host)
    path, document = serializer.serialize(
        "track", [make_item("C4", pitch=60)], make_settings()
    )
    assert len(host.plugins) == 1
    assert host.plugins[0].name == "VSTi: TX16Wx (CWITEC)"
    assert path.endswith("Synth Pad.txprog")
    assert serializer.stats.presets_written == 1


def test_sanitize_and_uri():
    assert sanitize_name("My Synth-01!") == "My Synth-01_"
    assert to_file_uri("/a b/c#d.wav") == "file:///a%20b/c%23d.wav"
