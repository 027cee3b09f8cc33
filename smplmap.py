#!/usr/bin/env python3
"""Sample mapper: build playable sampler instruments from recorded notes.

Maps a set of audio samples (one per note, e.g. a hardware synth pass) to
one of two sampler back-ends:

  - RS5k: one ReaSamplOmatic5000 instance per sample, plus a MIDI item
    that triggers every mapped note.
  - TX16Wx: one shared instance loading a generated .txprog program with
    one region per sample.

Usage: smplmap.py <input-files...> [--sampler tx16wx] [options]

Copyright (c) 2025, smplmap contributors
"""

import argparse
import glob
import math
import os
import re
import shutil
import subprocess
import sys
import tempfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace

import pretty_midi

__version__ = "1.0.0"


# =============================================================================
# Constants
# =============================================================================

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
SEMITONES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

MIDI_MIN = 0
MIDI_MAX = 127

# Use +12/-12 if octaves come out shifted (C3 vs C4 middle-C conventions)
OCTAVE_SHIFT = 0

DEFAULT_BPM = 120.0
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_LENGTH_SAMPLES = 792000

SAMPLER_RS5K = "rs5k"
SAMPLER_TX16WX = "tx16wx"
SAMPLERS = (SAMPLER_RS5K, SAMPLER_TX16WX)

RS5K_PLUGIN_NAME = "ReaSamplomatic5000"
TX16WX_PLUGIN_NAME = "VSTi: TX16Wx (CWITEC)"
TRIGGER_TAKE_NAME = "sliced loop"
TRIGGER_VELOCITY = 100

# Formatted value units
UNIT_DB = "db"
UNIT_MS = "ms"
UNIT_SECONDS = "s"
UNIT_UNKNOWN = "?"

# Calibration search
CALIBRATION_SAMPLES = 200
REFINE_SAMPLES = 50
# RS5k time parameters reach past the UI ceiling when driven above 1.0
TIME_DOMAIN_MAX = 10.0
LEVEL_DOMAIN_MAX = 1.0


# =============================================================================
# RS5k Parameter Layout
# =============================================================================
#
# ReaSamplOmatic5000 exposes some controls only through fixed parameter
# indices. This table is the contract for the layout shipped with REAPER
# 5.95+. A layout change in a future REAPER version only touches this table.
#
# =============================================================================

RS5K_LAYOUT_VERSION = "5.95"
RS5K_LAYOUT = {
    "min_velocity_gain": 2,
    "note_range_start": 3,
    "note_range_end": 4,
    "pitch_for_start": 5,
    "pitch_for_end": 6,
    "max_voices": 8,
    "obey_note_offs": 11,
    "start_in_source": 13,
    "end_in_source": 14,
}

RS5K_LAYOUT_DEFAULTS = {
    "min_velocity_gain": 0.0,
    "pitch_for_start": 0.5,
    "pitch_for_end": 0.5,
    "max_voices": 0.0,
}


# =============================================================================
# Parameter Name Rules
# =============================================================================
#
# Controls that move between plugin versions are looked up by name instead
# of index. Matching is substring-based and therefore fragile: a plugin
# update that renames "Attack" breaks the lookup and the control is skipped.
#
# Lookup order for a rule:
#   1. first parameter whose lower-cased name equals one of `exact`
#   2. first parameter containing `contains[0]`, then `contains[1]`, ...
#      skipping names that contain any of `excludes`
#
# =============================================================================


@dataclass(frozen=True)
class ParamNameRule:
    """Name-based lookup strategy for one plugin control."""

    contains: tuple
    exact: tuple = ()
    excludes: tuple = ()

    def find(self, names):
        """Return index of the best matching name, or None."""
        lowered = [(name or "").lower() for name in names]
        for index, name in enumerate(lowered):
            if name in self.exact:
                return index
        for needle in self.contains:
            for index, name in enumerate(lowered):
                if needle not in name:
                    continue
                if any(word in name for word in self.excludes):
                    continue
                return index
        return None


PARAM_NAME_RULES = {
    "attack": ParamNameRule(("attack",)),
    "decay": ParamNameRule(("decay",)),
    "sustain": ParamNameRule(("sustain",)),
    "release": ParamNameRule(("release",)),
    "obey_note_offs": ParamNameRule(("obey",)),
    "loop": ParamNameRule(
        ("loop",),
        exact=("loop",),
        excludes=("start", "offset", "end", "xfade", "cross", "cache"),
    ),
    "loop_start": ParamNameRule(("loop start",), exact=("loop start offset",)),
    "loop_xfade": ParamNameRule(("xfade", "crossfade")),
}


def find_param(names, key):
    """Resolve a control by name rule.

    Raises:
        ParameterNotFound: If no parameter name matches
    """
    index = PARAM_NAME_RULES[key].find(names)
    if index is None:
        raise ParameterNotFound(key)
    return index


# =============================================================================
# Errors
# =============================================================================


class SmplmapError(Exception):
    """Base class for errors that abort a mapping run."""


class MissingHostCapability(SmplmapError):
    """The host cannot instantiate the sampler plugin for this back-end."""


class InvalidUserInput(SmplmapError):
    """A configuration field is non-numeric or out of range."""


class FileWriteFailure(SmplmapError):
    """The preset file could not be written."""


class NoAudioItems(SmplmapError):
    """The selection holds no audio items to map."""


class ParameterNotFound(SmplmapError):
    """An optional named control does not exist on this plugin version.

    Recovered by the assembler: the adjustment is skipped.
    """


# =============================================================================
# Mapping Statistics
# =============================================================================


class MappingStats:
    """Collects statistics and warnings during a mapping run."""

    def __init__(self):
        self.reset()

    def reset(self):
        """Reset all statistics."""
        # Sample counts
        self.samples_mapped = 0
        self.samples_skipped = 0
        self.pitch_from_name = 0
        self.pitch_fallback = 0

        # Calibration counts
        self.calibrations_converged = 0
        self.calibrations_unconverged = 0
        self.params_missing = 0

        # Loop counts
        self.loops_enabled = 0
        self.loop_escalations = 0

        self.presets_written = 0

        # Warnings: list of (name, message)
        self.warnings = []

    def add_warning(self, name, message):
        """Add a warning with associated sample or parameter name."""
        self.warnings.append((name, message))

    def print_summary(self, settings=None):
        """Print mapping summary."""
        print("\n" + "=" * 50)
        print("MAPPING SUMMARY")
        print("=" * 50)

        if settings:
            print("\n--- Settings ---")
            print(f"Sampler: {settings.sampler}")
            print(f"Base pitch: {settings.base_pitch}")
            adsr = settings.adsr
            print(
                f"ADSR: A={adsr.attack_ms:g}ms D={adsr.decay_ms:g}ms "
                f"S={adsr.sustain_db:g}dB R={adsr.release_ms:g}ms"
            )
            loop = settings.loop
            if loop.enabled:
                print(
                    f"Loop: start={loop.start_beats:g} len={loop.length_beats:g} "
                    f"xfade={loop.xfade_beats:g} beats @ {loop.bpm:g} BPM"
                )
            else:
                print("Loop: Off")

        print("\n--- Statistics ---")
        print(f"Samples mapped: {self.samples_mapped}", end="")
        if self.samples_skipped > 0:
            print(f" (skipped: {self.samples_skipped})")
        else:
            print()
        print(f"  Pitch from name: {self.pitch_from_name}")
        print(f"  Pitch fallback: {self.pitch_fallback}")

        calibrations = self.calibrations_converged + self.calibrations_unconverged
        if calibrations > 0 or self.params_missing > 0:
            print("\nCalibration:")
            print(f"  Converged: {self.calibrations_converged}")
            print(f"  No convergence: {self.calibrations_unconverged}")
            print(f"  Missing parameters: {self.params_missing}")

        if self.loops_enabled > 0:
            print(f"\nLoops enabled: {self.loops_enabled}", end="")
            if self.loop_escalations > 0:
                print(f" (forced via config: {self.loop_escalations})")
            else:
                print()

        if self.presets_written > 0:
            print(f"\nPresets written: {self.presets_written}")

        if self.warnings:
            print(f"\n--- Warnings ({len(self.warnings)}) ---")
            for name, message in self.warnings:
                print(f"  - {name}: {message}")
        else:
            print("\n--- No warnings ---")

        print("=" * 50)


# =============================================================================
# Note Names
# =============================================================================

NOTE_PATTERN = re.compile(r"([A-Ga-g])([#bB]?)(-?\d)")


def find_last_match(pattern, text):
    """Return the last match of pattern in text, or None.

    Filenames and take names often carry unrelated prefixes ("Take 2",
    "Synth1"), so the note is expected at the end.
    """
    last = None
    for match in pattern.finditer(text):
        last = match
    return last


def clamp_pitch(pitch):
    return max(MIDI_MIN, min(MIDI_MAX, pitch))


def note_name_to_midi(text, octave_shift=OCTAVE_SHIFT):
    """Parse a note name (C3, F#2, Bb4, ...) out of free text.

    Args:
        text: Take name, file name or path
        octave_shift: Semitones added to the result (e.g. +12/-12)

    Returns:
        int: MIDI note number clamped to 0..127, or None if no note found
    """
    if not text:
        return None
    match = find_last_match(NOTE_PATTERN, str(text))
    if match is None:
        return None

    letter, accidental, octave = match.groups()
    semitone = SEMITONES[letter.upper()]
    if accidental == "#":
        semitone += 1
    elif accidental in ("b", "B"):
        semitone -= 1

    midi = (int(octave) + 1) * 12 + semitone + octave_shift
    return clamp_pitch(midi)


def midi_to_note_name(midi_note):
    """Convert MIDI note number to TX16Wx note name (e.g., 60 -> 'C4')."""
    octave = (midi_note // 12) - 1
    note = NOTE_NAMES[midi_note % 12]
    return f"{note}{octave}"


# =============================================================================
# Unit Conversion
# =============================================================================

NUMBER_PATTERN = re.compile(r"[-+]?(?:\d+(?:[.,]\d*)?|[.,]\d+)")


def beats_to_ms(beats, bpm):
    """Convert quarter-note beats to milliseconds at the given tempo."""
    if bpm <= 0:
        return 0.0
    return beats * (60000.0 / bpm)


def parse_formatted_value(text):
    """Extract numeric value and unit from a plugin's formatted value.

    Args:
        text: Display string, e.g. "12.0 dB", "250 ms", "1,5 sec"

    Returns:
        tuple: (value, unit) with unit one of "db", "ms", "s", "?";
            (None, None) if the text holds no number
    """
    if not text:
        return None, None
    low = text.lower()
    match = NUMBER_PATTERN.search(low)
    if not match:
        return None, None
    try:
        value = float(match.group(0).replace(",", "."))
    except ValueError:
        return None, None

    if "db" in low:
        return value, UNIT_DB
    if "ms" in low:
        return value, UNIT_MS
    if " sec" in low or " s" in low:
        return value, UNIT_SECONDS
    return value, UNIT_UNKNOWN


def to_unit_kind(value, unit, unit_kind):
    """Express a parsed reading in the target unit kind.

    Returns None when the reading belongs to another kind (e.g. a dB
    reading while calibrating a time). Unknown units are accepted as-is.
    """
    if unit == UNIT_UNKNOWN:
        return value
    if unit_kind == UNIT_MS:
        if unit == UNIT_MS:
            return value
        if unit == UNIT_SECONDS:
            return value * 1000.0
        return None
    if unit == unit_kind:
        return value
    return None


# =============================================================================
# Parameter Calibration
# =============================================================================
#
# Plugins like RS5k document no formula from normalized value to ms/dB. The
# only observable is the formatted display string, so the inverse mapping is
# found by a coarse-to-fine linear scan: set a normalized value, read the
# display back, keep the closest.
#
# The mapping is not guaranteed monotonic or continuous over the extended
# domain, so bisection is not used. Every probe writes the live parameter
# before reading it; probes must stay strictly sequential.
#
# =============================================================================


class ParameterProbe:
    """Write/read access to a single live plugin parameter."""

    def set(self, normalized):
        raise NotImplementedError

    def read_formatted(self):
        raise NotImplementedError


class HostParameterProbe(ParameterProbe):
    """Probe bound to one parameter of a plugin instance on a host."""

    def __init__(self, host, track, fx, param):
        self.host = host
        self.track = track
        self.fx = fx
        self.param = param

    def set(self, normalized):
        self.host.set_param(self.track, self.fx, self.param, normalized)

    def read_formatted(self):
        return self.host.formatted_param(self.track, self.fx, self.param)


@dataclass
class CalibrationResult:
    normalized: float
    error: float | None

    @property
    def converged(self):
        return self.error is not None


def _probe_error(probe, normalized, target, unit_kind):
    probe.set(normalized)
    value, unit = parse_formatted_value(probe.read_formatted())
    if value is None:
        return None
    value = to_unit_kind(value, unit, unit_kind)
    if value is None:
        return None
    return abs(value - target)


def calibrate_parameter(
    probe,
    target,
    unit_kind,
    domain_max=LEVEL_DOMAIN_MAX,
    samples=CALIBRATION_SAMPLES,
    refine_samples=REFINE_SAMPLES,
):
    """Find the normalized value whose display best matches target.

    Args:
        probe: ParameterProbe for the parameter (mutated in place)
        target: Target value in unit_kind units (ms for times, dB for levels)
        unit_kind: UNIT_MS or UNIT_DB
        domain_max: Upper bound of the normalized search domain
        samples: Number of coarse steps across [0, domain_max]
        refine_samples: Number of fine steps around the coarse best

    Returns:
        CalibrationResult: Chosen value (already written) and residual error
    """
    best_n = 0.0
    best_err = None

    # First pass: coarse scan of the whole domain
    for i in range(samples + 1):
        n = i / samples * domain_max
        err = _probe_error(probe, n, target, unit_kind)
        if err is not None and (best_err is None or err < best_err):
            best_err, best_n = err, n

    # Second pass: one coarse step wide, centered on the best value
    coarse_step = domain_max / samples
    center = best_n
    for i in range(refine_samples + 1):
        n = center + (i - refine_samples / 2) * coarse_step / refine_samples
        if n < 0 or n > domain_max:
            continue
        err = _probe_error(probe, n, target, unit_kind)
        if err is not None and (best_err is None or err < best_err):
            best_err, best_n = err, n

    probe.set(best_n)
    return CalibrationResult(normalized=best_n, error=best_err)


# =============================================================================
# Data Model
# =============================================================================


@dataclass(frozen=True)
class SampleItem:
    """One selected recording: where it lives in its source and on the timeline."""

    path: str
    offset: float
    length: float
    position: float = 0.0
    name: str = ""
    source_length: float = 0.0
    track: object = None
    is_midi: bool = False
    pitch: int | None = None

    @property
    def end_position(self):
        return self.position + self.length


@dataclass(frozen=True)
class AdsrSpec:
    attack_ms: float = 0.0
    decay_ms: float = 0.0
    release_ms: float = 150.0
    sustain_db: float = 0.0
    obey_note_offs: bool = True


@dataclass(frozen=True)
class LoopSpec:
    enabled: bool = False
    start_beats: float = 0.0
    length_beats: float = 4.0
    xfade_beats: float = 0.25
    bpm: float = 0.0

    @property
    def start_ms(self):
        return beats_to_ms(self.start_beats, self.bpm)

    @property
    def length_ms(self):
        return beats_to_ms(self.length_beats, self.bpm)

    @property
    def xfade_ms(self):
        return beats_to_ms(self.xfade_beats, self.bpm)


@dataclass(frozen=True)
class SourceWindow:
    """Normalized [start, end] into a sample's source media."""

    start: float
    end: float


@dataclass
class InstrumentMapping:
    item: SampleItem
    pitch: int
    fx: object
    envelope: dict = field(default_factory=dict)
    loop: dict = field(default_factory=dict)
    loop_active: bool = False
    window: SourceWindow | None = None


@dataclass(frozen=True)
class TriggerNote:
    start: float
    end: float
    pitch: int
    velocity: int = TRIGGER_VELOCITY


@dataclass
class Wave:
    id: int
    path: str
    pitch: int
    note_name: str
    sample_rate: int
    length_samples: int
    loop_start: int | None = None
    loop_end: int | None = None


@dataclass
class Region:
    wave_id: int
    root: str
    low_key: str
    high_key: str


@dataclass
class PresetDocument:
    name: str
    waves: list
    adsr: AdsrSpec
    regions: list

    def pitch_range(self):
        """Return (lowest, highest) note names, or None if empty."""
        if not self.waves:
            return None
        return self.waves[0].note_name, self.waves[-1].note_name


@dataclass
class MappingSettings:
    sampler: str = SAMPLER_TX16WX
    base_pitch: int = 60
    adsr: AdsrSpec = field(default_factory=AdsrSpec)
    loop: LoopSpec = field(default_factory=LoopSpec)
    octave_shift: int = OCTAVE_SHIFT
    do_not_increment: bool = False


@dataclass
class MappingResult:
    sampler: str
    settings: MappingSettings | None = None
    mappings: list = field(default_factory=list)
    document: PresetDocument | None = None
    preset_path: str | None = None
    trigger_notes: list = field(default_factory=list)
    pitch_range: tuple | None = None


# =============================================================================
# Settings Validation
# =============================================================================


def parse_number(value, label):
    """Parse a user-entered number, accepting ',' as decimal separator.

    Raises:
        InvalidUserInput: If the value is not numeric
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    else:
        text = str(value if value is not None else "").strip().replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            raise InvalidUserInput(f"{label}: '{value}' is not a number") from None
    if math.isnan(number) or math.isinf(number):
        raise InvalidUserInput(f"{label}: '{value}' is not a finite number")
    return number


def make_settings(
    sampler=SAMPLER_TX16WX,
    base_pitch=60,
    attack=0,
    decay=0,
    release=150,
    sustain=0,
    obey_note_offs=True,
    loop=False,
    bpm=0,
    loop_start=0,
    loop_length=4,
    loop_xfade=0.25,
    octave_shift=OCTAVE_SHIFT,
    do_not_increment=False,
):
    """Validate raw option values and build MappingSettings.

    Every surface (CLI, dialogs, GUI form) goes through here, so invalid
    input aborts before anything on the host is touched. Negative times
    and beats are clamped to 0; a BPM <= 0 means "use project tempo".

    Raises:
        InvalidUserInput: On non-numeric fields or a base pitch outside 0..127
    """
    if sampler not in SAMPLERS:
        raise InvalidUserInput(f"Sampler: unknown back-end '{sampler}'")

    pitch = parse_number(base_pitch, "Base pitch")
    if pitch < MIDI_MIN or pitch > MIDI_MAX:
        raise InvalidUserInput(f"Base pitch: {base_pitch} is outside 0..127")

    shift = parse_number(octave_shift, "Octave shift")

    adsr = AdsrSpec(
        attack_ms=max(0.0, parse_number(attack, "Attack (ms)")),
        decay_ms=max(0.0, parse_number(decay, "Decay (ms)")),
        release_ms=max(0.0, parse_number(release, "Release (ms)")),
        sustain_db=parse_number(sustain, "Sustain (dB)"),
        obey_note_offs=bool(obey_note_offs),
    )
    loop_spec = LoopSpec(
        enabled=bool(loop),
        start_beats=max(0.0, parse_number(loop_start, "Loop start (beats)")),
        length_beats=max(0.0, parse_number(loop_length, "Loop length (beats)")),
        xfade_beats=max(0.0, parse_number(loop_xfade, "Loop xfade (beats)")),
        bpm=max(0.0, parse_number(bpm, "BPM")),
    )
    return MappingSettings(
        sampler=sampler,
        base_pitch=int(pitch),
        adsr=adsr,
        loop=loop_spec,
        octave_shift=int(shift),
        do_not_increment=bool(do_not_increment),
    )


# =============================================================================
# Host Interface
# =============================================================================


class SamplerHost:
    """Capabilities the mapping pipeline consumes from a DAW session.

    Passed explicitly to every component. Subclasses implement the parts
    their environment supports; plugin methods are only required when
    `hosts_plugins` is True.
    """

    hosts_plugins = False

    # Session
    def target_track(self):
        raise NotImplementedError

    def track_name(self, track):
        return ""

    def selected_items(self):
        raise NotImplementedError

    def tempo_at(self, position):
        return 0.0

    def project_path(self):
        return os.getcwd()

    # Plugins
    def add_plugin(self, track, name):
        return None

    def param_count(self, track, fx):
        return 0

    def param_name(self, track, fx, param):
        raise NotImplementedError

    def set_param(self, track, fx, param, value):
        raise NotImplementedError

    def get_param(self, track, fx, param):
        raise NotImplementedError

    def formatted_param(self, track, fx, param):
        raise NotImplementedError

    def set_named_config(self, track, fx, key, value):
        raise NotImplementedError

    # Media
    def probe_source(self, path):
        return None

    def insert_midi_item(self, track, start, end, notes, name):
        raise NotImplementedError

    # User interaction
    def get_user_inputs(self, title, labels, defaults):
        return list(defaults)

    def ask(self, message, title):
        return "yes"

    def show_message(self, message, title=""):
        print(message)


def param_names(host, track, fx):
    return [
        host.param_name(track, fx, p) for p in range(host.param_count(track, fx))
    ]


# =============================================================================
# Utility Functions
# =============================================================================


def check_ffprobe():
    """Check if ffprobe is available."""
    try:
        result = subprocess.run(["ffprobe", "-version"], capture_output=True, text=True)
        return result.returncode == 0
    except FileNotFoundError:
        return False


def get_sample_rate(filepath):
    """Get sample rate of audio file using ffprobe."""
    try:
        result = subprocess.run(
            [
                "ffprobe",
                "-v",
                "error",
                "-select_streams",
                "a:0",
                "-show_entries",
                "stream=sample_rate",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                filepath,
            ],
            capture_output=True,
            text=True,
        )
        if result.returncode == 0:
            return int(result.stdout.strip())
    except (FileNotFoundError, ValueError):
        pass
    return None


def get_sample_count(filepath):
    """Get total sample count of audio file using ffprobe."""
    try:
        result = subprocess.run(
            [
                "ffprobe",
                "-v",
                "error",
                "-select_streams",
                "a:0",
                "-show_entries",
                "stream=nb_samples",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                filepath,
            ],
            capture_output=True,
            text=True,
        )
        if result.returncode == 0 and result.stdout.strip():
            return int(result.stdout.strip())
    except (FileNotFoundError, ValueError):
        pass
    return None


def sanitize_name(name):
    """Make a track name safe for use as a file name."""
    return re.sub(r"[^A-Za-z0-9\s\-]", "_", name)


def to_file_uri(path):
    """Convert a file path to the URI form TX16Wx expects."""
    return "file://" + path.replace(" ", "%20").replace("#", "%23")


# =============================================================================
# Offline Host
# =============================================================================


AUDIO_EXTENSIONS = (".wav", ".aif", ".aiff", ".flac", ".ogg", ".mp3")


class FolderHost(SamplerHost):
    """Offline host over a list of audio files.

    Each file becomes one item laid end to end on a virtual timeline.
    Metadata comes from ffprobe; trigger notes are written as a MIDI file
    into the output directory. No plugins can be instantiated, so only the
    TX16Wx back-end (program file) is available.
    """

    hosts_plugins = False

    def __init__(
        self,
        paths,
        output_dir,
        track_name="Sampler",
        tempo=DEFAULT_BPM,
        interactive=False,
    ):
        self.paths = list(paths)
        self.output_dir = output_dir
        self.name = track_name
        self.tempo = tempo
        self.interactive = interactive
        self.midi_path = None
        self._probe_cache = {}

    def target_track(self):
        return self.name

    def track_name(self, track):
        return self.name

    def tempo_at(self, position):
        return self.tempo

    def project_path(self):
        return self.output_dir

    def probe_source(self, path):
        if path not in self._probe_cache:
            rate = get_sample_rate(path)
            count = get_sample_count(path)
            if rate and count:
                self._probe_cache[path] = (rate, count / rate)
            else:
                self._probe_cache[path] = None
        return self._probe_cache[path]

    def selected_items(self):
        items = []
        position = 0.0
        for path in self.paths:
            probed = self.probe_source(path)
            length = probed[1] if probed else 0.0
            if not probed:
                print(f"  Warning: Could not probe {os.path.basename(path)}")
            items.append(
                SampleItem(
                    path=os.path.abspath(path),
                    offset=0.0,
                    length=length,
                    position=position,
                    name=os.path.splitext(os.path.basename(path))[0],
                    source_length=length,
                    track=self.name,
                )
            )
            position += length
        return items

    def insert_midi_item(self, track, start, end, notes, name):
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)
        instrument = pretty_midi.Instrument(program=0, name=name)
        for note in notes:
            instrument.notes.append(
                pretty_midi.Note(
                    velocity=note.velocity,
                    pitch=note.pitch,
                    start=note.start - start,
                    end=note.end - start,
                )
            )
        midi.instruments.append(instrument)

        os.makedirs(self.output_dir, exist_ok=True)
        self.midi_path = os.path.join(
            self.output_dir, f"{sanitize_name(self.name) or 'Sampler'}-trigger.mid"
        )
        midi.write(self.midi_path)
        print(f"  Trigger MIDI: {self.midi_path}")
        return self.midi_path

    def get_user_inputs(self, title, labels, defaults):
        if not self.interactive:
            return list(defaults)
        print()
        print(f"--- {title} ---")
        values = []
        for label, default in zip(labels, defaults):
            try:
                value = input(f"{label} [{default}]: ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\nAborted.")
                return None
            values.append(value if value else str(default))
        return values

    def ask(self, message, title):
        if not self.interactive:
            return "yes"
        print()
        print(f"--- {title} ---")
        print(message)
        while True:
            try:
                answer = input("[y]es / [n]o / [c]ancel: ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("\nAborted.")
                return "cancel"
            if answer in ("y", "yes", ""):
                return "yes"
            if answer in ("n", "no"):
                return "no"
            if answer in ("c", "cancel"):
                return "cancel"
            print("  Please answer y, n or c.")


# =============================================================================
# Pitch Resolution
# =============================================================================


def resolve_pitch(item, index, base_pitch, octave_shift=OCTAVE_SHIFT, stats=None):
    """Pick the pitch for one sample.

    Take name first, then file path; otherwise base_pitch + index
    (index = position in the selection).
    """
    pitch = note_name_to_midi(item.name, octave_shift)
    if pitch is None:
        pitch = note_name_to_midi(item.path, octave_shift)
    if pitch is not None:
        if stats:
            stats.pitch_from_name += 1
        return pitch
    if stats:
        stats.pitch_fallback += 1
    return clamp_pitch(base_pitch + index)


def collect_samples(host, settings, stats=None):
    """Scan the host selection and assign a pitch to every audio item.

    Returns:
        list: (SampleItem with pitch, selection index) tuples

    Raises:
        NoAudioItems: If no audio item is selected
    """
    samples = []
    for index, item in enumerate(host.selected_items()):
        if item.is_midi or not item.path:
            if stats:
                stats.samples_skipped += 1
            print(f"  [SKIP] {item.name or 'item'} (not audio)")
            continue
        pitch = resolve_pitch(
            item, index, settings.base_pitch, settings.octave_shift, stats
        )
        samples.append((replace(item, pitch=pitch), index))
        print(f"  [OK] {item.name or os.path.basename(item.path)} -> {pitch}")

    if not samples:
        raise NoAudioItems("No audio items found to map.")
    return samples


def resolve_bpm(bpm, host, position):
    """Resolve loop tempo: explicit BPM, else project tempo, else 120."""
    if bpm > 0:
        return bpm
    tempo = host.tempo_at(position) or 0.0
    if tempo > 0:
        return tempo
    return DEFAULT_BPM


# =============================================================================
# Source Window
# =============================================================================


def compute_source_window(offset, item_length, source_length, loop):
    """Compute the normalized source window for one sample.

    The start always stays at the item's original offset so the attack is
    played untouched. Only the end is shortened, and only when a finite loop
    length is requested.

    Args:
        offset: Item start offset in its source (seconds)
        item_length: Item length (seconds)
        source_length: Total source length (seconds)
        loop: LoopSpec with resolved BPM

    Returns:
        SourceWindow, or None if the source length is unknown
    """
    if not source_length or source_length <= 0:
        return None

    region_start = offset
    region_end = offset + item_length
    if loop.enabled and loop.length_ms > 0:
        region_end = min(
            region_end, offset + (loop.start_ms + loop.length_ms) / 1000.0
        )

    start = max(0.0, min(1.0, region_start / source_length))
    end = max(0.0, min(1.0, region_end / source_length))
    return SourceWindow(start=start, end=end)


# =============================================================================
# Trigger Sequence
# =============================================================================


def build_trigger_notes(pitched, base_pitch, do_not_increment=False):
    """Build one trigger note per sample at its original timeline position.

    Notes are numbered sequentially from base_pitch by selection index,
    matching the order the samples were processed.

    Args:
        pitched: (SampleItem, selection index) tuples in processing order
        base_pitch: First pitch of the sequence
        do_not_increment: Give every note the base pitch

    Returns:
        list: TriggerNote per sample
    """
    notes = []
    for item, index in pitched:
        if do_not_increment:
            pitch = clamp_pitch(base_pitch)
        else:
            pitch = clamp_pitch(base_pitch + index)
        notes.append(
            TriggerNote(start=item.position, end=item.end_position, pitch=pitch)
        )
    return notes


def insert_trigger_item(host, track, pitched, settings, stats=None):
    """Insert the MIDI item that triggers every mapped sample.

    Skipped when the samples span more than one track.
    """
    samples = [item for item, _ in pitched]
    if any(item.track != samples[0].track for item in samples):
        print("  Warning: Samples span several tracks, no trigger item created")
        if stats:
            stats.add_warning("trigger", "samples on several tracks")
        return []

    notes = build_trigger_notes(pitched, settings.base_pitch, settings.do_not_increment)
    start = samples[0].position
    end = max(item.end_position for item in samples)
    if end <= start:
        end = start + 0.1
    host.insert_midi_item(track, start, end, notes, TRIGGER_TAKE_NAME)
    return notes


# =============================================================================
# RS5k Instrument Assembler
# =============================================================================


class InstrumentAssembler:
    """Creates one RS5k instance per sample on the target track.

    Per sample: create instance -> bind source -> bind pitch -> calibrate
    envelope -> resolve loop -> compute source window. Missing optional
    controls are skipped; the instrument stays playable without them.
    """

    def __init__(
        self,
        host,
        stats=None,
        samples=CALIBRATION_SAMPLES,
        refine_samples=REFINE_SAMPLES,
    ):
        self.host = host
        self.stats = stats if stats is not None else MappingStats()
        self.samples = samples
        self.refine_samples = refine_samples

    def assemble(self, track, samples, settings):
        """Map every sample; returns the InstrumentMapping list."""
        print(f"\nCreating {len(samples)} RS5k instance(s)...")
        mappings = []
        for item in samples:
            mappings.append(self.map_sample(track, item, settings))
        return mappings

    def map_sample(self, track, item, settings):
        host = self.host
        label = item.name or os.path.basename(item.path)

        fx = host.add_plugin(track, RS5K_PLUGIN_NAME)
        if fx is None:
            raise MissingHostCapability(f"{RS5K_PLUGIN_NAME} could not be created")

        host.set_named_config(track, fx, "FILE0", item.path)
        host.set_named_config(track, fx, "DONE", "")

        self._bind_pitch(track, fx, item.pitch)
        mapping = InstrumentMapping(item=item, pitch=item.pitch, fx=fx)

        names = param_names(host, track, fx)
        adsr = settings.adsr
        for key, target, unit_kind, domain in (
            ("attack", adsr.attack_ms, UNIT_MS, TIME_DOMAIN_MAX),
            ("decay", adsr.decay_ms, UNIT_MS, TIME_DOMAIN_MAX),
            ("release", adsr.release_ms, UNIT_MS, TIME_DOMAIN_MAX),
            ("sustain", adsr.sustain_db, UNIT_DB, LEVEL_DOMAIN_MAX),
        ):
            result = self._calibrate(
                track, fx, names, key, target, unit_kind, domain, label
            )
            if result is not None:
                mapping.envelope[key] = result

        obey = PARAM_NAME_RULES["obey_note_offs"].find(names)
        if obey is None:
            obey = RS5K_LAYOUT["obey_note_offs"]
        host.set_param(track, fx, obey, 1.0 if adsr.obey_note_offs else 0.0)

        loop = settings.loop
        mapping.loop_active = self._resolve_loop(track, fx, names, loop.enabled, label)
        if loop.enabled:
            if loop.start_ms > 0:
                result = self._calibrate(
                    track, fx, names, "loop_start", loop.start_ms,
                    UNIT_MS, TIME_DOMAIN_MAX, label,
                )
                if result is not None:
                    mapping.loop["start"] = result
            if loop.xfade_ms > 0:
                result = self._calibrate(
                    track, fx, names, "loop_xfade", loop.xfade_ms,
                    UNIT_MS, TIME_DOMAIN_MAX, label,
                )
                if result is not None:
                    mapping.loop["xfade"] = result

        window = compute_source_window(
            item.offset, item.length, item.source_length, loop
        )
        if window is not None:
            host.set_param(track, fx, RS5K_LAYOUT["start_in_source"], window.start)
            host.set_param(track, fx, RS5K_LAYOUT["end_in_source"], window.end)
        else:
            self.stats.add_warning(label, "source length unknown, window not set")
        mapping.window = window

        self.stats.samples_mapped += 1
        print(f"  Mapped: {label} -> {midi_to_note_name(item.pitch)} ({item.pitch})")
        return mapping

    def _bind_pitch(self, track, fx, pitch):
        for key, value in RS5K_LAYOUT_DEFAULTS.items():
            self.host.set_param(track, fx, RS5K_LAYOUT[key], value)
        normalized = pitch / 127.0
        self.host.set_param(track, fx, RS5K_LAYOUT["note_range_start"], normalized)
        self.host.set_param(track, fx, RS5K_LAYOUT["note_range_end"], normalized)

    def _calibrate(self, track, fx, names, key, target, unit_kind, domain, label):
        try:
            param = find_param(names, key)
        except ParameterNotFound:
            self.stats.params_missing += 1
            return None

        probe = HostParameterProbe(self.host, track, fx, param)
        result = calibrate_parameter(
            probe,
            target,
            unit_kind,
            domain,
            samples=self.samples,
            refine_samples=self.refine_samples,
        )
        if result.converged:
            self.stats.calibrations_converged += 1
        else:
            self.stats.calibrations_unconverged += 1
            self.stats.add_warning(label, f"{key}: no {unit_kind} reading, set to 0")
        return result

    def _resolve_loop(self, track, fx, names, enabled, label):
        """Set the loop toggle; force it via config if the write did not stick."""
        host = self.host
        toggle = PARAM_NAME_RULES["loop"].find(names)

        if not enabled:
            if toggle is not None:
                host.set_param(track, fx, toggle, 0.0)
            return False

        self.stats.loops_enabled += 1
        if toggle is not None:
            host.set_param(track, fx, toggle, 1.0)
            if (host.get_param(track, fx, toggle) or 0.0) >= 0.5:
                return True

        host.set_named_config(track, fx, "LOOP", "1")
        host.set_named_config(track, fx, "DONE", "")
        self.stats.loop_escalations += 1
        if toggle is None:
            return True
        active = (host.get_param(track, fx, toggle) or 0.0) >= 0.5
        if not active:
            print(f"    Warning: Loop did not activate for {label}")
            self.stats.add_warning(label, "loop toggle did not activate")
        return active


# =============================================================================
# TX16Wx Preset Serializer
# =============================================================================

TX_NS = "http://www.tx16wx.com/3.0/program"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

ET.register_namespace("tx", TX_NS)
ET.register_namespace("xsi", XSI_NS)


def _tx(name):
    return f"{{{TX_NS}}}{name}"


def _tx_attrs(**attrs):
    return {_tx(key.replace("_", "-")): str(value) for key, value in attrs.items()}


class PresetSerializer:
    """Builds a single-instance TX16Wx program with one region per sample."""

    def __init__(self, host, stats=None):
        self.host = host
        self.stats = stats if stats is not None else MappingStats()

    def build_document(self, name, samples, settings):
        """Build the PresetDocument for the given pitched samples.

        Args:
            name: Program name (usually the track name)
            samples: SampleItems with assigned pitch
            settings: MappingSettings with resolved loop BPM

        Returns:
            PresetDocument
        """
        # Stable sort; equal pitches keep selection order but that is not a
        # format requirement
        ordered = sorted(samples, key=lambda item: item.pitch)
        loop = settings.loop

        waves = []
        regions = []
        for wave_id, item in enumerate(ordered):
            sample_rate = DEFAULT_SAMPLE_RATE
            length_samples = DEFAULT_LENGTH_SAMPLES
            probed = self.host.probe_source(item.path)
            if probed:
                sample_rate = int(probed[0])
                length_samples = int(math.floor(probed[1] * probed[0]))
            else:
                self.stats.add_warning(
                    os.path.basename(item.path), "probe failed, using defaults"
                )

            wave = Wave(
                id=wave_id,
                path=item.path,
                pitch=item.pitch,
                note_name=midi_to_note_name(item.pitch),
                sample_rate=sample_rate,
                length_samples=length_samples,
            )
            if loop.enabled:
                wave.loop_start, wave.loop_end = self.loop_samples(
                    loop, sample_rate, length_samples
                )
            waves.append(wave)
            regions.append(
                Region(
                    wave_id=wave_id,
                    root=wave.note_name,
                    low_key=wave.note_name,
                    high_key=wave.note_name,
                )
            )
            self.stats.samples_mapped += 1
        if loop.enabled:
            self.stats.loops_enabled += len(waves)

        return PresetDocument(
            name=name, waves=waves, adsr=settings.adsr, regions=regions
        )

    @staticmethod
    def loop_samples(loop, sample_rate, length_samples):
        """Convert the loop window to absolute sample offsets for one wave."""
        start_sec = loop.start_ms / 1000.0
        length_sec = loop.length_ms / 1000.0
        loop_start = int(math.floor(start_sec * sample_rate))
        loop_end = int(math.floor((start_sec + length_sec) * sample_rate))
        if loop_end > length_samples:
            loop_end = length_samples
        if loop_start > length_samples:
            loop_start = 0
        return loop_start, loop_end

    def serialize(self, track, samples, settings, directory=None):
        """Instantiate TX16Wx (live hosts only) and write the program.

        Returns:
            tuple: (preset_path, PresetDocument)
        """
        host = self.host
        if host.hosts_plugins:
            fx = host.add_plugin(track, TX16WX_PLUGIN_NAME)
            if fx is None:
                raise MissingHostCapability(
                    "TX16Wx not found! Please install TX16Wx VST3 or choose RS5k."
                )

        name = host.track_name(track) or "Sampler"
        document = self.build_document(name, samples, settings)
        path = write_preset(document, directory or host.project_path())
        self.stats.presets_written += 1
        return path, document


def render_txprog(document):
    """Render a PresetDocument as TX16Wx program XML.

    Returns:
        str: XML document text
    """
    root = ET.Element(
        _tx("program"),
        {
            f"{{{XSI_NS}}}schemaLocation": "http://www.tx16wx.com/3.0/ program",
            **_tx_attrs(created_by=30700, quality="Default", name=document.name),
        },
    )

    for wave in document.waves:
        wave_el = ET.SubElement(
            root,
            _tx("wave"),
            _tx_attrs(root="C-1", id=wave.id, path=to_file_uri(wave.path)),
        )
        if wave.loop_start is not None and wave.loop_end is not None:
            ET.SubElement(
                wave_el,
                _tx("loop"),
                _tx_attrs(end=wave.loop_end, start=wave.loop_start, mode="Forward", name=1),
            )

    ET.SubElement(
        root,
        _tx("bounds"),
        _tx_attrs(high_vel=127, high_key="G9", low_vel=0, low_key="C-1"),
    )

    adsr = document.adsr
    shape = ET.SubElement(
        root,
        _tx("soundshape"),
        _tx_attrs(
            unison_cyclic_spread="false",
            unison_spread="0Ct",
            unison_depth="100%",
            unison_pan="100%",
            glide_mode="Held",
            pwm="0%",
            volume="0 dB",
            id="default-soundshape",
            unison_start="0ms",
            name=document.name,
            unison=1,
            pan="0%",
        ),
    )
    ET.SubElement(
        shape,
        _tx("aeg"),
        _tx_attrs(
            level2="0 dB",
            level1="0 dB",
            release_shape="-50%",
            release=f"{adsr.release_ms:.1f}ms",
            decay2_shape="-50%",
            sustain=f"{adsr.sustain_db:.1f} dB",
            decay2="500ms",
            decay1_shape="-50%",
            decay1=f"{adsr.decay_ms:.1f}ms",
            attack_shape="-50%",
            attack=f"{adsr.attack_ms:.1f}ms",
        ),
    )
    for _ in range(3):
        ET.SubElement(shape, _tx("send"), _tx_attrs(level="0 dB"))
    ET.SubElement(shape, _tx("modulation"))

    group = ET.SubElement(
        root,
        _tx("group"),
        _tx_attrs(
            soundshape="default-soundshape",
            color="antiquewhite",
            scale=100,
            output="--",
            noteprio="Last",
            quality="Default",
            playback="Resample",
            polymode="Poly",
            playmode="Normal",
            fine=0,
            coarse=0,
            choke_group=0,
            pan="0%",
            volume="0 dB",
            name=document.name,
        ),
    )
    for region in document.regions:
        region_el = ET.SubElement(
            group,
            _tx("region"),
            _tx_attrs(
                fine=0,
                wave=region.wave_id,
                release=0,
                root=region.root,
                loop=0,
                pan="0%",
                attenuation="0 dB",
                mode="DFD",
            ),
        )
        ET.SubElement(
            region_el,
            _tx("bounds"),
            _tx_attrs(
                high_vel=127,
                high_key=region.high_key,
                low_vel=0,
                low_key=region.low_key,
            ),
        )

    ET.indent(root, space="   ")
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n' + body + "\n"


def write_preset(document, directory):
    """Write the document to <directory>/<sanitized name>.txprog.

    Written to a temporary file first, then moved into place, so a failed
    write leaves no partial preset behind.

    Raises:
        FileWriteFailure: If the preset cannot be written
    """
    preset_name = sanitize_name(document.name) or "Sampler"
    preset_path = os.path.join(directory, f"{preset_name}.txprog")
    xml = render_txprog(document)

    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            suffix=".txprog",
            dir=directory,
            delete=False,
            newline="\n",
        ) as tmp:
            tmp_path = tmp.name
            tmp.write(xml)
        # Temp files are created 0600; give the preset the usual umask mode
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp_path, 0o666 & ~umask)
        shutil.move(tmp_path, preset_path)
    except OSError as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise FileWriteFailure(f"Could not create preset file: {e}") from e

    print(f"\nGenerating: {os.path.basename(preset_path)}")
    return preset_path


# =============================================================================
# Driver
# =============================================================================

ADSR_LABELS = ["Attack (ms)", "Decay (ms)", "Release (ms)", "Sustain (dB)"]
ADSR_DEFAULTS = ["0", "0", "150", "0"]
LOOP_LABELS = [
    "BPM (0=use project)",
    "Loop start (beats)",
    "Loop length (beats)",
    "Loop xfade (beats)",
]
LOOP_DEFAULTS = ["0", "0", "4", "0.25"]


def collect_settings(host, octave_shift=OCTAVE_SHIFT):
    """Ask the user for sampler, base pitch, loop choice and parameters.

    Returns:
        MappingSettings, or None if the user cancelled

    Raises:
        InvalidUserInput: On non-numeric or out-of-range entries
    """
    answer = host.ask(
        "Choose sampler type:\n\n"
        "YES = RS5k (multi-instance, one per sample)\n"
        "NO = TX16Wx (single-instance, multiple regions)",
        "Sampler Selection",
    )
    if answer == "cancel":
        return None
    sampler = SAMPLER_TX16WX if answer == "no" else SAMPLER_RS5K

    values = host.get_user_inputs("Set base pitch", ["Base pitch"], ["60"])
    if values is None:
        return None
    base_pitch = values[0]

    answer = host.ask("Enable loop?", "Loop")
    if answer == "cancel":
        return None
    loop = answer == "yes"

    if loop:
        values = host.get_user_inputs(
            "Sampler parameters (ADSR + Loop)",
            ADSR_LABELS + LOOP_LABELS,
            ADSR_DEFAULTS + LOOP_DEFAULTS,
        )
    else:
        values = host.get_user_inputs(
            "Sampler parameters (ADSR only)", ADSR_LABELS, ADSR_DEFAULTS
        )
    if values is None:
        return None

    attack, decay, release, sustain = values[:4]
    bpm, loop_start, loop_length, loop_xfade = (
        values[4:8] if loop else LOOP_DEFAULTS
    )
    return make_settings(
        sampler=sampler,
        base_pitch=base_pitch,
        attack=attack,
        decay=decay,
        release=release,
        sustain=sustain,
        loop=loop,
        bpm=bpm,
        loop_start=loop_start,
        loop_length=loop_length,
        loop_xfade=loop_xfade,
        octave_shift=octave_shift,
    )


def run_mapping(host, settings, stats=None, output_dir=None):
    """Map the host's selected items to the chosen sampler back-end.

    Args:
        host: SamplerHost implementation
        settings: Validated MappingSettings (loop BPM may be 0)
        stats: MappingStats to fill (a fresh one if None)
        output_dir: Preset directory (default: host project path)

    Returns:
        MappingResult
    """
    stats = stats if stats is not None else MappingStats()

    track = host.target_track()
    if track is None:
        raise MissingHostCapability("No target track selected")

    print("Collecting samples...")
    pitched = collect_samples(host, settings, stats)
    samples = [item for item, _ in pitched]

    bpm = resolve_bpm(settings.loop.bpm, host, samples[0].position)
    settings = replace(settings, loop=replace(settings.loop, bpm=bpm))
    if settings.loop.enabled:
        loop = settings.loop
        print(
            f"Loop @ {bpm:g} BPM: start={loop.start_ms:.1f}ms "
            f"length={loop.length_ms:.1f}ms xfade={loop.xfade_ms:.1f}ms"
        )

    result = MappingResult(sampler=settings.sampler, settings=settings)
    if settings.sampler == SAMPLER_RS5K:
        if not host.hosts_plugins:
            raise MissingHostCapability(
                "RS5k needs a live plugin host; use the TX16Wx back-end offline"
            )
        result.mappings = InstrumentAssembler(host, stats).assemble(
            track, samples, settings
        )
        pitches = sorted(item.pitch for item in samples)
        result.pitch_range = (
            midi_to_note_name(pitches[0]),
            midi_to_note_name(pitches[-1]),
        )
    else:
        path, document = PresetSerializer(host, stats).serialize(
            track, samples, settings, output_dir
        )
        result.document = document
        result.preset_path = path
        result.pitch_range = document.pitch_range()

    result.trigger_notes = insert_trigger_item(host, track, pitched, settings, stats)
    return result


def format_result_message(result):
    """Build the success message shown after a run."""
    low, high = result.pitch_range or ("-", "-")
    if result.sampler == SAMPLER_TX16WX:
        return (
            "TX16Wx preset created successfully!\n\n"
            f"Name: {result.document.name}\n"
            f"Path: {result.preset_path}\n\n"
            f"Mapped {len(result.document.waves)} samples ({low} to {high})\n\n"
            "TO LOAD:\n"
            "1. Open TX16Wx interface\n"
            "2. Click dropdown menu (top-left)\n"
            "3. Select 'Load Program'\n"
            "4. Navigate to and open the .txprog file"
        )
    return f"Created {len(result.mappings)} RS5k instance(s) ({low} to {high})"


# =============================================================================
# Main Entry Point
# =============================================================================


def collect_input_files(input_paths, output_dir=None):
    """Expand glob patterns and keep existing audio files, sorted."""
    input_files = []
    for path in input_paths:
        if output_dir and path == output_dir:
            continue
        expanded = glob.glob(path)
        if expanded:
            input_files.extend(expanded)
        elif os.path.isfile(path):
            input_files.append(path)
        elif any(c in path for c in "*?[]"):
            print(f"Warning: No files matched pattern: {path}")
        else:
            print(f"Warning: File not found: {path}")

    audio = [p for p in input_files if p.lower().endswith(AUDIO_EXTENSIONS)]
    for path in input_files:
        if path not in audio:
            print(f"Warning: Not an audio file: {path}")
    return sorted(audio)


def main():
    parser = argparse.ArgumentParser(
        description="Map recorded note samples to an RS5k or TX16Wx sampler instrument.",
        epilog="Pitches are read from note names (C3, F#2, Bb4) in file names; "
        "unnamed samples get base pitch + index.",
    )
    parser.add_argument(
        "input_paths",
        metavar="INPUT_FILE",
        nargs="+",
        help="Audio file(s) - supports glob patterns and multiple files",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        default=".",
        metavar="DIR",
        help="Directory for the preset and trigger MIDI file (default: current)",
    )
    parser.add_argument(
        "--name",
        "-n",
        default="Sampler",
        help="Instrument/track name used for the preset (default: Sampler)",
    )
    parser.add_argument(
        "--sampler",
        "-s",
        choices=SAMPLERS,
        default=SAMPLER_TX16WX,
        help="Sampler back-end (default: tx16wx)",
    )
    parser.add_argument("--base-pitch", default="60", help="Fallback base pitch (default: 60)")
    parser.add_argument("--attack", default="0", metavar="MS", help="Attack in ms (default: 0)")
    parser.add_argument("--decay", default="0", metavar="MS", help="Decay in ms (default: 0)")
    parser.add_argument("--release", default="150", metavar="MS", help="Release in ms (default: 150)")
    parser.add_argument("--sustain", default="0", metavar="DB", help="Sustain in dB (default: 0)")
    parser.add_argument(
        "--no-obey-note-offs",
        action="store_true",
        help="Let samples play through note-offs (RS5k)",
    )
    parser.add_argument("--loop", "-L", action="store_true", help="Enable looping")
    parser.add_argument(
        "--bpm",
        default="0",
        help="Tempo for loop beats (default: 0 = project tempo, 120 offline)",
    )
    parser.add_argument("--loop-start", default="0", metavar="BEATS", help="Loop start in beats (default: 0)")
    parser.add_argument("--loop-length", default="4", metavar="BEATS", help="Loop length in beats (default: 4)")
    parser.add_argument("--loop-xfade", default="0.25", metavar="BEATS", help="Loop crossfade in beats (default: 0.25)")
    parser.add_argument(
        "--octave-shift",
        default=str(OCTAVE_SHIFT),
        metavar="SEMITONES",
        help="Shift parsed note names, e.g. 12 or -12 (default: 0)",
    )
    parser.add_argument(
        "--same-pitch",
        action="store_true",
        help="Give every trigger note the base pitch",
    )
    parser.add_argument(
        "--interactive",
        "-i",
        action="store_true",
        help="Ask for sampler, pitch and envelope settings step by step",
    )

    args = parser.parse_args()

    if not check_ffprobe():
        print("Warning: ffprobe is not installed or not found in PATH.")
        print("         Sample rates and lengths fall back to defaults.")

    input_files = collect_input_files(args.input_paths, args.output_dir)
    if not input_files:
        print("Error: No input files found")
        sys.exit(1)

    if os.path.isfile(args.output_dir):
        print(f"Error: OUTPUT_DIR is a file, not a directory: {args.output_dir}")
        sys.exit(1)

    host = FolderHost(
        input_files,
        args.output_dir,
        track_name=args.name,
        interactive=args.interactive,
    )

    try:
        if args.interactive:
            settings = collect_settings(host, octave_shift=args.octave_shift)
            if settings is None:
                print("Cancelled.")
                sys.exit(1)
        else:
            settings = make_settings(
                sampler=args.sampler,
                base_pitch=args.base_pitch,
                attack=args.attack,
                decay=args.decay,
                release=args.release,
                sustain=args.sustain,
                obey_note_offs=not args.no_obey_note_offs,
                loop=args.loop,
                bpm=args.bpm,
                loop_start=args.loop_start,
                loop_length=args.loop_length,
                loop_xfade=args.loop_xfade,
                octave_shift=args.octave_shift,
            )
        settings.do_not_increment = args.same_pitch

        stats = MappingStats()
        print(f"Found {len(input_files)} file(s) to map\n")
        result = run_mapping(host, settings, stats, args.output_dir)
    except SmplmapError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print("\n=== Complete ===")
    host.show_message(format_result_message(result), "Sampler Setup")
    stats.print_summary(result.settings)


if __name__ == "__main__":
    main()
