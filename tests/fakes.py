"""In-memory sampler host used by the tests."""

import math

from smplmap import RS5K_LAYOUT, SampleItem, SamplerHost

BASE_PARAM_NAMES = [f"Param {i}" for i in range(15)]
BASE_PARAM_NAMES[RS5K_LAYOUT["note_range_start"]] = "Note range start"
BASE_PARAM_NAMES[RS5K_LAYOUT["note_range_end"]] = "Note range end"
BASE_PARAM_NAMES[RS5K_LAYOUT["obey_note_offs"]] = "Obey note-offs"

NAMED_PARAMS = [
    "Attack",
    "Decay",
    "Sustain",
    "Release",
    "Loop",
    "Loop start offset",
    "Loop xfade",
]


def render_ms(value):
    ms = value * 1000.0
    if ms >= 1000.0:
        return f"{ms / 1000.0:.3f} sec"
    return f"{ms:.1f} ms"


def render_db(value):
    if value <= 0:
        return "-inf dB"
    return f"{20 * math.log10(value):.2f} dB"


class FakePlugin:
    """Sampler instance with named parameters and display rendering."""

    def __init__(self, name, missing=(), ignore_loop_writes=False):
        self.name = name
        self.names = BASE_PARAM_NAMES + [n for n in NAMED_PARAMS if n not in missing]
        self.values = [0.0] * len(self.names)
        self.config = {}
        self.ignore_loop_writes = ignore_loop_writes

    def index(self, name):
        return self.names.index(name)

    def value_of(self, name):
        return self.values[self.index(name)]

    def set(self, param, value):
        if self.names[param] == "Loop" and self.ignore_loop_writes:
            return
        self.values[param] = value

    def formatted(self, param):
        name = self.names[param]
        value = self.values[param]
        if name == "Sustain":
            return render_db(value)
        if name in ("Attack", "Decay", "Release", "Loop start offset", "Loop xfade"):
            return render_ms(value)
        return f"{value:.2f}"

    def set_config(self, key, value):
        self.config[key] = value
        if key == "LOOP" and "Loop" in self.names:
            self.values[self.index("Loop")] = float(value)


class FakeHost(SamplerHost):
    hosts_plugins = True

    def __init__(
        self,
        items=(),
        tempo=120.0,
        sources=None,
        project_dir=".",
        answers=None,
        inputs=None,
        plugin_available=True,
        missing_params=(),
        ignore_loop_writes=False,
        hosts_plugins=True,
    ):
        self.items = list(items)
        self.tempo = tempo
        self.sources = sources or {}
        self.project_dir = project_dir
        self.answers = list(answers or [])
        self.inputs = list(inputs or [])
        self.plugin_available = plugin_available
        self.missing_params = missing_params
        self.ignore_loop_writes = ignore_loop_writes
        self.hosts_plugins = hosts_plugins
        self.plugins = []
        self.writes = []
        self.configs = []
        self.midi_items = []

    def target_track(self):
        return "track"

    def track_name(self, track):
        return "Synth Pad"

    def selected_items(self):
        return list(self.items)

    def tempo_at(self, position):
        return self.tempo

    def project_path(self):
        return self.project_dir

    def add_plugin(self, track, name):
        if not self.plugin_available:
            return None
        self.plugins.append(
            FakePlugin(name, self.missing_params, self.ignore_loop_writes)
        )
        return len(self.plugins) - 1

    def param_count(self, track, fx):
        return len(self.plugins[fx].names)

    def param_name(self, track, fx, param):
        return self.plugins[fx].names[param]

    def set_param(self, track, fx, param, value):
        self.writes.append((fx, param, value))
        self.plugins[fx].set(param, value)

    def get_param(self, track, fx, param):
        return self.plugins[fx].values[param]

    def formatted_param(self, track, fx, param):
        return self.plugins[fx].formatted(param)

    def set_named_config(self, track, fx, key, value):
        self.configs.append((fx, key, value))
        self.plugins[fx].set_config(key, value)

    def probe_source(self, path):
        return self.sources.get(path)

    def insert_midi_item(self, track, start, end, notes, name):
        self.midi_items.append((track, start, end, list(notes), name))

    def get_user_inputs(self, title, labels, defaults):
        value = self.inputs.pop(0)
        if value is None:
            return None
        return value

    def ask(self, message, title):
        return self.answers.pop(0)


def make_item(name, path=None, position=0.0, length=2.0, offset=0.0, **kwargs):
    """Build a SampleItem with a 10 s source by default."""
    kwargs.setdefault("source_length", 10.0)
    kwargs.setdefault("track", "track")
    return SampleItem(
        path=path or f"/samples/{name}.wav",
        offset=offset,
        length=length,
        position=position,
        name=name,
        **kwargs,
    )
