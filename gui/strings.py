"""User-facing strings for the GUI.

Kept in one place so labels and messages stay consistent.
"""


class Strings:
    """Centralized strings for the GUI."""

    # Window
    APP_TITLE = "Sample Mapper"

    # Output section
    OUTPUT_FOLDER = "OUTPUT FOLDER"
    OUTPUT_HINT = "Folder for the .txprog preset and trigger MIDI"
    BROWSE = "Browse"
    OUTPUT_HAS_PRESETS_WARNING = (
        "Warning: Folder already holds .txprog presets. One with the same name is replaced."
    )

    # Options section
    OPTIONS = "INSTRUMENT"
    SAMPLER_TX16WX = "TX16Wx (one program, one region per sample)"
    SAMPLER_RS5K = "RS5k (one instance per sample, needs REAPER)"
    NAME_LABEL = "Name"
    BASE_PITCH_LABEL = "Base pitch"
    ATTACK_LABEL = "Attack (ms)"
    DECAY_LABEL = "Decay (ms)"
    RELEASE_LABEL = "Release (ms)"
    SUSTAIN_LABEL = "Sustain (dB)"
    OBEY_NOTE_OFFS = "Obey note-offs"
    SAME_PITCH = "Same pitch for all trigger notes"

    # Loop options
    LOOP = "Loop"
    BPM_LABEL = "BPM"
    LOOP_START_LABEL = "Start"
    LOOP_LENGTH_LABEL = "Length"
    LOOP_XFADE_LABEL = "Xfade"

    # Options help dialog
    OPTIONS_HELP_TITLE = "Options Help"
    OPTIONS_HELP_TEXT = (
        "Sampler\n"
        "  TX16Wx writes a .txprog program to load into one TX16Wx instance.\n"
        "  RS5k creates one instance per sample and only works inside REAPER.\n\n"
        "Base pitch\n"
        "  Pitch for samples without a note name (C3, F#2, Bb4) in the file name.\n"
        "  Each unnamed sample gets base pitch + its position in the list.\n\n"
        "Attack / Decay / Release (ms), Sustain (dB)\n"
        "  Amplitude envelope shared by all samples.\n\n"
        "Loop\n"
        "  Start, length and crossfade are given in beats.\n"
        "  BPM 0 uses 120 BPM (the project tempo inside REAPER).\n\n"
        "Same pitch\n"
        "  Every note in the trigger MIDI file gets the base pitch."
    )

    # Input section
    SELECT_INPUT = "SELECT SAMPLES"
    SELECT_FILES = "Select File(s)"
    SELECT_FOLDER = "Select Folder"
    INPUT_HINT = ".wav / .aif / .flac files, one note per file"
    PITCH_PREVIEW = "Pitch per file"
    PITCH_FALLBACK = "base + {index}"
    PREVIEW_MORE = "... and {count} more"
    PITCHES_FOUND = "{named}/{total} file(s) carry a note name"

    # Log section
    MAPPING_LOG = "MAPPING LOG"
    COPY = "Copy"
    COPY_DEBUG = "Copy Debug"
    CLEAR = "Clear"
    LOG_COPIED = "Log copied to clipboard"
    DEBUG_LOG_COPIED = "Debug log copied to clipboard (detailed output)"
    NO_DEBUG_LOG = "No debug log available yet"
    RESULT_SAMPLER = "Sampler"
    RESULT_PRESET = "Preset"
    RESULT_RANGE = "Pitch range"
    RESULT_TRIGGERS = "Trigger notes"
    READY_MESSAGE = "Ready. Select output folder to begin."

    # Dialogs
    SELECT_OUTPUT_TITLE = "Select Output Folder"
    SELECT_FILES_TITLE = "Select Sample Files"
    SELECT_INPUT_FOLDER_TITLE = "Select Folder Containing Samples"
    MAPPING_COMPLETE = "Instrument Created"
    OK = "OK"

    # Errors
    SELECT_OUTPUT_FIRST = "Please select output folder first"
    NO_FILES_FOUND = "No audio files found in {folder}"
    FFPROBE_NOT_FOUND = (
        "ffprobe not found: sample rates and lengths fall back to 44.1 kHz defaults"
    )

    # Progress
    STARTING_MAPPING = "Mapping {count} sample(s)..."
    MAPPING_RESULT = "Mapped {count} sample(s) ({low} to {high})."
    MAPPING_FAILED = "Mapping failed: {error}"
    RS5K_NEEDS_HOST = (
        "RS5k needs REAPER to host the plugin; choose TX16Wx to build offline"
    )
