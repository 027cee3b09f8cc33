"""Bridge between GUI and smplmap.py mapping functions."""

import asyncio
import io
from contextlib import redirect_stdout
from typing import Callable

from smplmap import (
    SAMPLER_RS5K,
    FolderHost,
    MappingResult,
    MappingStats,
    SmplmapError,
    check_ffprobe,
    make_settings,
    run_mapping,
)

from .components.options_panel import MappingOptions
from .strings import Strings


class MappingBridge:
    """Runs a mapping over picked files and reports to the GUI log."""

    def __init__(self, log_callback: Callable[[str, str], None]):
        """Initialize bridge with log callback.

        Args:
            log_callback: Function(message, level) for logging
        """
        self.log = log_callback
        self._debug_log: list[str] = []
        self.last_stats: MappingStats | None = None

    def get_debug_log(self) -> str:
        """Get the detailed debug log from the last run.

        Returns:
            str: Full stdout output from mapping
        """
        return "\n".join(self._debug_log)

    def clear_debug_log(self):
        """Clear the debug log."""
        self._debug_log.clear()

    @property
    def hosts_plugins(self) -> bool:
        """Whether the offline host can run the RS5k back-end."""
        return FolderHost.hosts_plugins

    def check_ffprobe(self) -> bool:
        """Check if ffprobe is available."""
        return check_ffprobe()

    async def map_files(
        self,
        input_paths: list[str],
        output_dir: str,
        options: MappingOptions,
    ) -> MappingResult | None:
        """Build an instrument from the given files asynchronously.

        Args:
            input_paths: Sample file paths, one note per file
            output_dir: Directory for preset and trigger MIDI
            options: Raw form values from the options panel

        Returns:
            MappingResult, or None if the mapping failed
        """
        self.clear_debug_log()
        self.last_stats = None

        if options.sampler == SAMPLER_RS5K and not self.hosts_plugins:
            self.log(Strings.RS5K_NEEDS_HOST, "error")
            return None

        try:
            settings = make_settings(
                sampler=options.sampler,
                base_pitch=options.base_pitch,
                attack=options.attack,
                decay=options.decay,
                release=options.release,
                sustain=options.sustain,
                obey_note_offs=options.obey_note_offs,
                loop=options.loop,
                bpm=options.bpm,
                loop_start=options.loop_start,
                loop_length=options.loop_length,
                loop_xfade=options.loop_xfade,
                do_not_increment=options.same_pitch,
            )
            # Run mapping in thread to avoid blocking UI
            result, stats = await asyncio.to_thread(
                self._map_single, input_paths, output_dir, options.name, settings
            )
        except SmplmapError as e:
            self.log(Strings.MAPPING_FAILED.format(error=e), "error")
            return None
        except Exception as e:
            self.log(Strings.MAPPING_FAILED.format(error=f"unexpected: {e}"), "error")
            return None

        self.last_stats = stats
        return result

    def _map_single(self, input_paths, output_dir, name, settings):
        """Run one mapping (runs in thread).

        Captures stdout for debug log.
        """
        stdout_capture = io.StringIO()
        stats = MappingStats()
        host = FolderHost(sorted(input_paths), output_dir, track_name=name)
        try:
            with redirect_stdout(stdout_capture):
                result = run_mapping(host, settings, stats, output_dir)
                stats.print_summary(result.settings)
        finally:
            captured = stdout_capture.getvalue()
            if captured:
                self._debug_log.append(captured)
        return result, stats
