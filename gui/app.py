"""Main Flet application."""

import flet as ft

from smplmap import __version__ as smplmap_version
from smplmap import format_result_message

from .components import InputSelector, LogView, OptionsPanel, OutputPicker
from .converter import MappingBridge
from .strings import Strings


class SmplmapApp:
    """Main application class."""

    def __init__(self, page: ft.Page):
        """Initialize the application.

        Args:
            page: Flet page instance
        """
        self.page = page
        self._output_path: str | None = None

        self._setup_page()
        self._setup_services()
        self._create_components()
        self._build_layout()

        # Initial state
        self._check_ffprobe()
        self.log_view.add(Strings.READY_MESSAGE, "info")
        self.log_view.add(
            f"smplmap v{smplmap_version} (Flet {ft.version.__version__})", "info"
        )

    def _setup_page(self):
        """Configure page properties."""
        self.page.title = Strings.APP_TITLE
        self.page.window.width = 600
        self.page.window.height = 900
        self.page.padding = 20

    def _setup_services(self):
        """Register page services."""
        self.file_picker = ft.FilePicker()
        self.page.services.append(self.file_picker)

    def _create_components(self):
        """Create all GUI components."""
        # Bridge first: the log view pulls its debug output
        self.bridge = MappingBridge(self._gui_log)

        self.log_view = LogView(
            page=self.page,
            get_debug_log=self.bridge.get_debug_log,
        )
        self.output_picker = OutputPicker(
            page=self.page,
            file_picker=self.file_picker,
            on_selected=self._on_output_selected,
            log_callback=self._gui_log,
        )
        self.options_panel = OptionsPanel(
            page=self.page, hosts_plugins=self.bridge.hosts_plugins
        )
        self.input_selector = InputSelector(
            page=self.page,
            file_picker=self.file_picker,
            on_files_selected=self._on_input_selected,
            log_callback=self._gui_log,
        )

    def _build_layout(self):
        """Build the page layout."""
        self.page.add(
            ft.Text(
                Strings.APP_TITLE,
                size=20,
                weight=ft.FontWeight.BOLD,
            ),
            ft.Container(height=10),
            self.output_picker.container,
            ft.Container(height=10),
            self.options_panel.container,
            ft.Container(height=10),
            self.input_selector.container,
            ft.Container(height=10),
            self.log_view.container,
        )

    def _gui_log(self, message: str, level: str = "info"):
        """Log callback for GUI."""
        self.log_view.add(message, level)

    def _check_ffprobe(self):
        """Warn at startup when sample metadata cannot be probed."""
        if not self.bridge.check_ffprobe():
            self.log_view.add(Strings.FFPROBE_NOT_FOUND, "warning")

    def _on_output_selected(self, path: str):
        """Handle output folder selection."""
        self._output_path = path
        self.input_selector.set_enabled(True)

    async def _on_input_selected(self, paths: list[str]):
        """Handle sample selection, build the instrument."""
        if not self._output_path:
            self._gui_log(Strings.SELECT_OUTPUT_FIRST, "error")
            return

        options = self.options_panel.get_options()
        self._gui_log(Strings.STARTING_MAPPING.format(count=len(paths)), "info")

        # Disable input while mapping
        self.input_selector.set_enabled(False)
        try:
            result = await self.bridge.map_files(
                input_paths=paths,
                output_dir=self._output_path,
                options=options,
            )
            if result is None:
                return

            low, high = result.pitch_range or ("-", "-")
            self._gui_log(
                Strings.MAPPING_RESULT.format(
                    count=len(result.trigger_notes) or len(paths), low=low, high=high
                ),
                "success",
            )
            if self.bridge.last_stats is not None:
                self.log_view.add_result(result, self.bridge.last_stats.warnings)
            await self._show_completion_dialog(format_result_message(result))
        finally:
            self.input_selector.set_enabled(True)

    async def _show_completion_dialog(self, message: str):
        """Show completion dialog with loading instructions."""
        dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text(Strings.MAPPING_COMPLETE),
            content=ft.Text(message),
            actions=[
                ft.TextButton(
                    Strings.OK,
                    on_click=lambda e: self.page.pop_dialog(),
                ),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        self.page.show_dialog(dialog)
