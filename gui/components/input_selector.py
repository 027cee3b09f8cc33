"""Sample file/folder selection with a pitch preview."""

from pathlib import Path
from typing import Callable

import flet as ft

from smplmap import AUDIO_EXTENSIONS, midi_to_note_name, note_name_to_midi

from ..strings import Strings

PREVIEW_LIMIT = 12


def describe_pitches(paths: list[str]) -> list[tuple[str, int | None, str]]:
    """Label each file with the pitch it maps to.

    Paths are expected in mapping order (sorted). Files without a note
    name are shown as their offset from the base pitch.

    Returns:
        list: (file name, pitch or None, pitch label) tuples
    """
    rows = []
    for index, path in enumerate(paths):
        pitch = note_name_to_midi(Path(path).stem)
        if pitch is None:
            pitch = note_name_to_midi(path)
        if pitch is None:
            label = Strings.PITCH_FALLBACK.format(index=index)
        else:
            label = f"{midi_to_note_name(pitch)} ({pitch})"
        rows.append((Path(path).name, pitch, label))
    return rows


def audio_files_in(folder: Path) -> list[str]:
    """Sorted audio files directly inside folder."""
    return sorted(
        str(f)
        for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in AUDIO_EXTENSIONS
    )


class InputSelector:
    """Sample picker; shows the resolved pitches before mapping starts."""

    def __init__(
        self,
        page: ft.Page,
        file_picker: ft.FilePicker,
        on_files_selected: Callable[[list[str]], None],
        log_callback: Callable[[str, str], None],
    ):
        """Initialize input selector.

        Args:
            page: Flet page instance
            file_picker: FilePicker service
            on_files_selected: Async callback with the sorted sample paths
            log_callback: Callback for logging (message, level)
        """
        self.page = page
        self.file_picker = file_picker
        self.on_files_selected = on_files_selected
        self.log = log_callback
        self._last_directory: str | None = None

        self.buttons = [
            ft.Button(
                Strings.SELECT_FILES,
                icon=ft.Icons.AUDIO_FILE,
                on_click=self._on_select_files,
                expand=True,
                disabled=True,
            ),
            ft.Button(
                Strings.SELECT_FOLDER,
                icon=ft.Icons.FOLDER_OPEN,
                on_click=self._on_select_folder,
                expand=True,
                disabled=True,
            ),
        ]
        self.preview = ft.Column(spacing=0, visible=False)
        self.container = self._build()

    def _build(self) -> ft.Container:
        return ft.Container(
            content=ft.Column(
                [
                    ft.Text(Strings.SELECT_INPUT, weight=ft.FontWeight.BOLD, size=12),
                    ft.Row(self.buttons, spacing=10),
                    ft.Text(Strings.INPUT_HINT, size=11, color=ft.Colors.GREY_500),
                    self.preview,
                ],
                spacing=8,
            ),
            padding=15,
            border=ft.Border.all(1, ft.Colors.GREY_300),
            border_radius=8,
        )

    def set_enabled(self, enabled: bool):
        """Enable or disable input buttons."""
        for button in self.buttons:
            button.disabled = not enabled
        self.page.update()

    def show_preview(self, paths: list[str]):
        """Fill the pitch preview for the given (sorted) paths."""
        rows = describe_pitches(paths)
        self.preview.controls = [
            ft.Text(Strings.PITCH_PREVIEW, size=11, weight=ft.FontWeight.BOLD)
        ]
        for name, _, label in rows[:PREVIEW_LIMIT]:
            self.preview.controls.append(
                ft.Row(
                    [
                        ft.Text(name, size=11, expand=True, no_wrap=True),
                        ft.Text(label, size=11, color=ft.Colors.BLUE_GREY_400),
                    ]
                )
            )
        if len(rows) > PREVIEW_LIMIT:
            self.preview.controls.append(
                ft.Text(
                    Strings.PREVIEW_MORE.format(count=len(rows) - PREVIEW_LIMIT),
                    size=11,
                    italic=True,
                )
            )
        self.preview.visible = True
        self.page.update()

    async def _deliver(self, paths: list[str], source: Path):
        self._last_directory = str(source)
        paths = sorted(paths)
        named = sum(1 for _, pitch, _ in describe_pitches(paths) if pitch is not None)
        self.log(
            Strings.PITCHES_FOUND.format(named=named, total=len(paths)),
            "info" if named == len(paths) else "warning",
        )
        self.show_preview(paths)
        await self.on_files_selected(paths)

    async def _on_select_files(self, e):
        results = await self.file_picker.pick_files(
            dialog_title=Strings.SELECT_FILES_TITLE,
            file_type=ft.FilePickerFileType.CUSTOM,
            allowed_extensions=[ext.lstrip(".") for ext in AUDIO_EXTENSIONS],
            allow_multiple=True,
            initial_directory=self._last_directory,
        )
        if results:
            paths = [f.path for f in results]
            await self._deliver(paths, Path(paths[0]).parent)

    async def _on_select_folder(self, e):
        result = await self.file_picker.get_directory_path(
            dialog_title=Strings.SELECT_INPUT_FOLDER_TITLE,
            initial_directory=self._last_directory,
        )
        if not result:
            return
        folder = Path(result)
        paths = audio_files_in(folder)
        if not paths:
            self._last_directory = str(folder)
            self.log(Strings.NO_FILES_FOUND.format(folder=folder.name), "warning")
            return
        await self._deliver(paths, folder)
