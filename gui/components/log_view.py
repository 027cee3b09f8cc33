"""Mapping log display component."""

from typing import Callable

import flet as ft

from ..strings import Strings

LEVEL_STYLES = {
    "info": (ft.Icons.INFO_OUTLINE, ft.Colors.GREY_600),
    "warning": (ft.Icons.WARNING_AMBER, ft.Colors.ORANGE),
    "error": (ft.Icons.ERROR_OUTLINE, ft.Colors.RED),
    "success": (ft.Icons.CHECK_CIRCLE_OUTLINE, ft.Colors.GREEN),
}


def result_rows(result, warnings) -> list[tuple[str, str, str]]:
    """Summarize a MappingResult as (level, label, value) rows."""
    low, high = result.pitch_range or ("-", "-")
    rows = [("success", Strings.RESULT_SAMPLER, result.sampler)]
    if result.preset_path:
        rows.append(("success", Strings.RESULT_PRESET, result.preset_path))
    rows.append(("info", Strings.RESULT_RANGE, f"{low} to {high}"))
    rows.append(("info", Strings.RESULT_TRIGGERS, str(len(result.trigger_notes))))
    for name, message in warnings:
        rows.append(("warning", name, message))
    return rows


class LogView:
    """Scrolling log of mapping progress, warnings and results."""

    def __init__(
        self,
        page: ft.Page,
        get_debug_log: Callable[[], str] | None = None,
    ):
        """Initialize log view.

        Args:
            page: Flet page instance for updates
            get_debug_log: Callback returning captured stdout of the last run
        """
        self.page = page
        self._get_debug_log = get_debug_log
        # (level, text) pairs, in display order
        self._entries: list[tuple[str, str]] = []

        self.rows = ft.ListView(expand=True, spacing=2, auto_scroll=True)
        self.container = self._build()

    def _build(self) -> ft.Container:
        actions = ft.Row(
            [
                ft.TextButton(Strings.COPY, on_click=self._on_copy_click),
                ft.TextButton(Strings.COPY_DEBUG, on_click=self._on_copy_debug_click),
                ft.TextButton(Strings.CLEAR, on_click=lambda e: self.clear()),
            ],
            spacing=0,
        )
        header = ft.Row(
            [ft.Text(Strings.MAPPING_LOG, weight=ft.FontWeight.BOLD, size=12), actions],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )
        body = ft.Container(
            content=self.rows,
            border=ft.Border.all(1, ft.Colors.GREY_300),
            border_radius=5,
            padding=10,
            expand=True,
        )
        return ft.Container(
            content=ft.Column([header, body], spacing=5, expand=True),
            expand=True,
        )

    def _refresh(self):
        if self.page.controls:
            self.page.update()

    def _row(self, level: str, *texts: ft.Control) -> ft.Row:
        icon, color = LEVEL_STYLES.get(level, LEVEL_STYLES["info"])
        return ft.Row(
            [ft.Icon(icon, color=color, size=14), *texts],
            spacing=6,
            vertical_alignment=ft.CrossAxisAlignment.START,
        )

    def add(self, message: str, level: str = "info"):
        """Add a plain log line.

        Args:
            message: Log message
            level: "info", "warning", "error", or "success"
        """
        color = None if level == "info" else LEVEL_STYLES[level][1]
        self.rows.controls.append(
            self._row(level, ft.Text(message, color=color, size=12, expand=True))
        )
        self._entries.append((level, message))
        self._refresh()

    def add_result(self, result, warnings):
        """Add a labeled summary block for a finished mapping."""
        for level, label, value in result_rows(result, warnings):
            self.rows.controls.append(
                self._row(
                    level,
                    ft.Text(label, weight=ft.FontWeight.BOLD, size=12, width=110),
                    ft.Text(value, size=12, selectable=True, expand=True),
                )
            )
            self._entries.append((level, f"{label}: {value}"))
        self._refresh()

    def clear(self):
        """Clear all log entries."""
        self.rows.controls.clear()
        self._entries.clear()
        self.page.update()

    def get_text(self) -> str:
        """Get the log as text, warnings and errors tagged."""
        lines = []
        for level, text in self._entries:
            if level in ("warning", "error"):
                lines.append(f"[{level.upper()}] {text}")
            else:
                lines.append(text)
        return "\n".join(lines)

    async def _on_copy_click(self, e):
        await ft.Clipboard().set(self.get_text())
        self.add(Strings.LOG_COPIED)

    async def _on_copy_debug_click(self, e):
        debug_content = self._get_debug_log() if self._get_debug_log else ""
        if not debug_content:
            self.add(Strings.NO_DEBUG_LOG, level="warning")
            return
        await ft.Clipboard().set(debug_content)
        self.add(Strings.DEBUG_LOG_COPIED)
