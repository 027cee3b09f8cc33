"""Instrument options panel component."""

from dataclasses import dataclass

import flet as ft

from smplmap import SAMPLER_RS5K, SAMPLER_TX16WX

from ..strings import Strings


@dataclass
class MappingOptions:
    """Raw form values; validated later by smplmap.make_settings."""

    sampler: str = SAMPLER_TX16WX
    name: str = "Sampler"
    base_pitch: str = "60"
    attack: str = "0"
    decay: str = "0"
    release: str = "150"
    sustain: str = "0"
    obey_note_offs: bool = True
    loop: bool = False
    bpm: str = "0"
    loop_start: str = "0"
    loop_length: str = "4"
    loop_xfade: str = "0.25"
    same_pitch: bool = False


def _number_field(label: str, value: str, disabled: bool = False) -> ft.TextField:
    return ft.TextField(
        label=label,
        value=value,
        width=95,
        dense=True,
        disabled=disabled,
    )


class OptionsPanel:
    """Sampler choice, envelope and loop settings."""

    def __init__(self, page: ft.Page, hosts_plugins: bool = False):
        """Initialize options panel.

        Args:
            page: Flet page instance (for dialogs)
            hosts_plugins: Whether RS5k can be built; disabled otherwise
        """
        self.page = page
        defaults = MappingOptions()

        # Sampler back-end
        self.sampler_group = ft.RadioGroup(
            value=defaults.sampler,
            content=ft.Column(
                [
                    ft.Radio(value=SAMPLER_TX16WX, label=Strings.SAMPLER_TX16WX),
                    ft.Radio(
                        value=SAMPLER_RS5K,
                        label=Strings.SAMPLER_RS5K,
                        disabled=not hosts_plugins,
                    ),
                ],
                spacing=0,
            ),
        )

        self.name_field = ft.TextField(
            label=Strings.NAME_LABEL,
            value=defaults.name,
            width=200,
            dense=True,
        )
        self.base_pitch_field = _number_field(
            Strings.BASE_PITCH_LABEL, defaults.base_pitch
        )

        # Envelope
        self.attack_field = _number_field(Strings.ATTACK_LABEL, defaults.attack)
        self.decay_field = _number_field(Strings.DECAY_LABEL, defaults.decay)
        self.release_field = _number_field(Strings.RELEASE_LABEL, defaults.release)
        self.sustain_field = _number_field(Strings.SUSTAIN_LABEL, defaults.sustain)
        self.obey_cb = ft.Checkbox(
            label=Strings.OBEY_NOTE_OFFS,
            value=defaults.obey_note_offs,
        )

        # Loop controls
        self.loop_cb = ft.Checkbox(
            label=Strings.LOOP,
            value=defaults.loop,
            on_change=self._on_loop_toggle,
        )
        self.bpm_field = _number_field(Strings.BPM_LABEL, defaults.bpm, True)
        self.loop_start_field = _number_field(
            Strings.LOOP_START_LABEL, defaults.loop_start, True
        )
        self.loop_length_field = _number_field(
            Strings.LOOP_LENGTH_LABEL, defaults.loop_length, True
        )
        self.loop_xfade_field = _number_field(
            Strings.LOOP_XFADE_LABEL, defaults.loop_xfade, True
        )

        self.same_pitch_cb = ft.Checkbox(
            label=Strings.SAME_PITCH,
            value=defaults.same_pitch,
        )

        self.options_help_btn = ft.IconButton(
            icon=ft.Icons.HELP_OUTLINE,
            icon_size=18,
            tooltip=Strings.OPTIONS_HELP_TITLE,
            on_click=self._show_options_help,
        )

        # Build container
        self.container = self._build()

    @property
    def _loop_fields(self) -> list[ft.TextField]:
        return [
            self.bpm_field,
            self.loop_start_field,
            self.loop_length_field,
            self.loop_xfade_field,
        ]

    def _on_loop_toggle(self, e):
        """Enable the loop fields only while looping is on."""
        enabled = self.loop_cb.value or False
        for loop_field in self._loop_fields:
            loop_field.disabled = not enabled
        self.page.update()

    def _show_options_help(self, e):
        """Show options help dialog."""
        dialog = ft.AlertDialog(
            modal=False,
            title=ft.Text(Strings.OPTIONS_HELP_TITLE),
            content=ft.Text(Strings.OPTIONS_HELP_TEXT),
            actions=[
                ft.TextButton(Strings.OK, on_click=lambda e: self.page.pop_dialog()),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )
        self.page.show_dialog(dialog)

    def _build(self) -> ft.Container:
        """Build the options panel container."""
        return ft.Container(
            content=ft.Column(
                [
                    ft.Row(
                        [
                            ft.Text(
                                Strings.OPTIONS,
                                weight=ft.FontWeight.BOLD,
                                size=12,
                            ),
                            self.options_help_btn,
                        ],
                        alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                    ),
                    self.sampler_group,
                    ft.Row([self.name_field, self.base_pitch_field]),
                    ft.Row(
                        [
                            self.attack_field,
                            self.decay_field,
                            self.release_field,
                            self.sustain_field,
                        ]
                    ),
                    ft.Row([self.obey_cb, self.same_pitch_cb]),
                    ft.Row(
                        [self.loop_cb, *self._loop_fields],
                        vertical_alignment=ft.CrossAxisAlignment.CENTER,
                        wrap=True,
                    ),
                ],
                spacing=8,
            ),
            padding=10,
            border=ft.Border.all(1, ft.Colors.GREY_300),
            border_radius=8,
        )

    def get_options(self) -> MappingOptions:
        """Get current options as dataclass."""
        return MappingOptions(
            sampler=self.sampler_group.value or SAMPLER_TX16WX,
            name=(self.name_field.value or "").strip() or "Sampler",
            base_pitch=self.base_pitch_field.value or "",
            attack=self.attack_field.value or "",
            decay=self.decay_field.value or "",
            release=self.release_field.value or "",
            sustain=self.sustain_field.value or "",
            obey_note_offs=self.obey_cb.value or False,
            loop=self.loop_cb.value or False,
            bpm=self.bpm_field.value or "",
            loop_start=self.loop_start_field.value or "",
            loop_length=self.loop_length_field.value or "",
            loop_xfade=self.loop_xfade_field.value or "",
            same_pitch=self.same_pitch_cb.value or False,
        )
