"""GUI components for Sample Mapper."""

from .input_selector import InputSelector
from .log_view import LogView
from .options_panel import MappingOptions, OptionsPanel
from .output_picker import OutputPicker

__all__ = ["OutputPicker", "OptionsPanel", "MappingOptions", "InputSelector", "LogView"]
