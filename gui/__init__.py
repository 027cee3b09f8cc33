"""Sample Mapper GUI package."""

from smplmap import __version__

from .app import SmplmapApp
from .strings import Strings

__all__ = ["SmplmapApp", "Strings", "__version__"]
