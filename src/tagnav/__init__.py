"""tagnav - line-level inline tag index and boolean tag queries."""

from tagnav.core import Config
from tagnav.services import TagNavigator

__version__ = "1.0.0"

__all__ = ["Config", "TagNavigator", "__version__"]
