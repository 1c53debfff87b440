"""Debug configuration provider for .NET workspaces."""

from .errors import DebugConfigError
from .services import ConfigurationResolver

__all__ = ["ConfigurationResolver", "DebugConfigError"]

__version__ = "0.1.0"
