"""Configuration generation and resolution services."""

from .assets import (
    AssetGenerator,
    create_attach_configuration,
    create_fallback_configurations,
    create_fallback_launch_configuration,
    ensure_tasks_present,
)
from .attach import PsAttachItemsProvider
from .projects import MsBuildProjectInfoService
from .protocols import FixedProjectSelector, LoggingNotifier
from .resolver import ConfigurationResolver

__all__ = [
    "AssetGenerator",
    "ConfigurationResolver",
    "FixedProjectSelector",
    "LoggingNotifier",
    "MsBuildProjectInfoService",
    "PsAttachItemsProvider",
    "create_attach_configuration",
    "create_fallback_configurations",
    "create_fallback_launch_configuration",
    "ensure_tasks_present",
]
