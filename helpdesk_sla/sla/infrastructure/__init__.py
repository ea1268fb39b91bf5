"""
SLA Infrastructure Layer
========================

Concrete implementations of application interfaces:
- YAML settings loading with hot reload
- Static settings provider
"""

from helpdesk_sla.sla.infrastructure.external import (
    SLASettingsManager,
    StaticSLASettingsProvider,
    SettingsFileHandler,
    load_settings_file,
)

__all__ = [
    "SLASettingsManager",
    "StaticSLASettingsProvider",
    "SettingsFileHandler",
    "load_settings_file",
]
