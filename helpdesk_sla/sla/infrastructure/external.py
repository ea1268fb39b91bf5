"""
SLA External Service Integrations
==================================

External services for SLA expectations:
- YAML settings file loader
- Watchdog-based hot reload of the settings file

The managers here own the only mutable state in the module: a reference
to the current immutable ``SLASettings`` snapshot. Calculations receive
the snapshot, never the manager.
"""

import threading
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from helpdesk_sla.core.exceptions import ConfigurationException
from helpdesk_sla.shared.infrastructure.logging import get_logger
from helpdesk_sla.sla.application.services import ISLASettingsProvider
from helpdesk_sla.sla.domain.value_objects import DEFAULT_SLA_SETTINGS, SLASettings

logger = get_logger(__name__)


def load_settings_file(path: Path) -> SLASettings:
    """
    Load and validate an SLA settings YAML file.

    Both the native (``priorities`` / ``business_hours``) and the flat
    camelCase admin-tool shape are accepted. A missing file yields
    ``DEFAULT_SLA_SETTINGS``.

    Raises:
        ConfigurationException: file is unreadable YAML or fails validation
    """
    if not path.exists():
        logger.warning(f"SLA settings file not found: {path}, using defaults")
        return DEFAULT_SLA_SETTINGS

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationException(
            f"Invalid YAML in SLA settings file: {path}",
            {"path": str(path), "error": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationException(
            f"SLA settings file must contain a mapping: {path}",
            {"path": str(path)}
        )

    try:
        return SLASettings.from_document(data)
    except (ValidationError, KeyError, TypeError, ValueError) as e:
        raise ConfigurationException(
            f"Invalid SLA settings in {path}",
            {"path": str(path), "error": str(e)}
        ) from e


class SettingsFileHandler(FileSystemEventHandler):
    """Watchdog event handler for SLA settings file changes."""

    def __init__(self, settings_manager: "SLASettingsManager", settings_path: Path):
        self.settings_manager = settings_manager
        self.settings_path = settings_path
        super().__init__()

    def _reload_if_settings(self, path) -> None:
        if Path(path).resolve() == self.settings_path.resolve():
            logger.info(f"SLA settings file changed: {path}")
            self.settings_manager.reload()

    def on_modified(self, event):
        """Handle file modification event."""
        if event.is_directory:
            return
        self._reload_if_settings(event.src_path)

    on_created = on_modified

    def on_moved(self, event):
        """Handle editors that save by renaming a temp file over the settings file."""
        if event.is_directory:
            return
        self._reload_if_settings(event.dest_path)


class StaticSLASettingsProvider(ISLASettingsProvider):
    """Provider serving a fixed snapshot."""

    def __init__(self, settings: SLASettings = DEFAULT_SLA_SETTINGS):
        self._settings = settings

    def get_settings(self) -> SLASettings:
        return self._settings


class SLASettingsManager(ISLASettingsProvider):
    """
    Thread-safe SLA settings manager with hot-reload support.

    Uses watchdog to monitor file changes and swap in a new snapshot
    without restarting the service. A failed reload keeps the previous
    snapshot in place.
    """

    def __init__(self):
        self._settings: Optional[SLASettings] = None
        self._lock = threading.Lock()
        self._path: Optional[Path] = None
        self._observer = None

    def load(self, path: Path) -> SLASettings:
        """Initial settings load."""
        self._path = Path(path)
        settings = load_settings_file(self._path)
        with self._lock:
            self._settings = settings
        logger.info(
            "SLA settings loaded",
            extra={
                "path": str(self._path),
                "priorities": sorted(settings.priorities),
                "holiday_count": len(settings.business_hours.holidays),
            }
        )
        return settings

    def reload(self) -> bool:
        """Reload settings from file."""
        if self._path is None:
            return False

        try:
            new_settings = load_settings_file(self._path)
        except ConfigurationException as e:
            logger.error(
                "Failed to reload SLA settings, keeping previous snapshot",
                extra={"path": str(self._path), "error": e.details.get("error", e.message)}
            )
            return False

        with self._lock:
            self._settings = new_settings
        logger.info("SLA settings reloaded successfully", extra={"path": str(self._path)})
        return True

    def start_watching(self) -> None:
        """
        Start watching the settings file for changes.

        Skips watching when the file doesn't exist (defaults are in use) or
        the platform cannot provide file events.
        """
        if self._path is None:
            raise RuntimeError("Settings not loaded. Call load() first.")

        if not self._path.exists():
            logger.info(
                f"Settings file doesn't exist, skipping file watch: {self._path}. "
                "Using default SLA settings."
            )
            return

        try:
            self._observer = Observer()
            handler = SettingsFileHandler(self, self._path)
            self._observer.schedule(
                handler,
                str(self._path.resolve().parent),
                recursive=False
            )
            self._observer.start()
            logger.info(f"Started watching SLA settings file: {self._path}")
        except OSError as e:
            logger.warning(f"File watching not available, using static settings: {e}")
            self._observer = None

    def stop_watching(self) -> None:
        """Stop watching the settings file (safe to call even if not watching)."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    @property
    def settings(self) -> SLASettings:
        """Get current settings snapshot."""
        with self._lock:
            if self._settings is None:
                raise RuntimeError("SLA settings not loaded")
            return self._settings

    def get_settings(self) -> SLASettings:
        return self.settings
