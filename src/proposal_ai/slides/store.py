"""File-backed slide configuration store — loads YAML or JSON on disk.

The store never raises on a bad document: a missing, unparsable or invalid
file yields a minimal zero-slide fallback so callers can always ask which
slides exist. Reloads replace the snapshot with a single reference
assignment, so a reader holding ``snapshot()`` never sees a half-built config.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable

import yaml
from pydantic import ValidationError

from proposal_ai.exceptions import ConfigurationError
from proposal_ai.slides.models import (
    ComplianceTerms,
    GlobalConfig,
    GlobalFormatting,
    ModelDefaults,
    SlideDefinition,
    StaticSlideDefinition,
)

log = logging.getLogger(__name__)

ReloadCallback = Callable[[GlobalConfig], None]


def read_config_document(path: Path) -> dict[str, Any]:
    """Read and parse a YAML or JSON configuration file into a dict.

    Raises:
        ConfigurationError: If the file is missing, unreadable or cannot be parsed.
    """
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        raw_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Could not read {path}: {exc}") from exc

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(raw_text)
        else:
            data = json.loads(raw_text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Could not parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration root in {path} must be a mapping")
    return data


def parse_config(data: dict[str, Any]) -> GlobalConfig:
    """Validate a raw configuration dict into a ``GlobalConfig``.

    Raises:
        ConfigurationError: If schema validation fails.
    """
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Configuration validation failed: {exc}") from exc


class ConfigStore:
    """Holds the current ``GlobalConfig`` snapshot for one configuration file."""

    def __init__(self, path: Path, *, watch_interval: float = 2.0) -> None:
        self._path = Path(path)
        self._watch_interval = watch_interval
        self._config: GlobalConfig | None = None
        self._is_fallback = False
        self._last_mtime: float | None = None
        self._stop_event = threading.Event()
        self._watcher: threading.Thread | None = None
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_fallback(self) -> bool:
        """True when the current snapshot is the zero-slide fallback."""
        return self._is_fallback

    # ── Loading ─────────────────────────────────────────────────────

    def _load(self) -> bool:
        """Load the file and swap in the new snapshot. Returns True on success."""
        log.info("Loading slide configuration from %s", self._path)
        try:
            self._last_mtime = self._path.stat().st_mtime if self._path.exists() else None
            config = parse_config(read_config_document(self._path))
        except ConfigurationError as exc:
            log.error("Failed to load configuration: %s", exc)
            if self._config is None:
                self._config = GlobalConfig.fallback()
                self._is_fallback = True
                log.warning("Using fallback configuration with zero slides")
            else:
                log.warning("Keeping previously loaded configuration")
            return False

        self._config = config
        self._is_fallback = False
        log.info("Loaded %d slide configurations from %s", len(config.slides), self._path)
        return True

    def reload(self) -> bool:
        """Re-read the configuration file. Returns True if the new file was applied."""
        log.info("Manually reloading configuration %s", self._path)
        return self._load()

    # ── Snapshot accessors ──────────────────────────────────────────

    def snapshot(self) -> GlobalConfig:
        """Return the current immutable configuration snapshot."""
        config = self._config
        assert config is not None  # set in __init__
        return config

    def enabled_slides(self) -> list[SlideDefinition]:
        return self.snapshot().enabled_slides()

    def get_slide(self, slide_id: str) -> SlideDefinition | None:
        return self.snapshot().get_slide(slide_id)

    def static_slides(self) -> list[StaticSlideDefinition]:
        return self.snapshot().sorted_static_slides()

    def defaults(self) -> ModelDefaults:
        return self.snapshot().defaults

    def formatting(self) -> GlobalFormatting:
        return self.snapshot().global_formatting

    def compliance(self) -> ComplianceTerms:
        return self.snapshot().compliance

    def status(self) -> dict[str, Any]:
        """Summarize the active configuration."""
        config = self.snapshot()
        enabled = config.enabled_slides()
        return {
            "path": str(self._path),
            "version": config.version,
            "author": config.metadata.author,
            "total_slides": len(config.slides),
            "enabled_slides": len(enabled),
            "slide_names": [s.title for s in enabled],
            "model": config.defaults.model,
            "compliance": {
                "risky_terms": len(config.compliance.risky_terms),
                "qualifying_terms": len(config.compliance.qualifying_terms),
            },
            "is_fallback": self._is_fallback,
        }

    # ── Programmatic updates ────────────────────────────────────────

    @staticmethod
    def validate_document(data: dict[str, Any]) -> tuple[bool, str | None]:
        """Validate a raw document without applying it."""
        try:
            parse_config(data)
        except ConfigurationError as exc:
            return False, str(exc)
        return True, None

    def update(self, data: dict[str, Any]) -> GlobalConfig:
        """Validate ``data`` and swap it in as the active configuration."""
        config = parse_config(data)
        self._config = config
        self._is_fallback = False
        log.info("Configuration updated programmatically (%d slides)", len(config.slides))
        return config

    # ── Watching ────────────────────────────────────────────────────

    def start_watching(self, on_reload: ReloadCallback | None = None) -> None:
        """Poll the file's mtime in a daemon thread and reload on change."""
        if self._watcher is not None and self._watcher.is_alive():
            return

        self._stop_event.clear()
        self._watcher = threading.Thread(
            target=self._watch_loop,
            args=(on_reload,),
            name=f"config-watch:{self._path.name}",
            daemon=True,
        )
        self._watcher.start()
        log.info("Watching %s for changes every %.1fs", self._path, self._watch_interval)

    def stop_watching(self) -> None:
        self._stop_event.set()
        if self._watcher is not None:
            self._watcher.join(timeout=self._watch_interval * 2)
            self._watcher = None

    def close(self) -> None:
        self.stop_watching()

    def check_for_changes(self, on_reload: ReloadCallback | None = None) -> bool:
        """Reload once if the file's mtime moved. Returns True if a reload was applied."""
        try:
            mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            return False
        if mtime == self._last_mtime:
            return False

        log.info("Configuration file %s changed, reloading", self._path)
        applied = self._load()
        if applied and on_reload is not None:
            try:
                on_reload(self.snapshot())
            except Exception:
                log.exception("Config reload callback failed")
        return applied

    def _watch_loop(self, on_reload: ReloadCallback | None) -> None:
        while not self._stop_event.wait(self._watch_interval):
            self.check_for_changes(on_reload)
