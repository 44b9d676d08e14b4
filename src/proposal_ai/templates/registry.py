"""Directory-based template registry with auto-discovery.

Each template is a directory under ``templates_dir`` holding a
``config.yaml`` whose ``template`` section describes it::

    template:
      id: healthcare
      name: Healthcare Proposal
      file: healthcare.pptx
      industries: [Healthcare]
      project_types: [all]

Usage::

    registry = TemplateRegistry(Path("config/templates"))
    registry.discover()
    store = registry.config_store("healthcare")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from proposal_ai.exceptions import ConfigurationError
from proposal_ai.slides.store import ConfigStore, read_config_document

log = logging.getLogger(__name__)

WILDCARD = "all"
CONFIG_FILENAME = "config.yaml"
LEGACY_TEMPLATE_ID = "legacy"


class TemplateSection(BaseModel):
    """The ``template`` block of a template's ``config.yaml``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    name: Optional[str] = None
    description: str = ""
    file: str = ""
    industries: list[str] = Field(default_factory=lambda: [WILDCARD])
    project_types: list[str] = Field(default_factory=lambda: [WILDCARD])
    global_mappings: dict[str, str] = Field(default_factory=dict)

    @field_validator("description", "file", mode="before")
    @classmethod
    def _blank_when_null(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("id", "name", "description", "file", mode="before")
    @classmethod
    def _scalar_to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("industries", "project_types", mode="before")
    @classmethod
    def _one_or_many(cls, value: Any) -> Any:
        # ``industries: Healthcare`` is a single entry, not a character list
        if value is None or value == "" or value == []:
            return [WILDCARD]
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("global_mappings", mode="before")
    @classmethod
    def _mappings_as_text(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value


@dataclass(frozen=True)
class TemplateDescriptor:
    """A (configuration, binary document) pair selectable by industry/project type."""

    id: str
    name: str
    config_path: Path
    template_path: Path
    description: str = ""
    industries: frozenset[str] = frozenset({WILDCARD})
    project_types: frozenset[str] = frozenset({WILDCARD})
    global_mappings: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    @classmethod
    def from_section(cls, section: dict[str, Any], config_path: Path) -> TemplateDescriptor:
        """Build a descriptor from a config file's ``template`` section.

        Raises:
            ConfigurationError: If the section fails validation.
        """
        try:
            parsed = TemplateSection.model_validate(section)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid template section in {config_path}: {exc}") from exc
        return cls(
            id=parsed.id,
            name=parsed.name or parsed.id,
            description=parsed.description,
            config_path=config_path,
            template_path=config_path.parent / parsed.file,
            industries=frozenset(parsed.industries),
            project_types=frozenset(parsed.project_types),
            global_mappings=dict(parsed.global_mappings),
        )


class TemplateRegistry:
    """Registry of discovered templates, populated once and read-only afterwards.

    Templates are registered either manually via :meth:`register` or
    automatically via :meth:`discover`. When discovery finds nothing and a
    legacy single-file configuration exists, it is registered as the
    ``legacy`` template and becomes the default.
    """

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        legacy_config_path: Path | None = None,
        legacy_template_path: Path | None = None,
        default_template_id: str = "default",
        watch_interval: float = 2.0,
    ) -> None:
        self._templates_dir = templates_dir
        self._legacy_config_path = legacy_config_path
        self._legacy_template_path = legacy_template_path
        self._default_template_id = default_template_id
        self._watch_interval = watch_interval
        self._templates: dict[str, TemplateDescriptor] = {}
        self._stores: dict[str, ConfigStore] = {}

    @property
    def default_template_id(self) -> str:
        return self._default_template_id

    def register(self, descriptor: TemplateDescriptor) -> None:
        """Register a template descriptor."""
        if descriptor.id in self._templates:
            log.warning("Template %r already registered, overwriting", descriptor.id)
        self._templates[descriptor.id] = descriptor
        log.debug("Registered template: %s", descriptor.id)

    def get(self, template_id: str) -> TemplateDescriptor:
        """Get a template by id.

        Raises:
            KeyError: If the template is not registered.
        """
        if template_id not in self._templates:
            raise KeyError(
                f"Template {template_id!r} not found. "
                f"Available: {sorted(self._templates.keys())}"
            )
        return self._templates[template_id]

    def has(self, template_id: str) -> bool:
        return template_id in self._templates

    def list(self) -> list[TemplateDescriptor]:
        """Return all registered templates, sorted by id."""
        return sorted(self._templates.values(), key=lambda t: t.id)

    def __len__(self) -> int:
        return len(self._templates)

    def discover(self) -> None:
        """Scan ``templates_dir`` sub-directories for ``config.yaml`` files."""
        templates_dir = self._templates_dir
        if templates_dir is None or not templates_dir.is_dir():
            log.warning("Templates directory not found: %s", templates_dir)
            self._load_legacy()
            return

        for entry in sorted(templates_dir.iterdir()):
            if not entry.is_dir():
                continue
            config_path = entry / CONFIG_FILENAME
            if not config_path.exists():
                log.warning("No %s found in template directory: %s", CONFIG_FILENAME, entry.name)
                continue
            try:
                data = read_config_document(config_path)
                section = data.get("template")
                if not isinstance(section, dict):
                    log.warning("Invalid template configuration in %s: missing template section", entry.name)
                    continue
                self.register(TemplateDescriptor.from_section(section, config_path))
            except ConfigurationError as exc:
                log.error("Error loading template %s: %s", entry.name, exc)

        if not self._templates:
            log.warning("No templates found, falling back to legacy configuration")
            self._load_legacy()

        log.info(
            "Discovered %d template(s): %s",
            len(self._templates),
            ", ".join(sorted(self._templates.keys())),
        )

    def _load_legacy(self) -> None:
        path = self._legacy_config_path
        if path is None or not path.exists():
            return
        self.register(
            TemplateDescriptor(
                id=LEGACY_TEMPLATE_ID,
                name="Legacy Configuration",
                description="Single-file slide configuration",
                config_path=path,
                template_path=self._legacy_template_path or path.with_suffix(".pptx"),
            )
        )
        self._default_template_id = LEGACY_TEMPLATE_ID
        log.info("Using legacy configuration %s", path)

    # ── Per-template configuration ──────────────────────────────────

    def config_store(self, template_id: str) -> ConfigStore:
        """Return the cached ``ConfigStore`` for a template, creating it on first use."""
        store = self._stores.get(template_id)
        if store is None:
            descriptor = self.get(template_id)
            store = ConfigStore(descriptor.config_path, watch_interval=self._watch_interval)
            self._stores[template_id] = store
        return store

    def stores(self) -> list[ConfigStore]:
        return list(self._stores.values())

    def close(self) -> None:
        """Stop any config watchers started on cached stores."""
        for store in self._stores.values():
            store.close()
