"""Shared fixtures for proposal-ai tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml
from pptx import Presentation
from pptx.util import Inches

from proposal_ai.core.config import AppSettings, LLMConfig, OutputConfig, TemplatesConfig
from proposal_ai.models import IntakeData
from proposal_ai.slides.models import GlobalConfig

_BASE_CONFIG: dict[str, Any] = {
    "version": "1.0",
    "metadata": {"author": "Test Suite", "description": "Slides used by the test suite"},
    "defaults": {"model": "test-model", "max_tokens": 500, "temperature": 0.2},
    "global_formatting": {
        "remove_markdown": True,
        "remove_section_headers": True,
        "bullet_char": "•",
        "max_line_length": 150,
    },
    "compliance": {
        "risky_terms": ["guarantee", "ensure", "comprehensive"],
        "absolute_terms": ["always", "never"],
        "qualifying_terms": ["proposed", "anticipated"],
    },
    "slides": [
        {
            "id": "overview",
            "enabled": True,
            "order": 1,
            "title": "Overview",
            "placeholder_mapping": {
                "content": "{OVERVIEW_CONTENT}",
                "title": "{OVERVIEW_TITLE}",
                "confidence": "{OVERVIEW_CONFIDENCE}",
                "warnings": "{OVERVIEW_WARNINGS}",
            },
            "prompt": {"template": "SLIDE=overview for {{company_name}} in {{industry}}"},
        },
        {
            "id": "solution_approach",
            "enabled": True,
            "order": 2,
            "title": "Solution & Approach",
            "placeholder_mapping": {"content": "{SOLUTION_CONTENT}"},
            "prompt": {"template": "SLIDE=solution_approach addressing {{business_challenge}}"},
        },
        {
            "id": "outcomes",
            "enabled": True,
            "order": 3,
            "title": "Expected Outcomes",
            "placeholder_mapping": {"content": "{OUTCOMES_CONTENT}"},
            "prompt": {"template": "SLIDE=outcomes meeting {{success_criteria}}"},
            "validation": {"should_contain_numbers": True},
        },
        {
            "id": "next_steps",
            "enabled": True,
            "order": 4,
            "title": "Next Steps",
            "placeholder_mapping": {"content": "{NEXT_STEPS}"},
            "prompt": {"template": "SLIDE=next_steps within {{duration}}"},
        },
    ],
}


@pytest.fixture
def intake() -> IntakeData:
    """Healthcare intake with every optional field filled."""
    return IntakeData(
        company_name="Acme Health",
        industry="Healthcare",
        business_challenge="Legacy claims system cannot keep up with member growth",
        project_type="Cloud Migration",
        tech_stack="Oracle, .NET",
        duration="6 months",
        budget_range="$500K-$1M",
        success_criteria="Reduce claims processing time by 40%",
    )


@pytest.fixture
def minimal_intake() -> IntakeData:
    """Intake with only the required fields."""
    return IntakeData(
        company_name="Globex",
        industry="Retail",
        business_challenge="Manual inventory process",
        project_type="Automation",
    )


@pytest.fixture
def config_data() -> dict[str, Any]:
    """Raw configuration document with four generated slides (a fresh copy per test)."""
    return copy.deepcopy(_BASE_CONFIG)


@pytest.fixture
def global_config(config_data: dict[str, Any]) -> GlobalConfig:
    return GlobalConfig.model_validate(config_data)


@pytest.fixture
def write_yaml() -> Callable[[Path, dict[str, Any]], Path]:
    """Write a dict as YAML, creating parent directories."""

    def _write(path: Path, data: dict[str, Any]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_pptx() -> Callable[[Path, list[str]], Path]:
    """Build a deck with one blank slide holding a text box per entry."""

    def _make(path: Path, texts: list[str]) -> Path:
        presentation = Presentation()
        slide = presentation.slides.add_slide(presentation.slide_layouts[6])
        for i, text in enumerate(texts):
            box = slide.shapes.add_textbox(Inches(0.5), Inches(0.5 + i), Inches(9), Inches(0.8))
            box.text_frame.text = text
        path.parent.mkdir(parents=True, exist_ok=True)
        presentation.save(str(path))
        return path

    return _make


@pytest.fixture
def templates_dir(
    tmp_path: Path,
    config_data: dict[str, Any],
    write_yaml: Callable[[Path, dict[str, Any]], Path],
    make_pptx: Callable[[Path, list[str]], Path],
) -> Path:
    """Two templates: a wildcard ``default`` and a Healthcare-specific one."""
    root = tmp_path / "templates"

    default = copy.deepcopy(config_data)
    default["template"] = {
        "id": "default",
        "name": "Solution Summary",
        "file": "template.pptx",
        "industries": ["all"],
        "project_types": ["all"],
    }
    write_yaml(root / "default" / "config.yaml", default)
    make_pptx(
        root / "default" / "template.pptx",
        ["{COMPANY_NAME}", "{OVERVIEW_TITLE}", "{OVERVIEW_CONTENT}", "{NEXT_STEPS}"],
    )

    healthcare = copy.deepcopy(config_data)
    healthcare["template"] = {
        "id": "healthcare",
        "name": "Healthcare Summary",
        "file": "template.pptx",
        "industries": ["Healthcare"],
        "project_types": ["all"],
        "global_mappings": {"{FOOTER}": "{{company_name}} | Confidential"},
    }
    write_yaml(root / "healthcare" / "config.yaml", healthcare)
    make_pptx(
        root / "healthcare" / "template.pptx",
        ["{COMPANY_NAME}", "{OVERVIEW_CONTENT}", "{OUTCOMES_CONTENT}", "{FOOTER}"],
    )
    return root


@pytest.fixture
def settings(tmp_path: Path, templates_dir: Path) -> AppSettings:
    """Settings pointing at the temporary templates and output directories."""
    return AppSettings(
        llm=LLMConfig(provider="bedrock", model="test-model", max_retries=1),
        templates=TemplatesConfig(
            templates_dir=templates_dir,
            legacy_config_path=tmp_path / "missing" / "slides.yaml",
            legacy_template_path=tmp_path / "missing" / "template.pptx",
        ),
        output=OutputConfig(output_dir=tmp_path / "out"),
    )
