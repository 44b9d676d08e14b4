"""The templates shipped under config/templates load and select cleanly."""

from __future__ import annotations

from pathlib import Path

import pytest

from proposal_ai.core.config import AppSettings, TemplatesConfig
from proposal_ai.models import IntakeData
from proposal_ai.services import ProposalService
from tests.fakes.fake_provider import FakeTextProvider

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def service(tmp_path: Path) -> ProposalService:
    settings = AppSettings(
        templates=TemplatesConfig(
            templates_dir=REPO_ROOT / "config" / "templates",
            legacy_config_path=tmp_path / "missing.yaml",
        )
    )
    return ProposalService(settings, FakeTextProvider())


@pytest.fixture
def sample_intake() -> IntakeData:
    return IntakeData.model_validate_json((REPO_ROOT / "examples" / "intake.json").read_text(encoding="utf-8"))


def test_templates_discovered(service: ProposalService) -> None:
    assert [t.id for t in service.list_templates()] == ["default", "healthcare"]


@pytest.mark.parametrize("template_id", ["default", "healthcare"])
def test_config_loads_without_fallback(service: ProposalService, template_id: str) -> None:
    status = service.configuration_status(template_id)
    assert status["is_fallback"] is False
    assert status["enabled_slides"] == 4


@pytest.mark.parametrize("template_id", ["default", "healthcare"])
def test_prompts_resolve(service: ProposalService, sample_intake: IntakeData, template_id: str) -> None:
    assert service.check_prompts(template_id, sample_intake) == {}


def test_sample_intake_selects_healthcare(service: ProposalService, sample_intake: IntakeData) -> None:
    assert service.select_template(sample_intake).id == "healthcare"
