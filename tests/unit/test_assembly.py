"""Tests for static sections, placeholder maps and the DocumentAssembler."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
from pptx import Presentation

from proposal_ai.assembly import (
    DocumentAssembler,
    build_placeholders,
    output_basename,
    placeholder_name,
    resolve_static_sections,
    sanitize_company_name,
)
from proposal_ai.assembly.placeholders import format_date, format_warnings
from proposal_ai.assembly.static_sections import (
    CONTENT_NOT_AVAILABLE,
    assumptions,
    client_responsibilities,
    problem_statement,
)
from proposal_ai.generation.models import ProposalMetadata, ProposalResult, SlideResult
from proposal_ai.models import IntakeData
from proposal_ai.slides.models import GlobalConfig, StaticSlideDefinition
from proposal_ai.templates.registry import TemplateDescriptor


def _proposal(intake: IntakeData, *slides: SlideResult) -> ProposalResult:
    return ProposalResult(
        metadata=ProposalMetadata(
            client=intake.company_name,
            industry=intake.industry,
            project_type=intake.project_type,
            generated_at=datetime(2026, 3, 5, tzinfo=timezone.utc),
        ),
        slides=list(slides),
    )


def _overview(**extra: Any) -> SlideResult:
    data: dict[str, Any] = {
        "slide_id": "overview",
        "title": "Overview",
        "content": "• Proposed cloud roadmap\n• Phased delivery",
        "confidence": 80,
        "warnings": ["Missing quantifiable metrics"],
    }
    data.update(extra)
    return SlideResult(**data)


def _descriptor(tmp_path: Path, template_path: Path, **extra: Any) -> TemplateDescriptor:
    return TemplateDescriptor(
        id="default",
        name="Default",
        config_path=tmp_path / "config.yaml",
        template_path=template_path,
        **extra,
    )


def _deck_text(path: Path) -> list[str]:
    """Text of every shape, with in-paragraph line breaks read back as newlines."""
    presentation = Presentation(str(path))
    return [
        shape.text_frame.text.replace("\v", "\n")
        for slide in presentation.slides
        for shape in slide.shapes
        if shape.has_text_frame
    ]


class TestStaticSections:
    def test_problem_statement_themes(self, intake: IntakeData) -> None:
        lines = problem_statement(intake).split("\n")
        assert lines == [
            "• Legacy technology infrastructure limits operational efficiency and growth",
            "• Healthcare industry demands require strategic technology investment",
            "• 6 months implementation timeline requires focused execution",
        ]

    def test_problem_statement_capped(self) -> None:
        busy = IntakeData(
            company_name="Initech",
            industry="Retail",
            business_challenge="Competitors win on digital customer experience; legacy manual process",
            project_type="Transformation",
        )
        assert len(problem_statement(busy).split("\n")) == 5

    def test_assumptions_use_intake(self, intake: IntakeData, minimal_intake: IntakeData) -> None:
        assert "• 6 months timeline assumes full client availability" in assumptions(intake)
        assert "• Timeline assumes full client availability and decisions" in assumptions(minimal_intake)

    def test_client_responsibilities_fixed(self, intake: IntakeData) -> None:
        assert len(client_responsibilities(intake).split("\n")) == 6

    def test_builtins_sorted(self, intake: IntakeData) -> None:
        sections = resolve_static_sections(intake)
        assert [s.id for s in sections] == ["problem_statement", "assumptions", "client_responsibilities"]

    def test_configured_sections_override_and_extend(self, intake: IntakeData) -> None:
        configured = [
            StaticSlideDefinition(
                id="assumptions",
                order=95,
                title="Working Assumptions",
                source="static",
                content="• Fixed text",
                placeholder_mapping={"content": "{ASSUMPTIONS_CONTENT}"},
            ),
            StaticSlideDefinition(
                id="discovery",
                order=5,
                title="What We Heard",
                source="discovery_data",
                placeholder_mapping={"content": "{DISCOVERY_CONTENT}"},
            ),
            StaticSlideDefinition(
                id="unknown_builtin",
                order=96,
                title="Mystery",
                source="template",
                placeholder_mapping={"content": "{MYSTERY}"},
            ),
        ]
        sections = {s.id: s for s in resolve_static_sections(intake, configured)}
        assert sections["assumptions"].content == "• Fixed text"
        assert sections["discovery"].content.startswith("• Acme Health is facing Legacy claims")
        assert sections["unknown_builtin"].content == CONTENT_NOT_AVAILABLE


class TestPlaceholders:
    def test_placeholder_name(self) -> None:
        assert placeholder_name("{OVERVIEW_CONTENT}") == "OVERVIEW_CONTENT"
        assert placeholder_name("OVERVIEW_CONTENT") == "OVERVIEW_CONTENT"

    def test_format_helpers(self) -> None:
        assert format_warnings([]) == ""
        assert format_warnings(["a", "b"]) == "⚠️ Review Notes: a; b"
        assert format_date(datetime(2026, 3, 5)) == "March 5, 2026"

    def test_build_placeholders(self, intake: IntakeData, global_config: GlobalConfig) -> None:
        proposal = _proposal(intake, _overview())
        placeholders = build_placeholders(
            proposal,
            intake,
            global_config,
            resolve_static_sections(intake),
            global_mappings={"{FOOTER}": "{{company_name}} | Confidential"},
        )

        assert placeholders["COMPANY_NAME"] == "Acme Health"
        assert placeholders["PROJECT_TYPE"] == "Cloud Migration Initiative"
        assert placeholders["DATE"] == "March 5, 2026"
        assert placeholders["CONFIDENCE_SCORE"] == "80%"
        assert placeholders["OVERVIEW_CONTENT"] == "• Proposed cloud roadmap\n• Phased delivery"
        assert placeholders["OVERVIEW_TITLE"] == "Overview"
        assert placeholders["OVERVIEW_CONFIDENCE"] == "80%"
        assert placeholders["OVERVIEW_WARNINGS"] == "⚠️ Review Notes: Missing quantifiable metrics"
        assert placeholders["PROBLEM_TITLE"] == "Problem Statement"
        assert placeholders["FOOTER"] == "Acme Health | Confidential"
        # enabled slides missing from the result still get a value
        assert placeholders["SOLUTION_CONTENT"] == CONTENT_NOT_AVAILABLE

    def test_bad_global_mapping_skipped(self, intake: IntakeData, global_config: GlobalConfig) -> None:
        placeholders = build_placeholders(
            _proposal(intake),
            intake,
            global_config,
            [],
            global_mappings={"BROKEN": "{{#open}}", "OK": "{{industry}}"},
        )
        assert "BROKEN" not in placeholders
        assert placeholders["OK"] == "Healthcare"

    def test_optional_fields_defaulted(self, minimal_intake: IntakeData, global_config: GlobalConfig) -> None:
        placeholders = build_placeholders(_proposal(minimal_intake), minimal_intake, global_config, [])
        assert placeholders["TECH_STACK"] == "Not specified"
        assert placeholders["BUDGET_RANGE"] == "TBD"


class TestFilenames:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("Acme Health", "Acme-Health"), ("R&D / Labs, Inc.", "R-D-Labs-Inc"), ("***", "client")],
    )
    def test_sanitize(self, name: str, expected: str) -> None:
        assert sanitize_company_name(name) == expected

    def test_output_basename(self) -> None:
        assert output_basename("Acme Health", 1700000000000) == "proposal-Acme-Health-1700000000000"


class TestDocumentAssembler:
    @pytest.fixture
    def assembler(self) -> DocumentAssembler:
        return DocumentAssembler(clock=lambda: 1700000000.0)

    def test_writes_pptx(
        self, tmp_path: Path, intake: IntakeData, global_config: GlobalConfig, make_pptx, assembler
    ) -> None:
        template = make_pptx(
            tmp_path / "template.pptx",
            ["{COMPANY_NAME}", "{OVERVIEW_CONTENT}", "{LEFTOVER}", "{ASSUMPTIONS_TITLE}"],
        )
        document = assembler.assemble(
            _proposal(intake, _overview()),
            intake,
            _descriptor(tmp_path, template),
            global_config,
            tmp_path / "out",
        )

        assert not document.is_fallback
        assert document.path == tmp_path / "out" / "proposal-Acme-Health-1700000000000.pptx"
        assert document.unreplaced == ("{LEFTOVER}",)
        texts = _deck_text(document.path)
        assert texts[0] == "Acme Health"
        assert texts[1] == "• Proposed cloud roadmap\n• Phased delivery"
        assert texts[3] == "Assumptions"

    def test_missing_template_falls_back_to_text(
        self, tmp_path: Path, intake: IntakeData, global_config: GlobalConfig, assembler
    ) -> None:
        document = assembler.assemble(
            _proposal(intake, _overview()),
            intake,
            _descriptor(tmp_path, tmp_path / "missing.pptx"),
            global_config,
            tmp_path / "out",
        )

        assert document.is_fallback
        assert document.path.name == "proposal-Acme-Health-1700000000000.txt"
        text = document.path.read_text(encoding="utf-8")
        assert text.startswith("SOLUTION PROPOSAL FOR ACME HEALTH\nCloud Migration Initiative\n")
        assert "Generated: March 5, 2026" in text
        assert "OVERVIEW (Confidence: 80%)\n• Proposed cloud roadmap" in text
        assert "PROBLEM STATEMENT\n" in text
        assert text.index("PROBLEM STATEMENT") < text.index("OVERVIEW") < text.index("ASSUMPTIONS")
        assert text.rstrip().endswith("Overall Confidence Score: 80%")

    def test_corrupt_template_falls_back(
        self, tmp_path: Path, intake: IntakeData, global_config: GlobalConfig, assembler
    ) -> None:
        broken = tmp_path / "broken.pptx"
        broken.write_bytes(b"not a zip")
        document = assembler.assemble(
            _proposal(intake), intake, _descriptor(tmp_path, broken), global_config, tmp_path / "out"
        )
        assert document.is_fallback
        assert document.path.suffix == ".txt"

    def test_no_template_falls_back(
        self, tmp_path: Path, intake: IntakeData, global_config: GlobalConfig, assembler
    ) -> None:
        document = assembler.assemble(_proposal(intake), intake, None, global_config, tmp_path)
        assert document.is_fallback

    def test_global_mappings_from_template(
        self, tmp_path: Path, intake: IntakeData, global_config: GlobalConfig, make_pptx, assembler
    ) -> None:
        template = make_pptx(tmp_path / "template.pptx", ["{FOOTER}"])
        descriptor = _descriptor(tmp_path, template, global_mappings={"FOOTER": "{{company_name}} 2026"})
        document = assembler.assemble(_proposal(intake), intake, descriptor, global_config, tmp_path / "out")
        assert _deck_text(document.path) == ["Acme Health 2026"]
