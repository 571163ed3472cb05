"""Tests for templates.py."""

import datetime

import pytest
from pydantic import ValidationError

from gdocgen.compiler import compile_document
from gdocgen.config import Settings
from gdocgen.errors import DocGenError
from gdocgen.sections import HeadingSection, ListSection, ParagraphSection
from gdocgen.templates import (
    BriefContent,
    TemplateInput,
    brief_document,
    build_document,
    document_type_descriptions,
    get_document_type,
    title_page_sections,
)
from gdocgen.theme import COLORS, FONT_SIZES


class TestTitlePage:
    def test_title_only(self):
        sections = title_page_sections("Launch Plan")
        assert len(sections) == 2
        (run,) = sections[0].content
        assert run.text == "Launch Plan"
        assert run.bold is True
        assert run.font_size == FONT_SIZES["title_hero"]
        assert run.color == COLORS["primary_dark"]
        assert sections[-1] == ParagraphSection(content=[])

    def test_subtitle_and_date(self):
        sections = title_page_sections("Launch Plan", "Acme Corp", "March 3, 2025")
        assert [s.content[0].text for s in sections[:3]] == [
            "Launch Plan",
            "Acme Corp",
            "March 3, 2025",
        ]
        assert sections[1].content[0].color == COLORS["text_muted"]
        assert sections[2].content[0].color == COLORS["text_light"]


@pytest.fixture
def content() -> BriefContent:
    return BriefContent(
        executive_summary="We should ship.",
        recommendation="Ship in Q3.",
        rationale=["Demand", "Readiness"],
        next_steps=["Staff the team"],
    )


class TestBrief:
    def test_brief_layout(self, content):
        settings = Settings(_env_file=None, organization="Acme", author="J. Doe")
        spec = brief_document(
            "Launch Plan", content, settings, today=datetime.date(2025, 3, 3)
        )

        assert spec.title_heading is False
        texts = [s.content[0].text for s in spec.sections[:3]]
        assert texts == ["Launch Plan", "Acme", "March 03, 2025 | J. Doe"]
        headings = [s.text for s in spec.sections if isinstance(s, HeadingSection)]
        assert headings == ["Executive Summary", "Recommendation", "Rationale", "Next Steps"]
        lists = [s for s in spec.sections if isinstance(s, ListSection)]
        assert [[i.text for i in s.items] for s in lists] == [
            ["Demand", "Readiness"],
            ["Staff the team"],
        ]

    def test_optional_sections(self, content):
        full = content.model_copy(update={"background": "Context", "timeline": "Six weeks"})
        spec = brief_document(
            "Plan", full, Settings(_env_file=None), today=datetime.date(2025, 1, 1)
        )
        headings = [s.text for s in spec.sections if isinstance(s, HeadingSection)]
        assert "Background" in headings
        assert headings[-1] == "Timeline"
        # No organization: the date directly follows the title
        assert spec.sections[1].content[0].text == "January 01, 2025"

    def test_brief_compiles(self, content):
        settings = Settings(_env_file=None)
        spec = brief_document("Plan", content, settings, today=datetime.date(2025, 1, 1))
        compiled = compile_document(spec, settings=settings)
        assert compiled.final_cursor > 1

    def test_next_steps_required(self):
        with pytest.raises(ValidationError):
            BriefContent(executive_summary="x", recommendation="y", next_steps=[])


class TestDocumentTypes:
    def test_brief_registered(self):
        assert document_type_descriptions()["brief"].startswith("Executive brief")
        assert get_document_type("brief").content_model is BriefContent

    def test_unknown_type(self):
        with pytest.raises(DocGenError, match="Unknown document type"):
            get_document_type("memo")

    def test_build_document_validates_content(self):
        data = TemplateInput(title="Plan", content={"executive_summary": "x"})
        with pytest.raises(ValidationError):
            build_document("brief", data, Settings(_env_file=None))

    def test_build_document(self):
        data = TemplateInput(
            title="Plan",
            content={
                "executive_summary": "x",
                "recommendation": "y",
                "next_steps": ["z"],
            },
        )
        spec = build_document(
            "brief", data, Settings(_env_file=None), today=datetime.date(2025, 1, 1)
        )
        assert spec.title == "Plan"
        assert spec.title_heading is False
