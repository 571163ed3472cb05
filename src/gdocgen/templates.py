"""Ready-made section sequences.

``title_page_sections`` builds the hero title block used at the top of
generated documents. ``brief_document`` composes an executive brief from a
``BriefContent`` model. ``DOCUMENT_TYPES`` registers the generators
reachable by name from the command line.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gdocgen.config import Settings
from gdocgen.errors import DocGenError
from gdocgen.sections import (
    DocumentSpec,
    HeadingSection,
    ListItem,
    ListSection,
    ParagraphSection,
    Run,
    Section,
)
from gdocgen.theme import COLORS, FONT_SIZES


def title_page_sections(
    title: str,
    subtitle: str | None = None,
    date: str | None = None,
) -> list[Section]:
    """Large title, optional muted subtitle and date, then a spacer paragraph."""
    sections: list[Section] = [
        ParagraphSection(
            content=[
                Run(
                    text=title,
                    bold=True,
                    font_size=FONT_SIZES["title_hero"],
                    color=COLORS["primary_dark"],
                )
            ]
        )
    ]
    if subtitle:
        sections.append(
            ParagraphSection(
                content=[
                    Run(
                        text=subtitle,
                        font_size=FONT_SIZES["title_small"],
                        color=COLORS["text_muted"],
                    )
                ]
            )
        )
    if date:
        sections.append(
            ParagraphSection(
                content=[
                    Run(text=date, font_size=FONT_SIZES["body"], color=COLORS["text_light"])
                ]
            )
        )
    sections.append(ParagraphSection(content=[]))
    return sections


class BriefContent(BaseModel):
    """Input for an executive brief."""

    model_config = ConfigDict(frozen=True)

    executive_summary: str
    background: str | None = None
    recommendation: str
    rationale: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(min_length=1)
    timeline: str | None = None


def _bullets(items: list[str]) -> ListSection:
    return ListSection(kind="bullet", items=[ListItem(text=item) for item in items])


def brief_sections(
    title: str,
    content: BriefContent,
    settings: Settings,
    *,
    today: datetime.date | None = None,
) -> list[Section]:
    """Sections of an executive brief, title page first."""
    date = (today or datetime.date.today()).strftime(settings.date_format)
    if settings.author:
        date = f"{date} | {settings.author}"

    sections = title_page_sections(title, settings.organization or None, date)
    sections += [
        HeadingSection(level=1, text="Executive Summary"),
        ParagraphSection(content=content.executive_summary),
    ]
    if content.background:
        sections += [
            HeadingSection(level=1, text="Background"),
            ParagraphSection(content=content.background),
        ]
    sections += [
        HeadingSection(level=1, text="Recommendation"),
        ParagraphSection(content=content.recommendation),
    ]
    if content.rationale:
        sections += [HeadingSection(level=2, text="Rationale"), _bullets(content.rationale)]
    sections += [HeadingSection(level=1, text="Next Steps"), _bullets(content.next_steps)]
    if content.timeline:
        sections += [
            HeadingSection(level=2, text="Timeline"),
            ParagraphSection(content=content.timeline),
        ]
    return sections


def brief_document(
    title: str,
    content: BriefContent,
    settings: Settings,
    *,
    today: datetime.date | None = None,
) -> DocumentSpec:
    """A complete brief. The title page replaces the plain title heading."""
    return DocumentSpec(
        title=title,
        sections=brief_sections(title, content, settings, today=today),
        title_heading=False,
    )


@dataclass(frozen=True)
class DocumentType:
    """A named generator: content model plus the function that lays it out."""

    name: str
    description: str
    content_model: type[BaseModel]
    build: Callable[..., DocumentSpec]


DOCUMENT_TYPES: dict[str, DocumentType] = {
    "brief": DocumentType(
        name="brief",
        description="Executive brief with recommendation and next steps",
        content_model=BriefContent,
        build=brief_document,
    ),
}


class TemplateInput(BaseModel):
    """Input file for ``--type``: a title plus type-specific content."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    content: dict[str, Any]


def document_type_descriptions() -> dict[str, str]:
    return {name: t.description for name, t in sorted(DOCUMENT_TYPES.items())}


def get_document_type(name: str) -> DocumentType:
    """Look up a registered document type.

    Raises:
        DocGenError: If no type of that name is registered
    """
    try:
        return DOCUMENT_TYPES[name]
    except KeyError:
        raise DocGenError(f"Unknown document type: {name}") from None


def build_document(
    doc_type: str,
    data: TemplateInput,
    settings: Settings,
    *,
    today: datetime.date | None = None,
) -> DocumentSpec:
    """Validate ``data.content`` against the type's model and build the document."""
    document_type = get_document_type(doc_type)
    content = document_type.content_model.model_validate(data.content)
    return document_type.build(data.title, content, settings, today=today)
