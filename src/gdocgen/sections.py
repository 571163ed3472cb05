"""Structured input models for document generation.

A document is a title plus an ordered list of sections. No markup is parsed:
every piece of formatting is explicit in the data. Field names are snake_case
with camelCase aliases so JSON produced for the Docs API conventions loads
unchanged.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gdocgen.style_resolver import TextStyleIntent
from gdocgen.theme import MONOSPACE_FAMILY

Alignment = Literal["left", "center", "right"]


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


def _runs_to_text(value: Any) -> Any:
    """Flatten a run list (or a single run dict) into plain text."""
    if isinstance(value, list):
        return "".join(
            item.get("text", "") if isinstance(item, dict) else str(item)
            for item in value
        )
    if isinstance(value, dict):
        return value.get("text", "")
    return value


# --- Runs ---


class Run(_Model):
    """Text with explicit styling. Runs concatenate with no separator."""

    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    link: str | None = None
    color: str | None = None
    background_color: str | None = Field(None, alias="backgroundColor")
    font: str | None = None
    font_size: float | None = Field(None, alias="fontSize", gt=0)

    def to_intent(self) -> TextStyleIntent:
        """Style intent naming only the properties this run asks for."""
        return TextStyleIntent(
            bold=True if self.bold else None,
            italic=True if self.italic else None,
            underline=True if self.underline else None,
            strikethrough=True if self.strikethrough else None,
            color=self.color,
            background=self.background_color,
            link=self.link,
            font=MONOSPACE_FAMILY if self.code else self.font,
            size=self.font_size,
        )


def _coerce_runs(value: Any) -> Any:
    if isinstance(value, str):
        return [{"text": value}]
    return value


# --- Sections ---


class HeadingSection(_Model):
    type: Literal["heading"] = "heading"
    level: int = Field(1, ge=1, le=6)
    text: str


class ParagraphSection(_Model):
    type: Literal["paragraph"] = "paragraph"
    content: list[Run]
    alignment: Literal["left", "center", "right", "justified"] | None = None
    space_before: float | None = Field(None, alias="spaceBefore", ge=0)
    space_after: float | None = Field(None, alias="spaceAfter", ge=0)
    # Percentage: 100 = single, 150 = 1.5, 200 = double
    line_spacing: float | None = Field(None, alias="lineSpacing", gt=0)

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> Any:
        return _coerce_runs(value)


class ListItem(_Model):
    text: str
    level: int = Field(0, ge=0, le=8)

    @model_validator(mode="before")
    @classmethod
    def _from_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"text": data, "level": 0}
        if isinstance(data, dict) and "text" not in data and "content" in data:
            data = {**data, "text": _runs_to_text(data["content"])}
        return data


class ListSection(_Model):
    type: Literal["list"] = "list"
    kind: Literal["bullet", "numbered"] = "bullet"
    items: list[ListItem]
    list_style: (
        Literal["decimal", "legal", "decimal_nested", "upper_alpha", "upper_roman"]
        | None
    ) = Field(None, alias="listStyle")


class TableCell(_Model):
    text: str = ""
    bold: bool | None = None
    background_color: str | None = Field(None, alias="backgroundColor")
    alignment: Alignment | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"text": data}
        if isinstance(data, dict) and "text" not in data and "content" in data:
            data = {**data, "text": _runs_to_text(data["content"])}
        return data


class TableSection(_Model):
    type: Literal["table"] = "table"
    headers: list[str] = Field(min_length=1)
    rows: list[list[TableCell]] = Field(default_factory=list)
    # Percentages of the content width, e.g. [30, 50, 20]
    column_widths: list[float] | None = Field(None, alias="columnWidths")

    @model_validator(mode="after")
    def _check_geometry(self) -> TableSection:
        cols = len(self.headers)
        for i, row in enumerate(self.rows):
            if len(row) > cols:
                raise ValueError(f"Row {i} has {len(row)} cells but only {cols} headers")
        if self.column_widths is not None:
            if len(self.column_widths) != cols:
                raise ValueError(
                    f"columnWidths has {len(self.column_widths)} entries, expected {cols}"
                )
            if any(w <= 0 for w in self.column_widths):
                raise ValueError("columnWidths entries must be positive")
        return self


class CalloutSection(_Model):
    type: Literal["callout"] = "callout"
    style: Literal["info", "warning", "critical", "success"] = "info"
    content: str

    @field_validator("content", mode="before")
    @classmethod
    def _flatten_content(cls, value: Any) -> Any:
        return _runs_to_text(value)


class CodeBlockSection(_Model):
    type: Literal["code_block"] = "code_block"
    content: str
    language: str | None = None


class HorizontalRuleSection(_Model):
    type: Literal["horizontal_rule"] = "horizontal_rule"


class PageBreakSection(_Model):
    type: Literal["page_break"] = "page_break"


class ImageSection(_Model):
    type: Literal["image"] = "image"
    url: str | None = None
    file_path: str | None = Field(None, alias="filePath")
    width: float | None = Field(None, gt=0)
    height: float | None = Field(None, gt=0)
    alignment: Alignment | None = None

    @model_validator(mode="after")
    def _check_source(self) -> ImageSection:
        if not self.url and not self.file_path:
            raise ValueError("image requires url or filePath")
        return self


Section = Annotated[
    HeadingSection
    | ParagraphSection
    | ListSection
    | TableSection
    | CalloutSection
    | CodeBlockSection
    | HorizontalRuleSection
    | PageBreakSection
    | ImageSection,
    Field(discriminator="type"),
]

# Section type aliases accepted on input
LEGACY_SECTION_TYPES: dict[str, dict[str, str]] = {
    "bullet_list": {"type": "list", "kind": "bullet"},
    "numbered_list": {"type": "list", "kind": "numbered"},
    "code": {"type": "code_block"},
    "rule": {"type": "horizontal_rule"},
}


def _normalize_section(raw: Any) -> Any:
    if isinstance(raw, dict) and raw.get("type") in LEGACY_SECTION_TYPES:
        return {**raw, **LEGACY_SECTION_TYPES[raw["type"]]}
    return raw


# --- Document ---


class HeaderFooterOptions(_Model):
    text: str | None = None
    include_page_number: bool = Field(False, alias="includePageNumber")
    alignment: Alignment | None = None

    @model_validator(mode="after")
    def _check_not_empty(self) -> HeaderFooterOptions:
        if not self.text and not self.include_page_number:
            raise ValueError("header/footer needs text or includePageNumber")
        return self


class DocumentSpec(_Model):
    """Complete input for one generated document."""

    title: str = Field(min_length=1)
    sections: list[Section] = Field(default_factory=list)
    header: HeaderFooterOptions | None = None
    footer: HeaderFooterOptions | None = None
    # Insert the title as a HEADING_1 paragraph before the sections
    title_heading: bool = Field(True, alias="titleHeading")

    @field_validator("sections", mode="before")
    @classmethod
    def _normalize_sections(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_normalize_section(item) for item in value]
        return value
