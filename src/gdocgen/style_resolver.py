"""Declarative style resolution for gdocgen.

Maps style intents (plain dataclasses naming what the caller wants) onto
Google Docs API style objects and their field masks. The mapping tables are
declarative so adding a property is a one-line change.

Only fields the caller actually set appear in the output. Emitting a field
with a default value would overwrite formatting the caller never asked to
touch, because the Docs API applies every field named in the mask.

Usage:
    from gdocgen.style_resolver import TextStyleIntent, resolve_text_style

    style, fields = resolve_text_style(TextStyleIntent(bold=True, color="1F4E79"))
    # ({"bold": True, "foregroundColor": {...}}, ["bold", "foregroundColor"])
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gdocgen.errors import InvalidColorError
from gdocgen.theme import COLORS, FONT_FAMILY, FONT_SIZES

_HEX_COLOR = re.compile(r"[0-9A-Fa-f]{6}")


class StyleType(Enum):
    """Types of style conversions supported."""

    BOOL = "bool"  # True -> True
    PT = "pt"  # 12 -> {"magnitude": 12.0, "unit": "PT"}
    FLOAT = "float"  # 150 -> 150.0
    COLOR = "color"  # "FF0000" -> {"color": {"rgbColor": {...}}}
    ENUM = "enum"  # "HEADING_1" -> "HEADING_1"
    ENUM_MAP = "enum_map"  # "center" -> "CENTER"
    FONT = "font"  # "Arial" -> {"fontFamily": "Arial"}
    LINK = "link"  # URL
    BORDER = "border"  # Border(...) -> border object


@dataclass
class StyleProp:
    """Definition of a style property mapping.

    Attributes:
        attr: Attribute name on the intent dataclass
        api_field: Field path in the API request using dot notation for nested
                   fields (e.g., "bold", "link.url")
        style_type: The type of conversion to apply
        enum_map: For ENUM_MAP type, the mapping from intent values to API values
    """

    attr: str
    api_field: str
    style_type: StyleType
    enum_map: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Border:
    """A paragraph or table cell border."""

    width: float
    color: str
    dash_style: str = "SOLID"
    padding: float | None = None


@dataclass(frozen=True)
class TextStyleIntent:
    """Run-level style a caller wants applied. ``None`` means untouched."""

    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None
    color: str | None = None
    background: str | None = None
    link: str | None = None
    font: str | None = None
    size: float | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)


@dataclass(frozen=True)
class ParagraphStyleIntent:
    """Paragraph-level style a caller wants applied."""

    named_style: str | None = None
    alignment: str | None = None
    line_spacing: float | None = None
    space_above: float | None = None
    space_below: float | None = None
    border_top: Border | None = None
    border_bottom: Border | None = None
    border_left: Border | None = None
    border_right: Border | None = None


@dataclass(frozen=True)
class CellStyleIntent:
    """Table cell style a caller wants applied."""

    background: str | None = None
    padding_top: float | None = None
    padding_bottom: float | None = None
    padding_left: float | None = None
    padding_right: float | None = None
    border_top: Border | None = None
    border_bottom: Border | None = None
    border_left: Border | None = None
    border_right: Border | None = None


ALIGNMENT_MAP: dict[str, str] = {
    "left": "START",
    "start": "START",
    "center": "CENTER",
    "right": "END",
    "end": "END",
    "justified": "JUSTIFIED",
}


TEXT_STYLE_PROPS: list[StyleProp] = [
    StyleProp("bold", "bold", StyleType.BOOL),
    StyleProp("italic", "italic", StyleType.BOOL),
    StyleProp("underline", "underline", StyleType.BOOL),
    StyleProp("strikethrough", "strikethrough", StyleType.BOOL),
    StyleProp("font", "weightedFontFamily", StyleType.FONT),
    StyleProp("size", "fontSize", StyleType.PT),
    StyleProp("color", "foregroundColor", StyleType.COLOR),
    StyleProp("background", "backgroundColor", StyleType.COLOR),
    StyleProp("link", "link.url", StyleType.LINK),
]


PARAGRAPH_STYLE_PROPS: list[StyleProp] = [
    StyleProp("named_style", "namedStyleType", StyleType.ENUM),
    StyleProp("alignment", "alignment", StyleType.ENUM_MAP, enum_map=ALIGNMENT_MAP),
    StyleProp("line_spacing", "lineSpacing", StyleType.FLOAT),
    StyleProp("space_above", "spaceAbove", StyleType.PT),
    StyleProp("space_below", "spaceBelow", StyleType.PT),
    StyleProp("border_top", "borderTop", StyleType.BORDER),
    StyleProp("border_bottom", "borderBottom", StyleType.BORDER),
    StyleProp("border_left", "borderLeft", StyleType.BORDER),
    StyleProp("border_right", "borderRight", StyleType.BORDER),
]


TABLE_CELL_STYLE_PROPS: list[StyleProp] = [
    StyleProp("background", "backgroundColor", StyleType.COLOR),
    StyleProp("padding_top", "paddingTop", StyleType.PT),
    StyleProp("padding_bottom", "paddingBottom", StyleType.PT),
    StyleProp("padding_left", "paddingLeft", StyleType.PT),
    StyleProp("padding_right", "paddingRight", StyleType.PT),
    StyleProp("border_top", "borderTop", StyleType.BORDER),
    StyleProp("border_bottom", "borderBottom", StyleType.BORDER),
    StyleProp("border_left", "borderLeft", StyleType.BORDER),
    StyleProp("border_right", "borderRight", StyleType.BORDER),
]


def convert_styles(
    intent: Any,
    prop_defs: list[StyleProp],
) -> tuple[dict[str, Any], list[str]]:
    """Convert a style intent to an API style object using declarative mappings.

    Args:
        intent: A style intent dataclass (text, paragraph or cell)
        prop_defs: List of StyleProp definitions to apply

    Returns:
        Tuple of (style_dict, fields_list) where fields_list holds the
        top-level field names for the fields mask, in declaration order

    Raises:
        InvalidColorError: If a color attribute is not six hex digits
    """
    result: dict[str, Any] = {}
    fields: list[str] = []

    for prop in prop_defs:
        value = getattr(intent, prop.attr, None)
        if value is None:
            continue

        _set_nested(result, prop.api_field, _convert_value(value, prop))
        top_level_field = prop.api_field.split(".")[0]
        if top_level_field not in fields:
            fields.append(top_level_field)

    return result, fields


def resolve_text_style(intent: TextStyleIntent) -> tuple[dict[str, Any], list[str]]:
    """Resolve a run style intent to ``(textStyle, fields)``."""
    return convert_styles(intent, TEXT_STYLE_PROPS)


def resolve_paragraph_style(
    intent: ParagraphStyleIntent,
) -> tuple[dict[str, Any], list[str]]:
    """Resolve a paragraph style intent to ``(paragraphStyle, fields)``."""
    return convert_styles(intent, PARAGRAPH_STYLE_PROPS)


def resolve_cell_style(intent: CellStyleIntent) -> tuple[dict[str, Any], list[str]]:
    """Resolve a table cell style intent to ``(tableCellStyle, fields)``."""
    return convert_styles(intent, TABLE_CELL_STYLE_PROPS)


def neutral_text_style(
    font_family: str = FONT_FAMILY,
    font_size: float = FONT_SIZES["body"],
) -> tuple[dict[str, Any], list[str]]:
    """Build a text style that sets every stylable property to neutral.

    The API has no "unset", so neutral is spelled out. Link and background are
    cleared by naming them in the mask while leaving them out of the style.

    Returns:
        Tuple of (textStyle, fields) covering every text property gdocgen uses
    """
    style: dict[str, Any] = {
        "bold": False,
        "italic": False,
        "underline": False,
        "strikethrough": False,
        "smallCaps": False,
        "baselineOffset": "NONE",
        "weightedFontFamily": {"fontFamily": font_family},
        "fontSize": {"magnitude": float(font_size), "unit": "PT"},
        "foregroundColor": {"color": {"rgbColor": hex_to_rgb(COLORS["black"])}},
    }
    fields = [*style.keys(), "backgroundColor", "link"]
    return style, fields


def _convert_value(value: Any, prop: StyleProp) -> Any:
    """Convert a single intent value based on its StyleType."""
    match prop.style_type:
        case StyleType.BOOL:
            return bool(value)

        case StyleType.PT:
            return {"magnitude": float(value), "unit": "PT"}

        case StyleType.FLOAT:
            return float(value)

        case StyleType.COLOR:
            return {"color": {"rgbColor": hex_to_rgb(value)}}

        case StyleType.ENUM:
            return str(value).upper()

        case StyleType.ENUM_MAP:
            key = str(value).lower()
            return prop.enum_map.get(key, str(value).upper())

        case StyleType.FONT:
            return {"fontFamily": value}

        case StyleType.LINK:
            return value

        case StyleType.BORDER:
            return border_to_api(value)

    raise ValueError(f"Unknown style type: {prop.style_type}")


def _set_nested(d: dict[str, Any], path: str, value: Any) -> None:
    """Set a nested dict value using dot notation path.

    Example:
        >>> d = {}
        >>> _set_nested(d, "link.url", "https://example.com")
        >>> d
        {"link": {"url": "https://example.com"}}
    """
    keys = path.split(".")
    for key in keys[:-1]:
        d = d.setdefault(key, {})
    d[keys[-1]] = value


def hex_to_rgb(hex_color: str) -> dict[str, float]:
    """Convert RRGGBB (optionally prefixed with ``#``) to 0-1 RGB values.

    Raises:
        InvalidColorError: If the input is not exactly six hex digits
    """
    if not isinstance(hex_color, str):
        raise InvalidColorError(repr(hex_color))
    digits = hex_color[1:] if hex_color.startswith("#") else hex_color
    if not _HEX_COLOR.fullmatch(digits):
        raise InvalidColorError(hex_color)

    return {
        "red": int(digits[0:2], 16) / 255.0,
        "green": int(digits[2:4], 16) / 255.0,
        "blue": int(digits[4:6], 16) / 255.0,
    }


def border_to_api(border: Border) -> dict[str, Any]:
    """Convert a Border to the API border object."""
    result: dict[str, Any] = {
        "color": {"color": {"rgbColor": hex_to_rgb(border.color)}},
        "width": {"magnitude": float(border.width), "unit": "PT"},
        "dashStyle": border.dash_style.upper(),
    }
    if border.padding is not None:
        result["padding"] = {"magnitude": float(border.padding), "unit": "PT"}
    return result
