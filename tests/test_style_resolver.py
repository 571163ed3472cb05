"""Tests for style_resolver.py."""

import pytest

from gdocgen.errors import ErrorKind, InvalidColorError
from gdocgen.style_resolver import (
    Border,
    CellStyleIntent,
    ParagraphStyleIntent,
    TextStyleIntent,
    border_to_api,
    hex_to_rgb,
    neutral_text_style,
    resolve_cell_style,
    resolve_paragraph_style,
    resolve_text_style,
)


class TestHexToRgb:
    def test_plain_hex(self):
        assert hex_to_rgb("FF0000") == {"red": 1.0, "green": 0.0, "blue": 0.0}

    def test_hash_prefix_and_lowercase(self):
        assert hex_to_rgb("#ff8000") == hex_to_rgb("FF8000")

    def test_values_in_unit_range(self):
        rgb = hex_to_rgb("1F4E79")
        assert rgb["red"] == pytest.approx(0x1F / 255)
        assert rgb["green"] == pytest.approx(0x4E / 255)
        assert rgb["blue"] == pytest.approx(0x79 / 255)

    @pytest.mark.parametrize("value", ["FFF", "GG0000", "#12345", "1234567", "", "##FF0000"])
    def test_malformed_raises(self, value):
        with pytest.raises(InvalidColorError) as exc_info:
            hex_to_rgb(value)
        assert exc_info.value.kind is ErrorKind.INVALID_COLOR
        assert exc_info.value.value == value

    def test_non_string_raises(self):
        with pytest.raises(InvalidColorError):
            hex_to_rgb(0xFF0000)  # type: ignore[arg-type]


class TestTextStyle:
    def test_only_requested_fields(self):
        style, fields = resolve_text_style(TextStyleIntent(bold=True))
        assert style == {"bold": True}
        assert fields == ["bold"]

    def test_empty_intent(self):
        assert resolve_text_style(TextStyleIntent()) == ({}, [])
        assert TextStyleIntent().is_empty()

    def test_explicit_false_is_emitted(self):
        style, fields = resolve_text_style(TextStyleIntent(italic=False))
        assert style == {"italic": False}
        assert fields == ["italic"]

    def test_nested_link_uses_top_level_field(self):
        style, fields = resolve_text_style(TextStyleIntent(link="https://example.com"))
        assert style == {"link": {"url": "https://example.com"}}
        assert fields == ["link"]

    def test_font_size_and_color(self):
        style, fields = resolve_text_style(
            TextStyleIntent(font="Consolas", size=10, color="000000")
        )
        assert style["weightedFontFamily"] == {"fontFamily": "Consolas"}
        assert style["fontSize"] == {"magnitude": 10.0, "unit": "PT"}
        assert style["foregroundColor"] == {
            "color": {"rgbColor": {"red": 0.0, "green": 0.0, "blue": 0.0}}
        }
        assert fields == ["weightedFontFamily", "fontSize", "foregroundColor"]

    def test_invalid_color_is_not_dropped(self):
        with pytest.raises(InvalidColorError):
            resolve_text_style(TextStyleIntent(background="blue"))

    def test_idempotent(self):
        intent = TextStyleIntent(bold=True, underline=True, color="#1F4E79", size=12)
        first = resolve_text_style(intent)
        second = resolve_text_style(intent)
        assert first == second
        assert intent == TextStyleIntent(
            bold=True, underline=True, color="#1F4E79", size=12
        )


class TestParagraphStyle:
    def test_named_style_and_alignment(self):
        style, fields = resolve_paragraph_style(
            ParagraphStyleIntent(named_style="heading_2", alignment="center")
        )
        assert style == {"namedStyleType": "HEADING_2", "alignment": "CENTER"}
        assert fields == ["namedStyleType", "alignment"]

    @pytest.mark.parametrize(
        ("alignment", "expected"),
        [("left", "START"), ("right", "END"), ("justified", "JUSTIFIED")],
    )
    def test_alignment_map(self, alignment, expected):
        style, _ = resolve_paragraph_style(ParagraphStyleIntent(alignment=alignment))
        assert style["alignment"] == expected

    def test_spacing(self):
        style, fields = resolve_paragraph_style(
            ParagraphStyleIntent(space_above=6, space_below=12, line_spacing=150)
        )
        assert style == {
            "lineSpacing": 150.0,
            "spaceAbove": {"magnitude": 6.0, "unit": "PT"},
            "spaceBelow": {"magnitude": 12.0, "unit": "PT"},
        }
        assert fields == ["lineSpacing", "spaceAbove", "spaceBelow"]

    def test_border(self):
        border = Border(width=1, color="CCCCCC", padding=8)
        style, fields = resolve_paragraph_style(ParagraphStyleIntent(border_bottom=border))
        assert fields == ["borderBottom"]
        assert style["borderBottom"] == border_to_api(border)


class TestCellStyle:
    def test_background_and_padding(self):
        style, fields = resolve_cell_style(
            CellStyleIntent(background="D9D9D9", padding_left=8)
        )
        assert fields == ["backgroundColor", "paddingLeft"]
        assert style["paddingLeft"] == {"magnitude": 8.0, "unit": "PT"}

    def test_border_without_padding(self):
        result = border_to_api(Border(width=0.5, color="CCCCCC", dash_style="dot"))
        assert result["dashStyle"] == "DOT"
        assert result["width"] == {"magnitude": 0.5, "unit": "PT"}
        assert "padding" not in result


class TestNeutralTextStyle:
    def test_spells_out_every_property(self):
        style, fields = neutral_text_style("Arial", 11)
        assert style["bold"] is False
        assert style["italic"] is False
        assert style["underline"] is False
        assert style["strikethrough"] is False
        assert style["baselineOffset"] == "NONE"
        assert style["weightedFontFamily"] == {"fontFamily": "Arial"}
        assert style["fontSize"] == {"magnitude": 11.0, "unit": "PT"}
        assert set(style) <= set(fields)

    def test_clears_link_and_background_through_mask(self):
        style, fields = neutral_text_style()
        assert "link" in fields
        assert "backgroundColor" in fields
        assert "link" not in style
        assert "backgroundColor" not in style
