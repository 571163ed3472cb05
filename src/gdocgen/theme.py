"""Palette and typography used by the block translators.

Colors are hex strings without ``#``; sizes are points.
"""

from __future__ import annotations

from dataclasses import dataclass

COLORS: dict[str, str] = {
    # Primary
    "primary_dark": "1F4E79",
    "primary_accent": "D6E3F0",
    # Neutral
    "black": "000000",
    "border": "CCCCCC",
    "header_cell": "D9D9D9",
    "code_block": "F5F5F5",
    # Text
    "text_muted": "888888",
    "text_light": "999999",
    # Severity
    "critical_bg": "FDECEA",
    "critical_border": "EA4335",
    "critical_text": "B71C1C",
    "high_bg": "FEF7E0",
    "high_border": "F9AB00",
    "high_text": "E65100",
    "low_bg": "E8F4EA",
    "low_border": "34A853",
    "low_text": "1B5E20",
    # Callouts
    "info_bg": "D6E3F0",
    "info_border": "1F4E79",
    "info_text": "1F4E79",
}

FONT_FAMILY = "Arial"
MONOSPACE_FAMILY = "Consolas"

FONT_SIZES: dict[str, float] = {
    "title_hero": 28,
    "title_small": 20,
    "body": 11,
    "code": 10,
}

# US Letter (8.5in) minus two 1in margins
PAGE_MARGIN_PT = 72.0
CONTENT_WIDTH_PT = 468.0


@dataclass(frozen=True)
class CalloutColors:
    """Background, left border and text color of a callout box."""

    background: str
    border: str
    text: str


CALLOUT_COLORS: dict[str, CalloutColors] = {
    "info": CalloutColors(COLORS["info_bg"], COLORS["info_border"], COLORS["info_text"]),
    "warning": CalloutColors(
        COLORS["high_bg"], COLORS["high_border"], COLORS["high_text"]
    ),
    "critical": CalloutColors(
        COLORS["critical_bg"], COLORS["critical_border"], COLORS["critical_text"]
    ),
    "success": CalloutColors(COLORS["low_bg"], COLORS["low_border"], COLORS["low_text"]),
}
