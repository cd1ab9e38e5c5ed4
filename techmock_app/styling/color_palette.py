"""Color palette for the TechMock console supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the console."""

    TEXT_PRIMARY = ThemeColors(light="#111827", dark="#F3F4F6")
    TEXT_MUTED = ThemeColors(light="#6B7280", dark="#9CA3AF")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1F2937")
    BACKGROUND_SECONDARY = ThemeColors(light="#F3F4F6", dark="#111827")

    BORDER_PRIMARY = ThemeColors(light="#D1D5DB", dark="#4B5563")

    # Matches the blue accent of the browser app
    ACCENT = ThemeColors(light="#2563EB", dark="#3B82F6")
    ACCENT_TEXT = ThemeColors(light="#FFFFFF", dark="#FFFFFF")
    BUTTON_HOVER_BG = ThemeColors(light="#E5E7EB", dark="#374151")

    DANGER = ThemeColors(light="#B91C1C", dark="#F87171")
