# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""WCAG 2.x contrast-ratio math (success criteria 1.4.3 and 1.4.6).

Colors are 6-digit hex strings, with or without a leading ``#``. Font sizes
are in points.
"""
from __future__ import annotations

import re

from .types import ColorContrastResult


class InvalidColorFormat(ValueError):
    def __init__(self, color: object) -> None:
        super().__init__(f"Invalid hex color {color!r} (expected RRGGBB or #RRGGBB)")
        self.color = color


_RE_HEX6 = re.compile(r"#?([0-9a-fA-F]{6})")

AA_NORMAL = 4.5
AA_LARGE = 3.0
AAA_NORMAL = 7.0
AAA_LARGE = 4.5

LARGE_TEXT_PT = 18.0
LARGE_BOLD_TEXT_PT = 14.0


def _fmt_ratio(value: float) -> str:
    return f"{value:g}:1"


class ColorContrastChecker:
    @staticmethod
    def parse_hex(color: str) -> tuple[int, int, int]:
        if not isinstance(color, str):
            raise InvalidColorFormat(color)
        match = _RE_HEX6.fullmatch(color.strip())
        if match is None:
            raise InvalidColorFormat(color)
        digits = match.group(1)
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)

    @staticmethod
    def _linearize(channel: int) -> float:
        v = channel / 255.0
        if v <= 0.03928:
            return v / 12.92
        return ((v + 0.055) / 1.055) ** 2.4

    @classmethod
    def relative_luminance(cls, color: str) -> float:
        r, g, b = cls.parse_hex(color)
        return (
            0.2126 * cls._linearize(r)
            + 0.7152 * cls._linearize(g)
            + 0.0722 * cls._linearize(b)
        )

    @classmethod
    def calculate_contrast_ratio(cls, foreground: str, background: str) -> float:
        l1 = cls.relative_luminance(foreground)
        l2 = cls.relative_luminance(background)
        lighter, darker = max(l1, l2), min(l1, l2)
        return round((lighter + 0.05) / (darker + 0.05), 2)

    @staticmethod
    def is_large_text(font_size: float = 16, bold: bool = False) -> bool:
        size = float(font_size)
        return size >= LARGE_TEXT_PT or (bool(bold) and size >= LARGE_BOLD_TEXT_PT)

    @classmethod
    def thresholds(cls, font_size: float = 16, bold: bool = False) -> tuple[float, float]:
        """Return the ``(AA, AAA)`` minimum ratios for the given text metrics."""
        if cls.is_large_text(font_size, bold):
            return AA_LARGE, AAA_LARGE
        return AA_NORMAL, AAA_NORMAL

    @classmethod
    def check_contrast(
        cls,
        foreground: str,
        background: str,
        font_size: float = 16,
        bold: bool = False,
    ) -> ColorContrastResult:
        ratio = cls.calculate_contrast_ratio(foreground, background)
        aa_min, aaa_min = cls.thresholds(font_size, bold)
        passes_aa = ratio >= aa_min
        passes_aaa = ratio >= aaa_min
        if passes_aaa:
            level = "AAA"
        elif passes_aa:
            level = "AA"
        else:
            level = "Fail"
        return ColorContrastResult(
            ratio=ratio,
            passes_aa=passes_aa,
            passes_aaa=passes_aaa,
            wcag_level=level,
        )

    @classmethod
    def get_recommended_ratio(cls, font_size: float = 16, bold: bool = False) -> str:
        aa_min, aaa_min = cls.thresholds(font_size, bold)
        kind = "large text" if cls.is_large_text(font_size, bold) else "normal text"
        return (
            f"For {kind}: minimum {_fmt_ratio(aa_min)} (WCAG AA), "
            f"enhanced {_fmt_ratio(aaa_min)} (WCAG AAA)"
        )
