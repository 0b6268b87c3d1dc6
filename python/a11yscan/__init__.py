# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Rule-based WCAG analysis of HTML markup.

The package exposes three analyzers: :class:`AccessibilityChecker` (structural
rules over a document), :class:`AriaValidator` (role and attribute tables) and
:class:`ColorContrastChecker` (luminance and contrast thresholds).
"""
from __future__ import annotations

from .aria import AriaValidator
from .checker import A11yCheckFailed, A11yWarning, AccessibilityChecker
from .contrast import ColorContrastChecker, InvalidColorFormat
from .types import (
    AriaValidationResult,
    CheckResult,
    ColorContrastResult,
    InvalidWcagLevel,
    Issue,
    Severity,
    SeveritySummary,
    WcagLevel,
)

__version__ = "0.1.0"

SPDX_LICENSE_EXPRESSION = "AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial"


def check_html(markup: str, level: WcagLevel | str = WcagLevel.AA) -> CheckResult:
    """Check ``markup`` against ``level`` with a throwaway checker."""
    return AccessibilityChecker(level).check_html(markup)


__all__ = [
    "A11yCheckFailed",
    "A11yWarning",
    "AccessibilityChecker",
    "AriaValidationResult",
    "AriaValidator",
    "CheckResult",
    "ColorContrastChecker",
    "ColorContrastResult",
    "InvalidColorFormat",
    "InvalidWcagLevel",
    "Issue",
    "SPDX_LICENSE_EXPRESSION",
    "Severity",
    "SeveritySummary",
    "WcagLevel",
    "check_html",
]
