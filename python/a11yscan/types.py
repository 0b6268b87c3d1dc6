# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class InvalidWcagLevel(ValueError):
    pass


class Severity(str, Enum):
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


class WcagLevel(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"

    @property
    def rank(self) -> int:
        return {"A": 1, "AA": 2, "AAA": 3}[self.value]

    @classmethod
    def parse(cls, value: WcagLevel | str) -> WcagLevel:
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            raise InvalidWcagLevel(
                f"Unsupported WCAG level {value!r} (expected A, AA or AAA)"
            ) from None


@dataclass(frozen=True)
class Issue:
    id: str
    severity: Severity
    message: str
    wcag_level: WcagLevel
    wcag_criteria: str
    element: str | None = None
    suggestion: str | None = None
    help_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "severity": self.severity.value,
            "message": self.message,
            "wcag_level": self.wcag_level.value,
            "wcag_criteria": self.wcag_criteria,
        }
        if self.element is not None:
            out["element"] = self.element
        if self.suggestion is not None:
            out["suggestion"] = self.suggestion
        if self.help_url is not None:
            out["help_url"] = self.help_url
        return out


@dataclass(frozen=True)
class SeveritySummary:
    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0

    @classmethod
    def count(cls, issues: Iterable[Issue]) -> SeveritySummary:
        counts = {s.value: 0 for s in Severity}
        for issue in issues:
            counts[issue.severity.value] += 1
        return cls(**counts)

    def to_dict(self) -> dict[str, int]:
        return {
            "critical": self.critical,
            "serious": self.serious,
            "moderate": self.moderate,
            "minor": self.minor,
        }


@dataclass(frozen=True)
class CheckResult:
    """Aggregate report for one document.

    Build through :meth:`from_issues` so the counts always agree with the
    buckets; instances are never mutated after construction.
    """

    passed: bool
    errors: tuple[Issue, ...]
    warnings: tuple[Issue, ...]
    info: tuple[Issue, ...]
    total_issues: int
    summary: SeveritySummary
    wcag_level: WcagLevel = WcagLevel.AA

    @classmethod
    def from_issues(
        cls,
        errors: Iterable[Issue] = (),
        warnings: Iterable[Issue] = (),
        info: Iterable[Issue] = (),
        *,
        wcag_level: WcagLevel | str = WcagLevel.AA,
    ) -> CheckResult:
        errs = tuple(errors)
        warns = tuple(warnings)
        infos = tuple(info)
        return cls(
            passed=not errs,
            errors=errs,
            warnings=warns,
            info=infos,
            total_issues=len(errs) + len(warns) + len(infos),
            summary=SeveritySummary.count(errs + warns + infos),
            wcag_level=WcagLevel.parse(wcag_level),
        )

    @property
    def issues(self) -> tuple[Issue, ...]:
        return self.errors + self.warnings + self.info

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "wcag_level": self.wcag_level.value,
            "total_issues": self.total_issues,
            "summary": self.summary.to_dict(),
            "errors": [i.to_dict() for i in self.errors],
            "warnings": [i.to_dict() for i in self.warnings],
            "info": [i.to_dict() for i in self.info],
        }


@dataclass(frozen=True)
class AriaValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, errors: Iterable[str] = (), warnings: Iterable[str] = ()) -> AriaValidationResult:
        errs = tuple(errors)
        return cls(is_valid=not errs, errors=errs, warnings=tuple(warnings))

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ColorContrastResult:
    ratio: float
    passes_aa: bool
    passes_aaa: bool
    wcag_level: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ratio": self.ratio,
            "passes_aa": self.passes_aa,
            "passes_aaa": self.passes_aaa,
            "wcag_level": self.wcag_level,
        }
