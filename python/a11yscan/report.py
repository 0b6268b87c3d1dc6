# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from .types import CheckResult, Issue

REPORT_SCHEMA = "a11yscan.report.v1"
_RULE = "=" * 55


def _schema_path() -> Path:
    return Path(__file__).resolve().parent / "schemas" / f"{REPORT_SCHEMA}.schema.json"


@lru_cache(maxsize=1)
def load_report_schema() -> dict[str, Any]:
    return json.loads(_schema_path().read_text(encoding="utf-8"))


def result_to_dict(result: CheckResult) -> dict[str, Any]:
    return {"schema": REPORT_SCHEMA, **result.to_dict()}


def result_to_json(result: CheckResult, *, indent: int | None = 2) -> str:
    return json.dumps(result_to_dict(result), indent=indent, ensure_ascii=True)


def validate_report(payload: dict[str, Any]) -> None:
    """Raise ``jsonschema.ValidationError`` if ``payload`` breaks the report schema."""
    import jsonschema  # type: ignore

    jsonschema.Draft202012Validator(load_report_schema()).validate(payload)


def _issue_lines(index: int, issue: Issue, *, verbose: bool, with_links: bool) -> list[str]:
    lines = [
        f"{index}. [{issue.severity.value.upper()}] {issue.message}",
        f"   WCAG: {issue.wcag_level.value} - {issue.wcag_criteria}",
    ]
    if verbose and issue.element:
        element = issue.element if len(issue.element) <= 100 else issue.element[:100] + "..."
        lines.append(f"   Element: {element}")
    if issue.suggestion:
        lines.append(f"   Suggestion: {issue.suggestion}")
    if with_links and issue.help_url:
        lines.append(f"   Learn more: {issue.help_url}")
    lines.append("")
    return lines


def render_text(result: CheckResult, *, verbose: bool = False) -> str:
    summary = result.summary
    lines = [_RULE, ""]
    if result.passed:
        lines.append("All accessibility checks passed!")
    else:
        lines.append("Accessibility issues found")
    lines += [
        "",
        f"WCAG target: {result.wcag_level.value}",
        "Summary:",
        f"  Total Issues: {result.total_issues}",
        f"  Errors: {len(result.errors)}",
        f"  Warnings: {len(result.warnings)}",
        f"  Info: {len(result.info)}",
        "",
        "By Severity:",
        f"  Critical: {summary.critical}",
        f"  Serious: {summary.serious}",
        f"  Moderate: {summary.moderate}",
        f"  Minor: {summary.minor}",
        "",
    ]
    sections = (
        ("ERRORS", result.errors, True),
        ("WARNINGS", result.warnings, False),
        ("INFO", result.info, False),
    )
    for title, issues, with_links in sections:
        if not issues:
            continue
        lines += [_RULE, f"{title}:", ""]
        for idx, issue in enumerate(issues, start=1):
            lines += _issue_lines(idx, issue, verbose=verbose, with_links=with_links)
    lines.append(_RULE)
    return "\n".join(lines) + "\n"
