# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Structural WCAG checks over raw markup.

The markup is tokenized with :class:`html.parser.HTMLParser` into a flat
:class:`MarkupFacts` record; each rule reads those facts and emits issues. No
tree is built and no styles are computed: colors are only read from inline
``style`` attributes.
"""
from __future__ import annotations

import re
import warnings
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Any, Callable, Iterable

from .aria import AriaValidator
from .contrast import ColorContrastChecker
from .types import CheckResult, Issue, Severity, WcagLevel


ERROR = "error"
WARNING = "warning"
INFO = "info"

HELP_BASE_URL = "https://www.w3.org/WAI/WCAG21/Understanding/"
_UNDERSTANDING = {
    "1.1.1": "non-text-content",
    "1.3.1": "info-and-relationships",
    "1.4.3": "contrast-minimum",
    "1.4.6": "contrast-enhanced",
    "2.4.3": "focus-order",
    "2.4.4": "link-purpose-in-context",
    "3.1.1": "language-of-page",
    "4.1.2": "name-role-value",
}

VAGUE_LINK_TEXT = frozenset(
    {
        "click here",
        "click",
        "here",
        "read more",
        "learn more",
        "more",
        "more...",
        "link",
        "this link",
        "go",
    }
)

_HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
_FORM_CONTROL_TAGS = {"input", "select", "textarea"}
_DECORATIVE_ROLES = {"presentation", "none"}

# Points assumed for text without an inline font-size (16px).
DEFAULT_FONT_SIZE_PT = 12.0

_RE_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})(?![0-9a-fA-F])")
_RE_FONT_SIZE = re.compile(r"^(\d+(?:\.\d+)?)\s*(pt|px)$", re.IGNORECASE)


class A11yWarning(UserWarning):
    pass


class A11yCheckFailed(ValueError):
    def __init__(self, message: str, result: CheckResult) -> None:
        super().__init__(message)
        self.result = result


def help_url(criteria: str) -> str | None:
    first = criteria.split(",")[0].strip()
    slug = _UNDERSTANDING.get(first)
    return f"{HELP_BASE_URL}{slug}.html" if slug else None


def _norm_text(value: str | None) -> str:
    return " ".join(str(value or "").split()).strip()


def _idrefs(value: str | None) -> list[str]:
    return [t for t in str(value or "").split() if t.strip()]


def _int_or_none(value: str | None) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _style_declarations(style: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for decl in style.split(";"):
        name, sep, value = decl.partition(":")
        if not sep:
            continue
        value = value.replace("!important", "").strip()
        if name.strip() and value:
            out[name.strip().lower()] = value
    return out


def _hex_color(value: str | None) -> str | None:
    if not value:
        return None
    match = _RE_HEX_COLOR.search(value)
    if match is None:
        return None
    digits = match.group(0)[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return "#" + digits.upper()


def _font_size_pt(value: str | None) -> float:
    match = _RE_FONT_SIZE.match((value or "").strip())
    if match is None:
        return DEFAULT_FONT_SIZE_PT
    size = float(match.group(1))
    return size * 0.75 if match.group(2).lower() == "px" else size


def _is_bold(value: str | None) -> bool:
    text = (value or "").strip().lower()
    if text in {"bold", "bolder"}:
        return True
    weight = _int_or_none(text)
    return weight is not None and weight >= 700


@dataclass
class MarkupFacts:
    has_html: bool = False
    html_lang: str | None = None
    html_element: str | None = None
    images: list[dict[str, Any]] = field(default_factory=list)
    headings: list[tuple[int, str]] = field(default_factory=list)
    form_controls: list[dict[str, Any]] = field(default_factory=list)
    label_for_targets: set[str] = field(default_factory=set)
    links: list[dict[str, Any]] = field(default_factory=list)
    main_count: int = 0
    positive_tabindex: list[tuple[int, str]] = field(default_factory=list)
    role_elements: list[dict[str, Any]] = field(default_factory=list)
    styled_elements: list[tuple[str, dict[str, str]]] = field(default_factory=list)


class _P(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.facts = MarkupFacts()
        self._label_depth = 0
        self._open_links: list[dict[str, Any]] = []

    def handle_starttag(self, tag: str, attrs_in: list[tuple[str, str | None]]) -> None:
        self._tag(tag, attrs_in, self_closing=False)

    def handle_startendtag(self, tag: str, attrs_in: list[tuple[str, str | None]]) -> None:
        self._tag(tag, attrs_in, self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        t = tag.lower()
        if t == "label" and self._label_depth > 0:
            self._label_depth -= 1
        elif t == "a" and self._open_links:
            self.facts.links.append(self._open_links.pop())

    def handle_data(self, data: str) -> None:
        for link in self._open_links:
            link["chunks"].append(data)

    def close(self) -> None:
        super().close()
        # Unclosed anchors still count; their text runs to end of input.
        while self._open_links:
            self.facts.links.append(self._open_links.pop())

    def _tag(self, tag: str, attrs_in: list[tuple[str, str | None]], *, self_closing: bool) -> None:
        t = tag.lower()
        attrs = {k.lower(): (v or "") for k, v in attrs_in}
        element = self.get_starttag_text() or f"<{t}>"
        facts = self.facts
        role = attrs.get("role", "").strip().lower()

        if t == "html":
            facts.has_html = True
            facts.html_element = element
            lang = attrs.get("lang", "").strip()
            facts.html_lang = lang or None
        if t == "main" or role == "main":
            facts.main_count += 1
        if "role" in attrs:
            aria = {k: v.strip() for k, v in attrs.items() if k.startswith("aria-")}
            if "tabindex" in attrs:
                aria["tabindex"] = attrs["tabindex"].strip()
            facts.role_elements.append({"element": element, "role": attrs["role"].strip(), "attributes": aria})

        tabindex = _int_or_none(attrs.get("tabindex")) if "tabindex" in attrs else None
        if tabindex is not None and tabindex > 0:
            facts.positive_tabindex.append((tabindex, element))

        style = attrs.get("style", "")
        if style.strip():
            facts.styled_elements.append((element, _style_declarations(style)))

        if t == "img":
            facts.images.append(
                {
                    "element": element,
                    "alt": attrs.get("alt") if "alt" in attrs else None,
                    "decorative": role in _DECORATIVE_ROLES,
                }
            )
            alt = attrs.get("alt", "").strip()
            if alt:
                for link in self._open_links:
                    link["chunks"].append(f" {alt} ")

        level = None if role in _DECORATIVE_ROLES else _HEADING_TAGS.get(t)
        if role == "heading":
            aria_level = _int_or_none(attrs.get("aria-level"))
            if aria_level is not None and 1 <= aria_level <= 6:
                level = aria_level
        if level is not None:
            facts.headings.append((level, element))

        if t == "label":
            if not self_closing:
                self._label_depth += 1
            label_for = attrs.get("for", "").strip()
            if label_for:
                facts.label_for_targets.add(label_for)

        if t in _FORM_CONTROL_TAGS:
            input_type = attrs.get("type", "").strip().lower()
            if not (t == "input" and input_type == "hidden"):
                facts.form_controls.append(
                    {
                        "tag": t,
                        "element": element,
                        "id": attrs.get("id", "").strip(),
                        "in_label": self._label_depth > 0,
                        "aria_label": attrs.get("aria-label", ""),
                        "aria_labelledby": attrs.get("aria-labelledby", ""),
                    }
                )

        if t == "a":
            link = {
                "element": element,
                "chunks": [],
                "named_by_attr": bool(
                    attrs.get("aria-label", "").strip()
                    or _idrefs(attrs.get("aria-labelledby"))
                    or attrs.get("title", "").strip()
                ),
            }
            if self_closing:
                facts.links.append(link)
            else:
                self._open_links.append(link)


def parse_markup_facts(markup: str) -> MarkupFacts:
    p = _P()
    try:
        p.feed(markup)
        p.close()
    except AssertionError:
        # html.parser rejects some malformed declarations this way; the
        # facts collected up to that point still stand.
        p.facts.links.extend(reversed(p._open_links))
    return p.facts


_Finding = tuple[str, Issue]
_Rule = Callable[[MarkupFacts, WcagLevel], list[_Finding]]


def _issue(
    bucket: str,
    issue_id: str,
    severity: Severity,
    message: str,
    criteria: str,
    *,
    level: WcagLevel = WcagLevel.A,
    element: str | None = None,
    suggestion: str | None = None,
) -> _Finding:
    return (
        bucket,
        Issue(
            id=issue_id,
            severity=severity,
            message=message,
            wcag_level=level,
            wcag_criteria=criteria,
            element=element,
            suggestion=suggestion,
            help_url=help_url(criteria),
        ),
    )


def _check_images(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    out: list[_Finding] = []
    for img in facts.images:
        if img["alt"] is None:
            out.append(
                _issue(
                    ERROR,
                    "img-alt-missing",
                    Severity.CRITICAL,
                    "Image is missing an alt attribute.",
                    "1.1.1",
                    element=img["element"],
                    suggestion='Add alt text describing the image, or alt="" with role="presentation" if it is decorative.',
                )
            )
        elif img["alt"] == "" and not img["decorative"]:
            out.append(
                _issue(
                    WARNING,
                    "img-empty-alt",
                    Severity.MODERATE,
                    "Image has an empty alt attribute but is not marked decorative.",
                    "1.1.1",
                    element=img["element"],
                    suggestion='Describe the image in alt, or add role="presentation" if it is purely decorative.',
                )
            )
    return out


def _check_headings(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    headings = facts.headings
    if not headings:
        return [
            _issue(
                WARNING,
                "no-headings",
                Severity.MODERATE,
                "No headings found in the document.",
                "1.3.1",
                suggestion="Structure the content with headings, starting with a single <h1>.",
            )
        ]
    out: list[_Finding] = []
    first_level, first_element = headings[0]
    if first_level != 1:
        out.append(
            _issue(
                WARNING,
                "first-heading-not-h1",
                Severity.MODERATE,
                f"First heading is level {first_level}; documents should start with an h1.",
                "1.3.1",
                element=first_element,
                suggestion="Make the first heading an <h1> describing the page.",
            )
        )
    for (prev, _), (cur, element) in zip(headings, headings[1:]):
        if cur - prev > 1:
            out.append(
                _issue(
                    WARNING,
                    "heading-skip",
                    Severity.MODERATE,
                    f"Heading level skipped from h{prev} to h{cur}.",
                    "1.3.1",
                    element=element,
                    suggestion=f"Use an h{prev + 1} here, or add the missing intermediate heading.",
                )
            )
    return out


def _check_forms(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    out: list[_Finding] = []
    for ctl in facts.form_controls:
        if str(ctl["aria_label"]).strip() or _idrefs(ctl["aria_labelledby"]):
            continue
        if ctl["in_label"] or (ctl["id"] and ctl["id"] in facts.label_for_targets):
            continue
        out.append(
            _issue(
                ERROR,
                "input-label-missing",
                Severity.CRITICAL,
                f"Form control <{ctl['tag']}> has no associated label.",
                "1.3.1, 4.1.2",
                element=ctl["element"],
                suggestion='Add <label for="..."> matching the control id, or an aria-label / aria-labelledby attribute.',
            )
        )
    return out


def _check_links(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    out: list[_Finding] = []
    for link in facts.links:
        text = _norm_text("".join(link["chunks"]))
        if not text and not link["named_by_attr"]:
            out.append(
                _issue(
                    ERROR,
                    "link-text-missing",
                    Severity.SERIOUS,
                    "Link has no accessible text.",
                    "2.4.4",
                    element=link["element"],
                    suggestion="Add link text, or an aria-label describing where the link goes.",
                )
            )
        elif text and not link["named_by_attr"] and text.lower() in VAGUE_LINK_TEXT:
            out.append(
                _issue(
                    WARNING,
                    "link-vague-text",
                    Severity.MINOR,
                    f'Vague link text "{text}" does not describe the link destination.',
                    "2.4.4",
                    element=link["element"],
                    suggestion="Use link text that makes sense out of context, e.g. the title of the target page.",
                )
            )
    return out


def _check_landmarks(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    if facts.main_count > 0:
        return []
    return [
        _issue(
            WARNING,
            "no-main-landmark",
            Severity.MODERATE,
            'No main landmark found (<main> or role="main").',
            "1.3.1",
            suggestion="Wrap the primary content in a <main> element.",
        )
    ]


def _check_language(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    if not facts.has_html or facts.html_lang:
        return []
    return [
        _issue(
            ERROR,
            "no-lang",
            Severity.CRITICAL,
            "The <html> element is missing a lang attribute.",
            "3.1.1",
            element=facts.html_element,
            suggestion='Declare the page language, e.g. <html lang="en">.',
        )
    ]


def _check_tabindex(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    return [
        _issue(
            WARNING,
            "tabindex-positive",
            Severity.SERIOUS,
            f"Positive tabindex ({value}) overrides the natural focus order.",
            "2.4.3",
            element=element,
            suggestion='Use tabindex="0" (or none) and order the markup to match the intended focus order.',
        )
        for value, element in facts.positive_tabindex
    ]


def _check_aria(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    out: list[_Finding] = []
    for claim in facts.role_elements:
        element = claim["element"]
        result = AriaValidator.validate_claim(claim["role"], claim["attributes"])
        for message in result.errors:
            out.append(
                _issue(
                    ERROR,
                    "aria-invalid",
                    Severity.SERIOUS,
                    message,
                    "4.1.2",
                    element=element,
                    suggestion="Use a valid WAI-ARIA role and provide every state/property it requires.",
                )
            )
        for message in result.warnings:
            out.append(
                _issue(
                    WARNING,
                    "aria-warning",
                    Severity.MODERATE,
                    message,
                    "4.1.2",
                    element=element,
                )
            )
    return out


def _check_contrast(facts: MarkupFacts, level: WcagLevel) -> list[_Finding]:
    out: list[_Finding] = []
    for element, decls in facts.styled_elements:
        fg = _hex_color(decls.get("color"))
        bg = _hex_color(decls.get("background-color")) or _hex_color(decls.get("background"))
        if fg is None or bg is None:
            continue
        size = _font_size_pt(decls.get("font-size"))
        bold = _is_bold(decls.get("font-weight"))
        result = ColorContrastChecker.check_contrast(fg, bg, size, bold)
        aa_min, aaa_min = ColorContrastChecker.thresholds(size, bold)
        if not result.passes_aa:
            out.append(
                _issue(
                    ERROR if level.rank >= WcagLevel.AA.rank else INFO,
                    "color-contrast",
                    Severity.SERIOUS,
                    f"Contrast ratio {result.ratio}:1 between {fg} and {bg} is below the minimum {aa_min:g}:1.",
                    "1.4.3",
                    level=WcagLevel.AA,
                    element=element,
                    suggestion=ColorContrastChecker.get_recommended_ratio(size, bold),
                )
            )
        elif not result.passes_aaa:
            out.append(
                _issue(
                    ERROR if level is WcagLevel.AAA else INFO,
                    "color-contrast-enhanced",
                    Severity.MINOR,
                    f"Contrast ratio {result.ratio}:1 between {fg} and {bg} is below the enhanced {aaa_min:g}:1.",
                    "1.4.6",
                    level=WcagLevel.AAA,
                    element=element,
                    suggestion=ColorContrastChecker.get_recommended_ratio(size, bold),
                )
            )
    return out


RULES: tuple[tuple[str, _Rule], ...] = (
    ("images", _check_images),
    ("headings", _check_headings),
    ("forms", _check_forms),
    ("links", _check_links),
    ("landmarks", _check_landmarks),
    ("language", _check_language),
    ("tabindex", _check_tabindex),
    ("aria", _check_aria),
    ("contrast", _check_contrast),
)


class AccessibilityChecker:
    """Runs the structural rule battery against markup text.

    The target WCAG level is the only instance state. ``check_html`` reads it
    once and never mutates the instance, so one checker may serve concurrent
    callers as long as :meth:`set_wcag_level` is not called at the same time;
    pass ``level=`` per call to avoid the setter entirely.
    """

    def __init__(self, level: WcagLevel | str = WcagLevel.AA, *, disabled_rules: Iterable[str] = ()) -> None:
        self._level = WcagLevel.parse(level)
        self._disabled = frozenset(str(r).strip() for r in disabled_rules if str(r).strip())

    @property
    def wcag_level(self) -> WcagLevel:
        return self._level

    @property
    def disabled_rules(self) -> frozenset[str]:
        return self._disabled

    def set_wcag_level(self, level: WcagLevel | str) -> None:
        self._level = WcagLevel.parse(level)

    def check_html(
        self,
        markup: str,
        *,
        level: WcagLevel | str | None = None,
        mode: str | None = None,
    ) -> CheckResult:
        if not isinstance(markup, str):
            raise TypeError(f"markup must be str, not {type(markup).__name__}")
        normalized_mode = None if mode is None else str(mode).strip().lower()
        if normalized_mode not in {None, "", "warn", "raise"}:
            raise ValueError(f"Unsupported check mode {mode!r}")
        target = self._level if level is None else WcagLevel.parse(level)

        facts = parse_markup_facts(markup)
        buckets: dict[str, list[Issue]] = {ERROR: [], WARNING: [], INFO: []}
        for _name, rule in RULES:
            for bucket, issue in rule(facts, target):
                if issue.id in self._disabled:
                    continue
                buckets[bucket].append(issue)

        result = CheckResult.from_issues(
            buckets[ERROR], buckets[WARNING], buckets[INFO], wcag_level=target
        )
        if normalized_mode == "warn":
            for bucket in (ERROR, WARNING, INFO):
                for issue in buckets[bucket]:
                    where = f" ({issue.element})" if issue.element else ""
                    warnings.warn(
                        f"[{bucket}] {issue.id}: {issue.message}{where}",
                        A11yWarning,
                        stacklevel=2,
                    )
        if normalized_mode == "raise" and not result.passed:
            raise A11yCheckFailed("Accessibility check failed", result)
        return result
