# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

from .types import AriaValidationResult


VALID_ROLES = frozenset(
    {
        "alert",
        "alertdialog",
        "application",
        "article",
        "banner",
        "button",
        "checkbox",
        "columnheader",
        "combobox",
        "complementary",
        "contentinfo",
        "definition",
        "dialog",
        "directory",
        "document",
        "feed",
        "figure",
        "form",
        "grid",
        "gridcell",
        "group",
        "heading",
        "img",
        "link",
        "list",
        "listbox",
        "listitem",
        "log",
        "main",
        "marquee",
        "math",
        "menu",
        "menubar",
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
        "navigation",
        "none",
        "note",
        "option",
        "presentation",
        "progressbar",
        "radio",
        "radiogroup",
        "region",
        "row",
        "rowgroup",
        "rowheader",
        "scrollbar",
        "search",
        "searchbox",
        "separator",
        "slider",
        "spinbutton",
        "status",
        "switch",
        "tab",
        "table",
        "tablist",
        "tabpanel",
        "term",
        "textbox",
        "timer",
        "toolbar",
        "tooltip",
        "tree",
        "treegrid",
        "treeitem",
    }
)

_RANGE_PROPS = ("aria-valuenow", "aria-valuemin", "aria-valuemax")

REQUIRED_ARIA_PROPS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "checkbox": ("aria-checked",),
        "combobox": ("aria-expanded", "aria-controls"),
        "radio": ("aria-checked",),
        "scrollbar": _RANGE_PROPS,
        "slider": _RANGE_PROPS,
        "spinbutton": _RANGE_PROPS,
        "switch": ("aria-checked",),
        "tab": ("aria-selected",),
        "tabpanel": ("aria-labelledby",),
    }
)

# Token attributes with a closed value domain.
ALLOWED_VALUES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "aria-checked": ("true", "false", "mixed"),
        "aria-expanded": ("true", "false"),
    }
)

_RE_ARIA_ATTR = re.compile(
    r"""(?<![\w-])(aria-[a-z]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""",
    re.IGNORECASE,
)
_RE_ROLE = re.compile(r"""(?<![\w-])role\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)
_RE_TABINDEX = re.compile(
    r"""(?<![\w-])tabindex\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>"']+))""",
    re.IGNORECASE,
)


def _quoted(match: re.Match[str], start: int = 1) -> str:
    for value in match.groups()[start - 1 :]:
        if value is not None:
            return value
    return ""


def _fmt_choices(values: tuple[str, ...]) -> str:
    quoted = [f'"{v}"' for v in values]
    if len(quoted) == 1:
        return quoted[0]
    return ", ".join(quoted[:-1]) + f" or {quoted[-1]}"


class AriaValidator:
    """Stateless ARIA role and attribute checks over raw element text."""

    @staticmethod
    def validate_role(role: str) -> AriaValidationResult:
        text = str(role or "").strip()
        if not text:
            return AriaValidationResult.of(errors=["Role attribute is empty"])
        if text.lower() not in VALID_ROLES:
            return AriaValidationResult.of(errors=[f'Invalid ARIA role: "{text}"'])
        return AriaValidationResult.of()

    @staticmethod
    def validate_aria_attributes(role: str, attributes: Mapping[str, str]) -> AriaValidationResult:
        errors: list[str] = []
        warnings: list[str] = []
        role_key = str(role or "").strip().lower()

        for prop in REQUIRED_ARIA_PROPS.get(role_key, ()):
            if not attributes.get(prop):
                errors.append(f'Missing required ARIA property "{prop}" for role "{role}"')

        for name, allowed in ALLOWED_VALUES.items():
            value = attributes.get(name)
            if value and value not in allowed:
                errors.append(f'Invalid {name} value: "{value}". Must be {_fmt_choices(allowed)}')

        if attributes.get("aria-hidden") == "true" and attributes.get("tabindex") == "0":
            warnings.append('Element with aria-hidden="true" should not be focusable')

        return AriaValidationResult.of(errors, warnings)

    @staticmethod
    def extract_aria_attributes(element: str) -> dict[str, str]:
        return {m.group(1).lower(): _quoted(m, 2) for m in _RE_ARIA_ATTR.finditer(element or "")}

    @staticmethod
    def extract_role(element: str) -> str | None:
        match = _RE_ROLE.search(element or "")
        return _quoted(match) if match else None

    @classmethod
    def validate_claim(cls, role: str | None, attributes: Mapping[str, str]) -> AriaValidationResult:
        """Validate an already-parsed role and its ``aria-*``/``tabindex`` attributes.

        An absent or empty role makes no claim, so there is nothing to check.
        """
        if not str(role or "").strip():
            return AriaValidationResult.of()
        role_result = cls.validate_role(role)
        if not role_result.is_valid:
            return role_result
        return cls.validate_aria_attributes(role, attributes)

    @classmethod
    def validate_element(cls, element: str) -> AriaValidationResult:
        attributes = cls.extract_aria_attributes(element)
        tabindex = _RE_TABINDEX.search(element or "")
        if tabindex is not None:
            attributes["tabindex"] = _quoted(tabindex).strip()
        return cls.validate_claim(cls.extract_role(element), attributes)
