from __future__ import annotations

import pytest

from a11yscan import AriaValidator
from a11yscan.aria import REQUIRED_ARIA_PROPS, VALID_ROLES


def test_role_table_is_closed_and_complete() -> None:
    assert len(VALID_ROLES) == 68
    assert {"button", "main", "presentation", "none", "tabpanel", "treeitem"} <= VALID_ROLES
    with pytest.raises(TypeError):
        REQUIRED_ARIA_PROPS["button"] = ("aria-pressed",)  # type: ignore[index]


def test_empty_role_is_invalid() -> None:
    result = AriaValidator.validate_role("")
    assert result.is_valid is False
    assert result.errors == ("Role attribute is empty",)


def test_unknown_role_is_named_in_error() -> None:
    result = AriaValidator.validate_role("fancy-widget")
    assert result.is_valid is False
    assert 'Invalid ARIA role: "fancy-widget"' in result.errors[0]


@pytest.mark.parametrize("role", ["button", "BUTTON", "Navigation", "tabpanel"])
def test_known_roles_are_valid_regardless_of_case(role: str) -> None:
    result = AriaValidator.validate_role(role)
    assert result.is_valid is True
    assert result.errors == ()


def test_checkbox_requires_aria_checked() -> None:
    missing = AriaValidator.validate_aria_attributes("checkbox", {})
    assert missing.is_valid is False
    assert any("aria-checked" in e for e in missing.errors)

    ok = AriaValidator.validate_aria_attributes("checkbox", {"aria-checked": "true"})
    assert ok.is_valid is True

    bad = AriaValidator.validate_aria_attributes("checkbox", {"aria-checked": "yes"})
    assert bad.is_valid is False
    assert 'Invalid aria-checked value: "yes"' in bad.errors[0]


def test_checkbox_accepts_mixed() -> None:
    assert AriaValidator.validate_aria_attributes("checkbox", {"aria-checked": "mixed"}).is_valid


def test_combobox_reports_each_missing_attribute() -> None:
    result = AriaValidator.validate_aria_attributes("combobox", {})
    assert len(result.errors) == 2
    assert any("aria-expanded" in e for e in result.errors)
    assert any("aria-controls" in e for e in result.errors)


@pytest.mark.parametrize("role", ["slider", "scrollbar", "spinbutton"])
def test_range_roles_require_value_triplet(role: str) -> None:
    result = AriaValidator.validate_aria_attributes(role, {"aria-valuenow": "5"})
    assert result.is_valid is False
    assert len(result.errors) == 2
    complete = {"aria-valuenow": "5", "aria-valuemin": "0", "aria-valuemax": "10"}
    assert AriaValidator.validate_aria_attributes(role, complete).is_valid


def test_tab_and_tabpanel_requirements() -> None:
    assert not AriaValidator.validate_aria_attributes("tab", {}).is_valid
    assert AriaValidator.validate_aria_attributes("tab", {"aria-selected": "false"}).is_valid
    assert not AriaValidator.validate_aria_attributes("tabpanel", {}).is_valid
    assert AriaValidator.validate_aria_attributes("tabpanel", {"aria-labelledby": "t1"}).is_valid


def test_empty_required_value_counts_as_missing() -> None:
    result = AriaValidator.validate_aria_attributes("switch", {"aria-checked": ""})
    assert result.is_valid is False


def test_aria_expanded_domain() -> None:
    assert AriaValidator.validate_aria_attributes("button", {"aria-expanded": "false"}).is_valid
    result = AriaValidator.validate_aria_attributes("button", {"aria-expanded": "mixed"})
    assert result.is_valid is False
    assert "aria-expanded" in result.errors[0]


def test_hidden_focusable_is_a_warning_not_an_error() -> None:
    result = AriaValidator.validate_aria_attributes(
        "button", {"aria-hidden": "true", "tabindex": "0"}
    )
    assert result.is_valid is True
    assert len(result.warnings) == 1
    assert "aria-hidden" in result.warnings[0]


def test_role_without_requirements_passes_with_no_attributes() -> None:
    assert AriaValidator.validate_aria_attributes("navigation", {}).is_valid


def test_extract_aria_attributes() -> None:
    element = '<div role="slider" aria-valuenow="5" aria-valuemin=\'0\' ARIA-VALUEMAX="10" data-aria-x="no">'
    attrs = AriaValidator.extract_aria_attributes(element)
    assert attrs == {"aria-valuenow": "5", "aria-valuemin": "0", "aria-valuemax": "10"}
    assert AriaValidator.extract_aria_attributes("<div>") == {}


def test_extract_role() -> None:
    assert AriaValidator.extract_role('<div role="tab">') == "tab"
    assert AriaValidator.extract_role('<div data-role="tab">') is None
    assert AriaValidator.extract_role("<div>") is None
    assert AriaValidator.extract_role('<div role="">') == ""


def test_validate_element_without_role_is_valid() -> None:
    result = AriaValidator.validate_element('<div aria-checked="banana">')
    assert result.is_valid is True


def test_validate_element_stops_at_invalid_role() -> None:
    result = AriaValidator.validate_element('<div role="checkboxx">')
    assert result.is_valid is False
    assert len(result.errors) == 1
    assert "checkboxx" in result.errors[0]


def test_validate_element_checks_attributes_for_valid_role() -> None:
    assert not AriaValidator.validate_element('<span role="checkbox">').is_valid
    assert AriaValidator.validate_element('<span role="checkbox" aria-checked="false">').is_valid


def test_validate_element_flags_hidden_focusable() -> None:
    result = AriaValidator.validate_element('<div role="button" aria-hidden="true" tabindex="0">')
    assert result.is_valid is True
    assert result.warnings


def test_validate_element_empty_role_makes_no_claim() -> None:
    result = AriaValidator.validate_element('<div role="" aria-checked="banana">')
    assert result.is_valid is True
    assert result.errors == ()


def test_validate_claim_on_parsed_values() -> None:
    assert AriaValidator.validate_claim(None, {}).is_valid
    assert AriaValidator.validate_claim("  ", {}).is_valid
    bogus = AriaValidator.validate_claim("bogus", {"aria-checked": "true"})
    assert bogus.errors == ('Invalid ARIA role: "bogus"',)
    missing = AriaValidator.validate_claim("checkbox", {})
    assert any("aria-checked" in e for e in missing.errors)
    hidden = AriaValidator.validate_claim("button", {"aria-hidden": "true", "tabindex": "0"})
    assert hidden.is_valid and hidden.warnings
