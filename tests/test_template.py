from __future__ import annotations

import pytest

from dashlib.template import UnresolvedAttribute, expand


def test_expand_substitutes_placeholder() -> None:
    assert expand("{{x}}", {"x": "5"}) == "5"


def test_expand_without_placeholders_returns_text_unchanged() -> None:
    assert expand("cpu.usage", {}) == "cpu.usage"
    assert expand("cpu.usage", {"cpu": "other"}) == "cpu.usage"
    assert expand("", {"x": 1}) == ""


def test_expand_missing_attribute_raises() -> None:
    with pytest.raises(UnresolvedAttribute) as excinfo:
        expand("{{x}}", {})
    assert excinfo.value.attribute == "x"


def test_expand_aborts_on_first_missing_attribute() -> None:
    with pytest.raises(UnresolvedAttribute) as excinfo:
        expand("{{a}}-{{b}}-{{c}}", {"a": "1"})
    assert excinfo.value.attribute == "b"


def test_expand_tolerates_spacing_and_leading_dot() -> None:
    attrs = {"env": "prod"}
    assert expand("{{ env }}/{{.env}}/{{ .env }}", attrs) == "prod/prod/prod"


def test_expand_renders_non_string_values() -> None:
    assert expand("port {{port}}", {"port": 8080}) == "port 8080"


def test_expand_is_single_pass() -> None:
    attrs = {"outer": "{{inner}}", "inner": "value"}
    assert expand("{{outer}}", attrs) == "{{inner}}"


def test_expand_is_idempotent_once_placeholders_are_gone() -> None:
    attrs = {"env": "prod"}
    once = expand("{{env}} load", attrs)
    assert expand(once, attrs) == once
