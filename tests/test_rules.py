import pytest

from crud_ui.rules import compile_rules


class TestPresence:
    def test_blank_values_fail(self):
        rules = compile_rules({"presence": True})
        assert rules("") == ["can't be blank"]
        assert rules("   ") == ["can't be blank"]
        assert rules(None) == ["can't be blank"]

    def test_present_value_passes(self):
        assert compile_rules({"presence": True})("Axe") == []

    def test_custom_message(self):
        rules = compile_rules({"presence": {"message": "is required"}})
        assert rules("") == ["is required"]

    def test_disabled_rule_is_ignored(self):
        assert compile_rules({"presence": False})("") == []


class TestLength:
    def test_minimum(self):
        rules = compile_rules({"length": {"minimum": 3}})
        assert rules("ab") == ["is too short (minimum is 3 characters)"]
        assert rules("abc") == []

    def test_maximum(self):
        rules = compile_rules({"length": {"maximum": 2}})
        assert rules("abc") == ["is too long (maximum is 2 characters)"]

    def test_exact(self):
        rules = compile_rules({"length": {"is": 2}})
        assert rules("abc") == ["is the wrong length (should be 2 characters)"]
        assert rules("a") == ["is the wrong length (should be 2 characters)"]
        assert rules("ab") == []

    def test_absent_value_skipped(self):
        assert compile_rules({"length": {"minimum": 3}})(None) == []


def test_format_is_anchored():
    rules = compile_rules({"format": r"[a-z]+"})
    assert rules("abc") == []
    assert rules("abc1") == ["is invalid"]


def test_format_with_message():
    rules = compile_rules({"format": {"pattern": r"\d+", "message": "must be digits"}})
    assert rules("x") == ["must be digits"]


def test_inclusion_and_exclusion():
    assert compile_rules({"inclusion": ["a", "b"]})("c") == ["is not included in the list"]
    assert compile_rules({"inclusion": ["a", "b"]})("a") == []
    assert compile_rules({"exclusion": ["admin"]})("admin") == ["is restricted"]
    assert compile_rules({"exclusion": ["admin"]})("bob") == []


class TestNumericality:
    def test_not_a_number(self):
        assert compile_rules({"numericality": True})("abc") == ["is not a number"]

    def test_form_strings_are_parsed(self):
        assert compile_rules({"numericality": {"greater_than": 1}})("12") == []

    def test_bounds(self):
        rules = compile_rules({"numericality": {"greater_than": 5}})
        assert rules("5") == ["must be greater than 5"]
        rules = compile_rules({"numericality": {"less_than_or_equal_to": 10}})
        assert rules("11") == ["must be less than or equal to 10"]

    def test_only_integer(self):
        rules = compile_rules({"numericality": {"only_integer": True}})
        assert rules("1.5") == ["must be an integer"]
        assert rules("3") == []


def test_email():
    rules = compile_rules({"email": True})
    assert rules("someone@example.com") == []
    assert rules("nope") == ["is not a valid email"]


def test_rules_accumulate_in_declaration_order():
    rules = compile_rules({"presence": True, "length": {"minimum": 2}})
    assert rules("") == ["can't be blank", "is too short (minimum is 2 characters)"]


def test_unknown_rule_is_rejected():
    with pytest.raises(ValueError, match="Unknown validation rule"):
        compile_rules({"colour": "red"})
