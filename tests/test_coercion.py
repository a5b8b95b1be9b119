from types import SimpleNamespace

import pytest
from flask import Flask

from crud_ui.coercion import coerce_and_validate
from crud_ui.errors import CrudError, ValidationError
from crud_ui.models import CrudField


def make_ctx(fields, body):
    return SimpleNamespace(
        fields=[CrudField(**f) for f in fields],
        body=body,
        options=SimpleNamespace(name="item"),
    )


class TestSelect:
    fields = [{"name": "kind", "type": "select", "values": ["tool", {"value": "weapon", "title": "Weapon"}]}]

    def test_plain_and_object_options(self):
        assert coerce_and_validate(make_ctx(self.fields, {"kind": "tool"}), "create") == {"kind": "tool"}
        assert coerce_and_validate(make_ctx(self.fields, {"kind": "weapon"}), "create") == {"kind": "weapon"}

    def test_unknown_value_is_a_protocol_violation(self):
        with pytest.raises(CrudError) as e:
            coerce_and_validate(make_ctx(self.fields, {"kind": "bomb"}), "create")
        assert not isinstance(e.value, ValidationError)
        assert e.value.code == 500

    def test_empty_value_without_null_option_is_rejected(self):
        with pytest.raises(CrudError):
            coerce_and_validate(make_ctx(self.fields, {"kind": ""}), "create")

    def test_empty_value_with_null_option_becomes_none(self):
        fields = [dict(self.fields[0], null_option="-- none --")]
        assert coerce_and_validate(make_ctx(fields, {"kind": ""}), "create") == {"kind": None}

    def test_values_may_be_computed(self):
        fields = [{"name": "kind", "type": "select", "values": lambda ctx: ["a", "b"]}]
        assert coerce_and_validate(make_ctx(fields, {"kind": "b"}), "edit") == {"kind": "b"}

    def test_options_with_value_attribute(self):
        fields = [{"name": "kind", "type": "select", "values": [SimpleNamespace(value="x", title="X")]}]
        assert coerce_and_validate(make_ctx(fields, {"kind": "x"}), "create") == {"kind": "x"}

    def test_async_values_producer(self):
        async def kinds(ctx):
            return ["a", "b"]

        fields = [{"name": "kind", "type": "select", "values": kinds}]
        with Flask(__name__).app_context():
            assert coerce_and_validate(make_ctx(fields, {"kind": "b"}), "create") == {"kind": "b"}
            with pytest.raises(CrudError):
                coerce_and_validate(make_ctx(fields, {"kind": "c"}), "create")

    def test_non_string_values_match_submitted_text(self):
        fields = [{"name": "rank", "type": "select", "values": [{"value": 1, "title": "Low"}, (2, "High")]}]
        assert coerce_and_validate(make_ctx(fields, {"rank": "1"}), "create") == {"rank": 1}
        assert coerce_and_validate(make_ctx(fields, {"rank": "2"}), "edit") == {"rank": 2}
        with pytest.raises(CrudError):
            coerce_and_validate(make_ctx(fields, {"rank": "3"}), "create")


def test_boolean_has_two_states():
    fields = [{"name": "a", "type": "boolean"}, {"name": "b", "type": "boolean"}]
    payload = coerce_and_validate(make_ctx(fields, {"a": "on"}), "create")
    assert payload == {"a": True, "b": False}


def test_fields_not_editable_in_mode_are_skipped():
    fields = [
        {"name": "code", "allow_edit_existing": False},
        {"name": "note", "allow_edit_new": False},
        {"name": "hidden", "allow_edit": False},
    ]
    body = {"code": "X1", "note": "hi", "hidden": "nope"}
    assert coerce_and_validate(make_ctx(fields, body), "create") == {"code": "X1"}
    assert coerce_and_validate(make_ctx(fields, body), "edit") == {"note": "hi"}


def test_callback_validators_receive_context_value_and_body():
    seen = []

    def check(ctx, value, body):
        seen.append((ctx.options.name, value, body))
        return None

    ctx = make_ctx([{"name": "name", "validate": check}], {"name": "Axe"})
    coerce_and_validate(ctx, "create")
    assert seen == [("item", "Axe", {"name": "Axe"})]


def test_single_string_result_is_one_fault():
    ctx = make_ctx([{"name": "name", "validate": lambda ctx, v, body: "is taken"}], {"name": "Axe"})
    with pytest.raises(ValidationError) as e:
        coerce_and_validate(ctx, "create")
    assert [f.message for f in e.value.faults] == ["is taken"]
    assert e.value.message == "Validation error: Name is taken"


def test_mode_specific_validators():
    fields = [
        {
            "name": "name",
            "validate_create": lambda ctx, v, body: "create only",
            "validate_edit": lambda ctx, v, body: ["edit only"],
        }
    ]
    with pytest.raises(ValidationError) as e:
        coerce_and_validate(make_ctx(fields, {"name": "x"}), "create")
    assert [f.message for f in e.value.faults] == ["create only"]

    with pytest.raises(ValidationError) as e:
        coerce_and_validate(make_ctx(fields, {"name": "x"}), "edit")
    assert [f.message for f in e.value.faults] == ["edit only"]


def test_faults_across_fields_are_aggregated_in_order():
    fields = [
        {"name": "name", "validate": lambda ctx, v, body: ["is short", "is lowercase"]},
        {"name": "email", "validate": {"presence": True, "email": True}},
        {"name": "note"},
        {"name": "code", "validate": {"presence": True}, "validate_create": lambda ctx, v, body: "is bad"},
    ]
    body = {"name": "ax", "email": "", "note": "kept", "code": ""}
    with pytest.raises(ValidationError) as e:
        coerce_and_validate(make_ctx(fields, body), "create")

    error = e.value
    assert len(error.faults) == 2 + 2 + 2
    assert [f.field.name for f in error.faults] == ["name", "name", "email", "email", "code", "code"]
    assert error.message == "6 validation errors"

    flattened = [f for faults in error.by_field_name.values() for f in faults]
    assert sorted(map(id, flattened)) == sorted(map(id, error.faults))
    assert set(error.by_field_name) == {"name", "email", "code"}

    # Attempted input survives, including fields that passed
    assert error.payload == {"name": "ax", "email": "", "note": "kept", "code": ""}


def test_full_message_uses_label():
    ctx = make_ctx([{"name": "first_name", "validate": {"presence": True}}], {})
    with pytest.raises(ValidationError) as e:
        coerce_and_validate(ctx, "create")
    assert e.value.faults[0].full_message == "First name can't be blank"
