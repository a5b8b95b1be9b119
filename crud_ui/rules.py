# crud_ui/rules.py
"""
Declarative validation rules.

A rule-set is a dict such as::

    {"presence": True, "length": {"minimum": 3, "maximum": 40}, "format": r"[a-z]+"}

Each rule is compiled once (at mount time) into a pydantic TypeAdapter.
Evaluating a rule-set returns a list of short messages meant to follow the
field label, e.g. "Name is too short (minimum is 3 characters)".
"""

import re
from typing import Annotated, Any, Callable, Literal, Optional

from pydantic import AfterValidator, ConfigDict, Field, StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

KNOWN_RULES = ("presence", "length", "format", "inclusion", "exclusion", "numericality", "email")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return not value
    return False


def _options(spec: Any, shorthand: str) -> dict:
    """Rules accept either a bare value or a dict of options."""
    if isinstance(spec, dict):
        return dict(spec)
    return {shorthand: spec}


def _exclude(values: list) -> Callable[[Any], Any]:
    def check(value):
        if value in values:
            raise ValueError("is restricted")
        return value

    return check


def _exact_length(length: int) -> Callable[[str], str]:
    def check(value):
        if len(value) != length:
            raise ValueError(f"is the wrong length (should be {length} characters)")
        return value

    return check


def _email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise ValueError("is not a valid email")
    return value


def _translate(error: dict) -> str:
    kind = error["type"]
    ctx = error.get("ctx") or {}
    if kind == "string_too_short":
        return f"is too short (minimum is {ctx['min_length']} characters)"
    if kind == "string_too_long":
        return f"is too long (maximum is {ctx['max_length']} characters)"
    if kind == "string_pattern_mismatch":
        return "is invalid"
    if kind == "literal_error":
        return "is not included in the list"
    if kind in ("float_parsing", "float_type", "int_parsing", "int_type"):
        return "is not a number" if kind.startswith("float") else "must be an integer"
    if kind == "int_from_float":
        return "must be an integer"
    if kind == "greater_than":
        return f"must be greater than {ctx['gt']}"
    if kind == "greater_than_equal":
        return f"must be greater than or equal to {ctx['ge']}"
    if kind == "less_than":
        return f"must be less than {ctx['lt']}"
    if kind == "less_than_equal":
        return f"must be less than or equal to {ctx['le']}"
    if kind == "value_error":
        return str(ctx.get("error", error["msg"]))
    return error["msg"]


class Rule:
    """One compiled rule out of a rule-set."""

    def __init__(self, name: str, adapter: Optional[TypeAdapter], message: Optional[str] = None):
        self.name = name
        self.adapter = adapter
        self.message = message

    def check(self, value: Any) -> list[str]:
        if self.name == "presence":
            if _is_blank(value):
                return [self.message or "can't be blank"]
            return []
        if value is None:
            return []
        try:
            self.adapter.validate_python(value)
        except PydanticValidationError as e:
            if self.message:
                return [self.message]
            return [_translate(err) for err in e.errors()[:1]]
        return []


def _compile_rule(name: str, spec: Any) -> Optional[Rule]:
    if spec is None or spec is False:
        return None

    if name == "presence":
        opts = _options(spec, "enabled")
        return Rule(name, None, opts.get("message"))

    if name == "length":
        opts = _options(spec, "is")
        exact = opts.get("is")
        if exact is not None:
            adapter = TypeAdapter(Annotated[str, AfterValidator(_exact_length(exact))])
        else:
            constraints = StringConstraints(min_length=opts.get("minimum"), max_length=opts.get("maximum"))
            adapter = TypeAdapter(Annotated[str, constraints])
        return Rule(name, adapter, opts.get("message"))

    if name == "format":
        opts = _options(spec, "pattern")
        pattern = opts["pattern"]
        if isinstance(pattern, re.Pattern):
            pattern = pattern.pattern
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f'Invalid format pattern "{pattern}": {e}') from e
        constraints = StringConstraints(pattern=f"^(?:{pattern})$")
        adapter = TypeAdapter(Annotated[str, constraints], config=ConfigDict(regex_engine="python-re"))
        return Rule(name, adapter, opts.get("message"))

    if name == "inclusion":
        opts = _options(spec, "within")
        within = tuple(opts["within"])
        return Rule(name, TypeAdapter(Literal[within]), opts.get("message"))

    if name == "exclusion":
        opts = _options(spec, "within")
        within = list(opts["within"])
        return Rule(name, TypeAdapter(Annotated[Any, AfterValidator(_exclude(within))]), opts.get("message"))

    if name == "numericality":
        opts = _options(spec, "enabled")
        number_type = int if opts.get("only_integer") else float
        bounds = Field(
            gt=opts.get("greater_than"),
            ge=opts.get("greater_than_or_equal_to"),
            lt=opts.get("less_than"),
            le=opts.get("less_than_or_equal_to"),
        )
        return Rule(name, TypeAdapter(Annotated[number_type, bounds]), opts.get("message"))

    if name == "email":
        opts = _options(spec, "enabled")
        return Rule(name, TypeAdapter(Annotated[str, AfterValidator(_email)]), opts.get("message"))

    raise ValueError(f'Unknown validation rule "{name}". Known rules: {", ".join(KNOWN_RULES)}')


class RuleSet:
    def __init__(self, spec: dict):
        self.spec = spec
        self.rules = [rule for rule in (_compile_rule(name, s) for name, s in spec.items()) if rule]

    def __call__(self, value: Any) -> list[str]:
        messages: list[str] = []
        for rule in self.rules:
            messages.extend(rule.check(value))
        return messages


def compile_rules(spec: dict) -> RuleSet:
    if not isinstance(spec, dict):
        raise TypeError(f"Validation rules must be a dict, got {type(spec).__name__}")
    return RuleSet(spec)
