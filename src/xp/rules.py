"""
Rule value objects and their JSON payload format.

A rule decides whether an activity event earns points. Rules are stored as
tagged JSON records; the ``_class`` key selects the rule type:

- block_xp_rule_property: compare one event property against a value
- block_xp_rule_event: same, with the property fixed to ``eventname``
- block_xp_ruleset: combine child rules with any/all/none

Only construction and (de)serialization live here; evaluating rules against
live events belongs to the host application.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from src.xp.errors import RuleDefinitionError

RULE_CLASS_PROPERTY = "block_xp_rule_property"
RULE_CLASS_EVENT = "block_xp_rule_event"
RULE_CLASS_RULESET = "block_xp_ruleset"

# Compact separators keep payloads byte-compatible with existing rows
_JSON_SEPARATORS = (",", ":")


class Compare(str, Enum):
    """Comparison operators understood by property rules."""

    EQ = "eq"
    EQS = "eqs"  # Strict equality
    CONTAINS = "contains"
    REGEX = "regex"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


class RuleSetMethod(str, Enum):
    """How a ruleset combines its children."""

    ANY = "any"
    ALL = "all"
    NONE = "none"


def _coerce(enum_cls: type[Enum], raw: Any, what: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError as e:
        raise RuleDefinitionError(f"Unknown {what}: {raw!r}") from e


@dataclass(frozen=True)
class PropertyRule:
    """Compare a named event property against a value."""

    compare: Compare
    value: str
    property: str

    rule_class: ClassVar[str] = RULE_CLASS_PROPERTY

    def __post_init__(self) -> None:
        object.__setattr__(self, "compare", _coerce(Compare, self.compare, "compare operator"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "_class": self.rule_class,
            "compare": self.compare.value,
            "value": self.value,
            "property": self.property,
        }

    def is_equivalent(self, compare: str, value: str, property: str) -> bool:
        """True when this rule performs exactly the given comparison."""
        return (self.compare.value, self.value, self.property) == (compare, value, property)


@dataclass(frozen=True)
class EventRule(PropertyRule):
    """Compare the event name."""

    property: str = "eventname"

    rule_class: ClassVar[str] = RULE_CLASS_EVENT


@dataclass(frozen=True)
class RuleSet:
    """A combination of child rules."""

    method: RuleSetMethod
    rules: tuple[Rule, ...] = field(default_factory=tuple)

    rule_class: ClassVar[str] = RULE_CLASS_RULESET

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", _coerce(RuleSetMethod, self.method, "ruleset method"))
        object.__setattr__(self, "rules", tuple(self.rules))

    def to_dict(self) -> dict[str, Any]:
        return {
            "_class": self.rule_class,
            "method": self.method.value,
            "rules": [rule.to_dict() for rule in self.rules],
        }


Rule = Union[PropertyRule, EventRule, RuleSet]


def rule_from_dict(data: dict[str, Any]) -> Rule:
    """Build a rule from its payload dict, recursing into rulesets."""
    if not isinstance(data, dict):
        raise RuleDefinitionError(f"Rule payload must be an object, got {type(data).__name__}")

    rule_class = data.get("_class")

    if rule_class == RULE_CLASS_RULESET:
        children = data.get("rules") or []
        if not isinstance(children, list):
            raise RuleDefinitionError("Ruleset 'rules' must be a list")
        return RuleSet(
            method=data.get("method", RuleSetMethod.ANY.value),
            rules=tuple(rule_from_dict(child) for child in children),
        )

    if rule_class in (RULE_CLASS_PROPERTY, RULE_CLASS_EVENT):
        try:
            compare = data["compare"]
            value = data["value"]
        except KeyError as e:
            raise RuleDefinitionError(f"Rule {rule_class} missing key {e.args[0]!r}") from e

        if rule_class == RULE_CLASS_EVENT:
            return EventRule(compare=compare, value=value, property=data.get("property", "eventname"))

        if "property" not in data:
            raise RuleDefinitionError(f"Rule {rule_class} missing key 'property'")
        return PropertyRule(compare=compare, value=value, property=data["property"])

    raise RuleDefinitionError(f"Unknown rule class: {rule_class!r}")


def dump_rule(rule: Rule) -> str:
    """Serialize a rule to its stored JSON form."""
    return json.dumps(rule.to_dict(), separators=_JSON_SEPARATORS)


def load_rule(ruledata: str) -> Rule:
    """Decode a stored JSON payload into a rule."""
    try:
        data = json.loads(ruledata)
    except (TypeError, json.JSONDecodeError) as e:
        raise RuleDefinitionError(f"Invalid rule JSON: {e}") from e
    return rule_from_dict(data)
