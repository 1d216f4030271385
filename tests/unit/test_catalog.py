"""
Unit tests for the static rule catalog.
"""

import json

from src.xp.catalog import (
    BOOK_VIEWED,
    FORUM_DISCUSSION_SUBSCRIBED,
    FORUM_SUBSCRIBED,
    StaticFilter,
    get_static_filters,
)
from src.xp.rules import EventRule, PropertyRule, RuleSet, RuleSetMethod, load_rule


def test_five_filters_with_points_in_order():
    filters = get_static_filters()

    assert len(filters) == 5
    assert [f.points for f in filters] == [0, 45, 9, 3, 0]
    assert all(isinstance(f.ruledata, str) for f in filters)


def test_new_list_every_call():
    first = get_static_filters()
    second = get_static_filters()

    assert first == second
    assert first is not second


def test_crud_filters():
    filters = get_static_filters()

    for static_filter, letter in zip(filters[1:], "crud"):
        rule = load_rule(static_filter.ruledata)
        assert isinstance(rule, PropertyRule)
        assert rule.is_equivalent("eq", letter, "crud")


def test_first_filter_is_any_ruleset():
    rule = load_rule(get_static_filters()[0].ruledata)

    assert isinstance(rule, RuleSet)
    assert rule.method is RuleSetMethod.ANY
    assert len(rule.rules) == 5

    events = [r.value for r in rule.rules if isinstance(r, EventRule)]
    assert events == [BOOK_VIEWED, FORUM_DISCUSSION_SUBSCRIBED, FORUM_SUBSCRIBED]

    contains = [r for r in rule.rules if type(r) is PropertyRule]
    assert [(r.compare.value, r.value, r.property) for r in contains] == [
        ("contains", "assessable_submitted", "eventname"),
        ("contains", "assessable_uploaded", "eventname"),
    ]


def test_event_identifiers_are_fully_qualified():
    assert BOOK_VIEWED == "\\mod_book\\event\\course_module_viewed"
    assert FORUM_SUBSCRIBED.startswith("\\mod_forum\\event\\")


def test_stored_payload_matches_existing_rows():
    payload = json.loads(get_static_filters()[0].ruledata)

    assert list(payload) == ["_class", "method", "rules"]
    assert payload["rules"][0] == {
        "_class": "block_xp_rule_event",
        "compare": "eq",
        "value": "\\mod_book\\event\\course_module_viewed",
        "property": "eventname",
    }


def test_to_record():
    record = StaticFilter(ruledata="{}", points=45).to_record()
    assert record == {"ruledata": "{}", "points": 45}
