"""
Static rule catalog.

The fixed set of filters every course starts with:

    #  rule                                              points
    1  any of: book viewed, forum (discussion) subscribed,   0
       assessable submitted/uploaded
    2  crud == "c"                                          45
    3  crud == "r"                                           9
    4  crud == "u"                                           3
    5  crud == "d"                                           0

Filters are evaluated in this order, so the zero-point ruleset shadows
the CRUD rules for the events it lists.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.xp.rules import Compare, EventRule, PropertyRule, Rule, RuleSet, RuleSetMethod, dump_rule

BOOK_VIEWED = "\\mod_book\\event\\course_module_viewed"
FORUM_DISCUSSION_SUBSCRIBED = "\\mod_forum\\event\\discussion_subscription_created"
FORUM_SUBSCRIBED = "\\mod_forum\\event\\subscription_created"


@dataclass(frozen=True)
class StaticFilter:
    """A catalog entry ready to be stored: serialized rule plus points."""

    ruledata: str
    points: int

    def to_record(self) -> dict[str, object]:
        return {"ruledata": self.ruledata, "points": self.points}


def _crud(letter: str) -> Rule:
    return PropertyRule(compare=Compare.EQ, value=letter, property="crud")


def get_static_rules() -> list[tuple[Rule, int]]:
    """Catalog rules with their points, in sort order."""
    ignored = RuleSet(
        method=RuleSetMethod.ANY,
        rules=(
            EventRule(compare=Compare.EQ, value=BOOK_VIEWED),
            EventRule(compare=Compare.EQ, value=FORUM_DISCUSSION_SUBSCRIBED),
            EventRule(compare=Compare.EQ, value=FORUM_SUBSCRIBED),
            PropertyRule(compare=Compare.CONTAINS, value="assessable_submitted", property="eventname"),
            PropertyRule(compare=Compare.CONTAINS, value="assessable_uploaded", property="eventname"),
        ),
    )
    return [
        (ignored, 0),
        (_crud("c"), 45),
        (_crud("r"), 9),
        (_crud("u"), 3),
        (_crud("d"), 0),
    ]


def get_static_filters() -> list[StaticFilter]:
    """Serialized catalog. A new list is built on every call."""
    return [StaticFilter(ruledata=dump_rule(rule), points=points) for rule, points in get_static_rules()]
