"""Unit tests for the declarative validation rules."""

from dataclasses import dataclass
from decimal import Decimal

import pytest

from orderdesk.domain.exceptions import ValidationError
from orderdesk.domain.model.rules import (
    Rule,
    Violation,
    amount_at_most,
    at_most,
    check,
    min_length,
    not_blank,
    one_of,
    positive,
    present,
    raise_if_any,
)
from orderdesk.domain.model.value_objects import Money


@dataclass
class _Thing:
    name: str | None = "ok"
    size: int | None = 1


RULES = (
    Rule("name", "thingName", not_blank, "Name is blank."),
    Rule("name", "thingName", min_length(2), "Name is short."),
    Rule("size", "size", present, "Size is missing."),
    Rule("size", "size", positive, "Size must be positive."),
)


class TestPredicates:

    def test_not_blank(self):
        assert not_blank("a")
        assert not not_blank("   ")
        assert not not_blank(None)

    def test_min_length_ignores_surrounding_space(self):
        assert min_length(2)("ab")
        assert not min_length(2)(" a ")

    def test_positive(self):
        assert positive(1)
        assert not positive(0)
        assert not positive(-1)
        assert not positive(None)

    def test_at_most(self):
        check_size = at_most(3)
        assert check_size(3)
        assert not check_size(4)
        assert check_size(None)

    def test_amount_at_most(self):
        check_price = amount_at_most(Decimal("10.00"))
        assert check_price(Money.of("10"))
        assert not check_price(Money.of("10.01"))
        assert check_price(None)

    def test_present(self):
        assert present(0)
        assert not present(None)

    def test_one_of(self):
        check_colour = one_of(["red", "blue"])
        assert check_colour("red")
        assert not check_colour("green")


class TestCheck:

    def test_valid_entity_has_no_violations(self):
        assert check(_Thing(), RULES) == []

    def test_reports_every_broken_rule_under_its_label(self):
        found = check(_Thing(name="", size=None), RULES)
        assert found == [
            Violation("thingName", "Name is blank."),
            Violation("thingName", "Name is short."),
            Violation("size", "Size is missing."),
            Violation("size", "Size must be positive."),
        ]

    def test_prefix_is_prepended(self):
        found = check(_Thing(size=0), RULES, prefix="things[3].")
        assert found == [Violation("things[3].size", "Size must be positive.")]


class TestRaiseIfAny:

    def test_nothing_to_raise(self):
        raise_if_any([], "boom")

    def test_groups_messages_by_field(self):
        with pytest.raises(ValidationError, match="boom") as excinfo:
            raise_if_any(
                [Violation("a", "one"), Violation("b", "two"), Violation("a", "three")],
                "boom",
            )
        assert excinfo.value.violations == {"a": ["one", "three"], "b": ["two"]}
