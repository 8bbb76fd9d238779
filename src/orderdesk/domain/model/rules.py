"""Declarative validation rules.

Each entity publishes a table of ``Rule`` entries; ``check`` walks a table
against an object and reports every broken rule as a ``Violation``.  No
rule raises on its own, so a whole aggregate can be checked in one pass and
the caller decides whether to raise.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from orderdesk.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Violation:
    field: str
    message: str


@dataclass(frozen=True)
class Rule:
    """``field`` is the attribute read from the entity, ``label`` the name
    reported to the client (camelCase, as in the JSON payloads)."""

    field: str
    label: str
    check: Callable[[Any], bool]
    message: str


# --- Predicates ---------------------------------------------------------------


def present(value: Any) -> bool:
    return value is not None


def not_blank(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def min_length(limit: int) -> Callable[[Any], bool]:
    def _check(value: Any) -> bool:
        return isinstance(value, str) and len(value.strip()) >= limit

    return _check


def positive(value: Any) -> bool:
    return value is not None and value > 0


def at_most(limit: Any) -> Callable[[Any], bool]:
    def _check(value: Any) -> bool:
        return value is None or value <= limit

    return _check


def amount_at_most(limit: Any) -> Callable[[Any], bool]:
    """Like ``at_most`` for Money values, compared on their amount."""

    def _check(value: Any) -> bool:
        return value is None or value.amount <= limit

    return _check


def one_of(choices: Iterable[Any]) -> Callable[[Any], bool]:
    allowed = frozenset(choices)

    def _check(value: Any) -> bool:
        return value in allowed

    return _check


# --- Evaluation ---------------------------------------------------------------


def check(entity: Any, rules: Iterable[Rule], prefix: str = "") -> list[Violation]:
    """Return a Violation for every rule *entity* does not satisfy."""
    return [
        Violation(prefix + rule.label, rule.message)
        for rule in rules
        if not rule.check(getattr(entity, rule.field))
    ]


def raise_if_any(violations: list[Violation], message: str) -> None:
    """Raise a ValidationError grouping *violations* by field, if any."""
    if not violations:
        return
    grouped: dict[str, list[str]] = {}
    for violation in violations:
        grouped.setdefault(violation.field, []).append(violation.message)
    raise ValidationError(message, grouped)
