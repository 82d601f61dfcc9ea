"""Minimal rule-driven command-line option scanner.

Options are declared as :class:`Rule` objects binding a short key (``-t``) and
a long key (``--tag``) to a value type. Nothing is parsed up front: each typed
accessor rescans the argument snapshot and returns a fresh
:class:`OptionResult`, so repeated options are reported in the order they
appear.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_RE = re.compile(r"true", re.IGNORECASE)
_FALSE_RE = re.compile(r"false", re.IGNORECASE)
# Plain decimal forms only; Python literal extras such as "1_000" are refused.
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?inf(?:inity)?",
    re.IGNORECASE,
)


class RuleError(ValueError):
    """Raised when a rule declares a malformed short or long key."""


class OptionType(str, Enum):
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"


@dataclass(slots=True)
class Rule:
    """Declaration of a recognized option."""

    short_key: str
    long_key: str
    type: OptionType
    description: str = ""


@dataclass(slots=True, frozen=True)
class TruncatedKey:
    n_truncated: int
    original: str
    truncated: str

    @property
    def is_short(self) -> bool:
        return len(self.truncated) == 1

    @property
    def is_option(self) -> bool:
        """Return True when the token has option syntax (``-x`` or ``--xx``)."""

        if not self.truncated:
            return False
        return self.n_truncated == (1 if self.is_short else 2)


@dataclass(slots=True)
class OptionResult(Generic[T]):
    """Outcome of a single accessor call.

    ``values`` is ``None`` when the option was not found and an empty list when
    it was found without any usable value.
    """

    found: bool = False
    rule: Rule | None = None
    values: list[T] | None = None


def truncate_key(original: str) -> TruncatedKey:
    """Strip leading dashes from ``original`` and count them."""

    truncated = original.lstrip("-")
    return TruncatedKey(
        n_truncated=len(original) - len(truncated),
        original=original,
        truncated=truncated,
    )


def _normalize_rule(rule: Rule) -> Rule:
    short = truncate_key(rule.short_key)
    if short.n_truncated not in (0, 1) or len(short.truncated) != 1:
        raise RuleError(f"invalid rule: malformed short key {rule.short_key!r}")
    long = truncate_key(rule.long_key)
    if long.n_truncated not in (0, 2) or len(long.truncated) < 2:
        raise RuleError(f"invalid rule: malformed long key {rule.long_key!r}")
    try:
        option_type = OptionType(rule.type)
    except ValueError:
        raise RuleError(f"invalid rule: unsupported type {rule.type!r}") from None
    return replace(rule, short_key=short.truncated, long_key=long.truncated, type=option_type)


def _coerce_boolean(value: str | None) -> bool | None:
    if value is None:
        return True
    if _TRUE_RE.search(value):
        return True
    if _FALSE_RE.search(value):
        return False
    logger.debug("%r is not a boolean literal; treating it as true", value)
    return True


def _coerce_string(value: str | None) -> str | None:
    return value


def _coerce_number(value: str | None) -> int | float | None:
    if value is None:
        return None
    if _INT_RE.fullmatch(value):
        return int(value)
    if not _FLOAT_RE.fullmatch(value):
        logger.debug("%r is not a number; dropping it", value)
        return None
    return float(value)


class Arguments:
    """Typed, read-only view of an argument vector.

    Both ``rules`` and ``argv`` are copied on construction; later changes to
    the caller's objects have no effect. A malformed rule raises
    :class:`RuleError`. Everything else (unknown keys, missing or unparseable
    values) is reported through the returned :class:`OptionResult`.
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        argv: Sequence[str],
        *,
        prog: str | None = None,
    ) -> None:
        self._rules: tuple[Rule, ...] = tuple(_normalize_rule(rule) for rule in rules)
        self._argv: tuple[str, ...] = tuple(str(token) for token in argv)
        self._prog = prog

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(replace(rule) for rule in self._rules)

    @property
    def argv(self) -> tuple[str, ...]:
        return self._argv

    def get_rule(self, key: str) -> Rule | None:
        """Return the first rule whose short or long key equals ``key``.

        Leading dashes on ``key`` are ignored; a single remaining character is
        matched against short keys, anything longer against long keys.
        """

        candidate = truncate_key(key)
        if not candidate.truncated:
            logger.debug("invalid key %r: nothing left after stripping dashes", key)
        for rule in self._rules:
            if candidate.is_short:
                if candidate.truncated == rule.short_key:
                    return rule
            elif candidate.truncated == rule.long_key:
                return rule
        return None

    def _positions(self, rule: Rule) -> list[int]:
        positions: list[int] = []
        for index, token in enumerate(self._argv):
            candidate = truncate_key(token)
            if not candidate.is_option:
                continue
            expected = rule.short_key if candidate.is_short else rule.long_key
            if candidate.truncated == expected:
                positions.append(index)
        return positions

    def _value_after(self, position: int) -> str | None:
        following = position + 1
        if following >= len(self._argv):
            return None
        value = self._argv[following]
        if value.startswith("-"):
            return None
        return value

    def _get(self, key: str, coerce: Callable[[str | None], T | None]) -> OptionResult[T]:
        rule = self.get_rule(key)
        if rule is None:
            logger.debug("no rule declared for %r", key)
            return OptionResult()
        positions = self._positions(rule)
        if not positions:
            logger.debug("option %r not present in argv", key)
            return OptionResult()
        values: list[T] = []
        for position in positions:
            value = coerce(self._value_after(position))
            if value is not None:
                values.append(value)
        logger.debug("option %r found at %s with values %r", key, positions, values)
        return OptionResult(found=True, rule=replace(rule), values=values)

    def get_boolean(self, key: str) -> OptionResult[bool]:
        return self._get(key, _coerce_boolean)

    def get_string(self, key: str) -> OptionResult[str]:
        return self._get(key, _coerce_string)

    def get_number(self, key: str) -> OptionResult[int | float]:
        return self._get(key, _coerce_number)

    def generate_help(self) -> str:
        """Return an aligned usage listing of every declared rule."""

        header = f"Usage: {self._prog} [OPTIONS]" if self._prog else "Usage:"
        entries = [(f"  -{rule.short_key}, --{rule.long_key}", rule.description) for rule in self._rules]
        width = max((len(prefix) for prefix, _ in entries), default=0)
        lines = [header]
        lines.extend(f"{prefix.ljust(width)} : {description}" for prefix, description in entries)
        return "\n".join(lines) + "\n"


__all__ = [
    "Arguments",
    "OptionResult",
    "OptionType",
    "Rule",
    "RuleError",
    "TruncatedKey",
    "truncate_key",
]
