"""Multiplication fact identity: canonical keys and the fixed 1–10 domain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

MIN_OPERAND = 1
MAX_OPERAND = 10
TOTAL_FACTS = 55

FactKey = tuple[int, int]


def _check_operand(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Operand must be an integer, got {value!r}")
    if not MIN_OPERAND <= value <= MAX_OPERAND:
        raise ValueError(f"Operand out of range {MIN_OPERAND}-{MAX_OPERAND}: {value}")
    return value


def canonical(a: int, b: int) -> FactKey:
    """Return the (lo, hi) identity of a fact, independent of operand order."""
    _check_operand(a)
    _check_operand(b)
    return (a, b) if a <= b else (b, a)


def stat_key(a: int, b: int) -> str:
    lo, hi = canonical(a, b)
    return f"{lo}x{hi}"


def parse_stat_key(key: str) -> FactKey:
    """Turn '3x7' (or '7x3') into its canonical tuple."""
    left, sep, right = key.partition("x")
    if not sep or not left.isdigit() or not right.isdigit():
        raise ValueError(f"Malformed fact key: {key!r}")
    return canonical(int(left), int(right))


class Fact(NamedTuple):
    """One multiplication problem, keeping the operand order it is shown in."""

    a: int
    b: int

    @classmethod
    def of(cls, a: int, b: int) -> "Fact":
        _check_operand(a)
        _check_operand(b)
        return cls(a, b)

    @property
    def key(self) -> FactKey:
        return canonical(self.a, self.b)

    @property
    def product(self) -> int:
        return self.a * self.b

    @property
    def label(self) -> str:
        return f"{self.a}×{self.b}"


@dataclass(slots=True)
class FactRecord:
    correct: int = 0
    wrong: int = 0

    @property
    def attempts(self) -> int:
        return self.correct + self.wrong

    @property
    def unseen(self) -> bool:
        return self.correct == 0 and self.wrong == 0


def all_pairs() -> list[Fact]:
    """The 55 facts in generation order: a from 1..10, b from a..10."""
    return [
        Fact(a, b)
        for a in range(MIN_OPERAND, MAX_OPERAND + 1)
        for b in range(a, MAX_OPERAND + 1)
    ]


__all__ = [
    "Fact",
    "FactKey",
    "FactRecord",
    "MAX_OPERAND",
    "MIN_OPERAND",
    "TOTAL_FACTS",
    "all_pairs",
    "canonical",
    "parse_stat_key",
    "stat_key",
]
