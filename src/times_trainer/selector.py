"""Weighted question selection over the filtered fact pool."""

from __future__ import annotations

import random
from typing import Iterator, Literal, Protocol, Sequence, Union

from .facts import MAX_OPERAND, MIN_OPERAND, Fact, all_pairs
from .mastery import weight
from .store import FactStore

ALL = "all"

FilterTag = Union[Literal["all"], int]


class RandomSource(Protocol):
    def random(self) -> float: ...


def parse_filter_tag(text: str) -> FilterTag:
    """Parse a filter pill value ('all' or '1'..'10')."""
    cleaned = text.strip().lower()
    if cleaned == ALL:
        return ALL
    if cleaned.isdigit() and MIN_OPERAND <= int(cleaned) <= MAX_OPERAND:
        return int(cleaned)
    raise ValueError(f"Unsupported filter: {text!r}")


class FilterSet:
    """Active factor filters. Never empty; 'all' excludes specific values."""

    def __init__(self, tags: Sequence[FilterTag] | None = None) -> None:
        self._tags: set[FilterTag] = {ALL}
        for tag in tags or ():
            if tag != ALL:
                self.toggle(tag)

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __iter__(self) -> Iterator[FilterTag]:
        if ALL in self._tags:
            yield ALL
        yield from sorted(tag for tag in self._tags if tag != ALL)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"FilterSet({list(self)!r})"

    @property
    def is_all(self) -> bool:
        return ALL in self._tags

    def reset(self) -> None:
        self._tags = {ALL}

    def toggle(self, tag: FilterTag) -> None:
        if tag == ALL:
            self.reset()
            return
        if isinstance(tag, bool) or not isinstance(tag, int) or not MIN_OPERAND <= tag <= MAX_OPERAND:
            raise ValueError(f"Unsupported filter: {tag!r}")
        self._tags.discard(ALL)
        if tag in self._tags:
            self._tags.remove(tag)
            if not self._tags:
                self._tags.add(ALL)
        else:
            self._tags.add(tag)

    def matches(self, a: int, b: int) -> bool:
        """True if either displayed operand is an active factor."""
        if self.is_all:
            return True
        return a in self._tags or b in self._tags


def filtered_pairs(filters: FilterSet) -> list[Fact]:
    # Matches against the generated (a, b), not a re-canonicalised pair.
    return [fact for fact in all_pairs() if filters.matches(fact.a, fact.b)]


def weighted_pick(candidates: Sequence[Fact], weights: Sequence[float], rng: RandomSource) -> Fact | None:
    """Linear cumulative walk; the last candidate absorbs rounding leftovers."""
    if not candidates:
        return None
    total = sum(weights)
    roll = rng.random() * total
    cumulative = 0.0
    for candidate, candidate_weight in zip(candidates, weights):
        cumulative += candidate_weight
        if cumulative > roll:
            return candidate
    return candidates[-1]


def select_question(
    filters: FilterSet,
    store: FactStore,
    rng: RandomSource | None = None,
) -> Fact | None:
    """Draw the next fact, biased toward the ones the learner gets wrong."""
    candidates = filtered_pairs(filters)
    if not candidates:
        return None
    weights = [weight(store.get(fact.a, fact.b)) for fact in candidates]
    return weighted_pick(candidates, weights, rng or random)


__all__ = [
    "ALL",
    "FilterSet",
    "FilterTag",
    "RandomSource",
    "filtered_pairs",
    "parse_filter_tag",
    "select_question",
    "weighted_pick",
]
