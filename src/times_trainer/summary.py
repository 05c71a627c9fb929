from __future__ import annotations

from dataclasses import dataclass

from .facts import all_pairs
from .mastery import is_mastered
from .store import FactStore


@dataclass(slots=True, frozen=True)
class StatsSummary:
    mastered: int
    total: int
    total_correct: int
    total_wrong: int


def summarize(store: FactStore) -> StatsSummary:
    """Aggregate counts over all 55 facts. Recomputed on every call."""
    pairs = all_pairs()
    mastered = 0
    total_correct = 0
    total_wrong = 0
    for fact in pairs:
        record = store.get(fact.a, fact.b)
        total_correct += record.correct
        total_wrong += record.wrong
        if is_mastered(record):
            mastered += 1
    return StatsSummary(
        mastered=mastered,
        total=len(pairs),
        total_correct=total_correct,
        total_wrong=total_wrong,
    )


__all__ = ["StatsSummary", "summarize"]
