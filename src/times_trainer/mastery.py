"""Mastery classification and sampling weights for a single fact."""

from __future__ import annotations

from typing import Literal

from .facts import FactRecord

CellState = Literal["never", "red", "orange", "green"]

WEIGHT_UNSEEN = 2.0
WEIGHT_STRUGGLING = 5.0   # more wrong than correct
WEIGHT_SHAKY = 3.0        # has mistakes but currently ahead
WEIGHT_SETTLED = 0.5      # well practiced, suppressed
WEIGHT_DEFAULT = 1.0

SETTLED_MIN_CORRECT = 3


def weight(record: FactRecord) -> float:
    """Selection weight for a fact. Branch order matters: wrong > 0 beats correct >= 3."""
    if record.correct == 0 and record.wrong == 0:
        return WEIGHT_UNSEEN
    if record.wrong > record.correct:
        return WEIGHT_STRUGGLING
    if record.wrong > 0:
        return WEIGHT_SHAKY
    if record.correct >= SETTLED_MIN_CORRECT:
        return WEIGHT_SETTLED
    return WEIGHT_DEFAULT


def cell_state(record: FactRecord) -> CellState:
    if record.correct == 0 and record.wrong == 0:
        return "never"
    if record.wrong > record.correct:
        return "red"
    if record.wrong == record.correct:
        return "orange"
    return "green"


def is_mastered(record: FactRecord) -> bool:
    """A fact counts as mastered once correct answers strictly outnumber wrong ones."""
    return record.correct > record.wrong


__all__ = [
    "CellState",
    "SETTLED_MIN_CORRECT",
    "WEIGHT_DEFAULT",
    "WEIGHT_SETTLED",
    "WEIGHT_SHAKY",
    "WEIGHT_STRUGGLING",
    "WEIGHT_UNSEEN",
    "cell_state",
    "is_mastered",
    "weight",
]
