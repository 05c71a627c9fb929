"""Tests for mastery.py: sampling weights and cell classification."""

from __future__ import annotations

import pytest

from times_trainer.facts import FactRecord
from times_trainer.mastery import (
    WEIGHT_DEFAULT,
    WEIGHT_SETTLED,
    WEIGHT_SHAKY,
    WEIGHT_STRUGGLING,
    WEIGHT_UNSEEN,
    cell_state,
    is_mastered,
    weight,
)


class TestWeight:
    def test_unseen(self):
        assert weight(FactRecord()) == WEIGHT_UNSEEN == 2.0

    def test_single_wrong_is_struggling(self):
        assert weight(FactRecord(correct=0, wrong=1)) == WEIGHT_STRUGGLING == 5.0

    def test_mistakes_take_precedence_over_practice(self):
        # correct >= 3 would suppress, but any wrong answer is checked first
        assert weight(FactRecord(correct=3, wrong=1)) == WEIGHT_SHAKY == 3.0

    def test_even_counts_are_shaky(self):
        assert weight(FactRecord(correct=2, wrong=2)) == WEIGHT_SHAKY

    def test_well_practiced_is_suppressed(self):
        assert weight(FactRecord(correct=3, wrong=0)) == WEIGHT_SETTLED == 0.5
        assert weight(FactRecord(correct=10, wrong=0)) == WEIGHT_SETTLED

    @pytest.mark.parametrize("correct", [1, 2])
    def test_few_correct_is_default(self, correct):
        assert weight(FactRecord(correct=correct, wrong=0)) == WEIGHT_DEFAULT == 1.0

    def test_struggling_is_ten_times_settled(self):
        assert WEIGHT_STRUGGLING / WEIGHT_SETTLED == 10


class TestCellState:
    def test_never(self):
        assert cell_state(FactRecord()) == "never"

    def test_red(self):
        assert cell_state(FactRecord(correct=1, wrong=2)) == "red"

    def test_orange(self):
        assert cell_state(FactRecord(correct=2, wrong=2)) == "orange"

    def test_green(self):
        assert cell_state(FactRecord(correct=3, wrong=1)) == "green"


class TestIsMastered:
    def test_strictly_more_correct(self):
        assert is_mastered(FactRecord(correct=1, wrong=0)) is True

    def test_tie_is_not_mastered(self):
        record = FactRecord(correct=2, wrong=2)
        assert is_mastered(record) is False
        assert cell_state(record) == "orange"

    def test_unseen_is_not_mastered(self):
        assert is_mastered(FactRecord()) is False

    def test_agrees_with_green_bucket(self):
        for correct in range(4):
            for wrong in range(4):
                record = FactRecord(correct=correct, wrong=wrong)
                assert is_mastered(record) == (cell_state(record) == "green")
