"""Quiz session state: the current question, active filters and the fact store."""

from __future__ import annotations

from dataclasses import dataclass

from .facts import MAX_OPERAND, MIN_OPERAND, Fact, FactRecord
from .mastery import CellState, cell_state
from .selector import FilterSet, FilterTag, RandomSource, select_question
from .storage import KeyValueStore
from .store import FactStore
from .summary import StatsSummary, summarize


@dataclass(slots=True)
class CurrentQuestion:
    fact: Fact
    revealed: bool = False


@dataclass(slots=True, frozen=True)
class MatrixCell:
    a: int
    b: int
    product: int
    state: CellState
    record: FactRecord


class Trainer:
    """Owns everything one learner's quiz needs between events.

    Each method runs to completion and persists through the store before
    returning, so callers can render straight after.
    """

    def __init__(
        self,
        store: FactStore,
        filters: FilterSet | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.store = store
        self.filters = filters or FilterSet()
        self.rng = rng
        self.current: CurrentQuestion | None = None

    @classmethod
    def load(cls, backend: KeyValueStore, rng: RandomSource | None = None) -> "Trainer":
        trainer = cls(FactStore.load(backend), rng=rng)
        trainer.load_next_question()
        return trainer

    def load_next_question(self) -> CurrentQuestion | None:
        fact = select_question(self.filters, self.store, self.rng)
        self.current = CurrentQuestion(fact) if fact is not None else None
        return self.current

    def show_answer(self) -> bool:
        if self.current is None or self.current.revealed:
            return False
        self.current.revealed = True
        return True

    def record_answer(self, correct: bool) -> FactRecord | None:
        if self.current is None:
            return None
        fact = self.current.fact
        return self.store.record_outcome(fact.a, fact.b, correct)

    def toggle_filter(self, tag: FilterTag) -> CurrentQuestion | None:
        self.filters.toggle(tag)
        return self.load_next_question()

    def jump_to_question(self, a: int, b: int) -> CurrentQuestion:
        # The tapped cell must stay reachable, so filters go back to 'all'.
        fact = Fact.of(a, b)
        self.filters.reset()
        self.current = CurrentQuestion(fact)
        return self.current

    def reset(self) -> CurrentQuestion | None:
        self.store.reset_all()
        return self.load_next_question()

    def summary(self) -> StatsSummary:
        return summarize(self.store)

    def matrix(self) -> list[list[MatrixCell]]:
        rows: list[list[MatrixCell]] = []
        for a in range(MIN_OPERAND, MAX_OPERAND + 1):
            row = []
            for b in range(MIN_OPERAND, MAX_OPERAND + 1):
                record = self.store.get(a, b)
                row.append(MatrixCell(a=a, b=b, product=a * b, state=cell_state(record), record=record))
            rows.append(row)
        return rows


__all__ = ["CurrentQuestion", "MatrixCell", "Trainer"]
