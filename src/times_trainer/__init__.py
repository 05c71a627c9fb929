"""Times Trainer: adaptive multiplication-fact quizzing."""

from .facts import Fact, FactRecord, all_pairs, canonical, stat_key
from .mastery import cell_state, is_mastered, weight
from .selector import FilterSet, select_question
from .store import FactStore, load_from_persistent
from .summary import StatsSummary, summarize
from .trainer import Trainer

__all__ = [
    "Fact",
    "FactRecord",
    "FactStore",
    "FilterSet",
    "StatsSummary",
    "Trainer",
    "all_pairs",
    "canonical",
    "cell_state",
    "is_mastered",
    "load_from_persistent",
    "select_question",
    "stat_key",
    "summarize",
    "weight",
]
