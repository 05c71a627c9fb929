"""Per-fact answer counters with write-through persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Iterator, Mapping

from .facts import Fact, FactKey, FactRecord, canonical, parse_stat_key, stat_key
from .storage import STORAGE_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class InvalidStoreData(ValueError):
    """Serialized fact data does not have the expected shape."""


class FactStore:
    """Mapping of canonical fact keys to answer counters.

    Every mutation rewrites the full serialized store to the bound backend.
    Reads never create records; an untouched fact reads as zero counts.
    Records handed out are copies, so counters only change through
    ``record_outcome``. Both spellings of one fact passed to the constructor
    are summed.
    """

    def __init__(
        self,
        records: Mapping[FactKey, FactRecord] | None = None,
        *,
        backend: KeyValueStore | None = None,
        key: str = STORAGE_KEY,
    ) -> None:
        self._records: dict[FactKey, FactRecord] = {}
        for (a, b), record in (records or {}).items():
            existing = self._records.setdefault(canonical(a, b), FactRecord())
            existing.correct += record.correct
            existing.wrong += record.wrong
        self.backend = backend
        self.key = key

    @classmethod
    def load(cls, backend: KeyValueStore, *, key: str = STORAGE_KEY) -> "FactStore":
        store = load_from_persistent(backend.read(key))
        store.backend = backend
        store.key = key
        return store

    def __len__(self) -> int:
        return len(self._records)

    def get(self, a: int, b: int) -> FactRecord:
        record = self._records.get(canonical(a, b))
        if record is None:
            return FactRecord()
        return replace(record)

    def records(self) -> Iterator[tuple[Fact, FactRecord]]:
        for lo, hi in sorted(self._records):
            yield Fact(lo, hi), replace(self._records[(lo, hi)])

    def record_outcome(self, a: int, b: int, correct: bool) -> FactRecord:
        key = canonical(a, b)
        record = self._records.setdefault(key, FactRecord())
        if correct:
            record.correct += 1
        else:
            record.wrong += 1
        self.save()
        return replace(record)

    def reset_all(self) -> None:
        self._records.clear()
        self.save()

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {
            stat_key(lo, hi): {"correct": record.correct, "wrong": record.wrong}
            for (lo, hi), record in sorted(self._records.items())
        }

    def dumps(self) -> str:
        return json.dumps(self.to_dict())

    def save(self) -> None:
        if self.backend is None:
            return
        self.backend.write(self.key, self.dumps())


def _parse_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidStoreData(f"Expected a non-negative integer count, got {value!r}")
    return value


def parse_records(payload: Any) -> dict[FactKey, FactRecord]:
    """Validate decoded JSON and build canonical records.

    Keys written in either operand order are accepted; both spellings of the
    same fact are summed.
    """
    if not isinstance(payload, dict):
        raise InvalidStoreData("Fact data must be a JSON object")
    records: dict[FactKey, FactRecord] = {}
    for raw_key, raw_record in payload.items():
        try:
            key = parse_stat_key(raw_key)
        except ValueError as exc:
            raise InvalidStoreData(str(exc)) from exc
        if not isinstance(raw_record, dict):
            raise InvalidStoreData(f"Record for {raw_key!r} must be an object")
        correct = _parse_count(raw_record.get("correct"))
        wrong = _parse_count(raw_record.get("wrong"))
        existing = records.setdefault(key, FactRecord())
        existing.correct += correct
        existing.wrong += wrong
    return records


def load_from_persistent(raw: str | None) -> FactStore:
    """Build a store from its serialized form; corrupt data yields an empty store."""
    if raw is None:
        return FactStore()
    try:
        records = parse_records(json.loads(raw))
    except (ValueError, TypeError, RecursionError) as exc:
        logger.warning("Discarding unreadable fact data: %s", exc)
        return FactStore()
    return FactStore(records)


__all__ = [
    "FactStore",
    "InvalidStoreData",
    "load_from_persistent",
    "parse_records",
]
