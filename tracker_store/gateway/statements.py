"""
Conflict-aware INSERT statement construction.

An UpsertSpec describes one relation: its columns, the conflict key, and the
subset of columns a conflicting row may overwrite. Everything else is left
untouched on conflict, so "first write wins" for those columns. An empty
update set renders `ON CONFLICT ... DO NOTHING`.

Identifiers come from the module-level specs below, never from callers, so
they are interpolated directly; values always travel as bind parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from pydantic import BaseModel

# PostgreSQL caps a single statement at 65535 bind parameters.
MAX_BIND_PARAMS = 65_535


@dataclass(frozen=True)
class UpsertSpec:
    table: str
    columns: Tuple[str, ...]
    conflict_key: Tuple[str, ...]
    update_columns: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        unknown = set(self.conflict_key + self.update_columns) - set(self.columns)
        if unknown:
            raise ValueError(f"{self.table}: unknown columns {sorted(unknown)}")
        if set(self.conflict_key) & set(self.update_columns):
            raise ValueError(f"{self.table}: conflict key columns cannot be overwritten")

    @property
    def immutable_columns(self) -> Tuple[str, ...]:
        """Columns kept from the first write when a conflicting row arrives."""
        return tuple(
            c for c in self.columns if c not in self.conflict_key and c not in self.update_columns
        )

    @property
    def max_rows_per_statement(self) -> int:
        return MAX_BIND_PARAMS // len(self.columns)

    def conflict_clause(self) -> str:
        key = ", ".join(self.conflict_key)
        if not self.update_columns:
            return f"ON CONFLICT ({key}) DO NOTHING"
        assignments = ", ".join(f"{c} = EXCLUDED.{c}" for c in self.update_columns)
        return f"ON CONFLICT ({key}) DO UPDATE SET {assignments}"

    def render(self, row_count: int) -> str:
        """Render one multi-row INSERT for `row_count` rows."""
        if row_count <= 0:
            raise ValueError("row_count must be positive")
        placeholders = "(" + ", ".join(["%s"] * len(self.columns)) + ")"
        values = ", ".join([placeholders] * row_count)
        return (
            f"INSERT INTO {self.table} ({', '.join(self.columns)}) "
            f"VALUES {values} {self.conflict_clause()}"
        )

    def params(self, rows: Sequence[BaseModel]) -> List[Any]:
        """Flatten rows into bind parameters in column order."""
        flat: List[Any] = []
        for row in rows:
            flat.extend(getattr(row, c) for c in self.columns)
        return flat

    def key_of(self, row: BaseModel) -> Tuple[Any, ...]:
        return tuple(getattr(row, c) for c in self.conflict_key)

    def collapse(self, rows: Sequence[BaseModel]) -> List[BaseModel]:
        """
        Merge rows sharing a conflict key into one row per key.

        The merge mirrors what the store does across statements: immutable
        columns keep the first occurrence, update columns take the last one.
        Key order follows first occurrence.
        """
        merged: Dict[Tuple[Any, ...], BaseModel] = {}
        for row in rows:
            key = self.key_of(row)
            first = merged.get(key)
            if first is None:
                merged[key] = row
            elif self.update_columns:
                merged[key] = first.model_copy(
                    update={c: getattr(row, c) for c in self.update_columns}
                )
        return list(merged.values())


SUBMISSIONS = UpsertSpec(
    table="submissions",
    columns=(
        "id",
        "epoch_second",
        "problem_id",
        "contest_id",
        "user_id",
        "language",
        "point",
        "length",
        "result",
        "execution_time",
    ),
    conflict_key=("id",),
    update_columns=("user_id", "result", "point", "execution_time"),
)

CONTESTS = UpsertSpec(
    table="contests",
    columns=("id", "start_epoch_second", "duration_second", "title", "rate_change"),
    conflict_key=("id",),
)

PROBLEMS = UpsertSpec(
    table="problems",
    columns=("id", "contest_id", "title"),
    conflict_key=("id",),
)

CONTEST_PROBLEM = UpsertSpec(
    table="contest_problem",
    columns=("contest_id", "problem_id"),
    conflict_key=("contest_id", "problem_id"),
)

PERFORMANCES = UpsertSpec(
    table="performances",
    columns=("inner_performance", "contest_id", "user_id"),
    conflict_key=("contest_id", "user_id"),
)

CONTESTS_WITHOUT_PERFORMANCES_SQL = (
    "SELECT contests.id FROM contests "
    "LEFT JOIN performances ON performances.contest_id = contests.id "
    "WHERE performances.contest_id IS NULL "
    "AND contests.start_epoch_second >= %s "
    "AND contests.rate_change <> %s"
)


__all__ = [
    "CONTESTS",
    "CONTESTS_WITHOUT_PERFORMANCES_SQL",
    "CONTEST_PROBLEM",
    "MAX_BIND_PARAMS",
    "PERFORMANCES",
    "PROBLEMS",
    "SUBMISSIONS",
    "UpsertSpec",
]
