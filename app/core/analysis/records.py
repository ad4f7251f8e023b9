"""
Record Model — Immutable records, missing-value predicates, merged session
===========================================================================
A `Record` is one parsed row plus the origin tag (train | test) assigned at
load time. An `AnalysisSession` is built once per successful load: it
validates the schema, concatenates train then test records, and is then
passed by reference to every analysis function. Nothing here is mutated
after construction.

The two value predicates below are the single definition of "missing" that
every aggregate shares:

  is_missing(value)        — None, NaN, empty / blank string
  to_number(value)         — float for numeric-valid values, else None
"""

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import SchemaMismatchError
from .schema import ORIGIN_COLUMN, DatasetSchema, TITANIC_SCHEMA

logger = logging.getLogger(__name__)

TRAIN = "train"
TEST = "test"
ORIGINS = (TRAIN, TEST)


# ═══════════════════════════════════════════════════════════════
# VALUE PREDICATES
# ═══════════════════════════════════════════════════════════════

def is_missing(value: Any) -> bool:
    """True for None, float NaN, and empty or whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def to_number(value: Any) -> Optional[float]:
    """
    Parse a value as a finite number, or return None.

    Booleans are not numbers here; numeric strings ("22", " 7.25 ") are.
    """
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_missing_for(value: Any, numeric: bool) -> bool:
    """Column-aware missing check: numeric columns also reject non-numbers."""
    if numeric:
        return to_number(value) is None
    return is_missing(value)


# ═══════════════════════════════════════════════════════════════
# RECORD
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Record:
    """One row of the working dataset. Values are exposed read-only."""
    origin: str
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.origin not in ORIGINS:
            raise ValueError(f"Unknown origin '{self.origin}' (expected one of {ORIGINS})")
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, column: str, default: Any = None) -> Any:
        if column == ORIGIN_COLUMN:
            return self.origin
        return self.values.get(column, default)

    def columns(self) -> List[str]:
        return [*self.values.keys(), ORIGIN_COLUMN]

    def to_dict(self) -> Dict[str, Any]:
        row = dict(self.values)
        row[ORIGIN_COLUMN] = self.origin
        return row


def make_records(rows: Iterable[Mapping[str, Any]], origin: str) -> Tuple[Record, ...]:
    return tuple(Record(origin=origin, values=row) for row in rows)


# ═══════════════════════════════════════════════════════════════
# SESSION
# ═══════════════════════════════════════════════════════════════

def validate_schema(records: Sequence[Record], origin: str,
                    schema: DatasetSchema = TITANIC_SCHEMA) -> None:
    """Fail fast if any record lacks a column its origin requires."""
    required = schema.required_columns(origin)
    missing = set()
    for record in records:
        missing.update(col for col in required if col not in record.values)
    if missing:
        ordered = [col for col in required if col in missing]
        logger.warning(f"Schema mismatch in {origin} data: missing {ordered}")
        raise SchemaMismatchError(origin, ordered)


@dataclass(frozen=True)
class AnalysisSession:
    """
    The working dataset of one load: train records, test records and their
    merge (all train first, then all test). Built via `from_rows`.
    """
    train: Tuple[Record, ...]
    test: Tuple[Record, ...]
    schema: DatasetSchema = TITANIC_SCHEMA
    merged: Tuple[Record, ...] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "merged", tuple(self.train) + tuple(self.test))

    @classmethod
    def from_rows(
        cls,
        train_rows: Iterable[Mapping[str, Any]],
        test_rows: Iterable[Mapping[str, Any]],
        schema: DatasetSchema = TITANIC_SCHEMA,
    ) -> "AnalysisSession":
        train = make_records(train_rows, TRAIN)
        test = make_records(test_rows, TEST)
        validate_schema(train, TRAIN, schema)
        validate_schema(test, TEST, schema)
        session = cls(train=train, test=test, schema=schema)
        logger.info(
            f"Merged dataset: {session.total_records} records "
            f"({len(train)} train, {len(test)} test)"
        )
        return session

    @property
    def total_records(self) -> int:
        return len(self.merged)

    @property
    def is_empty(self) -> bool:
        return not self.merged

    def columns(self) -> List[str]:
        """Column names of the first merged record (columns are uniform)."""
        if not self.merged:
            return []
        return self.merged[0].columns()

    def overview(self) -> Dict[str, Any]:
        return {
            "total_records": self.total_records,
            "train_records": len(self.train),
            "test_records": len(self.test),
            "features": list(self.schema.feature_columns),
        }

    def preview(self, n: int = 5) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in self.merged[:max(n, 0)]]
