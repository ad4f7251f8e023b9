"""
Per-Column Aggregators — Missing values, numeric & categorical summaries
=========================================================================
Each function is a pure scan over the merged records of an
`AnalysisSession` (or, for outcome views, the train records only). Every
aggregate uses the same missing-value predicate as the missing-value
report, so "Unknown" counts, summary denominators and missing percentages
always agree.

  1. analyze_missing_values  — % missing per column
  2. summarize_numeric       — mean / median / population SD per numeric column
  3. summarize_categorical   — value counts with an "Unknown" bucket
  4. bin_values / build_histograms — fixed-edge histograms
  5. survival_by_group       — survived vs died per group value (train only)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .records import Record, is_missing, is_missing_for, to_number
from .schema import UNKNOWN_LABEL, DatasetSchema, TITANIC_SCHEMA
from .statistics import mean, median, standard_deviation

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════
# RESULT DATA CLASSES
# ═══════════════════════════════════════════════════════════════

@dataclass
class NumericStats:
    """Descriptive statistics of one numeric column."""
    column: str
    count: int
    mean: float
    median: float
    std_dev: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "std_dev": self.std_dev,
        }


@dataclass
class CategoryCount:
    value: str
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "count": self.count, "percentage": self.percentage}


@dataclass
class HistogramBin:
    range_label: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"range_label": self.range_label, "count": self.count}


@dataclass
class GroupOutcome:
    survived: int = 0
    died: int = 0

    @property
    def total(self) -> int:
        return self.survived + self.died

    def to_dict(self) -> Dict[str, Any]:
        return {"survived": self.survived, "died": self.died}


@dataclass
class GroupSurvivalReport:
    """Outcome tallies per value of one grouping column."""
    column: str
    groups: Dict[str, GroupOutcome] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {value: outcome.to_dict() for value, outcome in self.groups.items()}


# ═══════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════

def category_label(value: Any) -> str:
    """String label of a categorical value; missing values become "Unknown"."""
    if is_missing(value):
        return UNKNOWN_LABEL
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def numeric_values(records: Sequence[Record], column: str) -> List[float]:
    """Numeric-valid values of a column, in record order."""
    values = []
    for record in records:
        number = to_number(record.get(column))
        if number is not None:
            values.append(number)
    return values


# ═══════════════════════════════════════════════════════════════
# 1. MISSING VALUES
# ═══════════════════════════════════════════════════════════════

def analyze_missing_values(
    records: Sequence[Record],
    schema: DatasetSchema = TITANIC_SCHEMA,
) -> Dict[str, float]:
    """
    Percentage (0-100) of records missing each column.

    Columns come from the first record; numeric columns also count values
    that fail numeric parsing as missing.
    """
    if not records:
        return {}
    total = len(records)
    report = {}
    for col in records[0].columns():
        numeric = schema.is_numeric(col)
        missing = sum(1 for r in records if is_missing_for(r.get(col), numeric))
        report[col] = 100.0 * missing / total
    return report


# ═══════════════════════════════════════════════════════════════
# 2. NUMERIC SUMMARY
# ═══════════════════════════════════════════════════════════════

def summarize_numeric(
    records: Sequence[Record],
    schema: DatasetSchema = TITANIC_SCHEMA,
) -> Dict[str, NumericStats]:
    """Mean / median / SD per numeric column; columns with no values are omitted."""
    summary = {}
    for col in schema.numeric_columns:
        values = numeric_values(records, col)
        if not values:
            logger.debug(f"No numeric values for '{col}', omitting from summary")
            continue
        col_mean = mean(values)
        summary[col] = NumericStats(
            column=col,
            count=len(values),
            mean=col_mean,
            median=median(values),
            std_dev=standard_deviation(values, col_mean),
        )
    return summary


# ═══════════════════════════════════════════════════════════════
# 3. CATEGORICAL FREQUENCIES
# ═══════════════════════════════════════════════════════════════

def count_values(records: Sequence[Record], column: str) -> Dict[str, int]:
    """Value counts in first-encounter order, missing under "Unknown"."""
    counts: Dict[str, int] = {}
    for record in records:
        label = category_label(record.get(column))
        counts[label] = counts.get(label, 0) + 1
    return counts


def summarize_categorical(
    records: Sequence[Record],
    schema: DatasetSchema = TITANIC_SCHEMA,
) -> Dict[str, List[CategoryCount]]:
    """Per categorical column: value, count and % of ALL records."""
    total = len(records)
    summary = {}
    for col in schema.categorical_columns:
        counts = count_values(records, col)
        summary[col] = [
            CategoryCount(value=value, count=count,
                          percentage=100.0 * count / total if total else 0.0)
            for value, count in counts.items()
        ]
    return summary


# ═══════════════════════════════════════════════════════════════
# 4. HISTOGRAMS
# ═══════════════════════════════════════════════════════════════

def _format_bound(bound: float) -> str:
    if isinstance(bound, float) and bound.is_integer():
        return str(int(bound))
    return str(bound)


def bin_labels(upper_bounds: Sequence[float]) -> List[str]:
    """["<=10", "10-20", ..., ">70"] for bounds [10, 20, ..., 70]."""
    if not upper_bounds:
        return ["all"]
    labels = [f"<={_format_bound(upper_bounds[0])}"]
    for lower, upper in zip(upper_bounds, upper_bounds[1:]):
        labels.append(f"{_format_bound(lower)}-{_format_bound(upper)}")
    labels.append(f">{_format_bound(upper_bounds[-1])}")
    return labels


def bin_values(values: Sequence[float], upper_bounds: Sequence[float]) -> List[HistogramBin]:
    """
    Count values into half-open bins: a value lands in the first bin whose
    inclusive upper bound it does not exceed, otherwise in the overflow bin.
    """
    bounds = sorted(upper_bounds)
    counts = [0] * (len(bounds) + 1)
    for value in values:
        for i, bound in enumerate(bounds):
            if value <= bound:
                counts[i] += 1
                break
        else:
            counts[-1] += 1
    return [HistogramBin(range_label=label, count=count)
            for label, count in zip(bin_labels(bounds), counts)]


def build_histograms(
    records: Sequence[Record],
    schema: DatasetSchema = TITANIC_SCHEMA,
) -> Dict[str, List[HistogramBin]]:
    return {
        col: bin_values(numeric_values(records, col), bounds)
        for col, bounds in schema.histogram_bins.items()
    }


# ═══════════════════════════════════════════════════════════════
# 5. GROUP SURVIVAL
# ═══════════════════════════════════════════════════════════════

def survival_by_group(
    train_records: Sequence[Record],
    column: str,
    schema: DatasetSchema = TITANIC_SCHEMA,
) -> GroupSurvivalReport:
    """
    Survived / died counts per value of `column`.

    Only records with a non-missing outcome participate. A record survived
    exactly when its outcome equals the positive value; every other
    non-missing outcome counts as died.
    """
    report = GroupSurvivalReport(column=column)
    for record in train_records:
        outcome = record.get(schema.outcome_column)
        if is_missing(outcome):
            continue
        group = report.groups.setdefault(category_label(record.get(column)), GroupOutcome())
        if to_number(outcome) == schema.positive_outcome:
            group.survived += 1
        else:
            group.died += 1
    return report
