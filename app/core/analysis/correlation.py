"""
Correlation Builder — Pearson r across encoded passenger features
==================================================================
Takes train records only, keeps those whose required numeric fields are all
present and numeric-valid, encodes categorical features through a
`CategoryEncoding` table, and computes Pearson correlations for the fixed
feature set.

Two output shapes:
  full     — symmetric N×N matrix, diagonal 1.0
  outcome  — one value per feature: its correlation with the outcome column
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .records import Record, to_number
from .schema import (
    CategoryEncoding, DatasetSchema, TITANIC_ENCODING, TITANIC_SCHEMA,
)
from .statistics import pearson_correlation

logger = logging.getLogger(__name__)

SHAPE_FULL = "full"
SHAPE_OUTCOME = "outcome"
CORRELATION_SHAPES = (SHAPE_FULL, SHAPE_OUTCOME)


@dataclass
class CorrelationTable:
    """Correlation output in either the full-matrix or outcome-vector shape."""
    shape: str
    features: List[str]
    sample_size: int
    encoding_version: str
    matrix: Optional[Dict[str, Dict[str, float]]] = None
    with_outcome: Optional[Dict[str, float]] = None
    excluded_records: int = 0

    def get(self, a: str, b: str) -> float:
        if self.matrix is None:
            raise KeyError("Pairwise lookup needs the full correlation matrix")
        return self.matrix[a][b]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "shape": self.shape,
            "features": self.features,
            "sample_size": self.sample_size,
            "excluded_records": self.excluded_records,
            "encoding_version": self.encoding_version,
        }
        if self.matrix is not None:
            result["matrix"] = self.matrix
        if self.with_outcome is not None:
            result["with_outcome"] = self.with_outcome
        return result


@dataclass
class _EncodedColumns:
    columns: Dict[str, List[float]] = field(default_factory=dict)
    size: int = 0


def required_numeric_features(schema: DatasetSchema, encoding: CategoryEncoding) -> List[str]:
    """Correlation features that are used as-is and so must be numeric-valid."""
    return [f for f in schema.correlation_features if not encoding.encodes(f)]


def encode_records(
    train_records: Sequence[Record],
    schema: DatasetSchema = TITANIC_SCHEMA,
    encoding: CategoryEncoding = TITANIC_ENCODING,
) -> _EncodedColumns:
    """Filter to complete records and build one numeric column per feature."""
    required = required_numeric_features(schema, encoding)
    encoded = _EncodedColumns(columns={f: [] for f in schema.correlation_features})
    for record in train_records:
        numbers = {f: to_number(record.get(f)) for f in required}
        if any(v is None for v in numbers.values()):
            continue
        for feature in schema.correlation_features:
            if encoding.encodes(feature):
                encoded.columns[feature].append(float(encoding.encode(feature, record.get(feature))))
            else:
                encoded.columns[feature].append(numbers[feature])
        encoded.size += 1
    return encoded


def build_correlation_table(
    train_records: Sequence[Record],
    schema: DatasetSchema = TITANIC_SCHEMA,
    encoding: CategoryEncoding = TITANIC_ENCODING,
    shape: str = SHAPE_FULL,
) -> CorrelationTable:
    """Correlations over the fixed feature set in the requested shape."""
    if shape not in CORRELATION_SHAPES:
        raise ValueError(f"Unknown correlation shape '{shape}' (expected one of {CORRELATION_SHAPES})")

    features = list(schema.correlation_features)
    encoded = encode_records(train_records, schema, encoding)
    table = CorrelationTable(
        shape=shape,
        features=features,
        sample_size=encoded.size,
        encoding_version=encoding.version,
        excluded_records=len(train_records) - encoded.size,
    )
    if encoded.size == 0:
        logger.warning("No complete train records for correlation analysis")
        if shape == SHAPE_FULL:
            table.matrix = {a: {b: (1.0 if a == b else 0.0) for b in features} for a in features}
        else:
            table.with_outcome = {f: (1.0 if f == schema.outcome_column else 0.0) for f in features}
        return table

    cols = encoded.columns
    if shape == SHAPE_OUTCOME:
        outcome = schema.outcome_column
        table.with_outcome = {
            f: 1.0 if f == outcome else pearson_correlation(cols[f], cols[outcome])
            for f in features
        }
        return table

    matrix: Dict[str, Dict[str, float]] = {f: {} for f in features}
    for i, a in enumerate(features):
        matrix[a][a] = 1.0
        for b in features[i + 1:]:
            r = pearson_correlation(cols[a], cols[b])
            matrix[a][b] = r
            matrix[b][a] = r
    # Re-key each row in feature order
    table.matrix = {a: {b: matrix[a][b] for b in features} for a in features}
    return table
