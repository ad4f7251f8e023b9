"""
Dataset Schema — Column roles, histogram bins, category encodings
==================================================================
The ONLY place to adapt for a different passenger-style dataset. Column
roles are declared here, never inferred from the data.

  TITANIC_SCHEMA    — column roles, bins, positive outcome value
  TITANIC_ENCODING  — versioned categorical → integer table used before
                      correlation analysis
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Tuple


ORIGIN_COLUMN = "origin"
UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class DatasetSchema:
    """Fixed column roles of the analyzed dataset."""
    id_column: str = "PassengerId"
    outcome_column: str = "Survived"
    positive_outcome: float = 1
    numeric_columns: Tuple[str, ...] = ("Age", "Fare", "SibSp", "Parch")
    categorical_columns: Tuple[str, ...] = ("Pclass", "Sex", "Embarked")
    feature_columns: Tuple[str, ...] = (
        "Pclass", "Sex", "Age", "SibSp", "Parch", "Fare", "Embarked",
    )
    # Inclusive upper bounds; values above the last bound land in the overflow bin
    histogram_bins: Mapping[str, Tuple[float, ...]] = field(default_factory=lambda: {
        "Age": (10, 20, 30, 40, 50, 60, 70),
        "Fare": (10, 20, 30, 40, 50, 100),
    })
    survival_group_columns: Tuple[str, ...] = ("Sex", "Pclass")
    correlation_features: Tuple[str, ...] = (
        "Pclass", "Sex", "Age", "SibSp", "Parch", "Fare", "Embarked", "Survived",
    )

    def required_columns(self, origin: str) -> List[str]:
        """Columns every record of the given origin must carry."""
        cols = [self.id_column, *self.feature_columns]
        if origin == "train":
            cols.append(self.outcome_column)
        return cols

    def is_numeric(self, column: str) -> bool:
        return column in self.numeric_columns


@dataclass(frozen=True)
class CategoryEncoding:
    """
    Versioned mapping of raw categorical values to integers.

    A value absent from a column's mapping (including a missing value)
    takes that column's default code.
    """
    version: str
    mappings: Mapping[str, Mapping[Any, int]]
    defaults: Mapping[str, int]

    def encodes(self, column: str) -> bool:
        return column in self.mappings

    def encode(self, column: str, value: Any) -> int:
        mapping = self.mappings[column]
        if value in mapping:
            return mapping[value]
        return self.defaults[column]


TITANIC_SCHEMA = DatasetSchema()

TITANIC_ENCODING = CategoryEncoding(
    version="1",
    mappings={
        "Sex": {"male": 0},
        "Embarked": {"C": 0, "Q": 1},
    },
    defaults={
        "Sex": 1,
        "Embarked": 2,
    },
)

