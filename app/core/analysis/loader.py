"""
Dataset Loader — Delimited text → typed row dicts → AnalysisSession
=====================================================================
Parses train first, then test; a failure on either file aborts before the
merge so the caller's current session is left untouched.

Parse options mirror a generic delimited-text parser:
  header=True            — first row names the columns
  infer_types=True       — numbers become int/float, blanks become None
  skip_blank_lines=True  — empty lines are dropped
"""

import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

from .errors import MissingInputFile, ParseFailure
from .records import TEST, TRAIN, AnalysisSession
from .schema import DatasetSchema, TITANIC_SCHEMA

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseOptions:
    header: bool = True
    infer_types: bool = True
    skip_blank_lines: bool = True
    delimiter: str = ","
    encoding: str = "utf-8"


DEFAULT_PARSE_OPTIONS = ParseOptions()


def parse_delimited(
    data: bytes,
    file_label: str,
    options: ParseOptions = DEFAULT_PARSE_OPTIONS,
) -> List[Dict[str, Any]]:
    """
    Parse delimited text into ordered row dicts of plain Python values.

    Missing cells become None. Raises ParseFailure on malformed input.
    """
    try:
        df = pd.read_csv(
            io.BytesIO(data),
            sep=options.delimiter,
            header=0 if options.header else None,
            dtype=None if options.infer_types else str,
            skip_blank_lines=options.skip_blank_lines,
            keep_default_na=True,
            encoding=options.encoding,
        )
    except pd.errors.EmptyDataError:
        raise ParseFailure(file_label, "file is empty")
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Failed to parse {file_label} file: {e}")
        raise ParseFailure(file_label, str(e)) from e

    if not options.header:
        df.columns = [f"column_{i}" for i in range(len(df.columns))]
    df.columns = [str(c).strip() for c in df.columns]

    # Box numpy scalars as Python objects, NaN as None
    df = df.astype(object).where(pd.notna(df), None)
    rows = df.to_dict(orient="records")
    logger.info(f"Parsed {file_label} file: {len(rows)} rows, {len(df.columns)} columns")
    return rows


def load_session(
    train_data: Optional[bytes],
    test_data: Optional[bytes],
    schema: DatasetSchema = TITANIC_SCHEMA,
    options: ParseOptions = DEFAULT_PARSE_OPTIONS,
) -> AnalysisSession:
    """Parse both files (train, then test), validate, and merge."""
    missing = [label for label, data in ((TRAIN, train_data), (TEST, test_data)) if data is None]
    if missing:
        raise MissingInputFile(missing)

    train_rows = parse_delimited(train_data, TRAIN, options)
    test_rows = parse_delimited(test_data, TEST, options)
    return AnalysisSession.from_rows(train_rows, test_rows, schema)
