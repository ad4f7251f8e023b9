"""
Analysis Errors — One exception per failure kind
==================================================
Every failure the load → analyze → export pipeline can report. Each
`EDAError` carries the HTTP status the API layer answers with, so endpoints
translate them uniformly via `to_detail()`.

  EDAError
   ├── MissingInputFile          (400) — train or test upload absent
   ├── ParseFailure              (422) — malformed delimited text
   ├── SchemaMismatchError       (422) — required column absent at merge
   ├── EmptyDatasetError         (409) — nothing loaded / zero records
   ├── AnalysisComputationError  (500) — unexpected failure in a report section
   └── ExportError               (500) — serialisation failure

`EmptyInputError` is separate: it is a `ValueError` raised by the statistical
primitives when the caller forgot to filter out missing values.
"""

from typing import Any, Dict, List, Optional


class EmptyInputError(ValueError):
    """A statistical primitive received an empty sequence."""


class EDAError(Exception):
    """Base class for user-facing pipeline failures."""

    status_code: int = 500
    kind: str = "eda_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message}


class MissingInputFile(EDAError):
    status_code = 400
    kind = "missing_input_file"

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            f"Please upload both train and test files (missing: {', '.join(self.missing)})"
        )


class ParseFailure(EDAError):
    status_code = 422
    kind = "parse_failure"

    def __init__(self, file_label: str, reason: str):
        self.file_label = file_label
        self.reason = reason
        super().__init__(f"Error parsing {file_label} file: {reason}")

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["file"] = self.file_label
        return detail


class SchemaMismatchError(EDAError):
    status_code = 422
    kind = "schema_mismatch"

    def __init__(self, origin: str, missing_columns: List[str]):
        self.origin = origin
        self.missing_columns = list(missing_columns)
        super().__init__(
            f"{origin} data is missing required column(s): {', '.join(self.missing_columns)}"
        )

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["origin"] = self.origin
        detail["missing_columns"] = self.missing_columns
        return detail


class EmptyDatasetError(EDAError):
    status_code = 409
    kind = "empty_dataset"

    def __init__(self, message: str = "No data loaded. Upload train and test files first."):
        super().__init__(message)


class AnalysisComputationError(EDAError):
    status_code = 500
    kind = "analysis_failure"

    def __init__(self, section: str, cause: BaseException,
                 partial: Optional[Dict[str, Any]] = None):
        self.section = section
        self.cause = cause
        self.partial = partial or {}
        super().__init__(f"Analysis failed while computing '{section}': {cause}")

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["section"] = self.section
        detail["completed_sections"] = list(self.partial.keys())
        return detail


class ExportError(EDAError):
    status_code = 500
    kind = "export_failure"

    def __init__(self, export_format: str, cause: BaseException):
        self.export_format = export_format
        self.cause = cause
        super().__init__(f"Failed to export {export_format}: {cause}")
