"""Error types raised by the reporting backend.

Row-level problems in timesheet data are tolerated and never raise. Everything
here describes a failure of the request itself and is surfaced to the caller.
"""

from __future__ import annotations

from pathlib import Path


class TimesheetError(Exception):
    """Base class for all reporting and import failures."""


class InvalidDateRangeError(TimesheetError):
    def __init__(self, bound: str, value: object) -> None:
        self.bound = bound
        self.value = value
        super().__init__(
            f"Invalid '{bound}' date: {value!r} (expected YYYY-MM-DD or DD/MM/YYYY)"
        )


class InvertedRangeError(TimesheetError):
    def __init__(self, from_date: object, to_date: object) -> None:
        self.from_date = from_date
        self.to_date = to_date
        super().__init__(f"Start date {from_date} is after end date {to_date}")


class DataSourceNotFoundError(TimesheetError):
    def __init__(self, path: str | Path, kind: str = "Data directory") -> None:
        self.path = Path(path)
        super().__init__(f"{kind} not found: {path}")


class NothingToImportError(TimesheetError):
    def __init__(self, source: str | Path) -> None:
        self.source = source
        super().__init__(f"No valid rows found in {source}")


class UnsupportedFormatError(TimesheetError):
    def __init__(self, fmt: str) -> None:
        self.format = fmt
        super().__init__(f"Unsupported format: {fmt or '(none)'}")


class InvalidSourceError(TimesheetError):
    """Raised when an import source parses but does not hold timesheet rows."""
