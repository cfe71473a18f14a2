"""Import of external timesheet rows into the per-worker store.

Source files (CSV, JSON or XLSX) come with varying column names. The columns
are matched once per file against `HEADER_ALIASES`, each row is normalized to
the stored shape, and rows already present in the worker's record are skipped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, time
from pathlib import Path
from typing import Any

import pandas as pd

from .errors import (
    DataSourceNotFoundError,
    InvalidSourceError,
    NothingToImportError,
    UnsupportedFormatError,
)
from .forms import RawShiftRow, from_dict, validate
from .parsers import normalize_date_value, parse_bool_flag, parse_number
from .storage import load_worker_record, save_worker_record, worker_path

logger = logging.getLogger(__name__)

# Canonical field -> accepted column names, in priority order. Matching is case-insensitive.
HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("date", "data", "zi"),
    "start": ("start", "inceput", "început"),
    "end": ("end", "sfarsit", "sfârșit"),
    "breakMin": ("breakMin", "break", "break(min)", "pauza"),
    "notes": ("notes", "observatii"),
    "nextDay": ("nextDay", "next day", "ziUrmatoare"),
}

SUPPORTED_SOURCES = (".csv", ".json", ".xlsx")


def resolve_headers(headers: Iterable[Any]) -> dict[str, Any]:
    """Map each canonical field to the first matching column among `headers`."""
    by_folded: dict[str, Any] = {}
    for h in headers:
        by_folded.setdefault(str(h).strip().casefold(), h)
    resolved: dict[str, Any] = {}
    for name, aliases in HEADER_ALIASES.items():
        for alias in aliases:
            actual = by_folded.get(alias.casefold())
            if actual is not None:
                resolved[name] = actual
                break
    return resolved


def _dataset_headers(rows: Sequence[dict[str, Any]]) -> list[Any]:
    return list(dict.fromkeys(k for r in rows for k in r))


def _clock_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, time)):
        return value.strftime("%H:%M")
    if isinstance(value, float) and value != value:
        return ""
    return str(value).strip()


def sanitize_row(raw: dict[str, Any], headers: dict[str, Any]) -> RawShiftRow | None:
    """Normalize one imported row, or return None when date, start or end is missing."""

    def cell(name: str) -> Any:
        key = headers.get(name)
        return raw.get(key) if key is not None else None

    notes = cell("notes")
    row: RawShiftRow = {
        "date": normalize_date_value(cell("date")),
        "start": _clock_text(cell("start")),
        "end": _clock_text(cell("end")),
        "breakMin": parse_number(cell("breakMin")),
        "notes": "" if notes is None or notes != notes else str(notes),
        "nextDay": parse_bool_flag(cell("nextDay")),
    }
    if validate(from_dict(row)):
        return None
    return row


def row_key(row: dict[str, Any]) -> str:
    """Identity of a row for de-duplication: date, start, end, break and overnight flag."""
    r = from_dict(row)
    overnight = "true" if r.crosses_midnight else "false"
    return f"{r.date}|{r.start or ''}|{r.end or ''}|{r.break_minutes}|{overnight}"


def import_rows(
    worker: str,
    raw_rows: Sequence[dict[str, Any]],
    existing_rows: Sequence[dict[str, Any]],
    *,
    source: str | Path | None = None,
) -> list[dict[str, Any]]:
    """Merge imported rows into a worker's existing rows.

    Every existing row is kept. Incoming rows are sanitized and appended only
    when their `row_key` is not already present. The result is sorted by date.

    Raises:
        NothingToImportError: if no incoming row survives sanitization.
    """
    headers = resolve_headers(_dataset_headers(raw_rows))
    incoming: list[RawShiftRow] = []
    for raw in raw_rows:
        row = sanitize_row(raw, headers)
        if row is not None:
            incoming.append(row)
    if not incoming:
        raise NothingToImportError(source or worker)

    merged: list[dict[str, Any]] = list(existing_rows)
    seen = {row_key(r) for r in merged}
    added = 0
    for row in incoming:
        key = row_key(row)
        if key in seen:
            continue
        seen.add(key)
        merged.append(dict(row))
        added += 1
    merged.sort(key=lambda r: str(r.get("date") or ""))

    logger.info(
        "Import for %s: %d of %d row(s) usable, %d new, %d already present",
        worker,
        len(incoming),
        len(raw_rows),
        added,
        len(incoming) - added,
    )
    return merged


def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
    df = df.dropna(how="all")
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


def _read_json_rows(path: Path) -> list[dict[str, Any]]:
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("rows")
    if not isinstance(data, list):
        raise InvalidSourceError(f'JSON source must be an array or hold a "rows" array: {path}')
    return [r for r in data if isinstance(r, dict)]


def read_source_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read raw rows from a CSV, JSON or XLSX file (first sheet)."""
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in SUPPORTED_SOURCES:
        raise UnsupportedFormatError(suffix.lstrip(".") or p.name)
    if not p.is_file():
        raise DataSourceNotFoundError(p, kind="Source file")
    if suffix == ".json":
        return _read_json_rows(p)
    if suffix == ".csv":
        try:
            df = pd.read_csv(p, dtype=str, keep_default_na=False, skipinitialspace=True)
        except pd.errors.EmptyDataError:
            return []
    else:
        df = pd.read_excel(p, sheet_name=0, engine="openpyxl")
    return _records(df)


def import_timesheet(file_path: str | Path, worker: str, data_dir: str | Path) -> Path:
    """Import a source file into `worker`'s record under `data_dir` and return its path.

    The worker file is created when absent; other `meta` keys are preserved.
    """
    raw_rows = read_source_rows(file_path)
    path = worker_path(data_dir, worker)
    record = load_worker_record(path)
    record["rows"] = import_rows(worker, raw_rows, record["rows"], source=file_path)
    record["meta"] = {**record["meta"], "worker": worker}
    return save_worker_record(path, record)
