"""Flat per-worker JSON store.

Each worker lives in `<data_dir>/pontaj_<slug>.json` as
`{"meta": {"worker": ...}, "rows": [...]}`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import DataSourceNotFoundError
from .forms import WorkerTimesheet, timesheet_from_dict
from .utils import slugify

logger = logging.getLogger(__name__)

FILE_PREFIX = "pontaj_"
FILE_SUFFIX = ".json"


def worker_slug(name: str) -> str:
    return slugify(name)


def worker_path(data_dir: str | Path, worker: str) -> Path:
    return Path(data_dir) / f"{FILE_PREFIX}{worker_slug(worker)}{FILE_SUFFIX}"


def _timesheet_files(data_dir: Path) -> list[Path]:
    return sorted(
        p for p in data_dir.iterdir()
        if p.is_file() and p.name.startswith(FILE_PREFIX) and p.name.endswith(FILE_SUFFIX)
    )


def load_worker_record(path: str | Path) -> dict[str, Any]:
    """Read one worker file; a missing file yields an empty record."""
    p = Path(path)
    if not p.is_file():
        return {"meta": {}, "rows": []}
    with p.open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        data = {}
    meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}
    rows = data.get("rows") if isinstance(data.get("rows"), list) else []
    return {**data, "meta": meta, "rows": rows}


def save_worker_record(path: str | Path, record: dict[str, Any]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(record, f, ensure_ascii=False, indent=2)
        f.write("\n")
    logger.info("Wrote %d row(s) to %s", len(record.get("rows") or []), p)
    return p


def load_timesheets(data_dir: str | Path) -> list[WorkerTimesheet]:
    """Load every `pontaj_*.json` file in `data_dir`, in file-name order.

    Raises:
        DataSourceNotFoundError: if `data_dir` does not exist or is not a directory.
    """
    d = Path(data_dir)
    if not d.is_dir():
        raise DataSourceNotFoundError(data_dir)
    sheets: list[WorkerTimesheet] = []
    for path in _timesheet_files(d):
        sheets.append(timesheet_from_dict(load_worker_record(path)))
    logger.debug("Loaded %d timesheet(s) from %s", len(sheets), d)
    return sheets
