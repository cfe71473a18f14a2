from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace

from .hours import DEFAULT_OVERTIME_RATE, DEFAULT_OVERTIME_THRESHOLD, OvertimePolicy
from .utils import env_float

OUTPUT_MODES = ("decimal", "hours-minutes")
DATE_FORMATS = {"ro": "%d/%m/%Y", "iso": "%Y-%m-%d"}


@dataclass(frozen=True)
class ReportConfig:
    data_dir: str = "data"
    overtime_threshold: float = DEFAULT_OVERTIME_THRESHOLD
    overtime_rate: float = DEFAULT_OVERTIME_RATE
    output_mode: str = "decimal"  # decimal | hours-minutes
    date_format: str = DATE_FORMATS["ro"]

    @property
    def policy(self) -> OvertimePolicy:
        return OvertimePolicy(threshold=self.overtime_threshold, rate=self.overtime_rate)


def _coerce_mode(value: object, default: str) -> str:
    mode = str(value or "").strip().lower()
    return mode if mode in OUTPUT_MODES else default


def _coerce_date_format(value: object, default: str) -> str:
    """Accept a named variant ("ro", "iso") or one of their strftime patterns."""
    s = str(value or "").strip()
    if s.lower() in DATE_FORMATS:
        return DATE_FORMATS[s.lower()]
    if s in DATE_FORMATS.values():
        return s
    return default


def _positive_or(value: object, default: float) -> float:
    """Return `value` as a positive float, or `default` when it is not one."""
    if value is None or isinstance(value, bool):
        return default
    try:
        val = float(value)
    except (TypeError, ValueError):
        return default
    return val if val > 0 else default


def load_config_file(path: str, base: ReportConfig | None = None) -> ReportConfig:
    """Overlay the keys found in a JSON config file onto `base`."""
    cfg = base or ReportConfig()
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        return cfg
    overtime = data.get("overtime")
    if not isinstance(overtime, dict):
        overtime = {}
    threshold = overtime.get("threshold", data.get("overtime_threshold"))
    rate = overtime.get("rate", data.get("overtime_rate"))
    return replace(
        cfg,
        data_dir=str(data.get("data_dir") or cfg.data_dir),
        overtime_threshold=_positive_or(threshold, cfg.overtime_threshold),
        overtime_rate=_positive_or(rate, cfg.overtime_rate),
        output_mode=_coerce_mode(data.get("output_mode"), cfg.output_mode),
        date_format=_coerce_date_format(data.get("date_format"), cfg.date_format),
    )


def load_from_env(default_path: str | None = None) -> ReportConfig:
    """Build the effective config: defaults, then TIMESHEET_CONFIG_PATH, then env vars.

    A config path that does not exist is ignored; a file that exists but is not
    valid JSON raises.
    """
    cfg = ReportConfig()
    path = os.environ.get("TIMESHEET_CONFIG_PATH") or default_path
    if path and os.path.isfile(path):
        cfg = load_config_file(path, cfg)
    return replace(
        cfg,
        data_dir=os.environ.get("TIMESHEET_DATA_DIR") or cfg.data_dir,
        overtime_threshold=env_float(
            "TIMESHEET_OVERTIME_THRESHOLD", cfg.overtime_threshold, positive=True
        ),
        overtime_rate=env_float("TIMESHEET_OVERTIME_RATE", cfg.overtime_rate, positive=True),
        output_mode=_coerce_mode(os.environ.get("TIMESHEET_OUTPUT_MODE"), cfg.output_mode),
        date_format=_coerce_date_format(os.environ.get("TIMESHEET_DATE_FORMAT"), cfg.date_format),
    )
