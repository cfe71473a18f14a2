import json
from datetime import date, datetime, timezone

import pytest

from timesheet_report.backend.errors import InvalidDateRangeError, InvertedRangeError
from timesheet_report.backend.forms import ShiftRow, WorkerTimesheet
from timesheet_report.backend.hours import OvertimePolicy
from timesheet_report.backend.report import UNKNOWN_WORKER, aggregate

FIXED_NOW = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)


def _sheets():
    return [
        WorkerTimesheet(
            worker="Alice",
            rows=[
                ShiftRow(date="2025-09-01", start="08:00", end="18:00", break_minutes=60),
                ShiftRow(date="2025-09-02", start="07:00", end="21:00", break_minutes=30),
            ],
        ),
        WorkerTimesheet(
            worker="Bob",
            rows=[
                ShiftRow(date="2025-09-03", start="22:00", end="06:00", crosses_midnight=True),
            ],
        ),
    ]


def test_daily_weekly_and_overtime_summaries():
    report = aggregate(_sheets(), "2025-09-01", "2025-09-07")

    alice = report.workers["Alice"]
    assert alice.totals.total_hours == pytest.approx(22.5)
    assert alice.totals.regular_hours == pytest.approx(16)
    assert alice.totals.overtime_hours == pytest.approx(6.5)
    assert alice.totals.weighted_hours == pytest.approx(25.75)
    assert alice.daily["2025-09-01"].overtime_hours == pytest.approx(1)
    assert alice.daily["2025-09-02"].overtime_hours == pytest.approx(5.5)

    weeks = list(alice.weekly.values())
    assert len(weeks) == 1
    assert weeks[0].key == "2025-W36"
    assert weeks[0].total_hours == pytest.approx(22.5)
    assert (weeks[0].start, weeks[0].end) == (date(2025, 9, 1), date(2025, 9, 7))

    bob = report.workers["Bob"]
    assert bob.totals.total_hours == pytest.approx(8)
    assert bob.daily["2025-09-03"].total_hours == pytest.approx(8)

    assert report.comparisons.totals.total_hours == pytest.approx(30.5)
    assert [r.worker for r in report.comparisons.ranking] == ["Alice", "Bob"]


def test_metadata_records_effective_range_and_policy():
    report = aggregate(_sheets(), "01/09/2025", "07/09/2025", OvertimePolicy(7, 2), now=FIXED_NOW)
    meta = report.metadata
    assert (meta.from_date, meta.to_date) == (date(2025, 9, 1), date(2025, 9, 7))
    assert (meta.overtime_threshold, meta.overtime_rate) == (7, 2)
    assert meta.generated_at == FIXED_NOW


def test_bounds_are_inclusive():
    sheet = WorkerTimesheet(
        worker="Ana",
        rows=[
            ShiftRow(date="2025-08-31", start="08:00", end="10:00"),
            ShiftRow(date="2025-09-01", start="08:00", end="10:00"),
            ShiftRow(date="2025-09-07", start="08:00", end="11:00"),
            ShiftRow(date="2025-09-08", start="08:00", end="12:00"),
        ],
    )
    report = aggregate([sheet], "2025-09-01", "2025-09-07")
    assert sorted(report.workers["Ana"].daily) == ["2025-09-01", "2025-09-07"]
    assert report.workers["Ana"].totals.total_hours == pytest.approx(5)


def test_open_ended_range_keeps_everything():
    report = aggregate(_sheets())
    assert report.comparisons.totals.total_hours == pytest.approx(30.5)
    assert report.metadata.from_date is None and report.metadata.to_date is None


def test_workers_without_rows_in_range_are_absent():
    sheets = _sheets() + [
        WorkerTimesheet(worker="Carol", rows=[ShiftRow(date="2025-10-01", start="08:00", end="16:00")]),
        WorkerTimesheet(worker="Dan", rows=[]),
    ]
    report = aggregate(sheets, "2025-09-01", "2025-09-07")
    assert set(report.workers) == {"Alice", "Bob"}
    assert len(report.comparisons.ranking) == 2


def test_rows_without_usable_date_are_skipped():
    sheet = WorkerTimesheet(
        worker="Ana",
        rows=[
            ShiftRow(date="", start="08:00", end="16:00"),
            ShiftRow(date="sometime", start="08:00", end="16:00"),
            ShiftRow(date="2025-09-01", start="08:00", end="12:00"),
        ],
    )
    report = aggregate([sheet])
    assert list(report.workers["Ana"].daily) == ["2025-09-01"]


def test_row_missing_end_counts_as_shift_with_zero_hours():
    sheet = WorkerTimesheet(worker="Ana", rows=[ShiftRow(date="2025-09-01", start="08:00")])
    report = aggregate([sheet])
    day = report.workers["Ana"].daily["2025-09-01"]
    assert day.entries == 1
    assert day.total_hours == 0


def test_overtime_is_applied_per_shift_not_per_day():
    sheet = WorkerTimesheet(
        worker="Ana",
        rows=[
            ShiftRow(date="2025-09-01", start="06:00", end="11:00"),
            ShiftRow(date="2025-09-01", start="14:00", end="19:00"),
        ],
    )
    day = aggregate([sheet]).workers["Ana"].daily["2025-09-01"]
    assert day.entries == 2
    assert day.total_hours == pytest.approx(10)
    assert day.overtime_hours == 0


def test_missing_worker_name_uses_sentinel():
    sheet = WorkerTimesheet(worker=None, rows=[ShiftRow(date="2025-09-01", start="08:00", end="09:00")])
    assert list(aggregate([sheet]).workers) == [UNKNOWN_WORKER]


def test_day_and_week_sums_match_worker_totals():
    rows = []
    for day in range(1, 29):
        rows.append(
            ShiftRow(date=f"2025-09-{day:02d}", start="07:00", end=f"{14 + day % 6:02d}:30", break_minutes=day % 3 * 15)
        )
    rows.append(ShiftRow(date="2025-09-14", start="23:00", end="03:00", crosses_midnight=True))
    sheets = [WorkerTimesheet(worker="Ana", rows=rows), *_sheets()]
    report = aggregate(sheets, "2025-09-01", "2025-09-30")

    for worker in report.workers.values():
        daily_sum = sum(d.total_hours for d in worker.daily.values())
        assert daily_sum == pytest.approx(worker.totals.total_hours)
        for key, week in worker.weekly.items():
            in_week = [
                d.total_hours
                for d in worker.daily.values()
                if week.start <= date.fromisoformat(d.date) <= week.end
            ]
            assert sum(in_week) == pytest.approx(week.total_hours), key
    assert len(report.workers["Ana"].weekly) == 4

    grand = sum(w.totals.total_hours for w in report.workers.values())
    assert grand == pytest.approx(report.comparisons.totals.total_hours)


def test_ranking_is_descending_with_name_tie_break():
    one_shift = [ShiftRow(date="2025-09-01", start="08:00", end="16:00")]
    sheets = [
        WorkerTimesheet(worker="bob", rows=list(one_shift)),
        WorkerTimesheet(worker="Zoe", rows=[ShiftRow(date="2025-09-01", start="08:00", end="20:00")]),
        WorkerTimesheet(worker="Alice", rows=list(one_shift)),
        WorkerTimesheet(worker="Ion", rows=[ShiftRow(date="2025-09-01", start="08:00", end="09:00")]),
    ]
    ranking = aggregate(sheets).comparisons.ranking
    assert [r.worker for r in ranking] == ["Zoe", "Alice", "bob", "Ion"]
    for a, b in zip(ranking, ranking[1:]):
        assert a.total_hours >= b.total_hours


def test_aggregate_is_idempotent():
    sheets = _sheets()
    first = aggregate(sheets, "2025-09-01", "2025-09-07")
    second = aggregate(sheets, "2025-09-01", "2025-09-07")
    assert first.workers == second.workers
    assert first.comparisons == second.comparisons
    assert aggregate(sheets, now=FIXED_NOW) == aggregate(sheets, now=FIXED_NOW)


def test_permissive_mode_ignores_unparseable_bound():
    report = aggregate(_sheets(), "not-a-date", "2025-09-02")
    assert report.metadata.from_date is None
    assert set(report.workers) == {"Alice"}


def test_strict_mode_names_the_failing_bound():
    with pytest.raises(InvalidDateRangeError) as exc:
        aggregate(_sheets(), "2025-09-01", "32/09/2025", strict=True)
    assert exc.value.bound == "to"
    assert "32/09/2025" in str(exc.value)


def test_inverted_range_fails():
    with pytest.raises(InvertedRangeError):
        aggregate(_sheets(), "2025-09-07", "2025-09-01")


def test_to_dict_is_json_serializable():
    data = aggregate(_sheets(), "2025-09-01", "2025-09-07", now=FIXED_NOW).to_dict()
    text = json.dumps(data)
    assert '"2025-W36"' in text
    assert data["metadata"]["from"] == "2025-09-01"
    assert data["comparisons"]["ranking"][0]["worker"] == "Alice"
    assert data["workers"]["Alice"]["weekly"]["2025-W36"]["start"] == "2025-09-01"


def test_ranking_ties_follow_romanian_letter_order():
    one_shift = [ShiftRow(date="2025-09-01", start="08:00", end="16:00")]
    sheets = [
        WorkerTimesheet(worker="Șerban", rows=list(one_shift)),
        WorkerTimesheet(worker="Sorin", rows=list(one_shift)),
        WorkerTimesheet(worker="Ştefan", rows=list(one_shift)),
    ]
    ranking = aggregate(sheets).comparisons.ranking
    assert [r.worker for r in ranking] == ["Sorin", "Șerban", "Ştefan"]
