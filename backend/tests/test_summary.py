# backend/tests/test_summary.py

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from citizen_feedback.analytics.summary import summarize


def test_empty(now):
    summary = summarize([], now, timezone.utc)
    assert summary.today_feedback == 0
    assert summary.total_feedback == 0
    assert summary.average_rating == "0.0"


def test_counts_and_average(make_record, now):
    records = [
        make_record(overall_rating=3, created_at=now),
        make_record(overall_rating=8, created_at=now - timedelta(days=2)),
        make_record(overall_rating=None, created_at=now),
    ]
    summary = summarize(records, now, timezone.utc)

    assert summary.today_feedback == 2
    assert summary.total_feedback == 3
    assert summary.average_rating == "5.5"


def test_today_is_local_to_viewer(make_record):
    now = datetime(2024, 3, 15, 20, 0, tzinfo=timezone.utc)
    record = make_record(created_at=datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))

    assert summarize([record], now, timezone.utc).today_feedback == 1
    # already the 16th in Kolkata
    assert summarize([record], now, ZoneInfo("Asia/Kolkata")).today_feedback == 0


def test_naive_timestamps_are_utc(make_record, now):
    record = make_record(created_at=datetime(2024, 3, 15, 1, 0))
    assert summarize([record], now, timezone.utc).today_feedback == 1
