# backend/tests/test_trends.py

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from citizen_feedback.analytics.trends import daily_trend, day_label, monthly_trend


def test_day_label():
    assert day_label(date(2024, 3, 7)) == "07/03"


def test_empty_window_has_eleven_zero_points(now):
    points = daily_trend([], now, timezone.utc)

    assert len(points) == 11
    assert points[0].date == date(2024, 3, 5)
    assert points[-1].date == date(2024, 3, 15)
    assert all(p.feedback_count == 0 for p in points)
    assert [p.date for p in points] == sorted(p.date for p in points)


def test_counts_records_inside_window(make_record, now):
    records = [
        make_record(created_at=now),
        make_record(created_at=now - timedelta(hours=1)),
        make_record(created_at=now - timedelta(days=10)),
        # outside the window
        make_record(created_at=now - timedelta(days=11)),
        make_record(created_at=None),
    ]
    points = daily_trend(records, now, timezone.utc)

    assert points[-1].feedback_count == 2
    assert points[0].feedback_count == 1
    assert sum(p.feedback_count for p in points) == 3


def test_buckets_follow_viewer_timezone(make_record):
    now = datetime(2024, 3, 15, 20, 0, tzinfo=timezone.utc)
    # 19:30 UTC is already the next day in India
    record = make_record(created_at=datetime(2024, 3, 15, 19, 30, tzinfo=timezone.utc))

    points = daily_trend([record], now, ZoneInfo("Asia/Kolkata"))
    assert points[-1].date == date(2024, 3, 16)
    assert points[-1].feedback_count == 1


def test_custom_window(now):
    assert len(daily_trend([], now, timezone.utc, window_days=6)) == 7


def test_monthly_trend_current_year_only(make_record, now):
    records = [
        make_record(created_at=datetime(2024, 1, 2, tzinfo=timezone.utc)),
        make_record(created_at=datetime(2024, 3, 1, tzinfo=timezone.utc)),
        make_record(created_at=datetime(2024, 3, 9, tzinfo=timezone.utc)),
        make_record(created_at=datetime(2023, 3, 9, tzinfo=timezone.utc)),
    ]
    points = monthly_trend(records, now, timezone.utc)

    assert len(points) == 12
    assert points[0].month == "Jan"
    assert points[0].feedback_count == 1
    assert points[2].feedback_count == 2
    assert sum(p.feedback_count for p in points) == 3
