"""
TimePatternAnalyzer Tests.
Tests hour, weekday and time bucket distributions.
"""
import pytest
from datetime import datetime, timedelta, timezone

from task_insights.models.time_pattern_analyzer import TimePatternAnalyzer
from conftest import NOW, make_task


def completed_at(hour, day=NOW.date(), created_hours_before=2):
    done = datetime(day.year, day.month, day.day, hour, 15, tzinfo=timezone.utc)
    return {
        'status': 'completed',
        'completed_at': done,
        'created_at': done - timedelta(hours=created_hours_before),
    }


class TestTimePatternsEmpty:
    """Test analyzer without completions."""

    def test_no_completions(self):
        result = TimePatternAnalyzer([make_task(1)]).analyze()

        assert result.most_productive_hour is None
        assert result.most_productive_day is None
        assert result.total_completions == 0
        assert len(result.hourly_distribution) == 24
        assert len(result.daily_distribution) == 7
        assert [b.bucket for b in result.time_bucket_distribution] == \
            ['morning', 'afternoon', 'evening', 'night']
        assert '0' in result.interpretation[0]


class TestPeaks:
    """Test most productive hour and day."""

    def test_peak_hour_and_day(self):
        tasks = [
            make_task(1, **completed_at(9)),
            make_task(2, **completed_at(9)),
            make_task(3, **completed_at(15)),
        ]

        result = TimePatternAnalyzer(tasks).analyze()

        assert result.most_productive_hour.hour == 9
        assert result.most_productive_hour.label == '09:00'
        assert result.most_productive_hour.completions == 2
        # 2025-06-18 is a Wednesday
        assert result.most_productive_day.day_name == 'Wednesday'
        assert result.most_productive_day.day_of_week == 3
        assert result.most_productive_day.completions == 3

    def test_ties_go_to_earliest_hour(self):
        tasks = [make_task(1, **completed_at(14)), make_task(2, **completed_at(9))]

        result = TimePatternAnalyzer(tasks).analyze()

        assert result.most_productive_hour.hour == 9

    def test_ties_go_to_earliest_day(self):
        sunday = NOW.date() - timedelta(days=3)
        tasks = [make_task(1, **completed_at(10)), make_task(2, **completed_at(10, day=sunday))]

        result = TimePatternAnalyzer(tasks).analyze()

        assert result.most_productive_day.day_name == 'Sunday'

    def test_average_completion_time_per_hour(self):
        tasks = [
            make_task(1, **completed_at(9, created_hours_before=2)),
            make_task(2, **completed_at(9, created_hours_before=5)),
        ]

        result = TimePatternAnalyzer(tasks).analyze()

        assert result.hourly_distribution[9].avg_completion_time_hours == 3.5


class TestBuckets:
    """Test coarse time-of-day buckets."""

    @pytest.mark.parametrize('hour,bucket', [
        (0, 'night'), (5, 'night'), (6, 'morning'), (11, 'morning'),
        (12, 'afternoon'), (17, 'afternoon'), (18, 'evening'), (21, 'evening'),
        (22, 'night'), (23, 'night'),
    ])
    def test_hour_bucket(self, hour, bucket):
        assert TimePatternAnalyzer.hour_bucket(hour) == bucket

    def test_night_wraps_midnight(self):
        tasks = [make_task(1, **completed_at(23)), make_task(2, **completed_at(3))]

        result = TimePatternAnalyzer(tasks).analyze()
        night = next(b for b in result.time_bucket_distribution if b.bucket == 'night')

        assert night.completions == 2


class TestTimezones:
    """Hours are taken in UTC."""

    def test_offset_timestamps_grouped_by_utc_hour(self):
        cest = timezone(timedelta(hours=2))
        task = make_task(1, status='completed', created_at=None,
                         completed_at=datetime(2025, 6, 18, 1, 0, tzinfo=cest))

        result = TimePatternAnalyzer([task]).analyze()

        assert result.most_productive_hour.hour == 23
        assert result.most_productive_day.day_name == 'Tuesday'

    def test_day_index_is_sunday_first(self):
        assert TimePatternAnalyzer.day_index(datetime(2025, 6, 15)) == 0
        assert TimePatternAnalyzer.day_index(datetime(2025, 6, 21)) == 6
