"""
CompletionAnalyzer Tests.
Tests completion and overdue rates, completion times and daily breakdown.
"""
import pytest

from task_insights.models.completion_analyzer import CompletionAnalyzer
from conftest import NOW, days_ago, hours_ago, make_task


class TestCompletionEmpty:
    """Test analyzer with no tasks."""

    def test_analyze_empty_tasks(self):
        result = CompletionAnalyzer([], NOW).analyze('weekly')

        assert result.total_tasks == 0
        assert result.completion_rate == 0.0
        assert result.overdue_percentage == 0.0
        assert result.avg_completion_time_hours == 0.0
        assert result.max_completion_time_hours == 0.0
        assert result.interpretation

    def test_empty_breakdown_is_zero_filled(self):
        result = CompletionAnalyzer([], NOW).analyze('weekly')

        # 2025-06-11 .. 2025-06-18 inclusive
        assert len(result.daily_breakdown) == 8
        assert result.daily_breakdown[0].date == '2025-06-11'
        assert result.daily_breakdown[-1].date == '2025-06-18'
        assert all(d.created == 0 and d.completed == 0 for d in result.daily_breakdown)


class TestPeriods:
    """Test period handling."""

    @pytest.mark.parametrize('period,days', [('daily', 1), ('weekly', 7), ('monthly', 30)])
    def test_period_days(self, period, days):
        result = CompletionAnalyzer([], NOW).analyze(period)

        assert result.period == period
        assert result.period_days == days

    @pytest.mark.parametrize('period', ['yearly', '', None, 'WEEKLY'])
    def test_unknown_period_falls_back_to_weekly(self, period):
        result = CompletionAnalyzer([], NOW).analyze(period)

        assert result.period == 'weekly'
        assert result.period_days == 7

    def test_window_counts(self):
        tasks = [
            make_task(1, created_at=days_ago(2), status='completed', completed_at=days_ago(1)),
            make_task(2, created_at=days_ago(10), status='completed', completed_at=days_ago(9)),
            make_task(3, created_at=days_ago(3)),
        ]

        result = CompletionAnalyzer(tasks, NOW).analyze('weekly')

        assert result.tasks_created == 2
        assert result.tasks_completed == 1
        # totals ignore the window
        assert result.total_tasks == 3
        assert result.total_completed == 2


class TestScenarios:
    """End-to-end completion scenarios."""

    def test_single_open_task_without_due_date(self):
        result = CompletionAnalyzer([make_task(1)], NOW).analyze()

        assert result.completion_rate == 0.0
        assert result.overdue_percentage == 0.0

    def test_seven_of_ten_completed_three_overdue(self):
        done = [make_task(i, created_at=days_ago(3), status='completed', completed_at=days_ago(1))
                for i in range(7)]
        late = [make_task(10 + i, created_at=days_ago(3), due_date=days_ago(1)) for i in range(3)]

        result = CompletionAnalyzer(done + late, NOW).analyze('weekly')

        assert result.tasks_created == 10
        assert result.tasks_completed == 7
        assert result.completion_rate == 70.0
        assert result.total_overdue == 3
        assert result.overdue_percentage == 100.0

    def test_overdue_percentage_is_relative_to_open_tasks(self):
        tasks = [
            make_task(1, due_date=days_ago(1)),
            make_task(2, due_date=NOW + (NOW - days_ago(1))),
            make_task(3, status='completed', completed_at=hours_ago(1), due_date=days_ago(5)),
        ]

        result = CompletionAnalyzer(tasks, NOW).analyze()

        assert result.total_overdue == 1
        assert result.overdue_percentage == 50.0


class TestCompletionTime:
    """Test completion time statistics."""

    def test_avg_min_max(self):
        tasks = [
            make_task(1, created_at=hours_ago(10), status='completed', completed_at=hours_ago(2)),
            make_task(2, created_at=hours_ago(6), status='completed', completed_at=hours_ago(2)),
            make_task(3, created_at=hours_ago(6)),
        ]

        result = CompletionAnalyzer(tasks, NOW).analyze()

        assert result.avg_completion_time_hours == 6.0
        assert result.min_completion_time_hours == 4.0
        assert result.max_completion_time_hours == 8.0

    def test_rounding_is_half_up(self):
        # 1.25 hours rounds to 1.3
        tasks = [make_task(1, created_at=hours_ago(1.25),
                           status='completed', completed_at=NOW)]

        result = CompletionAnalyzer(tasks, NOW).analyze()

        assert result.avg_completion_time_hours == 1.3

    def test_completed_without_created_at_is_skipped(self):
        tasks = [make_task(1, created_at=None, status='completed', completed_at=hours_ago(1))]

        result = CompletionAnalyzer(tasks, NOW).analyze()

        assert result.total_completed == 1
        assert result.avg_completion_time_hours == 0.0


class TestDailyBreakdown:
    """Test per-day created/completed counts."""

    def test_counts_by_calendar_day(self):
        tasks = [
            make_task(1, created_at=days_ago(1), status='completed', completed_at=hours_ago(1)),
            make_task(2, created_at=days_ago(1)),
        ]

        result = CompletionAnalyzer(tasks, NOW).analyze('weekly')
        by_date = {d.date: d for d in result.daily_breakdown}

        assert by_date['2025-06-17'].created == 2
        assert by_date['2025-06-17'].completed == 0
        assert by_date['2025-06-18'].completed == 1


class TestMonotonicity:
    """Completing more tasks never lowers the completion rate."""

    def test_completing_a_task_never_decreases_rate(self):
        tasks = [make_task(1), make_task(2), make_task(3, status='completed', completed_at=NOW)]
        before = CompletionAnalyzer(tasks, NOW).analyze().completion_rate

        tasks[0] = tasks[0].with_status('completed', NOW)
        after = CompletionAnalyzer(tasks, NOW).analyze().completion_rate

        assert after >= before
        assert (before, after) == (33.3, 66.7)
