"""
Completion Analyzer - created vs completed, completion and overdue rates
"""

from collections import defaultdict
from datetime import timedelta

from .interpretation import interpret_completion
from .pydantic_models import CompletionMetrics, DailyCount
from .records import coerce_tasks
from ..utils.stats import ensure_utc, mean, percentage, round_half_up, utc_now


class CompletionAnalyzer:
    """Measures whether the user finishes what they start"""

    # Lookback window per reporting period
    PERIOD_DAYS = {
        'daily': 1,
        'weekly': 7,
        'monthly': 30,
    }
    DEFAULT_PERIOD = 'weekly'

    def __init__(self, tasks, now=None):
        """
        Initialize with task data

        Args:
            tasks: Task records (or raw mappings) for a single user
            now: Evaluation time, defaults to the current UTC time
        """
        self.tasks = coerce_tasks(tasks)
        self.now = ensure_utc(now) if now else utc_now()

    @classmethod
    def normalize_period(cls, period):
        """Unknown periods fall back to weekly instead of failing"""
        return period if period in cls.PERIOD_DAYS else cls.DEFAULT_PERIOD

    def analyze(self, period='weekly'):
        """
        Run completion analysis for the given period

        Returns:
            CompletionMetrics
        """
        period = self.normalize_period(period)
        days = self.PERIOD_DAYS[period]
        start = self.now - timedelta(days=days)

        total = len(self.tasks)
        total_completed = sum(1 for t in self.tasks if t.completed)
        total_overdue = sum(1 for t in self.tasks if t.is_overdue(self.now))

        created = [t for t in self.tasks if t.created_at and t.created_at >= start]
        completed = [t for t in self.tasks
                     if t.completed_at and start <= t.completed_at <= self.now]

        durations = self._completion_durations()
        completion_rate = percentage(total_completed, total)
        overdue_percentage = percentage(total_overdue, total - total_completed)

        return CompletionMetrics(
            period=period,
            period_days=days,
            tasks_created=len(created),
            tasks_completed=len(completed),
            total_tasks=total,
            total_completed=total_completed,
            total_overdue=total_overdue,
            completion_rate=completion_rate,
            overdue_percentage=overdue_percentage,
            avg_completion_time_hours=round_half_up(mean(durations)),
            min_completion_time_hours=round_half_up(min(durations)) if durations else 0.0,
            max_completion_time_hours=round_half_up(max(durations)) if durations else 0.0,
            daily_breakdown=self._daily_breakdown(start, created, completed),
            interpretation=interpret_completion(
                completion_rate, overdue_percentage, len(created), len(completed), total
            ),
        )

    def _completion_durations(self):
        """Hours from creation to completion; tasks missing a timestamp are skipped"""
        return [
            t.completion_time_hours
            for t in self.tasks
            if t.completed and t.completion_time_hours is not None
        ]

    def _daily_breakdown(self, start, created, completed):
        """One zero-filled entry per calendar day in the window"""
        created_by_day = defaultdict(int)
        completed_by_day = defaultdict(int)

        for task in created:
            created_by_day[task.created_at.date()] += 1
        for task in completed:
            completed_by_day[task.completed_at.date()] += 1

        breakdown = []
        day = start.date()
        while day <= self.now.date():
            breakdown.append(DailyCount(
                date=day.isoformat(),
                created=created_by_day[day],
                completed=completed_by_day[day],
            ))
            day += timedelta(days=1)
        return breakdown
