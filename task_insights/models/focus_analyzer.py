"""
Focus Analyzer - context switching, focus streaks, reopened and stale tasks
"""

from collections import defaultdict
from datetime import timedelta
from typing import List, Optional, Tuple

from .interpretation import interpret_focus
from .pydantic_models import CategoryStats, FocusResult, ReopenedTask, StaleTask
from .records import coerce_tasks
from ..utils.stats import days_between, ensure_utc, mean, round_half_up, utc_now


def focus_streaks(categories: List[Optional[str]]) -> Tuple[int, List[int]]:
    """
    Split a chronological category sequence into focus streaks.

    Returns:
        (context_switches, streak_lengths) - streak lengths sum to the
        sequence length and there is always one more streak than switches
        for a non-empty sequence.
    """
    if not categories:
        return 0, []

    switches = 0
    streaks = []
    current = 1
    for previous, category in zip(categories, categories[1:]):
        if category != previous:
            switches += 1
            streaks.append(current)
            current = 1
        else:
            current += 1
    streaks.append(current)
    return switches, streaks


class FocusAnalyzer:
    """Measures how fragmented the user's attention is"""

    WINDOW_DAYS = 30
    STALE_AFTER_DAYS = 7
    LIST_LIMIT = 10
    UNCATEGORIZED = 'Uncategorized'

    def __init__(self, tasks, now=None):
        self.tasks = coerce_tasks(tasks)
        self.now = ensure_utc(now) if now else utc_now()

    def analyze(self):
        """
        Run focus and context switching analysis

        Returns:
            FocusResult
        """
        sequence = self._completion_sequence()
        switches, streaks = focus_streaks([t.effective_category for t in sequence])

        n = len(sequence)
        switch_rate = round_half_up(switches / (n - 1) * 100) if n > 1 else 0.0
        avg_streak = round_half_up(mean(streaks))
        reopened = self._reopened_tasks()
        stale = self._stale_tasks()

        return FocusResult(
            context_switches=switches,
            context_switch_rate=switch_rate,
            focus_streaks=streaks,
            avg_focus_streak=avg_streak,
            max_focus_streak=max(streaks) if streaks else 0,
            total_tasks_analyzed=n,
            frequently_reopened_tasks=reopened,
            stale_tasks=stale,
            category_distribution=self._category_distribution(sequence),
            interpretation=interpret_focus(n, switch_rate, avg_streak, len(reopened), len(stale)),
        )

    def _completion_sequence(self):
        """Tasks completed inside the window, oldest completion first"""
        start = self.now - timedelta(days=self.WINDOW_DAYS)
        in_window = [t for t in self.tasks
                     if t.completed_at is not None and start <= t.completed_at <= self.now]
        return sorted(in_window, key=lambda t: (t.completed_at, t.id))

    def _reopened_tasks(self):
        reopened = sorted((t for t in self.tasks if t.reopen_count > 0),
                          key=lambda t: t.reopen_count, reverse=True)
        return [
            ReopenedTask(id=t.id, title=t.title, reopen_count=t.reopen_count,
                         status=t.status.value, created_at=t.created_at)
            for t in reopened[:self.LIST_LIMIT]
        ]

    def _stale_tasks(self):
        """Incomplete tasks older than a week, earliest created first"""
        cutoff = self.now - timedelta(days=self.STALE_AFTER_DAYS)
        stale = sorted((t for t in self.tasks
                        if not t.completed and t.created_at is not None and t.created_at < cutoff),
                       key=lambda t: t.created_at)
        return [
            StaleTask(id=t.id, title=t.title, status=t.status.value, created_at=t.created_at,
                      days_old=round_half_up(days_between(t.created_at, self.now)))
            for t in stale[:self.LIST_LIMIT]
        ]

    def _category_distribution(self, sequence):
        grouped = defaultdict(list)
        for task in sequence:
            grouped[task.effective_category or self.UNCATEGORIZED].append(task)

        distribution = [
            CategoryStats(
                category=category,
                task_count=len(tasks),
                avg_completion_time_hours=round_half_up(mean(
                    t.completion_time_hours for t in tasks if t.completion_time_hours is not None
                )),
            )
            for category, tasks in grouped.items()
        ]
        return sorted(distribution, key=lambda c: c.task_count, reverse=True)
