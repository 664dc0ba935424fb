"""
Priority Analyzer - do "high priority" tasks really get treated as urgent?
"""

from collections import defaultdict

from .interpretation import interpret_priority
from .pydantic_models import PriorityBreakdown, PriorityStats
from .records import PRIORITY_ORDER, TaskPriority, coerce_tasks
from ..utils.stats import clamp, ensure_utc, hours_between, mean, percentage, round_half_up, round_int, utc_now


class PriorityAnalyzer:
    """
    Compares behaviour across priority levels.

    The effectiveness score starts from a neutral baseline when both high and
    low priority tasks exist and earns bonuses for each piece of evidence that
    high priority work is treated as more urgent than low priority work.
    """

    NEUTRAL_BASELINE = 50
    FASTER_COMPLETION_BONUS = 15
    HIGHER_COMPLETION_RATE_BONUS = 15
    SOONER_START_BONUS = 10
    FEWER_MISSED_DEADLINES_BONUS = 10

    def __init__(self, tasks, now=None):
        self.tasks = coerce_tasks(tasks)
        self.now = ensure_utc(now) if now else utc_now()

    def analyze(self):
        """
        Run priority vs reality analysis

        Returns:
            PriorityBreakdown
        """
        grouped = defaultdict(list)
        for task in self.tasks:
            grouped[task.priority].append(task)

        by_priority = [self._priority_stats(p, grouped[p]) for p in PRIORITY_ORDER]
        high = by_priority[0]
        low = by_priority[2]

        score = self._effectiveness_score(by_priority, high, low)

        return PriorityBreakdown(
            by_priority=by_priority,
            priority_effectiveness_score=score,
            interpretation=interpret_priority(score, high, low),
        )

    def _is_missed_deadline(self, task):
        if task.due_date is None:
            return False
        if task.completed:
            return task.completed_at is not None and task.completed_at > task.due_date
        return task.due_date < self.now

    def _priority_stats(self, priority: TaskPriority, tasks):
        completed = [t for t in tasks if t.completed]
        with_due = [t for t in tasks if t.due_date is not None]
        missed = sum(1 for t in with_due if self._is_missed_deadline(t))

        completion_times = [t.completion_time_hours for t in completed
                            if t.completion_time_hours is not None]
        delays = [hours_between(t.due_date, t.completed_at) for t in completed
                  if t.due_date is not None and t.completed_at is not None]
        starts = [t.time_to_start_hours for t in tasks if t.time_to_start_hours is not None]

        return PriorityStats(
            priority=priority.value,
            total=len(tasks),
            completed=len(completed),
            completion_rate=percentage(len(completed), len(tasks)),
            with_due_date=len(with_due),
            missed_deadlines=missed,
            missed_deadline_rate=percentage(missed, len(with_due)),
            avg_completion_time_hours=round_half_up(mean(completion_times)),
            avg_delay_hours=round_half_up(mean(delays)),
            avg_time_to_start_hours=round_half_up(mean(starts)),
            completion_time_samples=len(completion_times),
            delay_samples=len(delays),
            time_to_start_samples=len(starts),
        )

    def _effectiveness_score(self, by_priority, high, low):
        total = sum(p.total for p in by_priority)
        if total == 0:
            return 0

        if high.total == 0 or low.total == 0:
            # Nothing to compare; fall back to plain throughput
            completed = sum(p.completed for p in by_priority)
            return int(clamp(round_int(completed / total * 100)))

        score = self.NEUTRAL_BASELINE
        if (high.completion_time_samples and low.completion_time_samples
                and high.avg_completion_time_hours < low.avg_completion_time_hours):
            score += self.FASTER_COMPLETION_BONUS
        if high.completion_rate > low.completion_rate:
            score += self.HIGHER_COMPLETION_RATE_BONUS
        if (high.time_to_start_samples and low.time_to_start_samples
                and high.avg_time_to_start_hours < low.avg_time_to_start_hours):
            score += self.SOONER_START_BONUS
        if (high.with_due_date and low.with_due_date
                and high.missed_deadline_rate < low.missed_deadline_rate):
            score += self.FEWER_MISSED_DEADLINES_BONUS

        return int(clamp(score))
