"""
Procrastination Analyzer - which tasks is the user avoiding?
"""

import math
from collections import defaultdict
from datetime import timedelta

from .interpretation import interpret_procrastination
from .pydantic_models import (
    NeverStartedTask, OverdueTask, PostponedTask, PriorityProcrastination,
    ProcrastinationResult, ProcrastinationStats,
)
from .records import PRIORITY_ORDER, TaskPriority, TaskStatus, coerce_tasks
from ..utils.stats import days_between, ensure_utc, mean, percentage, round_half_up, round_int, utc_now


def procrastination_score(postpone_rate, overdue_rate, never_started_rate):
    """
    Weighted avoidance score (0-100, higher = worse).

    Missed deadlines carry the largest weight as the most externally visible
    signal. Rates are percentages of all tasks.
    """
    raw = (ProcrastinationAnalyzer.POSTPONE_WEIGHT * postpone_rate
           + ProcrastinationAnalyzer.OVERDUE_WEIGHT * overdue_rate
           + ProcrastinationAnalyzer.NEVER_STARTED_WEIGHT * never_started_rate)
    return min(100, round_int(raw))


class ProcrastinationAnalyzer:
    """Flags frequently postponed, severely overdue and never-started tasks"""

    POSTPONE_WEIGHT = 0.3
    OVERDUE_WEIGHT = 0.4
    NEVER_STARTED_WEIGHT = 0.3

    FREQUENT_POSTPONE_THRESHOLD = 3   # postponed more than this many times
    SEVERE_OVERDUE_DAYS = 7           # overdue by more than this many days
    NEVER_STARTED_AFTER_DAYS = 3      # pending and untouched for longer than this
    LIST_LIMIT = 10

    def __init__(self, tasks, now=None):
        self.tasks = coerce_tasks(tasks)
        self.now = ensure_utc(now) if now else utc_now()

    def analyze(self):
        """
        Run procrastination detection

        Returns:
            ProcrastinationResult
        """
        postponed = [t for t in self.tasks if t.postpone_count > 0]
        frequent = [t for t in self.tasks if t.postpone_count > self.FREQUENT_POSTPONE_THRESHOLD]
        overdue = [t for t in self.tasks if t.is_overdue(self.now)]
        severe = [t for t in overdue if self._is_severely_overdue(t)]
        never_started = [t for t in self.tasks if self._is_never_started(t)]

        total = len(self.tasks)
        stats = ProcrastinationStats(
            total_tasks=total,
            tasks_postponed=len(postponed),
            frequently_postponed=len(frequent),
            total_overdue=len(overdue),
            severely_overdue=len(severe),
            never_started=len(never_started),
            avg_postpone_count=round_half_up(mean(t.postpone_count for t in self.tasks)),
        )

        score = 0
        if total > 0:
            score = procrastination_score(
                len(postponed) / total * 100,
                len(overdue) / total * 100,
                len(never_started) / total * 100,
            )

        by_priority = self._by_priority()
        high = next(p for p in by_priority if p.priority == TaskPriority.HIGH.value)

        return ProcrastinationResult(
            frequently_postponed_tasks=self._postponed_list(frequent),
            severely_overdue_tasks=self._overdue_list(severe),
            never_started_tasks=self._never_started_list(never_started),
            stats=stats,
            by_priority=by_priority,
            procrastination_score=score,
            interpretation=interpret_procrastination(
                score, total, len(frequent), len(never_started), high.avg_postpone_count
            ),
        )

    def _is_severely_overdue(self, task):
        return task.due_date < self.now - timedelta(days=self.SEVERE_OVERDUE_DAYS)

    def _is_never_started(self, task):
        cutoff = self.now - timedelta(days=self.NEVER_STARTED_AFTER_DAYS)
        return (task.status == TaskStatus.PENDING
                and task.started_at is None
                and task.created_at is not None
                and task.created_at < cutoff)

    def _postponed_list(self, tasks):
        ranked = sorted(tasks, key=lambda t: t.postpone_count, reverse=True)
        return [
            PostponedTask(
                id=t.id, title=t.title, priority=t.priority.value, status=t.status.value,
                postpone_count=t.postpone_count, due_date=t.due_date,
                days_overdue=math.floor(t.days_overdue(self.now)),
            )
            for t in ranked[:self.LIST_LIMIT]
        ]

    def _overdue_list(self, tasks):
        ranked = sorted(tasks, key=lambda t: t.days_overdue(self.now), reverse=True)
        return [
            OverdueTask(
                id=t.id, title=t.title, priority=t.priority.value, due_date=t.due_date,
                days_overdue=round_int(t.days_overdue(self.now)),
            )
            for t in ranked[:self.LIST_LIMIT]
        ]

    def _never_started_list(self, tasks):
        ranked = sorted(tasks, key=lambda t: t.created_at)
        return [
            NeverStartedTask(
                id=t.id, title=t.title, priority=t.priority.value, created_at=t.created_at,
                days_since_creation=round_int(days_between(t.created_at, self.now)),
            )
            for t in ranked[:self.LIST_LIMIT]
        ]

    def _by_priority(self):
        grouped = defaultdict(list)
        for task in self.tasks:
            grouped[task.priority].append(task)

        rows = []
        for priority in PRIORITY_ORDER:
            tasks = grouped[priority]
            postponed = sum(1 for t in tasks if t.postpone_count > 0)
            overdue = sum(1 for t in tasks if t.is_overdue(self.now))
            rows.append(PriorityProcrastination(
                priority=priority.value,
                total=len(tasks),
                tasks_postponed=postponed,
                avg_postpone_count=round_half_up(mean(t.postpone_count for t in tasks)),
                overdue=overdue,
                postpone_rate=percentage(postponed, len(tasks)),
                overdue_rate=percentage(overdue, len(tasks)),
            ))
        return rows
