"""
Report Generator - weekly/monthly narrative built from analyzer results.

Every sentence, win, bottleneck and suggestion is gated on a concrete metric
and quotes it; nothing is emitted without a number behind it.
"""

from .completion_analyzer import CompletionAnalyzer
from .pydantic_models import (
    Bottleneck, KeyWin, Report, ReportPeriod, ReportScore, Severity, Suggestion,
)
from ..utils.stats import ensure_utc, utc_now

REPORT_TYPES = ('weekly', 'monthly')


def normalize_report_type(report_type):
    return report_type if report_type in REPORT_TYPES else 'weekly'


def rank_bottlenecks(bottlenecks):
    """High severity first; insertion order is kept within a severity"""
    return sorted(bottlenecks, key=lambda b: 0 if b.severity == Severity.HIGH else 1)


class ReportGenerator:
    """Composes a Report from the seven analyzer results of one (user, period)"""

    # Win thresholds
    WIN_COMPLETION_RATE = 70
    WIN_SCORE = 70
    WIN_FOCUS_STREAK = 3
    WIN_HIGH_PRIORITY_COMPLETION = 80
    WIN_PROCRASTINATION_SCORE = 20

    # Bottleneck thresholds (medium, high)
    OVERDUE_THRESHOLDS = (20, 40)
    POSTPONED_THRESHOLDS = (0, 5)
    SWITCH_RATE_THRESHOLDS = (50, 70)
    NEVER_STARTED_THRESHOLDS = (3, 10)
    LOW_ALIGNMENT_BOTTLENECK = 30

    # Suggestion triggers
    BATCHING_SWITCH_RATE = 40
    SLOW_START_HOURS = 24
    LOW_ALIGNMENT_SUGGESTION = 50

    def __init__(self, completion, time_patterns, priority, focus, goals,
                 procrastination, productivity_score, now=None):
        self.completion = completion
        self.time_patterns = time_patterns
        self.priority = priority
        self.focus = focus
        self.goals = goals
        self.procrastination = procrastination
        self.score = productivity_score
        self.now = ensure_utc(now) if now else utc_now()

    @property
    def high_priority(self):
        return next((p for p in self.priority.by_priority if p.priority == 'high'), None)

    def generate(self, report_type='weekly'):
        """
        Build the report

        Returns:
            Report
        """
        report_type = normalize_report_type(report_type)
        summary = self._summary(report_type)

        return Report(
            report_type=report_type,
            generated_at=self.now,
            period=ReportPeriod(
                type=report_type,
                days=CompletionAnalyzer.PERIOD_DAYS[report_type],
                tasks_analyzed=self.completion.total_tasks,
            ),
            summary=summary,
            narrative=' '.join(summary),
            productivity_score=ReportScore(
                score=self.score.score,
                grade=self.score.grade,
                description=self.score.grade_description,
            ),
            key_wins=self._key_wins(),
            bottlenecks=rank_bottlenecks(self._bottlenecks()),
            actionable_suggestions=self._suggestions(),
            detailed_metrics={
                'completion': self.completion.model_dump(
                    mode='json', exclude={'daily_breakdown', 'interpretation'}),
                'time_patterns': {
                    'most_productive_hour': self._dump(self.time_patterns.most_productive_hour),
                    'most_productive_day': self._dump(self.time_patterns.most_productive_day),
                },
                'priority': [p.model_dump(mode='json') for p in self.priority.by_priority],
                'focus': {
                    'context_switch_rate': self.focus.context_switch_rate,
                    'avg_focus_streak': self.focus.avg_focus_streak,
                },
                'procrastination': self.procrastination.stats.model_dump(mode='json'),
                'goals': self.goals.summary.model_dump(mode='json'),
            },
        )

    @staticmethod
    def _dump(model):
        return model.model_dump(mode='json') if model is not None else None

    def _summary(self, report_type):
        c = self.completion
        parts = [
            f"This {report_type} period, you completed {c.tasks_completed} out of "
            f"{c.tasks_created} tasks created, with an overall completion rate of {c.completion_rate}%."
        ]

        peak_day = self.time_patterns.most_productive_day
        if peak_day is not None:
            parts.append(f"Your most productive day was {peak_day.day_name} "
                         f"with {peak_day.completions} completions.")

        peak_hour = self.time_patterns.most_productive_hour
        if peak_hour is not None:
            parts.append(f"Peak productivity occurred at {peak_hour.label} "
                         f"({peak_hour.completions} completions).")

        if c.avg_completion_time_hours > 0:
            parts.append(f"Average task completion time was {c.avg_completion_time_hours} hours.")

        return parts

    def _key_wins(self):
        if self.completion.total_tasks == 0:
            return []

        wins = []
        c = self.completion
        if c.completion_rate >= self.WIN_COMPLETION_RATE:
            wins.append(KeyWin(
                metric='High Completion Rate',
                value=f"{c.completion_rate}%",
                detail=f"You completed {c.total_completed} of {c.total_tasks} tasks",
            ))

        if self.score.score >= self.WIN_SCORE:
            wins.append(KeyWin(
                metric='Strong Productivity Score',
                value=f"{self.score.score}/100 ({self.score.grade})",
                detail=self.score.grade_description,
            ))

        if self.focus.avg_focus_streak >= self.WIN_FOCUS_STREAK:
            wins.append(KeyWin(
                metric='Good Focus Consistency',
                value=f"{self.focus.avg_focus_streak} tasks average",
                detail=f"Longest run in one category: {self.focus.max_focus_streak} tasks",
            ))

        high = self.high_priority
        if high is not None and high.total > 0 and high.completion_rate >= self.WIN_HIGH_PRIORITY_COMPLETION:
            wins.append(KeyWin(
                metric='High Priority Execution',
                value=f"{high.completion_rate}% completion",
                detail=f"{high.completed} of {high.total} high-priority tasks done",
            ))

        p = self.procrastination
        if p.procrastination_score <= self.WIN_PROCRASTINATION_SCORE:
            wins.append(KeyWin(
                metric='Low Procrastination',
                value=f"Score: {p.procrastination_score}/100",
                detail=f"{p.stats.frequently_postponed} tasks postponed more than 3 times",
            ))

        return wins

    @staticmethod
    def _has_goal_data(summary):
        """Alignment is only meaningful with goals and recent tasks to link"""
        return summary.total_goals > 0 and summary.total_tasks_in_period > 0

    @staticmethod
    def _severity(value, thresholds):
        return Severity.HIGH if value > thresholds[1] else Severity.MEDIUM

    def _bottlenecks(self):
        bottlenecks = []
        c = self.completion
        p = self.procrastination.stats

        if c.overdue_percentage > self.OVERDUE_THRESHOLDS[0]:
            bottlenecks.append(Bottleneck(
                metric='High Overdue Rate',
                value=f"{c.overdue_percentage}%",
                detail=f"{c.total_overdue} tasks are past their due date",
                severity=self._severity(c.overdue_percentage, self.OVERDUE_THRESHOLDS),
            ))

        if p.frequently_postponed > self.POSTPONED_THRESHOLDS[0]:
            bottlenecks.append(Bottleneck(
                metric='Frequently Postponed Tasks',
                value=f"{p.frequently_postponed} tasks",
                detail='Tasks postponed more than 3 times indicate avoidance',
                severity=self._severity(p.frequently_postponed, self.POSTPONED_THRESHOLDS),
            ))

        if self.focus.context_switch_rate > self.SWITCH_RATE_THRESHOLDS[0]:
            bottlenecks.append(Bottleneck(
                metric='High Context Switching',
                value=f"{self.focus.context_switch_rate}% switch rate",
                detail=f"{self.focus.context_switches} category changes across "
                       f"{self.focus.total_tasks_analyzed} completed tasks",
                severity=self._severity(self.focus.context_switch_rate, self.SWITCH_RATE_THRESHOLDS),
            ))

        if p.never_started > self.NEVER_STARTED_THRESHOLDS[0]:
            bottlenecks.append(Bottleneck(
                metric='Stale Tasks',
                value=f"{p.never_started} tasks",
                detail='Tasks created but never started for over 3 days',
                severity=self._severity(p.never_started, self.NEVER_STARTED_THRESHOLDS),
            ))

        g = self.goals.summary
        if self._has_goal_data(g) and g.alignment_ratio < self.LOW_ALIGNMENT_BOTTLENECK:
            bottlenecks.append(Bottleneck(
                metric='Low Goal Alignment',
                value=f"{g.alignment_ratio}%",
                detail=f"Only {g.tasks_linked_to_goals} of {g.total_tasks_in_period} recent tasks "
                       f"are linked to your goals",
                severity=Severity.MEDIUM,
            ))

        return bottlenecks

    def _suggestions(self):
        suggestions = []

        peak_hour = self.time_patterns.most_productive_hour
        if peak_hour is not None:
            suggestions.append(Suggestion(
                action='Schedule Important Tasks',
                detail=f"Block {peak_hour.label} for high-priority work based on your completion patterns",
                based_on=f"{peak_hour.completions} tasks completed at this hour",
            ))

        postponed = self.procrastination.frequently_postponed_tasks
        if postponed:
            top = postponed[0]
            suggestions.append(Suggestion(
                action='Address Avoided Task',
                detail=f'"{top.title}" has been postponed {top.postpone_count} times. '
                       f'Consider breaking it into smaller subtasks or delegating.',
                based_on=f"Postpone count: {top.postpone_count}",
            ))

        if self.focus.context_switch_rate > self.BATCHING_SWITCH_RATE:
            suggestions.append(Suggestion(
                action='Batch Similar Tasks',
                detail='Group tasks by category and complete them in focused blocks '
                       'to reduce context switching',
                based_on=f"Current context switch rate: {self.focus.context_switch_rate}%",
            ))

        high = self.high_priority
        if high is not None and high.avg_time_to_start_hours > self.SLOW_START_HOURS:
            suggestions.append(Suggestion(
                action='Start High-Priority Tasks Sooner',
                detail=f"High-priority tasks take {high.avg_time_to_start_hours} hours on average "
                       f"to start. Consider tackling them first thing.",
                based_on=f"Average time to start across {high.time_to_start_samples} started "
                         f"high-priority tasks",
            ))

        g = self.goals.summary
        if self._has_goal_data(g) and g.alignment_ratio < self.LOW_ALIGNMENT_SUGGESTION:
            suggestions.append(Suggestion(
                action='Link Tasks to Goals',
                detail=f"Only {g.alignment_ratio}% of tasks are linked to goals. "
                       f"When creating tasks, assign them to relevant goals.",
                based_on=f"{g.tasks_linked_to_goals} of {g.total_tasks_in_period} tasks "
                         f"created in the last 30 days",
            ))

        return suggestions
