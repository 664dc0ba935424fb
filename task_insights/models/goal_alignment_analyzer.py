"""
Goal Alignment Analyzer - are daily tasks moving the user toward their goals?
"""

from collections import Counter
from datetime import timedelta

from .interpretation import interpret_goal_alignment
from .pydantic_models import GoalAlignmentResult, GoalProgress, GoalSummary
from .records import GoalStatus, coerce_goals, coerce_tasks
from ..utils.stats import ensure_utc, mean, percentage, round_half_up, utc_now


class GoalAlignmentAnalyzer:
    """Joins goals to their linked tasks and measures alignment"""

    WINDOW_DAYS = 30

    def __init__(self, tasks, goals, now=None):
        self.tasks = coerce_tasks(tasks)
        self.goals = coerce_goals(goals)
        self.now = ensure_utc(now) if now else utc_now()

    def analyze(self):
        """
        Run goal alignment analysis

        Returns:
            GoalAlignmentResult
        """
        cutoff = self.now - timedelta(days=self.WINDOW_DAYS)

        # Counts are always recomputed from the task records
        linked = Counter(t.goal_id for t in self.tasks if t.goal_id)
        completed = Counter(t.goal_id for t in self.tasks if t.goal_id and t.completed)

        goals = [
            self._goal_progress(g, linked[g.id], completed[g.id])
            for g in self.goals
            if g.status == GoalStatus.ACTIVE or g.end_date >= cutoff
        ]

        recent = [t for t in self.tasks if t.created_at and t.created_at >= cutoff]
        linked_recent = [t for t in recent if t.goal_id]
        active = [g for g in goals if g.status == GoalStatus.ACTIVE.value]

        summary = GoalSummary(
            total_goals=len(goals),
            active_goals=len(active),
            completed_goals=sum(1 for g in goals if g.status == GoalStatus.COMPLETED.value),
            avg_goal_progress=round_half_up(mean(g.progress for g in active)),
            total_tasks_in_period=len(recent),
            tasks_linked_to_goals=len(linked_recent),
            completed_linked=sum(1 for t in linked_recent if t.completed),
            completed_unlinked=sum(1 for t in recent if t.completed and not t.goal_id),
            alignment_ratio=percentage(len(linked_recent), len(recent)),
        )

        return GoalAlignmentResult(
            goals=goals,
            summary=summary,
            interpretation=interpret_goal_alignment(
                summary.alignment_ratio, summary.avg_goal_progress,
                summary.total_goals, summary.active_goals,
            ),
        )

    @staticmethod
    def goal_progress(completed_tasks, linked_tasks, target_task_count):
        """Target-based progress capped at 100, else share of linked tasks done"""
        if target_task_count > 0:
            return min(100.0, round_half_up(completed_tasks / target_task_count * 100))
        return percentage(completed_tasks, linked_tasks)

    def _goal_progress(self, goal, linked_tasks, completed_tasks):
        return GoalProgress(
            id=goal.id,
            title=goal.title,
            type=goal.type.value,
            status=goal.status.value,
            start_date=goal.start_date,
            end_date=goal.end_date,
            target_task_count=goal.target_task_count,
            linked_tasks=linked_tasks,
            completed_tasks=completed_tasks,
            completion_rate=percentage(completed_tasks, linked_tasks),
            progress=self.goal_progress(completed_tasks, linked_tasks, goal.target_task_count),
        )
