"""
Pydantic result models for the analytics endpoints.

Every analyzer returns one of these fixed-shape records. Fields always carry a
value: absent data is 0 or an empty list, and None only where a value could
not be determined at all (e.g. no completions means no most productive hour).
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Bottleneck severity"""
    HIGH = "high"
    MEDIUM = "medium"


# =============================================================================
# COMPLETION
# =============================================================================

class DailyCount(BaseModel):
    date: str = Field(description="Calendar day (YYYY-MM-DD, UTC)")
    created: int = 0
    completed: int = 0


class CompletionMetrics(BaseModel):
    """Created vs completed counts, completion/overdue rates, completion times"""
    period: str
    period_days: int
    tasks_created: int = 0
    tasks_completed: int = 0
    total_tasks: int = 0
    total_completed: int = 0
    total_overdue: int = 0
    completion_rate: float = Field(default=0.0, ge=0, le=100)
    overdue_percentage: float = Field(default=0.0, ge=0, le=100)
    avg_completion_time_hours: float = 0.0
    min_completion_time_hours: float = 0.0
    max_completion_time_hours: float = 0.0
    daily_breakdown: List[DailyCount] = Field(default_factory=list)
    interpretation: List[str] = Field(default_factory=list)


# =============================================================================
# TIME PATTERNS
# =============================================================================

class HourSlot(BaseModel):
    hour: int = Field(ge=0, le=23)
    label: str
    completions: int = 0
    avg_completion_time_hours: float = 0.0


class DaySlot(BaseModel):
    day_of_week: int = Field(ge=0, le=6, description="0 = Sunday")
    day_name: str
    completions: int = 0
    avg_completion_time_hours: float = 0.0


class BucketSlot(BaseModel):
    bucket: str
    label: str
    completions: int = 0
    avg_completion_time_hours: float = 0.0


class TimePatternResult(BaseModel):
    """Completions by hour, weekday and coarse time-of-day bucket"""
    most_productive_hour: Optional[HourSlot] = None
    most_productive_day: Optional[DaySlot] = None
    hourly_distribution: List[HourSlot] = Field(default_factory=list)
    daily_distribution: List[DaySlot] = Field(default_factory=list)
    time_bucket_distribution: List[BucketSlot] = Field(default_factory=list)
    total_completions: int = 0
    interpretation: List[str] = Field(default_factory=list)


# =============================================================================
# PRIORITY
# =============================================================================

class PriorityStats(BaseModel):
    priority: str
    total: int = 0
    completed: int = 0
    completion_rate: float = 0.0
    with_due_date: int = 0
    missed_deadlines: int = 0
    missed_deadline_rate: float = 0.0
    avg_completion_time_hours: float = 0.0
    avg_delay_hours: float = 0.0
    avg_time_to_start_hours: float = 0.0
    # sample sizes behind the averages
    completion_time_samples: int = 0
    delay_samples: int = 0
    time_to_start_samples: int = 0


class PriorityBreakdown(BaseModel):
    """Per-priority behaviour and how well labels track real urgency"""
    by_priority: List[PriorityStats] = Field(default_factory=list)
    priority_effectiveness_score: int = Field(default=0, ge=0, le=100)
    interpretation: List[str] = Field(default_factory=list)


# =============================================================================
# FOCUS
# =============================================================================

class ReopenedTask(BaseModel):
    id: str
    title: str
    reopen_count: int
    status: str
    created_at: Optional[datetime] = None


class StaleTask(BaseModel):
    id: str
    title: str
    status: str
    created_at: datetime
    days_old: float


class CategoryStats(BaseModel):
    category: str
    task_count: int = 0
    avg_completion_time_hours: float = 0.0


class FocusResult(BaseModel):
    """Context switching, focus streaks, reopened and stale tasks"""
    context_switches: int = 0
    context_switch_rate: float = 0.0
    focus_streaks: List[int] = Field(default_factory=list)
    avg_focus_streak: float = 0.0
    max_focus_streak: int = 0
    total_tasks_analyzed: int = 0
    frequently_reopened_tasks: List[ReopenedTask] = Field(default_factory=list)
    stale_tasks: List[StaleTask] = Field(default_factory=list)
    category_distribution: List[CategoryStats] = Field(default_factory=list)
    interpretation: List[str] = Field(default_factory=list)


# =============================================================================
# GOALS
# =============================================================================

class GoalProgress(BaseModel):
    id: str
    title: str
    type: str
    status: str
    start_date: datetime
    end_date: datetime
    target_task_count: int = 0
    linked_tasks: int = 0
    completed_tasks: int = 0
    completion_rate: float = 0.0
    progress: float = Field(default=0.0, ge=0, le=100)


class GoalSummary(BaseModel):
    total_goals: int = 0
    active_goals: int = 0
    completed_goals: int = 0
    avg_goal_progress: float = 0.0
    total_tasks_in_period: int = 0
    tasks_linked_to_goals: int = 0
    completed_linked: int = 0
    completed_unlinked: int = 0
    alignment_ratio: float = 0.0


class GoalAlignmentResult(BaseModel):
    """Goal progress and the share of recent tasks linked to any goal"""
    goals: List[GoalProgress] = Field(default_factory=list)
    summary: GoalSummary = Field(default_factory=GoalSummary)
    interpretation: List[str] = Field(default_factory=list)


# =============================================================================
# PROCRASTINATION
# =============================================================================

class PostponedTask(BaseModel):
    id: str
    title: str
    priority: str
    status: str
    postpone_count: int
    due_date: Optional[datetime] = None
    days_overdue: int = 0


class OverdueTask(BaseModel):
    id: str
    title: str
    priority: str
    due_date: datetime
    days_overdue: int


class NeverStartedTask(BaseModel):
    id: str
    title: str
    priority: str
    created_at: datetime
    days_since_creation: int


class ProcrastinationStats(BaseModel):
    total_tasks: int = 0
    tasks_postponed: int = 0
    frequently_postponed: int = 0
    total_overdue: int = 0
    severely_overdue: int = 0
    never_started: int = 0
    avg_postpone_count: float = 0.0


class PriorityProcrastination(BaseModel):
    priority: str
    total: int = 0
    tasks_postponed: int = 0
    avg_postpone_count: float = 0.0
    overdue: int = 0
    postpone_rate: float = 0.0
    overdue_rate: float = 0.0


class ProcrastinationResult(BaseModel):
    """Avoidance signals: postponed, severely overdue and never-started tasks"""
    frequently_postponed_tasks: List[PostponedTask] = Field(default_factory=list)
    severely_overdue_tasks: List[OverdueTask] = Field(default_factory=list)
    never_started_tasks: List[NeverStartedTask] = Field(default_factory=list)
    stats: ProcrastinationStats = Field(default_factory=ProcrastinationStats)
    by_priority: List[PriorityProcrastination] = Field(default_factory=list)
    procrastination_score: int = Field(default=0, ge=0, le=100)
    interpretation: List[str] = Field(default_factory=list)


# =============================================================================
# PRODUCTIVITY SCORE
# =============================================================================

class ScoreComponent(BaseModel):
    value: float = 0.0
    weight: float
    contribution: float = 0.0
    description: str


class ScoreComponents(BaseModel):
    completion_rate: ScoreComponent
    on_time_rate: ScoreComponent
    focus_score: ScoreComponent
    anti_procrastination_score: ScoreComponent


class ProductivityScore(BaseModel):
    """Weighted composite of completion, on-time, focus and anti-procrastination"""
    score: int = Field(default=0, ge=0, le=100)
    grade: str
    grade_description: str
    components: ScoreComponents
    formula: str
    has_data: bool = False
    interpretation: List[str] = Field(default_factory=list)


# =============================================================================
# REPORT
# =============================================================================

class KeyWin(BaseModel):
    metric: str
    value: str
    detail: str


class Bottleneck(BaseModel):
    metric: str
    value: str
    detail: str
    severity: Severity


class Suggestion(BaseModel):
    action: str
    detail: str
    based_on: str


class ReportPeriod(BaseModel):
    type: str
    days: int
    tasks_analyzed: int = 0


class ReportScore(BaseModel):
    score: int = 0
    grade: str
    description: str


class Report(BaseModel):
    """Narrated weekly/monthly report built from all analyzer results"""
    report_type: str
    generated_at: datetime
    period: ReportPeriod
    summary: List[str] = Field(default_factory=list)
    narrative: str = ''
    productivity_score: ReportScore
    key_wins: List[KeyWin] = Field(default_factory=list)
    bottlenecks: List[Bottleneck] = Field(default_factory=list)
    actionable_suggestions: List[Suggestion] = Field(default_factory=list)
    detailed_metrics: dict = Field(default_factory=dict)


class ComprehensiveAnalytics(BaseModel):
    """All analyzer results for one user in a single payload"""
    completion: CompletionMetrics
    time_patterns: TimePatternResult
    priority: PriorityBreakdown
    focus: FocusResult
    goals: GoalAlignmentResult
    procrastination: ProcrastinationResult
    productivity_score: ProductivityScore


class DashboardSummary(BaseModel):
    """Headline counts and the score for the dashboard widget"""
    total: int = 0
    completed: int = 0
    active: int = 0
    overdue: int = 0
    completion_rate: float = 0.0
    productivity_score: int = 0
    grade: str
