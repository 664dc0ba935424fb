"""
Productivity Score Calculator - transparent, weighted composite score

    Score = CompletionRate x 0.30 + OnTimeRate x 0.25
          + FocusScore x 0.20 + AntiProcrastination x 0.25

Each component is normalized to 0-100 and is 0 (never 100) when the data it
is computed from is empty: missing data must not read as a perfect record.
"""

from .completion_analyzer import CompletionAnalyzer
from .focus_analyzer import FocusAnalyzer
from .interpretation import interpret_productivity_score
from .procrastination_analyzer import ProcrastinationAnalyzer
from .pydantic_models import ProductivityScore, ScoreComponent, ScoreComponents
from .records import coerce_tasks
from ..utils.stats import clamp, ensure_utc, round_half_up, round_int, utc_now

COMPLETION_WEIGHT = 0.30
ON_TIME_WEIGHT = 0.25
FOCUS_WEIGHT = 0.20
ANTI_PROCRASTINATION_WEIGHT = 0.25

FOCUS_STREAK_POINTS = 10      # points per task of average focus streak
FOCUS_STREAK_BONUS_CAP = 50

FORMULA = ('Score = (CompletionRate × 0.30) + (OnTimeRate × 0.25) '
           '+ (FocusScore × 0.20) + (AntiProcrastination × 0.25)')

# Inclusive lower bounds, highest first
GRADES = [
    (90, 'A+', 'Exceptional productivity'),
    (80, 'A', 'Excellent productivity'),
    (70, 'B', 'Good productivity'),
    (60, 'C', 'Average productivity'),
    (50, 'D', 'Below average productivity'),
    (0, 'F', 'Needs significant improvement'),
]

NO_DATA_GRADE = 'N/A'
NO_DATA_DESCRIPTION = 'No data available - complete some tasks to see your score'

DESCRIPTIONS = {
    'completion_rate': 'Percentage of tasks completed',
    'on_time_rate': 'Percentage of open tasks that are not overdue',
    'focus_score': 'Measure of sustained focus (low context switching)',
    'anti_procrastination_score': 'Inverse of procrastination behaviors',
}


def grade_for(score):
    """(grade, description) for a 0-100 score"""
    for threshold, grade, description in GRADES:
        if score >= threshold:
            return grade, description
    return GRADES[-1][1], GRADES[-1][2]


def focus_score(context_switch_rate, avg_focus_streak, tasks_analyzed):
    """Switching penalty plus a capped streak bonus; 0 without focus data"""
    if tasks_analyzed == 0:
        return 0.0
    penalty = min(context_switch_rate, 100)
    bonus = min(avg_focus_streak * FOCUS_STREAK_POINTS, FOCUS_STREAK_BONUS_CAP)
    return clamp(100 - penalty + bonus)


def weighted_score(completion_rate, on_time_rate, focus, anti_procrastination):
    raw = (completion_rate * COMPLETION_WEIGHT
           + on_time_rate * ON_TIME_WEIGHT
           + focus * FOCUS_WEIGHT
           + anti_procrastination * ANTI_PROCRASTINATION_WEIGHT)
    return int(clamp(round_int(raw)))


def _component(key, value, weight):
    return ScoreComponent(
        value=round_half_up(value),
        weight=weight,
        contribution=round_half_up(value * weight),
        description=DESCRIPTIONS[key],
    )


def score_from_results(completion, focus, procrastination):
    """
    Combine analyzer results into a ProductivityScore.

    Args:
        completion: CompletionMetrics (weekly)
        focus: FocusResult
        procrastination: ProcrastinationResult
    """
    has_tasks = completion.total_tasks > 0

    completion_rate = completion.completion_rate if has_tasks else 0.0
    on_time_rate = 100 - completion.overdue_percentage if has_tasks else 0.0
    focus_value = focus_score(focus.context_switch_rate, focus.avg_focus_streak,
                              focus.total_tasks_analyzed)
    anti_procrastination = (100 - procrastination.procrastination_score
                            if procrastination.stats.total_tasks > 0 else 0.0)

    components = ScoreComponents(
        completion_rate=_component('completion_rate', completion_rate, COMPLETION_WEIGHT),
        on_time_rate=_component('on_time_rate', on_time_rate, ON_TIME_WEIGHT),
        focus_score=_component('focus_score', focus_value, FOCUS_WEIGHT),
        anti_procrastination_score=_component(
            'anti_procrastination_score', anti_procrastination, ANTI_PROCRASTINATION_WEIGHT),
    )

    if not has_tasks:
        return ProductivityScore(
            score=0,
            grade=NO_DATA_GRADE,
            grade_description=NO_DATA_DESCRIPTION,
            components=components,
            formula=FORMULA,
            has_data=False,
            interpretation=['No tasks recorded yet (0 tasks), so no score can be given.'],
        )

    score = weighted_score(completion_rate, on_time_rate, focus_value, anti_procrastination)
    grade, description = grade_for(score)

    return ProductivityScore(
        score=score,
        grade=grade,
        grade_description=description,
        components=components,
        formula=FORMULA,
        has_data=True,
        interpretation=interpret_productivity_score(score, {
            'Completion Rate': completion_rate,
            'On-Time Rate': on_time_rate,
            'Focus Score': focus_value,
            'Anti-Procrastination': anti_procrastination,
        }),
    )


class ProductivityScoreCalculator:
    """Runs the completion, focus and procrastination analyzers and scores them"""

    def __init__(self, tasks, now=None):
        self.tasks = coerce_tasks(tasks)
        self.now = ensure_utc(now) if now else utc_now()

    def calculate(self):
        """
        Returns:
            ProductivityScore
        """
        completion = CompletionAnalyzer(self.tasks, self.now).analyze('weekly')
        focus = FocusAnalyzer(self.tasks, self.now).analyze()
        procrastination = ProcrastinationAnalyzer(self.tasks, self.now).analyze()
        return score_from_results(completion, focus, procrastination)
