"""
Interpretation Generator - turns computed metrics into short sentences.

Pure functions only. Every sentence quotes at least one number that the
analyzers already computed; nothing here invents a claim the data does not
carry.
"""

from typing import List, Optional


def _fmt(value: float) -> str:
    """One-decimal rendering used in every sentence."""
    return f"{value:.1f}"


def interpret_completion(completion_rate: float, overdue_percentage: float,
                         created: int, completed: int, total_tasks: int) -> List[str]:
    if total_tasks == 0:
        return ["No tasks recorded yet (0 tasks), so completion cannot be assessed."]

    parts = []
    if completion_rate >= 80:
        parts.append(f"Strong completion rate of {_fmt(completion_rate)}% indicates effective task execution.")
    elif completion_rate >= 50:
        parts.append(f"Completion rate of {_fmt(completion_rate)}% shows moderate task throughput.")
    else:
        parts.append(f"Low completion rate of {_fmt(completion_rate)}% suggests task overload or scope issues.")

    if overdue_percentage > 30:
        parts.append(f"High overdue rate ({_fmt(overdue_percentage)}% of open tasks) indicates deadline management issues.")

    if created > completed * 2:
        parts.append(f"Creating tasks faster than completing them ({created} created vs {completed} completed).")

    return parts


def interpret_time_patterns(peak_hour: Optional[int], peak_hour_count: int,
                            peak_day_name: Optional[str], peak_day_count: int) -> List[str]:
    if peak_hour is None:
        return ["Insufficient data to determine time patterns (0 completed tasks)."]

    parts = []
    label = f"{peak_hour:02d}:00"
    if 6 <= peak_hour < 12:
        parts.append(f"Most completions ({peak_hour_count}) land at {label}, a morning peak.")
    elif 12 <= peak_hour < 18:
        parts.append(f"Most completions ({peak_hour_count}) land at {label}, an afternoon peak.")
    elif 18 <= peak_hour < 22:
        parts.append(f"Most completions ({peak_hour_count}) land at {label}, an evening peak.")
    else:
        parts.append(f"Most completions ({peak_hour_count}) land at {label}, a late-night peak worth checking against your rest.")

    if peak_day_name in ('Saturday', 'Sunday'):
        parts.append(f"{peak_day_name} leads with {peak_day_count} completions - weekend catch-up is carrying the load.")
    elif peak_day_name == 'Monday':
        parts.append(f"Monday leads with {peak_day_count} completions, a strong start to the week.")
    elif peak_day_name == 'Friday':
        parts.append(f"Friday leads with {peak_day_count} completions, an end-of-week push.")
    elif peak_day_name:
        parts.append(f"{peak_day_name} leads with {peak_day_count} completions.")

    return parts


def interpret_priority(effectiveness_score: int, high, low) -> List[str]:
    """high/low are PriorityStats-like objects (or None)"""
    total = sum(p.total for p in (high, low) if p is not None)
    parts = []
    if effectiveness_score >= 70:
        parts.append(f"Priority effectiveness of {effectiveness_score}/100: high priority tasks are handled appropriately.")
    elif effectiveness_score >= 50:
        parts.append(f"Priority effectiveness of {effectiveness_score}/100: the priority system is moderately effective.")
    elif total == 0 and effectiveness_score == 0:
        parts.append("Priority effectiveness is 0/100 because no high or low priority tasks exist yet.")
    else:
        parts.append(f"Priority effectiveness of {effectiveness_score}/100: labels may not reflect actual urgency.")

    if high is not None and low is not None and high.total and low.total:
        if (high.completion_time_samples and low.completion_time_samples
                and high.avg_completion_time_hours > low.avg_completion_time_hours):
            parts.append(
                f"High priority tasks take {_fmt(high.avg_completion_time_hours)}h vs "
                f"{_fmt(low.avg_completion_time_hours)}h for low priority - check how they are scoped."
            )
        if high.with_due_date and low.with_due_date and high.missed_deadline_rate > low.missed_deadline_rate:
            parts.append(
                f"High priority tasks miss {_fmt(high.missed_deadline_rate)}% of deadlines vs "
                f"{_fmt(low.missed_deadline_rate)}% for low priority."
            )
    return parts


def interpret_focus(total_analyzed: int, context_switch_rate: float, avg_focus_streak: float,
                    reopened_count: int, stale_count: int) -> List[str]:
    parts = []
    if total_analyzed == 0:
        parts.append("No tasks completed in the last 30 days (0 analyzed), so focus cannot be assessed.")
    elif context_switch_rate < 30:
        parts.append(f"Context switch rate of {_fmt(context_switch_rate)}% indicates good focus discipline.")
    elif context_switch_rate < 60:
        parts.append(f"Context switch rate of {_fmt(context_switch_rate)}% - some room to batch similar tasks.")
    else:
        parts.append(f"Context switch rate of {_fmt(context_switch_rate)}% reduces deep work effectiveness.")

    if avg_focus_streak >= 5:
        parts.append(f"Strong focus streaks (avg {_fmt(avg_focus_streak)} tasks) before switching categories.")

    if reopened_count > 3:
        parts.append(f"{reopened_count} reopened tasks suggest unclear completion criteria.")

    if stale_count > 5:
        parts.append(f"{stale_count} stale tasks may indicate over-commitment.")

    return parts


def interpret_goal_alignment(alignment_ratio: float, avg_progress: float, total_goals: int,
                             active_goals: int) -> List[str]:
    if total_goals == 0:
        return ["No goals defined (0 goals), so tasks cannot be measured against any objective."]

    parts = []
    if alignment_ratio >= 70:
        parts.append(f"Strong goal alignment ({_fmt(alignment_ratio)}%) - most tasks contribute to stated objectives.")
    elif alignment_ratio >= 40:
        parts.append(f"Moderate goal alignment ({_fmt(alignment_ratio)}%) - consider linking more tasks to goals.")
    else:
        parts.append(f"Low goal alignment ({_fmt(alignment_ratio)}%) - daily tasks may not be moving you toward goals.")

    if active_goals:
        if avg_progress >= 70:
            parts.append(f"Good progress on active goals ({_fmt(avg_progress)}% on average).")
        elif avg_progress < 30:
            parts.append(f"Active goals average {_fmt(avg_progress)}% progress - goal-linked tasks need priority.")

    return parts


def interpret_procrastination(score: int, total_tasks: int, frequently_postponed: int,
                              never_started: int, high_avg_postpone: float) -> List[str]:
    if total_tasks == 0:
        return ["No tasks recorded yet (0 tasks), so procrastination cannot be assessed."]

    parts = []
    if score <= 20:
        parts.append(f"Procrastination score of {score}/100: minimal avoidance, good task initiation habits.")
    elif score <= 50:
        parts.append(f"Procrastination score of {score}/100: some tasks are being avoided.")
    else:
        parts.append(f"Procrastination score of {score}/100: significant avoidance worth addressing at the root.")

    if frequently_postponed > 0:
        parts.append(f"{frequently_postponed} tasks have been postponed more than 3 times.")

    if never_started > 0:
        parts.append(f"{never_started} tasks were created but never started.")

    if high_avg_postpone > 2:
        parts.append(
            f"High priority tasks are postponed {_fmt(high_avg_postpone)} times on average - "
            f"they may be unclear or anxiety-inducing."
        )
    return parts


def interpret_productivity_score(score: int, components: dict) -> List[str]:
    """components maps a display name to its 0-100 value"""
    parts = []
    if score >= 80:
        parts.append(f"Excellent overall productivity ({score}/100).")
    elif score >= 60:
        parts.append(f"Good productivity with room for improvement ({score}/100).")
    elif score >= 40:
        parts.append(f"Moderate productivity ({score}/100) - focus on the weakest component.")
    else:
        parts.append(f"Productivity needs attention across multiple areas ({score}/100).")

    if components:
        # first minimum wins, in the order the components are listed
        weakest_name, weakest_value = min(components.items(), key=lambda item: item[1])
        if weakest_value < 50:
            parts.append(f"Weakest area: {weakest_name} ({_fmt(weakest_value)}%).")

    return parts
