"""
Time Pattern Analyzer - when does the user actually finish work?
"""

from collections import defaultdict

from .interpretation import interpret_time_patterns
from .pydantic_models import BucketSlot, DaySlot, HourSlot, TimePatternResult
from .records import coerce_tasks
from ..utils.stats import mean, round_half_up


class TimePatternAnalyzer:
    """Groups completions by hour of day, day of week and time-of-day bucket"""

    DAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']
    BUCKET_ORDER = ['morning', 'afternoon', 'evening', 'night']

    def __init__(self, tasks):
        """
        Initialize with task data

        Args:
            tasks: Task records for a single user; only completed ones are used
        """
        self.tasks = [t for t in coerce_tasks(tasks) if t.completed_at is not None]

    @staticmethod
    def hour_bucket(hour):
        """Coarse bucket for an hour; night wraps around midnight"""
        if hour < 6:
            return 'night'
        elif hour < 12:
            return 'morning'
        elif hour < 18:
            return 'afternoon'
        elif hour < 22:
            return 'evening'
        return 'night'

    @staticmethod
    def day_index(moment):
        """Sunday-first weekday index (datetime.weekday() is Monday-first)"""
        return (moment.weekday() + 1) % 7

    def analyze(self):
        """
        Run time pattern analysis

        Returns:
            TimePatternResult
        """
        by_hour = defaultdict(list)
        by_day = defaultdict(list)
        by_bucket = defaultdict(list)

        for task in self.tasks:
            hour = task.completed_at.hour
            by_hour[hour].append(task)
            by_day[self.day_index(task.completed_at)].append(task)
            by_bucket[self.hour_bucket(hour)].append(task)

        hourly = [
            HourSlot(hour=h, label=f"{h:02d}:00", completions=len(by_hour[h]),
                     avg_completion_time_hours=self._avg_hours(by_hour[h]))
            for h in range(24)
        ]
        daily = [
            DaySlot(day_of_week=d, day_name=name, completions=len(by_day[d]),
                    avg_completion_time_hours=self._avg_hours(by_day[d]))
            for d, name in enumerate(self.DAY_NAMES)
        ]
        buckets = [
            BucketSlot(bucket=b, label=b.capitalize(), completions=len(by_bucket[b]),
                       avg_completion_time_hours=self._avg_hours(by_bucket[b]))
            for b in self.BUCKET_ORDER
        ]

        peak_hour = self._peak(hourly)
        peak_day = self._peak(daily)

        return TimePatternResult(
            most_productive_hour=peak_hour,
            most_productive_day=peak_day,
            hourly_distribution=hourly,
            daily_distribution=daily,
            time_bucket_distribution=buckets,
            total_completions=len(self.tasks),
            interpretation=interpret_time_patterns(
                peak_hour.hour if peak_hour else None,
                peak_hour.completions if peak_hour else 0,
                peak_day.day_name if peak_day else None,
                peak_day.completions if peak_day else 0,
            ),
        )

    @staticmethod
    def _peak(slots):
        """Highest completion count, earliest slot on ties, None if all empty"""
        best = None
        for slot in slots:
            if slot.completions > (best.completions if best else 0):
                best = slot
        return best

    @staticmethod
    def _avg_hours(tasks):
        durations = [t.completion_time_hours for t in tasks if t.completion_time_hours is not None]
        return round_half_up(mean(durations))
