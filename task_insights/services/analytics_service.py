"""
Analytics service - reads a user's snapshot from the record store and runs
the analyzers over it.

Every call reads the store afresh; nothing is cached between requests. A
report reads the snapshot once and evaluates the seven analyzers for it
concurrently, so all of them see the same records.
"""

import os
import time
from concurrent.futures import ThreadPoolExecutor

from ..models.completion_analyzer import CompletionAnalyzer
from ..models.focus_analyzer import FocusAnalyzer
from ..models.goal_alignment_analyzer import GoalAlignmentAnalyzer
from ..models.priority_analyzer import PriorityAnalyzer
from ..models.procrastination_analyzer import ProcrastinationAnalyzer
from ..models.productivity_score import ProductivityScoreCalculator, score_from_results
from ..models.pydantic_models import ComprehensiveAnalytics, DashboardSummary
from ..models.records import coerce_goals, coerce_tasks
from ..models.report_generator import ReportGenerator, normalize_report_type
from ..models.time_pattern_analyzer import TimePatternAnalyzer
from ..utils.logger import logger
from ..utils.metrics import PRODUCTIVITY_SCORE, TASKS_ANALYZED
from ..utils.stats import ensure_utc, utc_now


class Snapshot:
    """Tasks and goals of one user, read once and shared by the analyzers"""

    def __init__(self, user_id, tasks, goals, now):
        self.user_id = user_id
        self.tasks = tasks
        self.goals = goals
        self.now = now


class AnalyticsService:
    """
    Facade over the analyzers for one record store.

    Args:
        store: any object with get_tasks(user_id) and get_goals(user_id)
        max_workers: thread pool size for concurrent report evaluation
    """

    def __init__(self, store, max_workers=None):
        self.store = store
        self.max_workers = max_workers or int(os.getenv('ANALYTICS_MAX_WORKERS', '7'))

    # =========================================================================
    # Snapshot
    # =========================================================================

    def snapshot(self, user_id, now=None, with_goals=False):
        """Read the user's records. Store errors are logged and re-raised."""
        now = ensure_utc(now) if now else utc_now()
        try:
            tasks = coerce_tasks(self.store.get_tasks(user_id))
            goals = coerce_goals(self.store.get_goals(user_id)) if with_goals else []
        except Exception as e:
            logger.store_error("snapshot", user_id, e)
            raise
        TASKS_ANALYZED.observe(len(tasks))
        return Snapshot(user_id, tasks, goals, now)

    def _timed(self, name, snapshot, fn):
        start = time.time()
        result = fn()
        logger.analysis_completed(name, snapshot.user_id, len(snapshot.tasks),
                                  int((time.time() - start) * 1000))
        return result

    # =========================================================================
    # Single analyzers
    # =========================================================================

    def get_completion(self, user_id, period='weekly', now=None):
        snap = self.snapshot(user_id, now)
        return self._timed('completion', snap,
                           lambda: CompletionAnalyzer(snap.tasks, snap.now).analyze(period))

    def get_time_patterns(self, user_id, now=None):
        snap = self.snapshot(user_id, now)
        return self._timed('time_patterns', snap,
                           lambda: TimePatternAnalyzer(snap.tasks).analyze())

    def get_priority(self, user_id, now=None):
        snap = self.snapshot(user_id, now)
        return self._timed('priority', snap,
                           lambda: PriorityAnalyzer(snap.tasks, snap.now).analyze())

    def get_focus(self, user_id, now=None):
        snap = self.snapshot(user_id, now)
        return self._timed('focus', snap,
                           lambda: FocusAnalyzer(snap.tasks, snap.now).analyze())

    def get_goals(self, user_id, now=None):
        snap = self.snapshot(user_id, now, with_goals=True)
        return self._timed('goals', snap,
                           lambda: GoalAlignmentAnalyzer(snap.tasks, snap.goals, snap.now).analyze())

    def get_procrastination(self, user_id, now=None):
        snap = self.snapshot(user_id, now)
        return self._timed('procrastination', snap,
                           lambda: ProcrastinationAnalyzer(snap.tasks, snap.now).analyze())

    def get_productivity_score(self, user_id, now=None):
        snap = self.snapshot(user_id, now)
        score = self._timed('productivity_score', snap,
                            lambda: ProductivityScoreCalculator(snap.tasks, snap.now).calculate())
        PRODUCTIVITY_SCORE.observe(score.score)
        logger.productivity_scored(user_id, score.score, score.grade)
        return score

    def get_summary(self, user_id, now=None):
        """Dashboard counts plus the productivity score"""
        snap = self.snapshot(user_id, now)
        return self._timed('summary', snap, lambda: self._summary(snap))

    @staticmethod
    def _summary(snap):
        completion = CompletionAnalyzer(snap.tasks, snap.now).analyze('weekly')
        score = score_from_results(
            completion,
            FocusAnalyzer(snap.tasks, snap.now).analyze(),
            ProcrastinationAnalyzer(snap.tasks, snap.now).analyze(),
        )
        return DashboardSummary(
            total=completion.total_tasks,
            completed=completion.total_completed,
            active=completion.total_tasks - completion.total_completed,
            overdue=completion.total_overdue,
            completion_rate=completion.completion_rate,
            productivity_score=score.score,
            grade=score.grade,
        )

    # =========================================================================
    # Reports
    # =========================================================================

    def _run_all(self, snap, period):
        """
        Evaluate every analyzer for one snapshot on the thread pool.

        All futures are joined; the first failure is re-raised and no partial
        result is returned.
        """
        jobs = {
            'completion': lambda: CompletionAnalyzer(snap.tasks, snap.now).analyze(period),
            'time_patterns': lambda: TimePatternAnalyzer(snap.tasks).analyze(),
            'priority': lambda: PriorityAnalyzer(snap.tasks, snap.now).analyze(),
            'focus': lambda: FocusAnalyzer(snap.tasks, snap.now).analyze(),
            'goals': lambda: GoalAlignmentAnalyzer(snap.tasks, snap.goals, snap.now).analyze(),
            'procrastination': lambda: ProcrastinationAnalyzer(snap.tasks, snap.now).analyze(),
            'weekly_completion': lambda: CompletionAnalyzer(snap.tasks, snap.now).analyze('weekly'),
        }
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {name: pool.submit(job) for name, job in jobs.items()}
        # The executor has joined every future on exit
        results = {name: future.result() for name, future in futures.items()}

        results['productivity_score'] = score_from_results(
            results.pop('weekly_completion'), results['focus'], results['procrastination'],
        )
        return results

    def generate_report(self, user_id, report_type='weekly', now=None):
        """Weekly or monthly report; unknown types fall back to weekly"""
        start = time.time()
        report_type = normalize_report_type(report_type)
        snap = self.snapshot(user_id, now, with_goals=True)
        results = self._run_all(snap, report_type)

        report = ReportGenerator(now=snap.now, **results).generate(report_type)

        logger.report_generated(
            report_type, user_id, report.productivity_score.score,
            len(report.key_wins), len(report.bottlenecks), len(report.actionable_suggestions),
            int((time.time() - start) * 1000),
        )
        return report

    def get_comprehensive(self, user_id, period='weekly', now=None):
        """All analyzer results for one snapshot"""
        snap = self.snapshot(user_id, now, with_goals=True)
        return ComprehensiveAnalytics(**self._run_all(snap, period))
