"""
Productivity score Tests.
Tests the component values, weighting, grading and the no-data case.
"""
import pytest

from task_insights.models.productivity_score import (
    NO_DATA_GRADE, ProductivityScoreCalculator, focus_score, grade_for, weighted_score,
)
from conftest import NOW, hours_ago, make_task


class TestNoData:
    """Zero tasks must never read as a perfect score."""

    def test_zero_tasks(self):
        result = ProductivityScoreCalculator([], NOW).calculate()

        assert result.score == 0
        assert result.grade == NO_DATA_GRADE
        assert result.has_data is False
        assert result.components.on_time_rate.value == 0.0
        assert result.components.anti_procrastination_score.value == 0.0
        assert result.components.focus_score.value == 0.0
        assert '0 tasks' in result.interpretation[0]


class TestGrades:
    """Test grade thresholds."""

    @pytest.mark.parametrize('score,grade', [
        (100, 'A+'), (90, 'A+'), (89, 'A'), (80, 'A'), (79, 'B'), (70, 'B'),
        (69, 'C'), (60, 'C'), (59, 'D'), (50, 'D'), (49, 'F'), (0, 'F'),
    ])
    def test_grade_for(self, score, grade):
        assert grade_for(score)[0] == grade


class TestComponents:
    """Test the focus component and the weighted sum."""

    def test_focus_score_without_data(self):
        assert focus_score(0.0, 0.0, 0) == 0.0

    def test_focus_score_penalty_and_bonus(self):
        assert focus_score(40.0, 2.0, 6) == 80.0

    def test_focus_bonus_is_capped(self):
        assert focus_score(100.0, 10.0, 20) == 50.0

    def test_focus_score_is_clamped(self):
        assert focus_score(0.0, 3.0, 3) == 100.0

    def test_weighted_score(self):
        assert weighted_score(0, 0, 0, 0) == 0
        assert weighted_score(100, 100, 100, 100) == 100
        # 24 + 15 + 10 + 10
        assert weighted_score(80, 60, 50, 40) == 59


class TestCalculator:
    """Test the calculator over task records."""

    def test_single_completed_task(self):
        task = make_task(1, category='Work', created_at=hours_ago(2),
                         status='completed', completed_at=hours_ago(1))

        result = ProductivityScoreCalculator([task], NOW).calculate()

        assert result.has_data is True
        assert result.score == 100
        assert result.grade == 'A+'
        assert result.components.completion_rate.contribution == 30.0
        assert result.components.completion_rate.weight == 0.30
        assert 'CompletionRate' in result.formula

    def test_open_overdue_work_lowers_score(self):
        done = make_task(1, created_at=hours_ago(2), status='completed', completed_at=hours_ago(1))
        late = make_task(2, created_at=hours_ago(90), due_date=hours_ago(50))

        good = ProductivityScoreCalculator([done], NOW).calculate()
        worse = ProductivityScoreCalculator([done, late], NOW).calculate()

        assert worse.score < good.score
        assert worse.components.on_time_rate.value == 0.0
        assert 0 <= worse.score <= 100
