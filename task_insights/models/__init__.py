# Analytics models package
from .completion_analyzer import CompletionAnalyzer
from .time_pattern_analyzer import TimePatternAnalyzer
from .priority_analyzer import PriorityAnalyzer
from .focus_analyzer import FocusAnalyzer
from .goal_alignment_analyzer import GoalAlignmentAnalyzer
from .procrastination_analyzer import ProcrastinationAnalyzer
from .productivity_score import ProductivityScoreCalculator
from .report_generator import ReportGenerator
from .records import Goal, Task

__all__ = ['CompletionAnalyzer', 'TimePatternAnalyzer', 'PriorityAnalyzer', 'FocusAnalyzer', 'GoalAlignmentAnalyzer', 'ProcrastinationAnalyzer', 'ProductivityScoreCalculator', 'ReportGenerator', 'Goal', 'Task']
