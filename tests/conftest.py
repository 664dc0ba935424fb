"""
Shared pytest fixtures for Task Insights tests.
Provides record factories, in-memory record stores and PostgreSQL mocking.
"""
import pytest
from datetime import datetime, timedelta, timezone

from task_insights.models.records import Goal, Task

# Wednesday, used as "now" by every analyzer test
NOW = datetime(2025, 6, 18, 12, 0, tzinfo=timezone.utc)


def hours_ago(hours):
    return NOW - timedelta(hours=hours)


def days_ago(days):
    return NOW - timedelta(days=days)


def make_task(task_id, **fields):
    """Build a Task with a default title and creation time."""
    fields.setdefault('title', f'Task {task_id}')
    fields.setdefault('created_at', hours_ago(1))
    return Task(id=task_id, **fields)


def make_goal(goal_id, **fields):
    fields.setdefault('title', f'Goal {goal_id}')
    fields.setdefault('start_date', days_ago(7))
    fields.setdefault('end_date', NOW + timedelta(days=7))
    return Goal(id=goal_id, **fields)


class FakeStore:
    """In-memory record store that counts its reads."""

    def __init__(self, tasks=None, goals=None):
        self.tasks = list(tasks or [])
        self.goals = list(goals or [])
        self.task_reads = 0
        self.goal_reads = 0

    def get_tasks(self, user_id):
        self.task_reads += 1
        return list(self.tasks)

    def get_goals(self, user_id):
        self.goal_reads += 1
        return list(self.goals)


class FailingStore:
    """Record store whose reads always fail."""

    def get_tasks(self, user_id):
        raise ConnectionError('database unavailable')

    def get_goals(self, user_id):
        raise ConnectionError('database unavailable')


class MockCursor:
    """Mock PostgreSQL cursor with RealDictCursor behavior."""

    def __init__(self, data_store):
        self.data_store = data_store
        self._results = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        """Mock execute - store query for inspection."""
        self.data_store['queries'].append((query, params))
        query_lower = query.lower().strip()

        if self.data_store.get('fail'):
            raise RuntimeError('connection lost')
        if 'select 1' in query_lower:
            self._results = [{'?column?': 1}]
        elif 'from tasks' in query_lower:
            self._results = self.data_store['tasks']
        elif 'from goals' in query_lower:
            self._results = self.data_store['goals']
        else:
            self._results = []

    def fetchall(self):
        return self._results


class MockConnection:
    """Mock PostgreSQL connection."""

    def __init__(self, data_store):
        self.data_store = data_store

    def cursor(self, cursor_factory=None):
        return MockCursor(self.data_store)

    def commit(self):
        self.data_store['commits'] += 1

    def rollback(self):
        self.data_store['rollbacks'] += 1


class MockPool:
    """Mock PostgreSQL connection pool."""

    def __init__(self, data_store):
        self.data_store = data_store
        self.returned = 0

    def getconn(self):
        return MockConnection(self.data_store)

    def putconn(self, conn):
        self.returned += 1


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def mock_db_data():
    """Shared data store for mock database."""
    return {
        'tasks': [],
        'goals': [],
        'queries': [],
        'commits': 0,
        'rollbacks': 0,
    }


@pytest.fixture
def mock_pool(mock_db_data):
    return MockPool(mock_db_data)


@pytest.fixture
def mock_db(mock_pool, monkeypatch):
    """Point task_insights.db at the mock pool."""
    from task_insights import db as db_module
    monkeypatch.setattr(db_module, '_pool', mock_pool)
    monkeypatch.setattr(db_module, 'get_pool', lambda: mock_pool)
    return db_module


@pytest.fixture
def sample_tasks():
    """
    A small but varied week of work:
    - completions across categories and hours
    - one high priority task postponed 4 times and 10 days overdue
    - a never-started task and a stale task
    """
    return [
        make_task(1, priority='high', category='Work', goal_id='g1', status='completed',
                  created_at=hours_ago(30), started_at=hours_ago(29), completed_at=hours_ago(26),
                  due_date=hours_ago(20)),
        make_task(2, priority='high', category='Work', goal_id='g1', status='completed',
                  created_at=hours_ago(20), started_at=hours_ago(19), completed_at=hours_ago(17)),
        make_task(3, priority='low', category='Home', status='completed',
                  created_at=hours_ago(50), completed_at=hours_ago(3)),
        make_task(4, priority='medium', category='Work', status='in_progress',
                  created_at=days_ago(2), started_at=days_ago(1)),
        make_task(5, title='Write thesis', priority='high', category='Study',
                  created_at=days_ago(20), due_date=days_ago(10), postpone_count=4),
        make_task(6, priority='low', category='Home', created_at=days_ago(9)),
        make_task(7, priority='low', category='Home', status='completed',
                  created_at=hours_ago(10), completed_at=hours_ago(2)),
    ]


@pytest.fixture
def sample_goals():
    return [
        make_goal('g1', target_task_count=4),
        make_goal('g2', status='completed', end_date=days_ago(40)),
    ]


@pytest.fixture
def fake_store(sample_tasks, sample_goals):
    return FakeStore(sample_tasks, sample_goals)


@pytest.fixture
def empty_store():
    return FakeStore()
