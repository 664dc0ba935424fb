"""
Task Insights API Endpoint Tests.
Tests all Flask API routes with an in-memory record store.
"""
import pytest
import json

from task_insights.services import AnalyticsService
from conftest import FailingStore

FROZEN_NOW = '2025-06-18 12:00:00'

ANALYTICS_ROUTES = [
    '/api/analytics/completion',
    '/api/analytics/time-patterns',
    '/api/analytics/priority',
    '/api/analytics/focus',
    '/api/analytics/goals',
    '/api/analytics/procrastination',
    '/api/analytics/productivity-score',
    '/api/analytics/summary',
    '/api/reports/weekly',
    '/api/reports/monthly',
    '/api/reports/comprehensive',
]


@pytest.fixture
def app_module():
    from task_insights import app as module
    module.app.config['TESTING'] = True
    return module


@pytest.fixture
def client(app_module, fake_store, monkeypatch):
    """Test client backed by the sample tasks and goals."""
    monkeypatch.setattr(app_module, 'analytics', AnalyticsService(fake_store))
    return app_module.app.test_client()


@pytest.fixture
def failing_client(app_module, monkeypatch):
    monkeypatch.setattr(app_module, 'analytics', AnalyticsService(FailingStore()))
    return app_module.app.test_client()


class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_endpoint(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200

        data = json.loads(response.data)
        assert data['status'] == 'healthy'


class TestUserIdentification:
    """Every analytics route needs a user."""

    @pytest.mark.parametrize('route', ANALYTICS_ROUTES)
    def test_missing_user_is_400(self, client, route):
        response = client.get(route)

        assert response.status_code == 400
        assert 'error' in json.loads(response.data)

    def test_user_from_header(self, client):
        response = client.get('/api/analytics/completion', headers={'X-User-ID': 'u1'})

        assert response.status_code == 200


class TestAnalyticsEndpoints:
    """Test analyzer routes."""

    @pytest.mark.freeze_time(FROZEN_NOW)
    @pytest.mark.parametrize('route', ANALYTICS_ROUTES)
    def test_route_returns_json(self, client, route):
        response = client.get(route, query_string={'user_id': 'u1'})

        assert response.status_code == 200
        assert isinstance(json.loads(response.data), dict)

    @pytest.mark.freeze_time(FROZEN_NOW)
    def test_completion_period(self, client):
        response = client.get('/api/analytics/completion?user_id=u1&period=monthly')

        data = json.loads(response.data)
        assert data['period'] == 'monthly'
        assert data['total_tasks'] == 7
        assert data['completion_rate'] == 57.1

    @pytest.mark.freeze_time(FROZEN_NOW)
    def test_invalid_period_is_weekly(self, client):
        data = json.loads(client.get('/api/analytics/completion?user_id=u1&period=decade').data)

        assert data['period'] == 'weekly'

    @pytest.mark.freeze_time(FROZEN_NOW)
    def test_productivity_score_breakdown(self, client):
        data = json.loads(client.get('/api/analytics/productivity-score?user_id=u1').data)

        assert set(data['components']) == {
            'completion_rate', 'on_time_rate', 'focus_score', 'anti_procrastination_score'
        }
        assert data['grade'] in ['A+', 'A', 'B', 'C', 'D', 'F']

    @pytest.mark.freeze_time(FROZEN_NOW)
    def test_summary(self, client):
        data = json.loads(client.get('/api/analytics/summary?user_id=u1').data)

        assert data['total'] == 7
        assert data['active'] == 3


class TestReportEndpoints:
    """Test report routes."""

    @pytest.mark.freeze_time(FROZEN_NOW)
    def test_weekly_report(self, client):
        data = json.loads(client.get('/api/reports/weekly?user_id=u1').data)

        assert data['report_type'] == 'weekly'
        assert data['period']['days'] == 7
        assert data['summary'][0].startswith('This weekly period')
        assert all(b['severity'] in ('high', 'medium') for b in data['bottlenecks'])

    @pytest.mark.freeze_time(FROZEN_NOW)
    def test_comprehensive_report(self, client):
        data = json.loads(client.get('/api/reports/comprehensive?user_id=u1').data)

        assert set(data) == {
            'completion', 'time_patterns', 'priority', 'focus', 'goals',
            'procrastination', 'productivity_score'
        }


class TestErrors:
    """Store failures surface as 500 without a zeroed body."""

    def test_store_failure_is_500(self, failing_client):
        response = failing_client.get('/api/reports/weekly?user_id=u1')

        assert response.status_code == 500
        data = json.loads(response.data)
        assert data == {'error': 'database unavailable'}


class TestRequestTracing:
    """Request log lines carry that request's X-Request-ID."""

    def test_trace_id_does_not_outlive_its_request(self, client, capsys):
        client.get('/api/health', headers={'X-Request-ID': 'trace-1'})
        first = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        client.get('/api/health')
        second = [json.loads(line) for line in capsys.readouterr().out.splitlines()]

        assert first and all(e['trace_id'] == 'trace-1' for e in first)
        assert second and all(e['trace_id'] != 'trace-1' for e in second)
        assert len({e['trace_id'] for e in second}) == 1


class TestMetricsEndpoint:
    """Test Prometheus exposition."""

    def test_metrics(self, client):
        client.get('/api/analytics/focus?user_id=u1')

        response = client.get('/metrics')

        assert response.status_code == 200
        assert b'task_insights_analysis_requests_total' in response.data
