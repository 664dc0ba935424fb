"""
Task Insights Service - Flask API over the task analytics engine
"""

import os
import time
from functools import wraps

from flask import Flask, jsonify, request, Response
from flask_cors import CORS
from dotenv import load_dotenv
from prometheus_flask_exporter import PrometheusMetrics
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from . import db as database
from .services import AnalyticsService

# Structured logging for Loki
from .utils.logger import logger

# Centralized Prometheus metrics
from .utils.metrics import (
    service_info,
    ANALYSIS_REQUESTS, ANALYSIS_ERRORS, ANALYSIS_DURATION
)

# Load environment variables
load_dotenv()

SERVICE_NAME = os.getenv('ANALYTICS_SERVICE_NAME', 'task-insights')

app = Flask(__name__)
CORS(app)

# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================
@app.before_request
def log_incoming_request():
    """Log incoming requests for observability."""
    if request.path == '/metrics':
        return

    request.start_time = time.time()
    logger.debug("request_received",
                 message="Incoming request",
                 context={
                     "method": request.method,
                     "path": request.path,
                     "query_args": dict(request.args),
                     "remote_addr": request.remote_addr
                 })


@app.after_request
def log_request_response(response):
    """Log completed requests with timing information."""
    if request.path == '/metrics':
        return response

    duration_ms = None
    if hasattr(request, 'start_time'):
        duration_ms = round((time.time() - request.start_time) * 1000, 2)

    context = {
        "method": request.method,
        "path": request.path,
        "status": response.status_code
    }
    timing = {"duration_ms": duration_ms} if duration_ms else None

    if response.status_code >= 500:
        logger.error("request_completed", message="Request completed with server error",
                     context=dict(context, duration_ms=duration_ms))
    elif response.status_code >= 400:
        logger.warning("request_completed", message="Request completed with client error",
                       context=context, metrics=timing)
    else:
        logger.info("request_completed", message="Request completed successfully",
                    context=context, metrics=timing)

    return response

# =============================================================================
# PROMETHEUS METRICS
# =============================================================================
metrics = PrometheusMetrics(app, path=None)  # Disable automatic /metrics endpoint


@app.route('/metrics')
def prometheus_metrics():
    """Prometheus metrics endpoint"""
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)


service_info.info({
    'version': '1.0',
    'service': SERVICE_NAME
})

# Analytics over the PostgreSQL record store
analytics = AnalyticsService(database)


def get_user_id():
    """User from the user_id query param or the X-User-ID header"""
    return request.args.get('user_id') or request.headers.get('X-User-ID')


def analytics_endpoint(analysis_type):
    """
    Wrap an analytics route: require a user, count, time and log failures.

    The wrapped view receives the user id and returns a pydantic result.
    """
    def decorator(view):
        @wraps(view)
        def wrapper():
            user_id = get_user_id()
            if not user_id:
                return jsonify({'error': 'user_id is required'}), 400

            start_time = time.time()
            ANALYSIS_REQUESTS.labels(analysis_type=analysis_type).inc()
            try:
                result = view(user_id)
                ANALYSIS_DURATION.labels(analysis_type=analysis_type).observe(time.time() - start_time)
                return jsonify(result.model_dump(mode='json'))
            except Exception as e:
                ANALYSIS_ERRORS.labels(analysis_type=analysis_type, error_type=type(e).__name__).inc()
                logger.error("ANALYSIS_ERROR", f"{analysis_type} analysis failed: {str(e)}",
                             context={"analysis_type": analysis_type, "user_id": user_id},
                             exception=e)
                return jsonify({'error': str(e)}), 500
        return wrapper
    return decorator


@app.route('/api/health')
@metrics.do_not_track()
def health():
    """Health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'service': SERVICE_NAME
    })


# =============================================================================
# ANALYTICS ENDPOINTS
# =============================================================================

@app.route('/api/analytics/completion')
@analytics_endpoint('completion')
def completion(user_id):
    """
    Completion metrics for a period

    Query params:
        period: daily | weekly | monthly (anything else is weekly)
    """
    return analytics.get_completion(user_id, request.args.get('period', 'weekly'))


@app.route('/api/analytics/time-patterns')
@analytics_endpoint('time_patterns')
def time_patterns(user_id):
    """Completions by hour, weekday and time-of-day bucket"""
    return analytics.get_time_patterns(user_id)


@app.route('/api/analytics/priority')
@analytics_endpoint('priority')
def priority(user_id):
    """Per-priority behaviour and priority effectiveness score"""
    return analytics.get_priority(user_id)


@app.route('/api/analytics/focus')
@analytics_endpoint('focus')
def focus(user_id):
    return analytics.get_focus(user_id)


@app.route('/api/analytics/goals')
@analytics_endpoint('goals')
def goals(user_id):
    return analytics.get_goals(user_id)


@app.route('/api/analytics/procrastination')
@analytics_endpoint('procrastination')
def procrastination(user_id):
    return analytics.get_procrastination(user_id)


@app.route('/api/analytics/productivity-score')
@analytics_endpoint('productivity_score')
def productivity_score(user_id):
    """Weighted composite score with its component breakdown"""
    return analytics.get_productivity_score(user_id)


@app.route('/api/analytics/summary')
@analytics_endpoint('summary')
def summary(user_id):
    """Quick dashboard summary"""
    return analytics.get_summary(user_id)


# =============================================================================
# REPORT ENDPOINTS
# =============================================================================

@app.route('/api/reports/weekly')
@analytics_endpoint('weekly_report')
def weekly_report(user_id):
    return analytics.generate_report(user_id, 'weekly')


@app.route('/api/reports/monthly')
@analytics_endpoint('monthly_report')
def monthly_report(user_id):
    return analytics.generate_report(user_id, 'monthly')


@app.route('/api/reports/comprehensive')
@analytics_endpoint('comprehensive')
def comprehensive(user_id):
    """Every analyzer result for one snapshot"""
    return analytics.get_comprehensive(user_id, request.args.get('period', 'weekly'))


if __name__ == '__main__':
    logger.info("SERVICE_STARTUP", message="Task Insights service starting", context={
        "version": "1.0",
        "api_url": f"http://localhost:{os.getenv('PORT', '5003')}/api"
    })

    if database.init_db():
        logger.db_connected("PostgreSQL", int(os.getenv('DB_POOL_MAX', '10')))
    else:
        logger.critical("DB_CONNECTION_FAILED", message="PostgreSQL connection failed for Task Insights service")

    app.run(host='0.0.0.0', port=int(os.getenv('PORT', '5003')),
            debug=os.getenv('FLASK_DEBUG', 'false').lower() == 'true')
