"""
Structured JSON Logger for the Task Insights service
Optimized for Grafana Loki ingestion via Promtail
"""

import json
import os
import sys
import threading
import uuid
import traceback
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from flask import g, has_request_context, request


class StructuredLogger:
    """
    Structured JSON logger for Loki integration.

    Outputs JSON logs to stdout which are collected by Promtail.
    Labels (low cardinality): service, level, event_type
    Context (high cardinality): user_id, analyzer, report type, etc.
    """

    def __init__(self, service_name: str = "task-insights"):
        self.service = service_name
        self._local = threading.local()  # externally set trace IDs, per thread

    def get_trace_id(self) -> str:
        """
        Get trace ID from the value set on this thread, the current request,
        or generate a new one.

        Inside a request the ID comes from the X-Request-ID header and is kept
        on flask.g, so every line of one request shares it.
        """
        trace_id = getattr(self._local, 'trace_id', None)
        if trace_id:
            return trace_id
        if has_request_context():
            if 'trace_id' not in g:
                g.trace_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())[:8]
            return g.trace_id
        return str(uuid.uuid4())[:8]

    def set_trace_id(self, trace_id: Optional[str]):
        """Set trace ID for the calling thread only (background jobs). None clears it."""
        self._local.trace_id = trace_id

    def _get_request_context(self) -> Dict[str, Any]:
        """Extract request context if available."""
        if has_request_context():
            return {
                "endpoint": request.endpoint,
                "method": request.method,
                "path": request.path,
                "remote_addr": request.remote_addr
            }
        return {}

    def _format_log(
        self,
        level: str,
        event_type: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        metrics: Optional[Dict[str, Any]] = None,
        error: Optional[Dict[str, Any]] = None
    ) -> str:
        """Format log entry as JSON string."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "service": self.service,
            "event_type": event_type,
            "message": message,
            "trace_id": self.get_trace_id()
        }

        request_ctx = self._get_request_context()
        if request_ctx:
            log_entry["request"] = request_ctx

        if context:
            log_entry["context"] = context
        if metrics:
            log_entry["metrics"] = metrics
        if error:
            log_entry["error"] = error

        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def _write(self, log_json: str):
        """Write log to stdout (collected by Promtail)."""
        print(log_json, file=sys.stdout, flush=True)

    @staticmethod
    def _error_details(error: Optional[Dict], exception: Optional[Exception]) -> Optional[Dict]:
        error_dict = dict(error or {})
        if exception:
            error_dict.update({
                "type": type(exception).__name__,
                "message": str(exception),
                "traceback": traceback.format_exc()
            })
        return error_dict or None

    # =========================================================================
    # Core logging methods
    # =========================================================================

    def info(self, event_type: str, message: str,
             context: Dict = None, metrics: Dict = None):
        """Log INFO level event."""
        self._write(self._format_log("INFO", event_type, message, context, metrics))

    def warning(self, event_type: str, message: str,
                context: Dict = None, metrics: Dict = None):
        """Log WARNING level event."""
        self._write(self._format_log("WARNING", event_type, message, context, metrics))

    def error(self, event_type: str, message: str,
              context: Dict = None, error: Dict = None, exception: Exception = None):
        """Log ERROR level event with optional exception details."""
        self._write(self._format_log("ERROR", event_type, message, context,
                                     error=self._error_details(error, exception)))

    def critical(self, event_type: str, message: str,
                 context: Dict = None, error: Dict = None, exception: Exception = None):
        """Log CRITICAL level event for severe failures."""
        self._write(self._format_log("CRITICAL", event_type, message, context,
                                     error=self._error_details(error, exception)))

    def debug(self, event_type: str, message: str,
              context: Dict = None, metrics: Dict = None):
        """Log DEBUG level event."""
        self._write(self._format_log("DEBUG", event_type, message, context, metrics))

    # =========================================================================
    # Analytics event helpers
    # =========================================================================

    def analysis_completed(self, analyzer: str, user_id: str,
                           tasks_analyzed: int, latency_ms: int):
        """Log a finished analyzer run."""
        self.info(
            event_type="ANALYSIS_COMPLETED",
            message=f"Analysis {analyzer} completed over {tasks_analyzed} tasks",
            context={
                "analyzer": analyzer,
                "user_id": user_id
            },
            metrics={
                "tasks_analyzed": tasks_analyzed,
                "latency_ms": latency_ms
            }
        )

    def report_generated(self, report_type: str, user_id: str, score: int,
                         wins: int, bottlenecks: int, suggestions: int, latency_ms: int):
        """Log report generation."""
        self.info(
            event_type="REPORT_GENERATED",
            message=f"Report generated: {report_type} (score {score})",
            context={
                "report_type": report_type,
                "user_id": user_id
            },
            metrics={
                "score": score,
                "key_wins": wins,
                "bottlenecks": bottlenecks,
                "suggestions": suggestions,
                "latency_ms": latency_ms
            }
        )

    def productivity_scored(self, user_id: str, score: int, grade: str):
        """Log productivity score calculation. Failing grades are warnings."""
        level = "WARNING" if grade == "F" else "INFO"
        self._write(self._format_log(
            level=level,
            event_type="PRODUCTIVITY_SCORED",
            message=f"Productivity score: {score} ({grade})",
            context={
                "user_id": user_id,
                "grade": grade
            },
            metrics={
                "score": score
            }
        ))

    def store_error(self, operation: str, user_id: str, exception: Exception):
        """Log a record store read failure."""
        self.error(
            event_type="STORE_ERROR",
            message=f"Record store error during {operation}",
            context={
                "operation": operation,
                "user_id": user_id
            },
            exception=exception
        )

    def db_connected(self, db_type: str = "PostgreSQL", pool_size: int = None):
        """Log database connection event."""
        self.info(
            event_type="DB_CONNECTED",
            message=f"Database connected: {db_type}",
            context={
                "db_type": db_type
            },
            metrics={
                "pool_size": pool_size
            } if pool_size is not None else None
        )


# Singleton instance
logger = StructuredLogger(os.getenv("ANALYTICS_SERVICE_NAME", "task-insights"))
