#
# monitoring - in-process request timings and error log
#
# Samples live in bounded deques on the app, so each worker process reports
# only what it served itself.
#
from __future__ import annotations

import collections
import dataclasses
import datetime
import threading
import time
import traceback

import flask
import structlog
from flask_login import current_user

import utils

logger = structlog.stdlib.get_logger()

RECENT_REQUESTS = 10
RECENT_ERRORS = 20


@dataclasses.dataclass(frozen=True)
class RequestSample:
    endpoint: str
    method: str
    status_code: int
    response_time: float
    timestamp: datetime.datetime
    user_id: str | None = None

    def encode(self) -> dict:
        return {
            'endpoint': self.endpoint,
            'method': self.method,
            'statusCode': self.status_code,
            'responseTime': round(self.response_time, 2),
            'timestamp': utils.isoformat(self.timestamp),
            'userId': self.user_id,
        }


@dataclasses.dataclass(frozen=True)
class ErrorSample:
    error: str
    error_type: str
    status_code: int
    endpoint: str | None
    timestamp: datetime.datetime
    stack: str | None = None

    def encode(self) -> dict:
        return {
            'error': self.error,
            'type': self.error_type,
            'statusCode': self.status_code,
            'endpoint': self.endpoint,
            'timestamp': utils.isoformat(self.timestamp),
            'stack': self.stack,
        }


class PerformanceMonitor:
    def __init__(self, max_samples: int = 1000, slow_request_ms: float = 1000):
        self.slow_request_ms = slow_request_ms
        self.started = time.monotonic()
        self._lock = threading.Lock()
        self._requests: collections.deque[RequestSample] = collections.deque(maxlen=max_samples)
        self._errors: collections.deque[ErrorSample] = collections.deque(maxlen=max_samples)

    def record_request(
        self,
        endpoint: str,
        method: str,
        status_code: int,
        response_time: float,
        user_id: str | None = None,
    ) -> RequestSample:
        sample = RequestSample(
            endpoint=endpoint,
            method=method,
            status_code=status_code,
            response_time=response_time,
            timestamp=utils.utcnow(),
            user_id=user_id,
        )
        with self._lock:
            self._requests.append(sample)

        if response_time > self.slow_request_ms:
            logger.warning(
                "Slow request",
                endpoint=endpoint,
                method=method,
                status_code=status_code,
                response_time_ms=round(response_time, 2),
            )
        return sample

    def record_error(self, error: BaseException, status_code: int = 500) -> ErrorSample:
        endpoint = flask.request.path if flask.has_request_context() else None
        stack = None
        if error.__traceback__ is not None:
            stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        sample = ErrorSample(
            error=str(error),
            error_type=type(error).__name__,
            status_code=int(status_code),
            endpoint=endpoint,
            timestamp=utils.utcnow(),
            stack=stack,
        )
        with self._lock:
            self._errors.append(sample)
        return sample

    def uptime(self) -> float:
        return time.monotonic() - self.started

    def get_metrics(self) -> dict:
        with self._lock:
            requests = list(self._requests)

        summary = {
            'averageResponseTime': 0,
            'slowestRequest': 0,
            'fastestRequest': 0,
            'totalRequests': len(requests),
            'errorRate': 0,
        }
        if requests:
            times = [r.response_time for r in requests]
            failed = sum(1 for r in requests if r.status_code >= 400)
            summary.update(
                averageResponseTime=round(sum(times) / len(times), 2),
                slowestRequest=round(max(times), 2),
                fastestRequest=round(min(times), 2),
                errorRate=round(failed / len(requests) * 100, 2),
            )
        return {
            'summary': summary,
            'recentRequests': [r.encode() for r in requests[-RECENT_REQUESTS:]],
        }

    def get_errors(self) -> list[dict]:
        with self._lock:
            errors = list(self._errors)
        return [e.encode() for e in errors[-RECENT_ERRORS:]]

    def clear(self) -> None:
        with self._lock:
            self._requests.clear()
            self._errors.clear()


def _start_timer() -> None:
    flask.g.request_started = time.monotonic()


def _record_response(response):
    started = flask.g.pop('request_started', None)
    if started is None:
        return response

    user_id = current_user.get_id() if current_user.is_authenticated else None
    flask.current_app.extensions["monitor"].record_request(
        endpoint=flask.request.url_rule.rule if flask.request.url_rule else flask.request.path,
        method=flask.request.method,
        status_code=response.status_code,
        response_time=(time.monotonic() - started) * 1000,
        user_id=user_id,
    )
    return response


def init_app(app: flask.Flask) -> PerformanceMonitor:
    monitor = PerformanceMonitor(
        max_samples=app.config["METRICS_MAX_SAMPLES"],
        slow_request_ms=app.config["SLOW_REQUEST_MS"],
    )
    app.extensions["monitor"] = monitor
    app.before_request(_start_timer)
    app.after_request(_record_response)
    return monitor


def get_monitor() -> PerformanceMonitor:
    return flask.current_app.extensions["monitor"]
