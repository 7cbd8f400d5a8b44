"""Response timing: X-Response-Time header and slow request logging."""

import logging
import time
from flask import g, request

logger = logging.getLogger(__name__)


def register_response_timing(app):
    """Attach before/after request hooks that time every response."""

    @app.before_request
    def start_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def add_response_time(response):
        started = g.get('request_started_at')
        if started is None:
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers['X-Response-Time'] = f'{elapsed_ms:.2f}ms'

        if elapsed_ms > app.config['SLOW_RESPONSE_THRESHOLD_MS']:
            logger.warning(
                f"Slow API response detected: {request.method} {request.url} "
                f"took {elapsed_ms:.2f}ms "
                f"(user_agent={request.user_agent.string!r}, ip={request.remote_addr})"
            )

        return response
