"""
Service context for log lines.

Identifies the emitting process as `{service}@{env}:{instance}` so lines from
several containers or Lambda instances can be told apart in one sink.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'sharebus-booking')
    deploy_env = os.getenv('DEPLOY_ENV', os.getenv('ENV', 'local_dev'))

    # Lambda exposes its log stream name; containers fall back to the pid
    log_stream = os.getenv('AWS_LAMBDA_LOG_STREAM_NAME', '')
    instance = log_stream.rsplit(']', 1)[-1][:8] if log_stream else str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
