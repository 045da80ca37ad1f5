"""Retrying of GitHub API requests on transient network failures."""
import functools
import time

import requests

from infrakit.core.logger import get_logger

logger = get_logger(__name__)

TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)


def retry_request(max_attempts: int = 3, delay: float = 1.0, backoff: float = 2.0):
    """Retry a GitHubClient request method with exponential backoff.

    The decorated method takes the request URL as its first argument after
    self. Only connection errors and timeouts are retried; HTTP error
    statuses come back as responses and are left to the caller.

    Args:
        max_attempts: Total number of attempts, including the first
        delay: Seconds to wait after the first failure
        backoff: Multiplier applied to the delay after each failure

    Example:
        @retry_request(max_attempts=3, delay=1.0)
        def _post(self, url, payload):
            ...
    """

    def decorator(method):
        @functools.wraps(method)
        def wrapper(client, url, *args, **kwargs):
            attempt = 1
            current_delay = delay

            while True:
                try:
                    return method(client, url, *args, **kwargs)
                except TRANSIENT_ERRORS as e:
                    if attempt >= max_attempts:
                        logger.error(f"GitHub request to {url} failed after {attempt} attempts: {e}")
                        raise

                    logger.warning(f"GitHub request to {url} failed (attempt {attempt}/{max_attempts}): {e}")
                    logger.info(f"Retrying in {current_delay:.1f}s...")
                    time.sleep(current_delay)
                    current_delay *= backoff
                    attempt += 1

        return wrapper

    return decorator
