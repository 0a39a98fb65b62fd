# storefront/utils/retry.py
import logging

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
import requests
import redis

from storefront.utils.settings import EVENTS_RETRY_ATTEMPTS, PICTURE_RETRY_ATTEMPTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _transient_http_error(exc: BaseException) -> bool:
    # 4xx nie zmieni sie po ponowieniu
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        return response is None or response.status_code >= 500
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


def http_retry(attempts: int | None = None):
    """
    Serwis mediow jest odpytywany przy listowaniu listy zyczen,
    wiec krotkie przerwy - lepiej brak obrazka niz wolna odpowiedz.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or PICTURE_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception(_transient_http_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def redis_retry(attempts: int | None = None):
    """Tylko bledy polaczenia; mutacja koszyka jest juz zacommitowana."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or EVENTS_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type((redis.ConnectionError, redis.TimeoutError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
