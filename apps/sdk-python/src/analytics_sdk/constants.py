"""Endpoints and request constants used by the uploader."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Tuple

from .config import ServerZone

DEFAULT_API_HOST = "https://api2.amplitude.com/2/httpapi"
EU_DEFAULT_API_HOST = "https://api.eu.amplitude.com/2/httpapi"
BATCH_API_HOST = "https://api2.amplitude.com/batch"
EU_BATCH_API_HOST = "https://api.eu.amplitude.com/batch"

# (zone, use_batch) -> host
API_HOSTS: Dict[Tuple[ServerZone, bool], str] = {
    (ServerZone.US, False): DEFAULT_API_HOST,
    (ServerZone.US, True): BATCH_API_HOST,
    (ServerZone.EU, False): EU_DEFAULT_API_HOST,
    (ServerZone.EU, True): EU_BATCH_API_HOST,
}

REQUEST_TIMEOUT_SECONDS = 60.0
CONTENT_TYPE_HEADER = "application/json; charset=utf-8"
ACCEPT_HEADER = "application/json"
MAX_CONNECTIONS_PER_HOST = 2


class HttpStatus(IntEnum):
    SUCCESS = 200
    BAD_REQUEST = 400
    TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413
    TOO_MANY_REQUESTS = 429
    FAILED = 500


__all__ = [
    "ACCEPT_HEADER",
    "API_HOSTS",
    "BATCH_API_HOST",
    "CONTENT_TYPE_HEADER",
    "DEFAULT_API_HOST",
    "EU_BATCH_API_HOST",
    "EU_DEFAULT_API_HOST",
    "HttpStatus",
    "MAX_CONNECTIONS_PER_HOST",
    "REQUEST_TIMEOUT_SECONDS",
]
