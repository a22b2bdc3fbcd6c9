"""HTTP uploader for batched analytics events."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx

from .background import BackgroundTaskToken, BackgroundTasks
from .config import ClientConfig
from .constants import (
    ACCEPT_HEADER,
    API_HOSTS,
    CONTENT_TYPE_HEADER,
    MAX_CONNECTIONS_PER_HOST,
    REQUEST_TIMEOUT_SECONDS,
    HttpStatus,
)

logger = logging.getLogger("analytics_sdk.http")


class HttpClientError(Exception):
    """Base class for upload failures reported through the completion."""


class InvalidUrlError(HttpClientError):
    def __init__(self, url: str) -> None:
        super().__init__(f"invalid upload url: {url!r}")
        self.url = url


class HttpError(HttpClientError):
    def __init__(self, code: int, data: Optional[bytes] = None) -> None:
        super().__init__(f"upload failed with status {code}")
        self.code = code
        self.data = data


@dataclass(frozen=True)
class UploadResult:
    status_code: Optional[int] = None
    error: Optional[BaseException] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, status_code: int) -> "UploadResult":
        return cls(status_code=status_code)

    @classmethod
    def failed(cls, error: BaseException) -> "UploadResult":
        return cls(error=error)


Completion = Callable[[UploadResult], None]


class HttpClient:
    """POSTs serialized event batches to the ingestion endpoint.

    Each ``upload`` call runs on a worker thread and reports its outcome to
    ``completion`` exactly once. There is no retry; callers own that policy.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        background: Optional[BackgroundTasks] = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(
            timeout=REQUEST_TIMEOUT_SECONDS,
            limits=httpx.Limits(max_connections=MAX_CONNECTIONS_PER_HOST),
            transport=transport,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=MAX_CONNECTIONS_PER_HOST, thread_name_prefix="analytics-upload"
        )
        self._background = background or BackgroundTasks()
        self._local = threading.local()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def upload(self, events: str, completion: Completion) -> Optional[Future]:
        token = self._background.begin()
        try:
            request = self.get_request(events)
        except Exception as exc:
            logger.error("Upload request not built: %s", exc)
            error = HttpError(int(HttpStatus.FAILED), None)
            error.__cause__ = exc
            with token:
                self._complete(completion, UploadResult.failed(error))
            return None

        try:
            future = self._executor.submit(self._send, request)
        except RuntimeError as exc:
            # executor already shut down
            with token:
                self._complete(completion, UploadResult.failed(exc))
            return None
        future.add_done_callback(lambda done: self._finish(done, completion, token))
        return future

    def get_url(self) -> str:
        if self._config.server_url:
            return self._config.server_url
        return API_HOSTS[(self._config.server_zone, self._config.use_batch)]

    def get_request(self, events: str) -> httpx.Request:
        url = self.get_url()
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise InvalidUrlError(url) from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise InvalidUrlError(url)
        return self._client.build_request(
            "POST",
            parsed,
            content=self.get_request_data(events),
            headers={"Content-Type": CONTENT_TYPE_HEADER, "Accept": ACCEPT_HEADER},
        )

    def get_request_data(self, events: str) -> bytes:
        client_upload_time = self.format_date(self.get_date())
        payload = (
            f'{{"api_key":"{self._config.api_key}",'
            f'"client_upload_time":"{client_upload_time}",'
            f'"events":{events}'
        )
        if self._config.min_id_length is not None:
            payload += f',"options":{{"min_id_length":{self._config.min_id_length}}}'
        payload += "}"
        return payload.encode("utf-8")

    def get_date(self) -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def format_date(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        stamp = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
        return stamp.replace("+00:00", "Z")

    def _send(self, request: httpx.Request) -> UploadResult:
        try:
            response = self._client.send(request)
        except httpx.RequestError as exc:
            logger.warning("Upload to %s failed: %s", request.url, exc)
            return UploadResult.failed(exc)
        if 1 <= response.status_code < 300:
            return UploadResult.ok(response.status_code)
        logger.error("Upload rejected status=%s body=%s", response.status_code, response.text)
        return UploadResult.failed(HttpError(response.status_code, response.content or None))

    def _finish(self, future: Future, completion: Completion, token: BackgroundTaskToken) -> None:
        with token:
            if future.cancelled():
                result = UploadResult.failed(CancelledError())
            elif future.exception() is not None:
                result = UploadResult.failed(future.exception())
            else:
                result = future.result()
            self._complete(completion, result)

    def _complete(self, completion: Completion, result: UploadResult) -> None:
        self._local.in_completion = True
        try:
            completion(result)
        except Exception:
            logger.exception("Upload completion raised")
        finally:
            self._local.in_completion = False

    def close(self, wait: bool = True) -> None:
        # a completion still holds its own token, so it cannot wait for the drain
        if getattr(self._local, "in_completion", False):
            wait = False
        if wait:
            self._background.wait_idle()
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
        self._client.close()


__all__ = [
    "Completion",
    "HttpClient",
    "HttpClientError",
    "HttpError",
    "InvalidUrlError",
    "UploadResult",
]
