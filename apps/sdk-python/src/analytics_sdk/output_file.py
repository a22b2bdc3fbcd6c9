"""Append-only file writer used to buffer events before upload."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

logger = logging.getLogger("analytics_sdk.storage")


class OutputStreamError(Exception):
    def __init__(self, path: str) -> None:
        super().__init__(f"{type(self).__name__}: {path}")
        self.path = path


class InvalidPathError(OutputStreamError):
    pass


class CreateFailedError(OutputStreamError):
    pass


class AlreadyExistsError(CreateFailedError):
    pass


class OpenFailedError(OutputStreamError):
    pass


class WriteFailedError(OutputStreamError):
    pass


class CloseFailedError(OutputStreamError):
    pass


class WriteOutcome(str, Enum):
    WRITTEN = "written"
    SKIPPED_EMPTY = "skipped_empty"
    SKIPPED_NOT_OPEN = "skipped_not_open"
    SKIPPED_ENCODING = "skipped_encoding"

    @property
    def written(self) -> bool:
        return self is WriteOutcome.WRITTEN


class OutputFileStream:
    """Owns one file and appends to it through a single write handle.

    The handle is opened at most once per instance and every write lands at
    end of file. Writes made while no handle is open are skipped rather than
    raised; the returned ``WriteOutcome`` tells the caller which case applied.
    Not thread-safe: callers serialize writes to one instance.
    """

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        raw = os.fspath(path)
        if not raw:
            raise InvalidPathError(raw)
        self._path = Path(raw)
        self._handle: Optional[BinaryIO] = None

    def __enter__(self) -> "OutputFileStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def create(self) -> None:
        if self._path.exists():
            raise AlreadyExistsError(str(self._path))
        try:
            with self._path.open("xb"):
                pass
        except FileExistsError as exc:
            raise AlreadyExistsError(str(self._path)) from exc
        except OSError as exc:
            raise CreateFailedError(str(self._path)) from exc
        logger.debug("Created buffer file %s", self._path)
        self.open()

    def open(self) -> None:
        if self._handle is not None:
            return
        try:
            # write-only, no O_CREAT or O_TRUNC: a missing file fails, content is kept
            fd = os.open(self._path, os.O_WRONLY)
        except OSError as exc:
            raise OpenFailedError(str(self._path)) from exc
        try:
            handle = os.fdopen(fd, "wb")
        except OSError as exc:
            os.close(fd)
            raise OpenFailedError(str(self._path)) from exc
        try:
            handle.seek(0, os.SEEK_END)
        except OSError as exc:
            handle.close()
            raise OpenFailedError(str(self._path)) from exc
        self._handle = handle

    def write(self, data: Union[bytes, bytearray, memoryview, str]) -> WriteOutcome:
        if isinstance(data, str):
            return self._write_text(data)
        if not data:
            return WriteOutcome.SKIPPED_EMPTY
        if self._handle is None:
            logger.debug("Write to %s skipped; file not open", self._path)
            return WriteOutcome.SKIPPED_NOT_OPEN
        try:
            self._handle.write(data)
            self._handle.flush()
        except OSError as exc:
            raise WriteFailedError(str(self._path)) from exc
        return WriteOutcome.WRITTEN

    def _write_text(self, text: str) -> WriteOutcome:
        if not text:
            return WriteOutcome.SKIPPED_EMPTY
        try:
            data = text.encode("utf-8")
        except UnicodeEncodeError:
            logger.warning("Write to %s skipped; text is not valid UTF-8", self._path)
            return WriteOutcome.SKIPPED_ENCODING
        return self.write(data)

    def close(self) -> None:
        existing = self._handle
        self._handle = None
        if existing is None:
            return
        try:
            try:
                existing.flush()
                os.fsync(existing.fileno())
            finally:
                existing.close()
        except OSError as exc:
            raise CloseFailedError(str(self._path)) from exc


__all__ = [
    "AlreadyExistsError",
    "CloseFailedError",
    "CreateFailedError",
    "InvalidPathError",
    "OpenFailedError",
    "OutputFileStream",
    "OutputStreamError",
    "WriteFailedError",
    "WriteOutcome",
]
