"""Analytics Python SDK: event uploader and on-disk event buffer."""

from .background import BackgroundTasks
from .config import ClientConfig, ServerZone
from .constants import HttpStatus
from .http_client import HttpClient, HttpError, InvalidUrlError, UploadResult
from .output_file import OutputFileStream, OutputStreamError, WriteOutcome

__all__ = [
    "BackgroundTasks",
    "ClientConfig",
    "HttpClient",
    "HttpError",
    "HttpStatus",
    "InvalidUrlError",
    "OutputFileStream",
    "OutputStreamError",
    "ServerZone",
    "UploadResult",
    "WriteOutcome",
]
