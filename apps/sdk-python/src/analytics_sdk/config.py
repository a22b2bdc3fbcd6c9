"""Configuration objects for the analytics Python SDK."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ServerZone(str, Enum):
    US = "US"
    EU = "EU"


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    server_zone: ServerZone = ServerZone.US
    server_url: Optional[str] = None
    use_batch: bool = False
    min_id_length: Optional[int] = None


__all__ = ["ClientConfig", "ServerZone"]
