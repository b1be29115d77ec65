"""
Flattened units of work and the two wire shapes a torrent can be submitted in.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

import aiohttp
from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Job:
    """A single torrent source paired with the directory it should download into."""

    source: str
    download_dir: str


class SourceKind(Enum):
    """Which branch of the classifier a source string fell into."""

    URL = "url"
    LOCAL_FILE = "local_file"
    OPAQUE = "opaque"  # magnet links, info-hashes, daemon-side paths


class Reference(BaseModel):
    """A torrent the daemon fetches or resolves itself (URL, path, magnet)."""

    filename: str
    download_dir: str = Field(alias="download-dir")

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True
        frozen = True

    def to_arguments(self) -> dict[str, Any]:
        """Builds the ``torrent-add`` arguments object."""
        return self.model_dump(by_alias=True)


class EmbeddedContent(BaseModel):
    """A local .torrent file inlined into the request as base64."""

    metainfo: str
    download_dir: str = Field(alias="download-dir")

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True
        frozen = True

    def to_arguments(self) -> dict[str, Any]:
        """Builds the ``torrent-add`` arguments object."""
        return self.model_dump(by_alias=True)


ClassifiedSource = Union[Reference, EmbeddedContent]


@dataclass(frozen=True)
class SessionContext:
    """
    Result of the session handshake, shared read-only by every submission.

    Attributes:
        session_id: CSRF token echoed as ``X-Transmission-Session-Id``, if the
            daemon issued one.
        auth: Basic-auth credentials, present only when both halves are configured.
        download_dir: The daemon's default download directory (traversal root).
    """

    session_id: Optional[str]
    auth: Optional[aiohttp.BasicAuth]
    download_dir: str
