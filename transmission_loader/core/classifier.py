"""
Decides how each torrent source is sent to the daemon.

Sources are checked in a fixed order: absolute URLs are passed by reference,
readable local files are inlined as base64 metainfo, and anything else
(magnet links, info-hashes, paths only the daemon can see) is passed through
untouched for the daemon to interpret.
"""

import base64
import logging
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlsplit

from transmission_loader.models.job import (
    ClassifiedSource,
    EmbeddedContent,
    Reference,
    SourceKind,
)

log = logging.getLogger(__name__)


def is_absolute_url(source: str) -> bool:
    """True when `source` has both a scheme and a network location."""
    try:
        parts = urlsplit(source)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def read_local_file(source: str) -> Optional[bytes]:
    """Returns the contents of the local file at `source`, or None if unreadable."""
    try:
        return Path(source).read_bytes()
    except (OSError, ValueError):
        return None


def detect_source_kind(source: str) -> Tuple[SourceKind, Optional[bytes]]:
    """
    Runs the ordered classification checks for a source string.

    Returns:
        The matching kind, and the file contents when the kind is LOCAL_FILE.
    """
    if is_absolute_url(source):
        return SourceKind.URL, None

    content = read_local_file(source)
    if content is not None:
        return SourceKind.LOCAL_FILE, content

    return SourceKind.OPAQUE, None


def build_source(
    source: str, download_dir: str, kind: SourceKind, content: Optional[bytes]
) -> ClassifiedSource:
    """Builds the wire shape for an already-detected source kind."""
    if kind is SourceKind.LOCAL_FILE:
        return EmbeddedContent(
            metainfo=base64.b64encode(content).decode("ascii"),
            download_dir=download_dir,
        )
    return Reference(filename=source, download_dir=download_dir)


def classify(source: str, download_dir: str) -> ClassifiedSource:
    """
    Maps a raw source string to the ``torrent-add`` arguments it should be sent as.

    Args:
        source: A URL, local file path, or opaque identifier such as a magnet link.
        download_dir: The resolved target directory for the torrent.
    """
    kind, content = detect_source_kind(source)
    log.debug(f"Classified '{source}' as {kind.value}")
    return build_source(source, download_dir, kind, content)
