"""
Structured logging for bootstrap steps and per-torrent outcomes.
Provides human-readable console lines and optional JSON-lines event files.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from rich.markup import escape


class StructuredLogger:
    """
    Logger that outputs both human-readable and machine-parseable events.

    Usage:
        logger = StructuredLogger("transmission_loader")
        logger.info("torrent_added",
                    source="ubuntu.torrent",
                    download_dir="/downloads/isos")
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_console: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_console: Enable console output
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)

        self._json_file = None
        self.json_log_path: Path | None = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.json_log_path = log_dir / f"transmission_loader_{timestamp}.jsonl"
            self._json_file = open(self.json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Session context (added to all log entries)
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
            "start_time": datetime.now().isoformat(),
        }

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all logs."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        """Format message for console output."""
        parts = [f"[{event}]"]
        for key, value in context.items():
            parts.append(f"{key}={value}")
        return escape(" ".join(parts))

    def _write_json(self, level: str, event: str, **context) -> None:
        """Write structured log entry to JSON file."""
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except (OSError, ValueError) as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _log(self, level: int, event: str, style: str | None, **context) -> None:
        if self.enable_console:
            message = self._format_message(event, **context)
            if style:
                message = f"[{style}]{message}[/{style}]"
            self._logger.log(level, message, extra={"event": event, **context})
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        """Log debug event."""
        self._log(logging.DEBUG, event, None, **context)

    def info(self, event: str, **context) -> None:
        """Log info event."""
        self._log(logging.INFO, event, None, **context)

    def success(self, event: str, **context) -> None:
        """Log info event highlighted as a success."""
        self._log(logging.INFO, event, "green", **context)

    def error(self, event: str, **context) -> None:
        """Log error event."""
        self._log(logging.ERROR, event, "red", **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class SubmissionLogger:
    """Specialized logger for session and torrent submission events."""

    def __init__(self, logger: StructuredLogger | None = None):
        self.logger = logger or StructuredLogger("transmission_loader.events")

    def session_token_captured(self, url: str, session_id: str):
        """Log that the daemon issued a CSRF session token."""
        self.logger.debug("session_token_captured", url=url, session_id=session_id)

    def session_resolved(self, url: str, download_dir: str, has_token: bool):
        """Log the resolved default download directory."""
        self.logger.info(
            "session_resolved",
            url=url,
            download_dir=download_dir,
            session_token=has_token,
        )

    def torrent_added(self, source: str, download_dir: str, kind: str):
        """Log a torrent the daemon accepted."""
        self.logger.success(
            "torrent_added", source=source, download_dir=download_dir, kind=kind
        )

    def torrent_failed(self, source: str, download_dir: str, error: str):
        """Log a torrent that could not be added."""
        self.logger.error(
            "torrent_add_failed", source=source, download_dir=download_dir, error=error
        )

    def submission_finished(self, total: int, added: int, failed: int):
        """Log the end of the submission run."""
        self.logger.info("submission_finished", total=total, added=added, failed=failed)
