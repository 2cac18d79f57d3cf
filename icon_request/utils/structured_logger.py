"""
Structured logging for request events.
Each event is logged as a readable line and, when a log folder is given,
appended as one JSON object per line for later analysis.
"""

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO


class StructuredLogger:
    """
    Emits named events with key/value context.

    Usage:
        with StructuredLogger("icon_request.events", log_dir=Path("logs")) as events:
            events.info("archive_created",
                        archive="IconRequest-20240101_120000.zip",
                        files=12)
    """

    def __init__(self, name: str, log_dir: Path | None = None):
        """
        Args:
            name: Logger name for the readable lines
            log_dir: Directory for the JSONL file (None = readable lines only)
        """
        self._logger = logging.getLogger(name)

        self._json_file: TextIO | None = None
        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"icon_request_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Added to every JSON entry
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
        }

    @property
    def json_path(self) -> Path | None:
        return Path(self._json_file.name) if self._json_file else None

    def set_session_context(self, **kwargs) -> None:
        self._session_context.update(kwargs)

    def _emit(self, level: int, event: str, **context) -> None:
        details = " ".join(f"{key}={value}" for key, value in context.items())
        self._logger.log(level, f"[{event}] {details}".rstrip())

        if self._json_file is None or self._json_file.closed:
            return
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": logging.getLevelName(level),
            "event": event,
            **self._session_context,
            **context,
        }
        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except OSError as e:
            self._logger.warning(f"Could not write to {self._json_file.name}: {e}")

    def debug(self, event: str, **context) -> None:
        self._emit(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        self._emit(logging.INFO, event, **context)

    def error(self, event: str, **context) -> None:
        self._emit(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close the JSONL file; later events are logged as lines only."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self) -> "StructuredLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class RequestLogger:
    """Specialized logger for the events of one icon request."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def request_started(self, app_count: int, mode: str, cache_folder: Path):
        self.logger.info(
            "request_started",
            app_count=app_count,
            mode=mode,
            cache_folder=str(cache_folder),
        )

    def icon_saved(self, pkg: str, path: Path):
        self.logger.debug("icon_saved", pkg=pkg, path=str(path))

    def icon_skipped(self, pkg: str, code: str):
        """Log an app whose icon could not be rendered."""
        self.logger.debug("icon_skipped", pkg=pkg, code=code)

    def manifest_written(self, filename: str, entries: int):
        self.logger.debug("manifest_written", filename=filename, entries=entries)

    def archive_created(self, archive: Path, file_count: int):
        self.logger.info(
            "archive_created",
            archive=str(archive),
            file_count=file_count,
            size_bytes=archive.stat().st_size if archive.exists() else 0,
        )

    def delivery_started(self, channel: str, target: str):
        self.logger.info("delivery_started", channel=channel, target=target)

    def request_completed(self, duration_s: float, archive: Path):
        self.logger.info(
            "request_completed",
            duration_s=round(duration_s, 2),
            archive=str(archive),
        )

    def request_failed(self, kind: str, error: str, duration_s: float):
        self.logger.error(
            "request_failed",
            kind=kind,
            error=error,
            duration_s=round(duration_s, 2),
        )


def create_structured_logger(
    log_dir: Path | None = None,
) -> tuple[StructuredLogger, RequestLogger]:
    """
    Create the structured loggers. JSONL output is enabled by `log_dir`.

    Returns:
        Tuple of (base_logger, request_logger)
    """
    base = StructuredLogger("icon_request.events", log_dir=log_dir)
    return base, RequestLogger(base)
