"""Mutual-exclusion gate over invoice document downloads.

At most one download may be in flight at a time, across every document. The
presentation layer owns one `DownloadCoordinator`, disables all download
buttons while `is_any_pending()` and shows a waiting indicator only on the
button whose `is_pending(key)` is true.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import requests  # type: ignore[import-untyped]

from invoice_pipeline.errors import DocumentRetrievalError

log = logging.getLogger(__name__)

# (locator, suggested_name) -> saved path
DocumentSaver = Callable[[str, str], Path]


@dataclass(frozen=True)
class DownloadOutcome:
    """Result of one `DownloadCoordinator.retrieve` call.

    Attributes:
        key: Document key the call was made for.
        accepted: False when another download held the gate.
        path: Saved file on success.
        error: Failure message when the download was attempted and failed.
    """
    key: str
    accepted: bool
    path: Path | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.accepted and self.error is None and self.path is not None


class DownloadCoordinator:
    """Idle / Pending(key) state machine gating document downloads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: str | None = None

    @property
    def pending_key(self) -> str | None:
        """Key of the download in flight, or ``None`` when idle."""
        return self._pending

    def begin_retrieval(self, key: str) -> bool:
        """Try to move from Idle to Pending(key).

        Returns:
            True if the download may start, False if any download (for this
            or another key) is already in flight.
        """
        with self._lock:
            if self._pending is not None:
                log.info("Download of %s rejected: %s in progress", key, self._pending)
                return False
            self._pending = key
            return True

    def end_retrieval(self, key: str) -> None:
        """Return to Idle after the download of `key` completed or failed.

        Ending a key that is not the one in flight leaves the state untouched.
        """
        with self._lock:
            if self._pending != key:
                log.warning(
                    "end_retrieval(%s) ignored: pending download is %s", key, self._pending
                )
                return
            self._pending = None

    def is_pending(self, key: str) -> bool:
        return self._pending == key

    def is_any_pending(self) -> bool:
        return self._pending is not None

    def retrieve(
        self,
        key: str,
        locator: str,
        suggested_name: str,
        saver: DocumentSaver,
    ) -> DownloadOutcome:
        """Run one gated download through `saver`.

        The gate is released whether the saver succeeds or fails; failures are
        reported in the outcome and never retried.

        Args:
            key: Document key (e.g. unit name + month).
            locator: Document URL.
            suggested_name: File name to save under.
            saver: Callable performing the transfer, e.g. a partial of
                `retrieve_and_save_document`.

        Returns:
            `DownloadOutcome`; ``accepted`` is False when the gate was busy.
        """
        if not self.begin_retrieval(key):
            return DownloadOutcome(key=key, accepted=False)

        try:
            path = saver(locator, suggested_name)
        except (DocumentRetrievalError, requests.RequestException, OSError) as e:
            log.warning("Download of %s failed: %s", key, e)
            return DownloadOutcome(key=key, accepted=True, error=str(e))
        finally:
            self.end_retrieval(key)

        return DownloadOutcome(key=key, accepted=True, path=path)
