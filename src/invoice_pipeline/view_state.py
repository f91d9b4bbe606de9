"""View state for fetched invoice records.

Every year or filter change triggers a fresh fetch. Fetches are not
cancelled, so an older response can arrive after a newer one; each fetch
therefore carries a generation token and only the latest token may update
the view.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field

from invoice_pipeline.models import InvoiceRecord

log = logging.getLogger(__name__)


class RequestGeneration:
    """Issues strictly increasing fetch tokens and tracks the latest one."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        """Return a new token; it supersedes every token issued before."""
        with self._lock:
            self._latest = next(self._counter)
            return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest


@dataclass
class ViewState:
    """Records shown by a view, or the terminal error that replaced them.

    Attributes:
        records: Last applied records (empty after an error).
        error: Message of the last applied terminal fetch failure.
        generation: Token source shared by the fetches of this view.
    """
    records: list[InvoiceRecord] = field(default_factory=list)
    error: str | None = None
    generation: RequestGeneration = field(default_factory=RequestGeneration)

    def begin_fetch(self) -> int:
        """Return the token to pass back with this fetch's result."""
        return self.generation.issue()

    def apply_records(self, token: int, records: list[InvoiceRecord]) -> bool:
        """Show `records` if `token` is the latest; return whether applied."""
        if not self.generation.is_current(token):
            log.debug("Discarding stale response %d (latest %d)", token, self.generation.latest)
            return False
        self.records = list(records)
        self.error = None
        return True

    def apply_error(self, token: int, message: str) -> bool:
        """Replace the data with an error if `token` is the latest."""
        if not self.generation.is_current(token):
            log.debug("Discarding stale error %d (latest %d)", token, self.generation.latest)
            return False
        self.records = []
        self.error = message
        return True
