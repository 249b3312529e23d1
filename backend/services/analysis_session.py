"""Last-request-wins bookkeeping for analyses keyed by session.

Each analysis takes a ticket before it starts. When it finishes, its result
is only stored if no newer ticket was issued for the same key in the
meantime; a superseded result is handed back to its caller marked stale
and never overwrites the newer one.
"""

import itertools
import threading

from models.responses import AnalysisResult


class AnalysisSessions:
    def __init__(self, max_sessions: int = 1000):
        self._counter = itertools.count(1)
        self._latest_ticket: dict[str, int] = {}
        self._results: dict[str, AnalysisResult] = {}
        self._max_sessions = max_sessions
        self._lock = threading.Lock()

    def begin(self, key: str) -> int:
        with self._lock:
            ticket = next(self._counter)
            self._latest_ticket.pop(key, None)
            self._latest_ticket[key] = ticket
            while len(self._latest_ticket) > self._max_sessions:
                oldest = next(iter(self._latest_ticket))
                del self._latest_ticket[oldest]
                self._results.pop(oldest, None)
            return ticket

    def publish(self, key: str, ticket: int, result: AnalysisResult) -> bool:
        """Store result if ticket is still the newest for key. Returns False when stale."""
        with self._lock:
            if self._latest_ticket.get(key) != ticket:
                return False
            self._results[key] = result
            return True

    def latest(self, key: str) -> AnalysisResult | None:
        with self._lock:
            return self._results.get(key)


sessions = AnalysisSessions()
