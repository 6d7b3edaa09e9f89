import threading
from typing import Optional

from fastapi import Request

from mt940_converter.schemas.statement import ParseResult


class LatestResultStore:
    """
    Single in-memory slot holding the last parsed statement.

    One store per application instance. Uploads overwrite it (last writer
    wins); the download endpoints read it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._result: Optional[ParseResult] = None

    def set(self, result: ParseResult) -> None:
        with self._lock:
            self._result = result

    def get(self) -> Optional[ParseResult]:
        """Return the last result, or None if nothing was parsed yet."""
        with self._lock:
            return self._result

    def clear(self) -> None:
        with self._lock:
            self._result = None


# Dependency for FastAPI routes
def get_result_store(request: Request) -> LatestResultStore:
    """
    Dependency that provides the application's result store.
    Created on first use and kept on app.state.
    """
    store = getattr(request.app.state, "result_store", None)
    if store is None:
        store = LatestResultStore()
        request.app.state.result_store = store
    return store
