# voucherdesk/utils/debounce.py

from typing import Any, Callable, List, Optional, Sequence

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from voucherdesk.config import SEARCH_MIN_LENGTH, SEARCH_DEBOUNCE_MS

import logging
logger = logging.getLogger(__name__)


class DebouncedQuery(QObject):
    """
    Runs `fetch(query)` once input has been quiet for `delay_ms`.

    - Input shorter than `min_length` (after strip) clears the results at once
      and never reaches `fetch`.
    - Every new input restarts the timer; only the last one is fetched.
    - A result whose query no longer matches the current input is dropped.
    - A failing fetch clears the results instead of raising.
    - `close()` cancels the pending timer; nothing is emitted afterwards.

    `timer` is anything with the QTimer surface used here (setSingleShot,
    setInterval, start, stop, isActive, timeout); a QTimer is created when
    none is given.
    """
    resultsChanged = pyqtSignal(object)
    busyChanged = pyqtSignal(bool)

    def __init__(self,
                 fetch: Callable[[str], Optional[Sequence[Any]]],
                 min_length: int = SEARCH_MIN_LENGTH,
                 delay_ms: int = SEARCH_DEBOUNCE_MS,
                 timer: Any = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._fetch = fetch
        self._min_length = min_length
        self._timer = timer if timer is not None else QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._run_pending)

        self._text = ""
        self._pending_query: Optional[str] = None
        self._results: List[Any] = []
        self._closed = False

    @property
    def text(self) -> str:
        return self._text

    @property
    def results(self) -> List[Any]:
        return list(self._results)

    @property
    def is_pending(self) -> bool:
        return self._pending_query is not None and self._timer.isActive()

    def set_text(self, text: Optional[str]):
        if self._closed:
            return
        self._text = text or ""
        query = self._text.strip()
        self._timer.stop()

        if len(query) < self._min_length:
            self._pending_query = None
            self._set_results([])
            return

        self._pending_query = query
        self._timer.start()

    def clear(self):
        """Drops the input, any pending query and the current results."""
        self.cancel()
        self._text = ""
        self._set_results([])

    def clear_results(self):
        """Cancels any pending query and empties the results; the input text is kept."""
        self.cancel()
        self._set_results([])

    def cancel(self):
        self._timer.stop()
        self._pending_query = None

    def close(self):
        self.cancel()
        self._closed = True
        logger.debug("DebouncedQuery closed.")

    def _run_pending(self):
        query = self._pending_query
        self._pending_query = None
        if query is None or self._closed:
            return

        logger.debug(f"Debounced fetch for query '{query}'")
        self.busyChanged.emit(True)
        try:
            results = list(self._fetch(query) or [])
        except Exception as e:
            logger.warning(f"Lookup for '{query}' failed, clearing results: {e}", exc_info=True)
            results = []
        finally:
            self.busyChanged.emit(False)

        if self._closed or query != self._text.strip():
            logger.debug(f"Discarding stale results for '{query}' (current input: '{self._text.strip()}')")
            return
        self._set_results(results)

    def _set_results(self, results: List[Any]):
        self._results = list(results)
        self.resultsChanged.emit(list(self._results))
