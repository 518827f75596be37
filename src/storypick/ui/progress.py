"""Background spinner shown while sources are being queried."""

from __future__ import annotations

import logging
import threading

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner

logger = logging.getLogger(__name__)


class CancelHandle:
    """One-shot cancellation for a running ProgressIndicator."""

    def __init__(self, indicator: ProgressIndicator):
        self._indicator = indicator
        self._sent = False
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._sent

    def cancel(self, timeout: float | None = 1.0) -> None:
        """Stop the spinner and wait for its thread to finish.

        Raises:
            RuntimeError: If the handle was already cancelled
        """
        with self._lock:
            if self._sent:
                raise RuntimeError("Progress indicator already cancelled")
            self._sent = True
        self._indicator._stop(timeout)


class ProgressIndicator:
    """Spinner redrawn on its own thread until cancelled.

    The thread polls a threading.Event with a bounded wait, so it notices a
    cancel within one interval and never blocks shutdown. Rendering goes
    through a rich Live display that is driven by this thread only and is
    cleared when it stops.
    """

    def __init__(
        self,
        message: str = "Fetching stories",
        console: Console | None = None,
        interval: float = 0.01,
        spinner: str = "dots",
    ):
        self.message = message
        self.console = console if console is not None else Console(stderr=True)
        self.interval = interval
        self.ticks = 0
        self._spinner = Spinner(spinner, text=message)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._handle: CancelHandle | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> CancelHandle:
        """Start spinning in the background.

        Raises:
            RuntimeError: If this indicator was started before
        """
        if self._thread is not None:
            raise RuntimeError("Progress indicator already started")

        self._thread = threading.Thread(
            target=self._run, name="storypick-progress", daemon=True
        )
        self._handle = CancelHandle(self)
        self._thread.start()
        return self._handle

    def _run(self) -> None:
        live = Live(
            self._spinner,
            console=self.console,
            auto_refresh=False,
            transient=True,
            redirect_stdout=False,
            redirect_stderr=False,
        )
        try:
            live.start()
            while not self._stop_event.is_set():
                live.update(self._spinner, refresh=True)
                self.ticks += 1
                if self._stop_event.wait(self.interval):
                    break
        except (OSError, ValueError) as e:
            logger.debug("Progress output unavailable: %s", e)
        finally:
            try:
                live.stop()
            except (OSError, ValueError) as e:
                logger.debug("Could not clear progress output: %s", e)

    def _stop(self, timeout: float | None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def __enter__(self) -> ProgressIndicator:
        self.start()
        return self

    def __exit__(self, *args) -> None:
        if self._handle is not None and not self._handle.cancelled:
            self._handle.cancel()
