# worley_noise/poller.py

"""
================================================================================
REDRAW POLLER
================================================================================
A background thread that checks the engine's dirty flag on a fixed interval
and asks the front end to repaint only when something changed. It never
draws anything itself; the callback should hand the request to whatever
thread owns the display (e.g. by posting an event).

Data Contract:
---------------
- Inputs:
    - engine: anything with a poll_dirty() -> bool method.
    - request_redraw: a zero-argument callable.
    - poll_interval: seconds to sleep between checks.
- Side Effects: Calls request_redraw() from the poller thread.
- Invariants: stop() is observed within one poll interval.
================================================================================
"""
import logging
import threading
from typing import Callable

from . import config as DEFAULTS


class RedrawPoller(threading.Thread):
    """Polls an engine for changes and requests repaints."""

    def __init__(self, engine, request_redraw: Callable[[], None],
                 poll_interval: float = DEFAULTS.POLL_INTERVAL_S,
                 logger: logging.Logger = None):
        super().__init__(name="RedrawPoller", daemon=True)
        self.engine = engine
        self.request_redraw = request_redraw
        self.poll_interval = poll_interval
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._closing = threading.Event()

    def run(self):
        self.logger.debug(f"Redraw poller started ({self.poll_interval * 1000:.0f} ms interval).")
        # Event.wait doubles as the sleep and returns True once stop() is called.
        while not self._closing.wait(self.poll_interval):
            if not self.engine.poll_dirty():
                continue
            try:
                self.request_redraw()
            except Exception as e:
                self.logger.error(f"Redraw request failed: {e}", exc_info=True)
        self.logger.debug("Redraw poller stopped.")

    def stop(self):
        """Signals the poller to exit after its current sleep."""
        self._closing.set()

    @property
    def is_closing(self) -> bool:
        return self._closing.is_set()
