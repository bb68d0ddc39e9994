"""Running flag shared between the caller and the accept loop."""

import threading


class ServerLifecycle:
    """Tracks whether the accept loop should keep running."""

    def __init__(self) -> None:
        self._running = threading.Event()

    def mark_running(self) -> None:
        """Signal that the accept loop is about to start."""
        self._running.set()

    def request_stop(self) -> None:
        """Ask the accept loop to exit at its next check."""
        self._running.clear()

    def is_running(self) -> bool:
        return self._running.is_set()

    def should_stop(self) -> bool:
        """Check if the accept loop should exit."""
        return not self._running.is_set()
