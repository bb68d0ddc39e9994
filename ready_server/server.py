"""Readiness server handle: start and stop an embedded probe listener.

The embedding process owns a :class:`ReadyServer` and calls ``start`` during
its startup sequence and ``stop`` on shutdown::

    server = ReadyServer(8081)
    server.start()
    ...
    server.stop()

``ready_server_start`` and ``ready_server_stop`` expose the same operations
with a status-code contract for callers that only care about success.
"""

import logging
import socket
import threading
from typing import Optional

from ready_server.bootstrap.config import ListenerConfig
from ready_server.bootstrap.socket_factory import create_listening_socket
from ready_server.domain.errors import AlreadyRunning, ReadyServerError, SpawnError
from ready_server.domain.probe_logger import ProbeLoggerAdapter
from ready_server.lifecycle.state import ServerLifecycle
from ready_server.transport.accept_loop import run_accept_loop

logging.getLogger("ready_server").addHandler(logging.NullHandler())

SERVER_LOGGER = ProbeLoggerAdapter(logging.getLogger("ready_server.server"), {})


class ReadyServer:
    """Owns one listening socket and the thread running its accept loop."""

    def __init__(self, port: int) -> None:
        self.port = port
        self.sock: Optional[socket.socket] = None
        self.lifecycle = ServerLifecycle()
        self.thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self.lifecycle.is_running()

    @property
    def address(self) -> Optional[tuple[str, int]]:
        """The bound ``(host, port)``, or None while stopped."""
        if self.sock is None:
            return None
        return self.sock.getsockname()

    def start(self) -> None:
        """Bind the listener and spawn the accept loop.

        Raises a :class:`ReadyServerError` subclass on failure, in which case
        no socket stays open and no thread is running.
        """
        if self.thread is not None:
            raise AlreadyRunning(f"Readiness server on port {self.port} already started")

        config = ListenerConfig.from_env(self.port)
        self.sock = create_listening_socket(config)
        self.lifecycle.mark_running()

        thread = threading.Thread(
            target=run_accept_loop,
            args=(self,),
            name=f"ready-server-{self.port}",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError as error:
            self.lifecycle.request_stop()
            self._close_socket()
            SERVER_LOGGER.error(
                "Failed to start accept loop",
                extra={"event": "spawn_failed", "error_type": type(error).__name__},
            )
            raise SpawnError(str(error)) from error
        self.thread = thread

        host, port = self.sock.getsockname()
        SERVER_LOGGER.info(
            "Readiness server listening",
            extra={"event": "server_listening", "host": host, "port": port},
        )

    def stop(self) -> None:
        """Stop accepting, release the socket and join the accept loop.

        Safe to call in any state; only the first call after a start does
        anything.
        """
        if self.thread is None and self.sock is None:
            return

        self.lifecycle.request_stop()
        self._close_socket()

        thread, self.thread = self.thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        SERVER_LOGGER.info(
            "Readiness server stopped",
            extra={"event": "server_stopped", "port": self.port},
        )

    def _close_socket(self) -> None:
        server_socket, self.sock = self.sock, None
        if server_socket is None:
            return
        try:
            server_socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Listening sockets are not connected; some platforms refuse.
            pass
        server_socket.close()

    def __enter__(self) -> "ReadyServer":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()


def ready_server_start(server: ReadyServer, port: int) -> int:
    """Start ``server`` on ``port``. Returns 0 on success, -1 on any failure."""
    server.stop()
    server.port = port
    try:
        server.start()
    except ReadyServerError:
        return -1
    return 0


def ready_server_stop(server: Optional[ReadyServer]) -> None:
    """Stop ``server``; a no-op when it is None, never started or stopped."""
    if server is not None:
        server.stop()
