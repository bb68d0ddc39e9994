"""Socket input/output for single-request connections."""

import logging
import socket

from ready_server.bootstrap.config import RECV_BUFFER_SIZE
from ready_server.domain.probe_logger import ProbeLoggerAdapter

IO_LOGGER = ProbeLoggerAdapter(logging.getLogger("ready_server.io"), {})


def receive_request(client_socket: socket.socket) -> bytes:
    """Read one request buffer with a single ``recv`` call.

    Returns ``b""`` when the peer closed the connection or the read failed.
    """
    try:
        return client_socket.recv(RECV_BUFFER_SIZE)
    except OSError as error:
        IO_LOGGER.debug(
            "Receive failed",
            extra={"event": "recv_failed", "error_type": type(error).__name__},
        )
        return b""


def send_all(client_socket: socket.socket, payload: bytes) -> int:
    """Send ``payload`` until done or a send fails, returning bytes written.

    A failed or zero-length send ends writing without raising.
    """
    view = memoryview(payload)
    written = 0
    while written < len(payload):
        try:
            sent = client_socket.send(view[written:])
        except OSError as error:
            IO_LOGGER.debug(
                "Send failed",
                extra={
                    "event": "send_failed",
                    "error_type": type(error).__name__,
                    "bytes_out": written,
                },
            )
            break
        if sent <= 0:
            break
        written += sent
    return written
