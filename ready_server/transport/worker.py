"""Handling of a single accepted probe connection."""

import logging
import socket
from typing import Optional

from ready_server.domain.probe import build_response
from ready_server.domain.probe_logger import ProbeLoggerAdapter
from ready_server.pipeline.io import receive_request, send_all

WORKER_LOGGER = ProbeLoggerAdapter(
    logging.getLogger("ready_server.transport.worker"), {}
)


def handle_client(
    client_socket: socket.socket, client_address: Optional[tuple] = None
) -> None:
    """Read one request, write one response. The caller closes the socket."""
    logger = WORKER_LOGGER.for_client(client_address)
    request = receive_request(client_socket)
    if not request:
        logger.debug(
            "Client disconnected before sending a request",
            extra={"event": "client_disconnected"},
        )
        return

    response = build_response(request)
    bytes_out = send_all(client_socket, response.to_bytes())
    if logger.logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Probe served",
            extra={
                "event": "probe_served",
                "route": "ready" if response.status_code == 200 else "not_found",
                "status_code": response.status_code,
                "bytes_in": len(request),
                "bytes_out": bytes_out,
            },
        )
