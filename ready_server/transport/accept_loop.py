"""Sequential connection acceptance loop."""

import logging
import socket
from typing import TYPE_CHECKING

from ready_server.domain.probe_logger import ProbeLoggerAdapter
from ready_server.transport.worker import handle_client

if TYPE_CHECKING:
    from ready_server.server import ReadyServer

ACCEPT_LOGGER = ProbeLoggerAdapter(
    logging.getLogger("ready_server.transport.accept"), {}
)


def _serve_connection(client_socket: socket.socket, client_address) -> None:
    """Handle one accepted connection and always close it."""
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.for_client(client_address).debug(
            "Client connection accepted", extra={"event": "client_accepted"}
        )
    try:
        handle_client(client_socket, client_address)
    finally:
        client_socket.close()


def run_accept_loop(server: "ReadyServer") -> None:
    """Accept and serve connections one at a time until the server stops.

    The running flag and the listening socket are re-read before every
    accept so a stop request is observed promptly. The flag is cleared
    whenever the loop ends, however it ends.
    """
    lifecycle = server.lifecycle
    try:
        while not lifecycle.should_stop():
            server_socket = server.sock
            if server_socket is None:
                break
            try:
                client_socket, client_address = server_socket.accept()
            except InterruptedError:
                continue
            except socket.timeout:
                continue
            except OSError as error:
                if not lifecycle.should_stop():
                    ACCEPT_LOGGER.error(
                        "Socket accept failed",
                        extra={
                            "event": "accept_error",
                            "error_type": type(error).__name__,
                            "errno": error.errno,
                        },
                    )
                break

            _serve_connection(client_socket, client_address)
    finally:
        lifecycle.request_stop()
        ACCEPT_LOGGER.debug(
            "Accept loop exited", extra={"event": "accept_loop_exited"}
        )
