"""Listening socket creation."""

import logging
import socket

from ready_server.bootstrap.config import ListenerConfig
from ready_server.domain.errors import (
    BindError,
    InvalidBindAddress,
    ListenError,
    ReadyServerError,
    SocketCreationError,
)
from ready_server.domain.probe_logger import ProbeLoggerAdapter

SOCKET_LOGGER = ProbeLoggerAdapter(logging.getLogger("ready_server.socket"), {})


def _validate_bind_address(address: str) -> None:
    """Reject anything that is not an IPv4 dotted quad."""
    try:
        socket.inet_pton(socket.AF_INET, address)
    except OSError as error:
        SOCKET_LOGGER.error(
            "Invalid bind address override",
            extra={"event": "invalid_bind_address", "host": address},
        )
        raise InvalidBindAddress(f"Invalid IPv4 bind address: {address!r}") from error


def _bind(server_socket: socket.socket, config: ListenerConfig) -> None:
    try:
        server_socket.bind((config.host, config.port))
    except OSError as error:
        SOCKET_LOGGER.error(
            "Failed to bind listening socket",
            extra={
                "event": "bind_failed",
                "host": config.host,
                "port": config.port,
                "errno": error.errno,
            },
        )
        raise BindError(f"Cannot bind {config.host}:{config.port}: {error}") from error


def _listen(server_socket: socket.socket, config: ListenerConfig) -> None:
    try:
        server_socket.listen(config.backlog)
    except OSError as error:
        SOCKET_LOGGER.error(
            "Failed to listen on socket",
            extra={"event": "listen_failed", "errno": error.errno},
        )
        raise ListenError(str(error)) from error


def _set_accept_timeout(server_socket: socket.socket, config: ListenerConfig) -> None:
    """Set the accept poll interval, which must be positive."""
    if config.accept_timeout <= 0:
        SOCKET_LOGGER.error(
            "Invalid accept timeout",
            extra={"event": "invalid_accept_timeout"},
        )
        raise ListenError(f"Accept timeout must be positive: {config.accept_timeout!r}")
    server_socket.settimeout(config.accept_timeout)


def create_listening_socket(config: ListenerConfig) -> socket.socket:
    """Open, bind and listen on a TCP/IPv4 socket described by ``config``.

    The socket is closed before any error propagates.
    """
    try:
        server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as error:
        SOCKET_LOGGER.error(
            "Failed to create listening socket",
            extra={"event": "socket_create_failed", "errno": error.errno},
        )
        raise SocketCreationError(str(error)) from error

    try:
        try:
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as error:
            raise SocketCreationError(f"Cannot enable SO_REUSEADDR: {error}") from error
        if config.bind_address:
            _validate_bind_address(config.bind_address)
        _bind(server_socket, config)
        _listen(server_socket, config)
        _set_accept_timeout(server_socket, config)
    except ReadyServerError:
        server_socket.close()
        raise
    return server_socket
