"""Tests for listening socket creation and its error paths."""

import socket
from unittest.mock import MagicMock, patch

import pytest

from ready_server.bootstrap.config import LISTEN_BACKLOG, ListenerConfig
from ready_server.bootstrap.socket_factory import create_listening_socket
from ready_server.domain.errors import (
    BindError,
    InvalidBindAddress,
    ListenError,
    SocketCreationError,
)


@pytest.fixture(name="mock_sock")
def fixture_mock_sock():
    """Patch socket creation to return a mock listening socket."""
    sock = MagicMock(spec=socket.socket)
    with patch(
        "ready_server.bootstrap.socket_factory.socket.socket", return_value=sock
    ):
        yield sock


def test_binds_wildcard_by_default(mock_sock):
    """Without an override the socket binds every interface."""
    result = create_listening_socket(ListenerConfig(port=8081, accept_timeout=0.25))

    assert result is mock_sock
    mock_sock.setsockopt.assert_called_once_with(
        socket.SOL_SOCKET, socket.SO_REUSEADDR, 1
    )
    mock_sock.bind.assert_called_once_with(("0.0.0.0", 8081))
    mock_sock.listen.assert_called_once_with(LISTEN_BACKLOG)
    mock_sock.settimeout.assert_called_once_with(0.25)
    mock_sock.close.assert_not_called()


def test_binds_override_address(mock_sock):
    """A valid override replaces the wildcard address."""
    create_listening_socket(ListenerConfig(port=8081, bind_address="127.0.0.1"))

    mock_sock.bind.assert_called_once_with(("127.0.0.1", 8081))


@pytest.mark.parametrize("address", ["not-an-ip", "256.1.1.1", "::1", "1.2.3"])
def test_invalid_override_closes_socket(mock_sock, address):
    """An unparseable override fails before binding and releases the socket."""
    with pytest.raises(InvalidBindAddress):
        create_listening_socket(ListenerConfig(port=8081, bind_address=address))

    mock_sock.bind.assert_not_called()
    mock_sock.close.assert_called_once_with()


def test_bind_failure_closes_socket(mock_sock):
    """Address-in-use surfaces as BindError with no descriptor leak."""
    mock_sock.bind.side_effect = OSError(98, "Address already in use")

    with pytest.raises(BindError) as excinfo:
        create_listening_socket(ListenerConfig(port=8081))

    assert isinstance(excinfo.value.__cause__, OSError)
    mock_sock.close.assert_called_once_with()


def test_listen_failure_closes_socket(mock_sock):
    """Listen errors surface as ListenError."""
    mock_sock.listen.side_effect = OSError(95, "Operation not supported")

    with pytest.raises(ListenError):
        create_listening_socket(ListenerConfig(port=8081))

    mock_sock.close.assert_called_once_with()


def test_socket_creation_failure():
    """Failure to allocate a socket is reported as SocketCreationError."""
    with patch(
        "ready_server.bootstrap.socket_factory.socket.socket",
        side_effect=OSError(24, "Too many open files"),
    ):
        with pytest.raises(SocketCreationError):
            create_listening_socket(ListenerConfig(port=8081))


def test_reuse_option_failure_closes_socket(mock_sock):
    """A setsockopt failure still releases the socket."""
    mock_sock.setsockopt.side_effect = OSError(22, "Invalid argument")

    with pytest.raises(SocketCreationError):
        create_listening_socket(ListenerConfig(port=8081))

    mock_sock.close.assert_called_once_with()


@pytest.mark.parametrize("timeout", [0, -5])
def test_non_positive_accept_timeout_rejected(mock_sock, timeout):
    """A zero or negative poll interval fails start and releases the socket."""
    with pytest.raises(ListenError):
        create_listening_socket(ListenerConfig(port=8081, accept_timeout=timeout))

    mock_sock.settimeout.assert_not_called()
    mock_sock.close.assert_called_once_with()
