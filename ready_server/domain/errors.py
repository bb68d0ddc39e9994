"""Errors raised while starting the readiness server."""


class ReadyServerError(Exception):
    """Base class for readiness server start failures."""


class SocketCreationError(ReadyServerError):
    """Raised when the listening socket cannot be created."""


class InvalidBindAddress(ReadyServerError):
    """Raised when the bind override is not a valid IPv4 address."""


class BindError(ReadyServerError):
    """Raised when binding fails, e.g. address in use or permission denied."""


class ListenError(ReadyServerError):
    """Raised when the socket cannot start listening."""


class SpawnError(ReadyServerError):
    """Raised when the accept loop thread cannot be started."""


class AlreadyRunning(ReadyServerError):
    """Raised when starting a server handle that is already running."""
