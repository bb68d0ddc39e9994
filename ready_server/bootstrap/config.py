"""Readiness server configuration.

The only setting that changes how the listener behaves is the bind-address
override in ``READY_SERVER_BIND``. It replaces ``WRK2_READY_BIND`` read by
earlier builds of this probe; deployments that set it must rename the
variable. The remaining variables only tune :func:`configure_logging`.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value else default


BIND_ENV_VAR = "READY_SERVER_BIND"
DEFAULT_BIND_ADDRESS = "0.0.0.0"
LISTEN_BACKLOG = 16
RECV_BUFFER_SIZE = 1024
ACCEPT_TIMEOUT_SECONDS = 0.5

DEFAULT_LOG_LEVEL = _env_str("READY_SERVER_LOG_LEVEL", "INFO").upper()
DEFAULT_LOG_DESTINATION = _env_str("READY_SERVER_LOG_DESTINATION", "stdout")


def bind_override() -> Optional[str]:
    """Return the bind-address override, or None when unset or empty."""
    value = os.getenv(BIND_ENV_VAR)
    return value or None


@dataclass
class ListenerConfig:
    """Settings used to open the listening socket."""

    port: int
    bind_address: Optional[str] = None
    backlog: int = LISTEN_BACKLOG
    accept_timeout: float = ACCEPT_TIMEOUT_SECONDS

    @property
    def host(self) -> str:
        """Address the socket binds to."""
        return self.bind_address or DEFAULT_BIND_ADDRESS

    @classmethod
    def from_env(cls, port: int) -> "ListenerConfig":
        """Build a config for ``port`` honoring the environment override."""
        return cls(port=port, bind_address=bind_override())
