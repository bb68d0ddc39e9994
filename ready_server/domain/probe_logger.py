"""Logger adapter tagging records with component and peer address."""

import logging
from typing import Any, MutableMapping, Optional

NO_CLIENT = "-"


def format_client(address: Optional[tuple]) -> str:
    """Render an accepted peer address as ``host:port``."""
    if not address:
        return NO_CLIENT
    return f"{address[0]}:{address[1]}"


def component_name(logger_name: str) -> str:
    if logger_name.startswith("ready_server."):
        return logger_name[len("ready_server.") :]
    return logger_name


class ProbeLoggerAdapter(logging.LoggerAdapter):
    """Adds ``component`` and ``client`` to every record.

    Module loggers carry no client; :meth:`for_client` binds the peer of the
    connection currently being served.
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        extra.setdefault("client", NO_CLIENT)
        extra["component"] = component_name(self.logger.name)
        kwargs["extra"] = extra
        return msg, kwargs

    def for_client(self, address: Optional[tuple]) -> "ProbeLoggerAdapter":
        """Return an adapter on the same logger bound to ``address``."""
        return ProbeLoggerAdapter(self.logger, {"client": format_client(address)})
