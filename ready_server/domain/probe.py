"""Readiness request classification and fixed response builders."""

from dataclasses import dataclass

READY_PREFIXES = (b"GET /ready ", b"GET /ready\r", b"GET /ready\n")
READY_BODY = b'{"status":"UP"}'
NOT_FOUND_BODY = b"Not Found"


@dataclass(frozen=True)
class ProbeResponse:
    """Represents one of the two responses the readiness endpoint sends."""

    status_line: str
    content_type: str
    body: bytes

    @property
    def status_code(self) -> int:
        return int(self.status_line.split(" ", 2)[1])

    def to_bytes(self) -> bytes:
        """Serialize status line, headers and body into a single buffer."""
        header_lines = [
            self.status_line,
            f"Content-Type: {self.content_type}",
            f"Content-Length: {len(self.body)}",
            "Connection: close",
        ]
        return "\r\n".join(header_lines).encode() + b"\r\n\r\n" + self.body


READY_RESPONSE = ProbeResponse("HTTP/1.1 200 OK", "application/json", READY_BODY)
NOT_FOUND_RESPONSE = ProbeResponse(
    "HTTP/1.1 404 Not Found", "text/plain", NOT_FOUND_BODY
)


def is_ready_request(raw: bytes) -> bool:
    """Return True when the raw request line is exactly a ``GET /ready`` check.

    Only the literal request-line prefix is inspected; headers, version and
    body are ignored. Query strings and longer paths do not match.
    """
    return raw.startswith(READY_PREFIXES)


def build_response(raw: bytes) -> ProbeResponse:
    """Pick the response for the raw bytes of a request."""
    return READY_RESPONSE if is_ready_request(raw) else NOT_FOUND_RESPONSE
