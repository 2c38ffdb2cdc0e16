"""Synchronous client for UI → daemon communication."""

import socket
from collections.abc import Iterable

from fm_clipboard.config import Config
from fm_clipboard.daemon.protocol import (
    HEADER_SIZE,
    Command,
    FramingError,
    Request,
    Response,
    decode_response,
    encode_request,
    frame,
    parse_header,
)


def _recv_exactly(s: socket.socket, size: int) -> bytes:
    """Read exactly ``size`` bytes or raise FramingError if the connection closes first."""
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = s.recv(remaining)
        if not chunk:
            msg = f"Connection closed after {size - remaining} of {size} bytes"
            raise FramingError(msg)
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


class DaemonClient:
    """Synchronous client that talks to the daemon over a Unix socket.

    Every call opens its own connection and performs exactly one exchange.
    """

    def __init__(self, cfg: Config) -> None:
        """Initialize client with configuration.

        Args:
            cfg: Application configuration (provides socket path).

        """
        self._cfg = cfg

    def send(self, req: Request) -> Response:
        """Send a request to the daemon and return the response.

        Raises:
            OSError: Socket cannot be reached or the connection fails.
            FramingError: Response frame is truncated or invalid.
            DecodeError: Response payload is malformed.

        """
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as s:
            s.connect(str(self._cfg.sock_path))
            s.sendall(frame(encode_request(req)))
            length = parse_header(_recv_exactly(s, HEADER_SIZE))
            data = _recv_exactly(s, length)
        return decode_response(data)

    # --- Convenience methods ---

    def copy(self, paths: Iterable[str]) -> Response:
        """Replace the daemon's "copied" set."""
        return self.send(Request(command=Command.COPY, files=tuple(paths)))

    def cut(self, paths: Iterable[str]) -> Response:
        """Replace the daemon's "cut" set."""
        return self.send(Request(command=Command.CUT, files=tuple(paths)))

    def clear(self) -> Response:
        """Empty both sets."""
        return self.send(Request(command=Command.CLEAR))

    def get_copy(self) -> Response:
        """Fetch the "copied" set."""
        return self.send(Request(command=Command.GET_COPY))

    def get_cut(self) -> Response:
        """Fetch the "cut" set."""
        return self.send(Request(command=Command.GET_CUT))
