"""Request/Response protocol for client-daemon communication.

Length-prefixed JSON over a Unix socket. Every message is a 4-byte unsigned big-endian
payload length followed by exactly that many bytes of UTF-8 JSON.

Request:  {"command": 0, "files": ["/a/b.txt", "/c/d.txt"]}
Response: {"status": "success", "files": []}

Command ordinals outside the known range decode fine and are answered with "unknown".
"""

import json
import struct
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Self

# Frame header: payload length as u32, big-endian
HEADER_FORMAT = ">I"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

# Upper bound for a single payload (16 MiB)
MAX_MESSAGE_SIZE = 16 * 1024 * 1024


class ProtocolError(Exception):
    """Base class for wire protocol errors."""


class FramingError(ProtocolError):
    """Frame header is invalid or the connection ended before the declared payload arrived."""


class DecodeError(ProtocolError):
    """Payload bytes do not form a valid message."""


class EncodeError(ProtocolError):
    """Message cannot be serialized."""


class Command(IntEnum):
    """Request command ordinals."""

    COPY = 0
    CUT = 1
    CLEAR = 2
    GET_COPY = 3
    GET_CUT = 4


class Status(StrEnum):
    """Response status tokens."""

    SUCCESS = "success"
    UNKNOWN = "unknown"
    ERROR = "error"


@dataclass(frozen=True)
class Request:
    """Daemon request: a command ordinal and a list of paths.

    ``command`` is kept as a plain int when it is not a known ``Command``.
    """

    command: int
    files: tuple[str, ...] = ()

    @property
    def known_command(self) -> Command | None:
        """Return the command as a ``Command`` member, or None if the ordinal is unknown."""
        try:
            return Command(self.command)
        except ValueError:
            return None


@dataclass(frozen=True)
class Response:
    """Daemon response: status token and an optional list of paths."""

    status: Status
    files: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """True when the daemon reported success."""
        return self.status is Status.SUCCESS

    @classmethod
    def success(cls, files: tuple[str, ...] = ()) -> Self:
        """Build a success response."""
        return cls(status=Status.SUCCESS, files=files)

    @classmethod
    def unknown(cls) -> Self:
        """Build a response for an unknown command."""
        return cls(status=Status.UNKNOWN)

    @classmethod
    def error(cls) -> Self:
        """Build a response for an undecodable request."""
        return cls(status=Status.ERROR)


def frame(payload: bytes) -> bytes:
    """Prefix a payload with its big-endian u32 length."""
    if len(payload) > MAX_MESSAGE_SIZE:
        msg = f"Payload of {len(payload)} bytes exceeds limit of {MAX_MESSAGE_SIZE}"
        raise EncodeError(msg)
    return struct.pack(HEADER_FORMAT, len(payload)) + payload


def parse_header(header: bytes) -> int:
    """Return the payload length declared by a frame header.

    Raises:
        FramingError: Header has the wrong size or declares an oversized payload.

    """
    if len(header) != HEADER_SIZE:
        msg = f"Expected {HEADER_SIZE} header bytes, got {len(header)}"
        raise FramingError(msg)
    (length,) = struct.unpack(HEADER_FORMAT, header)
    if length > MAX_MESSAGE_SIZE:
        msg = f"Declared payload of {length} bytes exceeds limit of {MAX_MESSAGE_SIZE}"
        raise FramingError(msg)
    return int(length)


def _dump(obj: dict[str, object]) -> bytes:
    try:
        return json.dumps(obj).encode()
    except (TypeError, ValueError, UnicodeEncodeError) as e:
        raise EncodeError(str(e)) from e


def _load(data: bytes) -> dict[str, object]:
    try:
        obj = json.loads(data.decode())
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise DecodeError(f"Invalid JSON payload: {e}") from e
    if not isinstance(obj, dict):
        raise DecodeError("Payload is not a JSON object")
    return obj


def _files(obj: dict[str, object]) -> tuple[str, ...]:
    files = obj.get("files", [])
    if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
        raise DecodeError("'files' must be a list of strings")
    return tuple(files)


def _check_files(files: tuple[str, ...]) -> list[str]:
    if not all(isinstance(f, str) for f in files):
        raise EncodeError("'files' must contain only strings")
    return list(files)


def encode_request(req: Request) -> bytes:
    """Serialize a Request to payload bytes (no length prefix)."""
    if isinstance(req.command, bool) or not isinstance(req.command, int):
        raise EncodeError(f"Command must be an int, got {req.command!r}")
    return _dump({"command": int(req.command), "files": _check_files(req.files)})


def decode_request(data: bytes) -> Request:
    """Deserialize payload bytes into a Request.

    Raises:
        DecodeError: Payload is not a valid request.

    """
    obj = _load(data)
    command = obj.get("command")
    if isinstance(command, bool) or not isinstance(command, int):
        raise DecodeError(f"'command' must be an integer, got {command!r}")
    files = _files(obj)
    try:
        return Request(command=Command(command), files=files)
    except ValueError:
        return Request(command=command, files=files)


def encode_response(resp: Response) -> bytes:
    """Serialize a Response to payload bytes (no length prefix)."""
    return _dump({"status": str(resp.status), "files": _check_files(resp.files)})


def decode_response(data: bytes) -> Response:
    """Deserialize payload bytes into a Response.

    Raises:
        DecodeError: Payload is not a valid response.

    """
    obj = _load(data)
    try:
        status = Status(obj.get("status"))
    except ValueError as e:
        raise DecodeError(f"Unknown status: {obj.get('status')!r}") from e
    return Response(status=status, files=_files(obj))
