"""Asyncio Unix socket server — the daemon loop.

Owns the selection store and answers one framed request per client connection.
"""

import asyncio
import contextlib
import logging
import os
import signal
import threading

from mm_clikit import write_pid_file

from fm_clipboard.config import Config
from fm_clipboard.daemon.guard import SingletonGuard, make_guard
from fm_clipboard.daemon.protocol import (
    HEADER_SIZE,
    Command,
    DecodeError,
    EncodeError,
    FramingError,
    Request,
    Response,
    decode_request,
    encode_response,
    frame,
    parse_header,
)
from fm_clipboard.daemon.store import Selection, SelectionStore

logger = logging.getLogger(__name__)


class BindError(Exception):
    """The daemon socket could not be bound."""


async def read_frame(reader: asyncio.StreamReader) -> bytes | None:
    """Read one length-prefixed payload.

    Returns None if the peer closed the connection before sending anything.

    Raises:
        FramingError: Connection closed mid-frame or the header is invalid.

    """
    try:
        header = await reader.readexactly(HEADER_SIZE)
    except asyncio.IncompleteReadError as e:
        if not e.partial:
            return None
        msg = f"Connection closed after {len(e.partial)} of {HEADER_SIZE} header bytes"
        raise FramingError(msg) from e
    length = parse_header(header)
    try:
        return await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        msg = f"Connection closed after {len(e.partial)} of {length} payload bytes"
        raise FramingError(msg) from e


class DaemonServer:
    """Background daemon holding the shared "copied" and "cut" selections in memory."""

    def __init__(self, cfg: Config, store: SelectionStore | None = None, guard: SingletonGuard | None = None) -> None:
        """Initialize the daemon server.

        Args:
            cfg: Application configuration.
            store: Selection store to serve. A fresh empty one by default.
            guard: Singleton guard. Chosen from configuration by default.

        """
        self._cfg = cfg
        self._store = store if store is not None else SelectionStore()
        self._guard = guard if guard is not None else make_guard(cfg)
        self._server: asyncio.AbstractServer | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event: asyncio.Event | None = None
        # Set once the socket accepts connections; lets other threads wait for startup
        self.started = threading.Event()

    @property
    def store(self) -> SelectionStore:
        """The selection store shared by all connection handlers."""
        return self._store

    async def run(self, *, install_signal_handlers: bool = True) -> bool:
        """Serve until stopped.

        Returns False without touching the socket if another daemon is already running.

        Raises:
            BindError: The socket path cannot be bound.

        """
        if not self._guard.acquire():
            logger.warning("Another daemon instance is running, exiting.")
            return False
        try:
            await self._serve(install_signal_handlers=install_signal_handlers)
        finally:
            self._guard.release()
        return True

    async def _serve(self, *, install_signal_handlers: bool) -> None:
        sock_path = self._cfg.sock_path
        # Remove stale socket; the guard ensures no live daemon owns it
        with contextlib.suppress(OSError):
            sock_path.unlink()

        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()

        # Restrict umask before socket creation to prevent TOCTOU permission window
        old_umask = os.umask(0o077)
        try:
            self._server = await asyncio.start_unix_server(self._handle_client, path=str(sock_path))
        except OSError as e:
            msg = f"Cannot bind {sock_path}: {e}"
            raise BindError(msg) from e
        finally:
            os.umask(old_umask)
        sock_path.chmod(0o600)

        self._cfg.daemon_pid_path.parent.mkdir(parents=True, exist_ok=True)
        write_pid_file(self._cfg.daemon_pid_path)
        logger.info("Daemon listening on %s (pid %d)", sock_path, os.getpid())

        if install_signal_handlers:
            for sig in (signal.SIGTERM, signal.SIGINT):
                self._loop.add_signal_handler(sig, self._stop_event.set)

        self.started.set()
        try:
            async with self._server:
                await self._stop_event.wait()
                logger.info("Shutting down daemon.")
        finally:
            if install_signal_handlers:
                for sig in (signal.SIGTERM, signal.SIGINT):
                    self._loop.remove_signal_handler(sig)
            self._cleanup()
            self.started.clear()

    def stop(self) -> None:
        """Request shutdown. Safe to call from any thread."""
        if self._loop is None or self._stop_event is None:
            return
        self._loop.call_soon_threadsafe(self._stop_event.set)

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Handle a single client connection: read request, dispatch, send response."""
        try:
            payload = await read_frame(reader)
            if payload is None:
                logger.debug("Client closed without sending a request")
                return
            try:
                req = decode_request(payload)
            except DecodeError as e:
                logger.warning("Malformed request: %s", e)
                resp = Response.error()
            else:
                logger.debug("Request: command=%d files=%d", req.command, len(req.files))
                resp = self.dispatch(req)
            writer.write(frame(encode_response(resp)))
            await writer.drain()
        except FramingError as e:
            logger.warning("Dropping connection: %s", e)
        except EncodeError:
            logger.exception("Failed to encode response")
        except OSError as e:
            logger.warning("Connection error: %s", e)
        except Exception:
            logger.exception("Error handling client")
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

    def dispatch(self, req: Request) -> Response:
        """Apply a request to the store and build the response."""
        match req.known_command:
            case Command.COPY:
                self._store.replace(Selection.COPIED, req.files)
                return Response.success()
            case Command.CUT:
                self._store.replace(Selection.CUT, req.files)
                return Response.success()
            case Command.CLEAR:
                self._store.clear()
                return Response.success()
            case Command.GET_COPY:
                return Response.success(tuple(sorted(self._store.snapshot(Selection.COPIED))))
            case Command.GET_CUT:
                return Response.success(tuple(sorted(self._store.snapshot(Selection.CUT))))
            case _:
                logger.info("Unknown command ordinal: %d", req.command)
                return Response.unknown()

    def _cleanup(self) -> None:
        """Remove socket and PID files."""
        for path in (self._cfg.sock_path, self._cfg.daemon_pid_path):
            with contextlib.suppress(OSError):
                path.unlink()


def run_server(cfg: Config) -> int:
    """Entry point: create server and run the asyncio event loop. Return the process exit code.

    Raises:
        BindError: The socket path cannot be bound.

    """
    server = DaemonServer(cfg)
    started = asyncio.run(server.run())
    return 0 if started else 1
