"""A threaded HTTP server running a Flask application in the background."""

from __future__ import annotations

import logging
import queue
import threading
from socketserver import ThreadingMixIn
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from flask import Flask, request

DEFAULT_PORT = 80
DEFAULT_READ_TIMEOUT = 5.0
DEFAULT_WRITE_TIMEOUT = 5.0
DEFAULT_SHUTDOWN_TIMEOUT = 3.0

log = logging.getLogger(__name__)


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        pass


class _ThreadingServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class HttpServer:
    """Serves a Flask app; errors and stops are reported through wait().

    In debug mode the app runs with debugging on and every request is logged.
    Socket reads and writes time out after the larger of the two timeouts.
    """

    def __init__(
        self,
        app: Flask | None = None,
        *,
        host: str = "0.0.0.0",
        port: int | str = DEFAULT_PORT,
        mode: str = "release",
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT,
        shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
    ) -> None:
        self.app = app if app is not None else Flask("servicekit")
        self.host = host
        self._port = int(port)
        self.mode = mode
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.shutdown_timeout = shutdown_timeout
        self._notify: queue.Queue[BaseException | None] = queue.Queue()
        self._server: _ThreadingServer | None = None
        self._thread: threading.Thread | None = None

        self.app.config["PROPAGATE_EXCEPTIONS"] = False
        self.app.debug = mode == "debug"
        if self.app.debug:
            self.app.after_request(self._log_request)

    @staticmethod
    def _log_request(response: Any) -> Any:
        log.info("%s %s - %d", request.method, request.full_path, response.status_code)
        return response

    @property
    def port(self) -> int:
        """The bound port once started, else the configured one."""
        return self._server.server_port if self._server is not None else self._port

    def start(self) -> None:
        """Bind and serve in a background thread; a bind failure goes to wait()."""
        if self._thread is not None:
            raise RuntimeError("server already started")
        handler = type(
            "_TimedHandler",
            (_QuietHandler,),
            {"timeout": max(self.read_timeout, self.write_timeout)},
        )
        try:
            self._server = make_server(
                self.host,
                self._port,
                self.app,
                server_class=_ThreadingServer,
                handler_class=handler,
            )
        except OSError as exc:
            self._notify.put(exc)
            return
        self._thread = threading.Thread(target=self._serve, daemon=True, name="http-server")
        self._thread.start()

    def _serve(self) -> None:
        assert self._server is not None
        try:
            self._server.serve_forever(poll_interval=0.1)
        except Exception as exc:
            self._notify.put(exc)
        else:
            self._notify.put(None)

    def wait(self, timeout: float | None = None) -> BaseException | None:
        """Block until the server stops; return its error, or None after a clean stop.

        Raises TimeoutError if it is still running after timeout seconds.
        """
        try:
            return self._notify.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("server is still running") from None

    def shutdown(self) -> None:
        """Stop accepting requests and close the socket within the shutdown timeout."""
        server = self._server
        if server is None:
            return
        stopper = threading.Thread(target=server.shutdown, daemon=True)
        stopper.start()
        stopper.join(self.shutdown_timeout)
        server.server_close()
        if stopper.is_alive():
            raise TimeoutError("server shutdown timed out")