import errno
import urllib.error
import urllib.request

import pytest
from flask import Flask

from servicekit.server import HttpServer


def _app():
    app = Flask(__name__)

    @app.route("/healthz")
    def healthz():
        return "ok"

    @app.route("/boom")
    def boom():
        raise RuntimeError("boom")

    return app


@pytest.fixture
def server():
    srv = HttpServer(_app(), host="127.0.0.1", port=0)
    srv.start()
    yield srv
    srv.shutdown()


def _get(server, path):
    return urllib.request.urlopen(f"http://127.0.0.1:{server.port}{path}", timeout=5)


def test_serves_requests(server):
    with _get(server, "/healthz") as response:
        assert response.status == 200
        assert response.read() == b"ok"


def test_port_is_bound(server):
    assert server.port > 0


def test_handler_errors_become_500(server):
    with pytest.raises(urllib.error.HTTPError) as info:
        _get(server, "/boom")
    assert info.value.code == 500


def test_wait_times_out_while_running(server):
    with pytest.raises(TimeoutError):
        server.wait(timeout=0.05)


def test_shutdown_reports_clean_stop():
    srv = HttpServer(_app(), host="127.0.0.1", port=0)
    srv.start()
    srv.shutdown()
    assert srv.wait(timeout=5) is None


def test_bind_failure_reported_through_wait(server):
    second = HttpServer(_app(), host="127.0.0.1", port=server.port)
    second.start()
    error = second.wait(timeout=5)
    assert isinstance(error, OSError)
    assert error.errno == errno.EADDRINUSE


def test_start_twice_rejected(server):
    with pytest.raises(RuntimeError):
        server.start()


def test_mode_sets_debug():
    assert HttpServer(mode="debug").app.debug is True
    assert HttpServer(mode="release").app.debug is False


def test_default_timeouts():
    srv = HttpServer()
    assert (srv.read_timeout, srv.write_timeout, srv.shutdown_timeout) == (5.0, 5.0, 3.0)
    assert srv.port == 80