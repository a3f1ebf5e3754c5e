import io
import socket
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from netlab import tcp

HOST = "127.0.0.1"


@pytest.fixture
def port():
    with socket.socket() as probe:
        probe.bind((HOST, 0))
        return probe.getsockname()[1]


@pytest.fixture
def busy_port():
    with socket.socket() as holder:
        holder.bind((HOST, 0))
        holder.listen(1)
        yield holder.getsockname()[1]


def _serve(**kwargs):
    """Start tcp.serve_once in the background and wait until it listens."""
    out = io.StringIO()
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(tcp.serve_once, out=out, **kwargs)
    executor.shutdown(wait=False)
    deadline = time.monotonic() + 5
    while "Listening" not in out.getvalue() and not future.done():
        assert time.monotonic() < deadline, "server did not start listening"
        time.sleep(0.01)
    return future, out


def test_handle_client_returns_message_and_replies():
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        client_side.sendall(b"hello")
        assert tcp.handle_client(server_side, "pong") == "hello"
        assert client_side.recv(100) == b"pong"


@pytest.mark.parametrize(
    "extra, message, expected",
    [
        ({}, "hi there", "This is the server's message."),
        ({"reply": "custom"}, "", "custom"),
    ],
)
def test_round_trip(port, extra, message, expected):
    future, out = _serve(host=HOST, port=port, **extra)
    assert tcp.exchange(message, HOST, port) == expected
    assert future.result(timeout=5) == message
    assert "Client connected at IP: 127.0.0.1" in out.getvalue()
    assert f"Message from client: {message}\n" in out.getvalue()


def test_exchange_without_server_fails(port):
    with pytest.raises(OSError):
        tcp.exchange("anyone?", HOST, port)


def test_serve_once_port_in_use(busy_port):
    with pytest.raises(OSError):
        tcp.serve_once(HOST, busy_port, out=io.StringIO())


def test_server_main_reports_bind_failure(busy_port):
    assert tcp.server_main(["--port", str(busy_port)]) == 1


def test_client_main_prints_response(port, monkeypatch, capsys):
    future, _ = _serve(host=HOST, port=port)
    monkeypatch.setattr("sys.stdin", io.StringIO("hello server\n"))
    assert tcp.client_main(["--port", str(port)]) == 0
    assert "Server's response: This is the server's message." in capsys.readouterr().out
    assert future.result(timeout=5) == "hello server"


def test_client_main_reports_failure(port, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("nobody\n"))
    assert tcp.client_main(["--port", str(port)]) == 1