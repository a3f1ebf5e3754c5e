import io
import socket
import threading
import time

import pytest

from netlab import udp

HOST = "127.0.0.1"


@pytest.fixture
def port():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        probe.bind((HOST, 0))
        return probe.getsockname()[1]


@pytest.fixture
def busy_port():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as holder:
        holder.bind((HOST, 0))
        yield holder.getsockname()[1]


@pytest.fixture
def server(port):
    """Start udp.serve_once on the test port; return a function giving its result."""
    out = io.StringIO()
    outcome = {}

    def target(**kwargs):
        outcome["value"] = udp.serve_once(HOST, port, out=out, **kwargs)

    def start(**kwargs):
        thread = threading.Thread(target=target, kwargs=kwargs, daemon=True)
        thread.start()
        deadline = time.monotonic() + 5
        while "Listening" not in out.getvalue():
            assert time.monotonic() < deadline and thread.is_alive()
            time.sleep(0.01)

        def finish():
            thread.join(5)
            return outcome["value"], out.getvalue()

        return finish

    return start


def test_handle_datagram_replies_to_sender():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as srv, socket.socket(
        socket.AF_INET, socket.SOCK_DGRAM
    ) as client:
        for sock in (srv, client):
            sock.bind((HOST, 0))
            sock.settimeout(5)
        client.sendto(b"ping", srv.getsockname())
        message, address = udp.handle_datagram(srv, "pong")
        assert (message, address) == ("ping", client.getsockname())
        assert client.recvfrom(2000)[0] == b"pong"


def test_round_trip_with_default_reply(server, port):
    finish = server()
    assert udp.exchange("datagram text", HOST, port, timeout=5) == "This is the server's message."
    message, log = finish()
    assert message == "datagram text"
    assert "Message from client: datagram text" in log


def test_exchange_without_server_fails(port):
    with pytest.raises(OSError):
        udp.exchange("lost", HOST, port, timeout=0.5)


def test_serve_once_port_in_use(busy_port):
    with pytest.raises(OSError):
        udp.serve_once(HOST, busy_port, out=io.StringIO())


def test_server_main_reports_bind_failure(busy_port):
    assert udp.server_main(["--port", str(busy_port)]) == 1


def test_client_main_prints_response(server, port, monkeypatch, capsys):
    finish = server(reply="answer")
    monkeypatch.setattr("sys.stdin", io.StringIO("question\n"))
    assert udp.client_main(["--port", str(port), "--timeout", "5"]) == 0
    assert "Server's response: answer" in capsys.readouterr().out
    assert finish()[0] == "question"


def test_client_main_reports_failure(port, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("nobody\n"))
    assert udp.client_main(["--port", str(port), "--timeout", "0.5"]) == 1