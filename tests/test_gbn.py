import io
import socket
from concurrent.futures import ThreadPoolExecutor

import pytest

from netlab.framing import EXIT, recv_message, send_message
from netlab.gbn import receive_frames, send_frames


class _ScriptedRng:
    """Returns scripted outcomes, then always the given default."""

    def __init__(self, script, default=2):
        self._script = list(script)
        self._default = default

    def randrange(self, n):
        return self._script.pop(0) if self._script else self._default


@pytest.fixture
def pair():
    near, far = socket.socketpair()
    far.settimeout(5)
    with near, far:
        yield near, far


def _run(frames, window, script):
    client, server = socket.socketpair()
    client.settimeout(0.3)
    server.settimeout(5)
    client_out, server_out = io.StringIO(), io.StringIO()
    with client, server, ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(receive_frames, server, _ScriptedRng(script), 0, server_out)
        acked = send_frames(client, frames, window, client_out)
        accepted = future.result(timeout=10)
    return acked, accepted, client_out.getvalue(), server_out.getvalue()


@pytest.mark.parametrize("frames, window, script", [(4, 2, []), (2, 5, [1])])
def test_all_frames_delivered_in_order(frames, window, script):
    acked, accepted, client_text, server_text = _run(frames, window, script)
    assert accepted == list(range(frames))
    assert acked == list(range(frames))
    assert client_text.count("Frame 0 sent") == 1
    assert server_text.splitlines()[-1] == "Exit"


def test_dropped_frame_causes_window_resend():
    acked, accepted, client_text, server_text = _run(4, 2, [0])
    assert accepted == list(range(4))
    assert acked == list(range(4))
    assert client_text.count("Frame 0 sent") == 2
    assert "Acknowledgement not received for 0" in client_text
    assert "Frame 1 discarded" in server_text


def test_receiver_stops_on_exit(pair):
    near, far = pair
    out = io.StringIO()
    send_message(near, EXIT)
    assert receive_frames(far, _ScriptedRng([]), 0, out) == []
    assert out.getvalue() == "Exit\n"


def test_receiver_discards_out_of_order_frame(pair):
    near, far = pair
    send_message(near, "3")
    send_message(near, EXIT)
    assert receive_frames(far, _ScriptedRng([]), 0, io.StringIO()) == []
    assert recv_message(near) == "-1"


@pytest.mark.parametrize(
    "call",
    [
        lambda sock: receive_frames(sock, _ScriptedRng([]), 0, io.StringIO()),
        lambda sock: send_frames(sock, 3, 2, io.StringIO()),
    ],
    ids=["receiver", "sender"],
)
def test_peer_disconnect_raises(pair, call):
    near, far = pair
    near.close()
    with pytest.raises((ConnectionError, BrokenPipeError)):
        call(far)


@pytest.mark.parametrize("frames, window", [(0, 2), (3, 0)])
def test_invalid_parameters_rejected(pair, frames, window):
    with pytest.raises(ValueError):
        send_frames(pair[0], frames, window, io.StringIO())