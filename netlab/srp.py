"""Selective repeat over TCP with a receiver that sends negative acknowledgements."""

from __future__ import annotations

import random
import socket
import sys
from typing import List, Optional, Sequence, TextIO

from netlab.framing import EXIT, recv_message, send_message
from netlab.gbn import (
    _acknowledge,
    _atoi,
    _incoming_frames,
    _run_client,
    _run_server,
    _start_window,
)

NEGATIVE_ACK = -1


def send_frames(
    sock: socket.socket,
    frames: int,
    window: int,
    out: Optional[TextIO] = None,
) -> List[int]:
    """Send frames with selective repeat and return the acknowledgements counted.

    A negative acknowledgement makes the sender resend the frame at the
    bottom of its window. Once as many acknowledgements as frames have been
    counted, Exit is sent. The socket's own timeout is used if it has one,
    otherwise the Go-Back-N default; a timeout just waits again.
    """
    out = sys.stdout if out is None else out
    transmit = _start_window(sock, frames, window, out)
    low, high = 0, window - 1
    next_frame = min(frames, window)
    acknowledged: List[int] = []
    while len(acknowledged) != frames:
        if high - low != window - 1 and next_frame != frames:
            transmit(next_frame)
            high += 1
            next_frame += 1
        try:
            message = recv_message(sock)
        except socket.timeout:
            continue
        if message is None:
            raise ConnectionError("receiver closed the connection")
        ack = _atoi(message)
        if ack + 1 == frames:
            print(f"Acknowledgement received: {ack}", file=out)
            print("Exit", file=out)
            acknowledged.append(ack)
        elif ack == NEGATIVE_ACK:
            print(f"Acknowledgement not received for {low}", file=out)
            print("Resending frame", file=out)
            transmit(low)
        else:
            low += 1
            print(f"Acknowledgement received: {ack}", file=out)
            acknowledged.append(ack)
    send_message(sock, EXIT)
    return acknowledged


def receive_frames(
    conn: socket.socket,
    rng: Optional[random.Random] = None,
    delay: float = 1.0,
    out: Optional[TextIO] = None,
) -> List[int]:
    """Answer every frame until the sender says Exit; return the frames acknowledged.

    rng.randrange(3) picks for each frame: a negative acknowledgement, a late
    acknowledgement, or an immediate one.
    """
    rng = random.Random() if rng is None else rng
    out = sys.stdout if out is None else out
    acknowledged: List[int] = []
    for frame in _incoming_frames(conn, delay, out):
        outcome = rng.randrange(3)
        if outcome == 0:
            print(f"Frame {frame} not received", file=out)
            print(f"Negative Acknowledgement sent: {frame}", file=out, flush=True)
            send_message(conn, str(NEGATIVE_ACK))
            continue
        _acknowledge(conn, frame, outcome == 1, delay, out)
        acknowledged.append(frame)
    return acknowledged


def server_main(argv: Optional[Sequence[str]] = None) -> int:
    """Accept one sender and answer its frames."""
    return _run_server(argv, "Receive frames with selective repeat.", receive_frames)


def client_main(argv: Optional[Sequence[str]] = None) -> int:
    """Ask for a frame count and window size, then send the frames."""
    return _run_client(argv, "Send frames with selective repeat.", send_frames)