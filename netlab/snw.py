"""Stop-and-wait demonstration with simulated frame and acknowledgement loss."""

from __future__ import annotations

import argparse
import socket
import sys
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, TextIO, Tuple

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 2000
DEFAULT_FRAMES = 5
DEFAULT_DELAY = 3.0
RECORD_SIZE = 19
FRAME = b"frame"
ACK = b"ack"

_NOTICES = (
    "Socket created successfully",
    "Done with binding",
    "Listening for incoming connections.....",
    "Client connected at IP: {host} and port: {port}",
)


def _base_parser(description: str, host: str, port: int) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--host", default=host)
    parser.add_argument("--port", type=int, default=port)
    return parser


@contextmanager
def _accept_client(
    host: str, port: int, backlog: int, notices: Tuple[str, str, str, str]
) -> Iterator[socket.socket]:
    """Listen on host:port, accept one client and yield its connection."""
    created, bound, listening, accepted = notices
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
        print(created)
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server.bind((host, port))
        print(bound)
        server.listen(backlog)
        print(listening, flush=True)
        conn, (client_host, client_port) = server.accept()
        with conn:
            print(accepted.format(host=client_host, port=client_port))
            yield conn


def _send_record(sock: socket.socket, payload: bytes) -> None:
    sock.sendall(payload.ljust(RECORD_SIZE, b"\0"))


def _recv_record(sock: socket.socket) -> bytes:
    data = bytearray()
    while len(data) < RECORD_SIZE:
        chunk = sock.recv(RECORD_SIZE - len(data))
        if not chunk:
            break
        data += chunk
    if not data:
        raise ConnectionError("peer closed the connection")
    return bytes(data)


def _simulate_loss(event: str, retry: str, delay: float, out: TextIO) -> None:
    print(event, file=out)
    for seconds in range(1, 4):
        print(f"Waiting for {seconds} seconds", file=out)
    print(retry, file=out, flush=True)
    if delay:
        time.sleep(delay)


def _frame_numbers(frames: int) -> range:
    if frames < 0:
        raise ValueError("the number of frames cannot be negative")
    return range(1, frames + 1)


def run_receiver(
    conn: socket.socket,
    frames: int = DEFAULT_FRAMES,
    delay: float = DEFAULT_DELAY,
    out: Optional[TextIO] = None,
) -> List[int]:
    """Receive frames one at a time, losing every odd acknowledgement once.

    Returns the numbers (from 1) of the frames that arrived intact.
    """
    numbers = _frame_numbers(frames)
    out = sys.stdout if out is None else out
    received = []
    for number in numbers:
        if _recv_record(conn).startswith(FRAME):
            print(f"Received frame {number} successfully", file=out)
            received.append(number)
        else:
            print(f"Frame {number} not received", file=out)
        if number % 2:
            _simulate_loss("Ack lost", "Retransmitting ack...", delay, out)
        print(f"Sending ack {number}", file=out)
        _send_record(conn, ACK)
    return received


def run_sender(
    sock: socket.socket,
    frames: int = DEFAULT_FRAMES,
    delay: float = DEFAULT_DELAY,
    out: Optional[TextIO] = None,
) -> List[int]:
    """Send frames one at a time, losing every odd frame once before resending.

    Returns the numbers (from 1) of the frames whose acknowledgement arrived.
    """
    numbers = _frame_numbers(frames)
    out = sys.stdout if out is None else out
    acknowledged = []
    for number in numbers:
        print(f"Sending frame {number}", file=out)
        if number % 2:
            _simulate_loss("Packet loss", "Retransmitting...", delay, out)
        _send_record(sock, FRAME)
        print(f"Sent frame {number}", file=out)
        if _recv_record(sock).startswith(ACK):
            print(f"Received ACK for frame {number}", file=out)
            acknowledged.append(number)
    return acknowledged


def _parse_args(argv: Optional[Sequence[str]], description: str) -> argparse.Namespace:
    parser = _base_parser(description, DEFAULT_HOST, DEFAULT_PORT)
    parser.add_argument("--frames", type=int, default=DEFAULT_FRAMES)
    parser.add_argument("--delay", type=float, default=DEFAULT_DELAY)
    return parser.parse_args(argv)


def server_main(argv: Optional[Sequence[str]] = None) -> int:
    """Wait for a sender and acknowledge its frames."""
    args = _parse_args(argv, "Receive frames with stop-and-wait.")
    try:
        with _accept_client(args.host, args.port, 1, _NOTICES) as conn:
            run_receiver(conn, args.frames, args.delay)
    except (OSError, ValueError) as exc:
        print(f"Receiver error: {exc}", file=sys.stderr)
        return 1
    return 0


def client_main(argv: Optional[Sequence[str]] = None) -> int:
    """Connect to the receiver and send it frames."""
    args = _parse_args(argv, "Send frames with stop-and-wait.")
    try:
        with socket.create_connection((args.host, args.port)) as sock:
            print("Connected with server successfully")
            run_sender(sock, args.frames, args.delay)
    except (OSError, ValueError) as exc:
        print(f"Sender error: {exc}", file=sys.stderr)
        return 1
    return 0