"""Go-Back-N sliding window over TCP with a receiver that randomly drops frames."""

from __future__ import annotations

import random
import re
import socket
import sys
import time
from typing import Callable, Iterator, List, Optional, Sequence, TextIO

from netlab.framing import EXIT, recv_message, send_message
from netlab.snw import _accept_client, _base_parser

DEFAULT_HOST = "127.0.0.1"
DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
ACK_TIMEOUT = 3.0

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_NOTICES = (
    "Socket successfully created",
    "Socket successfully bound",
    "Server listening",
    "Server accepted the client",
)


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _start_window(
    sock: socket.socket, frames: int, window: int, out: TextIO
) -> Callable[[int], None]:
    """Check the parameters, send the first window and return the frame sender."""
    if frames < 1 or window < 1:
        raise ValueError("frames and window must be at least 1")
    if sock.gettimeout() is None:
        sock.settimeout(ACK_TIMEOUT)

    def transmit(number: int) -> None:
        send_message(sock, str(number))
        print(f"Frame {number} sent", file=out, flush=True)

    for number in range(min(frames, window)):
        transmit(number)
    return transmit


def _incoming_frames(conn: socket.socket, delay: float, out: TextIO) -> Iterator[int]:
    """Yield frame numbers from the sender until it says Exit."""
    while True:
        if delay:
            time.sleep(delay)
        message = recv_message(conn)
        if message is None:
            raise ConnectionError("sender closed the connection")
        if message == EXIT:
            print("Exit", file=out)
            return
        yield _atoi(message)


def _acknowledge(
    conn: socket.socket, frame: int, late: bool, delay: float, out: TextIO
) -> None:
    if late and delay:
        time.sleep(2 * delay)
    print(f"Frame {frame} received", file=out)
    print(f"Acknowledgement sent: {frame}", file=out, flush=True)
    send_message(conn, str(frame))


def send_frames(
    sock: socket.socket,
    frames: int,
    window: int,
    out: Optional[TextIO] = None,
) -> List[int]:
    """Send frames 0..frames-1 with Go-Back-N and return the acknowledgements accepted.

    When no acknowledgement arrives in time the whole window is resent. The
    socket's own timeout is used if it has one, otherwise ACK_TIMEOUT.
    """
    out = sys.stdout if out is None else out
    transmit = _start_window(sock, frames, window, out)
    low, high = 0, window - 1
    next_frame = min(frames, window)
    acknowledged: List[int] = []
    resent = False
    while True:
        if high - low != window - 1 and not resent and next_frame != frames:
            transmit(next_frame)
            high += 1
            next_frame += 1
        resent = False
        try:
            message = recv_message(sock)
        except socket.timeout:
            print(f"Acknowledgement not received for {low}", file=out)
            print("Resending frames", file=out)
            for number in range(low, min(frames, low + window)):
                transmit(number)
            resent = True
            continue
        if message is None:
            raise ConnectionError("receiver closed the connection")
        ack = _atoi(message)
        if ack + 1 == frames:
            print(f"Acknowledgement received: {ack}", file=out)
            print("Exit", file=out)
            acknowledged.append(ack)
            send_message(sock, EXIT)
            return acknowledged
        if ack == low:
            low += 1
            print(f"Acknowledgement received: {ack}", file=out)
            acknowledged.append(ack)


def receive_frames(
    conn: socket.socket,
    rng: Optional[random.Random] = None,
    delay: float = 1.0,
    out: Optional[TextIO] = None,
) -> List[int]:
    """Accept frames in order until the sender says Exit; return the frames accepted.

    Each in-order frame is dropped, acknowledged late or acknowledged at once,
    chosen by rng.randrange(3). Out-of-order frames are discarded and answered
    with the last acknowledgement.
    """
    rng = random.Random() if rng is None else rng
    out = sys.stdout if out is None else out
    expected = 0
    ack = -1
    accepted: List[int] = []
    for frame in _incoming_frames(conn, delay, out):
        if frame != expected:
            print(f"Frame {frame} discarded", file=out)
            print(f"Acknowledgement sent: {ack}", file=out)
            send_message(conn, str(ack))
            continue
        outcome = rng.randrange(3)
        if outcome == 0:
            continue
        _acknowledge(conn, frame, outcome == 1, delay, out)
        ack = frame
        expected = frame + 1
        accepted.append(frame)
    return accepted


def _run_server(
    argv: Optional[Sequence[str]],
    description: str,
    receive: Callable[[socket.socket, random.Random, float], List[int]],
) -> int:
    parser = _base_parser(description, DEFAULT_SERVER_HOST, DEFAULT_PORT)
    parser.add_argument("--delay", type=float, default=1.0)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)
    try:
        with _accept_client(args.host, args.port, 5, _NOTICES) as conn:
            receive(conn, random.Random(args.seed), args.delay)
    except OSError as exc:
        print(f"Server error: {exc}", file=sys.stderr)
        return 1
    return 0


def _run_client(
    argv: Optional[Sequence[str]],
    description: str,
    send: Callable[[socket.socket, int, int], List[int]],
) -> int:
    parser = _base_parser(description, DEFAULT_HOST, DEFAULT_PORT)
    parser.add_argument("--timeout", type=float, default=ACK_TIMEOUT)
    args = parser.parse_args(argv)
    try:
        with socket.create_connection((args.host, args.port)) as sock:
            print("Connected to the server")
            sock.settimeout(args.timeout)
            frames = int(input("Enter the number of frames: "))
            window = int(input("Enter the window size: "))
            send(sock, frames, window)
    except (EOFError, ValueError) as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Connection with the server failed: {exc}", file=sys.stderr)
        return 1
    return 0


def server_main(argv: Optional[Sequence[str]] = None) -> int:
    """Accept one sender and receive its frames."""
    return _run_server(argv, "Receive frames with Go-Back-N.", receive_frames)


def client_main(argv: Optional[Sequence[str]] = None) -> int:
    """Ask for a frame count and window size, then send the frames."""
    return _run_client(argv, "Send frames with Go-Back-N.", send_frames)