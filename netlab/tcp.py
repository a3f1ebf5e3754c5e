"""One-shot TCP message exchange: a server that answers a single client."""

from __future__ import annotations

import argparse
import socket
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Sequence, TextIO, Tuple, Type

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 2000
BUFFER_SIZE = 2000
SERVER_REPLY = "This is the server's message."


def _decode(data: bytes) -> str:
    """Decode bytes as text, stopping at the first NUL byte."""
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _recv_until_closed(sock: socket.socket, limit: int = BUFFER_SIZE) -> bytes:
    """Read up to limit bytes, stopping early if the peer closes."""
    data = bytearray()
    while len(data) < limit:
        chunk = sock.recv(limit - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)


def _output(out: Optional[TextIO]) -> TextIO:
    return sys.stdout if out is None else out


@contextmanager
def _accept_one(host: str, port: int, out: TextIO) -> Iterator[socket.socket]:
    """Listen on host:port, accept a single client and yield its connection."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
        print("Socket created successfully", file=out)
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server.bind((host, port))
        print("Done with binding", file=out)
        server.listen(1)
        print("Listening for incoming connections...", file=out, flush=True)
        conn, (client_host, client_port) = server.accept()
        with conn:
            print(f"Client connected at IP: {client_host} and port: {client_port}", file=out)
            yield conn


def _arg_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser


def _run(
    action: Callable[[], object],
    failure: str,
    errors: Tuple[Type[BaseException], ...] = (OSError,),
) -> int:
    """Run action and turn the expected errors into a report and exit status 1."""
    try:
        action()
    except errors as exc:
        print(f"{failure}: {exc}", file=sys.stderr)
        return 1
    return 0


def _prompt(text: str) -> str:
    try:
        return input(text)
    except EOFError:
        return ""


def handle_client(conn: socket.socket, reply: str = SERVER_REPLY) -> str:
    """Read one message from a connected client, answer it and return the message."""
    data = conn.recv(BUFFER_SIZE)
    conn.sendall(reply.encode("utf-8"))
    return _decode(data)


def serve_once(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    reply: str = SERVER_REPLY,
    out: Optional[TextIO] = None,
) -> str:
    """Accept a single client, answer its message and return what it sent."""
    out = _output(out)
    with _accept_one(host, port, out) as conn:
        message = handle_client(conn, reply)
        print(f"Message from client: {message}", file=out)
    return message


def exchange(message: str, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> str:
    """Send a message to the server and return its response."""
    with socket.create_connection((host, port)) as sock:
        sock.sendall(message.encode("utf-8"))
        sock.shutdown(socket.SHUT_WR)
        return _decode(_recv_until_closed(sock))


def server_main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the TCP server for one client."""
    args = _arg_parser("Answer one TCP client.").parse_args(argv)
    return _run(lambda: serve_once(args.host, args.port), "Server error")


def client_main(argv: Optional[Sequence[str]] = None) -> int:
    """Read a message from standard input, send it and print the response."""
    args = _arg_parser("Send one message to the TCP server.").parse_args(argv)
    message = _prompt("Enter message: ")
    return _run(
        lambda: print(f"Server's response: {exchange(message, args.host, args.port)}"),
        "Unable to reach server",
    )