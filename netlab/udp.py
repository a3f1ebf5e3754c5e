"""One-shot UDP message exchange: a server that answers a single datagram."""

from __future__ import annotations

import argparse
import socket
from typing import Optional, Sequence, TextIO, Tuple

from .tcp import (
    BUFFER_SIZE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    SERVER_REPLY,
    _arg_parser,
    _decode,
    _output,
    _prompt,
    _run,
)


def _udp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)


def handle_datagram(sock: socket.socket, reply: str = SERVER_REPLY) -> Tuple[str, Tuple[str, int]]:
    """Receive one datagram, answer its sender and return the message and sender address."""
    data, address = sock.recvfrom(BUFFER_SIZE)
    sock.sendto(reply.encode("utf-8"), address)
    return _decode(data), address


def serve_once(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    reply: str = SERVER_REPLY,
    out: Optional[TextIO] = None,
) -> str:
    """Bind, answer a single datagram and return the message it carried."""
    out = _output(out)
    with _udp_socket() as server:
        print("Socket created successfully", file=out)
        server.bind((host, port))
        print("Done with binding", file=out)
        print("Listening for incoming messages...", file=out, flush=True)
        message, (client_host, client_port) = handle_datagram(server, reply)
        print(f"Message from client: {message} ({client_host}:{client_port})", file=out)
    return message


def exchange(
    message: str,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    timeout: Optional[float] = None,
) -> str:
    """Send a datagram to the server and return the text of its answer."""
    with _udp_socket() as sock:
        sock.settimeout(timeout)
        sock.sendto(message.encode("utf-8"), (host, port))
        data, _ = sock.recvfrom(BUFFER_SIZE)
    return _decode(data)


def _parse_args(argv: Optional[Sequence[str]], description: str) -> argparse.Namespace:
    parser = _arg_parser(description)
    parser.add_argument("--timeout", type=float, default=None)
    return parser.parse_args(argv)


def server_main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the UDP server for one datagram."""
    args = _parse_args(argv, "Answer one UDP datagram.")
    return _run(lambda: serve_once(args.host, args.port), "Server error")


def client_main(argv: Optional[Sequence[str]] = None) -> int:
    """Read a message from standard input, send it and print the response."""
    args = _parse_args(argv, "Send one datagram to the UDP server.")
    message = _prompt("Enter message: ")
    return _run(
        lambda: print(
            f"Server's response: {exchange(message, args.host, args.port, args.timeout)}"
        ),
        "Error while receiving server's message",
    )