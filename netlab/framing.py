"""Fixed-size text messages used by the sliding-window protocols."""

from __future__ import annotations

import socket
from typing import Optional

MESSAGE_SIZE = 80
EXIT = "Exit"


def encode_message(text: str) -> bytes:
    """Encode text as one NUL-padded message of MESSAGE_SIZE bytes."""
    raw = text.encode("utf-8")
    if b"\0" in raw:
        raise ValueError("message may not contain NUL bytes")
    if len(raw) >= MESSAGE_SIZE:
        raise ValueError(f"message longer than {MESSAGE_SIZE - 1} bytes")
    return raw.ljust(MESSAGE_SIZE, b"\0")


def decode_message(data: bytes) -> str:
    """Return the text of a message, up to its first NUL byte."""
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def recv_message(sock: socket.socket) -> Optional[str]:
    """Read one whole message.

    Returns None if the peer closed the connection before a message began,
    and raises ConnectionError if it closed in the middle of one. A socket
    timeout propagates as socket.timeout.
    """
    data = bytearray()
    while len(data) < MESSAGE_SIZE:
        chunk = sock.recv(MESSAGE_SIZE - len(data))
        if not chunk:
            if data:
                raise ConnectionError("connection closed in the middle of a message")
            return None
        data += chunk
    return decode_message(bytes(data))


def send_message(sock: socket.socket, text: str) -> None:
    """Send text as one fixed-size message."""
    sock.sendall(encode_message(text))