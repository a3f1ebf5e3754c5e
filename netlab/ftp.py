"""A minimal file transfer over TCP using fixed-size records."""

from __future__ import annotations

import codecs
import os
import socket
import time
from functools import partial
from typing import BinaryIO, Optional, Sequence, TextIO, Union

from .tcp import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    _accept_one,
    _arg_parser,
    _output,
    _prompt,
    _recv_until_closed,
    _run,
)

RECORD_SIZE = 100
CHUNK_SIZE = RECORD_SIZE - 1
COMPLETED = b"completed"
ERROR = b"error"

PathLike = Union[str, "os.PathLike[str]"]


class FileNotAvailable(Exception):
    """The server could not open the requested file."""

    def __init__(self, name: Optional[str] = None):
        message = "file not available" if name is None else f"file not available: {name}"
        super().__init__(message)
        self.name = name


def _pad(data: bytes) -> bytes:
    return data.ljust(RECORD_SIZE, b"\0")


def _payload(record: bytes) -> bytes:
    return record.split(b"\0", 1)[0]


def _recv_record(sock: socket.socket) -> bytes:
    """Read one record: RECORD_SIZE bytes, or fewer if the peer closes first."""
    return _recv_until_closed(sock, RECORD_SIZE)


def send_file(conn: socket.socket, path: PathLike, delay: float = 1.0) -> int:
    """Send a file line by line as padded records, then the completion marker.

    Lines longer than a record are split. Returns the number of records sent.
    If the file cannot be opened the error marker is sent and
    FileNotAvailable is raised.
    """
    try:
        stream = open(path, "rb")
    except OSError as exc:
        conn.sendall(ERROR)
        raise FileNotAvailable(os.fspath(path)) from exc
    sent = 0
    with stream:
        for chunk in iter(partial(stream.readline, CHUNK_SIZE), b""):
            conn.sendall(_pad(chunk))
            sent += 1
            if delay:
                time.sleep(delay)
    conn.sendall(COMPLETED)
    return sent


def receive_file(sock: socket.socket, dest: BinaryIO, echo: Optional[TextIO] = None) -> bytes:
    """Receive records until the completion marker, writing them to dest.

    Returns the bytes received. Raises FileNotAvailable on the error marker
    and ConnectionError if the peer closes before completing.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    received = bytearray()
    while True:
        record = _recv_record(sock)
        if not record:
            raise ConnectionError("connection closed before the transfer completed")
        payload = _payload(record)
        if payload == ERROR:
            raise FileNotAvailable()
        if payload == COMPLETED:
            break
        dest.write(payload)
        received += payload
        if echo is not None:
            echo.write(decoder.decode(payload))
    if echo is not None:
        echo.write(decoder.decode(b"", final=True))
    return bytes(received)


def serve_once(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    delay: float = 1.0,
    out: Optional[TextIO] = None,
) -> int:
    """Serve one file request and return the number of records sent."""
    out = _output(out)
    with _accept_one(host, port, out) as conn:
        print("Connection accepted", file=out)
        name = _payload(_recv_record(conn)).decode("utf-8", errors="surrogateescape")
        sent = send_file(conn, name, delay)
        print("Done..", file=out)
    return sent


def fetch(
    name: str,
    dest: PathLike,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    out: Optional[TextIO] = None,
) -> bytes:
    """Request a file from the server, store it at dest and return its content."""
    out = _output(out)
    request = name.encode("utf-8", errors="surrogateescape")
    if not request or len(request) > CHUNK_SIZE or b"\0" in request:
        raise ValueError(f"invalid file name: {name!r}")
    with socket.create_connection((host, port)) as sock:
        print("Connected with server successfully", file=out)
        with open(dest, "wb") as target:
            sock.sendall(_pad(request))
            content = receive_file(sock, target, out)
    print("File is transferred...", file=out)
    return content


def server_main(argv: Optional[Sequence[str]] = None) -> int:
    """Serve a single file request."""
    parser = _arg_parser("Serve one file request.")
    parser.add_argument("--delay", type=float, default=1.0)
    args = parser.parse_args(argv)
    return _run(
        lambda: serve_once(args.host, args.port, args.delay),
        "Server error",
        (FileNotAvailable, OSError),
    )


def _read_word(prompt: str) -> Optional[str]:
    words = _prompt(prompt).split()
    return words[0] if words else None


def client_main(argv: Optional[Sequence[str]] = None) -> int:
    """Ask for a remote file name and a local file name, then fetch the file."""
    args = _arg_parser("Fetch one file from the server.").parse_args(argv)
    name = _read_word("Enter filename: ")
    dest = _read_word("Enter the new file name: ")
    if name is None or dest is None:
        print("A file name is required", file=os.sys.stderr)
        return 1
    try:
        return _run(
            lambda: fetch(name, dest, args.host, args.port),
            "Transfer failed",
            (ValueError, OSError),
        )
    except FileNotAvailable:
        print("File not available")
        return 1