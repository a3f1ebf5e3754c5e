# netlab

netlab is a set of small client/server pairs. They show how basic socket
programs and automatic-repeat-request (ARQ) schemes behave. Each server
accepts one client, or one datagram, and then exits. To run a pair, start the
server first. Then start the client in a second terminal.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Commands

Every command accepts `--host` and `--port`.

| Pair | Commands | What happens |
|------|----------|--------------|
| TCP | `netlab-tcp-server`, `netlab-tcp-client` | The client reads one line from standard input and sends it. The server prints the message and answers with `This is the server's message.` The client prints that reply. |
| UDP | `netlab-udp-server`, `netlab-udp-client` | The same exchange as TCP, carried in datagrams. Both commands take `--timeout`. Only the client uses it, as the time it waits for the reply. |
| File fetch | `netlab-ftp-server`, `netlab-ftp-client` | The client asks for the name of a remote file and a local file name. The server opens the requested path relative to its working directory. It sends the file line by line in fixed 100-byte records and ends with a completion marker. If the file cannot be opened, the server sends an error marker and the client prints `File not available`. `--delay` sets how long the server pauses after each record (default 1 s). |
| Stop-and-wait | `netlab-snw-server`, `netlab-snw-client` | The frames go across one at a time, and each one waits for its acknowledgement. Every odd-numbered frame is reported lost by the sender before it is sent. Every odd-numbered acknowledgement is reported lost by the receiver before it is sent. Both commands take `--frames` (default 5) and `--delay` (the pause after a loss, default 3 s). |
| Go-back-N | `netlab-gbn-server`, `netlab-gbn-client` | The client asks for a frame count and a window size, then sends the first window. For each in-order frame, the receiver chooses at random to drop it, acknowledge it late or acknowledge it at once. The receiver discards out-of-order frames and answers them with its last acknowledgement. If no acknowledgement arrives in time, the sender resends the whole window from the oldest unacknowledged frame. |
| Selective repeat | `netlab-srp-server`, `netlab-srp-client` | Like go-back-N, except that the receiver answers every frame. It may send a negative acknowledgement (`-1`) instead of a real one. When the sender gets a negative acknowledgement, it resends only the frame at the bottom of its window. |

Defaults:

- The TCP, UDP, file-fetch and stop-and-wait pairs use 127.0.0.1, port 2000.
- The go-back-N and selective-repeat servers listen on 0.0.0.0, port 8080, and their clients connect to 127.0.0.1, port 8080.
- The go-back-N and selective-repeat servers take `--delay`, the base pause in seconds (default 1), and `--seed`, which seeds the random choices.
- The go-back-N and selective-repeat clients take `--timeout`, the wait for an acknowledgement (default 3 s).

## Example session

```
$ netlab-gbn-server --seed 7     # terminal 1
$ netlab-gbn-client              # terminal 2
Enter the number of frames: 6
Enter the window size: 3
```

## Using it from Python

The protocol functions work on any connected socket, so you can drive them
yourself:

- `netlab.tcp.exchange(message, host, port)` and
  `netlab.udp.exchange(message, host, port, timeout)` send one message and
  return the reply.
- `netlab.tcp.serve_once(...)` and `netlab.udp.serve_once(...)` answer one
  client and return its message.
- `netlab.tcp.handle_client(conn, reply)` and
  `netlab.udp.handle_datagram(sock, reply)` do the same on a socket you
  already have.
- `netlab.ftp.fetch(name, dest, host, port, out)` copies a remote file to
  `dest` and returns its content. It raises `netlab.ftp.FileNotAvailable`
  when the server cannot open the file.
- `netlab.ftp.send_file(conn, path, delay)` and
  `netlab.ftp.receive_file(sock, dest, echo)` are the two halves of one
  transfer.
- `netlab.snw.run_sender(sock, frames, delay, out)` and
  `netlab.snw.run_receiver(conn, frames, delay, out)` run one stop-and-wait
  exchange.
- `netlab.gbn.send_frames(sock, frames, window, out)` and
  `netlab.srp.send_frames(sock, frames, window, out)` run the sending side of
  the windowed protocols. `receive_frames(conn, rng, delay, out)` in either
  module runs the receiving side. To get repeatable runs, pass a seeded
  `random.Random` as `rng`.
- `netlab.framing.encode_message`, `decode_message`, `send_message` and
  `recv_message` handle the fixed 80-byte text messages that the windowed
  protocols exchange.

## What it does not do

- The servers handle a single client and then stop. They do not run as
  long-lived services.
- The file fetcher uses its own simple record format. It is not an FTP
  server or client, and it cannot list, upload or delete files.
- The stop-and-wait losses are fixed and simulated, not random.