# peersync

A library for peer-to-peer clock synchronization over UDP. A node holds a
UDP socket and finds other peers through a `HELLO` / `HELLO_REPLY` exchange.
It connects to them with `CONNECT` / `ACK_CONNECT` and answers time queries
with its own clock reading and synchronization level.

## Installation

```
pip install .
```

## Using a node

```python
import socket
from peersync.node import NetworkNode

sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
sock.bind(("127.0.0.1", 0))
node = NetworkNode("127.0.0.1", sock.getsockname()[1], sock)
node.send_hello("127.0.0.1", 4500)
node.receive_message()
node.report_nodes()
```

`NetworkNode` (in `peersync.node`) offers these operations:

- `send_hello`, `send_hello_reply`, `send_connect`, `send_ack_connect`,
  `send_delay_request`, `send_delay_response` and `send_time` each send one
  datagram and return `True` on success. A failure is logged and they
  return `False`.
- `send_message(host, port, message, payload=b"")` sends a datagram directly.
  It raises `ValueError` for a bad IPv4 address or port and `OSError` when
  the datagram is not sent whole.
- `receive_message()` receives one datagram and acts on it. For `HELLO` it
  replies with the peer list. For `HELLO_REPLY` it sends `CONNECT` to every
  listed peer. For `CONNECT` it adds the sender and acknowledges. For
  `ACK_CONNECT` it adds the sender. For `GET_TIME` it answers with `TIME`.
  For `DELAY_REQUEST` it answers with `DELAY_RESPONSE`. For `SYNC_START` it
  replies with `DELAY_REQUEST` when the synchronization rules allow it. The
  method returns the `MessageType` it received, or `None` when nothing usable
  arrived.
- `add_node(host, port)` records a peer. It refuses the node's own address
  and any address that is already known.
- `current_timestamp()` gives the milliseconds elapsed since the node was
  created.
- `report_nodes()` writes the known peers to standard error.

## Wire format

`peersync.protocol` holds the following:

- The `MessageType` values.
- `SyncState` and `SyncContext`, which track a synchronization exchange.
- `encode_peers` / `decode_peers`, which handle the peer list: a big-endian
  count followed by records of address length, IPv4 address and port.
- `encode_timestamp` / `decode_timestamp`, which handle a synchronization
  level byte followed by a 64-bit big-endian timestamp.

## Other helpers

- `peersync.args.InputParser` looks up `-x value` pairs in an argument list
  with `get_option` and `has_option`.
- `peersync.streams.read_exact` and `peersync.streams.write_all` read and
  write whole byte counts on binary streams.

## What it does not do

The package installs no command, so there is no ready-made program that
binds a socket, parses options and runs a node. You create the socket and
call `receive_message` in your own loop. Synchronization is incomplete: a
node never processes an incoming `DELAY_RESPONSE`, so it never computes a
clock offset or raises its synchronization level.

## Tests

```
pip install .[test]
pytest
```