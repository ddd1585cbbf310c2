"""A peer in the time-synchronisation network."""

from __future__ import annotations

import ipaddress
import logging
import socket
import sys
import time
from dataclasses import dataclass

from .protocol import (
    UNSYNCHRONIZED,
    MessageType,
    SyncContext,
    SyncState,
    decode_peers,
    decode_timestamp,
    encode_peers,
    encode_timestamp,
)

logger = logging.getLogger(__name__)

_MAX_DATAGRAM = 65535
_MAX_PARTNER_LEVEL = 254


@dataclass(frozen=True)
class Node:
    """Address of a peer: IPv4 address and UDP port."""

    ip: str
    port: int


class NetworkNode:
    """This node: its socket, its known peers and its clock."""

    def __init__(self, host: str, port: int, sock: socket.socket) -> None:
        self.ip = host
        self.port = port
        self.sock = sock
        self.connected_nodes: list[Node] = []
        self.synchronized_level = UNSYNCHRONIZED
        self.is_synchronized = False
        self.sync_master: Node | None = None
        self.sync_partner: Node | None = None
        self.sync_context = SyncContext()
        self.offset = 0
        self.wants_to_synchronize = True
        self._start = time.monotonic_ns()

    def current_timestamp(self) -> int:
        """Milliseconds elapsed since this node was created."""
        return (time.monotonic_ns() - self._start) // 1_000_000

    def send_message(
        self, host: str, port: int, message: int, payload: bytes = b""
    ) -> tuple[str, int]:
        """Send one datagram of ``message`` followed by ``payload``.

        Raises ValueError for an invalid IPv4 address and OSError when the
        datagram cannot be sent whole.
        """
        ipaddress.IPv4Address(host)
        if not 0 <= port <= _MAX_DATAGRAM:
            raise ValueError(f"port out of range: {port}")
        datagram = bytes([int(message)]) + bytes(payload)
        sent = self.sock.sendto(datagram, (host, port))
        if sent < len(datagram):
            raise OSError(f"sent {sent} of {len(datagram)} bytes to {host} {port}")
        return host, port

    def _try_send(
        self, host: str, port: int, message: MessageType, payload: bytes = b""
    ) -> bool:
        try:
            self.send_message(host, port, message, payload)
        except (ValueError, OSError) as exc:
            logger.error("error sending %s to %s %d: %s", message.name, host, port, exc)
            return False
        return True

    def send_hello(self, host: str, port: int) -> bool:
        """Send HELLO to a peer."""
        if self._try_send(host, port, MessageType.HELLO):
            logger.info("sent HELLO to %s %d", host, port)
            return True
        return False

    def send_hello_reply(self, host: str, port: int) -> bool:
        """Send HELLO_REPLY with the list of connected nodes."""
        payload = encode_peers((n.ip, n.port) for n in self.connected_nodes)
        if self._try_send(host, port, MessageType.HELLO_REPLY, payload):
            logger.info(
                "sent %d bytes of HELLO_REPLY to %s %d", len(payload) + 1, host, port
            )
            return True
        return False

    def send_connect(self, host: str, port: int) -> bool:
        """Send CONNECT to a peer."""
        return self._try_send(host, port, MessageType.CONNECT)

    def send_ack_connect(self, host: str, port: int) -> bool:
        """Send ACK_CONNECT to a peer."""
        return self._try_send(host, port, MessageType.ACK_CONNECT)

    def send_delay_request(self, host: str, port: int) -> bool:
        """Send DELAY_REQUEST to a peer."""
        if self._try_send(host, port, MessageType.DELAY_REQUEST):
            logger.info("sent DELAY_REQUEST to %s %d", host, port)
            return True
        return False

    def send_delay_response(self, host: str, port: int) -> bool:
        """Send DELAY_RESPONSE with our level and the local timestamp."""
        try:
            payload = encode_timestamp(self.synchronized_level, self.current_timestamp())
        except ValueError as exc:
            logger.error("cannot encode DELAY_RESPONSE: %s", exc)
            return False
        if self._try_send(host, port, MessageType.DELAY_RESPONSE, payload):
            logger.info("sent DELAY_RESPONSE to %s %d", host, port)
            return True
        return False

    def send_time(self, host: str, port: int) -> bool:
        """Send TIME with our level and clock, corrected by the offset if synchronised."""
        timestamp = self.current_timestamp()
        if self.synchronized_level < UNSYNCHRONIZED:
            timestamp += self.offset
        try:
            payload = encode_timestamp(self.synchronized_level, timestamp)
        except ValueError as exc:
            logger.error("cannot encode TIME: %s", exc)
            return False
        if self._try_send(host, port, MessageType.TIME, payload):
            logger.info("sent TIME to %s %d", host, port)
            return True
        return False

    def _is_known(self, host: str) -> bool:
        return any(node.ip == host for node in self.connected_nodes)

    def add_node(self, host: str, port: int) -> bool:
        """Add a peer unless it is this node or its address is already known."""
        if host == self.ip or self._is_known(host):
            return False
        self.connected_nodes.append(Node(host, port))
        return True

    def receive_hello_reply(self, payload: bytes) -> list[Node]:
        """Read the peer list of a HELLO_REPLY and send CONNECT to each peer."""
        peers = [Node(host, port) for host, port in decode_peers(payload)]
        for peer in peers:
            self.send_connect(peer.ip, peer.port)
        return peers

    def receive_sync_start(self, host: str, port: int, payload: bytes) -> bool:
        """Handle SYNC_START; answer with DELAY_REQUEST if the rules allow it."""
        sender = Node(host, port)
        context = self.sync_context
        if context.state is not SyncState.NONE and sender != self.sync_partner:
            return False
        if not self._is_known(host):
            return False
        level, sender_timestamp = decode_timestamp(payload)
        if level >= _MAX_PARTNER_LEVEL:
            return False

        synced_with_sender = self.is_synchronized and self.sync_master == sender
        if synced_with_sender:
            should_sync = level < self.synchronized_level
        else:
            should_sync = level + 2 <= self.synchronized_level
        if not should_sync:
            return False

        self.sync_partner = sender
        context.partner_sync_level = level
        context.t1 = sender_timestamp
        context.t2 = self.current_timestamp()
        context.state = SyncState.WAITING_FOR_REQUEST
        context.t3 = self.current_timestamp()
        self.send_delay_request(host, port)
        return True

    def receive_message(self) -> MessageType | None:
        """Receive one datagram and act on it; return its type, or None."""
        try:
            data, (host, port) = self.sock.recvfrom(_MAX_DATAGRAM)
        except OSError as exc:
            logger.error("no message received: %s", exc)
            return None
        if not data:
            logger.error("empty message from %s %d", host, port)
            return None
        try:
            message = MessageType(data[0])
        except ValueError:
            logger.error("incorrect message %d from %s %d", data[0], host, port)
            return None
        payload = data[1:]
        logger.info("received %s from %s %d", message.name, host, port)

        try:
            if message is MessageType.HELLO:
                self.send_hello_reply(host, port)
            elif message is MessageType.HELLO_REPLY:
                self.receive_hello_reply(payload)
            elif message is MessageType.CONNECT:
                if self.add_node(host, port):
                    self.send_ack_connect(host, port)
            elif message is MessageType.ACK_CONNECT:
                self.add_node(host, port)
            elif message is MessageType.GET_TIME:
                self.send_time(host, port)
            elif message is MessageType.DELAY_REQUEST:
                self.send_delay_response(host, port)
            elif message is MessageType.SYNC_START:
                self.receive_sync_start(host, port, payload)
        except ValueError as exc:
            logger.error("malformed %s from %s %d: %s", message.name, host, port, exc)
        return message

    def report_nodes(self) -> None:
        """Write the connected nodes to standard error, one per line."""
        for node in self.connected_nodes:
            print(f"host:{node.ip} port:{node.port}", file=sys.stderr)