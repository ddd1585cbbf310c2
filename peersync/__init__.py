"""Peer-to-peer clock synchronization over UDP: nodes, wire format and helpers."""

__version__ = "0.1.0"