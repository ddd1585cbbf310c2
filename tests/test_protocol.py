import pytest

from peersync.protocol import (
    MessageType,
    SyncContext,
    SyncState,
    decode_peers,
    decode_timestamp,
    encode_peers,
    encode_timestamp,
)


def test_empty_peer_list_is_just_a_zero_count():
    assert encode_peers([]) == b"\x00\x00"
    assert decode_peers(b"\x00\x00") == []


def test_single_peer_wire_bytes():
    assert encode_peers([("10.0.0.1", 4500)]) == b"\x00\x01\x04\x0a\x00\x00\x01\x11\x94"


def test_peers_round_trip():
    peers = [("196.88.75.173", 5666), ("196.88.75.173", 9999), ("10.1.1.153", 4000)]
    assert decode_peers(encode_peers(peers)) == peers


def test_decode_ignores_trailing_bytes():
    peers = [("127.0.0.1", 1)]
    assert decode_peers(encode_peers(peers) + b"\xff\xff") == peers


def test_decode_truncated_record_raises():
    data = encode_peers([("127.0.0.1", 80), ("127.0.0.2", 81)])
    with pytest.raises(ValueError):
        decode_peers(data[:-1])


def test_decode_missing_count_raises():
    with pytest.raises(ValueError):
        decode_peers(b"\x00")


def test_decode_bad_address_length_raises():
    data = bytearray(encode_peers([("127.0.0.1", 80)]))
    data[2] = 16
    with pytest.raises(ValueError):
        decode_peers(bytes(data))


def test_encode_rejects_invalid_address():
    with pytest.raises(ValueError):
        encode_peers([("not-an-ip", 80)])


def test_encode_rejects_port_out_of_range():
    with pytest.raises(ValueError):
        encode_peers([("127.0.0.1", 70000)])


def test_timestamp_of_unsynchronised_node():
    assert encode_timestamp(255, 0) == b"\xff" + bytes(8)


@pytest.mark.parametrize("level,timestamp", [(0, 0), (1, 123456789), (255, 2**64 - 1)])
def test_timestamp_round_trip(level, timestamp):
    data = encode_timestamp(level, timestamp)
    assert len(data) == 9
    assert decode_timestamp(data) == (level, timestamp)


def test_timestamp_level_out_of_range():
    with pytest.raises(ValueError):
        encode_timestamp(256, 0)


def test_decode_timestamp_truncated():
    with pytest.raises(ValueError):
        decode_timestamp(encode_timestamp(1, 2)[:-1])


def test_message_type_from_wire_byte():
    assert MessageType(bytes([MessageType.DELAY_REQUEST])[0]) is MessageType.DELAY_REQUEST


def test_sync_context_starts_idle():
    context = SyncContext()
    assert context.state is SyncState.NONE
    assert (context.t1, context.t2, context.t3, context.t4) == (0, 0, 0, 0)