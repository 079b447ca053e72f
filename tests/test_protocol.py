import struct

import pytest

from tp0net.protocol import OpCode, Package, decode_items, encode_message


def test_encode_message_wire_bytes():
    assert encode_message("hi") == b"\x00\x00\x00\x00\x03\x00\x00\x00hi\x00"


def test_encode_message_header_matches_payload():
    frame = encode_message("hola mundo")
    op, size = struct.unpack_from("<ii", frame)
    assert op == OpCode.MESSAGE
    assert frame[8:] == b"hola mundo\0"
    assert size == len(frame) - 8


def test_empty_package_wire_bytes():
    assert Package().serialize() == b"\x01\x00\x00\x00\x00\x00\x00\x00"


def test_package_add_string_is_nul_terminated():
    pkg = Package()
    pkg.add("ab")
    assert bytes(pkg.buffer) == b"\x03\x00\x00\x00ab\x00"


def test_package_round_trip():
    pkg = Package()
    for word in ["uno", "dos", "", "tres"]:
        pkg.add(word)
    frame = pkg.serialize()
    op, size = struct.unpack_from("<ii", frame)
    assert op == OpCode.PACKAGE
    assert size == len(pkg.buffer)
    assert decode_items(frame[8:]) == [b"uno\0", b"dos\0", b"\0", b"tres\0"]


def test_package_add_raw_bytes():
    pkg = Package()
    pkg.add(b"\x01\x02")
    assert decode_items(bytes(pkg.buffer)) == [b"\x01\x02"]


def test_decode_empty_payload():
    assert decode_items(b"") == []


def test_decode_truncated_length():
    with pytest.raises(ValueError):
        decode_items(b"\x01\x00")


def test_decode_truncated_data():
    with pytest.raises(ValueError):
        decode_items(struct.pack("<i", 10) + b"abc")


def test_decode_negative_length():
    with pytest.raises(ValueError):
        decode_items(struct.pack("<i", -1))