import pytest

from cosmwallet.exceptions import EncodingFailed
from cosmwallet.utils.protobuf import (
    ProtoWriter, decode_varint, encode_varint, get_bytes, get_repeated_bytes, get_string,
    get_uint64, iter_fields, parse_fields,
)


@pytest.mark.parametrize("value,encoded", [
    (0, "00"),
    (1, "01"),
    (127, "7f"),
    (128, "8001"),
    (300, "ac02"),
    (300000, "e0a712"),
    ((1 << 64) - 1, "ffffffffffffffffff01"),
])
def test_varint(value, encoded):
    assert encode_varint(value).hex() == encoded
    assert decode_varint(bytes.fromhex(encoded)) == (value, len(encoded) // 2)


@pytest.mark.parametrize("invalid", [-1, 1 << 64, "5", 1.0, True])
def test_varint_rejects_non_uint64(invalid):
    with pytest.raises(EncodingFailed):
        encode_varint(invalid)


def test_decode_varint_errors():
    with pytest.raises(EncodingFailed):
        decode_varint(b"\x80")
    with pytest.raises(EncodingFailed):
        decode_varint(b"\xff" * 11)


def test_writer_omits_defaults():
    assert ProtoWriter().uint64_field(1, 0).string_field(2, "").bytes_field(3, b"").to_bytes() == b""
    assert ProtoWriter().message_field(1, None).to_bytes() == b""
    assert ProtoWriter().message_field(1, b"").to_bytes() == b"\x0a\x00"
    assert ProtoWriter().repeated_bytes_field(3, [b"", b"\x01"]).to_bytes() == b"\x1a\x00\x1a\x01\x01"


def test_writer_fields():
    data = (
        ProtoWriter()
        .string_field(1, "stake")
        .uint64_field(2, 150)
        .bytes_field(3, b"\xde\xad")
        .to_bytes()
    )
    assert data.hex() == "0a057374616b65109601" + "1a02dead"

    fields = parse_fields(data)
    assert get_string(fields, 1) == "stake"
    assert get_uint64(fields, 2) == 150
    assert get_bytes(fields, 3) == b"\xde\xad"
    assert get_uint64(fields, 9) == 0
    assert get_string(fields, 9) == ""
    assert get_repeated_bytes(fields, 9) == []


def test_writer_type_errors():
    with pytest.raises(EncodingFailed):
        ProtoWriter().string_field(1, b"bytes")
    with pytest.raises(EncodingFailed):
        ProtoWriter().bytes_field(1, "text")
    with pytest.raises(EncodingFailed):
        ProtoWriter().uint64_field(0, 1)


def test_iter_fields_skips_fixed_width():
    data = bytes.fromhex("0d01000000") + bytes.fromhex("110102030405060708") + bytes.fromhex("1801")
    assert [(num, wire) for num, wire, _ in iter_fields(data)] == [(1, 5), (2, 1), (3, 0)]


@pytest.mark.parametrize("malformed", ["0a05abcd", "0b", "00", "1a"])
def test_parse_rejects_malformed(malformed):
    with pytest.raises(EncodingFailed):
        parse_fields(bytes.fromhex(malformed))


def test_type_mismatch():
    fields = parse_fields(bytes.fromhex("0801"))
    with pytest.raises(EncodingFailed):
        get_bytes(fields, 1)
    fields = parse_fields(bytes.fromhex("0a0101"))
    with pytest.raises(EncodingFailed):
        get_uint64(fields, 1)
    with pytest.raises(EncodingFailed):
        get_string(parse_fields(bytes.fromhex("0a01ff")), 1)
