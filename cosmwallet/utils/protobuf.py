"""
Canonical protobuf (proto3) wire encoding.

Only the subset needed for Cosmos SDK transactions is implemented: varint
scalars (wire type 0) and length-delimited strings, bytes and embedded
messages (wire type 2). Encoders follow the reference Go/Rust encoders so
that output is byte-identical to what a node re-encodes:

* callers emit fields in ascending field-number order;
* proto3 default scalars (0, "", b"") are omitted;
* present embedded messages are always written, even when empty;
* repeated elements are written one by one in their given order.
"""

from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..exceptions import EncodingFailed

__all__ = [
    "WIRE_VARINT",
    "WIRE_LEN",
    "encode_varint",
    "decode_varint",
    "ProtoWriter",
    "iter_fields",
    "parse_fields",
    "get_uint64",
    "get_bytes",
    "get_string",
    "get_repeated_bytes",
]

WIRE_VARINT = 0
WIRE_I64 = 1
WIRE_LEN = 2
WIRE_I32 = 5

UINT64_MAX = (1 << 64) - 1
MAX_FIELD_NUMBER = (1 << 29) - 1

FieldValue = Union[int, bytes]


def encode_varint(value: int) -> bytes:
    """
    Encode an unsigned integer as a minimal base-128 varint.

    Args:
        value: Integer in ``[0, 2**64)``

    Returns:
        Encoded varint bytes

    Raises:
        EncodingFailed: If the value is negative or wider than 64 bits
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise EncodingFailed(f"Varint value must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT64_MAX:
        raise EncodingFailed(f"Varint value {value} is outside the uint64 range")

    out = bytearray()
    while True:
        byte = value & 0x7f
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a base-128 varint.

    Args:
        data: Buffer containing the varint
        offset: Starting position

    Returns:
        Tuple of (value, new_offset)

    Raises:
        EncodingFailed: If the varint is truncated or longer than 10 bytes
    """
    result = 0
    shift = 0
    position = offset
    while True:
        if position >= len(data):
            raise EncodingFailed("Truncated varint")
        byte = data[position]
        position += 1
        result |= (byte & 0x7f) << shift
        if not byte & 0x80:
            break
        shift += 7
        if shift >= 70:
            raise EncodingFailed("Varint is too long")
    if result > UINT64_MAX:
        raise EncodingFailed("Varint overflows uint64")
    return result, position


def _tag(field_number: int, wire_type: int) -> bytes:
    if not 1 <= field_number <= MAX_FIELD_NUMBER:
        raise EncodingFailed(f"Invalid field number: {field_number}")
    return encode_varint((field_number << 3) | wire_type)


class ProtoWriter:
    """
    Accumulates one protobuf message.

    Every ``*_field`` method returns the writer, so a message encoder reads
    as a chain of calls in field-number order.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def uint64_field(self, field_number: int, value: int) -> "ProtoWriter":
        """Write a uint64/enum field, omitting the default zero."""
        if value:
            self._buffer += _tag(field_number, WIRE_VARINT)
            self._buffer += encode_varint(value)
        return self

    def bytes_field(self, field_number: int, value: bytes) -> "ProtoWriter":
        """Write a bytes field, omitting the default empty value."""
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodingFailed(f"Field {field_number} expects bytes, got {type(value).__name__}")
        if value:
            self._write_len(field_number, bytes(value))
        return self

    def string_field(self, field_number: int, value: str) -> "ProtoWriter":
        """Write a UTF-8 string field, omitting the default empty value."""
        if not isinstance(value, str):
            raise EncodingFailed(f"Field {field_number} expects str, got {type(value).__name__}")
        if value:
            try:
                encoded = value.encode("utf-8")
            except UnicodeEncodeError as e:
                raise EncodingFailed(f"Field {field_number} is not valid UTF-8: {e}") from e
            self._write_len(field_number, encoded)
        return self

    def message_field(self, field_number: int, value: Optional[bytes]) -> "ProtoWriter":
        """Write an already encoded embedded message; ``None`` means absent."""
        if value is not None:
            self._write_len(field_number, bytes(value))
        return self

    def repeated_bytes_field(self, field_number: int, values: List[bytes]) -> "ProtoWriter":
        """Write each element of a repeated bytes field, including empty ones."""
        for value in values:
            self._write_len(field_number, bytes(value))
        return self

    def repeated_message_field(self, field_number: int, values: List[bytes]) -> "ProtoWriter":
        """Write each already encoded element of a repeated message field."""
        for value in values:
            self._write_len(field_number, value)
        return self

    def _write_len(self, field_number: int, payload: bytes) -> None:
        self._buffer += _tag(field_number, WIRE_LEN)
        self._buffer += encode_varint(len(payload))
        self._buffer += payload

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


def iter_fields(data: bytes) -> Iterator[Tuple[int, int, FieldValue]]:
    """
    Iterate over the raw fields of an encoded message.

    Args:
        data: Encoded message

    Yields:
        Tuples of (field_number, wire_type, value); varints yield ``int``,
        length-delimited and fixed-width fields yield ``bytes``

    Raises:
        EncodingFailed: If the buffer is malformed
    """
    data = bytes(data)
    offset = 0
    while offset < len(data):
        key, offset = decode_varint(data, offset)
        field_number, wire_type = key >> 3, key & 0x07
        if field_number == 0:
            raise EncodingFailed("Invalid field number 0")

        if wire_type == WIRE_VARINT:
            value, offset = decode_varint(data, offset)
            yield field_number, wire_type, value
        elif wire_type == WIRE_LEN:
            length, offset = decode_varint(data, offset)
            end = offset + length
            if end > len(data):
                raise EncodingFailed(f"Truncated length-delimited field {field_number}")
            yield field_number, wire_type, data[offset:end]
            offset = end
        elif wire_type in (WIRE_I64, WIRE_I32):
            size = 8 if wire_type == WIRE_I64 else 4
            if offset + size > len(data):
                raise EncodingFailed(f"Truncated fixed-width field {field_number}")
            yield field_number, wire_type, data[offset:offset + size]
            offset += size
        else:
            raise EncodingFailed(f"Unsupported wire type {wire_type} for field {field_number}")


def parse_fields(data: bytes) -> Dict[int, List[FieldValue]]:
    """
    Group the fields of an encoded message by field number.

    Repeated occurrences are kept in wire order. Unknown fields are kept too;
    callers pick the numbers they understand.
    """
    fields: Dict[int, List[FieldValue]] = {}
    for field_number, _wire_type, value in iter_fields(data):
        fields.setdefault(field_number, []).append(value)
    return fields


def get_uint64(fields: Dict[int, List[FieldValue]], field_number: int) -> int:
    """Return the last varint value of a field, or 0 when absent."""
    values = fields.get(field_number)
    if not values:
        return 0
    value = values[-1]
    if not isinstance(value, int):
        raise EncodingFailed(f"Field {field_number} should be a varint")
    return value


def get_bytes(fields: Dict[int, List[FieldValue]], field_number: int) -> bytes:
    """Return the last length-delimited value of a field, or b"" when absent."""
    values = fields.get(field_number)
    if not values:
        return b""
    value = values[-1]
    if not isinstance(value, bytes):
        raise EncodingFailed(f"Field {field_number} should be length-delimited")
    return value


def get_string(fields: Dict[int, List[FieldValue]], field_number: int) -> str:
    """Return the last string value of a field, or "" when absent."""
    try:
        return get_bytes(fields, field_number).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingFailed(f"Field {field_number} is not valid UTF-8") from e


def get_repeated_bytes(fields: Dict[int, List[FieldValue]], field_number: int) -> List[bytes]:
    """Return every length-delimited value of a repeated field in wire order."""
    values = fields.get(field_number, [])
    for value in values:
        if not isinstance(value, bytes):
            raise EncodingFailed(f"Field {field_number} should be length-delimited")
    return list(values)
