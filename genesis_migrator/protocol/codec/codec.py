# MIT License
# Copyright (c) 2025 Hashborn

"""
Wire Codec

Encodes and decodes plain dicts against JSON-schema-like definitions
(see schemas.py). Every property carries a fieldNumber; scalar properties
carry a dataType. Decoding is strict: fields must appear in fieldNumber
order, scalars must be present, and no bytes may be left over.

Wire format:
- key = (fieldNumber << 3) | wireType
- varint (wireType 0): uint32, uint64, boolean
- length-delimited (wireType 2): bytes, string, nested objects, packed
  arrays of varints
- arrays of length-delimited items repeat the key once per item; empty
  arrays are omitted
"""

from typing import Any, Dict, List, Tuple
from ..types.common import DecodeError, ValidationError

WIRE_TYPE_VARINT = 0
WIRE_TYPE_LENGTH_DELIMITED = 2

MAX_VARINT_BYTES = 10

VARINT_MAX = {
    "uint32": 2**32 - 1,
    "uint64": 2**64 - 1,
    "boolean": 1,
}

LENGTH_DELIMITED_TYPES = {"bytes", "string"}


def _sorted_properties(schema: Dict[str, Any]) -> List[Tuple[str, Dict[str, Any]]]:
    return sorted(schema["properties"].items(), key=lambda item: item[1]["fieldNumber"])


def _is_varint(prop: Dict[str, Any]) -> bool:
    return prop.get("dataType") in VARINT_MAX


def write_varint(value: int) -> bytes:
    if value < 0:
        raise ValidationError(f"Cannot encode negative value {value} as varint")

    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def read_varint(data: bytes, offset: int, end: int) -> Tuple[int, int]:
    """Reads one varint starting at offset. Returns (value, new_offset)."""
    value = 0
    shift = 0
    for i in range(MAX_VARINT_BYTES):
        if offset + i >= end:
            raise DecodeError("Truncated varint")
        byte = data[offset + i]
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset + i + 1
        shift += 7
    raise DecodeError("Varint exceeds 10 bytes")


def _key(field_number: int, wire_type: int) -> bytes:
    return write_varint((field_number << 3) | wire_type)


def _read_key(data: bytes, offset: int, end: int) -> Tuple[int, int, int]:
    key, offset = read_varint(data, offset, end)
    return key >> 3, key & 0x07, offset


# ═══════════════════════════════════════════════════════════════════
# ENCODE
# ═══════════════════════════════════════════════════════════════════

def _encode_varint_value(data_type: str, value: Any) -> bytes:
    if data_type == "boolean":
        return write_varint(1 if value else 0)

    value = int(value)
    if value > VARINT_MAX[data_type]:
        raise ValidationError(f"Value {value} out of range for {data_type}")
    return write_varint(value)


def _encode_raw(data_type: str, value: Any) -> bytes:
    if data_type == "string":
        return value.encode("utf-8")
    return bytes(value)


def _encode_length_delimited(prop: Dict[str, Any], value: Any) -> bytes:
    if prop.get("type") == "object":
        payload = _encode_object(prop, value)
    else:
        payload = _encode_raw(prop["dataType"], value)
    return write_varint(len(payload)) + payload


def _encode_object(schema: Dict[str, Any], obj: Dict[str, Any]) -> bytes:
    out = bytearray()
    for name, prop in _sorted_properties(schema):
        if name not in obj:
            raise ValidationError(f"Missing property '{name}' for schema {schema.get('$id', '<nested>')}")

        value = obj[name]
        field_number = prop["fieldNumber"]

        if prop.get("type") == "array":
            items = prop["items"]
            if not value:
                continue
            if _is_varint(items):
                payload = b"".join(_encode_varint_value(items["dataType"], v) for v in value)
                out += _key(field_number, WIRE_TYPE_LENGTH_DELIMITED)
                out += write_varint(len(payload)) + payload
            else:
                for item in value:
                    out += _key(field_number, WIRE_TYPE_LENGTH_DELIMITED)
                    out += _encode_length_delimited(items, item)
        elif _is_varint(prop):
            out += _key(field_number, WIRE_TYPE_VARINT)
            out += _encode_varint_value(prop["dataType"], value)
        else:
            out += _key(field_number, WIRE_TYPE_LENGTH_DELIMITED)
            out += _encode_length_delimited(prop, value)

    return bytes(out)


def encode(schema: Dict[str, Any], obj: Dict[str, Any]) -> bytes:
    """Encodes obj against schema."""
    return _encode_object(schema, obj)


# ═══════════════════════════════════════════════════════════════════
# DECODE
# ═══════════════════════════════════════════════════════════════════

def _decode_varint_value(data_type: str, data: bytes, offset: int, end: int) -> Tuple[Any, int]:
    value, offset = read_varint(data, offset, end)
    if value > VARINT_MAX[data_type]:
        raise DecodeError(f"Value {value} out of range for {data_type}")
    if data_type == "boolean":
        return value == 1, offset
    return value, offset


def _decode_raw(data_type: str, payload: bytes) -> Any:
    if data_type == "string":
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid utf-8 string: {e}")
    return payload


def _read_length(data: bytes, offset: int, end: int) -> Tuple[int, int]:
    length, offset = read_varint(data, offset, end)
    if offset + length > end:
        raise DecodeError(f"Length {length} exceeds remaining {end - offset} bytes")
    return offset + length, offset


def _decode_length_delimited(prop: Dict[str, Any], data: bytes, offset: int, end: int) -> Tuple[Any, int]:
    sub_end, offset = _read_length(data, offset, end)
    if prop.get("type") == "object":
        return _decode_object(prop, data, offset, sub_end), sub_end
    return _decode_raw(prop["dataType"], bytes(data[offset:sub_end])), sub_end


def _decode_array(prop: Dict[str, Any], data: bytes, offset: int, end: int) -> Tuple[List[Any], int]:
    field_number = prop["fieldNumber"]
    items = prop["items"]
    result: List[Any] = []

    while offset < end:
        field, wire_type, next_offset = _read_key(data, offset, end)
        if field != field_number:
            break
        if wire_type != WIRE_TYPE_LENGTH_DELIMITED:
            raise DecodeError(f"Invalid wire type {wire_type} for array field {field_number}")

        if _is_varint(items):
            sub_end, cursor = _read_length(data, next_offset, end)
            while cursor < sub_end:
                value, cursor = _decode_varint_value(items["dataType"], data, cursor, sub_end)
                result.append(value)
            offset = sub_end
        else:
            value, offset = _decode_length_delimited(items, data, next_offset, end)
            result.append(value)

    return result, offset


def _decode_object(schema: Dict[str, Any], data: bytes, offset: int, end: int) -> Dict[str, Any]:
    result: Dict[str, Any] = {}

    for name, prop in _sorted_properties(schema):
        if prop.get("type") == "array":
            result[name], offset = _decode_array(prop, data, offset, end)
            continue

        if offset >= end:
            raise DecodeError(f"Missing field '{name}'")

        field, wire_type, offset = _read_key(data, offset, end)
        if field != prop["fieldNumber"]:
            raise DecodeError(f"Invalid field number {field}, expected {prop['fieldNumber']} ('{name}')")

        expected_wire_type = WIRE_TYPE_VARINT if _is_varint(prop) else WIRE_TYPE_LENGTH_DELIMITED
        if wire_type != expected_wire_type:
            raise DecodeError(f"Invalid wire type {wire_type} for field '{name}'")

        if _is_varint(prop):
            result[name], offset = _decode_varint_value(prop["dataType"], data, offset, end)
        else:
            result[name], offset = _decode_length_delimited(prop, data, offset, end)

    if offset != end:
        raise DecodeError(f"Unexpected {end - offset} trailing bytes")

    return result


def decode(schema: Dict[str, Any], data: bytes) -> Dict[str, Any]:
    """
    Decodes data against schema.

    Raises:
        DecodeError: If data does not match the schema exactly
    """
    data = bytes(data)
    return _decode_object(schema, data, 0, len(data))
