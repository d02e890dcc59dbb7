"""Big-endian integer codec used on the wire."""

from __future__ import annotations

from .exceptions import MalformedInput


def int_to_bytes(value: int) -> bytes:
    if value < 0:
        raise ValueError("Only non-negative integers can be encoded")
    length = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(length, "big")


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big")


def int_to_hex(value: int) -> str:
    """Hex form of the big-endian encoding, as carried in JSON bodies."""

    return int_to_bytes(value).hex()


def hex_to_int(text: str, field: str = "value") -> int:
    candidate = text[2:] if text.lower().startswith("0x") else text
    if len(candidate) % 2:
        candidate = "0" + candidate
    try:
        return bytes_to_int(bytes.fromhex(candidate))
    except ValueError as exc:
        raise MalformedInput(f"{field} must be hex encoded") from exc


def check_range(value: int, bound: int, field: str = "value") -> int:
    if not 0 <= value < bound:
        raise MalformedInput(f"{field} outside of the valid range")
    return value


__all__ = ["bytes_to_int", "check_range", "hex_to_int", "int_to_bytes", "int_to_hex"]
