from __future__ import annotations

import base64


def to_bytes(value: str | bytes) -> bytes:
    """Coerce text or bytes into bytes, encoding text as UTF-8.

    Example:
        ```python
        raw = to_bytes("print('hi')")
        ```
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    raise TypeError(f"Expected str or bytes, got {type(value).__name__}")


def encode_field(value: str | bytes) -> str:
    """Base64-encode a source/stdin field so it survives JSON transport.

    Example:
        ```python
        encoded = encode_field(b"\\x00\\xff")
        ```
    """
    return base64.b64encode(to_bytes(value)).decode("ascii")


def decode_field(value: str | None) -> bytes | None:
    """Decode a base64 response field, keeping ``None`` for absent fields.

    The service wraps long base64 payloads with newlines; non-alphabet
    characters are discarded before decoding.

    Example:
        ```python
        stdout = decode_field("aGVsbG8K")
        ```
    """
    if value is None:
        return None
    return base64.b64decode(value)


def decode_text(value: bytes | None) -> str:
    """Render a decoded output field as text for display.

    Example:
        ```python
        text = decode_text(result.stdout)
        ```
    """
    if value is None:
        return ""
    return value.decode("utf-8", errors="replace")
