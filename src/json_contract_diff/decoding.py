"""Strict JSON decoding for raw traffic payloads.

Payloads arrive as bytes from the (excluded) capture/storage layer.  Decoding
is strict: ``NaN``/``Infinity`` literals are rejected because they are not
JSON, and integers stay ``int`` so the schema builder can tell ``integer``
from ``number``.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, NoReturn

from json_contract_diff.errors import ParseError

__all__ = ["decode", "fingerprint"]


def _reject_constant(name: str) -> NoReturn:
    raise ParseError(f"non-JSON numeric constant {name!r}")


def decode(payload: bytes | bytearray | str) -> Any:
    """Decode one JSON payload.

    Args:
        payload: UTF-8 bytes (a leading BOM is tolerated) or text.

    Returns:
        The decoded value: dict, list, str, int, float, bool or None.

    Raises:
        ParseError: If the payload is not valid UTF-8, not valid JSON, or
            nested too deeply for the decoder.
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            text = bytes(payload).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"payload is not valid UTF-8: {exc.reason}", exc.start) from exc
    else:
        text = payload

    if not text.strip():
        raise ParseError("payload is empty")

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise ParseError(f"malformed JSON: {exc.msg}", exc.pos) from exc
    except RecursionError as exc:
        raise ParseError("JSON nesting exceeds the decoder's recursion limit") from exc


def fingerprint(payload: bytes | bytearray | str) -> str:
    """Return a 64-bit content hash of a raw payload as hex.

    Used to skip byte-identical samples; it is not a structural hash.
    """
    data = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
    return hashlib.blake2b(data, digest_size=8).hexdigest()
