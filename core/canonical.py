"""
Canonical Object Hashing
========================

[CLAIM] Claim identifiers are derived from arbitrary JSON-like objects:

    id = keccak256(utf8(canonical_json(obj)))

canonical_json() reproduces json-stable-stringify (no indentation) over
JavaScript's JSON.stringify, so an object hashed here yields the same bytes32
as the same object hashed by the JavaScript tooling:
- object keys sorted by UTF-16 code unit, as Array.prototype.sort does
- "," and ":" separators, no whitespace
- non-ASCII characters written literally, lone surrogates as \\uXXXX
- numbers formatted by JavaScript's Number::toString
  (1.0 -> 1, 1e21 -> 1e+21, 1e-7 -> 1e-7, 0.00001 -> 0.00001)
- integers beyond 2**53 rounded to the nearest double, as JavaScript would
- NaN and Infinity written as null
"""

import json
import math
import re
from typing import Any

from eth_utils import keccak

MAX_SAFE_INTEGER = 2 ** 53

_SURROGATE_PAIR = re.compile("[\ud800-\udbff][\udc00-\udfff]")
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def _js_number(value: float) -> str:
    """Number::toString for a finite double."""
    if value == 0:
        return "0"
    if value < 0:
        return "-" + _js_number(-value)

    # repr() gives the shortest round-tripping digits, the same ones JS picks
    mantissa, _, exponent = repr(value).partition("e")
    int_part, _, frac = mantissa.partition(".")
    all_digits = int_part + frac
    leading = len(all_digits) - len(all_digits.lstrip("0"))
    digits = all_digits.strip("0")
    k = len(digits)
    n = len(int_part) + int(exponent or 0) - leading

    if k <= n <= 21:
        return digits + "0" * (n - k)
    if 0 < n <= 21:
        return digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return "0." + "0" * -n + digits

    e = n - 1
    sign = "+" if e >= 0 else "-"
    head = digits[0] if k == 1 else digits[0] + "." + digits[1:]
    return f"{head}e{sign}{abs(e)}"


def _number(value: Any) -> str:
    if isinstance(value, int):
        if abs(value) < MAX_SAFE_INTEGER:
            return str(value)
        try:
            value = float(value)
        except OverflowError:
            return "null"
    if not math.isfinite(value):
        return "null"
    return _js_number(value)


def _string(value: str) -> str:
    value = _SURROGATE_PAIR.sub(
        lambda m: chr(0x10000 + ((ord(m.group()[0]) - 0xD800) << 10) + (ord(m.group()[1]) - 0xDC00)),
        value,
    )
    text = json.dumps(value, ensure_ascii=False)
    return _LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def _utf16_key(key: str) -> bytes:
    return key.encode("utf-16-be", "surrogatepass")


def _serialize(value: Any) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return _string(value)
    if isinstance(value, (int, float)):
        return _number(value)
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise TypeError(f"Object keys must be strings, got {type(key).__name__}")
        items = sorted(value.items(), key=lambda kv: _utf16_key(kv[0]))
        return "{" + ",".join(f"{_string(k)}:{_serialize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_serialize(item) for item in value) + "]"
    raise TypeError(f"Unsupported value type for canonical JSON: {type(value).__name__}")


def canonical_json(obj: Any) -> str:
    """Serialize obj deterministically (sorted keys, no whitespace)."""
    return _serialize(obj)


def object_hash_bytes(obj: Any) -> bytes:
    """32-byte Keccak-256 digest of the canonical form."""
    return keccak(canonical_json(obj).encode("utf-8"))


def object_hash(obj: Any) -> str:
    """
    Claim identifier for obj.

    Returns:
        0x-prefixed, 64 hex digits (bytes32)
    """
    return "0x" + object_hash_bytes(obj).hex()


def object_hash_field(obj: Any) -> int:
    """Claim identifier as an unsigned integer (Semaphore scope/message)."""
    return int.from_bytes(object_hash_bytes(obj), byteorder="big")
