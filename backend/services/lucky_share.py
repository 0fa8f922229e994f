"""Compact share links for a roster's lucky set.

The payload is a little-bit-endian bitset: bit ``n % 8`` of byte ``n // 8`` is
set when dex number ``n + 1`` is lucky. It travels as unpadded base64url in
the ``dex`` query value, optionally next to ``dexsum`` (FNV-1a/32 of the
payload, 8 lowercase hex digits) and ``dexcount`` (number of lucky entries).
The checksum only detects accidental corruption; anyone can recompute it.
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from models.creature import Creature

__all__ = [
    "MAX_DEX_NUMBER",
    "SHARE_CHECKSUM_MISMATCH",
    "SHARE_COUNT_MISMATCH",
    "SHARE_INVALID",
    "SHARE_VALID",
    "ShareDecodeResult",
    "build_share_query",
    "checksum_dex_payload",
    "collect_lucky_dex_numbers",
    "decode_lucky_dex_bitset",
    "encode_lucky_dex_bitset",
    "verify_share_query",
]

_LOG = logging.getLogger(__name__)

MAX_DEX_NUMBER = 1025

SHARE_VALID = "valid"
SHARE_INVALID = "invalid"
SHARE_CHECKSUM_MISMATCH = "checksum-mismatch"
SHARE_COUNT_MISMATCH = "count-mismatch"

_FNV_OFFSET_BASIS = 0x811C9DC5
_FNV_PRIME = 0x01000193


def _byte_length(max_dex: int) -> int:
    return math.ceil(max_dex / 8)


def _to_base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _from_base64url(text: str) -> Optional[bytes]:
    if not text:
        return None
    body = text.strip().rstrip("=")
    standard = body.replace("-", "+").replace("_", "/")
    padded = standard + "=" * (-len(standard) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError):
        return None


def collect_lucky_dex_numbers(creatures: Iterable[Creature], max_dex: int = MAX_DEX_NUMBER) -> set[int]:
    return {
        creature.dex_number
        for creature in creatures
        if creature.is_lucky and 1 <= creature.dex_number <= max_dex
    }


def encode_lucky_dex_bitset(creatures: Iterable[Creature], max_dex: int = MAX_DEX_NUMBER) -> str:
    """Pack the lucky flags of ``creatures`` into a base64url bitset."""
    packed = bytearray(_byte_length(max_dex))
    for dex_number in collect_lucky_dex_numbers(creatures, max_dex):
        idx = dex_number - 1
        packed[idx // 8] |= 1 << (idx % 8)
    return _to_base64url(bytes(packed))


def decode_lucky_dex_bitset(encoded: str, max_dex: int = MAX_DEX_NUMBER) -> Optional[set[int]]:
    """Return the lucky dex numbers in ``encoded``, or None when it is unusable.

    Padded and unpadded input are both accepted. Payloads shorter than
    ``ceil(max_dex / 8)`` bytes are rejected; extra trailing bytes are ignored.
    """
    packed = _from_base64url(encoded or "")
    if packed is None:
        _LOG.debug("Rejected share payload: not base64url.")
        return None
    if len(packed) < _byte_length(max_dex):
        _LOG.debug("Rejected share payload: %s bytes, need %s.", len(packed), _byte_length(max_dex))
        return None
    lucky: set[int] = set()
    for dex_number in range(1, max_dex + 1):
        idx = dex_number - 1
        if packed[idx // 8] & (1 << (idx % 8)):
            lucky.add(dex_number)
    return lucky


def checksum_dex_payload(encoded: str) -> str:
    """FNV-1a 32-bit hash of the payload characters as 8 hex digits."""
    value = _FNV_OFFSET_BASIS
    for char in encoded:
        value ^= ord(char)
        value = (value * _FNV_PRIME) & 0xFFFFFFFF
    return f"{value:08x}"


def build_share_query(creatures: Iterable[Creature], max_dex: int = MAX_DEX_NUMBER) -> Dict[str, str]:
    roster = list(creatures)
    payload = encode_lucky_dex_bitset(roster, max_dex)
    return {
        "dex": payload,
        "dexsum": checksum_dex_payload(payload),
        "dexcount": str(len(collect_lucky_dex_numbers(roster, max_dex))),
    }


@dataclass(frozen=True, slots=True)
class ShareDecodeResult:
    status: str
    lucky_dex: frozenset[int] = field(default_factory=frozenset)

    @property
    def ok(self) -> bool:
        return self.status == SHARE_VALID


def _parse_count(raw: Any) -> Optional[int]:
    text = str(raw).strip() if raw is not None else ""
    if not (text.isascii() and text.isdecimal()):
        return None
    return int(text)


def verify_share_query(
    dex: str | None,
    dexsum: str | None = None,
    dexcount: str | None = None,
    max_dex: int = MAX_DEX_NUMBER,
) -> ShareDecodeResult:
    """Decode share-link query values without raising.

    The checksum is compared before decoding so a truncated link reports as
    corrupted rather than merely invalid. The count check runs after a
    successful decode. Missing checksum or count values skip their check.
    """
    payload = str(dex or "").strip()
    expected_sum = str(dexsum or "").strip().lower()
    if expected_sum and checksum_dex_payload(payload) != expected_sum:
        _LOG.info("Share link checksum mismatch.")
        return ShareDecodeResult(status=SHARE_CHECKSUM_MISMATCH)
    lucky = decode_lucky_dex_bitset(payload, max_dex)
    if lucky is None:
        return ShareDecodeResult(status=SHARE_INVALID)
    expected_count = _parse_count(dexcount)
    if expected_count is not None and expected_count != len(lucky):
        _LOG.info("Share link lucky count mismatch: expected %s, decoded %s.", expected_count, len(lucky))
        return ShareDecodeResult(status=SHARE_COUNT_MISMATCH)
    return ShareDecodeResult(status=SHARE_VALID, lucky_dex=frozenset(lucky))
