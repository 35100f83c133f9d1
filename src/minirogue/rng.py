"""
Seeded randomness for floor generation.

One master seed covers a whole run. Every floor gets its own ``random.Random``
derived from ``(master seed, floor number, floor type)``, so regenerating a
floor never depends on which floors were generated before it.
"""
from __future__ import annotations

import hashlib
import logging
import random
import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes, None]

FLOOR_LAYOUT_DOMAIN = "floor_layout"


def seed_bytes(seed: Seed) -> bytes:
    """Canonical byte form of a master seed. ``None`` draws 16 random bytes."""
    if seed is None:
        return secrets.token_bytes(16)
    if isinstance(seed, bytes):
        return seed
    if isinstance(seed, bool):
        raise TypeError("Master seed must be int, str or bytes, not bool")
    if isinstance(seed, int):
        if seed < 0:
            raise ValueError("Master seed must be non-negative")
        return seed.to_bytes((seed.bit_length() + 7) // 8 or 1, "big")
    if isinstance(seed, str):
        return seed.strip().encode("utf-8")
    raise TypeError(f"Unsupported seed type: {type(seed).__name__}")


@dataclass(frozen=True)
class RNGManager:
    """Hands out reproducible per-floor RNGs.

    Usage:
        rngm = RNGManager(1234)
        rng = rngm.floor_rng(3, FloorType.BOSS)
    """

    master_seed: Seed = None
    _master: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_master", seed_bytes(self.master_seed))
        if self.master_seed is None:
            logger.info("No master seed given; using random seed %s", self._master.hex())

    def derive_seed(self, domain: str, *identifiers: object) -> int:
        """64-bit seed from BLAKE2b over the master seed, domain and identifiers."""
        h = hashlib.blake2b(digest_size=8, key=self._master[:64])
        h.update(domain.encode("utf-8"))
        for ident in identifiers:
            h.update(b"\x1f")
            h.update(str(ident).encode("utf-8"))
        return int.from_bytes(h.digest(), "big")

    def floor_rng(self, floor: int, floor_type: Union[Enum, str]) -> random.Random:
        type_name = floor_type.value if isinstance(floor_type, Enum) else str(floor_type)
        seed = self.derive_seed(FLOOR_LAYOUT_DOMAIN, floor, type_name)
        logger.debug("Floor %d (%s) seeded with %d", floor, type_name, seed)
        return random.Random(seed)

    def get_master_seed_hex(self) -> str:
        return self._master.hex()
