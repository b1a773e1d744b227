"""Vectorised search for the final IPL3 word that yields a target checksum."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .cpu import MAGIC, STATE_WORDS

LOCAL_WORKGROUP_SIZE = 256
U32_MAX = 0xFFFFFFFF

_CHUNK = 1 << 18
_M = np.uint64(0xFFFFFFFF)
_1 = np.uint64(1)
_2 = np.uint64(2)
_5 = np.uint64(5)
_27 = np.uint64(27)
_31 = np.uint64(31)
_32 = np.uint64(32)
_MAGIC = np.uint64(MAGIC)


@dataclass(frozen=True)
class Found:
    """A matching X value was found."""

    x: int


@dataclass(frozen=True)
class Continue:
    """No match in this round; the next round starts ``x_step`` further."""

    x_step: int


@dataclass(frozen=True)
class End:
    """The whole X space has been searched without a match."""


def _rol(value, shift):
    shift = shift & _31
    return ((value << shift) | (value >> (_32 - shift))) & _M


def _ror(value, shift):
    shift = shift & _31
    return ((value >> shift) | (value << (_32 - shift))) & _M


def _sum(a0, a1, a2: int):
    factor = np.where(a1 == 0, np.uint64(a2), a1)
    product = a0 * factor
    diff = ((product >> _32) - (product & _M)) & _M
    return np.where(diff == 0, a0, diff)


def _finalize(state, shape):
    cols = [np.broadcast_to(value, shape) for value in state]
    b0 = b1 = b2 = b3 = cols[0]

    for i, d in enumerate(cols):
        b0 = (b0 + _ror(d, d & _31)) & _M
        b1 = np.where(d < b0, (b1 + d) & _M, _sum(b1, d, i))
        b2 = np.where(((d & _2) >> _1) == (d & _1), (b2 + d) & _M, _sum(b2, d, i))
        b3 = np.where((d & _1) == _1, b3 ^ d, _sum(b3, d, i))

    final_sum = _sum(b0, b1, 16)
    return final_sum & np.uint64(0xFFFF), b3 ^ b2


def _checksums(x, y_offset: int, state: Sequence[int]):
    """Finish the checksum for every candidate X; return (high 16 bits, low 32 bits)."""
    y = np.uint64(y_offset)
    s = [np.uint64(value) for value in state]

    # Rest of round 1007, whose next word is X.
    s[10] = _sum(s[10], x, 1007)
    s[11] = _sum(s[11], x, 1007)
    s[13] = (s[13] + _ror(x, x & _31)) & _M
    s[14] = _sum(s[14], _ror(x, y & _31), 1007)
    s[15] = _sum(s[15], _rol(x, y >> _27), 1007)

    # Round 1008, where X is the data word and Y the previous one.
    s[0] = (s[0] + _sum(_M, x, 1008)) & _M
    s[1] = _sum(s[1], x, 1008)
    s[2] = s[2] ^ x
    s[3] = (s[3] + _sum((x + _5) & _M, _MAGIC, 1008)) & _M
    s[4] = (s[4] + _ror(x, y & _31)) & _M
    s[5] = (s[5] + _rol(x, y >> _27)) & _M
    s[6] = np.where(
        x < s[6],
        ((s[3] + s[6]) & _M) ^ ((x + np.uint64(1008)) & _M),
        ((s[4] + x) & _M) ^ s[6],
    )
    s[7] = _sum(s[7], _rol(x, y & _31), 1008)
    s[8] = _sum(s[8], _ror(x, y >> _27), 1008)
    s[9] = np.where(y < x, _sum(s[9], x, 1008), (s[9] + x) & _M)

    return _finalize(s, x.shape)


class XSearcher:
    """Searches the last IPL3 word in blocks sized by a workgroup layout."""

    def __init__(self, workgroups: tuple[int, int, int]) -> None:
        wx, wy, wz = workgroups
        self.workgroups = (wx, wy, wz)
        self.x_step = wx * wy * wz * LOCAL_WORKGROUP_SIZE
        if self.x_step <= 0:
            raise ValueError(f"workgroup counts must be positive, got {workgroups}")

    def x_round(
        self,
        target_checksum: int,
        y_offset: int,
        x_offset: int,
        state: Sequence[int],
    ) -> Found | Continue | End:
        """Search one block of X values starting at ``x_offset``."""
        if len(state) != STATE_WORDS:
            raise ValueError(f"state must hold {STATE_WORDS} words, got {len(state)}")
        if not 0 <= x_offset <= U32_MAX:
            raise ValueError(f"X offset out of range: {x_offset}")

        target_hi = np.uint64((target_checksum >> 32) & 0xFFFF)
        target_lo = np.uint64(target_checksum & 0xFFFFFFFF)
        stop = min(x_offset + self.x_step, U32_MAX + 1)

        for start in range(x_offset, stop, _CHUNK):
            x = np.arange(start, min(start + _CHUNK, stop), dtype=np.uint64)
            hi, lo = _checksums(x, y_offset, state)
            hits = np.flatnonzero((hi == target_hi) & (lo == target_lo))
            if hits.size:
                return Found(int(x[hits[0]]))

        if x_offset + self.x_step > U32_MAX:
            return End()
        return Continue(self.x_step)